"""
Alliance module wire contracts.

Immutable (frozen) schemas for the messages, queries and responses exchanged
with the host Alliance module. Services OWN behavior; contracts OWN shapes.
"""

from __future__ import annotations

from alliance_bindings.contracts.envelope import CustomMsg, decode_query_result
from alliance_bindings.contracts.msg import (
    MSG_VARIANTS,
    AllianceMsg,
    MsgClaimDelegationRewards,
    MsgDelegate,
    MsgRedelegate,
    MsgUndelegate,
    parse_alliance_msg,
)
from alliance_bindings.contracts.pagination import Pagination, PaginationResponse, collect_pages
from alliance_bindings.contracts.query import (
    QUERY_RESPONSES,
    QUERY_VARIANTS,
    AllianceQuery,
    QueryAlliance,
    QueryAlliances,
    QueryAlliancesDelegationByValidator,
    QueryAlliancesDelegations,
    QueryDelegation,
    QueryDelegationRewards,
    QueryParams,
    QueryValidator,
    QueryValidators,
    parse_alliance_query,
)
from alliance_bindings.contracts.responses import (
    AllianceResponse,
    AlliancesDelegationsResponse,
    AlliancesResponse,
    AllValidatorsResponse,
    ParamsResponse,
    RewardsResponse,
    SingleDelegationResponse,
    ValidatorResponse,
)
from alliance_bindings.contracts.values import (
    AllianceAsset,
    AllianceParams,
    Coin,
    DecCoin,
    Delegation,
    DelegationResponse,
    Reward,
    WeightRange,
)

__all__ = [
    "AllianceAsset",
    "AllianceMsg",
    "AllianceParams",
    "AllianceQuery",
    "AllianceResponse",
    "AlliancesDelegationsResponse",
    "AlliancesResponse",
    "AllValidatorsResponse",
    "Coin",
    "CustomMsg",
    "DecCoin",
    "Delegation",
    "DelegationResponse",
    "MSG_VARIANTS",
    "MsgClaimDelegationRewards",
    "MsgDelegate",
    "MsgRedelegate",
    "MsgUndelegate",
    "Pagination",
    "PaginationResponse",
    "ParamsResponse",
    "QUERY_RESPONSES",
    "QUERY_VARIANTS",
    "QueryAlliance",
    "QueryAlliances",
    "QueryAlliancesDelegationByValidator",
    "QueryAlliancesDelegations",
    "QueryDelegation",
    "QueryDelegationRewards",
    "QueryParams",
    "QueryValidator",
    "QueryValidators",
    "Reward",
    "RewardsResponse",
    "SingleDelegationResponse",
    "ValidatorResponse",
    "WeightRange",
    "collect_pages",
    "decode_query_result",
    "parse_alliance_msg",
    "parse_alliance_query",
]
