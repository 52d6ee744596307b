"""
Read-only queries answered by the Alliance module.

Each variant is bound to exactly one response model through `response_type`, and
`QUERY_RESPONSES` exposes the same binding as a tag -> model table for dispatch
and schema generation.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional, Type, Union

from pydantic import BaseModel, Field

from alliance_bindings.contracts.base import TaggedVariant, parse_variant, variant_table
from alliance_bindings.contracts.pagination import Pagination
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
from alliance_bindings.contracts.types import Addr, Denom


class AllianceQueryVariant(TaggedVariant):
    response_type: ClassVar[Type[BaseModel]]


class QueryAlliance(AllianceQueryVariant):
    tag: ClassVar[str] = "alliance"
    response_type: ClassVar[Type[BaseModel]] = AllianceResponse

    denom: Denom


class QueryAlliances(AllianceQueryVariant):
    tag: ClassVar[str] = "alliances"
    response_type: ClassVar[Type[BaseModel]] = AlliancesResponse

    pagination: Optional[Pagination] = Field(default=None)


class QueryAlliancesDelegations(AllianceQueryVariant):
    tag: ClassVar[str] = "alliances_delegations"
    response_type: ClassVar[Type[BaseModel]] = AlliancesDelegationsResponse

    pagination: Optional[Pagination] = Field(default=None)


class QueryAlliancesDelegationByValidator(AllianceQueryVariant):
    tag: ClassVar[str] = "alliances_delegation_by_validator"
    response_type: ClassVar[Type[BaseModel]] = AlliancesDelegationsResponse

    delegator_addr: Addr
    validator_addr: Addr
    pagination: Optional[Pagination] = Field(default=None)


class QueryDelegation(AllianceQueryVariant):
    tag: ClassVar[str] = "delegation"
    response_type: ClassVar[Type[BaseModel]] = SingleDelegationResponse

    delegator_addr: Addr
    validator_addr: Addr
    denom: Denom


class QueryDelegationRewards(AllianceQueryVariant):
    tag: ClassVar[str] = "delegation_rewards"
    response_type: ClassVar[Type[BaseModel]] = RewardsResponse

    delegator_addr: Addr
    validator_addr: Addr
    denom: Denom


class QueryParams(AllianceQueryVariant):
    tag: ClassVar[str] = "params"
    response_type: ClassVar[Type[BaseModel]] = ParamsResponse


class QueryValidator(AllianceQueryVariant):
    tag: ClassVar[str] = "validator"
    response_type: ClassVar[Type[BaseModel]] = ValidatorResponse

    validator_addr: Addr


class QueryValidators(AllianceQueryVariant):
    tag: ClassVar[str] = "validators"
    response_type: ClassVar[Type[BaseModel]] = AllValidatorsResponse

    pagination: Optional[Pagination] = Field(default=None)


AllianceQuery = Union[
    QueryAlliance,
    QueryAlliances,
    QueryAlliancesDelegations,
    QueryAlliancesDelegationByValidator,
    QueryDelegation,
    QueryDelegationRewards,
    QueryParams,
    QueryValidator,
    QueryValidators,
]

QUERY_VARIANTS = variant_table(
    QueryAlliance,
    QueryAlliances,
    QueryAlliancesDelegations,
    QueryAlliancesDelegationByValidator,
    QueryDelegation,
    QueryDelegationRewards,
    QueryParams,
    QueryValidator,
    QueryValidators,
)

QUERY_RESPONSES: Dict[str, Type[BaseModel]] = {tag: cls.response_type for tag, cls in QUERY_VARIANTS.items()}


def parse_alliance_query(data: Any) -> AllianceQuery:
    """Decode a wire payload such as {"alliance": {"denom": "uluna"}} into its variant."""

    return parse_variant(QUERY_VARIANTS, data, kind="alliance query")


def response_type_for(query: AllianceQuery) -> Type[BaseModel]:
    return QUERY_RESPONSES[query.tag]
