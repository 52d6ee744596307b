from __future__ import annotations

from typing import Optional, Tuple

from pydantic import Field

from alliance_bindings.contracts.base import ContractFragment
from alliance_bindings.contracts.pagination import PaginationResponse
from alliance_bindings.contracts.types import Addr
from alliance_bindings.contracts.values import (
    AllianceAsset,
    AllianceParams,
    Coin,
    DecCoin,
    DelegationResponse,
)


class AllianceResponse(ContractFragment):
    alliance: AllianceAsset


class AlliancesResponse(ContractFragment):
    alliances: Tuple[AllianceAsset, ...]
    pagination: Optional[PaginationResponse] = Field(default=None)


class AlliancesDelegationsResponse(ContractFragment):
    """
    Answer to both `alliances_delegations` and `alliances_delegation_by_validator`.
    """

    # The host sends null instead of [] when nothing matches.
    delegations: Optional[Tuple[DelegationResponse, ...]] = Field(default=None)
    pagination: Optional[PaginationResponse] = Field(default=None)


class SingleDelegationResponse(ContractFragment):
    delegation: DelegationResponse


class RewardsResponse(ContractFragment):
    rewards: Tuple[Coin, ...]


class ParamsResponse(ContractFragment):
    params: AllianceParams


class ValidatorResponse(ContractFragment):
    validator_addr: Addr
    total_delegation_shares: Tuple[DecCoin, ...]
    validator_shares: Tuple[DecCoin, ...]
    total_staked: Tuple[DecCoin, ...]


class AllValidatorsResponse(ContractFragment):
    validators: Tuple[ValidatorResponse, ...]
    pagination: Optional[PaginationResponse] = Field(default=None)
