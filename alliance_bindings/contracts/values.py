from __future__ import annotations

from typing import Optional, Tuple

from pydantic import Field

from alliance_bindings.contracts.base import ContractFragment, ContractRequest
from alliance_bindings.contracts.types import Addr, Decimal256, Denom, Rfc3339Nanos, Uint64, Uint128


class Coin(ContractRequest):
    """
    A transferable token amount (integer base units).

    Used both in outgoing messages and in host responses, so it refuses unknown fields.
    """

    denom: Denom
    amount: Uint128


class DecCoin(ContractFragment):
    """
    A fractional token amount (validator share totals).
    """

    # The host omits the denom when the containing query already implies it.
    denom: Optional[str] = Field(default=None)
    amount: Decimal256


class WeightRange(ContractFragment):
    min: Decimal256
    max: Decimal256


class AllianceAsset(ContractFragment):
    """
    A registered alliance asset.

    Timestamps are int nanoseconds since the Unix epoch (RFC3339 on the wire).
    """

    denom: Denom
    reward_weight: Decimal256
    consensus_weight: Decimal256
    take_rate: Decimal256
    total_tokens: Decimal256
    total_validator_shares: Decimal256
    reward_start_time: Rfc3339Nanos
    reward_change_rate: Decimal256
    reward_change_interval: Uint64
    last_reward_change_time: Rfc3339Nanos
    reward_weight_range: WeightRange
    # Absent on assets registered before the host migration that introduced it.
    is_initialized: Optional[bool] = Field(default=None)


class AllianceParams(ContractFragment):
    reward_delay_time: Uint64
    take_rate_claim_interval: Uint64
    last_take_rate_claim_time: Rfc3339Nanos


class Reward(ContractFragment):
    denom: Optional[str] = Field(default=None)
    index: Decimal256


class Delegation(ContractFragment):
    """
    One alliance delegation.

    Address/denom fields are absent when the query path already carries them.
    """

    delegator_address: Optional[Addr] = Field(default=None)
    validator_address: Optional[Addr] = Field(default=None)
    denom: Optional[str] = Field(default=None)
    shares: Decimal256
    # Sparse on the host side: entries may be null placeholders.
    reward_history: Optional[Tuple[Optional[Reward], ...]] = Field(default=None)
    last_reward_claim_height: Optional[Uint64] = Field(default=None)


class DelegationResponse(ContractFragment):
    delegation: Delegation
    balance: Coin
