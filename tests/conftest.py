from __future__ import annotations

from typing import Any, Dict

import pytest

from alliance_bindings.contracts.values import (
    AllianceAsset,
    Coin,
    DecCoin,
    Delegation,
    DelegationResponse,
    Reward,
)
from alliance_bindings.contracts.responses import ValidatorResponse
from alliance_bindings.querier import AllianceQuerier
from alliance_bindings.testing import MockAllianceChain

REWARD_START = "2023-06-06T18:17:29.956787974Z"
REWARD_START_NANOS = 1686075449956787974

DELEGATOR = "terra1delegator"
VALIDATOR = "terravaloper1validator"


def asset_wire(denom: str = "ibc/ABC") -> Dict[str, Any]:
    """Alliance asset as the host encodes it."""
    return {
        "denom": denom,
        "reward_weight": "0.5",
        "consensus_weight": "1",
        "take_rate": "0.005",
        "total_tokens": "1000000",
        "total_validator_shares": "1000000.25",
        "reward_start_time": REWARD_START,
        "reward_change_rate": "1",
        "reward_change_interval": 0,
        "last_reward_change_time": REWARD_START,
        "reward_weight_range": {"min": "0.1", "max": "1"},
        "is_initialized": True,
    }


def make_asset(denom: str = "ibc/ABC") -> AllianceAsset:
    return AllianceAsset.model_validate(asset_wire(denom))


def make_delegation(
    delegator: str = DELEGATOR,
    validator: str = VALIDATOR,
    denom: str = "ibc/ABC",
    shares: str = "100",
) -> DelegationResponse:
    return DelegationResponse(
        delegation=Delegation(
            delegator_address=delegator,
            validator_address=validator,
            denom=denom,
            shares=shares,
            reward_history=(Reward(denom="uluna", index="0.1"), None),
            last_reward_claim_height=42,
        ),
        balance=Coin(denom=denom, amount=100),
    )


def make_validator(addr: str = VALIDATOR) -> ValidatorResponse:
    return ValidatorResponse(
        validator_addr=addr,
        total_delegation_shares=(DecCoin(denom="ibc/ABC", amount="10.5"),),
        validator_shares=(DecCoin(amount="10.5"),),
        total_staked=(),
    )


@pytest.fixture
def chain() -> MockAllianceChain:
    c = MockAllianceChain()
    c.add_alliance(make_asset())
    c.add_validator(make_validator())
    c.add_delegation(make_delegation())
    c.set_rewards(DELEGATOR, VALIDATOR, "ibc/ABC", [Coin(denom="uluna", amount=1234)])
    return c


@pytest.fixture
def querier(chain: MockAllianceChain) -> AllianceQuerier:
    return AllianceQuerier(chain)
