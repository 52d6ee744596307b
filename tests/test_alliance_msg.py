from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from alliance_bindings.builder import AllianceMsgBuilder
from alliance_bindings.contracts.envelope import CustomMsg
from alliance_bindings.contracts.msg import (
    MSG_VARIANTS,
    MsgClaimDelegationRewards,
    MsgDelegate,
    MsgRedelegate,
    MsgUndelegate,
    parse_alliance_msg,
)
from alliance_bindings.contracts.values import Coin
from alliance_bindings.errors import UnknownVariantError
from alliance_bindings.testing import MockAllianceChain


def _bare() -> AllianceMsgBuilder:
    return AllianceMsgBuilder(wrap=lambda m: m)


def test_exactly_four_message_variants() -> None:
    assert set(MSG_VARIANTS) == {"delegate", "undelegate", "redelegate", "claim_delegation_rewards"}


def test_claim_delegation_rewards_wire_shape() -> None:
    msg = _bare().claim_delegation_rewards("a1", "v1", "uusd")
    assert isinstance(msg, MsgClaimDelegationRewards)
    assert msg.to_wire() == {
        "claim_delegation_rewards": {
            "delegator_address": "a1",
            "validator_address": "v1",
            "denom": "uusd",
        }
    }


@pytest.mark.parametrize(
    "delegator, validator, amount",
    [
        ("terra1a", "terravaloper1a", Coin(denom="uluna", amount=1)),
        ("terra1b", "terravaloper1b", Coin(denom="ibc/27394FB0", amount=2**100)),
        ("terra1c", "terravaloper1c", Coin(denom="uluna", amount=0)),
    ],
)
def test_delegate_keeps_values_unmodified(delegator: str, validator: str, amount: Coin) -> None:
    msg = _bare().delegate(delegator, validator, amount)
    assert isinstance(msg, MsgDelegate)
    assert msg.delegator_address == delegator
    assert msg.validator_address == validator
    assert msg.amount == amount
    assert msg.to_wire() == {
        "delegate": {
            "delegator_address": delegator,
            "validator_address": validator,
            "amount": {"denom": amount.denom, "amount": str(amount.amount)},
        }
    }


def test_undelegate_accepts_coin_mapping() -> None:
    msg = _bare().undelegate("terra1a", "terravaloper1a", {"denom": "uluna", "amount": "1000"})
    assert isinstance(msg, MsgUndelegate)
    assert msg.amount == Coin(denom="uluna", amount=1000)
    assert msg.to_wire()["undelegate"]["amount"] == {"denom": "uluna", "amount": "1000"}


def test_redelegate_wire_shape() -> None:
    msg = _bare().redelegate("terra1a", "terravaloper1src", "terravaloper1dst", Coin(denom="uluna", amount=7))
    assert isinstance(msg, MsgRedelegate)
    assert msg.to_wire() == {
        "redelegate": {
            "delegator_address": "terra1a",
            "validator_src_address": "terravaloper1src",
            "validator_dst_address": "terravaloper1dst",
            "amount": {"denom": "uluna", "amount": "7"},
        }
    }


def test_default_builder_wraps_in_custom_envelope() -> None:
    out = AllianceMsgBuilder().delegate("terra1a", "terravaloper1a", Coin(denom="uluna", amount=5))
    assert isinstance(out, CustomMsg)
    assert out.to_dict() == {
        "custom": {
            "delegate": {
                "delegator_address": "terra1a",
                "validator_address": "terravaloper1a",
                "amount": {"denom": "uluna", "amount": "5"},
            }
        }
    }
    assert json.loads(out.to_bytes()) == out.to_dict()
    assert CustomMsg.from_dict(json.loads(out.to_json())) == out


def test_builder_accepts_any_constructible_type() -> None:
    class HostMsg:
        def __init__(self, inner) -> None:
            self.inner = inner

    out = AllianceMsgBuilder(HostMsg).claim_delegation_rewards("a1", "v1", "uusd")
    assert isinstance(out, HostMsg)
    assert out.inner == MsgClaimDelegationRewards(delegator_address="a1", validator_address="v1", denom="uusd")


def test_builder_checks_field_presence_only() -> None:
    with pytest.raises(ValidationError):
        _bare().delegate("", "terravaloper1a", Coin(denom="uluna", amount=1))
    with pytest.raises(ValidationError):
        _bare().claim_delegation_rewards("a1", "v1", "")


@pytest.mark.parametrize("tag, cls", sorted(MSG_VARIANTS.items()))
def test_parse_roundtrips_every_variant(tag: str, cls) -> None:
    fields = {
        "delegator_address": "terra1a",
        "validator_address": "terravaloper1a",
        "validator_src_address": "terravaloper1a",
        "validator_dst_address": "terravaloper1b",
        "amount": {"denom": "uluna", "amount": "3"},
        "denom": "uluna",
    }
    body = {k: v for k, v in fields.items() if k in cls.model_fields}
    msg = parse_alliance_msg({tag: body})
    assert isinstance(msg, cls)
    assert msg.to_wire() == {tag: body}


@pytest.mark.parametrize(
    "payload",
    [
        {"stake": {"delegator_address": "a"}},
        {"delegate": {}, "undelegate": {}},
        {},
        ["delegate"],
        "delegate",
    ],
)
def test_parse_rejects_unknown_shapes(payload) -> None:
    with pytest.raises(UnknownVariantError):
        parse_alliance_msg(payload)


def test_parse_rejects_extra_or_missing_fields() -> None:
    with pytest.raises(ValidationError):
        parse_alliance_msg({"claim_delegation_rewards": {"delegator_address": "a1", "validator_address": "v1"}})
    with pytest.raises(ValidationError):
        parse_alliance_msg(
            {
                "claim_delegation_rewards": {
                    "delegator_address": "a1",
                    "validator_address": "v1",
                    "denom": "uusd",
                    "memo": "hi",
                }
            }
        )


def test_mock_chain_records_executed_messages() -> None:
    chain = MockAllianceChain()
    builder = AllianceMsgBuilder()
    chain.execute(builder.delegate("terra1a", "terravaloper1a", Coin(denom="uluna", amount=5)))
    chain.execute(_bare().claim_delegation_rewards("terra1a", "terravaloper1a", "uluna"))
    assert [m.tag for m in chain.executed] == ["delegate", "claim_delegation_rewards"]
