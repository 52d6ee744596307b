from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List

import pytest

from alliance_bindings.contracts.envelope import (
    decode_query_result,
    query_result_contract_error,
    query_result_ok,
    query_result_system_error,
)
from alliance_bindings.contracts.query import QUERY_RESPONSES, QueryAlliance
from alliance_bindings.contracts.responses import AllianceResponse
from alliance_bindings.contracts.values import Coin
from alliance_bindings.errors import FormatError, QueryError
from alliance_bindings.querier import AllianceQuerier
from alliance_bindings.testing import MockAllianceChain
from tests.conftest import DELEGATOR, REWARD_START_NANOS, VALIDATOR, asset_wire


class _CannedChannel:
    """Answers every query with the same host result and records the request bytes."""

    def __init__(self, answer: bytes) -> None:
        self.answer = answer
        self.requests: List[bytes] = []

    def raw_query(self, request: bytes) -> bytes:
        self.requests.append(request)
        return self.answer


TYPED_CALLS: List[tuple[str, Callable[[AllianceQuerier], Any]]] = [
    ("alliance", lambda q: q.query_alliance("ibc/ABC")),
    ("alliances", lambda q: q.query_alliances()),
    ("alliances_delegations", lambda q: q.query_alliances_delegations()),
    ("alliances_delegation_by_validator", lambda q: q.query_alliances_delegation_by_validator(DELEGATOR, VALIDATOR)),
    ("delegation", lambda q: q.query_delegation(DELEGATOR, VALIDATOR, "ibc/ABC")),
    ("delegation_rewards", lambda q: q.query_delegation_rewards(DELEGATOR, VALIDATOR, "ibc/ABC")),
    ("params", lambda q: q.query_params()),
    ("validator", lambda q: q.query_validator(VALIDATOR)),
    ("validators", lambda q: q.query_validators()),
]


def test_typed_calls_cover_every_variant() -> None:
    assert sorted(tag for tag, _ in TYPED_CALLS) == sorted(QUERY_RESPONSES)


@pytest.mark.parametrize("tag, call", TYPED_CALLS, ids=[t for t, _ in TYPED_CALLS])
def test_each_typed_call_sends_its_variant_and_decodes_its_response(
    tag: str,
    call: Callable[[AllianceQuerier], Any],
    chain: MockAllianceChain,
    querier: AllianceQuerier,
) -> None:
    resp = call(querier)
    assert isinstance(resp, QUERY_RESPONSES[tag])
    sent = chain.requests[-1]
    assert list(sent) == ["custom"]
    assert list(sent["custom"]) == [tag]


def test_query_alliance_decodes_asset(querier: AllianceQuerier) -> None:
    resp = querier.query_alliance("ibc/ABC")
    assert resp.alliance.denom == "ibc/ABC"
    assert resp.alliance.reward_start_time == REWARD_START_NANOS
    assert resp.alliance.total_validator_shares == Decimal("1000000.25")


def test_query_delegation_and_rewards(querier: AllianceQuerier) -> None:
    d = querier.query_delegation(DELEGATOR, VALIDATOR, "ibc/ABC").delegation
    assert d.balance == Coin(denom="ibc/ABC", amount=100)
    assert d.delegation.shares == Decimal("100")
    assert d.delegation.reward_history is not None and d.delegation.reward_history[1] is None

    rewards = querier.query_delegation_rewards(DELEGATOR, VALIDATOR, "ibc/ABC").rewards
    assert rewards == (Coin(denom="uluna", amount=1234),)


def test_query_validator_keeps_optional_dec_coin_denoms(querier: AllianceQuerier) -> None:
    v = querier.query_validator(VALIDATOR)
    assert v.total_delegation_shares[0].denom == "ibc/ABC"
    assert v.validator_shares[0].denom is None
    assert v.total_staked == ()


def test_query_params_defaults(querier: AllianceQuerier) -> None:
    params = querier.query_params().params
    assert params.reward_delay_time == 86_400_000_000_000
    assert params.last_take_rate_claim_time == 0


def test_generic_query_uses_the_lookup_table(querier: AllianceQuerier) -> None:
    resp = querier.query(QueryAlliance(denom="ibc/ABC"))
    assert isinstance(resp, AllianceResponse)


@pytest.mark.parametrize(
    "call",
    [
        lambda q: q.query_alliance("uunknown"),
        lambda q: q.query_delegation(DELEGATOR, VALIDATOR, "uunknown"),
        lambda q: q.query_delegation_rewards("terra1nobody", VALIDATOR, "ibc/ABC"),
        lambda q: q.query_validator("terravaloper1nobody"),
    ],
)
def test_host_rejections_raise_contract_query_error(querier: AllianceQuerier, call) -> None:
    with pytest.raises(QueryError) as e:
        call(querier)
    assert e.value.kind == "contract"
    assert e.value.query is not None


def test_schema_mismatch_raises_decode_query_error() -> None:
    channel = _CannedChannel(query_result_ok({"alliance": {"denom": "ibc/ABC"}}))
    with pytest.raises(QueryError) as e:
        AllianceQuerier(channel).query_alliance("ibc/ABC")
    assert e.value.kind == "decode"
    assert e.value.query == "alliance"


def test_response_for_another_variant_is_a_decode_error() -> None:
    channel = _CannedChannel(query_result_ok({"rewards": []}))
    with pytest.raises(QueryError) as e:
        AllianceQuerier(channel).query_params()
    assert e.value.kind == "decode"


def test_bad_timestamp_in_response_raises_format_error() -> None:
    wire = asset_wire()
    wire["reward_start_time"] = "2023-06-06 at noon"
    channel = _CannedChannel(query_result_ok({"alliance": wire}))
    with pytest.raises(FormatError):
        AllianceQuerier(channel).query_alliance("ibc/ABC")


@pytest.mark.parametrize("value", [None, 1.5, 12345, ["x"], {"a": 1}])
def test_non_string_timestamp_in_response_is_a_decode_error(value: Any) -> None:
    wire = asset_wire()
    wire["reward_start_time"] = value
    channel = _CannedChannel(query_result_ok({"alliance": wire}))
    with pytest.raises(QueryError) as e:
        AllianceQuerier(channel).query_alliance("ibc/ABC")
    assert e.value.kind == "decode"
    assert e.value.query == "alliance"


def test_system_error_raises_system_query_error() -> None:
    channel = _CannedChannel(query_result_system_error("unsupported_request", kind="custom"))
    with pytest.raises(QueryError) as e:
        AllianceQuerier(channel).query_params()
    assert e.value.kind == "system"
    assert "unsupported_request" in str(e.value)


def test_wrap_controls_the_custom_query_payload() -> None:
    channel = _CannedChannel(query_result_contract_error("nope"))
    querier = AllianceQuerier(channel, wrap=lambda q: {"alliance_v2": q.to_wire()})
    with pytest.raises(QueryError):
        querier.query_alliance("uluna")
    assert json.loads(channel.requests[0]) == {"custom": {"alliance_v2": {"alliance": {"denom": "uluna"}}}}


def test_no_caching_between_calls(chain: MockAllianceChain, querier: AllianceQuerier) -> None:
    before = len(chain.requests)
    querier.query_params()
    querier.query_params()
    assert len(chain.requests) == before + 2


def test_failures_are_logged_then_raised(querier: AllianceQuerier, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="alliance_bindings.querier"):
        with pytest.raises(QueryError):
            querier.query_alliance("uunknown")
    events = [r for r in caplog.records if getattr(r, "event_type", None) == "alliance.query_failed"]
    assert len(events) == 1
    rec: Dict[str, Any] = events[0].__dict__
    assert rec["query"] == "alliance"
    assert rec["kind"] == "contract"


def test_mock_answers_non_custom_requests_with_a_system_error(chain: MockAllianceChain) -> None:
    raw = chain.raw_query(b'{"bank": {"balance": {"address": "terra1x", "denom": "uluna"}}}')
    assert json.loads(raw) == {"error": {"unsupported_request": {"kind": "bank"}}}

    with pytest.raises(QueryError) as e:
        AllianceQuerier(_CannedChannel(raw)).query_params()
    assert e.value.kind == "system"
    assert "unsupported_request: bank" in str(e.value)


def test_mock_answers_unparseable_requests_with_a_system_error(chain: MockAllianceChain) -> None:
    with pytest.raises(QueryError) as e:
        decode_query_result(chain.raw_query(b"{not json"))
    assert e.value.kind == "system"
    assert "invalid_request" in str(e.value)
