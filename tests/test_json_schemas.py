from __future__ import annotations

import json
from pathlib import Path

import pytest
from jsonschema import Draft202012Validator

from alliance_bindings.builder import AllianceMsgBuilder
from alliance_bindings.contracts import generate_json_schemas
from alliance_bindings.contracts.msg import MSG_VARIANTS
from alliance_bindings.contracts.query import QUERY_VARIANTS, QueryAlliances, QueryParams
from alliance_bindings.contracts.pagination import Pagination
from tests.conftest import DELEGATOR, VALIDATOR, asset_wire


@pytest.fixture(scope="module")
def schemas():
    return generate_json_schemas.build_schemas()


def test_schema_names_cover_every_variant(schemas) -> None:
    expected = {"alliance_msg", "alliance_query"} | {f"response_to_{tag}" for tag in QUERY_VARIANTS}
    assert set(schemas) == expected
    for name, schema in schemas.items():
        Draft202012Validator.check_schema(schema)
        assert schema["$id"] == f"alliance_bindings/{name}.schema.json"


def test_msg_schema_accepts_built_messages(schemas) -> None:
    v = Draft202012Validator(schemas["alliance_msg"])
    b = AllianceMsgBuilder(wrap=lambda m: m.to_wire())
    for wire in (
        b.delegate(DELEGATOR, VALIDATOR, {"denom": "ibc/ABC", "amount": "10"}),
        b.undelegate(DELEGATOR, VALIDATOR, {"denom": "ibc/ABC", "amount": "10"}),
        b.redelegate(DELEGATOR, VALIDATOR, "terravaloper1other", {"denom": "ibc/ABC", "amount": "10"}),
        b.claim_delegation_rewards(DELEGATOR, VALIDATOR, "ibc/ABC"),
    ):
        assert list(v.iter_errors(wire)) == []
    assert len(MSG_VARIANTS) == 4


def test_msg_schema_rejects_unknown_tags_and_numeric_amounts(schemas) -> None:
    v = Draft202012Validator(schemas["alliance_msg"])
    assert not v.is_valid({"stake": {}})
    assert not v.is_valid(
        {"delegate": {"delegator_address": DELEGATOR, "validator_address": VALIDATOR, "amount": {"denom": "u", "amount": 10}}}
    )


def test_query_schema_accepts_queries(schemas) -> None:
    v = Draft202012Validator(schemas["alliance_query"])
    assert v.is_valid(QueryParams().to_wire())
    assert v.is_valid(QueryAlliances(pagination=Pagination(key=b"\x01", limit=5)).to_wire())
    assert not v.is_valid({"params": {}, "alliance": {"denom": "x"}})


def test_response_schema_accepts_host_answer(schemas) -> None:
    v = Draft202012Validator(schemas["response_to_alliance"])
    assert v.is_valid({"alliance": asset_wire()})


def test_main_writes_schema_files(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(generate_json_schemas, "_schemas_dir", lambda: tmp_path)
    generate_json_schemas.main()
    written = sorted(p.name for p in tmp_path.glob("*.schema.json"))
    assert "alliance_msg.schema.json" in written
    assert len(written) == 2 + len(QUERY_VARIANTS)
    data = json.loads((tmp_path / "alliance_query.schema.json").read_text(encoding="utf-8"))
    assert data["title"] == "AllianceQuery"
