"""
Host runtime envelopes around alliance messages and queries.

- Outgoing message: {"custom": <AllianceMsg wire form>}
- Query request:    {"custom": <custom query wire form>}
- Query result (system result wrapping a contract result):
    {"ok": {"ok": "<base64 response JSON>"}}   success
    {"ok": {"error": "<message>"}}             the module rejected the query
    {"error": {"<kind>": {...}}}               the query router failed
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from alliance_bindings.contracts.msg import AllianceMsg, parse_alliance_msg
from alliance_bindings.errors import QueryError

SYSTEM_ERROR_KINDS = frozenset(
    {
        "invalid_request",
        "invalid_response",
        "no_such_contract",
        "no_such_code",
        "unknown",
        "unsupported_request",
    }
)


def _dumps(obj: Any) -> bytes:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


@dataclass(frozen=True, slots=True)
class CustomMsg:
    """
    Host-level outgoing message carrying one alliance action.
    """

    msg: AllianceMsg

    def to_dict(self) -> Dict[str, Any]:
        return {"custom": self.msg.to_wire()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "CustomMsg":
        if not isinstance(data, Mapping) or "custom" not in data:
            raise ValueError("Missing required field: custom")
        return CustomMsg(msg=parse_alliance_msg(data["custom"]))


def custom_query_request(payload: Any) -> bytes:
    """Serialize an already-wrapped custom query into request bytes."""

    return _dumps({"custom": payload})


def query_result_ok(response: Any) -> bytes:
    """Encode a successful host answer; `response` is a JSON-able object or raw JSON bytes."""

    raw = response if isinstance(response, (bytes, bytearray)) else _dumps(response)
    return _dumps({"ok": {"ok": base64.b64encode(bytes(raw)).decode("ascii")}})


def query_result_contract_error(message: str) -> bytes:
    return _dumps({"ok": {"error": str(message)}})


def query_result_system_error(kind: str, /, **fields: Any) -> bytes:
    if kind not in SYSTEM_ERROR_KINDS:
        raise ValueError(f"unknown system error kind: {kind}")
    return _dumps({"error": {kind: fields}})


def _describe_system_error(err: Any) -> str:
    if isinstance(err, Mapping) and len(err) == 1:
        kind, body = next(iter(err.items()))
        detail = ""
        if isinstance(body, Mapping):
            detail = str(body.get("error") or body.get("kind") or body.get("addr") or body.get("code_id") or "")
        return f"{kind}: {detail}" if detail else str(kind)
    return json.dumps(err, separators=(",", ":"), default=str)


def decode_query_result(raw: bytes, *, query: Optional[str] = None) -> bytes:
    """
    Unwrap a host query result and return the response JSON bytes.

    Raises QueryError (kind="system"/"contract") for host failures and
    QueryError(kind="decode") when the result envelope itself is malformed.
    """
    try:
        outer = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise QueryError(f"query result is not JSON: {e}", kind="decode", query=query) from e

    if not isinstance(outer, Mapping) or len(outer) != 1:
        raise QueryError("query result must be an object with exactly one of ok/error", kind="decode", query=query)

    if "error" in outer:
        raise QueryError(
            f"querier system error: {_describe_system_error(outer['error'])}",
            kind="system",
            query=query,
        )

    inner = outer.get("ok")
    if not isinstance(inner, Mapping) or len(inner) != 1:
        raise QueryError("contract result must be an object with exactly one of ok/error", kind="decode", query=query)

    if "error" in inner:
        raise QueryError(f"querier contract error: {inner['error']}", kind="contract", query=query)

    data = inner.get("ok")
    if not isinstance(data, str):
        raise QueryError("contract result payload must be a base64 string", kind="decode", query=query)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise QueryError(f"contract result payload is not base64: {e}", kind="decode", query=query) from e
