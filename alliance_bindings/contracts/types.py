from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import Field, PlainSerializer, PlainValidator, ValidationInfo, WithJsonSchema

from alliance_bindings.common.timeutils import (
    MAX_NANOS,
    MIN_NANOS,
    datetime_to_nanos,
    format_rfc3339_nanos,
    parse_rfc3339_nanos,
)

# ---------------------------------------------------------------------------
# Decimals
# ---------------------------------------------------------------------------

# Host decimals are fixed-point with 18 fractional digits, unsigned, 256-bit.
# - JSON string, not JSON number (avoids float rounding & language differences)
# - plain notation, no exponent, no trailing zeros ("1.5", "0", "100")
DECIMAL_PLACES = 18

_DECIMAL_RE = re.compile(r"^[0-9]+(\.[0-9]+)?\Z")
_UINT256_MAX = 2**256 - 1
DECIMAL256_MAX = Decimal(f"{_UINT256_MAX // 10**DECIMAL_PLACES}.{_UINT256_MAX % 10**DECIMAL_PLACES:0{DECIMAL_PLACES}d}")


def format_decimal(value: Decimal) -> str:
    """Render a Decimal the way the host does: plain notation, trailing zeros stripped."""

    s = format(value, "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return "0" if s in ("", "-0") else s


def _to_decimal256(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("decimal must not be a bool")
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int):
        d = Decimal(value)
    elif isinstance(value, str):
        s = value.strip()
        if not _DECIMAL_RE.match(s):
            raise ValueError(f"invalid decimal string: {value!r}")
        d = Decimal(s)
    else:
        # Floats are refused: they cannot carry the host's precision.
        raise ValueError(f"unsupported decimal type: {type(value).__name__}")

    if not d.is_finite() or d < 0:
        raise ValueError(f"decimal must be finite and non-negative: {value!r}")
    if d > DECIMAL256_MAX:
        raise ValueError(f"decimal exceeds 256-bit range: {value!r}")
    text = format_decimal(d)
    if "." in text and len(text.split(".", 1)[1]) > DECIMAL_PLACES:
        raise ValueError(f"decimal has more than {DECIMAL_PLACES} fractional digits: {value!r}")
    return d if d != 0 else Decimal(0)


Decimal256 = Annotated[
    Decimal,
    PlainValidator(_to_decimal256),
    PlainSerializer(format_decimal, return_type=str, when_used="json"),
    WithJsonSchema(
        {
            "type": "string",
            "pattern": r"^[0-9]+(\.[0-9]+)?$",
            "examples": ["0", "1", "0.05", "1.000000000000000000"],
            "description": "Unsigned fixed-point decimal (18 fractional digits) encoded as a JSON string.",
        }
    ),
]


# ---------------------------------------------------------------------------
# Unsigned integers
# ---------------------------------------------------------------------------


def _uint_validator(bits: int):
    upper = 2**bits - 1

    def _validate(value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"uint{bits} must not be a bool")
        if isinstance(value, int):
            n = value
        elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
            n = int(value)
        else:
            raise ValueError(f"invalid uint{bits}: {value!r}")
        if not 0 <= n <= upper:
            raise ValueError(f"uint{bits} out of range: {value!r}")
        return n

    return _validate


# Transferable token amounts: JSON string (exceeds JS safe integers).
Uint128 = Annotated[
    int,
    PlainValidator(_uint_validator(128)),
    PlainSerializer(str, return_type=str, when_used="json"),
    WithJsonSchema({"type": "string", "pattern": r"^[0-9]+$", "description": "128-bit unsigned integer as a JSON string."}),
]

# Heights, counts, intervals: JSON number; numeric strings are accepted on input.
Uint64 = Annotated[
    int,
    PlainValidator(_uint_validator(64)),
    WithJsonSchema({"type": "integer", "minimum": 0, "maximum": 2**64 - 1, "format": "uint64"}),
]


# ---------------------------------------------------------------------------
# Binary (opaque bytes, base64 on the wire)
# ---------------------------------------------------------------------------


def _to_binary(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"invalid base64: {value!r}") from e
    raise ValueError(f"unsupported binary type: {type(value).__name__}")


def encode_binary(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


Binary = Annotated[
    bytes,
    PlainValidator(_to_binary),
    PlainSerializer(encode_binary, return_type=str, when_used="json"),
    WithJsonSchema({"type": "string", "contentEncoding": "base64", "description": "Opaque bytes, standard base64."}),
]


# ---------------------------------------------------------------------------
# Timestamps (RFC3339 on the wire, int nanoseconds in Python)
# ---------------------------------------------------------------------------


def _to_nanos(value: Any, info: ValidationInfo) -> int:
    if isinstance(value, str):
        # Raises FormatError (a ValueError) for text that is not RFC3339.
        return parse_rfc3339_nanos(value)
    # JSON input must be RFC3339 text.
    if info.mode == "json" or isinstance(value, bool):
        raise ValueError(f"timestamp must be an RFC3339 string, got {type(value).__name__}")
    if isinstance(value, int):
        if not MIN_NANOS <= value <= MAX_NANOS:
            raise ValueError(f"timestamp out of range: {value}")
        return value
    if isinstance(value, datetime):
        return datetime_to_nanos(value)
    raise ValueError(f"unsupported timestamp type: {type(value).__name__}")


Rfc3339Nanos = Annotated[
    int,
    PlainValidator(_to_nanos),
    PlainSerializer(format_rfc3339_nanos, return_type=str, when_used="json"),
    WithJsonSchema(
        {
            "type": "string",
            "format": "date-time",
            "examples": ["2023-06-06T18:37:29.956787974Z"],
            "description": "RFC3339 UTC timestamp with nanosecond precision.",
        }
    ),
]


# ---------------------------------------------------------------------------
# Addresses and denoms
# ---------------------------------------------------------------------------

# Bech32 validation is the host's job; only presence is checked here.
Addr = Annotated[str, Field(min_length=1, examples=["terra1...", "terravaloper1..."])]

Denom = Annotated[str, Field(min_length=1, examples=["uluna", "ibc/27394FB0..."])]
