"""
Host timestamp codec: RFC3339 strings <-> integer nanoseconds since the Unix epoch.

Design:
- **Wire**: the Alliance module encodes instants as RFC3339 UTC strings with
  nanosecond precision, e.g. '2023-06-06T18:37:29.956787974Z'.
- **Python side**: instants are plain `int` nanoseconds, so no precision is lost
  (`datetime` only keeps microseconds).

Rules:
- Output is always UTC with a trailing 'Z'.
- Fractional seconds are printed with 0, 3, 6 or 9 digits (shortest exact form).
- Input accepts 'Z'/'z' or a '+HH:MM'/'-HH:MM' offset and any number of fractional
  digits; digits past the ninth are truncated.
- Representable range is years 0001..9999 UTC. Instants before 1970 are negative.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from alliance_bindings.errors import FormatError

UTC = timezone.utc
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MICRO = 1_000

MIN_NANOS = -62_135_596_800 * NANOS_PER_SECOND  # 0001-01-01T00:00:00Z
MAX_NANOS = 253_402_300_800 * NANOS_PER_SECOND - 1  # 9999-12-31T23:59:59.999999999Z

_RFC3339_RE = re.compile(
    r"^(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"[Tt ]"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})\Z"
)


def _parse_offset(raw: str) -> timezone:
    if raw in ("Z", "z"):
        return UTC
    sign = -1 if raw[0] == "-" else 1
    hours = int(raw[1:3])
    minutes = int(raw[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError(f"offset out of range: {raw}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_rfc3339_nanos(value: Any) -> int:
    """
    Parse an RFC3339 timestamp into nanoseconds since the Unix epoch.

    Raises FormatError when `value` is not a string or not valid RFC3339.
    """
    if not isinstance(value, str):
        raise FormatError(f"expected RFC3339 string, got {type(value).__name__}")

    m = _RFC3339_RE.match(value.strip())
    if m is None:
        raise FormatError(f"not an RFC3339 timestamp: {value!r}")

    try:
        tz = _parse_offset(m.group("offset"))
        dt = datetime(
            int(m.group("year")),
            int(m.group("month")),
            int(m.group("day")),
            int(m.group("hour")),
            int(m.group("minute")),
            int(m.group("second")),
            tzinfo=tz,
        )
    except ValueError as e:
        raise FormatError(f"not an RFC3339 timestamp: {value!r}") from e

    fraction = (m.group("fraction") or "")[:9].ljust(9, "0")
    delta = dt - EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    nanos = seconds * NANOS_PER_SECOND + int(fraction)
    if not MIN_NANOS <= nanos <= MAX_NANOS:
        raise FormatError(f"timestamp out of range: {value!r}")
    return nanos


def format_rfc3339_nanos(nanos: int) -> str:
    """
    Format nanoseconds since the Unix epoch as an RFC3339 UTC string.

    Example: 1686075449956787974 -> '2023-06-06T18:17:29.956787974Z'
    """
    if isinstance(nanos, bool) or not isinstance(nanos, int):
        raise TypeError(f"nanos must be an int, got {type(nanos).__name__}")
    if not MIN_NANOS <= nanos <= MAX_NANOS:
        raise ValueError(f"timestamp out of range: {nanos}")

    seconds, frac = divmod(nanos, NANOS_PER_SECOND)
    dt = EPOCH + timedelta(seconds=seconds)
    out = (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
    )
    if frac:
        if frac % 1_000_000 == 0:
            out += f".{frac // 1_000_000:03d}"
        elif frac % 1_000 == 0:
            out += f".{frac // 1_000:06d}"
        else:
            out += f".{frac:09d}"
    return out + "Z"


def nanos_to_datetime(nanos: int) -> datetime:
    """Convert nanoseconds to a tz-aware UTC datetime (sub-microsecond digits are dropped)."""

    seconds, frac = divmod(int(nanos), NANOS_PER_SECOND)
    return EPOCH + timedelta(seconds=seconds, microseconds=frac // _NANOS_PER_MICRO)


def datetime_to_nanos(value: datetime) -> int:
    """
    Convert a datetime to nanoseconds since the Unix epoch.
    Naive datetimes are assumed to be UTC.
    """

    if not isinstance(value, datetime):
        raise TypeError("datetime_to_nanos expects a datetime")
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value - EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    return seconds * NANOS_PER_SECOND + delta.microseconds * _NANOS_PER_MICRO
