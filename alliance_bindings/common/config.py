"""
Environment-driven configuration for alliance query channels.

Values are read at call time (never at import time) so tests and embedding
applications can set env vars before building a channel.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_PAGE_LIMIT = 100
DEFAULT_MAX_PAGES = 1000


def _parse_bool(raw: object | None, default: bool = False) -> bool:
    if raw is None:
        return default
    s = str(raw).strip().lower()
    if not s:
        return default
    return s in {"1", "true", "t", "yes", "y", "on"}


def _parse_float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        v = float(raw)
    except ValueError:
        return float(default)
    return v if v > 0 else float(default)


def _parse_int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return int(default)
    try:
        v = int(raw)
    except ValueError:
        return int(default)
    return v if v > 0 else int(default)


def get_query_url(*, required: bool = True) -> str | None:
    """
    Returns the host query endpoint.

    - Env: ALLIANCE_QUERY_URL
    - Trailing slashes are stripped.
    """
    v = (os.getenv("ALLIANCE_QUERY_URL") or "").strip()
    if not v:
        if required:
            raise RuntimeError("Missing required env var: ALLIANCE_QUERY_URL")
        return None
    return v.rstrip("/")


def get_page_limit() -> int:
    """Default page size for list helpers. Env: ALLIANCE_PAGE_LIMIT (default: 100)."""

    return _parse_int_env("ALLIANCE_PAGE_LIMIT", DEFAULT_PAGE_LIMIT)


def get_max_pages() -> int:
    """Page walk cap. Env: ALLIANCE_MAX_PAGES (default: 1000)."""

    return _parse_int_env("ALLIANCE_MAX_PAGES", DEFAULT_MAX_PAGES)


@dataclass(frozen=True, slots=True)
class QueryChannelConfig:
    url: Optional[str]
    timeout_s: float = DEFAULT_TIMEOUT_S
    page_limit: int = DEFAULT_PAGE_LIMIT
    max_pages: int = DEFAULT_MAX_PAGES
    verify_tls: bool = True


def load_query_channel_config(*, require_url: bool = True) -> QueryChannelConfig:
    """
    Env:
        ALLIANCE_QUERY_URL        query endpoint (required unless require_url=False)
        ALLIANCE_QUERY_TIMEOUT_S  request timeout in seconds (default: 30)
        ALLIANCE_PAGE_LIMIT       default page size (default: 100)
        ALLIANCE_MAX_PAGES        page walk cap (default: 1000)
        ALLIANCE_QUERY_VERIFY_TLS verify TLS certificates (default: true)
    """
    return QueryChannelConfig(
        url=get_query_url(required=require_url),
        timeout_s=_parse_float_env("ALLIANCE_QUERY_TIMEOUT_S", DEFAULT_TIMEOUT_S),
        page_limit=get_page_limit(),
        max_pages=get_max_pages(),
        verify_tls=_parse_bool(os.getenv("ALLIANCE_QUERY_VERIFY_TLS"), default=True),
    )
