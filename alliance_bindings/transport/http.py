from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

import requests

from alliance_bindings.common.config import DEFAULT_TIMEOUT_S, load_query_channel_config
from alliance_bindings.common.logging import log_event
from alliance_bindings.errors import QueryError

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class HttpQueryChannel:
    """
    Query channel that POSTs raw query request bytes to a host query endpoint.

    The endpoint answers with the host query result envelope (ok/error). Only
    transport-level failures are handled here; host rejections travel inside the
    envelope and are decoded by the querier.
    """

    def __init__(
        self,
        url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        verify_tls: bool = True,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        u = str(url or "").strip()
        if not u:
            raise ValueError("url is required")
        self._url = u
        self._session = session or requests.Session()
        self._timeout_s = float(timeout_s)
        self._verify_tls = bool(verify_tls)
        self._headers = {**_DEFAULT_HEADERS, **dict(headers or {})}

    @classmethod
    def from_env(cls, *, session: Optional[requests.Session] = None) -> "HttpQueryChannel":
        cfg = load_query_channel_config(require_url=True)
        return cls(cfg.url or "", session=session, timeout_s=cfg.timeout_s, verify_tls=cfg.verify_tls)

    @property
    def url(self) -> str:
        return self._url

    def raw_query(self, request: bytes) -> bytes:
        try:
            r = self._session.post(
                self._url,
                data=request,
                headers=self._headers,
                timeout=self._timeout_s,
                verify=self._verify_tls,
            )
        except requests.RequestException as e:
            log_event(
                logger,
                "alliance.transport_failed",
                severity="WARNING",
                url=self._url,
                error=f"{type(e).__name__}: {e}",
            )
            raise QueryError(f"query endpoint unreachable: {type(e).__name__}", kind="transport") from e

        if r.status_code >= 400:
            log_event(
                logger,
                "alliance.transport_failed",
                severity="WARNING",
                url=self._url,
                status_code=r.status_code,
            )
            raise QueryError(
                f"query endpoint returned HTTP {r.status_code}",
                kind="transport",
                status_code=r.status_code,
            )
        return r.content
