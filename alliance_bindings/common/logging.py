"""
JSON-lines logging for alliance bindings.

The library itself only emits records through `log_event`; it never installs
handlers. Applications (and scripts around the bindings) opt in with
`init_structured_logging`, which renders every record as one JSON object:

    {"timestamp": ..., "severity": "DEBUG", "service": "alliance-bindings",
     "env": ..., "version": ..., "event_type": "alliance.query",
     "message": ..., "logger": ..., "query": "params", "duration_ms": 3}
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import IO, Any

# Attributes every LogRecord carries, plus the keys the formatter writes itself.
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | frozenset({"message", "asctime", "taskName"})

_CORE_KEYS: frozenset[str] = frozenset(
    {"timestamp", "severity", "service", "env", "version", "event_type", "logger"}
)

_SEVERITY_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}
_SEVERITIES = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _one_line(v: Any, *, limit: int = 2000) -> str:
    """Single-line, length-capped text for a log field."""
    try:
        s = "" if v is None else str(v)
    except Exception:
        return ""
    s = " ".join(s.splitlines()).strip()
    return s if len(s) <= limit else s[: limit - 1] + "…"


def _first_env(names: tuple[str, ...], default: str, *, limit: int = 128) -> str:
    for name in names:
        v = _one_line(os.getenv(name), limit=limit)
        if v:
            return v
    return default


def severity_name(level: str | int | None) -> str:
    if isinstance(level, int):
        level = logging.getLevelName(level)
    s = _one_line(level or "INFO", limit=16).upper()
    s = _SEVERITY_ALIASES.get(s, s)
    return s if s in _SEVERITIES else "INFO"


def default_service_name() -> str:
    return _first_env(("ALLIANCE_SERVICE_NAME", "SERVICE_NAME", "OTEL_SERVICE_NAME"), "alliance-bindings")


def default_env_name() -> str:
    return _first_env(("ALLIANCE_ENV", "ENVIRONMENT", "ENV"), "unknown", limit=64)


def default_version() -> str:
    return _first_env(("ALLIANCE_VERSION", "APP_VERSION", "VERSION"), "unknown")


class JsonLogFormatter(logging.Formatter):
    """Formats records as compact JSON; extras passed via `extra=` become top-level keys."""

    def __init__(self, *, service: str | None = None, env: str | None = None, version: str | None = None) -> None:
        super().__init__()
        self._static = {
            "service": _one_line(service, limit=128) or default_service_name(),
            "env": _one_line(env, limit=64) or default_env_name(),
            "version": _one_line(version, limit=128) or default_version(),
        }

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": severity_name(getattr(record, "severity", None) or record.levelno),
            **self._static,
            "event_type": _one_line(getattr(record, "event_type", None), limit=128) or "log",
            "message": _one_line(record.getMessage(), limit=4000),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exception"] = "".join(traceback.format_exception(*record.exc_info))[-8000:]

        for k, v in record.__dict__.items():
            if k in _RECORD_ATTRS or k in _CORE_KEYS or k.startswith("_"):
                continue
            payload[k] = v

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def init_structured_logging(
    *,
    service: str | None = None,
    env: str | None = None,
    version: str | None = None,
    level: str | int | None = None,
    stream: IO[str] | None = None,
) -> None:
    """
    Route the root logger to a single JSON-lines handler.

    Level comes from `level`, else LOG_LEVEL, else INFO. Calling it again
    replaces the previous handler.
    """
    lvl = severity_name(level if level is not None else os.getenv("LOG_LEVEL", "INFO"))
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JsonLogFormatter(service=service, env=env, version=version))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(lvl)
    logging.captureWarnings(True)


def log_event(
    logger: logging.Logger,
    event_type: str,
    *,
    severity: str = "INFO",
    message: str | None = None,
    **fields: Any,
) -> None:
    """Emit a record with a stable `event_type`; skipped cheaply when the level is off."""
    lvl = logging.getLevelName(severity_name(severity))
    if not logger.isEnabledFor(lvl):
        return
    logger.log(lvl, message or event_type, extra={"event_type": event_type, **fields})
