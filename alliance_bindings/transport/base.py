from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class QueryChannel(Protocol):
    """
    Synchronous "ask the chain" channel.

    `raw_query` takes serialized query request bytes and returns the host's query
    result bytes (the ok/error envelope, see contracts.envelope). Implementations
    raise QueryError(kind="transport") when the host cannot be reached.
    """

    def raw_query(self, request: bytes) -> bytes:
        ...
