from __future__ import annotations

from typing import Optional


class AllianceBindingError(Exception):
    """Base class for every error raised by the alliance bindings."""


class FormatError(AllianceBindingError, ValueError):
    """
    A host-encoded value could not be decoded (e.g. a timestamp that is not RFC3339).
    """


class UnknownVariantError(AllianceBindingError, ValueError):
    """A wire payload names no known message/query variant."""


class QueryError(AllianceBindingError):
    """
    A query could not be answered.

    kind:
    - contract: the host module rejected the query (unknown denom/validator/delegation)
    - system: the host query router failed before reaching the module
    - transport: the channel could not reach the host
    - decode: the host answered, but the payload does not match the response schema
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        query: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.query = query
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        parts = [f"kind={self.kind}"]
        if self.query:
            parts.append(f"query={self.query}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        return f"{base} ({' '.join(parts)})"


class PaginationError(AllianceBindingError):
    """A page walk did not terminate within its page cap."""
