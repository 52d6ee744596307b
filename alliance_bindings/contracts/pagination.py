"""
Cursor-or-offset pagination shared by every list-style alliance query.

Contract:
- `PaginationResponse.next_key` is present iff more results follow.
- `next_key` must be replayed verbatim as the next request's `key`; its bytes are
  host-defined and must never be interpreted or rebuilt by callers.
- `PaginationResponse.total` is present iff `count_total` was requested.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional, Protocol, TypeVar

from pydantic import Field

from alliance_bindings.common.logging import log_event
from alliance_bindings.contracts.base import ContractFragment, ContractRequest
from alliance_bindings.contracts.types import Binary, Uint64
from alliance_bindings.errors import PaginationError

logger = logging.getLogger(__name__)


class Pagination(ContractRequest):
    key: Optional[Binary] = Field(default=None, description="Opaque cursor copied from a previous next_key.")
    offset: Optional[Uint64] = Field(default=None, description="Numeric offset; only meaningful without a key.")
    limit: Optional[Uint64] = Field(default=None, description="Max results per page (host default applies when absent).")
    count_total: Optional[bool] = Field(default=None, description="Ask the host to fill PaginationResponse.total.")
    reverse: Optional[bool] = Field(default=None, description="Iterate in descending key order.")

    def next_page(self, response: Optional["PaginationResponse"]) -> Optional["Pagination"]:
        """
        Build the follow-up request for `response`, or None when the listing is exhausted.

        The cursor replaces any offset; every other parameter is kept as-is.
        """
        if response is None or not response.next_key:
            return None
        return self.model_copy(update={"key": response.next_key, "offset": None})


class PaginationResponse(ContractFragment):
    next_key: Optional[Binary] = Field(default=None)
    total: Optional[Uint64] = Field(default=None)


class PagedResponse(Protocol):
    @property
    def pagination(self) -> Optional[PaginationResponse]: ...


R = TypeVar("R", bound=PagedResponse)


def collect_pages(
    fetch: Callable[[Pagination], R],
    pagination: Optional[Pagination] = None,
    *,
    max_pages: int,
) -> Iterator[R]:
    """
    Walk a list query by replaying `next_key` until the host reports no more pages.

    Yields each page response in order. Raises PaginationError when more than
    `max_pages` pages would be fetched (protects against a host that never ends).
    """
    if max_pages < 1:
        raise ValueError("max_pages must be >= 1")

    request: Optional[Pagination] = pagination or Pagination()
    pages = 0
    while request is not None:
        if pages >= max_pages:
            raise PaginationError(f"pagination did not finish within {max_pages} pages")
        page = fetch(request)
        pages += 1
        log_event(
            logger,
            "alliance.pagination.page",
            severity="DEBUG",
            page=pages,
            has_next=bool(page.pagination and page.pagination.next_key),
        )
        yield page
        request = request.next_page(page.pagination)
