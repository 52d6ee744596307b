from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterator, Optional, cast

from pydantic import BaseModel, ValidationError

from alliance_bindings.common.config import get_max_pages, get_page_limit
from alliance_bindings.common.logging import log_event
from alliance_bindings.contracts.envelope import custom_query_request, decode_query_result
from alliance_bindings.contracts.pagination import Pagination, collect_pages
from alliance_bindings.contracts.query import (
    QUERY_RESPONSES,
    AllianceQuery,
    QueryAlliance,
    QueryAlliances,
    QueryAlliancesDelegationByValidator,
    QueryAlliancesDelegations,
    QueryDelegation,
    QueryDelegationRewards,
    QueryParams,
    QueryValidator,
    QueryValidators,
)
from alliance_bindings.contracts.responses import (
    AllianceResponse,
    AlliancesDelegationsResponse,
    AlliancesResponse,
    AllValidatorsResponse,
    ParamsResponse,
    RewardsResponse,
    SingleDelegationResponse,
    ValidatorResponse,
)
from alliance_bindings.contracts.values import AllianceAsset, DelegationResponse
from alliance_bindings.errors import FormatError, QueryError
from alliance_bindings.transport.base import QueryChannel

logger = logging.getLogger(__name__)


def _wire(query: AllianceQuery) -> Any:
    return query.to_wire()


def _format_error_in(exc: ValidationError) -> Optional[FormatError]:
    for err in exc.errors():
        cause = (err.get("ctx") or {}).get("error")
        if isinstance(cause, FormatError):
            return cause
    return None


class AllianceQuerier:
    """
    Typed alliance queries over a generic query channel.

    Every call builds the query variant, wraps it in the custom query envelope,
    performs exactly one synchronous `raw_query` and decodes the answer into the
    response type bound to the variant. Nothing is cached or retried.

    `wrap` maps an AllianceQuery to the wire form of the caller's custom query type
    (defaults to the bare alliance query).
    """

    def __init__(self, channel: QueryChannel, *, wrap: Optional[Callable[[AllianceQuery], Any]] = None) -> None:
        self._channel = channel
        self._wrap = wrap or _wire

    def query(self, request: AllianceQuery) -> BaseModel:
        """
        Dispatch any alliance query and decode it into its bound response type.

        Raises QueryError when the host rejects the query or the answer does not match
        the response schema, FormatError when an answered timestamp is not RFC3339.
        """
        tag = request.tag
        response_type = QUERY_RESPONSES[tag]
        start = time.perf_counter()
        try:
            raw = self._channel.raw_query(custom_query_request(self._wrap(request)))
            data = decode_query_result(raw, query=tag)
            try:
                out = response_type.model_validate_json(data)
            except ValidationError as e:
                fmt = _format_error_in(e)
                if fmt is not None:
                    raise fmt from e
                raise QueryError(
                    f"{tag} response does not match {response_type.__name__}: {e.error_count()} error(s)",
                    kind="decode",
                    query=tag,
                ) from e
        except QueryError as e:
            log_event(logger, "alliance.query_failed", severity="WARNING", query=tag, kind=e.kind, error=str(e))
            raise
        except FormatError as e:
            log_event(logger, "alliance.query_failed", severity="WARNING", query=tag, kind="format", error=str(e))
            raise

        log_event(
            logger,
            "alliance.query",
            severity="DEBUG",
            query=tag,
            duration_ms=int(max(0.0, (time.perf_counter() - start) * 1000.0)),
        )
        return out

    # --- typed queries -----------------------------------------------------

    def query_alliance(self, denom: str) -> AllianceResponse:
        return cast(AllianceResponse, self.query(QueryAlliance(denom=denom)))

    def query_alliances(self, pagination: Optional[Pagination] = None) -> AlliancesResponse:
        return cast(AlliancesResponse, self.query(QueryAlliances(pagination=pagination)))

    def query_alliances_delegations(self, pagination: Optional[Pagination] = None) -> AlliancesDelegationsResponse:
        return cast(AlliancesDelegationsResponse, self.query(QueryAlliancesDelegations(pagination=pagination)))

    def query_alliances_delegation_by_validator(
        self,
        delegator_addr: str,
        validator_addr: str,
        pagination: Optional[Pagination] = None,
    ) -> AlliancesDelegationsResponse:
        return cast(
            AlliancesDelegationsResponse,
            self.query(
                QueryAlliancesDelegationByValidator(
                    delegator_addr=delegator_addr,
                    validator_addr=validator_addr,
                    pagination=pagination,
                )
            ),
        )

    def query_delegation(self, delegator_addr: str, validator_addr: str, denom: str) -> SingleDelegationResponse:
        return cast(
            SingleDelegationResponse,
            self.query(QueryDelegation(delegator_addr=delegator_addr, validator_addr=validator_addr, denom=denom)),
        )

    def query_delegation_rewards(self, delegator_addr: str, validator_addr: str, denom: str) -> RewardsResponse:
        return cast(
            RewardsResponse,
            self.query(
                QueryDelegationRewards(delegator_addr=delegator_addr, validator_addr=validator_addr, denom=denom)
            ),
        )

    def query_params(self) -> ParamsResponse:
        return cast(ParamsResponse, self.query(QueryParams()))

    def query_validator(self, validator_addr: str) -> ValidatorResponse:
        return cast(ValidatorResponse, self.query(QueryValidator(validator_addr=validator_addr)))

    def query_validators(self, pagination: Optional[Pagination] = None) -> AllValidatorsResponse:
        return cast(AllValidatorsResponse, self.query(QueryValidators(pagination=pagination)))

    # --- full listings -----------------------------------------------------

    def _first_page(self, limit: Optional[int]) -> Pagination:
        return Pagination(limit=limit or get_page_limit())

    def iter_alliances(self, *, limit: Optional[int] = None, max_pages: Optional[int] = None) -> Iterator[AllianceAsset]:
        for page in collect_pages(self.query_alliances, self._first_page(limit), max_pages=max_pages or get_max_pages()):
            yield from page.alliances

    def iter_alliances_delegations(
        self,
        *,
        limit: Optional[int] = None,
        max_pages: Optional[int] = None,
    ) -> Iterator[DelegationResponse]:
        for page in collect_pages(
            self.query_alliances_delegations,
            self._first_page(limit),
            max_pages=max_pages or get_max_pages(),
        ):
            yield from page.delegations or ()

    def iter_validators(self, *, limit: Optional[int] = None, max_pages: Optional[int] = None) -> Iterator[ValidatorResponse]:
        for page in collect_pages(self.query_validators, self._first_page(limit), max_pages=max_pages or get_max_pages()):
            yield from page.validators
