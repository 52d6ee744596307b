from __future__ import annotations

import json
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import ValidationError

from alliance_bindings.contracts.envelope import (
    CustomMsg,
    query_result_contract_error,
    query_result_ok,
    query_result_system_error,
)
from alliance_bindings.contracts.msg import AllianceMsg
from alliance_bindings.contracts.pagination import Pagination, PaginationResponse
from alliance_bindings.contracts.query import (
    QueryAlliance,
    QueryAlliances,
    QueryAlliancesDelegationByValidator,
    QueryAlliancesDelegations,
    QueryDelegation,
    QueryDelegationRewards,
    QueryParams,
    QueryValidator,
    QueryValidators,
    parse_alliance_query,
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
from alliance_bindings.contracts.values import AllianceAsset, AllianceParams, Coin, DelegationResponse
from alliance_bindings.errors import UnknownVariantError

T = TypeVar("T")

DEFAULT_LIMIT = 100

DelegationKey = Tuple[str, str, str]


class _Rejected(Exception):
    """The mock module refuses a query (mirrors a host contract error)."""


def _delegation_store_key(key: DelegationKey) -> bytes:
    return b"\x00".join(part.encode("utf-8") for part in key)


def paginate(
    items: Sequence[Tuple[bytes, T]],
    pagination: Optional[Pagination],
    *,
    default_limit: int = DEFAULT_LIMIT,
) -> Tuple[List[T], PaginationResponse]:
    """
    Host-style pagination over (store_key, value) pairs.

    - `key` resumes at the first entry >= key (<= key when reverse).
    - `offset` is only accepted without a key.
    - `next_key` is the store key of the first entry not returned.
    - `total` is only filled for key-less requests with count_total.
    """
    p = pagination or Pagination()
    if p.key and p.offset:
        raise _Rejected("invalid request, either offset or key is expected, got both")

    reverse = bool(p.reverse)
    ordered = sorted(items, key=lambda kv: kv[0], reverse=reverse)
    limit = p.limit or default_limit

    if p.key:
        if reverse:
            start = next((i for i, (k, _) in enumerate(ordered) if k <= p.key), len(ordered))
        else:
            start = next((i for i, (k, _) in enumerate(ordered) if k >= p.key), len(ordered))
    else:
        start = p.offset or 0

    window = ordered[start : start + limit]
    rest = ordered[start + limit :]
    next_key = rest[0][0] if rest else None
    total = len(ordered) if (p.count_total and not p.key) else None
    return [v for _, v in window], PaginationResponse(next_key=next_key, total=total)


class MockAllianceChain:
    """
    Minimal in-memory Alliance module for local testing/examples.

    This is NOT a host implementation: it answers the nine alliance queries from
    seeded data (with host-style pagination and rejections) and records executed
    messages without applying any delegation accounting.
    """

    def __init__(self, *, params: Optional[AllianceParams] = None, default_limit: int = DEFAULT_LIMIT) -> None:
        self._lock = Lock()
        self._default_limit = int(default_limit)
        self._params = params or AllianceParams(
            reward_delay_time=86_400_000_000_000,
            take_rate_claim_interval=300_000_000_000,
            last_take_rate_claim_time=0,
        )
        self._alliances: Dict[str, AllianceAsset] = {}
        self._validators: Dict[str, ValidatorResponse] = {}
        self._delegations: Dict[DelegationKey, DelegationResponse] = {}
        self._rewards: Dict[DelegationKey, Tuple[Coin, ...]] = {}
        self._executed: List[AllianceMsg] = []
        self._requests: List[Any] = []

    # --- seeding -----------------------------------------------------------

    def add_alliance(self, asset: AllianceAsset) -> None:
        with self._lock:
            self._alliances[asset.denom] = asset

    def add_validator(self, validator: ValidatorResponse) -> None:
        with self._lock:
            self._validators[validator.validator_addr] = validator

    def add_delegation(
        self,
        delegation: DelegationResponse,
        *,
        delegator_addr: Optional[str] = None,
        validator_addr: Optional[str] = None,
        denom: Optional[str] = None,
    ) -> None:
        d = delegation.delegation
        key = (
            delegator_addr or d.delegator_address or "",
            validator_addr or d.validator_address or "",
            denom or d.denom or "",
        )
        if not all(key):
            raise ValueError("delegator, validator and denom are required (explicitly or on the delegation)")
        with self._lock:
            self._delegations[key] = delegation

    def set_rewards(self, delegator_addr: str, validator_addr: str, denom: str, rewards: Sequence[Coin]) -> None:
        with self._lock:
            self._rewards[(delegator_addr, validator_addr, denom)] = tuple(rewards)

    def set_params(self, params: AllianceParams) -> None:
        with self._lock:
            self._params = params

    # --- messages ----------------------------------------------------------

    def execute(self, msg: Union[AllianceMsg, CustomMsg]) -> None:
        with self._lock:
            self._executed.append(msg.msg if isinstance(msg, CustomMsg) else msg)

    @property
    def executed(self) -> List[AllianceMsg]:
        with self._lock:
            return list(self._executed)

    @property
    def requests(self) -> List[Any]:
        """Decoded query requests received so far (oldest first)."""
        with self._lock:
            return list(self._requests)

    # --- QueryChannel ------------------------------------------------------

    def raw_query(self, request: bytes) -> bytes:
        try:
            data = json.loads(request)
        except ValueError as e:
            return query_result_system_error("invalid_request", error=f"parsing request: {e}", request="")

        with self._lock:
            self._requests.append(data)

        custom = data.get("custom") if isinstance(data, dict) else None
        if custom is None:
            kind = next(iter(data), "unknown") if isinstance(data, dict) and data else "unknown"
            return query_result_system_error("unsupported_request", kind=str(kind))

        try:
            query = parse_alliance_query(custom)
        except (UnknownVariantError, ValidationError) as e:
            return query_result_system_error("invalid_request", error=str(e), request=json.dumps(custom))

        handler = getattr(self, f"_answer_{query.tag}")
        try:
            with self._lock:
                response = handler(query)
        except _Rejected as e:
            return query_result_contract_error(str(e))
        return query_result_ok(response.model_dump(mode="json"))

    # --- handlers (called with the lock held) ------------------------------

    def _answer_alliance(self, q: QueryAlliance) -> AllianceResponse:
        asset = self._alliances.get(q.denom)
        if asset is None:
            raise _Rejected(f"alliance asset is not whitelisted: {q.denom}")
        return AllianceResponse(alliance=asset)

    def _answer_alliances(self, q: QueryAlliances) -> AlliancesResponse:
        items = [(denom.encode("utf-8"), a) for denom, a in self._alliances.items()]
        page, pr = paginate(items, q.pagination, default_limit=self._default_limit)
        return AlliancesResponse(alliances=tuple(page), pagination=pr)

    def _answer_alliances_delegations(self, q: QueryAlliancesDelegations) -> AlliancesDelegationsResponse:
        items = [(_delegation_store_key(k), d) for k, d in self._delegations.items()]
        page, pr = paginate(items, q.pagination, default_limit=self._default_limit)
        return AlliancesDelegationsResponse(delegations=tuple(page) or None, pagination=pr)

    def _answer_alliances_delegation_by_validator(
        self, q: QueryAlliancesDelegationByValidator
    ) -> AlliancesDelegationsResponse:
        items = [
            (_delegation_store_key(k), d)
            for k, d in self._delegations.items()
            if k[0] == q.delegator_addr and k[1] == q.validator_addr
        ]
        page, pr = paginate(items, q.pagination, default_limit=self._default_limit)
        return AlliancesDelegationsResponse(delegations=tuple(page) or None, pagination=pr)

    def _answer_delegation(self, q: QueryDelegation) -> SingleDelegationResponse:
        d = self._delegations.get((q.delegator_addr, q.validator_addr, q.denom))
        if d is None:
            raise _Rejected("alliance delegation not found")
        return SingleDelegationResponse(delegation=d)

    def _answer_delegation_rewards(self, q: QueryDelegationRewards) -> RewardsResponse:
        key = (q.delegator_addr, q.validator_addr, q.denom)
        if key not in self._delegations:
            raise _Rejected("alliance delegation not found")
        return RewardsResponse(rewards=self._rewards.get(key, ()))

    def _answer_params(self, q: QueryParams) -> ParamsResponse:  # noqa: ARG002
        return ParamsResponse(params=self._params)

    def _answer_validator(self, q: QueryValidator) -> ValidatorResponse:
        v = self._validators.get(q.validator_addr)
        if v is None:
            raise _Rejected(f"validator not found: {q.validator_addr}")
        return v

    def _answer_validators(self, q: QueryValidators) -> AllValidatorsResponse:
        items = [(addr.encode("utf-8"), v) for addr, v in self._validators.items()]
        page, pr = paginate(items, q.pagination, default_limit=self._default_limit)
        return AllValidatorsResponse(validators=tuple(page), pagination=pr)
