from __future__ import annotations

import logging
from typing import Callable, Generic, Optional, TypeVar, Union

from alliance_bindings.common.logging import log_event
from alliance_bindings.contracts.envelope import CustomMsg
from alliance_bindings.contracts.msg import (
    AllianceMsg,
    MsgClaimDelegationRewards,
    MsgDelegate,
    MsgRedelegate,
    MsgUndelegate,
)
from alliance_bindings.contracts.values import Coin

logger = logging.getLogger(__name__)

M = TypeVar("M")

CoinLike = Union[Coin, dict]


def _coin(amount: CoinLike) -> Coin:
    return amount if isinstance(amount, Coin) else Coin.model_validate(amount)


class AllianceMsgBuilder(Generic[M]):
    """
    Builds host-level outgoing messages from the four alliance actions.

    `wrap` turns an AllianceMsg into the caller's message type (any type that can be
    constructed from an AllianceMsg). The default wraps it in `CustomMsg`.

    Values pass through unmodified: amount positivity, address format and
    authorization are checked by the host module, not here.
    """

    def __init__(self, wrap: Optional[Callable[[AllianceMsg], M]] = None) -> None:
        self._wrap: Callable[[AllianceMsg], M] = wrap or CustomMsg  # type: ignore[assignment]

    def _build(self, msg: AllianceMsg) -> M:
        log_event(logger, "alliance.msg_built", severity="DEBUG", variant=msg.tag)
        return self._wrap(msg)

    def delegate(self, delegator_address: str, validator_address: str, amount: CoinLike) -> M:
        return self._build(
            MsgDelegate(
                delegator_address=delegator_address,
                validator_address=validator_address,
                amount=_coin(amount),
            )
        )

    def undelegate(self, delegator_address: str, validator_address: str, amount: CoinLike) -> M:
        return self._build(
            MsgUndelegate(
                delegator_address=delegator_address,
                validator_address=validator_address,
                amount=_coin(amount),
            )
        )

    def redelegate(
        self,
        delegator_address: str,
        validator_src_address: str,
        validator_dst_address: str,
        amount: CoinLike,
    ) -> M:
        return self._build(
            MsgRedelegate(
                delegator_address=delegator_address,
                validator_src_address=validator_src_address,
                validator_dst_address=validator_dst_address,
                amount=_coin(amount),
            )
        )

    def claim_delegation_rewards(self, delegator_address: str, validator_address: str, denom: str) -> M:
        return self._build(
            MsgClaimDelegationRewards(
                delegator_address=delegator_address,
                validator_address=validator_address,
                denom=denom,
            )
        )
