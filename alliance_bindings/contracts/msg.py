"""
State-changing actions a contract may request of the Alliance module.

Exactly four variants. The host dispatches on variant tag plus field shape, so tags
and field names are part of the wire contract and must only change together with
the host module.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Union

from alliance_bindings.contracts.base import TaggedVariant, parse_variant, variant_table
from alliance_bindings.contracts.types import Addr, Denom
from alliance_bindings.contracts.values import Coin


class MsgDelegate(TaggedVariant):
    """Stake `amount` from `delegator_address` to `validator_address`."""

    tag: ClassVar[str] = "delegate"

    delegator_address: Addr
    validator_address: Addr
    amount: Coin


class MsgUndelegate(TaggedVariant):
    """Begin unstaking `amount`."""

    tag: ClassVar[str] = "undelegate"

    delegator_address: Addr
    validator_address: Addr
    amount: Coin


class MsgRedelegate(TaggedVariant):
    """Move a stake between validators without unstaking."""

    tag: ClassVar[str] = "redelegate"

    delegator_address: Addr
    validator_src_address: Addr
    validator_dst_address: Addr
    amount: Coin


class MsgClaimDelegationRewards(TaggedVariant):
    """Claim accrued rewards of one delegation, for one reward denom."""

    tag: ClassVar[str] = "claim_delegation_rewards"

    delegator_address: Addr
    validator_address: Addr
    denom: Denom


AllianceMsg = Union[MsgDelegate, MsgUndelegate, MsgRedelegate, MsgClaimDelegationRewards]

MSG_VARIANTS = variant_table(MsgDelegate, MsgUndelegate, MsgRedelegate, MsgClaimDelegationRewards)


def parse_alliance_msg(data: Any) -> AllianceMsg:
    """Decode a wire payload such as {"delegate": {...}} into its variant."""

    return parse_variant(MSG_VARIANTS, data, kind="alliance msg")


def alliance_msg_to_wire(msg: AllianceMsg) -> Dict[str, Any]:
    return msg.to_wire()
