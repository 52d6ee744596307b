"""
Typed bindings for the Alliance host module.

- contracts: message/query/response shapes and their wire codecs
- AllianceMsgBuilder: the four alliance actions as host-level messages
- AllianceQuerier: the nine alliance queries over any query channel
"""

from __future__ import annotations

from alliance_bindings.builder import AllianceMsgBuilder
from alliance_bindings.capabilities import REQUIRED_CAPABILITIES, requires_alliance
from alliance_bindings.errors import (
    AllianceBindingError,
    FormatError,
    PaginationError,
    QueryError,
    UnknownVariantError,
)
from alliance_bindings.querier import AllianceQuerier
from alliance_bindings.transport import HttpQueryChannel, QueryChannel

__all__ = [
    "AllianceBindingError",
    "AllianceMsgBuilder",
    "AllianceQuerier",
    "FormatError",
    "HttpQueryChannel",
    "PaginationError",
    "QueryChannel",
    "QueryError",
    "REQUIRED_CAPABILITIES",
    "UnknownVariantError",
    "requires_alliance",
]
