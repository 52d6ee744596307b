from __future__ import annotations

from alliance_bindings.transport.base import QueryChannel
from alliance_bindings.transport.http import HttpQueryChannel

__all__ = ["HttpQueryChannel", "QueryChannel"]
