"""
Capability marker for contracts that depend on the Alliance module.

Importing this package signals that the embedding contract requires "alliance"
support on the chain it runs on. The marker carries no runtime behavior.
"""

from __future__ import annotations

REQUIRED_CAPABILITIES: frozenset[str] = frozenset({"alliance"})


def requires_alliance() -> None:
    """No-op marker checked by deployment tooling."""
