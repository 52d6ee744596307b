from __future__ import annotations

from typing import Any, ClassVar, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from alliance_bindings.errors import UnknownVariantError

V = TypeVar("V", bound="TaggedVariant")


class ContractFragment(BaseModel):
    """
    Base for values answered by the host (responses and their nested structs).

    - Immutable instances (frozen) to discourage in-place mutation across boundaries.
    - Forward-compatible parsing (extra="allow") so host-side additions do not break
      older consumers that safely ignore unknown fields.
    """

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
    )


class ContractRequest(BaseModel):
    """
    Base for values sent to the host (messages, queries, pagination).

    Unknown fields are refused: the host dispatches on tag plus field shape.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )


class TaggedVariant(ContractRequest):
    """
    One variant of an externally tagged enum.

    Wire form: {"<tag>": {<fields>}}, e.g. {"delegate": {"delegator_address": ...}}.
    """

    tag: ClassVar[str]

    def to_wire(self) -> Dict[str, Any]:
        return {self.tag: self.model_dump(mode="json")}


def variant_table(*variants: Type[V]) -> Dict[str, Type[V]]:
    table: Dict[str, Type[V]] = {}
    for cls in variants:
        if cls.tag in table:
            raise ValueError(f"duplicate variant tag: {cls.tag}")
        table[cls.tag] = cls
    return table


def parse_variant(table: Mapping[str, Type[V]], data: Any, *, kind: str) -> V:
    """
    Decode an externally tagged payload using a tag -> class table.

    Raises UnknownVariantError when the payload is not a single-key object naming a
    known tag, and pydantic.ValidationError when the fields do not match.
    """
    if isinstance(data, TaggedVariant) and data.tag in table and isinstance(data, table[data.tag]):
        return data  # type: ignore[return-value]
    if not isinstance(data, Mapping) or len(data) != 1:
        raise UnknownVariantError(f"{kind} payload must be an object with exactly one tag")
    tag, body = next(iter(data.items()))
    cls = table.get(str(tag))
    if cls is None:
        raise UnknownVariantError(f"unknown {kind} variant: {tag!r}")
    return cls.model_validate(body if body is not None else {})
