from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Type, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, create_model

from alliance_bindings.contracts.base import TaggedVariant
from alliance_bindings.contracts.msg import MSG_VARIANTS
from alliance_bindings.contracts.query import QUERY_RESPONSES, QUERY_VARIANTS

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def _schemas_dir() -> Path:
    # alliance_bindings/contracts/generate_json_schemas.py -> alliance_bindings/contracts/schemas
    return Path(__file__).resolve().parent / "schemas"


def _wire_model(cls: Type[TaggedVariant]) -> Type[BaseModel]:
    # {"<tag>": {...fields}} as a one-field model so the union stays unambiguous.
    return create_model(
        f"{cls.__name__}Wire",
        __config__=ConfigDict(extra="forbid"),
        **{cls.tag: (cls, ...)},
    )


def _tagged_union_schema(variants: Mapping[str, Type[TaggedVariant]], title: str) -> Dict[str, Any]:
    wrappers = tuple(_wire_model(cls) for cls in variants.values())
    schema = TypeAdapter(Union[wrappers]).json_schema(mode="validation")  # type: ignore[valid-type]
    schema["title"] = title
    return schema


def build_schemas() -> Dict[str, Dict[str, Any]]:
    """
    JSON schemas for the alliance wire contract, keyed by output name.

    - alliance_msg:           the four outgoing message variants
    - alliance_query:         the nine query variants
    - response_to_<tag>:      the response bound to each query variant
    """
    out: Dict[str, Dict[str, Any]] = {
        "alliance_msg": _tagged_union_schema(MSG_VARIANTS, "AllianceMsg"),
        "alliance_query": _tagged_union_schema(QUERY_VARIANTS, "AllianceQuery"),
    }
    for tag, model in QUERY_RESPONSES.items():
        schema = model.model_json_schema(mode="serialization")
        schema["title"] = model.__name__
        out[f"response_to_{tag}"] = schema

    for name, schema in out.items():
        schema.setdefault("$schema", SCHEMA_DIALECT)
        schema["$id"] = f"alliance_bindings/{name}.schema.json"
    return out


def main() -> None:
    out_dir = _schemas_dir()
    out_dir.mkdir(parents=True, exist_ok=True)

    for name, schema in build_schemas().items():
        path = out_dir / f"{name}.schema.json"
        path.write_text(json.dumps(schema, indent=2, sort_keys=True) + "\n", encoding="utf-8")


if __name__ == "__main__":
    main()
