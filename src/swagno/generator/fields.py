"""Field classifier: normalise one struct field into name, kind, example and flags."""

import re
from typing import Any, NamedTuple

from .dialect import Dialect
from .reflection import StructField

SKIP = ""

_UINT = re.compile(r"\d+")
_INT = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class FieldInfo(NamedTuple):
    name: str
    kind: str
    example: Any
    required: bool
    description: str | None


def semantic_kind(raw_kind: str) -> str:
    """Map a reflected kind to the JSON schema type name."""
    if raw_kind == "interface":
        return "interface"
    if "int" in raw_kind.lower():
        return "integer"
    if raw_kind in ("array", "slice"):
        return "array"
    if raw_kind == "bool":
        return "boolean"
    if raw_kind in ("float32", "float64"):
        return "number"
    return raw_kind


def json_name(field: StructField) -> str:
    """Property name from the json tag; SKIP for fields tagged "-"."""
    if field.json == "-":
        return SKIP
    return field.json.split(",")[0]


def is_omitempty(field: StructField) -> bool:
    return "omitempty" in field.json.split(",")[1:]


def parse_example(raw: Any, dialect: Dialect) -> Any:
    """Parse a textual example into a number when it looks like one."""
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        return raw
    if dialect.float_examples:
        if _INT.fullmatch(raw):
            return int(raw)
        if _FLOAT.fullmatch(raw):
            return float(raw)
        return raw
    if _UINT.fullmatch(raw):
        return int(raw)
    return raw


def is_required(field: StructField, dialect: Dialect) -> bool:
    if field.required:
        return True
    return dialect.required_by_default and not is_omitempty(field)


def classify(field: StructField, dialect: Dialect) -> FieldInfo:
    return FieldInfo(
        name=json_name(field),
        kind=field.type.kind,
        example=parse_example(field.example, dialect),
        required=is_required(field, dialect),
        description=field.desc or None,
    )
