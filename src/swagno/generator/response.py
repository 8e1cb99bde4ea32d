"""Response generator: the inline schema for a response or request body payload."""

from typing import Any

from swagno.components.response import Response

from .dialect import Dialect
from .fields import semantic_kind
from .hashing import definition_name
from .properties import items_schema
from .reflection import Map, Pointer, Primitive, Slice, Struct, describe_value, struct_fields
from .schema import InlineSchema


class ResponseGenerator:
    def __init__(self, dialect: Dialect):
        self.dialect = dialect

    def generate(self, model: Any) -> InlineSchema | None:
        """Schema referencing the definitions the DefinitionGenerator registered.

        Returns None for payloads that carry no schema: field-less structs
        and anything that is not a struct, slice or map.
        """
        if isinstance(model, Response):
            model = model.model
        if model is None:
            return None
        desc = describe_value(model)
        if isinstance(desc, Pointer):
            desc = desc.elem

        if isinstance(desc, Slice):
            return InlineSchema(type="array", items=items_schema(desc.elem, self.dialect))
        if isinstance(desc, Map):
            return InlineSchema(ref=self.dialect.ref(definition_name(desc)))
        if isinstance(desc, Struct):
            if desc.well_known:
                items = items_schema(desc, self.dialect)
                return InlineSchema(type=items.type, format=items.format)
            if struct_fields(desc.cls, desc.bindings):
                return InlineSchema(ref=self.dialect.ref(desc.name))
        return None

    def body_schema(self, body: Any) -> InlineSchema:
        """Schema for a request body; primitives and empty structs are kept inline."""
        schema = self.generate(body)
        if schema is not None:
            return schema
        desc = describe_value(body)
        if isinstance(desc, Struct):
            return InlineSchema(ref=self.dialect.ref(desc.name))
        if isinstance(desc, Primitive):
            return InlineSchema(type=semantic_kind(desc.kind), format=desc.format)
        return InlineSchema(type="object")
