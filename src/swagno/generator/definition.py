"""Definition generator: register a named object schema for every struct reachable from a value."""

import logging
from typing import Any

from swagno.components.response import Response

from .context import DefinitionTable
from .fields import json_name, semantic_kind
from .hashing import definition_name
from .properties import PropertyBuilder
from .reflection import Map, Pointer, Slice, Struct, StructField, describe_value, struct_fields
from .schema import Definition, SchemaProperty

logger = logging.getLogger(__name__)


class DefinitionGenerator:
    """Walks types and fills a DefinitionTable.

    Types currently being built are tracked in the table, so any cycle
    (a Node holding list[Node], or A -> B -> A) ends in a $ref instead of
    recursing forever.
    """

    def __init__(self, table: DefinitionTable, recursive_pointer_refs: bool = False):
        self.table = table
        self.dialect = table.dialect
        self.recursive_pointer_refs = recursive_pointer_refs
        self.properties = PropertyBuilder(self)

    def create_definition(self, value: Any) -> str | None:
        """Register the definition for value and everything it references.

        value may be a type, an instance, a literal dict or list, or a
        Response wrapper. Returns the definition name, or None when the
        value needs no definition (primitives, time types, ...).
        """
        if isinstance(value, Response):
            # a Response without a model documents an empty body, e.g. 204
            return None if value.model is None else self.create_definition(value.model)
        desc = describe_value(value)
        if isinstance(desc, (Slice, Pointer)):
            return self.create_definition(desc.elem)
        if isinstance(desc, Struct):
            if desc.well_known:
                return None
            return self._struct_definition(desc)
        if isinstance(desc, Map):
            return self._map_definition(desc)
        return None

    def _struct_definition(self, desc: Struct) -> str:
        name = desc.name
        if self.table.is_building(name) or self.table.is_done(name, desc.cls):
            return name

        properties: dict[str, SchemaProperty] = {}
        embedded: dict[str, SchemaProperty] = {}
        with self.table.building(name):
            for field in struct_fields(desc.cls, desc.bindings):
                if field.embedded:
                    embedded.update(self._embedded_properties(field))
                    continue
                prop = self.properties.build(desc, field)
                if prop is not None:
                    properties[json_name(field)] = prop

        for key, prop in embedded.items():
            properties.setdefault(key, prop)

        required = None
        if self.dialect.required_list:
            required = [key for key, prop in properties.items() if prop.required] or None
        self.table.put(name, Definition(properties=properties, required=required), source=desc.cls)
        return name

    def _embedded_properties(self, field: StructField) -> dict[str, SchemaProperty]:
        inner = field.type.elem if isinstance(field.type, Pointer) else field.type
        if not isinstance(inner, Struct) or inner.well_known:
            logger.warning("Embedded field %s is not a struct, ignoring it", field.name)
            return {}
        name = self.create_definition(inner)
        definition = self.table.get(name)
        if definition is None:
            # still being built higher up the stack
            logger.debug("Cannot merge %s into its own ancestor", name)
            return {}
        return {key: prop.model_copy() for key, prop in definition.properties.items()}

    def _map_definition(self, desc: Map) -> str:
        name = definition_name(desc)
        if desc.entries is not None:
            self.register_entries(name, desc.entries)
        else:
            self.register_map(name, desc)
        return name

    def register_map(self, name: str, desc: Map) -> None:
        """One-property definition keyed by the map's key type."""
        if self.table.is_building(name):
            return
        with self.table.building(name):
            entry = self.properties.entry(desc.value)
        key = semantic_kind(desc.key.kind)
        self.table.put(name, Definition(properties={key: entry}))

    def register_entries(self, name: str, entries: dict) -> None:
        """Definition with one property per entry of a literal map payload."""
        if self.table.is_building(name):
            return
        with self.table.building(name):
            properties = {str(key): self.properties.value(value) for key, value in entries.items()}
        self.table.put(name, Definition(properties=properties))
