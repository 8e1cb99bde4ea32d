"""Build the schema property for a single struct field or map entry."""

import logging
from typing import TYPE_CHECKING, Any

from .dialect import Dialect
from .fields import FieldInfo, classify, semantic_kind
from .hashing import definition_name
from .reflection import Interface, Map, Pointer, Primitive, Slice, Struct, StructField, describe_value
from .schema import AMBIGUOUS_TYPE, SchemaItems, SchemaProperty

if TYPE_CHECKING:
    from .definition import DefinitionGenerator

logger = logging.getLogger(__name__)


def items_schema(elem: Any, dialect: Dialect) -> SchemaItems:
    """Items schema for an array element."""
    if isinstance(elem, Pointer):
        elem = elem.elem
    if isinstance(elem, Struct):
        if elem.well_known == "duration":
            return SchemaItems(type="integer")
        if elem.well_known:
            return SchemaItems(type="string", format=elem.well_known)
        return SchemaItems(ref=dialect.ref(elem.name))
    if isinstance(elem, Map):
        return SchemaItems(ref=dialect.ref(definition_name(elem)))
    if isinstance(elem, Slice):
        return SchemaItems(type="array", items=items_schema(elem.elem, dialect))
    if isinstance(elem, Primitive):
        return SchemaItems(
            type=semantic_kind(elem.kind),
            format=elem.format,
            enum=list(elem.enum) if elem.enum else None,
        )
    # anything goes
    return SchemaItems()


class PropertyBuilder:
    """Turns struct fields into SchemaProperty objects.

    Struct, map and array-of-struct fields call back into the owning
    DefinitionGenerator so the referenced definitions get registered too.
    """

    def __init__(self, generator: "DefinitionGenerator"):
        self.generator = generator
        self.dialect = generator.dialect

    def build(self, owner: Struct, field: StructField) -> SchemaProperty | None:
        """Property for field, or None when the field is skipped."""
        info = classify(field, self.dialect)
        if not info.name:
            return None
        if isinstance(field.type, Pointer):
            # optional fields are only required when tagged so
            info = info._replace(required=field.required)
        return self._build(owner, field.type, info)

    def _build(self, owner: Struct, desc: Any, info: FieldInfo) -> SchemaProperty | None:
        if isinstance(desc, Slice):
            return self._array(desc.elem, info)
        if isinstance(desc, Struct):
            return self._struct(desc, info)
        if isinstance(desc, Pointer):
            return self._pointer(owner, desc.elem, info)
        if isinstance(desc, Map):
            return self._map(owner, desc, info)
        if isinstance(desc, Interface):
            return self._common(SchemaProperty(type=AMBIGUOUS_TYPE), info)
        if isinstance(desc, Primitive):
            return self._common(self._scalar(desc), info)
        logger.debug("Skipping field %s of kind %s", info.name, desc.kind)
        return None

    def _common(self, prop: SchemaProperty, info: FieldInfo) -> SchemaProperty:
        prop.example = info.example
        prop.description = info.description
        prop.required = info.required
        return prop

    def _scalar(self, desc: Any) -> SchemaProperty:
        items = items_schema(desc, self.dialect)
        return SchemaProperty(type=items.type, format=items.format, enum=items.enum)

    def _array(self, elem: Any, info: FieldInfo) -> SchemaProperty:
        if isinstance(elem, Pointer):
            elem = elem.elem
        if isinstance(elem, (Struct, Map)):
            # no-op while elem is still being built, e.g. a Node holding list[Node]
            self.generator.create_definition(elem)
        prop = SchemaProperty(type="array", items=items_schema(elem, self.dialect))
        return self._common(prop, info)

    def _struct(self, desc: Struct, info: FieldInfo) -> SchemaProperty:
        if desc.well_known:
            return self._common(self._scalar(desc), info)
        self.generator.create_definition(desc)
        return self._common(SchemaProperty(ref=self.dialect.ref(desc.name)), info)

    def _pointer(self, owner: Struct, elem: Any, info: FieldInfo) -> SchemaProperty | None:
        if isinstance(elem, Struct) and elem.cls is owner.cls and not self.generator.recursive_pointer_refs:
            return SchemaProperty(example=f"Recursive Type: {elem.name}", description=info.description)
        prop = self._build(owner, elem, info)
        if prop is not None and self.dialect.nullable:
            prop.nullable = True
        return prop

    def _map(self, owner: Struct, desc: Map, info: FieldInfo) -> SchemaProperty:
        name = f"{owner.name}.{info.name}"
        self.generator.register_map(name, desc)
        return self._common(SchemaProperty(ref=self.dialect.ref(name)), info)

    def entry(self, desc: Any) -> SchemaProperty:
        """Property describing a map value type."""
        if isinstance(desc, Pointer):
            desc = desc.elem
        if isinstance(desc, Slice):
            elem = desc.elem.elem if isinstance(desc.elem, Pointer) else desc.elem
            if isinstance(elem, (Struct, Map)):
                self.generator.create_definition(elem)
            return SchemaProperty(type="array", items=items_schema(elem, self.dialect))
        if isinstance(desc, Interface):
            return SchemaProperty(type=AMBIGUOUS_TYPE)
        if isinstance(desc, Map) or (isinstance(desc, Struct) and not desc.well_known):
            self.generator.create_definition(desc)
            return SchemaProperty(ref=self.dialect.ref(definition_name(desc)))
        return self._scalar(desc)

    def value(self, value: Any) -> SchemaProperty:
        """Property describing one entry of a literal map payload."""
        if value is None:
            return SchemaProperty(type=AMBIGUOUS_TYPE)
        desc = describe_value(value)
        prop = self.entry(desc)
        if isinstance(desc, Primitive) and not desc.enum:
            prop.example = value
        return prop
