import logging

import pytest

from swagno.components.response import new
from swagno.errors import SchemaGenerationError
from swagno.generator.context import DefinitionTable
from swagno.generator.definition import DefinitionGenerator
from swagno.generator.dialect import OPENAPI3, SWAGGER2
from swagno.generator.hashing import map_hash
from swagno.generator.schema import AMBIGUOUS_TYPE, Definition, SchemaProperty

from models import Author, Book, Customer, Empty, LinkedNode, Node, Order, Page, Product, Sizes


def _generate(value, dialect=SWAGGER2, **kwargs) -> dict:
    table = DefinitionTable(dialect)
    DefinitionGenerator(table, **kwargs).create_definition(value)
    return table.to_wire()


class TestStructDefinitions:
    def test_swagger_product(self):
        definitions = _generate(Product)
        assert set(definitions) == {"models.Product", "models.Sizes"}
        assert definitions["models.Product"] == {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string", "example": "Lamp", "description": "Display name"},
                "price": {"type": "number", "example": "9.5"},
                "status": {"type": "string", "enum": ["active", "archived"]},
                "sizes": {"$ref": "#/definitions/models.Sizes"},
                "tags": {"type": "array", "items": {"type": "string"}},
                "createdAt": {"type": "string", "format": "date-time"},
                "category_id": {"type": "integer"},
            },
        }

    def test_openapi_product(self):
        product = _generate(Product, OPENAPI3)["models.Product"]
        assert product["properties"]["price"] == {"type": "number", "example": 9.5}
        assert product["properties"]["sizes"] == {"$ref": "#/components/schemas/models.Sizes"}
        assert product["properties"]["category_id"] == {"type": "integer", "nullable": True}
        assert product["required"] == ["id", "name", "price", "status", "sizes", "tags", "createdAt"]

    def test_openapi_required_respects_defaults(self):
        sizes = _generate(Sizes, OPENAPI3)["models.Sizes"]
        assert sizes["required"] == ["width"]

    def test_empty_struct_still_defined(self):
        assert _generate(Empty) == {"models.Empty": {"type": "object", "properties": {}}}

    def test_pydantic_model(self):
        definitions = _generate(Customer, OPENAPI3)
        customer = definitions["models.Customer"]
        assert customer["properties"]["emailAddress"] == {
            "type": "string",
            "example": "a@b.c",
            "description": "Contact email",
        }
        assert customer["properties"]["nickname"] == {"type": "string", "nullable": True}
        assert "secret" not in customer["properties"]
        assert customer["properties"]["orders"] == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/models.Order"},
        }
        assert customer["required"] == ["id", "emailAddress"]
        assert "models.Order" in definitions


class TestCycles:
    def test_self_array_refs_itself(self):
        definitions = _generate(Node)
        assert set(definitions) == {"models.Node"}
        assert definitions["models.Node"]["properties"]["children"] == {
            "type": "array",
            "items": {"$ref": "#/definitions/models.Node"},
        }

    def test_self_pointer_placeholder(self):
        definitions = _generate(LinkedNode)
        assert definitions["models.LinkedNode"]["properties"]["next"] == {
            "example": "Recursive Type: models.LinkedNode",
            "description": "Next node",
        }

    def test_self_pointer_as_ref(self):
        definitions = _generate(LinkedNode, OPENAPI3, recursive_pointer_refs=True)
        assert definitions["models.LinkedNode"]["properties"]["next"] == {
            "$ref": "#/components/schemas/models.LinkedNode",
            "description": "Next node",
            "nullable": True,
        }

    def test_indirect_cycle_terminates(self):
        definitions = _generate(Book)
        assert set(definitions) == {"models.Book", "models.Author"}
        assert definitions["models.Book"]["properties"]["author"] == {"$ref": "#/definitions/models.Author"}
        assert definitions["models.Author"]["properties"]["books"]["items"] == {"$ref": "#/definitions/models.Book"}

    def test_cycle_entered_from_other_side(self):
        assert set(_generate(Author)) == {"models.Book", "models.Author"}


class TestFieldKinds:
    def test_embedded_map_interface_and_func(self):
        definitions = _generate(Order, OPENAPI3)
        order = definitions["models.Order"]
        assert list(order["properties"]) == ["id", "lines", "notes", "created_by", "updated_by"]
        assert order["properties"]["lines"] == {"$ref": "#/components/schemas/models.Order.lines"}
        assert order["properties"]["notes"] == {"type": AMBIGUOUS_TYPE}
        assert order["required"] == ["id", "lines", "created_by"]
        assert definitions["models.Order.lines"] == {
            "type": "object",
            "properties": {"string": {"type": "integer"}},
        }
        assert "models.Audit" in definitions


class TestSliceAndMapPayloads:
    def test_slice_defines_element_without_prefix(self):
        definitions = _generate(list[Product])
        assert "models.Product" in definitions
        assert not any(name.startswith("[]") for name in definitions)

    def test_slice_of_primitives_defines_nothing(self):
        assert _generate(list[str]) == {}

    def test_literal_map_walks_entries(self):
        payload = {"status": "ok", "count": 3, "sizes": Sizes(width=1)}
        definitions = _generate(payload)
        name = f"dict_{map_hash(payload)}"
        assert definitions[name] == {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "ok"},
                "count": {"type": "integer", "example": 3},
                "sizes": {"$ref": "#/definitions/models.Sizes"},
            },
        }
        assert "models.Sizes" in definitions

    def test_literal_map_name_is_order_independent(self):
        first = _generate({"a": 1, "b": "x"})
        second = _generate({"b": "x", "a": 1})
        assert set(first) == set(second)

    def test_nested_literal_map_gets_its_own_definition(self):
        inner = {"x": 1}
        definitions = _generate({"inner": inner}, OPENAPI3)
        assert f"dict_{map_hash(inner)}" in definitions

    def test_annotated_map_of_structs(self):
        definitions = _generate(dict[str, Product])
        name = f"dict_{map_hash({'str': 'models.Product'})}"
        assert definitions[name]["properties"] == {"string": {"$ref": "#/definitions/models.Product"}}
        assert "models.Product" in definitions


class TestGenericStructs:
    def test_each_parametrisation_is_its_own_definition(self):
        table = DefinitionTable(SWAGGER2)
        generator = DefinitionGenerator(table)
        assert generator.create_definition(Page[Product]) == "models.Page[models.Product]"
        assert generator.create_definition(Page[Sizes]) == "models.Page[models.Sizes]"
        definitions = table.to_wire()
        assert "models.Page" not in definitions
        assert {"models.Product", "models.Sizes"} <= set(definitions)
        assert definitions["models.Page[models.Product]"]["properties"]["items"] == {
            "type": "array",
            "items": {"$ref": "#/definitions/models.Product"},
        }
        assert definitions["models.Page[models.Sizes]"]["properties"]["items"] == {
            "type": "array",
            "items": {"$ref": "#/definitions/models.Sizes"},
        }

    def test_instance_keeps_its_type_argument(self):
        page = Page[Sizes](items=[Sizes(width=1)], total=1)
        assert set(_generate(page)) == {"models.Page[models.Sizes]", "models.Sizes"}


class TestEntryPoints:
    def test_response_wrapper_is_unwrapped(self):
        assert set(_generate(new(Sizes, 200, "OK"))) == {"models.Sizes"}

    def test_response_without_model(self):
        assert _generate(new(None, 204, "No content")) == {}

    def test_primitive_defines_nothing(self):
        table = DefinitionTable(SWAGGER2)
        assert DefinitionGenerator(table).create_definition(int) is None
        assert len(table) == 0

    def test_returns_definition_name(self):
        table = DefinitionTable(SWAGGER2)
        assert DefinitionGenerator(table).create_definition(Sizes(width=2)) == "models.Sizes"

    def test_none_raises(self):
        with pytest.raises(SchemaGenerationError):
            _generate(None)

    def test_repeated_calls_are_idempotent(self):
        table = DefinitionTable(OPENAPI3)
        generator = DefinitionGenerator(table)
        generator.create_definition(Product)
        before = table.to_wire()
        generator.create_definition(Product)
        assert table.to_wire() == before


class TestDefinitionTable:
    def test_overwrite_with_different_content_warns(self, caplog):
        table = DefinitionTable(SWAGGER2)
        table.put("x", Definition())
        with caplog.at_level(logging.WARNING, logger="swagno.generator.context"):
            table.put("x", Definition(properties={"a": SchemaProperty(type="string")}))
        assert "registered twice" in caplog.text
        assert table["x"].properties["a"].type == "string"

    def test_identical_overwrite_is_silent(self, caplog):
        table = DefinitionTable(SWAGGER2)
        table.put("x", Definition())
        with caplog.at_level(logging.WARNING, logger="swagno.generator.context"):
            table.put("x", Definition())
        assert caplog.text == ""
