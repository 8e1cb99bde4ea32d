"""Endpoint parameters and their Swagger 2.0 / OpenAPI 3.0 renderings."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from swagno.generator.schema import InlineSchema, SchemaItems, WireModel


class Location(str, Enum):
    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"
    # Swagger 2 only; OpenAPI 3 moves these into the request body
    FORM = "formData"


class ParamType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    FILE = "file"


class CollectionFormat(str, Enum):
    CSV = "csv"
    SSV = "ssv"
    TSV = "tsv"
    PIPES = "pipes"
    MULTI = "multi"


class SwaggerParameter(WireModel):
    name: str
    location: str = Field(alias="in")
    required: bool = False
    description: str | None = None
    type: str | None = None
    format: str | None = None
    items: SchemaItems | None = None
    enum: list[Any] | None = None
    default: Any = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    pattern: str | None = None
    min_items: int | None = Field(default=None, alias="minItems")
    max_items: int | None = Field(default=None, alias="maxItems")
    unique_items: bool | None = Field(default=None, alias="uniqueItems")
    multiple_of: int | float | None = Field(default=None, alias="multipleOf")
    collection_format: str | None = Field(default=None, alias="collectionFormat")
    # body parameters only
    schema_: InlineSchema | None = Field(default=None, alias="schema")


class OpenAPIParameter(WireModel):
    name: str
    location: str = Field(alias="in")
    description: str | None = None
    required: bool | None = None
    deprecated: bool | None = None
    allow_empty_value: bool | None = Field(default=None, alias="allowEmptyValue")
    style: str | None = None
    explode: bool | None = None
    allow_reserved: bool | None = Field(default=None, alias="allowReserved")
    schema_: InlineSchema | None = Field(default=None, alias="schema")
    example: Any = None


class Parameter(BaseModel):
    """A path, query, header, cookie or form parameter.

    Path parameters are always required. description keeps what the caller
    passed; range and length constraints are appended when rendering, e.g.
    "Page size\\n (min: 1 max: 100)".
    """

    name: str
    type: ParamType
    location: Location
    required: bool = False
    description: str = ""
    format: str | None = None
    # element type of array parameters
    items_type: ParamType | None = None
    enum: list[Any] | None = None
    default: Any = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False
    multiple_of: int | float | None = None
    collection_format: CollectionFormat | None = None
    # OpenAPI 3 only
    deprecated: bool = False
    allow_empty_value: bool = False
    style: str | None = None
    explode: bool | None = None
    allow_reserved: bool = False
    example: Any = None

    @model_validator(mode="after")
    def _finish(self) -> "Parameter":
        if self.location is Location.PATH:
            self.required = True
        return self

    def _items(self) -> SchemaItems | None:
        if self.type is not ParamType.ARRAY:
            return None
        items_type = self.items_type or ParamType.STRING
        return SchemaItems(type=items_type.value, enum=self.enum)

    def _enum(self) -> list[Any] | None:
        # array enums live on the items
        return None if self.type is ParamType.ARRAY else self.enum

    def as_swagger(self) -> SwaggerParameter:
        return SwaggerParameter(
            name=self.name,
            location=self.location.value,
            required=self.required,
            description=_describe_constraints(self) or None,
            type=self.type.value,
            format=self.format,
            items=self._items(),
            enum=self._enum(),
            default=self.default,
            minimum=self.minimum,
            maximum=self.maximum,
            min_length=self.min_length,
            max_length=self.max_length,
            pattern=self.pattern,
            min_items=self.min_items,
            max_items=self.max_items,
            unique_items=self.unique_items or None,
            multiple_of=self.multiple_of,
            collection_format=self.collection_format.value if self.collection_format else None,
        )

    def schema_v3(self) -> InlineSchema:
        """Schema object holding the type and constraints for OpenAPI 3."""
        type_, fmt = self.type.value, self.format
        if self.type is ParamType.FILE:
            type_, fmt = "string", "binary"
        return InlineSchema(
            type=type_,
            format=fmt,
            items=self._items(),
            enum=self._enum(),
            default=self.default,
            minimum=self.minimum,
            maximum=self.maximum,
            min_length=self.min_length,
            max_length=self.max_length,
            pattern=self.pattern,
            min_items=self.min_items,
            max_items=self.max_items,
            unique_items=self.unique_items or None,
            multiple_of=self.multiple_of,
        )

    def as_openapi(self) -> OpenAPIParameter:
        return OpenAPIParameter(
            name=self.name,
            location=self.location.value,
            description=_describe_constraints(self) or None,
            required=self.required or None,
            deprecated=self.deprecated or None,
            allow_empty_value=self.allow_empty_value or None,
            style=self.style,
            explode=self.explode,
            allow_reserved=self.allow_reserved or None,
            schema_=self.schema_v3(),
            example=self.example,
        )


def _describe_constraints(param: Parameter) -> str:
    parts = []
    if param.minimum:
        parts.append(f"min: {param.minimum}")
    if param.maximum:
        parts.append(f"max: {param.maximum}")
    if param.min_length:
        parts.append(f"minLength: {param.min_length}")
    if param.max_length:
        parts.append(f"maxLength: {param.max_length}")
    if param.pattern:
        parts.append(f"pattern: {param.pattern}")
    if not parts:
        return param.description
    description = param.description + "\n" if param.description else ""
    return description + " (" + " ".join(parts) + ")"


def int_param(name: str, location: Location, **options: Any) -> Parameter:
    return Parameter(name=name, type=ParamType.INTEGER, location=location, **options)


def str_param(name: str, location: Location, **options: Any) -> Parameter:
    return Parameter(name=name, type=ParamType.STRING, location=location, **options)


def bool_param(name: str, location: Location, **options: Any) -> Parameter:
    return Parameter(name=name, type=ParamType.BOOLEAN, location=location, **options)


def file_param(name: str, **options: Any) -> Parameter:
    """Uploaded file, always sent as multipart form data."""
    return Parameter(name=name, type=ParamType.FILE, location=Location.FORM, **options)


def int_enum_param(name: str, location: Location, values: list[int], **options: Any) -> Parameter:
    return Parameter(name=name, type=ParamType.INTEGER, location=location, enum=list(values), **options)


def str_enum_param(name: str, location: Location, values: list[str], **options: Any) -> Parameter:
    return Parameter(name=name, type=ParamType.STRING, location=location, enum=list(values), **options)


def int_arr_param(name: str, location: Location, values: list[int] | None = None, **options: Any) -> Parameter:
    return Parameter(
        name=name,
        type=ParamType.ARRAY,
        items_type=ParamType.INTEGER,
        location=location,
        enum=list(values) if values else None,
        **options,
    )


def str_arr_param(name: str, location: Location, values: list[str] | None = None, **options: Any) -> Parameter:
    return Parameter(
        name=name,
        type=ParamType.ARRAY,
        items_type=ParamType.STRING,
        location=location,
        enum=list(values) if values else None,
        **options,
    )
