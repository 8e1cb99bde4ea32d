"""Wire models for schemas shared by both document formats."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

AMBIGUOUS_TYPE = "Ambiguous Type: interface{}"


class WireModel(BaseModel):
    """Base for everything that ends up in a generated document."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SchemaItems(WireModel):
    type: str | None = None
    format: str | None = None
    ref: str | None = Field(default=None, alias="$ref")
    enum: list[Any] | None = None
    items: "SchemaItems | None" = None


class SchemaProperty(WireModel):
    type: str | None = None
    format: str | None = None
    ref: str | None = Field(default=None, alias="$ref")
    items: SchemaItems | None = None
    enum: list[Any] | None = None
    example: Any = None
    description: str | None = None
    nullable: bool | None = None
    # used to fill the owning definition's required list, never serialised
    required: bool = Field(default=False, exclude=True)


class Definition(WireModel):
    type: str = "object"
    properties: dict[str, SchemaProperty] = {}
    required: list[str] | None = None


class InlineSchema(WireModel):
    """Schema placed directly into a response, body or parameter."""

    ref: str | None = Field(default=None, alias="$ref")
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
    nullable: bool | None = None
    properties: dict[str, "InlineSchema"] | None = None
    required: list[str] | None = None
