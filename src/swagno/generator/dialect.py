"""Differences between the Swagger 2.0 and OpenAPI 3.0 schema output."""

from pydantic import BaseModel, ConfigDict


class Dialect(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    ref_prefix: str
    # OpenAPI 3 examples are parsed as floats, Swagger 2 examples as unsigned ints
    float_examples: bool
    # fields without omitempty count as required
    required_by_default: bool
    required_list: bool
    nullable: bool

    def ref(self, name: str) -> str:
        return self.ref_prefix + name


SWAGGER2 = Dialect(
    name="swagger 2.0",
    ref_prefix="#/definitions/",
    float_examples=False,
    required_by_default=False,
    required_list=False,
    nullable=False,
)

OPENAPI3 = Dialect(
    name="openapi 3.0.3",
    ref_prefix="#/components/schemas/",
    float_examples=True,
    required_by_default=True,
    required_list=True,
    nullable=True,
)
