"""Response wrappers pairing a payload model with a status code and description."""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, field_validator

from .callbacks import Link


@runtime_checkable
class ResponseInfo(Protocol):
    """Anything that can describe itself as an endpoint response.

    Model instances may implement this directly instead of being wrapped
    in a Response.
    """

    def get_description(self) -> str: ...

    def get_return_code(self) -> str: ...


class Response(BaseModel):
    """A payload (type, instance or literal) returned with a given status code."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    model: Any
    return_code: str
    description: str = ""
    # OpenAPI 3 only, rendered as the response's links
    links: dict[str, Link] | None = None

    @field_validator("return_code", mode="before")
    @classmethod
    def _code_to_str(cls, value: Any) -> str:
        return str(value)

    def get_description(self) -> str:
        return self.description

    def get_return_code(self) -> str:
        return self.return_code


def new(model: Any, return_code: str | int, description: str = "") -> Response:
    """Shorthand for Response(model=..., return_code=..., description=...)."""
    return Response(model=model, return_code=return_code, description=description)


def status_code(response: ResponseInfo) -> str:
    return str(response.get_return_code())
