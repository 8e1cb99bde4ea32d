"""Endpoint description: one HTTP method on one path."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from swagno.config import Server

from .callbacks import Callback
from .mime import MIME
from .parameter import Location, Parameter
from .response import ResponseInfo
from .tag import ExternalDocs


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"


class Endpoint(BaseModel):
    """Everything needed to document one operation.

    body, successful_returns and errors hold types, instances or literal
    dicts; each return is either a Response or an object implementing
    ResponseInfo. Endpoints are never modified by document generation.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    method: Method
    path: str
    params: list[Parameter] = []
    body: Any = None
    successful_returns: list[Any] = []
    errors: list[Any] = []
    tags: list[str] = []
    summary: str = ""
    description: str = ""
    consumes: list[MIME] = [MIME.JSON]
    produces: list[MIME] = [MIME.JSON]
    security: list[dict[str, list[str]]] | None = None
    deprecated: bool = False
    operation_id: str | None = None
    # OpenAPI 3 only
    external_docs: ExternalDocs | None = None
    servers: list[Server] | None = None
    callbacks: dict[str, Callback] | None = None

    @field_validator("successful_returns", "errors")
    @classmethod
    def _check_returns(cls, values: list[Any]) -> list[Any]:
        for value in values:
            # classes pass the runtime protocol check too
            if isinstance(value, type) or not isinstance(value, ResponseInfo):
                raise ValueError(f"{value!r} does not provide get_description() and get_return_code()")
        return values

    def has_form_params(self) -> bool:
        return any(p.location is Location.FORM for p in self.params)

    def effective_consumes(self) -> list[str]:
        """Consumed MIME types, with multipart/form-data added for form parameters."""
        consumes = [m.value for m in self.consumes]
        if self.has_form_params() and MIME.MULTIFORM.value not in consumes:
            consumes.append(MIME.MULTIFORM.value)
        return consumes

    def returns(self) -> list[Any]:
        return [*self.successful_returns, *self.errors]
