"""OpenAPI 3 runtime expressions, callbacks and links."""

import re
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from swagno.errors import LinkError, RuntimeExpressionError
from swagno.generator.schema import WireModel

_NAME = r"[a-zA-Z0-9_-]+"
_EXPRESSIONS = (
    re.compile(r"\$url"),
    re.compile(r"\$method"),
    re.compile(r"\$statusCode"),
    re.compile(rf"\$request\.(header|query|path)\.{_NAME}"),
    re.compile(r"\$request\.body(#/.+)?"),
    re.compile(rf"\$response\.header\.{_NAME}"),
    re.compile(r"\$response\.body(#/.+)?"),
)
_PARSE = re.compile(
    rf"\$(?P<source>url|method|statusCode)"
    rf"|\$(?P<message>request|response)\.(?:(?P<location>header|query|path)\.(?P<name>{_NAME})"
    rf"|body(?:#(?P<pointer>/.+))?)"
)
# "{$request.body#/callbackUrl}" inside a callback URL template
_EMBEDDED = re.compile(r"\{(\$[^}]*)\}")


class RuntimeExpression(NamedTuple):
    expression: str
    # url, method, statusCode, request or response
    source: str
    # header, query, path or body
    location: str = ""
    # header / parameter name, or JSON pointer into the body
    pointer: str = ""


def validate_runtime_expression(expression: str) -> None:
    if not any(p.fullmatch(expression) for p in _EXPRESSIONS):
        raise RuntimeExpressionError(f"invalid runtime expression: {expression!r}")


def parse_runtime_expression(expression: str) -> RuntimeExpression:
    expression = expression.strip()
    if not expression:
        raise RuntimeExpressionError("empty runtime expression")
    validate_runtime_expression(expression)
    match = _PARSE.fullmatch(expression)
    if match is None:
        raise RuntimeExpressionError(f"invalid runtime expression: {expression!r}")
    if match["source"]:
        return RuntimeExpression(expression, match["source"])
    if match["location"]:
        return RuntimeExpression(expression, match["message"], match["location"], match["name"])
    return RuntimeExpression(expression, match["message"], "body", match["pointer"] or "")


def _callback_expressions(key: str) -> list[str]:
    embedded = _EMBEDDED.findall(key)
    return embedded if embedded else [key]


class Callback(BaseModel):
    """Out-of-band requests keyed by a runtime expression.

    Each expression maps HTTP methods (lower case) to the Endpoint
    describing the request the API will send.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    expressions: dict[str, dict[str, Any]] = {}

    def add_expression(self, expression: str, operations: dict[str, Any]) -> "Callback":
        for expr in _callback_expressions(expression):
            validate_runtime_expression(expr)
        self.expressions[expression] = operations
        return self

    def check(self) -> None:
        if not self.expressions:
            raise RuntimeExpressionError("callback must contain at least one expression")
        for key in self.expressions:
            for expr in _callback_expressions(key):
                validate_runtime_expression(expr)


class LinkServer(WireModel):
    url: str
    description: str | None = None


class Link(WireModel):
    operation_ref: str | None = Field(default=None, alias="operationRef")
    operation_id: str | None = Field(default=None, alias="operationId")
    parameters: dict[str, Any] | None = None
    request_body: Any = Field(default=None, alias="requestBody")
    description: str | None = None
    server: LinkServer | None = None

    def add_parameter(self, name: str, expression: Any) -> "Link":
        if self.parameters is None:
            self.parameters = {}
        self.parameters[name] = expression
        return self

    def check(self) -> None:
        if not self.operation_ref and not self.operation_id:
            raise LinkError("link must have either operationRef or operationId")
        if self.operation_ref and self.operation_id:
            raise LinkError("link cannot have both operationRef and operationId")
        for name, value in (self.parameters or {}).items():
            if not name:
                raise LinkError("link parameter name cannot be empty")
            if isinstance(value, str) and value.startswith("$"):
                try:
                    validate_runtime_expression(value)
                except RuntimeExpressionError as err:
                    raise LinkError(f"invalid expression for link parameter {name!r}: {err}") from err
