"""OpenAPI 3.0.3 document assembly."""

import logging
from typing import Any

from pydantic import Field

from swagno.components.callbacks import Link
from swagno.components.endpoint import Endpoint
from swagno.components.mime import MIME
from swagno.components.parameter import Location, OpenAPIParameter
from swagno.components.response import Response, status_code
from swagno.components.security import (
    OAuthFlows,
    SecurityScheme,
    api_key_auth,
    basic_auth,
    bearer_auth,
    oauth2_auth,
    open_id_connect_auth,
)
from swagno.components.tag import ExternalDocs, Tag
from swagno.config import Config, Server, ServerVariable
from swagno.document import Document, Info
from swagno.generator.dialect import OPENAPI3
from swagno.generator.response import ResponseGenerator
from swagno.generator.schema import Definition, InlineSchema, WireModel

logger = logging.getLogger(__name__)


class MediaType(WireModel):
    schema_: InlineSchema | None = Field(default=None, alias="schema")
    example: Any = None


class RequestBody(WireModel):
    description: str | None = None
    content: dict[str, MediaType]
    required: bool | None = None


class ResponseObject(WireModel):
    description: str
    content: dict[str, MediaType] | None = None
    links: dict[str, Link] | None = None


class Operation(WireModel):
    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    external_docs: ExternalDocs | None = Field(default=None, alias="externalDocs")
    operation_id: str = Field(alias="operationId")
    parameters: list[OpenAPIParameter] | None = None
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, ResponseObject] = {}
    callbacks: dict[str, dict[str, dict[str, "Operation"]]] | None = None
    deprecated: bool | None = None
    security: list[dict[str, list[str]]] | None = None
    servers: list[Server] | None = None


class Components(WireModel):
    schemas: dict[str, Definition] = {}
    security_schemes: dict[str, SecurityScheme] | None = Field(default=None, alias="securitySchemes")


class OpenAPIDocument(WireModel):
    openapi: str = "3.0.3"
    info: Info
    servers: list[Server] = []
    paths: dict[str, dict[str, Operation]] = {}
    components: Components = Field(default_factory=Components)
    tags: list[Tag] | None = None
    security: list[dict[str, list[str]]] | None = None


def operation_id(method: str, path: str) -> str:
    """"get-_users_id" for GET /users/{id}."""
    return f"{method}-{path}".replace("/", "_").replace("{", "").replace("}", "")


class OpenAPI(Document):
    """Builds an OpenAPI 3.0.3 document from registered endpoints.

    Form parameters are folded into a multipart/form-data request body
    instead of being listed as parameters.
    """

    dialect = OPENAPI3
    default_title = "OpenAPI API"
    default_version = "1.0.0"

    def __init__(self, config: Config | None = None):
        super().__init__(config)
        self.servers: list[Server] = list(self.config.servers)
        self.security_schemes: dict[str, SecurityScheme] = {}
        self.security: list[dict[str, list[str]]] = []

    def configure(self, config: Config) -> None:
        super().configure(config)
        self.servers = list(config.servers)

    def add_server(self, url: str, description: str = "", variables: dict[str, ServerVariable] | None = None) -> None:
        self.servers.append(Server(url=url, description=description or None, variables=variables))

    def add_security_scheme(self, name: str, scheme: SecurityScheme) -> None:
        """Register a scheme under name; raises SecuritySchemeError if it is invalid."""
        scheme.check()
        self.security_schemes[name] = scheme

    def set_basic_auth(self, description: str = "Basic HTTP Authentication") -> None:
        self.add_security_scheme("basicAuth", basic_auth(description))

    def set_bearer_auth(self, bearer_format: str = "JWT", description: str = "Bearer Authentication") -> None:
        self.add_security_scheme("bearerAuth", bearer_auth(bearer_format, description))

    def set_api_key_auth(self, name: str, location: str = "header", description: str = "API Key Authentication") -> None:
        self.add_security_scheme("apiKeyAuth", api_key_auth(name, location, description))

    def set_oauth2_auth(self, flows: OAuthFlows, description: str = "OAuth2 Authentication") -> None:
        self.add_security_scheme("oauth2", oauth2_auth(flows, description))

    def set_open_id_connect_auth(self, url: str, description: str = "OpenID Connect Authentication") -> None:
        self.add_security_scheme("openIdConnect", open_id_connect_auth(url, description))

    def add_global_security(self, requirement: dict[str, list[str]]) -> None:
        self.security.append(requirement)

    def _all_endpoints(self) -> list[Endpoint]:
        endpoints = []
        for endpoint in self.endpoints:
            endpoints.append(endpoint)
            for callback in (endpoint.callbacks or {}).values():
                for operations in callback.expressions.values():
                    endpoints.extend(operations.values())
        return endpoints

    def generate(self) -> OpenAPIDocument:
        paths: dict[str, dict[str, Operation]] = {}
        schemas: dict[str, Definition] = {}
        if not self.endpoints:
            logger.warning("No endpoints found")
        else:
            # definitions first so every $ref below has a target
            schemas = self.build_definitions(self._all_endpoints()).definitions
            responses = ResponseGenerator(self.dialect)
            for endpoint in self.endpoints:
                method = endpoint.method.value.lower()
                paths.setdefault(endpoint.path, {})[method] = self._operation(endpoint, responses)

        return OpenAPIDocument(
            info=self.info(),
            servers=self.servers or [Server(url="/")],
            paths=paths,
            components=Components(schemas=schemas, security_schemes=self.security_schemes or None),
            tags=self.tags or None,
            security=self.security or None,
        )

    def _operation(self, endpoint: Endpoint, responses: ResponseGenerator) -> Operation:
        method = endpoint.method.value.lower()
        if endpoint.external_docs is not None:
            endpoint.external_docs.check()
        parameters = [p.as_openapi() for p in endpoint.params if p.location is not Location.FORM]

        return Operation(
            tags=endpoint.tags or None,
            summary=endpoint.summary or None,
            description=endpoint.description or None,
            external_docs=endpoint.external_docs,
            operation_id=endpoint.operation_id or operation_id(method, endpoint.path),
            parameters=parameters or None,
            request_body=self._request_body(endpoint, responses),
            responses=self._responses(endpoint, responses),
            callbacks=self._callbacks(endpoint, responses),
            deprecated=endpoint.deprecated or None,
            security=endpoint.security,
            servers=endpoint.servers,
        )

    def _request_body(self, endpoint: Endpoint, responses: ResponseGenerator) -> RequestBody | None:
        form = [p for p in endpoint.params if p.location is Location.FORM]
        if endpoint.body is None and not form:
            return None

        content: dict[str, MediaType] = {}
        if endpoint.body is not None:
            schema = responses.body_schema(endpoint.body)
            for mime in endpoint.effective_consumes():
                content[mime] = MediaType(schema_=schema)
        if form:
            form_schema = InlineSchema(
                type="object",
                properties={p.name: p.schema_v3() for p in form},
                required=[p.name for p in form if p.required] or None,
            )
            if MIME.MULTIFORM.value in content:
                logger.warning(
                    "Form parameters of %s %s replace the multipart/form-data body schema",
                    endpoint.method.value, endpoint.path,
                )
            content[MIME.MULTIFORM.value] = MediaType(schema_=form_schema)

        required = endpoint.body is not None or any(p.required for p in form)
        return RequestBody(description="Request body", content=content, required=required or None)

    def _responses(self, endpoint: Endpoint, responses: ResponseGenerator) -> dict[str, ResponseObject]:
        result = {}
        for response in endpoint.returns():
            schema = responses.generate(response)
            content = None
            if schema is not None:
                content = {mime.value: MediaType(schema_=schema) for mime in endpoint.produces}
            links = response.links if isinstance(response, Response) else None
            for link in (links or {}).values():
                link.check()
            result[status_code(response)] = ResponseObject(
                description=response.get_description(),
                content=content,
                links=links,
            )
        return result

    def _callbacks(
        self, endpoint: Endpoint, responses: ResponseGenerator
    ) -> dict[str, dict[str, dict[str, Operation]]] | None:
        if not endpoint.callbacks:
            return None
        result = {}
        for name, callback in endpoint.callbacks.items():
            callback.check()
            result[name] = {
                expression: {
                    method.lower(): self._operation(operation, responses)
                    for method, operation in operations.items()
                }
                for expression, operations in callback.expressions.items()
            }
        return result
