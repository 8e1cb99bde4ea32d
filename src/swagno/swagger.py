"""Swagger 2.0 document assembly."""

import logging

from pydantic import Field

from swagno.components.endpoint import Endpoint
from swagno.components.parameter import SwaggerParameter
from swagno.components.response import status_code
from swagno.components.security import (
    SecurityDefinition,
    api_key_definition,
    basic_definition,
    oauth2_definition,
)
from swagno.components.tag import Tag
from swagno.config import Config
from swagno.document import Document, Info
from swagno.generator.dialect import SWAGGER2
from swagno.generator.response import ResponseGenerator
from swagno.generator.schema import Definition, InlineSchema, WireModel

logger = logging.getLogger(__name__)


class SwaggerResponse(WireModel):
    description: str
    schema_: InlineSchema | None = Field(default=None, alias="schema")


class SwaggerOperation(WireModel):
    description: str = ""
    summary: str = ""
    operation_id: str = Field(alias="operationId")
    consumes: list[str] = []
    produces: list[str] = []
    tags: list[str] = []
    parameters: list[SwaggerParameter] = []
    responses: dict[str, SwaggerResponse] = {}
    security: list[dict[str, list[str]]] | None = None
    deprecated: bool | None = None


class SwaggerDocument(WireModel):
    swagger: str = "2.0"
    info: Info
    base_path: str = Field(default="/", alias="basePath")
    host: str | None = None
    schemes: list[str] = []
    paths: dict[str, dict[str, SwaggerOperation]] = {}
    definitions: dict[str, Definition] = {}
    security_definitions: dict[str, SecurityDefinition] | None = Field(default=None, alias="securityDefinitions")
    tags: list[Tag] | None = None


class Swagger(Document):
    """Builds a Swagger 2.0 document from registered endpoints.

        swagger = Swagger(Config(title="Shop", version="v1", host="localhost"))
        swagger.add_endpoints(endpoints)
        swagger.export("swagger.json")
    """

    dialect = SWAGGER2
    default_title = "Swagger API"
    default_version = "1.0"

    def __init__(self, config: Config | None = None):
        super().__init__(config)
        self.security_definitions: dict[str, SecurityDefinition] = {}

    def set_basic_auth(self, description: str = "Basic Authentication") -> None:
        self.security_definitions["basicAuth"] = basic_definition(description)

    def set_api_key_auth(self, name: str, location: str = "header", description: str = "API Key Authentication") -> None:
        self.security_definitions[name] = api_key_definition(name, location, description)

    def set_oauth2_auth(
        self,
        flow: str,
        authorization_url: str = "",
        token_url: str = "",
        scopes: dict[str, str] | None = None,
        description: str = "OAuth2 Authentication",
    ) -> None:
        self.security_definitions["oauth2"] = oauth2_definition(
            flow, authorization_url, token_url, scopes, description
        )

    def generate(self) -> SwaggerDocument:
        paths: dict[str, dict[str, SwaggerOperation]] = {}
        definitions: dict[str, Definition] = {}
        if not self.endpoints:
            logger.warning("No endpoints found")
        else:
            # definitions first so every $ref below has a target
            definitions = self.build_definitions(self.endpoints).definitions
            responses = ResponseGenerator(self.dialect)
            for endpoint in self.endpoints:
                method = endpoint.method.value.lower()
                paths.setdefault(endpoint.path, {})[method] = self._operation(endpoint, responses)

        return SwaggerDocument(
            info=self.info(),
            base_path=self.config.base_path,
            host=self.config.host or None,
            schemes=self.config.schemes,
            paths=paths,
            definitions=definitions,
            security_definitions=self.security_definitions or None,
            tags=self.tags or None,
        )

    def _operation(self, endpoint: Endpoint, responses: ResponseGenerator) -> SwaggerOperation:
        method = endpoint.method.value.lower()
        parameters = [p.as_swagger() for p in endpoint.params]
        if endpoint.body is not None:
            parameters.append(SwaggerParameter(
                name="body",
                location="body",
                description="body",
                required=True,
                schema_=responses.body_schema(endpoint.body),
            ))

        return SwaggerOperation(
            description=endpoint.description,
            summary=endpoint.summary,
            operation_id=endpoint.operation_id or f"{method}-{endpoint.path}",
            consumes=endpoint.effective_consumes(),
            produces=[m.value for m in endpoint.produces],
            tags=endpoint.tags,
            parameters=parameters,
            responses=self._responses(endpoint, responses),
            security=endpoint.security,
            deprecated=endpoint.deprecated or None,
        )

    def _responses(self, endpoint: Endpoint, responses: ResponseGenerator) -> dict[str, SwaggerResponse]:
        result = {}
        for response in endpoint.returns():
            result[status_code(response)] = SwaggerResponse(
                description=response.get_description(),
                schema_=responses.generate(response),
            )
        return result
