"""Security definitions (Swagger 2.0) and security schemes (OpenAPI 3.0)."""

import re
from typing import NamedTuple
from urllib.parse import urlsplit

from pydantic import Field

from swagno.errors import SecuritySchemeError
from swagno.generator.schema import WireModel

API_KEY_LOCATIONS = ("query", "header", "cookie")
HTTP_SCHEMES = ("basic", "bearer", "digest")

# RFC 7235 auth-scheme token
_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class Scope(NamedTuple):
    name: str
    description: str


def scopes(*items: Scope) -> dict[str, str]:
    """Build a scopes mapping: scopes(Scope("read", "Read access"), ...)."""
    return {item.name: item.description for item in items}


class SecurityDefinition(WireModel):
    """Swagger 2.0 securityDefinitions entry."""

    type: str
    description: str | None = None
    name: str | None = None
    location: str | None = Field(default=None, alias="in")
    flow: str | None = None
    authorization_url: str | None = Field(default=None, alias="authorizationUrl")
    token_url: str | None = Field(default=None, alias="tokenUrl")
    scopes: dict[str, str] | None = None


def basic_definition(description: str = "") -> SecurityDefinition:
    return SecurityDefinition(type="basic", description=description or None)


def api_key_definition(name: str, location: str, description: str = "") -> SecurityDefinition:
    return SecurityDefinition(type="apiKey", name=name, location=location, description=description or None)


def oauth2_definition(
    flow: str,
    authorization_url: str = "",
    token_url: str = "",
    scopes: dict[str, str] | None = None,
    description: str = "",
) -> SecurityDefinition:
    """OAuth2 definition; which URL is kept depends on the flow."""
    definition = SecurityDefinition(type="oauth2", flow=flow, scopes=scopes or {}, description=description or None)
    if flow in ("implicit", "accessCode"):
        definition.authorization_url = authorization_url
    if flow in ("password", "accessCode", "application"):
        definition.token_url = token_url
    return definition


class OAuthFlow(WireModel):
    authorization_url: str | None = Field(default=None, alias="authorizationUrl")
    token_url: str | None = Field(default=None, alias="tokenUrl")
    refresh_url: str | None = Field(default=None, alias="refreshUrl")
    scopes: dict[str, str] | None = None

    def with_refresh_url(self, url: str) -> "OAuthFlow":
        self.refresh_url = url
        return self


class OAuthFlows(WireModel):
    implicit: OAuthFlow | None = None
    password: OAuthFlow | None = None
    client_credentials: OAuthFlow | None = Field(default=None, alias="clientCredentials")
    authorization_code: OAuthFlow | None = Field(default=None, alias="authorizationCode")

    def with_implicit(self, authorization_url: str, scopes: dict[str, str]) -> "OAuthFlows":
        self.implicit = OAuthFlow(authorization_url=authorization_url, scopes=scopes)
        return self

    def with_password(self, token_url: str, scopes: dict[str, str]) -> "OAuthFlows":
        self.password = OAuthFlow(token_url=token_url, scopes=scopes)
        return self

    def with_client_credentials(self, token_url: str, scopes: dict[str, str]) -> "OAuthFlows":
        self.client_credentials = OAuthFlow(token_url=token_url, scopes=scopes)
        return self

    def with_authorization_code(
        self, authorization_url: str, token_url: str, scopes: dict[str, str]
    ) -> "OAuthFlows":
        self.authorization_code = OAuthFlow(
            authorization_url=authorization_url, token_url=token_url, scopes=scopes
        )
        return self

    def check(self) -> None:
        flows = {
            "implicit": (self.implicit, ("authorization_url",)),
            "password": (self.password, ("token_url",)),
            "clientCredentials": (self.client_credentials, ("token_url",)),
            "authorizationCode": (self.authorization_code, ("authorization_url", "token_url")),
        }
        if all(flow is None for flow, _ in flows.values()):
            raise SecuritySchemeError("oauth2 security scheme requires at least one flow")
        for flow_name, (flow, urls) in flows.items():
            if flow is None:
                continue
            for attr in urls:
                _check_url(getattr(flow, attr), f"{flow_name} flow {attr}")
            if flow.refresh_url:
                _check_url(flow.refresh_url, f"{flow_name} flow refresh_url")
            if flow.scopes is None:
                raise SecuritySchemeError(f"{flow_name} flow requires scopes")


class SecurityScheme(WireModel):
    """OpenAPI 3.0 securitySchemes entry."""

    type: str
    description: str | None = None
    name: str | None = None
    location: str | None = Field(default=None, alias="in")
    scheme: str | None = None
    bearer_format: str | None = Field(default=None, alias="bearerFormat")
    flows: OAuthFlows | None = None
    open_id_connect_url: str | None = Field(default=None, alias="openIdConnectUrl")

    def check(self) -> None:
        """Raise SecuritySchemeError when required fields for the type are missing."""
        if self.type == "apiKey":
            if not self.name:
                raise SecuritySchemeError("apiKey security scheme requires a name")
            if self.location not in API_KEY_LOCATIONS:
                raise SecuritySchemeError(f"apiKey 'in' must be one of: {', '.join(API_KEY_LOCATIONS)}")
        elif self.type == "http":
            if not self.scheme:
                raise SecuritySchemeError("http security scheme requires a scheme")
            if self.scheme.lower() not in HTTP_SCHEMES and not _TOKEN.fullmatch(self.scheme):
                raise SecuritySchemeError(f"invalid http auth scheme: {self.scheme!r}")
        elif self.type == "oauth2":
            if self.flows is None:
                raise SecuritySchemeError("oauth2 security scheme requires flows")
            self.flows.check()
        elif self.type == "openIdConnect":
            _check_url(self.open_id_connect_url, "openIdConnectUrl")
        else:
            raise SecuritySchemeError(f"invalid security scheme type: {self.type!r}")


def _check_url(url: str | None, what: str) -> None:
    if not url:
        raise SecuritySchemeError(f"{what} is required")
    try:
        urlsplit(url)
    except ValueError as err:
        raise SecuritySchemeError(f"invalid {what} {url!r}: {err}") from err


def basic_auth(description: str = "") -> SecurityScheme:
    return SecurityScheme(type="http", scheme="basic", description=description or None)


def bearer_auth(bearer_format: str = "", description: str = "") -> SecurityScheme:
    return SecurityScheme(
        type="http", scheme="bearer", bearer_format=bearer_format or None, description=description or None
    )


def api_key_auth(name: str, location: str, description: str = "") -> SecurityScheme:
    return SecurityScheme(type="apiKey", name=name, location=location, description=description or None)


def oauth2_auth(flows: OAuthFlows, description: str = "") -> SecurityScheme:
    return SecurityScheme(type="oauth2", flows=flows, description=description or None)


def open_id_connect_auth(url: str, description: str = "") -> SecurityScheme:
    return SecurityScheme(type="openIdConnect", open_id_connect_url=url, description=description or None)
