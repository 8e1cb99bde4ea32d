import pytest

from swagno.components.security import (
    OAuthFlows,
    Scope,
    SecurityScheme,
    api_key_auth,
    api_key_definition,
    basic_auth,
    bearer_auth,
    oauth2_auth,
    oauth2_definition,
    open_id_connect_auth,
    scopes,
)
from swagno.errors import SecuritySchemeError


class TestScopes:
    def test_scopes_mapping(self):
        assert scopes(Scope("read", "Read"), Scope("write", "Write")) == {"read": "Read", "write": "Write"}


class TestSwaggerDefinitions:
    @pytest.mark.parametrize("flow, has_auth_url, has_token_url", [
        ("implicit", True, False),
        ("password", False, True),
        ("application", False, True),
        ("accessCode", True, True),
    ])
    def test_oauth2_urls_follow_flow(self, flow, has_auth_url, has_token_url):
        wire = oauth2_definition(flow, "https://a", "https://t").to_wire()
        assert ("authorizationUrl" in wire) is has_auth_url
        assert ("tokenUrl" in wire) is has_token_url

    def test_api_key_definition(self):
        assert api_key_definition("token", "query").to_wire() == {"type": "apiKey", "name": "token", "in": "query"}


class TestSecuritySchemeCheck:
    def test_valid_factories(self):
        basic_auth().check()
        bearer_auth("JWT").check()
        api_key_auth("X-Key", "cookie").check()
        open_id_connect_auth("https://id.example.com").check()
        oauth2_auth(OAuthFlows().with_client_credentials("https://t", {})).check()

    def test_custom_http_scheme_token(self):
        SecurityScheme(type="http", scheme="HOBA").check()

    @pytest.mark.parametrize("scheme", [
        SecurityScheme(type="apiKey", location="header"),
        SecurityScheme(type="apiKey", name="k", location="body"),
        SecurityScheme(type="http"),
        SecurityScheme(type="http", scheme="two words"),
        SecurityScheme(type="oauth2"),
        SecurityScheme(type="openIdConnect"),
        SecurityScheme(type="mutualTLS"),
    ])
    def test_invalid_schemes(self, scheme):
        with pytest.raises(SecuritySchemeError):
            scheme.check()


class TestOAuthFlows:
    def test_at_least_one_flow(self):
        with pytest.raises(SecuritySchemeError):
            OAuthFlows().check()

    def test_authorization_code_needs_both_urls(self):
        flows = OAuthFlows().with_authorization_code("https://a", "", {})
        with pytest.raises(SecuritySchemeError):
            flows.check()

    def test_missing_scopes(self):
        flows = OAuthFlows().with_implicit("https://a", {})
        flows.implicit.scopes = None
        with pytest.raises(SecuritySchemeError):
            flows.check()

    def test_refresh_url(self):
        flows = OAuthFlows().with_password("https://t", {"read": "Read"})
        flows.password.with_refresh_url("https://r")
        flows.check()
        assert flows.to_wire()["password"] == {
            "tokenUrl": "https://t",
            "refreshUrl": "https://r",
            "scopes": {"read": "Read"},
        }
