"""Tests for seqspec.generator.security."""

from __future__ import annotations

from seqspec.generator.security import build_security_scheme, security_requirement
from seqspec.models import GeneratorConfig
from seqspec.parser.notes import parse_security_descriptor


class TestBuildSecurityScheme:
    """Descriptor to Security Scheme Object mapping."""

    def setup_method(self) -> None:
        self.config = GeneratorConfig()

    def _scheme(self, text: str):
        return build_security_scheme(parse_security_descriptor(text), self.config)

    def test_bearer(self) -> None:
        assert self._scheme("bearerAuth") == {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }

    def test_basic(self) -> None:
        assert self._scheme("basicAuth") == {"type": "http", "scheme": "basic"}

    def test_api_key_location(self) -> None:
        assert self._scheme("apiKey in query") == {
            "type": "apiKey",
            "name": "X-API-Key",
            "in": "query",
        }
        assert self._scheme("apiKey")["in"] == "header"

    def test_api_key_header_name_from_config(self) -> None:
        self.config = GeneratorConfig(api_key_header="X-Token")
        assert self._scheme("apiKey")["name"] == "X-Token"

    def test_oauth2_scopes(self) -> None:
        scheme = self._scheme("oauth2[read,write]")
        flow = scheme["flows"]["implicit"]
        assert flow["authorizationUrl"] == "https://example.com/oauth/authorize"
        assert flow["scopes"] == {"read": "read permission", "write": "write permission"}

    def test_oauth2_without_scopes(self) -> None:
        assert self._scheme("oauth2")["flows"]["implicit"]["scopes"] == {}

    def test_openid_connect(self) -> None:
        assert self._scheme("openIdConnect") == {
            "type": "openIdConnect",
            "openIdConnectUrl": "https://example.com/.well-known/openid-configuration",
        }

    def test_custom_is_dropped(self) -> None:
        assert self._scheme("hmacSignature") is None


class TestSecurityRequirement:
    """Requirement entries carry scopes only for OAuth2."""

    def test_plain_scheme(self) -> None:
        assert security_requirement(parse_security_descriptor("bearerAuth")) == {
            "bearerAuth": []
        }

    def test_oauth2_scopes(self) -> None:
        descriptor = parse_security_descriptor("oauth2[read,write]")
        assert security_requirement(descriptor) == {"oauth2:read,write": ["read", "write"]}
