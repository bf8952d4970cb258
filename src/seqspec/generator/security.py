"""Map parsed security descriptors to OpenAPI Security Scheme Objects."""

from __future__ import annotations

from typing import Any, Optional

from seqspec.models import GeneratorConfig, SecurityDescriptor, SecurityKind


def build_security_scheme(
    descriptor: SecurityDescriptor, config: GeneratorConfig
) -> Optional[dict[str, Any]]:
    """Return the Security Scheme Object for *descriptor*.

    Args:
        descriptor: A descriptor parsed from a ``Security:`` note line.
        config: Supplies the apiKey parameter name and the OAuth2 / OpenID
            Connect URLs.

    Returns:
        The scheme dict, or ``None`` for custom descriptors, which have no
        defined mapping and are dropped from generated documents.
    """
    if descriptor.kind == SecurityKind.BEARER:
        return {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}

    if descriptor.kind == SecurityKind.BASIC:
        return {"type": "http", "scheme": "basic"}

    if descriptor.kind == SecurityKind.API_KEY:
        return {
            "type": "apiKey",
            "name": config.api_key_header,
            "in": descriptor.location or "header",
        }

    if descriptor.kind == SecurityKind.OAUTH2:
        return {
            "type": "oauth2",
            "flows": {
                "implicit": {
                    "authorizationUrl": config.oauth2_authorization_url,
                    "scopes": {scope: f"{scope} permission" for scope in descriptor.scopes},
                }
            },
        }

    if descriptor.kind == SecurityKind.OPENID_CONNECT:
        return {"type": "openIdConnect", "openIdConnectUrl": config.openid_connect_url}

    return None


def security_requirement(descriptor: SecurityDescriptor) -> dict[str, list[str]]:
    """Return the operation-level requirement entry for *descriptor*."""
    scopes = list(descriptor.scopes) if descriptor.kind == SecurityKind.OAUTH2 else []
    return {descriptor.key: scopes}
