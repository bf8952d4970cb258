"""Generate one OpenAPI 3.0 document per target service.

:func:`generate_specs` makes two passes over the syntax tree's interactions:

1. **Usage counting** -- infer the schema of every body and count, per
   service, how often each structural fingerprint occurs. Tags from all
   interactions are collected at the same time.
2. **Document building** -- for each interaction, lazily create the target
   service's document, then add an operation with its parameters, security
   requirements, response and request body. Body schemas go through a
   per-service :class:`~seqspec.generator.components.ComponentRegistry` so
   that shapes used more than once become shared ``$ref`` components.

All working state (counters, registries, scheme tables) is local to a single
call; nothing persists between calls.
"""

from __future__ import annotations

import logging
import re
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Any, Optional

from seqspec.generator.components import ComponentRegistry, fingerprint
from seqspec.generator.schema import SchemaObject, infer_schema
from seqspec.generator.security import build_security_scheme, security_requirement
from seqspec.models import DiagramAST, GeneratorConfig, HTTPMethod, Interaction

logger = logging.getLogger(__name__)

# Methods whose body is sent as a request body. For every other method the
# body describes the response payload.
BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH})

DEFAULT_STATUS = "200"
DEFAULT_RESPONSE_DESCRIPTION = "Response description"

_PATH_PARAM_PATTERN = re.compile(r"\{([^}]+)\}")


@dataclass
class _Service:
    """A document under construction plus its component registry."""

    document: dict[str, Any]
    registry: ComponentRegistry

    @property
    def security_schemes(self) -> dict[str, Any]:
        return self.document["components"]["securitySchemes"]


def generate_specs(
    ast: DiagramAST, config: Optional[GeneratorConfig] = None
) -> dict[str, dict[str, Any]]:
    """Generate OpenAPI documents from a parsed diagram.

    Args:
        ast: Output of :func:`~seqspec.parser.builder.parse`.
        config: Generation settings. Defaults to :class:`GeneratorConfig()`.

    Returns:
        A mapping of service name (each distinct interaction target) to its
        OpenAPI document, in order of first appearance.

    Example::

        docs = generate_specs(parse_diagram(text))
        docs["API"]["paths"]["/users"]["get"]["responses"]["200"]
    """
    if config is None:
        config = GeneratorConfig()

    usage, tags = _count_usage(ast.interactions)
    services: dict[str, _Service] = {}

    for interaction in ast.interactions:
        if not interaction.method or not interaction.path or not interaction.target:
            continue

        service = services.get(interaction.target)
        if service is None:
            service = _Service(
                document=_new_document(interaction.target, tags, config),
                registry=ComponentRegistry(usage[interaction.target]),
            )
            services[interaction.target] = service

        _add_operation(service, interaction, config)

    documents: dict[str, dict[str, Any]] = {}
    for name, service in services.items():
        _finalize_components(service)
        documents[name] = service.document
        logger.debug(
            "Generated %s: %d path(s), %d component schema(s)",
            name,
            len(service.document["paths"]),
            len(service.registry.schemas),
        )
    return documents


def extract_parameters(raw_path: str) -> tuple[str, list[dict[str, Any]]]:
    """Split a request path into its template and parameter objects.

    Each ``key=value`` pair of the query string becomes an optional query
    parameter with the value as its example; each ``{name}`` placeholder
    becomes a required path parameter.

    Args:
        raw_path: The path as written on the request arrow, e.g.
            ``/users/{id}?expand=orders``.

    Returns:
        ``(path_template, parameters)`` -- the path without its query string,
        and query parameters followed by path parameters.
    """
    path, _, query = raw_path.partition("?")
    parameters: list[dict[str, Any]] = []

    if query:
        for pair in query.split("&"):
            key, _, value = pair.partition("=")
            if key:
                parameters.append(
                    {"name": key, "in": "query", "schema": {"type": "string", "example": value}}
                )

    for name in _PATH_PARAM_PATTERN.findall(path):
        parameters.append(
            {"name": name, "in": "path", "required": True, "schema": {"type": "string"}}
        )

    return path, parameters


def _count_usage(
    interactions: list[Interaction],
) -> tuple[dict[str, Counter[str]], list[str]]:
    """First pass: per-service fingerprint counts and the global tag list."""
    usage: dict[str, Counter[str]] = defaultdict(Counter)
    tags: list[str] = []

    for interaction in interactions:
        for tag in interaction.tags:
            if tag not in tags:
                tags.append(tag)

        if not interaction.target or interaction.body is None:
            continue
        schema = _safe_infer(interaction)
        if schema is not None and schema.get("properties"):
            usage[interaction.target][fingerprint(schema)] += 1

    return usage, tags


def _new_document(service: str, tags: list[str], config: GeneratorConfig) -> dict[str, Any]:
    document: dict[str, Any] = {
        "openapi": config.openapi_version,
        "info": {
            "title": config.title_template.format(service=service),
            "version": config.api_version,
        },
    }
    if tags:
        document["tags"] = [{"name": tag} for tag in tags]
    document["paths"] = {}
    document["components"] = {"securitySchemes": {}, "schemas": {}}
    return document


def _safe_infer(interaction: Interaction) -> Optional[SchemaObject]:
    """Infer the body schema, logging and returning ``None`` on failure."""
    try:
        return infer_schema(interaction.body)
    except (TypeError, ValueError, RecursionError) as exc:
        logger.warning(
            "Could not infer schema for %s %s (line %d): %s",
            interaction.method.value.upper(),
            interaction.path,
            interaction.line,
            exc,
        )
        return None


def _add_operation(service: _Service, interaction: Interaction, config: GeneratorConfig) -> None:
    path, parameters = extract_parameters(interaction.path)
    method = interaction.method

    operation: dict[str, Any] = {"summary": interaction.summary or f"Operation for {path}"}
    if interaction.description:
        operation["description"] = interaction.description
    if interaction.tags:
        operation["tags"] = list(interaction.tags)
    if interaction.operation_id:
        operation["operationId"] = interaction.operation_id
    if interaction.deprecated:
        operation["deprecated"] = True
    if interaction.external_docs is not None:
        operation["externalDocs"] = interaction.external_docs.model_dump(exclude_none=True)
    if parameters:
        operation["parameters"] = parameters

    requirements = _register_security(service, interaction, config)
    if requirements:
        operation["security"] = requirements

    operation["responses"] = {}
    if interaction.response is not None:
        status = interaction.response.status or DEFAULT_STATUS
        schema: SchemaObject = {"type": "object", "example": {}}
        if method not in BODY_METHODS and interaction.body is not None:
            inferred = _safe_infer(interaction)
            if inferred is not None:
                schema = service.registry.extract(inferred)
        media_type = interaction.response_media_type or config.response_media_type
        operation["responses"][status] = {
            "description": interaction.response.description or DEFAULT_RESPONSE_DESCRIPTION,
            "content": {media_type: {"schema": schema}},
        }

    if method in BODY_METHODS and interaction.body is not None:
        inferred = _safe_infer(interaction)
        schema = service.registry.extract(inferred) if inferred is not None else {"type": "object"}
        media_type = interaction.request_media_type or config.request_media_type
        operation["requestBody"] = {
            "required": True,
            "content": {media_type: {"schema": schema}},
        }

    service.document["paths"].setdefault(path, {})[method.value] = operation


def _register_security(
    service: _Service, interaction: Interaction, config: GeneratorConfig
) -> list[dict[str, list[str]]]:
    """Register the interaction's schemes and return its requirement list."""
    requirements: list[dict[str, list[str]]] = []
    seen: set[str] = set()

    for descriptor in interaction.security:
        key = descriptor.key
        if key not in service.security_schemes:
            scheme = build_security_scheme(descriptor, config)
            if scheme is None:
                logger.debug("Dropping unrecognised security scheme %r", key)
                continue
            service.security_schemes[key] = scheme
        if key not in seen:
            seen.add(key)
            requirements.append(security_requirement(descriptor))

    return requirements


def _finalize_components(service: _Service) -> None:
    components = service.document["components"]
    components["schemas"] = dict(service.registry.schemas)
    if not components["schemas"]:
        del components["schemas"]
    if not components["securitySchemes"]:
        del components["securitySchemes"]
    if not components:
        del service.document["components"]
