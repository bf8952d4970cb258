"""``$ref`` integrity and circular-reference detection.

Both checks walk arbitrary JSON-like trees that may already be malformed, so
each traversal keeps a set of visited node ids and never enters the same
container twice.

Reference integrity only accepts internal JSON Pointers (``#/...``) that name
an existing component schema or path. Cycle detection follows ``$ref``
chains from every path item and every component schema. A chain that comes
back to a reference it already holds is a cycle, except when a component
refers straight back to itself at the start of a chain: recursive structures
such as trees are legal.
"""

from __future__ import annotations

from typing import Any, Optional

from seqspec.models import DiagnosticSource, Severity, ValidationError

SCHEMA_REF_PREFIX = "#/components/schemas/"


def _escape_pointer(segment: str) -> str:
    """Escape a JSON Pointer segment per RFC 6901 (``~`` -> ``~0``, ``/`` -> ``~1``)."""
    return segment.replace("~", "~0").replace("/", "~1")


def _component_schemas(document: dict[str, Any]) -> dict[str, Any]:
    components = document.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, dict) else {}


def collect_valid_refs(document: dict[str, Any]) -> set[str]:
    """Return every ``$ref`` target that resolves inside *document*.

    Path keys are accepted both verbatim and RFC 6901-escaped.
    """
    refs = {f"{SCHEMA_REF_PREFIX}{name}" for name in _component_schemas(document)}
    paths = document.get("paths")
    if isinstance(paths, dict):
        for key in paths:
            refs.add(f"#/paths/{key}")
            refs.add(f"#/paths/{_escape_pointer(str(key))}")
    return refs


def check_references(
    schema: Any, valid_refs: set[str], context: Optional[str] = None
) -> list[ValidationError]:
    """Validate every ``$ref`` found anywhere within *schema*.

    Args:
        schema: A schema tree (or any JSON-like value).
        valid_refs: Output of :func:`collect_valid_refs` for the owning
            document.
        context: Location label attached to each diagnostic.

    Returns:
        One error per malformed or dangling reference.
    """
    errors: list[ValidationError] = []
    visited: set[int] = set()

    def _walk(node: Any) -> None:
        if not isinstance(node, (dict, list)) or id(node) in visited:
            return
        visited.add(id(node))

        if isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if not ref.startswith("#/"):
                errors.append(
                    ValidationError(
                        source=DiagnosticSource.OPENAPI,
                        severity=Severity.ERROR,
                        message=f'Invalid reference format: "{ref}"',
                        context=context,
                        suggestion='References should start with "#/" for JSON Pointers',
                    )
                )
            elif ref not in valid_refs:
                errors.append(
                    ValidationError(
                        source=DiagnosticSource.OPENAPI,
                        severity=Severity.ERROR,
                        message=f'Invalid reference: "{ref}" does not exist',
                        context=context,
                        suggestion="Ensure the referenced component is defined",
                    )
                )
            return

        for value in node.values() if isinstance(node, dict) else node:
            _walk(value)

    _walk(schema)
    return errors


def _cycle_key(cycle: tuple[str, ...]) -> tuple[str, ...]:
    """Rotate *cycle* to start at its smallest ref so rotations compare equal."""
    start = cycle.index(min(cycle))
    return cycle[start:] + cycle[:start]


def find_circular_references(document: dict[str, Any]) -> list[ValidationError]:
    """Report ``$ref`` cycles among component schemas.

    Args:
        document: An OpenAPI document.

    Returns:
        One error per distinct cycle, formatted ``A -> B -> A``. A cycle
        found again from a different starting node is not repeated.
    """
    targets = {
        f"{SCHEMA_REF_PREFIX}{name}": schema
        for name, schema in _component_schemas(document).items()
    }
    errors: list[ValidationError] = []
    reported: set[tuple[str, ...]] = set()

    def _detect(node: Any, chain: tuple[str, ...], visited: set[int]) -> None:
        if not isinstance(node, (dict, list)) or id(node) in visited:
            return
        visited.add(id(node))

        if isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if ref in chain:
                # A component referring straight to itself is a recursive type.
                if len(chain) == 1 and chain[0] == ref:
                    return
                key = _cycle_key(chain[chain.index(ref):])
                if key not in reported:
                    reported.add(key)
                    cycle = " -> ".join(chain + (ref,))
                    errors.append(
                        ValidationError(
                            source=DiagnosticSource.OPENAPI,
                            severity=Severity.ERROR,
                            message=f"Circular reference detected: {cycle}",
                            context=ref,
                            suggestion="Restructure your schema to avoid circular dependencies",
                        )
                    )
                return
            target = targets.get(ref)
            if target is not None:
                _detect(target, chain + (ref,), set())
            return

        for value in node.values() if isinstance(node, dict) else node:
            _detect(value, chain, visited)

    paths = document.get("paths")
    if isinstance(paths, dict):
        for path_item in paths.values():
            _detect(path_item, (), set())
    for schema in targets.values():
        _detect(schema, (), set())

    return errors
