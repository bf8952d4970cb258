"""Structural fingerprints and shared-schema extraction.

Two schemas have *the same shape* when their fingerprints match. A fingerprint
is the canonical JSON serialisation of a schema with every ``example`` value
removed, so bodies that differ only in their sample data compare equal.

:class:`ComponentRegistry` promotes shapes that occur more than once within a
service into ``components.schemas`` and hands back a ``$ref`` in their place.
"""

from __future__ import annotations

import json
import logging
import re
from collections import Counter
from typing import Any

from seqspec.generator.schema import SchemaObject

logger = logging.getLogger(__name__)

COMPONENT_REF_PREFIX = "#/components/schemas/"

_NAME_CHARS = re.compile(r"[^0-9A-Za-z_]")


def strip_examples(schema: Any) -> Any:
    """Return a copy of *schema* without ``example`` keys at any depth.

    Only schema positions are visited (the schema itself, its
    ``properties`` values and its ``items``), so a property that happens to
    be *named* ``example`` is kept.
    """
    if not isinstance(schema, dict):
        return schema

    shaped = {key: value for key, value in schema.items() if key != "example"}
    properties = shaped.get("properties")
    if isinstance(properties, dict):
        shaped["properties"] = {name: strip_examples(sub) for name, sub in properties.items()}
    if "items" in shaped:
        shaped["items"] = strip_examples(shaped["items"])
    return shaped


def fingerprint(schema: SchemaObject) -> str:
    """Serialise the shape of *schema* for structural comparison."""
    return json.dumps(
        strip_examples(schema), sort_keys=True, separators=(",", ":"), default=str
    )


def component_base_name(schema: SchemaObject) -> str:
    """Derive a component name from the first three property names.

    ``{"name": ..., "email": ..., "age": ..., "city": ...}`` becomes
    ``NameEmailAgeSchema``.
    """
    parts: list[str] = []
    for key in list(schema.get("properties", {}))[:3]:
        cleaned = _NAME_CHARS.sub("", key)
        if cleaned:
            parts.append(cleaned[0].upper() + cleaned[1:])
    return "".join(parts) + "Schema"


class ComponentRegistry:
    """Per-service store of extracted schema components.

    Args:
        usage: How many times each fingerprint occurs among the service's
            bodies. Shapes seen at most once are always inlined.
    """

    def __init__(self, usage: Counter[str] | None = None) -> None:
        self._usage: Counter[str] = usage if usage is not None else Counter()
        self._schemas: dict[str, SchemaObject] = {}
        self._names_by_fingerprint: dict[str, str] = {}

    @property
    def schemas(self) -> dict[str, SchemaObject]:
        """Extracted components keyed by name, in registration order."""
        return self._schemas

    def extract(self, schema: SchemaObject) -> SchemaObject:
        """Return *schema* inlined, or a ``$ref`` to a shared component.

        Schemas without properties (primitives, simple arrays, empty
        objects) are never extracted.
        """
        if not schema.get("properties"):
            return schema

        key = fingerprint(schema)
        if self._usage[key] <= 1:
            return schema

        name = self._names_by_fingerprint.get(key)
        if name is None:
            name = self._unique_name(component_base_name(schema))
            self._schemas[name] = schema
            self._names_by_fingerprint[key] = name
            logger.debug("Extracted component %s (used %d times)", name, self._usage[key])
        return {"$ref": f"{COMPONENT_REF_PREFIX}{name}"}

    def _unique_name(self, base: str) -> str:
        if base not in self._schemas:
            return base
        suffix = 1
        while f"{base}{suffix}" in self._schemas:
            suffix += 1
        return f"{base}{suffix}"
