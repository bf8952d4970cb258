"""Tests for seqspec.generator.components -- fingerprints and extraction."""

from __future__ import annotations

from collections import Counter

from seqspec.generator.components import (
    COMPONENT_REF_PREFIX,
    ComponentRegistry,
    component_base_name,
    fingerprint,
    strip_examples,
)
from seqspec.generator.schema import infer_schema


# ---------------------------------------------------------------------------
# Fingerprints
# ---------------------------------------------------------------------------


class TestFingerprint:
    """Shapes compare equal regardless of example data and key order."""

    def test_examples_do_not_affect_fingerprint(self) -> None:
        a = infer_schema({"name": "Alice", "tags": ["x"]})
        b = infer_schema({"name": "Bob", "tags": ["y", "z"]})
        assert fingerprint(a) == fingerprint(b)

    def test_key_order_does_not_affect_fingerprint(self) -> None:
        a = {"type": "object", "properties": {"a": {"type": "string"}, "b": {"type": "integer"}}}
        b = {"properties": {"b": {"type": "integer"}, "a": {"type": "string"}}, "type": "object"}
        assert fingerprint(a) == fingerprint(b)

    def test_different_types_differ(self) -> None:
        assert fingerprint(infer_schema({"id": 1})) != fingerprint(infer_schema({"id": "1"}))

    def test_property_named_example_is_kept(self) -> None:
        schema = infer_schema({"example": "x"})
        stripped = strip_examples(schema)
        assert "example" in stripped["properties"]
        assert "example" not in stripped["properties"]["example"]

    def test_strip_examples_does_not_mutate(self) -> None:
        schema = infer_schema({"name": "Alice"})
        strip_examples(schema)
        assert schema["properties"]["name"]["example"] == "Alice"


class TestComponentBaseName:
    """Names come from the first three property keys."""

    def test_three_keys(self) -> None:
        schema = infer_schema({"name": 1, "email": 2, "age": 3, "city": 4})
        assert component_base_name(schema) == "NameEmailAgeSchema"

    def test_non_alphanumerics_are_removed(self) -> None:
        schema = infer_schema({"first-name": 1, "$id": 2})
        assert component_base_name(schema) == "FirstnameIdSchema"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def _registry_for(*schemas: dict) -> ComponentRegistry:
    return ComponentRegistry(Counter(fingerprint(s) for s in schemas))


class TestComponentRegistry:
    """Extraction thresholds, reuse and naming."""

    def test_single_use_is_inlined(self) -> None:
        schema = infer_schema({"name": "Alice", "email": "a@x"})
        registry = _registry_for(schema)
        assert registry.extract(schema) is schema
        assert registry.schemas == {}

    def test_shape_without_properties_is_inlined(self) -> None:
        schema = infer_schema([1, 2])
        registry = _registry_for(schema, schema)
        assert registry.extract(schema) is schema

    def test_repeated_shape_is_extracted_once(self) -> None:
        first = infer_schema({"name": "Alice", "email": "a@x"})
        second = infer_schema({"name": "Bob", "email": "b@x"})
        registry = _registry_for(first, second)

        ref1 = registry.extract(first)
        ref2 = registry.extract(second)

        assert ref1 == ref2 == {"$ref": f"{COMPONENT_REF_PREFIX}NameEmailSchema"}
        assert list(registry.schemas) == ["NameEmailSchema"]
        # The first occurrence's schema (with its examples) is stored.
        assert registry.schemas["NameEmailSchema"] is first

    def test_name_collisions_get_numeric_suffix(self) -> None:
        as_text = infer_schema({"id": "a", "name": "b"})
        as_number = infer_schema({"id": 1, "name": "b"})
        registry = _registry_for(as_text, as_text, as_number, as_number)

        assert registry.extract(as_text) == {"$ref": f"{COMPONENT_REF_PREFIX}IdNameSchema"}
        assert registry.extract(as_number) == {"$ref": f"{COMPONENT_REF_PREFIX}IdNameSchema1"}
