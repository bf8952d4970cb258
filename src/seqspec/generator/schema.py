"""Infer OpenAPI schema objects from JSON values.

Bodies written in diagram notes are example payloads, so most schemas are
*inferred* from the runtime shape of each value. String values may instead
use a small rule language to declare the schema explicitly::

    {"email": "string, required, format:email",
     "age": "integer, min:0, max:150",
     "nickname": "Bob"}

A string is read as a rule when its first comma-separated token is a schema
type name, when any token is exactly ``required``, or when any token contains
``:``. Everything else is an ordinary example string.

Schemas are plain dicts in OpenAPI shape. Property order follows the source
key order.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

SchemaObject = dict[str, Any]

SCHEMA_TYPES = ("string", "integer", "number", "boolean", "array", "object")

Number = Union[int, float]


@dataclass
class FieldRule:
    """An explicit field declaration parsed from a rule string."""

    type: str = "string"
    required: bool = False
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    format: Optional[str] = None
    example: Optional[str] = None

    def to_schema(self) -> SchemaObject:
        """Render the rule as a schema object.

        ``min``/``max`` become ``minLength``/``maxLength`` for strings and
        ``minimum``/``maximum`` for every other type.
        """
        schema: SchemaObject = {"type": self.type}
        if self.format is not None:
            schema["format"] = self.format
        low_key, high_key = (
            ("minLength", "maxLength") if self.type == "string" else ("minimum", "maximum")
        )
        if self.minimum is not None:
            schema[low_key] = self.minimum
        if self.maximum is not None:
            schema[high_key] = self.maximum
        if self.example is not None:
            schema["example"] = self.example
        return schema


def _to_number(text: str) -> Optional[Number]:
    """Parse a rule bound, returning ``None`` when it is not numeric."""
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_field_rule(value: str) -> Optional[FieldRule]:
    """Parse *value* as a rule string.

    Args:
        value: A string found in a body payload.

    Returns:
        The parsed :class:`FieldRule`, or ``None`` when *value* is an
        ordinary example string.
    """
    parts = [part.strip() for part in value.split(",")]
    explicit_type = parts[0] if parts[0] in SCHEMA_TYPES else None
    if explicit_type is None and not any(p == "required" or ":" in p for p in parts):
        return None

    rule = FieldRule(type=explicit_type or "string")
    for part in parts:
        if part == "required":
            rule.required = True
            continue
        key, sep, arg = part.partition(":")
        if not sep:
            continue
        if key == "min":
            rule.minimum = _to_number(arg)
        elif key == "max":
            rule.maximum = _to_number(arg)
        elif key == "format":
            rule.format = arg
        elif key == "example":
            rule.example = arg
    return rule


def infer_one(value: Any) -> tuple[SchemaObject, bool]:
    """Infer the schema of a single value.

    Args:
        value: Any JSON-compatible value.

    Returns:
        ``(schema, is_required)``. Only rule strings can mark a field as
        required.
    """
    if isinstance(value, str):
        rule = parse_field_rule(value)
        if rule is not None:
            return rule.to_schema(), rule.required
        return {"type": "string", "example": value}, False

    if value is None:
        return {"type": "string"}, False

    # bool is a subclass of int, so it must be checked first.
    if isinstance(value, bool):
        return {"type": "boolean", "example": value}, False

    if isinstance(value, int):
        return {"type": "integer", "example": value}, False

    if isinstance(value, float):
        integral = math.isfinite(value) and value.is_integer()
        return {"type": "integer" if integral else "number", "example": value}, False

    if isinstance(value, list):
        if not value:
            items: SchemaObject = {"type": "string"}
        elif isinstance(value[0], dict):
            items = generate_object(value[0])
        else:
            items, _ = infer_one(value[0])
        # Documents must not share mutable state with the AST.
        return {"type": "array", "items": items, "example": copy.deepcopy(value)}, False

    if isinstance(value, dict):
        return generate_object(value), False

    return {"type": "string", "example": value}, False


def generate_object(obj: dict[str, Any]) -> SchemaObject:
    """Build an ``object`` schema with one property per key of *obj*.

    Keys whose value is a rule string containing ``required`` are listed
    under ``required``; the list is omitted when empty.
    """
    properties: dict[str, SchemaObject] = {}
    required: list[str] = []

    for key, value in obj.items():
        if isinstance(value, dict):
            properties[key] = generate_object(value)
            continue
        schema, is_required = infer_one(value)
        properties[key] = schema
        if is_required:
            required.append(key)

    result: SchemaObject = {"type": "object", "properties": properties}
    if required:
        result["required"] = required
    return result


def infer_schema(body: Any) -> SchemaObject:
    """Infer the schema of a whole interaction body.

    Objects go through :func:`generate_object`; any other top-level value
    (an array or a scalar) through :func:`infer_one`.
    """
    if isinstance(body, dict):
        return generate_object(body)
    schema, _ = infer_one(body)
    return schema
