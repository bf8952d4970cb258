"""Sub-grammars embedded in note content.

A note attached to an open interaction can carry three independent kinds of
information, each recognised by its own ``Key: value`` prefix:

* ``Body: <json>`` -- the interaction body (see :func:`extract_body`).
* ``Security: <descriptor>`` -- zero or more authentication mechanisms (see
  :func:`parse_security` and :func:`parse_security_descriptor`).
* Operation metadata -- ``Summary``, ``Description``, ``Tags``,
  ``Operation-Id``, ``Deprecated``, ``External-Docs-Url``,
  ``External-Docs-Description``, ``Request-Type`` and ``Response-Type`` (see
  :func:`parse_metadata`).

Notes are single source lines, so multi-line content is written with a literal
``\\n`` escape. Security and metadata parsing expand that escape first; body
parsing does not, because the JSON decoder handles ``\\n`` inside strings.
"""

from __future__ import annotations

import json
import re
from typing import Any

from seqspec.models import ExternalDocs, SecurityDescriptor, SecurityKind

_BODY_PATTERN = re.compile(r"Body:\s*(.+?)(?=\n|$)", re.IGNORECASE)
_SECURITY_PATTERN = re.compile(r"Security:\s*(.+?)(?=\n|$)", re.IGNORECASE)
_API_KEY_PATTERN = re.compile(r"apiKey\s+in\s+(header|query)", re.IGNORECASE)
_OAUTH2_SCOPES_PATTERN = re.compile(r"oauth2\s*\[(.*?)\]", re.IGNORECASE)

_DEPRECATED_PATTERN = re.compile(r"Deprecated:\s*(true|false)", re.IGNORECASE)

# Metadata keys whose value is copied verbatim onto the interaction.
_TEXT_FIELDS = {
    "summary": "Summary",
    "description": "Description",
    "operation_id": "Operation-Id",
    "request_media_type": "Request-Type",
    "response_media_type": "Response-Type",
}


def _line_value(key: str, content: str) -> str | None:
    """Return the trimmed value of the first ``key: value`` line, if any."""
    # The lookbehind keeps "Description" from matching inside
    # "External-Docs-Description".
    match = re.search(
        rf"(?<![\w-]){re.escape(key)}:\s*(.+?)(?=\n|$)", content, re.IGNORECASE
    )
    if match is None:
        return None
    return match.group(1).strip()


def expand_newlines(content: str) -> str:
    """Replace literal ``\\n`` escapes with real newlines."""
    return content.replace("\\n", "\n")


def extract_body(content: str) -> tuple[bool, Any]:
    """Find and decode the ``Body:`` payload of a note.

    Args:
        content: Raw note content.

    Returns:
        ``(found, value)`` -- *found* is ``False`` when the note has no
        ``Body:`` line, in which case *value* is ``None``.

    Raises:
        ValueError: If a ``Body:`` line is present but its payload is not
            valid JSON or holds an integer too long to convert.
        RecursionError: If the payload nests deeper than the decoder allows.
    """
    match = _BODY_PATTERN.search(content)
    if match is None:
        return False, None
    return True, json.loads(match.group(1))


def parse_security_descriptor(text: str) -> SecurityDescriptor:
    """Classify one ``Security:`` value.

    Recognised forms (case-insensitive)::

        bearerAuth
        basicAuth
        apiKey | apiKey in header | apiKey in query
        oauth2 | oauth2[read, write]
        openIdConnect (any value starting with "openid")

    Anything else becomes a :attr:`SecurityKind.CUSTOM` descriptor whose key
    is the raw text.

    Args:
        text: The trimmed value following ``Security:``.

    Returns:
        The parsed descriptor.
    """
    lowered = text.lower()

    if lowered == "bearerauth":
        return SecurityDescriptor(kind=SecurityKind.BEARER, raw=text)
    if lowered == "basicauth":
        return SecurityDescriptor(kind=SecurityKind.BASIC, raw=text)

    if lowered.startswith("apikey"):
        match = _API_KEY_PATTERN.search(text)
        location = match.group(1).lower() if match else "header"
        return SecurityDescriptor(kind=SecurityKind.API_KEY, location=location, raw=text)

    if lowered.startswith("oauth2"):
        match = _OAUTH2_SCOPES_PATTERN.search(text)
        scopes: tuple[str, ...] = ()
        if match:
            scopes = tuple(s.strip() for s in match.group(1).split(",") if s.strip())
        return SecurityDescriptor(kind=SecurityKind.OAUTH2, scopes=scopes, raw=text)

    if lowered.startswith("openid"):
        return SecurityDescriptor(kind=SecurityKind.OPENID_CONNECT, raw=text)

    return SecurityDescriptor(kind=SecurityKind.CUSTOM, raw=text)


def parse_security(content: str) -> list[SecurityDescriptor]:
    """Parse every ``Security:`` line in a note, in encounter order.

    Duplicates are kept; the generator registers each scheme only once.
    """
    normalized = expand_newlines(content)
    return [
        parse_security_descriptor(match.group(1).strip())
        for match in _SECURITY_PATTERN.finditer(normalized)
    ]


def parse_metadata(content: str) -> dict[str, Any]:
    """Extract operation metadata from a note.

    Args:
        content: Raw note content.

    Returns:
        A mapping of :class:`~seqspec.models.Interaction` field names to
        values, containing only the fields the note actually sets.
    """
    normalized = expand_newlines(content)
    updates: dict[str, Any] = {}

    for field_name, key in _TEXT_FIELDS.items():
        value = _line_value(key, normalized)
        if value is not None:
            updates[field_name] = value

    tags = _line_value("Tags", normalized)
    if tags is not None:
        updates["tags"] = [t.strip() for t in tags.split(",") if t.strip()]

    deprecated = _DEPRECATED_PATTERN.search(normalized)
    if deprecated:
        updates["deprecated"] = deprecated.group(1).lower() == "true"

    docs_url = _line_value("External-Docs-Url", normalized)
    docs_description = _line_value("External-Docs-Description", normalized)
    if docs_url is not None or docs_description is not None:
        updates["external_docs"] = ExternalDocs(url=docs_url, description=docs_description)

    return updates
