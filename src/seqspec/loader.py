"""Read diagram text and OpenAPI documents from a file, URL, or stdin.

Every command accepts the same kind of ``SOURCE`` argument:

* ``-`` -- read standard input;
* ``http://...`` / ``https://...`` -- fetched with :mod:`httpx`;
* anything else -- a local file path.

:func:`load_text` returns the raw text (used for diagrams);
:func:`load_document` additionally decodes JSON or YAML (used by
``seqspec check``). All failures are raised as
:class:`~seqspec.exceptions.InputError`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from seqspec.exceptions import InputError

logger = logging.getLogger(__name__)


def load_text(source: str) -> str:
    """Read the raw text of *source*.

    Args:
        source: A URL (http/https), file path, or ``-`` for stdin.

    Returns:
        The text content. May be empty; callers decide whether that is an
        error.

    Raises:
        InputError: If the source cannot be read.
    """
    text, _ = _read(source)
    return text


def load_document(source: str) -> Any:
    """Read and decode a JSON or YAML document from *source*.

    The format hint comes from the file extension or the response
    ``content-type``; without a hint JSON is tried first, then YAML.

    Raises:
        InputError: If the source cannot be read, is empty, or is neither
            valid JSON nor valid YAML.
    """
    text, hint = _read(source)
    if not text.strip():
        raise InputError(f"No content in {_describe(source)}")
    return parse_content(text, hint=hint)


def _describe(source: str) -> str:
    return "stdin" if source == "-" else source


def _read(source: str) -> tuple[str, str]:
    """Return ``(text, format_hint)`` for *source*."""
    if source == "-":
        return _read_stdin(), ""
    if source.startswith(("http://", "https://")):
        return _read_url(source)
    return _read_file(source)


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except OSError as exc:
        raise InputError(f"Failed to read from stdin: {exc}") from exc


def _read_url(url: str) -> tuple[str, str]:
    """Fetch *url*, using the response content-type as the format hint."""
    logger.debug("Fetching %s", url)
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise InputError(f"HTTP {exc.response.status_code} fetching {url}") from exc
    except httpx.RequestError as exc:
        raise InputError(f"Failed to fetch {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return response.text, hint


def _read_file(path: str) -> tuple[str, str]:
    file_path = Path(path)
    if not file_path.is_file():
        raise InputError(f"File not found: {path}")
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Failed to read {path}: {exc}") from exc

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"
    return text, hint


def parse_content(content: str, hint: str = "") -> Any:
    """Decode *content* as JSON or YAML.

    Tries JSON first (unless *hint* is ``"yaml"``), then falls back to YAML.
    An explicit ``"json"`` hint disables the fallback.

    Raises:
        InputError: If the content cannot be decoded.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise InputError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse input as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise InputError(msg) from exc

    if result is None:
        raise InputError("Input is an empty document")
    return result
