"""Generate command -- sequence diagram to per-service OpenAPI documents.

``seqspec generate`` reads a diagram, builds one document per service and
either prints them (a ``{service: document}`` map, or a single document with
``--service``) or writes ``<service>.yaml``/``<service>.json`` files into
``--output-dir``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import typer

from seqspec.exceptions import InvalidUsageError
from seqspec.exit_codes import EXIT_VALIDATION_FAILED
from seqspec.output import debug, get_output, info, success, suggest, warning

DOCUMENT_FORMATS = ("yaml", "json")

_UNSAFE_FILENAME = re.compile(r"[^\w.-]+")


def document_filename(service: str, fmt: str) -> str:
    """Return a filesystem-safe ``<service>.<fmt>`` file name."""
    stem = _UNSAFE_FILENAME.sub("_", service).strip("._") or "service"
    return f"{stem}.{fmt}"


def generate_command(
    source: str = typer.Argument(help="Diagram file, http(s) URL, or '-' for stdin."),
    service: Optional[str] = typer.Option(
        None, "--service", "-s", help="Only emit the document for this service."
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-d",
        help="Write one file per service into this directory.",
        file_okay=False,
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help="Document format: yaml or json."
    ),
    openapi_version: Optional[str] = typer.Option(
        None, "--openapi-version", help="Value of the 'openapi' field."
    ),
    api_version: Optional[str] = typer.Option(
        None, "--api-version", help="Value of 'info.version'."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Abort when the syntax validator reports errors."
    ),
) -> None:
    """Generate OpenAPI documents from a sequence diagram.

    Parser diagnostics (orphaned responses, malformed body JSON) are printed
    as warnings and never stop generation. With ``--strict`` the diagram is
    validated first and generation is skipped if it has errors.

    Example::

        seqspec generate checkout.mmd
        seqspec generate checkout.mmd --service OrderService --format json
        seqspec generate checkout.mmd -d openapi/
    """
    from seqspec.config import atomic_write, resolve_config
    from seqspec.generator import generate_specs
    from seqspec.loader import load_text
    from seqspec.output import render_document
    from seqspec.parser import parse_diagram
    from seqspec.validator import validate_diagram

    config = resolve_config(
        cli_openapi_version=openapi_version,
        cli_api_version=api_version,
        cli_format=fmt,
    )
    document_format = config.output_format.lower()
    if document_format not in DOCUMENT_FORMATS:
        raise InvalidUsageError(
            f"Unsupported document format: {config.output_format} "
            f"(expected one of: {', '.join(DOCUMENT_FORMATS)})"
        )

    text = load_text(source)

    if strict:
        result = validate_diagram(text)
        if not result.valid:
            get_output().print_diagnostics(result, title="Diagram errors")
            raise typer.Exit(code=EXIT_VALIDATION_FAILED)

    ast = parse_diagram(text)
    for note in ast.notes:
        warning(f"Line {note.line}: {note.message}")

    documents = generate_specs(ast, config)
    debug(f"Generated {len(documents)} document(s) from {len(ast.interactions)} interaction(s)")

    if not documents:
        warning("No requests found; nothing to generate")
        suggest("Add lines like: Client->>API: GET /users")
        return

    if service is not None:
        if service not in documents:
            raise InvalidUsageError(
                f"Unknown service: {service} (available: {', '.join(documents)})"
            )
        documents = {service: documents[service]}

    if output_dir is not None:
        for name, document in documents.items():
            path = output_dir / document_filename(name, document_format)
            atomic_write(path, render_document(document, document_format))
            success(f"Wrote {path}")
        return

    output = get_output()
    if service is not None:
        output.print_document(documents[service], document_format)
    else:
        output.print_document(documents, document_format)
    info(f"{len(documents)} service(s): {', '.join(documents)}")
