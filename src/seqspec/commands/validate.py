"""Validation commands -- diagram syntax and OpenAPI structure.

* ``seqspec validate`` checks diagram notation line by line.
* ``seqspec check`` checks an OpenAPI document, or a ``{service: document}``
  map such as the output of ``seqspec generate``.

Both print a diagnostics report and exit with
:data:`~seqspec.exit_codes.EXIT_VALIDATION_FAILED` when it contains errors.
"""

from __future__ import annotations

import typer

from seqspec.exit_codes import EXIT_VALIDATION_FAILED
from seqspec.models import ValidationResult
from seqspec.output import get_output


def _report(result: ValidationResult, title: str) -> None:
    get_output().print_diagnostics(result, title=title)
    if not result.valid:
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)


def validate_command(
    source: str = typer.Argument(help="Diagram file, http(s) URL, or '-' for stdin."),
) -> None:
    """Check sequence diagram syntax.

    Example::

        seqspec validate checkout.mmd
        cat checkout.mmd | seqspec --json validate -
    """
    from seqspec.loader import load_text
    from seqspec.validator import validate_diagram

    _report(validate_diagram(load_text(source)), title="Diagram diagnostics")


def check_command(
    source: str = typer.Argument(
        help="OpenAPI JSON/YAML file, http(s) URL, or '-' for stdin."
    ),
) -> None:
    """Check the structure of OpenAPI documents.

    Example::

        seqspec check openapi.yaml
        seqspec generate checkout.mmd | seqspec check -
    """
    from seqspec.loader import load_document
    from seqspec.validator import validate_openapi

    _report(validate_openapi(load_document(source)), title="OpenAPI diagnostics")
