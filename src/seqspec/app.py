"""Typer application and CLI entry point for seqspec.

This module wires together the top-level Typer application and registers the
built-in commands:

* ``generate`` -- :func:`seqspec.commands.generate.generate_command`
* ``validate`` / ``check`` -- :mod:`seqspec.commands.validate`
* ``config`` -- :mod:`seqspec.commands.config`

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It maps :class:`~seqspec.exceptions.SeqspecError` to the
error's exit code and Ctrl-C to 130.

See Also:
    :mod:`seqspec.config`: Generator configuration resolution.
    :mod:`seqspec.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import sys

import typer

from seqspec import __version__
from seqspec.commands.config import config_app
from seqspec.commands.generate import generate_command
from seqspec.commands.validate import check_command, validate_command
from seqspec.exit_codes import EXIT_INTERRUPTED


app = typer.Typer(
    name="seqspec",
    help="Generate OpenAPI 3 documents from Mermaid-style sequence diagrams.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("generate")(generate_command)
app.command("validate")(validate_command)
app.command("check")(check_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"seqspec {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output for diagnostics and tables."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output and log records."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~seqspec.output.OutputManager` from CLI
    flags and, with ``--verbose``, routes library log records to stderr.

    Args:
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from seqspec.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    output.install_log_handler()
    set_output(output)


def main() -> None:
    """CLI entry point invoked by the ``seqspec`` console script.

    Unhandled :class:`~seqspec.exceptions.SeqspecError` instances cause a
    clean exit with the error's ``exit_code``; other exceptions propagate
    with their traceback.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    from seqspec.exceptions import SeqspecError
    from seqspec.output import error

    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except SeqspecError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
