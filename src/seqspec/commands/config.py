"""Config commands -- view and initialise generator configuration.

Provides the ``seqspec config`` sub-command group. ``show`` prints the
effective :class:`~seqspec.models.GeneratorConfig` after applying every
precedence layer; ``init`` writes the defaults to the user config file.
"""

from __future__ import annotations

import typer

from seqspec.output import error, get_output, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Example::

        seqspec config show
    """
    from seqspec.config import resolve_config, user_config_path

    config = resolve_config()
    info(f"User config: {user_config_path()}")
    get_output().print_document(config.model_dump(mode="json"), "json")


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write default settings to the user config file.

    Example::

        seqspec config init
    """
    from seqspec.config import save_user_config, user_config_path
    from seqspec.models import GeneratorConfig

    path = user_config_path()
    if path.is_file() and not force:
        error(f"Config file already exists: {path}")
        raise typer.Exit(code=2)

    save_user_config(GeneratorConfig())
    success(f"Wrote {path}")
