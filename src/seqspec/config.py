"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for seqspec:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.seqspec/`` on macOS and Windows. See :func:`get_config_dir`.
* **User config** -- a single :class:`~seqspec.models.GeneratorConfig` JSON
  file in the config directory.
* **Project config** -- an optional ``./seqspec.json`` holding any subset of
  the same fields.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and user config into the effective
  :class:`~seqspec.models.GeneratorConfig`.

Generated documents written with ``--output-dir`` go through
:func:`atomic_write` so an interrupted run never leaves a truncated file.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from seqspec.exceptions import ConfigError
from seqspec.models import GeneratorConfig

logger = logging.getLogger(__name__)

_APP_NAME = "seqspec"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "seqspec.json"

# Environment variable -> GeneratorConfig field
ENV_OVERRIDES = {
    "SEQSPEC_OPENAPI_VERSION": "openapi_version",
    "SEQSPEC_API_VERSION": "api_version",
    "SEQSPEC_FORMAT": "output_format",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/seqspec/`` (default ``~/.config/seqspec/``).
    On macOS/Windows: ``~/.seqspec/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the exception re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config files ---


def user_config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json_object(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_user_config() -> dict[str, Any]:
    """Load the user configuration as raw field values.

    Returns:
        The parsed JSON object, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = user_config_path()
    if not path.is_file():
        return {}
    return _read_json_object(path, "user config")


def save_user_config(config: GeneratorConfig) -> None:
    """Persist *config* atomically as the user configuration."""
    data = config.model_dump(mode="json")
    atomic_write(user_config_path(), json.dumps(data, indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./seqspec.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json_object(path, "project config")


# --- Precedence resolution ---


def resolve_config(
    cli_openapi_version: Optional[str] = None,
    cli_api_version: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GeneratorConfig:
    """Resolve the generator config with full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (see :data:`ENV_OVERRIDES`)
        3. Project config (``./seqspec.json``)
        4. User config (``~/.config/seqspec/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~seqspec.models.GeneratorConfig`.

    Raises:
        ConfigError: If a config file is malformed or the merged values fail
            validation.
    """
    # 4. User config
    merged: dict[str, Any] = load_user_config()

    # 3. Project-local config
    project = load_project_config()
    if project is not None:
        merged.update(project)

    # 2. Environment variables
    for var, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            merged[field_name] = value

    # 1. CLI flags
    cli = {
        "openapi_version": cli_openapi_version,
        "api_version": cli_api_version,
        "output_format": cli_format,
    }
    merged.update({k: v for k, v in cli.items() if v is not None})

    try:
        config = GeneratorConfig.model_validate(merged)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    logger.debug("Resolved config: %s", config.model_dump())
    return config
