"""Tests for seqspec.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from seqspec.config import (
    atomic_write,
    get_config_dir,
    load_project_config,
    load_user_config,
    resolve_config,
    save_user_config,
    user_config_path,
)
from seqspec.exceptions import ConfigError
from seqspec.models import GeneratorConfig


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestConfigDir:
    """Config directory location per platform."""

    def test_xdg_config_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("seqspec.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        path = get_config_dir()
        assert path == tmp_path / "xdg" / "seqspec"
        assert path.is_dir()

    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("seqspec.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".config" / "seqspec"

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("seqspec.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".seqspec"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    """Temp-file-then-rename writes."""

    def test_creates_parents_and_writes(self, tmp_path: Path) -> None:
        target = tmp_path / "out" / "api.yaml"
        atomic_write(target, "openapi: 3.0.0\n")
        assert target.read_text(encoding="utf-8") == "openapi: 3.0.0\n"

    def test_overwrites_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "api.json"
        atomic_write(target, "old")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["api.json"]


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


class TestConfigFiles:
    """User and project config loading."""

    def test_missing_files(self, isolated_config: Path) -> None:
        assert load_user_config() == {}
        assert load_project_config() is None

    def test_save_and_load_user_config(self, isolated_config: Path) -> None:
        save_user_config(GeneratorConfig(api_version="9.9.9"))
        assert load_user_config()["api_version"] == "9.9.9"
        assert user_config_path().parent == isolated_config / "config" / "seqspec"

    def test_invalid_user_config(self, isolated_config: Path) -> None:
        user_config_path().write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid user config"):
            load_user_config()

    def test_project_config_must_be_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "seqspec.json", ["not", "an", "object"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """CLI > env > project > user > defaults."""

    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GeneratorConfig()

    def test_user_config(self, isolated_config: Path) -> None:
        _write_json(user_config_path(), {"api_version": "1.1.0", "api_key_header": "X-Key"})
        config = resolve_config()
        assert config.api_version == "1.1.0"
        assert config.api_key_header == "X-Key"

    def test_project_overrides_user(self, isolated_config: Path) -> None:
        _write_json(user_config_path(), {"api_version": "1.1.0", "title_template": "{service}"})
        _write_json(isolated_config / "seqspec.json", {"api_version": "1.2.0"})
        config = resolve_config()
        assert config.api_version == "1.2.0"
        assert config.title_template == "{service}"

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "seqspec.json", {"api_version": "1.2.0"})
        monkeypatch.setenv("SEQSPEC_API_VERSION", "2.0.0")
        monkeypatch.setenv("SEQSPEC_FORMAT", "json")
        config = resolve_config()
        assert config.api_version == "2.0.0"
        assert config.output_format == "json"

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SEQSPEC_OPENAPI_VERSION", "3.0.1")
        config = resolve_config(cli_openapi_version="3.0.3", cli_format="yaml")
        assert config.openapi_version == "3.0.3"
        assert config.output_format == "yaml"

    def test_invalid_field_type(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "seqspec.json", {"api_version": ["1"]})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config()
