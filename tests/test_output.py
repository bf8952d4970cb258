"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- Document rendering as YAML and JSON
- Diagnostics reports in plain and JSON modes
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest
import yaml

from seqspec.models import DiagnosticSource, Severity, ValidationError, ValidationResult
from seqspec.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    render_document,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("seqspec.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("seqspec.output._is_tty", lambda: True)


def _result(valid: bool = False) -> ValidationResult:
    errors = [] if valid else [
        ValidationError(
            source=DiagnosticSource.MERMAID,
            severity=Severity.ERROR,
            line=3,
            message="Orphaned response - no matching request found",
            suggestion="Add a request",
            context="API -> User",
        )
    ]
    warnings = [
        ValidationError(
            source=DiagnosticSource.MERMAID,
            severity=Severity.WARNING,
            message="Line does not match any known pattern",
        )
    ]
    return ValidationResult.from_issues(errors, warnings)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that AUTO format resolves correctly based on environment."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout, diagnostics to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_data("hello")
        captured = capfd.readouterr()
        assert captured.out == "hello\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error", "suggest"])
    def test_messages_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("some message")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "some message" in captured.err

    def test_quiet_suppresses_info_but_not_errors(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        mgr.warning("shown")
        mgr.error("also shown")
        err = capfd.readouterr().err
        assert "hidden" not in err
        assert "Warning: shown" in err
        assert "Error: also shown" in err

    def test_debug_requires_verbose(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("nope")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("yes")
        err = capfd.readouterr().err
        assert "nope" not in err
        assert "[debug] yes" in err


# ------------------------------------------------------------------ #
# Documents
# ------------------------------------------------------------------ #


class TestDocuments:
    """YAML/JSON rendering."""

    def test_render_yaml_keeps_key_order(self):
        text = render_document({"openapi": "3.0.0", "info": {"title": "T"}, "paths": {}})
        assert text.index("openapi") < text.index("info") < text.index("paths")
        assert yaml.safe_load(text) == {"openapi": "3.0.0", "info": {"title": "T"}, "paths": {}}

    def test_render_yaml_quotes_status_codes(self):
        text = render_document({"responses": {"200": {"description": "OK"}}})
        assert yaml.safe_load(text)["responses"]["200"] == {"description": "OK"}

    def test_render_yaml_writes_shared_objects_in_full(self):
        row = [1, 2]
        text = render_document({"items": {"example": row}, "example": [row, [3, 4]]})
        assert "&id" not in text
        assert "*id" not in text
        assert yaml.safe_load(text) == {
            "items": {"example": [1, 2]},
            "example": [[1, 2], [3, 4]],
        }

    def test_render_json(self):
        text = render_document({"a": [1, 2]}, "json")
        assert text.endswith("\n")
        assert json.loads(text) == {"a": [1, 2]}

    def test_print_document_plain(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_document({"a": 1}, "json")
        assert json.loads(capfd.readouterr().out) == {"a": 1}


# ------------------------------------------------------------------ #
# Diagnostics
# ------------------------------------------------------------------ #


class TestDiagnostics:
    """Validation result reports."""

    def test_plain_table_and_summary(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_diagnostics(_result())
        captured = capfd.readouterr()
        lines = captured.out.splitlines()
        assert lines[0] == "Severity\tLine\tMessage\tSuggestion\tContext"
        assert lines[1].startswith("error\t3\tOrphaned response")
        assert lines[2].startswith("warning\t-\tLine does not match")
        assert "Invalid: 1 error(s), 1 warning(s)" in captured.err

    def test_valid_summary(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_diagnostics(_result(valid=True))
        assert "Valid: 0 error(s), 1 warning(s)" in capfd.readouterr().err

    def test_json_report(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).print_diagnostics(_result())
        captured = capfd.readouterr()
        data = json.loads(captured.out)
        assert data["valid"] is False
        assert data["errors"][0]["line"] == 3
        assert data["errors"][0]["source"] == "mermaid"
        assert captured.err == ""


# ------------------------------------------------------------------ #
# Logging and global instance
# ------------------------------------------------------------------ #


class TestLogHandler:
    """--verbose routes library log records to stderr."""

    def test_handler_only_when_verbose(self):
        logger = logging.getLogger("seqspec")
        before = list(logger.handlers)
        OutputManager(format=OutputFormat.PLAIN, no_color=True).install_log_handler()
        assert logger.handlers == before

    def test_verbose_installs_single_handler(self):
        logger = logging.getLogger("seqspec")
        try:
            for _ in range(2):
                OutputManager(format=OutputFormat.PLAIN, verbose=True).install_log_handler()
            rich_handlers = [h for h in logger.handlers if type(h).__name__ == "RichHandler"]
            assert len(rich_handlers) == 1
            assert logger.level == logging.DEBUG
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)


class TestGlobalInstance:
    """get_output / set_output / reset_output."""

    def test_lazy_default(self):
        reset_output()
        assert get_output() is get_output()

    def test_set_and_reset(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr
