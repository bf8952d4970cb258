"""Shared test fixtures for seqspec.

Provides reusable diagram texts, isolated config environments, output state
management, and a CLI runner. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import textwrap

import pytest

from seqspec.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Diagram fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def basic_diagram() -> str:
    """A single declared GET round trip."""
    return textwrap.dedent("""\
        sequenceDiagram
        participant User
        participant API
        User->>API: GET /users
        API-->>User: 200 OK
    """)


@pytest.fixture
def crud_diagram() -> str:
    """Two services, request bodies, path/query parameters and security."""
    return textwrap.dedent("""\
        sequenceDiagram
        participant Client
        participant UserService
        participant OrderService
        %% users
        Client->>UserService: POST /users Create a user
        Note over Client,UserService: Body: {"name": "string, required, min:1", "email": "string, required, format:email", "age": 30}
        Note over Client,UserService: Security: bearerAuth
        UserService-->>Client: 201 Created
        Client->>UserService: GET /users/{userId}?expand=orders Get a user
        Note over Client,UserService: Security: apiKey in query
        UserService-->>Client: 200 User found
        Client->>OrderService: GET /orders
        Note over Client,OrderService: Body: [{"id": 1, "total": 9.5}]
        Note over Client,OrderService: Tags: orders\\nOperation-Id: listOrders
        OrderService-->>Client: 200 Orders
    """)


@pytest.fixture
def shared_schema_diagram() -> str:
    """Two POSTs with structurally identical bodies."""
    return textwrap.dedent("""\
        participant User
        participant API
        User->>API: POST /users
        Note over User,API: Body: {"name": "Alice", "email": "a@example.com"}
        API-->>User: 201 Created
        User->>API: PUT /users/{id}
        Note over User,API: Body: {"name": "Bob", "email": "b@example.com"}
        API-->>User: 200 Updated
    """)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at a subdirectory of tmp_path, clears all
    SEQSPEC_* environment variables, forces the XDG code path, and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("seqspec.config._is_xdg_platform", lambda: True)
    for var in ["SEQSPEC_OPENAPI_VERSION", "SEQSPEC_API_VERSION", "SEQSPEC_FORMAT"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
