"""Shared test fixtures for oasbuilder.

Provides reusable fixtures for loading YAML fixtures, building small
documents, creating isolated config environments, managing output state,
and running CLI commands. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from oasbuilder.models import (
    Document,
    HTTPMethod,
    Info,
    Operation,
    Parameter,
    ParameterLocation,
    Path as ApiPath,
    Property,
    PropertyItems,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
    Server,
    Tag,
)
from oasbuilder.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw YAML fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_yaml() -> str:
    """A hand-written OpenAPI 3.0 document exercising most importer paths."""
    return (FIXTURES_DIR / "petstore.yaml").read_text(encoding="utf-8")


@pytest.fixture
def invalid_yaml() -> str:
    """A document that parses but has structural errors."""
    return (FIXTURES_DIR / "invalid.yaml").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_document() -> Document:
    """A small but complete document: one server, tag, scheme, path and schema."""
    return Document(
        openapi="3.0.0",
        info=Info(title="Sample API", description="Sample service", version="2.1.0"),
        servers=[Server(url="https://api.example.com", description="Production")],
        security_schemes=[
            SecurityScheme(name="bearerAuth", type="http", scheme="bearer", bearer_format="JWT")
        ],
        tags=[Tag(name="users", description="User management")],
        paths=[
            ApiPath(
                path="/users/{id}",
                operations=[
                    Operation(
                        method=HTTPMethod.GET,
                        tags=["users"],
                        summary="Get a user",
                        operation_id="getUsersById",
                        parameters=[
                            Parameter(
                                name="id",
                                location=ParameterLocation.PATH,
                                required=True,
                                type="string",
                            )
                        ],
                        responses=[
                            Response(status_code="200", description="OK", schema_ref="User")
                        ],
                    ),
                    Operation(
                        method=HTTPMethod.PUT,
                        operation_id="putUsersById",
                        parameters=[
                            Parameter(
                                name="id",
                                location=ParameterLocation.PATH,
                                required=True,
                                type="string",
                            )
                        ],
                        request_body=RequestBody(description="New user data", schema_ref="User"),
                        responses=[Response(status_code="204", description="Updated")],
                    ),
                ],
            )
        ],
        schemas=[
            Schema(
                name="User",
                type="object",
                properties=[
                    Property(name="id", type="string", format="uuid", required=True),
                    Property(name="email", type="string", format="email", example="a@b.co"),
                    Property(
                        name="roles",
                        type="array",
                        items=PropertyItems(type="string"),
                    ),
                ],
            )
        ],
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config or the real workspace
    document. Forces the XDG layout so the paths are the same on every
    platform, clears OASBUILDER_* environment variables and changes the
    working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("oasbuilder.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("OASBUILDER_DOCUMENT", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN OutputManager for tests that don't care about output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
