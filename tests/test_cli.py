"""End-to-end tests for the oasbuilder command line.

Every test runs the real root app through Typer's CliRunner against an
isolated config and data directory, so the workspace document lives under
``tmp_path``. Messages are asserted on ``result.output`` with ``--no-color``;
data written to stdout is parsed from ``result.stdout`` with ``--quiet``.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from oasbuilder import __version__
from oasbuilder.app import app, main
from oasbuilder.exceptions import DocumentError


@pytest.fixture
def run(cli_runner: CliRunner, isolated_config: Path):
    """Invoke the root app with colour disabled."""

    def _run(*args: str, input: str | None = None):
        return cli_runner.invoke(app, ["--no-color", *args], input=input)

    return _run


@pytest.fixture
def workspace(run) -> Path:
    """A workspace holding a fresh ``Pet Store`` document."""
    result = run("new", "--title", "Pet Store")
    assert result.exit_code == 0, result.output
    return Path(".")


def _json(run, *args: str):
    result = run("--quiet", "--json", *args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def _operations(run) -> list[tuple[str, str, str]]:
    return [
        (row["Method"], row["Path"], row["Operation ID"])
        for row in _json(run, "path", "list")
    ]


# ---------------------------------------------------------------------------
# Root options and document lifecycle
# ---------------------------------------------------------------------------


class TestDocumentLifecycle:
    def test_version(self, run) -> None:
        result = run("--version")
        assert result.exit_code == 0
        assert f"oasbuilder {__version__}" in result.output

    def test_new_creates_workspace_document(self, run, isolated_config: Path) -> None:
        result = run("new", "--title", "Pet Store")
        assert result.exit_code == 0, result.output
        assert "Created new document" in result.output
        assert (isolated_config / "data" / "oasbuilder" / "document.json").exists()

    def test_new_refuses_to_overwrite(self, run, workspace: Path) -> None:
        result = run("new", "--title", "Other")
        assert result.exit_code == 2
        assert "already exists" in result.output
        assert "--force" in result.output

    def test_force_replaces_document(self, run, workspace: Path) -> None:
        result = run("--force", "new", "--title", "Other", "--openapi", "3.0.3")
        assert result.exit_code == 0, result.output
        data = _json(run, "show")
        assert data["title"] == "Other"
        assert data["openapi"] == "3.0.3"

    def test_show_without_document(self, run) -> None:
        result = run("show")
        assert result.exit_code == 2
        assert "No document at" in result.output
        assert "oasbuilder new --title" in result.output

    def test_show_json(self, run, workspace: Path) -> None:
        data = _json(run, "show")
        assert data["title"] == "Pet Store"
        assert data["version"] == "1.0.0"
        assert data["openapi"] == "3.0.0"
        assert data["paths"] == 0
        assert data["schemas"] == []
        assert data["last_saved"] is not None

    def test_document_flag_selects_file(self, run, isolated_config: Path) -> None:
        result = run("-d", "custom.json", "new", "--title", "Custom")
        assert result.exit_code == 0, result.output
        assert (isolated_config / "custom.json").exists()
        assert run("show").exit_code == 2

    def test_reset(self, run, workspace: Path) -> None:
        result = run("reset")
        assert result.exit_code == 0
        assert "Removed document" in result.output
        assert run("show").exit_code == 2

        again = run("reset")
        assert again.exit_code == 0
        assert "No document at" in again.output


# ---------------------------------------------------------------------------
# Path commands
# ---------------------------------------------------------------------------


class TestPathCommands:
    def test_list_empty(self, run, workspace: Path) -> None:
        result = run("path", "list")
        assert result.exit_code == 0
        assert "No paths defined" in result.output

    def test_add_with_methods(self, run, workspace: Path) -> None:
        result = run("path", "add", "/users/{id}", "-m", "get", "-m", "delete")
        assert result.exit_code == 0, result.output
        assert "Added path /users/{id}" in result.output

        rows = _json(run, "path", "list")
        assert rows == [
            {"#": "0", "Method": "GET", "Path": "/users/{id}",
             "Operation ID": "getUsers", "Summary": "-"},
            {"#": "0", "Method": "DELETE", "Path": "/users/{id}",
             "Operation ID": "deleteUsers", "Summary": "-"},
        ]

    def test_add_without_get(self, run, workspace: Path) -> None:
        assert run("path", "add", "/orders", "-m", "post").exit_code == 0
        assert _operations(run) == [("POST", "/orders", "postOrders")]

    def test_add_defaults_to_get(self, run, workspace: Path) -> None:
        assert run("path", "add", "/health").exit_code == 0
        assert _operations(run) == [("GET", "/health", "getHealth")]

    def test_unknown_method(self, run, workspace: Path) -> None:
        result = run("path", "add", "/users", "-m", "connect")
        assert result.exit_code == 2
        assert "Unknown method 'connect'" in result.output
        assert _json(run, "show")["paths"] == 0

    def test_add_operation(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("path", "add-operation", "0", "POST")
        assert result.exit_code == 0, result.output
        assert _operations(run) == [
            ("GET", "/users", "getUsers"),
            ("POST", "/users", "postUsers"),
        ]

    def test_add_existing_operation_is_rejected(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("path", "add-operation", "0", "get")
        assert result.exit_code == 2
        assert "Path 0 already has a get operation" in result.output

    def test_add_operation_bad_index(self, run, workspace: Path) -> None:
        result = run("path", "add-operation", "3", "get")
        assert result.exit_code == 4

    def test_remove_operation(self, run, workspace: Path) -> None:
        run("path", "add", "/users", "-m", "get", "-m", "post")
        result = run("path", "remove-operation", "0", "get")
        assert result.exit_code == 0, result.output
        assert _operations(run) == [("POST", "/users", "postUsers")]

    def test_removing_last_operation_removes_path(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        assert run("path", "remove-operation", "0", "get").exit_code == 0
        assert _json(run, "show")["paths"] == 0

    def test_remove_missing_operation(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("path", "remove-operation", "0", "put")
        assert result.exit_code == 4
        assert "has no put operation" in result.output

        result = run("path", "remove-operation", "5", "get")
        assert result.exit_code == 4
        assert "No path at index 5" in result.output

    def test_rename_resyncs_parameters(self, run, workspace: Path) -> None:
        run("path", "add", "/users/{id}")
        result = run("path", "rename", "0", "/accounts/{accountId}")
        assert result.exit_code == 0, result.output

        spec = yaml.safe_load(run("--quiet", "export").stdout)
        operation = spec["paths"]["/accounts/{accountId}"]["get"]
        assert [p["name"] for p in operation["parameters"]] == ["accountId"]

    def test_remove_path(self, run, workspace: Path) -> None:
        run("path", "add", "/a")
        run("path", "add", "/b")
        assert run("path", "remove", "0").exit_code == 0
        assert [row[1] for row in _operations(run)] == ["/b"]

    def test_duplicate_takes_next_free_method(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("path", "duplicate", "0", "get")
        assert result.exit_code == 0, result.output
        assert [row[0] for row in _operations(run)] == ["GET", "POST"]

    def test_add_errors(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("path", "add-errors", "0", "get")
        assert result.exit_code == 0, result.output

        spec = yaml.safe_load(run("--quiet", "export").stdout)
        responses = spec["paths"]["/users"]["get"]["responses"]
        assert list(responses) == ["400", "401", "403", "404", "500"]

    def test_add_response(self, run, workspace: Path) -> None:
        run("schema", "add-template", "pagination")
        run("path", "add", "/users")
        result = run("path", "add-response", "0", "get", "200", "--schema", "Pagination")
        assert result.exit_code == 0, result.output
        assert run("path", "add-response", "0", "get", "418").exit_code == 0

        spec = yaml.safe_load(run("--quiet", "export").stdout)
        responses = spec["paths"]["/users"]["get"]["responses"]
        assert responses["200"]["description"] == "OK"
        schema = responses["200"]["content"]["application/vnd.api+json"]["schema"]
        assert schema == {"$ref": "#/components/schemas/Pagination"}
        assert responses["418"]["description"] == ""

    def test_add_response_to_missing_operation(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("path", "add-response", "0", "post", "201")
        assert result.exit_code == 4


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class TestExport:
    def test_export_to_stdout(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("--quiet", "export")
        assert result.exit_code == 0
        assert result.stdout.startswith('openapi: "3.0.0"\n')
        spec = yaml.safe_load(result.stdout)
        assert spec["info"]["title"] == "Pet Store"
        assert spec["paths"]["/users"]["get"]["operationId"] == "getUsers"

    def test_export_to_file(self, run, workspace: Path, isolated_config: Path) -> None:
        result = run("export", "-o", "openapi.yaml")
        assert result.exit_code == 0, result.output
        assert "Wrote openapi.yaml" in result.output
        text = (isolated_config / "openapi.yaml").read_text(encoding="utf-8")
        assert yaml.safe_load(text)["info"]["title"] == "Pet Store"

    def test_export_without_document(self, run) -> None:
        assert run("export").exit_code == 2


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


class TestImport:
    def test_import_file(self, run, isolated_config: Path, petstore_yaml: str) -> None:
        source = isolated_config / "petstore.yaml"
        source.write_text(petstore_yaml, encoding="utf-8")

        result = run("import", str(source))
        assert result.exit_code == 0, result.output
        assert "Imported 2 path(s), 3 operation(s) and 3 schema(s)" in result.output
        assert "Warning:" in result.output

        data = _json(run, "show")
        assert data["paths"] == 2
        assert data["operations"] == 3

    def test_import_from_stdin(self, run, petstore_yaml: str) -> None:
        result = run("import", "-", input=petstore_yaml)
        assert result.exit_code == 0, result.output
        assert _json(run, "show")["paths"] == 2

    def test_import_refuses_to_overwrite(self, run, workspace: Path, petstore_yaml: str) -> None:
        result = run("import", "-", input=petstore_yaml)
        assert result.exit_code == 2
        assert _json(run, "show")["paths"] == 0

        forced = run("--force", "import", "-", input=petstore_yaml)
        assert forced.exit_code == 0, forced.output

    def test_import_without_openapi_field(self, run) -> None:
        result = run("import", "-", input="info:\n  title: T\n  version: '1'\npaths: {}\n")
        assert result.exit_code == 7
        assert run("show").exit_code == 2

    def test_import_missing_file(self, run) -> None:
        result = run("import", "nope.yaml")
        assert result.exit_code == 7
        assert "File not found: nope.yaml" in result.output


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_operation_without_responses_fails(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("validate")
        assert result.exit_code == 8
        assert "Document has" in result.output

    def test_valid_workspace(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        run("path", "add-errors", "0", "get")
        result = run("validate")
        assert result.exit_code == 0, result.output
        assert "Document is valid" in result.output

    def test_json_report(self, run, workspace: Path) -> None:
        run("path", "add", "/users")
        result = run("--quiet", "--json", "validate")
        assert result.exit_code == 8
        report = json.loads(result.stdout)
        assert report["isValid"] is False
        assert any(issue["path"].endswith("responses") for issue in report["errors"])

    def test_validate_file(self, run, isolated_config: Path, invalid_yaml: str) -> None:
        source = isolated_config / "invalid.yaml"
        source.write_text(invalid_yaml, encoding="utf-8")
        result = run("validate", str(source))
        assert result.exit_code == 8

    def test_validate_unreadable_source(self, run) -> None:
        result = run("validate", "missing.yaml")
        assert result.exit_code == 7
        assert "File not found" in result.output


# ---------------------------------------------------------------------------
# Schema commands
# ---------------------------------------------------------------------------


class TestSchemaCommands:
    def test_templates(self, run) -> None:
        rows = _json(run, "schema", "templates")
        assert [row["Key"] for row in rows] == [
            "jsonApiVersion", "errorDetail", "error", "pagination",
        ]

    def test_add_template(self, run, workspace: Path) -> None:
        result = run("schema", "add-template", "error")
        assert result.exit_code == 0, result.output
        assert "Added schema Error" in result.output
        assert _json(run, "show")["schemas"] == ["Error"]

    def test_unknown_template(self, run, workspace: Path) -> None:
        result = run("schema", "add-template", "user")
        assert result.exit_code == 2
        assert (
            "Unknown template 'user'. Available: jsonApiVersion, errorDetail, error, pagination"
            in result.output
        )

    def test_from_json(self, run, workspace: Path) -> None:
        sample = '{"id": 1, "email": "a@b.co", "tags": ["x"]}'
        result = run("schema", "from-json", "User", "-", input=sample)
        assert result.exit_code == 0, result.output
        assert "Added schema User with 3 properties" in result.output

        rows = _json(run, "schema", "list")
        assert rows == [
            {"Schema": "User", "Type": "object", "Properties": "id, email, tags", "Template": ""}
        ]

    def test_from_json_rejects_non_object(self, run, workspace: Path) -> None:
        result = run("schema", "from-json", "User", "-", input="[1, 2]")
        assert result.exit_code == 2
        assert "must be an object" in result.output

    def test_from_json_rejects_invalid_json(self, run, workspace: Path) -> None:
        result = run("schema", "from-json", "User", "-", input="{oops")
        assert result.exit_code == 2
        assert "Invalid JSON sample" in result.output

    def test_duplicate_and_remove(self, run, workspace: Path) -> None:
        run("schema", "add-template", "pagination")
        result = run("schema", "duplicate", "Pagination")
        assert result.exit_code == 0, result.output
        assert _json(run, "show")["schemas"] == ["Pagination", "Pagination_copy"]

        assert run("schema", "remove", "Pagination").exit_code == 0
        assert _json(run, "show")["schemas"] == ["Pagination_copy"]

    def test_remove_unknown_schema(self, run, workspace: Path) -> None:
        result = run("schema", "remove", "Ghost")
        assert result.exit_code == 4
        assert "No schema named 'Ghost'" in result.output

    def test_list_empty(self, run, workspace: Path) -> None:
        result = run("schema", "list")
        assert result.exit_code == 0
        assert "No schemas defined" in result.output


# ---------------------------------------------------------------------------
# Config commands
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_set_and_show(self, run) -> None:
        result = run("config", "set", "output.format", "json")
        assert result.exit_code == 0, result.output
        assert "Set output.format = json" in result.output

        data = _json(run, "config", "show")
        assert data["output.format"] == "json"

    def test_output_format_default_applies(self, run, workspace: Path) -> None:
        run("config", "set", "output.format", "json")
        result = run("--quiet", "show")
        assert json.loads(result.stdout)["title"] == "Pet Store"

    def test_default_openapi_version_applies(self, run) -> None:
        run("config", "set", "default_openapi_version", "3.0.3")
        run("new", "--title", "T")
        assert _json(run, "show")["openapi"] == "3.0.3"

    @pytest.mark.parametrize("key", ["output.missing", "missing", "output.format.deep"])
    def test_unknown_key(self, run, key: str) -> None:
        result = run("config", "set", key, "x")
        assert result.exit_code == 2
        assert "config key" in result.output

    def test_invalid_value(self, run) -> None:
        result = run("config", "set", "output.format", "xml")
        assert result.exit_code == 2
        assert "Validation error" in result.output

    def test_show_prints_config_directory(self, run, isolated_config: Path) -> None:
        result = run("config", "show")
        assert result.exit_code == 0
        assert "Config directory:" in result.output


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


class TestMain:
    def test_library_error_maps_to_exit_code(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch, capsys
    ) -> None:
        def _raise() -> None:
            raise DocumentError("broken document")

        monkeypatch.setattr("oasbuilder.app.app", _raise)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 4
        assert "broken document" in capsys.readouterr().err

    def test_unexpected_error_writes_crash_log(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch, capsys
    ) -> None:
        def _raise() -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr("oasbuilder.app.app", _raise)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Unexpected error" in capsys.readouterr().err

        logs = list((isolated_config / "data" / "oasbuilder" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text()

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _raise() -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("oasbuilder.app.app", _raise)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 130
