"""Tests for oasbuilder.validation.validator and spec_checker.

The pipeline is exercised with stub checkers so the merging rules are
independent of openapi-spec-validator; a handful of tests run the real
checker end to end.
"""

from __future__ import annotations

import asyncio
import textwrap
import threading
from typing import Any

import pytest

from oasbuilder.generator.serializer import serialize
from oasbuilder.models import Document, Response, Severity, SpecViolation
from oasbuilder.validation.spec_checker import check_full_spec
from oasbuilder.validation.validator import (
    ValidationRunner,
    validate_document,
    validate_document_sync,
)

VALID = textwrap.dedent("""\
    openapi: 3.0.3
    info:
      title: T
      version: "1"
    paths:
      /health:
        get:
          operationId: getHealth
          responses:
            "200":
              description: OK
""")


class RecordingChecker:
    """Stub checker returning canned violations and recording its calls."""

    def __init__(self, violations: list[SpecViolation] | None = None, error: Exception | None = None):
        self.violations = violations or []
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def __call__(self, spec: dict[str, Any]) -> list[SpecViolation]:
        self.calls.append(spec)
        if self.error is not None:
            raise self.error
        return self.violations


# ---------------------------------------------------------------------------
# Pipeline with stub checkers
# ---------------------------------------------------------------------------


class TestValidatePipeline:
    def test_valid_document(self) -> None:
        checker = RecordingChecker()
        result = validate_document_sync(VALID, checker)
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert checker.calls[0]["info"]["title"] == "T"

    def test_parse_failure_is_single_document_error(self) -> None:
        checker = RecordingChecker()
        result = validate_document_sync("key: [unclosed", checker)
        assert result.is_valid is False
        assert [(e.path, e.line) for e in result.errors] == [("document", None)]
        assert result.errors[0].message.startswith("Invalid YAML")
        assert checker.calls == []

    def test_checker_violation_gets_a_line(self) -> None:
        checker = RecordingChecker(
            [SpecViolation(path=["paths", "/health", "get", "responses"], message="bad")]
        )
        result = validate_document_sync(VALID, checker)
        assert result.is_valid is False
        (error,) = result.errors
        assert (error.path, error.message, error.line) == ("paths./health.get.responses", "bad", 9)

    def test_violation_without_path_is_document_level(self) -> None:
        checker = RecordingChecker([SpecViolation(path=[], message="whole thing")])
        (error,) = validate_document_sync(VALID, checker).errors
        assert (error.path, error.line) == ("document", None)

    def test_duplicate_of_structural_issue_is_skipped(self) -> None:
        text = VALID.replace("  title: T\n", "")
        checker = RecordingChecker(
            [SpecViolation(path=["info", "title"], message="'title' is a required property")]
        )
        result = validate_document_sync(text, checker)
        assert [(e.path, e.message) for e in result.errors] == [
            ("info.title", 'Missing required field "info.title"')
        ]

    def test_checker_skipped_without_supported_version(self) -> None:
        checker = RecordingChecker()
        result = validate_document_sync(VALID.replace("3.0.3", '"2.0"'), checker)
        assert checker.calls == []
        assert [e.path for e in result.errors] == ["openapi"]

    def test_checker_crash_becomes_document_error(self) -> None:
        checker = RecordingChecker(error=RuntimeError("boom"))
        result = validate_document_sync(VALID, checker)
        assert [(e.path, e.message) for e in result.errors] == [("document", "boom")]

    def test_checker_crash_without_message(self) -> None:
        checker = RecordingChecker(error=ValueError())
        (error,) = validate_document_sync(VALID, checker).errors
        assert error.message == "Unknown validation error"

    def test_checker_crash_on_dangling_reference_is_not_repeated(self) -> None:
        text = VALID.replace(
            "          description: OK\n",
            "          description: OK\n"
            "          content:\n"
            "            application/json:\n"
            "              schema:\n"
            "                $ref: '#/components/schemas/Missing'\n",
        )
        checker = RecordingChecker(error=RuntimeError("Unresolvable JSON pointer"))
        result = validate_document_sync(text, checker)
        assert [e.message for e in result.errors] == [
            'Referenced schema "Missing" is not defined in components.schemas'
        ]

    def test_checker_crash_unrelated_to_references_is_kept(self) -> None:
        text = VALID.replace(
            "          description: OK\n",
            "          description: OK\n"
            "          content:\n"
            "            application/json:\n"
            "              schema:\n"
            "                $ref: '#/components/schemas/Missing'\n",
        )
        checker = RecordingChecker(error=RuntimeError("boom"))
        result = validate_document_sync(text, checker)
        assert [(e.path, e.message) for e in result.errors][-1] == ("document", "boom")
        assert len(result.errors) == 2

    def test_violation_sharing_a_warning_path_is_an_error(self) -> None:
        text = VALID + "components:\n  schemas:\n    Foo:\n      type: object\n"
        checker = RecordingChecker(
            [SpecViolation(path=["components", "schemas", "Foo"], message="not valid")]
        )
        result = validate_document_sync(text, checker)
        assert result.is_valid is False
        assert [(e.path, e.message) for e in result.errors] == [
            ("components.schemas.Foo", "not valid")
        ]
        assert [w.path for w in result.warnings] == ["components.schemas.Foo"]

    def test_other_problem_at_a_structural_error_path_is_kept(self) -> None:
        text = VALID.replace(
            "      responses:\n        \"200\":\n          description: OK\n", "      responses: {}\n"
        )
        checker = RecordingChecker(
            [SpecViolation(path=["paths", "/health", "get", "responses"], message="too short")]
        )
        result = validate_document_sync(text, checker)
        assert [e.message for e in result.errors] == [
            'Operation "GET /health" must have at least one response defined',
            "too short",
        ]

    def test_warnings_do_not_affect_validity(self) -> None:
        text = VALID.replace("      operationId: getHealth\n", "")
        result = validate_document_sync(text, RecordingChecker())
        assert result.is_valid is True
        assert [(w.path, w.severity, w.line) for w in result.warnings] == [
            ("paths./health.get.operationId", Severity.WARNING, 7)
        ]

    def test_checker_runs_off_the_event_loop_thread(self) -> None:
        seen: list[threading.Thread] = []

        def checker(spec: dict[str, Any]) -> list[SpecViolation]:
            seen.append(threading.current_thread())
            return []

        validate_document_sync(VALID, checker)
        assert seen and seen[0] is not threading.main_thread()


# ---------------------------------------------------------------------------
# ValidationRunner
# ---------------------------------------------------------------------------


class TestValidationRunner:
    def test_later_call_supersedes_earlier(self) -> None:
        runner = ValidationRunner(RecordingChecker())
        broken = VALID.replace("  title: T\n", "")

        async def scenario():
            return await asyncio.gather(runner.run(broken), runner.run(VALID))

        first, second = asyncio.run(scenario())
        assert first is None
        assert second is not None and second.is_valid
        assert runner.generation == 2

    def test_sequential_calls_all_complete(self) -> None:
        runner = ValidationRunner(RecordingChecker())

        async def scenario():
            return [await runner.run(VALID), await runner.run(VALID)]

        results = asyncio.run(scenario())
        assert all(r is not None and r.is_valid for r in results)


# ---------------------------------------------------------------------------
# Real checker
# ---------------------------------------------------------------------------


class TestFullSpecChecker:
    def test_serialized_document_is_valid(self, sample_document: Document) -> None:
        result = validate_document_sync(serialize(sample_document))
        assert result.errors == []
        assert result.warnings == []
        assert result.is_valid

    def test_missing_openapi_is_reported_once(self) -> None:
        result = validate_document_sync(VALID.replace("openapi: 3.0.3\n", ""))
        assert [(e.path, e.line) for e in result.errors] == [("openapi", 1)]

    def test_undeclared_path_parameter_is_reported_once(self) -> None:
        text = VALID.replace("/health:", "/health/{id}:")
        result = validate_document_sync(text)
        assert [e.message for e in result.errors] == [
            'Path parameter "id" is used in path but not defined in parameters'
        ]

    def test_dangling_reference_makes_document_invalid(self, sample_document: Document) -> None:
        path = sample_document.paths[0]
        get = path.operations[0].model_copy(
            update={"responses": [Response(status_code="200", description="OK", schema_ref="Ghost")]}
        )
        document = sample_document.model_copy(
            update={"paths": [path.model_copy(update={"operations": [get]})]}
        )
        result = validate_document_sync(serialize(document))
        assert result.is_valid is False
        assert 'Referenced schema "Ghost" is not defined in components.schemas' in [
            e.message for e in result.errors
        ]

    def test_schema_violation_next_to_a_warning_makes_document_invalid(self) -> None:
        text = VALID + textwrap.dedent("""\
            components:
              schemas:
                Foo:
                  type: object
                  bogus: 1
        """)
        result = validate_document_sync(text)
        assert result.is_valid is False
        assert "components.schemas.Foo" in [e.path for e in result.errors]

    def test_check_full_spec_reports_schema_violations(self) -> None:
        violations = check_full_spec(
            {"openapi": "3.0.3", "info": {"title": "T"}, "paths": {}}
        )
        assert violations
        assert any(v.path[:2] == ["info", "version"] for v in violations)

    def test_check_full_spec_clean(self) -> None:
        spec = {"openapi": "3.1.0", "info": {"title": "T", "version": "1"}, "paths": {}}
        assert check_full_spec(spec) == []


@pytest.mark.parametrize("text", ["", "- just\n- a list\n"])
def test_validate_document_never_raises(text: str) -> None:
    result = asyncio.run(validate_document(text, RecordingChecker()))
    assert result.is_valid is False
    assert len(result.errors) == 1
