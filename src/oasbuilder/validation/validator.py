"""Validate OpenAPI text and attribute every problem to a source line.

The pipeline behind :func:`validate_document`:

1. Parse the text with :func:`~oasbuilder.parser.loader.parse_text`. A
   parse failure is reported as a single ``document`` error and nothing
   else runs.
2. Run :func:`~oasbuilder.validation.structural.run_structural_checks`.
3. Run the full schema check (by default
   :func:`~oasbuilder.validation.spec_checker.check_full_spec`) in a worker
   thread, for documents declaring OpenAPI 3.0 or 3.1. A missing-field
   violation at a path that step 2 already reported as an error is
   skipped; every other violation becomes an error. A checker that raises
   contributes one ``document`` error unless it gave up on a dangling
   reference that step 2 already reported.
4. Attach line numbers with :func:`~oasbuilder.validation.locator.locate_line`.

Validation never raises. ``is_valid`` is true exactly when there are no
errors; warnings never affect it.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Callable, Optional

from oasbuilder.exceptions import SpecParseError
from oasbuilder.models import Severity, SpecViolation, ValidationIssue, ValidationResult
from oasbuilder.parser.loader import parse_text
from oasbuilder.validation.locator import locate_line
from oasbuilder.validation.spec_checker import check_full_spec
from oasbuilder.validation.structural import run_structural_checks

logger = logging.getLogger(__name__)

_MISSING_FIELD_RE = re.compile(r"is a required property$")

SpecChecker = Callable[[dict[str, Any]], list[SpecViolation]]


async def validate_document(text: str, checker: SpecChecker = check_full_spec) -> ValidationResult:
    """Validate OpenAPI *text*.

    Args:
        text: YAML or JSON text, typically the output of
            :func:`~oasbuilder.generator.serializer.serialize`.
        checker: Full schema checker; called with the parsed mapping in a
            worker thread.

    Returns:
        A :class:`~oasbuilder.models.ValidationResult`.
    """
    try:
        return await _run_pipeline(text, checker)
    except Exception as exc:
        logger.debug("Validation pipeline failed", exc_info=True)
        return ValidationResult(
            is_valid=False, errors=[_document_error(f"Validation failed: {exc}")]
        )


def validate_document_sync(text: str, checker: SpecChecker = check_full_spec) -> ValidationResult:
    """Blocking wrapper around :func:`validate_document` for synchronous callers."""
    return asyncio.run(validate_document(text, checker))


async def _run_pipeline(text: str, checker: SpecChecker) -> ValidationResult:
    try:
        spec = parse_text(text)
    except SpecParseError as exc:
        return ValidationResult(is_valid=False, errors=[_document_error(str(exc))])

    issues = run_structural_checks(spec, text)
    errors = [issue for issue in issues if issue.severity == Severity.ERROR]
    warnings = [issue for issue in issues if issue.severity == Severity.WARNING]

    if _declares_supported_version(spec):
        # Missing fields are reported by the structural errors at the same path.
        reported = {issue.path for issue in errors}
        try:
            violations = await asyncio.to_thread(checker, spec)
        except Exception as exc:
            if _is_unresolvable_reference(exc) and any(
                issue.path.endswith("$ref") for issue in errors
            ):
                # Dangling references are already reported with their line.
                logger.debug("Full check aborted on dangling reference: %s", exc)
            else:
                logger.debug("Full check raised", exc_info=True)
                errors.append(_document_error(str(exc) or "Unknown validation error"))
        else:
            for violation in violations:
                path = ".".join(str(segment) for segment in violation.path) or "document"
                if path in reported and _MISSING_FIELD_RE.search(violation.message):
                    continue
                errors.append(
                    ValidationIssue(
                        path=path,
                        message=violation.message,
                        line=locate_line(text, violation.path),
                    )
                )

    logger.debug("Validation finished: %d error(s), %d warning(s)", len(errors), len(warnings))
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def _is_unresolvable_reference(exc: BaseException) -> bool:
    names = {cls.__name__ for cls in type(exc).__mro__}
    if names & {"Unresolvable", "PointerToNowhere", "RefResolutionError", "_RefResolutionError"}:
        return True
    return "unresolvable" in str(exc).lower()


def _declares_supported_version(spec: dict[str, Any]) -> bool:
    return str(spec.get("openapi") or "").startswith(("3.0", "3.1"))


def _document_error(message: str) -> ValidationIssue:
    return ValidationIssue(path="document", message=message)


class ValidationRunner:
    """Run validations where only the most recent request matters.

    Each call to :meth:`run` supersedes the previous ones: when a newer
    call has started by the time a validation finishes, its result is
    discarded and ``None`` is returned instead.

    Example::

        runner = ValidationRunner()
        first, second = await asyncio.gather(runner.run(old_text), runner.run(new_text))
        # first is None, second is the result for new_text
    """

    def __init__(self, checker: SpecChecker = check_full_spec) -> None:
        self._checker = checker
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of validations requested so far."""
        return self._generation

    async def run(self, text: str) -> Optional[ValidationResult]:
        self._generation += 1
        generation = self._generation
        result = await validate_document(text, self._checker)
        if generation != self._generation:
            logger.debug("Discarding superseded validation #%d", generation)
            return None
        return result
