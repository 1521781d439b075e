"""OpenAPI validation with line attribution.

Typical usage::

    from oasbuilder.validation import validate_document_sync

    result = validate_document_sync(serialize(document))
    for issue in result.errors:
        print(issue.line, issue.path, issue.message)

Sub-modules:

* :mod:`~oasbuilder.validation.validator` -- The async pipeline and the
  "last call wins" :class:`~oasbuilder.validation.validator.ValidationRunner`.
* :mod:`~oasbuilder.validation.structural` -- Friendly checks for common
  mistakes.
* :mod:`~oasbuilder.validation.spec_checker` -- Full meta-schema check via
  openapi-spec-validator.
* :mod:`~oasbuilder.validation.locator` -- Key path to source line mapping.
"""

from oasbuilder.validation.locator import locate_line
from oasbuilder.validation.spec_checker import check_full_spec
from oasbuilder.validation.structural import run_structural_checks
from oasbuilder.validation.validator import (
    ValidationRunner,
    validate_document,
    validate_document_sync,
)

__all__ = [
    "ValidationRunner",
    "check_full_spec",
    "locate_line",
    "run_structural_checks",
    "validate_document",
    "validate_document_sync",
]
