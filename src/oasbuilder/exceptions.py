"""Exception hierarchy for oasbuilder.

All exceptions inherit from :class:`OasBuilderError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oasbuilder.exit_codes`.
The top-level error handler in :func:`oasbuilder.app.main` catches
``OasBuilderError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The importer and the validator never let these escape: they turn every
failure into diagnostics on their result objects.

Subclass hierarchy::

    OasBuilderError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- DocumentError          (exit 4)
    +-- SpecParseError         (exit 7)
    +-- ValidationFailedError  (exit 8)
    +-- ConfigError            (exit 1)
"""

from oasbuilder.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_VALIDATION_FAILED,
)


class OasBuilderError(Exception):
    """Base exception for all oasbuilder errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`oasbuilder.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(OasBuilderError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class DocumentError(OasBuilderError):
    """Raised when an edit targets a missing index or an unknown field."""

    exit_code = EXIT_DOCUMENT_ERROR


class SpecParseError(OasBuilderError):
    """Raised when OpenAPI text cannot be read or parsed as a YAML mapping."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ValidationFailedError(OasBuilderError):
    """Raised by the CLI when a validated document has at least one error."""

    exit_code = EXIT_VALIDATION_FAILED


class ConfigError(OasBuilderError):
    """Raised for configuration problems (invalid JSON, unreadable workspace files)."""

    exit_code = EXIT_GENERIC_FAILURE
