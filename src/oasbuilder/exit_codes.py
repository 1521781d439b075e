"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oasbuilder.exceptions.OasBuilderError` subclass.
Shell scripts and CI jobs can branch on the exit code without parsing
stderr.

Example::

    $ oasbuilder validate openapi.yaml
    $ echo $?
    8   # EXIT_VALIDATION_FAILED -- the document has errors
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_DOCUMENT_ERROR = 4
"""An edit referenced a path, operation, schema or field that does not exist."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI text could not be read or parsed."""

EXIT_VALIDATION_FAILED = 8
"""The OpenAPI document was parsed but contains validation errors."""
