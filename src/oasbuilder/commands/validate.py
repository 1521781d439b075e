"""Validate command -- check a document and report problems by line.

``oasbuilder validate`` serialises the workspace document and validates the
resulting YAML, so line numbers refer to what ``oasbuilder export`` prints.
``oasbuilder validate SOURCE`` validates an existing file, URL or stdin
instead.

Exit codes: 0 when the document has no errors (warnings are allowed), 8
when it has at least one error, 7 when SOURCE cannot be read.
"""

from __future__ import annotations

from typing import Optional

import typer

from oasbuilder.commands.workspace import abort, load_workspace
from oasbuilder.exceptions import OasBuilderError, ValidationFailedError
from oasbuilder.output import debug, print_validation, success, warning


def validate_command(
    ctx: typer.Context,
    source: Optional[str] = typer.Argument(
        None, help="File path, http(s) URL or '-'. Defaults to the workspace document."
    ),
) -> None:
    """Validate an OpenAPI document.

    Example::

        oasbuilder validate
        oasbuilder validate openapi.yaml
        oasbuilder --json validate openapi.yaml
    """
    from oasbuilder.validation import validate_document_sync

    if source is None:
        from oasbuilder.generator import serialize

        document, path = load_workspace(ctx)
        text = serialize(document)
        debug(f"Validating workspace document {path}")
    else:
        from oasbuilder.parser import load_text

        try:
            text = load_text(source)
        except OasBuilderError as exc:
            abort(exc)

    result = validate_document_sync(text)
    print_validation(result)

    if not result.is_valid:
        abort(ValidationFailedError(f"Document has {len(result.errors)} error(s)"))
    if result.warnings:
        warning(f"Document is valid with {len(result.warnings)} warning(s)")
    else:
        success("Document is valid")
