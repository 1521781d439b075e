"""Load, edit and save the workspace document on behalf of CLI commands.

Commands never touch :mod:`oasbuilder.config` storage directly; they go
through :func:`load_workspace` and :func:`edit_workspace`, which resolve the
document file from the ``--document`` flag stored in ``ctx.obj`` and turn
:class:`~oasbuilder.exceptions.OasBuilderError` into a clean exit with the
error's exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, NoReturn, Optional

import typer

from oasbuilder.exceptions import InvalidUsageError, OasBuilderError
from oasbuilder.models import Document
from oasbuilder.output import debug, error, success


def abort(exc: OasBuilderError) -> NoReturn:
    """Print *exc* and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def document_path(ctx: typer.Context) -> Path:
    """Resolve the workspace document file for this invocation."""
    from oasbuilder.config import resolve_document_path

    cli_path: Optional[str] = ctx.obj.get("document") if ctx.obj else None
    try:
        return resolve_document_path(cli_path)
    except OasBuilderError as exc:
        abort(exc)


def load_workspace(ctx: typer.Context) -> tuple[Document, Path]:
    """Load the workspace document.

    Returns:
        ``(document, path)``.

    Raises:
        typer.Exit: With code 2 when there is no document yet, or with the
            error's exit code when the stored snapshot is unreadable.
    """
    from oasbuilder.config import load_document

    path = document_path(ctx)
    try:
        loaded = load_document(path)
    except OasBuilderError as exc:
        abort(exc)
    if loaded is None:
        abort(
            InvalidUsageError(
                f"No document at {path}. Run: oasbuilder new --title <title>"
            )
        )
    document, last_saved = loaded
    debug(f"Loaded {path} (last saved {last_saved or 'unknown'})")
    return document, path


def save_workspace(document: Document, path: Path) -> None:
    from oasbuilder.config import save_document

    save_document(document, path)
    debug(f"Saved {path}")


def edit_workspace(
    ctx: typer.Context,
    edit: Callable[[Document], Document],
    message: str,
    unchanged: Optional[str] = None,
) -> Document:
    """Apply *edit* to the workspace document and save the result.

    Args:
        ctx: Typer context carrying the ``--document`` override.
        edit: Pure function from the current document to the new one.
        message: Success message printed after saving.
        unchanged: Message printed instead when *edit* returns the same
            document; nothing is saved in that case.

    Returns:
        The edited document.
    """
    document, path = load_workspace(ctx)
    try:
        updated = edit(document)
    except OasBuilderError as exc:
        abort(exc)

    if updated is document:
        error(unchanged or "Nothing to change.")
        raise typer.Exit(code=InvalidUsageError.exit_code)

    save_workspace(updated, path)
    success(message)
    return updated
