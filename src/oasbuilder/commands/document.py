"""Document commands -- create, import, export and summarise the workspace.

These commands are registered directly on the root app:

* ``oasbuilder new`` starts an empty document.
* ``oasbuilder import SOURCE`` replaces the workspace with a document read
  from a file, URL or stdin.
* ``oasbuilder export`` prints (or writes) the document as OpenAPI YAML.
* ``oasbuilder show`` prints a summary of the document.
* ``oasbuilder reset`` deletes the workspace document.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from oasbuilder.commands.workspace import (
    abort,
    document_path,
    load_workspace,
    save_workspace,
)
from oasbuilder.exceptions import InvalidUsageError, OasBuilderError, SpecParseError
from oasbuilder.output import (
    info,
    print_record,
    print_yaml,
    success,
    suggest,
    warning,
)


def _ensure_replaceable(ctx: typer.Context, path: Path) -> None:
    from oasbuilder.config import has_stored_document

    force = ctx.obj.get("force", False) if ctx.obj else False
    if has_stored_document(path) and not force:
        abort(
            InvalidUsageError(
                f"A document already exists at {path}. Use --force to replace it."
            )
        )


def new_command(
    ctx: typer.Context,
    title: str = typer.Option("", "--title", "-t", help="API title."),
    api_version: str = typer.Option(
        "1.0.0", "--api-version", help="Version of the API being described."
    ),
    openapi: Optional[str] = typer.Option(
        None, "--openapi", help="OpenAPI version (defaults to the configured one)."
    ),
) -> None:
    """Start a new, empty document in the workspace.

    Refuses to overwrite an existing workspace document unless ``--force``
    is given.

    Example::

        oasbuilder new --title "Pet Store"
        oasbuilder --force new --title "Pet Store" --openapi 3.0.3
    """
    from oasbuilder.config import load_global_config
    from oasbuilder.editor import new_document, update_info

    path = document_path(ctx)
    _ensure_replaceable(ctx, path)

    version = openapi or load_global_config().default_openapi_version
    document = update_info(new_document(version), title=title, version=api_version)
    save_workspace(document, path)
    success(f"Created new document at {path}")
    suggest("Add a path: oasbuilder path add /users")


def import_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="File path, http(s) URL, or '-' for stdin."),
) -> None:
    """Import an OpenAPI YAML or JSON document into the workspace.

    Importer warnings are printed and do not stop the import; errors leave
    the workspace untouched and exit with code 7.

    Example::

        oasbuilder import openapi.yaml
        curl -s https://example.com/openapi.yaml | oasbuilder import -
    """
    from oasbuilder.parser import import_document, load_text

    path = document_path(ctx)
    _ensure_replaceable(ctx, path)

    try:
        text = load_text(source)
    except OasBuilderError as exc:
        abort(exc)

    result = import_document(text)
    for message in result.warnings:
        warning(message)
    if not result.success or result.document is None:
        abort(SpecParseError("; ".join(result.errors) or f"Could not import {source}"))

    document = result.document
    save_workspace(document, path)
    operations = sum(len(p.operations) for p in document.paths)
    success(
        f"Imported {len(document.paths)} path(s), {operations} operation(s) "
        f"and {len(document.schemas)} schema(s) into {path}"
    )


def export_command(
    ctx: typer.Context,
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the YAML to this file instead of stdout."
    ),
) -> None:
    """Export the workspace document as OpenAPI YAML.

    Example::

        oasbuilder export
        oasbuilder export -o openapi.yaml
    """
    from oasbuilder.generator import serialize

    document, _ = load_workspace(ctx)
    text = serialize(document)

    if output_file is not None:
        output_file.write_text(text, encoding="utf-8")
        success(f"Wrote {output_file}")
        return
    print_yaml(text)


def show_command(ctx: typer.Context) -> None:
    """Show a summary of the workspace document.

    Example::

        oasbuilder show
        oasbuilder --json show
    """
    from oasbuilder.config import get_last_saved_time

    document, path = load_workspace(ctx)
    last_saved = get_last_saved_time(path)

    data = {
        "title": document.info.title or "-",
        "version": document.info.version,
        "openapi": document.openapi,
        "servers": [s.url for s in document.servers],
        "paths": len(document.paths),
        "operations": sum(len(p.operations) for p in document.paths),
        "schemas": [s.name for s in document.schemas],
        "security_schemes": [s.name for s in document.security_schemes],
        "tags": [t.name for t in document.tags],
        "last_saved": last_saved.isoformat() if last_saved else None,
    }
    info(f"Document: {path}")
    print_record(data, title=document.info.title or "Document")


def reset_command(ctx: typer.Context) -> None:
    """Delete the workspace document.

    Example::

        oasbuilder reset
    """
    from oasbuilder.config import clear_document

    path = document_path(ctx)
    if not clear_document(path):
        info(f"No document at {path}")
        return
    success(f"Removed document at {path}")
