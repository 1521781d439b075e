"""Path commands -- edit the paths and operations of the workspace document.

Provides the ``oasbuilder path`` sub-command group. Paths are addressed by
the index shown in ``oasbuilder path list`` and operations by their HTTP
method, since a path holds at most one operation per method.
"""

from __future__ import annotations

from typing import Optional

import typer

from oasbuilder.commands.workspace import abort, edit_workspace, load_workspace
from oasbuilder.exceptions import DocumentError, InvalidUsageError
from oasbuilder.models import Document, HTTPMethod
from oasbuilder.output import info, print_table


path_app = typer.Typer(no_args_is_help=True)


def _method(value: str) -> HTTPMethod:
    try:
        return HTTPMethod(value.lower())
    except ValueError:
        from oasbuilder.editor.constants import HTTP_METHODS

        choices = ", ".join(HTTP_METHODS)
        abort(InvalidUsageError(f"Unknown method '{value}'. Choose from: {choices}"))


def _operation_index(document: Document, path_index: int, method: HTTPMethod) -> int:
    """Return the position of *method*'s operation on a path.

    Raises:
        DocumentError: If the path or the operation does not exist.
    """
    if not 0 <= path_index < len(document.paths):
        raise DocumentError(f"No path at index {path_index} (have {len(document.paths)})")
    path = document.paths[path_index]
    for index, operation in enumerate(path.operations):
        if operation.method == method:
            return index
    raise DocumentError(f"Path '{path.path}' has no {method.value} operation")


@path_app.command("list")
def path_list(ctx: typer.Context) -> None:
    """List every operation with its path index.

    Example::

        oasbuilder path list
        oasbuilder --json path list
    """
    document, _ = load_workspace(ctx)
    if not document.paths:
        info("No paths defined. Add one with: oasbuilder path add /users")
        return

    rows: list[list[str]] = []
    for index, path in enumerate(document.paths):
        for operation in path.operations:
            rows.append([
                str(index),
                operation.method.value.upper(),
                path.path,
                operation.operation_id or "-",
                operation.summary or "-",
            ])
    print_table(
        ["#", "Method", "Path", "Operation ID", "Summary"],
        rows,
        title=f"Paths ({len(document.paths)})",
    )


@path_app.command("add")
def path_add(
    ctx: typer.Context,
    template: str = typer.Argument(help="Path template, e.g. /users/{id}."),
    methods: Optional[list[str]] = typer.Option(
        None, "--method", "-m", help="Method to declare (repeatable). Defaults to get."
    ),
) -> None:
    """Add a path with one operation per requested method.

    Operation ids are generated from the method and template, and every
    ``{placeholder}`` becomes a required path parameter.

    Example::

        oasbuilder path add /users/{id}
        oasbuilder path add /users -m get -m post
    """
    from oasbuilder.editor import add_operation, add_path, remove_operation

    wanted = [_method(m) for m in methods] if methods else [HTTPMethod.GET]

    def _edit(document: Document) -> Document:
        updated = add_path(document, template)
        index = len(updated.paths) - 1
        for method in wanted:
            updated = add_operation(updated, index, method)
        if HTTPMethod.GET not in wanted:
            updated = remove_operation(updated, index, 0)
        return updated

    edit_workspace(ctx, _edit, f"Added path {template}")


@path_app.command("rename")
def path_rename(
    ctx: typer.Context,
    index: int = typer.Argument(help="Path index from 'path list'."),
    template: str = typer.Argument(help="New path template."),
) -> None:
    """Change a path template and re-sync its path parameters.

    Example::

        oasbuilder path rename 0 /accounts/{accountId}
    """
    from oasbuilder.editor import update_path

    edit_workspace(
        ctx, lambda doc: update_path(doc, index, template), f"Path {index} is now {template}"
    )


@path_app.command("remove")
def path_remove(
    ctx: typer.Context,
    index: int = typer.Argument(help="Path index from 'path list'."),
) -> None:
    """Remove a path and all of its operations."""
    from oasbuilder.editor import remove_path

    edit_workspace(ctx, lambda doc: remove_path(doc, index), f"Removed path {index}")


@path_app.command("add-operation")
def path_add_operation(
    ctx: typer.Context,
    index: int = typer.Argument(help="Path index from 'path list'."),
    method: str = typer.Argument(help="HTTP method."),
) -> None:
    """Declare another method on an existing path.

    Example::

        oasbuilder path add-operation 0 post
    """
    from oasbuilder.editor import add_operation

    wanted = _method(method)
    edit_workspace(
        ctx,
        lambda doc: add_operation(doc, index, wanted),
        f"Added {wanted.value} operation to path {index}",
        unchanged=f"Path {index} already has a {wanted.value} operation",
    )


@path_app.command("remove-operation")
def path_remove_operation(
    ctx: typer.Context,
    index: int = typer.Argument(help="Path index from 'path list'."),
    method: str = typer.Argument(help="HTTP method."),
) -> None:
    """Remove one operation; the path goes with its last operation."""
    from oasbuilder.editor import remove_operation

    wanted = _method(method)
    edit_workspace(
        ctx,
        lambda doc: remove_operation(doc, index, _operation_index(doc, index, wanted)),
        f"Removed {wanted.value} operation from path {index}",
    )


@path_app.command("duplicate")
def path_duplicate(
    ctx: typer.Context,
    index: int = typer.Argument(help="Path index from 'path list'."),
    method: str = typer.Argument(help="HTTP method of the operation to copy."),
) -> None:
    """Copy an operation onto the next free method of its path.

    When every method is taken, the copy goes to a new ``<path>_copy`` path.
    """
    from oasbuilder.editor import duplicate_operation

    wanted = _method(method)
    edit_workspace(
        ctx,
        lambda doc: duplicate_operation(doc, index, _operation_index(doc, index, wanted)),
        f"Duplicated {wanted.value} operation of path {index}",
    )


@path_app.command("add-errors")
def path_add_errors(
    ctx: typer.Context,
    index: int = typer.Argument(help="Path index from 'path list'."),
    method: str = typer.Argument(help="HTTP method."),
) -> None:
    """Append the common 400/401/403/404/500 responses to an operation."""
    from oasbuilder.editor import add_common_error_responses

    wanted = _method(method)
    edit_workspace(
        ctx,
        lambda doc: add_common_error_responses(doc, index, _operation_index(doc, index, wanted)),
        f"Added common error responses to {wanted.value} operation of path {index}",
    )


@path_app.command("add-response")
def path_add_response(
    ctx: typer.Context,
    index: int = typer.Argument(help="Path index from 'path list'."),
    method: str = typer.Argument(help="HTTP method."),
    status: str = typer.Argument(help="Status code, e.g. 200 or 404."),
    description: Optional[str] = typer.Option(
        None, "--description", help="Defaults to the reason phrase of known codes."
    ),
    schema: str = typer.Option("", "--schema", "-s", help="Schema name for the body."),
) -> None:
    """Append one response to an operation.

    Example::

        oasbuilder path add-response 0 get 200 --schema User
    """
    from oasbuilder.editor import add_response
    from oasbuilder.editor.constants import STATUS_CODES
    from oasbuilder.models import Response

    wanted = _method(method)
    if description is None:
        labels = dict(STATUS_CODES)
        description = labels[status].split(" - ", 1)[1] if status in labels else ""
    response = Response(status_code=status, description=description, schema_ref=schema)
    edit_workspace(
        ctx,
        lambda doc: add_response(doc, index, _operation_index(doc, index, wanted), response),
        f"Added {status} response to {wanted.value} operation of path {index}",
    )
