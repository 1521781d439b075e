"""Schema commands -- manage ``components/schemas`` of the workspace document.

Provides the ``oasbuilder schema`` sub-command group. Schemas are addressed
by name. New schemas come from the built-in template library
(``schema templates`` lists it) or are inferred from a sample JSON object.
"""

from __future__ import annotations

import json

import typer

from oasbuilder.commands.workspace import abort, edit_workspace, load_workspace
from oasbuilder.exceptions import DocumentError, InvalidUsageError, OasBuilderError
from oasbuilder.models import Document, Schema
from oasbuilder.output import info, print_table


schema_app = typer.Typer(no_args_is_help=True)


def _schema_index(document: Document, name: str) -> int:
    for index, schema in enumerate(document.schemas):
        if schema.name == name:
            return index
    raise DocumentError(f"No schema named '{name}'")


@schema_app.command("list")
def schema_list(ctx: typer.Context) -> None:
    """List the schemas of the workspace document.

    Shows each schema's type and up to five property names.
    """
    document, _ = load_workspace(ctx)
    if not document.schemas:
        info("No schemas defined. Try: oasbuilder schema templates")
        return

    rows: list[list[str]] = []
    for schema in document.schemas:
        names = [p.name for p in schema.properties]
        props = ", ".join(names[:5])
        if len(names) > 5:
            props += "..."
        rows.append([schema.name, schema.type, props or "-", "Yes" if schema.is_template else ""])
    print_table(
        ["Schema", "Type", "Properties", "Template"], rows, title=f"Schemas ({len(rows)})"
    )


@schema_app.command("templates")
def schema_templates() -> None:
    """List the built-in schema templates."""
    from oasbuilder.editor import SCHEMA_TEMPLATES

    rows = [
        [key, template.name, ", ".join(p.name for p in template.properties)]
        for key, template in SCHEMA_TEMPLATES.items()
    ]
    print_table(["Key", "Schema", "Properties"], rows, title="Schema templates")


@schema_app.command("add-template")
def schema_add_template(
    ctx: typer.Context,
    key: str = typer.Argument(help="Template key from 'schema templates'."),
) -> None:
    """Add a schema from the template library.

    Example::

        oasbuilder schema add-template error
    """
    from oasbuilder.editor import add_template_schema, get_template, template_keys

    template = get_template(key)
    if template is None:
        abort(
            InvalidUsageError(
                f"Unknown template '{key}'. Available: {', '.join(template_keys())}"
            )
        )
    edit_workspace(
        ctx, lambda doc: add_template_schema(doc, key), f"Added schema {template.name}"
    )


@schema_app.command("from-json")
def schema_from_json(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name of the new schema."),
    source: str = typer.Argument(help="File, http(s) URL or '-' holding a JSON object."),
) -> None:
    """Add an object schema whose properties are inferred from a JSON sample.

    Example::

        echo '{"id": 1, "email": "a@b.co"}' | oasbuilder schema from-json User -
    """
    from oasbuilder.editor import add_schema, properties_from_json
    from oasbuilder.parser import load_text

    try:
        text = load_text(source)
    except OasBuilderError as exc:
        abort(exc)
    try:
        sample = json.loads(text)
    except ValueError as exc:
        abort(InvalidUsageError(f"Invalid JSON sample: {exc}"))
    if not isinstance(sample, dict):
        abort(InvalidUsageError("JSON sample must be an object"))

    schema = Schema(name=name, type="object", properties=properties_from_json(sample))
    edit_workspace(
        ctx,
        lambda doc: add_schema(doc, schema),
        f"Added schema {name} with {len(schema.properties)} properties",
    )


@schema_app.command("duplicate")
def schema_duplicate(
    ctx: typer.Context,
    name: str = typer.Argument(help="Schema to copy."),
) -> None:
    """Copy a schema as ``<name>_copy``."""
    from oasbuilder.editor import duplicate_schema

    edit_workspace(
        ctx,
        lambda doc: duplicate_schema(doc, _schema_index(doc, name)),
        f"Added schema {name}_copy",
    )


@schema_app.command("remove")
def schema_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Schema to remove."),
) -> None:
    """Remove a schema. References to it are reported by 'validate'."""
    from oasbuilder.editor import remove_schema

    edit_workspace(
        ctx,
        lambda doc: remove_schema(doc, _schema_index(doc, name)),
        f"Removed schema {name}",
    )
