"""Pure update functions over :class:`~oasbuilder.models.Document`.

Every function takes the current document and returns a new one; nothing is
mutated in place. Only the branch that changes is rebuilt: siblings keep
their identity, so ``new.schemas is old.schemas`` holds after a path edit and
callers can detect changes with an identity check.

Indexes address the ordered collections of the document (paths, operations
within a path, schemas, ...). An index that does not exist, or a field name
the target model does not declare, raises
:class:`~oasbuilder.exceptions.DocumentError`.

Besides plain add/update/remove/reorder, a few edits carry behaviour of
their own:

* :func:`update_path` re-synchronises path parameters of every operation.
* :func:`add_operation` generates an operation id and seeds path parameters.
* :func:`remove_operation` drops the path once its last operation is gone.
* :func:`duplicate_operation` and :func:`duplicate_schema` clone with
  ``_copy`` suffixes or a fresh method.
* :func:`add_common_error_responses` appends the canned 4xx/5xx responses.
* :func:`add_template_schema` inserts a schema from the template library.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from oasbuilder.editor.constants import COMMON_ERROR_DESCRIPTIONS
from oasbuilder.editor.operation_id import generate_operation_id
from oasbuilder.editor.path_params import sync_path_parameters
from oasbuilder.editor.templates import get_template
from oasbuilder.exceptions import DocumentError
from oasbuilder.models import (
    Contact,
    Document,
    HTTPMethod,
    License,
    Operation,
    Parameter,
    ParameterLocation,
    Path,
    Property,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
    Server,
    Tag,
)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Generic list and model helpers
# ---------------------------------------------------------------------------


def _check_index(items: list[Any], index: int, label: str) -> None:
    if not 0 <= index < len(items):
        raise DocumentError(f"No {label} at index {index} (have {len(items)})")


def _replace_at(items: list[T], index: int, item: T) -> list[T]:
    return [item if i == index else existing for i, existing in enumerate(items)]


def _remove_at(items: list[T], index: int) -> list[T]:
    return [existing for i, existing in enumerate(items) if i != index]


def _move(items: list[T], old_index: int, new_index: int, label: str) -> list[T]:
    _check_index(items, old_index, label)
    _check_index(items, new_index, label)
    result = list(items)
    moved = result.pop(old_index)
    result.insert(new_index, moved)
    return result


def _apply(model: M, changes: dict[str, Any]) -> M:
    """Return a validated copy of *model* with *changes* applied.

    Unchanged nested models are carried over as the same instances.
    """
    fields = type(model).model_fields
    by_alias = {info.alias: name for name, info in fields.items() if info.alias}
    unknown = sorted(key for key in changes if key not in fields and key not in by_alias)
    if unknown:
        raise DocumentError(
            f"Unknown {type(model).__name__} field(s): {', '.join(unknown)}"
        )
    normalized = {by_alias.get(key, key): value for key, value in changes.items()}
    try:
        return type(model).model_validate({**dict(model), **normalized})
    except ValidationError as exc:
        raise DocumentError(f"Invalid {type(model).__name__} update: {exc}") from exc


def _add(doc: Document, field: str, item: Any) -> Document:
    return doc.model_copy(update={field: [*getattr(doc, field), item]})


def _update(doc: Document, field: str, index: int, changes: dict[str, Any], label: str) -> Document:
    items = getattr(doc, field)
    _check_index(items, index, label)
    return doc.model_copy(
        update={field: _replace_at(items, index, _apply(items[index], changes))}
    )


def _remove(doc: Document, field: str, index: int, label: str) -> Document:
    items = getattr(doc, field)
    _check_index(items, index, label)
    return doc.model_copy(update={field: _remove_at(items, index)})


def _reorder(doc: Document, field: str, old_index: int, new_index: int, label: str) -> Document:
    return doc.model_copy(
        update={field: _move(getattr(doc, field), old_index, new_index, label)}
    )


def _map_path(doc: Document, path_index: int, fn: Callable[[Path], Path]) -> Document:
    _check_index(doc.paths, path_index, "path")
    new_path = fn(doc.paths[path_index])
    return doc.model_copy(update={"paths": _replace_at(doc.paths, path_index, new_path)})


def _map_operation(
    doc: Document,
    path_index: int,
    operation_index: int,
    fn: Callable[[Operation], Operation],
) -> Document:
    def _on_path(path: Path) -> Path:
        _check_index(path.operations, operation_index, "operation")
        new_op = fn(path.operations[operation_index])
        return path.model_copy(
            update={"operations": _replace_at(path.operations, operation_index, new_op)}
        )

    return _map_path(doc, path_index, _on_path)


def _map_schema(doc: Document, schema_index: int, fn: Callable[[Schema], Schema]) -> Document:
    _check_index(doc.schemas, schema_index, "schema")
    new_schema = fn(doc.schemas[schema_index])
    return doc.model_copy(
        update={"schemas": _replace_at(doc.schemas, schema_index, new_schema)}
    )


def _list_edit(field: str, edit: Callable[[list[Any]], list[Any]]):
    """Build a model transformer that rewrites the list stored in *field*."""

    def _transform(model: M) -> M:
        return model.model_copy(update={field: edit(getattr(model, field))})

    return _transform


def _updated_at(index: int, changes: dict[str, Any], label: str):
    def _edit(items: list[Any]) -> list[Any]:
        _check_index(items, index, label)
        return _replace_at(items, index, _apply(items[index], changes))

    return _edit


def _removed_at(index: int, label: str):
    def _edit(items: list[Any]) -> list[Any]:
        _check_index(items, index, label)
        return _remove_at(items, index)

    return _edit


def _moved(old_index: int, new_index: int, label: str):
    return lambda items: _move(items, old_index, new_index, label)


def _appended(*new_items: Any):
    return lambda items: [*items, *new_items]


# ---------------------------------------------------------------------------
# Document and info
# ---------------------------------------------------------------------------


def new_document(openapi: str = "3.0.0") -> Document:
    """Return an empty document (blank title, version ``1.0.0``)."""
    return Document(openapi=openapi)


def update_info(doc: Document, **changes: Any) -> Document:
    return doc.model_copy(update={"info": _apply(doc.info, changes)})


def update_contact(doc: Document, **changes: Any) -> Document:
    contact = _apply(doc.info.contact or Contact(), changes)
    return doc.model_copy(update={"info": doc.info.model_copy(update={"contact": contact})})


def update_license(doc: Document, **changes: Any) -> Document:
    license_ = _apply(doc.info.license or License(), changes)
    return doc.model_copy(update={"info": doc.info.model_copy(update={"license": license_})})


# ---------------------------------------------------------------------------
# Tags, servers, security schemes
# ---------------------------------------------------------------------------


def add_tag(doc: Document, tag: Optional[Tag] = None) -> Document:
    return _add(doc, "tags", tag or Tag())


def update_tag(doc: Document, index: int, **changes: Any) -> Document:
    return _update(doc, "tags", index, changes, "tag")


def remove_tag(doc: Document, index: int) -> Document:
    return _remove(doc, "tags", index, "tag")


def reorder_tags(doc: Document, old_index: int, new_index: int) -> Document:
    return _reorder(doc, "tags", old_index, new_index, "tag")


def add_server(doc: Document, server: Optional[Server] = None) -> Document:
    return _add(doc, "servers", server or Server())


def update_server(doc: Document, index: int, **changes: Any) -> Document:
    return _update(doc, "servers", index, changes, "server")


def remove_server(doc: Document, index: int) -> Document:
    return _remove(doc, "servers", index, "server")


def reorder_servers(doc: Document, old_index: int, new_index: int) -> Document:
    return _reorder(doc, "servers", old_index, new_index, "server")


def add_security_scheme(doc: Document, scheme: Optional[SecurityScheme] = None) -> Document:
    """Append *scheme*, by default an unnamed HTTP bearer scheme with JWT format."""
    default = SecurityScheme(name="", type="http", scheme="bearer", bearer_format="JWT")
    return _add(doc, "security_schemes", scheme or default)


def add_cognito_security_scheme(doc: Document) -> Document:
    """Append the canned ``Cognito`` scheme: an API key in the ``Authorization`` header."""
    cognito = SecurityScheme(
        name="Cognito", type="apiKey", location="header", api_key_name="Authorization"
    )
    return _add(doc, "security_schemes", cognito)


def update_security_scheme(doc: Document, index: int, **changes: Any) -> Document:
    return _update(doc, "security_schemes", index, changes, "security scheme")


def remove_security_scheme(doc: Document, index: int) -> Document:
    return _remove(doc, "security_schemes", index, "security scheme")


def reorder_security_schemes(doc: Document, old_index: int, new_index: int) -> Document:
    return _reorder(doc, "security_schemes", old_index, new_index, "security scheme")


# ---------------------------------------------------------------------------
# Paths and operations
# ---------------------------------------------------------------------------


def add_path(doc: Document, template: str = "") -> Document:
    """Append a path holding a single ``get`` operation.

    When *template* is given, the operation id is generated from it and its
    placeholders are seeded as path parameters.
    """
    operation = Operation(
        method=HTTPMethod.GET,
        operation_id=generate_operation_id("get", template) if template else "",
        parameters=sync_path_parameters([], template),
    )
    return _add(doc, "paths", Path(path=template, operations=[operation]))


def update_path(doc: Document, index: int, template: str) -> Document:
    """Change a path template and re-sync every operation's path parameters."""

    def _retemplate(path: Path) -> Path:
        operations = [
            op.model_copy(update={"parameters": sync_path_parameters(op.parameters, template)})
            for op in path.operations
        ]
        return path.model_copy(update={"path": template, "operations": operations})

    return _map_path(doc, index, _retemplate)


def remove_path(doc: Document, index: int) -> Document:
    return _remove(doc, "paths", index, "path")


def reorder_paths(doc: Document, old_index: int, new_index: int) -> Document:
    return _reorder(doc, "paths", old_index, new_index, "path")


def add_operation(doc: Document, path_index: int, method: HTTPMethod | str) -> Document:
    """Add an operation for *method* to a path.

    Returns *doc* unchanged when the path already declares that method.
    """
    method = HTTPMethod(method)
    _check_index(doc.paths, path_index, "path")
    path = doc.paths[path_index]
    if path.find_operation(method) is not None:
        return doc

    operation = Operation(
        method=method,
        operation_id=generate_operation_id(method.value, path.path),
        parameters=sync_path_parameters([], path.path),
    )
    return _map_path(doc, path_index, _list_edit("operations", _appended(operation)))


def update_operation(doc: Document, path_index: int, operation_index: int, **changes: Any) -> Document:
    """Update fields of an operation.

    Raises:
        DocumentError: If the update would give the path two operations
            with the same method.
    """
    _check_index(doc.paths, path_index, "path")
    path = doc.paths[path_index]
    if "method" in changes:
        try:
            method = HTTPMethod(changes["method"])
        except ValueError as exc:
            raise DocumentError(f"Invalid Operation update: {exc}") from exc
        clash = path.find_operation(method)
        if clash is not None and path.operations.index(clash) != operation_index:
            raise DocumentError(
                f"Path '{path.path}' already has a {clash.method.value} operation"
            )
    return _map_operation(doc, path_index, operation_index, lambda op: _apply(op, changes))


def remove_operation(doc: Document, path_index: int, operation_index: int) -> Document:
    """Remove an operation; the path itself goes when no operation is left."""
    _check_index(doc.paths, path_index, "path")
    path = doc.paths[path_index]
    _check_index(path.operations, operation_index, "operation")
    remaining = _remove_at(path.operations, operation_index)
    if not remaining:
        return doc.model_copy(update={"paths": _remove_at(doc.paths, path_index)})
    return doc.model_copy(
        update={
            "paths": _replace_at(
                doc.paths, path_index, path.model_copy(update={"operations": remaining})
            )
        }
    )


def reorder_operations(doc: Document, path_index: int, old_index: int, new_index: int) -> Document:
    return _map_path(
        doc, path_index, _list_edit("operations", _moved(old_index, new_index, "operation"))
    )


def duplicate_operation(doc: Document, path_index: int, operation_index: int) -> Document:
    """Clone an operation onto the first free method of its path.

    Methods are tried in :class:`~oasbuilder.models.HTTPMethod` order and
    the clone gets an operation id generated for its new method. When all
    five methods are taken, a new path ``<template>_copy`` is appended
    holding only the clone, whose operation id gets a ``_copy`` suffix.
    Parameters and responses are copied, never shared.
    """
    _check_index(doc.paths, path_index, "path")
    path = doc.paths[path_index]
    _check_index(path.operations, operation_index, "operation")
    operation = path.operations[operation_index]

    copied = {
        "tags": list(operation.tags),
        "parameters": [p.model_copy() for p in operation.parameters],
        "responses": [r.model_copy() for r in operation.responses],
    }
    used = {op.method for op in path.operations}
    free = next((m for m in HTTPMethod if m not in used), None)

    if free is None:
        clone = operation.model_copy(
            update={**copied, "operation_id": f"{operation.operation_id}_copy"}
        )
        return _add(doc, "paths", Path(path=f"{path.path}_copy", operations=[clone]))

    clone = operation.model_copy(
        update={
            **copied,
            "method": free,
            "operation_id": generate_operation_id(free.value, path.path),
        }
    )
    return _map_path(doc, path_index, _list_edit("operations", _appended(clone)))


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


def add_parameter(
    doc: Document, path_index: int, operation_index: int, parameter: Optional[Parameter] = None
) -> Document:
    default = Parameter(
        name="", location=ParameterLocation.PATH, description="", required=True, type="string"
    )
    edit = _list_edit("parameters", _appended(parameter or default))
    return _map_operation(doc, path_index, operation_index, edit)


def update_parameter(
    doc: Document, path_index: int, operation_index: int, parameter_index: int, **changes: Any
) -> Document:
    edit = _list_edit("parameters", _updated_at(parameter_index, changes, "parameter"))
    return _map_operation(doc, path_index, operation_index, edit)


def remove_parameter(
    doc: Document, path_index: int, operation_index: int, parameter_index: int
) -> Document:
    edit = _list_edit("parameters", _removed_at(parameter_index, "parameter"))
    return _map_operation(doc, path_index, operation_index, edit)


def reorder_parameters(
    doc: Document, path_index: int, operation_index: int, old_index: int, new_index: int
) -> Document:
    edit = _list_edit("parameters", _moved(old_index, new_index, "parameter"))
    return _map_operation(doc, path_index, operation_index, edit)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def add_response(
    doc: Document, path_index: int, operation_index: int, response: Optional[Response] = None
) -> Document:
    edit = _list_edit("responses", _appended(response or Response()))
    return _map_operation(doc, path_index, operation_index, edit)


def update_response(
    doc: Document, path_index: int, operation_index: int, response_index: int, **changes: Any
) -> Document:
    edit = _list_edit("responses", _updated_at(response_index, changes, "response"))
    return _map_operation(doc, path_index, operation_index, edit)


def remove_response(
    doc: Document, path_index: int, operation_index: int, response_index: int
) -> Document:
    edit = _list_edit("responses", _removed_at(response_index, "response"))
    return _map_operation(doc, path_index, operation_index, edit)


def reorder_responses(
    doc: Document, path_index: int, operation_index: int, old_index: int, new_index: int
) -> Document:
    edit = _list_edit("responses", _moved(old_index, new_index, "response"))
    return _map_operation(doc, path_index, operation_index, edit)


def add_common_error_responses(doc: Document, path_index: int, operation_index: int) -> Document:
    """Append 400, 401, 403, 404 and 500 responses with canned descriptions.

    They reference the ``Error`` schema when the document defines one and
    are left untyped otherwise.
    """
    schema_ref = "Error" if doc.find_schema("Error") is not None else ""
    responses = [
        Response(status_code=code, description=description, schema_ref=schema_ref)
        for code, description in COMMON_ERROR_DESCRIPTIONS
    ]
    edit = _list_edit("responses", _appended(*responses))
    return _map_operation(doc, path_index, operation_index, edit)


# ---------------------------------------------------------------------------
# Request body
# ---------------------------------------------------------------------------


def add_request_body(
    doc: Document, path_index: int, operation_index: int, body: Optional[RequestBody] = None
) -> Document:
    return _map_operation(
        doc,
        path_index,
        operation_index,
        lambda op: op.model_copy(update={"request_body": body or RequestBody()}),
    )


def update_request_body(
    doc: Document, path_index: int, operation_index: int, **changes: Any
) -> Document:
    """Update the request body, creating a default one first if absent."""
    return _map_operation(
        doc,
        path_index,
        operation_index,
        lambda op: op.model_copy(
            update={"request_body": _apply(op.request_body or RequestBody(), changes)}
        ),
    )


def remove_request_body(doc: Document, path_index: int, operation_index: int) -> Document:
    return _map_operation(
        doc, path_index, operation_index, lambda op: op.model_copy(update={"request_body": None})
    )


# ---------------------------------------------------------------------------
# Schemas and properties
# ---------------------------------------------------------------------------


def add_schema(doc: Document, schema: Optional[Schema] = None) -> Document:
    return _add(doc, "schemas", schema or Schema())


def add_template_schema(doc: Document, key: str) -> Document:
    """Append the template stored under *key*; unknown keys leave *doc* unchanged."""
    template = get_template(key)
    if template is None:
        return doc
    return _add(doc, "schemas", template)


def update_schema(doc: Document, index: int, **changes: Any) -> Document:
    return _update(doc, "schemas", index, changes, "schema")


def remove_schema(doc: Document, index: int) -> Document:
    return _remove(doc, "schemas", index, "schema")


def reorder_schemas(doc: Document, old_index: int, new_index: int) -> Document:
    return _reorder(doc, "schemas", old_index, new_index, "schema")


def duplicate_schema(doc: Document, index: int) -> Document:
    """Append a copy of a schema named ``<name>_copy`` with copied properties."""
    _check_index(doc.schemas, index, "schema")
    schema = doc.schemas[index]
    clone = schema.model_copy(
        update={
            "name": f"{schema.name}_copy",
            "properties": [p.model_copy() for p in schema.properties],
        }
    )
    return _add(doc, "schemas", clone)


def add_property(doc: Document, schema_index: int, prop: Optional[Property] = None) -> Document:
    edit = _list_edit("properties", _appended(prop or Property(type="string")))
    return _map_schema(doc, schema_index, edit)


def update_property(doc: Document, schema_index: int, property_index: int, **changes: Any) -> Document:
    edit = _list_edit("properties", _updated_at(property_index, changes, "property"))
    return _map_schema(doc, schema_index, edit)


def remove_property(doc: Document, schema_index: int, property_index: int) -> Document:
    edit = _list_edit("properties", _removed_at(property_index, "property"))
    return _map_schema(doc, schema_index, edit)


def reorder_properties(doc: Document, schema_index: int, old_index: int, new_index: int) -> Document:
    edit = _list_edit("properties", _moved(old_index, new_index, "property"))
    return _map_schema(doc, schema_index, edit)
