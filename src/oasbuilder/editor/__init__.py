"""Document editing -- pure update functions plus the helpers behind them.

Every edit of an OpenAPI document goes through this sub-package. Functions
take a :class:`~oasbuilder.models.Document` and return a new one, so the
previous version stays valid and untouched branches are shared.

Typical usage::

    from oasbuilder.editor import add_path, add_operation, new_document

    doc = new_document()
    doc = add_path(doc, "/users/{id}")
    doc = add_operation(doc, 0, "delete")

Sub-modules:

* :mod:`~oasbuilder.editor.document` -- The mutation surface (add, update,
  remove, reorder, duplicate) for every collection of the document.
* :mod:`~oasbuilder.editor.operation_id` -- Operation-id generation from a
  method and a path template.
* :mod:`~oasbuilder.editor.path_params` -- Keep path parameters in step
  with the placeholders of a path template.
* :mod:`~oasbuilder.editor.templates` -- Read-only library of reusable
  schemas.
* :mod:`~oasbuilder.editor.json_properties` -- Infer schema properties from
  a sample JSON object.
* :mod:`~oasbuilder.editor.constants` -- Method and status-code catalogs.
"""

from oasbuilder.editor.document import (
    add_cognito_security_scheme,
    add_common_error_responses,
    add_operation,
    add_parameter,
    add_path,
    add_property,
    add_request_body,
    add_response,
    add_schema,
    add_security_scheme,
    add_server,
    add_tag,
    add_template_schema,
    duplicate_operation,
    duplicate_schema,
    new_document,
    remove_operation,
    remove_parameter,
    remove_path,
    remove_property,
    remove_request_body,
    remove_response,
    remove_schema,
    remove_security_scheme,
    remove_server,
    remove_tag,
    reorder_operations,
    reorder_parameters,
    reorder_paths,
    reorder_properties,
    reorder_responses,
    reorder_schemas,
    reorder_security_schemes,
    reorder_servers,
    reorder_tags,
    update_contact,
    update_info,
    update_license,
    update_operation,
    update_parameter,
    update_path,
    update_property,
    update_request_body,
    update_response,
    update_schema,
    update_security_scheme,
    update_server,
    update_tag,
)
from oasbuilder.editor.json_properties import properties_from_json
from oasbuilder.editor.operation_id import generate_operation_id
from oasbuilder.editor.path_params import extract_path_parameters, sync_path_parameters
from oasbuilder.editor.templates import SCHEMA_TEMPLATES, get_template, template_keys
from oasbuilder.migration import migrate_legacy_format

__all__ = [
    "SCHEMA_TEMPLATES",
    "add_cognito_security_scheme",
    "add_common_error_responses",
    "add_operation",
    "add_parameter",
    "add_path",
    "add_property",
    "add_request_body",
    "add_response",
    "add_schema",
    "add_security_scheme",
    "add_server",
    "add_tag",
    "add_template_schema",
    "duplicate_operation",
    "duplicate_schema",
    "extract_path_parameters",
    "generate_operation_id",
    "get_template",
    "migrate_legacy_format",
    "new_document",
    "properties_from_json",
    "remove_operation",
    "remove_parameter",
    "remove_path",
    "remove_property",
    "remove_request_body",
    "remove_response",
    "remove_schema",
    "remove_security_scheme",
    "remove_server",
    "remove_tag",
    "reorder_operations",
    "reorder_parameters",
    "reorder_paths",
    "reorder_properties",
    "reorder_responses",
    "reorder_schemas",
    "reorder_security_schemes",
    "reorder_servers",
    "reorder_tags",
    "sync_path_parameters",
    "template_keys",
    "update_contact",
    "update_info",
    "update_license",
    "update_operation",
    "update_parameter",
    "update_path",
    "update_property",
    "update_request_body",
    "update_response",
    "update_schema",
    "update_security_scheme",
    "update_server",
    "update_tag",
]
