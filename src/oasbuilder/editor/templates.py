"""Read-only catalog of reusable schemas insertable by key.

The catalog covers the JSON:API error envelope (``jsonApiVersion``,
``errorDetail``, ``error``) and a ``pagination`` block. ``error`` refers to
``JsonApiVersion`` and ``ErrorDetail`` by name, so inserting it alone leaves
deferred references for the validator to report.

Entries are frozen :class:`~oasbuilder.models.Schema` instances in an
immutable mapping; inserting one into a document shares the instance.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from oasbuilder.models import Property, PropertyItems, Schema


def _prop(name: str, type_: str, description: str, example: str = "", **extra) -> Property:
    return Property(name=name, type=type_, description=description, example=example, **extra)


SCHEMA_TEMPLATES: Mapping[str, Schema] = MappingProxyType(
    {
        "jsonApiVersion": Schema(
            name="JsonApiVersion",
            type="object",
            is_template=True,
            properties=[
                _prop("version", "string", "JSON API version", "1.0"),
            ],
        ),
        "errorDetail": Schema(
            name="ErrorDetail",
            type="object",
            is_template=True,
            properties=[
                _prop("status", "string", "HTTP status code of the error", "401"),
                _prop("code", "string", "Application-specific error code", "02x102"),
                _prop(
                    "id",
                    "string",
                    "Unique identifier for the error",
                    "2897ff46-271a-4add-a5b7-8e569bab7352",
                ),
            ],
        ),
        "error": Schema(
            name="Error",
            type="object",
            is_template=True,
            properties=[
                _prop("jsonapi", "object", "JSON API version information", ref="JsonApiVersion"),
                _prop(
                    "errors",
                    "array",
                    "List of errors",
                    items=PropertyItems(type="object", ref="ErrorDetail"),
                ),
            ],
        ),
        "pagination": Schema(
            name="Pagination",
            type="object",
            is_template=True,
            properties=[
                _prop("page", "integer", "Current page number", "1"),
                _prop("pageSize", "integer", "Number of items per page", "20"),
                _prop("totalPages", "integer", "Total number of pages", "10"),
                _prop("totalItems", "integer", "Total number of items", "200"),
            ],
        ),
    }
)


def get_template(key: str) -> Optional[Schema]:
    """Return the template schema stored under *key*, or ``None``."""
    return SCHEMA_TEMPLATES.get(key)


def template_keys() -> list[str]:
    return list(SCHEMA_TEMPLATES)
