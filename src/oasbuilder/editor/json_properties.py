"""Infer schema properties from a sample JSON object.

Used by ``oasbuilder schema from-json`` to bootstrap a schema from an
example payload. Only the top level is inspected: nested objects become
untyped ``object`` properties and arrays record the type of their first
element.
"""

from __future__ import annotations

from typing import Any

from oasbuilder.models import Property, PropertyItems


def properties_from_json(sample: dict[str, Any]) -> list[Property]:
    """Build one :class:`~oasbuilder.models.Property` per key of *sample*.

    Scalar values also become the property's ``example``.

    Example::

        >>> [p.type for p in properties_from_json({"id": 1, "tags": ["a"]})]
        ['integer', 'array']
    """
    return [_infer_property(name, value) for name, value in sample.items()]


def _infer_property(name: str, value: Any) -> Property:
    if value is None:
        return Property(name=name, type="string")
    if isinstance(value, list):
        first = value[0] if value else None
        if isinstance(first, (dict, list)):
            items = PropertyItems(type="object")
        elif isinstance(first, (int, float)) and not isinstance(first, bool):
            items = PropertyItems(type="number")
        else:
            items = PropertyItems(type="string")
        return Property(name=name, type="array", items=items)
    if isinstance(value, dict):
        return Property(name=name, type="object")
    # bool must be tested before int: bool is an int subclass.
    if isinstance(value, bool):
        return Property(name=name, type="boolean", example="true" if value else "false")
    if isinstance(value, int):
        return Property(name=name, type="integer", example=str(value))
    if isinstance(value, float):
        if value.is_integer():
            return Property(name=name, type="integer", example=str(int(value)))
        return Property(name=name, type="number", example=repr(value))
    return Property(name=name, type="string", example=str(value))
