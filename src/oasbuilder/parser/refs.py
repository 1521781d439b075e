"""Work with ``$ref`` JSON Reference pointers.

The document model refers to schemas by bare name, while OpenAPI text uses
``#/components/schemas/<Name>`` pointers. This module converts between the
two and resolves internal pointers against a parsed document:

* :func:`schema_ref_name` / :func:`schema_ref` -- pointer <-> schema name.
* :func:`resolve_pointer` -- follow an internal ``#/...`` pointer.
* :func:`iter_refs` -- walk a parsed document and yield every ``$ref``.

Only **internal** references are handled; external file or URL references
are out of scope.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Optional, Union

from oasbuilder.exceptions import SpecParseError

SCHEMA_REF_PREFIX = "#/components/schemas/"

_SCHEMA_REF_RE = re.compile(r"#/components/schemas/(.+)")


def schema_ref_name(ref: Any) -> Optional[str]:
    """Extract the schema name from a ``#/components/schemas/<Name>`` pointer.

    Returns:
        The name, ``""`` for a missing or empty *ref*, or ``None`` when
        *ref* has any other shape.

    Example::

        >>> schema_ref_name("#/components/schemas/PaymentPlan")
        'PaymentPlan'
        >>> schema_ref_name("#/components/responses/NotFound") is None
        True
    """
    if not ref:
        return ""
    if not isinstance(ref, str):
        return None
    match = _SCHEMA_REF_RE.search(ref)
    return match.group(1) if match else None


def schema_ref(name: str) -> str:
    """Build the pointer for the schema called *name*."""
    return f"{SCHEMA_REF_PREFIX}{name}"


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single internal ``$ref`` string against *root*.

    Handles RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).
        root: The parsed document to resolve against.

    Returns:
        The value found at the referenced location.

    Raises:
        SpecParseError: If the reference is external, or if any segment in
            the pointer does not exist in the document.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def iter_refs(
    obj: Any, path: tuple[Union[str, int], ...] = ()
) -> Iterator[tuple[tuple[Union[str, int], ...], str]]:
    """Yield ``(location, ref)`` for every string ``$ref`` inside *obj*.

    *location* is the key path of the ``$ref`` entry itself, ending in
    ``"$ref"``, suitable for :func:`~oasbuilder.validation.locator.locate_line`.
    """
    if isinstance(obj, dict):
        for key, value in obj.items():
            if key == "$ref" and isinstance(value, str):
                yield (*path, "$ref"), value
            else:
                yield from iter_refs(value, (*path, str(key)))
    elif isinstance(obj, list):
        for index, item in enumerate(obj):
            yield from iter_refs(item, (*path, index))
