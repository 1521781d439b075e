"""Upgrade documents stored in the legacy one-operation-per-path shape.

Early workspace snapshots stored every path as a flat record carrying a
single ``method`` together with that operation's ``summary``,
``parameters`` and so on. Current documents store a list of operations per
path. :func:`migrate_legacy_format` rewrites the former into the latter and
leaves everything else alone, so applying it twice is the same as applying
it once.

The functions work on plain mappings (the JSON snapshot shape, camelCase
keys) because a legacy path cannot be represented by
:class:`~oasbuilder.models.Path`. :class:`~oasbuilder.models.Document`
calls :func:`migrate_legacy_format` on every mapping it validates.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_LEGACY_LIST_FIELDS = ("tags", "parameters", "responses")
_LEGACY_TEXT_FIELDS = ("summary", "operationId", "description")


def migrate_legacy_format(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *data* whose paths all carry an ``operations`` list.

    Args:
        data: A document mapping as stored in a workspace snapshot.

    Returns:
        A new top-level dict. Paths that already have ``operations`` (and
        non-mapping entries such as validated :class:`~oasbuilder.models.Path`
        instances) are passed through unchanged.
    """
    migrated = dict(data)
    paths = data.get("paths")
    if isinstance(paths, list):
        migrated["paths"] = [upgrade_legacy_path(path) for path in paths]
    return migrated


def upgrade_legacy_path(path: Any) -> Any:
    """Wrap a flat legacy path record into a single-operation path.

    Anything that is not a legacy record is returned as-is.
    """
    if not isinstance(path, Mapping):
        return path
    if isinstance(path.get("operations"), list):
        return path
    method = path.get("method")
    if not isinstance(method, str) or not method:
        return path

    operation: dict[str, Any] = {"method": method}
    for key in _LEGACY_LIST_FIELDS:
        operation[key] = path.get(key) or []
    for key in _LEGACY_TEXT_FIELDS:
        operation[key] = path.get(key) or ""
    if path.get("requestBody") is not None:
        operation["requestBody"] = path["requestBody"]
    if path.get("security") is not None:
        operation["security"] = path["security"]
    operation["deprecated"] = bool(path.get("deprecated", False))

    return {"path": path.get("path", ""), "operations": [operation]}
