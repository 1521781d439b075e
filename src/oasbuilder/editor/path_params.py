"""Keep an operation's path parameters in step with its path template.

Every ``{placeholder}`` in a path template must be matched by exactly one
required ``in: path`` parameter, and no path parameter may exist for a name
the template no longer mentions. :func:`sync_path_parameters` restores that
invariant after the template changes while keeping whatever the user
already entered (description, format, example, ...) for placeholders that
survive the edit.

Query, header and cookie parameters are never touched.
"""

from __future__ import annotations

import re

from oasbuilder.models import Parameter, ParameterLocation

_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")


def extract_path_parameters(path_template: str) -> list[str]:
    """Return placeholder names in the order they appear in *path_template*.

    Example::

        >>> extract_path_parameters("/users/{id}/posts/{postId}")
        ['id', 'postId']
    """
    return _PLACEHOLDER_RE.findall(path_template)


def sync_path_parameters(
    parameters: list[Parameter], path_template: str
) -> list[Parameter]:
    """Reconcile *parameters* with the placeholders of *path_template*.

    Args:
        parameters: The operation's current parameter list.
        path_template: The new path template.

    Returns:
        A new list: path parameters in placeholder order (existing
        instances reused, missing ones created as required strings),
        followed by every non-path parameter in its original order.
    """
    names = extract_path_parameters(path_template)

    existing: dict[str, Parameter] = {}
    for param in parameters:
        if param.location == ParameterLocation.PATH and param.name in names:
            existing.setdefault(param.name, param)

    ordered: list[Parameter] = []
    seen: set[str] = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        ordered.append(existing.get(name) or new_path_parameter(name))

    others = [p for p in parameters if p.location != ParameterLocation.PATH]
    return ordered + others


def new_path_parameter(name: str) -> Parameter:
    """Create the default parameter for a freshly introduced placeholder."""
    return Parameter(
        name=name,
        location=ParameterLocation.PATH,
        description="",
        required=True,
        type="string",
    )
