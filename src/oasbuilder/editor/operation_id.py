"""Derive operation identifiers from an HTTP method and a path template.

The identifier is the lower-case method followed by the last static segment
of the path in PascalCase, hyphens acting as word breaks::

    >>> generate_operation_id("get", "/contract-accounts/{id}/payment-plans")
    'getPaymentPlans'
    >>> generate_operation_id("post", "/health")
    'postHealth'

Placeholder segments (``{id}``) never contribute, so a path made only of
placeholders yields the bare method name.
"""

from __future__ import annotations


def generate_operation_id(method: str, path_template: str) -> str:
    """Build an operation id for *method* on *path_template*.

    Args:
        method: HTTP method name (``get``, ``post``, ...). Lower-cased.
        path_template: Path template such as ``/users/{id}/orders``.

    Returns:
        The generated identifier. Never empty unless *method* is.
    """
    static_segments = _static_segments(path_template)
    last = static_segments[-1] if static_segments else ""
    words = last.split("-")
    return method.lower() + "".join(_capitalize_first(word) for word in words)


def _static_segments(path: str) -> list[str]:
    """Split *path* into non-empty segments that are not placeholders.

    ``"/users/{id}/orders"`` -> ``["users", "orders"]``
    """
    return [s for s in path.split("/") if s and not s.startswith("{")]


def _capitalize_first(word: str) -> str:
    # Only the first character changes; "userID" stays "UserID".
    return word[:1].upper() + word[1:]
