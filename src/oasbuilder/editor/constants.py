"""HTTP method and status-code catalogs offered when editing operations."""

from __future__ import annotations

from oasbuilder.models import HTTPMethod

HTTP_METHODS: tuple[str, ...] = tuple(m.value for m in HTTPMethod)

STATUS_CODES: tuple[tuple[str, str], ...] = (
    ("200", "200 - OK"),
    ("201", "201 - Created"),
    ("204", "204 - No Content"),
    ("400", "400 - Bad Request"),
    ("401", "401 - Unauthorized"),
    ("403", "403 - Forbidden"),
    ("404", "404 - Not Found"),
    ("500", "500 - Internal Server Error"),
)

COMMON_ERROR_DESCRIPTIONS: tuple[tuple[str, str], ...] = (
    ("400", "Bad request - Invalid parameters"),
    ("401", "Unauthorized - Invalid or missing authentication token"),
    ("403", "Forbidden - Access denied"),
    ("404", "Not found - Resource does not exist"),
    ("500", "Internal server error - An unexpected error occurred"),
)
"""Canned responses appended by ``add_common_error_responses``."""
