"""Read OpenAPI text from a URL, local file, or stdin and parse it.

This module handles all I/O for fetching raw OpenAPI documents. Reading and
parsing are kept apart because the validator needs the original text (for
line attribution) as well as the parsed mapping:

* :func:`load_text` -- Read the raw text from any supported source.
* :func:`parse_text` -- Parse JSON or YAML text into a mapping.
* :func:`load_spec` -- Both steps in one call.

Both the importer and the validator parse through :func:`parse_text`, so
they agree on what counts as unparsable input.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from oasbuilder.exceptions import SpecParseError

logger = logging.getLogger(__name__)


def load_spec(source: str) -> dict[str, Any]:
    """Load and parse an OpenAPI document from URL, file path, or stdin ('-').

    Raises:
        SpecParseError: If the source cannot be read or parsed.
    """
    return parse_text(load_text(source))


def load_text(source: str) -> str:
    """Read raw OpenAPI text from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The text as read, never empty.

    Raises:
        SpecParseError: If the source cannot be read or is empty.
    """
    if source == "-":
        return _read_stdin()
    elif source.startswith(("http://", "https://")):
        return _read_url(source)
    else:
        return _read_file(source)


def _read_stdin() -> str:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")
    return content


def _read_url(url: str) -> str:
    """Fetch text from *url*, following redirects.

    Raises:
        SpecParseError: On HTTP errors, network failures or an empty body.
    """
    logger.debug("Fetching %s", url)
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch document from {url}: {exc}") from exc

    if not response.text.strip():
        raise SpecParseError(f"Empty response from {url}")
    return response.text


def _read_file(path: str) -> str:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"File not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"File is empty: {path}")
    return content


def parse_text(content: str) -> dict[str, Any]:
    """Parse *content* as JSON or YAML into a mapping.

    Text that looks like a JSON object is tried as JSON first; everything
    else (and JSON that fails) goes through ``yaml.safe_load``, which also
    accepts JSON.

    Args:
        content: The raw string content.

    Returns:
        The parsed top-level mapping.

    Raises:
        SpecParseError: If the content does not parse, or parses to
            something other than a mapping.
    """
    if content.lstrip().startswith("{"):
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            logger.debug("Not valid JSON, retrying as YAML: %s", exc)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SpecParseError(f"Invalid YAML: {exc}") from exc
    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Document must be a YAML mapping (got {kind})")
    return result
