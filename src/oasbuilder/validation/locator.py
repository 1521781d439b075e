"""Map a location inside a parsed document back to a line of its YAML text.

:func:`locate_line` scans the text once, top to bottom, matching one path
segment at a time. A key segment matches a ``key:`` line (the key may be
single- or double-quoted) indented at least as deep as the previous match.
An integer segment matches the n-th ``- `` item of the block sequence that
follows the previous match. Blank lines and ``#`` comments are skipped.

The scan is a heuristic, not a YAML parser: flow collections, anchors and
multi-line keys are not understood. When the full path cannot be matched
the result is ``None`` rather than the line of a partial match.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache
from typing import Optional, Union

Segment = Union[str, int]


@lru_cache(maxsize=256)
def _key_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf"^['\"]?{re.escape(key)}['\"]?\s*:")


def locate_line(text: str, segments: Sequence[Segment]) -> Optional[int]:
    """Return the 1-based line holding the last segment of *segments*.

    Args:
        text: The YAML source.
        segments: Key path from the document root, e.g.
            ``["paths", "/items/{id}", "get", "parameters"]``. Integers
            address items of block sequences.

    Returns:
        The line number, or ``None`` if *segments* is empty or the path
        cannot be matched completely.

    Example::

        >>> locate_line("openapi: 3.0.0\\ninfo:\\n  title: x\\n", ["info", "title"])
        3
    """
    if not segments:
        return None

    depth = 0
    current_indent = 0
    item_indent: Optional[int] = None
    item_count = 0

    for number, line in enumerate(text.split("\n"), start=1):
        stripped = line.lstrip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(line) - len(stripped)
        segment = segments[depth]

        if isinstance(segment, int):
            if not stripped.startswith("- ") and stripped != "-":
                continue
            if indent < current_indent:
                continue
            if item_indent is None:
                item_indent = indent
            if indent != item_indent:
                continue
            if item_count < segment:
                item_count += 1
                continue

            depth += 1
            item_indent, item_count = None, 0
            current_indent = indent + 2
            if depth == len(segments):
                return number
            # The item's first key shares the line with its dash.
            rest = stripped[2:].lstrip()
            next_segment = segments[depth]
            if isinstance(next_segment, str) and _key_pattern(next_segment).match(rest):
                depth += 1
                if depth == len(segments):
                    return number
            continue

        if indent >= current_indent and _key_pattern(str(segment)).match(stripped):
            depth += 1
            current_indent = indent
            if depth == len(segments):
                return number

    return None
