"""YAML generator -- render the document model as OpenAPI text.

Typical usage::

    from oasbuilder.generator import serialize

    text = serialize(document)
    Path("openapi.yaml").write_text(text)

Sub-modules:

* :mod:`~oasbuilder.generator.serializer` -- Deterministic line-by-line
  renderer and the description/scalar formatting rules it applies.
"""

from oasbuilder.generator.serializer import format_description, serialize

__all__ = ["serialize", "format_description"]
