"""OpenAPI text reader -- load, parse, and import documents.

This sub-package turns OpenAPI text (YAML or JSON, local file, remote URL
or stdin) into a :class:`~oasbuilder.models.Document`.

Typical usage::

    from oasbuilder.parser import import_document, load_text

    result = import_document(load_text("openapi.yaml"))
    for warning in result.warnings:
        print(warning)

Sub-modules:

* :mod:`~oasbuilder.parser.loader` -- I/O layer (URL, file, stdin) and the
  shared JSON/YAML parse step.
* :mod:`~oasbuilder.parser.refs` -- ``$ref`` pointer helpers.
* :mod:`~oasbuilder.parser.importer` -- Walks the parsed mapping and builds
  the document model, collecting errors and warnings.
"""

from oasbuilder.parser.importer import import_document
from oasbuilder.parser.loader import load_spec, load_text, parse_text

__all__ = ["import_document", "load_spec", "load_text", "parse_text"]
