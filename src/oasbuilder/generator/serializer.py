"""Render a :class:`~oasbuilder.models.Document` as OpenAPI 3.0 YAML text.

The output is built line by line rather than dumped from a mapping, so the
layout is fixed: key order, two-space indentation and quoting never depend
on the YAML library version. The same document always renders to the same
text, and rendering never fails for a valid document.

Layout rules:

* Sections (``servers``, ``tags``, ``paths``, ``components``) appear only
  when non-empty. ``components`` lists ``securitySchemes`` before
  ``schemas``, and a top-level ``security`` block requiring every scheme
  follows it when at least one scheme exists.
* ``openapi`` and ``info.version`` are always double-quoted; path templates,
  status codes and ``$ref`` pointers are always single-quoted.
* Descriptions are single-quoted, or a literal block scalar when they span
  several lines (see :func:`format_description`).
* Every other free-text value is written as a plain scalar when PyYAML
  would read it back as the same string, and single-quoted otherwise.

The single public entry point is :func:`serialize`.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, Union

import yaml

from oasbuilder.models import (
    DEFAULT_REQUEST_CONTENT_TYPE,
    RESPONSE_CONTENT_TYPE,
    Document,
    Info,
    Operation,
    Parameter,
    Property,
    Schema,
    SecurityScheme,
)
from oasbuilder.parser.refs import schema_ref

_RESOLVER = yaml.resolver.Resolver()
_STR_TAG = "tag:yaml.org,2002:str"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_BOOL_TAG = "tag:yaml.org,2002:bool"

_INDICATOR_START = frozenset("!&*{}[]|>'\"%@`#,")
_CANONICAL_NUMBER_RE = re.compile(r"-?(0|[1-9][0-9]*)(\.[0-9]+)?")


def serialize(document: Union[Document, Mapping[str, Any]]) -> str:
    """Render *document* as YAML text.

    Args:
        document: A :class:`~oasbuilder.models.Document`, or a mapping in
            the workspace snapshot shape. Mappings go through the legacy
            format migration and model validation first.

    Returns:
        The YAML text, ending with a newline.

    Example::

        doc = add_path(new_document(), "/health")
        print(serialize(doc))
    """
    if not isinstance(document, Document):
        document = Document.model_validate(dict(document))

    lines: list[str] = [f"openapi: {_double_quoted(document.openapi)}"]
    lines += _info_lines(document.info)

    if document.servers:
        lines.append("servers:")
        for server in document.servers:
            lines.append(f"  - url: {_scalar(server.url)}")
            if server.description:
                lines.append(_description(4, server.description))

    if document.tags:
        lines.append("tags:")
        for tag in document.tags:
            lines.append(f"  - name: {_scalar(tag.name)}")
            lines.append(_description(4, tag.description))

    if document.paths:
        lines.append("paths:")
        for path in document.paths:
            lines.append(f"  {_single_quoted(path.path)}:")
            for operation in path.operations:
                lines += _operation_lines(operation)

    if document.security_schemes or document.schemas:
        lines.append("components:")
        if document.security_schemes:
            lines.append("  securitySchemes:")
            for scheme in document.security_schemes:
                lines += _security_scheme_lines(scheme)
        if document.schemas:
            lines.append("  schemas:")
            for schema in document.schemas:
                lines += _schema_lines(schema)

    if document.security_schemes:
        lines.append("security:")
        for scheme in document.security_schemes:
            lines.append(f"  - {_scalar(scheme.name)}: []")

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Scalar formatting
# ---------------------------------------------------------------------------


def format_description(text: str, indent: int) -> str:
    """Format a description value for a key whose content sits at *indent*.

    Empty text becomes ``''``. Single-line text is single-quoted with
    embedded quotes doubled (``It's`` -> ``'It''s'``). Multi-line text
    becomes a literal block scalar whose lines are indented by *indent*
    spaces. The header is ``|`` only when the text ends in exactly one
    newline; text without a trailing newline gets ``|-`` and text with
    several gets ``|+``, so every description reads back unchanged. An
    explicit indentation indicator (``|2``) is added when the first lines
    start with whitespace.

    Args:
        text: The description.
        indent: Indentation, in spaces, of the block scalar's lines.

    Returns:
        The value part of the ``description:`` line, possibly spanning
        several lines.
    """
    if not text:
        return "''"
    if "\n" not in text:
        return _single_quoted(text)

    body = text.rstrip("\n")
    if not body.strip():
        return _double_quoted(text)

    trailing = len(text) - len(body)
    chomping = {0: "-", 1: ""}.get(trailing, "+")
    lines = body.split("\n") + [""] * max(trailing - 1, 0)
    first_index = next(i for i, line in enumerate(lines) if line.strip())
    # Leading whitespace, or non-empty blank lines before the first content
    # line, would be taken as the block's indentation by a YAML reader.
    needs_indicator = lines[first_index][:1] in (" ", "\t") or any(lines[:first_index])
    header = f"|2{chomping}" if needs_indicator else f"|{chomping}"

    pad = " " * indent
    return header + "".join(f"\n{pad}{line}" if line else "\n" for line in lines)


def _description(key_indent: int, text: str) -> str:
    return f"{' ' * key_indent}description: {format_description(text, key_indent + 2)}"


def _single_quoted(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def _double_quoted(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _scalar(text: str) -> str:
    """Write *text* plain when it reads back unchanged, otherwise quoted."""
    if _is_plain_safe(text):
        return text
    if "\n" in text or "\r" in text:
        return _double_quoted(text)
    return _single_quoted(text)


def _is_plain_safe(text: str) -> bool:
    if not text or text != text.strip() or any(c in text for c in "\n\r\t"):
        return False
    if text[0] in _INDICATOR_START:
        return False
    if text[0] in "-?:" and (len(text) == 1 or text[1] == " "):
        return False
    if ": " in text or " #" in text or text.endswith(":"):
        return False

    tag = _RESOLVER.resolve(yaml.ScalarNode, text, (True, False))
    if tag == _STR_TAG:
        return True
    if tag == _INT_TAG:
        return _CANONICAL_NUMBER_RE.fullmatch(text) is not None and str(int(text)) == text
    if tag == _FLOAT_TAG:
        return _CANONICAL_NUMBER_RE.fullmatch(text) is not None and repr(float(text)) == text
    if tag == _BOOL_TAG:
        return text in ("true", "false")
    return False


def _number(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    text = repr(value)
    # PyYAML only reads floats with a dot in the mantissa.
    if "e" in text and "." not in text:
        text = text.replace("e", ".0e")
    return text


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _enum_items(raw: str) -> list[str]:
    return [v.strip() for v in raw.split(",") if v.strip()]


def _schema_target(indent: int, ref: str) -> str:
    pad = " " * indent
    if ref:
        return f"{pad}$ref: {_single_quoted(schema_ref(ref))}"
    return f"{pad}type: object"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _info_lines(info: Info) -> list[str]:
    lines = [
        "info:",
        f"  title: {_scalar(info.title)}",
        _description(2, info.description),
        f"  version: {_double_quoted(info.version)}",
    ]
    if info.terms_of_service:
        lines.append(f"  termsOfService: {_scalar(info.terms_of_service)}")

    contact = info.contact
    if contact is not None and (contact.name or contact.email or contact.url):
        lines.append("  contact:")
        for key, value in (("name", contact.name), ("email", contact.email), ("url", contact.url)):
            if value:
                lines.append(f"    {key}: {_scalar(value)}")

    license_ = info.license
    if license_ is not None and license_.name:
        lines.append("  license:")
        lines.append(f"    name: {_scalar(license_.name)}")
        if license_.url:
            lines.append(f"    url: {_scalar(license_.url)}")
    return lines


def _operation_lines(operation: Operation) -> list[str]:
    lines = [f"    {operation.method.value}:"]
    if operation.tags:
        lines.append("      tags:")
        lines += [f"        - {_scalar(tag)}" for tag in operation.tags]
    lines.append(f"      summary: {_scalar(operation.summary)}")
    lines.append(f"      operationId: {_scalar(operation.operation_id)}")
    lines.append(_description(6, operation.description))
    if operation.deprecated:
        lines.append("      deprecated: true")

    if operation.parameters:
        lines.append("      parameters:")
        for param in operation.parameters:
            lines += _parameter_lines(param)

    body = operation.request_body
    if body is not None:
        lines.append("      requestBody:")
        if body.description:
            lines.append(_description(8, body.description))
        lines.append(f"        required: {_bool(body.required)}")
        lines.append("        content:")
        lines.append(f"          {_scalar(body.content_type or DEFAULT_REQUEST_CONTENT_TYPE)}:")
        lines.append("            schema:")
        lines.append(_schema_target(14, body.schema_ref))

    if operation.responses:
        lines.append("      responses:")
        for response in operation.responses:
            lines.append(f"        {_single_quoted(response.status_code)}:")
            lines.append(_description(10, response.description))
            lines.append("          content:")
            lines.append(f"            {RESPONSE_CONTENT_TYPE}:")
            lines.append("              schema:")
            lines.append(_schema_target(16, response.schema_ref))

    if operation.security is not None:
        if operation.security:
            lines.append("      security:")
            lines += [f"        - {_scalar(name)}: []" for name in operation.security]
        else:
            lines.append("      security: []")
    return lines


def _parameter_lines(param: Parameter) -> list[str]:
    lines = [
        f"        - name: {_scalar(param.name)}",
        f"          in: {param.location.value}",
        _description(10, param.description),
        f"          required: {_bool(param.required)}",
    ]
    if param.deprecated:
        lines.append("          deprecated: true")
    lines.append("          schema:")
    lines.append(f"            type: {_scalar(param.type)}")
    if param.format:
        lines.append(f"            format: {_scalar(param.format)}")
    enum_items = _enum_items(param.enum_values)
    if enum_items:
        lines.append("            enum:")
        lines += [f"              - {_scalar(item)}" for item in enum_items]
    if param.default:
        lines.append(f"            default: {_scalar(param.default)}")
    if param.example:
        lines.append(f"          example: {_scalar(param.example)}")
    return lines


def _security_scheme_lines(scheme: SecurityScheme) -> list[str]:
    lines = [f"    {_scalar(scheme.name)}:", f"      type: {_scalar(scheme.type)}"]
    if scheme.type == "http":
        http_scheme = scheme.scheme or "bearer"
        lines.append(f"      scheme: {_scalar(http_scheme)}")
        if http_scheme == "bearer" and scheme.bearer_format:
            lines.append(f"      bearerFormat: {_scalar(scheme.bearer_format)}")
    elif scheme.type == "apiKey":
        lines.append(f"      in: {_scalar(scheme.location or 'header')}")
        lines.append(f"      name: {_scalar(scheme.api_key_name or 'X-API-Key')}")
    return lines


def _schema_lines(schema: Schema) -> list[str]:
    lines = [f"    {_scalar(schema.name)}:", f"      type: {_scalar(schema.type)}"]
    if schema.properties:
        lines.append("      properties:")
        for prop in schema.properties:
            lines += _property_lines(prop)
    required = [prop.name for prop in schema.properties if prop.required]
    if required:
        lines.append("      required:")
        lines += [f"        - {_scalar(name)}" for name in required]
    return lines


def _property_lines(prop: Property) -> list[str]:
    """Render one schema property.

    An object property with a reference renders as a bare ``$ref``; arrays
    render their items and description only.
    """
    pad = " " * 10
    lines = [f"        {_scalar(prop.name)}:"]

    if prop.type == "object" and prop.ref:
        lines.append(_schema_target(10, prop.ref))
        return lines

    if prop.type == "array":
        lines.append(f"{pad}type: array")
        lines.append(f"{pad}items:")
        if prop.items.ref:
            lines.append(_schema_target(12, prop.items.ref))
        else:
            lines.append(f"{pad}  type: {_scalar(prop.items.type or 'string')}")
        if prop.description:
            lines.append(_description(10, prop.description))
        return lines

    if prop.type:
        lines.append(f"{pad}type: {_scalar(prop.type)}")
    if prop.format:
        lines.append(f"{pad}format: {_scalar(prop.format)}")
    for key, flag in (
        ("nullable", prop.nullable),
        ("deprecated", prop.deprecated),
        ("readOnly", prop.read_only),
        ("writeOnly", prop.write_only),
    ):
        if flag:
            lines.append(f"{pad}{key}: true")
    if prop.default:
        lines.append(f"{pad}default: {_scalar(prop.default)}")
    if prop.pattern:
        lines.append(f"{pad}pattern: {_single_quoted(prop.pattern)}")

    if prop.type == "string":
        if prop.min_length is not None:
            lines.append(f"{pad}minLength: {prop.min_length}")
        if prop.max_length is not None:
            lines.append(f"{pad}maxLength: {prop.max_length}")
    if prop.type in ("number", "integer"):
        if prop.minimum is not None:
            lines.append(f"{pad}minimum: {_number(prop.minimum)}")
        if prop.maximum is not None:
            lines.append(f"{pad}maximum: {_number(prop.maximum)}")

    enum_items = _enum_items(prop.enum_values)
    if enum_items:
        lines.append(f"{pad}enum:")
        lines += [f"{pad}  - {_scalar(item)}" for item in enum_items]
    if prop.description:
        lines.append(_description(10, prop.description))
    if prop.example:
        lines.append(f"{pad}example: {_scalar(prop.example)}")
    return lines
