"""Import OpenAPI YAML (or JSON) text into a :class:`~oasbuilder.models.Document`.

The importer is tolerant: anything it does not understand is skipped or
reported as a warning, and it never raises. The single public entry point
is :func:`import_document`, which returns an
:class:`~oasbuilder.models.ImportResult`.

Internally it delegates to private helpers that each handle one section of
the OpenAPI structure:

* ``_import_info`` -- the ``info`` object (title, version, contact, license).
* ``_import_security_schemes`` -- ``components/securitySchemes``.
* ``_import_schemas`` -- ``components/schemas`` and their properties.
* ``_import_paths`` -- the ``paths`` object, one operation per supported
  method in document order.

Schema references are reduced to bare names. Operation security follows the
OpenAPI override rule: an operation-level ``security`` array replaces the
global one, and an explicit empty array means "no auth required". Path-level
parameters are merged into every operation, operation-level parameters
winning when ``name`` and ``in`` match.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Optional

from pydantic import ValidationError

from oasbuilder.exceptions import SpecParseError
from oasbuilder.models import (
    Contact,
    Document,
    HTTPMethod,
    ImportResult,
    Info,
    License,
    Operation,
    Parameter,
    ParameterLocation,
    Path,
    Property,
    PropertyItems,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
    Server,
    Tag,
)
from oasbuilder.parser.loader import parse_text
from oasbuilder.parser.refs import schema_ref_name

logger = logging.getLogger(__name__)

_SUPPORTED_METHODS = frozenset(m.value for m in HTTPMethod)
_OTHER_METHODS = frozenset({"options", "head", "trace"})

_PROPERTY_TYPES = frozenset({"string", "number", "integer", "boolean", "array", "object"})

# Checked in order when looking for a response body schema.
_RESPONSE_CONTENT_TYPES = ("application/json", "application/vnd.api+json", "*/*")

_UNSUPPORTED_COMPONENTS = (
    "responses",
    "parameters",
    "examples",
    "requestBodies",
    "headers",
    "links",
    "callbacks",
)


def import_document(text: str) -> ImportResult:
    """Convert OpenAPI text into a document.

    Args:
        text: YAML or JSON text.

    Returns:
        An :class:`~oasbuilder.models.ImportResult`. When the text does not
        parse to a mapping, ``success`` is false, ``errors`` holds a single
        message and there is no document. Otherwise a document is always
        built, and ``success`` is true exactly when ``errors`` is empty.

    Example::

        result = import_document(Path("openapi.yaml").read_text())
        if result.success:
            doc = result.document
    """
    try:
        raw = parse_text(text)
    except SpecParseError as exc:
        return ImportResult(success=False, errors=[str(exc)])

    errors: list[str] = []
    warnings: list[str] = []

    if not raw.get("openapi"):
        errors.append("Missing required field: openapi")

    info_raw = _mapping(raw.get("info"))
    if not info_raw.get("title"):
        warnings.append("Missing info.title - will be empty")

    components = _mapping(raw.get("components"))
    for name in _UNSUPPORTED_COMPONENTS:
        if components.get(name):
            warnings.append(
                f'Component "{name}" is not fully supported and may not be imported correctly'
            )

    try:
        document = Document(
            openapi=_text(raw.get("openapi")) or "3.0.0",
            info=_import_info(info_raw),
            servers=_import_servers(raw.get("servers")),
            security_schemes=_import_security_schemes(components.get("securitySchemes")),
            tags=_import_tags(raw.get("tags")),
            paths=_import_paths(raw.get("paths"), raw.get("security"), warnings),
            schemas=_import_schemas(components.get("schemas"), warnings),
        )
    except ValidationError as exc:
        logger.debug("Imported document failed model validation", exc_info=True)
        return ImportResult(
            success=False, errors=[*errors, f"Invalid document: {exc}"], warnings=warnings
        )

    logger.debug(
        "Imported %d path(s), %d schema(s): %d error(s), %d warning(s)",
        len(document.paths),
        len(document.schemas),
        len(errors),
        len(warnings),
    )
    return ImportResult(
        success=not errors, document=document, errors=errors, warnings=warnings
    )


# --- scalar helpers ---


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _sequence(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str:
    """Stringify a YAML scalar the way YAML spells it (``true``, not ``True``)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _number_or_none(value: Any) -> Optional[int | float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _enum_text(values: Any) -> str:
    return ", ".join(_text(v) for v in _sequence(values))


def _ref_name(ref: Any, where: str, warnings: list[str]) -> str:
    name = schema_ref_name(ref)
    if name is None:
        warnings.append(f"Unsupported $ref '{ref}' at {where} was dropped")
        return ""
    return name


def _schema_type(schema: Any) -> str:
    """Return the declared type of a schema object, ``string`` if absent.

    OpenAPI 3.1 type arrays (``["string", "null"]``) yield their first
    non-null entry.
    """
    if not isinstance(schema, dict):
        return "string"

    type_value = schema.get("type", "string")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else "string"
    return _text(type_value)


# --- info, servers, tags ---


def _import_info(info: dict[str, Any]) -> Info:
    contact_raw = info.get("contact")
    license_raw = info.get("license")

    contact = None
    if isinstance(contact_raw, dict):
        contact = Contact(
            name=_text(contact_raw.get("name")),
            email=_text(contact_raw.get("email")),
            url=_text(contact_raw.get("url")),
        )

    license_ = None
    if isinstance(license_raw, dict):
        license_ = License(
            name=_text(license_raw.get("name")), url=_text(license_raw.get("url"))
        )

    return Info(
        title=_text(info.get("title")),
        description=_text(info.get("description")),
        version=_text(info.get("version")) or "1.0.0",
        terms_of_service=_text(info.get("termsOfService")),
        contact=contact,
        license=license_,
    )


def _import_servers(servers: Any) -> list[Server]:
    return [
        Server(url=_text(s.get("url")), description=_text(s.get("description")))
        for s in _sequence(servers)
        if isinstance(s, dict)
    ]


def _import_tags(tags: Any) -> list[Tag]:
    return [
        Tag(name=_text(t.get("name")), description=_text(t.get("description")))
        for t in _sequence(tags)
        if isinstance(t, dict)
    ]


# --- components ---


def _import_security_schemes(schemes: Any) -> list[SecurityScheme]:
    """Convert ``components/securitySchemes`` into an ordered scheme list.

    Only the fields relevant to the scheme type are kept: ``scheme`` and
    ``bearerFormat`` for ``http`` (scheme defaults to ``bearer``), ``in``
    and ``name`` for ``apiKey`` (location defaults to ``header``).
    """
    result: list[SecurityScheme] = []
    for name, scheme in _mapping(schemes).items():
        if not isinstance(scheme, dict):
            continue
        scheme_type = _text(scheme.get("type")) or "http"
        fields: dict[str, Any] = {"name": _text(name), "type": scheme_type}
        if scheme_type == "http":
            fields["scheme"] = _text(scheme.get("scheme")) or "bearer"
            fields["bearer_format"] = _optional_text(scheme.get("bearerFormat"))
        elif scheme_type == "apiKey":
            fields["location"] = _text(scheme.get("in")) or "header"
            fields["api_key_name"] = _text(scheme.get("name"))
        result.append(SecurityScheme(**fields))
    return result


def _import_schemas(schemas: Any, warnings: list[str]) -> list[Schema]:
    result: list[Schema] = []
    for name, schema in _mapping(schemas).items():
        if not isinstance(schema, dict):
            continue
        required = {_text(r) for r in _sequence(schema.get("required"))}
        properties = [
            _import_property(_text(prop_name), _mapping(prop), required, warnings)
            for prop_name, prop in _mapping(schema.get("properties")).items()
        ]
        result.append(
            Schema(
                name=_text(name),
                type=_text(schema.get("type")) or "object",
                properties=properties,
            )
        )
    return result


def _import_property(
    name: str, prop: dict[str, Any], required: set[str], warnings: list[str]
) -> Property:
    """Convert one schema property.

    A property-level ``$ref`` makes an ``object`` property referring to
    that schema; an unknown or missing ``type`` leaves the property untyped.
    """
    fields: dict[str, Any] = {
        "name": name,
        "type": "",
        "description": _text(prop.get("description")),
        "example": _text(prop.get("example")),
        "required": name in required,
    }

    if prop.get("$ref"):
        fields["type"] = "object"
        fields["ref"] = _ref_name(prop["$ref"], f"property '{name}'", warnings)
        return Property(**fields)

    prop_type = _text(prop.get("type"))
    if prop_type in _PROPERTY_TYPES:
        fields["type"] = prop_type

    fields.update(
        format=_optional_text(prop.get("format")),
        nullable=bool(prop.get("nullable", False)),
        read_only=bool(prop.get("readOnly", False)),
        write_only=bool(prop.get("writeOnly", False)),
        deprecated=bool(prop.get("deprecated", False)),
        pattern=_text(prop.get("pattern")),
        min_length=_int_or_none(prop.get("minLength")),
        max_length=_int_or_none(prop.get("maxLength")),
        minimum=_number_or_none(prop.get("minimum")),
        maximum=_number_or_none(prop.get("maximum")),
        default=_text(prop.get("default")),
        enum_values=_enum_text(prop.get("enum")),
    )

    items = prop.get("items")
    if prop_type == "array" and isinstance(items, dict):
        if items.get("$ref"):
            ref = _ref_name(items["$ref"], f"items of property '{name}'", warnings)
            fields["items"] = PropertyItems(type="object", ref=ref)
        else:
            fields["items"] = PropertyItems(type=_text(items.get("type")) or "string")

    return Property(**fields)


# --- paths ---


def _import_paths(paths: Any, global_security: Any, warnings: list[str]) -> list[Path]:
    """Convert the ``paths`` object.

    Operations keep the order in which their methods appear under the path.
    ``options``, ``head`` and ``trace`` operations cannot be represented and
    are skipped with a warning. Paths left without any operation are
    dropped.
    """
    result: list[Path] = []
    for template, path_item in _mapping(paths).items():
        if not isinstance(path_item, dict):
            continue
        template = _text(template)
        path_params = _sequence(path_item.get("parameters"))

        operations: list[Operation] = []
        for key, operation in path_item.items():
            method = _text(key).lower()
            if method in _OTHER_METHODS:
                warnings.append(
                    f"Operation {method.upper()} {template} is not supported and was skipped"
                )
                continue
            if method not in _SUPPORTED_METHODS or not isinstance(operation, dict):
                continue
            operations.append(
                _import_operation(
                    HTTPMethod(method), template, operation, path_params, global_security, warnings
                )
            )

        if operations:
            result.append(Path(path=template, operations=operations))
    return result


def _import_operation(
    method: HTTPMethod,
    template: str,
    operation: dict[str, Any],
    path_params: list[Any],
    global_security: Any,
    warnings: list[str],
) -> Operation:
    where = f"{method.value} {template}"

    op_security = operation.get("security")
    security_source = op_security if op_security is not None else global_security
    security: Optional[list[str]] = None
    if isinstance(security_source, list):
        security = [
            _text(name)
            for requirement in security_source
            if isinstance(requirement, dict)
            for name in requirement
        ]

    merged = _merge_parameters(path_params, _sequence(operation.get("parameters")))

    return Operation(
        method=method,
        tags=[_text(t) for t in _sequence(operation.get("tags"))],
        summary=_text(operation.get("summary")),
        operation_id=_text(operation.get("operationId")),
        description=_text(operation.get("description")),
        deprecated=bool(operation.get("deprecated", False)),
        parameters=_import_parameters(merged, where, warnings),
        responses=_import_responses(operation.get("responses"), where, warnings),
        request_body=_import_request_body(operation.get("requestBody"), where, warnings),
        security=security,
    )


def _merge_parameters(path_params: list[Any], op_params: list[Any]) -> list[Any]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field).
    """
    def _key(param: Any) -> tuple[Any, Any]:
        return (param.get("name", ""), param.get("in", "")) if isinstance(param, dict) else (None, None)

    overridden = {_key(p) for p in op_params}
    merged = [p for p in path_params if _key(p) not in overridden]
    merged.extend(op_params)
    return merged


def _import_parameters(params: list[Any], where: str, warnings: list[str]) -> list[Parameter]:
    result: list[Parameter] = []
    for param in params:
        if not isinstance(param, dict):
            continue
        if "$ref" in param:
            warnings.append(f"Unsupported $ref '{param['$ref']}' at parameters of {where} was dropped")
            continue

        location_str = _text(param.get("in")) or "path"
        try:
            location = ParameterLocation(location_str)
        except ValueError:
            warnings.append(
                f"Parameter '{_text(param.get('name'))}' of {where} has unknown location "
                f"'{location_str}' and was skipped"
            )
            continue

        schema = _mapping(param.get("schema"))
        result.append(
            Parameter(
                name=_text(param.get("name")),
                location=location,
                description=_text(param.get("description")),
                required=bool(param.get("required", False)),
                type=_schema_type(param.get("schema")),
                format=_optional_text(schema.get("format")),
                enum_values=_enum_text(schema.get("enum")),
                default=_text(schema.get("default")),
                example=_text(param.get("example")),
                deprecated=bool(param.get("deprecated", False)),
            )
        )
    return result


def _import_responses(responses: Any, where: str, warnings: list[str]) -> list[Response]:
    result: list[Response] = []
    for status_code, response in _mapping(responses).items():
        if not isinstance(response, dict):
            continue
        if "$ref" in response:
            warnings.append(
                f"Unsupported $ref '{response['$ref']}' at response {status_code} of {where} was dropped"
            )

        schema_ref = ""
        content = _mapping(response.get("content"))
        for content_type in _RESPONSE_CONTENT_TYPES:
            schema = _mapping(_mapping(content.get(content_type)).get("schema"))
            if schema.get("$ref"):
                schema_ref = _ref_name(
                    schema["$ref"], f"response {status_code} of {where}", warnings
                )
                break

        result.append(
            Response(
                status_code=_text(status_code),
                description=_text(response.get("description")),
                schema_ref=schema_ref,
            )
        )
    return result


def _import_request_body(body: Any, where: str, warnings: list[str]) -> Optional[RequestBody]:
    """Convert a request body, reading the schema of its first content type."""
    if not isinstance(body, dict):
        return None
    if "$ref" in body:
        warnings.append(f"Unsupported $ref '{body['$ref']}' at requestBody of {where} was dropped")

    fields: dict[str, Any] = {
        "description": _text(body.get("description")),
        "required": bool(body.get("required", True)),
    }
    content = _mapping(body.get("content"))
    if content:
        content_type, media_type = next(iter(content.items()))
        fields["content_type"] = _text(content_type)
        schema = _mapping(_mapping(media_type).get("schema"))
        if schema.get("$ref"):
            fields["schema_ref"] = _ref_name(schema["$ref"], f"requestBody of {where}", warnings)
    return RequestBody(**fields)
