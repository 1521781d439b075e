"""Structural checks for common OpenAPI mistakes.

These checks run on the parsed mapping before the full schema check and
produce friendlier messages for the problems users hit most often: missing
top-level fields, operations without responses, path placeholders without a
matching ``in: path`` parameter, schemas without a type and references to
schemas that do not exist.

Every issue carries a dotted ``path`` and, where the text allows it, the
line found by :func:`~oasbuilder.validation.locator.locate_line`.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from oasbuilder.exceptions import SpecParseError
from oasbuilder.models import Severity, ValidationIssue
from oasbuilder.parser.refs import iter_refs, resolve_pointer, schema_ref_name
from oasbuilder.validation.locator import Segment, locate_line

OPERATION_KEYS = ("get", "post", "put", "patch", "delete", "options", "head", "trace")

_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")


def run_structural_checks(spec: dict[str, Any], text: str) -> list[ValidationIssue]:
    """Check *spec* (parsed from *text*) and return errors and warnings.

    Args:
        spec: The parsed top-level mapping.
        text: The source text, used for line attribution only.

    Returns:
        Issues in document order: version, info, paths, schemas, then
        dangling references.
    """
    issues: list[ValidationIssue] = []

    def report(
        segments: list[Segment],
        message: str,
        severity: Severity = Severity.ERROR,
        line_segments: Optional[list[Segment]] = None,
        line: Optional[int] = None,
    ) -> None:
        if line is None:
            line = locate_line(text, line_segments if line_segments is not None else segments)
        issues.append(
            ValidationIssue(
                path=".".join(str(s) for s in segments),
                message=message,
                severity=severity,
                line=line,
            )
        )

    _check_version(spec, report)
    _check_info(spec, report)

    paths = spec.get("paths")
    if paths is None:
        report(
            ["paths"],
            'Missing "paths" object. At least an empty paths object is recommended',
            Severity.WARNING,
        )
    elif isinstance(paths, dict):
        _check_paths(paths, report)

    components = spec.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        _check_schemas(components["schemas"], report)

    _check_references(spec, report)
    return issues


def _check_version(spec: dict[str, Any], report) -> None:
    if not spec.get("openapi"):
        report(
            ["openapi"],
            'Missing required field "openapi". '
            'Must specify OpenAPI version (e.g., "3.0.3" or "3.1.0")',
            line=1,
        )
        return

    version = str(spec["openapi"])
    if not version.startswith(("3.0", "3.1")):
        report(["openapi"], f'Invalid OpenAPI version "{version}". Must be 3.0.x or 3.1.x')


def _check_info(spec: dict[str, Any], report) -> None:
    info = spec.get("info")
    if info is None:
        report(["info"], 'Missing required field "info"')
        return
    if not isinstance(info, dict):
        report(["info"], 'Field "info" must be an object')
        return

    if not info.get("title"):
        report(["info", "title"], 'Missing required field "info.title"')
    if not info.get("version"):
        report(["info", "version"], 'Missing required field "info.version"')


def _check_paths(paths: dict[str, Any], report) -> None:
    for path_key, path_item in paths.items():
        path_key = str(path_key)
        if not path_key.startswith("/"):
            report(["paths", path_key], f'Path "{path_key}" must start with a forward slash (/)')

        if not isinstance(path_item, dict):
            continue
        placeholders = _PLACEHOLDER_RE.findall(path_key)
        shared_params = path_item.get("parameters")

        for method in OPERATION_KEYS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            _check_operation(path_key, method, operation, placeholders, shared_params, report)


def _check_operation(
    path_key: str,
    method: str,
    operation: dict[str, Any],
    placeholders: list[str],
    shared_params: Any,
    report,
) -> None:
    base: list[Segment] = ["paths", path_key, method]
    label = f"{method.upper()} {path_key}"

    if not operation.get("operationId"):
        report(
            [*base, "operationId"],
            f'Operation "{label}" is missing operationId',
            Severity.WARNING,
            line_segments=base,
        )

    responses = operation.get("responses")
    if not isinstance(responses, dict) or not responses:
        report(
            [*base, "responses"],
            f'Operation "{label}" must have at least one response defined',
            line_segments=base,
        )

    declared = {
        param.get("name")
        for params in (shared_params, operation.get("parameters"))
        if isinstance(params, list)
        for param in params
        if isinstance(param, dict) and param.get("in") == "path"
    }
    for name in dict.fromkeys(placeholders):
        if name not in declared:
            report(
                [*base, "parameters"],
                f'Path parameter "{name}" is used in path but not defined in parameters',
            )


def _check_schemas(schemas: dict[str, Any], report) -> None:
    for name, schema in schemas.items():
        if not isinstance(schema, dict):
            continue
        base: list[Segment] = ["components", "schemas", str(name)]

        if not any(schema.get(key) for key in ("type", "$ref", "allOf", "oneOf", "anyOf")):
            report(
                base,
                f'Schema "{name}" should have a "type" field or use $ref/allOf/oneOf/anyOf',
                Severity.WARNING,
            )

        if schema.get("type") == "object" and not schema.get("properties") and not schema.get(
            "additionalProperties"
        ):
            report(
                base,
                f'Object schema "{name}" should have "properties" or "additionalProperties" defined',
                Severity.WARNING,
            )

        if schema.get("type") == "array" and not schema.get("items"):
            report(
                [*base, "items"],
                f'Array schema "{name}" must have "items" defined',
                line_segments=base,
            )


def _check_references(spec: dict[str, Any], report) -> None:
    """Report internal ``$ref`` pointers whose target does not exist.

    External references are not followed.
    """
    components = spec.get("components")
    schemas = components.get("schemas") if isinstance(components, dict) else None
    defined = set(schemas) if isinstance(schemas, dict) else set()

    for location, ref in iter_refs(spec):
        name = schema_ref_name(ref)
        if name and "/" not in name:
            if name not in defined:
                report(list(location), f'Referenced schema "{name}" is not defined in components.schemas')
            continue
        if not ref.startswith("#/"):
            continue
        try:
            resolve_pointer(ref, spec)
        except SpecParseError as exc:
            report(list(location), str(exc))
