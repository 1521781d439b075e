"""Canonical Pydantic models shared across all oasbuilder modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Document models** -- the editable OpenAPI document:
    :class:`Document`, :class:`Info`, :class:`Contact`, :class:`License`,
    :class:`Server`, :class:`SecurityScheme`, :class:`Tag`, :class:`Path`,
    :class:`Operation`, :class:`Parameter`, :class:`RequestBody`,
    :class:`Response`, :class:`Schema`, :class:`Property` and
    :class:`PropertyItems`.

**Result models** -- returned by the importer and the validator:
    :class:`ImportResult`, :class:`Severity`, :class:`ValidationIssue`,
    :class:`ValidationResult` and :class:`SpecViolation`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

Document models are frozen. Edits never mutate them; the functions in
:mod:`oasbuilder.editor.document` build a new document that shares every
untouched branch with the old one. Fields stored in camelCase by the
workspace snapshot carry an alias, and ``populate_by_name`` lets callers
use either spelling.

Entities refer to each other by name only (``schema_ref``, ``ref``,
``security``); a name that does not resolve is a deferred reference and is
reported by the validator, never rejected here.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from oasbuilder.migration import migrate_legacy_format

RESPONSE_CONTENT_TYPE = "application/vnd.api+json"
"""Content type used for every response body in generated documents."""

DEFAULT_REQUEST_CONTENT_TYPE = "application/json"

_DOCUMENT_CONFIG = ConfigDict(frozen=True, populate_by_name=True)

Number = Union[int, float]


class HTTPMethod(str, enum.Enum):
    """HTTP methods an operation can be declared with.

    The declaration order is also the order in which
    :func:`~oasbuilder.editor.document.duplicate_operation` looks for a
    free method on a path.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


# --- Info ---


class Contact(BaseModel):
    model_config = _DOCUMENT_CONFIG

    name: str = ""
    email: str = ""
    url: str = ""


class License(BaseModel):
    """License block of the info object. ``name`` is required by OpenAPI."""

    model_config = _DOCUMENT_CONFIG

    name: str = ""
    url: str = ""


class Info(BaseModel):
    """API metadata rendered as the document's *Info Object*."""

    model_config = _DOCUMENT_CONFIG

    title: str = ""
    description: str = ""
    version: str = "1.0.0"
    terms_of_service: str = Field(default="", alias="termsOfService")
    contact: Optional[Contact] = None
    license: Optional[License] = None


class Server(BaseModel):
    model_config = _DOCUMENT_CONFIG

    url: str = ""
    description: str = ""


class SecurityScheme(BaseModel):
    """A named security scheme declared under ``components/securitySchemes``.

    ``name`` is the key other parts of the document use to require the
    scheme. Only the fields relevant to ``type`` are rendered: ``scheme``
    and ``bearer_format`` for ``http``, ``location`` and ``api_key_name``
    for ``apiKey``.
    """

    model_config = _DOCUMENT_CONFIG

    name: str = ""
    type: str = "http"  # http, apiKey, oauth2, openIdConnect
    scheme: Optional[str] = None  # bearer, basic
    bearer_format: Optional[str] = Field(default=None, alias="bearerFormat")
    location: Optional[str] = Field(default=None, alias="in")  # header, query, cookie
    api_key_name: Optional[str] = Field(default=None, alias="apiKeyName")


class Tag(BaseModel):
    model_config = _DOCUMENT_CONFIG

    name: str = ""
    description: str = ""


# --- Paths ---


class Parameter(BaseModel):
    """A parameter of an :class:`Operation`.

    ``enum_values`` keeps the raw comma-separated text the user typed; it is
    split into a YAML list only when the document is serialised.
    """

    model_config = _DOCUMENT_CONFIG

    name: str = ""
    location: ParameterLocation = Field(default=ParameterLocation.PATH, alias="in")
    description: str = ""
    required: bool = False
    type: str = "string"
    format: Optional[str] = None
    enum_values: str = Field(default="", alias="enum")
    default: str = ""
    example: str = ""
    deprecated: bool = False


class RequestBody(BaseModel):
    model_config = _DOCUMENT_CONFIG

    description: str = ""
    required: bool = True
    schema_ref: str = Field(default="", alias="schemaRef")
    content_type: str = Field(default=DEFAULT_REQUEST_CONTENT_TYPE, alias="contentType")


class Response(BaseModel):
    """A response of an :class:`Operation`, keyed by its status code string.

    The body is always rendered with :data:`RESPONSE_CONTENT_TYPE`.
    """

    model_config = _DOCUMENT_CONFIG

    status_code: str = Field(default="200", alias="statusCode")
    description: str = ""
    schema_ref: str = Field(default="", alias="schemaRef")


class Operation(BaseModel):
    """One HTTP method handler attached to a :class:`Path`.

    ``security`` is ``None`` when the operation does not state its own
    requirements; an empty list means the operation needs no auth.
    """

    model_config = _DOCUMENT_CONFIG

    method: HTTPMethod = HTTPMethod.GET
    tags: list[str] = Field(default_factory=list)
    summary: str = ""
    operation_id: str = Field(default="", alias="operationId")
    description: str = ""
    deprecated: bool = False
    parameters: list[Parameter] = Field(default_factory=list)
    responses: list[Response] = Field(default_factory=list)
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    security: Optional[list[str]] = None


class Path(BaseModel):
    """A path template and the operations declared on it.

    At most one operation per method is allowed; the editing functions
    remove a path as soon as its last operation goes away.
    """

    model_config = _DOCUMENT_CONFIG

    path: str = ""
    operations: list[Operation] = Field(default_factory=list)

    def find_operation(self, method: HTTPMethod | str) -> Optional[Operation]:
        """Return the operation declared for *method*, or ``None``."""
        wanted = HTTPMethod(method)
        for operation in self.operations:
            if operation.method == wanted:
                return operation
        return None


# --- Schemas ---


class PropertyItems(BaseModel):
    """Item descriptor of an array property: a primitive type or a schema name."""

    model_config = _DOCUMENT_CONFIG

    type: str = "string"
    ref: str = Field(default="", alias="$ref")


class Property(BaseModel):
    """A property of a :class:`Schema`.

    ``ref`` is only meaningful when ``type`` is ``object`` and ``items``
    only when ``type`` is ``array``. An empty ``type`` marks an untyped
    property.
    """

    model_config = _DOCUMENT_CONFIG

    name: str = ""
    type: str = "string"  # '', string, number, integer, boolean, array, object
    format: Optional[str] = None
    description: str = ""
    example: str = ""
    required: bool = False
    nullable: bool = False
    read_only: bool = Field(default=False, alias="readOnly")
    write_only: bool = Field(default=False, alias="writeOnly")
    deprecated: bool = False
    pattern: str = ""
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    default: str = ""
    ref: str = Field(default="", alias="$ref")
    items: PropertyItems = Field(default_factory=PropertyItems)
    enum_values: str = Field(default="", alias="enumValues")


class Schema(BaseModel):
    """A named, reusable schema rendered under ``components/schemas``.

    ``is_template`` marks schemas inserted from the template library. It
    only affects how editors present the schema and is never serialised.
    """

    model_config = _DOCUMENT_CONFIG

    name: str = ""
    type: str = "object"  # object, array
    properties: list[Property] = Field(default_factory=list)
    is_template: bool = Field(default=False, alias="isTemplate")


# --- Document ---


class Document(BaseModel):
    """The whole editable OpenAPI document.

    Raw mappings are passed through
    :func:`~oasbuilder.migration.migrate_legacy_format` before validation,
    so snapshots written before paths carried an ``operations`` list load
    transparently.

    See Also:
        :func:`~oasbuilder.generator.serializer.serialize`: Render as YAML.
        :func:`~oasbuilder.parser.importer.import_document`: Build from YAML.
    """

    model_config = _DOCUMENT_CONFIG

    openapi: str = "3.0.0"
    info: Info = Field(default_factory=Info)
    servers: list[Server] = Field(default_factory=list)
    security_schemes: list[SecurityScheme] = Field(
        default_factory=list, alias="securitySchemes"
    )
    tags: list[Tag] = Field(default_factory=list)
    paths: list[Path] = Field(default_factory=list)
    schemas: list[Schema] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _upgrade_legacy_paths(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return migrate_legacy_format(data)
        return data

    def find_schema(self, name: str) -> Optional[Schema]:
        """Resolve a schema reference by name, or return ``None``."""
        for schema in self.schemas:
            if schema.name == name:
                return schema
        return None


# --- Import / validation results ---


class ImportResult(BaseModel):
    """Outcome of :func:`~oasbuilder.parser.importer.import_document`.

    ``document`` is present whenever the text parsed as a YAML mapping,
    even if ``errors`` is not empty; ``success`` is true exactly when
    there are no errors.
    """

    success: bool
    document: Optional[Document] = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class Severity(str, enum.Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """A single diagnostic produced by the validator.

    ``path`` is the dotted location inside the document (``document`` for
    problems with no better location). ``line`` is the 1-based source line
    found by :func:`~oasbuilder.validation.locator.locate_line`, or ``None``
    when the locator could not match the full path.
    """

    path: str
    message: str
    severity: Severity = Severity.ERROR
    line: Optional[int] = None


class ValidationResult(BaseModel):
    """Diagnostics for one validation run. Warnings never affect validity."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)


class SpecViolation(BaseModel):
    """A violation reported by the full OpenAPI schema checker."""

    path: list[Union[str, int]] = Field(default_factory=list)
    message: str


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/oasbuilder/config.json``.

    Loaded and saved by :func:`~oasbuilder.config.load_global_config` and
    :func:`~oasbuilder.config.save_global_config`. Fields here have the
    lowest precedence; see :func:`~oasbuilder.config.resolve_document_path`
    for the full precedence chain.
    """

    default_openapi_version: str = Field(
        default="3.0.0", description="openapi version used by 'oasbuilder new'"
    )
    document_path: Optional[str] = Field(
        default=None, description="Workspace document file (defaults to the data dir)"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
