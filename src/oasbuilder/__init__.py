"""oasbuilder -- Build, import and validate OpenAPI 3.0 documents.

This package keeps an immutable in-memory model of an OpenAPI document and
converts it to and from YAML. Edits are pure functions that return a new
document; the serializer renders it deterministically, the importer reads
arbitrary OpenAPI YAML back into the model, and the validator checks the
rendered text and maps every violation to a source line.

Typical workflow::

    oasbuilder new --title "Payments API"
    oasbuilder path add /contract-accounts/{id}/payment-plans
    oasbuilder validate

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and workspace document storage.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    migration: Upgrade of documents stored in the legacy path layout.

Sub-packages:
    editor: Pure edit functions, templates and path-parameter sync.
    parser: Loading and importing OpenAPI text.
    generator: Deterministic YAML serializer.
    validation: Async validator with line attribution.
"""

__version__ = "0.1.0"
