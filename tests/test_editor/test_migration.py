"""Tests for oasbuilder.migration -- legacy one-operation-per-path snapshots."""

from __future__ import annotations

from typing import Any

from oasbuilder.migration import migrate_legacy_format, upgrade_legacy_path
from oasbuilder.models import Document, HTTPMethod


def _legacy_document() -> dict[str, Any]:
    return {
        "openapi": "3.0.0",
        "info": {"title": "Legacy", "version": "1.0.0"},
        "paths": [
            {
                "path": "/users/{id}",
                "method": "get",
                "summary": "Get a user",
                "operationId": "getUsers",
                "parameters": [{"name": "id", "in": "path", "required": True}],
                "responses": [{"statusCode": "200", "description": "OK"}],
                "security": [],
            },
            {
                "path": "/health",
                "operations": [{"method": "get", "operationId": "getHealth"}],
            },
        ],
    }


class TestMigrateLegacyFormat:
    def test_wraps_flat_path_into_operations(self) -> None:
        migrated = migrate_legacy_format(_legacy_document())
        first = migrated["paths"][0]
        assert set(first) == {"path", "operations"}
        (operation,) = first["operations"]
        assert operation["method"] == "get"
        assert operation["summary"] == "Get a user"
        assert operation["security"] == []
        assert operation["tags"] == []
        assert operation["description"] == ""

    def test_current_paths_pass_through(self) -> None:
        data = _legacy_document()
        migrated = migrate_legacy_format(data)
        assert migrated["paths"][1] is data["paths"][1]

    def test_is_idempotent(self) -> None:
        once = migrate_legacy_format(_legacy_document())
        assert migrate_legacy_format(once) == once

    def test_input_is_not_mutated(self) -> None:
        data = _legacy_document()
        migrate_legacy_format(data)
        assert "method" in data["paths"][0]

    def test_document_without_paths(self) -> None:
        assert migrate_legacy_format({"openapi": "3.0.0"}) == {"openapi": "3.0.0"}


class TestUpgradeLegacyPath:
    def test_record_without_method_is_left_alone(self) -> None:
        record = {"path": "/a"}
        assert upgrade_legacy_path(record) is record

    def test_non_mapping_is_left_alone(self) -> None:
        assert upgrade_legacy_path("oops") == "oops"


def test_document_model_migrates_on_load() -> None:
    doc = Document.model_validate(_legacy_document())
    assert [p.path for p in doc.paths] == ["/users/{id}", "/health"]
    operation = doc.paths[0].operations[0]
    assert operation.method == HTTPMethod.GET
    assert operation.parameters[0].name == "id"
    assert operation.security == []
