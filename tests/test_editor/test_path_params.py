"""Tests for oasbuilder.editor.path_params."""

from __future__ import annotations

from oasbuilder.editor.path_params import (
    extract_path_parameters,
    new_path_parameter,
    sync_path_parameters,
)
from oasbuilder.models import Parameter, ParameterLocation


def _query(name: str) -> Parameter:
    return Parameter(name=name, location=ParameterLocation.QUERY, type="integer")


def _path(name: str, description: str = "") -> Parameter:
    return Parameter(
        name=name, location=ParameterLocation.PATH, required=True, description=description
    )


# ---------------------------------------------------------------------------
# extract_path_parameters
# ---------------------------------------------------------------------------


class TestExtractPathParameters:
    def test_in_template_order(self) -> None:
        assert extract_path_parameters("/users/{id}/posts/{postId}") == ["id", "postId"]

    def test_no_placeholders(self) -> None:
        assert extract_path_parameters("/health") == []


# ---------------------------------------------------------------------------
# sync_path_parameters
# ---------------------------------------------------------------------------


class TestSyncPathParameters:
    """Path parameters follow the template; everything else is untouched."""

    def test_seeds_from_empty_list(self) -> None:
        result = sync_path_parameters([], "/a/{x}/{y}")
        assert [p.name for p in result] == ["x", "y"]
        for param in result:
            assert param.location == ParameterLocation.PATH
            assert param.required is True
            assert param.type == "string"
            assert param.description == ""

    def test_drops_path_params_and_keeps_query(self) -> None:
        limit = _query("limit")
        result = sync_path_parameters([_path("id"), limit], "/a")
        assert result == [limit]
        assert result[0] is limit

    def test_keeps_user_metadata_for_surviving_names(self) -> None:
        described = _path("id", description="The user id")
        result = sync_path_parameters([described], "/users/{id}/orders/{orderId}")
        assert result[0] is described
        assert result[1].name == "orderId"

    def test_orders_by_template_not_by_storage(self) -> None:
        params = [_path("b"), _path("a")]
        result = sync_path_parameters(params, "/{a}/{b}")
        assert [p.name for p in result] == ["a", "b"]
        assert result[0] is params[1]

    def test_path_params_come_before_other_params(self) -> None:
        header = Parameter(name="X-Trace", location=ParameterLocation.HEADER)
        limit = _query("limit")
        result = sync_path_parameters([header, limit], "/items/{id}")
        assert [p.name for p in result] == ["id", "X-Trace", "limit"]

    def test_query_param_sharing_a_placeholder_name_is_untouched(self) -> None:
        query_id = _query("id")
        result = sync_path_parameters([query_id], "/items/{id}")
        assert [(p.name, p.location) for p in result] == [
            ("id", ParameterLocation.PATH),
            ("id", ParameterLocation.QUERY),
        ]
        assert result[1] is query_id

    def test_repeated_placeholder_yields_one_parameter(self) -> None:
        result = sync_path_parameters([], "/{id}/copy/{id}")
        assert [p.name for p in result] == ["id"]

    def test_is_idempotent(self) -> None:
        once = sync_path_parameters([_query("q")], "/a/{x}")
        assert sync_path_parameters(once, "/a/{x}") == once

    def test_input_list_is_not_mutated(self) -> None:
        params = [_path("old")]
        sync_path_parameters(params, "/new/{fresh}")
        assert [p.name for p in params] == ["old"]


def test_new_path_parameter_defaults() -> None:
    param = new_path_parameter("slug")
    assert param == Parameter(
        name="slug", location=ParameterLocation.PATH, required=True, type="string"
    )
