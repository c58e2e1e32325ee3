"""Tests for declarest.generator.projector.

Covers:
- Path substitution, including missing parameters
- Query construction for read verbs (defaults, pick-lists, encoding)
- Query construction for write verbs (placeholder substitution)
- Body construction and pick-lists
- Non-mutation of inputs
"""

from __future__ import annotations

import copy
from typing import Any, Callable

import pytest

from declarest.generator.projector import (
    build_body,
    build_query,
    encode_query,
    is_write_method,
    project,
    render_path,
    stringify,
)
from declarest.models import ClientOptions, RequestTemplate
from declarest.parser.descriptor import build_request_template


@pytest.fixture
def template(make_options: Callable[..., ClientOptions]) -> Callable[..., RequestTemplate]:
    """Build a template from a descriptor with optional client options."""

    def _build(descriptor: str, name: str = "m", **kwargs: Any) -> RequestTemplate:
        return build_request_template(descriptor, name, make_options(**kwargs))

    return _build


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


class TestStringify:
    def test_bool(self) -> None:
        assert stringify(True) == "true"
        assert stringify(False) == "false"

    def test_none(self) -> None:
        assert stringify(None) == ""

    def test_list(self) -> None:
        assert stringify([1, "a", True]) == "1,a,true"

    def test_number(self) -> None:
        assert stringify(0) == "0"


class TestIsWriteMethod:
    @pytest.mark.parametrize("verb", ["POST", "PUT", "PATCH", "DELETE", "post"])
    def test_write_verbs(self, verb: str) -> None:
        assert is_write_method(verb)

    @pytest.mark.parametrize("verb", ["GET", "HEAD", "OPTIONS", "PURGE"])
    def test_read_verbs(self, verb: str) -> None:
        assert not is_write_method(verb)


class TestEncodeQuery:
    def test_empty(self) -> None:
        assert encode_query({}) == ""

    def test_pairs_keep_insertion_order(self) -> None:
        assert encode_query({"k": "v", "t": "b"}) == "k=v&t=b"

    def test_percent_encodes_keys_and_values(self) -> None:
        assert encode_query({"a b": "c&d"}) == "a%20b=c%26d"

    def test_braces_encoded(self) -> None:
        assert encode_query({"p3": "{p3}"}) == "p3=%7Bp3%7D"

    def test_encode_uri_component_safe_set(self) -> None:
        assert encode_query({"x": "-_.!~*'()"}) == "x=-_.!~*'()"

    def test_none_values_skipped(self) -> None:
        assert encode_query({"a": None, "b": 1}) == "b=1"


# ------------------------------------------------------------------ #
# Path
# ------------------------------------------------------------------ #


class TestRenderPath:
    def test_substitutes_placeholders(self) -> None:
        assert render_path("/a/{x}/b/{y}", {"x": 1, "y": 2}) == "/a/1/b/2"

    def test_missing_param_becomes_empty(self) -> None:
        assert render_path("/a/{x}/b", {}) == "/a//b"

    def test_repeated_placeholder(self) -> None:
        assert render_path("/{id}/copy/{id}", {"id": 7}) == "/7/copy/7"

    def test_malformed_braces_untouched(self) -> None:
        assert render_path("/a/{x/b", {"x": 1}) == "/a/{x/b"


# ------------------------------------------------------------------ #
# Query -- read verbs
# ------------------------------------------------------------------ #


class TestReadQuery:
    def test_no_extra_params_no_query(self, template) -> None:
        projection = project(template("GET /a/{x}/b/{y}"), {"x": 1, "y": 2})
        assert projection.uri == "/a/1/b/2"
        assert projection.query_string == ""

    def test_extra_params_appended_in_insertion_order(self, template) -> None:
        tpl = template("get /test1/{param1}/stuff/{param2}")
        projection = project(tpl, {"param1": 1, "param2": 2, "k": "v", "t": "b"})
        assert projection.uri == "/test1/1/stuff/2?k=v&t=b"

    def test_defaults_do_not_override_caller(self, template) -> None:
        tpl = template("GET /items?sort=asc&limit=10")
        assert build_query(tpl, {"limit": 5}) == {"limit": 5, "sort": "asc"}

    def test_defaults_applied_when_missing(self, template) -> None:
        projection = project(template("GET /items?sort=asc"), {})
        assert projection.uri == "/items?sort=asc"

    def test_none_falls_back_to_default(self, template) -> None:
        projection = project(template("GET /items?page=1"), {"page": None})
        assert projection.uri == "/items?page=1"

    def test_none_without_default_dropped(self, template) -> None:
        projection = project(template("GET /items"), {"page": None, "q": "x"})
        assert projection.uri == "/items?q=x"

    def test_path_param_excluded_from_read_query(self, template) -> None:
        projection = project(template("GET /items/{id}?id={id}"), {"id": 5})
        assert projection.uri == "/items/5"
        assert projection.query_string == ""

    def test_pick_list_restricts_and_orders(self, template) -> None:
        tpl = template("GET /items", query={"m": ["page", "q"]})
        query = build_query(tpl, {"q": "x", "secret": "s", "page": 2})
        assert list(query.items()) == [("page", 2), ("q", "x")]

    def test_pick_list_applies_to_defaults_too(self, template) -> None:
        tpl = template("GET /items?sort=asc", query={"m": ["q"]})
        assert build_query(tpl, {"q": "x"}) == {"q": "x"}

    def test_read_verbs_have_no_body_in_request(self, template) -> None:
        # Body candidates are computed but never sent for read verbs.
        tpl = template("GET /items")
        assert build_body(tpl, {"a": 1}) == {"a": 1}


# ------------------------------------------------------------------ #
# Query -- write verbs
# ------------------------------------------------------------------ #


class TestWriteQuery:
    def test_params_go_to_body_not_query(self, template) -> None:
        projection = project(template("post /test2/{param}"), {"param": "value", "a": 1, "b": 2})
        assert projection.uri == "/test2/value"
        assert projection.body == {"a": 1, "b": 2}

    def test_query_placeholders_substituted(self, template) -> None:
        tpl = template("post /{p1}/{p2}?p3={p3}&p4={p4}")
        projection = project(tpl, {"p1": "a", "p2": "b", "p3": "c", "p4": "d"})
        assert projection.uri == "/a/b?p3=c&p4=d"

    def test_missing_query_placeholders_kept_literal(self, template) -> None:
        tpl = template("post /{p1}/{p2}?p3={p3}&p4={p4}")
        projection = project(tpl, {"p1": "a", "p2": "b"})
        assert projection.uri == "/a/b?p3=%7Bp3%7D&p4=%7Bp4%7D"

    def test_literal_defaults_kept(self, template) -> None:
        tpl = template("PUT /items/{id}?force=true")
        projection = project(tpl, {"id": 1, "force": "false"})
        # Only placeholder names are substituted from params for writes
        assert projection.uri == "/items/1?force=true"

    def test_path_param_not_used_in_query(self, template) -> None:
        tpl = template("post /items/{id}?id={id}")
        projection = project(tpl, {"id": 5})
        assert projection.uri == "/items/5"
        assert projection.query_string == ""
        assert projection.body == {}

    def test_path_param_literal_default_dropped(self, template) -> None:
        tpl = template("put /items/{id}?id=1&force=true")
        assert build_query(tpl, {"id": 5}) == {"force": "true"}

    def test_body_pick_list(self, template) -> None:
        tpl = template("post /items", body={"m": ["name"]})
        assert build_body(tpl, {"name": "x", "admin": True}) == {"name": "x"}


# ------------------------------------------------------------------ #
# Immutability
# ------------------------------------------------------------------ #


class TestImmutability:
    def test_params_not_mutated(self, template) -> None:
        tpl = template("GET /a/{x}?d=1", query={"m": ["d", "y"]})
        params = {"x": 1, "y": {"nested": [1, 2]}}
        snapshot = copy.deepcopy(params)
        project(tpl, params)
        assert params == snapshot

    def test_template_defaults_not_mutated(self, template) -> None:
        tpl = template("post /{p1}?p3={p3}")
        project(tpl, {"p1": "a", "p3": "c"})
        assert tpl.uri_schema.query == {"p3": "{p3}"}
        second = project(tpl, {"p1": "a"})
        assert second.uri == "/a?p3=%7Bp3%7D"

    def test_fresh_body_per_call(self, template) -> None:
        tpl = template("post /items")
        first = project(tpl, {"a": 1})
        first.body["a"] = 99
        assert project(tpl, {"a": 1}).body == {"a": 1}
