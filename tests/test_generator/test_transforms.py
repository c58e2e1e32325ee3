"""Tests for declarest.generator.transforms."""

from __future__ import annotations

import pytest

from declarest.client.response import ApiResponse
from declarest.exceptions import ConfigError
from declarest.generator.transforms import (
    TransformKind,
    TransformSpec,
    extract_body,
    keep_request,
    resolve_all,
    resolve_transform,
)


def _global(*args):
    return "global"


def _per_method(*args):
    return "per-method"


class TestTransformSpec:
    def test_none_is_absent(self) -> None:
        assert TransformSpec.from_option(None).kind is TransformKind.ABSENT

    def test_callable_is_global(self) -> None:
        spec = TransformSpec.from_option(_global)
        assert spec.kind is TransformKind.GLOBAL
        assert spec.function is _global

    def test_mapping_is_per_method(self) -> None:
        spec = TransformSpec.from_option({"m1": _per_method})
        assert spec.kind is TransformKind.PER_METHOD
        assert spec.per_method == {"m1": _per_method}

    def test_mapping_is_copied(self) -> None:
        option = {"m1": _per_method}
        spec = TransformSpec.from_option(option)
        option["m2"] = _global
        assert "m2" not in spec.per_method

    def test_invalid_value_raises(self) -> None:
        with pytest.raises(ConfigError, match="error_handler"):
            TransformSpec.from_option(42, "error_handler")


class TestResolveTransform:
    def test_global_applies_to_every_method(self) -> None:
        spec = TransformSpec.from_option(_global)
        assert resolve_transform(spec, "m1", keep_request) is _global
        assert resolve_transform(spec, "anything", keep_request) is _global

    def test_per_method_entry(self) -> None:
        spec = TransformSpec.from_option({"m1": _per_method})
        assert resolve_transform(spec, "m1", keep_request) is _per_method

    def test_per_method_missing_falls_back(self) -> None:
        spec = TransformSpec.from_option({"m1": _per_method})
        assert resolve_transform(spec, "m2", extract_body) is extract_body

    def test_non_callable_entry_falls_back(self) -> None:
        spec = TransformSpec.from_option({"m1": "not callable"})
        assert resolve_transform(spec, "m1", None) is None

    def test_absent_returns_default(self) -> None:
        assert resolve_transform(TransformSpec(), "m1", keep_request) is keep_request


class TestDefaults:
    def test_keep_request_returns_none(self) -> None:
        assert keep_request({"a": 1}, {"a": 1}, {}) is None

    def test_extract_body_returns_payload(self) -> None:
        response = ApiResponse(status_code=200, data={"id": 1})
        assert extract_body(response, {}, {}) == {"id": 1}

    def test_resolve_all_defaults(self) -> None:
        resolved = resolve_all("m1", TransformSpec(), TransformSpec(), TransformSpec())
        assert resolved.transform_request is keep_request
        assert resolved.transform_response is extract_body
        assert resolved.error_handler is None

    def test_resolve_all_mixed(self) -> None:
        resolved = resolve_all(
            "m1",
            TransformSpec.from_option(_global),
            TransformSpec.from_option({"m1": _per_method}),
            TransformSpec.from_option({"other": _global}),
        )
        assert resolved.transform_request is _global
        assert resolved.transform_response is _per_method
        assert resolved.error_handler is None
