"""Tests for declarest.models."""

from __future__ import annotations

import pydantic
import pytest

from declarest.models import ClientOptions, RateLimitConfig, RequestTemplate, UriSchema


class TestRateLimitConfig:
    def test_default_window(self) -> None:
        assert RateLimitConfig().window() == (7, 1.0)

    def test_max_rps_wins(self) -> None:
        config = RateLimitConfig(max_rps=2, max_requests=10, per_milliseconds=100)
        assert config.window() == (2, 1.0)

    def test_aliases(self) -> None:
        config = RateLimitConfig.model_validate({"maxRequests": 4, "perMilliseconds": 250})
        assert config.window() == (4, 0.25)

    def test_incomplete_pair_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="configured together"):
            RateLimitConfig(max_requests=5)

    def test_non_positive_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            RateLimitConfig(max_rps=0)

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            RateLimitConfig.model_validate({"maxRps": 3})


class TestClientOptions:
    def test_defaults(self) -> None:
        options = ClientOptions(base_url="http://x", methods={})
        assert options.headers is None
        assert options.required == {}
        assert options.query == {}
        assert options.body == {}
        assert options.transform_request is None
        assert options.raw_response is False
        assert options.response_type == "json"
        assert options.rate_limit == RateLimitConfig()
        assert options.timeout is None
        assert options.strict_templates is False
        assert options.httpx_options == {}

    def test_none_pick_lists_normalised(self) -> None:
        options = ClientOptions(base_url="http://x", methods={}, query=None, body=None, required=None)
        assert options.query == {}
        assert options.body == {}
        assert options.required == {}

    def test_transform_accepts_callable_and_mapping(self) -> None:
        def fn(*args):
            return None

        options = ClientOptions(
            base_url="http://x",
            methods={},
            transform_request=fn,
            transform_response={"m": fn},
        )
        assert options.transform_request is fn
        assert options.transform_response == {"m": fn}

    def test_httpx_options_alias(self) -> None:
        options = ClientOptions.model_validate(
            {"baseUrl": "http://x", "methods": {}, "httpxOptions": {"verify": False}}
        )
        assert options.httpx_options == {"verify": False}

    def test_descriptor_values_must_be_strings(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ClientOptions(base_url="http://x", methods={"m": 5})

    def test_frozen(self) -> None:
        options = ClientOptions(base_url="http://x", methods={})
        with pytest.raises(pydantic.ValidationError):
            options.base_url = "http://y"  # type: ignore[misc]


class TestTemplateModels:
    def test_uri_schema_equality(self) -> None:
        a = UriSchema(path="/a/{x}", path_params=("x",))
        b = UriSchema(path="/a/{x}", path_params=("x",))
        assert a == b

    def test_request_template_frozen(self) -> None:
        template = RequestTemplate(
            method_name="m",
            base_url="http://x",
            http_method="GET",
            uri_schema=UriSchema(path="/"),
        )
        with pytest.raises(pydantic.ValidationError):
            template.http_method = "POST"  # type: ignore[misc]
