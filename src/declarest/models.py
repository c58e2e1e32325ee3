"""Canonical Pydantic models shared across all declarest modules.

The models fall into two groups:

**Configuration models** -- validated once when a client is constructed:
    :class:`RateLimitConfig` and :class:`ClientOptions`.

**Parser output models** -- produced from endpoint descriptors and shared,
read-only, by every call of the generated method:
    :class:`UriSchema` and :class:`RequestTemplate`.

Parser output models are frozen.  Their mapping fields are never mutated by
the library; every per-call projection copies them into fresh dicts.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

DEFAULT_MAX_RPS = 7
"""Requests-per-second ceiling applied when no rate limit is configured."""

DEFAULT_RESPONSE_TYPE = "json"


# --- Parser Output Models ---


class UriSchema(BaseModel):
    """Parsed form of the ``path?query`` part of an endpoint descriptor.

    Example::

        parse_uri("/users/{id}/posts?sort=asc&page={page}")
        # UriSchema(
        #     path="/users/{id}/posts",
        #     path_params=("id",),
        #     query={"sort": "asc", "page": "{page}"},
        #     query_params=("page",),
        # )
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Path template kept verbatim for substitution")
    path_params: tuple[str, ...] = Field(
        default=(), description="Placeholder names found in the path"
    )
    query: dict[str, str] = Field(
        default_factory=dict, description="Literal query defaults, insertion ordered"
    )
    query_params: tuple[str, ...] = Field(
        default=(), description="Placeholder names found in the query segment"
    )


class RequestTemplate(BaseModel):
    """Immutable per-method request template built at client construction.

    One template exists per generated method and is shared by every
    invocation of that method.
    """

    model_config = ConfigDict(frozen=True)

    method_name: str
    base_url: str
    http_method: str = Field(description="Upper-cased HTTP verb, not validated")
    uri_schema: UriSchema
    headers: Optional[dict[str, Any]] = None
    query_pick: Optional[tuple[str, ...]] = Field(
        default=None, description="Allow-list of query keys, in output order"
    )
    body_pick: Optional[tuple[str, ...]] = Field(
        default=None, description="Allow-list of body keys"
    )


# --- Configuration Models ---


class RateLimitConfig(BaseModel):
    """Throughput ceiling for the default transport.

    Either ``max_rps`` or the ``max_requests`` / ``per_milliseconds`` pair
    may be given; ``max_rps`` wins when both are present.  An empty config
    means :data:`DEFAULT_MAX_RPS` requests per second.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    max_rps: Optional[int] = Field(default=None, gt=0, alias="maxRPS")
    max_requests: Optional[int] = Field(default=None, gt=0, alias="maxRequests")
    per_milliseconds: Optional[int] = Field(
        default=None, gt=0, alias="perMilliseconds"
    )

    @model_validator(mode="after")
    def _check_window_pair(self) -> RateLimitConfig:
        if self.max_rps is None and (self.max_requests is None) != (
            self.per_milliseconds is None
        ):
            raise ValueError(
                "max_requests and per_milliseconds must be configured together"
            )
        return self

    def window(self) -> tuple[int, float]:
        """Return ``(max_requests, period_seconds)`` for the limiter."""
        if self.max_rps is not None:
            return self.max_rps, 1.0
        if self.max_requests is not None and self.per_milliseconds is not None:
            return self.max_requests, self.per_milliseconds / 1000
        return DEFAULT_MAX_RPS, 1.0


def _is_transform_option(value: Any) -> bool:
    return value is None or callable(value) or isinstance(value, Mapping)


class ClientOptions(BaseModel):
    """Construction-time configuration of an :class:`~declarest.client.factory.ApiClient`.

    Field names are snake_case; the camelCase spellings commonly used for
    this kind of descriptor table (``baseUrl``, ``transformRequest``,
    ``errorHandler``, ``rateLimitOptions`` ...) are accepted as aliases.

    ``transform_request``, ``transform_response`` and ``error_handler``
    each accept either a single callable applied to every method or a
    mapping of method name to callable.

    Example::

        ClientOptions(
            base_url="https://api.example.com",
            methods={"get_user": "GET /users/{id}"},
            required={"get_user": ["id"]},
        )
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        arbitrary_types_allowed=True,
    )

    base_url: str = Field(alias="baseUrl")
    methods: dict[str, str]
    headers: Optional[dict[str, Any]] = None
    required: dict[str, list[str]] = Field(default_factory=dict)
    query: dict[str, list[str]] = Field(default_factory=dict)
    body: dict[str, list[str]] = Field(default_factory=dict)
    transform_request: Any = Field(default=None, alias="transformRequest")
    transform_response: Any = Field(default=None, alias="transformResponse")
    error_handler: Any = Field(default=None, alias="errorHandler")
    raw_response: bool = Field(default=False, alias="rawResponse")
    response_type: str = Field(default=DEFAULT_RESPONSE_TYPE, alias="responseType")
    rate_limit: Optional[RateLimitConfig] = Field(
        default_factory=RateLimitConfig, alias="rateLimitOptions"
    )
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Default per-request timeout in seconds"
    )
    strict_templates: bool = Field(
        default=False,
        alias="strictTemplates",
        description="Reject descriptors with malformed placeholders",
    )
    httpx_options: dict[str, Any] = Field(
        default_factory=dict,
        alias="httpxOptions",
        description="Keyword arguments for the default transport's httpx.AsyncClient",
    )

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not value:
            raise ValueError("Missing baseUrl option")
        return value

    @field_validator("methods", mode="before")
    @classmethod
    def _check_methods(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            raise ValueError("Invalid methods list")
        return value

    @field_validator("headers", mode="before")
    @classmethod
    def _check_headers(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, Mapping):
            raise ValueError("Headers must be a mapping")
        return value

    @field_validator("required", mode="before")
    @classmethod
    def _check_required(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("Required fields config must be a mapping")
        return value

    @field_validator("httpx_options", mode="before")
    @classmethod
    def _check_httpx_options(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("httpx options must be a mapping")
        return value

    @field_validator("query", "body", mode="before")
    @classmethod
    def _check_pick_lists(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("Params pick options must be a mapping")
        return value

    @field_validator("transform_request", "transform_response", "error_handler")
    @classmethod
    def _check_transform(cls, value: Any, info: ValidationInfo) -> Any:
        if not _is_transform_option(value):
            raise ValueError(
                f"{info.field_name} must be a callable or a mapping of method name to callable"
            )
        return value
