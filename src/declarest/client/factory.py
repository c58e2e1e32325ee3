"""Client factory -- validate options and generate one method per descriptor.

:class:`ApiClient` is the public entry point of declarest::

    api = ApiClient(
        base_url="https://api.example.com",
        methods={
            "get_user": "GET /users/{id}",
            "update_user": "PATCH /users/{id}",
        },
        required={"update_user": ["id"]},
    )

    async with api:
        user = await api.get_user({"id": 42})
        await api.update_user({"id": 42, "name": "Ada"})

Construction validates every option and descriptor up front and raises
:class:`~declarest.exceptions.ConfigError` on the first problem.  The
generated methods live in an immutable table (:attr:`ApiClient.methods`)
and are reachable both as attributes and through :meth:`ApiClient.invoke`.
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

import pydantic

from declarest.client.invoker import MethodInvoker
from declarest.client.ratelimit import RateLimiter
from declarest.client.transport import HttpxTransport, Transport
from declarest.exceptions import ConfigError, UnknownMethodError
from declarest.generator.transforms import TransformSpec, resolve_all
from declarest.models import ClientOptions
from declarest.parser.descriptor import build_request_template

logger = logging.getLogger(__name__)

_INSTANCE_MEMBERS = frozenset({"options", "transport"})


def load_options(options: Any = None, **kwargs: Any) -> ClientOptions:
    """Validate raw client options into a :class:`ClientOptions`.

    Args:
        options: A :class:`ClientOptions`, a mapping, or ``None``.
        **kwargs: Extra options merged over *options*.

    Raises:
        ConfigError: If the options are not a mapping or fail validation.
    """
    if isinstance(options, ClientOptions) and not kwargs:
        return options

    if options is None:
        raw: dict[str, Any] = {}
    elif isinstance(options, ClientOptions):
        raw = options.model_dump(by_alias=False, exclude_unset=True)
    elif isinstance(options, Mapping):
        raw = dict(options)
    else:
        raise ConfigError("Client options must be a mapping")
    raw.update(kwargs)

    try:
        return ClientOptions.model_validate(raw)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "options"
        message = first["msg"].removeprefix("Value error, ")
        raise ConfigError(f"Invalid client option {location}: {message}") from exc


class ApiClient:
    """Asynchronous REST client generated from endpoint descriptors.

    Args:
        options: Client configuration as :class:`ClientOptions` or a mapping.
        transport: Optional transport to dispatch requests on.  When omitted
            an :class:`~declarest.client.transport.HttpxTransport` is created,
            rate-limited according to ``options.rate_limit``, and closed by
            :meth:`aclose`.
        **kwargs: Options given as keyword arguments; merged over *options*.

    Raises:
        ConfigError: If any option or descriptor is invalid, or a method
            name is not a usable attribute name.
    """

    def __init__(
        self,
        options: Any = None,
        *,
        transport: Optional[Transport] = None,
        **kwargs: Any,
    ) -> None:
        self.options = load_options(options, **kwargs)
        self._owns_transport = transport is None
        self.transport: Transport = transport or self._default_transport()

        transform_request = TransformSpec.from_option(
            self.options.transform_request, "transform_request"
        )
        transform_response = TransformSpec.from_option(
            self.options.transform_response, "transform_response"
        )
        error_handler = TransformSpec.from_option(self.options.error_handler, "error_handler")

        table: dict[str, MethodInvoker] = {}
        for method_name, descriptor in self.options.methods.items():
            self._check_method_name(method_name)
            table[method_name] = MethodInvoker(
                template=build_request_template(descriptor, method_name, self.options),
                transforms=resolve_all(
                    method_name, transform_request, transform_response, error_handler
                ),
                transport=self.transport,
                required=tuple(self.options.required.get(method_name, ())),
                response_type=self.options.response_type,
                raw_response=self.options.raw_response,
                timeout=self.options.timeout,
            )
        self._methods = MappingProxyType(table)

        logger.debug("client is instantiated with %d methods", len(table))

    def _default_transport(self) -> HttpxTransport:
        limit = self.options.rate_limit
        limiter = RateLimiter.from_config(limit) if limit is not None else None
        return HttpxTransport(limiter=limiter, client_options=self.options.httpx_options)

    @classmethod
    def _check_method_name(cls, name: str) -> None:
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ConfigError(f"Method name {name!r} is not a valid identifier")
        if name.startswith("_") or name in _INSTANCE_MEMBERS or hasattr(cls, name):
            raise ConfigError(f"Method name {name!r} collides with a reserved client member")

    # ------------------------------------------------------------------ #
    # Method table
    # ------------------------------------------------------------------ #

    @property
    def methods(self) -> Mapping[str, MethodInvoker]:
        """Read-only table of generated methods keyed by name."""
        return self._methods

    def __getattr__(self, name: str) -> MethodInvoker:
        methods = self.__dict__.get("_methods")
        if methods is not None and name in methods:
            return methods[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._methods))

    def invoke(
        self,
        method_name: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Call a generated method by name.

        Raises:
            UnknownMethodError: If no method named *method_name* was declared.
            ValidationError: If the parameters fail validation.
        """
        try:
            method = self._methods[method_name]
        except KeyError:
            raise UnknownMethodError(f"Unknown API method: {method_name}") from None
        return method(params, options)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def aclose(self) -> None:
        """Close the transport if the client created it."""
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> ApiClient:
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            self.transport.open()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


def create_client(
    options: Any = None,
    *,
    transport: Optional[Transport] = None,
    **kwargs: Any,
) -> ApiClient:
    """Build an :class:`ApiClient`; see its constructor for the arguments."""
    return ApiClient(options, transport=transport, **kwargs)
