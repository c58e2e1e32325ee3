"""Transport layer -- the only part of declarest that performs network I/O.

A transport is any async callable taking a :class:`RequestOptions` and
returning an :class:`~declarest.client.response.ApiResponse`.  Generated
methods never talk to the network themselves; they compose a
:class:`RequestOptions` and await the transport.

:class:`HttpxTransport` is the default implementation.  It wraps
:class:`httpx.AsyncClient`, admits requests through an optional
:class:`~declarest.client.ratelimit.RateLimiter`, decodes payloads, and maps
failures to the :mod:`declarest.exceptions` hierarchy:

* 401 / 403 -> :class:`~declarest.exceptions.AuthError`
* 404 -> :class:`~declarest.exceptions.NotFoundError`
* 5xx -> :class:`~declarest.exceptions.ServerError`
* other non-2xx -> :class:`~declarest.exceptions.HTTPStatusError`
* timeouts and network errors -> :class:`~declarest.exceptions.ConnectionError_`
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import httpx

from declarest.client.ratelimit import RateLimiter
from declarest.client.response import ApiResponse, describe_failure, to_api_response
from declarest.exceptions import ConfigError, ConnectionError_, TransportError, status_error
from declarest.generator.projector import stringify

logger = logging.getLogger(__name__)


@dataclass
class RequestOptions:
    """Fully composed request handed to a transport.

    Attributes:
        method: Upper-cased HTTP verb.
        url: Absolute URL including the encoded query string.
        headers: Request headers (values are stringified on send).
        body: JSON-serialisable payload, raw ``str``/``bytes``, or ``None``
            for requests without a body.
        response_type: How to decode the payload (``json``, ``text``, ``bytes``).
        raw_response: Skip payload decoding entirely.
        timeout: Per-request timeout in seconds; ``None`` keeps the client default.
    """

    method: str
    url: str
    headers: dict[str, Any] = field(default_factory=dict)
    body: Any = None
    response_type: str = "json"
    raw_response: bool = False
    timeout: Optional[float] = None


class Transport(Protocol):
    async def __call__(self, options: RequestOptions) -> ApiResponse: ...


class HttpxTransport:
    """Default transport backed by :class:`httpx.AsyncClient`.

    Args:
        client: An existing client to send requests with.  When ``None`` a
            client is created by :meth:`open` (or on first use) and closed
            by :meth:`aclose`.
        limiter: Optional rate limiter every request must pass through.
        client_options: Extra keyword arguments for the owned
            :class:`httpx.AsyncClient` (``verify``, ``proxy``, ``limits`` ...).
            Ignored when *client* is given.

    Example::

        transport = HttpxTransport(limiter=RateLimiter(10, 1.0))
        response = await transport(RequestOptions("GET", "https://api.example.com/users"))
        await transport.aclose()
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        limiter: Optional[RateLimiter] = None,
        client_options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self.limiter = limiter
        self.client_options: dict[str, Any] = dict(client_options or {})

    def open(self) -> httpx.AsyncClient:
        """Create the owned client now, bound to the running event loop.

        Idempotent.  Called implicitly by the first request when the
        transport was not opened beforehand.

        Raises:
            ConfigError: If ``client_options`` holds an argument
                :class:`httpx.AsyncClient` does not accept.
        """
        if self._client is None:
            kwargs: dict[str, Any] = {"follow_redirects": True, **self.client_options}
            try:
                self._client = httpx.AsyncClient(**kwargs)
            except TypeError as exc:
                raise ConfigError(f"Invalid httpx client options: {exc}") from exc
            logger.debug("opened httpx client with options %s", sorted(self.client_options))
        return self._client

    def _get_client(self) -> httpx.AsyncClient:
        return self.open()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __call__(self, options: RequestOptions) -> ApiResponse:
        kwargs: dict[str, Any] = {
            "method": options.method,
            "url": options.url,
            "headers": {k: stringify(v) for k, v in options.headers.items()},
        }
        if isinstance(options.body, (str, bytes)):
            kwargs["content"] = options.body
        elif options.body is not None:
            kwargs["json"] = options.body
        if options.timeout is not None:
            kwargs["timeout"] = options.timeout

        if self.limiter is not None:
            await self.limiter.acquire()

        logger.debug("request started %s %s", options.method, options.url)
        try:
            response = await self._get_client().request(**kwargs)
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(
                f"{options.method} {options.url} failed: {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{options.method} {options.url} failed: {exc}") from exc

        logger.debug(
            "request finished %s %s -> %s", options.method, options.url, response.status_code
        )
        api_response = to_api_response(response, options.response_type, options.raw_response)
        if not api_response.is_success:
            raise status_error(
                api_response.status_code, describe_failure(api_response), api_response
            )
        return api_response
