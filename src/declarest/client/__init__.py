"""Generated API client, per-call pipeline, and HTTP transport.

Classes:
    :class:`ApiClient` -- validates options and exposes one generated
        method per endpoint descriptor.
    :class:`MethodInvoker` -- the callable behind each generated method.
    :class:`HttpxTransport` -- default transport backed by
        :class:`httpx.AsyncClient`, rate-limited by :class:`RateLimiter`.

Example::

    from declarest.client import ApiClient

    async with ApiClient(base_url="https://api.example.com",
                         methods={"list_users": "GET /users"}) as api:
        users = await api.list_users({"page": 2})
"""

from declarest.client.factory import ApiClient, create_client
from declarest.client.invoker import MethodInvoker
from declarest.client.ratelimit import RateLimiter
from declarest.client.response import ApiResponse
from declarest.client.transport import HttpxTransport, RequestOptions, Transport

__all__ = [
    "ApiClient",
    "create_client",
    "MethodInvoker",
    "RateLimiter",
    "ApiResponse",
    "HttpxTransport",
    "RequestOptions",
    "Transport",
]
