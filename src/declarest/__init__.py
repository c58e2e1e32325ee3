"""declarest -- Declarative asynchronous REST clients from terse endpoint descriptors.

A client is declared as a base URL plus a table of method names mapped to
``"VERB /path/{param}?query={q}"`` descriptors.  Each descriptor becomes an
async method that builds the URL, query string, and body from the call's
parameters and dispatches the request over :mod:`httpx`.

Typical usage::

    from declarest import ApiClient

    github = ApiClient(
        base_url="https://api.github.com",
        methods={
            "repo": "GET /repos/{owner}/{repo}",
            "issues": "GET /repos/{owner}/{repo}/issues?state=open",
        },
        headers={"Accept": "application/vnd.github+json"},
    )

    async with github:
        issues = await github.issues({"owner": "python", "repo": "cpython"})

Modules:
    models: Pydantic models for options, URI schemas, and request templates.
    exceptions: Exception hierarchy rooted at :class:`DeclarestError`.
    parser: Descriptor and URI template parsing.
    generator: Parameter projection and transform resolution.
    client: The generated client, per-call pipeline, and transport.
"""

from declarest.client import ApiClient, ApiResponse, HttpxTransport, RequestOptions, create_client
from declarest.exceptions import (
    AuthError,
    ConfigError,
    ConnectionError_,
    DeclarestError,
    HandlerError,
    HTTPStatusError,
    NotFoundError,
    ServerError,
    TransportError,
    UnknownMethodError,
    ValidationError,
)
from declarest.models import ClientOptions, RateLimitConfig

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "ApiResponse",
    "ClientOptions",
    "HttpxTransport",
    "RateLimitConfig",
    "RequestOptions",
    "create_client",
    "AuthError",
    "ConfigError",
    "ConnectionError_",
    "DeclarestError",
    "HandlerError",
    "HTTPStatusError",
    "NotFoundError",
    "ServerError",
    "TransportError",
    "UnknownMethodError",
    "ValidationError",
]
