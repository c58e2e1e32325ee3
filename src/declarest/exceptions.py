"""Exception hierarchy for declarest.

All exceptions inherit from :class:`DeclarestError`, so callers can catch
every library failure with a single ``except`` clause while still being
able to distinguish construction-time problems from per-call failures.

Subclass hierarchy::

    DeclarestError
    +-- ConfigError          bad client options or descriptor syntax
    +-- ValidationError      required call parameter missing
    +-- UnknownMethodError   invoke() with an unregistered method name
    +-- TransportError       network / transport failure
    |   +-- ConnectionError_ timeout, DNS failure, connection refused
    |   +-- HTTPStatusError  non-2xx response
    |       +-- AuthError      HTTP 401 / 403
    |       +-- NotFoundError  HTTP 404
    |       +-- ServerError    HTTP 5xx
    +-- HandlerError         an error handler raised a foreign exception

``ConfigError`` is raised synchronously while the client is constructed.
``ValidationError`` is raised synchronously when a generated method is
called.  Everything else surfaces when the call is awaited.
"""

from __future__ import annotations

from typing import Any, Optional


class DeclarestError(Exception):
    """Base exception for all declarest errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(DeclarestError):
    """Raised for invalid client options or a malformed endpoint descriptor."""


class ValidationError(DeclarestError):
    """Raised when a generated method is called without a required parameter.

    Attributes:
        method_name: The generated method that was called.
        field: The missing parameter name, or ``None`` when the parameters
            themselves were not a mapping.
    """

    def __init__(self, message: str, method_name: str = "", field: Optional[str] = None):
        super().__init__(message)
        self.method_name = method_name
        self.field = field


class UnknownMethodError(DeclarestError, KeyError):
    """Raised by :meth:`~declarest.client.factory.ApiClient.invoke` for unregistered names."""

    def __str__(self) -> str:
        return self.message


class TransportError(DeclarestError):
    """Raised when the transport fails to produce a successful response."""


class ConnectionError_(TransportError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """


class HTTPStatusError(TransportError):
    """Raised when the API answers with a non-2xx status code.

    Attributes:
        status_code: The HTTP status code.
        response: The :class:`~declarest.models.ApiResponse` that carried
            the status, so error handlers can inspect headers and payload.
    """

    def __init__(self, message: str, status_code: int = 0, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class AuthError(HTTPStatusError):
    """Raised when the API returns HTTP 401 or 403."""


class NotFoundError(HTTPStatusError):
    """Raised when the API returns HTTP 404 (resource not found)."""


class ServerError(HTTPStatusError):
    """Raised when the API returns an HTTP 5xx server error."""


class HandlerError(DeclarestError):
    """Raised when a configured error handler itself fails.

    The handler's exception is chained as ``__cause__`` and the failure it
    was handling is kept in :attr:`original`.
    """

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


def status_error(status_code: int, message: str, response: Any = None) -> HTTPStatusError:
    """Build the :class:`HTTPStatusError` subclass matching *status_code*."""
    if status_code in (401, 403):
        cls: type[HTTPStatusError] = AuthError
    elif status_code == 404:
        cls = NotFoundError
    elif status_code >= 500:
        cls = ServerError
    else:
        cls = HTTPStatusError
    return cls(message, status_code=status_code, response=response)
