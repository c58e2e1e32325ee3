"""Shared test fixtures for declarest.

Provides a recording fake transport so client and invoker tests can assert
on the exact :class:`~declarest.client.transport.RequestOptions` a generated
method composed, without any network I/O.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pytest

from declarest.client.response import ApiResponse
from declarest.client.transport import RequestOptions
from declarest.models import ClientOptions

BASE_URL = "http://example.com"


class RecordingTransport:
    """Fake transport that records requests and replies with a canned response.

    Attributes:
        requests: Every :class:`RequestOptions` received, in call order.
        response: The :class:`ApiResponse` returned for each call.
        error: When set, raised instead of returning :attr:`response`.
    """

    def __init__(self, response: Optional[ApiResponse] = None) -> None:
        self.requests: list[RequestOptions] = []
        self.response = response or ApiResponse(status_code=200, data="body")
        self.error: Optional[Exception] = None
        self.on_request: Optional[Callable[[RequestOptions], Any]] = None

    async def __call__(self, options: RequestOptions) -> ApiResponse:
        self.requests.append(options)
        if self.on_request is not None:
            self.on_request(options)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last(self) -> RequestOptions:
        assert self.requests, "no request was dispatched"
        return self.requests[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    """A fresh recording transport answering ``200`` with payload ``"body"``."""
    return RecordingTransport()


@pytest.fixture
def make_options() -> Callable[..., ClientOptions]:
    """Factory for :class:`ClientOptions` with the test base URL filled in."""

    def _make(**kwargs: Any) -> ClientOptions:
        kwargs.setdefault("base_url", BASE_URL)
        kwargs.setdefault("methods", {})
        return ClientOptions(**kwargs)

    return _make
