"""Response model and payload decoding -- maps :class:`httpx.Response` to :class:`ApiResponse`.

After the transport receives an :class:`httpx.Response`,
:func:`to_api_response` decodes its body according to the requested
response type and wraps it in an :class:`ApiResponse`, the value handed to
response transformers and error handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import httpx


@dataclass
class ApiResponse:
    """Transport-neutral view of an HTTP response.

    Attributes:
        status_code: HTTP status code.
        headers: Response headers.
        data: The decoded payload (JSON value, text, or bytes).
        raw: The underlying :class:`httpx.Response` when the default
            transport produced this response, otherwise ``None``.
    """

    status_code: int
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    raw: Optional[httpx.Response] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def extract_response_data(
    response: httpx.Response,
    response_type: str = "json",
    raw_response: bool = False,
) -> Any:
    """Extract the body from an HTTP response.

    Args:
        response: The :class:`httpx.Response` to decode.
        response_type: ``"json"`` (default) tries JSON and falls back to
            text; ``"text"`` returns text; ``"bytes"``/``"arraybuffer"``
            return raw bytes.  Unknown types are treated as ``"json"``.
        raw_response: When ``True``, skip decoding and return raw bytes.

    Returns:
        A JSON-decoded object, a ``str``, ``bytes``, or ``None`` if the
        body is empty.
    """
    if raw_response or response_type in ("bytes", "arraybuffer", "blob"):
        return response.content

    # Handle empty body
    if not response.content:
        return None

    if response_type == "text":
        return response.text

    # Try JSON first
    try:
        return response.json()
    except ValueError:
        pass

    # Fall back to text
    return response.text


def to_api_response(
    response: httpx.Response,
    response_type: str = "json",
    raw_response: bool = False,
) -> ApiResponse:
    """Wrap *response* in an :class:`ApiResponse` with a decoded payload."""
    return ApiResponse(
        status_code=response.status_code,
        data=extract_response_data(response, response_type, raw_response),
        headers=dict(response.headers),
        raw=response,
    )


def describe_failure(response: ApiResponse) -> str:
    """Build a ``HTTP <status>: <detail>`` message for a failed response."""
    detail = response.data
    if isinstance(detail, dict):
        msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
    elif isinstance(detail, bytes):
        msg = detail[:200].decode("utf-8", errors="replace")
    elif detail is None:
        msg = ""
    else:
        msg = str(detail)[:200]

    prefix = f"HTTP {response.status_code}"
    return f"{prefix}: {msg}" if msg else prefix
