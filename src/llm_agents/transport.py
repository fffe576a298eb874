"""HTTP transport boundary.

Providers never talk to the network directly. They build an ``HttpRequest``
and hand it to an injected ``Transport``, which makes the call and returns
an ``HttpResponse``. ``HttpxTransport`` is the default implementation;
tests substitute their own.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpRequest:
    """An outgoing HTTP request."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class HttpResponse:
    """A received HTTP response."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        """Return True for 2xx status codes."""
        return 200 <= self.status_code < 300

    def text(self) -> str:
        """Decode the body as UTF-8 text."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.

        """
        return json.loads(self.body)

    def error_payload(self) -> Any:
        """Return the body as JSON if possible, otherwise as text."""
        try:
            return self.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return self.text()


@runtime_checkable
class Transport(Protocol):
    """An async function that performs one HTTP request."""

    async def __call__(self, request: HttpRequest) -> HttpResponse:
        """Send ``request`` and return the response.

        Non-success statuses are returned, not raised.
        """
        ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``.

    A shared client can be supplied for connection reuse; otherwise a
    client is opened per request. No timeout is applied unless one is
    configured.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialise the transport.

        Args:
            client: Optional shared client. The caller owns its lifecycle.
            timeout: Per-request timeout in seconds for per-request clients.

        """
        self._client = client
        self._timeout = timeout

    async def __call__(self, request: HttpRequest) -> HttpResponse:
        """Send ``request`` with httpx."""
        if self._client is not None:
            return await self._send(self._client, request)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._send(client, request)

    async def _send(
        self, client: httpx.AsyncClient, request: HttpRequest
    ) -> HttpResponse:
        logger.debug(f"{request.method} {request.url}")
        response = await client.request(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.body,
        )
        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )


def encode_multipart(
    fields: Mapping[str, str],
    files: Mapping[str, tuple[str, bytes, str]],
) -> tuple[bytes, str]:
    """Encode a multipart/form-data body.

    Uses httpx's encoder so the boundary and content type match what httpx
    itself would send.

    Args:
        fields: Plain form fields.
        files: Mapping of field name to ``(filename, content, content_type)``.

    Returns:
        Tuple of the encoded body and its ``Content-Type`` header value.

    """
    request = httpx.Request(
        "POST", "http://multipart.invalid", data=dict(fields), files=dict(files)
    )
    return request.read(), request.headers["Content-Type"]
