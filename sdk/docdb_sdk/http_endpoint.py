"""
HTTP endpoint for the DocDB SDK.

This module provides the low-level HTTP communication layer for one server.
It is used directly for single-server setups, and as a member of a
ClusterConnection pool for multi-server setups.

Users normally construct it through Client.from_settings().
"""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple

import httpx

from .codec import to_jsonable
from .connection import Request, Response
from .errors import TransportError

logger = logging.getLogger(__name__)

# httpx failures that happen before any byte of the request is sent.
_NOT_WRITTEN_ERRORS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.PoolTimeout,
    httpx.UnsupportedProtocol,
)

_SEND_STARTED_EVENTS = (
    "http11.send_request_headers.started",
    "http2.send_request_headers.started",
)


def _written_tracer(request: Request) -> Callable[[str, dict], Awaitable[None]]:
    """Build an httpcore trace hook that flags the request once sending starts."""

    async def trace(event_name: str, info: dict) -> None:
        if event_name in _SEND_STARTED_EVENTS:
            request.written = True

    return trace


class HttpEndpoint:
    """Connection to a single server over HTTP.

    Example:
        >>> endpoint = HttpEndpoint("http://localhost:8529")
        >>> resp = await endpoint.do(endpoint.new_request("GET", "_api/version"))
        >>> resp.status_code
        200
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: Optional[Tuple[str, str]] = None,
        max_connections: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the endpoint.

        Args:
            base_url: Server URL (scheme, host and port)
            auth: Optional (username, password) for basic authentication
            max_connections: Connection pool size
            transport: Optional custom httpx transport
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=auth,
            limits=httpx.Limits(max_connections=max_connections),
            transport=transport,
        )

    def new_request(self, method: str, path: str) -> Request:
        return Request(method, path)

    async def do(self, request: Request, timeout: Optional[float] = None) -> Response:
        """Send the request and return the response.

        Raises:
            TransportError: On any network level failure. ``request.written``
                is left False only when the request never left this process.
        """
        request.written = False
        content: Optional[bytes] = None
        headers = dict(request.headers)
        if request.body is not None:
            content = json.dumps(to_jsonable(request.body)).encode("utf-8")
            headers.setdefault("Content-Type", "application/json")

        path = "/" + request.path.lstrip("/")
        extra: dict[str, Any] = {}
        if timeout is not None:
            extra["timeout"] = timeout
        try:
            resp = await self._client.request(
                request.method,
                path,
                params=request.query,
                headers=headers,
                content=content,
                extensions={"trace": _written_tracer(request)},
                **extra,
            )
        except _NOT_WRITTEN_ERRORS as e:
            request.written = False
            logger.debug(f"{request!r} not sent to {self.base_url}: {e!r}")
            raise TransportError(f"Failed to reach {self.base_url}: {e}", endpoint=self.base_url) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request to {self.base_url} failed: {e}",
                endpoint=self.base_url,
                written=request.written,
            ) from e

        request.written = True
        logger.debug(f"{request!r} -> {resp.status_code} from {self.base_url}")
        return Response(
            resp.status_code,
            resp.content,
            endpoint=self.base_url,
            headers=dict(resp.headers),
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpEndpoint:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"HttpEndpoint({self.base_url})"
