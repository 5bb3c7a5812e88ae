"""
Cluster connection with failover across a pool of servers.

A ClusterConnection implements the same Connection contract as a single
endpoint, so callers cannot tell it apart from one server. Each request is
tried on the current server first; if it fails before anything was sent,
the next server in the pool is tried, each at most once.

Example:
    >>> conn = new_cluster_connection(
    ...     HttpEndpoint("http://db1:8529"),
    ...     HttpEndpoint("http://db2:8529"),
    ... )
    >>> resp = await conn.do(conn.new_request("GET", "_api/version"), timeout=5)

Invariants:
    - The pool is non-empty and fixed at construction
    - The current index is always valid, and only moves on failover
    - The lock is never held across a network call
    - A request that may have reached a server is never sent to another one
    - Task cancellation propagates untouched and never fails over
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Optional, Sequence, Tuple

from .connection import Connection, Request, Response
from .errors import (
    ArangoError,
    CanceledError,
    InvalidArgumentError,
    ResponseError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

# Upper bound on how many ways the timeout is split between attempts.
MAX_TIMEOUT_DIVIDER = 3


class ClusterConnection:
    """Connection to a pool of servers that fails over between them.

    A threading.Lock stands in for a reader/writer lock on the current-server
    cursor. It is held only to read or move one index, never across an await.

    Each call walks the pool from the server it started on, so concurrent
    failovers never send one call to the same server twice.
    """

    def __init__(
        self,
        servers: Sequence[Connection],
        default_timeout: Optional[float] = None,
    ) -> None:
        """Initialize the cluster connection.

        Args:
            servers: Connections to each server, in failover order
            default_timeout: Budget in seconds for requests without a timeout

        Raises:
            InvalidArgumentError: If no servers are given
        """
        if not servers:
            raise InvalidArgumentError("must provide at least 1 server", argument="servers")
        self._servers: Tuple[Connection, ...] = tuple(servers)
        self._current = 0
        self._lock = threading.Lock()
        self.default_timeout = default_timeout or DEFAULT_TIMEOUT

    @property
    def servers(self) -> Tuple[Connection, ...]:
        return self._servers

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._current

    def new_request(self, method: str, path: str) -> Request:
        # All servers are assumed to speak the same protocol.
        return self._servers[0].new_request(method, path)

    async def do(self, request: Request, timeout: Optional[float] = None) -> Response:
        """Perform the request, failing over to other servers when possible.

        Args:
            request: Request to send
            timeout: Overall budget in seconds, split across attempts

        Raises:
            CanceledError: If the caller's timeout ran out
            ArangoError: If a server answered with an error after the request was sent
            ResponseError: If the exchange failed after the request was sent
            TransportError: If no server could be reached
        """
        budget = timeout if timeout is not None else self.default_timeout
        deadline = time.monotonic() + budget if timeout is not None else None
        divider = max(1, min(MAX_TIMEOUT_DIVIDER, len(self._servers)))
        attempt_timeout = budget / divider

        attempt = 1
        index, server = self._current_server()
        while True:
            try:
                return await asyncio.wait_for(
                    server.do(request, timeout=attempt_timeout),
                    attempt_timeout,
                )
            except asyncio.TimeoutError:
                err: Exception = TransportError(
                    f"attempt {attempt} timed out after {attempt_timeout:.3f}s",
                    written=request.written,
                )
            except CanceledError:
                raise
            except Exception as e:
                err = e

            endpoint = getattr(server, "base_url", str(index))
            if deadline is not None and time.monotonic() >= deadline:
                raise CanceledError(
                    f"timeout of {budget}s exceeded on attempt {attempt}",
                    endpoint=endpoint,
                    attempt=attempt,
                ) from err

            if request.written:
                # The server may already have applied the request.
                if isinstance(err, ArangoError):
                    raise err
                raise ResponseError(
                    f"request to {endpoint} failed after sending: {err}",
                    endpoint=endpoint,
                    attempt=attempt,
                ) from err

            attempt += 1
            if attempt > len(self._servers):
                logger.warning(f"{request!r} failed on all {len(self._servers)} servers: {err}")
                if hasattr(err, "details"):
                    err.details.setdefault("attempts", len(self._servers))
                raise err
            index, server = self._next_server(index)
            logger.warning(f"{request!r} failed on {endpoint}, failing over to server {index}: {err}")

    async def close(self) -> None:
        """Close all servers in the pool."""
        for server in self._servers:
            await server.close()

    async def __aenter__(self) -> ClusterConnection:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def _current_server(self) -> Tuple[int, Connection]:
        with self._lock:
            return self._current, self._servers[self._current]

    def _next_server(self, index: int) -> Tuple[int, Connection]:
        # Advance from the server this call last tried, not the shared cursor.
        nxt = (index + 1) % len(self._servers)
        with self._lock:
            self._current = nxt
        return nxt, self._servers[nxt]


def new_cluster_connection(
    *servers: Connection,
    default_timeout: Optional[float] = None,
) -> ClusterConnection:
    """Create a cluster connection to the given servers."""
    return ClusterConnection(servers, default_timeout=default_timeout)
