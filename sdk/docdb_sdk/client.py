"""
DocDB Client for the Python SDK.

This module provides the main client interface:
- Client: Entry point owning the (cluster) connection
- Database: Handle for collection administration
- Collection: Handle for document operations

Example:
    >>> async with Client.from_settings(ConnectionSettings()) as client:
    ...     db = await client.database("shop")
    ...     col = await db.collection("users")
    ...     meta = await col.create_document({"name": "Piere", "age": 23})

Invariants:
    - All requests go through one Connection, which may fail over
    - Handles hold no state besides their names
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List

from .cluster import ClusterConnection
from .config import ConnectionSettings
from .connection import Connection
from .database import SYSTEM_DATABASE, Database
from .errors import NotFoundError
from .http_endpoint import HttpEndpoint
from .validate import validate_name

logger = logging.getLogger(__name__)


@dataclass
class VersionInfo:
    """Server version information.

    Attributes:
        server: Server name
        version: Version string
        license: License edition
    """

    server: str
    version: str
    license: str = ""


class Client:
    """Client for a DocDB server or cluster.

    Example:
        >>> conn = new_cluster_connection(HttpEndpoint("http://db1:8529"))
        >>> client = Client(conn)
        >>> await client.database_exists("shop")
        True
    """

    def __init__(self, connection: Connection) -> None:
        """Initialize client.

        Args:
            connection: Single endpoint or cluster connection
        """
        self._conn = connection

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> Client:
        """Build a client with one HTTP endpoint per configured URL."""
        endpoints = [
            HttpEndpoint(url, auth=settings.auth, max_connections=settings.max_connections)
            for url in settings.endpoints
        ]
        logger.debug(f"Connecting to {len(endpoints)} endpoint(s): {settings.endpoints}")
        return cls(ClusterConnection(endpoints, default_timeout=settings.default_timeout))

    @property
    def connection(self) -> Connection:
        return self._conn

    async def close(self) -> None:
        """Close the connection."""
        await self._conn.close()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def version(self) -> VersionInfo:
        """Get the server version."""
        req = self._conn.new_request("GET", "_api/version")
        resp = await self._conn.do(req)
        resp.check_status(200)
        data = resp.parse_body()
        return VersionInfo(
            server=data.get("server", ""),
            version=data.get("version", ""),
            license=data.get("license", ""),
        )

    async def database(self, name: str) -> Database:
        """Open an existing database.

        Raises:
            NotFoundError: If no database with the name exists
        """
        validate_name(name, "database")
        req = self._conn.new_request("GET", f"_db/{name}/_api/database/current")
        resp = await self._conn.do(req)
        resp.check_status(200)
        return Database(name, self._conn)

    async def database_exists(self, name: str) -> bool:
        """Return True if a database with the name exists."""
        try:
            await self.database(name)
        except NotFoundError:
            return False
        return True

    async def databases(self) -> List[Database]:
        """List all databases."""
        req = self._conn.new_request("GET", f"_db/{SYSTEM_DATABASE}/_api/database")
        resp = await self._conn.do(req)
        resp.check_status(200)
        return [Database(name, self._conn) for name in resp.parse_body("result")]

    async def create_database(self, name: str) -> Database:
        """Create a new database.

        Raises:
            ConflictError: If a database with the name already exists
        """
        validate_name(name, "database")
        req = self._conn.new_request("POST", f"_db/{SYSTEM_DATABASE}/_api/database")
        req.set_body({"name": name})
        resp = await self._conn.do(req)
        resp.check_status(201)
        logger.info(f"Created database {name}")
        return Database(name, self._conn)
