"""
Database handle and collection administration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .collection import Collection
from .connection import Connection
from .errors import InvalidArgumentError, NotFoundError
from .validate import validate_name

logger = logging.getLogger(__name__)

SYSTEM_DATABASE = "_system"


@dataclass
class CreateCollectionOptions:
    """Options for creating a collection.

    Attributes:
        wait_for_sync: Sync every write to disk before answering
        key_generator: Key generator type ("traditional", "autoincrement", ...)
        allow_user_keys: Whether documents may bring their own ``_key``
        number_of_shards: Shard count in a cluster
        type: 2 for document collections, 3 for edge collections
    """

    wait_for_sync: bool = False
    key_generator: Optional[str] = None
    allow_user_keys: bool = True
    number_of_shards: Optional[int] = None
    type: int = 2

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"waitForSync": self.wait_for_sync, "type": self.type}
        key_options: Dict[str, Any] = {"allowUserKeys": self.allow_user_keys}
        if self.key_generator:
            key_options["type"] = self.key_generator
        body["keyOptions"] = key_options
        if self.number_of_shards is not None:
            body["numberOfShards"] = self.number_of_shards
        return body


@dataclass
class CollectionInfo:
    """Basic information about a collection."""

    name: str
    id: str = ""
    type: int = 2
    is_system: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CollectionInfo:
        return cls(
            name=data["name"],
            id=str(data.get("id", "")),
            type=int(data.get("type", 2)),
            is_system=bool(data.get("isSystem", False)),
        )


class Database:
    """A database on the server."""

    def __init__(self, name: str, conn: Connection) -> None:
        validate_name(name, "database")
        if conn is None:
            raise InvalidArgumentError("conn is None", argument="conn")
        self._name = name
        self._conn = conn

    @property
    def name(self) -> str:
        return self._name

    @property
    def connection(self) -> Connection:
        return self._conn

    def rel_path(self) -> str:
        """Relative path to this database (``_db/<name>``)."""
        return f"_db/{self._name}"

    async def collection(self, name: str) -> Collection:
        """Open an existing collection.

        Raises:
            NotFoundError: If no collection with the name exists
        """
        validate_name(name, "collection")
        req = self._conn.new_request("GET", f"{self.rel_path()}/_api/collection/{name}")
        resp = await self._conn.do(req)
        resp.check_status(200)
        return Collection(name, self)

    async def collection_exists(self, name: str) -> bool:
        """Return True if a collection with the name exists."""
        try:
            await self.collection(name)
        except NotFoundError:
            return False
        return True

    async def collections(self) -> List[Collection]:
        """List all collections in the database."""
        req = self._conn.new_request("GET", f"{self.rel_path()}/_api/collection")
        resp = await self._conn.do(req)
        resp.check_status(200)
        infos = [CollectionInfo.from_dict(c) for c in resp.parse_body("result")]
        return [Collection(info.name, self) for info in infos]

    async def create_collection(
        self,
        name: str,
        options: Optional[CreateCollectionOptions] = None,
    ) -> Collection:
        """Create a new collection and return a handle to it.

        Raises:
            ConflictError: If a collection with the name already exists
        """
        validate_name(name, "collection")
        body = (options or CreateCollectionOptions()).to_body()
        body["name"] = name
        req = self._conn.new_request("POST", f"{self.rel_path()}/_api/collection")
        req.set_body(body)
        resp = await self._conn.do(req)
        resp.check_status(200)
        logger.info(f"Created collection {self._name}/{name}")
        return Collection(name, self)

    async def remove(self) -> None:
        """Drop this database.

        Raises:
            NotFoundError: If the database does not exist
        """
        req = self._conn.new_request("DELETE", f"_db/{SYSTEM_DATABASE}/_api/database/{self._name}")
        resp = await self._conn.do(req)
        resp.check_status(200)
        logger.info(f"Removed database {self._name}")

    def __repr__(self) -> str:
        return f"Database({self._name})"
