"""
DocDB Python SDK - Client library for a document database.

This SDK provides an asyncio interface to one or more database servers:
- Client / Database / Collection handles for administration and documents
- ClusterConnection for transparent failover across servers
- RequestOptions for per-call request shaping (return old/new, silent, ...)
- Batched document operations with per-item results

Example:
    >>> from docdb_sdk import Client, ConnectionSettings, RequestOptions
    >>>
    >>> async with Client.from_settings(ConnectionSettings()) as client:
    ...     db = await client.database("shop")
    ...     col = await db.collection("users")
    ...     meta = await col.create_document({"name": "Tim", "age": 27})
    ...     opts = RequestOptions().with_return_old()
    ...     meta = await col.update_document(meta.key, {"name": "Updated"}, opts)

Invariants:
    - Invalid input fails before any request is sent
    - Requests are only retried on another server if never sent
    - Batched results are positional and never raise per item

Version: 1.0.0
"""

__version__ = "1.0.0"

from .client import Client, VersionInfo
from .cluster import DEFAULT_TIMEOUT, ClusterConnection, new_cluster_connection
from .collection import Collection
from .config import ConnectionSettings
from .connection import Connection, Request, Response
from .database import CollectionInfo, CreateCollectionOptions, Database
from .errors import (
    ArangoError,
    CanceledError,
    ConflictError,
    DecodeError,
    DocDbError,
    InvalidArgumentError,
    NotFoundError,
    ResponseError,
    TransportError,
    is_canceled,
    is_conflict,
    is_invalid_argument,
    is_not_found,
)
from .http_endpoint import HttpEndpoint
from .meta import DocumentMeta, DocumentMetaSlice, ErrorSlice
from .options import RequestOptions

__all__ = [
    # Version
    "__version__",
    # Client
    "Client",
    "VersionInfo",
    "Database",
    "CollectionInfo",
    "CreateCollectionOptions",
    "Collection",
    # Connections
    "Connection",
    "Request",
    "Response",
    "HttpEndpoint",
    "ClusterConnection",
    "new_cluster_connection",
    "DEFAULT_TIMEOUT",
    "ConnectionSettings",
    # Documents
    "RequestOptions",
    "DocumentMeta",
    "DocumentMetaSlice",
    "ErrorSlice",
    # Errors
    "DocDbError",
    "InvalidArgumentError",
    "CanceledError",
    "TransportError",
    "ResponseError",
    "ArangoError",
    "NotFoundError",
    "ConflictError",
    "DecodeError",
    "is_invalid_argument",
    "is_not_found",
    "is_conflict",
    "is_canceled",
]
