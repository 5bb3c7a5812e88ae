"""
Collection handle and document operations.

Every document operation is one linear pipeline:
validate -> encode -> send (with failover) -> decode -> post-process.
No state is kept between calls.

Example:
    >>> col = await db.collection("users")
    >>> meta = await col.create_document({"name": "Piere", "age": 23})
    >>> await col.update_document(meta.key, {"name": "Updated"})
    >>> _, doc = await col.read_document(meta.key)
    >>> doc["name"], doc["age"]
    ('Updated', 23)

Batched variants take parallel sequences and return per-item results:

    >>> metas, errors = await col.update_documents(keys, updates)
    >>> [e for e in errors if e is not None]
    []

Invariants:
    - Invalid input raises InvalidArgumentError before any request is sent
    - Batched results have one entry per input item, in input order
    - A batched call never raises for an individual item's failure
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from .codec import (
    create_merge_array,
    encode_body,
    encode_body_array,
    parse_document,
    parse_document_array,
    parse_document_meta,
    parse_response_array,
)
from .connection import Request, Response
from .errors import InvalidArgumentError
from .meta import DocumentMeta, DocumentMetaSlice, ErrorSlice
from .options import DEFAULT_OPTIONS, RequestOptions
from .validate import validate_key, validate_keys, validate_name

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


def _require_sequence(items: Any, argument: str) -> Sequence[Any]:
    if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Sequence):
        raise InvalidArgumentError(
            f"{argument} must be a list or tuple, got {type(items).__name__}",
            argument=argument,
        )
    return items


def _require_lengths(keys: Sequence[str], items: Sequence[Any], argument: str) -> None:
    if len(keys) != len(items):
        raise InvalidArgumentError(
            f"expected {len(items)} keys, got {len(keys)}",
            argument=argument,
        )


class Collection:
    """A collection within a database."""

    def __init__(self, name: str, db: Database) -> None:
        validate_name(name, "collection")
        if db is None:
            raise InvalidArgumentError("db is None", argument="db")
        self._name = name
        self._db = db
        self._conn = db.connection

    @property
    def name(self) -> str:
        return self._name

    @property
    def database(self) -> Database:
        return self._db

    def rel_path(self, api_name: str) -> str:
        """Relative path to this collection (``_db/<db>/_api/<api>/<name>``)."""
        return f"{self._db.rel_path()}/_api/{api_name}/{self._name}"

    def _document_path(self, key: Optional[str] = None) -> str:
        path = self.rel_path("document")
        return f"{path}/{key}" if key else path

    async def _send(self, request: Request, options: RequestOptions) -> Response:
        return await self._conn.do(request, timeout=options.timeout)

    async def remove(self) -> None:
        """Remove the entire collection.

        Raises:
            NotFoundError: If the collection does not exist
        """
        req = self._conn.new_request("DELETE", self.rel_path("collection"))
        resp = await self._conn.do(req)
        resp.check_status(200)
        logger.info(f"Removed collection {self._db.name}/{self._name}")

    # ------------------------------------------------------------------
    # Singular operations
    # ------------------------------------------------------------------

    async def read_document(
        self,
        key: str,
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> Tuple[DocumentMeta, Any]:
        """Read a single document.

        Returns:
            Tuple of (metadata, document). The document is a dict, or an
            instance of options.document_type when one is set.

        Raises:
            InvalidArgumentError: If the key is invalid
            NotFoundError: If no document exists with the key
            ConflictError: If options.revision does not match
        """
        validate_key(key)
        req = self._conn.new_request("GET", self._document_path(key))
        options.apply(req)
        resp = await self._send(req, options)
        resp.check_status(200)
        meta = parse_document_meta(resp, DEFAULT_OPTIONS)
        if options.raw_response:
            meta.raw = resp.body
        return meta, parse_document(resp, options)

    async def create_document(
        self,
        document: Any,
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> DocumentMeta:
        """Create a single document.

        A ``_key`` field in the document is used as its key, otherwise the
        server generates one.

        Raises:
            InvalidArgumentError: If the document is None
            ConflictError: If the key or a unique index value already exists
        """
        if document is None:
            raise InvalidArgumentError("document is None", argument="document")
        req = self._conn.new_request("POST", self._document_path())
        req.set_body(encode_body(document))
        return await self._write_one(req, options, options.ok_statuses(201, 202))

    async def update_document(
        self,
        key: str,
        update: Any,
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> DocumentMeta:
        """Partially update a single document.

        Raises:
            InvalidArgumentError: If the key is invalid or the update is None
            NotFoundError: If no document exists with the key
            ConflictError: If options.revision does not match
        """
        validate_key(key)
        if update is None:
            raise InvalidArgumentError("update is None", argument="update")
        req = self._conn.new_request("PATCH", self._document_path(key))
        req.set_body(encode_body(update))
        return await self._write_one(req, options, options.ok_statuses(201, 202))

    async def replace_document(
        self,
        key: str,
        document: Any,
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> DocumentMeta:
        """Replace a single document entirely.

        Raises:
            InvalidArgumentError: If the key is invalid or the document is None
            NotFoundError: If no document exists with the key
            ConflictError: If options.revision does not match
        """
        validate_key(key)
        if document is None:
            raise InvalidArgumentError("document is None", argument="document")
        req = self._conn.new_request("PUT", self._document_path(key))
        req.set_body(encode_body(document))
        return await self._write_one(req, options, options.ok_statuses(201, 202))

    async def remove_document(
        self,
        key: str,
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> DocumentMeta:
        """Remove a single document.

        Raises:
            InvalidArgumentError: If the key is invalid
            NotFoundError: If no document exists with the key
            ConflictError: If options.revision does not match
        """
        validate_key(key)
        req = self._conn.new_request("DELETE", self._document_path(key))
        return await self._write_one(req, options, options.ok_statuses(200, 202))

    async def _write_one(
        self,
        req: Request,
        options: RequestOptions,
        ok: Tuple[int, ...],
    ) -> DocumentMeta:
        options.apply(req)
        resp = await self._send(req, options)
        resp.check_status(*ok)
        if options.silent:
            # Body is omitted by the server.
            return DocumentMeta()
        meta = parse_document_meta(resp, options)
        if options.raw_response:
            meta.raw = resp.body
        return meta

    # ------------------------------------------------------------------
    # Batched operations
    # ------------------------------------------------------------------

    async def read_documents(
        self,
        keys: Sequence[str],
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> Tuple[DocumentMetaSlice, List[Any], ErrorSlice]:
        """Read multiple documents.

        Returns:
            Tuple of (metas, documents, errors), one entry per key.
            A missing key yields a NotFoundError at its position.

        Raises:
            InvalidArgumentError: If any key is invalid
        """
        keys = _require_sequence(keys, "keys")
        validate_keys(keys)
        req = self._conn.new_request("PUT", self._document_path())
        req.set_query("onlyget", "true")
        options.apply(req)
        if options.revisions is not None:
            req.set_body(create_merge_array(keys, options.revisions))
        else:
            req.set_body(list(keys))
        resp = await self._send(req, options)
        resp.check_status(200)
        return parse_document_array(resp, len(keys), options)

    async def create_documents(
        self,
        documents: Sequence[Any],
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> Tuple[DocumentMetaSlice, ErrorSlice]:
        """Create multiple documents.

        A duplicate key or unique index violation yields a ConflictError
        at that document's position; the other documents are still created.

        Raises:
            InvalidArgumentError: If documents is not a sequence
        """
        documents = _require_sequence(documents, "documents")
        req = self._conn.new_request("POST", self._document_path())
        req.set_body(encode_body_array(documents))
        return await self._write_many(req, len(documents), options, options.ok_statuses(201, 202))

    async def update_documents(
        self,
        keys: Sequence[str],
        updates: Sequence[Any],
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> Tuple[DocumentMetaSlice, ErrorSlice]:
        """Partially update multiple documents.

        Keys are paired with updates by position. Expected revisions can be
        given with options.revisions, paired the same way.

        Raises:
            InvalidArgumentError: If the lengths differ or any key is invalid
        """
        updates = _require_sequence(updates, "updates")
        keys = _require_sequence(keys, "keys")
        _require_lengths(keys, updates, "keys")
        validate_keys(keys)
        req = self._conn.new_request("PATCH", self._document_path())
        merge = create_merge_array(keys, options.revisions)
        req.set_body(encode_body_array(updates, merge))
        return await self._write_many(req, len(updates), options, options.ok_statuses(201, 202))

    async def replace_documents(
        self,
        keys: Sequence[str],
        documents: Sequence[Any],
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> Tuple[DocumentMetaSlice, ErrorSlice]:
        """Replace multiple documents.

        Raises:
            InvalidArgumentError: If the lengths differ or any key is invalid
        """
        documents = _require_sequence(documents, "documents")
        keys = _require_sequence(keys, "keys")
        _require_lengths(keys, documents, "keys")
        validate_keys(keys)
        req = self._conn.new_request("PUT", self._document_path())
        merge = create_merge_array(keys, options.revisions)
        req.set_body(encode_body_array(documents, merge))
        return await self._write_many(req, len(documents), options, options.ok_statuses(201, 202))

    async def remove_documents(
        self,
        keys: Sequence[str],
        options: RequestOptions = DEFAULT_OPTIONS,
    ) -> Tuple[DocumentMetaSlice, ErrorSlice]:
        """Remove multiple documents.

        Raises:
            InvalidArgumentError: If any key is invalid
        """
        keys = _require_sequence(keys, "keys")
        validate_keys(keys)
        req = self._conn.new_request("DELETE", self._document_path())
        req.set_body(create_merge_array(keys, options.revisions))
        return await self._write_many(req, len(keys), options, options.ok_statuses(200, 202))

    async def _write_many(
        self,
        req: Request,
        count: int,
        options: RequestOptions,
        ok: Tuple[int, ...],
    ) -> Tuple[DocumentMetaSlice, ErrorSlice]:
        options.apply(req)
        resp = await self._send(req, options)
        resp.check_status(*ok)
        if options.silent:
            return DocumentMetaSlice(), ErrorSlice()
        metas, errors = parse_response_array(resp, count, options)
        if errors.failed:
            logger.debug(f"{errors.failed} of {count} items failed in {req!r}")
        return metas, errors

    def __repr__(self) -> str:
        return f"Collection({self._db.name}/{self._name})"
