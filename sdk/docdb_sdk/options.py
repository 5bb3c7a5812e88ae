"""
Per-call request options for document operations.

RequestOptions is passed alongside a call (never inside the payload) and
shapes the outgoing request: query flags, the If-Match header, and which
parts of the response body get decoded.

Example:
    >>> opts = RequestOptions().with_return_old().with_wait_for_sync()
    >>> meta = await col.update_document("1234", {"name": "Updated"}, options=opts)
    >>> meta.old
    {'name': 'Tim', 'age': 27}

Invariants:
    - Options are immutable once constructed
    - keep_null and merge_objects are tri-state: None means "not sent"
    - Options never modify the payload itself
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple, Type

from pydantic import BaseModel

from .connection import Request


@dataclass(frozen=True)
class RequestOptions:
    """Options bag for a single document call.

    Attributes:
        return_old: Decode the previous document into DocumentMeta.old
        return_new: Decode the stored document into DocumentMeta.new
        silent: Ask the server to omit the response body
        keep_null: False removes null-valued fields on update
        merge_objects: Whether nested objects are merged on update
        wait_for_sync: Wait until the change is synced to disk
        revision: Expected revision for a singular call
        revisions: Expected revisions for a batched call, parallel to keys
        document_type: Model used to validate old/new documents
        raw_response: Attach the raw body bytes to the returned meta
        timeout: Overall time budget in seconds
    """

    return_old: bool = False
    return_new: bool = False
    silent: bool = False
    keep_null: Optional[bool] = None
    merge_objects: Optional[bool] = None
    wait_for_sync: bool = False
    revision: Optional[str] = None
    revisions: Optional[Tuple[str, ...]] = None
    document_type: Optional[Type[BaseModel]] = None
    raw_response: bool = False
    timeout: Optional[float] = None

    def with_return_old(self) -> RequestOptions:
        return replace(self, return_old=True)

    def with_return_new(self) -> RequestOptions:
        return replace(self, return_new=True)

    def with_silent(self) -> RequestOptions:
        return replace(self, silent=True)

    def with_keep_null(self, value: bool) -> RequestOptions:
        return replace(self, keep_null=value)

    def with_merge_objects(self, value: bool) -> RequestOptions:
        return replace(self, merge_objects=value)

    def with_wait_for_sync(self) -> RequestOptions:
        return replace(self, wait_for_sync=True)

    def with_revision(self, revision: str) -> RequestOptions:
        return replace(self, revision=revision)

    def with_revisions(self, revisions: Sequence[str]) -> RequestOptions:
        return replace(self, revisions=tuple(revisions))

    def with_document_type(self, document_type: Type[BaseModel]) -> RequestOptions:
        return replace(self, document_type=document_type)

    def with_raw_response(self) -> RequestOptions:
        return replace(self, raw_response=True)

    def with_timeout(self, timeout: float) -> RequestOptions:
        return replace(self, timeout=timeout)

    def ok_statuses(self, synced: int, accepted: int) -> Tuple[int, ...]:
        """Status codes accepted for a write.

        The server answers ``synced`` when the write hit disk and ``accepted``
        otherwise. A collection level waitForSync can turn either request into
        a synced write, so both are always accepted; the expected one first.
        """
        if self.wait_for_sync:
            return (synced, accepted)
        return (accepted, synced)

    def apply(self, request: Request) -> Request:
        """Copy the request-shaping options onto an outgoing request."""
        if self.return_old:
            request.set_query("returnOld", "true")
        if self.return_new:
            request.set_query("returnNew", "true")
        if self.silent:
            request.set_query("silent", "true")
        if self.keep_null is not None:
            request.set_query("keepNull", "true" if self.keep_null else "false")
        if self.merge_objects is not None:
            request.set_query("mergeObjects", "true" if self.merge_objects else "false")
        if self.wait_for_sync:
            request.set_query("waitForSync", "true")
        if self.revision:
            request.set_header("If-Match", self.revision)
        if self.revisions is not None:
            request.set_query("ignoreRevs", "false")
        return request


DEFAULT_OPTIONS = RequestOptions()
