"""
Document metadata returned by document operations.

Attributes map onto the server's system fields (``_key``, ``_id``,
``_rev``). A zero-valued DocumentMeta (empty key) is returned for silent
writes and for failed positions of a batch.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentMeta(BaseModel):
    """Metadata of a single stored document.

    Attributes:
        key: Document key, unique within its collection
        id: Document handle (``<collection>/<key>``)
        rev: Revision tag of the stored version
        old: Previous document, when return_old was requested
        new: Stored document, when return_new was requested
        raw: Raw response body, when raw_response was requested
    """

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(default="", alias="_key")
    id: str = Field(default="", alias="_id")
    rev: str = Field(default="", alias="_rev")
    old: Any = Field(default=None, exclude=True)
    new: Any = Field(default=None, exclude=True)
    raw: Optional[bytes] = Field(default=None, exclude=True, repr=False)

    @property
    def is_empty(self) -> bool:
        return not self.key


class DocumentMetaSlice(List[DocumentMeta]):
    """Metadata of a batch, one entry per input item."""

    def keys(self) -> List[str]:
        return [m.key for m in self]

    def revs(self) -> List[str]:
        return [m.rev for m in self]

    def ids(self) -> List[str]:
        return [m.id for m in self]


class ErrorSlice(List[Optional[Exception]]):
    """Per-item errors of a batch, None where the item succeeded."""

    def first_non_nil(self) -> Optional[Exception]:
        for err in self:
            if err is not None:
                return err
        return None

    @property
    def failed(self) -> int:
        return sum(1 for err in self if err is not None)
