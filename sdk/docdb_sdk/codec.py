"""
Batch codec for document operations.

Encodes singular or batched payloads into request bodies and decodes
singular or batched responses into DocumentMeta values and per-item errors.

Invariants:
    - Batch results are positional: item i of the result is item i of the input
    - len(metas) == len(errors) == number of input items
    - A failing item never aborts decoding of the other items
    - A merge entry never carries a key or revision the caller did not supply
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from .errors import DecodeError, DocDbError, InvalidArgumentError
from .meta import DocumentMeta, DocumentMetaSlice, ErrorSlice

if TYPE_CHECKING:
    from .connection import Response
    from .options import RequestOptions

# Per-item statuses that count as success inside a batch response.
BATCH_ITEM_OK = (200, 201, 202)

_SYSTEM_FIELDS = ("_key", "_id", "_rev")


def to_jsonable(value: Any) -> Any:
    """Convert models and dataclasses into plain JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Mapping):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def create_merge_array(
    keys: Optional[Sequence[str]],
    revisions: Optional[Sequence[str]],
) -> Optional[List[Dict[str, str]]]:
    """Build per-item metadata maps holding ``_key`` and/or ``_rev``.

    Raises:
        InvalidArgumentError: If both are given with different lengths
    """
    if keys is None and revisions is None:
        return None
    if revisions is None:
        return [{"_key": k} for k in keys or ()]
    if keys is None:
        return [{"_rev": r} for r in revisions]
    if len(keys) != len(revisions):
        raise InvalidArgumentError(
            f"number of keys must equal number of revisions, got {len(keys)} and {len(revisions)}",
            argument="revisions",
        )
    return [{"_key": k, "_rev": r} for k, r in zip(keys, revisions)]


def encode_body(document: Any) -> Any:
    """Encode a single document payload."""
    return to_jsonable(document)


def encode_body_array(
    items: Sequence[Any],
    merge_array: Optional[Sequence[Mapping[str, Any]]] = None,
) -> List[Any]:
    """Encode a batch of payloads, merging metadata into each item.

    Raises:
        InvalidArgumentError: If an item is not an object while metadata
            must be merged into it, or the lengths differ
    """
    encoded = [to_jsonable(item) for item in items]
    if merge_array is None:
        return encoded
    if len(merge_array) != len(encoded):
        raise InvalidArgumentError(
            f"expected {len(encoded)} merge entries, got {len(merge_array)}",
            argument="keys",
        )
    merged: List[Any] = []
    for i, (item, extra) in enumerate(zip(encoded, merge_array)):
        if not isinstance(item, dict):
            raise InvalidArgumentError(f"item {i} must be an object, got {type(item).__name__}", argument="items")
        merged.append({**item, **extra})
    return merged


def _validate_document(value: Any, options: RequestOptions, field: str = "") -> Any:
    if options.document_type is None or value is None:
        return value
    try:
        return options.document_type.model_validate(value)
    except ValidationError as e:
        label = f"'{field}' document" if field else "document"
        raise DecodeError(f"Invalid {label}: {e}", field or None) from e


def _decode_document(resp: Response, field: str, options: RequestOptions) -> Any:
    return _validate_document(resp.parse_body(field), options, field)


def parse_document(resp: Response, options: RequestOptions) -> Any:
    """Decode a whole document body, validated into options.document_type when set."""
    return _validate_document(resp.parse_body(), options)


def parse_document_meta(resp: Response, options: RequestOptions) -> DocumentMeta:
    """Decode the metadata of a single-item response.

    old/new documents are decoded only when requested.

    Raises:
        DecodeError: If the body or a requested field cannot be decoded
    """
    body = resp.parse_body()
    if not isinstance(body, dict):
        raise DecodeError("Expected an object response body")
    try:
        meta = DocumentMeta.model_validate({k: body[k] for k in _SYSTEM_FIELDS if k in body})
    except ValidationError as e:
        raise DecodeError(f"Invalid document metadata: {e}") from e
    if options.return_old:
        meta.old = _decode_document(resp, "old", options)
    if options.return_new:
        meta.new = _decode_document(resp, "new", options)
    return meta



def _array_items(resp: Response, count: int) -> List[Response]:
    items = resp.parse_array_body()
    if len(items) != count:
        raise DecodeError(f"expected {count} items in response, got {len(items)}")
    return items


def _decode_items(
    items: Sequence[Response],
    options: RequestOptions,
) -> Tuple[DocumentMetaSlice, ErrorSlice]:
    count = len(items)
    metas = DocumentMetaSlice(DocumentMeta() for _ in range(count))
    errors = ErrorSlice(None for _ in range(count))
    meta_options = dataclasses.replace(options, return_old=False, return_new=False)
    for i, item in enumerate(items):
        try:
            item.check_status(*BATCH_ITEM_OK)
            metas[i] = parse_document_meta(item, meta_options)
        except DocDbError as e:
            errors[i] = e
            continue
        try:
            if options.return_old:
                metas[i].old = _decode_document(item, "old", options)
            if options.return_new:
                metas[i].new = _decode_document(item, "new", options)
        except DocDbError as e:
            errors[i] = e
    return metas, errors


def parse_response_array(
    resp: Response,
    count: int,
    options: RequestOptions,
) -> Tuple[DocumentMetaSlice, ErrorSlice]:
    """Decode a batch response into parallel meta and error slices.

    For each position either the meta is populated and the error is None,
    or the meta is the zero value and the error is set. An old/new decode
    failure keeps the meta and records the error as well.

    Raises:
        DecodeError: If the body is not an array of ``count`` items
    """
    return _decode_items(_array_items(resp, count), options)


def parse_document_array(
    resp: Response,
    count: int,
    options: RequestOptions,
) -> Tuple[DocumentMetaSlice, List[Any], ErrorSlice]:
    """Decode a batched read into metadata, documents and per-item errors."""
    items = _array_items(resp, count)
    metas, errors = _decode_items(items, options)
    documents: List[Any] = [None] * count
    for i, item in enumerate(items):
        if errors[i] is not None:
            continue
        try:
            documents[i] = _validate_document(item.parse_body(), options)
        except DecodeError as e:
            metas[i] = DocumentMeta()
            errors[i] = e
    return metas, documents, errors
