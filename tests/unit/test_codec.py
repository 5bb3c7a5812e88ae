"""
Unit tests for the batch codec.

Tests cover:
- Merge array construction
- Body encoding for models, dataclasses and batches
- Singular metadata decoding with old/new documents
- Positional batch decoding with per-item failures
"""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from docdb_sdk.codec import (
    create_merge_array,
    encode_body,
    encode_body_array,
    parse_document_array,
    parse_document_meta,
    parse_response_array,
)
from docdb_sdk.errors import ConflictError, DecodeError, InvalidArgumentError, NotFoundError
from docdb_sdk.meta import DocumentMeta
from docdb_sdk.options import RequestOptions
from tests.fakes import json_response


class UserDoc(BaseModel):
    name: str
    age: int


@dataclass
class Account:
    id: str
    user: dict


def meta_item(key: str, rev: str = "_r1", **extra) -> dict:
    return {"_key": key, "_id": f"users/{key}", "_rev": rev, **extra}


class TestMergeArray:
    """Tests for create_merge_array."""

    def test_none(self):
        assert create_merge_array(None, None) is None

    def test_keys_only(self):
        assert create_merge_array(["a", "b"], None) == [{"_key": "a"}, {"_key": "b"}]

    def test_revisions_only(self):
        assert create_merge_array(None, ["_1"]) == [{"_rev": "_1"}]

    def test_keys_and_revisions(self):
        assert create_merge_array(["a", "b"], ["_1", "_2"]) == [
            {"_key": "a", "_rev": "_1"},
            {"_key": "b", "_rev": "_2"},
        ]

    def test_length_mismatch(self):
        with pytest.raises(InvalidArgumentError):
            create_merge_array(["a", "b"], ["_1"])


class TestEncoding:
    """Tests for body encoding."""

    def test_model_and_dataclass(self):
        """Models and dataclasses become plain dicts."""
        assert encode_body(UserDoc(name="Tim", age=27)) == {"name": "Tim", "age": 27}
        assert encode_body(Account(id="1", user={"name": "M"})) == {"id": "1", "user": {"name": "M"}}

    def test_nulls_are_kept(self):
        """Null values are sent as-is; the server decides what keepNull does."""
        assert encode_body({"user": None}) == {"user": None}

    def test_array_with_merge(self):
        """Merge entries are added to each item by position."""
        body = encode_body_array(
            [{"name": "a"}, UserDoc(name="b", age=1)],
            [{"_key": "1"}, {"_key": "2", "_rev": "_x"}],
        )
        assert body == [
            {"name": "a", "_key": "1"},
            {"name": "b", "age": 1, "_key": "2", "_rev": "_x"},
        ]

    def test_array_merge_requires_objects(self):
        with pytest.raises(InvalidArgumentError):
            encode_body_array(["not an object"], [{"_key": "1"}])


class TestSingleDecoding:
    """Tests for parse_document_meta."""

    def test_meta(self):
        resp = json_response(201, meta_item("1234"))
        meta = parse_document_meta(resp, RequestOptions())
        assert meta == DocumentMeta(key="1234", id="users/1234", rev="_r1")
        assert meta.old is None and meta.new is None

    def test_user_fields_named_like_extras_are_ignored(self):
        """Document fields called old/new never leak into the metadata."""
        resp = json_response(200, meta_item("1", old="x", new="y"))
        meta = parse_document_meta(resp, RequestOptions())
        assert meta.old is None and meta.new is None

    def test_old_and_new(self):
        resp = json_response(
            202,
            meta_item("1", old={"name": "Tim", "age": 27}, new={"name": "Updated", "age": 27}),
        )
        opts = RequestOptions().with_return_old().with_return_new()
        meta = parse_document_meta(resp, opts)
        assert meta.old == {"name": "Tim", "age": 27}
        assert meta.new == {"name": "Updated", "age": 27}

    def test_typed_new(self):
        resp = json_response(202, meta_item("1", new={"name": "Updated", "age": 27}))
        opts = RequestOptions().with_return_new().with_document_type(UserDoc)
        assert parse_document_meta(resp, opts).new == UserDoc(name="Updated", age=27)

    def test_missing_requested_field(self):
        resp = json_response(202, meta_item("1"))
        with pytest.raises(DecodeError) as exc_info:
            parse_document_meta(resp, RequestOptions().with_return_old())
        assert exc_info.value.field_name == "old"

    def test_non_object_body(self):
        with pytest.raises(DecodeError):
            parse_document_meta(json_response(202, [1, 2]), RequestOptions())


class TestBatchDecoding:
    """Tests for parse_response_array."""

    def test_all_success(self):
        resp = json_response(202, [meta_item("a"), meta_item("b")])
        metas, errors = parse_response_array(resp, 2, RequestOptions())
        assert metas.keys() == ["a", "b"]
        assert metas.revs() == ["_r1", "_r1"]
        assert metas.ids() == ["users/a", "users/b"]
        assert errors == [None, None]

    def test_partial_failure(self):
        """A failing item leaves a zero meta and an error at its position only."""
        resp = json_response(
            202,
            [
                meta_item("a"),
                {"error": True, "errorNum": 1210, "errorMessage": "unique constraint violated"},
                meta_item("c"),
            ],
        )
        metas, errors = parse_response_array(resp, 3, RequestOptions())

        assert len(metas) == len(errors) == 3
        assert isinstance(errors[1], ConflictError)
        assert metas[1] == DocumentMeta()
        assert metas[1].is_empty
        assert metas[0].key == "a" and errors[0] is None
        assert metas[2].key == "c" and errors[2] is None
        assert errors.failed == 1
        assert errors.first_non_nil() is errors[1]

    def test_not_found_item(self):
        resp = json_response(202, [{"error": True, "errorNum": 1202, "errorMessage": "document not found"}])
        _, errors = parse_response_array(resp, 1, RequestOptions())
        assert isinstance(errors[0], NotFoundError)

    def test_old_decode_failure_keeps_meta(self):
        """An old/new decode failure is recorded while the meta is kept."""
        resp = json_response(
            202,
            [
                meta_item("a", old={"name": "Tim", "age": 27}),
                meta_item("b", old={"name": "Ann", "age": "not a number"}),
            ],
        )
        opts = RequestOptions().with_return_old().with_document_type(UserDoc)
        metas, errors = parse_response_array(resp, 2, opts)

        assert metas[0].old == UserDoc(name="Tim", age=27)
        assert errors[0] is None
        assert metas[1].key == "b"
        assert isinstance(errors[1], DecodeError)

    def test_count_mismatch(self):
        with pytest.raises(DecodeError):
            parse_response_array(json_response(202, [meta_item("a")]), 2, RequestOptions())

    def test_non_array(self):
        with pytest.raises(DecodeError):
            parse_response_array(json_response(202, meta_item("a")), 1, RequestOptions())

    def test_document_array(self):
        resp = json_response(
            200,
            [
                meta_item("a", name="Tim", age=27),
                {"error": True, "errorNum": 1202, "errorMessage": "document not found"},
            ],
        )
        opts = RequestOptions().with_document_type(UserDoc)
        metas, docs, errors = parse_document_array(resp, 2, opts)

        assert docs == [UserDoc(name="Tim", age=27), None]
        assert metas[0].key == "a"
        assert isinstance(errors[1], NotFoundError)
