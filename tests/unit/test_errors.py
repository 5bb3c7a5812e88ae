"""
Unit tests for SDK error types.

Tests cover:
- Mapping of error responses to error kinds
- Classification predicates
- Error context details
"""

from docdb_sdk.errors import (
    ArangoError,
    CanceledError,
    ConflictError,
    DocDbError,
    InvalidArgumentError,
    NotFoundError,
    ResponseError,
    TransportError,
    error_from_response,
    is_canceled,
    is_conflict,
    is_invalid_argument,
    is_not_found,
)


class TestErrorFromResponse:
    """Tests for error_from_response."""

    def test_not_found(self):
        """404 maps to NotFoundError."""
        err = error_from_response(
            404,
            {"error": True, "code": 404, "errorNum": 1202, "errorMessage": "document not found"},
        )
        assert isinstance(err, NotFoundError)
        assert err.status == 404
        assert err.error_num == 1202
        assert err.message == "document not found"

    def test_conflict(self):
        """409 maps to ConflictError."""
        err = error_from_response(409, {"errorNum": 1210, "errorMessage": "unique constraint violated"})
        assert isinstance(err, ConflictError)
        assert err.error_num == 1210

    def test_precondition_failed_is_conflict(self):
        """Revision mismatch (412) is a conflict."""
        err = error_from_response(412, {"errorNum": 1200, "errorMessage": "conflict"})
        assert is_conflict(err)
        assert err.status == 412

    def test_code_in_body_wins(self):
        """A code inside the body overrides the status passed in."""
        err = error_from_response(202, {"error": True, "code": 404, "errorNum": 1202})
        assert isinstance(err, NotFoundError)

    def test_other_status(self):
        """Other statuses map to the generic ArangoError."""
        err = error_from_response(500, None)
        assert type(err) is ArangoError
        assert err.status == 500
        assert "500" in err.message


class TestErrorHierarchy:
    """Tests for the error hierarchy and predicates."""

    def test_all_errors_inherit_base(self):
        """Every error kind is a DocDbError."""
        for err in (
            InvalidArgumentError("bad"),
            CanceledError("late"),
            TransportError("down"),
            ResponseError("broken"),
            NotFoundError(404),
        ):
            assert isinstance(err, DocDbError)

    def test_predicates(self):
        """Predicates only match their own kind."""
        assert is_invalid_argument(InvalidArgumentError("bad"))
        assert not is_invalid_argument(NotFoundError(404))
        assert is_not_found(NotFoundError(404))
        assert not is_not_found(None)
        assert is_canceled(CanceledError("late"))
        assert not is_canceled(TransportError("down"))

    def test_context_details(self):
        """Errors carry endpoint and attempt context."""
        err = ResponseError("broken", endpoint="http://db2:8529", attempt=2)
        assert err.code == "RESPONSE_ERROR"
        assert err.details == {"endpoint": "http://db2:8529", "attempt": 2}

    def test_transport_written_flag(self):
        """TransportError records whether the request was sent."""
        assert TransportError("down").written is False
        assert TransportError("reset", written=True).details["written"] is True
