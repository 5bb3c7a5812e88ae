"""
Error types for the DocDB SDK.

This module defines all exception types raised by the SDK:
- DocDbError: Base exception
- InvalidArgumentError: Malformed caller input, detected before any request
- CanceledError: The caller's own timeout budget ran out
- TransportError: Request never reached the server (eligible for failover)
- ResponseError: Request was sent but no usable response came back
- ArangoError: Structured error response from the server
- NotFoundError / ConflictError: Common server error kinds

Invariants:
    - All errors inherit from DocDbError
    - Errors include context for debugging (endpoint, attempt)
    - Classification is never altered by wrapping
"""

from __future__ import annotations

from typing import Any, Dict, Optional

# Server error numbers that map onto a more specific HTTP status
# when a batch item reports only an errorNum.
ERROR_NUM_STATUS: Dict[int, int] = {
    1200: 409,  # write-write conflict
    1202: 404,  # document not found
    1203: 404,  # collection or view not found
    1210: 409,  # unique constraint violated
    1221: 400,  # illegal document key
    1228: 404,  # database not found
}


class DocDbError(Exception):
    """Base exception for all DocDB SDK errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "DOCDB_ERROR"
        self.details = details or {}


class InvalidArgumentError(DocDbError):
    """Caller input is invalid.

    Raised when:
    - A key or name is empty or malformed
    - A document or update payload is None
    - Batched keys, updates or revisions differ in length
    """

    def __init__(self, message: str, argument: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="INVALID_ARGUMENT",
            details={"argument": argument},
        )
        self.argument = argument


class CanceledError(DocDbError):
    """The caller's timeout budget expired before a response arrived."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        attempt: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            code="CANCELED",
            details={"endpoint": endpoint, "attempt": attempt},
        )
        self.endpoint = endpoint
        self.attempt = attempt


class TransportError(DocDbError):
    """Failed to talk to an endpoint.

    When ``written`` is False the request is known not to have reached the
    server, so another endpoint may safely be tried.
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        written: bool = False,
    ) -> None:
        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            details={"endpoint": endpoint, "written": written},
        )
        self.endpoint = endpoint
        self.written = written


class ResponseError(DocDbError):
    """The request was sent, but the exchange failed afterwards.

    Never retried on another endpoint, since the server may already have
    applied the request.
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        attempt: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            code="RESPONSE_ERROR",
            details={"endpoint": endpoint, "attempt": attempt},
        )
        self.endpoint = endpoint
        self.attempt = attempt


class ArangoError(DocDbError):
    """Error response decoded from the server.

    Attributes:
        status: HTTP status code
        error_num: Server specific error number (0 if unknown)
        error_message: Message reported by the server
    """

    def __init__(
        self,
        status: int,
        error_num: int = 0,
        error_message: str = "",
    ) -> None:
        message = error_message or f"server returned status {status}"
        super().__init__(
            message,
            code="SERVER_ERROR",
            details={"status": status, "error_num": error_num},
        )
        self.status = status
        self.error_num = error_num
        self.error_message = error_message


class NotFoundError(ArangoError):
    """Addressed database, collection or document does not exist."""


class ConflictError(ArangoError):
    """Unique constraint violation or revision mismatch."""


class DecodeError(DocDbError):
    """A response body could not be decoded into the expected shape."""

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="DECODE_ERROR",
            details={"field": field_name},
        )
        self.field_name = field_name


def error_from_response(status: int, body: Any) -> ArangoError:
    """Build the most specific ArangoError for a status code and error body."""
    error_num = 0
    error_message = ""
    if isinstance(body, dict):
        error_num = int(body.get("errorNum") or 0)
        error_message = str(body.get("errorMessage") or "")
        if body.get("code"):
            status = int(body["code"])
    if status == 404:
        return NotFoundError(status, error_num, error_message)
    if status in (409, 412):
        return ConflictError(status, error_num, error_message)
    return ArangoError(status, error_num, error_message)


def is_invalid_argument(err: Optional[BaseException]) -> bool:
    return isinstance(err, InvalidArgumentError)


def is_not_found(err: Optional[BaseException]) -> bool:
    return isinstance(err, NotFoundError)


def is_conflict(err: Optional[BaseException]) -> bool:
    return isinstance(err, ConflictError)


def is_canceled(err: Optional[BaseException]) -> bool:
    return isinstance(err, CanceledError)
