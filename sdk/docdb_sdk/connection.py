"""
Connection contracts shared by endpoints and the cluster connection.

This module defines the request/response model the rest of the SDK is
written against:
- Connection: protocol implemented by a single endpoint and by the cluster
- Request: method, path, query, headers and a body marshaled by the transport
- Response: status code, body access and error decoding

Invariants:
    - A Response body is decoded from JSON at most once
    - Request.written is only ever set by the transport that sent it
    - check_status never succeeds for a code outside the given set
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .errors import ERROR_NUM_STATUS, DecodeError, error_from_response

logger = logging.getLogger(__name__)

_UNSET = object()


class Request:
    """An outgoing request.

    The body is kept as plain Python data; the transport marshals it.
    """

    def __init__(self, method: str, path: str) -> None:
        self.method = method.upper()
        self.path = path
        self.query: Dict[str, str] = {}
        self.headers: Dict[str, str] = {}
        self.body: Any = None
        self.written = False

    def set_query(self, key: str, value: str) -> Request:
        self.query[key] = value
        return self

    def set_header(self, key: str, value: str) -> Request:
        self.headers[key] = value
        return self

    def set_body(self, body: Any) -> Request:
        self.body = body
        return self

    def __repr__(self) -> str:
        return f"Request({self.method} {self.path})"


class Response:
    """A response from a single endpoint, or one item of a batch response."""

    def __init__(
        self,
        status_code: int,
        body: bytes = b"",
        *,
        endpoint: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.headers = headers or {}
        self._raw: Optional[bytes] = body
        self._parsed: Any = _UNSET

    @classmethod
    def from_object(cls, status_code: int, obj: Any, endpoint: Optional[str] = None) -> Response:
        """Wrap an already decoded object (used for batch items)."""
        resp = cls(status_code, endpoint=endpoint)
        resp._parsed = obj
        resp._raw = None
        return resp

    @property
    def body(self) -> bytes:
        """Raw response body."""
        if self._raw is None:
            self._raw = json.dumps(self._parsed).encode("utf-8")
        return self._raw

    def _decoded(self) -> Any:
        if self._parsed is _UNSET:
            if not self._raw:
                self._parsed = None
            else:
                try:
                    self._parsed = json.loads(self._raw)
                except ValueError as e:
                    raise DecodeError(f"Invalid JSON response body: {e}") from e
        return self._parsed

    def check_status(self, *valid_status_codes: int) -> None:
        """Raise the decoded server error unless the status is one of the given codes."""
        if self.status_code in valid_status_codes:
            return
        try:
            body = self._decoded()
        except DecodeError:
            body = None
        raise error_from_response(self.status_code, body)

    def parse_body(self, field: str = "") -> Any:
        """Return the decoded body, or one top-level field of it.

        Raises:
            DecodeError: If the body is not JSON, or the field is missing
        """
        data = self._decoded()
        if not field:
            return data
        if not isinstance(data, dict):
            raise DecodeError(f"Cannot read field '{field}' from non-object body", field)
        if field not in data:
            raise DecodeError(f"Field '{field}' missing from response body", field)
        return data[field]

    def parse_array_body(self) -> List[Response]:
        """Split an array body into one Response per item.

        Items flagged with ``"error": true`` get a status derived from their
        ``code`` or ``errorNum``; all others inherit this response's status.
        """
        data = self._decoded()
        if not isinstance(data, list):
            raise DecodeError("Expected an array response body")
        items: List[Response] = []
        for obj in data:
            status = self.status_code
            if isinstance(obj, dict) and obj.get("error"):
                status = int(obj.get("code") or ERROR_NUM_STATUS.get(int(obj.get("errorNum") or 0), 400))
            items.append(Response.from_object(status, obj, endpoint=self.endpoint))
        return items

    def __repr__(self) -> str:
        return f"Response({self.status_code} from {self.endpoint})"


@runtime_checkable
class Connection(Protocol):
    """A connection to one server, or to a pool of them."""

    def new_request(self, method: str, path: str) -> Request:
        """Create a new request with given method and path."""
        ...

    async def do(self, request: Request, timeout: Optional[float] = None) -> Response:
        """Perform the request and return its response.

        Transport failures are raised; server error statuses are returned
        as a normal Response.
        """
        ...

    async def close(self) -> None:
        """Release any pooled network resources."""
        ...
