"""
Input validation for the DocDB SDK.

All checks run before any request is built, so invalid input never
reaches the network.

Invariants:
    - Validation errors are deterministic
    - Every failure raises InvalidArgumentError naming the argument
"""

from __future__ import annotations

import re
from typing import Iterable

from .errors import InvalidArgumentError

MAX_KEY_LENGTH = 254

_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9_\-:.@()+,=;$!*'%]+$")


def validate_key(key: str) -> None:
    """Check that a document key is non-empty and syntactically valid.

    Raises:
        InvalidArgumentError: If the key is empty, too long or has illegal characters
    """
    if not key:
        raise InvalidArgumentError("key is empty", argument="key")
    if len(key) > MAX_KEY_LENGTH:
        raise InvalidArgumentError(f"key is longer than {MAX_KEY_LENGTH} characters", argument="key")
    if not _KEY_PATTERN.match(key):
        raise InvalidArgumentError(f"key '{key}' contains illegal characters", argument="key")


def validate_keys(keys: Iterable[str]) -> None:
    """Validate every key of a batch; the first bad key fails the whole batch."""
    for key in keys:
        validate_key(key)


def validate_name(name: str, kind: str) -> None:
    """Check that a database or collection name is not empty."""
    if not name:
        raise InvalidArgumentError(f"{kind} name is empty", argument="name")
