"""
Unit tests for input validation.

Tests cover:
- Empty, long and malformed keys
- Batch key validation
- Database and collection names
"""

import pytest

from docdb_sdk.errors import InvalidArgumentError
from docdb_sdk.validate import MAX_KEY_LENGTH, validate_key, validate_keys, validate_name


class TestKeyValidation:
    """Tests for validate_key and validate_keys."""

    @pytest.mark.parametrize("key", ["1234", "user:42", "a_b-c.d@e", "x(1)+y,z=w;$!*'%"])
    def test_valid_keys(self, key):
        """Keys built from allowed characters pass."""
        validate_key(key)

    def test_empty_key(self):
        """Empty key fails."""
        with pytest.raises(InvalidArgumentError, match="key is empty"):
            validate_key("")

    def test_too_long(self):
        """Keys longer than the maximum fail."""
        validate_key("k" * MAX_KEY_LENGTH)
        with pytest.raises(InvalidArgumentError):
            validate_key("k" * (MAX_KEY_LENGTH + 1))

    @pytest.mark.parametrize("key", ["a/b", "with space", "ümlaut", "a#b"])
    def test_illegal_characters(self, key):
        """Keys with illegal characters fail."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_key(key)
        assert exc_info.value.argument == "key"

    def test_batch_fails_on_any_bad_key(self):
        """One bad key fails the whole batch."""
        validate_keys(["a", "b"])
        with pytest.raises(InvalidArgumentError):
            validate_keys(["a", "", "c"])


class TestNameValidation:
    """Tests for validate_name."""

    def test_empty_name(self):
        with pytest.raises(InvalidArgumentError, match="collection name is empty"):
            validate_name("", "collection")

    def test_valid_name(self):
        validate_name("users", "collection")
