"""Tests for elephas.errors module."""

import pytest

from elephas.errors import (
    BackendContractError,
    ConfigError,
    ElephasError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    SerializationError,
    StorageError,
    is_retryable,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.backend is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_includes_set_fields(self):
        ctx = ErrorContext(backend="MemoryBackend", hash="abc", metadata={"attempt": 2})
        d = ctx.to_dict()

        assert d == {"backend": "MemoryBackend", "hash": "abc", "attempt": 2}
        assert "operation" not in d


class TestElephasError:
    """Test the base error."""

    def test_defaults(self):
        error = ElephasError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False
        assert error.cause is None

    def test_with_context_is_fluent(self):
        error = ElephasError("Failed").with_context(operation="read", shard=3)

        assert error.context.operation == "read"
        assert error.context.metadata["shard"] == 3

    def test_cause_is_chained(self):
        original = ConnectionError("refused")
        error = StorageError("write failed", cause=original)

        assert error.__cause__ is original
        assert error.to_dict()["cause"] == "refused"

    def test_to_dict(self):
        error = StorageError("boom").with_context(backend="RedisBackend")
        d = error.to_dict()

        assert d["error_type"] == "StorageError"
        assert d["category"] == "STORAGE"
        assert d["retryable"] is False
        assert d["context"] == {"backend": "RedisBackend"}

    def test_repr(self):
        assert repr(ConfigError("bad")) == "ConfigError('bad', category=CONFIG)"


class TestHierarchy:
    def test_contract_error(self):
        error = BackendContractError("read() missing")

        assert isinstance(error, ElephasError)
        assert isinstance(error, NotImplementedError)
        assert error.category == ErrorCategory.INTERNAL

    def test_storage_errors(self):
        assert issubclass(SerializationError, StorageError)
        assert SerializationError("x").category == ErrorCategory.STORAGE

    def test_config_errors(self):
        assert issubclass(InvalidConfigError, ConfigError)
        assert InvalidConfigError("x").category == ErrorCategory.CONFIG

    @pytest.mark.parametrize("error, expected", [
        (StorageError("x"), False),
        (StorageError("x", retryable=True), True),
        (ValueError("x"), False),
    ])
    def test_is_retryable(self, error, expected):
        assert is_retryable(error) is expected
