"""
Structured error types for elephas.

Two kinds of failure exist in a read-through cache. A backend that does
not honour the storage contract is a programming error and must surface
immediately. Everything else (odd option shapes, blank TTLs, non-boolean
flags) is coerced to defaults and never raised. Errors that a storage
service itself produces are wrapped in ``StorageError`` subclasses so
callers can tell them apart from failures in their own compute callables,
which propagate untouched.

Manifesto:
    - **Typed hierarchy:** One base class, a handful of domain subclasses
    - **Explicit retry semantics:** Each error knows if it's retryable
    - **Rich context:** Errors carry backend/hash metadata for logging
    - **Error chaining:** Preserve the original exception as ``cause``

Architecture:
    ::

        ElephasError (category, retryable, context, cause)
        ├── BackendContractError   (INTERNAL, also NotImplementedError)
        ├── StorageError           (STORAGE)
        │   └── SerializationError
        └── ConfigError            (CONFIG)
            └── InvalidConfigError

Examples:
    >>> err = BackendContractError("read() not implemented")
    >>> err.retryable
    False
    >>> err.with_context(backend="MemoryBackend", operation="read").to_dict()["context"]
    {'backend': 'MemoryBackend', 'operation': 'read'}

Guardrails:
    ❌ DON'T: Catch BackendContractError and fall back to "cache miss"
    ✅ DO: Let it crash; the backend class is broken

    ❌ DON'T: Wrap exceptions raised by a caller's compute function
    ✅ DO: Let them reach the caller of ``Cache.use`` unchanged

Tags:
    error-handling, exception-hierarchy, elephas, backend-contract

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    BACKEND = "BACKEND"        # Backend misconfiguration or misuse
    STORAGE = "STORAGE"        # External cache service, (de)serialization
    CONFIG = "CONFIG"          # Invalid settings

    INTERNAL = "INTERNAL"      # Bugs, contract violations
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        backend: Backend class name
        operation: Contract operation being executed (read, write, ...)
        hash: Storage hash involved, if any
        key: Caller key involved, if any
        metadata: Additional key-value pairs
    """

    backend: str | None = None
    operation: str | None = None
    hash: str | None = None
    key: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for name in ["backend", "operation", "hash", "key"]:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ElephasError(Exception):
    """
    Base exception for all elephas errors.

    Subclasses set ``default_category`` and ``default_retryable`` to
    provide sensible defaults for their domain.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ElephasError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StorageError("Failed").with_context(backend="RedisBackend", hash=h)
        """
        for name, value in kwargs.items():
            if hasattr(self.context, name) and name != "metadata":
                setattr(self.context, name, value)
            else:
                self.context.metadata[name] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class BackendContractError(ElephasError, NotImplementedError):
    """A backend does not implement a required contract operation.

    Raised the first time the missing operation is invoked. This is a
    programming error; callers are not expected to handle it.
    """

    default_category = ErrorCategory.INTERNAL
    default_retryable = False


class StorageError(ElephasError):
    """The storage medium failed to store or return an entry."""

    default_category = ErrorCategory.STORAGE
    default_retryable = False


class SerializationError(StorageError):
    """An entry could not be encoded for, or decoded from, the storage service."""


class ConfigError(ElephasError):
    """Configuration error - never retryable."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class InvalidConfigError(ConfigError):
    """A configuration value is present but unusable."""


def is_retryable(error: Exception) -> bool:
    """
    Check if an error is retryable.

    Works with both ElephasError and standard exceptions; anything that is
    not an ElephasError is treated as non-retryable.
    """
    if isinstance(error, ElephasError):
        return error.retryable
    return False


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ElephasError",
    "BackendContractError",
    "StorageError",
    "SerializationError",
    "ConfigError",
    "InvalidConfigError",
    "is_retryable",
]
