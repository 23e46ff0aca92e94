"""
The storage backend contract.

Every backend stores Entries under their storage hash and answers five
questions: read, write, delete, exists, and "what time is it". The clock
belongs to the backend so that adapters for shared caches can judge
validity by a shared notion of time; tests use it to freeze time.

Architecture:
    ::

        CacheBackend (Protocol)
        ├── MemoryBackend  -- dict in this process
        └── RedisBackend   -- delegates to a running Redis service

        read(hash)                   -> Entry | None   (valid entries only)
        write(hash, value, options)  -> Entry          (wraps + refreshes)
        delete(hash)                 -> bool           (was present)
        exists(hash)                 -> bool           (present AND valid)
        now()                        -> float          (milliseconds)

Guardrails:
    ❌ DON'T: Return expired entries from read()
    ✅ DO: Apply ``Entry.valid`` in both read() and exists()

    ❌ DON'T: Silently no-op an operation a backend can't support
    ✅ DO: Leave it to BaseBackend, which raises BackendContractError

Tags:
    backend, protocol, contract, elephas

Doc-Types:
    - API Reference
    - Extension Guide
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from elephas.errors import BackendContractError
from elephas.timestamps import now_millis

if TYPE_CHECKING:
    from elephas.entry import Entry


@runtime_checkable
class CacheBackend(Protocol):
    """Protocol for storage backends.

    Implementations:
        - :class:`~elephas.backends.memory.MemoryBackend`
        - :class:`~elephas.backends.redis.RedisBackend`
    """

    def read(self, hash: str) -> Entry | None:
        """Return the entry stored under ``hash`` if present and valid, else ``None``."""
        ...

    def write(self, hash: str, value: Any, options: Any = None) -> Entry:
        """Store ``value`` (wrapped as an Entry) under ``hash`` and return the entry."""
        ...

    def delete(self, hash: str) -> bool:
        """Remove ``hash``; return whether it was present (valid or not)."""
        ...

    def exists(self, hash: str) -> bool:
        """Return ``True`` if ``hash`` is present and its entry is still valid."""
        ...

    def now(self) -> float:
        """Current time in milliseconds, used for entry validity."""
        ...


class BaseBackend:
    """Base class for backends.

    Subclasses override the four data operations. Any operation left
    unimplemented raises :class:`BackendContractError` when first called.

    Args:
        clock: Zero-argument callable returning milliseconds. Defaults to
            the wall clock.
    """

    def __init__(self, *, clock: Callable[[], float] | None = None):
        self._clock = clock or now_millis

    def read(self, hash: str) -> Entry | None:
        self._unimplemented("read")

    def write(self, hash: str, value: Any, options: Any = None) -> Entry:
        self._unimplemented("write")

    def delete(self, hash: str) -> bool:
        self._unimplemented("delete")

    def exists(self, hash: str) -> bool:
        self._unimplemented("exists")

    def now(self) -> float:
        return self._clock()

    def _unimplemented(self, operation: str):
        name = type(self).__name__
        raise BackendContractError(
            f"{name} does not implement {operation}()"
        ).with_context(backend=name, operation=operation)


__all__ = ["CacheBackend", "BaseBackend"]
