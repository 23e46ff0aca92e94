"""In-process backend: a dict from storage hash to Entry."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from elephas.backends.base import BaseBackend
from elephas.entry import Entry
from elephas.logging import get_logger

logger = get_logger(__name__)


class MemoryBackend(BaseBackend):
    """Dict-backed backend with lazy expiry.

    Expired entries read as absent but stay in the dict until they are
    overwritten, deleted, or cleared. There is no size bound and no
    locking; share an instance between threads at your own risk.

    Example:
        backend = MemoryBackend()
        backend.write("abc123", "value", {"ttl": 60_000})
        backend.read("abc123").value   # "value"
    """

    def __init__(
        self,
        data: dict[str, Entry] | None = None,
        *,
        clock: Callable[[], float] | None = None,
    ):
        super().__init__(clock=clock)
        self.data: dict[str, Entry] = dict(data) if data else {}

    def read(self, hash: str) -> Entry | None:
        """Return the entry if it exists and is still valid."""
        return self.data[hash] if self.exists(hash) else None

    def write(self, hash: str, value: Any, options: Any = None) -> Entry:
        """Wrap, refresh and store ``value`` under ``hash``."""
        entry = Entry.ensure(value, hash, options)
        entry.refresh(backend=self)
        self.data[hash] = entry
        logger.debug("backend_write", backend="memory", hash=hash, ttl=entry.ttl)
        return entry

    def delete(self, hash: str) -> bool:
        """Remove ``hash``; presence, not validity, decides the result."""
        existed = hash in self.data
        self.data.pop(hash, None)
        return existed

    def exists(self, hash: str) -> bool:
        entry = self.data.get(hash)
        return entry is not None and entry.valid(self)

    def clear(self) -> None:
        """Remove all entries."""
        self.data.clear()

    def size(self) -> int:
        """Number of stored entries, expired ones included."""
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)
