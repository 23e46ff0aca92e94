"""
Cache entries: the unit of cached state.

An Entry couples a caller key with its storage hash, the cached value, a
time-to-live and the timestamp of its last refresh. Validity is judged
against a backend clock so that adapters for shared caches can supply an
external notion of "now".

Manifesto:
    - **Milliseconds everywhere:** ``ttl`` and ``updated_at`` share one unit
    - **Strictly advancing refresh:** two refreshes in the same clock tick
      still produce increasing timestamps
    - **None is a value:** an Entry wrapping ``None`` is not a cache miss
    - **Idempotent wrapping:** ``Entry.ensure`` never re-wraps an Entry

Architecture:
    ::

        Entry(key, value, hash=hashify(key), ttl, updated_at)

        valid(backend)    backend.now() - updated_at < ttl
        refresh(...)      updated_at = max(clock, updated_at + epsilon)
        ==                (key, hash, value)  -- ttl/updated_at excluded

Examples:
    >>> entry = Entry("KEY", "VALUE")
    >>> entry.hash
    '5ca24005b740717ba4f3f6bc48a230700e68c2a4b11ecedb96f169f4efaf1f21'
    >>> Entry.ensure(entry, "ANOTHER KEY") is entry
    True
    >>> entry == Entry("KEY", "VALUE", ttl=1)
    True

Guardrails:
    ❌ DON'T: Treat ``ttl == 0`` as "cache forever"
    ✅ DO: Read it as "never persist"; such entries are never valid

Tags:
    entry, ttl, validity, elephas

Doc-Types:
    - API Reference
    - Technical Design
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from elephas.hashing import hashify
from elephas.options import coerce_ttl, is_blank, option_value
from elephas.timestamps import DEFAULT_TTL, now_millis

if TYPE_CHECKING:
    from elephas.backends.base import CacheBackend

# Added to updated_at when a refresh lands on (or behind) the previous tick.
REFRESH_EPSILON = 1e-3


@dataclass(eq=False)
class Entry:
    """A cached value with its key, storage hash, TTL and refresh time.

    Attributes:
        key: Caller-supplied key (any string-convertible value)
        value: Cached payload; ``None`` is a legal value
        hash: Storage index, derived from ``key`` when blank
        ttl: Time-to-live in milliseconds
        updated_at: Last refresh, UNIX timestamp in milliseconds
    """

    key: Any
    value: Any
    hash: str | None = None
    ttl: int = DEFAULT_TTL
    updated_at: float | None = None

    def __post_init__(self) -> None:
        if is_blank(self.hash):
            self.hash = hashify(self.key)
        if self.updated_at is None:
            self.updated_at = now_millis()

    def refresh(self, persist: bool = False, backend: CacheBackend | None = None) -> float:
        """
        Mark the entry as freshly updated.

        The new ``updated_at`` is strictly greater than the previous one,
        even when the clock has not moved since the last refresh.

        Args:
            persist: Also write the entry to ``backend`` under its own hash
            backend: Supplies the clock, and the storage when persisting

        Returns:
            The new ``updated_at``

        Raises:
            ValueError: If ``persist`` is requested without a backend
        """
        if persist and backend is None:
            raise ValueError("Entry.refresh(persist=True) requires a backend")

        now = backend.now() if backend is not None else now_millis()
        previous = self.updated_at
        if previous is not None and now <= previous:
            now = previous + REFRESH_EPSILON
        self.updated_at = now

        if persist:
            backend.write(self.hash, self)
        return self.updated_at

    def valid(self, backend: CacheBackend | None = None) -> bool:
        """True while ``now - updated_at < ttl`` on the backend's clock."""
        now = backend.now() if backend is not None else now_millis()
        return now - self.updated_at < self.ttl

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entry):
            return False
        return (self.key, self.hash, self.value) == (other.key, other.hash, other.value)

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, for backends that serialise entries."""
        return {
            "key": self.key,
            "hash": self.hash,
            "value": self.value,
            "ttl": self.ttl,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry:
        return cls(
            key=data["key"],
            value=data.get("value"),
            hash=data.get("hash"),
            ttl=coerce_ttl(data.get("ttl")),
            updated_at=data.get("updated_at"),
        )

    @staticmethod
    def hashify(key: Any) -> str:
        """Storage hash for a (namespaced) key. See :func:`elephas.hashing.hashify`."""
        return hashify(key)

    @classmethod
    def ensure(cls, value: Any, key: Any, options: Any = None) -> Entry:
        """
        Wrap ``value`` in an Entry unless it already is one.

        Args:
            value: Raw value or Entry. Entries are returned unchanged.
            key: Key for the new entry; hashed when ``options`` has no hash
            options: CacheOptions, a mapping, or anything else (ignored)

        Returns:
            The Entry
        """
        if isinstance(value, Entry):
            return value

        entry_hash = option_value(options, "hash")
        if is_blank(entry_hash):
            entry_hash = hashify(key)

        return cls(key, value, entry_hash, coerce_ttl(option_value(options, "ttl")))


__all__ = ["Entry", "REFRESH_EPSILON"]
