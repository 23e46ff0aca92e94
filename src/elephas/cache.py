"""
The Cache facade: read-through caching over a pluggable backend.

Callers ask for a value by key and supply a computation. The facade
returns a still-valid cached value, or runs the computation, stores the
result and returns it. Everything a lookup needs (TTL, namespace, storage
hash, bypass switches) is resolved up front by option canonicalization,
so reads and writes always agree on the storage slot.

Manifesto:
    - **Read-through:** ``use(key, compute)`` is the whole API for most callers
    - **Explicit wiring:** each Cache holds its own backend and prefix
    - **Pluggable storage:** any CacheBackend (memory, Redis, your own)
    - **No surprises on failure:** compute errors propagate, nothing is stored

Architecture:
    ::

        Cache.use(key, compute, options)
          │
          ├─ canonicalize(options, key)        -> CacheOptions
          │
          ├─ force or ttl <= 0 ?  ── yes ──┐
          │        no                      │
          ├─ backend.read(hash) ── hit ────┼──────────────┐
          │        miss                    │              │
          ├─ compute(options) <────────────┘              │
          ├─ Entry.ensure(result, complete_key, options)  │
          ├─ ttl > 0 ? backend.write(hash, entry)         │
          │                                               │
          └─ as_entry ? entry : copy(entry.value) <───────┘

Examples:
    >>> cache = Cache(MemoryBackend(), prefix="quotes")
    >>> cache.use("AAPL", lambda opts: fetch_quote("AAPL"))
    {'symbol': 'AAPL', 'price': 189.5}
    >>> cache.use("AAPL", lambda opts: 1 / 0)          # hit, not called
    {'symbol': 'AAPL', 'price': 189.5}
    >>> cache.use("AAPL", fetch, force=True)            # recompute + store
    >>> cache.use("AAPL", fetch, ttl=0)                 # recompute, never store
    >>> cache.use("AAPL", as_entry=True).updated_at
    1767225600000.0

Concurrency:
    Every call blocks until the backend and the computation return. There
    is no locking and no de-duplication of concurrent misses: two callers
    missing the same key both compute and both write, last write wins.

Guardrails:
    ❌ DON'T: Share a prefix between unrelated consumers of one backend
    ✅ DO: Give each consumer its own prefix (``Cache(backend, prefix=...)``)

    ❌ DON'T: Use ttl=0 expecting "cache forever"
    ✅ DO: Use ttl=0 for "always compute, never store"

Tags:
    cache, read-through, ttl, facade, elephas

Doc-Types:
    - API Reference
    - Technical Design
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

from elephas.backends.base import CacheBackend
from elephas.backends.memory import MemoryBackend
from elephas.config import DEFAULT_PREFIX, ElephasSettings, create_backend, get_settings
from elephas.entry import Entry
from elephas.logging import get_logger
from elephas.options import CacheOptions, canonicalize, is_blank
from elephas.timestamps import DEFAULT_TTL

logger = get_logger(__name__)

Compute = Callable[[CacheOptions], Any]


class Cache:
    """Read-through cache over a single backend.

    Attributes:
        backend: Storage backend
        prefix: Namespace wrapped around every caller key
        default_ttl: TTL (ms) used when a call does not give one

    Example:
        cache = Cache(RedisBackend(url="redis://cache:6379/0"), prefix="profiles")
        profile = cache.use(user_id, lambda opts: load_profile(user_id), ttl=seconds(300))
    """

    def __init__(
        self,
        backend: CacheBackend | None = None,
        *,
        prefix: str | None = None,
        default_ttl: int = DEFAULT_TTL,
    ):
        self.backend: CacheBackend = backend if backend is not None else MemoryBackend()
        self.prefix = DEFAULT_PREFIX if is_blank(prefix) else prefix
        self.default_ttl = max(0, int(default_ttl))

    @classmethod
    def from_settings(cls, settings: ElephasSettings | None = None) -> Cache:
        """Build a cache whose backend, prefix and default TTL come from settings."""
        settings = settings or get_settings()
        return cls(
            create_backend(settings),
            prefix=settings.prefix,
            default_ttl=settings.default_ttl_ms,
        )

    def canonicalize(self, options: Any, key: Any) -> CacheOptions:
        """Canonical options for ``key`` under this cache's defaults."""
        return canonicalize(options, key, prefix=self.prefix, default_ttl=self.default_ttl)

    def key_hash(self, key: Any) -> str:
        """Storage hash of a raw caller key under this cache's prefix."""
        return self.canonicalize(None, key).hash

    def use(
        self,
        key: Any,
        compute: Compute | None = None,
        options: Any = None,
        **overrides: Any,
    ) -> Any:
        """
        Return the cached value for ``key``, computing and storing it on a miss.

        Args:
            key: Caller key
            compute: Called with the canonical options on a miss. May return
                an Entry, which is stored as-is under this call's hash; its
                own ``hash`` is left alone, so ``entry.refresh(persist=True)``
                later writes to that hash, not to this slot. Returning
                ``None`` means "no value": nothing is stored and ``use``
                returns ``None``.
            options: Mapping of options (ttl, force, prefix, key,
                complete_key, hash, as_entry, plus anything else)
            **overrides: Options given as keyword arguments; win over ``options``

        Returns:
            The Entry when ``as_entry`` is set, otherwise a shallow copy of its
            value. ``None`` on a miss without ``compute``.
        """
        opts = self._resolve(options, overrides, key)
        log = logger.bind(prefix=opts.prefix, backend=type(self.backend).__name__)
        entry: Entry | None = None

        if not opts.force and opts.ttl > 0:
            entry = self.backend.read(opts.hash)
            if entry is not None:
                log.debug("cache_hit", hash=opts.hash, key=opts.key)
            else:
                log.debug("cache_miss", hash=opts.hash, key=opts.key)
        else:
            log.debug("cache_bypass", hash=opts.hash, key=opts.key, force=opts.force, ttl=opts.ttl)

        if entry is None and compute is not None:
            log.debug("cache_compute", hash=opts.hash, key=opts.key)
            result = compute(opts)

            if result is not None:
                entry = Entry.ensure(result, opts.complete_key, opts)
                if entry.hash != opts.hash:
                    log.warning("entry_hash_mismatch", hash=opts.hash, entry_hash=entry.hash, key=opts.key)
                if opts.ttl > 0:
                    entry = self.backend.write(opts.hash, entry, opts)
                    log.debug("cache_write", hash=opts.hash, key=opts.key, ttl=opts.ttl)

        if entry is None:
            return None
        return entry if opts.as_entry else copy.copy(entry.value)

    def read(self, key: Any) -> Entry | None:
        """Return the valid entry stored for ``key``, or ``None``."""
        return self.backend.read(self.key_hash(key))

    def write(self, key: Any, value: Any, options: Any = None, **overrides: Any) -> Entry:
        """
        Store ``value`` for ``key`` and return the stored entry.

        Writing ``None`` stores a ``None`` value; it does not delete the key.
        """
        opts = self._resolve(options, overrides, key)
        entry = Entry.ensure(value, opts.complete_key, opts)
        return self.backend.write(opts.hash, entry, opts)

    def delete(self, key: Any) -> bool:
        """Delete ``key``; return whether it was stored."""
        return self.backend.delete(self.key_hash(key))

    def exists(self, key: Any) -> bool:
        """True if ``key`` has a valid entry."""
        return self.backend.exists(self.key_hash(key))

    def _resolve(self, options: Any, overrides: dict[str, Any], key: Any) -> CacheOptions:
        if overrides:
            if isinstance(options, CacheOptions):
                options = options.to_dict()
            elif not isinstance(options, Mapping):
                options = {}
            options = {**options, **overrides}
        return self.canonicalize(options, key)

    def __repr__(self) -> str:
        return f"Cache(backend={type(self.backend).__name__}, prefix={self.prefix!r})"


__all__ = ["Cache", "Compute"]
