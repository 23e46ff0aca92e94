"""
Redis-backed delegate backend.

Delegates storage to an already-running Redis service. The entry's TTL is
forwarded as Redis' native expiry (``PX``, milliseconds) so the service
reaps stale slots on its own; reads still apply ``Entry.valid`` as a
second gate, judged by this backend's clock.

Requires ``redis`` package (install via ``pip install elephas[redis]``)
unless a client object is injected.

Examples:
    >>> backend = RedisBackend(url="redis://localhost:6379/0")
    >>> cache = Cache(backend, prefix="sessions")

    Sharing an existing connection:

    >>> backend = RedisBackend(redis.Redis(host="cache", port=6379))

Guardrails:
    ❌ DON'T: Cache values that json can't encode (sets, custom classes)
    ✅ DO: Cache dicts/lists/str/numbers, or use MemoryBackend in-process

    ❌ DON'T: Cache tuples or dicts with non-string keys (json changes them)
    ✅ DO: Convert them first; writes that would not read back equal raise

Tags:
    backend, redis, distributed, delegate, elephas
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from elephas.backends.base import BaseBackend
from elephas.entry import Entry
from elephas.errors import SerializationError
from elephas.logging import get_logger

logger = get_logger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


class RedisBackend(BaseBackend):
    """Backend that stores JSON-encoded entries in Redis.

    Args:
        client: A redis-py compatible client (``get``/``set``/``delete``).
            Created from ``url`` when omitted.
        url: Redis connection URL, used only when ``client`` is omitted.
        clock: Millisecond clock for validity checks (defaults to wall clock).

    Raises:
        ImportError: If no client is given and ``redis`` is not installed.
    """

    def __init__(
        self,
        client: Any = None,
        *,
        url: str = DEFAULT_REDIS_URL,
        clock: Callable[[], float] | None = None,
    ):
        super().__init__(clock=clock)

        if client is None:
            try:
                import redis
            except ImportError as exc:
                msg = (
                    "Redis backend requires 'redis' package. "
                    "Install with: pip install elephas[redis]"
                )
                raise ImportError(msg) from exc

            client = redis.from_url(url, decode_responses=False)

        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    def read(self, hash: str) -> Entry | None:
        """Fetch and decode the entry; expired or missing entries read as ``None``."""
        entry = self._load(hash)
        if entry is None or not entry.valid(self):
            return None
        return entry

    def write(self, hash: str, value: Any, options: Any = None) -> Entry:
        """Wrap, refresh and store ``value``, expiring it in Redis after its TTL.

        A ttl of 0 is never stored: the slot is cleared instead, so a stale
        entry cannot outlive the write.
        """
        entry = Entry.ensure(value, hash, options)
        entry.refresh(backend=self)

        if entry.ttl <= 0:
            self._client.delete(hash)
            logger.debug("backend_skip_write", backend="redis", hash=hash, ttl=entry.ttl)
            return entry

        self._client.set(hash, self._encode(entry), px=int(entry.ttl))

        logger.debug("backend_write", backend="redis", hash=hash, ttl=entry.ttl)
        return entry

    def delete(self, hash: str) -> bool:
        """Remove ``hash``; Redis reports how many keys it removed."""
        return bool(self._client.delete(hash))

    def exists(self, hash: str) -> bool:
        return self.read(hash) is not None

    def _encode(self, entry: Entry) -> str:
        try:
            payload = json.dumps(entry.to_dict())
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot encode entry for {entry.key!r} as JSON", cause=exc
            ).with_context(backend="RedisBackend", operation="write", hash=entry.hash)

        # Tuples and non-string dict keys survive json.dumps but not the trip back.
        if json.loads(payload)["value"] != entry.value:
            raise SerializationError(
                f"Value for {entry.key!r} does not survive a JSON round trip"
            ).with_context(backend="RedisBackend", operation="write", hash=entry.hash)
        return payload

    def _load(self, hash: str) -> Entry | None:
        raw = self._client.get(hash)
        if raw is None:
            return None

        try:
            return Entry.from_dict(json.loads(raw))
        except (TypeError, ValueError, KeyError) as exc:
            raise SerializationError(
                "Stored payload is not a valid entry", cause=exc
            ).with_context(backend="RedisBackend", operation="read", hash=hash)


__all__ = ["RedisBackend", "DEFAULT_REDIS_URL"]
