"""Storage backends for elephas.

``MemoryBackend`` keeps entries in this process; ``RedisBackend`` delegates
to a running Redis service. Both satisfy :class:`CacheBackend`.
"""

from elephas.backends.base import BaseBackend, CacheBackend
from elephas.backends.memory import MemoryBackend
from elephas.backends.redis import RedisBackend

__all__ = [
    "BaseBackend",
    "CacheBackend",
    "MemoryBackend",
    "RedisBackend",
]
