"""elephas -- read-through, TTL-bounded key/value cache.

Module Map
----------
::

    hashing.py       hashify() / namespace_key()
    timestamps.py    millisecond clock, DEFAULT_TTL
    options.py       CacheOptions + canonicalize()
    entry.py         Entry (validity, refresh, ensure)
    backends/        CacheBackend protocol, MemoryBackend, RedisBackend
    cache.py         Cache facade (use / read / write / delete / exists)
    config.py        ElephasSettings (pydantic-settings) + create_backend()
    errors.py        ElephasError hierarchy
    logging.py       structlog configuration

Quick start::

    from elephas import Cache

    cache = Cache(prefix="quotes")
    price = cache.use("AAPL", lambda opts: fetch_price("AAPL"))
"""

from elephas.backends import BaseBackend, CacheBackend, MemoryBackend, RedisBackend
from elephas.cache import Cache
from elephas.config import BackendKind, ElephasSettings, create_backend, get_settings
from elephas.entry import Entry
from elephas.errors import (
    BackendContractError,
    ConfigError,
    ElephasError,
    InvalidConfigError,
    SerializationError,
    StorageError,
)
from elephas.hashing import hashify
from elephas.options import CacheOptions, canonicalize
from elephas.timestamps import DEFAULT_TTL, seconds
from elephas.version import __version__

__all__ = [
    "__version__",
    "Cache",
    "CacheOptions",
    "canonicalize",
    "Entry",
    "hashify",
    "DEFAULT_TTL",
    "seconds",
    "BaseBackend",
    "CacheBackend",
    "MemoryBackend",
    "RedisBackend",
    "BackendKind",
    "ElephasSettings",
    "create_backend",
    "get_settings",
    "ElephasError",
    "BackendContractError",
    "StorageError",
    "SerializationError",
    "ConfigError",
    "InvalidConfigError",
]
