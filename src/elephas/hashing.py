"""
Deterministic key hashing and namespacing.

Every entry is stored under a SHA-256 digest of its namespaced key. Two
cache instances that share a backend (two processes pointing at the same
Redis, say) must agree on storage slots without talking to each other, so
the digest is a pure function of the namespaced key string.

Architecture:
    ::

        namespace_key("elephas-0.1.0-cache", "user:42")
            -> "elephas-0.1.0-cache[user:42]"
        hashify("elephas-0.1.0-cache[user:42]")
            -> 64-char lowercase hex (SHA-256)

Examples:
    >>> hashify("HASH 1")
    '88e1f3572122e2605c1fab09efa8d4e99f5a064ae0230ca0aeced839796aba35'
    >>> namespace_key("app", 42)
    'app[42]'

Tags:
    hashing, namespacing, sha256, elephas

Doc-Types:
    - API Reference
"""

import hashlib
from typing import Any


def hashify(key: Any) -> str:
    """
    Compute the storage hash for a (namespaced) key.

    The key is converted with ``str()``, encoded as UTF-8 and hashed with
    SHA-256. The full lowercase hex digest is returned.

    Args:
        key: Key to hash (converted to string)

    Returns:
        64-char hex string
    """
    return hashlib.sha256(str(key).encode("utf-8")).hexdigest()


def namespace_key(prefix: Any, key: Any) -> str:
    """Wrap ``key`` in ``prefix`` so different consumers never collide."""
    return f"{prefix}[{key}]"
