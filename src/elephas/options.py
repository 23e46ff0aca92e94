"""
Option canonicalization for cache lookups.

Callers pass loosely shaped options (``None``, a partial dict, an already
canonical ``CacheOptions``). Before anything touches a backend the options
are turned into one fully populated, immutable record. Reads and writes
must derive exactly the same storage hash from the same input, so the
process is deterministic: the same input and the same cache defaults
always give the same record.

Architecture:
    ::

        canonicalize(raw, key, prefix=..., default_ttl=...)
          1. non-mapping raw         -> {}
          2. defaults <- raw         {ttl, force: False, as_entry: False}
          3. key                     <- argument if absent
          4. ttl                     blank -> default, else max(0, int)
          5. force / as_entry        -> bool
          6. prefix                  <- cache default if absent/blank
          7. complete_key            <- "prefix[key]" unless supplied
          8. hash                    <- hashify(complete_key) unless supplied

Examples:
    >>> opts = canonicalize({}, "K", prefix="app")
    >>> opts.complete_key
    'app[K]'
    >>> opts.ttl == DEFAULT_TTL
    True
    >>> canonicalize({"ttl": -5}, "K", prefix="app").ttl
    0

Guardrails:
    ❌ DON'T: Raise on odd option values
    ✅ DO: Coerce them to defaults (a blank TTL is the default, not zero)

Tags:
    options, canonicalization, namespacing, elephas

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from elephas.hashing import hashify, namespace_key
from elephas.timestamps import DEFAULT_TTL

OPTION_NAMES = ("key", "ttl", "force", "as_entry", "prefix", "complete_key", "hash")

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})


@dataclass(frozen=True)
class CacheOptions:
    """Canonical options for a single cache operation.

    Attributes:
        key: Caller key
        ttl: Time-to-live in milliseconds (0 means "do not persist")
        force: Skip the cache read and recompute
        as_entry: Return the Entry instead of its value
        prefix: Namespace prefix
        complete_key: ``prefix[key]``
        hash: Storage hash
        extra: Unrecognised caller options, kept as given
    """

    key: Any
    ttl: int
    force: bool
    as_entry: bool
    prefix: str
    complete_key: str
    hash: str
    extra: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Mapping-style lookup across known fields and ``extra``."""
        if name in OPTION_NAMES:
            return getattr(self, name)
        return self.extra.get(name, default)

    def __getitem__(self, name: str) -> Any:
        if name in OPTION_NAMES:
            return getattr(self, name)
        return self.extra[name]

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a plain dict (extras included)."""
        result = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        result.update(self.extra)
        return result


def is_blank(value: Any) -> bool:
    """``None`` or a whitespace-only string."""
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def coerce_ttl(value: Any, default: int = DEFAULT_TTL) -> int:
    """Normalise a TTL: blank or unparseable values become ``default``, negatives 0."""
    if is_blank(value) or isinstance(value, bool):
        return max(0, int(default))
    try:
        ttl = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return max(0, int(default))
    return max(0, ttl)


def option_value(options: Any, name: str) -> Any:
    """Read ``name`` from a CacheOptions, a mapping, or anything else (-> None)."""
    if isinstance(options, CacheOptions):
        return options.get(name)
    if isinstance(options, Mapping):
        return options.get(name)
    return None


def canonicalize(
    raw: Any,
    key: Any,
    *,
    prefix: str,
    default_ttl: int = DEFAULT_TTL,
) -> CacheOptions:
    """
    Build the canonical option record for ``key``.

    Args:
        raw: Caller options. Anything that is not a mapping or a
            CacheOptions is treated as empty.
        key: Caller key, used when ``raw`` has none
        prefix: Cache-wide namespace, used when ``raw`` has none (or a blank one)
        default_ttl: TTL used when ``raw`` has none (or a blank one)

    Returns:
        Fully populated CacheOptions
    """
    if isinstance(raw, CacheOptions):
        raw = raw.to_dict()
    elif not isinstance(raw, Mapping):
        raw = {}

    merged: dict[str, Any] = {"ttl": default_ttl, "force": False, "as_entry": False}
    merged.update(raw)

    resolved_key = merged.get("key")
    if resolved_key is None:
        resolved_key = key

    resolved_prefix = merged.get("prefix")
    if is_blank(resolved_prefix):
        resolved_prefix = prefix

    complete_key = merged.get("complete_key")
    if is_blank(complete_key):
        complete_key = namespace_key(resolved_prefix, resolved_key)

    resolved_hash = merged.get("hash")
    if is_blank(resolved_hash):
        resolved_hash = hashify(complete_key)

    return CacheOptions(
        key=resolved_key,
        ttl=coerce_ttl(merged.get("ttl"), default_ttl),
        force=coerce_bool(merged.get("force")),
        as_entry=coerce_bool(merged.get("as_entry")),
        prefix=str(resolved_prefix),
        complete_key=str(complete_key),
        hash=str(resolved_hash),
        extra={k: v for k, v in merged.items() if k not in OPTION_NAMES},
    )


__all__ = [
    "CacheOptions",
    "canonicalize",
    "coerce_bool",
    "coerce_ttl",
    "is_blank",
    "option_value",
]
