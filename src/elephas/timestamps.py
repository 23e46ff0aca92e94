"""
Clock helpers (stdlib-only).

elephas measures every timestamp and TTL in milliseconds. Entries record
``updated_at`` from these helpers; backends may substitute their own clock
through ``now()``.
"""

import time

MILLIS_PER_SECOND = 1000

# One hour, the default time-to-live for cached entries.
DEFAULT_TTL = 60 * 60 * MILLIS_PER_SECOND


def now_millis() -> float:
    """Current wall-clock time as a UNIX timestamp in milliseconds."""
    return time.time() * MILLIS_PER_SECOND


def seconds(value: float) -> int:
    """Express a number of seconds as a millisecond TTL."""
    return int(value * MILLIS_PER_SECOND)
