"""High-resolution time source for the jitter generator."""

from __future__ import annotations

import time

_NANOS_PER_SECOND = 1_000_000_000
_U64_MASK = 0xFFFFFFFFFFFFFFFF


def get_nstime() -> int:
    """Current wall-clock time as seconds shifted left by 30, OR nanoseconds.

    Not an exact nanosecond count, but it keeps every bit of entropy the
    clock provides while avoiding a multiplication.
    """
    seconds, nanos = divmod(time.time_ns(), _NANOS_PER_SECOND)
    return ((seconds << 30) | nanos) & _U64_MASK