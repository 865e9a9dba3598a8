"""Errors reported when a timer is unfit for jitter entropy collection."""

from __future__ import annotations

import enum

ERROR_BASE = 0xAE53_0400


class TimerErrorKind(enum.IntEnum):
    """Why a timer failed the quality tests."""

    NO_TIMER = ERROR_BASE + 1
    COARSE_TIMER = ERROR_BASE + 2
    NOT_MONOTONIC = ERROR_BASE + 3
    TINY_VARIATIONS = ERROR_BASE + 4
    TOO_MANY_STUCK = ERROR_BASE + 5

    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    TimerErrorKind.NO_TIMER: "no timer available",
    TimerErrorKind.COARSE_TIMER: "coarse timer",
    TimerErrorKind.NOT_MONOTONIC: "timer not monotonic",
    TimerErrorKind.TINY_VARIATIONS: "time delta variations too small",
    TimerErrorKind.TOO_MANY_STUCK: "too many stuck results",
}


class TimerError(Exception):
    """Raised when the timer does not pass the jitter quality tests."""

    def __init__(self, kind: TimerErrorKind) -> None:
        self.kind = TimerErrorKind(kind)
        super().__init__(self.kind.description())

    @property
    def code(self) -> int:
        """Numeric error code of this failure."""
        return int(self.kind)