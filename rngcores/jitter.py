"""A true random number generator driven by CPU and memory timing jitter."""

from __future__ import annotations

from typing import Callable

from .errors import TimerError, TimerErrorKind
from .noise import MEMORY_SIZE, EcState, fold_time, lfsr, memaccess, stir_pool

_U32_MASK = 0xFFFFFFFF
_U64_MASK = 0xFFFFFFFFFFFFFFFF

# Loops run before measuring, to clear caches and branch predictors.
_CLEARCACHE = 100
# Measurements used by the timer quality test.
_TESTLOOPCOUNT = 300
_MEMACCESS_BASE_LOOPS = 128
_DEFAULT_ROUNDS = 64
_MAX_ROUNDS = 0xFF

# Rounds needed for 64 bits of entropy when the average delta is below 16.
# Entries 0 and 1 are not meaningful estimates.
_LOG2_LOOKUP = (0, 0, 128, 81, 64, 56, 50, 46, 43, 41, 39, 38, 36, 35, 34, 33)


def _as_i32(value: int) -> int:
    return ((value + (1 << 31)) % (1 << 32)) - (1 << 31)


def _as_i64(value: int) -> int:
    return ((value + (1 << 63)) % (1 << 64)) - (1 << 63)


def _rotl64(value: int, amount: int) -> int:
    return ((value << amount) | (value >> (64 - amount))) & _U64_MASK


class JitterRng:
    """Collects entropy from jitter in execution and memory access time.

    ``timer`` must return a high-resolution time stamp (nanosecond
    precision). Call :meth:`test_timer` before relying on the output, and
    discard the first 64-bit value to prime the entropy pool.

    Not suitable where cryptographic security is required.
    """

    def __init__(self, timer: Callable[[], int]) -> None:
        self._timer = timer
        self._data = 0
        self._rounds = _DEFAULT_ROUNDS
        self._mem_prev_index = 0
        self._data_half_used = False

    @property
    def rounds(self) -> int:
        """Entropy collection rounds used for each 64-bit value."""
        return self._rounds

    def set_rounds(self, rounds: int) -> None:
        """Set the number of collection rounds per 64-bit value (1 to 255)."""
        if not 0 < rounds <= _MAX_ROUNDS:
            raise ValueError(f"rounds must be between 1 and {_MAX_ROUNDS}, got {rounds}")
        self._rounds = rounds

    def _now(self) -> int:
        return self._timer() & _U64_MASK

    def _random_loop_cnt(self, n_bits: int) -> int:
        # Mix the fresh time stamp with the pool to balance the count further.
        return fold_time(self._now() ^ self._data, n_bits)

    def _lfsr_time(self, time: int, var_rounds: bool) -> None:
        # Only the last round affects the pool; the others exist for their
        # execution time.
        loop_cnt = self._random_loop_cnt(4) if var_rounds else 0
        throw_away = 0
        for _ in range(loop_cnt):
            throw_away = lfsr(throw_away, time)
        self._data = lfsr(self._data, time)

    def _memaccess(self, mem: bytearray, var_rounds: bool) -> None:
        loop_cnt = _MEMACCESS_BASE_LOOPS
        if var_rounds:
            loop_cnt += self._random_loop_cnt(4)
        self._mem_prev_index = memaccess(mem, self._mem_prev_index, loop_cnt)

    def _measure_jitter(self, ec: EcState) -> bool:
        """Run one measurement; return False when it was stuck."""
        self._memaccess(ec.mem, True)

        time = self._now()
        current_delta = _as_i32(time - ec.prev_time)
        ec.prev_time = time

        self._lfsr_time(current_delta & _U64_MASK, True)

        if ec.stuck(current_delta):
            return False

        # Rotate by an odd amount so every bit of the next delta has an
        # even chance of meeting every bit of the pool.
        self._data = _rotl64(self._data, 7)
        return True

    def _gen_entropy(self) -> int:
        ec = EcState(self._now())
        # Prime the previous time stamp and the noise sources.
        self._measure_jitter(ec)

        for _ in range(self._rounds):
            # A broken timer would loop here forever; that is not guarded.
            while not self._measure_jitter(ec):
                pass

        self._data = stir_pool(self._data)
        return self._data

    def test_timer(self) -> int:
        """Check the timer's quality by measuring jitter a few hundred times.

        Returns the estimated number of rounds needed for 64 bits of
        entropy; raises :class:`TimerError` when the timer is unfit.
        """
        delta_sum = 0
        old_delta = 0
        time_backwards = 0
        count_mod = 0
        count_stuck = 0

        ec = EcState(self._now())

        for i in range(_CLEARCACHE + _TESTLOOPCOUNT):
            time = self._now()
            self._memaccess(ec.mem, True)
            self._lfsr_time(time, True)
            time2 = self._now()

            if time == 0 or time2 == 0:
                raise TimerError(TimerErrorKind.NO_TIMER)
            delta = _as_i32(time2 - time)

            # A timer this coarse cannot separate calls made right after
            # each other.
            if delta == 0:
                raise TimerError(TimerErrorKind.COARSE_TIMER)

            if i < _CLEARCACHE:
                continue

            if ec.stuck(delta):
                count_stuck += 1
            if time2 <= time:
                time_backwards += 1
            if delta % 100 == 0:
                count_mod += 1

            delta_sum += abs(delta - old_delta)
            old_delta = delta

        # Up to three steps back are tolerated, e.g. NTP adjustments.
        if time_backwards > 3:
            raise TimerError(TimerErrorKind.NOT_MONOTONIC)

        # At least one bit of entropy per round on average.
        if delta_sum < _TESTLOOPCOUNT:
            raise TimerError(TimerErrorKind.TINY_VARIATIONS)

        # At least 10% of deltas must not be multiples of 100.
        if count_mod > _TESTLOOPCOUNT * 9 // 10:
            raise TimerError(TimerErrorKind.COARSE_TIMER)

        if count_stuck > _TESTLOOPCOUNT * 9 // 10:
            raise TimerError(TimerErrorKind.TOO_MANY_STUCK)

        # Conservative estimate: log2(delta_average) / 2 bits per round.
        delta_average = delta_sum // _TESTLOOPCOUNT
        if delta_average >= 16:
            log2 = delta_average.bit_length()
            return (64 * 2 + log2 - 1) // log2
        return _LOG2_LOOKUP[delta_average]

    def timer_stats(self, var_rounds: bool) -> int:
        """Timer delta of one run of the entropy collector's noise sources.

        With ``var_rounds`` the noise sources run a variable number of
        times, as in a real round; without it they run the minimum.
        """
        mem = bytearray(MEMORY_SIZE)
        time = self._now()
        self._memaccess(mem, var_rounds)
        self._lfsr_time(time, var_rounds)
        time2 = self._now()
        return _as_i64(time2 - time)

    def next_u32(self) -> int:
        """Return 32 random bits, using both halves of each collected value."""
        if self._data_half_used:
            self._data_half_used = False
            return self._data >> 32
        self._data = self.next_u64()
        self._data_half_used = True
        return self._data & _U32_MASK

    def next_u64(self) -> int:
        """Collect and return 64 fresh random bits."""
        self._data_half_used = False
        return self._gen_entropy()

    def fill_bytes(self, length: int) -> bytes:
        """Return ``length`` random bytes built from 64- and 32-bit values."""
        if length < 0:
            raise ValueError(f"cannot produce a negative number of bytes: {length}")
        out = bytearray()
        full, rest = divmod(length, 8)
        for _ in range(full):
            out += self.next_u64().to_bytes(8, "little")
        if rest > 4:
            out += self.next_u64().to_bytes(8, "little")[:rest]
        elif rest > 0:
            out += self.next_u32().to_bytes(4, "little")[:rest]
        return bytes(out)

    def __copy__(self) -> JitterRng:
        clone = JitterRng(self._timer)
        clone._data = self._data
        clone._rounds = self._rounds
        clone._mem_prev_index = self._mem_prev_index
        # Any unused half of the last value belongs to the original.
        clone._data_half_used = False
        return clone

    def __repr__(self) -> str:
        return "JitterRng()"