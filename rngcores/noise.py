"""Noise sources and mixing primitives behind the jitter entropy collector."""

from __future__ import annotations

MEMORY_BLOCKS = 64
MEMORY_BLOCKSIZE = 32
MEMORY_SIZE = MEMORY_BLOCKS * MEMORY_BLOCKSIZE

_U64_MASK = 0xFFFFFFFFFFFFFFFF

# First two 32-bit SHA-1 initialisation vectors (FIPS 180-4, 5.3.1).
STIR_CONSTANT = 0x67452301EFCDAB89
# Third and fourth SHA-1 initialisation vectors: start value of the mixer.
STIR_MIXER_START = 0x98BADCFE10325476


def _wrap_i32(value: int) -> int:
    return ((value + (1 << 31)) % (1 << 32)) - (1 << 31)


def _rotl64(value: int, amount: int) -> int:
    return ((value << amount) | (value >> (64 - amount))) & _U64_MASK


class EcState:
    """Per-collection state: previous time stamp, recent deltas and scratch memory."""

    __slots__ = ("prev_time", "last_delta", "last_delta2", "mem")

    def __init__(self, prev_time: int) -> None:
        self.prev_time = prev_time & _U64_MASK
        self.last_delta = 0
        self.last_delta2 = 0
        self.mem = bytearray(MEMORY_SIZE)

    def stuck(self, current_delta: int) -> bool:
        """Record ``current_delta`` and report whether it carries no entropy.

        A measurement is stuck when the time delta, the delta of deltas or
        the delta of that is zero.
        """
        current_delta = _wrap_i32(current_delta)
        delta2 = _wrap_i32(self.last_delta - current_delta)
        delta3 = _wrap_i32(delta2 - self.last_delta2)

        self.last_delta = current_delta
        self.last_delta2 = delta2

        return current_delta == 0 or delta2 == 0 or delta3 == 0

    def __repr__(self) -> str:
        return "EcState()"


def fold_time(time: int, n_bits: int) -> int:
    """Fold a 64-bit time stamp into a value of at most ``n_bits`` bits."""
    if not 1 <= n_bits <= 64:
        raise ValueError(f"n_bits must be between 1 and 64, got {n_bits}")
    time &= _U64_MASK
    folds = (64 + n_bits - 1) // n_bits
    mask = (1 << n_bits) - 1
    rounds = 0
    for _ in range(folds):
        rounds ^= time & mask
        time >>= n_bits
    return rounds


def lfsr(data: int, time: int) -> int:
    """Inject the 64 bits of ``time`` into ``data`` through a Fibonacci LFSR.

    The polynomial is x^64 + x^61 + x^56 + x^31 + x^28 + x^23 + 1.
    """
    data &= _U64_MASK
    time &= _U64_MASK
    for bit in range(64):
        data ^= (time >> bit) & 1
        for tap in (63, 60, 55, 30, 27, 22):
            data ^= (data >> tap) & 1
        data = _rotl64(data, 1)
    return data


def stir_pool(data: int) -> int:
    """Mix ``data`` with a value derived from its own set bits.

    The mixer is built without branching on the bits of ``data``.
    """
    data &= _U64_MASK
    mixer = STIR_MIXER_START
    for bit in range(64):
        apply = (data >> bit) & 1
        mask = ~((apply - 1) & _U64_MASK) & _U64_MASK
        mixer ^= STIR_CONSTANT & mask
        mixer = _rotl64(mixer, 1)
    return data ^ mixer


def memaccess(mem: bytearray, start_index: int, loop_count: int) -> int:
    """Increment ``loop_count`` bytes of ``mem``, stepping by a block less one.

    Every location is hit evenly. Returns the index touched last, from which
    the next round continues.
    """
    if len(mem) != MEMORY_SIZE:
        raise ValueError(f"memory must be {MEMORY_SIZE} bytes, got {len(mem)}")
    if loop_count < 0:
        raise ValueError(f"loop count must not be negative, got {loop_count}")
    index = start_index
    for _ in range(loop_count):
        index = (index + MEMORY_BLOCKSIZE - 1) % MEMORY_SIZE
        mem[index] = (mem[index] + 1) & 0xFF
    return index