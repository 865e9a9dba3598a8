"""The ISAAC random number generator (32-bit variant)."""

from __future__ import annotations

from typing import Callable

from .block import BlockRng, read_u32_le

_MASK = 0xFFFFFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF
RAND_SIZE_LEN = 8
RAND_SIZE = 1 << RAND_SIZE_LEN
SEED_BYTES = 32
_MIDPOINT = RAND_SIZE // 2

# a...h initialised with the golden ratio (0x9e3779b9) and mixed four times.
_GOLDEN_INIT = (
    0x1367DF5A,
    0x95D90059,
    0xC3163E4B,
    0x0F421AD8,
    0xD92A4A78,
    0xA51A3C49,
    0xC4EFEA1B,
    0x30609119,
)

_MIXERS: tuple[Callable[[int], int], ...] = (
    lambda a: a ^ ((a << 13) & _MASK),
    lambda a: a ^ (a >> 6),
    lambda a: a ^ ((a << 2) & _MASK),
    lambda a: a ^ (a >> 16),
)


def _mix(a: int, b: int, c: int, d: int, e: int, f: int, g: int, h: int) -> tuple[int, ...]:
    a ^= (b << 11) & _MASK
    d = (d + a) & _MASK
    b = (b + c) & _MASK
    b ^= c >> 2
    e = (e + b) & _MASK
    c = (c + d) & _MASK
    c ^= (d << 8) & _MASK
    f = (f + c) & _MASK
    d = (d + e) & _MASK
    d ^= e >> 16
    g = (g + d) & _MASK
    e = (e + f) & _MASK
    e ^= (f << 10) & _MASK
    h = (h + e) & _MASK
    f = (f + g) & _MASK
    f ^= g >> 4
    a = (a + f) & _MASK
    g = (g + h) & _MASK
    g ^= (h << 8) & _MASK
    b = (b + g) & _MASK
    h = (h + a) & _MASK
    h ^= a >> 9
    c = (c + h) & _MASK
    a = (a + b) & _MASK
    return a, b, c, d, e, f, g, h


class IsaacCore:
    """ISAAC state: 256 words of memory and the registers a, b and c.

    Each call to :meth:`generate` produces a block of 256 32-bit words.
    """

    __hash__ = None  # mutable state

    def __init__(self, mem: list[int], a: int = 0, b: int = 0, c: int = 0) -> None:
        if len(mem) != RAND_SIZE:
            raise ValueError(f"ISAAC state needs {RAND_SIZE} words, got {len(mem)}")
        self._mem = [word & _MASK for word in mem]
        self._a = a & _MASK
        self._b = b & _MASK
        self._c = c & _MASK

    @classmethod
    def _init(cls, mem: list[int], rounds: int) -> IsaacCore:
        mem = [word & _MASK for word in mem]
        regs = _GOLDEN_INIT
        # Normally two passes, so that all of the seed affects all of mem.
        for _ in range(rounds):
            for start in range(0, RAND_SIZE, 8):
                chunk = mem[start:start + 8]
                regs = _mix(*((r + m) & _MASK for r, m in zip(regs, chunk)))
                mem[start:start + 8] = regs
        return cls(mem)

    @classmethod
    def from_seed(cls, seed: bytes) -> IsaacCore:
        """Create a core from a 32-byte seed, zero-extended to the full state."""
        seed = bytes(seed)
        if len(seed) != SEED_BYTES:
            raise ValueError(f"ISAAC seed must be {SEED_BYTES} bytes, got {len(seed)}")
        words = read_u32_le(seed)
        return cls._init(words + [0] * (RAND_SIZE - len(words)), 2)

    @classmethod
    def seed_from_u64(cls, seed: int) -> IsaacCore:
        """Create a core from a 64-bit integer.

        A seed of 0 reproduces the reference implementation used unseeded.
        """
        if not 0 <= seed <= _U64_MAX:
            raise ValueError(f"seed must fit in 64 bits unsigned, got {seed}")
        key = [seed & _MASK, seed >> 32] + [0] * (RAND_SIZE - 2)
        # One pass suffices: the whole seed is available in the first round.
        return cls._init(key, 1)

    @classmethod
    def from_rng(cls, rng: object) -> IsaacCore:
        """Seed the entire state with bytes drawn from ``rng.fill_bytes``."""
        fill: Callable[[int], bytes] = getattr(rng, "fill_bytes")
        data = bytes(fill(RAND_SIZE * 4))
        if len(data) != RAND_SIZE * 4:
            raise ValueError(f"expected {RAND_SIZE * 4} bytes from rng, got {len(data)}")
        return cls._init(read_u32_le(data), 2)

    def generate(self) -> list[int]:
        """Advance the state and return a block of 256 words.

        The block is filled in reverse so that reading it forwards matches
        the reference implementation's output order.
        """
        mem = self._mem
        self._c = (self._c + 1) & _MASK
        a = self._a
        b = (self._b + self._c) & _MASK
        outputs = []
        for i in range(RAND_SIZE):
            x = mem[i]
            a = (_MIXERS[i % 4](a) + mem[(i + _MIDPOINT) % RAND_SIZE]) & _MASK
            y = (a + b + mem[(x >> 2) % RAND_SIZE]) & _MASK
            mem[i] = y
            b = (x + mem[(y >> (2 + RAND_SIZE_LEN)) % RAND_SIZE]) & _MASK
            outputs.append(b)
        self._a = a
        self._b = b
        outputs.reverse()
        return outputs

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IsaacCore):
            return NotImplemented
        return (
            self._mem == other._mem
            and self._a == other._a
            and self._b == other._b
            and self._c == other._c
        )

    def __repr__(self) -> str:
        return "IsaacCore()"


class IsaacRng(BlockRng):
    """Fast RNG using ISAAC; not to be relied upon for cryptographic use."""

    __hash__ = None

    @classmethod
    def from_seed(cls, seed: bytes) -> IsaacRng:
        """Create a generator from a 32-byte seed."""
        return cls(IsaacCore.from_seed(seed))

    @classmethod
    def seed_from_u64(cls, seed: int) -> IsaacRng:
        """Create a generator from a 64-bit integer seed."""
        return cls(IsaacCore.seed_from_u64(seed))

    @classmethod
    def from_rng(cls, rng: object) -> IsaacRng:
        """Seed a new generator from another generator's bytes."""
        return cls(IsaacCore.from_rng(rng))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IsaacRng):
            return NotImplemented
        return self.core == other.core and self.index() == other.index()