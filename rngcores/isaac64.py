"""The ISAAC-64 random number generator (64-bit variant of ISAAC)."""

from __future__ import annotations

from typing import Callable

from .block import BlockRng64, read_u64_le

_MASK = 0xFFFFFFFFFFFFFFFF
RAND_SIZE_LEN = 8
RAND_SIZE = 1 << RAND_SIZE_LEN
SEED_BYTES = 32
_MIDPOINT = RAND_SIZE // 2

# a...h initialised with the golden ratio (0x9e3779b97f4a7c13) and mixed
# four times.
_GOLDEN_INIT = (
    0x647C4677A2884B7C,
    0xB9F8B322C73AC862,
    0x8C0EA5053D4712A0,
    0xB29B2E824A595524,
    0x82F053DB8355E0CE,
    0x48FE4A0FA5A09315,
    0xAE985BF2CBFC89ED,
    0x98F5704F6C44C0AB,
)

_MIXERS: tuple[Callable[[int], int], ...] = (
    lambda a: ~(a ^ ((a << 21) & _MASK)) & _MASK,
    lambda a: a ^ (a >> 5),
    lambda a: a ^ ((a << 12) & _MASK),
    lambda a: a ^ (a >> 33),
)


def _mix(a: int, b: int, c: int, d: int, e: int, f: int, g: int, h: int) -> tuple[int, ...]:
    a = (a - e) & _MASK
    f ^= h >> 9
    h = (h + a) & _MASK
    b = (b - f) & _MASK
    g ^= (a << 9) & _MASK
    a = (a + b) & _MASK
    c = (c - g) & _MASK
    h ^= b >> 23
    b = (b + c) & _MASK
    d = (d - h) & _MASK
    a ^= (c << 15) & _MASK
    c = (c + d) & _MASK
    e = (e - a) & _MASK
    b ^= d >> 14
    d = (d + e) & _MASK
    f = (f - b) & _MASK
    c ^= (e << 20) & _MASK
    e = (e + f) & _MASK
    g = (g - c) & _MASK
    d ^= f >> 17
    f = (f + g) & _MASK
    h = (h - d) & _MASK
    e ^= (g << 14) & _MASK
    g = (g + h) & _MASK
    return a, b, c, d, e, f, g, h


class Isaac64Core:
    """ISAAC-64 state: 256 64-bit words of memory and the registers a, b, c.

    Each call to :meth:`generate` produces a block of 256 64-bit words.
    """

    __hash__ = None  # mutable state

    def __init__(self, mem: list[int], a: int = 0, b: int = 0, c: int = 0) -> None:
        if len(mem) != RAND_SIZE:
            raise ValueError(f"ISAAC-64 state needs {RAND_SIZE} words, got {len(mem)}")
        self._mem = [word & _MASK for word in mem]
        self._a = a & _MASK
        self._b = b & _MASK
        self._c = c & _MASK

    @classmethod
    def _init(cls, mem: list[int], rounds: int) -> Isaac64Core:
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
    def from_seed(cls, seed: bytes) -> Isaac64Core:
        """Create a core from a 32-byte seed, zero-extended to the full state."""
        seed = bytes(seed)
        if len(seed) != SEED_BYTES:
            raise ValueError(f"ISAAC-64 seed must be {SEED_BYTES} bytes, got {len(seed)}")
        words = read_u64_le(seed)
        return cls._init(words + [0] * (RAND_SIZE - len(words)), 2)

    @classmethod
    def seed_from_u64(cls, seed: int) -> Isaac64Core:
        """Create a core from a 64-bit integer.

        A seed of 0 reproduces the reference implementation used unseeded.
        """
        if not 0 <= seed <= _MASK:
            raise ValueError(f"seed must fit in 64 bits unsigned, got {seed}")
        key = [seed] + [0] * (RAND_SIZE - 1)
        # One pass suffices: the whole seed is available in the first round.
        return cls._init(key, 1)

    @classmethod
    def from_rng(cls, rng: object) -> Isaac64Core:
        """Seed the entire state with bytes drawn from ``rng.fill_bytes``."""
        fill: Callable[[int], bytes] = getattr(rng, "fill_bytes")
        data = bytes(fill(RAND_SIZE * 8))
        if len(data) != RAND_SIZE * 8:
            raise ValueError(f"expected {RAND_SIZE * 8} bytes from rng, got {len(data)}")
        return cls._init(read_u64_le(data), 2)

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
            y = (a + b + mem[(x >> 3) % RAND_SIZE]) & _MASK
            mem[i] = y
            b = (x + mem[(y >> (3 + RAND_SIZE_LEN)) % RAND_SIZE]) & _MASK
            outputs.append(b)
        self._a = a
        self._b = b
        outputs.reverse()
        return outputs

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Isaac64Core):
            return NotImplemented
        return (
            self._mem == other._mem
            and self._a == other._a
            and self._b == other._b
            and self._c == other._c
        )

    def __repr__(self) -> str:
        return "Isaac64Core()"


class Isaac64Rng(BlockRng64):
    """Fast 64-bit RNG using ISAAC-64; not to be relied upon for cryptography."""

    __hash__ = None

    @classmethod
    def from_seed(cls, seed: bytes) -> Isaac64Rng:
        """Create a generator from a 32-byte seed."""
        return cls(Isaac64Core.from_seed(seed))

    @classmethod
    def seed_from_u64(cls, seed: int) -> Isaac64Rng:
        """Create a generator from a 64-bit integer seed."""
        return cls(Isaac64Core.seed_from_u64(seed))

    @classmethod
    def from_rng(cls, rng: object) -> Isaac64Rng:
        """Seed a new generator from another generator's bytes."""
        return cls(Isaac64Core.from_rng(rng))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Isaac64Rng):
            return NotImplemented
        return self.core == other.core and self.index() == other.index()