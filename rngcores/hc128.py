"""The HC-128 stream cipher used as a cryptographically secure RNG."""

from __future__ import annotations

from typing import Callable

from .block import BlockRng, read_u32_le

_MASK = 0xFFFFFFFF
SEED_BYTES = 32  # 128-bit key followed by a 128-bit IV
_TABLE = 512
_BLOCK = 16


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _rotl(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & _MASK


def _f1(x: int) -> int:
    return _rotr(x, 7) ^ _rotr(x, 18) ^ (x >> 3)


def _f2(x: int) -> int:
    return _rotr(x, 17) ^ _rotr(x, 19) ^ (x >> 10)


class Hc128Core:
    """State of HC-128: the P and Q tables and a step counter.

    Each call to :meth:`generate` advances the cipher sixteen steps and
    returns sixteen 32-bit words of keystream.
    """

    __hash__ = None  # mutable state

    def __init__(self, table: list[int], counter: int = 0) -> None:
        if len(table) != 2 * _TABLE:
            raise ValueError(f"HC-128 state needs {2 * _TABLE} words, got {len(table)}")
        self._t = [word & _MASK for word in table]
        self._counter = counter % (2 * _TABLE)

    @classmethod
    def from_seed(cls, seed: bytes) -> Hc128Core:
        """Create a core from a 32-byte seed (key followed by IV)."""
        seed = bytes(seed)
        if len(seed) != SEED_BYTES:
            raise ValueError(f"HC-128 seed must be {SEED_BYTES} bytes, got {len(seed)}")
        words = read_u32_le(seed)
        key, iv = words[:4], words[4:]

        t = [0] * (2 * _TABLE)
        t[0:16] = key + key + iv + iv

        def expand(i: int, offset: int) -> int:
            return (
                _f2(t[i - 2]) + t[i - 7] + _f1(t[i - 15]) + t[i - 16] + offset + i
            ) & _MASK

        # Intermediate values W[16..272]; the last sixteen seed P.
        for i in range(16, 256 + 16):
            t[i] = expand(i, 0)
        t[0:16] = t[256:272]

        for i in range(16, 2 * _TABLE):
            t[i] = expand(i, 256)

        core = cls(t)
        # Run the cipher 1024 steps, feeding the output back into the tables.
        for _ in range(2 * _TABLE // _BLOCK):
            core._sixteen_init_steps()
        core._counter = 0
        return core

    def _step(self, j: int, in_q: bool) -> int:
        """One cipher step at position ``j`` of P (or Q); returns keystream."""
        t = self._t
        mine, other = (_TABLE, 0) if in_q else (0, _TABLE)
        rot = _rotl if in_q else _rotr
        i = mine + j
        temp0 = rot(t[mine + (j + 1) % _TABLE], 23)
        temp1 = rot(t[mine + (j - 3) % _TABLE], 10)
        temp2 = rot(t[mine + (j - 10) % _TABLE], 8)
        t[i] = (t[i] + temp2 + (temp0 ^ temp1)) & _MASK
        x = t[mine + (j - 12) % _TABLE]
        temp3 = (t[other + (x & 0xFF)] + t[other + 256 + ((x >> 16) & 0xFF)]) & _MASK
        return temp3 ^ t[i]

    def _sixteen_init_steps(self) -> None:
        in_q = self._counter >= _TABLE
        cc = self._counter % _TABLE
        base = _TABLE if in_q else 0
        for j in range(cc, cc + _BLOCK):
            self._t[base + j] = self._step(j, in_q)
        self._counter += _BLOCK

    def generate(self) -> list[int]:
        """Advance sixteen steps and return sixteen keystream words."""
        in_q = bool(self._counter & _TABLE)
        cc = self._counter % _TABLE
        results = [self._step(j, in_q) for j in range(cc, cc + _BLOCK)]
        self._counter = (self._counter + _BLOCK) % (2 * _TABLE)
        return results

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hc128Core):
            return NotImplemented
        return self._t == other._t and self._counter == other._counter

    def __repr__(self) -> str:
        return "Hc128Core()"


class Hc128Rng(BlockRng):
    """Cryptographically secure RNG built on the HC-128 stream cipher."""

    __hash__ = None

    @classmethod
    def from_seed(cls, seed: bytes) -> Hc128Rng:
        """Create a generator from a 32-byte seed (key followed by IV)."""
        return cls(Hc128Core.from_seed(seed))

    @classmethod
    def from_rng(cls, rng: object) -> Hc128Rng:
        """Seed a new generator with 32 bytes drawn from ``rng.fill_bytes``."""
        fill: Callable[[int], bytes] = getattr(rng, "fill_bytes")
        return cls.from_seed(fill(SEED_BYTES))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hc128Rng):
            return NotImplemented
        return self.core == other.core and self.index() == other.index()