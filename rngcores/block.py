"""Buffered wrappers that turn block-producing generator cores into RNGs."""

from __future__ import annotations

import struct
from typing import Protocol, Sequence

_U32_MASK = 0xFFFFFFFF
_U64_MASK = 0xFFFFFFFFFFFFFFFF


class BlockCore(Protocol):
    """A generator core that produces one block of results per call."""

    def generate(self) -> Sequence[int]:
        ...


def read_u32_le(data: bytes) -> list[int]:
    """Decode little-endian 32-bit words from ``data``."""
    if len(data) % 4:
        raise ValueError(f"byte length {len(data)} is not a multiple of 4")
    return list(struct.unpack(f"<{len(data) // 4}I", data))


def read_u64_le(data: bytes) -> list[int]:
    """Decode little-endian 64-bit words from ``data``."""
    if len(data) % 8:
        raise ValueError(f"byte length {len(data)} is not a multiple of 8")
    return list(struct.unpack(f"<{len(data) // 8}Q", data))


def _check_length(length: int) -> None:
    if length < 0:
        raise ValueError(f"cannot produce a negative number of bytes: {length}")


class BlockRng:
    """RNG over a core that yields blocks of 32-bit words.

    Results are consumed in order; a fresh block is generated when the
    current one is exhausted.
    """

    def __init__(self, core: BlockCore) -> None:
        self.core = core
        self._results: list[int] = []
        self._index = 0

    def index(self) -> int:
        """Position of the next unread word in the current block."""
        return self._index

    def generate_and_set(self, index: int) -> None:
        """Generate a new block and continue reading from ``index``."""
        self._results = [value & _U32_MASK for value in self.core.generate()]
        if not 0 <= index <= len(self._results):
            raise IndexError(f"index {index} outside block of {len(self._results)}")
        self._index = index

    def next_u32(self) -> int:
        if self._index >= len(self._results):
            self.generate_and_set(0)
        value = self._results[self._index]
        self._index += 1
        return value

    def next_u64(self) -> int:
        length = len(self._results)
        index = self._index
        if index < length - 1:
            self._index += 2
            return (self._results[index + 1] << 32) | self._results[index]
        if index >= length:
            self.generate_and_set(2)
            return (self._results[1] << 32) | self._results[0]
        low = self._results[length - 1]
        self.generate_and_set(1)
        return (self._results[0] << 32) | low

    def fill_bytes(self, length: int) -> bytes:
        """Return ``length`` bytes; a partly used word is discarded."""
        _check_length(length)
        out = bytearray()
        while len(out) < length:
            if self._index >= len(self._results):
                self.generate_and_set(0)
            available = self._results[self._index:]
            byte_len = min(len(available) * 4, length - len(out))
            words = -(-byte_len // 4)
            chunk = struct.pack(f"<{words}I", *available[:words])
            out += chunk[:byte_len]
            self._index += words
        return bytes(out)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.core!r})"


class BlockRng64:
    """RNG over a core that yields blocks of 64-bit words.

    ``next_u32`` uses both halves of a word, low half first.
    """

    def __init__(self, core: BlockCore) -> None:
        self.core = core
        self._results: list[int] = []
        self._index = 0
        self._half_used = False

    def index(self) -> int:
        """Position of the next unread word in the current block."""
        return self._index

    def generate_and_set(self, index: int) -> None:
        """Generate a new block and continue reading from ``index``."""
        self._results = [value & _U64_MASK for value in self.core.generate()]
        if not 0 <= index <= len(self._results):
            raise IndexError(f"index {index} outside block of {len(self._results)}")
        self._index = index
        self._half_used = False

    def next_u32(self) -> int:
        half_index = self._index * 2 - int(self._half_used)
        if half_index >= len(self._results) * 2:
            self.generate_and_set(0)
            half_index = 0
        self._half_used = not self._half_used
        self._index += int(self._half_used)
        word = self._results[half_index // 2]
        return (word >> (32 * (half_index % 2))) & _U32_MASK

    def next_u64(self) -> int:
        if self._index >= len(self._results):
            self.generate_and_set(0)
        value = self._results[self._index]
        self._index += 1
        self._half_used = False
        return value

    def fill_bytes(self, length: int) -> bytes:
        """Return ``length`` bytes; a partly used word is discarded."""
        _check_length(length)
        out = bytearray()
        self._half_used = False
        while len(out) < length:
            if self._index >= len(self._results):
                self.generate_and_set(0)
            available = self._results[self._index:]
            byte_len = min(len(available) * 8, length - len(out))
            words = -(-byte_len // 8)
            chunk = struct.pack(f"<{words}Q", *available[:words])
            out += chunk[:byte_len]
            self._index += words
        return bytes(out)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.core!r})"