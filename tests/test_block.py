import copy

import pytest

from rngcores.block import BlockRng, BlockRng64, read_u32_le, read_u64_le


class CountingCore:
    """Yields consecutive integers, ``size`` per block."""

    def __init__(self, size, start=1, shift=0):
        self.size = size
        self.next_value = start
        self.shift = shift
        self.calls = 0

    def generate(self):
        self.calls += 1
        block = [v << self.shift | v for v in range(self.next_value, self.next_value + self.size)]
        self.next_value += self.size
        return block


def test_next_u32_reads_in_order_and_regenerates():
    core = CountingCore(3)
    rng = BlockRng(core)
    assert [rng.next_u32() for _ in range(7)] == [1, 2, 3, 4, 5, 6, 7]
    assert core.calls == 3


def test_next_u64_combines_low_then_high():
    rng = BlockRng(CountingCore(4))
    assert rng.next_u64() == (2 << 32) | 1
    assert rng.next_u64() == (4 << 32) | 3
    assert rng.index() == 4


def test_next_u64_straddles_block_boundary():
    rng = BlockRng(CountingCore(3))
    assert rng.next_u32() == 1
    assert rng.next_u32() == 2
    assert rng.next_u64() == (4 << 32) | 3
    assert rng.index() == 1
    assert rng.next_u32() == 5


def test_fill_bytes_discards_partial_word():
    rng = BlockRng(CountingCore(2))
    data = rng.fill_bytes(5)
    assert data == (1).to_bytes(4, "little") + (2).to_bytes(4, "little")[:1]
    assert rng.next_u32() == 3


def test_fill_bytes_spans_blocks():
    rng = BlockRng(CountingCore(2))
    data = rng.fill_bytes(16)
    assert read_u32_le(data) == [1, 2, 3, 4]


def test_fill_bytes_rejects_negative_length():
    with pytest.raises(ValueError):
        BlockRng(CountingCore(2)).fill_bytes(-1)


def test_generate_and_set_positions_index():
    rng = BlockRng(CountingCore(4))
    rng.generate_and_set(3)
    assert rng.index() == 3
    assert rng.next_u32() == 4


def test_generate_and_set_rejects_out_of_range():
    with pytest.raises(IndexError):
        BlockRng(CountingCore(4)).generate_and_set(5)


def test_deepcopy_gives_identical_stream():
    rng = BlockRng(CountingCore(4))
    rng.next_u32()
    clone = copy.deepcopy(rng)
    assert [rng.next_u32() for _ in range(9)] == [clone.next_u32() for _ in range(9)]


def test_block64_mixed_reads():
    rng = BlockRng64(CountingCore(2, shift=32))
    first = rng.next_u64()
    assert first == (1 << 32) | 1
    assert rng.next_u32() == 2
    assert rng.next_u32() == 2
    assert rng.next_u64() == (3 << 32) | 3
    assert rng.next_u32() == 4
    assert rng.next_u64() == (5 << 32) | 5


def test_block64_next_u32_low_half_first():
    core = CountingCore(1)
    core.generate = lambda: [0xAABBCCDD11223344]
    rng = BlockRng64(core)
    assert rng.next_u32() == 0x11223344
    assert rng.next_u32() == 0xAABBCCDD


def test_block64_fill_bytes_matches_words():
    rng = BlockRng64(CountingCore(2, shift=32))
    data = rng.fill_bytes(24)
    assert read_u64_le(data) == [(v << 32) | v for v in (1, 2, 3)]


def test_block64_fill_bytes_resets_half_use():
    rng = BlockRng64(CountingCore(4, shift=32))
    rng.next_u32()
    data = rng.fill_bytes(8)
    assert read_u64_le(data) == [(2 << 32) | 2]
    assert rng.index() == 2


def test_read_u32_le_round_trip():
    data = bytes([1, 0, 0, 0, 0xFF, 0xFF, 0xFF, 0xFF])
    assert read_u32_le(data) == [1, 0xFFFFFFFF]


def test_read_u64_le_round_trip():
    data = bytes([1, 0, 0, 0, 0, 0, 0, 0x80])
    assert read_u64_le(data) == [0x8000000000000001]


@pytest.mark.parametrize("reader, size", [(read_u32_le, 5), (read_u64_le, 12)])
def test_readers_reject_bad_lengths(reader, size):
    with pytest.raises(ValueError):
        reader(bytes(size))