import copy
import struct

import pytest

from rngcores.hc128 import Hc128Core, Hc128Rng

ZERO_SEED = bytes(32)
IV_ONE_SEED = bytes(16) + bytes([1]) + bytes(15)
KEY_55_SEED = bytes([0x55]) + bytes(31)

VECTOR_A = [0x73150082, 0x3bfd03a0, 0xfb2fd77f, 0xaa63af0e,
            0xde122fc6, 0xa7dc29b6, 0x62a68527, 0x8b75ec68,
            0x9036db1e, 0x81896005, 0x00ade078, 0x491fbf9a,
            0x1cdc3013, 0x6c3d6e24, 0x90f664b2, 0x9cd57102]


def _first_u32s(seed, count=16):
    rng = Hc128Rng.from_seed(seed)
    return [rng.next_u32() for _ in range(count)]


def test_true_values_a():
    assert _first_u32s(ZERO_SEED) == VECTOR_A


def test_true_values_b():
    assert _first_u32s(IV_ONE_SEED) == [
        0xc01893d5, 0xb7dbe958, 0x8f65ec98, 0x64176604,
        0x36fc6724, 0xc82c6eec, 0x1b1c38a7, 0xc9b42a95,
        0x323ef123, 0x0a6a908b, 0xce757b68, 0x9f14f7bb,
        0xe4cde011, 0xaeb5173f, 0x89608c94, 0xb5cf46ca]


def test_true_values_c():
    assert _first_u32s(KEY_55_SEED) == [
        0x518251a4, 0x04b4930a, 0xb02af931, 0x0639f032,
        0xbcb4a47a, 0x5722480b, 0x2bf99f72, 0xcdc0e566,
        0x310f0c56, 0xd3cc83e8, 0x663db8ef, 0x62dfe07f,
        0x593e1790, 0xc5ceaa9c, 0xab03806f, 0xc9a6e5a0]


def test_true_values_u64():
    rng = Hc128Rng.from_seed(ZERO_SEED)
    assert [rng.next_u64() for _ in range(8)] == [
        0x3bfd03a073150082, 0xaa63af0efb2fd77f,
        0xa7dc29b6de122fc6, 0x8b75ec6862a68527,
        0x818960059036db1e, 0x491fbf9a00ade078,
        0x6c3d6e241cdc3013, 0x9cd5710290f664b2]

    for _ in range(800):
        rng.next_u64()

    assert [rng.next_u64() for _ in range(8)] == [
        0xd8c4d6ca84d0fc10, 0xf16a5d91dc66e8e7,
        0xd800de5bc37a8653, 0x7bae1f88c0dfbb4c,
        0x3bfe1f374e6d4d14, 0x424b55676be3fa06,
        0xe3a1e8758cbff579, 0x417f7198c5652bcd]


def test_true_values_bytes():
    rng = Hc128Rng.from_seed(KEY_55_SEED)
    expected = bytes([
        0x31, 0xf9, 0x2a, 0xb0, 0x32, 0xf0, 0x39, 0x06,
        0x7a, 0xa4, 0xb4, 0xbc, 0x0b, 0x48, 0x22, 0x57,
        0x72, 0x9f, 0xf9, 0x2b, 0x66, 0xe5, 0xc0, 0xcd,
        0x56, 0x0c, 0x0f, 0x31, 0xe8, 0x83, 0xcc, 0xd3,
        0xef, 0xb8, 0x3d, 0x66, 0x7f, 0xe0, 0xdf, 0x62,
        0x90, 0x17, 0x3e, 0x59, 0x9c, 0xaa, 0xce, 0xc5,
        0x6f, 0x80, 0x03, 0xab, 0xa0, 0xe5, 0xa6, 0xc9,
        0x60, 0x95, 0x84, 0x7a, 0xa5, 0x68, 0x5a, 0x84,
        0xea, 0xd5, 0xf3, 0xea, 0x73, 0xa9, 0xad, 0x01,
        0x79, 0x7d, 0xbe, 0x9f, 0xea, 0xe3, 0xf9, 0x74,
        0x0e, 0xda, 0x2f, 0xa0, 0xe4, 0x7b, 0x4b, 0x1b,
        0xdd, 0x17, 0x69, 0x4a, 0xfe, 0x9f, 0x56, 0x95,
        0xad, 0x83, 0x6b, 0x9d, 0x60, 0xa1, 0x99, 0x96,
        0x90, 0x00, 0x66, 0x7f, 0xfa, 0x7e, 0x65, 0xe9,
        0xac, 0x8b, 0x92, 0x34, 0x77, 0xb4, 0x23, 0xd0,
        0xb9, 0xab, 0xb1, 0x47, 0x7d, 0x4a, 0x13, 0x0a])
    assert rng.next_u64() == 0x04b4930a518251a4
    buffer = rng.fill_bytes(16 * 4 * 2)
    assert buffer == expected


def test_clone_produces_same_stream():
    rng1 = Hc128Rng.from_seed(KEY_55_SEED)
    rng1.next_u32()
    rng2 = copy.deepcopy(rng1)
    assert rng1 == rng2
    for _ in range(16):
        assert rng1.next_u32() == rng2.next_u32()


def test_clone_is_independent():
    rng1 = Hc128Rng.from_seed(ZERO_SEED)
    rng2 = copy.deepcopy(rng1)
    rng1.next_u32()
    assert rng1 != rng2
    assert rng2.next_u32() == VECTOR_A[0]


def test_equality_depends_on_seed():
    assert Hc128Rng.from_seed(ZERO_SEED) == Hc128Rng.from_seed(ZERO_SEED)
    assert not Hc128Rng.from_seed(ZERO_SEED) == Hc128Rng.from_seed(KEY_55_SEED)


def test_from_rng_uses_32_bytes_of_source():
    source = Hc128Rng.from_seed(ZERO_SEED)
    derived = Hc128Rng.from_rng(source)
    seed = struct.pack("<8I", *VECTOR_A[:8])
    assert derived == Hc128Rng.from_seed(seed)
    assert source.next_u32() == VECTOR_A[8]


def test_core_generate_matches_vector():
    core = Hc128Core.from_seed(ZERO_SEED)
    assert core.generate() == VECTOR_A


def test_core_generate_blocks_cover_full_cycle():
    core = Hc128Core.from_seed(ZERO_SEED)
    first = core.generate()
    for _ in range(63):
        block = core.generate()
        assert len(block) == 16
        assert all(0 <= word <= 0xFFFFFFFF for word in block)
    assert core.generate() != first


def test_core_equality_and_repr():
    core1 = Hc128Core.from_seed(IV_ONE_SEED)
    core2 = Hc128Core.from_seed(IV_ONE_SEED)
    assert core1 == core2
    core1.generate()
    assert not core1 == core2
    assert repr(core1) == "Hc128Core()"


def test_seed_accepts_list_of_ints():
    rng = Hc128Rng.from_seed([0] * 32)
    assert rng.next_u32() == VECTOR_A[0]


@pytest.mark.parametrize("length", [0, 16, 31, 33])
def test_bad_seed_length(length):
    with pytest.raises(ValueError):
        Hc128Rng.from_seed(bytes(length))