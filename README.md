# rngcores

Random number generators in pure Python:

* `rngcores.hc128.Hc128Rng`: the HC-128 stream cipher used as a
  cryptographically secure generator. It is seeded with 32 bytes, a 128-bit
  key followed by a 128-bit IV.
* `rngcores.isaac.IsaacRng`: the ISAAC generator, which works on 32-bit words.
* `rngcores.isaac64.Isaac64Rng`: ISAAC-64, the 64-bit variant of ISAAC.
* `rngcores.jitter.JitterRng`: a true random number generator. It collects
  entropy from timing jitter in CPU work and in memory accesses.

The seeded generators reproduce the published test vectors of their
algorithms, so their output streams match other conforming implementations.

## Installation

```
pip install rngcores
```

## Seeded generators

```python
from rngcores.hc128 import Hc128Rng
from rngcores.isaac import IsaacRng
from rngcores.isaac64 import Isaac64Rng

rng = Hc128Rng.from_seed(bytes(32))
rng.next_u32()       # 0x73150082
rng.next_u64()
rng.fill_bytes(16)   # 16 bytes

isaac = IsaacRng.seed_from_u64(0)
isaac64 = Isaac64Rng.from_seed(bytes(range(32)))

# Seed one generator from another one's fill_bytes output
child = IsaacRng.from_rng(isaac)
```

Each seeded generator takes a 32-byte seed through `from_seed`. A seed of
any other length raises `ValueError`.

* `IsaacRng` and `Isaac64Rng` also take an unsigned 64-bit integer through
  `seed_from_u64`. A seed of `0` gives the same stream as the reference
  algorithm used unseeded.
* `from_rng` accepts any object with a `fill_bytes(length)` method.
  * `Hc128Rng` draws 32 bytes from it.
  * `IsaacRng` and `Isaac64Rng` draw enough bytes to fill their whole state.

Two generators compare equal when their internal state and read position are
the same. `copy.deepcopy` gives an independent generator that continues the
same stream.

The cores are also available on their own: `Hc128Core`, `IsaacCore` and
`Isaac64Core`. Each has a `generate()` method that returns one block of words.

## Block machinery

`rngcores.block` turns any object with a `generate()` method into a
generator:

* `BlockRng` buffers blocks of 32-bit words. `next_u64` joins two words,
  with the low word first.
* `BlockRng64` buffers blocks of 64-bit words. `next_u32` uses both halves of
  each word, with the low half first.

Both classes provide `next_u32`, `next_u64`, `fill_bytes(length)`, `index()`
and `generate_and_set(index)`. The functions `read_u32_le` and `read_u64_le`
decode little-endian words from bytes.

## Jitter entropy

```python
from rngcores.jitter import JitterRng
from rngcores.platform import get_nstime
from rngcores.errors import TimerError

rng = JitterRng(get_nstime)
try:
    rounds = rng.test_timer()
except TimerError as err:
    print("timer unusable:", err, err.kind, hex(err.code))
else:
    rng.set_rounds(rounds)
    rng.next_u64()          # prime the entropy pool
    value = rng.next_u64()
```

`JitterRng` needs a timer: a callable that returns a high-resolution time
stamp. `rngcores.platform.get_nstime` returns wall-clock seconds shifted left
by 30 bits, ORed with the nanoseconds.

`test_timer` checks the following about the timer:

* it works at all;
* it is fine-grained;
* it is monotonic;
* its deltas vary enough;
* its measurements are not mostly stuck.

If the timer passes, `test_timer` returns the number of rounds needed per
64-bit output. If it fails, it raises `TimerError`. The error's `kind` is a
`TimerErrorKind` member, and its `code` is the numeric error code.

`set_rounds` accepts a value from 1 to 255. The default is 64.

`timer_stats(var_rounds)` returns the timer delta of a single run of the
noise sources.

The building blocks of the collector are in `rngcores.noise`: `EcState`,
`fold_time`, `lfsr`, `stir_pool` and `memaccess`.

`copy.copy` of a `JitterRng` gives a generator that shares the timer. Any
unused half of the last value stays with the original.

The jitter generator is slow, and it is not meant for cryptographic use.

## What this package does not do

* It provides no command-line tool.
* It does not read from operating-system entropy sources.
* `JitterRng` has no constructor that picks a timer by itself: pass one in.
* Generator state has no serialisation format.

## Running the tests

```
pip install -e ".[test]"
pytest
```