"""MurmurHash2 (64-bit) and the k-mer hashers built on it."""

import struct

_MASK64 = (1 << 64) - 1
_M = 0xC6A4A7935BD1E995
_R = 47


def _check_uint64(x: int) -> int:
    if not 0 <= x <= _MASK64:
        raise ValueError(f"value {x} does not fit in 64 unsigned bits")
    return x


def murmurhash2_64(data: bytes, seed: int) -> int:
    """Return the 64-bit MurmurHash2 (variant 64A) of ``data``."""
    data = bytes(data)
    length = len(data)
    seed &= _MASK64
    h = (seed ^ (length * _M)) & _MASK64

    body_len = length - length % 8
    for (k,) in struct.iter_unpack("<Q", data[:body_len]):
        k = (k * _M) & _MASK64
        k ^= k >> _R
        k = (k * _M) & _MASK64
        h ^= k
        h = (h * _M) & _MASK64

    tail = data[body_len:]
    if tail:
        h ^= int.from_bytes(tail, "little")
        h = (h * _M) & _MASK64

    h ^= h >> _R
    h = (h * _M) & _MASK64
    h ^= h >> _R
    return h


def hash64(x: int, seed: int) -> int:
    """Hash a 64-bit unsigned integer as its eight little-endian bytes."""
    return murmurhash2_64(struct.pack("<Q", _check_uint64(x)), seed)


def kmer_hash128(x: int, seed: int) -> tuple[int, int]:
    """Return the 128-bit k-mer hash as a pair of 64-bit halves."""
    _check_uint64(x)
    seed &= _MASK64
    return hash64(x, seed), hash64(x, ~seed & _MASK64)