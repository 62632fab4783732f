"""Two-bit k-mer encoding, reverse complements and minimizers.

Nucleotides are encoded as A -> 00, C -> 01, G -> 11, T -> 10, which is
``(ord(c) >> 1) & 3`` for the upper-case letters.
"""

from .hashing import hash64

KMER_BITS = 64
MAX_K = KMER_BITS // 2

_MASK64 = (1 << 64) - 1
_NUCLEOTIDES = "ACTG"
_VALID = frozenset("ACGT")
_COMPLEMENT = {"A": "T", "C": "G", "G": "C", "T": "A"}


def _check_k(k: int) -> None:
    if not 0 < k <= MAX_K:
        raise ValueError(f"k must be in [1, {MAX_K}], got {k}")


def msb(x: int) -> int:
    """Return the position of the most significant set bit of ``x``."""
    if x <= 0:
        raise ValueError("msb is undefined for values <= 0")
    return x.bit_length() - 1


def ceil_log2(x: int) -> int:
    """Return ceil(log2(x)), with 0 for x <= 1."""
    return msb(x - 1) + 1 if x > 1 else 0


def char_to_uint(c: str) -> int:
    """Return the two-bit code of a nucleotide character."""
    return (ord(c) >> 1) & 3


def uint_to_char(x: int) -> str:
    """Return the nucleotide character of a two-bit code."""
    if not 0 <= x <= 3:
        raise ValueError(f"nucleotide code must be in [0, 3], got {x}")
    return _NUCLEOTIDES[x]


def _prefix(s: str, k: int) -> str:
    _check_k(k)
    if len(s) < k:
        raise ValueError(f"string of length {len(s)} is shorter than k = {k}")
    return s[:k]


def string_to_uint_kmer(s: str, k: int) -> int:
    """Encode the first ``k`` characters, first character in the high bits.

    This encoding preserves the lexicographic order of k-mers.
    """
    x = 0
    for c in _prefix(s, k):
        x = (x << 2) | char_to_uint(c)
    return x


def uint_kmer_to_string(x: int, k: int) -> str:
    """Decode a k-mer produced by :func:`string_to_uint_kmer`."""
    _check_k(k)
    return "".join(uint_to_char((x >> (2 * (k - 1 - i))) & 3) for i in range(k))


def string_to_uint_kmer_no_reverse(s: str, k: int) -> int:
    """Encode the first ``k`` characters, first character in the low bits."""
    return sum(char_to_uint(c) << (2 * i) for i, c in enumerate(_prefix(s, k)))


def uint_kmer_to_string_no_reverse(x: int, k: int) -> str:
    """Decode a k-mer produced by :func:`string_to_uint_kmer_no_reverse`."""
    _check_k(k)
    return "".join(uint_to_char((x >> (2 * i)) & 3) for i in range(k))


def reverse_complement_kmer(x: int, k: int) -> int:
    """Return the reverse complement of an encoded k-mer of length ``k``."""
    _check_k(k)
    res = (x ^ 0xAAAAAAAAAAAAAAAA) & _MASK64
    res = int.from_bytes(res.to_bytes(8, "little"), "big")  # swap byte order
    c1 = 0x0F0F0F0F0F0F0F0F
    c2 = 0x3333333333333333
    res = ((res & c1) << 4 | (res & (c1 << 4)) >> 4) & _MASK64
    res = ((res & c2) << 2 | (res & (c2 << 2)) >> 2) & _MASK64
    return res >> (64 - 2 * k)


def reverse_complement(sequence: str) -> str:
    """Return the reverse complement of a DNA string; other characters become NUL."""
    return "".join(_COMPLEMENT.get(c, "\0") for c in reversed(sequence))


def is_valid(sequence: str) -> bool:
    """Tell whether every character is one of A, C, G, T."""
    return all(c in _VALID for c in sequence)


def compute_minimizer_pos(kmer: int, k: int, m: int, seed: int) -> tuple[int, int]:
    """Return (minimizer, position) of the m-mer of smallest hash.

    Positions count m-mers from the low bits; ties keep the first one found.
    """
    _check_k(k)
    if not 0 < m <= k:
        raise ValueError(f"m must be in [1, k], got m = {m}, k = {k}")
    mask = (1 << (2 * m)) - 1
    min_hash = _MASK64
    minimizer = _MASK64
    pos = 0
    for i in range(k - m + 1):
        mmer = kmer & mask
        h = hash64(mmer, seed)
        if h < min_hash:
            min_hash = h
            minimizer = mmer
            pos = i
        kmer >>= 2
    return minimizer, pos


def compute_minimizer(kmer: int, k: int, m: int, seed: int) -> int:
    """Return the m-mer of ``kmer`` with the smallest hash."""
    return compute_minimizer_pos(kmer, k, m, seed)[0]