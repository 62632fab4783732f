"""Sliding-window minimizer computation over consecutive k-mers."""

from collections import deque
from dataclasses import dataclass

from .hashing import hash64
from .kmers import MAX_K


@dataclass(frozen=True)
class _MMer:
    hash: int
    position: int
    value: int


class MinimizerEnumerator:
    """Track the minimizer of a stream of overlapping k-mers.

    Each call to :meth:`next` costs amortised constant hashing when the
    k-mer is the previous one shifted by a single nucleotide.
    """

    def __init__(self, k: int, m: int, seed: int) -> None:
        if not 0 < k <= MAX_K:
            raise ValueError(f"k must be in [1, {MAX_K}], got {k}")
        if not 0 < m <= k:
            raise ValueError(f"m must be in [1, k], got m = {m}, k = {k}")
        self._k = k
        self._m = m
        self._seed = seed
        self._mask = (1 << (2 * m)) - 1
        self._window = k - m + 1
        self._position = 0
        # Never holds more than k - m + 1 entries.
        self._queue: deque[_MMer] = deque()

    def next(self, kmer: int, clear: bool, reverse: bool = False) -> int:
        """Feed the next k-mer and return its minimizer.

        With ``clear`` every m-mer of ``kmer`` is consumed, which starts a
        fresh window. Otherwise ``kmer`` must extend the previous one: in
        forward mode the new m-mer sits in the high bits, in ``reverse``
        mode (a reverse-complemented stream) it sits in the low bits.
        """
        k, m, mask = self._k, self._m, self._mask
        if clear:
            if reverse:
                mmers = ((kmer >> (2 * (k - m - i))) & mask for i in range(self._window))
            else:
                mmers = ((kmer >> (2 * i)) & mask for i in range(self._window))
            for mmer in mmers:
                self._eat(mmer)
        elif reverse:
            self._eat(kmer & mask)
        else:
            self._eat((kmer >> (2 * (k - m))) & mask)
        return self._queue[0].value

    def _eat(self, mmer: int) -> None:
        h = hash64(mmer, self._seed)
        queue = self._queue
        oldest_outside = self._position + self._m - 1 - self._k
        while queue and queue[0].position <= oldest_outside:
            queue.popleft()
        while queue and h < queue[-1].hash:
            queue.pop()
        queue.append(_MMer(h, self._position, mmer))
        self._position += 1