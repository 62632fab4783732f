"""Elias-Fano encoding of a non-decreasing sequence of integers."""

from collections.abc import Iterable, Iterator

from .kmers import msb


def _words(bits: int) -> int:
    return (bits + 63) // 64


class EliasFanoSequence:
    """A sorted integer sequence stored as Elias-Fano high and low parts.

    The universe is the largest value and is what :meth:`back` returns.
    """

    def __init__(self, values: Iterable[int], universe: int) -> None:
        values = list(values)
        n = len(values)
        self._universe = 0
        self._low_width = 0
        self._high_len = 0
        self._low: list[int] = []
        self._ones: list[int] = []
        self._zeros: list[int] = []
        if n == 0:
            return
        if universe < 0:
            raise ValueError(f"universe must be >= 0, got {universe}")

        width = msb(universe // n) if universe // n else 0
        high_len = n + (universe >> width) + 1
        low_mask = (1 << width) - 1

        ones = []
        last = 0
        for i, v in enumerate(values):
            if v < 0:
                raise ValueError(f"negative value {v} at position {i}")
            if v < last:
                raise ValueError(
                    f"sequence is not sorted: value {v} at position {i}/{n} follows {last}"
                )
            if v > universe:
                raise ValueError(f"value {v} at position {i} exceeds universe {universe}")
            ones.append((v >> width) + i)
            last = v

        one_set = set(ones)
        self._universe = universe
        self._low_width = width
        self._high_len = high_len
        self._low = [v & low_mask for v in values]
        self._ones = ones
        self._zeros = [p for p in range(high_len) if p not in one_set]

    def __len__(self) -> int:
        return len(self._low)

    def __iter__(self) -> Iterator[int]:
        return self.iter_from(0)

    def iter_from(self, pos: int) -> Iterator[int]:
        """Yield the values from position ``pos`` to the end."""
        if not 0 <= pos <= len(self):
            raise IndexError(f"position {pos} out of range for size {len(self)}")
        return self._iter_from(pos)

    def _iter_from(self, pos: int) -> Iterator[int]:
        width = self._low_width
        pairs = zip(self._ones[pos:], self._low[pos:])
        for i, (high, low) in enumerate(pairs, start=pos):
            yield ((high - i) << width) | low

    def access(self, i: int) -> int:
        """Return the value at position ``i``."""
        if not 0 <= i < len(self):
            raise IndexError(f"position {i} out of range for size {len(self)}")
        return ((self._ones[i] - i) << self._low_width) | self._low[i]

    def back(self) -> int:
        """Return the largest value (the universe)."""
        return self._universe

    def _bucket_begin(self, x: int) -> int:
        h_x = x >> self._low_width
        return self._zeros[h_x - 1] - h_x + 1 if h_x else 0

    def _require_nonempty(self) -> None:
        if not self._low:
            raise ValueError("the sequence is empty")

    def next_geq(self, x: int) -> tuple[int, int]:
        """Return (position, value) of the rightmost smallest element >= x.

        If ``x`` is greater than :meth:`back`, return (len(self), back()).
        """
        self._require_nonempty()
        back = self._universe
        if x >= back:
            return len(self) - (x == back), back

        begin = self._bucket_begin(x)
        values = self._iter_from(begin)
        pos = begin
        for val in values:
            if val >= x:
                break
            pos += 1
        else:
            return len(self), back

        if val == x:
            for following in values:
                if following != x:
                    break
                pos += 1
        return pos, val

    def prev_leq(self, x: int) -> int:
        """Return the position of the rightmost largest element <= x.

        If ``x`` is greater than :meth:`back`, return len(self).
        """
        pos, val = self.next_geq(x)
        return pos - (val > x)

    def locate(self, x: int) -> tuple[int, int, int]:
        """Return (pos_next, prev, next) with prev < x <= next.

        Assumes distinct elements, a first element of 0 and x <= back().
        """
        self._require_nonempty()
        if x == 0:
            return 0, 0, 0
        if x > self._universe:
            raise ValueError(f"{x} is greater than the largest element {self._universe}")

        begin = self._bucket_begin(x)
        values = self._iter_from(begin)
        pos_next = begin
        nxt = next(values)
        prev = nxt
        while nxt < x:
            pos_next += 1
            prev = nxt
            nxt = next(values)
        if pos_next == 0:
            raise ValueError("the first element of the sequence must be 0")
        return pos_next, prev if pos_next != begin else self.access(pos_next - 1), nxt

    def num_bits(self) -> int:
        """Return the bits taken by the universe, the high bits and the low bits."""
        return 64 * (1 + _words(self._high_len) + _words(len(self._low) * self._low_width))