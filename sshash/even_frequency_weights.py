"""Weights of even frequency, served in increasing order of frequency."""

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass
class _Entry:
    weight: int
    freq: int


class EvenFrequencyWeights:
    """Weights with even frequency, kept sorted by their current frequency.

    Frequencies only decrease, two at a time. Entries are grouped into
    contiguous ranges of equal frequency so that the weight of lowest
    positive frequency is always found in constant time.
    """

    def __init__(self, freq: Mapping[int, int]) -> None:
        self._entries = sorted(
            (_Entry(w, f) for w, f in freq.items() if f % 2 == 0),
            key=lambda e: e.freq,
        )
        self._positions = {e.weight: i for i, e in enumerate(self._entries)}
        # frequency -> [begin, end) range into the entries
        self._ranges: dict[int, list[int]] = {0: [0, 0]}
        for i, entry in enumerate(self._entries):
            bounds = self._ranges.get(entry.freq)
            if bounds is None:
                self._ranges[entry.freq] = [i, i + 1]
            else:
                bounds[1] = i + 1

    def has_next(self) -> bool:
        """Tell whether some weight still has a positive frequency."""
        return self._ranges[0][1] < len(self._entries)

    def pop_min(self) -> int:
        """Return a weight of lowest positive frequency, decreasing it by two."""
        if not self.has_next():
            raise IndexError("no weight of positive even frequency left")
        weight = self._entries[self._ranges[0][1]].weight
        self.decrease_freq(weight)
        return weight

    def decrease_freq(self, w: int) -> None:
        """Decrease the frequency of ``w`` by two; unknown weights are ignored."""
        entries = self._entries
        i = self._ranges[0][1]
        if i >= len(entries) or entries[i].weight != w:
            j = self._positions.get(w)
            if j is None:
                return
            f = entries[j].freq
            if f < 2:
                raise ValueError(f"frequency of weight {w} is already zero")
            i = self._ranges[f][0]
            other = entries[i].weight
            entries[i], entries[j] = entries[j], entries[i]
            self._positions[w] = i
            self._positions[other] = j

        f = entries[i].freq
        lower = self._ranges.get(f - 2)
        if lower is None:
            self._ranges[f - 2] = [i, i + 1]
        else:
            lower[1] += 1
        bounds = self._ranges[f]
        bounds[0] += 1
        if bounds[0] == bounds[1]:
            del self._ranges[f]
        entries[i].freq = f - 2