"""Winnowing: select a sparse, window-covering subset of k-mer hashes.

Based on "Winnowing: Local Algorithms for Document Fingerprinting"
(Schleimer, Wilkerson and Aiken, SIGMOD 2003). Within every window of
``window_size`` consecutive k-mers at least one hash is selected, so any
shared run of at least ``window_size + k - 1`` symbols yields a shared
fingerprint.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from tokenprint.hashing.rolling import RollingHash, symbol_value
from tokenprint.index.models import Fingerprint

# Larger than any hash RollingHash can produce.
_SENTINEL = 1 << 64


class Winnower:
    """Streaming winnowing with rightmost-minimum selection."""

    def __init__(self, window_size: int, k: int) -> None:
        if window_size < 1:
            raise ValueError("Winnower window_size must be a positive integer.")
        if k < 1:
            raise ValueError("Winnower k must be a positive integer.")
        self.window_size = window_size
        self.k = k

    def winnow(self, symbols: Iterable[str]) -> Iterator[Fingerprint]:
        """Yield fingerprints in increasing k-mer position order."""
        return self.winnow_values(symbol_value(symbol) for symbol in symbols)

    def winnow_values(self, values: Iterable[int]) -> Iterator[Fingerprint]:
        """Winnow an already-mapped stream of integer symbol values."""
        w = self.window_size
        rolling = RollingHash(self.k)
        buffer = [_SENTINEL] * w
        buffer_pos = 0
        min_pos = 0
        kmer_index = -self.k

        # After each step min_pos holds the slot of the rightmost minimal hash
        # of the current window. A hash is yielded only when it becomes selected.
        for value in values:
            kmer_index += 1
            current = rolling.next_hash(value)
            if kmer_index < 0:
                continue
            buffer_pos = (buffer_pos + 1) % w
            buffer[buffer_pos] = current
            if min_pos == buffer_pos:
                # Previous minimum fell out of the window: rescan from the
                # oldest slot so ties resolve to the rightmost position.
                min_pos = (buffer_pos + 1) % w
                for offset in range(2, w + 1):
                    index = (buffer_pos + offset) % w
                    if buffer[index] <= buffer[min_pos]:
                        min_pos = index
                yield Fingerprint(
                    hash=buffer[min_pos],
                    kmer_position=kmer_index - (buffer_pos - min_pos) % w,
                )
            elif buffer[buffer_pos] <= buffer[min_pos]:
                min_pos = buffer_pos
                yield Fingerprint(hash=buffer[min_pos], kmer_position=kmer_index)
