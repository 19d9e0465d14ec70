"""Rolling polynomial hash over a fixed-length window of symbols."""

from __future__ import annotations

import hashlib
from functools import lru_cache

MODULUS = (1 << 61) - 1
BASE = 1_000_003


@lru_cache(maxsize=65_536)
def symbol_value(symbol: str) -> int:
    """Map a symbol to a stable 64-bit integer, identical across processes."""
    digest = hashlib.blake2b(symbol.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


class RollingHash:
    """Hash of the last k symbol values, updated in O(1) per symbol."""

    def __init__(self, k: int) -> None:
        if k < 1:
            raise ValueError("RollingHash window length k must be a positive integer.")
        self._k = k
        self._window = [0] * k
        self._pos = 0
        self._fed = 0
        self._hash = 0
        # Weight of the symbol leaving the window: BASE ** (k - 1).
        self._leading_weight = pow(BASE, k - 1, MODULUS)

    @property
    def k(self) -> int:
        return self._k

    @property
    def filled(self) -> bool:
        """Return True once k symbols have been fed."""
        return self._fed >= self._k

    def next_hash(self, value: int) -> int:
        """Feed one symbol value and return the hash of the current window."""
        value %= MODULUS
        leaving = self._window[self._pos]
        self._window[self._pos] = value
        self._pos = (self._pos + 1) % self._k
        self._fed += 1
        self._hash = (
            (self._hash - leaving * self._leading_weight) * BASE + value
        ) % MODULUS
        return self._hash
