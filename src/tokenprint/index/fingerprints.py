"""Cross-file fingerprint index owned by a single analysis run."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from itertools import combinations

from tokenprint.index.models import Fingerprint, Occurrence


class FingerprintIndex:
    """Hash table from fingerprint hash to every (file, position) occurrence.

    The index is filled by one writer after per-file fingerprinting and then
    frozen; comparisons only read it.
    """

    def __init__(self) -> None:
        self._occurrences: dict[int, list[Occurrence]] = {}
        self._file_hashes: dict[int, set[int]] = {}
        self._frozen = False

    def __len__(self) -> int:
        return len(self._occurrences)

    def __contains__(self, hash_value: object) -> bool:
        return hash_value in self._occurrences

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def file_ids(self) -> tuple[int, ...]:
        return tuple(sorted(self._file_hashes))

    def freeze(self) -> None:
        """Reject further inserts."""
        self._frozen = True

    def insert(self, file_id: int, index: int, fingerprint: Fingerprint) -> None:
        """Record one fingerprint occurrence for a file."""
        if self._frozen:
            raise RuntimeError("FingerprintIndex is frozen; build a new index for a new run.")
        self._occurrences.setdefault(fingerprint.hash, []).append(
            Occurrence(file_id=file_id, index=index, kmer_position=fingerprint.kmer_position)
        )
        self._file_hashes.setdefault(file_id, set()).add(fingerprint.hash)

    def add_file(self, file_id: int, fingerprints: Iterable[Fingerprint]) -> None:
        """Insert a file's fingerprints in emission order."""
        self._file_hashes.setdefault(file_id, set())
        for index, fingerprint in enumerate(fingerprints):
            self.insert(file_id, index, fingerprint)

    def occurrences_of(self, hash_value: int) -> list[Occurrence]:
        """Return all occurrences of a hash, in insertion order."""
        return list(self._occurrences.get(hash_value, ()))

    def file_count(self, hash_value: int) -> int:
        """Return the number of distinct files containing a hash."""
        return len({item.file_id for item in self._occurrences.get(hash_value, ())})

    def hashes_of(self, file_id: int) -> frozenset[int]:
        """Return the distinct hashes fingerprinted for a file."""
        return frozenset(self._file_hashes.get(file_id, ()))

    def shared_file_pairs(self) -> Iterator[tuple[int, int]]:
        """Yield sorted file id pairs that share at least one hash."""
        seen: set[tuple[int, int]] = set()
        for occurrences in self._occurrences.values():
            owners = sorted({item.file_id for item in occurrences})
            for pair in combinations(owners, 2):
                seen.add(pair)
        yield from sorted(seen)
