"""Pairwise fingerprint intersection and similarity scoring."""

from __future__ import annotations

from collections.abc import Sequence

from tokenprint.compare.align import Aligner
from tokenprint.compare.models import ScoredDiff
from tokenprint.config import InvalidConfigurationError
from tokenprint.files import TokenizedFile
from tokenprint.index import FingerprintIndex


def validate_hash_filter(total_files: int, max_hash_percentage: float | None) -> None:
    """Reject a hash percentage filter that cannot discriminate."""
    if max_hash_percentage is not None and total_files == 2:
        raise InvalidConfigurationError(
            "max_hash_percentage is set but exactly two files are compared. Every shared "
            "hash is then present in 100% of the files, so this option only makes sense "
            "when comparing more than two files."
        )


class PairComparer:
    """Compare files of one run through its frozen fingerprint index.

    A file id is the position of the file in ``files``; the index must have
    been filled with the same ids.
    """

    def __init__(
        self,
        index: FingerprintIndex,
        files: Sequence[TokenizedFile],
        *,
        max_hash_percentage: float | None = None,
        max_hash_count: int | None = None,
        aligner: Aligner | None = None,
    ) -> None:
        validate_hash_filter(len(files), max_hash_percentage)
        if index.file_ids != tuple(range(len(files))):
            raise ValueError("FingerprintIndex file ids do not match the compared files.")
        self._index = index
        self._files = tuple(files)
        self._max_hash_percentage = max_hash_percentage
        self._max_hash_count = max_hash_count
        self._aligner = aligner or Aligner()
        self._ignored: dict[int, bool] = {}
        self._counted: dict[int, frozenset[int]] = {}
        self._shared_pairs = set(index.shared_file_pairs())

    def ignored(self, hash_value: int) -> bool:
        """Return True when a hash is too common to count as evidence."""
        cached = self._ignored.get(hash_value)
        if cached is not None:
            return cached
        count = self._index.file_count(hash_value)
        result = False
        if self._max_hash_percentage is not None:
            result = count / len(self._files) > self._max_hash_percentage
        if self._max_hash_count is not None and count > self._max_hash_count:
            result = True
        self._ignored[hash_value] = result
        return result

    def counted_hashes(self, file_id: int) -> frozenset[int]:
        """Return the distinct hashes of a file that survive common-hash filtering."""
        counted = self._counted.get(file_id)
        if counted is None:
            counted = frozenset(
                hash_value
                for hash_value in self._index.hashes_of(file_id)
                if not self.ignored(hash_value)
            )
            self._counted[file_id] = counted
        return counted

    def matched_pairs(self, left_id: int, right_id: int) -> list[tuple[int, int]]:
        """Return sorted (left ordinal, right ordinal) pairs for every shared counted hash."""
        pairs: list[tuple[int, int]] = []
        for hash_value in self.counted_hashes(left_id) & self.counted_hashes(right_id):
            left_ordinals: list[int] = []
            right_ordinals: list[int] = []
            for occurrence in self._index.occurrences_of(hash_value):
                if occurrence.file_id == left_id:
                    left_ordinals.append(occurrence.index)
                elif occurrence.file_id == right_id:
                    right_ordinals.append(occurrence.index)
            pairs.extend((left, right) for left in left_ordinals for right in right_ordinals)
        pairs.sort()
        return pairs

    def similarity(self, left_id: int, right_id: int) -> float:
        """Dice coefficient over the distinct counted hashes of both files."""
        left_hashes = self.counted_hashes(left_id)
        right_hashes = self.counted_hashes(right_id)
        total = len(left_hashes) + len(right_hashes)
        if total == 0:
            return 0.0
        return 2 * len(left_hashes & right_hashes) / total

    def compare(self, left_id: int, right_id: int) -> ScoredDiff:
        """Score a pair and align its matching fingerprints into blocks."""
        left = self._files[left_id]
        right = self._files[right_id]
        if tuple(sorted((left_id, right_id))) not in self._shared_pairs:
            return ScoredDiff(left=left, right=right, similarity=0.0, matched_blocks=())
        pairs = self.matched_pairs(left_id, right_id)
        similarity = self.similarity(left_id, right_id) if pairs else 0.0
        return ScoredDiff(
            left=left,
            right=right,
            similarity=similarity,
            matched_blocks=self._aligner.align(pairs, left, right),
        )
