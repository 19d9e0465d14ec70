"""Typed models for pairwise comparison results."""

from __future__ import annotations

from dataclasses import dataclass

from tokenprint.files import TokenizedFile
from tokenprint.region import Range, Region


@dataclass(slots=True, frozen=True)
class Match:
    """One contiguous run of aligned fingerprints between two files."""

    left_kmers: Range
    right_kmers: Range


@dataclass(slots=True, frozen=True)
class Block:
    """A match resolved to source regions in both files."""

    left_kmers: Range
    right_kmers: Range
    left_selection: Region
    right_selection: Region

    @property
    def match(self) -> Match:
        return Match(left_kmers=self.left_kmers, right_kmers=self.right_kmers)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable view."""
        return {
            "left_kmers": [self.left_kmers.start, self.left_kmers.stop],
            "right_kmers": [self.right_kmers.start, self.right_kmers.stop],
            "left_selection": _region_list(self.left_selection),
            "right_selection": _region_list(self.right_selection),
        }


@dataclass(slots=True, frozen=True)
class ScoredDiff:
    """Similarity and matching blocks for one file pair."""

    left: TokenizedFile
    right: TokenizedFile
    similarity: float
    matched_blocks: tuple[Block, ...]

    def blocks(self) -> tuple[Block, ...]:
        """Return blocks in left-file source order."""
        return self.matched_blocks

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable view."""
        return {
            "left": self.left.path,
            "right": self.right.path,
            "similarity": self.similarity,
            "blocks": [block.to_dict() for block in self.matched_blocks],
        }


def _region_list(region: Region) -> list[int]:
    return [region.start_line, region.start_col, region.end_line, region.end_col]
