"""Source regions and fingerprint index ranges."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(slots=True, frozen=True, order=True)
class Region:
    """Span of source text from (start_line, start_col) up to (end_line, end_col)."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_line, self.start_col)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_col)

    @property
    def is_degenerate(self) -> bool:
        """Return True when the region ends before it starts."""
        return self.end < self.start

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def contains(self, other: Region) -> bool:
        """Return True when other lies entirely inside this region."""
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: Region) -> bool:
        """Return True when both regions share at least one position."""
        return self.start < other.end and other.start < self.end

    @classmethod
    def from_points(cls, start: tuple[int, int], end: tuple[int, int]) -> Region:
        return cls(start[0], start[1], end[0], end[1])

    @classmethod
    def merge(cls, *regions: Region) -> Region:
        """Return the smallest region covering all given regions."""
        if not regions:
            raise ValueError("Region.merge requires at least one region.")
        start = min(region.start for region in regions)
        end = max(region.end for region in regions)
        return cls.from_points(start, end)

    @classmethod
    def first_diff(cls, region: Region, others: Iterable[Region]) -> Region | None:
        """Return the first part of region not covered by any of others.

        Returns None when others cover region completely.
        """
        cursor = region.start
        for other in sorted(others, key=lambda item: (item.start, item.end)):
            if other.end <= cursor:
                continue
            if other.start >= region.end:
                break
            if other.start > cursor:
                return cls.from_points(cursor, other.start)
            cursor = other.end
            if cursor >= region.end:
                return None
        if cursor < region.end:
            return cls.from_points(cursor, region.end)
        return None


@dataclass(slots=True, frozen=True, order=True)
class Range:
    """Half-open range [start, stop) over a file's fingerprint sequence."""

    start: int
    stop: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.stop < self.start:
            raise ValueError(f"Invalid range [{self.start}, {self.stop}).")

    def __len__(self) -> int:
        return self.stop - self.start

    def __contains__(self, position: object) -> bool:
        return isinstance(position, int) and self.start <= position < self.stop

    def covers(self, other: Range) -> bool:
        """Return True when other lies entirely inside this range."""
        return self.start <= other.start and other.stop <= self.stop
