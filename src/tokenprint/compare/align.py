"""Cluster matched fingerprint pairs into diagonal runs and resolve them to blocks."""

from __future__ import annotations

from collections.abc import Iterable

from tokenprint.compare.models import Block, Match
from tokenprint.files import TokenizedFile
from tokenprint.region import Range


class Aligner:
    """Greedy diagonal clustering of (left ordinal, right ordinal) pairs.

    A pair continues a run when both of its coordinates advance by at least
    1 and at most ``gap_tolerance`` from the run's last pair.
    """

    def __init__(self, gap_tolerance: int = 1) -> None:
        if gap_tolerance < 1:
            raise ValueError("Aligner gap_tolerance must be a positive integer.")
        self.gap_tolerance = gap_tolerance

    def matches(self, pairs: Iterable[tuple[int, int]]) -> list[Match]:
        """Return maximal diagonal runs, without runs nested in another run."""
        runs: list[list[int]] = []
        # (last left, last right) -> index into runs of the open run ending there
        open_runs: dict[tuple[int, int], int] = {}
        for left, right in sorted(set(pairs)):
            run_index = self._predecessor(open_runs, left, right)
            if run_index is None:
                runs.append([left, right, left, right])
                open_runs[(left, right)] = len(runs) - 1
                continue
            run = runs[run_index]
            del open_runs[(run[2], run[3])]
            run[2], run[3] = left, right
            open_runs[(left, right)] = run_index

        found = [
            Match(
                left_kmers=Range(run[0], run[2] + 1),
                right_kmers=Range(run[1], run[3] + 1),
            )
            for run in runs
        ]
        return _drop_nested(found)

    def align(
        self,
        pairs: Iterable[tuple[int, int]],
        left: TokenizedFile,
        right: TokenizedFile,
    ) -> tuple[Block, ...]:
        """Return blocks ordered by left position, then right position."""
        blocks = [
            Block(
                left_kmers=match.left_kmers,
                right_kmers=match.right_kmers,
                left_selection=left.region_of(match.left_kmers),
                right_selection=right.region_of(match.right_kmers),
            )
            for match in self.matches(pairs)
        ]
        blocks.sort(key=lambda block: (block.left_kmers, block.right_kmers))
        return tuple(blocks)

    def _predecessor(
        self, open_runs: dict[tuple[int, int], int], left: int, right: int
    ) -> int | None:
        # Nearest predecessor first, so exact diagonals win over gapped ones.
        tolerance = self.gap_tolerance
        for distance in range(2, 2 * tolerance + 1):
            for left_gap in range(max(1, distance - tolerance), min(tolerance, distance - 1) + 1):
                run_index = open_runs.get((left - left_gap, right - (distance - left_gap)))
                if run_index is not None:
                    return run_index
        return None


def _drop_nested(matches: list[Match]) -> list[Match]:
    """Drop runs covered on both sides by another run.

    Repeated k-mers pair up off the main diagonal; those short runs sit
    inside the ranges of the real run and carry no extra information.
    """
    ordered = sorted(
        matches,
        key=lambda match: (-len(match.left_kmers), match.left_kmers, match.right_kmers),
    )
    kept: list[Match] = []
    for match in ordered:
        if any(
            other.left_kmers.covers(match.left_kmers)
            and other.right_kmers.covers(match.right_kmers)
            for other in kept
        ):
            continue
        kept.append(match)
    return kept
