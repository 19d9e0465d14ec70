"""Report assembly over scored file pairs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from tokenprint.compare.models import ScoredDiff
from tokenprint.files import FileReadFailure, ParseFailure


@dataclass(slots=True, frozen=True)
class Report:
    """Ordered pair results plus the files that dropped out of the run."""

    scored_diffs: tuple[ScoredDiff, ...]
    read_failures: tuple[FileReadFailure, ...] = ()
    parse_failures: tuple[ParseFailure, ...] = ()
    file_count: int = 0
    duration_ms: int = 0
    config: dict[str, object] = field(default_factory=dict)

    @property
    def pair_count(self) -> int:
        return len(self.scored_diffs)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable snapshot."""
        return {
            "file_count": self.file_count,
            "pair_count": self.pair_count,
            "duration_ms": self.duration_ms,
            "config": self.config,
            "pairs": [diff.to_dict() for diff in self.scored_diffs],
            "read_failures": [
                {"path": failure.path, "reason": failure.reason} for failure in self.read_failures
            ],
            "parse_failures": [
                {"path": failure.path, "reason": failure.reason} for failure in self.parse_failures
            ],
        }


def diff_sort_key(diff: ScoredDiff) -> tuple[float, str, str]:
    """Most similar pairs first, then by path."""
    return (-diff.similarity, diff.left.path, diff.right.path)


def build_report(
    diffs: Iterable[ScoredDiff],
    *,
    read_failures: Iterable[FileReadFailure] = (),
    parse_failures: Iterable[ParseFailure] = (),
    file_count: int = 0,
    duration_ms: int = 0,
    config: dict[str, object] | None = None,
) -> Report:
    """Collect pair results into a deterministically ordered report."""
    return Report(
        scored_diffs=tuple(sorted(diffs, key=diff_sort_key)),
        read_failures=tuple(read_failures),
        parse_failures=tuple(parse_failures),
        file_count=file_count,
        duration_ms=duration_ms,
        config=dict(config or {}),
    )
