from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from tokenprint import (
    AnalysisCancelledError,
    AnalysisConfig,
    Analyzer,
    File,
    InsufficientInputError,
    InvalidConfigurationError,
    ParseFailureError,
    RunConfig,
)
from tokenprint.config import LoggingConfig

VALID = "def area(w, h):\n    return w * h\n\nprint(area(2, 3))\n"
BROKEN = "def area(w, h:\n    return w * h\n"


def test_fewer_than_two_files_is_rejected(tmp_path: Path) -> None:
    analyzer = Analyzer(RunConfig(root=tmp_path))

    with pytest.raises(InsufficientInputError, match="got 1"):
        analyzer.analyze([File("a.py", VALID)])


def test_hash_percentage_with_two_files_fails_before_tokenizing(tmp_path: Path) -> None:
    analyzer = Analyzer(
        RunConfig(
            root=tmp_path,
            analysis=AnalysisConfig(max_hash_percentage=0.5, skip_parse_failures=False),
        )
    )

    with pytest.raises(InvalidConfigurationError, match="exactly two files"):
        analyzer.analyze([File("a.py", VALID), File("b.py", BROKEN)])


def test_parse_failures_are_skipped_and_reported(tmp_path: Path) -> None:
    analyzer = Analyzer(RunConfig(root=tmp_path))

    report = analyzer.analyze(
        [File("a.py", VALID), File("b.py", BROKEN), File("c.py", VALID), File("d.md", "# notes")]
    )

    assert report.file_count == 2
    assert report.pair_count == 1
    assert [failure.path for failure in report.parse_failures] == ["b.py", "d.md"]
    assert "could not be parsed" in report.parse_failures[0].reason
    assert "No tokenizer supports path" in report.parse_failures[1].reason


def test_parse_failure_aborts_when_not_skipping(tmp_path: Path) -> None:
    analyzer = Analyzer(RunConfig(root=tmp_path, analysis=AnalysisConfig(skip_parse_failures=False)))

    with pytest.raises(ParseFailureError, match="b.py"):
        analyzer.analyze([File("a.py", VALID), File("b.py", BROKEN)])


def test_skipped_failures_can_leave_too_few_files(tmp_path: Path) -> None:
    analyzer = Analyzer(RunConfig(root=tmp_path))

    with pytest.raises(InsufficientInputError, match="got 1"):
        analyzer.analyze([File("a.py", VALID), File("b.py", BROKEN)])


def test_percentage_rechecked_after_failures_are_dropped(tmp_path: Path) -> None:
    analyzer = Analyzer(
        RunConfig(root=tmp_path, analysis=AnalysisConfig(max_hash_percentage=0.8))
    )

    with pytest.raises(InvalidConfigurationError, match="exactly two files"):
        analyzer.analyze([File("a.py", VALID), File("b.py", BROKEN), File("c.py", VALID)])


def test_cancelled_run_stops_before_fingerprinting(tmp_path: Path) -> None:
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(AnalysisCancelledError) as caught:
        Analyzer(RunConfig(root=tmp_path)).analyze(
            [File("a.py", VALID), File("b.py", VALID)], cancel=cancel
        )

    assert caught.value.stage == "fingerprint"


def test_fingerprint_file_rejects_unknown_extension(tmp_path: Path) -> None:
    analyzer = Analyzer(RunConfig(root=tmp_path))

    with pytest.raises(ParseFailureError, match="No tokenizer supports path"):
        analyzer.fingerprint_file(File("notes.md", "# notes"))


def test_analyze_paths_reports_unreadable_files(tmp_path: Path) -> None:
    (tmp_path / "a.py").write_text(VALID, encoding="utf-8")
    (tmp_path / "b.py").write_text(VALID, encoding="utf-8")
    (tmp_path / "c.py").write_bytes(b"\x00\x01binary")

    report = Analyzer(RunConfig(root=tmp_path)).analyze_paths([tmp_path])

    assert report.file_count == 2
    assert report.scored_diffs[0].similarity == 1.0
    assert [failure.path for failure in report.read_failures] == [(tmp_path / "c.py").as_posix()]
    assert report.read_failures[0].reason == "File looks binary."


def test_run_log_records_stages_without_source_text(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "run.jsonl"
    analyzer = Analyzer(RunConfig(root=tmp_path, logging=LoggingConfig(log_path=log_path)))

    analyzer.analyze([File("a.py", VALID), File("b.py", BROKEN), File("c.py", VALID)])

    events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [event["event"] for event in events] == [
        "analysis_started",
        "file_failed",
        "index_built",
        "analysis_finished",
    ]
    assert len({event["run_id"] for event in events}) == 1
    assert events[1]["ok"] is False
    assert events[1]["metadata"]["path"] == "b.py"
    finished = events[-1]["metadata"]
    assert finished["pair_count"] == 1
    assert set(finished["profile"]) == {"compare_seconds", "fingerprint_seconds"}
    assert "return w * h" not in log_path.read_text(encoding="utf-8")
