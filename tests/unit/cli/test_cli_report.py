from __future__ import annotations

import io
import json
from pathlib import Path

from tokenprint.cli import build_arg_parser, main, overrides_from_args

SOURCE = "def area(w, h):\n    return w * h\n\nprint(area(2, 3))\n"


def test_cli_prints_json_report(tmp_path: Path) -> None:
    first = tmp_path / "a.py"
    second = tmp_path / "b.py"
    first.write_text(SOURCE, encoding="utf-8")
    second.write_text(SOURCE, encoding="utf-8")
    out = io.StringIO()
    err = io.StringIO()

    code = main([str(first), str(second), "--root", str(tmp_path)], out, err)

    assert code == 0
    assert err.getvalue() == ""
    payload = json.loads(out.getvalue())
    assert payload["file_count"] == 2
    assert payload["pair_count"] == 1
    assert payload["config"]["analysis"]["kmer_length"] == 23
    assert payload["config"]["root"] == str(tmp_path.resolve())
    pair = payload["pairs"][0]
    assert pair["left"] == first.as_posix()
    assert pair["similarity"] == 1.0
    assert len(pair["blocks"]) == 1
    assert set(pair["blocks"][0]) == {
        "left_kmers",
        "left_selection",
        "right_kmers",
        "right_selection",
    }


def test_cli_reports_configuration_errors(tmp_path: Path) -> None:
    (tmp_path / "a.py").write_text(SOURCE, encoding="utf-8")
    (tmp_path / "b.py").write_text(SOURCE, encoding="utf-8")
    out = io.StringIO()
    err = io.StringIO()

    code = main([str(tmp_path), "--root", str(tmp_path), "--kmer-length", "0"], out, err)

    assert code == 2
    assert out.getvalue() == ""
    assert err.getvalue().startswith("error: ")
    assert "overrides.kmer_length" in err.getvalue()


def test_cli_reports_insufficient_input(tmp_path: Path) -> None:
    (tmp_path / "a.py").write_text(SOURCE, encoding="utf-8")
    err = io.StringIO()

    code = main([str(tmp_path / "a.py"), "--root", str(tmp_path)], io.StringIO(), err)

    assert code == 2
    assert "At least two files" in err.getvalue()


def test_fail_on_parse_error_flag_disables_skipping() -> None:
    args = build_arg_parser().parse_args(["a.py", "b.py", "--fail-on-parse-error", "--workers", "2"])

    overrides = overrides_from_args(args)

    assert overrides.skip_parse_failures is False
    assert overrides.workers == 2
    assert overrides.kmer_length is None
