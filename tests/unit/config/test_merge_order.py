from __future__ import annotations

from pathlib import Path

from tokenprint.config import CliOverrides, load_effective_config


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.analysis.kmer_length == 23
    assert config.analysis.kmers_in_window == 17
    assert config.analysis.max_hash_percentage is None
    assert config.analysis.max_hash_count is None
    assert config.analysis.language is None
    assert config.analysis.workers == 1
    assert config.analysis.skip_parse_failures is True
    assert config.analysis.gap_tolerance == 1
    assert config.limits.max_file_bytes == 4 * 1024 * 1024
    assert config.logging.log_path is None


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    (tmp_path / "tokenprint.toml").write_text(
        "\n".join(
            [
                "[analysis]",
                "kmer_length = 12",
                "kmers_in_window = 6",
                'language = "js"',
                "skip_parse_failures = false",
                "",
                "[limits]",
                "max_file_bytes = 2048",
            ]
        ),
        encoding="utf-8",
    )
    overrides = CliOverrides(kmer_length=30, workers=4)

    config = load_effective_config(tmp_path, overrides)

    assert config.analysis.kmer_length == 30
    assert config.analysis.kmers_in_window == 6
    assert config.analysis.language == "javascript"
    assert config.analysis.workers == 4
    assert config.analysis.skip_parse_failures is False
    assert config.limits.max_file_bytes == 2048


def test_log_path_from_file_resolves_under_root(tmp_path: Path) -> None:
    (tmp_path / "tokenprint.toml").write_text(
        '[logging]\nlog_path = "logs/run.jsonl"\n', encoding="utf-8"
    )

    config = load_effective_config(tmp_path)

    assert config.logging.log_path == (tmp_path / "logs" / "run.jsonl").resolve()


def test_cli_log_path_overrides_file(tmp_path: Path) -> None:
    (tmp_path / "tokenprint.toml").write_text(
        '[logging]\nlog_path = "logs/run.jsonl"\n', encoding="utf-8"
    )
    custom = tmp_path / "custom.jsonl"

    config = load_effective_config(tmp_path, CliOverrides(log_path=custom))

    assert config.logging.log_path == custom.resolve()


def test_public_dict_snapshot_is_serializable(tmp_path: Path) -> None:
    snapshot = load_effective_config(tmp_path, CliOverrides(max_hash_count=3)).to_public_dict()

    assert snapshot["analysis"]["max_hash_count"] == 3
    assert snapshot["limits"] == {"max_file_bytes": 4 * 1024 * 1024}
    assert snapshot["logging"] == {"log_path": None}
