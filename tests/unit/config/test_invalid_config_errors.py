from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from tokenprint.config import (
    AnalysisConfig,
    CliOverrides,
    InvalidConfigurationError,
    LimitsConfig,
    load_effective_config,
)


def _write_config(root: Path, *lines: str) -> None:
    (root / "tokenprint.toml").write_text("\n".join(lines), encoding="utf-8")


@pytest.mark.parametrize(
    ("line", "field"),
    [
        ("kmer_length = 0", "analysis.kmer_length"),
        ("kmer_length = true", "analysis.kmer_length"),
        ('kmers_in_window = "17"', "analysis.kmers_in_window"),
        ("workers = 65", "analysis.workers"),
        ("gap_tolerance = -1", "analysis.gap_tolerance"),
        ("max_hash_percentage = 1.5", "analysis.max_hash_percentage"),
        ("max_hash_percentage = 0", "analysis.max_hash_percentage"),
        ("max_hash_count = 0", "analysis.max_hash_count"),
        ('language = "cobol"', "analysis.language"),
        ('skip_parse_failures = "yes"', "analysis.skip_parse_failures"),
    ],
)
def test_invalid_analysis_field_names_the_field(tmp_path: Path, line: str, field: str) -> None:
    _write_config(tmp_path, "[analysis]", line)

    with pytest.raises(InvalidConfigurationError, match=field):
        load_effective_config(tmp_path)


def test_cap_violation_reports_cap(tmp_path: Path) -> None:
    _write_config(tmp_path, "[limits]", "max_file_bytes = 999999999999")

    with pytest.raises(InvalidConfigurationError, match="limits.max_file_bytes"):
        load_effective_config(tmp_path)


def test_invalid_section_type_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'analysis = "not-a-table"')

    with pytest.raises(InvalidConfigurationError, match="section 'analysis'"):
        load_effective_config(tmp_path)


def test_malformed_toml_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[analysis", "kmer_length = 3")

    with pytest.raises(InvalidConfigurationError, match="not valid TOML"):
        load_effective_config(tmp_path)


def test_empty_log_path_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[logging]", 'log_path = "  "')

    with pytest.raises(InvalidConfigurationError, match="logging.log_path"):
        load_effective_config(tmp_path)


def test_invalid_override_names_override_field(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigurationError, match="overrides.kmer_length"):
        load_effective_config(tmp_path, CliOverrides(kmer_length=0))


def test_configuration_error_is_a_value_error() -> None:
    assert issubclass(InvalidConfigurationError, ValueError)


@pytest.mark.parametrize(
    ("options", "field"),
    [
        ({"kmer_length": 0}, "analysis.kmer_length"),
        ({"kmers_in_window": 1_001}, "analysis.kmers_in_window"),
        ({"workers": True}, "analysis.workers"),
        ({"gap_tolerance": 0}, "analysis.gap_tolerance"),
        ({"max_depth": None}, "analysis.max_depth"),
        ({"max_hash_percentage": 0.0}, "analysis.max_hash_percentage"),
        ({"max_hash_count": -3}, "analysis.max_hash_count"),
        ({"language": "cobol"}, "analysis.language"),
        ({"skip_parse_failures": "yes"}, "analysis.skip_parse_failures"),
    ],
)
def test_analysis_config_rejects_invalid_fields_on_construction(
    options: dict[str, object], field: str
) -> None:
    with pytest.raises(InvalidConfigurationError, match=field):
        AnalysisConfig(**options)


def test_replaced_analysis_config_is_validated() -> None:
    config = AnalysisConfig(kmer_length=5, language="js")

    assert config.kmer_length == 5
    with pytest.raises(InvalidConfigurationError, match="analysis.kmer_length"):
        replace(config, kmer_length=0)


@pytest.mark.parametrize("max_file_bytes", [0, None, 64 * 1024 * 1024 + 1])
def test_limits_config_rejects_invalid_size_on_construction(max_file_bytes: object) -> None:
    with pytest.raises(InvalidConfigurationError, match="limits.max_file_bytes"):
        LimitsConfig(max_file_bytes=max_file_bytes)
