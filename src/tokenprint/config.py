"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from tokenprint.languages import SUPPORTED_LANGUAGES, normalize_language

CONFIG_FILE_NAME = "tokenprint.toml"

DEFAULT_KMER_LENGTH = 23
DEFAULT_KMERS_IN_WINDOW = 17
DEFAULT_MAX_FILE_BYTES = 4 * 1024 * 1024
DEFAULT_MAX_DEPTH = 2_000

KMER_LENGTH_CAP = 1_000
KMERS_IN_WINDOW_CAP = 1_000
WORKERS_CAP = 64
GAP_TOLERANCE_CAP = 100
MAX_FILE_BYTES_CAP = 64 * 1024 * 1024
MAX_DEPTH_CAP = 100_000


class InvalidConfigurationError(ValueError):
    """Raised when configuration values are missing, malformed or contradictory."""


@dataclass(slots=True, frozen=True)
class AnalysisConfig:
    """Fingerprinting and comparison settings."""

    kmer_length: int = DEFAULT_KMER_LENGTH
    kmers_in_window: int = DEFAULT_KMERS_IN_WINDOW
    max_hash_percentage: float | None = None
    max_hash_count: int | None = None
    language: str | None = None
    workers: int = 1
    skip_parse_failures: bool = True
    gap_tolerance: int = 1
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        _validate_analysis(self, prefix="analysis")


@dataclass(slots=True, frozen=True)
class LimitsConfig:
    """File loading limits."""

    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES

    def __post_init__(self) -> None:
        if self.max_file_bytes is None:
            raise InvalidConfigurationError("Config field 'limits.max_file_bytes' must be set.")
        _optional_positive_int_with_cap(
            self.max_file_bytes, "limits.max_file_bytes", None, MAX_FILE_BYTES_CAP
        )


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Run log settings; no log is written when log_path is None."""

    log_path: Path | None = None


@dataclass(slots=True, frozen=True)
class RunConfig:
    """Fully merged configuration for one analysis run."""

    root: Path
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for reports."""
        return {
            "root": str(self.root),
            "analysis": {
                "kmer_length": self.analysis.kmer_length,
                "kmers_in_window": self.analysis.kmers_in_window,
                "max_hash_percentage": self.analysis.max_hash_percentage,
                "max_hash_count": self.analysis.max_hash_count,
                "language": self.analysis.language,
                "workers": self.analysis.workers,
                "skip_parse_failures": self.analysis.skip_parse_failures,
                "gap_tolerance": self.analysis.gap_tolerance,
                "max_depth": self.analysis.max_depth,
            },
            "limits": {
                "max_file_bytes": self.limits.max_file_bytes,
            },
            "logging": {
                "log_path": str(self.logging.log_path) if self.logging.log_path else None,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    kmer_length: int | None = None
    kmers_in_window: int | None = None
    max_hash_percentage: float | None = None
    max_hash_count: int | None = None
    language: str | None = None
    workers: int | None = None
    skip_parse_failures: bool | None = None
    gap_tolerance: int | None = None
    max_file_bytes: int | None = None
    log_path: Path | None = None


def default_config(root: Path) -> RunConfig:
    """Build default config for a given working root."""
    return RunConfig(root=root.resolve())


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional tokenprint.toml from the working root."""
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidConfigurationError(f"{CONFIG_FILE_NAME} is not valid TOML: {exc}") from exc
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise InvalidConfigurationError(f"Config section '{key}' must be a table.")
    return value


def merge_config(
    base: RunConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> RunConfig:
    """Merge defaults, config file, then CLI/startup overrides."""
    analysis_payload = _get_table(file_payload, "analysis")
    limits_payload = _get_table(file_payload, "limits")
    logging_payload = _get_table(file_payload, "logging")

    analysis = _merge_analysis(base.analysis, analysis_payload, prefix="analysis")
    max_file_bytes = _optional_positive_int_with_cap(
        limits_payload.get("max_file_bytes"),
        "limits.max_file_bytes",
        base.limits.max_file_bytes,
        MAX_FILE_BYTES_CAP,
    )
    log_path = base.logging.log_path
    if "log_path" in logging_payload:
        raw_log_path = logging_payload["log_path"]
        if not isinstance(raw_log_path, str) or not raw_log_path.strip():
            raise InvalidConfigurationError(
                "Config field 'logging.log_path' must be a non-empty string."
            )
        log_path = (base.root / raw_log_path).resolve()

    merged = RunConfig(
        root=base.root,
        analysis=analysis,
        limits=LimitsConfig(max_file_bytes=max_file_bytes),
        logging=LoggingConfig(log_path=log_path),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: RunConfig, overrides: CliOverrides) -> RunConfig:
    """Apply startup overrides at highest precedence."""
    payload: dict[str, object] = {}
    for name in (
        "kmer_length",
        "kmers_in_window",
        "max_hash_percentage",
        "max_hash_count",
        "language",
        "workers",
        "skip_parse_failures",
        "gap_tolerance",
    ):
        value = getattr(overrides, name)
        if value is not None:
            payload[name] = value
    analysis = _merge_analysis(config.analysis, payload, prefix="overrides")
    max_file_bytes = _optional_positive_int_with_cap(
        overrides.max_file_bytes,
        "overrides.max_file_bytes",
        config.limits.max_file_bytes,
        MAX_FILE_BYTES_CAP,
    )
    log_path = overrides.log_path.resolve() if overrides.log_path else config.logging.log_path
    return RunConfig(
        root=config.root,
        analysis=analysis,
        limits=LimitsConfig(max_file_bytes=max_file_bytes),
        logging=LoggingConfig(log_path=log_path),
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> RunConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _merge_analysis(
    base: AnalysisConfig, payload: dict[str, object], prefix: str
) -> AnalysisConfig:
    return AnalysisConfig(
        kmer_length=_optional_positive_int_with_cap(
            payload.get("kmer_length"),
            f"{prefix}.kmer_length",
            base.kmer_length,
            KMER_LENGTH_CAP,
        ),
        kmers_in_window=_optional_positive_int_with_cap(
            payload.get("kmers_in_window"),
            f"{prefix}.kmers_in_window",
            base.kmers_in_window,
            KMERS_IN_WINDOW_CAP,
        ),
        max_hash_percentage=(
            _percentage(payload["max_hash_percentage"], f"{prefix}.max_hash_percentage")
            if "max_hash_percentage" in payload
            else base.max_hash_percentage
        ),
        max_hash_count=_optional_positive_int(
            payload.get("max_hash_count"), f"{prefix}.max_hash_count", base.max_hash_count
        ),
        language=(
            _language(payload["language"], f"{prefix}.language")
            if "language" in payload
            else base.language
        ),
        workers=_optional_positive_int_with_cap(
            payload.get("workers"), f"{prefix}.workers", base.workers, WORKERS_CAP
        ),
        skip_parse_failures=_optional_bool(
            payload.get("skip_parse_failures"),
            f"{prefix}.skip_parse_failures",
            base.skip_parse_failures,
        ),
        gap_tolerance=_optional_positive_int_with_cap(
            payload.get("gap_tolerance"),
            f"{prefix}.gap_tolerance",
            base.gap_tolerance,
            GAP_TOLERANCE_CAP,
        ),
        max_depth=_optional_positive_int_with_cap(
            payload.get("max_depth"), f"{prefix}.max_depth", base.max_depth, MAX_DEPTH_CAP
        ),
    )


def _percentage(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(f"Config field '{name}' must be a number in (0, 1].")
    if not 0 < value <= 1:
        raise InvalidConfigurationError(f"Config field '{name}' must be a number in (0, 1].")
    return float(value)


def _language(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise InvalidConfigurationError(f"Config field '{name}' must be a string.")
    language = normalize_language(value)
    if language not in SUPPORTED_LANGUAGES:
        supported = ", ".join(SUPPORTED_LANGUAGES)
        raise InvalidConfigurationError(
            f"Config field '{name}' must be one of: {supported}."
        )
    return language


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidConfigurationError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_positive_int(value: object, name: str, default: int | None) -> int | None:
    return _optional_positive_int_with_cap(value, name, default, cap=None)


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int | None,
    cap: int | None,
) -> int | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfigurationError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise InvalidConfigurationError(f"Config field '{name}' must be <= {cap}.")
    return value


def _validate_analysis(config: AnalysisConfig, prefix: str) -> None:
    for name, cap in (
        ("kmer_length", KMER_LENGTH_CAP),
        ("kmers_in_window", KMERS_IN_WINDOW_CAP),
        ("workers", WORKERS_CAP),
        ("gap_tolerance", GAP_TOLERANCE_CAP),
        ("max_depth", MAX_DEPTH_CAP),
    ):
        value = getattr(config, name)
        if value is None:
            raise InvalidConfigurationError(f"Config field '{prefix}.{name}' must be set.")
        _optional_positive_int_with_cap(value, f"{prefix}.{name}", None, cap)
    _optional_positive_int(config.max_hash_count, f"{prefix}.max_hash_count", None)
    if config.max_hash_percentage is not None:
        _percentage(config.max_hash_percentage, f"{prefix}.max_hash_percentage")
    if config.language is not None:
        _language(config.language, f"{prefix}.language")
    if not isinstance(config.skip_parse_failures, bool):
        raise InvalidConfigurationError(
            f"Config field '{prefix}.skip_parse_failures' must be a boolean."
        )
