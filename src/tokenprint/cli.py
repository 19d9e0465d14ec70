"""Command-line entrypoint printing a JSON similarity report."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TextIO

from tokenprint.analyzer import Analyzer, InsufficientInputError
from tokenprint.config import CliOverrides, InvalidConfigurationError, load_effective_config
from tokenprint.tokenizers import ParseFailureError


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for run configuration."""
    parser = argparse.ArgumentParser(
        prog="tokenprint",
        description="Detect structurally similar source files with winnowed fingerprints.",
    )
    parser.add_argument("paths", nargs="+", help="Files or directories to compare.")
    parser.add_argument("--root", required=False, default=".")
    parser.add_argument("--kmer-length", type=int, required=False, default=None)
    parser.add_argument("--kmers-in-window", type=int, required=False, default=None)
    parser.add_argument("--max-hash-percentage", type=float, required=False, default=None)
    parser.add_argument("--max-hash-count", type=int, required=False, default=None)
    parser.add_argument("--language", required=False, default=None)
    parser.add_argument("--workers", type=int, required=False, default=None)
    parser.add_argument("--gap-tolerance", type=int, required=False, default=None)
    parser.add_argument("--max-file-bytes", type=int, required=False, default=None)
    parser.add_argument("--log-path", required=False, default=None)
    parser.add_argument(
        "--fail-on-parse-error",
        action="store_true",
        help="Abort the run when a file cannot be parsed instead of skipping it.",
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    """Translate parsed arguments into config overrides."""
    return CliOverrides(
        kmer_length=args.kmer_length,
        kmers_in_window=args.kmers_in_window,
        max_hash_percentage=args.max_hash_percentage,
        max_hash_count=args.max_hash_count,
        language=args.language,
        workers=args.workers,
        skip_parse_failures=False if args.fail_on_parse_error else None,
        gap_tolerance=args.gap_tolerance,
        max_file_bytes=args.max_file_bytes,
        log_path=Path(args.log_path) if args.log_path is not None else None,
    )


def main(
    argv: list[str] | None = None,
    out_stream: TextIO | None = None,
    err_stream: TextIO | None = None,
) -> int:
    """Entrypoint for the tokenprint command."""
    out = out_stream or sys.stdout
    err = err_stream or sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        config = load_effective_config(Path(args.root), overrides_from_args(args))
        report = Analyzer(config).analyze_paths(args.paths)
    except (InvalidConfigurationError, InsufficientInputError, ParseFailureError) as exc:
        err.write(f"error: {exc}\n")
        return 2
    out.write(f"{json.dumps(report.to_dict(), sort_keys=True)}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
