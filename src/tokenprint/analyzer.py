"""Analysis run orchestration: fingerprint every file, index, compare all pairs."""

from __future__ import annotations

import threading
import time
import uuid
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from itertools import combinations
from pathlib import Path

from tokenprint.compare import Aligner, PairComparer, ScoredDiff, validate_hash_filter
from tokenprint.config import RunConfig, default_config
from tokenprint.files import (
    File,
    FileReadFailure,
    ParseFailure,
    TokenizedFile,
    build_tokenized_file,
    expand_paths,
    load_files,
)
from tokenprint.hashing import Winnower
from tokenprint.index import FingerprintIndex
from tokenprint.logging import JsonlRunLogger
from tokenprint.report import Report, build_report
from tokenprint.tokenizers import (
    ParseFailureError,
    Token,
    TokenizerRegistry,
    build_tokenizer_registry,
    validate_tokens,
)


class InsufficientInputError(ValueError):
    """Raised when fewer than two files are available for comparison."""


class AnalysisCancelledError(RuntimeError):
    """Raised when a run is cancelled between stages."""

    def __init__(self, stage: str) -> None:
        super().__init__(f"Analysis cancelled before stage '{stage}'.")
        self.stage = stage


class Analyzer:
    """Runs the fingerprinting pipeline and pairwise comparison over a file set."""

    def __init__(
        self,
        config: RunConfig | None = None,
        *,
        tokenizers: TokenizerRegistry | None = None,
    ) -> None:
        self._config = config or default_config(Path.cwd())
        analysis = self._config.analysis
        self._winnower = Winnower(analysis.kmers_in_window, analysis.kmer_length)
        self._tokenizers = tokenizers or build_tokenizer_registry(analysis)
        log_path = self._config.logging.log_path
        self._logger = JsonlRunLogger(log_path) if log_path is not None else None

    @property
    def config(self) -> RunConfig:
        return self._config

    def analyze_paths(
        self, paths: Sequence[Path | str], cancel: threading.Event | None = None
    ) -> Report:
        """Load files from disk, then analyze the ones that could be read."""
        resolved = expand_paths([Path(path) for path in paths])
        loaded = load_files(resolved, self._config.limits.max_file_bytes)
        return self._run(loaded.files, read_failures=loaded.failures, cancel=cancel)

    def analyze(self, files: Sequence[File], cancel: threading.Event | None = None) -> Report:
        """Compare every pair of the given in-memory files."""
        return self._run(files, read_failures=(), cancel=cancel)

    def fingerprint_file(self, file: File) -> TokenizedFile:
        """Tokenize, hash and winnow one file; raises ParseFailureError."""
        try:
            tokenizer = self._tokenizers.select(file.path)
        except LookupError as exc:
            raise ParseFailureError(str(exc)) from exc
        tokens: list[Token] = []

        def symbols() -> Iterator[str]:
            for token in tokenizer.tokenize(file.content):
                tokens.append(token)
                yield token.symbol

        fingerprints = list(self._winnower.winnow(symbols()))
        validate_tokens(tokens)
        return build_tokenized_file(
            file, tokens, fingerprints, self._config.analysis.kmer_length
        )

    def _run(
        self,
        files: Sequence[File],
        *,
        read_failures: Sequence[FileReadFailure],
        cancel: threading.Event | None,
    ) -> Report:
        analysis = self._config.analysis
        _require_comparable(len(files), analysis.max_hash_percentage)

        started = time.perf_counter()
        run_id = uuid.uuid4().hex
        self._log(run_id, "analysis_started", file_count=len(files))
        for failure in read_failures:
            self._log(run_id, "file_failed", ok=False, path=failure.path, reason=failure.reason)

        _check_cancel(cancel, "fingerprint")
        fingerprint_started = time.perf_counter()
        outcomes = self._fingerprint_all(files)
        fingerprint_seconds = time.perf_counter() - fingerprint_started

        tokenized: list[TokenizedFile] = []
        parse_failures: list[ParseFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, ParseFailure):
                parse_failures.append(outcome)
                self._log(run_id, "file_failed", ok=False, path=outcome.path, reason=outcome.reason)
            else:
                tokenized.append(outcome)
        if parse_failures and not analysis.skip_parse_failures:
            first = parse_failures[0]
            raise ParseFailureError(f"{first.path}: {first.reason}")
        _require_comparable(len(tokenized), analysis.max_hash_percentage)

        _check_cancel(cancel, "index")
        index = FingerprintIndex()
        for file_id, item in enumerate(tokenized):
            index.add_file(file_id, item.fingerprints)
        index.freeze()
        self._log(run_id, "index_built", hash_count=len(index), file_count=len(tokenized))

        comparer = PairComparer(
            index,
            tokenized,
            max_hash_percentage=analysis.max_hash_percentage,
            max_hash_count=analysis.max_hash_count,
            aligner=Aligner(gap_tolerance=analysis.gap_tolerance),
        )
        compare_started = time.perf_counter()
        diffs: list[ScoredDiff] = []
        for left_id, right_id in combinations(range(len(tokenized)), 2):
            _check_cancel(cancel, "compare")
            diffs.append(comparer.compare(left_id, right_id))
        compare_seconds = time.perf_counter() - compare_started

        duration_ms = int((time.perf_counter() - started) * 1000)
        report = build_report(
            diffs,
            read_failures=read_failures,
            parse_failures=parse_failures,
            file_count=len(tokenized),
            duration_ms=duration_ms,
            config=self._config.to_public_dict(),
        )
        self._log(
            run_id,
            "analysis_finished",
            pair_count=report.pair_count,
            duration_ms=duration_ms,
            profile={
                "fingerprint_seconds": fingerprint_seconds,
                "compare_seconds": compare_seconds,
            },
        )
        return report

    def _fingerprint_all(self, files: Sequence[File]) -> list[TokenizedFile | ParseFailure]:
        workers = self._config.analysis.workers
        if workers <= 1 or len(files) < 2:
            return [self._fingerprint_or_failure(file) for file in files]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._fingerprint_or_failure, files))

    def _fingerprint_or_failure(self, file: File) -> TokenizedFile | ParseFailure:
        try:
            return self.fingerprint_file(file)
        except ParseFailureError as exc:
            return ParseFailure(path=file.path, reason=str(exc))

    def _log(self, run_id: str, event: str, ok: bool = True, **metadata: object) -> None:
        if self._logger is None:
            return
        self._logger.log(run_id, event, ok, **metadata)


def _require_comparable(file_count: int, max_hash_percentage: float | None) -> None:
    if file_count < 2:
        raise InsufficientInputError(
            f"At least two files are required for comparison; got {file_count}."
        )
    validate_hash_filter(file_count, max_hash_percentage)


def _check_cancel(cancel: threading.Event | None, stage: str) -> None:
    if cancel is not None and cancel.is_set():
        raise AnalysisCancelledError(stage)
