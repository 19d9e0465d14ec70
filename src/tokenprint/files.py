"""Source files, tokenized files and partial-success file loading."""

from __future__ import annotations

import codecs
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from tokenprint.index.models import Fingerprint
from tokenprint.languages import EXTENSION_LANGUAGES
from tokenprint.region import Range, Region
from tokenprint.tokenizers.base import Token

_READ_CHUNK_BYTES = 128 * 1024
_BINARY_SNIFF_BYTES = 4096


@dataclass(slots=True, frozen=True)
class File:
    """Path plus decoded source text."""

    path: str
    content: str


@dataclass(slots=True, frozen=True)
class FileReadFailure:
    """A file that could not be loaded; other files still proceed."""

    path: str
    reason: str


@dataclass(slots=True, frozen=True)
class ParseFailure:
    """A loaded file that could not be tokenized and is left out of comparison."""

    path: str
    reason: str


@dataclass(slots=True, frozen=True)
class LoadResult:
    """Files loaded successfully plus per-file failures, in input order."""

    files: tuple[File, ...]
    failures: tuple[FileReadFailure, ...]


@dataclass(slots=True, frozen=True)
class TokenizedFile:
    """A file with its token stream, selected fingerprints and region mapping.

    ``mapping[i]`` is the source region covered by ``fingerprints[i]``.
    """

    file: File
    tokens: tuple[Token, ...]
    fingerprints: tuple[Fingerprint, ...]
    mapping: tuple[Region, ...] = field(repr=False)

    @property
    def path(self) -> str:
        return self.file.path

    def region_of(self, kmers: Range) -> Region:
        """Return the union of mapping regions over a fingerprint range."""
        if kmers.start < 0 or kmers.stop > len(self.mapping) or not len(kmers):
            raise IndexError(f"Range {kmers} is outside fingerprints of {self.path}.")
        return Region.merge(*self.mapping[kmers.start : kmers.stop])


def build_tokenized_file(
    file: File, tokens: Sequence[Token], fingerprints: Sequence[Fingerprint], k: int
) -> TokenizedFile:
    """Attach the region of each fingerprint's k tokens."""
    mapping = tuple(
        Region.merge(*(token.region for token in tokens[fp.kmer_position : fp.kmer_position + k]))
        for fp in fingerprints
    )
    return TokenizedFile(
        file=file,
        tokens=tuple(tokens),
        fingerprints=tuple(fingerprints),
        mapping=mapping,
    )


def read_source_file(path: Path, max_file_bytes: int) -> File | FileReadFailure:
    """Read one UTF-8 text file in chunks, or describe why it cannot be read."""
    display = path.as_posix()
    try:
        if not path.exists():
            return FileReadFailure(path=display, reason="File does not exist.")
        if not path.is_file():
            return FileReadFailure(path=display, reason="Path is not a regular file.")
        if path.stat().st_size > max_file_bytes:
            return FileReadFailure(path=display, reason="File exceeds max_file_bytes limit.")
        if is_binary_file(path):
            return FileReadFailure(path=display, reason="File looks binary.")
        decoder = codecs.getincrementaldecoder("utf-8")()
        parts: list[str] = []
        with path.open("rb") as handle:
            while True:
                chunk = handle.read(_READ_CHUNK_BYTES)
                if not chunk:
                    break
                parts.append(decoder.decode(chunk))
        parts.append(decoder.decode(b"", final=True))
    except UnicodeDecodeError:
        return FileReadFailure(path=display, reason="File is not valid UTF-8.")
    except OSError as exc:
        return FileReadFailure(path=display, reason=f"File could not be read: {exc.strerror}.")
    return File(path=display, content="".join(parts))


def load_files(paths: Sequence[Path], max_file_bytes: int) -> LoadResult:
    """Load every path, collecting failures instead of aborting the batch."""
    files: list[File] = []
    failures: list[FileReadFailure] = []
    for path in paths:
        loaded = read_source_file(path, max_file_bytes)
        if isinstance(loaded, FileReadFailure):
            failures.append(loaded)
        else:
            files.append(loaded)
    return LoadResult(files=tuple(files), failures=tuple(failures))


def expand_paths(paths: Sequence[Path], extensions: Sequence[str] | None = None) -> list[Path]:
    """Replace directories by their source files, walked in sorted order."""
    wanted = tuple(extensions) if extensions is not None else tuple(EXTENSION_LANGUAGES)
    output: list[Path] = []
    for path in paths:
        if not path.is_dir():
            output.append(path)
            continue
        stack: list[Path] = [path]
        found: list[Path] = []
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as entries:
                    ordered_entries = sorted(entries, key=lambda item: item.name)
            except OSError:
                continue
            for entry in ordered_entries:
                if entry.name.startswith("."):
                    continue
                full_path = Path(entry.path)
                if entry.is_dir(follow_symlinks=False):
                    stack.append(full_path)
                elif entry.is_file(follow_symlinks=False) and entry.name.lower().endswith(wanted):
                    found.append(full_path)
        output.extend(sorted(found, key=lambda item: item.as_posix()))
    return output


def is_binary_file(path: Path) -> bool:
    """Use deterministic content sniffing to exclude binary files."""
    with path.open("rb") as handle:
        sample = handle.read(_BINARY_SNIFF_BYTES)
    return b"\x00" in sample
