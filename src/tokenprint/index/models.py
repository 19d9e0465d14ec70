"""Typed models for fingerprint indexing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Fingerprint:
    """Winnowed k-mer hash and the token offset where the k-mer starts."""

    hash: int
    kmer_position: int


@dataclass(slots=True, frozen=True)
class Occurrence:
    """Single placement of a fingerprint hash in one file."""

    file_id: int
    index: int
    kmer_position: int
