"""Pairwise comparison and block alignment."""

from .align import Aligner
from .models import Block, Match, ScoredDiff
from .pair import PairComparer, validate_hash_filter

__all__ = ["Aligner", "Block", "Match", "PairComparer", "ScoredDiff", "validate_hash_filter"]
