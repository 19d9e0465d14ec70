"""Structural source-code similarity detection with winnowed fingerprints."""

from .analyzer import AnalysisCancelledError, Analyzer, InsufficientInputError
from .compare import Block, Match, ScoredDiff
from .config import AnalysisConfig, InvalidConfigurationError, RunConfig, default_config
from .files import File, FileReadFailure, ParseFailure, TokenizedFile
from .region import Range, Region
from .report import Report
from .tokenizers import ParseFailureError, Token

__all__ = [
    "AnalysisCancelledError",
    "AnalysisConfig",
    "Analyzer",
    "Block",
    "File",
    "FileReadFailure",
    "InsufficientInputError",
    "InvalidConfigurationError",
    "Match",
    "ParseFailure",
    "ParseFailureError",
    "Range",
    "Region",
    "Report",
    "RunConfig",
    "ScoredDiff",
    "Token",
    "TokenizedFile",
    "default_config",
]
