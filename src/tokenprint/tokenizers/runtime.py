"""Runtime tokenizer registry construction."""

from __future__ import annotations

from tokenprint.config import AnalysisConfig
from tokenprint.languages import PYTHON, TREE_SITTER_LANGUAGES, normalize_language
from tokenprint.tokenizers.base import Tokenizer
from tokenprint.tokenizers.python import PythonAstTokenizer
from tokenprint.tokenizers.registry import TokenizerRegistry
from tokenprint.tokenizers.tree_sitter import TreeSitterTokenizer


def build_tokenizer(language: str, max_depth: int) -> Tokenizer:
    """Build the tokenizer for a language name or alias."""
    canonical = normalize_language(language)
    if canonical == PYTHON:
        return PythonAstTokenizer(max_depth=max_depth)
    return TreeSitterTokenizer(canonical, max_depth=max_depth)


def build_tokenizer_registry(config: AnalysisConfig) -> TokenizerRegistry:
    """Build tokenizer registry from effective analysis config."""
    registry = TokenizerRegistry()
    if config.language is not None:
        registry.register(build_tokenizer(config.language, config.max_depth), forced=True)
        return registry
    registry.register(PythonAstTokenizer(max_depth=config.max_depth))
    for language in TREE_SITTER_LANGUAGES:
        registry.register(TreeSitterTokenizer(language, max_depth=config.max_depth))
    return registry
