"""Tokenizer interfaces and language tokenizers."""

from .base import (
    CLOSE_MARKER,
    OPEN_MARKER,
    ParseFailureError,
    Token,
    TokenContractError,
    Tokenizer,
    linearize,
    validate_tokens,
)
from .python import PythonAstTokenizer
from .registry import TokenizerRegistry
from .runtime import build_tokenizer, build_tokenizer_registry
from .tree_sitter import TreeSitterTokenizer

__all__ = [
    "CLOSE_MARKER",
    "OPEN_MARKER",
    "ParseFailureError",
    "PythonAstTokenizer",
    "Token",
    "TokenContractError",
    "Tokenizer",
    "TokenizerRegistry",
    "TreeSitterTokenizer",
    "build_tokenizer",
    "build_tokenizer_registry",
    "linearize",
    "validate_tokens",
]
