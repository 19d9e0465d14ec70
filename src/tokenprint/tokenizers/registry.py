"""Tokenizer registry with deterministic selection behavior."""

from __future__ import annotations

from dataclasses import dataclass, field

from tokenprint.tokenizers.base import Tokenizer


@dataclass(slots=True)
class TokenizerRegistry:
    """Ordered tokenizer registry with an optional forced tokenizer."""

    _tokenizers: list[Tokenizer] = field(default_factory=list)
    _forced: Tokenizer | None = None

    def register(self, tokenizer: Tokenizer, *, forced: bool = False) -> None:
        """Register a tokenizer in deterministic insertion order."""
        if forced:
            self._forced = tokenizer
            return
        self._tokenizers.append(tokenizer)

    def select(self, path: str) -> Tokenizer:
        """Return the forced tokenizer, else the first one supporting the path."""
        if self._forced is not None:
            return self._forced
        for tokenizer in self._tokenizers:
            if tokenizer.supports_path(path):
                return tokenizer
        raise LookupError(f"No tokenizer supports path: {path}")
