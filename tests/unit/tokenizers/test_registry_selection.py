from __future__ import annotations

from collections.abc import Iterator

import pytest

from tokenprint.config import DEFAULT_MAX_DEPTH, AnalysisConfig
from tokenprint.region import Region
from tokenprint.tokenizers import (
    PythonAstTokenizer,
    Token,
    TokenizerRegistry,
    build_tokenizer,
    build_tokenizer_registry,
)
from tokenprint.tokenizers import base


class _FakeTokenizer:
    def __init__(self, name: str, suffix: str) -> None:
        self.name = name
        self._suffix = suffix

    def supports_path(self, path: str) -> bool:
        return path.endswith(self._suffix)

    def tokenize(self, text: str) -> Iterator[Token]:
        yield Token(self.name, Region(0, 0, 0, len(text)))


def test_registry_selects_first_supporting_tokenizer() -> None:
    registry = TokenizerRegistry()
    first = _FakeTokenizer("first", ".x")
    second = _FakeTokenizer("second", ".x")
    registry.register(first)
    registry.register(second)

    assert registry.select("a.x") is first
    with pytest.raises(LookupError, match="No tokenizer supports path"):
        registry.select("a.y")


def test_forced_tokenizer_wins_for_every_path() -> None:
    registry = TokenizerRegistry()
    registry.register(_FakeTokenizer("by-extension", ".x"))
    forced = _FakeTokenizer("forced", ".never")
    registry.register(forced, forced=True)

    assert registry.select("a.x") is forced
    assert registry.select("no_extension") is forced


def test_runtime_registry_maps_extensions_to_languages() -> None:
    registry = build_tokenizer_registry(AnalysisConfig())

    assert registry.select("src/app.py").name == "python"
    assert registry.select("web/app.js").name == "javascript"
    assert registry.select("web/app.ts").name == "typescript"
    assert registry.select("Main.java").name == "java"
    assert registry.select("lib.rs").name == "rust"
    with pytest.raises(LookupError):
        registry.select("README.md")


def test_runtime_registry_honours_configured_language() -> None:
    registry = build_tokenizer_registry(AnalysisConfig(language="javascript"))

    assert registry.select("file1").name == "javascript"
    assert registry.select("script.py").name == "javascript"


def test_build_tokenizer_accepts_language_aliases() -> None:
    tokenizer = build_tokenizer("py", 50)

    assert isinstance(tokenizer, PythonAstTokenizer)
    assert build_tokenizer("js", 50).name == "javascript"


def test_tokenizers_share_the_configured_depth_default() -> None:
    assert base.DEFAULT_MAX_DEPTH == DEFAULT_MAX_DEPTH == AnalysisConfig().max_depth
