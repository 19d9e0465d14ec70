"""Supported languages and file extension mapping."""

from __future__ import annotations

PYTHON = "python"

EXTENSION_LANGUAGES: dict[str, str] = {
    ".py": PYTHON,
    ".pyi": PYTHON,
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".rs": "rust",
    ".sh": "bash",
}

LANGUAGE_ALIASES: dict[str, str] = {
    "py": PYTHON,
    "js": "javascript",
    "ts": "typescript",
    "c++": "cpp",
    "c#": "csharp",
    "sh": "bash",
}

SUPPORTED_LANGUAGES: tuple[str, ...] = tuple(sorted(set(EXTENSION_LANGUAGES.values())))

TREE_SITTER_LANGUAGES: tuple[str, ...] = tuple(
    language for language in SUPPORTED_LANGUAGES if language != PYTHON
)


def normalize_language(language: str) -> str:
    """Return the canonical grammar name for a language label."""
    lowered = language.strip().lower()
    return LANGUAGE_ALIASES.get(lowered, lowered)


def extensions_for(language: str) -> tuple[str, ...]:
    """Return the sorted file extensions mapped to a language."""
    canonical = normalize_language(language)
    return tuple(sorted(ext for ext, lang in EXTENSION_LANGUAGES.items() if lang == canonical))
