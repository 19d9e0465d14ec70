"""Tree-sitter tokenizer for non-Python languages."""

from __future__ import annotations

from collections.abc import Iterator

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from tokenprint.languages import extensions_for, normalize_language
from tokenprint.region import Region
from tokenprint.tokenizers.base import DEFAULT_MAX_DEPTH, ParseFailureError, Token, linearize


class TreeSitterTokenizer:
    """Structural tokens from tree-sitter node types and named children."""

    def __init__(self, language: str, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.name = normalize_language(language)
        self._extensions = extensions_for(self.name)
        self._max_depth = max_depth

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    def supports_path(self, path: str) -> bool:
        """Return True when path has an extension mapped to this grammar."""
        return bool(self._extensions) and path.lower().endswith(self._extensions)

    def tokenize(self, text: str) -> Iterator[Token]:
        """Parse text and yield its linearized token stream."""
        tree = self._get_parser().parse(text.encode("utf-8"))
        return linearize(
            tree.root_node,
            kind=lambda node: node.type,
            span=_node_span,
            children=lambda node: node.named_children,
            max_depth=self._max_depth,
        )

    def _get_parser(self) -> Parser:
        # One parser per call: parsers are not shared between worker threads.
        try:
            return get_parser(self.name)
        except (LookupError, ValueError) as exc:
            raise ParseFailureError(f"No tree-sitter grammar for language '{self.name}'.") from exc


def _node_span(node: Node) -> Region:
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return Region(start_row, start_col, end_row, end_col)
