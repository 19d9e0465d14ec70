"""Python tokenizer built on the standard library AST."""

from __future__ import annotations

import ast
from collections.abc import Iterator

from tokenprint.region import Region
from tokenprint.tokenizers.base import DEFAULT_MAX_DEPTH, ParseFailureError, Token, linearize

# Folded into the parent's symbol instead of emitted as nodes.
_FOLDED_NODES = (ast.expr_context, ast.operator, ast.unaryop, ast.boolop, ast.cmpop)


class PythonAstTokenizer:
    """Structural tokens from Python AST node kinds; names and literals are dropped."""

    name = "python"

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._max_depth = max_depth

    def supports_path(self, path: str) -> bool:
        """Return True when path is a Python source or stub file."""
        return path.lower().endswith((".py", ".pyi"))

    def tokenize(self, text: str) -> Iterator[Token]:
        """Parse text and yield its linearized token stream."""
        try:
            tree = ast.parse(text)
        except (SyntaxError, ValueError, RecursionError, MemoryError) as exc:
            raise ParseFailureError(f"Python source could not be parsed: {exc}") from exc

        module_span = Region(0, 0, *_end_of_text(text))
        return linearize(
            tree,
            kind=_node_kind,
            span=lambda node: module_span if node is tree else _node_span(node),
            children=_positioned_children,
            max_depth=self._max_depth,
        )


def _node_kind(node: ast.AST) -> str:
    name = type(node).__name__
    if isinstance(node, (ast.BinOp, ast.UnaryOp, ast.BoolOp, ast.AugAssign)):
        return f"{name}:{type(node.op).__name__}"
    if isinstance(node, ast.Compare):
        return f"{name}:{','.join(type(op).__name__ for op in node.ops)}"
    return name


def _node_span(node: ast.AST) -> Region:
    start_line = node.lineno - 1
    start_col = node.col_offset
    end_lineno = getattr(node, "end_lineno", None) or node.lineno
    end_col = getattr(node, "end_col_offset", None)
    if end_col is None:
        end_col = start_col
    return Region(start_line, start_col, end_lineno - 1, end_col)


def _positioned_children(node: ast.AST) -> list[ast.AST]:
    output: list[ast.AST] = []
    for child in ast.iter_child_nodes(node):
        if isinstance(child, (*_FOLDED_NODES, ast.type_ignore)):
            continue
        if hasattr(child, "lineno"):
            output.append(child)
        else:
            # arguments, comprehension, withitem and match_case carry no
            # position; their children belong to the enclosing node.
            output.extend(_positioned_children(child))
    return output


def _end_of_text(text: str) -> tuple[int, int]:
    lines = text.split("\n")
    return (len(lines) - 1, len(lines[-1].encode("utf-8")))
