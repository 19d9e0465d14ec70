"""Core tokenizer protocol, token type and tree linearization."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from tokenprint.config import DEFAULT_MAX_DEPTH
from tokenprint.region import Region

OPEN_MARKER = "("
CLOSE_MARKER = ")"

NodeT = TypeVar("NodeT")


@dataclass(slots=True, frozen=True)
class Token:
    """Structural symbol with the source region it stands for."""

    symbol: str
    region: Region


class ParseFailureError(ValueError):
    """Raised when a tokenizer cannot turn source text into tokens."""


class TokenContractError(ValueError):
    """Raised when tokenizer output violates the shared token contract."""


def validate_tokens(tokens: Sequence[Token]) -> None:
    """Validate tokens against required invariant fields."""
    for position, token in enumerate(tokens):
        if not token.symbol.strip():
            raise TokenContractError(f"Token {position} symbol must be non-empty.")
        if token.region.is_degenerate:
            raise TokenContractError(f"Token {position} region must not end before it starts.")


def linearize(
    root: NodeT,
    *,
    kind: Callable[[NodeT], str],
    span: Callable[[NodeT], Region],
    children: Callable[[NodeT], Iterable[NodeT]],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[Token]:
    """Emit "(" kind child-tokens... ")" for every node in pre-order.

    All three tokens of a node carry the part of the node's span that its
    children do not cover, or the whole span when the children cover it.
    """
    stack: list[tuple[NodeT, int] | Token] = [(root, 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, Token):
            yield item
            continue
        node, depth = item
        if depth > max_depth:
            raise ParseFailureError(f"Syntax tree is nested deeper than {max_depth} levels.")
        node_children = list(children(node))
        full_span = span(node)
        location = Region.first_diff(full_span, [span(child) for child in node_children])
        if location is None:
            location = full_span
        yield Token(OPEN_MARKER, location)
        yield Token(kind(node), location)
        stack.append(Token(CLOSE_MARKER, location))
        for child in reversed(node_children):
            stack.append((child, depth + 1))


class Tokenizer(Protocol):
    """Protocol implemented by language tokenizers."""

    name: str

    def supports_path(self, path: str) -> bool:
        """Return True when the tokenizer handles a file path."""

    def tokenize(self, text: str) -> Iterator[Token]:
        """Return the deterministic token stream for source text."""
