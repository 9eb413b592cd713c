"""Parse tag query syntax into an expression tree."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedCharacters, UnexpectedInput, UnexpectedToken
from lark.exceptions import UnexpectedEOF, VisitError

from tag_commander.exceptions import QueryError, QuerySyntaxError, UnknownKeyError
from tag_commander.query.ast_nodes import And, Expr, InPath, Not, Or, Tag, Term

# Keys accepted in key:value terms
KNOWN_KEYS: frozenset[str] = frozenset({"inpath"})


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("tag_commander.query").joinpath("grammar.lark").read_text()


_GRAMMAR_TEXT = _load_grammar()

_parser = Lark(
    _GRAMMAR_TEXT,
    parser="lalr",
)


def _fold(nodes: Sequence[Expr], combine: Callable[[Expr, Expr], Expr]) -> Expr:
    """Fold nodes into a balanced binary tree, splitting at ``len // 2``.

    ``a b c d`` becomes ``(a b) (c d)`` and ``a b c`` becomes ``a (b c)``.
    A single node is returned as-is.
    """
    if len(nodes) == 1:
        return nodes[0]
    mid = len(nodes) // 2
    return combine(_fold(nodes[:mid], combine), _fold(nodes[mid:], combine))


class _QueryTransformer(Transformer):
    """Transform Lark parse tree into expression nodes."""

    def __init__(self, query_string: str) -> None:
        super().__init__()
        self.query_string = query_string

    def start(self, items: list[Any]) -> Expr:
        return items[0]

    def or_expr(self, items: list[Any]) -> Expr:
        return _fold(items, Or)

    def and_expr(self, items: list[Any]) -> Expr:
        return _fold(items, And)

    def negated(self, items: list[Any]) -> Expr:
        # items[0] is the NEGATE token "-", items[1] the atom
        return Not(items[-1])

    def term(self, items: list[Any]) -> Expr:
        return items[0]

    def tag(self, items: list[Any]) -> Expr:
        return Term(Tag(str(items[0])))

    def keyed(self, items: list[Any]) -> Expr:
        token: Token = items[0]
        key, _, value = str(token).partition(":")
        if key.lower() not in KNOWN_KEYS:
            raise UnknownKeyError(self.query_string, token.start_pos, key)
        if not value:
            raise QuerySyntaxError(
                self.query_string,
                token.start_pos + len(key) + 1,
                f"missing value after '{key}:'",
            )
        return Term(InPath(value))


def _error_position(query_string: str, exc: UnexpectedInput) -> int:
    """Return the character offset a Lark error points at."""
    if isinstance(exc, UnexpectedEOF):
        return len(query_string)
    if isinstance(exc, UnexpectedToken) and exc.token.type == "$END":
        return len(query_string)
    pos = exc.pos_in_stream
    if pos is None or pos < 0:
        return len(query_string)
    return pos


def _error_reason(query_string: str, exc: UnexpectedInput, position: int) -> str:
    if position >= len(query_string):
        return "unexpected end of query"
    if isinstance(exc, UnexpectedCharacters):
        return f"unexpected character {query_string[position]!r}"
    if isinstance(exc, UnexpectedToken):
        return f"unexpected {str(exc.token)!r}"
    return str(exc)


def parse_query(query_string: str) -> Expr:
    """Parse a tag query string into an expression tree.

    Args:
        query_string: The search query to parse.

    Returns:
        The root node of the expression tree.

    Raises:
        QuerySyntaxError: If the query is empty or malformed.
        UnknownKeyError: If a ``key:value`` term uses an unsupported key.
    """
    if not query_string.strip():
        raise QuerySyntaxError(query_string, 0, "empty query")

    try:
        tree = _parser.parse(query_string)
    except UnexpectedInput as e:
        position = _error_position(query_string, e)
        raise QuerySyntaxError(
            query_string, position, _error_reason(query_string, e, position)
        ) from e

    try:
        return _QueryTransformer(query_string).transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, QueryError):
            raise e.orig_exc from None
        raise

