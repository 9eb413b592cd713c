"""Compile expression trees into SQL predicates over the file index.

Tag terms are answered by the FTS5 index and path terms by a ``LIKE`` on
the plain ``files.path`` column.  The two cannot be spliced together as
strings because a MATCH query and a WHERE clause are different languages.
Instead every leaf becomes an ordinary boolean predicate on a ``files``
row:

- ``Tag(name)`` -> ``files.id IN (SELECT file_id FROM files_fts
  WHERE files_fts MATCH 'tag_key:"<hex of name>"')``
- ``InPath(pattern)`` -> ``files.path LIKE 'pattern' ESCAPE '\\'``

and ``And``/``Or``/``Not`` map straight onto SQL ``AND``/``OR``/``NOT``.
Compilation therefore never fails for a well-formed tree.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Text, and_, literal_column, not_, or_, select
from sqlalchemy.dialects import sqlite

from tag_commander.index.models import FTS_TABLE_NAME, IndexedFile, files_fts
from tag_commander.query.ast_nodes import And, InPath, Not, Or, Tag, Term
from tag_commander.query.escape import (
    LIKE_ESCAPE_CHAR,
    encode_tag_token,
    escape_fts5_string,
    escape_like_pattern,
)

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from tag_commander.query.ast_nodes import Expr, Symbol


class PathMatch(str, enum.Enum):
    """How an ``inpath:`` pattern is matched against stored paths.

    - ``exact``: the whole path must equal the pattern
    - ``prefix``: the path must start with the pattern
    - ``contains``: the pattern may appear anywhere in the path

    SQLite's ``LIKE`` is case-insensitive for ASCII characters in every mode.
    """

    EXACT = "exact"
    PREFIX = "prefix"
    CONTAINS = "contains"


def fts_tag_query(name: str) -> str:
    """Build the FTS5 query matching exactly the tag ``name``."""
    token = escape_fts5_string(encode_tag_token(name))
    return f'{files_fts.c.tag_key.name}:"{token}"'


def like_pattern(pattern: str, path_match: PathMatch = PathMatch.EXACT) -> str:
    """Escape ``pattern`` and add the wildcards ``path_match`` asks for."""
    escaped = escape_like_pattern(pattern, LIKE_ESCAPE_CHAR)
    if path_match is PathMatch.PREFIX:
        return f"{escaped}%"
    if path_match is PathMatch.CONTAINS:
        return f"%{escaped}%"
    return escaped


def _compile_symbol(symbol: Symbol, path_match: PathMatch) -> ColumnElement[bool]:
    if isinstance(symbol, Tag):
        match = literal_column(FTS_TABLE_NAME, Text).op("MATCH", is_comparison=True)(
            fts_tag_query(symbol.name)
        )
        return IndexedFile.id.in_(select(files_fts.c.file_id).where(match))
    if isinstance(symbol, InPath):
        return IndexedFile.path.like(
            like_pattern(symbol.pattern, path_match), escape=LIKE_ESCAPE_CHAR
        )
    raise TypeError(f"Unsupported term symbol: {symbol!r}")


def compile_expression(
    expr: Expr,
    path_match: PathMatch = PathMatch.EXACT,
) -> ColumnElement[bool]:
    """Compile an expression tree into a single SQLAlchemy predicate.

    Args:
        expr: Root of the parsed expression tree.
        path_match: Wildcard mode for ``inpath:`` terms.

    Returns:
        A boolean clause usable in ``Query.filter`` / ``Select.where``
        against :class:`IndexedFile`.
    """
    if isinstance(expr, Term):
        return _compile_symbol(expr.symbol, path_match)
    if isinstance(expr, And):
        return and_(
            compile_expression(expr.left, path_match),
            compile_expression(expr.right, path_match),
        )
    if isinstance(expr, Or):
        return or_(
            compile_expression(expr.left, path_match),
            compile_expression(expr.right, path_match),
        )
    if isinstance(expr, Not):
        return not_(compile_expression(expr.inner, path_match))
    raise TypeError(f"Unsupported expression node: {expr!r}")


def render_predicate(clause: ColumnElement[bool]) -> str:
    """Render a compiled predicate as one SQLite ``WHERE`` clause string.

    All literals are inlined, so the string can be shown to users or run
    as-is with ``SELECT * FROM files WHERE <predicate>``.
    """
    compiled = clause.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True})
    return str(compiled)
