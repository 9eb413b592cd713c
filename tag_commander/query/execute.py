"""Run compiled queries against the file index."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func

from tag_commander.index.models import FileTag, IndexedFile
from tag_commander.query.compiler import PathMatch, compile_expression

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from tag_commander.query.ast_nodes import Expr


def execute_search(
    session: Session,
    expr: Expr,
    *,
    path_match: PathMatch = PathMatch.EXACT,
    limit: int | None = None,
) -> list[IndexedFile]:
    """Execute a parsed query against the file index.

    Args:
        session: SQLAlchemy session connected to the index database.
        expr: Parsed expression tree.
        path_match: Wildcard mode for ``inpath:`` terms.
        limit: Maximum number of results, or None for all.

    Returns:
        Matching files ordered by path.
    """
    query = (
        session.query(IndexedFile)
        .filter(compile_expression(expr, path_match))
        .order_by(IndexedFile.path)
    )
    if limit is not None:
        query = query.limit(limit)
    return list(query.all())


def count_tagged(session: Session, name: str) -> int:
    """Return how many files carry the tag ``name`` exactly."""
    return (
        session.query(func.count(FileTag.file_id)).filter(FileTag.tag == name).scalar() or 0
    )
