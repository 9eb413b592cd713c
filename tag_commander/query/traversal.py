"""Walk expression trees.

The traversal is breadth-first: nodes are taken from the front of a FIFO
queue and their children appended to the back, left child before right.
For ``Or(And(a, b), Not(c))`` the order is::

    Or, And, Not, a, b, c
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from tag_commander.query.ast_nodes import And, InPath, Not, Or, Tag, Term

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tag_commander.query.ast_nodes import Expr, Symbol


def iter_breadth_first(expr: Expr) -> Iterator[Expr]:
    """Yield every node of ``expr`` exactly once, level by level."""
    remaining: deque[Expr] = deque([expr])
    while remaining:
        node = remaining.popleft()
        if isinstance(node, (And, Or)):
            remaining.append(node.left)
            remaining.append(node.right)
        elif isinstance(node, Not):
            remaining.append(node.inner)
        yield node


def iter_symbols(expr: Expr) -> Iterator[Symbol]:
    """Yield the symbol of every leaf, in breadth-first order."""
    for node in iter_breadth_first(expr):
        if isinstance(node, Term):
            yield node.symbol


def contains_path_term(expr: Expr) -> bool:
    """Return True if any leaf of ``expr`` is an ``inpath:`` filter."""
    return any(isinstance(symbol, InPath) for symbol in iter_symbols(expr))


def tag_names(expr: Expr) -> set[str]:
    """Return the names of all tags referenced by ``expr``."""
    return {symbol.name for symbol in iter_symbols(expr) if isinstance(symbol, Tag)}
