"""AST data classes for parsed search queries.

A query is a binary tree of :class:`And`, :class:`Or` and :class:`Not`
nodes whose leaves are :class:`Term` nodes.  Each term holds exactly one
symbol: a :class:`Tag` or an :class:`InPath` pattern.

All nodes are frozen, so a parsed tree can be shared freely between
threads and compared structurally with ``==``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from tag_commander.exceptions import InvalidTermError


@dataclass(frozen=True)
class Tag:
    """Tag membership, e.g. ``kick``."""

    name: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise InvalidTermError("tag", self.name)


@dataclass(frozen=True)
class InPath:
    """Path pattern filter, e.g. ``inpath:res/audio/``.

    The pattern is stored raw; it is escaped when compiled.
    """

    pattern: str

    def __post_init__(self) -> None:
        if not self.pattern.strip():
            raise InvalidTermError("inpath", self.pattern)


Symbol = Union[Tag, InPath]


@dataclass(frozen=True)
class Term:
    """A single leaf of the expression tree."""

    symbol: Symbol


@dataclass(frozen=True)
class Not:
    """Negation of an expression: ``-a``."""

    inner: Expr


@dataclass(frozen=True)
class And:
    """Both expressions must match: ``a b``."""

    left: Expr
    right: Expr


@dataclass(frozen=True)
class Or:
    """Either expression may match: ``a | b``."""

    left: Expr
    right: Expr


Expr = Union[And, Or, Not, Term]


def tag(name: str) -> Term:
    """Build a tag leaf."""
    return Term(Tag(name))


def inpath(pattern: str) -> Term:
    """Build a path pattern leaf."""
    return Term(InPath(pattern))
