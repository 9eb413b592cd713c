"""Tag query parsing, compilation and execution."""

from tag_commander.query.ast_nodes import And, Expr, InPath, Not, Or, Symbol, Tag, Term
from tag_commander.query.compiler import PathMatch, compile_expression, render_predicate
from tag_commander.query.execute import execute_search
from tag_commander.query.parser import parse_query
from tag_commander.query.traversal import contains_path_term, iter_breadth_first

__all__ = [
    "And",
    "Expr",
    "InPath",
    "Not",
    "Or",
    "PathMatch",
    "Symbol",
    "Tag",
    "Term",
    "compile_expression",
    "contains_path_term",
    "execute_search",
    "iter_breadth_first",
    "parse_query",
    "render_predicate",
]
