"""Unit tests for query AST nodes."""

from __future__ import annotations

import dataclasses

import pytest

from tag_commander.exceptions import InvalidTermError, QueryError
from tag_commander.query.ast_nodes import And, InPath, Not, Or, Tag, Term, inpath, tag


class TestLeaves:
    def test_tag_helper(self) -> None:
        assert tag("kick") == Term(Tag("kick"))

    def test_inpath_helper(self) -> None:
        assert inpath("res/") == Term(InPath("res/"))

    @pytest.mark.parametrize("value", ["", " ", "\t\n"])
    def test_blank_tag_rejected(self, value: str) -> None:
        with pytest.raises(InvalidTermError) as exc_info:
            Tag(value)
        assert exc_info.value.kind == "tag"

    def test_blank_inpath_rejected(self) -> None:
        with pytest.raises(InvalidTermError) as exc_info:
            InPath("  ")
        assert exc_info.value.kind == "inpath"

    def test_invalid_term_is_query_error(self) -> None:
        with pytest.raises(QueryError):
            Tag("")

    def test_tag_and_inpath_differ(self) -> None:
        assert tag("res") != inpath("res")


class TestTree:
    def test_nodes_are_frozen(self) -> None:
        node = And(tag("a"), tag("b"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.left = tag("c")  # type: ignore[misc]

    def test_structural_equality(self) -> None:
        assert Or(Not(tag("a")), tag("b")) == Or(Not(tag("a")), tag("b"))

    def test_order_matters_for_equality(self) -> None:
        assert And(tag("a"), tag("b")) != And(tag("b"), tag("a"))

    def test_hashable(self) -> None:
        assert len({And(tag("a"), tag("b")), And(tag("a"), tag("b"))}) == 1
