"""Unit tests for tag editing."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from tag_commander.exceptions import FileNotIndexedError, InvalidTermError
from tag_commander.index.models import IndexedFile
from tag_commander.index.tagging import (
    add_tags,
    list_tags,
    normalize_tags,
    remove_tags,
    tags_by_file,
)
from tag_commander.query.ast_nodes import tag
from tag_commander.query.execute import execute_search


def _search(session: Session, name: str) -> list[str]:
    return [f.path for f in execute_search(session, tag(name))]


class TestNormalizeTags:
    def test_strips_and_dedupes(self) -> None:
        assert normalize_tags([" kick", "kick ", "snare"]) == ["kick", "snare"]

    def test_blank_rejected(self) -> None:
        with pytest.raises(InvalidTermError):
            normalize_tags(["kick", "  "])


class TestAddTags:
    def test_new_tag_is_searchable(self, index_session: Session) -> None:
        added = add_tags(index_session, ["notes.txt", "res/images/cover.png"], ["todo"])
        assert added == 2
        assert _search(index_session, "todo") == ["notes.txt", "res/images/cover.png"]

    def test_existing_tag_not_counted(self, index_session: Session) -> None:
        assert add_tags(index_session, ["res/audio/kick01.wav"], ["kick", "909", "new"]) == 1

    def test_unknown_file(self, index_session: Session) -> None:
        with pytest.raises(FileNotIndexedError) as exc_info:
            add_tags(index_session, ["missing.wav"], ["kick"])
        assert exc_info.value.path == "missing.wav"

    def test_unknown_file_adds_nothing(self, index_session: Session) -> None:
        with pytest.raises(FileNotIndexedError):
            add_tags(index_session, ["notes.txt", "missing.wav"], ["todo"])
        assert _search(index_session, "todo") == []


class TestRemoveTags:
    def test_removed_tag_not_searchable(self, index_session: Session) -> None:
        removed = remove_tags(index_session, ["res/audio/kick01.wav"], ["kick"])
        assert removed == 1
        assert "res/audio/kick01.wav" not in _search(index_session, "kick")

    def test_absent_tag(self, index_session: Session) -> None:
        assert remove_tags(index_session, ["notes.txt"], ["kick"]) == 0


class TestListTags:
    def test_counts_sorted_by_tag(self, index_session: Session) -> None:
        assert list_tags(index_session) == [
            ("909", 2),
            ("acoustic", 1),
            ("artwork", 1),
            ("kick", 3),
            ("loop", 1),
            ("one-shot", 1),
            ("snare", 2),
        ]

    def test_empty_index(self, empty_index_session: Session) -> None:
        assert list_tags(empty_index_session) == []

    def test_tags_by_file(self, index_session: Session) -> None:
        kick01 = index_session.query(IndexedFile).filter_by(path="res/audio/kick01.wav").one()
        notes = index_session.query(IndexedFile).filter_by(path="notes.txt").one()
        result = tags_by_file(index_session, [kick01.id, notes.id])
        assert result == {kick01.id: ["909", "kick", "one-shot"]}

    def test_tags_by_file_no_ids(self, index_session: Session) -> None:
        assert tags_by_file(index_session, []) == {}
