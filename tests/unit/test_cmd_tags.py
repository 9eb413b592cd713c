"""Unit tests for the tags command group."""

from __future__ import annotations

import json
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from tag_commander.cli import Context
from tag_commander.commands.tags import cli, to_index_path
from tag_commander.config import Config
from tag_commander.index.builder import build_index
from tag_commander.index.session import get_index_session
from tag_commander.index.tagging import list_tags


def _make_ctx(root: Path) -> Context:
    ctx = Context()
    ctx.config = Config(root=root, colored_output=False)
    return ctx


@pytest.fixture
def indexed_root(sample_tree: Path) -> Path:
    """Sample corpus with an on-disk index and no tags."""
    with get_index_session(sample_tree) as session:
        build_index(sample_tree, session)
    return sample_tree


def _invoke(root: Path, *args: str):
    return CliRunner().invoke(cli, list(args), obj=_make_ctx(root))


def _tags(root: Path) -> list[tuple[str, int]]:
    with get_index_session(root) as session:
        return list_tags(session)


class TestToIndexPath:
    def test_absolute_path(self, temp_dir: Path) -> None:
        assert to_index_path(temp_dir / "a" / "b.wav", temp_dir) == "a/b.wav"

    def test_relative_to_cwd(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (temp_dir / "a").mkdir()
        monkeypatch.chdir(temp_dir / "a")
        assert to_index_path(Path("b.wav"), temp_dir) == "a/b.wav"

    def test_relative_to_root_when_cwd_outside(
        self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = temp_dir / "root"
        root.mkdir()
        monkeypatch.chdir(temp_dir)
        assert to_index_path(Path("res/kick.wav"), root) == "res/kick.wav"

    def test_outside_root(self, temp_dir: Path) -> None:
        with pytest.raises(click.BadParameter):
            to_index_path(temp_dir.parent / "elsewhere.wav", temp_dir)


class TestTagsAdd:
    def test_add(self, indexed_root: Path) -> None:
        result = _invoke(
            indexed_root, "add", str(indexed_root / "notes.txt"), "-t", "todo", "-t", "text"
        )
        assert result.exit_code == 0
        assert "Added 2 tag(s)" in result.output
        assert _tags(indexed_root) == [("text", 1), ("todo", 1)]

    def test_add_multiple_files(self, indexed_root: Path) -> None:
        result = _invoke(
            indexed_root,
            "add",
            str(indexed_root / "res" / "audio" / "kick01.wav"),
            str(indexed_root / "res" / "audio" / "kick02.wav"),
            "--tag",
            "kick",
        )
        assert result.exit_code == 0
        assert _tags(indexed_root) == [("kick", 2)]

    def test_add_requires_tag(self, indexed_root: Path) -> None:
        result = _invoke(indexed_root, "add", str(indexed_root / "notes.txt"))
        assert result.exit_code == 2

    def test_add_blank_tag(self, indexed_root: Path) -> None:
        result = _invoke(indexed_root, "add", str(indexed_root / "notes.txt"), "-t", " ")
        assert result.exit_code == 1
        assert _tags(indexed_root) == []

    def test_add_unindexed_file(self, indexed_root: Path) -> None:
        (indexed_root / "later.wav").write_bytes(b"")
        result = _invoke(indexed_root, "add", str(indexed_root / "later.wav"), "-t", "x")
        assert result.exit_code == 2
        assert "File not indexed: later.wav" in result.output

    def test_add_outside_root(self, indexed_root: Path) -> None:
        result = _invoke(indexed_root, "add", str(indexed_root.parent / "x.wav"), "-t", "x")
        assert result.exit_code == 2
        assert "is not inside" in result.output


class TestTagsRemove:
    def test_remove(self, indexed_root: Path) -> None:
        path = str(indexed_root / "notes.txt")
        _invoke(indexed_root, "add", path, "-t", "todo", "-t", "text")
        result = _invoke(indexed_root, "remove", path, "-t", "todo")
        assert result.exit_code == 0
        assert "Removed 1 tag(s)" in result.output
        assert _tags(indexed_root) == [("text", 1)]


class TestTagsList:
    def test_empty(self, indexed_root: Path) -> None:
        result = _invoke(indexed_root, "list")
        assert result.exit_code == 0
        assert "No tags yet" in result.output

    def test_json(self, indexed_root: Path) -> None:
        _invoke(indexed_root, "add", str(indexed_root / "notes.txt"), "-t", "todo")
        result = _invoke(indexed_root, "list", "--format", "json")
        assert result.exit_code == 0
        assert json.loads(result.output) == [{"tag": "todo", "files": 1}]

    def test_table(self, indexed_root: Path) -> None:
        _invoke(indexed_root, "add", str(indexed_root / "notes.txt"), "-t", "todo")
        result = _invoke(indexed_root, "list")
        assert "todo" in result.output
