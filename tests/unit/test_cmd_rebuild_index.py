"""Unit tests for the rebuild-index command."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from tag_commander.cli import Context
from tag_commander.commands.rebuild_index import cli
from tag_commander.config import Config
from tag_commander.index.models import IndexedFile
from tag_commander.index.session import INDEX_DB_NAME, get_index_session


def _rebuild(root: Path, *args: str):
    ctx = Context()
    ctx.config = Config(root=root, colored_output=False)
    return CliRunner().invoke(cli, list(args), obj=ctx)


def _indexed(root: Path) -> list[str]:
    with get_index_session(root) as session:
        return sorted(f.path for f in session.query(IndexedFile).all())


class TestRebuildIndex:
    def test_builds_index(self, sample_tree: Path, sample_files: dict[str, list[str]]) -> None:
        result = _rebuild(sample_tree)
        assert result.exit_code == 0
        assert "Index rebuilt with 6 files" in result.output
        assert (sample_tree / INDEX_DB_NAME).exists()
        assert _indexed(sample_tree) == sorted(sample_files)

    def test_reports_missing(self, sample_tree: Path) -> None:
        _rebuild(sample_tree)
        (sample_tree / "notes.txt").unlink()
        result = _rebuild(sample_tree)
        assert "Index rebuilt with 5 files (1 missing)" in result.output
        assert "notes.txt" in _indexed(sample_tree)

    def test_prune(self, sample_tree: Path) -> None:
        _rebuild(sample_tree)
        (sample_tree / "notes.txt").unlink()
        result = _rebuild(sample_tree, "--prune")
        assert result.exit_code == 0
        assert "notes.txt" not in _indexed(sample_tree)

    def test_missing_root(self, temp_dir: Path) -> None:
        result = _rebuild(temp_dir / "missing")
        assert result.exit_code == 3
