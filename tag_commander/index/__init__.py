"""Local SQLite index of files and their tags."""

from tag_commander.index.builder import (
    ChangeEvent,
    ChangeKind,
    apply_changes,
    build_index,
    scan_dir,
)
from tag_commander.index.models import FileTag, IndexBase, IndexedFile, IndexState
from tag_commander.index.session import INDEX_DB_NAME, get_index_session
from tag_commander.index.tagging import add_tags, list_tags, remove_tags

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "FileTag",
    "INDEX_DB_NAME",
    "IndexBase",
    "IndexState",
    "IndexedFile",
    "add_tags",
    "apply_changes",
    "build_index",
    "get_index_session",
    "list_tags",
    "remove_tags",
    "scan_dir",
]
