"""Scan a directory tree and build or update the file index."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import func

from tag_commander.exceptions import RootNotADirectoryError, ScanError
from tag_commander.index.models import FileTag, IndexedFile, IndexState
from tag_commander.index.session import INDEX_DB_NAME, create_fts_table, rebuild_fts
from tag_commander.utils.output import debug, verbose

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session


# ---------------------------------------------------------------------------
# Directory scan
# ---------------------------------------------------------------------------


def _is_index_file(name: str) -> bool:
    """Match the index database and its -wal/-shm/-journal siblings."""
    return name.startswith(INDEX_DB_NAME)


def _classify_entries(
    directory: Path,
    items: list[Path],
    unscanned_dirs: list[Path],
) -> None:
    """Sort the entries of ``directory`` into files and directories to scan."""
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    unscanned_dirs.append(Path(entry.path))
                elif not _is_index_file(entry.name):
                    items.append(Path(entry.path))
            except OSError as e:
                debug(f"Skipping {entry.path}: {e}")


def scan_dir(root: Path) -> list[Path]:
    """Return every non-directory entry below ``root``.

    Directories are walked iteratively with a stack.  Symlinked
    directories are not followed.  Subdirectories that cannot be read
    are skipped.

    Raises:
        RootNotADirectoryError: If ``root`` is not a directory.
        ScanError: If ``root`` itself cannot be read.
    """
    if not root.is_dir():
        raise RootNotADirectoryError(root)

    items: list[Path] = []
    unscanned_dirs: list[Path] = []

    try:
        _classify_entries(root, items, unscanned_dirs)
    except OSError as e:
        raise ScanError(root, str(e)) from e

    while unscanned_dirs:
        directory = unscanned_dirs.pop()
        try:
            _classify_entries(directory, items, unscanned_dirs)
        except OSError as e:
            debug(f"Cannot read directory {directory}: {e}")

    return items


def relative_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators."""
    return path.relative_to(root).as_posix()


# ---------------------------------------------------------------------------
# Index builder
# ---------------------------------------------------------------------------


def _delete_file(session: Session, indexed: IndexedFile) -> None:
    session.query(FileTag).filter(FileTag.file_id == indexed.id).delete()
    session.delete(indexed)


def _update_state(session: Session, root: Path) -> int:
    present = session.query(IndexedFile).filter_by(present=True).count()
    state = session.get(IndexState, 1)
    if state is None:
        state = IndexState(id=1)
        session.add(state)
    state.root = str(root)
    state.last_scanned = datetime.now(timezone.utc).isoformat(timespec="seconds")
    state.file_count = present
    return present


def build_index(root: Path, session: Session, *, prune: bool = False) -> int:
    """Scan ``root`` and bring the index in line with what is on disk.

    New files are added.  Files that disappeared keep their tags and are
    marked ``present=False`` so that a file restored later gets its tags
    back; with ``prune=True`` they are deleted along with their tags.

    Returns:
        Number of files currently present under ``root``.
    """
    create_fts_table(session)

    verbose(f"Scanning {root}...")
    found = {relative_path(p, root) for p in scan_dir(root)}
    verbose(f"Found {len(found)} files")

    existing = {f.path: f for f in session.query(IndexedFile).all()}

    added = 0
    for path in sorted(found - existing.keys()):
        session.add(IndexedFile(path=path, present=True))
        added += 1

    missing = 0
    pruned = 0
    for path, indexed in existing.items():
        if path in found:
            if not indexed.present:
                indexed.present = True
        elif prune:
            _delete_file(session, indexed)
            pruned += 1
        elif indexed.present:
            indexed.present = False
            missing += 1

    session.flush()
    verbose(f"{added} new, {missing} missing, {pruned} pruned")

    verbose("Rebuilding FTS5 index...")
    rebuild_fts(session)

    count = _update_state(session, root)
    session.commit()
    return count


# ---------------------------------------------------------------------------
# Single-path updates
# ---------------------------------------------------------------------------


def index_path(session: Session, path: str) -> IndexedFile:
    """Add ``path`` to the index, or mark it present again."""
    indexed = session.query(IndexedFile).filter_by(path=path).one_or_none()
    if indexed is None:
        indexed = IndexedFile(path=path, present=True)
        session.add(indexed)
        debug(f"Indexed {path}")
    else:
        indexed.present = True
    session.flush()
    return indexed


def mark_missing(session: Session, path: str) -> bool:
    """Mark ``path`` as no longer present.  Returns False if not indexed."""
    indexed = session.query(IndexedFile).filter_by(path=path).one_or_none()
    if indexed is None:
        return False
    indexed.present = False
    session.flush()
    debug(f"Marked missing {path}")
    return True


def move_path(session: Session, old_path: str, new_path: str) -> IndexedFile:
    """Rename an indexed file, keeping its tags.

    A file already indexed at ``new_path`` is replaced.  If ``old_path``
    was never indexed, ``new_path`` is simply added.
    """
    indexed = session.query(IndexedFile).filter_by(path=old_path).one_or_none()
    if indexed is None:
        return index_path(session, new_path)

    replaced = session.query(IndexedFile).filter_by(path=new_path).one_or_none()
    if replaced is not None and replaced.id != indexed.id:
        _delete_file(session, replaced)
        session.flush()

    indexed.path = new_path
    indexed.present = True
    session.flush()
    debug(f"Moved {old_path} -> {new_path}")
    return indexed


def _below(directory: str):
    """Filter matching paths inside ``directory`` (case-sensitive)."""
    prefix = f"{directory}/"
    return func.substr(IndexedFile.path, 1, len(prefix)) == prefix


def mark_dir_missing(session: Session, directory: str) -> int:
    """Mark every present file below ``directory`` as missing.

    Returns:
        Number of files marked.
    """
    files = session.query(IndexedFile).filter(_below(directory), IndexedFile.present).all()
    for indexed in files:
        indexed.present = False
    session.flush()
    if files:
        debug(f"Marked {len(files)} missing under {directory}/")
    return len(files)


def move_dir(session: Session, old_dir: str, new_dir: str) -> int:
    """Move every present file below ``old_dir`` to ``new_dir``, keeping tags.

    Returns:
        Number of files moved.
    """
    files = session.query(IndexedFile).filter(_below(old_dir), IndexedFile.present).all()
    old_paths = [f.path for f in files]
    for old_path in old_paths:
        move_path(session, old_path, new_dir + old_path[len(old_dir) :])
    return len(old_paths)


class ChangeKind(str, enum.Enum):
    """Kind of filesystem change reported by the watcher."""

    CREATED = "created"
    DELETED = "deleted"
    MOVED = "moved"
    DIR_DELETED = "dir_deleted"
    DIR_MOVED = "dir_moved"


@dataclass(frozen=True)
class ChangeEvent:
    """A file or directory change, with paths relative to the indexed root."""

    kind: ChangeKind
    path: str
    dest_path: str | None = None


def apply_changes(session: Session, events: Iterable[ChangeEvent]) -> int:
    """Apply watcher events to the index and rebuild FTS if tags moved.

    Returns:
        Number of events applied.
    """
    applied = 0
    for event in events:
        if event.kind is ChangeKind.CREATED:
            index_path(session, event.path)
        elif event.kind is ChangeKind.DELETED:
            if not mark_missing(session, event.path):
                continue
        elif event.kind is ChangeKind.MOVED and event.dest_path is not None:
            move_path(session, event.path, event.dest_path)
        elif event.kind is ChangeKind.DIR_DELETED:
            if not mark_dir_missing(session, event.path):
                continue
        elif event.kind is ChangeKind.DIR_MOVED and event.dest_path is not None:
            if not move_dir(session, event.path, event.dest_path):
                continue
        else:
            continue
        applied += 1

    if applied:
        rebuild_fts(session)
        session.commit()
    return applied
