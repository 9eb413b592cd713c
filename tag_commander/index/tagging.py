"""Add, remove and list tags on indexed files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func

from tag_commander.exceptions import FileNotIndexedError
from tag_commander.index.models import FileTag, IndexedFile
from tag_commander.index.session import rebuild_fts
from tag_commander.query.ast_nodes import Tag

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim tag names and drop duplicates, keeping first-seen order.

    Raises:
        InvalidTermError: If a tag is empty after trimming.
    """
    names: list[str] = []
    for raw in tags:
        name = Tag(raw).name.strip()
        if name not in names:
            names.append(name)
    return names


def _resolve_files(session: Session, paths: Iterable[str]) -> list[IndexedFile]:
    files: list[IndexedFile] = []
    for path in paths:
        indexed = session.query(IndexedFile).filter_by(path=path).one_or_none()
        if indexed is None:
            raise FileNotIndexedError(path)
        files.append(indexed)
    return files


def add_tags(session: Session, paths: Iterable[str], tags: Iterable[str]) -> int:
    """Tag every file in ``paths`` with every tag in ``tags``.

    Returns:
        Number of new (file, tag) memberships.

    Raises:
        FileNotIndexedError: If a path is not in the index.
        InvalidTermError: If a tag is empty.
    """
    names = normalize_tags(tags)
    files = _resolve_files(session, paths)

    added = 0
    for indexed in files:
        current = {
            row.tag for row in session.query(FileTag).filter(FileTag.file_id == indexed.id).all()
        }
        for name in names:
            if name not in current:
                session.add(FileTag(file_id=indexed.id, tag=name))
                added += 1

    if added:
        session.flush()
        rebuild_fts(session)
        session.commit()
    return added


def remove_tags(session: Session, paths: Iterable[str], tags: Iterable[str]) -> int:
    """Remove every tag in ``tags`` from every file in ``paths``.

    Returns:
        Number of removed (file, tag) memberships.

    Raises:
        FileNotIndexedError: If a path is not in the index.
        InvalidTermError: If a tag is empty.
    """
    names = normalize_tags(tags)
    files = _resolve_files(session, paths)

    removed = 0
    for indexed in files:
        removed += (
            session.query(FileTag)
            .filter(FileTag.file_id == indexed.id, FileTag.tag.in_(names))
            .delete(synchronize_session=False)
        )

    if removed:
        rebuild_fts(session)
        session.commit()
    return removed


def list_tags(session: Session) -> list[tuple[str, int]]:
    """Return ``(tag, file_count)`` pairs sorted by tag."""
    rows = (
        session.query(FileTag.tag, func.count(FileTag.file_id))
        .group_by(FileTag.tag)
        .order_by(FileTag.tag)
        .all()
    )
    return [(tag, count) for tag, count in rows]


def tags_by_file(session: Session, file_ids: Iterable[int]) -> dict[int, list[str]]:
    """Map file ids to their sorted tag lists."""
    ids = list(file_ids)
    result: dict[int, list[str]] = {}
    if not ids:
        return result
    for row in session.query(FileTag).filter(FileTag.file_id.in_(ids)).all():
        result.setdefault(row.file_id, []).append(row.tag)
    for names in result.values():
        names.sort()
    return result
