"""SQLAlchemy ORM models for the file index."""

from __future__ import annotations

from sqlalchemy import Boolean, Index, Integer, String, Text, column, table
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class IndexBase(DeclarativeBase):
    """Base class for index ORM models."""

    pass


class IndexedFile(IndexBase):
    """A file discovered under the indexed root."""

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Relative to the indexed root, "/"-separated
    path: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    present: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")

    def __repr__(self) -> str:
        return f"<IndexedFile(id={self.id}, path='{self.path}')>"


class FileTag(IndexBase):
    """Multi-value tag membership for an indexed file."""

    __tablename__ = "file_tags"

    file_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tag: Mapped[str] = mapped_column(String(256), primary_key=True)

    __table_args__ = (Index("ix_file_tags_tag", "tag"),)

    def __repr__(self) -> str:
        return f"<FileTag(file_id={self.file_id}, tag='{self.tag}')>"


class IndexState(IndexBase):
    """Singleton row tracking index freshness."""

    __tablename__ = "index_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    root: Mapped[str | None] = mapped_column(Text)
    last_scanned: Mapped[str | None] = mapped_column(String(32))
    file_count: Mapped[int | None] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<IndexState(root='{self.root}', files={self.file_count})>"


# FTS5 virtual table, one row per (file, tag). Virtual tables are not part
# of the ORM metadata; this lightweight construct is only used to build
# queries against it.
#
# tag_key holds the tag as lowercase hex of its UTF-8 bytes, so the
# tokenizer sees every tag as exactly one token and a phrase query on it is
# an exact, case-sensitive membership test.
FTS_TABLE_NAME = "files_fts"

files_fts = table(
    FTS_TABLE_NAME,
    column("tag_key", Text),
    column("file_id", Integer),
)

FTS_CREATE_SQL = f"""
    CREATE VIRTUAL TABLE IF NOT EXISTS {FTS_TABLE_NAME} USING fts5(
        tag_key, file_id UNINDEXED
    )
"""

# Columns the current FTS schema must have; an older table is rebuilt
FTS_COLUMNS = ("tag_key", "file_id")
