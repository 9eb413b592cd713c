"""Index database session management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import Connection, Engine, create_engine, text
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session, sessionmaker

from tag_commander.index.models import (
    FTS_COLUMNS,
    FTS_CREATE_SQL,
    FTS_TABLE_NAME,
    FileTag,
    IndexBase,
    IndexedFile,
    IndexState,
)

INDEX_DB_NAME = ".tag-commander.db"

log = logging.getLogger(__name__)

# All ORM models for schema evolution
_ALL_MODELS = [
    IndexedFile,
    FileTag,
    IndexState,
]


def get_index_engine(root: Path):
    """Create SQLAlchemy engine for the index database.

    Args:
        root: Path to the indexed root directory.

    Returns:
        SQLAlchemy engine for the index database.
    """
    db_path = root / INDEX_DB_NAME
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={
            "timeout": 30,
            "check_same_thread": False,
        },
    )
    return engine


def delete_index(root: Path) -> bool:
    """Delete the index database file if it exists.

    Returns True if a file was deleted, False otherwise.
    """
    db_path = root / INDEX_DB_NAME
    if db_path.exists():
        db_path.unlink()
        log.info("Deleted index database: %s", db_path)
        return True
    return False


def create_fts_table(session: Session | Connection) -> bool:
    """Create the FTS5 virtual table, replacing one with an outdated schema.

    Returns:
        True if the table was (re)created and needs :func:`rebuild_fts`.
    """
    rows = session.execute(text(f"PRAGMA table_info({FTS_TABLE_NAME})")).all()
    columns = tuple(row[1] for row in rows)
    if columns == FTS_COLUMNS:
        return False
    if columns:
        log.info("Recreating %s with columns %s", FTS_TABLE_NAME, ", ".join(FTS_COLUMNS))
        session.execute(text(f"DROP TABLE {FTS_TABLE_NAME}"))
    session.execute(text(FTS_CREATE_SQL))
    return True


def rebuild_fts(session: Session | Connection) -> None:
    """Rebuild the FTS5 index from the file_tags table."""
    session.execute(text(f"DELETE FROM {FTS_TABLE_NAME}"))
    session.execute(
        text(f"""
        INSERT INTO {FTS_TABLE_NAME}(tag_key, file_id)
        SELECT lower(hex(tag)), file_id FROM file_tags
    """)
    )


def _is_corruption_error(exc: Exception) -> bool:
    msg = str(exc).lower()
    return "malformed" in msg or "corrupt" in msg or "not a database" in msg


@contextmanager
def get_index_session(root: Path) -> Generator[Session, None, None]:
    """Create a session for the index database.

    Auto-creates tables (including the FTS5 table) on first use.  If the
    database file turns out to be corrupt while it is opened (e.g. truncated
    write), it is deleted and recreated once.  Errors raised by the caller
    while the session is in use are never retried.

    New columns and indexes are auto-added to existing tables via
    schema evolution (no migrations needed).

    Args:
        root: Path to the indexed root directory.

    Yields:
        SQLAlchemy Session for the index database.
    """
    try:
        engine = _open_index_engine(root)
    except Exception as exc:
        if not _is_corruption_error(exc):
            raise
        log.warning("Index database appears corrupt, rebuilding: %s", exc)
        delete_index(root)
        engine = _open_index_engine(root)

    session = sessionmaker(bind=engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()


def _open_index_engine(root: Path) -> Engine:
    """Create the engine and bring the database schema up to date."""
    engine = get_index_engine(root)
    try:
        # Create missing tables
        IndexBase.metadata.create_all(engine)

        # Auto-add missing columns and indexes to existing tables
        _ensure_schema(engine)

        with engine.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            if create_fts_table(conn):
                rebuild_fts(conn)
            conn.commit()
    except Exception:
        engine.dispose()
        raise
    return engine


def _ensure_schema(engine) -> None:
    """Auto-add missing columns and indexes to existing tables.

    Only additive changes (new columns, new indexes) are handled.
    Column type changes and removals require deleting the database.
    """
    inspector = sa_inspect(engine)
    existing_tables = set(inspector.get_table_names())

    for model in _ALL_MODELS:
        table_name = model.__tablename__
        if table_name not in existing_tables:
            continue  # create_all() already handled new tables

        existing_cols = {col["name"] for col in inspector.get_columns(table_name)}
        for column in model.__table__.columns:
            if column.name in existing_cols:
                continue
            col_type = column.type.compile(engine.dialect)
            nullable = "" if column.nullable else " NOT NULL"
            default = ""
            if column.server_default is not None:
                default = f" DEFAULT {column.server_default.arg}"
            ddl = f"ALTER TABLE {table_name} ADD COLUMN {column.name} {col_type}{nullable}{default}"
            with engine.begin() as conn:
                conn.execute(text(ddl))
            log.info("Schema evolution: added column %s.%s", table_name, column.name)

        existing_indexes = {idx["name"] for idx in inspector.get_indexes(table_name)}
        for index in model.__table__.indexes:
            if index.name not in existing_indexes:
                index.create(engine)
                log.info("Schema evolution: created index %s on %s", index.name, table_name)
