"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from tag_commander.index.models import FTS_CREATE_SQL, FileTag, IndexBase, IndexedFile
from tag_commander.index.session import rebuild_fts

# path -> tags for the sample corpus
SAMPLE_FILES: dict[str, list[str]] = {
    "res/audio/kick01.wav": ["kick", "909", "one-shot"],
    "res/audio/kick02.wav": ["kick", "acoustic"],
    "res/audio/snare01.wav": ["snare", "909"],
    "res/audio/loops/break.wav": ["loop", "kick", "snare"],
    "res/images/cover.png": ["artwork"],
    "notes.txt": [],
}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp()).resolve()
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file pointing at the temp directory."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[paths]
root = "{temp_dir.as_posix()}"

[display]
colored_output = false

[search]
path_match = "prefix"
default_limit = 50
""")
    return config_path


@pytest.fixture
def sample_tree(temp_dir: Path) -> Path:
    """Create the sample corpus on disk (empty files) and return its root."""
    root = temp_dir / "corpus"
    for rel in SAMPLE_FILES:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")
    return root


def _make_index_session() -> Session:
    """Create an in-memory index session with tables and the FTS5 table."""
    engine = create_engine("sqlite:///:memory:")
    IndexBase.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    session.execute(text(FTS_CREATE_SQL))
    session.commit()
    return session


def _populate_index(session: Session, files: dict[str, list[str]]) -> dict[str, int]:
    """Insert files with their tags and rebuild FTS.  Returns path -> id."""
    ids: dict[str, int] = {}
    for path, tags in files.items():
        indexed = IndexedFile(path=path, present=True)
        session.add(indexed)
        session.flush()
        ids[path] = indexed.id
        for tag in tags:
            session.add(FileTag(file_id=indexed.id, tag=tag))
    session.flush()
    rebuild_fts(session)
    session.commit()
    return ids


@pytest.fixture
def index_session() -> Generator[Session, None, None]:
    """In-memory index populated with the sample corpus."""
    session = _make_index_session()
    _populate_index(session, SAMPLE_FILES)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def empty_index_session() -> Generator[Session, None, None]:
    """In-memory index with tables but no files."""
    session = _make_index_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def populate_index():
    """Return a helper inserting ``{path: [tags]}`` into an index session."""
    return _populate_index


@pytest.fixture
def sample_files() -> dict[str, list[str]]:
    """The ``{path: [tags]}`` mapping loaded by ``index_session``."""
    return SAMPLE_FILES
