"""Watch the indexed root for file changes.

Directory deletions and moves are queued as single events covering
every file below the directory.  A directory that appears inside the root
is scanned and each of its files queued as created.

The watchdog observer runs handlers on its own thread.  The handler only
records :class:`ChangeEvent` items in a lock-protected queue; the caller
drains the queue and applies the events to the index on its own thread,
so the database is never touched from the observer thread.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from tag_commander.exceptions import ScanError
from tag_commander.index.builder import ChangeEvent, ChangeKind, relative_path, scan_dir
from tag_commander.index.session import INDEX_DB_NAME

logger = logging.getLogger(__name__)


def _as_path(path: str | bytes) -> Path:
    if isinstance(path, bytes):
        path = path.decode("utf-8", errors="surrogateescape")
    return Path(path)


class IndexEventHandler(FileSystemEventHandler):
    """Translate watchdog events into index change events."""

    def __init__(self, root: Path) -> None:
        super().__init__()
        self.root = root
        self._events: list[ChangeEvent] = []
        self._lock = threading.Lock()

    def _relative(self, path: str | bytes) -> str | None:
        """Return the root-relative path, or None if it should be ignored."""
        candidate = _as_path(path)
        if candidate.name.startswith(INDEX_DB_NAME):
            return None
        try:
            relative = relative_path(candidate, self.root)
        except ValueError:
            return None
        return None if relative == "." else relative

    def _push(self, event: ChangeEvent) -> None:
        logger.debug("Queued %s: %s", event.kind.value, event.path)
        with self._lock:
            self._events.append(event)

    def _push_tree(self, directory: Path) -> None:
        """Queue every file below a directory that appeared in the root."""
        try:
            files = scan_dir(directory)
        except ScanError as e:
            logger.debug("Cannot scan new directory %s: %s", directory, e)
            return
        for file in files:
            path = self._relative(str(file))
            if path is not None:
                self._push(ChangeEvent(ChangeKind.CREATED, path))

    def drain(self) -> list[ChangeEvent]:
        """Return all queued events and clear the queue."""
        with self._lock:
            events, self._events = self._events, []
        return events

    def on_created(self, event: FileSystemEvent) -> None:
        path = self._relative(event.src_path)
        if path is None:
            return
        if event.is_directory:
            self._push_tree(_as_path(event.src_path))
        else:
            self._push(ChangeEvent(ChangeKind.CREATED, path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        path = self._relative(event.src_path)
        if path is None:
            return
        kind = ChangeKind.DIR_DELETED if event.is_directory else ChangeKind.DELETED
        self._push(ChangeEvent(kind, path))

    def on_moved(self, event: FileSystemEvent) -> None:
        src = self._relative(event.src_path)
        dest = self._relative(event.dest_path)
        if event.is_directory:
            if src is not None and dest is not None:
                self._push(ChangeEvent(ChangeKind.DIR_MOVED, src, dest))
            elif dest is not None:
                self._push_tree(_as_path(event.dest_path))
            elif src is not None:
                self._push(ChangeEvent(ChangeKind.DIR_DELETED, src))
        elif src is not None and dest is not None:
            self._push(ChangeEvent(ChangeKind.MOVED, src, dest))
        elif dest is not None:
            # Moved in from outside the root
            self._push(ChangeEvent(ChangeKind.CREATED, dest))
        elif src is not None:
            self._push(ChangeEvent(ChangeKind.DELETED, src))


class IndexWatcher:
    """Run a recursive watchdog observer on the indexed root.

    Usage::

        with IndexWatcher(root) as watcher:
            while True:
                apply_changes(session, watcher.drain())
                time.sleep(interval)
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.handler = IndexEventHandler(root)
        self._observer = Observer()

    def start(self) -> None:
        self._observer.schedule(self.handler, str(self.root), recursive=True)
        self._observer.start()
        logger.info("Watching %s", self.root)

    def stop(self) -> None:
        self._observer.stop()
        self._observer.join()

    def drain(self) -> list[ChangeEvent]:
        return self.handler.drain()

    def __enter__(self) -> IndexWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
