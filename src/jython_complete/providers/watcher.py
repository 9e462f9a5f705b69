from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

WATCHED_SUFFIXES = frozenset({".py"})


class ModuleChangeHandler(FileSystemEventHandler):
    def __init__(self, on_change: Callable[[Path], None]):
        super().__init__()
        self.on_change = on_change

    def _handle(self, event_type: str, src_path: str | bytes) -> None:
        if isinstance(src_path, bytes):
            src_path = src_path.decode("utf-8", errors="replace")
        path = Path(src_path)
        if path.suffix.lower() not in WATCHED_SUFFIXES:
            return

        logger.info(f"Module file {event_type}: {path}")
        self.on_change(path)

    def on_created(self, event):
        if not event.is_directory:
            self._handle("created", event.src_path)

    def on_modified(self, event):
        if not event.is_directory:
            self._handle("modified", event.src_path)

    def on_deleted(self, event):
        if not event.is_directory:
            self._handle("deleted", event.src_path)


class ModuleWatcher:
    """Watches the directories of loaded module files."""

    def __init__(self, on_change: Callable[[Path], None]):
        self._handler = ModuleChangeHandler(on_change)
        self._observer = None
        self._watched: set[Path] = set()

    @property
    def watched_directories(self) -> set[Path]:
        return set(self._watched)

    def watch(self, directory: Path) -> None:
        directory = directory.resolve()
        if directory in self._watched:
            return

        try:
            if self._observer is None:
                self._observer = Observer()
                self._observer.daemon = True
                self._observer.start()
            self._observer.schedule(self._handler, str(directory), recursive=False)
        except Exception as e:
            logger.warning(f"Cannot watch {directory}: {e}")
            return

        self._watched.add(directory)
        logger.debug(f"Watching module directory: {directory}")

    def stop(self) -> None:
        if self._observer is None:
            return

        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        self._watched.clear()
