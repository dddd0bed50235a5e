from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler

from .scanner import LibraryScanner

logger = logging.getLogger(__name__)

UPSERT = "upsert"
DELETE = "delete"


@dataclass(frozen=True, slots=True)
class LibraryChange:
    kind: str
    path: Path
    is_directory: bool = False


class WatchHandler(FileSystemEventHandler):
    """Translates filesystem events into queued :class:`LibraryChange` items.

    Runs on the watchdog observer thread; it never touches the library itself.
    """

    def __init__(
        self,
        queue: asyncio.Queue[LibraryChange],
        scanner: LibraryScanner,
        *,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        super().__init__()
        self.queue = queue
        self.scanner = scanner
        self.loop = loop

    def on_created(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event, UPSERT)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event, UPSERT)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event, DELETE)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event, DELETE)
        dest = getattr(event, "dest_path", None)
        if dest:
            self._enqueue_path(dest, UPSERT, is_directory=event.is_directory)

    def _maybe_enqueue(self, event: FileSystemEvent, kind: str) -> None:
        self._enqueue_path(event.src_path, kind, is_directory=event.is_directory)

    def _enqueue_path(self, src: str | bytes, kind: str, *, is_directory: bool) -> None:
        if isinstance(src, bytes):
            src = src.decode("utf-8", errors="replace")
        path = Path(src)
        if is_directory:
            # Only removals are queued; files of new folders arrive as file events.
            if kind != DELETE:
                return
            change = LibraryChange(kind=kind, path=path, is_directory=True)
        elif not self.scanner.should_include(path):
            return
        else:
            change = LibraryChange(kind=kind, path=path)
        logger.debug("Queued %s for %s", kind, path)
        self.loop.call_soon_threadsafe(self.queue.put_nowait, change)
