from __future__ import annotations

import asyncio
import logging
from typing import Optional

from watchdog.observers import Observer

from .config import Settings
from .library import MusicLibrary
from .scanner import LibraryScanner
from .tagging import TagReader
from .watchdog_handler import LibraryChange, WatchHandler

logger = logging.getLogger(__name__)


class LibraryWatcher:
    """Keeps a :class:`MusicLibrary` in step with the files under the library roots.

    Observer threads only enqueue changes. A single consumer task applies them,
    so the library is never mutated from two places at once.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        library: Optional[MusicLibrary] = None,
        scanner: Optional[LibraryScanner] = None,
        reader: Optional[TagReader] = None,
    ) -> None:
        self.settings = settings
        self.scanner = scanner or LibraryScanner(settings.library)
        self.reader = reader or TagReader()
        self.library = library or MusicLibrary()
        self.queue: asyncio.Queue[LibraryChange] = asyncio.Queue()
        self.observer: Observer | None = None

    def scan(self) -> MusicLibrary:
        logger.debug("Starting initial scan")
        self.library = MusicLibrary.from_tracks(self.scanner.iter_tracks(self.reader))
        logger.info(
            "Library ready: %d artist(s), %d album(s), %d track(s)",
            len(self.library.artists),
            self.library.album_count,
            self.library.track_count,
        )
        return self.library

    async def run(self) -> None:
        self.scan()
        loop = asyncio.get_running_loop()
        self._bootstrap_watchdog(loop)
        try:
            await self._consume()
        except (asyncio.CancelledError, KeyboardInterrupt):
            logger.debug("Watcher stopping")
        finally:
            if self.observer:
                self.observer.stop()
                self.observer.join()

    async def apply(self, change: LibraryChange) -> bool:
        match change.kind:
            case "upsert":
                loop = asyncio.get_running_loop()
                track = await loop.run_in_executor(None, self.reader.read, change.path)
                replaced = self.library.remove_path(change.path)
                if track is None:
                    return replaced
                self.library.add_track(track)
                logger.info(
                    "%s %s / %s / %s",
                    "Updated" if replaced else "Added",
                    track.artist,
                    track.album,
                    track.title,
                )
                return True
            case "delete" if change.is_directory:
                count = self.library.remove_under(change.path)
                if count:
                    logger.info("Removed %d track(s) under %s", count, change.path)
                return count > 0
            case "delete":
                removed = self.library.remove_path(change.path)
                if removed:
                    logger.info("Removed %s", change.path)
                return removed
            case _:
                logger.warning("Ignoring unknown change kind %r", change.kind)
                return False

    async def _consume(self) -> None:
        while True:
            change = await self.queue.get()
            try:
                await self.apply(change)
            except Exception:  # pragma: no cover - logged and ignored
                logger.exception("Failed to apply %s for %s", change.kind, change.path)
            finally:
                self.queue.task_done()

    def _bootstrap_watchdog(self, loop: asyncio.AbstractEventLoop) -> None:
        handler = WatchHandler(self.queue, self.scanner, loop=loop)
        observer = Observer()
        for root in self.settings.library.roots:
            if not root.exists():
                continue
            observer.schedule(handler, str(root), recursive=self.settings.watch.recursive)
        observer.start()
        self.observer = observer
