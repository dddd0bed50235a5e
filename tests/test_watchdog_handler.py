import asyncio
import unittest
from pathlib import Path

from audio_library.config import LibrarySettings
from audio_library.scanner import LibraryScanner
from audio_library.watchdog_handler import DELETE, UPSERT, LibraryChange, WatchHandler


class _Event:
    def __init__(self, src_path, *, is_directory: bool = False, dest_path=None) -> None:
        self.src_path = src_path
        self.is_directory = is_directory
        if dest_path is not None:
            self.dest_path = dest_path


class TestWatchdogHandler(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.queue: asyncio.Queue[LibraryChange] = asyncio.Queue()
        scanner = LibraryScanner(
            LibrarySettings(roots=["/music"], include_extensions=[".mp3"], exclude_patterns=["*/tmp/*"])
        )
        self.handler = WatchHandler(self.queue, scanner, loop=asyncio.get_running_loop())

    async def _drain(self) -> list[LibraryChange]:
        await asyncio.sleep(0)
        items = []
        while not self.queue.empty():
            items.append(self.queue.get_nowait())
        return items

    async def test_bytes_src_path_is_decoded(self) -> None:
        self.handler.on_created(_Event(b"/music/Artist/Album/01.mp3"))  # type: ignore[arg-type]
        change = await asyncio.wait_for(self.queue.get(), timeout=1.0)
        self.assertEqual(change, LibraryChange(UPSERT, Path("/music/Artist/Album/01.mp3")))

    async def test_ignores_directories_and_excluded_files(self) -> None:
        self.handler.on_created(_Event("/music/Artist", is_directory=True))  # type: ignore[arg-type]
        self.handler.on_modified(_Event("/music/Artist/cover.jpg"))  # type: ignore[arg-type]
        self.handler.on_created(_Event("/music/tmp/01.mp3"))  # type: ignore[arg-type]
        self.assertEqual(await self._drain(), [])

    async def test_delete_and_move(self) -> None:
        self.handler.on_deleted(_Event("/music/A/X/01.mp3"))  # type: ignore[arg-type]
        self.handler.on_moved(_Event("/music/A/X/02.mp3", dest_path="/music/A/Y/02.mp3"))  # type: ignore[arg-type]
        self.assertEqual(
            await self._drain(),
            [
                LibraryChange(DELETE, Path("/music/A/X/01.mp3")),
                LibraryChange(DELETE, Path("/music/A/X/02.mp3")),
                LibraryChange(UPSERT, Path("/music/A/Y/02.mp3")),
            ],
        )
    async def test_directory_delete_and_move_queue_source_removal(self) -> None:
        self.handler.on_deleted(_Event("/music/A", is_directory=True))  # type: ignore[arg-type]
        self.handler.on_moved(
            _Event("/music/B", is_directory=True, dest_path="/elsewhere/B")  # type: ignore[arg-type]
        )
        self.assertEqual(
            await self._drain(),
            [
                LibraryChange(DELETE, Path("/music/A"), is_directory=True),
                LibraryChange(DELETE, Path("/music/B"), is_directory=True),
            ],
        )


if __name__ == "__main__":
    unittest.main()
