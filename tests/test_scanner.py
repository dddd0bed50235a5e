import tempfile
import unittest
from pathlib import Path

from audio_library.config import LibrarySettings
from audio_library.models import Track
from audio_library.scanner import LibraryScanner


class _ReaderStub:
    def __init__(self) -> None:
        self.seen: list[Path] = []

    def read(self, path: Path):
        self.seen.append(path)
        if path.stem == "broken":
            return None
        return Track(artist="A", album="X", title=path.stem, path=path)


class TestLibraryScanner(unittest.TestCase):
    def test_iter_files_filters_extension_and_patterns(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            album = root / "A" / "X"
            skipped = root / "incoming"
            album.mkdir(parents=True)
            skipped.mkdir()
            (album / "02.flac").write_bytes(b"")
            (album / "01.MP3").write_bytes(b"")
            (album / "cover.jpg").write_bytes(b"")
            (skipped / "03.mp3").write_bytes(b"")

            scanner = LibraryScanner(
                LibrarySettings(
                    roots=[root, root / "missing"],
                    include_extensions=[".mp3", ".flac"],
                    exclude_patterns=["*/incoming/*"],
                )
            )
            files = list(scanner.iter_files())
            self.assertEqual([p.name for p in files], ["01.MP3", "02.flac"])

    def test_iter_tracks_skips_unreadable(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "good.mp3").write_bytes(b"")
            (root / "broken.mp3").write_bytes(b"")
            scanner = LibraryScanner(LibrarySettings(roots=[root], include_extensions=[".mp3"]))
            reader = _ReaderStub()
            tracks = list(scanner.iter_tracks(reader))  # type: ignore[arg-type]
            self.assertEqual([t.title for t in tracks], ["good"])
            self.assertEqual(len(reader.seen), 2)


if __name__ == "__main__":
    unittest.main()
