import io
import json
import logging
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from mutagen.id3 import ID3, TALB, TIT2, TPE1, TRCK

from audio_library.cli import main


def write_mp3(path: Path, artist: str, album: str, title: str, number: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    tags = ID3()
    tags.add(TPE1(encoding=3, text=artist))
    tags.add(TALB(encoding=3, text=album))
    tags.add(TIT2(encoding=3, text=title))
    tags.add(TRCK(encoding=3, text=number))
    tags.save(path)


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        root_logger = logging.getLogger()
        self._handlers = list(root_logger.handlers)
        self._level = root_logger.level

    def tearDown(self) -> None:
        root_logger = logging.getLogger()
        root_logger.handlers[:] = self._handlers
        root_logger.setLevel(self._level)

    def _run(self, tmp: Path, *args: str) -> str:
        config = tmp / "config.yaml"
        config.write_text(f"library:\n  roots: ['{tmp / 'music'}']\n", encoding="utf-8")
        out = io.StringIO()
        with redirect_stdout(out):
            main(["--config", str(config), "--log-level", "ERROR", *args])
        return out.getvalue()

    def test_tree_and_artists(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            write_mp3(tmp / "music" / "b" / "2.mp3", "The Band", "Live", "Closer", "2/2")
            write_mp3(tmp / "music" / "b" / "1.mp3", "The Band", "Live", "Opener", "1/2")
            write_mp3(tmp / "music" / "a" / "1.mp3", "Abba", "Gold", "Dancing Queen", "1")

            tree = self._run(tmp, "tree").splitlines()
            self.assertEqual(
                tree,
                [
                    "Abba",
                    "  Gold (1 tracks, 0:00)",
                    "    01. Dancing Queen [0:00]",
                    "The Band",
                    "  Live (2 tracks, 0:00)",
                    "    01. Opener [0:00]",
                    "    02. Closer [0:00]",
                ],
            )

            summary = self._run(tmp, "artists").splitlines()
            self.assertEqual(summary, ["Abba: 1 album(s), 1 track(s)", "The Band: 1 album(s), 2 track(s)"])

            records = json.loads(self._run(tmp, "tree", "--json"))
            self.assertEqual([r["name"] for r in records], ["Abba", "The Band"])
            self.assertEqual(
                [t["title"] for t in records[1]["albums"][0]["tracks"]],
                ["Opener", "Closer"],
            )
    def test_json_stdout_stays_clean_when_files_fail(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            write_mp3(tmp / "music" / "a" / "1.mp3", "Abba", "Gold", "Dancing Queen", "1")
            (tmp / "music" / "a" / "broken.flac").write_bytes(b"not a flac file")
            config = tmp / "config.yaml"
            config.write_text(f"library:\n  roots: ['{tmp / 'music'}']\n", encoding="utf-8")

            out, err = io.StringIO(), io.StringIO()
            with redirect_stdout(out), redirect_stderr(err):
                main(["--config", str(config), "tree", "--json"])

            records = json.loads(out.getvalue())
            self.assertEqual([r["name"] for r in records], ["Abba"])
            self.assertIn("Warnings/Errors summary", err.getvalue())
            self.assertIn("broken.flac", err.getvalue())


if __name__ == "__main__":
    unittest.main()
