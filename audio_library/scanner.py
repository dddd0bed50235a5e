from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterator
from pathlib import Path

from .config import LibrarySettings
from .models import Track
from .tagging import TagReader

logger = logging.getLogger(__name__)


class LibraryScanner:
    """Walks the library roots and yields audio files, or the tracks read from them."""

    def __init__(self, settings: LibrarySettings) -> None:
        self.settings = settings
        self._exts = {ext.lower() for ext in self.settings.include_extensions}

    def iter_files(self) -> Iterator[Path]:
        for root in self.settings.roots:
            if not root.exists():
                logger.warning("Library root %s does not exist", root)
                continue
            for file_path in sorted(root.rglob("*")):
                if not file_path.is_file():
                    continue
                if not self.should_include(file_path):
                    continue
                yield file_path

    def iter_tracks(self, reader: TagReader | None = None) -> Iterator[Track]:
        reader = reader or TagReader()
        for file_path in self.iter_files():
            track = reader.read(file_path)
            if track is not None:
                yield track

    def should_include(self, path: Path) -> bool:
        if path.suffix.lower() not in self._exts:
            return False
        rel = str(path)
        for pattern in self.settings.exclude_patterns:
            if fnmatch.fnmatch(rel, pattern):
                return False
        return True
