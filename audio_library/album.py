from __future__ import annotations

import logging
from typing import Iterable, Optional

from .images import first_picture
from .models import Picture, Track

logger = logging.getLogger(__name__)


class Album:
    """Tracks of one (artist, album) pair, kept in disc/track order."""

    def __init__(self, artist_name: str, name: str) -> None:
        self._artist_name = artist_name
        self._name = name
        self._tracks: list[Track] = []
        self._image: Optional[Picture] = None

    def __repr__(self) -> str:
        return f"Album(artist_name={self._artist_name!r}, name={self._name!r}, tracks={len(self._tracks)})"

    @staticmethod
    def sort_key(album: "Album") -> tuple[str, str]:
        return (album.name.lower(), album.name)

    @staticmethod
    def compare(a: "Album", b: "Album") -> int:
        key_a = Album.sort_key(a)
        key_b = Album.sort_key(b)
        if key_a == key_b:
            return 0
        return -1 if key_a < key_b else 1

    @staticmethod
    def find_by_track(albums: Iterable["Album"], track: Track) -> Optional["Album"]:
        for album in albums:
            if album.name == track.album:
                return album
        return None

    @property
    def artist_name(self) -> str:
        return self._artist_name

    @property
    def name(self) -> str:
        return self._name

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    @property
    def image(self) -> Optional[Picture]:
        return self._image

    @property
    def duration_seconds(self) -> float:
        return sum(track.duration_seconds for track in self._tracks)

    def owns(self, track: Track) -> bool:
        return track.artist == self._artist_name and track.album == self._name

    def add(self, track: Track) -> bool:
        if not self.owns(track):
            logger.debug(
                "Rejected track %r (%s / %s) for album %s / %s",
                track.title,
                track.artist,
                track.album,
                self._artist_name,
                self._name,
            )
            return False
        self._tracks.append(track)
        self._tracks.sort(key=lambda t: t.sort_key)
        self.update_image()
        return True

    def remove(self, track: Track) -> bool:
        for index, existing in enumerate(self._tracks):
            if existing == track:
                del self._tracks[index]
                self.update_image()
                return True
        return False

    def update_image(self) -> None:
        self._image = first_picture(track.picture for track in self._tracks)
