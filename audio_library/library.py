from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .album import Album
from .artist import Artist
from .models import Track

logger = logging.getLogger(__name__)


class MusicLibrary:
    """Sorted artist tree with single-track updates.

    Albums that lose their last track are removed from their artist, and
    artists that lose their last album are dropped from the library.
    """

    def __init__(self, artists: Optional[Iterable[Artist]] = None) -> None:
        self._artists: list[Artist] = sorted(
            (artist for artist in artists or [] if artist.albums), key=Artist.sort_key
        )

    @classmethod
    def from_tracks(cls, tracks: Iterable[Track]) -> "MusicLibrary":
        return cls(Artist.from_tracks(tracks))

    @property
    def artists(self) -> tuple[Artist, ...]:
        return tuple(self._artists)

    @property
    def album_count(self) -> int:
        return sum(len(artist.albums) for artist in self._artists)

    @property
    def track_count(self) -> int:
        return sum(1 for _ in self.iter_tracks())

    def iter_tracks(self) -> Iterator[Track]:
        for artist in self._artists:
            for album in artist.albums:
                yield from album.tracks

    def find_artist(self, name: str) -> Optional[Artist]:
        for artist in self._artists:
            if artist.name == name:
                return artist
        return None

    def find_by_path(self, path: Path) -> Optional[Track]:
        for track in self.iter_tracks():
            if track.path == path:
                return track
        return None

    def add_track(self, track: Track) -> None:
        artist = self.find_artist(track.artist)
        if artist is None:
            artist = Artist(track.artist)
            self._artists.append(artist)
            self._artists.sort(key=Artist.sort_key)
            logger.debug("Created artist %r", artist.name)
        album = artist.find_album(track.album)
        if album is None:
            album = Album(artist.name, track.album)
            album.add(track)
            artist.add(album)
            logger.debug("Created album %r for %r", album.name, artist.name)
            return
        album.add(track)
        artist.update_image()

    def remove_track(self, track: Track) -> bool:
        artist = self.find_artist(track.artist)
        if artist is None:
            return False
        album = artist.find_album(track.album)
        if album is None or not album.remove(track):
            return False
        if not album.tracks:
            artist.remove(album)
            logger.debug("Dropped empty album %r for %r", album.name, artist.name)
        else:
            artist.update_image()
        self._drop_if_empty(artist)
        return True

    def remove_album(self, artist_name: str, album_name: str) -> bool:
        artist = self.find_artist(artist_name)
        if artist is None:
            return False
        album = artist.find_album(album_name)
        if album is None or not artist.remove(album):
            return False
        self._drop_if_empty(artist)
        return True

    def remove_path(self, path: Path) -> bool:
        track = self.find_by_path(path)
        if track is None:
            return False
        return self.remove_track(track)

    def remove_under(self, directory: Path) -> int:
        """Remove every track whose file lies inside ``directory``."""
        matches = [
            track
            for track in self.iter_tracks()
            if track.path is not None
            and (track.path == directory or directory in track.path.parents)
        ]
        removed = sum(1 for track in matches if self.remove_track(track))
        if removed:
            logger.debug("Removed %d track(s) under %s", removed, directory)
        return removed

    def _drop_if_empty(self, artist: Artist) -> None:
        if artist.albums:
            return
        self._artists = [a for a in self._artists if a is not artist]
        logger.debug("Dropped empty artist %r", artist.name)
