from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from .album import Album
from .images import first_picture
from .models import Picture, Track

logger = logging.getLogger(__name__)

_ARTICLE = "the "


class Artist:
    """Albums of one artist, kept in album order, plus a derived cover image."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._albums: list[Album] = []
        self._image: Optional[Picture] = None

    def __repr__(self) -> str:
        return f"Artist(name={self._name!r}, albums={len(self._albums)})"

    @staticmethod
    def sort_key(artist: "Artist") -> str:
        name = artist.name.lower()
        if name.startswith(_ARTICLE):
            return name[len(_ARTICLE):]
        return name

    @staticmethod
    def compare(a: "Artist", b: "Artist") -> int:
        name_a = Artist.sort_key(a)
        name_b = Artist.sort_key(b)
        if name_a == name_b:
            return 0
        return -1 if name_a < name_b else 1

    @classmethod
    def from_tracks(cls, tracks: Iterable[Track]) -> list["Artist"]:
        """Group tracks into sorted artists, each holding sorted albums.

        Artist and album names match exactly, so different casings produce
        different entries. Artists and albums are found through dict lookups;
        album lists are sorted once every track has been placed.
        """
        artists: Dict[str, Artist] = {}
        albums: Dict[tuple[str, str], Album] = {}
        count = 0
        for track in tracks:
            count += 1
            artist = artists.get(track.artist)
            if artist is None:
                artist = cls(track.artist)
                artists[track.artist] = artist
            key = (track.artist, track.album)
            album = albums.get(key)
            if album is None:
                album = Album(artist.name, track.album)
                albums[key] = album
                artist._albums.append(album)
            album.add(track)
        for artist in artists.values():
            artist._albums.sort(key=Album.sort_key)
            artist.update_image()
        logger.debug(
            "Built %d artist(s) and %d album(s) from %d track(s)",
            len(artists),
            len(albums),
            count,
        )
        return sorted(artists.values(), key=cls.sort_key)

    @staticmethod
    def find_by_track(artists: Iterable["Artist"], track: Track) -> Optional["Artist"]:
        for artist in artists:
            if artist.name == track.artist:
                return artist
        return None

    @property
    def name(self) -> str:
        return self._name

    @property
    def albums(self) -> tuple[Album, ...]:
        return tuple(self._albums)

    @property
    def image(self) -> Optional[Picture]:
        return self._image

    def find_album(self, name: str) -> Optional[Album]:
        for album in self._albums:
            if album.name == name:
                return album
        return None

    def add(self, album: Album) -> bool:
        if album.artist_name != self._name:
            logger.debug(
                "Rejected album %r owned by %r for artist %r",
                album.name,
                album.artist_name,
                self._name,
            )
            return False
        self._albums.append(album)
        self._albums.sort(key=Album.sort_key)
        self.update_image()
        return True

    def remove(self, album: Album) -> bool:
        albums = [a for a in self._albums if a.name != album.name]
        if len(albums) == len(self._albums):
            return False
        self._albums = albums
        self.update_image()
        return True

    def update_image(self) -> None:
        self._image = first_picture(album.image for album in self._albums)
