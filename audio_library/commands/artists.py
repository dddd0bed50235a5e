from __future__ import annotations

from typing import Iterable

from ..artist import Artist
from .output import display_name
from .tree import UNKNOWN_ARTIST


def render(artists: Iterable[Artist]) -> list[str]:
    lines: list[str] = []
    for artist in artists:
        albums = artist.albums
        tracks = sum(len(album.tracks) for album in albums)
        lines.append(
            f"{display_name(artist.name, UNKNOWN_ARTIST)}: {len(albums)} album(s), {tracks} track(s)"
        )
    return lines


def run(artists: Iterable[Artist]) -> None:
    for line in render(artists):
        print(line)
