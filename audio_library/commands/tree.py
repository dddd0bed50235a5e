from __future__ import annotations

import json
from typing import Iterable

from ..artist import Artist
from .output import display_name, format_duration, image_marker, track_label

UNKNOWN_ARTIST = "(unknown artist)"
UNKNOWN_ALBUM = "(unknown album)"


def render(artists: Iterable[Artist], *, show_tracks: bool = True) -> list[str]:
    """Render the library as indented lines; ``*`` marks entries with a cover image."""
    lines: list[str] = []
    for artist in artists:
        lines.append(f"{display_name(artist.name, UNKNOWN_ARTIST)}{image_marker(artist.image)}")
        for album in artist.albums:
            lines.append(
                f"  {display_name(album.name, UNKNOWN_ALBUM)}"
                f" ({len(album.tracks)} tracks, {format_duration(album.duration_seconds)})"
                f"{image_marker(album.image)}"
            )
            if not show_tracks:
                continue
            multi_disc = len({track.disc_number.no for track in album.tracks}) > 1
            for track in album.tracks:
                lines.append(f"    {track_label(track, multi_disc=multi_disc)}")
    return lines


def run(artists: Iterable[Artist], *, show_tracks: bool = True) -> None:
    for line in render(artists, show_tracks=show_tracks):
        print(line)


def as_records(artists: Iterable[Artist]) -> list[dict[str, object]]:
    return [
        {
            "name": artist.name,
            "has_image": artist.image is not None,
            "albums": [
                {
                    "name": album.name,
                    "has_image": album.image is not None,
                    "duration_seconds": album.duration_seconds,
                    "tracks": [track.to_record() for track in album.tracks],
                }
                for album in artist.albums
            ],
        }
        for artist in artists
    ]


def run_json(artists: Iterable[Artist]) -> None:
    print(json.dumps(as_records(artists), indent=2, ensure_ascii=False))
