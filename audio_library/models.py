from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class Position:
    """A ``no`` of ``of`` pair, used for track and disc numbers."""

    no: int = 0
    of: int = 0

    @classmethod
    def parse(cls, value: object) -> "Position":
        if value is None:
            return cls()
        if isinstance(value, Position):
            return value
        if isinstance(value, (tuple, list)):
            no = _parse_int(value[0]) if len(value) > 0 else None
            of = _parse_int(value[1]) if len(value) > 1 else None
            return cls(no=no or 0, of=of or 0)
        if isinstance(value, int):
            return cls(no=value)
        text = str(value).strip()
        if "/" in text:
            head, tail = text.split("/", 1)
            return cls(no=_parse_int(head) or 0, of=_parse_int(tail) or 0)
        return cls(no=_parse_int(text) or 0)


@dataclass(frozen=True, slots=True)
class Picture:
    format: str
    data: bytes = field(repr=False)

    def __bool__(self) -> bool:
        return bool(self.data)


@dataclass(frozen=True, slots=True)
class Track:
    artist: str
    album: str
    title: str
    track_number: Position = Position()
    disc_number: Position = Position()
    picture: Optional[Picture] = None
    duration_seconds: float = 0.0
    path: Optional[Path] = None
    year: Optional[str] = None

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.disc_number.no, self.track_number.no)

    def to_record(self) -> Dict[str, object]:
        return {
            "artist": self.artist,
            "album": self.album,
            "title": self.title,
            "track_number": {"no": self.track_number.no, "of": self.track_number.of},
            "disc_number": {"no": self.disc_number.no, "of": self.disc_number.of},
            "picture": None
            if self.picture is None
            else {"format": self.picture.format, "size": len(self.picture.data)},
            "duration_seconds": self.duration_seconds,
            "path": str(self.path) if self.path else None,
            "year": self.year,
        }


def _parse_int(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        as_str = str(value).strip()
    except Exception:
        return None
    if as_str.isdigit():
        return int(as_str)
    return None
