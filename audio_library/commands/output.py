from __future__ import annotations

from typing import Optional

from ..models import Track


def format_duration(seconds: float) -> str:
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def display_name(name: str, placeholder: str) -> str:
    return name if name else placeholder


def track_label(track: Track, *, multi_disc: bool) -> str:
    number = f"{track.track_number.no:02d}" if track.track_number.no else "--"
    if multi_disc:
        number = f"{track.disc_number.no}-{number}"
    return f"{number}. {display_name(track.title, '(untitled)')} [{format_duration(track.duration_seconds)}]"


def image_marker(image: Optional[object]) -> str:
    return " *" if image is not None else ""
