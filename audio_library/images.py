from __future__ import annotations

from typing import Iterable, Optional

from .models import Picture


def first_picture(pictures: Iterable[Optional[Picture]]) -> Optional[Picture]:
    """Return the first picture carrying image data, in iteration order."""
    for picture in pictures:
        if picture:
            return picture
    return None
