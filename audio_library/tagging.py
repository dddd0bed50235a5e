from __future__ import annotations

import base64
import logging
import struct
from pathlib import Path
from typing import Any, Dict, List, Optional

from mutagen import MutagenError
from mutagen.flac import FLAC
from mutagen.flac import Picture as FlacPicture
from mutagen.id3 import ID3, ID3NoHeaderError
from mutagen.mp3 import MP3
from mutagen.mp4 import MP4, MP4Cover
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis

from .models import Picture, Position, Track

logger = logging.getLogger(__name__)

# ID3 / FLAC picture type for "Cover (front)".
COVER_FRONT = 3


class TagReader:
    """Reads the tags of one audio file into a :class:`Track`."""

    SUPPORTED_EXTS = {".mp3", ".flac", ".m4a", ".mp4", ".ogg", ".opus"}

    def read(self, path: Path) -> Optional[Track]:
        ext = path.suffix.lower()
        handlers = {
            ".mp3": self._read_mp3,
            ".flac": self._read_flac,
            ".m4a": self._read_mp4,
            ".mp4": self._read_mp4,
            ".ogg": self._read_ogg_vorbis,
            ".opus": self._read_ogg_opus,
        }
        handler = handlers.get(ext)
        if not handler:
            logger.debug("Skipping unsupported extension %s", path)
            return None
        try:
            fields = handler(path)
        except (MutagenError, OSError) as exc:
            logger.warning("Failed to read tags for %s: %s", path, exc)
            return None
        return self._build_track(path, fields)

    def _build_track(self, path: Path, fields: Dict[str, Any]) -> Track:
        artist = fields.get("artist") or fields.get("album_artist") or ""
        return Track(
            artist=artist,
            album=fields.get("album") or "",
            title=fields.get("title") or path.stem,
            track_number=Position.parse(fields.get("tracknumber")),
            disc_number=Position.parse(fields.get("discnumber")),
            picture=fields.get("picture"),
            duration_seconds=float(fields.get("duration") or 0.0),
            path=path,
            year=fields.get("date"),
        )

    def _read_mp3(self, path: Path) -> Dict[str, Any]:
        try:
            tags = ID3(path)
        except ID3NoHeaderError:
            tags = ID3()
        date = self._id3_text(tags, "TDRC") or self._id3_text(tags, "TYER")
        return {
            "title": self._id3_text(tags, "TIT2"),
            "album": self._id3_text(tags, "TALB"),
            "artist": self._id3_text(tags, "TPE1"),
            "album_artist": self._id3_text(tags, "TPE2"),
            "tracknumber": self._id3_text(tags, "TRCK"),
            "discnumber": self._id3_text(tags, "TPOS"),
            "date": date,
            "picture": self._pick_picture(
                (frame.type, frame.mime, frame.data) for frame in tags.getall("APIC")
            ),
            "duration": self._mp3_duration(path),
        }

    def _read_flac(self, path: Path) -> Dict[str, Any]:
        audio = FLAC(path)
        fields = self._vorbis_fields(audio)
        fields["picture"] = self._pick_picture(
            (pic.type, pic.mime, pic.data) for pic in audio.pictures
        )
        fields["duration"] = audio.info.length if audio.info else 0.0
        return fields

    def _read_ogg_vorbis(self, path: Path) -> Dict[str, Any]:
        return self._read_ogg(OggVorbis(path))

    def _read_ogg_opus(self, path: Path) -> Dict[str, Any]:
        return self._read_ogg(OggOpus(path))

    def _read_ogg(self, audio: OggVorbis | OggOpus) -> Dict[str, Any]:
        fields = self._vorbis_fields(audio)
        pictures = []
        for encoded in audio.get("metadata_block_picture", []):
            try:
                pic = FlacPicture(base64.b64decode(encoded))
            except (ValueError, struct.error, MutagenError) as exc:
                logger.debug("Ignoring malformed embedded picture: %s", exc)
                continue
            pictures.append((pic.type, pic.mime, pic.data))
        fields["picture"] = self._pick_picture(pictures)
        fields["duration"] = audio.info.length if audio.info else 0.0
        return fields

    def _read_mp4(self, path: Path) -> Dict[str, Any]:
        return self._mp4_fields(MP4(path))

    def _mp4_fields(self, audio: MP4) -> Dict[str, Any]:
        covers = []
        for cover in audio.get("covr", []):
            mime = "image/png" if cover.imageformat == MP4Cover.FORMAT_PNG else "image/jpeg"
            covers.append((COVER_FRONT, mime, bytes(cover)))
        return {
            "title": self._mp4_text(audio, "\xa9nam"),
            "album": self._mp4_text(audio, "\xa9alb"),
            "artist": self._mp4_text(audio, "\xa9ART"),
            "album_artist": self._mp4_text(audio, "aART"),
            "tracknumber": self._mp4_pair(audio, "trkn"),
            "discnumber": self._mp4_pair(audio, "disk"),
            "date": self._mp4_text(audio, "\xa9day"),
            "picture": self._pick_picture(covers),
            "duration": audio.info.length if audio.info else 0.0,
        }

    def _vorbis_fields(self, audio: Any) -> Dict[str, Any]:
        def first(key: str) -> Optional[str]:
            values = audio.get(key) or []
            return values[0] if values else None

        return {
            "title": first("title"),
            "album": first("album"),
            "artist": first("artist"),
            "album_artist": first("albumartist"),
            "tracknumber": self._join_total(first("tracknumber"), first("tracktotal") or first("totaltracks")),
            "discnumber": self._join_total(first("discnumber"), first("disctotal") or first("totaldiscs")),
            "date": first("date") or first("year"),
        }

    @staticmethod
    def _join_total(number: Optional[str], total: Optional[str]) -> Optional[str]:
        if number is None:
            return None
        if total and "/" not in number:
            return f"{number}/{total}"
        return number

    def _id3_text(self, tags: ID3, frame_id: str) -> Optional[str]:
        frame = tags.getall(frame_id)
        if not frame:
            return None
        return str(frame[0].text[0]) if frame[0].text else None

    def _mp4_text(self, audio: MP4, key: str) -> Optional[str]:
        value = audio.get(key)
        if not value:
            return None
        first = value[0]
        if isinstance(first, bytes):
            return first.decode("utf-8", errors="replace")
        return str(first)

    def _mp4_pair(self, audio: MP4, key: str) -> Optional[tuple]:
        value = audio.get(key)
        if value and isinstance(value, list):
            first = value[0]
            if isinstance(first, (tuple, list)) and first:
                return tuple(first)
        return None

    @staticmethod
    def _pick_picture(candidates: Any) -> Optional[Picture]:
        pictures: List[tuple[int, str, bytes]] = [c for c in candidates if c[2]]
        if not pictures:
            return None
        for pic_type, mime, data in pictures:
            if pic_type == COVER_FRONT:
                return Picture(format=mime, data=data)
        _, mime, data = pictures[0]
        return Picture(format=mime, data=data)

    @staticmethod
    def _mp3_duration(path: Path) -> float:
        try:
            audio = MP3(path)
        except MutagenError as exc:
            logger.debug("Could not read duration of %s: %s", path, exc)
            return 0.0
        return audio.info.length if audio.info else 0.0
