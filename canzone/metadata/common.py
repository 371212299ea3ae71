"""Small metadata records shared by albums, tracks, episodes and playlists.

Protocol messages are taken as mappings of field name to value. A field that
is absent takes its default: empty text, zero, false, an empty list, or
``None`` for enumerations. File identifiers are lower-case hex strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

log = logging.getLogger(__name__)

Message = Mapping[str, Any]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def date_from_timestamp_ms(timestamp_ms: int) -> datetime:
    """Convert milliseconds since the Unix epoch into a UTC datetime."""
    try:
        return _EPOCH + timedelta(milliseconds=timestamp_ms)
    except OverflowError as exc:
        raise ValueError(f"timestamp out of range: {timestamp_ms}") from exc


def _file_id(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw).hex()
    return str(raw).lower()


def video_files(messages: Iterable[Message]) -> list[str]:
    """File identifiers of a list of video file messages."""
    return [_file_id(msg.get("file_id")) for msg in messages]


@dataclass(frozen=True)
class ContentRating:
    """Rating tags that apply in one country."""

    country: str
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "ContentRating":
        return cls(country=msg.get("country", ""), tags=list(msg.get("tag", ())))


@dataclass(frozen=True)
class Copyright:
    """A copyright line and its kind."""

    copyright_type: Optional[str]
    text: str

    @classmethod
    def from_message(cls, msg: Message) -> "Copyright":
        return cls(copyright_type=msg.get("type"), text=msg.get("text", ""))


@dataclass(frozen=True)
class ExternalId:
    """An identifier in another system; anything from a URL to an ISRC, EAN or UPC."""

    external_type: str
    id: str

    @classmethod
    def from_message(cls, msg: Message) -> "ExternalId":
        return cls(external_type=msg.get("type", ""), id=msg.get("id", ""))


@dataclass(frozen=True)
class Image:
    """A cover or portrait image file."""

    id: str
    size: Optional[str]
    width: int
    height: int

    @classmethod
    def from_message(cls, msg: Message) -> "Image":
        return cls(
            id=_file_id(msg.get("file_id")),
            size=msg.get("size"),
            width=msg.get("width", 0),
            height=msg.get("height", 0),
        )


@dataclass(frozen=True)
class PictureSize:
    """A named rendition of a playlist picture."""

    target_name: str
    url: str

    @classmethod
    def from_message(cls, msg: Message) -> "PictureSize":
        return cls(target_name=msg.get("target_name", ""), url=msg.get("url", ""))


@dataclass(frozen=True)
class TranscodedPicture:
    """A named transcoded picture and its URI."""

    target_name: str
    uri: str

    @classmethod
    def from_message(cls, msg: Message) -> "TranscodedPicture":
        return cls(target_name=msg.get("target_name", ""), uri=msg.get("uri", ""))


_OGG_VORBIS = frozenset({"OGG_VORBIS_320", "OGG_VORBIS_160", "OGG_VORBIS_96"})
_MP3 = frozenset({"MP3_320", "MP3_256", "MP3_160", "MP3_96", "MP3_160_ENC"})
_FLAC = frozenset({"FLAC_FLAC"})


class AudioFiles(dict):
    """Audio file identifiers keyed by format name."""

    @classmethod
    def from_messages(cls, messages: Iterable[Message]) -> "AudioFiles":
        """Collect files, skipping those whose format is not given."""
        files = cls()
        for msg in messages:
            file_id = _file_id(msg.get("file_id"))
            fmt = msg.get("format")
            if fmt is None:
                log.debug("Ignoring file <%s> with unspecified format", file_id)
                continue
            files[fmt] = file_id
        return files

    @staticmethod
    def is_ogg_vorbis(fmt: str) -> bool:
        return fmt in _OGG_VORBIS

    @staticmethod
    def is_mp3(fmt: str) -> bool:
        return fmt in _MP3

    @staticmethod
    def is_flac(fmt: str) -> bool:
        return fmt in _FLAC