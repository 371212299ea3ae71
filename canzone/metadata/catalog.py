"""Albums, tracks, podcast episodes and shows."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Iterator, Optional

from canzone.metadata.artist import Artist, ArtistWithRole
from canzone.metadata.availability import (
    Availability,
    Restriction,
    SalePeriod,
    _date_from_message,
)
from canzone.metadata.common import (
    AudioFiles,
    ContentRating,
    Copyright,
    ExternalId,
    Image,
    Message,
    date_from_timestamp_ms,
    video_files,
)


def _gid(msg: Message) -> str:
    raw: Any = msg.get("gid", b"")
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw).hex()
    return str(raw).lower()


def _ids(messages: Iterable[Message]) -> list[str]:
    return [_gid(msg) for msg in messages]


def _images(messages: Iterable[Message]) -> list[Image]:
    return [Image.from_message(msg) for msg in messages]


def _group_images(group: Optional[Message]) -> list[Image]:
    return _images((group or {}).get("image", ()))


def _restrictions(msg: Message) -> list[Restriction]:
    return [Restriction.from_message(m) for m in msg.get("restriction", ())]


def _availability(msg: Message) -> list[Availability]:
    return [Availability.from_message(m) for m in msg.get("availability", ())]


def _licensor(msg: Optional[Message]) -> uuid.UUID:
    raw = (msg or {}).get("uuid", b"")
    try:
        return uuid.UUID(bytes=bytes(raw))
    except (ValueError, TypeError):
        return uuid.UUID(int=0)


@dataclass(frozen=True)
class Disc:
    """One disc of an album."""

    number: int
    name: str
    tracks: list[str] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "Disc":
        return cls(
            number=msg.get("number", 0),
            name=msg.get("name", ""),
            tracks=_ids(msg.get("track", ())),
        )


@dataclass(frozen=True)
class Album:
    """An album with its discs, artists and release data."""

    id: str
    name: str = ""
    artists: list[Artist] = field(default_factory=list)
    album_type: Optional[str] = None
    label: str = ""
    date: datetime = field(default_factory=lambda: _date_from_message(None))
    popularity: int = 0
    genres: list[str] = field(default_factory=list)
    covers: list[Image] = field(default_factory=list)
    external_ids: list[ExternalId] = field(default_factory=list)
    discs: list[Disc] = field(default_factory=list)
    reviews: list[str] = field(default_factory=list)
    copyrights: list[Copyright] = field(default_factory=list)
    restrictions: list[Restriction] = field(default_factory=list)
    related: list[str] = field(default_factory=list)
    sale_periods: list[SalePeriod] = field(default_factory=list)
    cover_group: list[Image] = field(default_factory=list)
    original_title: str = ""
    version_title: str = ""
    type_str: str = ""
    availability: list[Availability] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "Album":
        covers = _group_images(msg.get("cover_group"))
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            artists=[Artist.from_message(m) for m in msg.get("artist", ())],
            album_type=msg.get("type"),
            label=msg.get("label", ""),
            date=_date_from_message(msg.get("date")),
            popularity=msg.get("popularity", 0),
            genres=list(msg.get("genre", ())),
            covers=covers,
            external_ids=[ExternalId.from_message(m) for m in msg.get("external_id", ())],
            discs=[Disc.from_message(m) for m in msg.get("disc", ())],
            reviews=list(msg.get("review", ())),
            copyrights=[Copyright.from_message(m) for m in msg.get("copyright", ())],
            restrictions=_restrictions(msg),
            related=_ids(msg.get("related", ())),
            sale_periods=[SalePeriod.from_message(m) for m in msg.get("sale_period", ())],
            cover_group=list(covers),
            original_title=msg.get("original_title", ""),
            version_title=msg.get("version_title", ""),
            type_str=msg.get("type_str", ""),
            availability=_availability(msg),
        )

    def tracks(self) -> Iterator[str]:
        """Every track of every disc, in order."""
        for disc in self.discs:
            yield from disc.tracks


@dataclass(frozen=True)
class Track:
    """A music track with its album, artists and audio files."""

    id: str
    name: str
    album: Album
    artists: list[Artist] = field(default_factory=list)
    number: int = 0
    disc_number: int = 0
    duration: int = 0
    popularity: int = 0
    is_explicit: bool = False
    external_ids: list[ExternalId] = field(default_factory=list)
    restrictions: list[Restriction] = field(default_factory=list)
    files: AudioFiles = field(default_factory=AudioFiles)
    alternatives: list[str] = field(default_factory=list)
    sale_periods: list[SalePeriod] = field(default_factory=list)
    previews: AudioFiles = field(default_factory=AudioFiles)
    tags: list[str] = field(default_factory=list)
    earliest_live_timestamp: datetime = field(default_factory=lambda: date_from_timestamp_ms(0))
    has_lyrics: bool = False
    availability: list[Availability] = field(default_factory=list)
    licensor: uuid.UUID = field(default_factory=lambda: uuid.UUID(int=0))
    language_of_performance: list[str] = field(default_factory=list)
    content_ratings: list[ContentRating] = field(default_factory=list)
    original_title: str = ""
    version_title: str = ""
    artists_with_role: list[ArtistWithRole] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "Track":
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            album=Album.from_message(msg.get("album") or {}),
            artists=[Artist.from_message(m) for m in msg.get("artist", ())],
            number=msg.get("number", 0),
            disc_number=msg.get("disc_number", 0),
            duration=msg.get("duration", 0),
            popularity=msg.get("popularity", 0),
            is_explicit=msg.get("explicit", False),
            external_ids=[ExternalId.from_message(m) for m in msg.get("external_id", ())],
            restrictions=_restrictions(msg),
            files=AudioFiles.from_messages(msg.get("file", ())),
            alternatives=_ids(msg.get("alternative", ())),
            sale_periods=[SalePeriod.from_message(m) for m in msg.get("sale_period", ())],
            previews=AudioFiles.from_messages(msg.get("preview", ())),
            tags=list(msg.get("tags", ())),
            earliest_live_timestamp=date_from_timestamp_ms(msg.get("earliest_live_timestamp", 0)),
            has_lyrics=msg.get("has_lyrics", False),
            availability=_availability(msg),
            licensor=_licensor(msg.get("licensor")),
            language_of_performance=list(msg.get("language_of_performance", ())),
            content_ratings=[ContentRating.from_message(m) for m in msg.get("content_rating", ())],
            original_title=msg.get("original_title", ""),
            version_title=msg.get("version_title", ""),
            artists_with_role=[
                ArtistWithRole.from_message(m) for m in msg.get("artist_with_role", ())
            ],
        )


@dataclass(frozen=True)
class Episode:
    """A podcast or audiobook episode."""

    id: str
    name: str = ""
    duration: int = 0
    audio: AudioFiles = field(default_factory=AudioFiles)
    description: str = ""
    number: int = 0
    publish_time: datetime = field(default_factory=lambda: _date_from_message(None))
    covers: list[Image] = field(default_factory=list)
    language: str = ""
    is_explicit: bool = False
    show_name: str = ""
    videos: list[str] = field(default_factory=list)
    video_previews: list[str] = field(default_factory=list)
    audio_previews: AudioFiles = field(default_factory=AudioFiles)
    restrictions: list[Restriction] = field(default_factory=list)
    freeze_frames: list[Image] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    allow_background_playback: bool = False
    availability: list[Availability] = field(default_factory=list)
    external_url: str = ""
    episode_type: Optional[str] = None
    has_music_and_talk: bool = False
    content_rating: list[ContentRating] = field(default_factory=list)
    is_audiobook_chapter: bool = False

    @classmethod
    def from_message(cls, msg: Message) -> "Episode":
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            duration=msg.get("duration", 0),
            audio=AudioFiles.from_messages(msg.get("audio", ())),
            description=msg.get("description", ""),
            number=msg.get("number", 0),
            publish_time=_date_from_message(msg.get("publish_time")),
            covers=_group_images(msg.get("cover_image")),
            language=msg.get("language", ""),
            is_explicit=msg.get("explicit", False),
            show_name=(msg.get("show") or {}).get("name", ""),
            videos=video_files(msg.get("video", ())),
            video_previews=video_files(msg.get("video_preview", ())),
            audio_previews=AudioFiles.from_messages(msg.get("audio_preview", ())),
            restrictions=_restrictions(msg),
            freeze_frames=_group_images(msg.get("freeze_frame")),
            keywords=list(msg.get("keyword", ())),
            allow_background_playback=msg.get("allow_background_playback", False),
            availability=_availability(msg),
            external_url=msg.get("external_url", ""),
            episode_type=msg.get("type"),
            has_music_and_talk=msg.get("music_and_talk", False),
            content_rating=[ContentRating.from_message(m) for m in msg.get("content_rating", ())],
            is_audiobook_chapter=msg.get("is_audiobook_chapter", False),
        )


@dataclass(frozen=True)
class Show:
    """A podcast or audiobook show and its episodes."""

    id: str
    name: str = ""
    description: str = ""
    publisher: str = ""
    language: str = ""
    is_explicit: bool = False
    covers: list[Image] = field(default_factory=list)
    episodes: list[str] = field(default_factory=list)
    copyrights: list[Copyright] = field(default_factory=list)
    restrictions: list[Restriction] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    media_type: Optional[str] = None
    consumption_order: Optional[str] = None
    availability: list[Availability] = field(default_factory=list)
    trailer_uri: str = ""
    has_music_and_talk: bool = False
    is_audiobook: bool = False

    @classmethod
    def from_message(cls, msg: Message) -> "Show":
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            description=msg.get("description", ""),
            publisher=msg.get("publisher", ""),
            language=msg.get("language", ""),
            is_explicit=msg.get("explicit", False),
            covers=_group_images(msg.get("cover_image")),
            episodes=_ids(msg.get("episode", ())),
            copyrights=[Copyright.from_message(m) for m in msg.get("copyright", ())],
            restrictions=_restrictions(msg),
            keywords=list(msg.get("keyword", ())),
            media_type=msg.get("media_type"),
            consumption_order=msg.get("consumption_order"),
            availability=_availability(msg),
            trailer_uri=msg.get("trailer_uri", ""),
            has_music_and_talk=msg.get("music_and_talk", False),
            is_audiobook=msg.get("is_audiobook", False),
        )