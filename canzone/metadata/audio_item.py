"""Playable audio items built from tracks and episodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from canzone.metadata.artist import ArtistWithRole
from canzone.metadata.availability import (
    Availability,
    ItemUnavailable,
    Restriction,
    UnavailabilityReason,
)
from canzone.metadata.catalog import Episode, Track
from canzone.metadata.common import AudioFiles, Image
from canzone.metadata.errors import ExplicitContentFiltered, InvalidDuration

_BASE62 = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_BASE62_LEN = 22


def _to_uri(kind: str, hex_id: str) -> str:
    value = int(hex_id or "0", 16)
    if value >= 1 << 128:
        raise ValueError(f"identifier too large: {hex_id!r}")
    digits = []
    for _ in range(_BASE62_LEN):
        value, rem = divmod(value, 62)
        digits.append(_BASE62[rem])
    return f"spotify:{kind}:{''.join(reversed(digits))}"


@dataclass(frozen=True)
class CoverImage:
    """A cover image with the URL it can be fetched from."""

    url: str
    size: Optional[str]
    width: int
    height: int


@dataclass(frozen=True)
class UserData:
    """The user's country and account attributes."""

    country: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TrackFields:
    """Data only a music track has."""

    artists: list[ArtistWithRole]
    album: str
    album_artists: list[str]
    popularity: int
    number: int
    disc_number: int


@dataclass(frozen=True)
class EpisodeFields:
    """Data only an episode has."""

    description: str
    publish_time: datetime
    show_name: str


def get_covers(covers: Iterable[Image], image_url: str) -> list[CoverImage]:
    """Covers from widest to narrowest, with ``{file_id}`` in the URL filled in."""
    return [
        CoverImage(
            url=image_url.replace("{file_id}", cover.id),
            size=cover.size,
            width=cover.width,
            height=cover.height,
        )
        for cover in sorted(covers, key=lambda c: c.width, reverse=True)
        if cover.id
    ]


def allowed_for_user(user_data: UserData, restrictions: Iterable[Restriction]) -> None:
    """Raise ``ItemUnavailable`` if a restriction on the user's catalogue excludes them."""
    country = user_data.country
    catalogue = user_data.attributes.get("catalogue", "premium")
    for restriction in restrictions:
        if catalogue not in restriction.catalogue_strs:
            continue
        # A restriction carries either a whitelist or a blacklist, not both.
        if restriction.countries_allowed is not None:
            if country in restriction.countries_allowed:
                return
            raise ItemUnavailable(UnavailabilityReason.NOT_WHITELISTED)
        if restriction.countries_forbidden is not None:
            if country in restriction.countries_forbidden:
                raise ItemUnavailable(UnavailabilityReason.BLACKLISTED)
            return


def available(availabilities: Iterable[Availability], now: Optional[datetime] = None) -> None:
    """Raise ``ItemUnavailable`` if no availability window has started by ``now``."""
    windows = list(availabilities)
    if not windows:
        return
    now = now or datetime.now(timezone.utc)
    if not any(now >= window.start for window in windows):
        raise ItemUnavailable(UnavailabilityReason.EMBARGO)


def available_for_user(
    user_data: UserData,
    availabilities: Iterable[Availability],
    restrictions: Iterable[Restriction],
    now: Optional[datetime] = None,
) -> None:
    """Raise ``ItemUnavailable`` unless the item is both released and allowed."""
    available(availabilities, now)
    allowed_for_user(user_data, restrictions)


def _reason(
    user_data: UserData,
    availabilities: Iterable[Availability],
    restrictions: Iterable[Restriction],
    now: datetime,
) -> Optional[UnavailabilityReason]:
    try:
        available_for_user(user_data, availabilities, restrictions, now)
    except ItemUnavailable as exc:
        return exc.reason
    return None


def _image_url(user_data: UserData, image_url: Optional[str]) -> str:
    if image_url is not None:
        return image_url
    return user_data.attributes.get("image-url", "{file_id}")


@dataclass(frozen=True)
class AudioItem:
    """A track or episode ready to be played.

    ``availability`` is ``None`` when the item may be played, otherwise the reason
    it may not.
    """

    track_id: str
    uri: str
    files: AudioFiles
    name: str
    covers: list[CoverImage]
    language: list[str]
    duration_ms: int
    is_explicit: bool
    availability: Optional[UnavailabilityReason]
    alternatives: Optional[list[str]]
    unique_fields: Union[TrackFields, EpisodeFields]

    @classmethod
    def from_track(
        cls,
        track: Track,
        user_data: UserData,
        filter_explicit: bool = False,
        image_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "AudioItem":
        if track.duration <= 0:
            raise InvalidDuration(track.duration)
        if track.is_explicit and filter_explicit:
            raise ExplicitContentFiltered()
        now = now or datetime.now(timezone.utc)

        if now < track.earliest_live_timestamp:
            availability: Optional[UnavailabilityReason] = UnavailabilityReason.EMBARGO
        else:
            availability = _reason(user_data, track.availability, track.restrictions, now)

        return cls(
            track_id=track.id,
            uri=_to_uri("track", track.id),
            files=track.files,
            name=track.name,
            covers=get_covers(track.album.covers, _image_url(user_data, image_url)),
            language=list(track.language_of_performance),
            duration_ms=track.duration,
            is_explicit=track.is_explicit,
            availability=availability,
            alternatives=list(track.alternatives) or None,
            unique_fields=TrackFields(
                artists=list(track.artists_with_role),
                album=track.album.name,
                album_artists=[artist.name for artist in track.album.artists],
                popularity=min(max(track.popularity, 0), 100),
                number=max(track.number, 0),
                disc_number=max(track.disc_number, 0),
            ),
        )

    @classmethod
    def from_episode(
        cls,
        episode: Episode,
        user_data: UserData,
        filter_explicit: bool = False,
        image_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "AudioItem":
        if episode.duration <= 0:
            raise InvalidDuration(episode.duration)
        if episode.is_explicit and filter_explicit:
            raise ExplicitContentFiltered()
        now = now or datetime.now(timezone.utc)

        return cls(
            track_id=episode.id,
            uri=_to_uri("episode", episode.id),
            files=episode.audio,
            name=episode.name,
            covers=get_covers(episode.covers, _image_url(user_data, image_url)),
            language=[episode.language],
            duration_ms=episode.duration,
            is_explicit=episode.is_explicit,
            availability=_reason(user_data, episode.availability, episode.restrictions, now),
            alternatives=None,
            unique_fields=EpisodeFields(
                description=episode.description,
                publish_time=episode.publish_time,
                show_name=episode.show_name,
            ),
        )