"""Artists, their roles, top tracks, album groups and biographies.

Item identifiers are the lower-case hex form of a message's ``gid``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from canzone.metadata.availability import Availability, Restriction, SalePeriod
from canzone.metadata.common import ExternalId, Image, Message

_U16_MAX = 0xFFFF


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


def _year(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U16_MAX:
        raise ValueError(f"{what} out of range: {value!r}")
    return value


@dataclass(frozen=True)
class ArtistWithRole:
    """An artist credited on a track, with the role they had."""

    id: str
    name: str
    role: Optional[str]

    @classmethod
    def from_message(cls, msg: Message) -> "ArtistWithRole":
        return cls(
            id=_ids([{"gid": msg.get("artist_gid", b"")}])[0],
            name=msg.get("artist_name", ""),
            role=msg.get("role"),
        )


@dataclass(frozen=True)
class TopTracks:
    """The most played tracks of an artist in one country."""

    country: str
    tracks: list[str] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "TopTracks":
        return cls(country=msg.get("country", ""), tracks=_ids(msg.get("track", ())))


class CountryTopTracks(list):
    """Top track lists, one per country; an empty country is the global list."""

    def for_country(self, country: str) -> list[str]:
        """Top tracks for ``country``, falling back to the global list, else none."""
        for top in self:
            if top.country == country:
                return list(top.tracks)
        for top in self:
            if not top.country:
                return list(top.tracks)
        return []


class AlbumGroups(list):
    """Groups of album variants; the first album of a group is its current release."""

    def current_releases(self) -> Iterator[str]:
        """The current release of every group, skipping empty groups."""
        for group in self:
            if group:
                yield group[0]


@dataclass(frozen=True)
class Biography:
    """An artist biography with its portraits."""

    text: str
    portraits: list[Image] = field(default_factory=list)
    portrait_group: list[list[Image]] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "Biography":
        return cls(
            text=msg.get("text", ""),
            portraits=_images(msg.get("portrait", ())),
            portrait_group=[_group_images(g) for g in msg.get("portrait_group", ())],
        )


@dataclass(frozen=True)
class ActivityPeriod:
    """Either a decade or a span of years; an open span has no end year."""

    decade: Optional[int] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None

    @property
    def is_decade(self) -> bool:
        return self.decade is not None

    @classmethod
    def from_message(cls, msg: Message) -> "ActivityPeriod":
        has_decade = "decade" in msg
        has_start = "start_year" in msg
        has_end = "end_year" in msg
        if has_decade and not has_start and not has_end:
            return cls(decade=_year(msg["decade"], "decade"))
        if not has_decade and has_start:
            return cls(
                start_year=_year(msg["start_year"], "start year"),
                end_year=_year(msg["end_year"], "end year") if has_end else None,
            )
        raise ValueError("ActivityPeriod is expected to be either a decade or timespan")


def _album_groups(messages: Iterable[Message]) -> AlbumGroups:
    return AlbumGroups(_ids(group.get("album", ())) for group in messages)


@dataclass(frozen=True)
class Artist:
    """An artist with their releases, portraits and regional data."""

    id: str
    name: str
    popularity: int = 0
    top_tracks: CountryTopTracks = field(default_factory=CountryTopTracks)
    albums: AlbumGroups = field(default_factory=AlbumGroups)
    singles: AlbumGroups = field(default_factory=AlbumGroups)
    compilations: AlbumGroups = field(default_factory=AlbumGroups)
    appears_on_albums: AlbumGroups = field(default_factory=AlbumGroups)
    genre: list[str] = field(default_factory=list)
    external_ids: list[ExternalId] = field(default_factory=list)
    portraits: list[Image] = field(default_factory=list)
    biographies: list[Biography] = field(default_factory=list)
    activity_periods: list[ActivityPeriod] = field(default_factory=list)
    restrictions: list[Restriction] = field(default_factory=list)
    related: list["Artist"] = field(default_factory=list)
    is_portrait_album_cover: bool = False
    portrait_group: list[Image] = field(default_factory=list)
    sales_periods: list[SalePeriod] = field(default_factory=list)
    availabilities: list[Availability] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "Artist":
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            popularity=msg.get("popularity", 0),
            top_tracks=CountryTopTracks(
                TopTracks.from_message(m) for m in msg.get("top_track", ())
            ),
            albums=_album_groups(msg.get("album_group", ())),
            singles=_album_groups(msg.get("single_group", ())),
            compilations=_album_groups(msg.get("compilation_group", ())),
            appears_on_albums=_album_groups(msg.get("appears_on_group", ())),
            genre=list(msg.get("genre", ())),
            external_ids=[ExternalId.from_message(m) for m in msg.get("external_id", ())],
            portraits=_images(msg.get("portrait", ())),
            biographies=[Biography.from_message(m) for m in msg.get("biography", ())],
            activity_periods=[
                ActivityPeriod.from_message(m) for m in msg.get("activity_period", ())
            ],
            restrictions=[Restriction.from_message(m) for m in msg.get("restriction", ())],
            related=[Artist.from_message(m) for m in msg.get("related", ())],
            is_portrait_album_cover=msg.get("is_portrait_album_cover", False),
            portrait_group=_group_images(msg.get("portrait_group")),
            sales_periods=[SalePeriod.from_message(m) for m in msg.get("sale_period", ())],
            availabilities=[Availability.from_message(m) for m in msg.get("availability", ())],
        )

    def albums_current(self) -> Iterator[str]:
        """Albums without older variants of the same album."""
        return self.albums.current_releases()

    def singles_current(self) -> Iterator[str]:
        """Singles without older variants of the same single."""
        return self.singles.current_releases()

    def compilations_current(self) -> Iterator[str]:
        """Compilations without older variants of the same compilation."""
        return self.compilations.current_releases()

    def appears_on_albums_current(self) -> Iterator[str]:
        """Albums the artist appears on, without older variants."""
        return self.appears_on_albums.current_releases()