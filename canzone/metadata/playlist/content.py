"""Playlist contents as selected from the server, and playlist annotations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from canzone.metadata.common import Message, TranscodedPicture, date_from_timestamp_ms
from canzone.metadata.playlist.attribute import Capabilities, PlaylistAttributes
from canzone.metadata.playlist.items import PlaylistDiff, PlaylistItemList

log = logging.getLogger(__name__)

# Timestamps above this are far out of range for milliseconds; some playlists
# send them in microseconds instead.
_MICROSECOND_THRESHOLD = 9_295_169_800_000


def _bytes(raw: Any) -> bytes:
    if raw is None:
        return b""
    if isinstance(raw, str):
        return raw.encode()
    return bytes(raw)


def _hex(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw).hex()
    return str(raw).lower()


def _optional_diff(msg: Optional[Message]) -> Optional[PlaylistDiff]:
    return None if msg is None else PlaylistDiff.from_message(msg)


def annotation_uri(username: str, playlist_base62: str) -> str:
    """The request URI for the annotation of a user's playlist."""
    return (
        f"hm://playlist-annotate/v1/annotation/user/{username}"
        f"/playlist/{playlist_base62}"
    )


@dataclass(frozen=True)
class SelectedListContent:
    """A playlist as the server describes it, without its identifier."""

    revision: bytes
    length: int
    attributes: PlaylistAttributes
    contents: PlaylistItemList
    diff: Optional[PlaylistDiff]
    sync_result: Optional[PlaylistDiff]
    resulting_revisions: list[str]
    has_multiple_heads: bool
    is_up_to_date: bool
    nonces: list[int]
    timestamp: datetime
    owner_username: str
    has_abuse_reporting: bool
    capabilities: Capabilities
    geoblocks: list[str] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message) -> "SelectedListContent":
        timestamp = msg.get("timestamp", 0)
        if timestamp > _MICROSECOND_THRESHOLD:
            log.warning("timestamp is very large; assuming it's in microseconds")
            timestamp //= 1000
        return cls(
            revision=_bytes(msg.get("revision")),
            length=msg.get("length", 0),
            attributes=PlaylistAttributes.from_message(msg.get("attributes")),
            contents=PlaylistItemList.from_message(msg.get("contents")),
            diff=_optional_diff(msg.get("diff")),
            sync_result=_optional_diff(msg.get("sync_result")),
            resulting_revisions=[_hex(r) for r in msg.get("resulting_revisions", ())],
            has_multiple_heads=msg.get("multiple_heads", False),
            is_up_to_date=msg.get("up_to_date", False),
            nonces=list(msg.get("nonces", ())),
            timestamp=date_from_timestamp_ms(timestamp),
            owner_username=msg.get("owner_username", ""),
            has_abuse_reporting=msg.get("abuse_reporting_enabled", False),
            capabilities=Capabilities.from_message(msg.get("capabilities")),
            geoblocks=list(msg.get("geoblock", ())),
        )


@dataclass(frozen=True)
class Playlist:
    """A playlist, identified by its id together with its owner."""

    id: str
    owner_username: str
    revision: bytes
    length: int
    attributes: PlaylistAttributes
    contents: PlaylistItemList
    diff: Optional[PlaylistDiff]
    sync_result: Optional[PlaylistDiff]
    resulting_revisions: list[str]
    has_multiple_heads: bool
    is_up_to_date: bool
    nonces: list[int]
    timestamp: datetime
    has_abuse_reporting: bool
    capabilities: Capabilities
    geoblocks: list[str] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Message, playlist_id: str) -> "Playlist":
        """Build a playlist; the message carries no id, so it is given."""
        content = SelectedListContent.from_message(msg)
        return cls(
            id=playlist_id,
            owner_username=content.owner_username,
            revision=content.revision,
            length=content.length,
            attributes=content.attributes,
            contents=content.contents,
            diff=content.diff,
            sync_result=content.sync_result,
            resulting_revisions=content.resulting_revisions,
            has_multiple_heads=content.has_multiple_heads,
            is_up_to_date=content.is_up_to_date,
            nonces=content.nonces,
            timestamp=content.timestamp,
            has_abuse_reporting=content.has_abuse_reporting,
            capabilities=content.capabilities,
            geoblocks=content.geoblocks,
        )

    def tracks(self) -> list[str]:
        """Identifiers of the entries; warns if their count differs from the length."""
        tracks = [item.id for item in self.contents.items]
        if len(tracks) != self.length:
            log.warning(
                "Got %d tracks, but the list should contain %d tracks.",
                len(tracks),
                self.length,
            )
        return tracks

    def name(self) -> str:
        """The playlist's name."""
        return self.attributes.name


@dataclass(frozen=True)
class PlaylistAnnotation:
    """Description and pictures attached to a playlist."""

    description: str = ""
    picture: str = ""
    transcoded_pictures: list[TranscodedPicture] = field(default_factory=list)
    has_abuse_reporting: bool = False
    abuse_report_state: Optional[str] = None

    @classmethod
    def from_message(cls, msg: Message) -> "PlaylistAnnotation":
        return cls(
            description=msg.get("description", ""),
            picture=msg.get("picture", ""),
            transcoded_pictures=[
                TranscodedPicture.from_message(m) for m in msg.get("transcoded_picture", ())
            ],
            has_abuse_reporting=msg.get("is_abuse_reporting_enabled", False),
            abuse_report_state=msg.get("abuse_report_state"),
        )