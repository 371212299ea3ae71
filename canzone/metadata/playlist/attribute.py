"""Playlist and playlist item attributes, partial updates and permissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from canzone.metadata.common import Message, PictureSize, date_from_timestamp_ms


def _bytes(raw: object) -> bytes:
    if raw is None:
        return b""
    if isinstance(raw, str):
        return raw.encode()
    return bytes(raw)  # type: ignore[arg-type]


def format_attributes(messages: Iterable[Message]) -> dict[str, str]:
    """Collect format attribute messages into a key to value mapping."""
    return {msg.get("key", ""): msg.get("value", "") for msg in messages}


@dataclass(frozen=True)
class PlaylistAttributes:
    """Attributes of a whole playlist."""

    name: str = ""
    description: str = ""
    picture: bytes = b""
    is_collaborative: bool = False
    pl3_version: str = ""
    is_deleted_by_owner: bool = False
    client_id: str = ""
    format: str = ""
    format_attributes: dict[str, str] = field(default_factory=dict)
    picture_sizes: list[PictureSize] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistAttributes":
        msg = msg or {}
        return cls(
            name=msg.get("name", ""),
            description=msg.get("description", ""),
            picture=_bytes(msg.get("picture")),
            is_collaborative=msg.get("collaborative", False),
            pl3_version=msg.get("pl3_version", ""),
            is_deleted_by_owner=msg.get("deleted_by_owner", False),
            client_id=msg.get("client_id", ""),
            format=msg.get("format", ""),
            format_attributes=format_attributes(msg.get("format_attributes", ())),
            picture_sizes=[PictureSize.from_message(m) for m in msg.get("picture_size", ())],
        )


@dataclass(frozen=True)
class PlaylistItemAttributes:
    """Attributes of one entry in a playlist."""

    added_by: str
    timestamp: datetime
    seen_at: datetime
    is_public: bool = False
    format_attributes: dict[str, str] = field(default_factory=dict)
    item_id: bytes = b""

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistItemAttributes":
        msg = msg or {}
        return cls(
            added_by=msg.get("added_by", ""),
            timestamp=date_from_timestamp_ms(msg.get("timestamp", 0)),
            seen_at=date_from_timestamp_ms(msg.get("seen_at", 0)),
            is_public=msg.get("public", False),
            format_attributes=format_attributes(msg.get("format_attributes", ())),
            item_id=_bytes(msg.get("item_id")),
        )


@dataclass(frozen=True)
class PlaylistPartialAttributes:
    """Playlist attribute values together with the kinds that were cleared."""

    values: PlaylistAttributes
    no_value: list[str] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistPartialAttributes":
        msg = msg or {}
        return cls(
            values=PlaylistAttributes.from_message(msg.get("values")),
            no_value=list(msg.get("no_value", ())),
        )


@dataclass(frozen=True)
class PlaylistPartialItemAttributes:
    """Item attribute values together with the kinds that were cleared."""

    values: PlaylistItemAttributes
    no_value: list[str] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistPartialItemAttributes":
        msg = msg or {}
        return cls(
            values=PlaylistItemAttributes.from_message(msg.get("values")),
            no_value=list(msg.get("no_value", ())),
        )


@dataclass(frozen=True)
class PlaylistUpdateAttributes:
    """A change to the attributes of a playlist."""

    new_attributes: PlaylistPartialAttributes
    old_attributes: PlaylistPartialAttributes

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistUpdateAttributes":
        msg = msg or {}
        return cls(
            new_attributes=PlaylistPartialAttributes.from_message(msg.get("new_attributes")),
            old_attributes=PlaylistPartialAttributes.from_message(msg.get("old_attributes")),
        )


@dataclass(frozen=True)
class PlaylistUpdateItemAttributes:
    """A change to the attributes of the playlist entry at ``index``."""

    index: int
    new_attributes: PlaylistPartialItemAttributes
    old_attributes: PlaylistPartialItemAttributes

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistUpdateItemAttributes":
        msg = msg or {}
        return cls(
            index=msg.get("index", 0),
            new_attributes=PlaylistPartialItemAttributes.from_message(msg.get("new_attributes")),
            old_attributes=PlaylistPartialItemAttributes.from_message(msg.get("old_attributes")),
        )


@dataclass(frozen=True)
class Capabilities:
    """What the current user may do with a playlist."""

    can_view: bool = False
    can_administrate_permissions: bool = False
    grantable_levels: list[str] = field(default_factory=list)
    can_edit_metadata: bool = False
    can_edit_items: bool = False
    can_cancel_membership: bool = False

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "Capabilities":
        msg = msg or {}
        return cls(
            can_view=msg.get("can_view", False),
            can_administrate_permissions=msg.get("can_administrate_permissions", False),
            grantable_levels=list(msg.get("grantable_level", ())),
            can_edit_metadata=msg.get("can_edit_metadata", False),
            can_edit_items=msg.get("can_edit_items", False),
            can_cancel_membership=msg.get("can_cancel_membership", False),
        )