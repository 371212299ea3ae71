"""Playlist entries, entry lists and the operations of a playlist diff.

Revisions are given as the lower-case hex form of their bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from canzone.metadata.common import Message, date_from_timestamp_ms
from canzone.metadata.playlist.attribute import (
    Capabilities,
    PlaylistAttributes,
    PlaylistItemAttributes,
    PlaylistUpdateAttributes,
    PlaylistUpdateItemAttributes,
)


def _hex(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw).hex()
    return str(raw).lower()


def _items(messages: Iterable[Message]) -> list["PlaylistItem"]:
    return [PlaylistItem.from_message(m) for m in messages]


@dataclass(frozen=True)
class PlaylistItem:
    """An entry of a playlist: the URI of the item and its attributes."""

    id: str
    attributes: PlaylistItemAttributes

    @classmethod
    def from_message(cls, msg: Message) -> "PlaylistItem":
        return cls(
            id=msg.get("uri", ""),
            attributes=PlaylistItemAttributes.from_message(msg.get("attributes")),
        )


@dataclass(frozen=True)
class PlaylistMetaItem:
    """A nested playlist: its revision, attributes and owner."""

    revision: str
    attributes: PlaylistAttributes
    length: int
    timestamp: datetime
    owner_username: str
    has_abuse_reporting: bool
    capabilities: Capabilities

    @classmethod
    def from_message(cls, msg: Message) -> "PlaylistMetaItem":
        return cls(
            revision=_hex(msg.get("revision", b"")),
            attributes=PlaylistAttributes.from_message(msg.get("attributes")),
            length=msg.get("length", 0),
            timestamp=date_from_timestamp_ms(msg.get("timestamp", 0)),
            owner_username=msg.get("owner_username", ""),
            has_abuse_reporting=msg.get("abuse_reporting_enabled", False),
            capabilities=Capabilities.from_message(msg.get("capabilities")),
        )


@dataclass(frozen=True)
class PlaylistItemList:
    """A window of playlist entries starting at ``position``."""

    position: int = 0
    is_truncated: bool = False
    items: list[PlaylistItem] = field(default_factory=list)
    meta_items: list[PlaylistMetaItem] = field(default_factory=list)

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistItemList":
        msg = msg or {}
        return cls(
            position=msg.get("pos", 0),
            is_truncated=msg.get("truncated", False),
            items=_items(msg.get("items", ())),
            meta_items=[PlaylistMetaItem.from_message(m) for m in msg.get("meta_items", ())],
        )


@dataclass(frozen=True)
class PlaylistOperationAdd:
    """Entries inserted into a playlist."""

    from_index: int = 0
    items: list[PlaylistItem] = field(default_factory=list)
    add_last: bool = False
    add_first: bool = False

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistOperationAdd":
        msg = msg or {}
        return cls(
            from_index=msg.get("from_index", 0),
            items=_items(msg.get("items", ())),
            add_last=msg.get("add_last", False),
            add_first=msg.get("add_first", False),
        )


@dataclass(frozen=True)
class PlaylistOperationMove:
    """A run of ``length`` entries moved from one index to another."""

    from_index: int = 0
    length: int = 0
    to_index: int = 0

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistOperationMove":
        msg = msg or {}
        return cls(
            from_index=msg.get("from_index", 0),
            length=msg.get("length", 0),
            to_index=msg.get("to_index", 0),
        )


@dataclass(frozen=True)
class PlaylistOperationRemove:
    """Entries removed from a playlist."""

    from_index: int = 0
    length: int = 0
    items: list[PlaylistItem] = field(default_factory=list)
    has_items_as_key: bool = False

    @classmethod
    def from_message(cls, msg: Optional[Message]) -> "PlaylistOperationRemove":
        msg = msg or {}
        return cls(
            from_index=msg.get("from_index", 0),
            length=msg.get("length", 0),
            items=_items(msg.get("items", ())),
            has_items_as_key=msg.get("items_as_key", False),
        )


@dataclass(frozen=True)
class PlaylistOperation:
    """One step of a playlist diff; ``kind`` says which part applies."""

    kind: Optional[str]
    add: PlaylistOperationAdd
    rem: PlaylistOperationRemove
    mov: PlaylistOperationMove
    update_item_attributes: PlaylistUpdateItemAttributes
    update_list_attributes: PlaylistUpdateAttributes

    @classmethod
    def from_message(cls, msg: Message) -> "PlaylistOperation":
        return cls(
            kind=msg.get("kind"),
            add=PlaylistOperationAdd.from_message(msg.get("add")),
            rem=PlaylistOperationRemove.from_message(msg.get("rem")),
            mov=PlaylistOperationMove.from_message(msg.get("mov")),
            update_item_attributes=PlaylistUpdateItemAttributes.from_message(
                msg.get("update_item_attributes")
            ),
            update_list_attributes=PlaylistUpdateAttributes.from_message(
                msg.get("update_list_attributes")
            ),
        )


@dataclass(frozen=True)
class PlaylistDiff:
    """The operations that take a playlist from one revision to another."""

    from_revision: str
    operations: list[PlaylistOperation]
    to_revision: str

    @classmethod
    def from_message(cls, msg: Message) -> "PlaylistDiff":
        return cls(
            from_revision=_hex(msg.get("from_revision", b"")),
            operations=[PlaylistOperation.from_message(m) for m in msg.get("ops", ())],
            to_revision=_hex(msg.get("to_revision", b"")),
        )