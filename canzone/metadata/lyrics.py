"""Lyrics documents as served in JSON."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any, Union

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class SyncType(enum.Enum):
    """Whether the lines carry timing."""

    UNSYNCED = "UNSYNCED"
    LINE_SYNCED = "LINE_SYNCED"


def _field(obj: Any, key: str, kind: type, where: str) -> Any:
    if not isinstance(obj, dict):
        raise ValueError(f"expected an object for {where}")
    if key not in obj:
        raise ValueError(f"missing field `{key}` in {where}")
    value = obj[key]
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"field `{key}` in {where} must be an integer")
        if not _I32_MIN <= value <= _I32_MAX:
            raise ValueError(f"field `{key}` in {where} is out of range")
    elif not isinstance(value, kind):
        raise ValueError(f"field `{key}` in {where} must be {kind.__name__}")
    return value


@dataclass(frozen=True)
class Colors:
    """Display colours as signed 32-bit ARGB values."""

    background: int
    highlight_text: int
    text: int


@dataclass(frozen=True)
class Line:
    """One line of lyrics with its timing, in milliseconds as text."""

    start_time_ms: str
    end_time_ms: str
    words: str


@dataclass(frozen=True)
class LyricsInner:
    """The lyrics text and how it is provided."""

    fullscreen_action: str
    is_dense_typeface: bool
    is_rtl_language: bool
    language: str
    lines: list[Line]
    provider: str
    provider_display_name: str
    provider_lyrics_id: str
    sync_lyrics_uri: str
    sync_type: SyncType


def _colors(obj: Any) -> Colors:
    return Colors(
        background=_field(obj, "background", int, "colors"),
        highlight_text=_field(obj, "highlightText", int, "colors"),
        text=_field(obj, "text", int, "colors"),
    )


def _line(obj: Any) -> Line:
    return Line(
        start_time_ms=_field(obj, "startTimeMs", str, "line"),
        end_time_ms=_field(obj, "endTimeMs", str, "line"),
        words=_field(obj, "words", str, "line"),
    )


def _inner(obj: Any) -> LyricsInner:
    sync = _field(obj, "syncType", str, "lyrics")
    try:
        sync_type = SyncType(sync)
    except ValueError:
        raise ValueError(f"unknown sync type: {sync!r}") from None
    return LyricsInner(
        fullscreen_action=_field(obj, "fullscreenAction", str, "lyrics"),
        is_dense_typeface=_field(obj, "isDenseTypeface", bool, "lyrics"),
        is_rtl_language=_field(obj, "isRtlLanguage", bool, "lyrics"),
        language=_field(obj, "language", str, "lyrics"),
        lines=[_line(item) for item in _field(obj, "lines", list, "lyrics")],
        provider=_field(obj, "provider", str, "lyrics"),
        provider_display_name=_field(obj, "providerDisplayName", str, "lyrics"),
        provider_lyrics_id=_field(obj, "providerLyricsId", str, "lyrics"),
        sync_lyrics_uri=_field(obj, "syncLyricsUri", str, "lyrics"),
        sync_type=sync_type,
    )


@dataclass(frozen=True)
class Lyrics:
    """A lyrics document."""

    colors: Colors
    has_vocal_removal: bool
    lyrics: LyricsInner

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "Lyrics":
        """Parse a lyrics document; raises ``ValueError`` if it is malformed."""
        obj = json.loads(data)
        return cls(
            colors=_colors(_field(obj, "colors", dict, "document")),
            has_vocal_removal=_field(obj, "hasVocalRemoval", bool, "document"),
            lyrics=_inner(_field(obj, "lyrics", dict, "document")),
        )