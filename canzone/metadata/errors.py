"""Errors raised while fetching or interpreting metadata."""

from __future__ import annotations

from typing import ClassVar, Optional


class MetadataError(Exception):
    """Base class for metadata failures."""

    default_message: ClassVar[str] = "metadata error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class EmptyResponse(MetadataError):
    """The server answered without any payload."""

    default_message = "empty response"


class NonPlayable(MetadataError):
    """The requested item is not a track or an episode."""

    default_message = "audio item is non-playable when it should be"


class InvalidDuration(MetadataError):
    """The item reports a duration that cannot be played."""

    def __init__(self, duration: int) -> None:
        self.duration = duration
        super().__init__(f"audio item duration can not be: {duration}")


class ExplicitContentFiltered(MetadataError):
    """The item is explicit and the client filters explicit content."""

    default_message = "track is marked as explicit, which client setting forbids"