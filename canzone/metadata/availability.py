"""Availability windows, regional restrictions and sale periods."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from canzone.metadata.common import Message

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class UnavailabilityReason(enum.Enum):
    """Why an item cannot be played."""

    BLACKLISTED = "blacklist present and country on it"
    EMBARGO = "available date is in the future"
    NO_DATA = "required data was not present"
    NOT_WHITELISTED = "whitelist present and country not on it"


class ItemUnavailable(Exception):
    """An item cannot be played, for the given reason."""

    def __init__(self, reason: UnavailabilityReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


def _date_from_message(msg: Optional[Message]) -> datetime:
    """Build a UTC datetime from a date message; an empty one is the epoch."""
    if not msg:
        return _EPOCH
    try:
        return datetime(
            msg.get("year", 1970),
            msg.get("month", 1),
            msg.get("day", 1),
            msg.get("hour", 0),
            msg.get("minute", 0),
            tzinfo=timezone.utc,
        )
    except (TypeError, OverflowError) as exc:
        raise ValueError(f"invalid date: {dict(msg)!r}") from exc


def parse_country_codes(country_codes: str) -> list[str]:
    """Split concatenated two-letter country codes."""
    if len(country_codes) % 2:
        raise ValueError(f"country code list has odd length: {country_codes!r}")
    return [country_codes[i : i + 2] for i in range(0, len(country_codes), 2)]


@dataclass(frozen=True)
class Availability:
    """Catalogues an item is in and when it becomes available."""

    catalogue_strs: list[str]
    start: datetime

    @classmethod
    def from_message(cls, msg: Message) -> "Availability":
        return cls(
            catalogue_strs=list(msg.get("catalogue_str", ())),
            start=_date_from_message(msg.get("start")),
        )


@dataclass(frozen=True)
class Restriction:
    """Countries where an item may or may not be played, per catalogue."""

    catalogues: list[str] = field(default_factory=list)
    restriction_type: Optional[str] = None
    catalogue_strs: list[str] = field(default_factory=list)
    countries_allowed: Optional[list[str]] = None
    countries_forbidden: Optional[list[str]] = None

    @classmethod
    def from_message(cls, msg: Message) -> "Restriction":
        allowed = msg.get("countries_allowed")
        forbidden = msg.get("countries_forbidden")
        return cls(
            catalogues=list(msg.get("catalogue", ())),
            restriction_type=msg.get("type"),
            catalogue_strs=list(msg.get("catalogue_str", ())),
            countries_allowed=None if allowed is None else parse_country_codes(allowed),
            countries_forbidden=None if forbidden is None else parse_country_codes(forbidden),
        )


@dataclass(frozen=True)
class SalePeriod:
    """A period during which an item is on sale, with its restrictions."""

    restrictions: list[Restriction]
    start: datetime
    end: datetime

    @classmethod
    def from_message(cls, msg: Message) -> "SalePeriod":
        return cls(
            restrictions=[Restriction.from_message(r) for r in msg.get("restriction", ())],
            start=_date_from_message(msg.get("start")),
            end=_date_from_message(msg.get("end")),
        )