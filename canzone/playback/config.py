"""Playback settings: bitrates, sample formats, normalisation and volume control."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Optional


class Bitrate(enum.Enum):
    """Stream bitrate in kbit/s."""

    BITRATE_96 = 96
    BITRATE_160 = 160
    BITRATE_320 = 320

    @classmethod
    def parse(cls, text: str) -> "Bitrate":
        """Parse ``"96"``, ``"160"`` or ``"320"``."""
        for member in cls:
            if text == str(member.value):
                return member
        raise ValueError(f"invalid bitrate: {text!r}")


class AudioFormat(enum.Enum):
    """Sample format handed to an audio sink."""

    F64 = "F64"
    F32 = "F32"
    S32 = "S32"
    S24 = "S24"
    S24_3 = "S24_3"
    S16 = "S16"

    @classmethod
    def parse(cls, text: str) -> "AudioFormat":
        """Parse a format name, ignoring case."""
        try:
            return cls(text.upper())
        except ValueError:
            raise ValueError(f"invalid audio format: {text!r}") from None

    def size(self) -> int:
        """Bytes taken by one sample in this format."""
        return _SAMPLE_SIZES[self]


# S32 and S24 are both stored in 32-bit integers.
_SAMPLE_SIZES = {
    AudioFormat.F64: 8,
    AudioFormat.F32: 4,
    AudioFormat.S32: 4,
    AudioFormat.S24: 4,
    AudioFormat.S24_3: 3,
    AudioFormat.S16: 2,
}


class NormalisationType(enum.Enum):
    """Which replay gain value normalisation uses."""

    ALBUM = "album"
    TRACK = "track"
    AUTO = "auto"

    @classmethod
    def parse(cls, text: str) -> "NormalisationType":
        """Parse ``album``, ``track`` or ``auto``, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"invalid normalisation type: {text!r}") from None


class NormalisationMethod(enum.Enum):
    """How normalisation gain is applied."""

    BASIC = "basic"
    DYNAMIC = "dynamic"

    @classmethod
    def parse(cls, text: str) -> "NormalisationMethod":
        """Parse ``basic`` or ``dynamic``, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"invalid normalisation method: {text!r}") from None


@dataclass
class PlayerConfig:
    """Settings for the player.

    Attack and release are given as durations in seconds.
    """

    bitrate: Bitrate = Bitrate.BITRATE_160
    gapless: bool = True
    passthrough: bool = False

    normalisation: bool = False
    normalisation_type: NormalisationType = NormalisationType.AUTO
    normalisation_method: NormalisationMethod = NormalisationMethod.DYNAMIC
    normalisation_pregain_db: float = 0.0
    normalisation_threshold_dbfs: float = -2.0
    normalisation_attack: float = 0.005
    normalisation_release: float = 0.1
    normalisation_knee_db: float = 5.0

    ditherer: Optional[str] = "triangular"


class VolumeCtrlKind(enum.Enum):
    """Shape of the volume control curve."""

    CUBIC = "cubic"
    FIXED = "fixed"
    LINEAR = "linear"
    LOG = "log"


_RANGED_KINDS = frozenset({VolumeCtrlKind.CUBIC, VolumeCtrlKind.LOG})


@dataclass(frozen=True)
class VolumeCtrl:
    """A volume control curve; cubic and log curves carry a range in dB."""

    MAX_VOLUME: ClassVar[int] = 0xFFFF
    DEFAULT_DB_RANGE: ClassVar[float] = 60.0

    kind: VolumeCtrlKind = VolumeCtrlKind.LOG
    db_range: Optional[float] = 60.0

    def __post_init__(self) -> None:
        if self.kind not in _RANGED_KINDS:
            object.__setattr__(self, "db_range", None)
        elif self.db_range is None:
            object.__setattr__(self, "db_range", self.DEFAULT_DB_RANGE)

    @classmethod
    def parse(cls, text: str, db_range: float = DEFAULT_DB_RANGE) -> "VolumeCtrl":
        """Parse a curve name, ignoring case, using ``db_range`` where it applies."""
        try:
            kind = VolumeCtrlKind(text.lower())
        except ValueError:
            raise ValueError(f"invalid volume control: {text!r}") from None
        return cls(kind, db_range)