"""Track data model - normalized record of one audio file."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NewType

from spindle import formatting

TrackId = NewType("TrackId", uuid.UUID)


def new_track_id() -> TrackId:
    return TrackId(uuid.uuid4())


class ContentAdvisory(Enum):
    """Content advisory rating read from the file's tags."""

    EXPLICIT = "Explicit"
    CLEAN = "Clean"


class QualityTier(Enum):
    """Coarse audio quality classification derived from format and bitrate."""

    LOSSLESS = "Lossless"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    UNKNOWN = "Unknown"


LOSSLESS_FORMATS = frozenset({"ALAC", "FLAC"})


def quality_tier_for(file_format: str | None, bitrate: int | None) -> QualityTier:
    """Classify audio quality. A lossless format wins over any bitrate."""
    if file_format in LOSSLESS_FORMATS:
        return QualityTier.LOSSLESS
    if bitrate is None:
        return QualityTier.UNKNOWN
    if bitrate >= 320:
        return QualityTier.HIGH
    if bitrate >= 192:
        return QualityTier.MEDIUM
    return QualityTier.LOW


@dataclass(frozen=True, eq=False)
class Track:
    """Pure data representation of a track, built once from an audio file.

    Identity is the ``id``: two records are equal only if they share it.
    """

    path: Path
    title: str
    artist: str
    album: str
    album_artist: str | None = None
    artwork: bytes | None = field(default=None, repr=False)
    track_number: int | None = None
    disc_number: int | None = None
    advisory: ContentAdvisory | None = None
    is_mastering_certified: bool = False
    file_format: str | None = None
    codec: str | None = None
    bitrate: int | None = None
    sample_rate: float | None = None
    bit_depth: int | None = None
    channels: int | None = None
    file_size: int | None = None
    duration: float | None = None
    id: TrackId = field(default_factory=new_track_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Track):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def quality_tier(self) -> QualityTier:
        return quality_tier_for(self.file_format, self.bitrate)

    @property
    def formatted_title(self) -> str:
        return f"{self.artist} - {self.title}"

    @property
    def file_size_label(self) -> str | None:
        if self.file_size is None:
            return None
        return formatting.format_file_size(self.file_size)

    @property
    def sample_rate_label(self) -> str | None:
        if self.sample_rate is None:
            return None
        return formatting.format_sample_rate(self.sample_rate)
