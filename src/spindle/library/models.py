"""Data models for the music library."""

import uuid
from dataclasses import dataclass, field
from typing import NewType

from spindle.ai.models import AnimationDecision
from spindle.artwork import RGB
from spindle.track import Track, TrackId

AlbumId = NewType("AlbumId", uuid.UUID)


def new_album_id() -> AlbumId:
    return AlbumId(uuid.uuid4())


@dataclass(eq=False)
class Album:
    """A named group of tracks with a resolved display artist.

    Everything except the analysis fields is fixed at grouping time. The
    analysis fields are written by the cover analysis queue only.
    """

    title: str
    artist: str
    tracks: tuple[Track, ...]
    album_artist: str | None = None
    artwork: bytes | None = field(default=None, repr=False)
    dominant_color: RGB | None = None
    animation_decision: AnimationDecision | None = None
    is_analyzing: bool = False
    id: AlbumId = field(default_factory=new_album_id)

    def __post_init__(self) -> None:
        if not self.tracks:
            raise ValueError(f"Album {self.title!r} must contain at least one track")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Album):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def is_mastering_certified(self) -> bool:
        return any(track.is_mastering_certified for track in self.tracks)

    @property
    def total_duration(self) -> float:
        """Sum of known track durations in seconds."""
        return sum(track.duration or 0.0 for track in self.tracks)


@dataclass(frozen=True)
class LibrarySnapshot:
    """Immutable result of one library scan."""

    tracks: tuple[Track, ...] = ()
    albums: tuple[Album, ...] = ()
    generation: int = 0

    def track_by_id(self, track_id: TrackId) -> Track | None:
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None
