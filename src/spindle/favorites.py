"""User-ordered favorite tracks."""

import logging
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import Any

from spindle.list_utils import move_items
from spindle.track import Track, TrackId

logger = logging.getLogger(__name__)


class FavoriteSort(Enum):
    """Alternative orderings offered when browsing favorites."""

    TITLE = "title"
    ALBUM = "album"
    ARTIST = "artist"
    TRACK_NUMBER = "track_number"


_SORT_KEYS: dict[FavoriteSort, Callable[[Track], Any]] = {
    FavoriteSort.TITLE: lambda track: track.title.casefold(),
    FavoriteSort.ALBUM: lambda track: (
        track.album.casefold(),
        track.disc_number or 1,
        track.track_number or 0,
    ),
    FavoriteSort.ARTIST: lambda track: track.artist.casefold(),
    FavoriteSort.TRACK_NUMBER: lambda track: track.track_number or 0,
}


class FavoritesStore:
    """An ordered set of favorite track ids.

    The order is whatever the user made it: new favorites go to the end and
    ``move`` rearranges them. Nothing here is persisted.
    """

    def __init__(self, track_ids: Iterable[TrackId] = ()):
        self._ids: list[TrackId] = []
        for track_id in track_ids:
            if track_id not in self._ids:
                self._ids.append(track_id)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._ids

    def __iter__(self) -> Iterator[TrackId]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> tuple[TrackId, ...]:
        return tuple(self._ids)

    def contains(self, track_id: TrackId) -> bool:
        return track_id in self._ids

    def toggle(self, track_id: TrackId) -> bool:
        """Add the id at the end if absent, remove it if present.

        Returns:
            True if the track is a favorite after the call.
        """
        if track_id in self._ids:
            self._ids.remove(track_id)
            logger.debug(f"Removed favorite {track_id}")
            return False

        self._ids.append(track_id)
        logger.debug(f"Added favorite {track_id}")
        return True

    def move(self, sources: Iterable[int], destination: int) -> None:
        """Reorder favorites using list-move semantics (see ``move_items``)."""
        move_items(self._ids, sources, destination)

    def resolve(self, tracks: Iterable[Track]) -> list[Track]:
        """Map favorite ids to tracks, in favorites order.

        Ids with no matching track (for instance after a library reload) are
        skipped.
        """
        by_id = {track.id: track for track in tracks}
        return [by_id[track_id] for track_id in self._ids if track_id in by_id]

    def sorted_favorites(
        self, tracks: Iterable[Track], sort: FavoriteSort
    ) -> list[Track]:
        """Favorite tracks in an alternative display order.

        The stored order is left untouched.
        """
        return sorted(self.resolve(tracks), key=_SORT_KEYS[sort])
