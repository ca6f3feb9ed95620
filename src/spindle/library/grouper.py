"""Group a flat track list into albums."""

import logging
from collections import Counter
from collections.abc import Iterable

from spindle import artwork
from spindle.config import constants
from spindle.library.models import Album
from spindle.track import Track

logger = logging.getLogger(__name__)


def group_albums(tracks: Iterable[Track], compute_colors: bool = True) -> list[Album]:
    """Build one Album per distinct album name.

    Album names are compared exactly (case-sensitive). Member tracks are
    ordered by disc then track number, albums by title.

    Args:
        tracks: Every track from a library scan.
        compute_colors: Whether to derive a dominant color from each album's
            first artwork.

    Returns:
        Albums sorted by title.
    """
    by_name: dict[str, list[Track]] = {}
    for track in tracks:
        by_name.setdefault(track.album, []).append(track)

    albums = []
    for name, members in by_name.items():
        ordered = tuple(sorted(members, key=track_sort_key))
        cover = ordered[0].artwork
        albums.append(
            Album(
                title=name,
                artist=resolve_album_artist(ordered),
                album_artist=_single_value(t.album_artist for t in ordered),
                tracks=ordered,
                artwork=cover,
                dominant_color=(
                    artwork.dominant_color(cover) if compute_colors and cover else None
                ),
            )
        )

    albums.sort(key=lambda album: album.title)
    logger.debug(
        f"Grouped {sum(len(a.tracks) for a in albums)} tracks into {len(albums)} albums"
    )
    return albums


def track_sort_key(track: Track) -> tuple[int, int]:
    return (track.disc_number or 1, track.track_number or 0)


def resolve_album_artist(tracks: Iterable[Track]) -> str:
    """Pick the display artist for an album.

    One distinct explicit album artist wins. Otherwise one distinct track
    artist, otherwise the most frequent track artist with ties going to the
    artist seen first.
    """
    tracks = list(tracks)

    album_artist = _single_value(track.album_artist for track in tracks)
    if album_artist is not None:
        return album_artist

    artists = [track.artist for track in tracks if track.artist]
    if not artists:
        return constants.VARIOUS_ARTISTS

    # Counter keeps first-insertion order for equal counts
    return Counter(artists).most_common(1)[0][0]


def _single_value(values: Iterable[str | None]) -> str | None:
    distinct = {value for value in values if value}
    if len(distinct) == 1:
        return distinct.pop()
    return None
