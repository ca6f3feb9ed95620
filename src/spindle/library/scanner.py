"""Scan directories and build library snapshots off the control path."""

import asyncio
import logging
import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from spindle.config import constants
from spindle.library.grouper import group_albums
from spindle.library.models import Album, AlbumId, LibrarySnapshot
from spindle.metadata import extract_track
from spindle.track import Track

logger = logging.getLogger(__name__)


def discover_audio_files(directories: Iterable[Path]) -> list[Path]:
    """Recursively collect files with a known audio extension.

    Unreadable directories are logged and skipped. Each file appears once,
    in sorted order.
    """
    found: set[Path] = set()

    for directory in directories:
        if not directory.is_dir():
            logger.warning(f"Skipping {directory}: not a directory")
            continue

        def on_error(error: OSError) -> None:
            logger.warning(f"Could not read {error.filename}: {error.strerror}")

        for root, _dirs, files in os.walk(directory, onerror=on_error):
            for name in files:
                if name.startswith("."):
                    continue
                path = Path(root) / name
                if path.suffix.lower() in constants.AUDIO_FILE_EXTENSIONS:
                    found.add(path.resolve())

    return sorted(found)


def build_snapshot(
    paths: Sequence[Path],
    generation: int,
    extractor: Callable[[Path], Track] = extract_track,
    compute_colors: bool = True,
) -> LibrarySnapshot:
    """Extract every file and group the result. Blocking.

    A file the extractor chokes on is logged and left out of the snapshot.
    """
    tracks = []
    for path in paths:
        if not path.is_file():
            logger.warning(f"Skipping {path}: file no longer exists")
            continue
        try:
            tracks.append(extractor(path))
        except Exception as e:
            logger.error(f"Could not read {path}, skipping it: {e}")

    albums = group_albums(tracks, compute_colors=compute_colors)
    return LibrarySnapshot(
        tracks=tuple(tracks), albums=tuple(albums), generation=generation
    )


class LibraryLoader:
    """Owns the live library snapshot.

    ``reload`` does the heavy lifting in a worker thread and swaps the
    snapshot in on the event loop. When reloads overlap, only the most
    recently started one is applied.
    """

    def __init__(
        self,
        extractor: Callable[[Path], Track] = extract_track,
        compute_colors: bool = True,
    ):
        self._extractor = extractor
        self._compute_colors = compute_colors
        self._generation = 0
        self.snapshot = LibrarySnapshot()

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self.snapshot.tracks

    @property
    def albums(self) -> tuple[Album, ...]:
        return self.snapshot.albums

    def is_live(self, album_id: AlbumId) -> bool:
        """Whether an album id belongs to the current snapshot."""
        return any(album.id == album_id for album in self.snapshot.albums)

    async def reload(self, paths: Sequence[Path]) -> bool:
        """Rebuild the library from ``paths``.

        Args:
            paths: Audio files to include, typically from
                ``discover_audio_files``.

        Returns:
            True if this load's snapshot was applied, False if a newer reload
            started while it was running.
        """
        self._generation += 1
        generation = self._generation
        logger.info(f"Loading library of {len(paths)} files (generation {generation})")

        snapshot = await asyncio.to_thread(
            build_snapshot,
            list(paths),
            generation,
            self._extractor,
            self._compute_colors,
        )

        if generation != self._generation:
            logger.debug(f"Discarding stale library load (generation {generation})")
            return False

        self.snapshot = snapshot
        logger.info(
            f"Library loaded: {len(snapshot.tracks)} tracks in {len(snapshot.albums)} albums"
        )
        return True

    async def scan(self, directories: Iterable[Path]) -> bool:
        """Discover audio files in ``directories`` and reload from them."""
        paths = await asyncio.to_thread(discover_audio_files, list(directories))
        return await self.reload(paths)
