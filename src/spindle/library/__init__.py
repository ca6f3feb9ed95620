"""Music library: scanning, album grouping and snapshots."""

from spindle.library.grouper import group_albums, resolve_album_artist
from spindle.library.models import Album, AlbumId, LibrarySnapshot
from spindle.library.scanner import LibraryLoader, discover_audio_files

__all__ = [
    "Album",
    "AlbumId",
    "LibraryLoader",
    "LibrarySnapshot",
    "discover_audio_files",
    "group_albums",
    "resolve_album_artist",
]
