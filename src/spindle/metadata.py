"""Derive normalized Track records from embedded audio metadata.

Each field has an ordered chain of sources; the first one that yields a usable
value wins. Missing or malformed tags are never an error, the field simply falls
through to the next source or stays absent.
"""

import logging
import re
from collections.abc import Callable
from pathlib import Path

from spindle import artwork
from spindle.config import constants
from spindle.formatting import sanitize_tag
from spindle.tag_reader import DecodedAudio, StreamInfo, TagEntry, TagValue, read_audio
from spindle.track import ContentAdvisory, Track

logger = logging.getLogger(__name__)

DISC_PATH_PATTERN = re.compile(r"(?:cd|disc|part|vol)[\s_.-]*(\d+)", re.IGNORECASE)

# Identifier fragments that mark a tag as embedded cover art
ARTWORK_MARKERS = ("covr", "apic", "cover", "picture", "artwork")

# Stream format id -> (file format, codec)
FORMAT_TABLE: dict[str, tuple[str, str]] = {
    "aac": ("AAC", "AAC-LC"),
    "alac": ("ALAC", "Apple Lossless"),
    "mp3": ("MP3", "MP3"),
    "aac_he": ("AAC", "HE-AAC"),
    "lpcm": ("PCM", "Linear PCM"),
    "flac": ("FLAC", "FLAC"),
}
UNKNOWN_FORMAT = ("Other", "Unknown")

EXPLICIT_RATINGS = (1, 4)


def extract_track(
    path: Path, reader: Callable[[Path], DecodedAudio] = read_audio
) -> Track:
    """Build a Track from an audio file.

    Args:
        path: Path to an existing audio file.
        reader: Tag decoder, replaceable for tests.

    Returns:
        A best-effort Track. Never raises for unreadable tags.
    """
    return track_from_decoded(reader(path))


def track_from_decoded(decoded: DecodedAudio) -> Track:
    """Apply the field resolution rules to an already decoded file."""
    stream = decoded.stream
    file_format, codec = describe_format(stream)
    duration = stream.duration if stream else None

    track = Track(
        path=decoded.path,
        title=_text_for(decoded.tags, "title") or decoded.path.stem,
        artist=_text_for(decoded.tags, "artist") or constants.UNKNOWN_ARTIST,
        album=_text_for(decoded.tags, "albumName") or constants.UNKNOWN_ALBUM,
        album_artist=_text_for(decoded.tags, "albumArtist"),
        artwork=resolve_artwork(decoded),
        track_number=resolve_track_number(decoded.tags),
        disc_number=resolve_disc_number(decoded.tags, decoded.path),
        advisory=resolve_advisory(decoded.tags),
        is_mastering_certified=is_mastering_certified(decoded.tags),
        file_format=file_format,
        codec=codec,
        bitrate=resolve_bitrate(stream, decoded.file_size, duration),
        sample_rate=stream.sample_rate if stream else None,
        bit_depth=stream.bit_depth if stream else None,
        channels=stream.channels if stream else None,
        file_size=decoded.file_size,
        duration=duration,
    )
    logger.debug(f"Extracted {track.formatted_title} from {decoded.path}")
    return track


def parse_number(value: TagValue) -> int | None:
    """Parse a track/disc number given as "N", "N/M", an integer or an (N, M) pair."""
    match value:
        case str():
            head = value.split("/", 1)[0].strip()
            number = int(head) if head.isdecimal() else None
        case int():
            number = value
        case (int() as first, int()):
            number = first
        case _:
            number = None

    if number is None or number <= 0:
        return None
    return number


def resolve_disc_number(tags: tuple[TagEntry, ...], path: Path) -> int | None:
    entry = _find(tags, "discNumber")
    if entry is not None:
        if isinstance(entry.value, bytes):
            # iTunes 'disk' atom: 00 00 [index 2 bytes] [count 2 bytes]
            if len(entry.value) >= 6 and entry.value[3] > 0:
                return entry.value[3]
        else:
            number = parse_number(entry.value)
            if number is not None:
                return number

    # Fall back to folder and file names such as "CD2" or "Disc 1"
    path_match = DISC_PATH_PATTERN.search(str(path))
    if path_match:
        return int(path_match.group(1))
    return None


def resolve_track_number(tags: tuple[TagEntry, ...]) -> int | None:
    entry = _find(tags, "trackNumber")
    if entry is not None and not isinstance(entry.value, bytes):
        number = parse_number(entry.value)
        if number is not None:
            return number

    for entry in tags:
        if "trkn" in entry.identifier and isinstance(entry.value, bytes):
            if len(entry.value) >= 8:
                number = (entry.value[2] << 8) | entry.value[3]
                if number > 0:
                    return number
    return None


def resolve_artwork(decoded: DecodedAudio) -> bytes | None:
    entry = _find(decoded.tags, "artwork")
    if entry is not None and isinstance(entry.value, bytes) and artwork.is_image(entry.value):
        return entry.value

    for entry in decoded.tags:
        identifier = entry.identifier.lower()
        if not any(marker in identifier for marker in ARTWORK_MARKERS):
            continue
        if isinstance(entry.value, bytes) and artwork.is_image(entry.value):
            return entry.value

    return artwork.find_loose_artwork(decoded.path)


def resolve_advisory(tags: tuple[TagEntry, ...]) -> ContentAdvisory | None:
    for entry in tags:
        if "rtng" not in entry.identifier and "itunesadvisory" not in entry.identifier.lower():
            continue
        rating = _as_int(entry.value)
        if rating is None:
            continue
        if rating in EXPLICIT_RATINGS:
            return ContentAdvisory.EXPLICIT
        return ContentAdvisory.CLEAN
    return None


def is_mastering_certified(tags: tuple[TagEntry, ...]) -> bool:
    has_flavor_2 = has_apple_id = has_catalog_number = has_owner = False

    for entry in tags:
        key = entry.identifier
        if "flvr" in key:
            if isinstance(entry.value, str) and entry.value.startswith("2:"):
                has_flavor_2 = True
            elif _as_int(entry.value) == 2:
                has_flavor_2 = True
        if "atID" in key:
            has_apple_id = True
        if "cnID" in key:
            has_catalog_number = True
        if "ownr" in key:
            has_owner = True

    return has_flavor_2 or (has_apple_id and has_catalog_number) or has_owner


def describe_format(stream: StreamInfo | None) -> tuple[str | None, str | None]:
    """Map a stream format id to (file format, codec)."""
    if stream is None:
        return None, None
    return FORMAT_TABLE.get(stream.format_id, UNKNOWN_FORMAT)


def resolve_bitrate(
    stream: StreamInfo | None, file_size: int | None, duration: float | None
) -> int | None:
    """Bitrate in kbps, reported by the stream or estimated from file size."""
    if stream is not None and stream.bitrate and stream.bitrate > 0:
        kbps = int(stream.bitrate / 1000)
        if kbps > 0:
            return kbps
    if file_size is not None and duration is not None and duration > 0:
        return int(file_size * 8 / duration / 1000)
    return None


def _find(tags: tuple[TagEntry, ...], common_key: str) -> TagEntry | None:
    for entry in tags:
        if entry.common_key == common_key:
            return entry
    return None


def _text_for(tags: tuple[TagEntry, ...], common_key: str) -> str | None:
    entry = _find(tags, common_key)
    if entry is None or not isinstance(entry.value, str):
        return None
    text = sanitize_tag(entry.value).strip()
    return text or None


def _as_int(value: TagValue) -> int | None:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None
