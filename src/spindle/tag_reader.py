"""Read raw tags and stream parameters from audio files using mutagen.

The reader flattens every container format mutagen understands into a neutral
list of ``TagEntry`` values plus a ``StreamInfo``. Field resolution (which tag
wins, what the fallbacks are) lives in ``spindle.metadata``.
"""

import base64
import binascii
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.aiff import AIFF
from mutagen.flac import FLAC, Picture
from mutagen.id3 import APIC, Frame
from mutagen.mp3 import MP3
from mutagen.mp4 import MP4
from mutagen.wave import WAVE

logger = logging.getLogger(__name__)

TagValue = str | int | bytes | tuple[int, int]

# Maps a raw tag identifier (ID3 frame id, MP4 atom, Vorbis comment name) to
# the common key the extraction rules look up.
COMMON_KEYS: dict[str, str] = {
    "TIT2": "title",
    "©nam": "title",
    "title": "title",
    "TPE1": "artist",
    "©ART": "artist",
    "artist": "artist",
    "TALB": "albumName",
    "©alb": "albumName",
    "album": "albumName",
    "TPE2": "albumArtist",
    "aART": "albumArtist",
    "albumartist": "albumArtist",
    "album artist": "albumArtist",
    "TPOS": "discNumber",
    "disk": "discNumber",
    "discnumber": "discNumber",
    "TRCK": "trackNumber",
    "trkn": "trackNumber",
    "tracknumber": "trackNumber",
    "APIC": "artwork",
    "covr": "artwork",
    "metadata_block_picture": "artwork",
    "PICTURE": "artwork",
}

# MP4 audio object types that denote High-Efficiency AAC
HE_AAC_CODECS = ("mp4a.40.5", "mp4a.40.29")


@dataclass(frozen=True)
class TagEntry:
    """One key/value tag entry with its optional common-key alias."""

    identifier: str
    value: TagValue
    common_key: str | None = None


@dataclass(frozen=True)
class StreamInfo:
    """Basic description of the decoded audio stream."""

    format_id: str
    sample_rate: float | None = None
    bit_depth: int | None = None
    channels: int | None = None
    bitrate: int | None = None  # bits per second, as reported by the container
    duration: float | None = None


@dataclass(frozen=True)
class DecodedAudio:
    """Everything the metadata rules may consult about a single file."""

    path: Path
    tags: tuple[TagEntry, ...] = field(default=(), repr=False)
    stream: StreamInfo | None = None
    file_size: int | None = None


def common_key_for(identifier: str) -> str | None:
    """Look up the common key for a raw identifier such as ``APIC:Cover``."""
    base = identifier.split(":", 1)[0]
    return COMMON_KEYS.get(base) or COMMON_KEYS.get(base.lower())


def read_audio(path: Path) -> DecodedAudio:
    """Read tags and stream information from an audio file.

    Never raises: an unreadable file yields a result without tags or stream.

    Args:
        path: Path to the audio file.

    Returns:
        The decoded tag and stream surface.
    """
    file_size = _file_size(path)

    try:
        audio = MutagenFile(path)
    except MutagenError as e:
        logger.error(f"Error reading tags from file {path}: {e}")
        return DecodedAudio(path=path, file_size=file_size)
    except Exception as e:
        logger.error(f"Unknown error reading tags from {path}: {e}")
        return DecodedAudio(path=path, file_size=file_size)

    if audio is None:
        logger.warning(f"Unrecognized audio container: {path}")
        return DecodedAudio(path=path, file_size=file_size)

    return DecodedAudio(
        path=path,
        tags=tuple(_tag_entries(audio)),
        stream=_stream_info(audio),
        file_size=file_size,
    )


def _file_size(path: Path) -> int | None:
    try:
        return os.stat(path).st_size
    except OSError as e:
        logger.debug(f"Could not stat {path}: {e}")
        return None


def _tag_entries(audio: Any) -> list[TagEntry]:
    entries: list[TagEntry] = []

    if audio.tags:
        for key in audio.tags.keys():
            identifier = str(key)
            value = _normalize_value(identifier, audio.tags[key])
            if value is None:
                continue
            entries.append(TagEntry(identifier, value, common_key_for(identifier)))

    # FLAC keeps pictures in their own metadata blocks
    if isinstance(audio, FLAC):
        for picture in audio.pictures:
            entries.append(TagEntry("PICTURE", bytes(picture.data), "artwork"))

    return entries


def _normalize_value(identifier: str, raw: Any) -> TagValue | None:
    # Vorbis comments and MP4 atoms are lists; the first item is the value
    if isinstance(raw, list):
        if not raw:
            return None
        raw = raw[0]

    if identifier.lower() == "metadata_block_picture" and isinstance(raw, str):
        try:
            return bytes(Picture(base64.b64decode(raw)).data)
        except (binascii.Error, MutagenError) as e:
            logger.debug(f"Skipping undecodable picture block: {e}")
            return None

    match raw:
        case APIC():
            return bytes(raw.data)
        case Frame() if isinstance(getattr(raw, "text", None), list):
            return str(raw.text[0]) if raw.text else None
        case Frame() if isinstance(getattr(raw, "text", None), str):
            return raw.text or None
        case Frame():
            return None
        case bool() | int():
            return int(raw)
        case bytes():
            # MP4Cover and MP4FreeForm are bytes subclasses
            return bytes(raw)
        case str():
            return raw
        case (int() as number, int() as total):
            return (number, total)
        case _:
            return None


def _stream_info(audio: Any) -> StreamInfo | None:
    info = getattr(audio, "info", None)
    if info is None:
        return None

    match audio:
        case MP3():
            format_id = "mp3"
        case MP4():
            codec = getattr(info, "codec", "") or ""
            if codec == "alac":
                format_id = "alac"
            elif codec.startswith(HE_AAC_CODECS):
                format_id = "aac_he"
            elif codec.startswith("mp4a"):
                format_id = "aac"
            else:
                format_id = codec or "mp4"
        case FLAC():
            format_id = "flac"
        case WAVE() | AIFF():
            format_id = "lpcm"
        case _:
            format_id = type(audio).__name__.lower()

    return StreamInfo(
        format_id=format_id,
        sample_rate=_positive_or_none(getattr(info, "sample_rate", None)),
        bit_depth=_positive_or_none(getattr(info, "bits_per_sample", None)),
        channels=_positive_or_none(getattr(info, "channels", None)),
        bitrate=_positive_or_none(getattr(info, "bitrate", None)),
        duration=_positive_or_none(getattr(info, "length", None)),
    )


def _positive_or_none(value: Any) -> Any:
    if value is None or value <= 0:
        return None
    return value
