"""Constants for Spindle.

These are true constants that never change - thresholds, fallbacks, application defaults, etc.
"""

from typing import Any, Final, Iterable, Mapping

# Metadata fallbacks
UNKNOWN_ARTIST: Final = "Unknown Artist"
UNKNOWN_ALBUM: Final = "Unknown Album"
VARIOUS_ARTISTS: Final = "Various Artists"
MAXIMUM_SONG_METADATA_CHARACTERS: Final = 1000

# Loose artwork lookup, checked in this order
LOOSE_ARTWORK_NAMES: Final = ("cover", "folder", "album", "front", "artwork")
LOOSE_ARTWORK_EXTENSIONS: Final = ("jpg", "jpeg", "png", "webp")

# Library scan
AUDIO_FILE_EXTENSIONS: Final = frozenset(
    {".mp3", ".m4a", ".m4b", ".aac", ".alac", ".flac", ".wav", ".aif", ".aiff", ".ogg", ".opus"}
)

# Dominant color is averaged over a downsampled copy of the cover
DOMINANT_COLOR_SAMPLE_SIZE: Final = (50, 50)

# Playback
PREVIOUS_RESTART_THRESHOLD: Final = 3.0
POSITION_POLL_INTERVAL: Final = 0.02

# Waveform
DEFAULT_WAVEFORM_SAMPLES: Final = 60
WAVEFORM_POINTS_PER_BUCKET: Final = 100
WAVEFORM_BOOST: Final = 2.0
WAVEFORM_FLOOR: Final = 0.05
WAVEFORM_FALLBACK_LEVEL: Final = 0.5
WAVEFORM_EMPTY_BUCKET_LEVEL: Final = 0.2

# Cover analysis
ANALYSIS_DELAY_SECONDS: Final = 4.0
ANALYSIS_REQUEST_TIMEOUT: Final = 60.0
ANALYSIS_JPEG_QUALITY: Final = 80
ANALYZER_API_KEY_SETTING: Final = "analyzer_api_key"

# Type aliases
JSON_DATA_TYPE = str | int | float | bool | Mapping[str, Any] | Iterable[Any] | None
