"""Configuration module for Spindle.

This module provides a two-tier configuration system:
- constants: Pure constants that never change (thresholds, fallbacks, defaults)
- settings: Runtime settings loaded from environment variables
"""

# Re-export all constants
from spindle.config.constants import (
    ANALYSIS_DELAY_SECONDS,
    ANALYZER_API_KEY_SETTING,
    AUDIO_FILE_EXTENSIONS,
    DEFAULT_WAVEFORM_SAMPLES,
    JSON_DATA_TYPE,
    MAXIMUM_SONG_METADATA_CHARACTERS,
    POSITION_POLL_INTERVAL,
    PREVIOUS_RESTART_THRESHOLD,
    UNKNOWN_ALBUM,
    UNKNOWN_ARTIST,
    VARIOUS_ARTISTS,
)

# Re-export settings class
from spindle.config.settings import SpindleSettings

__all__ = [
    # Constants
    "ANALYSIS_DELAY_SECONDS",
    "ANALYZER_API_KEY_SETTING",
    "AUDIO_FILE_EXTENSIONS",
    "DEFAULT_WAVEFORM_SAMPLES",
    "JSON_DATA_TYPE",
    "MAXIMUM_SONG_METADATA_CHARACTERS",
    "POSITION_POLL_INTERVAL",
    "PREVIOUS_RESTART_THRESHOLD",
    "UNKNOWN_ALBUM",
    "UNKNOWN_ARTIST",
    "VARIOUS_ARTISTS",
    # Settings class
    "SpindleSettings",
]
