"""Runtime settings for Spindle.

Settings loaded from environment variables and provided to components via dependency injection.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from spindle.config import constants


@dataclass(frozen=True)
class SpindleSettings:
    """Runtime settings for Spindle."""

    # File paths
    settings_file: Path
    music_dirs: list[Path]

    # Cover analysis
    openai_model: str
    analysis_delay_seconds: float

    # Playback
    waveform_samples: int

    # Logging
    log_level: int

    @staticmethod
    def from_environment() -> "SpindleSettings":
        """Load settings from environment variables.

        Returns:
            SpindleSettings instance with values from environment variables.
        """
        default_settings_file = Path.home() / ".config" / "spindle" / "settings.json"
        music_dirs = [
            Path(entry)
            for entry in os.environ.get("SPINDLE_MUSIC_DIRS", "").split(os.pathsep)
            if entry
        ]

        return SpindleSettings(
            settings_file=Path(
                os.environ.get("SPINDLE_SETTINGS_FILE", default_settings_file)
            ),
            music_dirs=music_dirs,
            openai_model=os.environ.get("SPINDLE_OPENAI_MODEL", "gpt-4o-mini"),
            analysis_delay_seconds=float(
                os.environ.get(
                    "SPINDLE_ANALYSIS_DELAY_SECS",
                    str(constants.ANALYSIS_DELAY_SECONDS),
                )
            ),
            waveform_samples=int(
                os.environ.get(
                    "SPINDLE_WAVEFORM_SAMPLES", str(constants.DEFAULT_WAVEFORM_SAMPLES)
                )
            ),
            log_level=logging.getLevelName(
                os.environ.get("SPINDLE_LOG_LEVEL", "INFO").upper()
            ),
        )

    def validate(self, logger: logging.Logger) -> None:
        """Log warnings for questionable configuration.

        Args:
            logger: Logger instance to use for warnings.
        """
        if not self.music_dirs:
            logger.warning(
                "SPINDLE_MUSIC_DIRS is not set, directories must be passed on the command line"
            )

        for music_dir in self.music_dirs:
            if not music_dir.is_dir():
                logger.warning(f"Music directory {music_dir} does not exist")

        if self.waveform_samples <= 0:
            logger.warning(
                f"SPINDLE_WAVEFORM_SAMPLES={self.waveform_samples} is not positive, "
                f"falling back to {constants.DEFAULT_WAVEFORM_SAMPLES}"
            )

        if not isinstance(self.log_level, int):
            logger.warning(
                f"SPINDLE_LOG_LEVEL={self.log_level} is not a known level, using INFO"
            )

    @property
    def effective_waveform_samples(self) -> int:
        """Waveform length to request, guarding against nonsensical values."""
        if self.waveform_samples <= 0:
            return constants.DEFAULT_WAVEFORM_SAMPLES
        return self.waveform_samples

    @property
    def effective_log_level(self) -> int:
        """Numeric log level, INFO when the configured name was unknown."""
        if isinstance(self.log_level, int):
            return self.log_level
        return logging.INFO
