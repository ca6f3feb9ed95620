"""Startup validation for Spindle."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spindle.config.settings import SpindleSettings

logger = logging.getLogger(__name__)


def validate_settings_location(settings: "SpindleSettings") -> list[str]:
    """Validate the settings directory exists and is writable, create if needed.

    Args:
        settings: SpindleSettings instance containing the settings file path.

    Returns:
        List of error messages (empty if all OK).
    """
    errors = []

    settings_dir = settings.settings_file.parent
    try:
        settings_dir.mkdir(parents=True, exist_ok=True)
        # Test writability
        test_file = settings_dir / ".write_test"
        test_file.touch()
        test_file.unlink()
    except (OSError, PermissionError) as e:
        errors.append(f"Cannot write to settings directory ({settings_dir}): {e}")

    for music_dir in settings.music_dirs:
        if music_dir.exists() and not music_dir.is_dir():
            errors.append(f"Music path is not a directory: {music_dir}")

    return errors
