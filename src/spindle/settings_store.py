import copy
import json
import logging
from pathlib import Path
from typing import Any, Protocol, cast

from spindle.config.constants import JSON_DATA_TYPE

logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Protocol for persisted key/value settings."""

    def get(self, key: str) -> JSON_DATA_TYPE:
        """Retrieve the value stored under ``key``, or None if unset."""
        ...

    def set(self, key: str, value: JSON_DATA_TYPE) -> None:
        """Store ``value`` under ``key`` and persist it."""
        ...

    def delete(self, key: str) -> bool:
        """Remove ``key``.

        Returns:
            True if the key existed.
        """
        ...


class JsonSettingsStore:
    """Settings backed by a single JSON file."""

    def __init__(self, settings_file: Path) -> None:
        """Initialize the store and load from disk.

        A missing file is expected on first run. A file that cannot be read or
        parsed is logged and ignored; it is overwritten on the next change.

        Args:
            settings_file: Path to the settings file.
        """
        self._settings: dict[str, Any] = {}
        self._settings_file = settings_file

        try:
            with open(settings_file) as f:
                settings_str = f.read()
        except FileNotFoundError:
            settings_str = None
        except OSError as e:
            logger.warning(f"Could not read settings from {settings_file}: {e}")
            settings_str = None

        if not settings_str:
            logger.info("No existing settings file found, starting fresh")
            return

        try:
            loaded = json.loads(settings_str)
        except json.JSONDecodeError as e:
            logger.warning(f"Settings file {settings_file} is corrupt, ignoring it: {e}")
            return

        if not isinstance(loaded, dict):
            logger.warning(f"Settings file {settings_file} is not a JSON object, ignoring it")
            return

        self._settings = loaded
        logger.info(f"Loaded settings from {settings_file}")

    def get(self, key: str) -> JSON_DATA_TYPE:
        value = self._settings.get(key)
        if value is None:
            return None

        # Hand out a copy so callers cannot change the stored value in place
        return cast(JSON_DATA_TYPE, copy.deepcopy(value))

    def set(self, key: str, value: JSON_DATA_TYPE) -> None:
        """Modify a setting in memory, then dump all settings to disk.

        This method should not be made async; the in-memory and on-disk state
        must not diverge across an await.
        """
        self._settings[key] = value
        self._write()

    def delete(self, key: str) -> bool:
        if key not in self._settings:
            return False

        del self._settings[key]
        self._write()
        return True

    def _write(self) -> None:
        self._settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self._settings_file, "w") as f:
            # Indented so the file is easy to inspect by hand
            f.write(json.dumps(self._settings, indent=2))
