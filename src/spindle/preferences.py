"""User preferences management."""

from spindle.config import constants
from spindle.settings_store import SettingsStore


class AnalyzerPreferences:
    """Manages the cover analyzer's credentials.

    This class provides a clean interface for the API key without exposing
    the underlying settings structure.
    """

    def __init__(self, store: SettingsStore):
        """Initialize preferences.

        Args:
            store: The settings store the key is persisted in.
        """
        self._store = store

    def get_api_key(self) -> str | None:
        """Get the saved analyzer API key.

        Returns:
            The key, or None if none is saved.
        """
        value = self._store.get(constants.ANALYZER_API_KEY_SETTING)
        if isinstance(value, str) and value:
            return value
        return None

    def set_api_key(self, api_key: str | None) -> None:
        """Save the analyzer API key. An empty or None key removes it.

        Args:
            api_key: The key to save.
        """
        if api_key:
            self._store.set(constants.ANALYZER_API_KEY_SETTING, api_key)
        else:
            self._store.delete(constants.ANALYZER_API_KEY_SETTING)
