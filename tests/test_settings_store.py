"""Tests for the JSON settings store, analyzer preferences and settings."""

import json
import logging

from spindle.config.settings import SpindleSettings
from spindle.config.validation import validate_settings_location
from spindle.preferences import AnalyzerPreferences
from spindle.settings_store import JsonSettingsStore


class TestJsonSettingsStore:
    """Tests for JsonSettingsStore persistence."""

    def test_missing_file_starts_empty(self, tmp_path):
        store = JsonSettingsStore(tmp_path / "settings.json")
        assert store.get("anything") is None

    def test_values_survive_reload(self, tmp_path):
        """A value written by one store is read by the next."""
        path = tmp_path / "nested" / "settings.json"
        JsonSettingsStore(path).set("volume", 7)
        assert JsonSettingsStore(path).get("volume") == 7

    def test_delete(self, tmp_path):
        path = tmp_path / "settings.json"
        store = JsonSettingsStore(path)
        store.set("volume", 7)

        assert store.delete("volume") is True
        assert store.delete("volume") is False
        assert json.loads(path.read_text()) == {}

    def test_get_returns_copy(self, tmp_path):
        """Mutating a returned value does not change the store."""
        store = JsonSettingsStore(tmp_path / "settings.json")
        store.set("dirs", ["a"])
        store.get("dirs").append("b")
        assert store.get("dirs") == ["a"]

    def test_corrupt_file_ignored(self, tmp_path, caplog):
        """Unparseable files are logged and replaced on the next write."""
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING):
            store = JsonSettingsStore(path)
        assert "corrupt" in caplog.text
        assert store.get("volume") is None

        store.set("volume", 3)
        assert json.loads(path.read_text()) == {"volume": 3}

    def test_non_object_file_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2, 3]")
        assert JsonSettingsStore(path).get("0") is None


class TestAnalyzerPreferences:
    """Tests for API key handling."""

    def test_round_trip(self, mock_store):
        preferences = AnalyzerPreferences(mock_store)
        assert preferences.get_api_key() is None
        preferences.set_api_key("sk-test")
        assert preferences.get_api_key() == "sk-test"

    def test_empty_key_removes(self, mock_store):
        preferences = AnalyzerPreferences(mock_store)
        preferences.set_api_key("sk-test")
        preferences.set_api_key("")
        assert preferences.get_api_key() is None
        assert mock_store.values == {}

    def test_non_string_value_ignored(self, mock_store):
        """A hand-edited non-string key is treated as absent."""
        mock_store.set("analyzer_api_key", 42)
        assert AnalyzerPreferences(mock_store).get_api_key() is None

    def test_persists_through_json_store(self, tmp_path):
        path = tmp_path / "settings.json"
        AnalyzerPreferences(JsonSettingsStore(path)).set_api_key("sk-test")
        assert AnalyzerPreferences(JsonSettingsStore(path)).get_api_key() == "sk-test"


class TestSpindleSettings:
    """Tests for environment-driven settings."""

    def test_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SPINDLE_SETTINGS_FILE", str(tmp_path / "s.json"))
        monkeypatch.setenv("SPINDLE_MUSIC_DIRS", str(tmp_path / "music"))
        monkeypatch.setenv("SPINDLE_ANALYSIS_DELAY_SECS", "1.5")
        monkeypatch.setenv("SPINDLE_WAVEFORM_SAMPLES", "80")
        monkeypatch.setenv("SPINDLE_LOG_LEVEL", "debug")

        settings = SpindleSettings.from_environment()

        assert settings.settings_file == tmp_path / "s.json"
        assert settings.music_dirs == [tmp_path / "music"]
        assert settings.analysis_delay_seconds == 1.5
        assert settings.effective_waveform_samples == 80
        assert settings.effective_log_level == logging.DEBUG

    def test_defaults(self, monkeypatch):
        for name in (
            "SPINDLE_SETTINGS_FILE",
            "SPINDLE_MUSIC_DIRS",
            "SPINDLE_OPENAI_MODEL",
            "SPINDLE_ANALYSIS_DELAY_SECS",
            "SPINDLE_WAVEFORM_SAMPLES",
            "SPINDLE_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = SpindleSettings.from_environment()

        assert settings.music_dirs == []
        assert settings.openai_model == "gpt-4o-mini"
        assert settings.analysis_delay_seconds == 4.0
        assert settings.effective_log_level == logging.INFO

    def test_bad_values_fall_back(self, settings, caplog):
        """Nonsensical samples and unknown levels are warned about and replaced."""
        bad = SpindleSettings(
            settings_file=settings.settings_file,
            music_dirs=[],
            openai_model="gpt-4o-mini",
            analysis_delay_seconds=0.0,
            waveform_samples=0,
            log_level=logging.getLevelName("LOUD"),
        )

        with caplog.at_level(logging.WARNING):
            bad.validate(logging.getLogger("test"))

        assert "SPINDLE_WAVEFORM_SAMPLES" in caplog.text
        assert "SPINDLE_LOG_LEVEL" in caplog.text
        assert bad.effective_waveform_samples == 60
        assert bad.effective_log_level == logging.INFO

    def test_settings_location_created(self, settings):
        assert validate_settings_location(settings) == []
        assert settings.settings_file.parent.is_dir()

    def test_music_path_must_be_directory(self, settings, tmp_path):
        (tmp_path / "music").write_text("not a dir")
        errors = validate_settings_location(settings)
        assert any("not a directory" in error for error in errors)
