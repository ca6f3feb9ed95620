"""Shared test fixtures and utilities."""

import logging
import random
from pathlib import Path

import pytest

from spindle.config.settings import SpindleSettings
from spindle.player.engine import QueueEngine
from spindle.track import Track
from tests.mocks.mock_audio import MockAudioOutput
from tests.mocks.mock_output import MockPlayerView, MockSettingsStore


@pytest.fixture
def settings(tmp_path: Path) -> SpindleSettings:
    """SpindleSettings pointing at a temporary directory, no analysis delay."""
    return SpindleSettings(
        settings_file=tmp_path / "config" / "settings.json",
        music_dirs=[tmp_path / "music"],
        openai_model="gpt-4o-mini",
        analysis_delay_seconds=0.0,
        waveform_samples=60,
        log_level=logging.INFO,
    )


@pytest.fixture
def mock_audio() -> MockAudioOutput:
    """Fresh MockAudioOutput instance."""
    return MockAudioOutput()


@pytest.fixture
def mock_view() -> MockPlayerView:
    """Fresh MockPlayerView instance."""
    return MockPlayerView()


@pytest.fixture
def mock_store() -> MockSettingsStore:
    """Fresh in-memory settings store."""
    return MockSettingsStore()


@pytest.fixture
async def engine(mock_audio, mock_view):
    """QueueEngine on mocks with a fast poll and a seeded shuffle."""
    engine = QueueEngine(
        mock_audio, view=mock_view, rng=random.Random(1234), poll_interval=0.001
    )
    yield engine
    await engine.close()


def make_track(
    title: str,
    artist: str = "Artist",
    album: str = "Album",
    album_artist: str | None = None,
    track_number: int | None = None,
    disc_number: int | None = None,
    file_format: str | None = None,
    bitrate: int | None = None,
    artwork: bytes | None = None,
    is_mastering_certified: bool = False,
    duration: float | None = 180.0,
) -> Track:
    """Helper to create test Track instances."""
    return Track(
        path=Path(f"/fake/{album}/{title}.mp3"),
        title=title,
        artist=artist,
        album=album,
        album_artist=album_artist,
        artwork=artwork,
        track_number=track_number,
        disc_number=disc_number,
        is_mastering_certified=is_mastering_certified,
        file_format=file_format,
        bitrate=bitrate,
        duration=duration,
    )


@pytest.fixture
def sample_tracks() -> list[Track]:
    """Three tracks a, b, c of one album."""
    return [
        make_track("a", track_number=1),
        make_track("b", track_number=2),
        make_track("c", track_number=3),
    ]
