"""Tests for the Track model and formatting helpers."""

import dataclasses

import pytest

from spindle import formatting
from spindle.track import QualityTier, quality_tier_for
from tests.conftest import make_track


class TestQualityTier:
    """Tests for quality classification."""

    @pytest.mark.parametrize(
        ("file_format", "bitrate", "expected"),
        [
            ("FLAC", 128, QualityTier.LOSSLESS),
            ("ALAC", None, QualityTier.LOSSLESS),
            (None, 320, QualityTier.HIGH),
            ("MP3", 256, QualityTier.MEDIUM),
            ("MP3", 192, QualityTier.MEDIUM),
            ("AAC", 128, QualityTier.LOW),
            (None, None, QualityTier.UNKNOWN),
        ],
    )
    def test_tiers(self, file_format, bitrate, expected):
        assert quality_tier_for(file_format, bitrate) == expected

    def test_track_property(self):
        """Tracks expose their tier."""
        track = make_track("a", file_format="MP3", bitrate=320)
        assert track.quality_tier == QualityTier.HIGH


class TestTrackIdentity:
    """Tests for id-based equality."""

    def test_same_fields_different_tracks(self):
        """Two reads of identical tags are still different tracks."""
        assert make_track("a") != make_track("a")

    def test_copy_keeps_identity(self):
        """A modified copy with the same id is the same track."""
        track = make_track("a")
        renamed = dataclasses.replace(track, title="b")
        assert renamed == track
        assert len({track, renamed}) == 1

    def test_formatted_title(self):
        assert make_track("Song", artist="Band").formatted_title == "Band - Song"

    def test_labels_absent_without_values(self):
        track = make_track("a")
        assert track.file_size_label is None
        assert track.sample_rate_label is None


class TestFormatting:
    """Tests for display formatting."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "0:00"), (65, "1:05"), (59.9, "0:59"), (3661, "1:01:01"), (-3, "0:00")],
    )
    def test_format_time(self, seconds, expected):
        assert formatting.format_time(seconds) == expected

    def test_format_file_size(self):
        assert formatting.format_file_size(5_500_000) == "5.5 MB"
        assert formatting.format_file_size(1_500_000_000) == "1.50 GB"

    def test_format_sample_rate(self):
        assert formatting.format_sample_rate(44100) == "44.1 kHz"
        assert formatting.format_sample_rate(96000) == "96.0 kHz"

    def test_sanitize_removes_newlines(self):
        assert formatting.sanitize_tag("line one\nline two") == "line oneline two"

    def test_sanitize_caps_length(self):
        """Overlong values are cut and end in an ellipsis."""
        sanitized = formatting.sanitize_tag("x" * 1500)
        assert len(sanitized) == 1000
        assert sanitized.endswith("…")
