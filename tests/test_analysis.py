"""Tests for the serial cover analysis queue."""

import pytest

from spindle.ai.models import AnimationStyle
from spindle.analysis import AnalysisQueue
from spindle.library.models import Album
from spindle.preferences import AnalyzerPreferences
from tests.conftest import make_track
from tests.mocks.mock_output import MockCoverAnalyzer, make_decision


def make_album(title: str, artwork: bytes | None = b"image") -> Album:
    return Album(
        title=title,
        artist="Artist",
        tracks=(make_track("t", album=title, artwork=artwork),),
        artwork=artwork,
    )


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def preferences(mock_store) -> AnalyzerPreferences:
    preferences = AnalyzerPreferences(mock_store)
    preferences.set_api_key("sk-test")
    return preferences


@pytest.fixture
def analyzer() -> MockCoverAnalyzer:
    return MockCoverAnalyzer()


def make_queue(preferences, analyzer, sleep=None, is_live=lambda album_id: True):
    return AnalysisQueue(
        preferences,
        lambda api_key: analyzer,
        is_live=is_live,
        delay=4.0,
        sleep=sleep or RecordingSleep(),
    )


class TestAnalysisQueue:
    """Tests for AnalysisQueue batches."""

    async def test_requires_api_key(self, mock_store, analyzer):
        """Without an API key nothing runs and an error is recorded."""
        queue = make_queue(AnalyzerPreferences(mock_store), analyzer)
        assert queue.start([make_album("A")]) is None
        assert queue.analysis_error == "API key required"
        assert analyzer.calls == []

    async def test_analyzes_pending_albums_in_order(self, preferences, analyzer):
        """Each pending album is analyzed once, in order."""
        albums = [make_album("A"), make_album("B"), make_album("C")]
        queue = make_queue(preferences, analyzer)

        await queue.run(albums)

        assert analyzer.calls == ["A", "B", "C"]
        assert all(album.animation_decision is not None for album in albums)
        assert not any(album.is_analyzing for album in albums)

    async def test_one_call_at_a_time_with_delay(self, preferences, analyzer):
        """Calls never overlap and are spaced by the configured delay."""
        sleep = RecordingSleep()
        queue = make_queue(preferences, analyzer, sleep=sleep)

        await queue.run([make_album("A"), make_album("B"), make_album("C")])

        assert analyzer.max_in_flight == 1
        assert sleep.delays == [4.0, 4.0]

    async def test_skips_ineligible_albums(self, preferences, analyzer):
        """Albums with a decision, in flight, or without artwork are skipped."""
        decided = make_album("Decided")
        decided.animation_decision = make_decision()
        busy = make_album("Busy")
        busy.is_analyzing = True
        bare = make_album("Bare", artwork=None)
        queue = make_queue(preferences, analyzer)

        await queue.run([decided, busy, bare, make_album("Fresh")])

        assert analyzer.calls == ["Fresh"]

    async def test_failure_does_not_halt_batch(self, preferences):
        """A failed album gets no decision and the rest still run."""
        analyzer = MockCoverAnalyzer(
            decision=make_decision(AnimationStyle.PARALLAX), failing_titles={"B"}
        )
        albums = [make_album("A"), make_album("B"), make_album("C")]
        queue = make_queue(preferences, analyzer)

        await queue.run(albums)

        assert analyzer.calls == ["A", "B", "C"]
        assert albums[0].animation_decision.style == AnimationStyle.PARALLAX
        assert albums[1].animation_decision is None
        assert albums[2].animation_decision is not None
        assert not albums[1].is_analyzing

    async def test_stale_album_result_discarded(self, preferences, analyzer):
        """Results for albums no longer in the library are not applied."""
        stale = make_album("Stale")
        live = make_album("Live")
        queue = make_queue(
            preferences, analyzer, is_live=lambda album_id: album_id == live.id
        )

        await queue.run([stale, live])

        assert stale.animation_decision is None
        assert not stale.is_analyzing
        assert live.animation_decision is not None

    async def test_counters_reset_after_batch(self, preferences, analyzer):
        """Progress counters are set for the batch and reset when it ends."""
        queue = make_queue(preferences, analyzer)
        task = queue.start([make_album("A"), make_album("B")])

        assert queue.total_to_analyze == 2
        assert queue.is_running
        await task

        assert queue.total_to_analyze == 0
        assert queue.analyzed_count == 0
        assert not queue.is_running

    async def test_nothing_pending(self, preferences, analyzer):
        """With nothing to analyze no task is started."""
        queue = make_queue(preferences, analyzer)
        assert queue.start([make_album("Bare", artwork=None)]) is None
        assert queue.analysis_error is None
