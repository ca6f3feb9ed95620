"""Serial background analysis of album covers."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from spindle.ai.protocols import CoverAnalyzer
from spindle.config import constants
from spindle.errors import AnalyzerError
from spindle.library.models import Album, AlbumId
from spindle.preferences import AnalyzerPreferences

logger = logging.getLogger(__name__)

AnalyzerFactory = Callable[[str], CoverAnalyzer]


class AnalysisQueue:
    """Runs the cover analyzer over albums one at a time.

    Calls are spaced by a fixed delay to stay under the service's rate limit.
    A failed album is logged and left without a decision; the batch carries
    on. Results are written to an album only if it still belongs to the live
    library when the answer arrives.
    """

    def __init__(
        self,
        preferences: AnalyzerPreferences,
        analyzer_factory: AnalyzerFactory,
        is_live: Callable[[AlbumId], bool] = lambda album_id: True,
        delay: float = constants.ANALYSIS_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.analyzed_count = 0
        self.total_to_analyze = 0
        self.analysis_error: str | None = None

        self._preferences = preferences
        self._analyzer_factory = analyzer_factory
        self._is_live = is_live
        self._delay = delay
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, albums: Iterable[Album]) -> asyncio.Task[None] | None:
        """Queue every album that still needs a decision.

        An album is pending when it has artwork, no decision yet and is not
        already being analyzed.

        Returns:
            The batch task, or None if there was nothing to do or no API key.
        """
        self.analysis_error = None

        api_key = self._preferences.get_api_key()
        if not api_key:
            self.analysis_error = "API key required"
            logger.warning("Cover analysis requested but no API key is configured")
            return None

        if self.is_running:
            logger.info("Cover analysis already running")
            return self._task

        pending = [
            album
            for album in albums
            if album.animation_decision is None
            and not album.is_analyzing
            and album.artwork is not None
        ]
        self.total_to_analyze = len(pending)
        self.analyzed_count = 0
        if not pending:
            logger.info("No album covers need analysis")
            return None

        logger.info(f"Analyzing {len(pending)} album covers")
        analyzer = self._analyzer_factory(api_key)
        self._task = asyncio.create_task(self._run(analyzer, pending))
        return self._task

    async def run(self, albums: Iterable[Album]) -> None:
        """Start a batch and wait for it to finish."""
        task = self.start(albums)
        if task is not None:
            await task

    async def cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)

    async def _run(self, analyzer: CoverAnalyzer, pending: list[Album]) -> None:
        try:
            for index, album in enumerate(pending):
                if index > 0:
                    await self._sleep(self._delay)
                await self._analyze(analyzer, album)
        finally:
            logger.info(f"Cover analysis finished, {self.analyzed_count} albums analyzed")
            self.total_to_analyze = 0
            self.analyzed_count = 0

    async def _analyze(self, analyzer: CoverAnalyzer, album: Album) -> None:
        if album.artwork is None:
            return

        album.is_analyzing = True
        decision = None
        try:
            decision = await analyzer.analyze(album.title, album.artwork)
        except AnalyzerError as e:
            logger.error(f"Analysis error for {album.title}: {e}")
        except Exception as e:
            logger.error(f"Unknown error analyzing {album.title}: {e}")
        finally:
            album.is_analyzing = False

        if not self._is_live(album.id):
            logger.debug(f"Discarding analysis for {album.title}, library was reloaded")
            return

        album.animation_decision = decision
        self.analyzed_count += 1
