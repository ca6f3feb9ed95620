import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import colorlog

from spindle.ai.openai_analyzer import OpenAICoverAnalyzer
from spindle.analysis import AnalysisQueue
from spindle.config.settings import SpindleSettings
from spindle.config.validation import validate_settings_location
from spindle.errors import SpindleError
from spindle.formatting import format_time
from spindle.library.models import Album
from spindle.library.scanner import LibraryLoader
from spindle.player.engine import QueueEngine
from spindle.player.models import LoopMode
from spindle.player.pygame_output import PygameAudioOutput
from spindle.preferences import AnalyzerPreferences
from spindle.settings_store import JsonSettingsStore
from spindle.track import Track
from spindle.waveform import WaveformSampler

logger = logging.getLogger(__name__)


def setup_logging(log_level: int) -> None:
    formatter = colorlog.ColoredFormatter(
        "%(cyan)s%(asctime)s%(reset)s %(log_color)s%(levelname)-8s%(reset)s %(light_purple)s%(name)s:%(reset)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "purple",
            "INFO": "blue",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.addHandler(handler)


class LoggingPlayerView:
    """PlayerView that reports playback through the log."""

    def __init__(self) -> None:
        self._last_second = -1

    def now_playing(self, track: Track | None) -> None:
        self._last_second = -1
        if track is None:
            logger.info("Nothing playing")
            return
        logger.info(f"Now playing: {track.formatted_title} [{describe_quality(track)}]")

    def position_changed(self, position: float, duration: float) -> None:
        # Polled every 20ms; only report whole-second changes
        second = int(position)
        if second == self._last_second:
            return
        self._last_second = second
        logger.debug(f"{format_time(position)} / {format_time(duration)}")

    def waveform_changed(self, envelope: list[float]) -> None:
        logger.debug(f"Waveform ready ({len(envelope)} samples)")


def describe_quality(track: Track) -> str:
    parts = [track.file_format or "Unknown format", track.quality_tier.value]
    if track.bitrate:
        parts.append(f"{track.bitrate} kbps")
    if track.sample_rate_label:
        parts.append(track.sample_rate_label)
    return ", ".join(parts)


def print_library(albums: Sequence[Album]) -> None:
    for number, album in enumerate(albums, start=1):
        badge = " [Mastered]" if album.is_mastering_certified else ""
        if album.animation_decision is not None:
            badge += f" <{album.animation_decision.style.value}>"
        print(
            f"{number:>3}. {album.title} - {album.artist}{badge} "
            f"({len(album.tracks)} tracks, {format_time(album.total_duration)})"
        )
        for track in album.tracks:
            position = f"{track.disc_number or 1}-{track.track_number or 0:02d}"
            duration = format_time(track.duration) if track.duration else "--:--"
            advisory = f" [{track.advisory.value}]" if track.advisory else ""
            print(f"       {position} {track.title}{advisory}  {duration}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spindle",
        description="Scan a music library, list its albums and play them.",
    )
    parser.add_argument(
        "directories",
        nargs="*",
        type=Path,
        help="Directories to scan (defaults to SPINDLE_MUSIC_DIRS)",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Choose cover animations for albums that have none yet",
    )
    parser.add_argument(
        "--api-key",
        help="Save the cover analyzer API key (an empty string removes it)",
    )
    parser.add_argument(
        "--play",
        type=int,
        metavar="N",
        help="Play album number N from the listing",
    )
    parser.add_argument("--shuffle", action="store_true", help="Shuffle the album")
    parser.add_argument(
        "--loop",
        choices=[mode.value for mode in LoopMode],
        default=LoopMode.OFF.value,
        help="Loop mode while playing",
    )
    return parser


async def play_album(
    album: Album, settings: SpindleSettings, loop_mode: LoopMode, shuffle: bool
) -> None:
    engine = QueueEngine(
        PygameAudioOutput(),
        sampler=WaveformSampler(settings.effective_waveform_samples),
        view=LoggingPlayerView(),
    )
    engine.loop_mode = loop_mode

    try:
        engine.play_album(album)
        if shuffle:
            engine.toggle_shuffle()
        while engine.is_playing:
            await asyncio.sleep(0.5)
    finally:
        await engine.close()


async def run_session(args: argparse.Namespace, settings: SpindleSettings) -> int:
    preferences = AnalyzerPreferences(JsonSettingsStore(settings.settings_file))
    if args.api_key is not None:
        preferences.set_api_key(args.api_key)
        logger.info("Saved analyzer API key" if args.api_key else "Removed analyzer API key")

    directories = args.directories or settings.music_dirs
    if not directories:
        logger.error("No music directories given")
        return 2

    library = LibraryLoader()
    await library.scan(directories)
    if not library.albums:
        logger.warning("No audio files found")
        return 1

    if args.analyze:
        analysis = AnalysisQueue(
            preferences,
            lambda api_key: OpenAICoverAnalyzer(api_key, settings.openai_model),
            is_live=library.is_live,
            delay=settings.analysis_delay_seconds,
        )
        await analysis.run(library.albums)
        if analysis.analysis_error:
            logger.error(analysis.analysis_error)

    print_library(library.albums)

    if args.play is not None:
        if not 1 <= args.play <= len(library.albums):
            logger.error(f"Album number must be between 1 and {len(library.albums)}")
            return 2
        await play_album(
            library.albums[args.play - 1], settings, LoopMode(args.loop), args.shuffle
        )

    return 0


def run(argv: Sequence[str] | None = None) -> None:
    """Entry point for the spindle script."""
    args = build_parser().parse_args(argv)

    settings = SpindleSettings.from_environment()
    setup_logging(settings.effective_log_level)
    settings.validate(logger)

    validation_errors = validate_settings_location(settings)
    if validation_errors:
        for error in validation_errors:
            logger.error(error)
        logger.critical("Startup validation failed, exiting")
        sys.exit(1)

    try:
        exit_code = asyncio.run(run_session(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        exit_code = 130
    except SpindleError as e:
        logger.critical(str(e))
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    run()
