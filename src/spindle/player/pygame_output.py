"""AudioOutput implementation backed by pygame's music mixer."""

import logging
import time
from enum import Enum
from pathlib import Path

import pygame
from mutagen import File as MutagenFile
from mutagen import MutagenError

from spindle.errors import AudioLoadError, SpindleError

logger = logging.getLogger(__name__)


class _State(Enum):
    EMPTY = "empty"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class PygameAudioOutput:
    """Plays files through ``pygame.mixer.music``.

    pygame does not report a reliable playhead for every format, so the
    position is tracked from wall-clock time since the last (re)start.
    """

    def __init__(self, frequency: int = 44100, buffer: int = 512):
        try:
            pygame.mixer.init(frequency=frequency, size=-16, channels=2, buffer=buffer)
        except pygame.error as e:
            raise SpindleError(f"Could not open audio device: {e}") from e

        self._state = _State.EMPTY
        self._offset = 0.0
        self._started_at = 0.0
        self._closed = False

    def load(self, path: Path) -> float:
        try:
            pygame.mixer.music.load(str(path))
        except pygame.error as e:
            self._state = _State.EMPTY
            raise AudioLoadError(f"pygame could not open {path}: {e}") from e

        self._state = _State.READY
        self._offset = 0.0
        return self._duration_of(path)

    def play(self) -> None:
        match self._state:
            case _State.PAUSED:
                pygame.mixer.music.unpause()
            case _State.READY | _State.FINISHED:
                if self._state == _State.FINISHED:
                    self._offset = 0.0
                self._start_at(self._offset)
            case _:
                return

        self._started_at = time.monotonic()
        self._state = _State.PLAYING

    def pause(self) -> None:
        if self._state != _State.PLAYING:
            return
        pygame.mixer.music.pause()
        self._offset = self.get_position()
        self._state = _State.PAUSED

    def stop(self) -> None:
        pygame.mixer.music.stop()
        if self._state != _State.EMPTY:
            self._state = _State.READY
        self._offset = 0.0

    def seek(self, seconds: float) -> None:
        self._offset = seconds
        match self._state:
            case _State.PLAYING:
                self._start_at(seconds)
                self._started_at = time.monotonic()
            case _State.PAUSED | _State.FINISHED:
                # Restart from the new offset on the next play()
                pygame.mixer.music.stop()
                self._state = _State.READY

    def get_position(self) -> float:
        if self._state == _State.PLAYING:
            return self._offset + (time.monotonic() - self._started_at)
        return self._offset

    def has_finished(self) -> bool:
        if self._state == _State.PLAYING and not pygame.mixer.music.get_busy():
            self._offset = self.get_position()
            self._state = _State.FINISHED
        return self._state == _State.FINISHED

    def close(self) -> None:
        if self._closed:
            return
        pygame.mixer.music.stop()
        pygame.mixer.quit()
        self._closed = True
        self._state = _State.EMPTY

    def _start_at(self, seconds: float) -> None:
        try:
            pygame.mixer.music.play(start=seconds)
        except pygame.error as e:
            # Not every format supports a start offset
            logger.warning(f"Could not start playback at {seconds:.1f}s, starting over: {e}")
            self._offset = 0.0
            pygame.mixer.music.play()

    @staticmethod
    def _duration_of(path: Path) -> float:
        try:
            audio = MutagenFile(path)
        except (MutagenError, OSError) as e:
            logger.debug(f"Could not read duration of {path}: {e}")
            return 0.0
        if audio is None or audio.info is None:
            return 0.0
        return float(getattr(audio.info, "length", 0.0) or 0.0)
