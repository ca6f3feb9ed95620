"""Protocol definitions for dependency injection in QueueEngine."""

from pathlib import Path
from typing import Protocol

from spindle.track import Track


class AudioOutput(Protocol):
    """Protocol for the device that actually produces sound.

    QueueEngine is the only caller. All methods are synchronous and must
    return promptly; they are called from the event loop.
    """

    def load(self, path: Path) -> float:
        """Open an audio file for playback, replacing whatever was loaded.

        Playback does not start until ``play`` is called.

        Args:
            path: Path to the audio file.

        Returns:
            Duration of the file in seconds, or 0.0 if unknown.

        Raises:
            AudioLoadError: If the file cannot be opened or decoded.
        """
        ...

    def play(self) -> None:
        """Start or resume playback from the current position."""
        ...

    def pause(self) -> None:
        """Pause playback, keeping the current position."""
        ...

    def stop(self) -> None:
        """Stop playback. Safe to call when nothing is loaded."""
        ...

    def seek(self, seconds: float) -> None:
        """Move the playhead to ``seconds`` from the start of the file."""
        ...

    def get_position(self) -> float:
        """Current playhead position in seconds."""
        ...

    def has_finished(self) -> bool:
        """Whether the loaded file played through to its end."""
        ...

    def close(self) -> None:
        """Release the audio device. The output is unusable afterwards."""
        ...


class PlayerView(Protocol):
    """Protocol for whatever displays playback state.

    Implementations only present state; they never call back into the engine
    from these hooks.
    """

    def now_playing(self, track: Track | None) -> None:
        """The loaded track changed. None means nothing is loaded."""
        ...

    def position_changed(self, position: float, duration: float) -> None:
        """The playhead moved.

        Args:
            position: Elapsed seconds in the current track.
            duration: Total length of the current track in seconds.
        """
        ...

    def waveform_changed(self, envelope: list[float]) -> None:
        """A waveform envelope is ready for the current track."""
        ...
