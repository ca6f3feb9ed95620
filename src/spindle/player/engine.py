"""QueueEngine: playback state machine on top of PlayQueue."""

import asyncio
import logging
import random
from collections.abc import Iterable, Sequence

from spindle.config import constants
from spindle.errors import AudioLoadError
from spindle.library.models import Album
from spindle.player.models import LoopMode, QueueItem, RemoveOutcome, SlotId
from spindle.player.play_queue import PlayQueue
from spindle.player.protocols import AudioOutput, PlayerView
from spindle.track import Track
from spindle.waveform import WaveformSampler

logger = logging.getLogger(__name__)


class QueueEngine:
    """Owns the audio output and drives it from the queue.

    Every method runs on the event loop. Waveform sampling is handed to a
    worker thread and its result is only applied if the track it was computed
    for is still loaded. While playing, a poll task refreshes the playhead
    and advances when a track ends; it is cancelled whenever playback pauses
    or stops.
    """

    def __init__(
        self,
        audio: AudioOutput,
        sampler: WaveformSampler | None = None,
        view: PlayerView | None = None,
        rng: random.Random | None = None,
        poll_interval: float = constants.POSITION_POLL_INTERVAL,
    ):
        self.queue = PlayQueue(rng)
        self.loop_mode = LoopMode.OFF
        self.is_playing = False
        self.current_track: Track | None = None
        self.position = 0.0
        self.duration = 0.0
        self.waveform: list[float] = []

        self._audio = audio
        self._sampler = sampler
        self._view = view
        self._poll_interval = poll_interval
        self._poll_task: asyncio.Task[None] | None = None
        self._waveform_tasks: set[asyncio.Task[None]] = set()

    @property
    def current_index(self) -> int:
        return self.queue.current_index

    @property
    def is_shuffled(self) -> bool:
        return self.queue.shuffled

    @property
    def elapsed(self) -> float:
        """Playhead position of the loaded track in seconds."""
        if self.current_track is None:
            return self.position
        return self._audio.get_position()

    @property
    def can_advance(self) -> bool:
        return self.queue.has_successor or self.loop_mode == LoopMode.QUEUE

    @property
    def can_go_back(self) -> bool:
        return (
            self.elapsed > constants.PREVIOUS_RESTART_THRESHOLD
            or self.queue.has_predecessor
        )

    def play_album(self, album: Album, start_track: Track | None = None) -> None:
        """Replace the queue with an album in track order and start playing."""
        logger.info(f"Playing album {album.title} ({len(album.tracks)} tracks)")
        self.play_tracks(album.tracks, start_track, album_locked=True)

    def play_tracks(
        self,
        tracks: Sequence[Track],
        start_track: Track | None = None,
        album_locked: bool = False,
    ) -> None:
        """Replace the queue with ``tracks`` and start playing.

        Args:
            tracks: New queue contents, in order.
            start_track: Track to start from; the first track if omitted or
                not part of ``tracks``.
            album_locked: Whether the queue mirrors an album's order.
        """
        item = self.queue.replace(tracks, start_track, album_locked)
        if item is None:
            self.clear()
            return

        self.is_playing = True
        self._load(item)

    def play(self) -> None:
        """Start or resume the current track."""
        if self.current_track is None:
            item = self.queue.current_item
            if item is None or not self._load(item):
                return

        self._audio.play()
        self.is_playing = True
        self._start_polling()

    def pause(self) -> None:
        self._audio.pause()
        self.position = self.elapsed
        self.is_playing = False
        self._stop_polling()

    def toggle_play_pause(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, seconds: float) -> None:
        """Move the playhead, clamped to the loaded track."""
        if self.current_track is None:
            return

        seconds = max(0.0, seconds)
        if self.duration > 0:
            seconds = min(seconds, self.duration)

        self._audio.seek(seconds)
        self.position = seconds
        self._notify_position()

    def next(self) -> None:
        """Apply the Next rule: repeat, advance, wrap or stop."""
        if not self.queue.items:
            return

        if self.loop_mode == LoopMode.SINGLE:
            self.seek(0.0)
            self.play()
            return

        if self.queue.has_successor:
            self.queue.current_index += 1
        elif self.loop_mode == LoopMode.QUEUE:
            self.queue.current_index = 0
        else:
            self._stop_at_end()
            return

        self._load_current()

    def previous(self) -> None:
        """Restart the track if it is past the threshold, else step back."""
        if not self.queue.items:
            return

        if self.elapsed > constants.PREVIOUS_RESTART_THRESHOLD:
            self.seek(0.0)
        elif self.queue.has_predecessor:
            self.queue.current_index -= 1
            self._load_current()
        else:
            self.seek(0.0)

    def toggle_loop(self) -> LoopMode:
        self.loop_mode = self.loop_mode.cycled()
        logger.debug(f"Loop mode is now {self.loop_mode.value}")
        return self.loop_mode

    def toggle_shuffle(self) -> bool:
        """Switch shuffle on or off.

        Returns:
            True if the queue is shuffled after the call.
        """
        if self.queue.shuffled:
            self.queue.shuffle_off()
        else:
            self.queue.shuffle_on()
        return self.queue.shuffled

    def move(self, sources: Iterable[int], destination: int) -> None:
        self.queue.move(sources, destination)

    def remove(self, slot_id: SlotId) -> None:
        """Remove a slot. Removing the current slot loads its replacement."""
        self._after_remove(self.queue.remove(slot_id))

    def remove_at(self, index: int) -> None:
        self._after_remove(self.queue.remove_at(index))

    def play_next(self, track: Track) -> QueueItem:
        """Queue ``track`` right after the current slot."""
        return self.queue.insert_next(track)

    def add_to_queue(self, track: Track) -> QueueItem:
        return self.queue.append(track)

    def clear(self) -> None:
        """Empty the queue and stop playback."""
        self.queue.clear()
        self._audio.stop()
        self._unload()

    async def close(self) -> None:
        """Stop playback, wait for background work and release the output."""
        self._audio.stop()
        self.is_playing = False
        self._stop_polling()

        tasks = list(self._waveform_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._audio.close()

    def _after_remove(self, outcome: RemoveOutcome) -> None:
        match outcome:
            case RemoveOutcome.CURRENT_REPLACED:
                self._load_current()
            case RemoveOutcome.EMPTIED:
                self._audio.stop()
                self._unload()

    def _load_current(self) -> None:
        item = self.queue.current_item
        if item is not None:
            self._load(item)

    def _load(self, item: QueueItem) -> bool:
        """Load a slot's track into the output.

        Playback continues on the new track if it was playing before. A file
        that cannot be opened leaves nothing loaded and playback stopped.

        Returns:
            True if the track was loaded.
        """
        track = item.track
        self._audio.stop()

        try:
            duration = self._audio.load(track.path)
        except AudioLoadError as e:
            logger.error(f"Could not load {track.path}: {e}")
            self._unload()
            return False

        self.current_track = track
        self.queue.loaded_slot = item.slot_id
        self.duration = duration or track.duration or 0.0
        self.position = 0.0
        self.waveform = []
        logger.info(f"Loaded {track.formatted_title}")

        if self._view is not None:
            self._view.now_playing(track)
        self._request_waveform(track)

        if self.is_playing:
            self._audio.play()
            self._start_polling()
        return True

    def _unload(self) -> None:
        self.current_track = None
        self.queue.loaded_slot = None
        self.is_playing = False
        self.position = 0.0
        self.duration = 0.0
        self.waveform = []
        self._stop_polling()
        if self._view is not None:
            self._view.now_playing(None)

    def _stop_at_end(self) -> None:
        # Position is kept so the scrubber stays where the track ended
        self.position = self.elapsed
        self._audio.pause()
        self.is_playing = False
        self._stop_polling()
        logger.info("Reached the end of the queue")

    def _request_waveform(self, track: Track) -> None:
        if self._sampler is None:
            return
        task = asyncio.create_task(self._compute_waveform(self._sampler, track))
        self._waveform_tasks.add(task)
        task.add_done_callback(self._waveform_tasks.discard)

    async def _compute_waveform(self, sampler: WaveformSampler, track: Track) -> None:
        envelope = await asyncio.to_thread(sampler.sample, track.path)

        if self.current_track is None or self.current_track.id != track.id:
            logger.debug(f"Discarding stale waveform for {track.formatted_title}")
            return

        self.waveform = envelope
        if self._view is not None:
            self._view.waveform_changed(envelope)

    def _start_polling(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            return
        self._poll_task = asyncio.create_task(self._poll_position())

    def _stop_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        # The poll loop may stop itself when a track ends
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _poll_position(self) -> None:
        while self.is_playing:
            await asyncio.sleep(self._poll_interval)

            if self._audio.has_finished():
                logger.debug("Track finished")
                self.next()
                continue

            self.position = self._audio.get_position()
            self._notify_position()

    def _notify_position(self) -> None:
        if self._view is not None:
            self._view.position_changed(self.position, self.duration)
