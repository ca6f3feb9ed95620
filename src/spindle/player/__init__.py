"""Playback queue and the engine that drives the audio output."""

from spindle.player.engine import QueueEngine
from spindle.player.models import LoopMode, QueueItem, RemoveOutcome, SlotId
from spindle.player.play_queue import PlayQueue
from spindle.player.protocols import AudioOutput, PlayerView

__all__ = [
    "AudioOutput",
    "LoopMode",
    "PlayQueue",
    "PlayerView",
    "QueueEngine",
    "QueueItem",
    "RemoveOutcome",
    "SlotId",
]
