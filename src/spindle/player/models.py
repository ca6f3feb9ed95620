"""Data models for the playback queue."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import NewType

from spindle.track import Track

SlotId = NewType("SlotId", uuid.UUID)


def new_slot_id() -> SlotId:
    return SlotId(uuid.uuid4())


class LoopMode(Enum):
    """Repeat behaviour when the current track ends or Next is pressed."""

    OFF = "off"
    QUEUE = "queue"
    SINGLE = "single"

    def cycled(self) -> "LoopMode":
        """Next mode in the off -> queue -> single -> off cycle."""
        return _LOOP_CYCLE[self]


_LOOP_CYCLE = {
    LoopMode.OFF: LoopMode.QUEUE,
    LoopMode.QUEUE: LoopMode.SINGLE,
    LoopMode.SINGLE: LoopMode.OFF,
}


@dataclass(frozen=True)
class QueueItem:
    """One slot in the queue.

    The slot id is independent of the track id so the same track can be
    queued several times and each copy still moved or removed on its own.
    """

    track: Track
    slot_id: SlotId = field(default_factory=new_slot_id)


class RemoveOutcome(Enum):
    """What a removal did to the current position."""

    NOT_FOUND = "not_found"
    REMOVED = "removed"
    CURRENT_REPLACED = "current_replaced"
    EMPTIED = "emptied"
