"""Ordered queue of slots with a current position and reversible shuffle.

This module only manages structure. Loading audio and playback flags belong
to ``spindle.player.engine``.
"""

import logging
import random
from collections.abc import Iterable, Sequence

from spindle.list_utils import move_items
from spindle.player.models import QueueItem, RemoveOutcome, SlotId
from spindle.track import Track

logger = logging.getLogger(__name__)


class PlayQueue:
    """Queue contents, current index and the pre-shuffle baseline.

    ``loaded_slot`` is the slot whose track is loaded in the audio output, if
    any. Reorders and shuffles relocate ``current_index`` from it rather than
    assuming the index stays put.
    """

    def __init__(self, rng: random.Random | None = None):
        self.items: list[QueueItem] = []
        self.current_index = 0
        self.loaded_slot: SlotId | None = None
        self.shuffled = False
        self.album_locked = False
        self._baseline: list[QueueItem] = []
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self.items)

    @property
    def baseline(self) -> tuple[QueueItem, ...]:
        """Order restored when shuffle is switched off."""
        return tuple(self._baseline)

    @property
    def current_item(self) -> QueueItem | None:
        if 0 <= self.current_index < len(self.items):
            return self.items[self.current_index]
        return None

    @property
    def tracks(self) -> list[Track]:
        return [item.track for item in self.items]

    @property
    def has_successor(self) -> bool:
        return self.current_index < len(self.items) - 1

    @property
    def has_predecessor(self) -> bool:
        return bool(self.items) and self.current_index > 0

    def index_of(self, slot_id: SlotId | None) -> int | None:
        if slot_id is None:
            return None
        for index, item in enumerate(self.items):
            if item.slot_id == slot_id:
                return index
        return None

    def replace(
        self,
        tracks: Sequence[Track],
        start_track: Track | None = None,
        album_locked: bool = False,
    ) -> QueueItem | None:
        """Replace the contents with fresh slots for ``tracks``.

        Shuffle is switched off and the new order becomes the baseline. The
        current index points at the first slot holding ``start_track``, or 0.

        Returns:
            The new current item, or None if ``tracks`` is empty.
        """
        self.items = [QueueItem(track) for track in tracks]
        self._baseline = list(self.items)
        self.shuffled = False
        self.album_locked = album_locked
        self.loaded_slot = None

        self.current_index = 0
        if start_track is not None:
            for index, item in enumerate(self.items):
                if item.track.id == start_track.id:
                    self.current_index = index
                    break

        return self.current_item

    def move(self, sources: Iterable[int], destination: int) -> None:
        """Reorder slots with list-move semantics and relocate the current index."""
        followed = self.loaded_slot
        if followed is None and self.current_item is not None:
            followed = self.current_item.slot_id

        move_items(self.items, sources, destination)

        index = self.index_of(followed)
        if index is not None:
            self.current_index = index

    def remove(self, slot_id: SlotId) -> RemoveOutcome:
        """Remove a slot by id, keeping the current index on the same slot.

        When the current slot itself is removed, the index stays where it was
        (clamped to the new end) so it points at the slot that took its place.
        """
        index = self.index_of(slot_id)
        if index is None:
            return RemoveOutcome.NOT_FOUND

        del self.items[index]
        self._baseline = [item for item in self._baseline if item.slot_id != slot_id]
        if self.loaded_slot == slot_id:
            self.loaded_slot = None

        if index < self.current_index:
            self.current_index -= 1
            return RemoveOutcome.REMOVED
        if index > self.current_index:
            return RemoveOutcome.REMOVED

        if not self.items:
            self.current_index = 0
            return RemoveOutcome.EMPTIED

        self.current_index = min(self.current_index, len(self.items) - 1)
        return RemoveOutcome.CURRENT_REPLACED

    def remove_at(self, index: int) -> RemoveOutcome:
        if not 0 <= index < len(self.items):
            return RemoveOutcome.NOT_FOUND
        return self.remove(self.items[index].slot_id)

    def insert_next(self, track: Track) -> QueueItem:
        """Insert a new slot right after the current one, or at the end."""
        item = QueueItem(track)
        current = self.current_item

        if self.current_index < len(self.items):
            self.items.insert(self.current_index + 1, item)
        else:
            self.items.append(item)

        baseline_index = None
        if current is not None:
            for index, baseline_item in enumerate(self._baseline):
                if baseline_item.slot_id == current.slot_id:
                    baseline_index = index
                    break
        if baseline_index is None:
            self._baseline.append(item)
        else:
            self._baseline.insert(baseline_index + 1, item)

        return item

    def append(self, track: Track) -> QueueItem:
        item = QueueItem(track)
        self.items.append(item)
        self._baseline.append(item)
        return item

    def clear(self) -> None:
        self.items = []
        self._baseline = []
        self.current_index = 0
        self.loaded_slot = None
        self.album_locked = False

    def shuffle_on(self) -> None:
        """Randomize the order, pinning the loaded slot (if any) to the front."""
        self._baseline = list(self.items)
        self.shuffled = True

        loaded_index = self.index_of(self.loaded_slot)
        if loaded_index is not None:
            pinned = self.items[loaded_index]
            rest = self.items[:loaded_index] + self.items[loaded_index + 1 :]
            self._rng.shuffle(rest)
            self.items = [pinned] + rest
        else:
            self._rng.shuffle(self.items)

        self.current_index = 0
        logger.debug(f"Shuffled queue of {len(self.items)} items")

    def shuffle_off(self) -> None:
        """Restore the baseline order and follow the loaded slot into it."""
        self.items = list(self._baseline)
        self.shuffled = False

        loaded_index = self.index_of(self.loaded_slot)
        self.current_index = loaded_index if loaded_index is not None else 0
