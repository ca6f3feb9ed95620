"""Helpers shared by the ordered collections (play queue, favorites)."""

from collections.abc import Iterable
from typing import TypeVar

T = TypeVar("T")


def move_items(items: list[T], sources: Iterable[int], destination: int) -> None:
    """Move the items at ``sources`` so they sit before ``destination``, in place.

    ``destination`` is an offset into the list as it was before the move, the
    same convention drag-and-drop list widgets use: moving index 0 of
    ``[a, b, c]`` to 2 gives ``[b, a, c]``. Moved items keep their relative
    order. Out of range source indexes are ignored and the destination is
    clamped to ``[0, len(items)]``.

    Args:
        items: The list to reorder.
        sources: Indexes of the items to move.
        destination: Insertion offset, relative to the original list.
    """
    indexes = sorted({i for i in sources if 0 <= i < len(items)})
    if not indexes:
        return

    destination = max(0, min(destination, len(items)))
    moved = [items[i] for i in indexes]
    for i in reversed(indexes):
        del items[i]

    # Every moved item that sat before the destination shifts it down by one
    insert_at = destination - sum(1 for i in indexes if i < destination)
    items[insert_at:insert_at] = moved
