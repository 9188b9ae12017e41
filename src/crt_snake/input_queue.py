"""Bounded FIFO of queued turn intents."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from crt_snake.codec import Direction


class DirectionQueue:
    """Holds up to *capacity* directions, dropping anything beyond that.

    ``collections.deque(maxlen=...)`` evicts the oldest entry on overflow;
    here the newest one is discarded instead so a player cannot overwrite
    turns that are already lined up.
    """

    def __init__(self, capacity: int = 5) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1.")
        self.capacity = capacity
        self._items: deque[Direction] = deque()

    def push(self, direction: Direction) -> bool:
        """Append *direction*. Returns False if the queue was full."""
        if len(self._items) >= self.capacity:
            return False
        self._items.append(direction)
        return True

    def pop(self) -> Direction | None:
        """Remove and return the oldest direction, if any."""
        if not self._items:
            return None
        return self._items.popleft()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Direction]:
        return iter(self._items)
