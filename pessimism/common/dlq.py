"""Bounded dead letter queue for events that failed processing."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

from pessimism.core.transit import TransitData

E = TypeVar("E")


class DLQFullError(Exception):
    """Raised when adding to a full dead letter queue."""


class DLQEmptyError(Exception):
    """Raised when popping from an empty dead letter queue."""


class DeadLetterQueue(Generic[E]):
    """FIFO queue holding at most ``size`` entries."""

    def __init__(self, size: int) -> None:
        self.size = size
        self._entries: deque[E] = deque()

    def add(self, entry: E) -> None:
        """Append an entry unless the queue is full."""
        if len(self._entries) >= self.size:
            raise DLQFullError(
                f"the dead letter queue is full with {self.size} elements"
            )
        self._entries.append(entry)

    def pop(self) -> E:
        """Remove and return the oldest entry."""
        if not self._entries:
            raise DLQEmptyError("the dead letter queue is empty")
        return self._entries.popleft()

    def pop_all(self) -> list[E]:
        """Remove and return every entry, oldest first."""
        entries = list(self._entries)
        self._entries.clear()
        return entries

    def empty(self) -> bool:
        """Whether the queue holds no entries."""
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)


def new_transit_dlq(size: int) -> DeadLetterQueue[TransitData]:
    """Create a dead letter queue for transit data."""
    return DeadLetterQueue(size)