"""First-in, first-out queue of pending work items."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Optional


class TaskQueue:
    """FIFO queue that hands leftover items to a cleanup callback when destroyed."""

    def __init__(self, clear: Optional[Callable[[Any], None]] = None) -> None:
        self._clear = clear
        self._items: deque[Any] = deque()

    def enqueue(self, data: Any) -> int:
        """Append ``data`` and return the new length of the queue."""
        self._items.append(data)
        return len(self._items)

    def dequeue(self) -> Any:
        """Remove and return the oldest item, or ``None`` when the queue is empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def destroy(self) -> None:
        """Empty the queue, passing every remaining item to the cleanup callback."""
        while self._items:
            data = self._items.popleft()
            if self._clear is not None:
                self._clear(data)

    def __len__(self) -> int:
        return len(self._items)