from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List

from .enums import Direction
from .passenger import Passenger


@dataclass
class FloorQueue:
    """Represents a floor with directional FIFO queues."""

    number: int
    up: Deque[Passenger] = field(default_factory=deque)
    down: Deque[Passenger] = field(default_factory=deque)

    def _queue(self, direction: Direction) -> Deque[Passenger]:
        if direction is Direction.UP:
            return self.up
        if direction is Direction.DOWN:
            return self.down
        raise ValueError("Floor queues only exist for up and down")

    def count(self, direction: Direction) -> int:
        if direction is Direction.IDLE:
            return 0
        return len(self._queue(direction))

    def enqueue(self, direction: Direction, passenger: Passenger) -> None:
        self._queue(direction).append(passenger)

    def dequeue(self, direction: Direction, limit: int) -> List[Passenger]:
        queue = self._queue(direction)
        taken: List[Passenger] = []
        while queue and len(taken) < limit:
            taken.append(queue.popleft())
        return taken

    def requeue_front(self, direction: Direction, passengers: Iterable[Passenger]) -> None:
        """Put passengers back at the head of the queue, keeping their order."""
        self._queue(direction).extendleft(reversed(list(passengers)))

    def has_waiting(self) -> bool:
        return bool(self.up or self.down)

    def __len__(self) -> int:
        return len(self.up) + len(self.down)
