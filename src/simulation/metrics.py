from __future__ import annotations

from typing import NamedTuple


class WaitMetrics(NamedTuple):
    served: int
    average_wait: float
    max_wait: int


class WaitTracker:
    """Accumulates hall wait times of boarded passengers."""

    def __init__(self) -> None:
        self.served: int = 0
        self.total_wait: int = 0
        self.max_wait: int = 0

    def record(self, wait: int) -> None:
        wait = max(0, wait)
        self.served += 1
        self.total_wait += wait
        self.max_wait = max(self.max_wait, wait)

    def _average(self) -> float:
        if not self.served:
            return 0.0
        return self.total_wait / self.served

    def snapshot(self) -> WaitMetrics:
        return WaitMetrics(served=self.served, average_wait=self._average(), max_wait=self.max_wait)

    def reset(self) -> None:
        self.served = 0
        self.total_wait = 0
        self.max_wait = 0
