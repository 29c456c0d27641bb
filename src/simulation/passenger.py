from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Direction


@dataclass(frozen=True)
class Request:
    """A hall call: ``count`` people at ``floor`` wanting to go ``direction``."""

    floor: int
    direction: Direction
    count: int = 1

    def __post_init__(self) -> None:
        direction = Direction(self.direction)
        object.__setattr__(self, "direction", direction)
        if direction is Direction.IDLE:
            raise ValueError(f"Direction must be up or down, got {self.direction!r}")
        if self.count <= 0:
            raise ValueError(f"Passenger count must be positive, got {self.count}")

    def __str__(self) -> str:
        return f"Req(F:{self.floor}, Dir:{self.direction.name.title()}, P:{self.count})"


@dataclass
class Passenger:
    """Represents a rider moving between floors."""

    passenger_id: int
    origin: int
    destination: int
    arrival_time: int = 0
    board_time: Optional[int] = None
    alight_time: Optional[int] = None

    @property
    def direction(self) -> Direction:
        if self.destination > self.origin:
            return Direction.UP
        if self.destination < self.origin:
            return Direction.DOWN
        return Direction.IDLE

    def record_boarding(self, time_step: int) -> None:
        self.board_time = time_step

    def record_alighting(self, time_step: int) -> None:
        self.alight_time = time_step

    @property
    def wait_time(self) -> Optional[int]:
        if self.board_time is None:
            return None
        return self.board_time - self.arrival_time

    @property
    def ride_time(self) -> Optional[int]:
        if self.board_time is None or self.alight_time is None:
            return None
        return self.alight_time - self.board_time
