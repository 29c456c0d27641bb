from __future__ import annotations

from enum import Enum


class Direction(str, Enum):
    """Travel direction of an elevator or a hall call."""

    DOWN = "down"
    IDLE = "idle"
    UP = "up"

    @property
    def opposite(self) -> "Direction":
        if self is Direction.UP:
            return Direction.DOWN
        if self is Direction.DOWN:
            return Direction.UP
        return Direction.IDLE


class ElevatorState(str, Enum):
    """Door phase; cycles closed -> opening -> open -> closing -> closed."""

    DOORS_CLOSED = "doors_closed"
    DOORS_OPENING = "doors_opening"
    DOORS_OPEN = "doors_open"
    DOORS_CLOSING = "doors_closing"


class ElevatorType(str, Enum):
    PASSENGER = "passenger"
    HIGH_SPEED = "high_speed"
    FREIGHT = "freight"
    GLASS = "glass"
