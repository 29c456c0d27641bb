"""Simulation primitives for ElevatorSim."""

from .building import Building
from .config import (
    ELEVATOR_PROFILES,
    ElevatorProfile,
    build_elevator,
    building_from_config,
    configure_building,
    default_building,
)
from .elevator import Elevator, ElevatorObserver
from .enums import Direction, ElevatorState, ElevatorType
from .floor import FloorQueue
from .metrics import WaitMetrics, WaitTracker
from .passenger import Passenger, Request

__all__ = [
    "Building",
    "Direction",
    "Elevator",
    "ElevatorObserver",
    "ElevatorProfile",
    "ElevatorState",
    "ElevatorType",
    "ELEVATOR_PROFILES",
    "FloorQueue",
    "Passenger",
    "Request",
    "WaitMetrics",
    "WaitTracker",
    "build_elevator",
    "building_from_config",
    "configure_building",
    "default_building",
]
