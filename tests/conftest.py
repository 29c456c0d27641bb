"""
Shared pytest fixtures for ElevatorSim tests.
"""

from typing import Callable, List

import pytest

from dispatch import NearestAvailableDispatch
from simulation import Building, Elevator, build_elevator


class DoorRecorder:
    """Observer that remembers where an elevator stopped and what it passed."""

    def __init__(self) -> None:
        self.arrivals: List[int] = []
        self.opened: List[int] = []
        self.closed: List[int] = []

    def on_arrived_at_floor(self, elevator, floor):
        self.arrivals.append(floor)

    def on_doors_opened(self, elevator, floor):
        self.opened.append(floor)

    def on_doors_closed(self, elevator, floor):
        self.closed.append(floor)


@pytest.fixture
def strategy() -> NearestAvailableDispatch:
    return NearestAvailableDispatch()


@pytest.fixture
def make_building(strategy) -> Callable[..., Building]:
    """
    Returns a factory building a 12-floor (by default) building with the
    given elevators registered in order.

    Example usage:
        def test_something(make_building):
            building = make_building(fast_car("E1"))
    """

    def _make(*elevators: Elevator, floors: int = 12) -> Building:
        building = Building(num_floors=floors, dispatch_strategy=strategy)
        for elevator in elevators:
            assert building.add_elevator(elevator)
        return building

    return _make


def fast_car(elevator_id: str, start_floor: int = 0, capacity: int = 10) -> Elevator:
    """One tick per floor and per door phase, which keeps traces short."""
    return build_elevator(
        elevator_id,
        start_floor=start_floor,
        capacity=capacity,
        speed_ticks_per_floor=1,
        door_open_ticks=1,
        door_close_ticks=1,
    )


def run_ticks(building: Building, count: int) -> None:
    for _ in range(count):
        building.tick_all()
