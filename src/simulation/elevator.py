from __future__ import annotations

import logging
from bisect import insort
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Tuple

from .enums import Direction, ElevatorState, ElevatorType
from .passenger import Passenger, Request

logger = logging.getLogger(__name__)


class ElevatorObserver(Protocol):
    """Notifications an elevator sends to whoever registered it."""

    def on_arrived_at_floor(self, elevator: "Elevator", floor: int) -> None:
        ...

    def on_doors_opened(self, elevator: "Elevator", floor: int) -> None:
        ...

    def on_doors_closed(self, elevator: "Elevator", floor: int) -> None:
        ...


@dataclass(eq=False)
class Elevator:
    """A tick-driven elevator car with a door cycle and sweeping target sets.

    Targets above the car live in an ascending list and targets below it in
    a descending list, so the head of each list is always the next stop in
    that direction. Timing values are in ticks and never drop below one.
    """

    elevator_id: str
    capacity: int = 10
    speed_ticks_per_floor: int = 5
    door_open_ticks: int = 2
    door_close_ticks: int = 2
    door_dwell_ticks: Optional[int] = None
    current_floor: int = 0
    floors: int = 12
    elevator_type: ElevatorType = ElevatorType.PASSENGER
    observer: Optional[ElevatorObserver] = field(default=None, repr=False, compare=False)
    direction: Direction = field(default=Direction.IDLE, init=False)
    state: ElevatorState = field(default=ElevatorState.DOORS_CLOSED, init=False)
    _up_targets: List[int] = field(default_factory=list, init=False, repr=False)
    _down_targets: List[int] = field(default_factory=list, init=False, repr=False)
    _passengers: List[Passenger] = field(default_factory=list, init=False, repr=False)
    _move_budget: int = field(default=0, init=False, repr=False)
    _door_budget: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise ValueError(f"Elevator capacity cannot be negative, got {self.capacity}")
        self.elevator_type = ElevatorType(self.elevator_type)
        self.speed_ticks_per_floor = max(1, self.speed_ticks_per_floor)
        self.door_open_ticks = max(1, self.door_open_ticks)
        self.door_close_ticks = max(1, self.door_close_ticks)
        if self.door_dwell_ticks is None:
            self.door_dwell_ticks = self.door_open_ticks
        self.door_dwell_ticks = max(1, self.door_dwell_ticks)
        self._move_budget = self.speed_ticks_per_floor

    # -- read surface -------------------------------------------------

    @property
    def targets(self) -> Tuple[int, ...]:
        return tuple(self._up_targets) + tuple(self._down_targets)

    @property
    def has_targets(self) -> bool:
        return bool(self._up_targets or self._down_targets)

    @property
    def passengers(self) -> Tuple[Passenger, ...]:
        return tuple(self._passengers)

    @property
    def passenger_count(self) -> int:
        return len(self._passengers)

    @property
    def available_capacity(self) -> int:
        return max(0, self.capacity - len(self._passengers))

    @property
    def is_moving(self) -> bool:
        return (
            self.state is ElevatorState.DOORS_CLOSED
            and self.direction is not Direction.IDLE
            and self.has_targets
        )

    def is_target(self, floor: int) -> bool:
        return floor in self._up_targets or floor in self._down_targets

    def in_range(self, floor: int) -> bool:
        return 0 <= floor < self.floors

    # -- commands -----------------------------------------------------

    def can_accept(self, request: Request) -> bool:
        if not self.in_range(request.floor):
            return False
        alighting = sum(1 for p in self._passengers if p.destination == request.floor)
        return request.count <= self.available_capacity + alighting

    def assign(self, request: Request) -> bool:
        """Commit to stopping at the request's floor."""
        return self.add_target(request.floor)

    def press_button(self, floor: int) -> bool:
        return self.add_target(floor)

    def add_target(self, floor: int) -> bool:
        if not self.in_range(floor):
            return False

        if floor == self.current_floor:
            if self.state is not ElevatorState.DOORS_CLOSED:
                return False
            self._begin_door_open()
            return True

        if floor > self.current_floor:
            if floor in self._up_targets:
                return False
            insort(self._up_targets, floor)
        else:
            if floor in self._down_targets:
                return False
            insort(self._down_targets, floor, key=lambda f: -f)

        if self.direction is Direction.IDLE and self.state is ElevatorState.DOORS_CLOSED:
            self.direction = self._choose_initial_direction()
        return True

    def board_passengers(self, boarding: Iterable[Passenger]) -> int:
        boarded = 0
        for passenger in boarding:
            if len(self._passengers) >= self.capacity:
                break
            self._passengers.append(passenger)
            self.add_target(passenger.destination)
            boarded += 1
        return boarded

    def unload_at_current_floor(self) -> int:
        remaining: List[Passenger] = []
        unloaded = 0
        for passenger in self._passengers:
            if passenger.destination == self.current_floor:
                unloaded += 1
            else:
                remaining.append(passenger)
        self._passengers = remaining
        return unloaded

    # -- simulation step ----------------------------------------------

    def tick(self) -> None:
        if self.state is ElevatorState.DOORS_CLOSED:
            self._tick_doors_closed()
        elif self.state is ElevatorState.DOORS_OPENING:
            self._door_budget -= 1
            if self._door_budget <= 0:
                self.state = ElevatorState.DOORS_OPEN
                self._door_budget = self.door_dwell_ticks
                logger.debug("[%s] Doors open at floor %d", self.elevator_id, self.current_floor)
                if self.observer is not None:
                    self.observer.on_doors_opened(self, self.current_floor)
        elif self.state is ElevatorState.DOORS_OPEN:
            self._door_budget -= 1
            if self._door_budget <= 0:
                self.state = ElevatorState.DOORS_CLOSING
                self._door_budget = self.door_close_ticks
        elif self.state is ElevatorState.DOORS_CLOSING:
            self._door_budget -= 1
            if self._door_budget <= 0:
                self.state = ElevatorState.DOORS_CLOSED
                logger.debug("[%s] Doors closed at floor %d", self.elevator_id, self.current_floor)
                if self.observer is not None:
                    self.observer.on_doors_closed(self, self.current_floor)
                self.direction = self._choose_next_direction()

    def _tick_doors_closed(self) -> None:
        if not self.has_targets:
            self.direction = Direction.IDLE
            return

        if self.is_target(self.current_floor):
            self._begin_door_open()
            return

        self._orient()
        self._move_budget -= 1
        if self._move_budget > 0:
            return

        self._move_budget = self.speed_ticks_per_floor
        self.current_floor += 1 if self.direction is Direction.UP else -1
        logger.debug("[%s] Moved %s to floor %d", self.elevator_id, self.direction.value, self.current_floor)
        if self.observer is not None:
            self.observer.on_arrived_at_floor(self, self.current_floor)

        if self.is_target(self.current_floor):
            self._begin_door_open()

    def _orient(self) -> None:
        # Up targets always sit above the car and down targets below it.
        if self.direction is Direction.UP and not self._up_targets:
            self.direction = Direction.DOWN
        elif self.direction is Direction.DOWN and not self._down_targets:
            self.direction = Direction.UP
        elif self.direction is Direction.IDLE:
            self.direction = self._choose_initial_direction()

    def _begin_door_open(self) -> None:
        self._discard_target(self.current_floor)
        self.state = ElevatorState.DOORS_OPENING
        self._door_budget = self.door_open_ticks
        self._move_budget = self.speed_ticks_per_floor

    def _discard_target(self, floor: int) -> None:
        if floor in self._up_targets:
            self._up_targets.remove(floor)
        if floor in self._down_targets:
            self._down_targets.remove(floor)

    def _choose_initial_direction(self) -> Direction:
        if not self._up_targets and not self._down_targets:
            return Direction.IDLE
        if not self._up_targets:
            return Direction.DOWN
        if not self._down_targets:
            return Direction.UP
        up_distance = self._up_targets[0] - self.current_floor
        down_distance = self.current_floor - self._down_targets[0]
        return Direction.UP if up_distance <= down_distance else Direction.DOWN

    def _choose_next_direction(self) -> Direction:
        if not self.has_targets:
            return Direction.IDLE
        if self.direction is Direction.UP and any(t >= self.current_floor for t in self._up_targets):
            return Direction.UP
        if self.direction is Direction.DOWN and any(t <= self.current_floor for t in self._down_targets):
            return Direction.DOWN
        return self._choose_initial_direction()
