from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Deque, Dict, List, Optional, Set, Tuple

from .elevator import Elevator
from .enums import Direction, ElevatorState
from .floor import FloorQueue
from .metrics import WaitMetrics, WaitTracker
from .passenger import Passenger, Request

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from dispatch import DispatchStrategy

logger = logging.getLogger(__name__)

ReservationKey = Tuple[int, Direction]
DIRECTIONS = (Direction.UP, Direction.DOWN)


def _key(elevator_id: str) -> str:
    return elevator_id.casefold()


@dataclass(eq=False)
class Building:
    """Owns floors and elevators, boards passengers and dispatches hall calls.

    Calls are queued per floor and direction. Every tick the building advances
    its elevators in registration order, serves floors whose doors just opened
    and then runs a dispatch pass over every queue that still has people in
    it. A reservation keyed by ``(floor, direction)`` keeps a second pass from
    sending another car to a call that is already being answered.
    """

    num_floors: int
    dispatch_strategy: "DispatchStrategy"
    max_events: int = 200
    current_tick: int = field(default=0, init=False)
    floor_queues: List[FloorQueue] = field(init=False)
    _elevators: List[Elevator] = field(default_factory=list, init=False)
    _out_of_service: Set[str] = field(default_factory=set, init=False)
    _reservations: Dict[ReservationKey, str] = field(default_factory=dict, init=False)
    _events: Deque[str] = field(init=False)
    _wait: WaitTracker = field(default_factory=WaitTracker, init=False)
    _wait_started: Dict[int, int] = field(default_factory=dict, init=False)
    _metrics_epoch: int = field(default=0, init=False)
    _served_floors: Dict[int, int] = field(default_factory=dict, init=False)
    _next_passenger_id: int = field(default=0, init=False)
    _delivered: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.num_floors < 2:
            raise ValueError(f"Building must have at least 2 floors, got {self.num_floors}")
        if self.dispatch_strategy is None:
            raise ValueError("A dispatch strategy is required")
        self.floor_queues = [FloorQueue(i) for i in range(self.num_floors)]
        self._events = deque(maxlen=max(1, self.max_events))

    # -- registration -------------------------------------------------

    @property
    def elevators(self) -> Tuple[Elevator, ...]:
        return tuple(self._elevators)

    def get_elevator(self, elevator_id: str) -> Optional[Elevator]:
        wanted = _key(elevator_id)
        for elevator in self._elevators:
            if _key(elevator.elevator_id) == wanted:
                return elevator
        return None

    def add_elevator(self, elevator: Elevator) -> bool:
        if self.get_elevator(elevator.elevator_id) is not None:
            logger.debug("Rejected duplicate elevator id %s", elevator.elevator_id)
            return False
        self._validate_floor(elevator.current_floor)
        elevator.floors = self.num_floors
        elevator.observer = self
        self._elevators.append(elevator)
        return True

    # -- calls --------------------------------------------------------

    def submit_call(self, floor: int, direction: Direction, count: int = 1) -> List[Passenger]:
        """Queue ``count`` passengers at ``floor`` heading ``direction``.

        Nothing is dispatched here; the next tick's dispatch pass picks the
        call up from the floor queue.
        """
        request = Request(floor, direction, count)
        self._validate_floor(request.floor)
        destination = self._destination_for(request)

        queue = self.floor_queues[request.floor]
        passengers: List[Passenger] = []
        for _ in range(request.count):
            passenger = Passenger(
                passenger_id=self._next_passenger_id,
                origin=request.floor,
                destination=destination,
                arrival_time=self.current_tick,
            )
            self._next_passenger_id += 1
            self._wait_started[passenger.passenger_id] = self.current_tick
            queue.enqueue(request.direction, passenger)
            passengers.append(passenger)

        self._log_event(f"Call {request} -> F:{destination}")
        return passengers

    def _destination_for(self, request: Request) -> int:
        # Halfway to the end of the shaft in the call's direction, at least one floor.
        if request.direction is Direction.UP:
            top = self.num_floors - 1
            if request.floor >= top:
                raise ValueError(f"No floor above {request.floor} to travel up to")
            return request.floor + (top - request.floor + 1) // 2
        if request.floor <= 0:
            raise ValueError(f"No floor below {request.floor} to travel down to")
        return request.floor - (request.floor + 1) // 2

    def _validate_floor(self, floor: int) -> None:
        if not 0 <= floor < self.num_floors:
            raise ValueError(f"Floor must be in [0..{self.num_floors - 1}], got {floor}")

    # -- simulation step ----------------------------------------------

    def tick_all(self) -> None:
        for elevator in self._elevators:
            elevator.tick()
        self._dispatch_pending()
        self.current_tick += 1

    def on_arrived_at_floor(self, elevator: Elevator, floor: int) -> None:
        """Passing a floor needs no building action; stops are driven by targets."""

    def on_doors_opened(self, elevator: Elevator, floor: int) -> None:
        # Riders always get off; only boarding is limited to one car per floor per tick.
        unloaded = self._unload(elevator, floor)
        if self._served_floors.get(floor) == self.current_tick:
            self._log_event(
                f"{elevator.elevator_id} doors open F:{floor}, unloaded {unloaded}, already served this tick"
            )
            return
        self._served_floors[floor] = self.current_tick
        self._serve_floor(elevator, floor, unloaded)

    def on_doors_closed(self, elevator: Elevator, floor: int) -> None:
        logger.debug("[%s] Leaving floor %d with %d aboard", elevator.elevator_id, floor, elevator.passenger_count)

    def _unload(self, elevator: Elevator, floor: int) -> int:
        alighting = [p for p in elevator.passengers if p.destination == floor]
        unloaded = elevator.unload_at_current_floor()
        for passenger in alighting:
            passenger.record_alighting(self.current_tick)
        self._delivered += unloaded
        return unloaded

    def _serve_floor(self, elevator: Elevator, floor: int, unloaded: int) -> None:
        queue = self.floor_queues[floor]
        direction = elevator.direction
        if direction is Direction.IDLE:
            direction = Direction.UP if queue.count(Direction.UP) >= queue.count(Direction.DOWN) else Direction.DOWN
        if queue.count(direction) == 0:
            direction = direction.opposite

        boarded = self._board(elevator, queue, direction)
        if boarded == 0:
            boarded = self._board(elevator, queue, direction.opposite)

        self._release_reservations_at(elevator, floor)
        self._log_event(
            f"Stop F:{floor} {elevator.elevator_id} | unloaded {unloaded} boarded {boarded} "
            f"| waiting Up:{queue.count(Direction.UP)} Down:{queue.count(Direction.DOWN)}"
        )

    def _board(self, elevator: Elevator, queue: FloorQueue, direction: Direction) -> int:
        limit = elevator.available_capacity
        if limit <= 0 or queue.count(direction) == 0:
            return 0

        candidates = queue.dequeue(direction, limit)
        boarded = elevator.board_passengers(candidates)
        if boarded < len(candidates):
            queue.requeue_front(direction, candidates[boarded:])

        for passenger in candidates[:boarded]:
            passenger.record_boarding(self.current_tick)
            started = self._wait_started.pop(passenger.passenger_id, self._metrics_epoch)
            self._wait.record(self.current_tick - started)
        return boarded

    # -- dispatch -----------------------------------------------------

    def _dispatch_pending(self) -> None:
        for queue in self.floor_queues:
            for direction in DIRECTIONS:
                waiting = queue.count(direction)
                if not waiting or self._reservation_active((queue.number, direction)):
                    continue

                elevator = self.dispatch_strategy.choose_elevator(self, Request(queue.number, direction, waiting))
                if elevator is None:
                    continue

                headcount = min(waiting, elevator.available_capacity)
                if headcount == 0:
                    if elevator.current_floor != queue.number:
                        continue
                    # A full car already here may free seats at its next stop here.
                    headcount = 1

                call = Request(queue.number, direction, headcount)
                if not elevator.can_accept(call):
                    continue
                elevator.assign(call)
                if self._is_committed(elevator, queue.number):
                    self._reservations[(queue.number, direction)] = _key(elevator.elevator_id)
                    logger.debug("Assigned %s to %s", elevator.elevator_id, call)
                    self._log_event(f"Assign {elevator.elevator_id} -> {call}")

    @staticmethod
    def _is_committed(elevator: Elevator, floor: int) -> bool:
        if elevator.is_target(floor):
            return True
        return elevator.current_floor == floor and elevator.state is not ElevatorState.DOORS_CLOSED

    def _reservation_active(self, key: ReservationKey) -> bool:
        holder_id = self._reservations.get(key)
        if holder_id is None:
            return False
        holder = self.get_elevator(holder_id)
        if holder is not None and holder_id not in self._out_of_service and self._is_committed(holder, key[0]):
            return True
        del self._reservations[key]
        return False

    def _release_reservations_at(self, elevator: Elevator, floor: int) -> None:
        holder_id = _key(elevator.elevator_id)
        for direction in DIRECTIONS:
            if self._reservations.get((floor, direction)) == holder_id:
                del self._reservations[(floor, direction)]

    def _drop_stale_reservations(self) -> None:
        for key in list(self._reservations):
            self._reservation_active(key)

    def reservations(self) -> Dict[ReservationKey, str]:
        self._drop_stale_reservations()
        return {key: self.get_elevator(holder).elevator_id for key, holder in self._reservations.items()}

    # -- service toggle -----------------------------------------------

    def set_out_of_service(self, elevator_id: str, out_of_service: bool) -> bool:
        elevator = self.get_elevator(elevator_id)
        if elevator is None:
            return False
        key = _key(elevator_id)
        if out_of_service == (key in self._out_of_service):
            return True

        if out_of_service:
            self._out_of_service.add(key)
            for reservation, holder in list(self._reservations.items()):
                if holder == key:
                    del self._reservations[reservation]
        else:
            self._out_of_service.discard(key)
            self._drop_stale_reservations()

        logger.info("Elevator %s out of service: %s", elevator.elevator_id, out_of_service)
        self._log_event(f"OOS {elevator.elevator_id} {'on' if out_of_service else 'off'}")
        return True

    def is_out_of_service(self, elevator_id: str) -> bool:
        return _key(elevator_id) in self._out_of_service

    # -- queries ------------------------------------------------------

    def get_waiting_count(self, floor: int, direction: Direction) -> int:
        self._validate_floor(floor)
        return self.floor_queues[floor].count(Direction(direction))

    def waiting_summary(self) -> Dict[int, Dict[str, int]]:
        return {
            queue.number: {"up": queue.count(Direction.UP), "down": queue.count(Direction.DOWN)}
            for queue in self.floor_queues
            if queue.has_waiting()
        }

    def passenger_totals(self) -> Dict[str, int]:
        return {
            "created": self._next_passenger_id,
            "waiting": sum(len(queue) for queue in self.floor_queues),
            "riding": sum(elevator.passenger_count for elevator in self._elevators),
            "delivered": self._delivered,
        }

    def _log_event(self, message: str) -> None:
        event = f"[T{self.current_tick}] {message}"
        logger.debug("%s", event)
        self._events.append(event)

    def get_recent_events(self, count: int = 20) -> List[str]:
        if count <= 0:
            return []
        return list(self._events)[-count:]

    def drain_events(self) -> List[str]:
        events = list(self._events)
        self._events.clear()
        return events

    def get_wait_metrics(self) -> WaitMetrics:
        return self._wait.snapshot()

    def reset_wait_metrics(self) -> None:
        self._wait.reset()
        self._wait_started.clear()
        self._metrics_epoch = self.current_tick
        self._reservations.clear()
        logger.info("Wait metrics reset at tick %d", self.current_tick)

    def snapshot(self) -> dict:
        metrics = self.get_wait_metrics()
        return {
            "tick": self.current_tick,
            "floors": self.num_floors,
            "waiting": self.waiting_summary(),
            "elevators": [
                {
                    "id": elevator.elevator_id,
                    "type": elevator.elevator_type.value,
                    "floor": elevator.current_floor,
                    "direction": elevator.direction.value,
                    "state": elevator.state.value,
                    "moving": elevator.is_moving,
                    "passenger_count": elevator.passenger_count,
                    "capacity": elevator.capacity,
                    "targets": list(elevator.targets),
                    "out_of_service": self.is_out_of_service(elevator.elevator_id),
                }
                for elevator in self._elevators
            ],
            "metrics": metrics._asdict(),
        }
