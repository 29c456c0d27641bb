from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from simulation.enums import Direction

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation.building import Building
    from simulation.elevator import Elevator
    from simulation.passenger import Request


class NearestAvailableDispatch:
    """Greedy scorer favouring close, lightly loaded cars already heading the right way."""

    def __init__(self, distance_weight: int = 5, idle_penalty: int = 2, reversal_penalty: int = 10) -> None:
        self.distance_weight = distance_weight
        self.idle_penalty = idle_penalty
        self.reversal_penalty = reversal_penalty

    def choose_elevator(self, building: "Building", request: "Request") -> Optional["Elevator"]:
        best: Optional["Elevator"] = None
        best_score: Optional[int] = None
        for elevator in building.elevators:
            if building.is_out_of_service(elevator.elevator_id):
                continue
            score = self.score(elevator, request)
            if best_score is None or score < best_score:
                best, best_score = elevator, score
        return best

    def score(self, elevator: "Elevator", request: "Request") -> int:
        distance = abs(elevator.current_floor - request.floor)
        return distance * self.distance_weight + self._direction_penalty(elevator, request) + elevator.passenger_count

    def _direction_penalty(self, elevator: "Elevator", request: "Request") -> int:
        if elevator.direction is Direction.IDLE:
            return self.idle_penalty
        if (
            elevator.direction is Direction.UP
            and request.direction is Direction.UP
            and elevator.current_floor <= request.floor
        ) or (
            elevator.direction is Direction.DOWN
            and request.direction is Direction.DOWN
            and elevator.current_floor >= request.floor
        ):
            return 0
        return self.reversal_penalty
