from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, Iterable, Mapping

from .building import Building
from .elevator import Elevator
from .enums import ElevatorType

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from dispatch import DispatchStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElevatorProfile:
    """Physical constraints shared by every car of one type."""

    capacity: int = 10
    speed_ticks_per_floor: int = 5
    door_open_ticks: int = 2
    door_close_ticks: int = 2


ELEVATOR_PROFILES: Dict[ElevatorType, ElevatorProfile] = {
    ElevatorType.PASSENGER: ElevatorProfile(),
    ElevatorType.HIGH_SPEED: ElevatorProfile(speed_ticks_per_floor=3),
    ElevatorType.FREIGHT: ElevatorProfile(),
    ElevatorType.GLASS: ElevatorProfile(),
}

DEFAULT_FLOORS = 12


def build_elevator(
    elevator_id: str,
    elevator_type: str = "passenger",
    start_floor: int = 0,
    floors: int = DEFAULT_FLOORS,
    **overrides,
) -> Elevator:
    try:
        kind = ElevatorType(elevator_type)
    except ValueError:
        available = ", ".join(t.value for t in ElevatorType)
        raise ValueError(f"Unknown elevator type '{elevator_type}'. Available: {available}") from None

    settings = asdict(ELEVATOR_PROFILES[kind])
    unknown = set(overrides) - set(settings) - {"door_dwell_ticks"}
    if unknown:
        raise ValueError(f"Unknown elevator settings: {', '.join(sorted(unknown))}")
    settings.update(overrides)
    return Elevator(
        elevator_id=elevator_id,
        current_floor=start_floor,
        floors=floors,
        elevator_type=kind,
        **settings,
    )


def configure_building(
    num_floors: int, strategy: "DispatchStrategy", elevators: Iterable[Elevator]
) -> Building:
    building = Building(num_floors=num_floors, dispatch_strategy=strategy)
    for elevator in elevators:
        if not building.add_elevator(elevator):
            logger.warning("Skipping elevator with duplicate id %s", elevator.elevator_id)
    return building


def default_building(strategy: "DispatchStrategy") -> Building:
    elevators = [
        build_elevator("E1", "passenger", start_floor=0),
        build_elevator("E2", "high_speed", start_floor=5),
        build_elevator("F1", "freight", start_floor=0),
    ]
    return configure_building(DEFAULT_FLOORS, strategy, elevators)


def building_from_config(config: Mapping, strategy: "DispatchStrategy") -> Building:
    """Build from the ``building`` section of a scenario file."""
    num_floors = config.get("num_floors", DEFAULT_FLOORS)
    elevators = []
    for entry in config.get("elevators", []):
        entry = dict(entry)
        elevator_id = entry.pop("id")
        elevator_type = entry.pop("type", "passenger")
        start_floor = entry.pop("start_floor", 0)
        elevators.append(build_elevator(elevator_id, elevator_type, start_floor, num_floors, **entry))
    return configure_building(num_floors, strategy, elevators)
