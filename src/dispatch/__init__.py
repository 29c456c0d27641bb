"""Dispatch strategies that pick an elevator for a hall call."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Type

from simulation.enums import Direction
from simulation.passenger import Request

from .interface import DispatchStrategy
from .nearest_available import NearestAvailableDispatch

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation.building import Building
    from simulation.elevator import Elevator

__all__ = [
    "DispatchStrategy",
    "NearestAvailableDispatch",
    "dispatch_call",
    "get_strategy",
]


STRATEGY_REGISTRY: Dict[str, Type[DispatchStrategy]] = {
    "nearest_available": NearestAvailableDispatch,
}


def get_strategy(name: str, **kwargs) -> DispatchStrategy:
    cls = STRATEGY_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown dispatch strategy '{name}'. Available: {', '.join(STRATEGY_REGISTRY)}")
    return cls(**kwargs)


def dispatch_call(
    strategy: DispatchStrategy, building: "Building", floor: int, direction: Direction
) -> Optional["Elevator"]:
    """Ask ``strategy`` which elevator it would send to a one-person call."""
    return strategy.choose_elevator(building, Request(floor, direction, count=1))
