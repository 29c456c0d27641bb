from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from simulation.building import Building
    from simulation.elevator import Elevator
    from simulation.passenger import Request


class DispatchStrategy(Protocol):
    """Strategy interface for picking the elevator that answers a hall call."""

    def choose_elevator(self, building: "Building", request: "Request") -> Optional["Elevator"]:
        """
        Return the elevator that should serve ``request``, or ``None``.

        Implementations must not mutate the building; they are consulted on
        every dispatch pass and may be asked about the same call repeatedly.
        """
        ...
