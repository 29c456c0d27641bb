"""Offline scenario runs: scripted calls, car buttons and outages over a fixed duration."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping

from dispatch import get_strategy

from .building import Building
from .config import building_from_config
from .enums import Direction

logger = logging.getLogger(__name__)


def build_scenario_building(config: Mapping) -> Building:
    dispatch_cfg = config.get("dispatch", {})
    strategy = get_strategy(dispatch_cfg.get("name", "nearest_available"), **dispatch_cfg.get("options", {}))
    return building_from_config(config.get("building", {}), strategy)


def _apply_calls(building: Building, calls: Iterable[Mapping], tick: int) -> None:
    for call in calls:
        if call.get("tick", 0) != tick:
            continue
        try:
            building.submit_call(call["floor"], Direction(call["direction"]), call.get("count", 1))
        except ValueError as exc:
            logger.warning("Skipping call %s: %s", call, exc)


def _apply_presses(building: Building, presses: Iterable[Mapping], tick: int) -> None:
    for press in presses:
        if press.get("tick", 0) != tick:
            continue
        elevator = building.get_elevator(press["elevator_id"])
        if elevator is None:
            logger.warning("Skipping press for unknown elevator %s", press["elevator_id"])
            continue
        elevator.press_button(press["floor"])


def _apply_outages(building: Building, outages: Iterable[Mapping], tick: int) -> None:
    for outage in outages:
        elevator_id = outage.get("elevator_id")
        if elevator_id is None:
            continue
        if tick == outage.get("start_tick"):
            building.set_out_of_service(elevator_id, True)
        if tick == outage.get("end_tick"):
            building.set_out_of_service(elevator_id, False)


def run_scenario(building: Building, config: Mapping) -> List[Dict]:
    """Tick ``building`` for ``duration`` ticks, returning periodic metric snapshots."""
    duration = config.get("duration", 300)
    interval = max(1, config.get("metrics_interval", 10))
    calls = config.get("calls", [])
    presses = config.get("presses", [])
    outages = config.get("outages", [])
    snapshots: List[Dict] = []

    for _ in range(duration):
        tick = building.current_tick
        _apply_outages(building, outages, tick)
        _apply_calls(building, calls, tick)
        _apply_presses(building, presses, tick)
        building.tick_all()
        if building.current_tick % interval == 0:
            snapshot = building.get_wait_metrics()._asdict()
            snapshot["tick"] = building.current_tick
            snapshot.update(building.passenger_totals())
            snapshots.append(snapshot)
    return snapshots
