"""CLI for running offline ElevatorSim scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from simulation.scenario import build_scenario_building, run_scenario


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument("--events", action="store_true", help="Print the building event feed after the run")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = json.loads(args.config.read_text())
    building = build_scenario_building(config)
    snapshots = run_scenario(building, config)

    final_metrics = building.get_wait_metrics()._asdict()
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": config.get("duration", 300),
        "dispatch": config.get("dispatch", {}).get("name", "nearest_available"),
        "final_metrics": final_metrics,
        "passengers": building.passenger_totals(),
        "metrics_over_time": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Dispatch: {results['dispatch']}")
    print(f"Duration: {results['duration']} ticks")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    print("Passengers:")
    for key, value in results["passengers"].items():
        print(f"  {key}: {value}")
    if args.events:
        for event in building.drain_events():
            print(event)
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
