from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from dataclasses import asdict
from pathlib import Path
from typing import Callable, Optional

from pygame.math import Vector2

from ..sim.core.config import SimulationConfig
from ..sim.core.rng import DeterministicRng
from ..sim.core.world import World

logger = logging.getLogger(__name__)

TargetPath = Callable[[World, int], Vector2]

_HEADER = [
    "tick",
    "head_x",
    "head_y",
    "target_x",
    "target_y",
    "speed",
    "heading",
    "stepping_legs",
    "steps_started",
    "ik_failures",
    "ik_iterations",
    "tick_ms",
]

TARGET_PATHS = ("fixed", "circle", "waypoints")


def _fixed_path(config: SimulationConfig) -> TargetPath:
    target = Vector2(config.world_width * 0.85, config.world_height / 2.0)
    return lambda world, tick: Vector2(target)


def _circle_path(config: SimulationConfig, period: int = 600) -> TargetPath:
    center = Vector2(config.world_center)
    radius = min(config.world_width, config.world_height) * 0.35

    def target(world: World, tick: int) -> Vector2:
        angle = 2.0 * math.pi * tick / period
        return center + Vector2(math.cos(angle), math.sin(angle)) * radius

    return target


def _waypoint_path(config: SimulationConfig, margin: float = 100.0) -> TargetPath:
    """Seeded waypoints; the sequence restarts from the seed when the world is reset."""
    rng = DeterministicRng(config.seed)
    state = {"target": rng.next_point(config.world_width, config.world_height, margin), "tick": 0}
    arrive = config.creature.reach_radius * 4.0

    def target(world: World, tick: int) -> Vector2:
        if world.tick < state["tick"]:
            rng.reset()
            state["target"] = rng.next_point(config.world_width, config.world_height, margin)
        state["tick"] = world.tick
        if world.creature.head.distance_to(state["target"]) < arrive:
            state["target"] = rng.next_point(config.world_width, config.world_height, margin)
        return Vector2(state["target"])

    return target


def make_target_path(kind: str, config: SimulationConfig) -> TargetPath:
    mode = kind.lower().strip()
    if mode == "fixed":
        return _fixed_path(config)
    if mode == "circle":
        return _circle_path(config)
    if mode == "waypoints":
        return _waypoint_path(config)
    raise ValueError(f"Unknown target path: {kind}")


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0}
    return {"min": float(min(values)), "max": float(max(values)), "avg": float(sum(values) / len(values))}


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    target_path: str = "circle",
    summary_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> World:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    path = make_target_path(target_path, config)
    world = World(config)
    logger.info("running %d headless ticks (target path %s, seed %d)", steps, target_path, config.seed)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    speeds: list[float] = []
    total_steps = 0
    total_failures = 0
    total_iterations = 0
    try:
        for tick in range(steps):
            target = path(world, tick)
            metrics = world.update(target)
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            speeds.append(metrics.speed)
            total_steps += metrics.steps_started
            total_failures += metrics.ik_failures
            total_iterations += metrics.ik_iterations
            if writer:
                writer.writerow(
                    [
                        metrics.tick,
                        f"{metrics.head_x:.4f}",
                        f"{metrics.head_y:.4f}",
                        f"{target.x:.4f}",
                        f"{target.y:.4f}",
                        f"{metrics.speed:.4f}",
                        f"{metrics.heading:.4f}",
                        metrics.stepping_legs,
                        metrics.steps_started,
                        metrics.ik_failures,
                        metrics.ik_iterations,
                        f"{tick_ms:.3f}",
                    ]
                )
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        snapshot = world.snapshot()
        summary = {
            "steps": steps,
            "seed": config.seed,
            "target_path": target_path,
            "deterministic_log": deterministic_log,
            "speed": _summary_stats(speeds),
            "steps_started": total_steps,
            "ik_failures": total_failures,
            "ik_iterations": total_iterations,
            "final": {
                "velocity": snapshot.velocity,
                "forces": snapshot.forces,
                "segments": snapshot.segments,
                "metadata": asdict(snapshot.metadata),
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    logger.info("finished %d ticks: %d steps started, %d ik failures", steps, total_steps, total_failures)
    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless gecko locomotion run")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-tick metrics")
    parser.add_argument(
        "--target-path",
        choices=TARGET_PATHS,
        default="circle",
        help="Scripted target the creature chases.",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats and the final pose.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical runs match).",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG shows step switches).")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        target_path=args.target_path,
        summary_path=args.summary,
        config_path=args.config,
    )


if __name__ == "__main__":
    main()
