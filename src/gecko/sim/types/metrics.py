from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    head_x: float
    head_y: float
    speed: float
    heading: float
    stepping_legs: int
    steps_started: int
    ik_failures: int
    ik_iterations: int
    tick_duration_ms: float = 0.0
