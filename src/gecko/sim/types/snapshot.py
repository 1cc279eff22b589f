from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    tick: int
    metrics: TickMetrics | None
    velocity: Tuple[float, float]
    forces: List[Tuple[float, float]]
    segments: List[Dict[str, Any]]
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotMetadata:
    world_width: float
    world_height: float
    frame_rate: int
    segment_separation: float
    seed: int
    config_version: str
