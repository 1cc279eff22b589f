from __future__ import annotations

import logging
from time import perf_counter
from typing import Tuple

from pygame.math import Vector2

from .config import SimulationConfig
from .creature import Creature
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata
from ..utils.math2d import angle_of

logger = logging.getLogger(__name__)

_SPAWN_HEADING = Vector2(1.0, 0.0)


class World:
    def __init__(self, config: SimulationConfig, heading: Vector2 | Tuple[float, float] = _SPAWN_HEADING):
        self._config = config
        self._heading = Vector2(heading)
        self._creature = self._spawn()
        self._tick = 0
        self._metrics: TickMetrics | None = None

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def creature(self) -> Creature:
        return self._creature

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def reset(self) -> None:
        self._creature = self._spawn()
        self._tick = 0
        self._metrics = None

    def update(self, target: Vector2 | Tuple[float, float]) -> TickMetrics:
        start = perf_counter()
        report = self._creature.update(Vector2(target))
        duration_ms = (perf_counter() - start) * 1000.0

        creature = self._creature
        head = creature.head
        velocity = creature.velocity
        stepping = sum(1 for part in creature.legged_segments() for leg in part.legs if leg.stepping)
        self._metrics = TickMetrics(
            tick=self._tick,
            head_x=head.x,
            head_y=head.y,
            speed=velocity.length(),
            heading=angle_of(velocity),
            stepping_legs=stepping,
            steps_started=report.steps_started,
            ik_failures=report.ik_failures,
            ik_iterations=report.ik_iterations,
            tick_duration_ms=duration_ms,
        )
        self._tick += 1
        return self._metrics

    def snapshot(self) -> Snapshot:
        creature = self._creature
        velocity = creature.velocity
        metadata = SnapshotMetadata(
            world_width=self._config.world_width,
            world_height=self._config.world_height,
            frame_rate=self._config.frame_rate,
            segment_separation=creature.config.segment_separation,
            seed=self._config.seed,
            config_version=self._config.config_version,
        )
        return Snapshot(
            tick=self._tick,
            metrics=self._metrics,
            velocity=(velocity.x, velocity.y),
            forces=[(force.x, force.y) for force in creature.forces],
            segments=creature.segment_payload(),
            metadata=metadata,
        )

    def _spawn(self) -> Creature:
        center = Vector2(self._config.world_center)
        logger.info("spawning creature at (%.1f, %.1f)", center.x, center.y)
        return Creature.spawn(self._config.creature, center, self._heading)
