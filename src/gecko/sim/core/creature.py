from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from pygame.math import Vector2

from .config import CreatureConfig
from .segment import LeggedSegment, PlainSegment, Segment
from ..systems import chain, steering
from ..systems.legs import LegReport, init_legs
from ..utils.math2d import safe_normalize

logger = logging.getLogger(__name__)


class Creature:
    """A gecko: a chain of segments steered toward one target per tick."""

    def __init__(self, config: CreatureConfig, segments: List[Segment], velocity: Vector2):
        self._config = config
        self._segments = segments
        self._velocity = Vector2(velocity)
        self._forces: List[Vector2] = []

    @classmethod
    def spawn(cls, config: CreatureConfig, position: Vector2, heading: Vector2) -> "Creature":
        heading = safe_normalize(Vector2(heading))
        if heading.length_squared() == 0.0:
            heading = Vector2(1.0, 0.0)
        legs_by_index = config.legs_by_index()
        segments: List[Segment] = []
        for index in range(config.segment_count):
            part_position = Vector2(position) - heading * (config.segment_separation * index)
            settings = legs_by_index.get(index)
            if settings is None:
                segments.append(PlainSegment(part_position))
                continue
            part = LeggedSegment(part_position, settings)
            init_legs(part, -heading)
            segments.append(part)
        logger.debug("spawned creature with %d segments at (%.1f, %.1f)", len(segments), position[0], position[1])
        return cls(config, segments, heading)

    @property
    def config(self) -> CreatureConfig:
        return self._config

    @property
    def segments(self) -> Sequence[Segment]:
        """Live segments, for the simulation systems and tests.

        Presentation code reads copies through ``World.snapshot()`` instead.
        """
        return tuple(self._segments)

    @property
    def head(self) -> Vector2:
        return Vector2(self._segments[0].position)

    @property
    def velocity(self) -> Vector2:
        return Vector2(self._velocity)

    @property
    def forces(self) -> List[Vector2]:
        return [Vector2(force) for force in self._forces]

    def legged_segments(self) -> List[LeggedSegment]:
        return [part for part in self._segments if isinstance(part, LeggedSegment)]

    def update(self, target: Vector2) -> LegReport:
        target = Vector2(target)
        result = steering.compute_velocity(self._velocity, self._segments[0].position, target, self._config)
        self._velocity = result.velocity
        self._forces = result.forces
        return chain.advance(self._segments, self._velocity, self._config)

    def segment_payload(self) -> List[Dict[str, Any]]:
        payload: List[Dict[str, Any]] = []
        for index, part in enumerate(self._segments):
            entry: Dict[str, Any] = {"index": index, "x": part.position.x, "y": part.position.y, "legs": []}
            match part:
                case LeggedSegment(legs=legs):
                    entry["legs"] = [
                        {
                            "side": leg.side.name,
                            "state": leg.state.value,
                            "stepping": leg.stepping,
                            "foot": (leg.foot_position.x, leg.foot_position.y),
                            "joint": (leg.joint_position.x, leg.joint_position.y),
                            "step_target": (leg.step_target.x, leg.step_target.y),
                        }
                        for leg in legs
                    ]
                case PlainSegment():
                    pass
            payload.append(entry)
        return payload
