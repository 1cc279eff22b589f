from __future__ import annotations

import math
from typing import List

from pygame.math import Vector2

from ..core.config import CreatureConfig
from ..core.segment import LeggedSegment, PlainSegment, Segment
from ..utils.math2d import clamp_angle_to, safe_normalize
from .legs import LegReport, move_legs


def advance(segments: List[Segment], velocity: Vector2, config: CreatureConfig) -> LegReport:
    """Move the head by ``velocity`` and drag the rest of the body after it.

    Segments are updated head to tail; each one reads the already moved
    position of the segment in front of it.
    """
    report = LegReport()
    max_bend = math.radians(config.max_bend_angle)
    head = segments[0]
    head.position = head.position + velocity

    previous_direction = -velocity
    for i in range(1, len(segments)):
        leader = segments[i - 1].position
        part = segments[i]
        direction = part.position - leader
        if i > 1:
            # Keep the body from folding over itself.
            direction = clamp_angle_to(direction, leader - segments[i - 2].position, max_bend)
        if direction.length_squared() == 0.0:
            direction = Vector2(previous_direction)
        part.position = leader + safe_normalize(direction) * config.segment_separation
        previous_direction = direction

        match part:
            case LeggedSegment():
                leg_report = move_legs(part, direction, velocity, config)
                report.steps_started += leg_report.steps_started
                report.ik_failures += leg_report.ik_failures
                report.ik_iterations += leg_report.ik_iterations
            case PlainSegment():
                pass
    return report
