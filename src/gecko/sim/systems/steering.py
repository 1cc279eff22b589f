from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from pygame.math import Vector2

from ..core.config import CreatureConfig
from ..utils.math2d import clamp_angle_to, clamp_length


@dataclass(slots=True)
class SteeringResult:
    velocity: Vector2
    forces: List[Vector2]


def drag_force(velocity: Vector2, drag_factor: float) -> Vector2:
    return -velocity * drag_factor


def seek_force(head: Vector2, target: Vector2, chase_factor: float, reach_radius: float) -> Vector2:
    offset = target - head
    # Dead zone around the target so the head does not jitter on arrival.
    if offset.length() < reach_radius:
        return Vector2()
    return offset * chase_factor


def compute_velocity(velocity: Vector2, head: Vector2, target: Vector2, config: CreatureConfig) -> SteeringResult:
    forces = [
        drag_force(velocity, config.drag_factor),
        seek_force(head, target, config.chase_factor, config.reach_radius),
    ]
    new_velocity = Vector2(velocity)
    for force in forces:
        new_velocity = new_velocity + force
    new_velocity = clamp_angle_to(new_velocity, velocity, math.radians(config.max_turn))
    new_velocity = clamp_length(new_velocity, config.min_speed, config.max_speed)
    return SteeringResult(velocity=new_velocity, forces=forces)
