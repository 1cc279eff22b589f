from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from pygame.math import Vector2

from .config import LegSettings, LegSide


class LegState(str, Enum):
    GROUNDED = "Grounded"
    STEPPING = "Stepping"


@dataclass(slots=True)
class Leg:
    side: LegSide
    state: LegState = LegState.GROUNDED
    step_target: Vector2 = field(default_factory=Vector2)
    joint_position: Vector2 = field(default_factory=Vector2)
    foot_position: Vector2 = field(default_factory=Vector2)

    @property
    def stepping(self) -> bool:
        return self.state is LegState.STEPPING


@dataclass(slots=True)
class PlainSegment:
    position: Vector2


@dataclass(slots=True)
class LeggedSegment:
    position: Vector2
    settings: LegSettings
    legs: List[Leg] = field(default_factory=lambda: [Leg(LegSide.LEFT), Leg(LegSide.RIGHT)])

    def leg(self, side: LegSide) -> Leg:
        return self.legs[side]

    def start_step(self, side: LegSide) -> None:
        """Make ``side`` the swinging leg and plant its sibling."""
        self.leg(side).state = LegState.STEPPING
        self.leg(side.sibling).state = LegState.GROUNDED


Segment = Union[PlainSegment, LeggedSegment]
