from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml


class LegSide(int, Enum):
    LEFT = 0
    RIGHT = 1

    @property
    def sibling(self) -> "LegSide":
        return LegSide.RIGHT if self is LegSide.LEFT else LegSide.LEFT


@dataclass(frozen=True, slots=True)
class LegSettings:
    """Per-segment leg geometry. Angles are in degrees."""

    segment_index: int
    start_stepping_side: LegSide = LegSide.LEFT
    stepping_foot_start_angle: float = 140.0
    stepping_foot_start_separation: float = 50.0
    leg_length: float = 60.0
    target_angle: float = 45.0
    target_separation: float = 55.0
    # Signed for the left leg, mirrored for the right one.
    joint_min_angle: float = 5.0
    joint_max_angle: float = 190.0

    @property
    def half_length(self) -> float:
        return self.leg_length / 2.0


def _default_legs() -> Tuple[LegSettings, ...]:
    return (
        LegSettings(
            segment_index=2,
            start_stepping_side=LegSide.LEFT,
            stepping_foot_start_angle=140.0,
            stepping_foot_start_separation=50.0,
            leg_length=60.0,
            target_angle=45.0,
            target_separation=55.0,
            joint_min_angle=5.0,
            joint_max_angle=190.0,
        ),
        LegSettings(
            segment_index=6,
            start_stepping_side=LegSide.RIGHT,
            stepping_foot_start_angle=160.0,
            stepping_foot_start_separation=60.0,
            leg_length=85.0,
            target_angle=110.0,
            target_separation=30.0,
            joint_min_angle=-175.0,
            joint_max_angle=-20.0,
        ),
    )


@dataclass(frozen=True, slots=True)
class CreatureConfig:
    segment_count: int = 14
    segment_separation: float = 30.0
    # Degrees per tick.
    max_turn: float = 5.0
    # Degrees between consecutive links.
    max_bend_angle: float = 40.0
    min_speed: float = 0.0
    max_speed: float = 4.0
    drag_factor: float = 0.2
    chase_factor: float = 0.01
    reach_radius: float = 5.0
    ik_tolerance: float = 0.5
    ik_max_iterations: int = 10
    snap_distance_factor: float = 2.0
    swing_speed_factor: float = 2.2
    legs: Tuple[LegSettings, ...] = field(default_factory=_default_legs)

    def __post_init__(self) -> None:
        if self.segment_count < 2:
            raise ValueError(f"segment_count must be at least 2, got {self.segment_count}")
        if self.segment_separation <= 0:
            raise ValueError(f"segment_separation must be positive, got {self.segment_separation}")
        if not 0 <= self.min_speed <= self.max_speed:
            raise ValueError(f"speed range [{self.min_speed}, {self.max_speed}] is invalid")
        if self.ik_max_iterations < 1:
            raise ValueError(f"ik_max_iterations must be at least 1, got {self.ik_max_iterations}")
        if self.ik_tolerance <= 0:
            raise ValueError(f"ik_tolerance must be positive, got {self.ik_tolerance}")
        seen: set[int] = set()
        for settings in self.legs:
            index = settings.segment_index
            if not 0 < index < self.segment_count:
                raise ValueError(f"leg segment index {index} outside chain of {self.segment_count}")
            if index in seen:
                raise ValueError(f"duplicate leg segment index {index}")
            if settings.leg_length <= 0:
                raise ValueError(f"leg_length must be positive for segment {index}")
            seen.add(index)

    def legs_by_index(self) -> Dict[int, LegSettings]:
        return {settings.segment_index: settings for settings in self.legs}


@dataclass
class SimulationConfig:
    world_width: float = 1600.0
    world_height: float = 900.0
    frame_rate: int = 60
    seed: int = 42
    config_version: str = "v1"
    creature: CreatureConfig = field(default_factory=CreatureConfig)

    @property
    def world_center(self) -> Tuple[float, float]:
        return (self.world_width / 2.0, self.world_height / 2.0)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def _check_keys(kind: type, raw: Dict[str, Any], section: str) -> None:
    known = {f.name for f in fields(kind)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"unknown {section} keys: {', '.join(sorted(unknown))}")


def _parse_side(value: Any) -> LegSide:
    if isinstance(value, LegSide):
        return value
    try:
        return LegSide[str(value).upper()]
    except KeyError:
        raise ValueError(f"unknown leg side: {value!r}") from None


def _load_leg(raw: Dict[str, Any]) -> LegSettings:
    _check_keys(LegSettings, raw, "leg")
    values = dict(raw)
    if "start_stepping_side" in values:
        values["start_stepping_side"] = _parse_side(values["start_stepping_side"])
    return LegSettings(**values)


def load_config(raw: dict) -> SimulationConfig:
    creature_raw = dict(raw.get("creature") or {})
    legs_raw = creature_raw.pop("legs", None)
    _check_keys(CreatureConfig, creature_raw, "creature")
    if legs_raw is not None:
        creature_raw["legs"] = tuple(_load_leg(leg) for leg in legs_raw)
    creature = CreatureConfig(**creature_raw)

    sim_values = {k: v for k, v in raw.items() if k != "creature"}
    _check_keys(SimulationConfig, sim_values, "simulation")
    return SimulationConfig(creature=creature, **sim_values)
