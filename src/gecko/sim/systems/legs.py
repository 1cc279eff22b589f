from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from pygame.math import Vector2

from ..core.config import CreatureConfig, LegSettings, LegSide
from ..core.segment import Leg, LeggedSegment, LegState
from ..utils.math2d import angle_of, clamp_angle_between, set_length, unit_from_angle

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IkSolution:
    joint: Vector2
    foot: Vector2
    converged: bool
    iterations: int


@dataclass(slots=True)
class LegReport:
    steps_started: int = 0
    ik_failures: int = 0
    ik_iterations: int = 0


def solve_two_bone(
    hip: Vector2,
    joint: Vector2,
    target: Vector2,
    bone_length: float,
    min_bend: float,
    max_bend: float,
    tolerance: float,
    max_iterations: int,
) -> IkSolution:
    """FABRIK for a hip-joint-foot chain with two equal bones.

    Bend limits are radians, measured from the hip->joint direction to the
    joint->foot direction. At least one iteration always runs because the hip
    moves every tick even when the foot already sits on ``target``.
    """
    new_joint = Vector2(joint)
    new_foot = Vector2(target)
    iterations = 0
    converged = False
    while iterations < max_iterations:
        # Forward reach: pull the joint onto the target.
        new_joint = target + set_length(new_joint - target, bone_length)
        # Backward reach: pin the joint back onto the hip.
        new_joint = hip + set_length(new_joint - hip, bone_length)
        direction = clamp_angle_between(target - new_joint, new_joint - hip, min_bend, max_bend)
        new_foot = new_joint + set_length(direction, bone_length)
        iterations += 1
        if new_foot.distance_to(target) <= tolerance:
            converged = True
            break
    return IkSolution(joint=new_joint, foot=new_foot, converged=converged, iterations=iterations)


def joint_limits(settings: LegSettings, side: LegSide) -> Tuple[float, float]:
    """Radian bend limits for ``side``; the right leg mirrors the left one."""
    sign = 1.0 if side is LegSide.LEFT else -1.0
    first = sign * math.radians(settings.joint_min_angle)
    second = sign * math.radians(settings.joint_max_angle)
    return min(first, second), max(first, second)


def rest_joint(hip: Vector2, foot: Vector2, bone_length: float, min_bend: float, max_bend: float) -> Vector2:
    """Joint of the exact two-bone pose reaching ``foot``, bent toward the allowed side.

    A joint on the hip-foot line is a fixed point of the solver, so spawned legs
    start from a bent pose instead.
    """
    reach = min(1.0, foot.distance_to(hip) / (2.0 * bone_length))
    bend = 2.0 * math.acos(reach)
    if min_bend + max_bend < 0:
        bend = -bend
    return hip + unit_from_angle(angle_of(foot - hip) - bend / 2.0) * bone_length


def step_target(position: Vector2, direction: Vector2, settings: LegSettings, side: LegSide) -> Vector2:
    heading = angle_of(-direction)
    offset = math.radians(settings.target_angle)
    angle = heading - offset if side is LegSide.LEFT else heading + offset
    return position + unit_from_angle(angle) * settings.target_separation


def update_step_targets(segment: LeggedSegment, direction: Vector2) -> None:
    for leg in segment.legs:
        leg.step_target = step_target(segment.position, direction, segment.settings, leg.side)


def init_legs(segment: LeggedSegment, direction: Vector2) -> None:
    """Place feet and joints for a freshly spawned segment.

    ``direction`` points from the previous segment toward this one, i.e. tailward.
    """
    settings = segment.settings
    update_step_targets(segment, direction)
    segment.start_step(settings.start_stepping_side)
    heading = angle_of(-direction)
    for leg in segment.legs:
        if leg.stepping:
            offset = math.radians(settings.stepping_foot_start_angle)
            angle = heading - offset if leg.side is LegSide.LEFT else heading + offset
            leg.foot_position = segment.position + unit_from_angle(angle) * settings.stepping_foot_start_separation
        else:
            leg.foot_position = Vector2(leg.step_target)
        min_bend, max_bend = joint_limits(settings, leg.side)
        leg.joint_position = rest_joint(segment.position, leg.foot_position, settings.half_length, min_bend, max_bend)


def movement_target(leg: Leg, speed: float, config: CreatureConfig) -> Vector2:
    if not leg.stepping:
        return Vector2(leg.foot_position)
    if leg.foot_position.distance_to(leg.step_target) < speed * config.snap_distance_factor:
        return Vector2(leg.step_target)
    return leg.foot_position + set_length(leg.step_target - leg.foot_position, speed * config.swing_speed_factor)


def move_legs(segment: LeggedSegment, direction: Vector2, velocity: Vector2, config: CreatureConfig) -> LegReport:
    settings = segment.settings
    report = LegReport()
    hip = segment.position
    speed = velocity.length()
    update_step_targets(segment, direction)

    # One switch per segment per tick, so a sibling's failed solve cannot undo it.
    switched = False
    for leg in segment.legs:
        if not leg.stepping and leg.foot_position.distance_to(hip) > settings.leg_length:
            segment.start_step(leg.side)
            switched = True
            report.steps_started += 1
            logger.debug("segment %d %s leg out of reach, stepping", settings.segment_index, leg.side.name)
            break

    for leg in segment.legs:
        target = movement_target(leg, speed, config)
        min_bend, max_bend = joint_limits(settings, leg.side)
        solution = solve_two_bone(
            hip,
            leg.joint_position,
            target,
            settings.half_length,
            min_bend,
            max_bend,
            config.ik_tolerance,
            config.ik_max_iterations,
        )
        report.ik_iterations += solution.iterations
        leg.joint_position = solution.joint
        if solution.converged:
            leg.foot_position = target
            continue

        report.ik_failures += 1
        leg.foot_position = solution.foot
        if leg.state is LegState.GROUNDED and not switched:
            segment.start_step(leg.side)
            switched = True
            report.steps_started += 1
            logger.debug("segment %d %s leg failed to reach foothold, stepping", settings.segment_index, leg.side.name)
    return report
