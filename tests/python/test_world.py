from __future__ import annotations

import math

from pygame.math import Vector2
from pytest import approx

from gecko.sim.core.config import LegSide, SimulationConfig
from gecko.sim.core.segment import LeggedSegment, LegState, PlainSegment
from gecko.sim.core.world import World
from gecko.sim.utils.math2d import angle_difference, angle_of


def _circle_target(tick: int) -> Vector2:
    angle = 2.0 * math.pi * tick / 400.0
    return Vector2(800.0 + 300.0 * math.cos(angle), 450.0 + 300.0 * math.sin(angle))


def test_spawn_lays_out_body_behind_head():
    world = World(SimulationConfig())
    segments = world.creature.segments

    assert len(segments) == 14
    for index, part in enumerate(segments):
        assert part.position.x == approx(800.0 - 30.0 * index)
        assert part.position.y == approx(450.0)
        if index in (2, 6):
            assert isinstance(part, LeggedSegment)
            assert sum(leg.stepping for leg in part.legs) == 1
        else:
            assert isinstance(part, PlainSegment)
    assert world.creature.velocity == Vector2(1.0, 0.0)


def test_target_on_head_decays_velocity_through_drag_only():
    world = World(SimulationConfig())
    speeds = []
    for _ in range(20):
        world.update(world.creature.head)
        assert world.creature.forces[1] == Vector2()
        speeds.append(world.creature.velocity.length())

    assert speeds[0] == approx(0.8)
    for previous, current in zip(speeds, speeds[1:]):
        assert current == approx(previous * 0.8)
    assert angle_of(world.creature.velocity) == approx(0.0)


def test_far_target_turns_at_limited_rate_and_reaches_max_speed():
    config = SimulationConfig()
    world = World(config, heading=(0.0, 1.0))
    max_turn = math.radians(config.creature.max_turn)
    heading = math.pi / 2.0

    for _ in range(40):
        metrics = world.update((1590.0, 450.0))
        assert abs(angle_difference(metrics.heading, heading)) <= max_turn + 1e-9
        assert metrics.speed <= config.creature.max_speed + 1e-9
        heading = metrics.heading

    assert heading == approx(0.0, abs=0.1)
    assert world.creature.velocity.length() == approx(config.creature.max_speed)


def test_body_and_leg_invariants_hold_while_chasing():
    world = World(SimulationConfig())
    creature_config = world.config.creature
    max_bend = math.radians(creature_config.max_bend_angle)

    for tick in range(500):
        world.update(_circle_target(tick))
        segments = world.creature.segments
        for i in range(1, len(segments)):
            assert segments[i].position.distance_to(segments[i - 1].position) == approx(30.0)
        for i in range(2, len(segments)):
            link = segments[i].position - segments[i - 1].position
            previous = segments[i - 1].position - segments[i - 2].position
            assert abs(angle_difference(angle_of(link), angle_of(previous))) <= max_bend + 1e-9
        for part in world.creature.legged_segments():
            assert sum(leg.stepping for leg in part.legs) <= 1
            for leg in part.legs:
                assert leg.joint_position.distance_to(part.position) == approx(part.settings.half_length)
                assert math.isfinite(leg.foot_position.x) and math.isfinite(leg.foot_position.y)


def test_creature_takes_steps_while_walking():
    world = World(SimulationConfig())
    started = 0
    for tick in range(600):
        started += world.update(_circle_target(tick)).steps_started
    assert started > 0


def test_out_of_reach_foot_switches_stepping_leg_on_same_tick():
    world = World(SimulationConfig())
    part = world.creature.segments[2]
    assert isinstance(part, LeggedSegment)
    grounded = part.legs[LegSide.RIGHT]
    sibling = part.legs[LegSide.LEFT]
    assert grounded.state is LegState.GROUNDED
    grounded.foot_position = part.position + Vector2(0.0, 500.0)

    metrics = world.update(world.creature.head + Vector2(200.0, 0.0))

    assert grounded.state is LegState.STEPPING
    assert sibling.state is LegState.GROUNDED
    assert metrics.steps_started >= 1


def test_snapshot_is_a_detached_copy():
    world = World(SimulationConfig(seed=3))
    world.update((1200.0, 300.0))
    snapshot = world.snapshot()

    assert snapshot.tick == 1
    assert snapshot.metrics is world.metrics
    assert len(snapshot.segments) == 14
    assert len(snapshot.forces) == 2
    assert snapshot.velocity == approx((world.creature.velocity.x, world.creature.velocity.y))
    assert snapshot.metadata.world_width == approx(1600.0)
    assert snapshot.metadata.seed == 3

    legged = [entry for entry in snapshot.segments if entry["legs"]]
    assert [entry["index"] for entry in legged] == [2, 6]
    for key in ["side", "state", "stepping", "foot", "joint", "step_target"]:
        assert key in legged[0]["legs"][0]

    head_before = Vector2(world.creature.head)
    snapshot.segments[0]["x"] = -1.0
    snapshot.forces.clear()
    assert world.creature.head == head_before
    assert len(world.creature.forces) == 2


def test_reset_respawns_creature():
    world = World(SimulationConfig())
    for tick in range(10):
        world.update(_circle_target(tick))

    world.reset()

    assert world.tick == 0
    assert world.metrics is None
    assert world.creature.head == Vector2(800.0, 450.0)
