from __future__ import annotations

import math

import pytest
from pygame.math import Vector2
from pytest import approx

from gecko.sim.utils.math2d import (
    angle_difference,
    angle_of,
    clamp_angle_between,
    clamp_angle_to,
    clamp_length,
    safe_normalize,
    set_length,
    unit_from_angle,
    with_angle,
)

_ANGLES = [-3.0, -2.2, -1.3, -0.4, 0.0, 0.35, 1.1, 1.9, 2.6, 3.1]


def test_angle_of_and_unit_from_angle_agree():
    for angle in _ANGLES:
        unit = unit_from_angle(angle)
        assert unit.length() == approx(1.0)
        assert angle_of(unit) == approx(angle)


def test_with_angle_keeps_length():
    vector = Vector2(3.0, 4.0)
    rotated = with_angle(vector, 1.0)
    assert rotated.length() == approx(5.0)
    assert angle_of(rotated) == approx(1.0)
    assert with_angle(Vector2(), 2.0) == Vector2()


def test_angle_difference_is_zero_for_equal_angles_and_antisymmetric():
    for a in _ANGLES + [10.0, -25.0]:
        assert angle_difference(a, a) == approx(0.0)
        for b in _ANGLES:
            assert angle_difference(a, b) == approx(-angle_difference(b, a), abs=1e-9)


def test_angle_difference_wraps_into_half_open_range():
    assert angle_difference(3.0, -3.0) == approx(6.0 - 2.0 * math.pi)
    assert angle_difference(-3.0, 3.0) == approx(2.0 * math.pi - 6.0)
    assert angle_difference(math.pi, 0.0) == approx(math.pi)
    assert angle_difference(0.0, math.pi) == approx(math.pi)
    for a in _ANGLES:
        for b in _ANGLES:
            diff = angle_difference(a, b)
            assert -math.pi < diff <= math.pi


@pytest.mark.parametrize("max_delta", [0.1, 0.5, 1.0, 2.5])
def test_clamp_angle_to_bounds_result(max_delta):
    for a in _ANGLES:
        for b in _ANGLES:
            vector = unit_from_angle(a) * 3.0
            reference = unit_from_angle(b) * 7.0
            result = clamp_angle_to(vector, reference, max_delta)
            assert abs(angle_difference(angle_of(result), b)) <= max_delta + 1e-9
            assert result.length() == approx(3.0)
            if abs(angle_difference(a, b)) <= max_delta:
                assert result is vector


def test_clamp_angle_between_uses_asymmetric_bounds():
    reference = Vector2(1.0, 0.0)
    below = clamp_angle_between(Vector2(2.0, 0.0), reference, 0.2, 1.0)
    above = clamp_angle_between(unit_from_angle(2.0) * 2.0, reference, 0.2, 1.0)
    inside = unit_from_angle(0.5)

    assert angle_of(below) == approx(0.2)
    assert below.length() == approx(2.0)
    assert angle_of(above) == approx(1.0)
    assert clamp_angle_between(inside, reference, 0.2, 1.0) is inside


def test_clamp_length_range_and_zero_vector():
    zero = Vector2()
    assert clamp_length(zero, 1.0, 4.0) is zero

    assert clamp_length(Vector2(30.0, 40.0), 1.0, 4.0).length() == approx(4.0)
    assert clamp_length(Vector2(0.3, 0.4), 1.0, 4.0).length() == approx(1.0)
    inside = Vector2(1.2, 1.6)
    assert clamp_length(inside, 1.0, 4.0) is inside

    for angle in _ANGLES:
        for length in (0.01, 0.5, 2.0, 9.0):
            result = clamp_length(unit_from_angle(angle) * length, 0.5, 3.0)
            assert 0.5 - 1e-9 <= result.length() <= 3.0 + 1e-9
            assert angle_of(result) == approx(angle)


def test_set_length_and_normalize_short_circuit_zero():
    assert set_length(Vector2(), 5.0) == Vector2()
    assert safe_normalize(Vector2()) == Vector2()
    assert set_length(Vector2(0.0, -2.0), 5.0) == Vector2(0.0, -5.0)
    assert safe_normalize(Vector2(3.0, 4.0)).length() == approx(1.0)
