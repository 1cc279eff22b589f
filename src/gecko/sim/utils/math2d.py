from __future__ import annotations

import math

from pygame.math import Vector2

TAU = 2.0 * math.pi


def angle_of(vector: Vector2) -> float:
    return math.atan2(vector.y, vector.x)


def unit_from_angle(angle: float) -> Vector2:
    return Vector2(math.cos(angle), math.sin(angle))


def with_angle(vector: Vector2, angle: float) -> Vector2:
    length = vector.length()
    return Vector2(length * math.cos(angle), length * math.sin(angle))


def angle_difference(first: float, second: float) -> float:
    """Signed ``first - second`` wrapped into (-pi, pi]."""
    diff = (first - second) % TAU
    if diff > math.pi:
        diff -= TAU
    return diff


def clamp_angle_between(vector: Vector2, reference: Vector2, min_delta: float, max_delta: float) -> Vector2:
    """Keep the angle of ``vector`` within [min_delta, max_delta] of ``reference``.

    Out-of-range vectors are rotated onto the nearest bound with their length
    preserved; in-range vectors are returned as they are.
    """
    reference_angle = angle_of(reference)
    diff = angle_difference(angle_of(vector), reference_angle)
    if diff > max_delta:
        return with_angle(vector, reference_angle + max_delta)
    if diff < min_delta:
        return with_angle(vector, reference_angle + min_delta)
    return vector


def clamp_angle_to(vector: Vector2, reference: Vector2, max_delta: float) -> Vector2:
    return clamp_angle_between(vector, reference, -max_delta, max_delta)


def clamp_length(vector: Vector2, min_length: float, max_length: float) -> Vector2:
    length_sq = vector.length_squared()
    if length_sq == 0.0:
        return vector
    if length_sq > max_length * max_length:
        return vector * (max_length / math.sqrt(length_sq))
    if length_sq < min_length * min_length:
        return vector * (min_length / math.sqrt(length_sq))
    return vector


def set_length(vector: Vector2, length: float) -> Vector2:
    length_sq = vector.length_squared()
    if length_sq == 0.0:
        return Vector2()
    return vector * (length / math.sqrt(length_sq))


def safe_normalize(vector: Vector2) -> Vector2:
    return set_length(vector, 1.0)
