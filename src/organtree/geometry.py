"""Geometry rules for growth direction, tropism blending, and branch insertion."""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, sin, sqrt
from typing import Tuple

Vector3 = Tuple[float, float, float]

ORIGIN: Vector3 = (0.0, 0.0, 0.0)
DOWN: Vector3 = (0.0, 0.0, -1.0)
UP: Vector3 = (0.0, 0.0, 1.0)


@dataclass(frozen=True)
class TropismInputs:
    target_vector: Vector3
    random_vector: Vector3
    heading_vector: Vector3


@dataclass(frozen=True)
class GrowthDirectionWeights:
    target: float
    random: float
    inertia: float


def scale(vector: Vector3, weight: float) -> Vector3:
    return (vector[0] * weight, vector[1] * weight, vector[2] * weight)


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(vector: Vector3) -> float:
    return sqrt(dot(vector, vector))


def distance(a: Vector3, b: Vector3) -> float:
    return length(sub(a, b))


def normalize(vector: Vector3, fallback: Vector3 = DOWN) -> Vector3:
    norm = length(vector)
    if norm <= 0:
        return fallback
    return scale(vector, 1.0 / norm)


def compute_growth_direction(inputs: TropismInputs, weights: GrowthDirectionWeights) -> Vector3:
    """Combine tropism vectors to compute a unit growth direction."""

    combined = add(
        add(scale(inputs.target_vector, weights.target), scale(inputs.random_vector, weights.random)),
        scale(inputs.heading_vector, weights.inertia),
    )
    return normalize(combined, fallback=normalize(inputs.heading_vector))


def orthogonal(vector: Vector3) -> Vector3:
    """Some unit vector perpendicular to ``vector``."""

    helper = (1.0, 0.0, 0.0) if abs(vector[0]) < 0.9 else (0.0, 1.0, 0.0)
    return normalize(cross(vector, helper))


def rotate(vector: Vector3, axis: Vector3, angle: float) -> Vector3:
    """Rodrigues rotation of ``vector`` around the unit ``axis``."""

    c, s = cos(angle), sin(angle)
    return add(
        add(scale(vector, c), scale(cross(axis, vector), s)),
        scale(axis, dot(axis, vector) * (1.0 - c)),
    )


def branch_heading(heading: Vector3, insertion_angle: float, azimuth: float) -> Vector3:
    """Heading of a branch leaving ``heading`` at ``insertion_angle``, rolled by ``azimuth``."""

    heading = normalize(heading)
    axis = rotate(orthogonal(heading), heading, azimuth)
    return normalize(rotate(heading, axis, insertion_angle))
