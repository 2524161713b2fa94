"""Tropism functions steering the heading of a growing organ tip."""

from __future__ import annotations

from dataclasses import dataclass

from .geometry import (
    DOWN,
    ORIGIN,
    UP,
    GrowthDirectionWeights,
    TropismInputs,
    Vector3,
    compute_growth_direction,
    normalize,
)


@dataclass(frozen=True)
class Tropism:
    """Straight growth, optionally perturbed.

    ``n`` weights the pull towards the tropism target, ``sigma`` the random
    perturbation drawn from the organism's generator, and the current heading
    always enters with weight 1.
    """

    n: float = 0.0
    sigma: float = 0.0

    def target(self, tip: Vector3, heading: Vector3) -> Vector3:
        return ORIGIN

    def next_direction(self, organ, tip: Vector3, heading: Vector3) -> Vector3:
        random_vector = ORIGIN
        if self.sigma > 0:
            random_vector = normalize(tuple(float(v) for v in organ.plant.rng.standard_normal(3)))
        inputs = TropismInputs(
            target_vector=self.target(tip, heading),
            random_vector=random_vector,
            heading_vector=normalize(heading),
        )
        weights = GrowthDirectionWeights(target=self.n, random=self.sigma, inertia=1.0)
        return compute_growth_direction(inputs, weights)


@dataclass(frozen=True)
class Gravitropism(Tropism):
    def target(self, tip: Vector3, heading: Vector3) -> Vector3:
        return DOWN


@dataclass(frozen=True)
class NegativeGravitropism(Tropism):
    def target(self, tip: Vector3, heading: Vector3) -> Vector3:
        return UP


@dataclass(frozen=True)
class Plagiotropism(Tropism):
    """Pulls towards the horizontal plane."""

    def target(self, tip: Vector3, heading: Vector3) -> Vector3:
        return normalize((heading[0], heading[1], 0.0), fallback=(1.0, 0.0, 0.0))


TROPISMS: dict[int, type[Tropism]] = {
    0: Tropism,
    1: Gravitropism,
    2: NegativeGravitropism,
    3: Plagiotropism,
}


def tropism_function(tropism_type: int, n: float, sigma: float) -> Tropism:
    try:
        return TROPISMS[tropism_type](n=n, sigma=sigma)
    except KeyError:
        raise LookupError(f"unknown tropism type {tropism_type}") from None
