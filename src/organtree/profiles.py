"""Named parameter profiles for quickly assembling an organism."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from .organism import Organism
from .parameters import LeafTypeParameter, RootTypeParameter, SeedTypeParameter, StemTypeParameter


@dataclass(frozen=True)
class PlantProfile:
    description: str
    seed: Mapping[str, float]
    roots: Mapping[int, Mapping[str, float]]
    stems: Mapping[int, Mapping[str, float]] = field(default_factory=dict)
    leaves: Mapping[int, Mapping[str, float]] = field(default_factory=dict)


TAP_ROOT = {
    "lb": 1.0, "lbs": 0.1, "la": 8.0, "las": 0.5, "ln": 1.0, "lns": 0.1, "nob": 12.0,
    "r": 1.5, "rs": 0.1, "dx": 0.5, "theta": 0.0, "a": 0.2,
    "tropism_type": 1, "tropism_n": 1.0, "tropism_sigma": 0.2,
    "successor": 2, "ldelay": 1.0,
}
LATERAL_ROOT = {
    "lmax": 4.0, "lmaxs": 0.5, "r": 0.5, "rs": 0.05, "dx": 0.25, "theta": 1.22, "thetas": 0.1, "a": 0.05,
    "tropism_type": 3, "tropism_n": 0.5, "tropism_sigma": 0.3,
}
BASAL_ROOT = dict(TAP_ROOT, theta=1.0, thetas=0.1, nob=6.0, r=1.2)

PLANT_PROFILES: dict[str, PlantProfile] = {
    "taproot": PlantProfile(
        description="Dicot tap root with first order laterals",
        seed={"seed_pos_z": -3.0},
        roots={1: TAP_ROOT, 2: LATERAL_ROOT},
    ),
    "fibrous": PlantProfile(
        description="Tap root plus basal roots emerging every two days",
        seed={"seed_pos_z": -3.0, "max_b": 5, "first_b": 2.0, "delay_b": 2.0, "basal_type": 4},
        roots={1: TAP_ROOT, 2: LATERAL_ROOT, 4: BASAL_ROOT},
    ),
    "shoot": PlantProfile(
        description="Tap root and a main stem carrying leaves",
        seed={"seed_pos_z": -1.0, "stem_type": 1, "delay_stem": 1.0},
        roots={1: TAP_ROOT, 2: LATERAL_ROOT},
        stems={
            1: {
                "lb": 1.0, "la": 2.0, "ln": 1.5, "lns": 0.1, "nob": 6.0, "r": 1.0, "dx": 0.5,
                "theta": 0.0, "tropism_type": 2, "tropism_n": 1.0, "tropism_sigma": 0.05,
                "successor": 1, "ldelay": 0.5,
            },
        },
        leaves={
            1: {"lmax": 5.0, "lmaxs": 0.3, "r": 0.8, "dx": 0.5, "theta": 1.0, "tropism_type": 3, "tropism_sigma": 0.1},
        },
    ),
}


def register_profile(organism: Organism, profile: PlantProfile) -> None:
    organism.set_organ_type_parameter(SeedTypeParameter(**profile.seed))
    for cls, params in (
        (RootTypeParameter, profile.roots),
        (StemTypeParameter, profile.stems),
        (LeafTypeParameter, profile.leaves),
    ):
        for sub_type, values in params.items():
            organism.set_organ_type_parameter(cls(sub_type=sub_type, **values))


def build_organism(name: str = "taproot", seed: Optional[int] = None, nan_policy: str = "propagate") -> Organism:
    """Initialized organism for the profile ``name``, ready to ``simulate``."""
    try:
        profile = PLANT_PROFILES[name]
    except KeyError:
        raise LookupError(f"unknown plant profile {name!r}, expected one of {sorted(PLANT_PROFILES)}") from None
    organism = Organism(seed=seed, nan_policy=nan_policy)
    register_profile(organism, profile)
    organism.initialize()
    return organism
