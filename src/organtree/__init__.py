"""Organ tree engine for procedural plant architecture simulation."""

from .errors import MalformedInputError, OrganTreeError, OrganTypeNameError, ParameterLookupError
from .growth import ConstantGrowth, GrowthFunction, NegativeExponentialGrowth
from .nodes import NodeSpace
from .organ import Organ, OrganState
from .organism import Organism
from .organs import Leaf, Root, Seed, Stem
from .parameters import (
    ORGAN_TYPE_NAMES,
    LeafTypeParameter,
    OrganParameter,
    OrganType,
    OrganTypeParameter,
    RootTypeParameter,
    SeedTypeParameter,
    StemTypeParameter,
    organ_type_name,
    organ_type_number,
)
from .profiles import PLANT_PROFILES, PlantProfile, build_organism
from .serialization import delta_to_dict, organ_to_dict, organism_to_dict
from .simulation import SimulationConfig, SimulationStepResult, prune_organ, run_simulation, simulate_step
from .tropism import Gravitropism, NegativeGravitropism, Plagiotropism, Tropism

__all__ = [
    "ConstantGrowth",
    "Gravitropism",
    "GrowthFunction",
    "Leaf",
    "LeafTypeParameter",
    "MalformedInputError",
    "NegativeExponentialGrowth",
    "NegativeGravitropism",
    "NodeSpace",
    "ORGAN_TYPE_NAMES",
    "Organ",
    "OrganParameter",
    "OrganState",
    "OrganTreeError",
    "OrganType",
    "OrganTypeNameError",
    "OrganTypeParameter",
    "Organism",
    "PLANT_PROFILES",
    "ParameterLookupError",
    "Plagiotropism",
    "PlantProfile",
    "Root",
    "RootTypeParameter",
    "Seed",
    "SeedTypeParameter",
    "SimulationConfig",
    "SimulationStepResult",
    "Stem",
    "StemTypeParameter",
    "Tropism",
    "build_organism",
    "delta_to_dict",
    "organ_to_dict",
    "organ_type_name",
    "organ_type_number",
    "organism_to_dict",
    "prune_organ",
    "run_simulation",
    "simulate_step",
]
