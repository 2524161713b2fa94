"""Simulation step utilities and the organ removal policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .geometry import Vector3
from .organ import Organ
from .organism import NAN_POLICIES, Organism

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    seed: Optional[int] = None
    dt: float = 1.0
    days: float = 10.0
    nan_policy: str = "propagate"
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.dt <= 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if self.days < 0:
            raise ValueError(f"days must be non-negative, got {self.days}")
        if self.nan_policy not in NAN_POLICIES:
            raise ValueError(f"unknown NaN policy {self.nan_policy!r}")

    def time_steps(self) -> list[float]:
        steps = [self.dt] * int(self.days // self.dt)
        rest = self.days - self.dt * len(steps)
        if rest > 1e-12:
            steps.append(rest)
        return steps


@dataclass(frozen=True)
class SimulationStepResult:
    simtime: float
    new_nodes: list[Vector3]
    new_segments: list[tuple[int, int]]
    new_organs: list[Organ]
    updated_node_indices: list[int]


def iter_all_organs(organism: Organism) -> Iterable[Organ]:
    """Every organ of the organism in pre-order, including single node organs."""
    for base in organism.base_organs:
        yield base
        yield from base.iter_descendants()


def simulate_step(organism: Organism, dt: float, verbose: bool = False) -> SimulationStepResult:
    """Run one time step and collect what it changed."""

    organism.simulate(dt, verbose)
    return SimulationStepResult(
        simtime=organism.simtime,
        new_nodes=organism.get_new_nodes(),
        new_segments=organism.get_new_segments(),
        new_organs=[organ for organ in iter_all_organs(organism) if organ.id >= organism.old_number_of_organs],
        updated_node_indices=organism.get_updated_node_indices(),
    )


def run_simulation(organism: Organism, config: SimulationConfig) -> Iterator[SimulationStepResult]:
    organism.nan_policy = config.nan_policy
    for dt in config.time_steps():
        result = simulate_step(organism, dt, config.verbose)
        logger.debug(
            "day %g: %d new nodes, %d new organs", result.simtime, len(result.new_nodes), len(result.new_organs)
        )
        yield result


def find_organ(organism: Organism, organ_id: int) -> Organ:
    for organ in iter_all_organs(organism):
        if organ.id == organ_id:
            return organ
    raise IndexError(f"organism has no organ with id {organ_id}")


def prune_organ(organism: Organism, target: Organ) -> None:
    """Kill ``target`` and its subtree; dead organs keep their nodes but stop growing."""
    if target.plant is not organism:
        raise ValueError(f"organ {target.id} belongs to another organism")
    target.alive = False
    for descendant in target.iter_descendants():
        descendant.alive = False
    logger.debug("pruned organ %d and its subtree", target.id)
