"""Organism: owner of the organ tree, the node space and the organ type parameters."""

from __future__ import annotations

import copy
import logging
from typing import Optional, Union

import numpy as np

from . import xml_io
from .errors import ParameterLookupError
from .geometry import ORIGIN, Vector3
from .nodes import NodeSpace
from .organ import Organ
from .organs import Seed
from .parameters import (
    ANY,
    ORGAN_TYPE_NAMES,
    OrganType,
    OrganTypeParameter,
    organ_type_name,
    organ_type_number,
    resolve_organ_type,
)

logger = logging.getLogger(__name__)

NAN_POLICIES = ("propagate", "zero")

OrganTypeFilter = Union[int, str]


def _check_nan_policy(nan_policy: str) -> str:
    if nan_policy not in NAN_POLICIES:
        raise ValueError(f"unknown NaN policy {nan_policy!r}, expected one of {NAN_POLICIES}")
    return nan_policy


class Organism:
    """Plant made of base organs, their descendants and the shared node space.

    Every organ belongs to exactly one organism. ``simulate`` advances the base
    organs in registration order and afterwards all queries walk the current
    tree. Node ids index into the results of :meth:`get_nodes` and
    :meth:`get_node_cts`; the delta queries report what the last
    :meth:`simulate` call added.
    """

    organ_type_names = ORGAN_TYPE_NAMES

    def __init__(self, seed: Optional[int] = None, nan_policy: str = "propagate"):
        self.base_organs: list[Organ] = []
        self.organ_param: dict[int, dict[int, OrganTypeParameter]] = {int(ot): {} for ot in OrganType}
        self.node_space = NodeSpace()
        self.simtime = 0.0
        self.old_number_of_nodes = 0
        self.old_number_of_organs = 0
        self.nan_policy = _check_nan_policy(nan_policy)
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self._number_of_organs = 0
        # (start, end) of the running simulate call, None between steps
        self.step_window: Optional[tuple[float, float]] = None

    organ_type_number = staticmethod(organ_type_number)
    organ_type_name = staticmethod(organ_type_name)

    # organ type parameters

    def set_organ_type_parameter(self, p: OrganTypeParameter) -> None:
        """Register ``p`` as prototype of its (organ type, sub type), replacing a previous one."""
        replaced = self.organ_param[p.organ_type].pop(p.sub_type, None)
        if replaced is not None and replaced is not p:
            replaced.plant = None
            logger.debug("replacing organ type parameter %s", replaced)
        p.plant = self
        self.organ_param[p.organ_type][p.sub_type] = p

    def get_organ_type_parameter(self, otype: OrganTypeFilter, sub_type: int) -> OrganTypeParameter:
        ot = resolve_organ_type(otype)
        try:
            return self.organ_param[ot][sub_type]
        except KeyError:
            raise ParameterLookupError(ot, sub_type) from None

    def get_organ_type_parameters(self, otype: OrganTypeFilter) -> list[OrganTypeParameter]:
        ot = resolve_organ_type(otype)
        return [self.organ_param[ot][st] for st in sorted(self.organ_param[ot])]

    # organ tree

    def get_organ_index(self) -> int:
        index = self._number_of_organs
        self._number_of_organs += 1
        return index

    def add_organ(self, organ: Organ) -> None:
        """Register a base organ; it is simulated after the ones added before."""
        if organ.plant is not self:
            raise ValueError(f"organ {organ.id} belongs to another organism")
        self.base_organs.append(organ)
        if self.step_window is None:
            self._snapshot()

    def initialize(self) -> None:
        """Create the seed and its initial organs, if a seed parameter is registered.

        Call after :meth:`set_seed` and before the first :meth:`simulate`.
        """
        seed_params = self.organ_param[OrganType.SEED]
        if not seed_params or self.base_organs:
            return
        seed = Seed(self, min(seed_params))
        self.add_organ(seed)
        seed.initialize()
        self._snapshot()
        logger.debug("initialized %s", self)

    def set_seed(self, seed: int) -> None:
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def simulate(self, dt: float, verbose: bool = False) -> None:
        """Advance all organs by ``dt`` days."""
        if dt < 0:
            raise ValueError(f"time step must be non-negative, got {dt}")
        message = "Organism.simulate: from %g to %g days"
        if verbose:
            logger.info(message, self.simtime, self.simtime + dt)
        else:
            logger.debug(message, self.simtime, self.simtime + dt)
        self._snapshot()
        self.step_window = (self.simtime, self.simtime + dt)
        try:
            for organ in self.base_organs:
                organ.simulate(dt, verbose)
        finally:
            self.step_window = None
        self.simtime += dt

    def _snapshot(self) -> None:
        """Mark everything present as old for the delta queries."""
        self.old_number_of_nodes = self.get_number_of_nodes()
        self.old_number_of_organs = self.get_number_of_organs()

    def copy(self) -> "Organism":
        """Deep copy sharing no organ, parameter or node storage with this organism."""
        clone = copy.copy(self)
        clone.node_space = self.node_space.copy()
        clone.rng = copy.deepcopy(self.rng)
        clone.organ_param = {
            ot: {st: p.copy(clone) for st, p in params.items()} for ot, params in self.organ_param.items()
        }
        clone.base_organs = [organ.copy(clone) for organ in self.base_organs]
        return clone

    # counts

    def get_number_of_organs(self) -> int:
        return self._number_of_organs

    def get_number_of_nodes(self) -> int:
        return len(self.node_space)

    def get_number_of_new_nodes(self) -> int:
        return self.get_number_of_nodes() - self.old_number_of_nodes

    def get_number_of_new_organs(self) -> int:
        return self.get_number_of_organs() - self.old_number_of_organs

    def get_number_of_segments(self, otype: OrganTypeFilter = ANY) -> int:
        return sum(organ.get_number_of_segments() for organ in self.get_organs(otype))

    # aggregate queries

    def get_organs(self, otype: OrganTypeFilter = ANY) -> list[Organ]:
        """Pre-order list of all organs with more than one node."""
        ot = resolve_organ_type(otype)
        organs: list[Organ] = []
        for organ in self.base_organs:
            organ.get_organs(ot, organs)
        return organs

    def get_parameter(
        self, name: str, otype: OrganTypeFilter = ANY, organs: Optional[list[Organ]] = None
    ) -> list[float]:
        """One value per organ of :meth:`get_organs`, NaN where ``name`` is unknown."""
        if not organs:
            organs = self.get_organs(otype)
        return [organ.get_parameter(name) for organ in organs]

    def get_summed(self, name: str, otype: OrganTypeFilter = ANY, nan_policy: Optional[str] = None) -> float:
        """Sum of :meth:`get_parameter`.

        With the ``"propagate"`` policy a single NaN makes the sum NaN, with
        ``"zero"`` NaN values count as zero.
        """
        policy = _check_nan_policy(self.nan_policy if nan_policy is None else nan_policy)
        values = np.asarray(self.get_parameter(name, otype), dtype=float)
        if policy == "zero":
            return float(np.nansum(values))
        return float(np.sum(values))

    def get_polylines(self, otype: OrganTypeFilter = ANY) -> list[list[Vector3]]:
        return [list(organ.nodes) for organ in self.get_organs(otype)]

    def get_polylines_cts(self, otype: OrganTypeFilter = ANY) -> list[list[float]]:
        return [list(organ.node_cts) for organ in self.get_organs(otype)]

    def get_nodes(self) -> list[Vector3]:
        """All nodes indexed by node id; initial nodes of base organs are included even if not emerged."""
        nodes: list[Vector3] = [ORIGIN] * self.get_number_of_nodes()
        for organ in self.base_organs:
            nodes[organ.get_node_id(0)] = organ.get_node(0)
        for organ in self.get_organs():
            for node_id, node in zip(organ.node_ids, organ.nodes):
                nodes[node_id] = node
        return nodes

    def get_node_cts(self) -> list[float]:
        cts = [0.0] * self.get_number_of_nodes()
        for organ in self.base_organs:
            cts[organ.get_node_id(0)] = organ.get_node_ct(0)
        for organ in self.get_organs():
            for node_id, ct in zip(organ.node_ids, organ.node_cts):
                cts[node_id] = ct
        return cts

    def get_segments(self, otype: OrganTypeFilter = ANY) -> list[tuple[int, int]]:
        segments: list[tuple[int, int]] = []
        for organ in self.get_organs(otype):
            segments.extend(organ.get_segments())
        return segments

    def get_segment_cts(self, otype: OrganTypeFilter = ANY) -> list[float]:
        """Creation time per segment, the creation time of its second node."""
        cts = self.get_node_cts()
        return [cts[second] for _, second in self.get_segments(otype)]

    def get_segment_origins(self, otype: OrganTypeFilter = ANY) -> list[Organ]:
        origins: list[Organ] = []
        for organ in self.get_organs(otype):
            origins.extend([organ] * len(organ.get_segments()))
        return origins

    # delta queries

    def get_updated_node_indices(self) -> list[int]:
        """Ids of nodes moved in place during the last step."""
        return [organ.get_node_id(organ.old_number_of_nodes - 1) for organ in self.get_organs() if organ.has_moved()]

    def get_updated_nodes(self) -> list[Vector3]:
        return [organ.get_node(organ.old_number_of_nodes - 1) for organ in self.get_organs() if organ.has_moved()]

    def get_new_nodes(self) -> list[Vector3]:
        """Nodes created during the last step, position ``i`` holding node id ``old_number_of_nodes + i``."""
        nodes: list[Vector3] = [ORIGIN] * self.get_number_of_new_nodes()
        for organ in self.get_organs():
            for i in range(organ.old_number_of_nodes, organ.get_number_of_nodes()):
                nodes[organ.node_ids[i] - self.old_number_of_nodes] = organ.nodes[i]
        return nodes

    def get_new_node_cts(self) -> list[float]:
        cts = [0.0] * self.get_number_of_new_nodes()
        for organ in self.get_organs():
            for i in range(organ.old_number_of_nodes, organ.get_number_of_nodes()):
                cts[organ.node_ids[i] - self.old_number_of_nodes] = organ.node_cts[i]
        return cts

    def _new_segment_indices(self, organ: Organ) -> range:
        return range(max(organ.old_number_of_nodes, 1) - 1, organ.get_number_of_nodes() - 1)

    def get_new_segments(self, otype: OrganTypeFilter = ANY) -> list[tuple[int, int]]:
        """Segments ending in a node created during the last step."""
        segments: list[tuple[int, int]] = []
        for organ in self.get_organs(otype):
            for i in self._new_segment_indices(organ):
                segments.append((organ.node_ids[i], organ.node_ids[i + 1]))
        return segments

    def get_new_segment_origins(self, otype: OrganTypeFilter = ANY) -> list[Organ]:
        origins: list[Organ] = []
        for organ in self.get_organs(otype):
            origins.extend([organ] * len(self._new_segment_indices(organ)))
        return origins

    def get_new_segment_cts(self, otype: OrganTypeFilter = ANY) -> list[float]:
        cts: list[float] = []
        for organ in self.get_organs(otype):
            cts.extend(organ.node_cts[i + 1] for i in self._new_segment_indices(organ))
        return cts

    # IO

    def read_parameters(self, path, basetag: str = "plant") -> None:
        xml_io.read_parameters(self, path, basetag)

    def write_parameters(self, path, basetag: str = "plant", comments: bool = True) -> None:
        xml_io.write_parameters(self, path, basetag, comments)

    def write_rsml(self, path) -> None:
        xml_io.write_rsml(self, path)

    def __str__(self) -> str:
        return (
            f"Organism with {len(self.base_organs)} base organs, {self.get_number_of_nodes()} nodes, "
            f"and a total of {self.get_number_of_organs()} organs, after {self.simtime:g} days"
        )
