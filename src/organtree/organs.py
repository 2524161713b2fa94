"""Organ variants: seed, root, stem and leaf."""

from __future__ import annotations

import logging
from math import inf, nextafter, pi
from typing import TYPE_CHECKING, Callable, ClassVar, Optional, Union

from .errors import OrganTypeNameError
from .geometry import DOWN, UP, Vector3, add, branch_heading, distance, normalize, scale, sub
from .organ import Organ
from .parameters import ANY, OrganType, organ_type_name
from .tropism import Tropism

if TYPE_CHECKING:
    from .organism import Organism

logger = logging.getLogger(__name__)

EPSILON = 1e-9


class Seed(Organ):
    """Single node organ from which the tap root, the main stem and basal roots emerge."""

    organ_type: ClassVar[int] = OrganType.SEED

    def __init__(self, plant: "Organism", sub_type: int = 0):
        super().__init__(plant, None, sub_type)

    def _initial_position(self) -> Vector3:
        return self.param.seed_pos

    def initialize(self) -> None:
        p = self.param
        self.add_child(Root(self.plant, self, p.tap_type, 0.0, 0, DOWN))
        if p.stem_type >= 0:
            self.add_child(Stem(self.plant, self, p.stem_type, p.delay_stem, 0, UP))
        for i in range(p.max_b):
            self.add_child(Root(self.plant, self, p.basal_type, p.first_b + i * p.delay_b, 0, DOWN))

    def get_segments(self, otype: Union[int, str] = ANY) -> list[tuple[int, int]]:
        return []


class ElongatingOrgan(Organ):
    """Organ growing a polyline with axial resolution ``dx`` along a tropism-driven heading."""

    default_heading: ClassVar[Vector3] = DOWN

    def __init__(
        self,
        plant: "Organism",
        parent: Optional[Organ],
        sub_type: int,
        delay: float = 0.0,
        parent_node_index: Optional[int] = None,
        heading: Optional[Vector3] = None,
        position: Optional[Vector3] = None,
    ):
        super().__init__(plant, parent, sub_type, delay, parent_node_index, position)
        heading = normalize(heading if heading is not None else self.default_heading)
        if parent is None:
            self.heading = heading
        else:
            self.heading = branch_heading(heading, self.param.theta, 2.0 * pi * float(plant.rng.random()))

    def _grow(self, dt: float, verbose: bool) -> None:
        param = self.param
        emerged = self.age - self.delay - dt
        if param.lifetime > 0:
            dt = min(dt, param.lifetime - emerged)
        otp = self.get_organ_type_parameter()
        if dt > 0:
            dl = otp.growth_function().next_length(param, emerged, dt)
            dl = min(dl, max(0.0, param.lmax - self.length))
            if dl > EPSILON:
                self._elongate(dl, emerged, dt, otp.tropism_function())

        if self.length >= param.lmax - EPSILON or (param.lifetime > 0 and self.age - self.delay >= param.lifetime):
            self.active = False
        message = "%s #%d: length %.4g cm, %d nodes, active %s"
        args = (organ_type_name(self.organ_type), self.id, self.length, len(self.nodes), self.active)
        if verbose:
            logger.info(message, *args)
        else:
            logger.debug(message, *args)

    def _elongate(self, dl: float, emerged: float, dt: float, tropism: Tropism) -> None:
        start_length = self.length
        start_time = self.birth_time + self.delay + emerged
        window = self.plant.step_window

        def time_at(length: float) -> float:
            t = start_time + dt * (length - start_length) / dl
            if window is not None:
                # creation times stay inside (start, end] of the running step
                t = min(max(t, nextafter(window[0], inf)), window[1])
            return t

        target = start_length + dl
        for point in self._branch_points_until(target):
            self._create_segments(point - self.length, time_at, tropism)
            self._create_successor()
        self._create_segments(target - self.length, time_at, tropism)

    def _branch_points_until(self, target: float) -> list[float]:
        return []

    def _create_segments(self, length: float, time_at: Callable[[float], float], tropism: Tropism) -> None:
        """Grow ``length`` cm, first stretching a short last segment, then appending nodes."""
        if length <= EPSILON:
            return
        dx = self.param.dx
        if len(self.nodes) >= 2 and len(self.nodes) - 1 >= self._first_movable:
            last = distance(self.nodes[-2], self.nodes[-1])
            if last < dx - EPSILON:
                shift = min(dx - last, length)
                direction = normalize(sub(self.nodes[-1], self.nodes[-2]), fallback=self.heading)
                self.move_last_node(add(self.nodes[-1], scale(direction, shift)))
                self.length += shift
                length -= shift
        while length > EPSILON:
            step = min(length, dx)
            self.heading = tropism.next_direction(self, self.nodes[-1], self.heading)
            self.length += step
            length -= step
            self.add_node(add(self.nodes[-1], scale(self.heading, step)), time_at(self.length))


class BranchingOrgan(ElongatingOrgan):
    """Elongating organ creating successors at the branching points of its parameter set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._next_branch = 0

    def _branch_points_until(self, target: float) -> list[float]:
        points = self.param.branch_points()
        due = []
        while self._next_branch < len(points) and points[self._next_branch] <= target + EPSILON:
            due.append(points[self._next_branch])
            self._next_branch += 1
        return due

    def _create_successor(self) -> None:
        p = self.param
        try:
            cls = SUCCESSOR_CLASSES[p.successor_organ_type]
        except KeyError:
            raise OrganTypeNameError(f"organ type {p.successor_organ_type} cannot be a successor") from None
        child = cls(self.plant, self, p.successor, p.ldelay, len(self.nodes) - 1, self.heading)
        self.add_child(child, max(0.0, self.birth_time + self.age - child.birth_time))


class Root(BranchingOrgan):
    organ_type: ClassVar[int] = OrganType.ROOT
    default_heading: ClassVar[Vector3] = DOWN


class Stem(BranchingOrgan):
    organ_type: ClassVar[int] = OrganType.STEM
    default_heading: ClassVar[Vector3] = UP


class Leaf(ElongatingOrgan):
    organ_type: ClassVar[int] = OrganType.LEAF
    default_heading: ClassVar[Vector3] = UP


SUCCESSOR_CLASSES: dict[int, type[ElongatingOrgan]] = {
    OrganType.ROOT: Root,
    OrganType.STEM: Stem,
    OrganType.LEAF: Leaf,
}
