"""Organ type table and the two-level parameter model.

An :class:`OrganTypeParameter` is the prototype registered in an organism
for one (organ type, sub type) pair. Every organ calls :meth:`realize` once
on construction and keeps the resulting :class:`OrganParameter` to itself.
Scalar fields of a type parameter are reachable by name through ``iparam``
and ``dparam`` (name -> attribute), which are rebuilt on construction and
never serialized.
"""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from math import nan
from typing import TYPE_CHECKING, ClassVar, Optional, Union

from .errors import OrganTypeNameError
from .growth import GrowthFunction, growth_function
from .tropism import Tropism, tropism_function

if TYPE_CHECKING:
    from .organism import Organism


class OrganType(IntEnum):
    ORGAN = 0
    SEED = 1
    ROOT = 2
    STEM = 3
    LEAF = 4


ORGAN_TYPE_NAMES: tuple[str, ...] = ("organ", "seed", "root", "stem", "leaf")
ANY = -1


def organ_type_number(name: str) -> int:
    try:
        return ORGAN_TYPE_NAMES.index(name)
    except ValueError:
        raise OrganTypeNameError(f"unknown organ type name {name!r}") from None


def organ_type_name(ot: int) -> str:
    if not isinstance(ot, int) or not 0 <= ot < len(ORGAN_TYPE_NAMES):
        raise OrganTypeNameError(f"unknown organ type number {ot!r}")
    return ORGAN_TYPE_NAMES[ot]


def resolve_organ_type(otype: Union[int, str, None]) -> int:
    """Normalize an organ type filter to its number, ``-1`` meaning any."""
    if otype is None or otype == "any":
        return ANY
    if isinstance(otype, str):
        return organ_type_number(otype)
    if otype == ANY:
        return ANY
    organ_type_name(int(otype))
    return int(otype)


def parameter(default, description: str = "", xml: Optional[str] = None):
    """Dataclass field registered in the name lookup of a type parameter."""
    return field(default=default, metadata={"description": description, "xml": xml})


@dataclass
class OrganParameter:
    """Realized, per-organ parameter set."""

    sub_type: int = 0

    def copy(self) -> "OrganParameter":
        return copy.deepcopy(self)


@dataclass
class SeedParameter(OrganParameter):
    seed_pos: tuple[float, float, float] = (0.0, 0.0, -3.0)
    tap_type: int = 1
    stem_type: int = -1
    delay_stem: float = 0.0
    basal_type: int = 4
    first_b: float = 0.0
    delay_b: float = 0.0
    max_b: int = 0


@dataclass
class ElongationParameter(OrganParameter):
    r: float = 1.0
    lmax: float = 0.0
    dx: float = 0.5
    theta: float = 0.0
    a: float = 0.1
    lifetime: float = 0.0


@dataclass
class BranchingParameter(ElongationParameter):
    lb: float = 0.0
    la: float = 0.0
    ln: list[float] = field(default_factory=list)
    ldelay: float = 0.0
    successor: int = -1
    successor_organ_type: int = OrganType.ROOT

    @property
    def nob(self) -> int:
        """Number of branching points."""
        if self.successor < 0:
            return 0
        return len(self.ln) + 1

    def branch_points(self) -> list[float]:
        points = []
        position = self.lb
        for i in range(self.nob):
            points.append(position)
            if i < len(self.ln):
                position += self.ln[i]
        return points


@dataclass(eq=False)
class OrganTypeParameter:
    """Prototype parameter set of one (organ type, sub type) pair."""

    organ_type: ClassVar[int] = OrganType.ORGAN
    parameter_class: ClassVar[type] = OrganParameter

    plant: Optional["Organism"] = field(default=None, repr=False, compare=False)
    name: str = "organ"
    sub_type: int = parameter(0, "Sub type of the organ type", xml="subType")

    iparam: dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)
    dparam: dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._bind_parameters()

    def _bind_parameters(self) -> None:
        self.iparam = {"organType": "organ_type"}
        self.dparam = {}
        for f in dataclasses.fields(self):
            if "xml" not in f.metadata:
                continue
            key = f.metadata["xml"] or f.name
            value = f.default
            if isinstance(value, bool):
                continue
            if isinstance(value, int):
                self.iparam[key] = f.name
            elif isinstance(value, float):
                self.dparam[key] = f.name

    def descriptions(self) -> dict[str, str]:
        return {
            (f.metadata["xml"] or f.name): f.metadata["description"]
            for f in dataclasses.fields(self)
            if "xml" in f.metadata
        }

    def get_parameter(self, name: str) -> float:
        if name in self.iparam:
            return float(getattr(self, self.iparam[name]))
        if name in self.dparam:
            return float(getattr(self, self.dparam[name]))
        return nan

    def set_parameter(self, name: str, value) -> None:
        if name in self.iparam and name != "organType":
            setattr(self, self.iparam[name], int(float(value)))
        elif name in self.dparam:
            setattr(self, self.dparam[name], float(value))
        else:
            raise LookupError(f"{type(self).__name__} has no parameter {name!r}")

    def _draw(self, mean: float, sd: float) -> float:
        """``mean + sd * N(0, 1)`` from the owning organism's generator, clipped at 0."""
        if sd <= 0 or self.plant is None:
            return max(0.0, mean)
        return max(0.0, mean + sd * float(self.plant.rng.standard_normal()))

    def realize(self) -> OrganParameter:
        return self.parameter_class(sub_type=self.sub_type)

    def copy(self, plant: "Organism") -> "OrganTypeParameter":
        clone = copy.copy(self)
        clone.__dict__.update(copy.deepcopy({k: v for k, v in self.__dict__.items() if k != "plant"}))
        clone.plant = plant
        clone._bind_parameters()
        return clone

    def __str__(self) -> str:
        return f"Name {self.name}, organ type {self.organ_type}, sub type {self.sub_type}"


@dataclass(eq=False)
class SeedTypeParameter(OrganTypeParameter):
    organ_type: ClassVar[int] = OrganType.SEED
    parameter_class: ClassVar[type] = SeedParameter

    name: str = "seed"
    seed_pos_x: float = parameter(0.0, "X-coordinate of seed position [cm]", xml="seedPos.x")
    seed_pos_y: float = parameter(0.0, "Y-coordinate of seed position [cm]", xml="seedPos.y")
    seed_pos_z: float = parameter(-3.0, "Z-coordinate of seed position [cm]", xml="seedPos.z")
    tap_type: int = parameter(1, "Sub type of the tap root", xml="tapType")
    stem_type: int = parameter(-1, "Sub type of the main stem, -1 for none", xml="stemType")
    delay_stem: float = parameter(0.0, "Emergence of the main stem [day]", xml="delayStem")
    basal_type: int = parameter(4, "Sub type of basal roots", xml="basalType")
    first_b: float = parameter(0.0, "Emergence of first basal root [day]", xml="firstB")
    first_bs: float = parameter(0.0, "Standard deviation of emergence of first basal root [day]", xml="firstBs")
    delay_b: float = parameter(0.0, "Time delay between basal roots [day]", xml="delayB")
    delay_bs: float = parameter(0.0, "Standard deviation of time delay between basal roots [day]", xml="delayBs")
    max_b: int = parameter(0, "Maximal number of basal roots", xml="maxB")
    max_bs: float = parameter(0.0, "Standard deviation of maximal number of basal roots", xml="maxBs")

    def realize(self) -> SeedParameter:
        return SeedParameter(
            sub_type=self.sub_type,
            seed_pos=(self.seed_pos_x, self.seed_pos_y, self.seed_pos_z),
            tap_type=self.tap_type,
            stem_type=self.stem_type,
            delay_stem=self.delay_stem,
            basal_type=self.basal_type,
            first_b=self._draw(self.first_b, self.first_bs),
            delay_b=self._draw(self.delay_b, self.delay_bs),
            max_b=int(round(self._draw(float(self.max_b), self.max_bs))),
        )


@dataclass(eq=False)
class ElongationTypeParameter(OrganTypeParameter):
    """Parameters shared by every organ that elongates along a polyline."""

    parameter_class: ClassVar[type] = ElongationParameter

    r: float = parameter(1.0, "Initial growth rate [cm day-1]")
    rs: float = parameter(0.0, "Standard deviation of initial growth rate [cm day-1]")
    lmax: float = parameter(10.0, "Maximal length, if the organ does not branch [cm]")
    lmaxs: float = parameter(0.0, "Standard deviation of maximal length [cm]")
    dx: float = parameter(0.5, "Axial resolution, maximal segment length [cm]")
    theta: float = parameter(1.22, "Insertion angle at the parent [rad]")
    thetas: float = parameter(0.0, "Standard deviation of insertion angle [rad]")
    a: float = parameter(0.1, "Radius [cm]")
    lifetime: float = parameter(0.0, "Maximal growth period, 0 for unlimited [day]", xml="rlt")
    gf: int = parameter(0, "Growth function (0 constant, 1 negative exponential)")
    tropism_type: int = parameter(
        0, "Tropism (0 straight, 1 gravi-, 2 negative gravi-, 3 plagiotropism)", xml="tropismT"
    )
    tropism_n: float = parameter(1.0, "Strength of the tropism target", xml="tropismN")
    tropism_sigma: float = parameter(0.2, "Random perturbation of the heading", xml="tropismS")
    growth: Optional[GrowthFunction] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        self._check_resolution(self.dx)

    @staticmethod
    def _check_resolution(dx: float) -> None:
        if not dx > 0:
            raise ValueError(f"axial resolution dx must be positive, got {dx}")

    def set_parameter(self, name: str, value) -> None:
        if name == "dx":
            self._check_resolution(float(value))
        super().set_parameter(name, value)

    def growth_function(self) -> GrowthFunction:
        if self.growth is not None:
            return self.growth
        return growth_function(self.gf)

    def tropism_function(self) -> Tropism:
        return tropism_function(self.tropism_type, self.tropism_n, self.tropism_sigma)

    def _realize_elongation(self) -> dict:
        self._check_resolution(self.dx)
        return {
            "sub_type": self.sub_type,
            "r": self._draw(self.r, self.rs),
            "dx": self.dx,
            "theta": self._draw(self.theta, self.thetas),
            "a": self.a,
            "lifetime": self.lifetime,
        }

    def realize(self) -> ElongationParameter:
        return ElongationParameter(lmax=self._draw(self.lmax, self.lmaxs), **self._realize_elongation())


@dataclass(eq=False)
class BranchingTypeParameter(ElongationTypeParameter):
    """Elongating organs that carry successors at regularly spaced branching points."""

    parameter_class: ClassVar[type] = BranchingParameter
    default_successor_organ_type: ClassVar[int] = OrganType.ROOT

    lb: float = parameter(0.0, "Basal zone [cm]")
    lbs: float = parameter(0.0, "Standard deviation of basal zone [cm]")
    la: float = parameter(10.0, "Apical zone [cm]")
    las: float = parameter(0.0, "Standard deviation of apical zone [cm]")
    ln: float = parameter(1.0, "Inter-lateral distance [cm]")
    lns: float = parameter(0.0, "Standard deviation of inter-lateral distance [cm]")
    nob: float = parameter(0.0, "Number of branching points")
    nobs: float = parameter(0.0, "Standard deviation of number of branching points")
    ldelay: float = parameter(0.0, "Emergence delay of successors [day]")
    ldelays: float = parameter(0.0, "Standard deviation of emergence delay of successors [day]")
    successor: int = parameter(-1, "Sub type of successors, -1 for none")
    successor_organ_type: int = parameter(-1, "Organ type of successors, -1 for the default", xml="successorOT")

    def realize(self) -> BranchingParameter:
        nob = int(round(self._draw(self.nob, self.nobs))) if self.successor >= 0 else 0
        successor_ot = self.successor_organ_type
        if successor_ot < 0:
            successor_ot = self.default_successor_organ_type
        elongation = self._realize_elongation()
        if nob > 0:
            lb = self._draw(self.lb, self.lbs)
            la = self._draw(self.la, self.las)
            ln = [self._draw(self.ln, self.lns) for _ in range(nob - 1)]
            lmax = lb + la + sum(ln)
        else:
            lb, la, ln = 0.0, 0.0, []
            lmax = self._draw(self.lmax, self.lmaxs)
        return BranchingParameter(
            lmax=lmax,
            lb=lb,
            la=la,
            ln=ln,
            ldelay=self._draw(self.ldelay, self.ldelays),
            successor=self.successor if nob > 0 else -1,
            successor_organ_type=successor_ot,
            **elongation,
        )


@dataclass(eq=False)
class RootTypeParameter(BranchingTypeParameter):
    organ_type: ClassVar[int] = OrganType.ROOT

    name: str = "root"


@dataclass(eq=False)
class StemTypeParameter(BranchingTypeParameter):
    organ_type: ClassVar[int] = OrganType.STEM
    default_successor_organ_type: ClassVar[int] = OrganType.LEAF

    name: str = "stem"


@dataclass(eq=False)
class LeafTypeParameter(ElongationTypeParameter):
    organ_type: ClassVar[int] = OrganType.LEAF

    name: str = "leaf"


PARAMETER_CLASSES: dict[int, type[OrganTypeParameter]] = {
    OrganType.ORGAN: OrganTypeParameter,
    OrganType.SEED: SeedTypeParameter,
    OrganType.ROOT: RootTypeParameter,
    OrganType.STEM: StemTypeParameter,
    OrganType.LEAF: LeafTypeParameter,
}
