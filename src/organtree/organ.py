"""Organ base class: one node-producing unit of the organism tree."""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from enum import Enum
from numbers import Real
from typing import TYPE_CHECKING, ClassVar, Iterable, Optional, Union

from .geometry import Vector3
from .parameters import ANY, OrganParameter, OrganType, OrganTypeParameter, organ_type_name, resolve_organ_type

if TYPE_CHECKING:
    from .organism import Organism


class OrganState(str, Enum):
    DORMANT = "Dormant"
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    DEAD = "Dead"


class Organ:
    """A growable unit owning its realized parameters, its polyline and its children.

    The first node of an organ is either freshly allocated (base organs) or
    the node of the parent it emerges from, shared by id. Children are owned
    in creation order; ``parent`` is a plain back reference.
    """

    organ_type: ClassVar[int] = OrganType.ORGAN

    def __init__(
        self,
        plant: "Organism",
        parent: Optional["Organ"],
        sub_type: int,
        delay: float = 0.0,
        parent_node_index: Optional[int] = None,
        position: Optional[Vector3] = None,
    ):
        self.plant = plant
        self.parent = parent
        self.param: OrganParameter = self.plant.get_organ_type_parameter(self.organ_type, sub_type).realize()
        self.id = plant.get_organ_index()
        self.children: list[Organ] = []

        self.alive = True
        self.active = True
        self.age = 0.0
        self.length = 0.0
        self.delay = delay
        self.moved = False

        self.nodes: list[Vector3] = []
        self.node_ids: list[int] = []
        self.node_cts: list[float] = []
        # nodes before this index carry children or belong to the parent and are never rewritten
        self._first_movable = 1
        self._pending_dt: dict[int, float] = {}

        if parent is not None and parent_node_index is not None:
            self.nodes.append(parent.get_node(parent_node_index))
            self.node_ids.append(parent.get_node_id(parent_node_index))
            self.node_cts.append(parent.get_node_ct(parent_node_index))
        else:
            self.add_node(position if position is not None else self._initial_position(), plant.simtime)
        self.birth_time = self.node_cts[0]
        self.old_number_of_nodes = len(self.node_ids)

    def _initial_position(self) -> Vector3:
        return (0.0, 0.0, 0.0)

    @property
    def sub_type(self) -> int:
        return self.param.sub_type

    @property
    def state(self) -> OrganState:
        if not self.alive:
            return OrganState.DEAD
        if self.age < self.delay:
            return OrganState.DORMANT
        if not self.active:
            return OrganState.INACTIVE
        return OrganState.ACTIVE

    def get_organ_type_parameter(self) -> OrganTypeParameter:
        return self.plant.get_organ_type_parameter(self.organ_type, self.param.sub_type)

    # simulation

    def simulate(self, dt: float, verbose: bool = False) -> None:
        """Advance this organ and its subtree by ``dt`` days.

        Children created during the step are advanced after the older ones,
        only for the time left after their creation.
        """
        if dt < 0:
            raise ValueError(f"time step must be non-negative, got {dt}")
        self.old_number_of_nodes = len(self.node_ids)
        self.moved = False
        if not self.alive:
            for organ in self.iter_descendants():
                organ.old_number_of_nodes = len(organ.node_ids)
                organ.moved = False
            return

        self.age += dt
        if self.active and self.age > self.delay:
            self._grow(min(dt, self.age - self.delay), verbose)

        for child in self.children:
            child.simulate(self._pending_dt.pop(child.id, dt), verbose)

    def _grow(self, dt: float, verbose: bool) -> None:
        """Elongate and branch for ``dt`` days of active growth."""

    def add_node(self, position: Vector3, creation_time: float) -> int:
        node_id = self.plant.node_space.allocate(position, creation_time)
        self.nodes.append(self.plant.node_space.positions[node_id])
        self.node_ids.append(node_id)
        self.node_cts.append(float(creation_time))
        return node_id

    def move_last_node(self, position: Vector3) -> None:
        node_id = self.node_ids[-1]
        self.plant.node_space.move(node_id, position)
        self.nodes[-1] = self.plant.node_space.positions[node_id]
        self.moved = True

    def add_child(self, child: "Organ", dt: Optional[float] = None) -> None:
        """Attach ``child``; ``dt`` is the time it still gets in the running step."""
        self.children.append(child)
        self._first_movable = max(self._first_movable, len(self.nodes))
        if dt is not None:
            self._pending_dt[child.id] = dt

    def iter_descendants(self) -> Iterable["Organ"]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    # geometry

    def get_number_of_nodes(self) -> int:
        return len(self.nodes)

    def get_number_of_segments(self) -> int:
        return max(0, len(self.nodes) - 1)

    def _check_index(self, i: int) -> None:
        if i < 0 or i >= len(self.nodes):
            raise IndexError(f"node index {i} out of range for organ {self.id} with {len(self.nodes)} nodes")

    def get_node(self, i: int) -> Vector3:
        self._check_index(i)
        return self.nodes[i]

    def get_node_id(self, i: int) -> int:
        self._check_index(i)
        return self.node_ids[i]

    def get_node_ct(self, i: int) -> float:
        self._check_index(i)
        return self.node_cts[i]

    def get_segments(self, otype: Union[int, str] = ANY) -> list[tuple[int, int]]:
        ot = resolve_organ_type(otype)
        if ot != ANY and ot != self.organ_type:
            return []
        return [(self.node_ids[i], self.node_ids[i + 1]) for i in range(len(self.node_ids) - 1)]

    def has_moved(self) -> bool:
        return self.moved

    # post processing

    def get_organs(self, otype: Union[int, str] = ANY, organs: Optional[list["Organ"]] = None) -> list["Organ"]:
        """Pre-order list of this organ and its descendants having more than one node."""
        ot = resolve_organ_type(otype)
        if organs is None:
            organs = []
        if len(self.nodes) > 1 and (ot == ANY or ot == self.organ_type):
            organs.append(self)
        for child in self.children:
            child.get_organs(ot, organs)
        return organs

    def get_parameter(self, name: str) -> float:
        """Scalar parameter by name, NaN if unknown."""
        values = {
            "id": self.id,
            "organType": self.organ_type,
            "subType": self.param.sub_type,
            "age": self.age,
            "length": self.length,
            "delay": self.delay,
            "creationTime": self.birth_time,
            "emergenceTime": self.birth_time + self.delay,
            "alive": self.alive,
            "active": self.active,
            "numberOfNodes": len(self.nodes),
            "numberOfSegments": self.get_number_of_segments(),
            "numberOfChildren": len(self.children),
            "order": self._order(),
        }
        if name in values:
            return float(values[name])
        value = getattr(self.param, name, None)
        if isinstance(value, Real):
            return float(value)
        return self.get_organ_type_parameter().get_parameter(name)

    def _order(self) -> int:
        order = 0
        organ = self.parent
        while organ is not None and organ.organ_type == self.organ_type:
            order += 1
            organ = organ.parent
        return order

    # copy & IO

    def copy(self, plant: "Organism", parent: Optional["Organ"] = None) -> "Organ":
        """Deep clone of this organ and its subtree, owned by ``plant``."""
        clone = copy.copy(self)
        clone.plant = plant
        clone.parent = parent
        clone.param = self.param.copy()
        clone.nodes = list(self.nodes)
        clone.node_ids = list(self.node_ids)
        clone.node_cts = list(self.node_cts)
        clone._pending_dt = dict(self._pending_dt)
        clone.children = [child.copy(plant, clone) for child in self.children]
        return clone

    def write_rsml(self, parent_element: ET.Element) -> None:
        """Append this organ as RSML element; organs with a single node only pass on their children."""
        if len(self.nodes) > 1:
            element = ET.SubElement(
                parent_element,
                organ_type_name(self.organ_type),
                {"ID": str(self.id), "label": self.get_organ_type_parameter().name},
            )
            polyline = ET.SubElement(ET.SubElement(element, "geometry"), "polyline")
            for x, y, z in self.nodes:
                ET.SubElement(polyline, "point", {"x": repr(x), "y": repr(y), "z": repr(z)})
            functions = ET.SubElement(element, "functions")
            emergence = ET.SubElement(functions, "function", {"name": "emergence_time", "domain": "polyline"})
            for ct in self.node_cts:
                ET.SubElement(emergence, "sample").text = repr(ct)
        else:
            element = parent_element
        for child in self.children:
            child.write_rsml(element)

    def __str__(self) -> str:
        return (
            f"{type(self).__name__} #{self.id}: sub type {self.param.sub_type}, {self.state.value}, "
            f"length {self.length:g} cm, age {self.age:g} days, {len(self.nodes)} nodes, "
            f"{len(self.children)} children"
        )
