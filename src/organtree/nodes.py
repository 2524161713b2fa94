"""Global node identity for one organism."""

from __future__ import annotations

from dataclasses import dataclass, field

from .geometry import Vector3


@dataclass
class NodeSpace:
    """Append-only store of node positions and creation times.

    Node ids are handed out in strictly increasing order starting at 0, so an
    id doubles as the index into ``positions`` and ``creation_times``.
    """

    positions: list[Vector3] = field(default_factory=list)
    creation_times: list[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.positions)

    def allocate(self, position: Vector3, creation_time: float) -> int:
        node_id = len(self.positions)
        self.positions.append(tuple(float(c) for c in position))
        self.creation_times.append(float(creation_time))
        return node_id

    def get(self, node_id: int) -> tuple[Vector3, float]:
        if node_id < 0 or node_id >= len(self.positions):
            raise IndexError(f"node id {node_id} out of range (0..{len(self.positions) - 1})")
        return self.positions[node_id], self.creation_times[node_id]

    def move(self, node_id: int, position: Vector3) -> None:
        """Rewrite the position of an existing node (tip correction)."""
        self.get(node_id)
        self.positions[node_id] = tuple(float(c) for c in position)

    def copy(self) -> "NodeSpace":
        return NodeSpace(positions=list(self.positions), creation_times=list(self.creation_times))
