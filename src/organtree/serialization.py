"""Serialization helpers for API and UI clients."""

from __future__ import annotations

from .organ import Organ
from .organism import Organism
from .parameters import organ_type_name
from .simulation import iter_all_organs


def organ_to_dict(organ: Organ) -> dict[str, object]:
    return {
        "id": organ.id,
        "parent_id": organ.parent.id if organ.parent is not None else None,
        "organ_type": organ_type_name(organ.organ_type),
        "sub_type": organ.sub_type,
        "state": organ.state.value,
        "age": organ.age,
        "length": organ.length,
        "node_ids": list(organ.node_ids),
        "children": [child.id for child in organ.children],
    }


def organism_to_dict(organism: Organism) -> dict[str, object]:
    return {
        "simtime": organism.simtime,
        "number_of_nodes": organism.get_number_of_nodes(),
        "number_of_organs": organism.get_number_of_organs(),
        "base_organs": [organ.id for organ in organism.base_organs],
        "organs": [organ_to_dict(organ) for organ in iter_all_organs(organism)],
        "nodes": [list(node) for node in organism.get_nodes()],
        "node_cts": organism.get_node_cts(),
        "segments": [list(segment) for segment in organism.get_segments()],
    }


def delta_to_dict(organism: Organism) -> dict[str, object]:
    return {
        "simtime": organism.simtime,
        "old_number_of_nodes": organism.old_number_of_nodes,
        "new_nodes": [list(node) for node in organism.get_new_nodes()],
        "new_node_cts": organism.get_new_node_cts(),
        "new_segments": [list(segment) for segment in organism.get_new_segments()],
        "updated_node_indices": organism.get_updated_node_indices(),
        "updated_nodes": [list(node) for node in organism.get_updated_nodes()],
    }
