from __future__ import annotations

import pytest

from organtree import ConstantGrowth, Organism, Root, RootTypeParameter


def straight_root(sub_type: int = 1, rate: float = 0.5, **overrides) -> RootTypeParameter:
    values = {"lmax": 100.0, "dx": 1.0, "theta": 0.0, "tropism_sigma": 0.0}
    values.update(overrides)
    return RootTypeParameter(sub_type=sub_type, growth=ConstantGrowth(rate), **values)


@pytest.fixture
def single_root():
    """Organism with one straight base root (id 0, node 0 at the origin) growing 0.5 cm/day."""
    organism = Organism(seed=0)
    organism.set_organ_type_parameter(straight_root())
    root = Root(organism, None, 1, position=(0.0, 0.0, 0.0))
    organism.add_organ(root)
    return organism, root


@pytest.fixture
def branching_root():
    """Straight tap root (1 cm/day, lmax 4 cm) with laterals at 1, 2 and 3 cm."""
    organism = Organism(seed=3)
    organism.set_organ_type_parameter(
        straight_root(rate=1.0, lb=1.0, la=1.0, ln=1.0, nob=3.0, successor=2, dx=0.5)
    )
    organism.set_organ_type_parameter(
        RootTypeParameter(sub_type=2, lmax=0.5, r=0.5, dx=0.5, theta=1.0, tropism_sigma=0.0)
    )
    root = Root(organism, None, 1, position=(0.0, 0.0, 0.0))
    organism.add_organ(root)
    return organism, root
