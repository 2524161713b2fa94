"""Tests for NodeSpace id allocation."""

import pytest

from organtree import NodeSpace


class TestNodeSpace:
    def test_ids_are_contiguous_from_zero(self):
        space = NodeSpace()
        ids = [space.allocate((float(i), 0.0, 0.0), 0.5 * i) for i in range(5)]
        assert ids == [0, 1, 2, 3, 4]
        assert len(space) == 5

    def test_get_returns_position_and_creation_time(self):
        space = NodeSpace()
        space.allocate((0.0, 0.0, 0.0), 0.0)
        node_id = space.allocate((1, 2, 3), 2)
        assert space.get(node_id) == ((1.0, 2.0, 3.0), 2.0)

    def test_get_out_of_range_raises_lookup_error(self):
        space = NodeSpace()
        space.allocate((0.0, 0.0, 0.0), 0.0)
        with pytest.raises(LookupError):
            space.get(1)
        with pytest.raises(IndexError):
            space.get(-1)

    def test_move_rewrites_position_only(self):
        space = NodeSpace()
        node_id = space.allocate((0.0, 0.0, 0.0), 1.0)
        space.move(node_id, (0.0, 0.0, -2.0))
        assert space.get(node_id) == ((0.0, 0.0, -2.0), 1.0)
        assert len(space) == 1

    def test_copy_is_independent(self):
        space = NodeSpace()
        space.allocate((0.0, 0.0, 0.0), 0.0)
        clone = space.copy()
        clone.allocate((1.0, 0.0, 0.0), 1.0)
        clone.move(0, (5.0, 5.0, 5.0))
        assert len(space) == 1
        assert space.get(0) == ((0.0, 0.0, 0.0), 0.0)
