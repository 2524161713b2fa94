"""Tests for organ growth, delta bookkeeping and the organ state machine."""

import math

import pytest

from organtree import ConstantGrowth, Organism, OrganState, Root, RootTypeParameter, prune_organ


def set_rate(organism, rate, sub_type=1):
    organism.get_organ_type_parameter("root", sub_type).growth = ConstantGrowth(rate)


class TestSingleRootScenario:
    def test_first_step_appends_one_node(self, single_root):
        organism, root = single_root
        assert root.id == 0
        assert organism.get_nodes() == [(0.0, 0.0, 0.0)]
        assert organism.get_node_cts() == [0.0]

        organism.simulate(1.0)

        assert organism.get_number_of_nodes() == 2
        assert organism.get_new_segments() == [(0, 1)]
        assert organism.get_segment_cts() == [1.0]
        assert organism.get_new_nodes() == [pytest.approx((0.0, 0.0, -0.5))]
        assert root.length == pytest.approx(0.5)
        assert organism.simtime == 1.0

    def test_short_segment_is_stretched_in_place(self, single_root):
        organism, root = single_root
        organism.simulate(1.0)
        organism.simulate(1.0)

        assert root.has_moved()
        assert organism.get_number_of_nodes() == 2
        assert organism.get_new_nodes() == []
        assert organism.get_new_segments() == []
        assert organism.get_updated_node_indices() == [1]
        assert organism.get_updated_nodes() == [pytest.approx((0.0, 0.0, -1.0))]
        assert organism.get_node_cts() == [0.0, 1.0]

    def test_step_that_moves_and_appends(self, single_root):
        organism, root = single_root
        organism.simulate(1.0)
        set_rate(organism, 0.8)
        organism.simulate(1.0)

        assert root.has_moved()
        assert organism.get_updated_node_indices() == [1]
        assert organism.get_number_of_nodes() == 3
        assert organism.get_new_segments() == [(1, 2)]
        assert organism.get_new_nodes() == [pytest.approx((0.0, 0.0, -1.3))]
        assert organism.get_new_segment_cts() == [pytest.approx(2.0)]
        assert organism.get_segments() == [(0, 1), (1, 2)]
        nodes = organism.get_nodes()
        assert nodes[1] == pytest.approx((0.0, 0.0, -1.0))
        assert root.length == pytest.approx(1.3)

    def test_next_step_reports_no_stale_move(self, single_root):
        organism, root = single_root
        set_rate(organism, 1.0)
        organism.simulate(1.0)
        organism.simulate(1.0)
        assert not root.has_moved()
        assert organism.get_updated_node_indices() == []
        assert organism.get_new_segments() == [(1, 2)]


class TestOrganStates:
    def test_dormant_until_delay_elapses(self):
        organism = Organism()
        organism.set_organ_type_parameter(
            RootTypeParameter(sub_type=1, lmax=10.0, dx=1.0, theta=0.0, tropism_sigma=0.0, growth=ConstantGrowth(0.5))
        )
        root = Root(organism, None, 1, delay=2.0)
        organism.add_organ(root)

        organism.simulate(1.0)
        assert root.state == OrganState.DORMANT
        assert organism.get_number_of_new_nodes() == 0

        organism.simulate(1.5)
        assert root.state == OrganState.ACTIVE
        assert root.length == pytest.approx(0.25)
        assert organism.get_new_node_cts() == [pytest.approx(2.5)]

    def test_inactive_after_reaching_maximal_length(self):
        organism = Organism()
        organism.set_organ_type_parameter(
            RootTypeParameter(sub_type=1, lmax=1.0, dx=1.0, theta=0.0, tropism_sigma=0.0, growth=ConstantGrowth(0.5))
        )
        root = Root(organism, None, 1)
        organism.add_organ(root)
        organism.simulate(1.0)
        organism.simulate(1.0)
        assert root.state == OrganState.INACTIVE
        assert root.length == pytest.approx(1.0)

        organism.simulate(1.0)
        assert root.age == 3.0
        assert organism.get_number_of_new_nodes() == 0
        assert not root.has_moved()

    def test_lifetime_stops_growth(self):
        organism = Organism()
        organism.set_organ_type_parameter(
            RootTypeParameter(
                sub_type=1, lmax=10.0, dx=1.0, theta=0.0, tropism_sigma=0.0, lifetime=1.5, growth=ConstantGrowth(1.0)
            )
        )
        root = Root(organism, None, 1)
        organism.add_organ(root)
        organism.simulate(1.0)
        organism.simulate(1.0)
        assert root.length == pytest.approx(1.5)
        assert root.state == OrganState.INACTIVE

    def test_dead_organ_is_inert(self, branching_root):
        organism, root = branching_root
        organism.simulate(2.0)
        prune_organ(organism, root)
        nodes_before = organism.get_number_of_nodes()

        organism.simulate(1.0)

        assert root.state == OrganState.DEAD
        assert all(child.state == OrganState.DEAD for child in root.children)
        assert organism.get_number_of_nodes() == nodes_before
        assert organism.get_new_nodes() == []
        assert organism.get_new_segments() == []

    def test_negative_time_step_is_rejected(self, single_root):
        organism, root = single_root
        with pytest.raises(ValueError):
            root.simulate(-1.0)


class TestBranching:
    def test_laterals_emerge_at_branching_points(self, branching_root):
        organism, root = branching_root
        for _ in range(4):
            organism.simulate(1.0)

        assert root.length == pytest.approx(4.0)
        assert root.state == OrganState.INACTIVE
        assert len(root.children) == 3
        branch_nodes = [child.node_ids[0] for child in root.children]
        assert [root.node_ids.index(node_id) for node_id in branch_nodes] == [2, 4, 6]
        assert [child.birth_time for child in root.children] == pytest.approx([1.0, 2.0, 3.0])
        assert organism.get_number_of_organs() == 4
        assert organism.get_number_of_nodes() == 12
        assert [organ.id for organ in organism.get_organs()] == [0, 1, 2, 3]

    def test_branch_nodes_are_never_moved(self, branching_root):
        organism, root = branching_root
        organism.simulate(1.0)
        branch_node = root.get_node(2)
        organism.simulate(0.25)
        assert not root.has_moved()
        assert root.get_node(2) == branch_node
        assert root.children[0].get_node(0) == branch_node

    def test_new_child_gets_only_the_rest_of_the_step(self, branching_root):
        organism, root = branching_root
        organism.simulate(1.5)
        lateral = root.children[0]
        assert lateral.age == pytest.approx(0.5)
        assert lateral.length == pytest.approx(0.25)
        assert lateral.get_node_ct(1) == pytest.approx(1.5)

    def test_get_organs_filters_by_type(self, branching_root):
        organism, root = branching_root
        organism.simulate(3.0)
        assert root.get_organs("root") == organism.get_organs("root")
        assert root.get_organs("leaf") == []
        assert root.get_segments("leaf") == []


class TestOrganQueries:
    def test_get_parameter(self, branching_root):
        organism, root = branching_root
        organism.simulate(2.0)
        lateral = root.children[0]
        assert root.get_parameter("length") == pytest.approx(2.0)
        assert root.get_parameter("age") == 2.0
        assert root.get_parameter("lmax") == pytest.approx(4.0)
        assert root.get_parameter("numberOfChildren") == 2.0
        assert lateral.get_parameter("order") == 1.0
        assert lateral.get_parameter("subType") == 2.0
        assert lateral.get_parameter("dx") == 0.5
        assert math.isnan(root.get_parameter("noSuchParameter"))

    def test_node_index_out_of_range(self, single_root):
        organism, root = single_root
        with pytest.raises(IndexError):
            root.get_node(1)
        with pytest.raises(LookupError):
            root.get_node_id(-1)

    def test_copy_clones_the_subtree(self, branching_root):
        organism, root = branching_root
        organism.simulate(2.5)
        target = Organism()
        clone = root.copy(target)

        assert clone is not root and clone.plant is target
        assert clone.param is not root.param and clone.param == root.param
        assert clone.node_ids == root.node_ids and clone.nodes is not root.nodes
        assert len(clone.children) == len(root.children)
        for original, copied in zip(root.children, clone.children):
            assert copied is not original
            assert copied.parent is clone
            assert copied.plant is target

    def test_str(self, single_root):
        organism, root = single_root
        assert str(root).startswith("Root #0: sub type 1, Active")
