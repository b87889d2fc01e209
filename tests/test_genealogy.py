"""
Unit tests for bvgenealogy.genealogy module.
"""

import random

import pytest

from bvgenealogy.distance import Relation
from bvgenealogy.genealogy import (
    NO_PARENT,
    Genealogy,
    discover_neighbors,
    extract_genealogy,
    find_leaves,
)


def _edges(*pairs: tuple[int, int]) -> list[Relation]:
    return [Relation(left=left, right=right, nbd=0) for left, right in pairs]


def _random_tree(size: int, rng: random.Random) -> list[Relation]:
    """Edges of a random tree where member k hangs off an earlier member."""
    return _edges(*[(rng.randrange(k), k) for k in range(1, size)])


class TestDiscoverNeighbors:
    """Tests for neighbor map construction."""

    def test_neighbors(self) -> None:
        """Each edge appears in both endpoints' neighborhoods."""
        neighbors = discover_neighbors(_edges((0, 1), (1, 2)), size=3)
        assert neighbors == {0: {1}, 1: {0, 2}, 2: {1}}

    def test_isolated_members_present(self) -> None:
        """Members without edges map to an empty set."""
        neighbors = discover_neighbors(_edges((0, 1)), size=3)
        assert neighbors[2] == set()

    def test_duplicate_edges_collapse(self) -> None:
        """Repeated edges do not raise degree."""
        neighbors = discover_neighbors(_edges((0, 1), (1, 0)), size=2)
        assert neighbors == {0: {1}, 1: {0}}


class TestFindLeaves:
    """Leaves are taken from a snapshot of degrees."""

    def test_leaves_of_path(self) -> None:
        """Both ends of a path are leaves."""
        neighbors = {0: {1}, 1: {0, 2}, 2: {1, 3}, 3: {2}}
        assert find_leaves(neighbors) == {0: 1, 3: 2}

    def test_last_edge_peels_lower_index(self) -> None:
        """Two mutual leaves: only the lower index is peeled."""
        assert find_leaves({4: {7}, 7: {4}}) == {4: 7}

    def test_no_leaves(self) -> None:
        """A cycle has no leaves."""
        assert find_leaves({0: {1, 2}, 1: {0, 2}, 2: {0, 1}}) == {}


class TestExtractGenealogy:
    """Tests for leaf peeling."""

    def test_path(self) -> None:
        """A path is peeled from both ends toward the middle."""
        genealogy = extract_genealogy(_edges((0, 1), (1, 2), (2, 3)), size=4)

        assert genealogy.converged
        assert genealogy.parents == [1, 2, NO_PARENT, 2]

    def test_star(self) -> None:
        """All leaves of a star hang off its center."""
        genealogy = extract_genealogy(_edges((0, 1), (0, 2), (0, 3)), size=4)

        assert genealogy.converged
        assert genealogy.parents == [NO_PARENT, 0, 0, 0]

    def test_single_edge(self) -> None:
        """A two-member tree roots at the higher index."""
        genealogy = extract_genealogy(_edges((0, 1)), size=2)
        assert genealogy.parents == [1, NO_PARENT]

    def test_single_member(self) -> None:
        """A lone member is its own progenitor."""
        genealogy = extract_genealogy([], size=1)
        assert genealogy.converged
        assert genealogy.parents == [NO_PARENT]

    def test_degree_drop_waits_for_next_pass(self) -> None:
        """A vertex that becomes a leaf mid-pass is peeled in the next pass."""
        # 0 - 1 - 2 - 3 - 4 with 5 hanging off 3
        genealogy = extract_genealogy(_edges((0, 1), (1, 2), (2, 3), (3, 4), (3, 5)), size=6)

        assert genealogy.converged
        assert genealogy.parents == [1, 2, NO_PARENT, 2, 3, 3]

    @pytest.mark.parametrize("seed", range(20))
    def test_trees_always_converge(self, seed: int) -> None:
        """Any tree converges to exactly one progenitor."""
        rng = random.Random(seed)
        size = rng.randrange(1, 40)
        edges = _random_tree(size, rng)

        genealogy = extract_genealogy(edges, size)
        assert genealogy.converged
        assert genealogy.parents.count(NO_PARENT) == 1

        tree_edges = {frozenset((e.left, e.right)) for e in edges}
        for child, parent in enumerate(genealogy.parents):
            if parent != NO_PARENT:
                assert frozenset((child, parent)) in tree_edges

    def test_four_cycle_does_not_converge(self) -> None:
        """A cycle stalls peeling."""
        genealogy = extract_genealogy(_edges((0, 1), (1, 2), (2, 3), (0, 3)), size=4)

        assert not genealogy.converged
        assert genealogy.parents == [NO_PARENT] * 4

    def test_cycle_with_tail_does_not_converge(self) -> None:
        """Leaves outside a cycle are peeled before stalling."""
        genealogy = extract_genealogy(_edges((0, 1), (1, 2), (0, 2), (2, 3)), size=4)

        assert not genealogy.converged
        assert genealogy.parents[3] == 2

    def test_disconnected_does_not_converge(self) -> None:
        """Two separate trees leave two roots and stall."""
        genealogy = extract_genealogy(_edges((0, 1), (2, 3)), size=4)

        assert not genealogy.converged
        assert genealogy.parents == [1, NO_PARENT, 3, NO_PARENT]

    def test_isolated_member_does_not_converge(self) -> None:
        """A member outside every edge cannot be placed."""
        genealogy = extract_genealogy(_edges((0, 1)), size=3)
        assert not genealogy.converged


class TestGenealogy:
    """Tests for Genealogy tree queries."""

    @pytest.fixture
    def genealogy(self) -> Genealogy:
        """
        Structure:
            2
            ├── 1
            │   └── 0
            └── 3
        """
        return Genealogy(parents=[1, 2, NO_PARENT, 2])

    def test_progenitor(self, genealogy: Genealogy) -> None:
        """The only root is the progenitor."""
        assert genealogy.progenitor == 2
        assert genealogy.roots == [2]

    def test_progenitor_requires_convergence(self) -> None:
        """A stalled genealogy has no progenitor."""
        stalled = Genealogy(parents=[NO_PARENT, NO_PARENT], converged=False)
        with pytest.raises(ValueError, match="no single progenitor"):
            _ = stalled.progenitor

    def test_parent_of(self, genealogy: Genealogy) -> None:
        """Test getting a member's parent."""
        assert genealogy.parent_of(0) == 1
        assert genealogy.parent_of(2) is None

    def test_children_of(self, genealogy: Genealogy) -> None:
        """Test getting a member's children."""
        assert genealogy.children_of(2) == [1, 3]
        assert genealogy.children_of(0) == []

    def test_path_to_root(self, genealogy: Genealogy) -> None:
        """Test path from member to progenitor."""
        assert genealogy.path_to_root(0) == [0, 1, 2]
        assert genealogy.path_to_root(2) == [2]

    def test_path_to_root_detects_cycle(self) -> None:
        """A parent cycle is reported instead of looping."""
        with pytest.raises(ValueError, match="cycle"):
            Genealogy(parents=[1, 0]).path_to_root(0)

    def test_depth(self, genealogy: Genealogy) -> None:
        """Depth counts generations from the progenitor."""
        assert genealogy.depth(2) == 0
        assert genealogy.depth(3) == 1
        assert genealogy.depth(0) == 2

    def test_common_ancestor(self, genealogy: Genealogy) -> None:
        """Test finding the most recent common ancestor."""
        assert genealogy.common_ancestor(0, 3) == 2
        assert genealogy.common_ancestor(0, 1) == 1

    def test_iter_depth_first(self, genealogy: Genealogy) -> None:
        """Depth-first order starts at the progenitor."""
        assert list(genealogy.iter_depth_first()) == [2, 1, 0, 3]

    def test_lines(self, genealogy: Genealogy) -> None:
        """Text rendering is one entry per line with -1 for the progenitor."""
        assert genealogy.lines() == ["1", "2", "-1", "2"]

    def test_to_dict(self, genealogy: Genealogy) -> None:
        """Dictionary output for JSON."""
        assert genealogy.to_dict() == {
            "size": 4,
            "converged": True,
            "progenitor": 2,
            "parents": [1, 2, -1, 2],
        }
