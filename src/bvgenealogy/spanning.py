"""
Spanning graph construction over population relations.

Relations are taken from closest to most distant and greedily joined into
connected components until one component covers the whole population.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from bvgenealogy.distance import Relation, order_relations


@dataclass
class ConnectedGraph:
    """
    A connected component built while constructing a spanning graph.

    Attributes:
        vertexes: Population indices in this component
        edges: Relations added to this component, in insertion order
    """

    vertexes: set[int] = field(default_factory=set)
    edges: list[Relation] = field(default_factory=list)

    def add(self, relation: Relation) -> None:
        """Add relation and both of its endpoints."""
        self.vertexes.add(relation.left)
        self.vertexes.add(relation.right)
        self.edges.append(relation)

    def merge_with(self, other: ConnectedGraph) -> None:
        """Absorb the vertexes and edges of other."""
        self.vertexes.update(other.vertexes)
        self.edges.extend(other.edges)

    def full(self, size: int) -> bool:
        """True if this graph contains every member of a population of size."""
        return len(self.vertexes) >= size

    def __contains__(self, vertex: int) -> bool:
        return vertex in self.vertexes


class DisjointSet:
    """Union-find over integers added on first sight, with union by size."""

    def __init__(self) -> None:
        self._parent: dict[int, int] = {}
        self._size: dict[int, int] = {}

    def __contains__(self, item: int) -> bool:
        return item in self._parent

    def add(self, item: int) -> None:
        if item not in self._parent:
            self._parent[item] = item
            self._size[item] = 1

    def find(self, item: int) -> int:
        parent = self._parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def union(self, a: int, b: int) -> int:
        """Join the sets holding a and b and return the surviving root."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return root_a
        if self._size[root_a] < self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._size[root_a] += self._size.pop(root_b)
        return root_a


class SpanningGraphBuilder:
    """
    Greedy builder of a graph spanning a population.

    Components are kept in an arena of slots; a disjoint set maps every
    vertex seen so far to the root that owns its slot.
    """

    def __init__(self, size: int) -> None:
        """
        Initialize builder.

        Args:
            size: Population size the result must cover
        """
        self.size = size
        self._arena: dict[int, ConnectedGraph] = {}
        self._slots: dict[int, int] = {}
        self._next_slot = 0
        self._owners = DisjointSet()

    @property
    def components(self) -> list[ConnectedGraph]:
        """Return the live components, oldest first."""
        return list(self._arena.values())

    def add(self, relation: Relation) -> ConnectedGraph:
        """
        Add relation to the component it touches.

        Starts a new component when neither endpoint has been seen, and
        merges the two components when the relation joins them. A relation
        whose endpoints already share a component is still added to it.

        Returns:
            The component now holding relation
        """
        graph, _ = self._place(relation)
        return graph

    def build(self, relations: Iterable[Relation]) -> ConnectedGraph | None:
        """
        Find a graph spanning the population that minimizes relation distance.

        Only a component that grew from an existing one is checked for
        coverage, so a relation starting a new component never completes
        the graph.

        Args:
            relations: Candidate relations in any order

        Returns:
            The first component to cover all members, or None if the
            relations cannot connect the whole population
        """
        for relation in order_relations(relations):
            graph, started = self._place(relation)
            if not started and graph.full(self.size):
                return graph
        return None

    def _place(self, relation: Relation) -> tuple[ConnectedGraph, bool]:
        """Add relation and report whether it started a new component."""
        left, right = relation.left, relation.right
        touched = [self._owners.find(v) for v in (left, right) if v in self._owners]

        started = not touched
        if started:
            self._owners.add(left)
            self._owners.add(right)
            root = self._owners.union(left, right)
            graph = ConnectedGraph()
            self._slots[root] = self._next_slot
            self._next_slot += 1
            self._arena[self._slots[root]] = graph
        elif len(touched) == 2 and touched[0] != touched[1]:
            graph = self._merge(touched[0], touched[1])
        else:
            for vertex in (left, right):
                self._owners.add(vertex)
            root = touched[0]
            survivor = self._owners.union(left, right)
            self._slots[survivor] = self._slots.pop(root)
            graph = self._arena[self._slots[survivor]]

        graph.add(relation)
        return graph, started

    def _merge(self, root_a: int, root_b: int) -> ConnectedGraph:
        slot_a, slot_b = self._slots.pop(root_a), self._slots.pop(root_b)
        survivor = self._owners.union(root_a, root_b)
        if survivor == root_b:
            slot_a, slot_b = slot_b, slot_a
        graph = self._arena[slot_a]
        graph.merge_with(self._arena.pop(slot_b))
        self._slots[survivor] = slot_a
        return graph


def build_spanning_graph(relations: Iterable[Relation], size: int) -> ConnectedGraph | None:
    """
    Build a graph spanning a population of size members.

    Returns:
        ConnectedGraph covering every member, or None on failure
    """
    return SpanningGraphBuilder(size).build(relations)
