"""
Genealogy extraction from a spanning graph.

Orients an undirected spanning graph into a rooted tree by peeling
leaves: vertexes with a single neighbor are recorded as children of that
neighbor and trimmed, pass after pass, until a single vertex (the
progenitor) is left.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from bvgenealogy.distance import Relation

# Parent entry of the progenitor
NO_PARENT = -1

Neighbors = dict[int, set[int]]


@dataclass
class Genealogy:
    """
    Result of orienting a spanning graph into a rooted tree.

    Attributes:
        parents: parents[n] is the parent of member n, or NO_PARENT
        converged: True if leaf peeling reduced the graph to one vertex
    """

    parents: list[int]
    converged: bool = True

    @property
    def size(self) -> int:
        return len(self.parents)

    @property
    def roots(self) -> list[int]:
        """Return every member without a parent."""
        return [n for n, parent in enumerate(self.parents) if parent == NO_PARENT]

    @property
    def progenitor(self) -> int:
        """
        Return the common ancestor of the whole population.

        Raises:
            ValueError: If the genealogy did not converge to a single root
        """
        roots = self.roots
        if not self.converged or len(roots) != 1:
            raise ValueError(f"Genealogy has no single progenitor: {len(roots)} roots")
        return roots[0]

    def parent_of(self, member: int) -> int | None:
        """Return the parent of member, or None for a root."""
        parent = self.parents[member]
        return None if parent == NO_PARENT else parent

    def children_of(self, member: int) -> list[int]:
        """Return the children of member in index order."""
        return [n for n, parent in enumerate(self.parents) if parent == member]

    def path_to_root(self, member: int) -> list[int]:
        """
        Get path from member to its root.

        Args:
            member: Starting population index

        Returns:
            Indices from member to root (inclusive)
        """
        path = [member]
        parent = self.parent_of(member)
        while parent is not None:
            if len(path) > self.size:
                raise ValueError(f"Parent cycle reached from member {member}")
            path.append(parent)
            parent = self.parent_of(parent)
        return path

    def depth(self, member: int) -> int:
        """Return number of generations between member and its root."""
        return len(self.path_to_root(member)) - 1

    def common_ancestor(self, a: int, b: int) -> int | None:
        """Return the most recent common ancestor of a and b, if any."""
        ancestors = set(self.path_to_root(a))
        for member in self.path_to_root(b):
            if member in ancestors:
                return member
        return None

    def iter_depth_first(self) -> Iterator[int]:
        """
        Iterate from the progenitor in depth-first order.

        Yields:
            Population indices, children in index order
        """
        children: dict[int, list[int]] = {}
        for member, parent in enumerate(self.parents):
            if parent != NO_PARENT:
                children.setdefault(parent, []).append(member)

        stack = [self.progenitor]
        while stack:
            member = stack.pop()
            yield member
            stack.extend(reversed(children.get(member, [])))

    def lines(self) -> list[str]:
        """Render one parent entry per line, in member order."""
        return [str(parent) for parent in self.parents]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "size": self.size,
            "converged": self.converged,
            "progenitor": self.progenitor if self.converged else None,
            "parents": list(self.parents),
        }


def discover_neighbors(edges: Iterable[Relation], size: int) -> Neighbors:
    """
    Map every member to the set of its neighbors in edges.

    Members touched by no edge map to an empty set.
    """
    neighbors: Neighbors = {member: set() for member in range(size)}
    for edge in edges:
        neighbors[edge.left].add(edge.right)
        neighbors[edge.right].add(edge.left)
    return neighbors


def find_leaves(neighbors: Neighbors) -> dict[int, int]:
    """
    Return the leaves to peel in this pass, mapped to their parents.

    Leaves come from the degrees at the start of the pass. When two leaves
    are each other's only neighbor, only the lower index is peeled.
    """
    snapshot = {
        member: next(iter(adjacent))
        for member, adjacent in sorted(neighbors.items())
        if len(adjacent) == 1
    }
    return {
        leaf: parent
        for leaf, parent in snapshot.items()
        if not (snapshot.get(parent) == leaf and parent < leaf)
    }


def extract_genealogy(edges: Iterable[Relation], size: int) -> Genealogy:
    """
    Orient a spanning graph into a rooted tree.

    Args:
        edges: Edges of a graph spanning a population
        size: Population size

    Returns:
        Genealogy; converged is False if peeling stalled with more than one
        vertex left (the graph had a cycle or was disconnected)
    """
    neighbors = discover_neighbors(edges, size)
    parents = [NO_PARENT] * size

    while len(neighbors) > 1:
        leaves = find_leaves(neighbors)
        if not leaves:
            return Genealogy(parents=parents, converged=False)

        for leaf, parent in leaves.items():
            parents[leaf] = parent
            neighbors[parent].discard(leaf)
        for leaf in leaves:
            del neighbors[leaf]

    return Genealogy(parents=parents, converged=bool(neighbors))
