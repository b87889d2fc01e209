"""
Normalized bit distance between population members.

Two vectors that differ by exactly the expected number of mutated bits
are the closest possible relations (distance 0). Vectors that differ by
more or fewer bits than expected are less closely related.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from operator import attrgetter

import numpy as np

from bvgenealogy.population import BitVector, Population

# Set bits in each byte value, for popcount over packed vectors
POPCOUNT = np.array([bin(value).count("1") for value in range(256)], dtype=np.uint8)

RELATION_ORDER = attrgetter("nbd", "left", "right")


def hamming_distances(vector: np.ndarray, others: np.ndarray) -> np.ndarray:
    """
    Count differing bits between one packed vector and many.

    Args:
        vector: Packed uint8 vector of shape (B,)
        others: Packed uint8 vectors of shape (M, B)

    Returns:
        int64 array of M Hamming distances
    """
    return POPCOUNT[np.bitwise_xor(others, vector)].sum(axis=-1, dtype=np.int64)


@dataclass(frozen=True)
class DistanceMetric:
    """
    Normalized bit distance for a population of fixed-length vectors.

    Attributes:
        size: Vector length (and population size)
        mutation_percentage: Bitwise probability of mutation per generation
        expected: Expected number of mutated bits, floor(size * p / 100)
    """

    size: int
    mutation_percentage: int
    expected: int = field(init=False)

    def __post_init__(self) -> None:
        if not 0 <= self.mutation_percentage <= 100:
            raise ValueError(
                f"Mutation percentage must be between 0 and 100, got {self.mutation_percentage}"
            )
        object.__setattr__(self, "expected", self.size * self.mutation_percentage // 100)

    def distance(self, lhs: BitVector, rhs: BitVector) -> int:
        """Return |hamming(lhs, rhs) - expected|."""
        hamming = int(hamming_distances(lhs.packed, rhs.packed))
        return abs(hamming - self.expected)

    def normalize(self, hamming: np.ndarray) -> np.ndarray:
        """Normalize an array of Hamming distances to the expected count."""
        return np.abs(hamming - self.expected)


@dataclass(frozen=True)
class Relation:
    """
    Candidate edge between two population members.

    Attributes:
        left: Index of one member
        right: Index of the other member
        nbd: Normalized bit distance between them
    """

    left: int
    right: int
    nbd: int


@dataclass(frozen=True, eq=False)
class RelationTable:
    """
    All pairwise relations of a population, stored column-wise.

    Rows are held in lexicographic (left, right) order.
    """

    left: np.ndarray
    right: np.ndarray
    nbd: np.ndarray

    def __len__(self) -> int:
        return len(self.nbd)

    def __iter__(self) -> Iterator[Relation]:
        for row in range(len(self)):
            yield self._relation(row)

    def ordered(self) -> Iterator[Relation]:
        """
        Yield relations from closest to most distant.

        Equal distances keep (left, right) order, so this matches
        sorting by (nbd, left, right).
        """
        for row in np.argsort(self.nbd, kind="stable"):
            yield self._relation(int(row))

    def _relation(self, row: int) -> Relation:
        return Relation(
            left=int(self.left[row]),
            right=int(self.right[row]),
            nbd=int(self.nbd[row]),
        )


def order_relations(relations: Iterable[Relation]) -> Iterator[Relation]:
    """
    Order relations by ascending normalized bit distance.

    Ties are broken by (left, right) so the order is deterministic.
    """
    if isinstance(relations, RelationTable):
        return relations.ordered()
    return iter(sorted(relations, key=RELATION_ORDER))


def find_all_relations(population: Population, metric: DistanceMetric) -> RelationTable:
    """
    Compute the relation between every unordered pair of members.

    Args:
        population: Validated population
        metric: Distance metric configured for this population

    Returns:
        RelationTable with N * (N - 1) / 2 rows
    """
    size = population.size
    count = size * (size - 1) // 2
    packed = population.packed

    left = np.empty(count, dtype=np.int32)
    right = np.empty(count, dtype=np.int32)
    nbd = np.empty(count, dtype=np.int64)

    offset = 0
    for index in range(size - 1):
        end = offset + size - 1 - index
        hamming = hamming_distances(packed[index], packed[index + 1 :])
        left[offset:end] = index
        right[offset:end] = np.arange(index + 1, size, dtype=np.int32)
        nbd[offset:end] = metric.normalize(hamming)
        offset = end

    return RelationTable(left=left, right=right, nbd=nbd)
