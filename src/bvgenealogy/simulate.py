"""
Synthetic populations with a known genealogy.

Starts from a random progenitor and grows the population one member at a
time: each new member is a mutated copy of a randomly chosen existing
member. The population is shuffled before it is returned, and the parent
array is remapped to the shuffled order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from bvgenealogy.genealogy import NO_PARENT
from bvgenealogy.population import Population


@dataclass
class SimulatedPopulation:
    """
    A generated population and its true genealogy.

    Attributes:
        genes: Bit strings in population order
        parents: True parent of each member, NO_PARENT for the progenitor
    """

    genes: list[str]
    parents: list[int]

    @property
    def population(self) -> Population:
        return Population.from_lines(self.genes)

    def write(self, genes_path: Path | str, parents_path: Path | str) -> None:
        """Write genes and parents files, one entry per line."""
        with open(genes_path, "w", newline="\n") as f:
            for bits in self.genes:
                f.write(bits + "\n")
        with open(parents_path, "w", newline="\n") as f:
            for parent in self.parents:
                f.write(f"{parent}\n")


def simulate_population(
    size: int,
    mutation_percentage: int,
    seed: int | None = None,
    genesis_bit_probability: float = 0.5,
) -> SimulatedPopulation:
    """
    Generate a population of size members with vectors of length size.

    Args:
        size: Population size and vector length
        mutation_percentage: Per-bit probability of mutation, as a percentage
        seed: Seed for reproducible output
        genesis_bit_probability: Probability of each progenitor bit being 1

    Returns:
        SimulatedPopulation with shuffled genes and matching parents
    """
    if size < 1:
        raise ValueError(f"Population size must be positive, got {size}")
    if not 0 <= mutation_percentage <= 100:
        raise ValueError(
            f"Mutation percentage must be between 0 and 100, got {mutation_percentage}"
        )

    rng = np.random.default_rng(seed)
    mutation_probability = mutation_percentage / 100

    genomes = np.empty((size, size), dtype=bool)
    genomes[0] = rng.random(size) < genesis_bit_probability
    child_to_parent = np.full(size, NO_PARENT, dtype=np.int64)

    for index in range(1, size):
        parent = rng.integers(0, index)
        child_to_parent[index] = parent
        genomes[index] = genomes[parent] ^ (rng.random(size) < mutation_probability)

    permutation = rng.permutation(size)
    position_of = np.empty(size, dtype=np.int64)
    position_of[permutation] = np.arange(size)

    symbols = genomes[permutation].astype(np.uint8) + ord("0")
    genes = [row.tobytes().decode("ascii") for row in symbols]
    parents = [
        NO_PARENT if child_to_parent[i] == NO_PARENT else int(position_of[child_to_parent[i]])
        for i in permutation
    ]
    return SimulatedPopulation(genes=genes, parents=parents)
