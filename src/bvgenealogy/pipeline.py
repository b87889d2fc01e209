"""
End-to-end genealogy inference.

Population -> pairwise relations -> spanning graph -> genealogy.
"""

from __future__ import annotations

from bvgenealogy.distance import DistanceMetric, find_all_relations
from bvgenealogy.genealogy import Genealogy, extract_genealogy
from bvgenealogy.population import Population
from bvgenealogy.spanning import build_spanning_graph


class GenealogyError(Exception):
    """Inference finished without a genealogy for the population."""


class PopulationNotRelatedError(GenealogyError):
    """No spanning graph covers the whole population."""

    def __init__(self) -> None:
        super().__init__("Cannot relate entire population.")


class GenealogyNotConvergedError(GenealogyError):
    """Leaf peeling stalled with more than one member left."""

    def __init__(self, genealogy: Genealogy) -> None:
        self.genealogy = genealogy
        super().__init__("The genealogy did not converge.")


def infer_genealogy(population: Population, mutation_percentage: int) -> Genealogy:
    """
    Infer the parent of every member of a population.

    Args:
        population: Validated population of N vectors of length N
        mutation_percentage: Bitwise mutation probability as a percentage

    Returns:
        Converged Genealogy with a single progenitor

    Raises:
        ValueError: If mutation_percentage is outside [0, 100]
        PopulationNotRelatedError: If the relations cannot span the population
        GenealogyNotConvergedError: If the spanning graph is not a tree
    """
    metric = DistanceMetric(size=population.size, mutation_percentage=mutation_percentage)
    return infer_with_metric(population, metric)


def infer_with_metric(population: Population, metric: DistanceMetric) -> Genealogy:
    """
    Infer the parent of every member of a population under a prepared metric.

    Raises:
        ValueError: If metric was configured for a different population size
        PopulationNotRelatedError: If the relations cannot span the population
        GenealogyNotConvergedError: If the spanning graph is not a tree
    """
    if metric.size != population.size:
        raise ValueError(
            f"Metric is for {metric.size} members but the population has {population.size}"
        )
    relations = find_all_relations(population, metric)


    graph = build_spanning_graph(relations, population.size)
    if graph is None:
        raise PopulationNotRelatedError()

    genealogy = extract_genealogy(graph.edges, population.size)
    if not genealogy.converged:
        raise GenealogyNotConvergedError(genealogy)
    return genealogy
