"""
bvgenealogy: Bit vector genealogy inference.

Infers the parent of every member of a population of fixed-length bit
vectors from a minimum-distance spanning graph, peeled into a rooted tree
whose root is the population's progenitor.
"""

__version__ = "0.1.0"

from bvgenealogy.distance import DistanceMetric, Relation
from bvgenealogy.genealogy import NO_PARENT, Genealogy, extract_genealogy
from bvgenealogy.pipeline import (
    GenealogyError,
    GenealogyNotConvergedError,
    PopulationNotRelatedError,
    infer_genealogy,
    infer_with_metric,
)
from bvgenealogy.population import BitVector, Population, PopulationError
from bvgenealogy.spanning import ConnectedGraph, build_spanning_graph

__all__ = [
    "BitVector",
    "ConnectedGraph",
    "DistanceMetric",
    "Genealogy",
    "GenealogyError",
    "GenealogyNotConvergedError",
    "NO_PARENT",
    "Population",
    "PopulationError",
    "PopulationNotRelatedError",
    "Relation",
    "build_spanning_graph",
    "extract_genealogy",
    "infer_genealogy",
    "infer_with_metric",
    "__version__",
]
