"""
Validation of inferred genealogies.

Loads parent files, checks that a parent array describes a single rooted
tree, and compares an inferred genealogy with a known one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from bvgenealogy.genealogy import NO_PARENT


def load_parents(path: Path | str) -> list[int]:
    """
    Load a parent array, one integer per line.

    Args:
        path: Path to parent file

    Returns:
        List of parent indices (NO_PARENT for roots)

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If a line is not an integer
    """
    path = Path(path)

    parents: list[int] = []
    with open(path) as f:
        for line_number, line in enumerate(f, start=1):
            text = line.strip()
            if not text:
                continue
            try:
                parents.append(int(text))
            except ValueError:
                raise ValueError(f"Error on line {line_number}: {text}") from None

    return parents


@dataclass
class SanityReport:
    """
    Structural checks on a parent array.

    Attributes:
        size: Number of entries
        expected_size: Required number of entries, if known
        roots: Members without a parent
        out_of_range: Members whose parent is not a valid index
        cyclic: Members whose ancestry never reaches a root
    """

    size: int
    expected_size: int | None = None
    roots: list[int] = field(default_factory=list)
    out_of_range: list[int] = field(default_factory=list)
    cyclic: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if the parent array is a single rooted tree."""
        if self.expected_size is not None and self.size != self.expected_size:
            return False
        return len(self.roots) == 1 and not self.out_of_range and not self.cyclic


def check_parents(parents: list[int], expected_size: int | None = None) -> SanityReport:
    """
    Check that parents describes one rooted tree.

    Args:
        parents: Parent array to check
        expected_size: Required length, if known

    Returns:
        SanityReport listing any problems found
    """
    size = len(parents)
    report = SanityReport(size=size, expected_size=expected_size)

    for member, parent in enumerate(parents):
        if parent == NO_PARENT:
            report.roots.append(member)
        elif not 0 <= parent < size or parent == member:
            report.out_of_range.append(member)

    if report.out_of_range:
        return report

    # Members already known to reach a root
    rooted: set[int] = set(report.roots)
    for member in range(size):
        path: list[int] = []
        current = member
        while current not in rooted and len(path) <= size:
            path.append(current)
            current = parents[current]
        if current in rooted:
            rooted.update(path)
        else:
            report.cyclic.append(member)

    return report


@dataclass
class ComparisonMetrics:
    """
    Agreement between an expected and an inferred parent array.

    Attributes:
        total: Number of members compared
        matching: Members whose inferred parent equals the expected one
        progenitor_match: True if both arrays have the same single root
        mismatched: Members whose parents differ
    """

    total: int
    matching: int
    progenitor_match: bool
    mismatched: list[int] = field(default_factory=list)

    @property
    def exact_match_rate(self) -> float:
        return self.matching / self.total if self.total else 0.0

    @property
    def identical(self) -> bool:
        return self.matching == self.total


def compare_parents(expected: list[int], called: list[int]) -> ComparisonMetrics:
    """
    Compare an inferred parent array against a known one.

    Args:
        expected: Known parents
        called: Inferred parents

    Returns:
        ComparisonMetrics with match information

    Raises:
        ValueError: If the arrays have different lengths
    """
    if len(expected) != len(called):
        raise ValueError(
            f"Parent arrays differ in length: expected {len(expected)}, got {len(called)}"
        )

    mismatched = [n for n, (e, c) in enumerate(zip(expected, called)) if e != c]
    expected_roots = [n for n, p in enumerate(expected) if p == NO_PARENT]
    called_roots = [n for n, p in enumerate(called) if p == NO_PARENT]

    return ComparisonMetrics(
        total=len(expected),
        matching=len(expected) - len(mismatched),
        progenitor_match=len(expected_roots) == 1 and expected_roots == called_roots,
        mismatched=mismatched,
    )
