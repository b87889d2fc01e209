"""
Pytest configuration and fixtures for bvgenealogy tests.
"""

from pathlib import Path

import pytest


@pytest.fixture
def chain_lines() -> list[str]:
    """
    Return a four-member population whose closest relations form a path.

    Hamming distances: (0,1)=1 (0,2)=2 (0,3)=3 (1,2)=1 (1,3)=2 (2,3)=1
    """
    return ["0000", "0001", "0011", "0111"]


@pytest.fixture
def star_lines() -> list[str]:
    """
    Return a six-member population with member 0 one bit from every other.

    Structure (mutation 0%):
        0
        ├── 1
        ├── 2
        ├── 3
        ├── 4
        └── 5
    """
    return ["000000", "100000", "010000", "001000", "000100", "000010"]


@pytest.fixture
def cycle_lines() -> list[str]:
    """
    Return a five-member population whose spanning graph closes cycles.

    Members 0-1-2-3 form a 4-cycle of distance-1 relations, and member 4
    only joins at distance 3, after the cycle edges have been added.
    """
    return ["00000", "00001", "00011", "00010", "11100"]


@pytest.fixture
def write_population(tmp_path: Path):
    """Return a helper that writes bit strings to a data file."""

    def _write(lines: list[str], name: str = "genes.data") -> Path:
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines))
        return path

    return _write
