"""
Bit vector population loading and validation.

Reads a population of N bit strings of length N (one per line, each
matching ``^[01]{N}$``) and validates it before any relation is computed.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

BIT_SYMBOLS = frozenset("01")
PERCENTAGE_PATTERN = re.compile(r"[0-9]+")


class PopulationError(ValueError):
    """
    A population data source is malformed.

    Attributes:
        line: 1-based line number of the offending line
        content: The offending line (empty when the line is missing)
    """

    def __init__(self, line: int, content: str, reason: str = "") -> None:
        self.line = line
        self.content = content
        self.reason = reason
        message = f"Error on line {line}: {content}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


def parse_mutation_percentage(text: str | int) -> int:
    """
    Parse the bitwise mutation probability as an integer percentage.

    Args:
        text: Percentage as given on the command line (e.g. "20")

    Returns:
        Integer percentage in [0, 100]

    Raises:
        ValueError: If text is not an integer between 0 and 100
    """
    digits = str(text).strip()
    percentage = int(digits) if PERCENTAGE_PATTERN.fullmatch(digits) else -1
    if not 0 <= percentage <= 100:
        raise ValueError(f"First argument '{text}' should be an integer between 0 and 100.")
    return percentage


@dataclass(frozen=True)
class BitVector:
    """
    A fixed-length vector of bits tagged with its population index.

    Attributes:
        index: Position of the vector in the population (0-based)
        bits: Bit string of "0" and "1" characters
    """

    index: int
    bits: str
    packed: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        unpacked = np.frombuffer(self.bits.encode("ascii"), dtype=np.uint8) - ord("0")
        object.__setattr__(self, "packed", np.packbits(unpacked))

    def __len__(self) -> int:
        return len(self.bits)


class Population:
    """
    A validated population of N bit vectors, each of length N.

    The population is immutable after construction. Vectors are referred
    to downstream by index.
    """

    def __init__(self, bit_vectors: list[BitVector]) -> None:
        self._bit_vectors = bit_vectors
        if bit_vectors:
            self._packed = np.vstack([bv.packed for bv in bit_vectors])
        else:
            self._packed = np.empty((0, 0), dtype=np.uint8)

    @classmethod
    def from_file(cls, path: Path | str, size: int | None = None) -> Population:
        """
        Load a population from a file of bit strings.

        Args:
            path: Path to data file, one bit string per line
            size: Expected population size (defaults to first line length)

        Returns:
            Validated Population

        Raises:
            FileNotFoundError: If file doesn't exist
            PopulationError: If the data is malformed
        """
        path = Path(path)

        with open(path) as f:
            return cls.from_lines(f, size=size)

    @classmethod
    def from_lines(cls, lines: Iterable[str], size: int | None = None) -> Population:
        """
        Build a population from bit string lines.

        Exactly ``size`` lines of ``size`` characters from "01" are
        required. Blank lines after the last vector are ignored.

        Args:
            lines: Bit strings, with or without trailing newlines
            size: Expected population size (defaults to first line length)

        Returns:
            Validated Population

        Raises:
            PopulationError: If the data is malformed
        """
        if size is not None and size < 1:
            raise ValueError(f"Population size must be positive, got {size}")

        bit_vectors: list[BitVector] = []
        stripped = _strip_newlines(lines)

        for line_number, bits in enumerate(stripped, start=1):
            if size is None:
                size = len(bits)
                if size == 0:
                    raise PopulationError(line_number, bits, "empty population")
            if len(bit_vectors) == size:
                if bits.strip():
                    raise PopulationError(line_number, bits, f"more than {size} lines")
                continue
            if len(bits) != size:
                raise PopulationError(line_number, bits, f"expected {size} bits")
            if not set(bits) <= BIT_SYMBOLS:
                raise PopulationError(line_number, bits, "bits must be 0 or 1")
            bit_vectors.append(BitVector(index=len(bit_vectors), bits=bits))

        if size is None:
            raise PopulationError(1, "", "empty population")
        if len(bit_vectors) < size:
            raise PopulationError(len(bit_vectors) + 1, "", f"expected {size} lines")

        return cls(bit_vectors)

    @property
    def size(self) -> int:
        """Return number of vectors (equal to vector length)."""
        return len(self._bit_vectors)

    @property
    def bit_vectors(self) -> list[BitVector]:
        """Return vectors in population order."""
        return self._bit_vectors

    @property
    def packed(self) -> np.ndarray:
        """Return an (N, ceil(N / 8)) uint8 matrix of packed vectors."""
        return self._packed

    def __getitem__(self, index: int) -> BitVector:
        return self._bit_vectors[index]

    def __len__(self) -> int:
        return len(self._bit_vectors)

    def __iter__(self) -> Iterator[BitVector]:
        return iter(self._bit_vectors)


def _strip_newlines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield line.rstrip("\r\n")
