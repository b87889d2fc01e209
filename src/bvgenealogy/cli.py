"""
Command-line interface for bvgenealogy.

Provides pipeline-friendly CLI with proper exit codes and output formats.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TextIO

import click

from bvgenealogy import __version__
from bvgenealogy.distance import DistanceMetric
from bvgenealogy.genealogy import Genealogy
from bvgenealogy.pipeline import (
    GenealogyNotConvergedError,
    PopulationNotRelatedError,
    infer_with_metric,
)
from bvgenealogy.population import Population, PopulationError, parse_mutation_percentage
from bvgenealogy.simulate import simulate_population
from bvgenealogy.validation import check_parents, compare_parents, load_parents

EXIT_FILE_NOT_FOUND = 10
EXIT_INVALID_INPUT = 11
EXIT_NOT_RELATED = 20
EXIT_NOT_CONVERGED = 21
EXIT_UNEXPECTED = 99

USAGE_NOTE = """
Where: PROB is the bitwise probability of mutation
       as an integer percentage (20 for example).
       DATA is a file of N bit strings of length N.
Each line matches the regular expression '^[01]{N}$',
and there are N lines in DATA.
"""


@click.group()
@click.version_option(version=__version__, prog_name="bvgenealogy")
def main() -> None:
    """
    bvgenealogy: Bit vector genealogy inference.

    Reconstructs the parent of every member of a population of bit vectors
    from a spanning graph of normalized bit distances.
    """
    pass


@main.command(epilog=USAGE_NOTE)
@click.argument("prob", type=str)
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--size",
    "-n",
    type=int,
    default=None,
    help="Population size N [default: length of the first line]",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file [default: stdout]",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format [default: text]",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress messages")
def infer(
    prob: str,
    data: Path,
    size: int | None,
    output: Path | None,
    output_format: str,
    quiet: bool,
) -> None:
    """
    Infer the parent of every bit vector in DATA.

    Prints one parent index per line in population order; the progenitor
    has parent -1.
    """
    try:
        mutation_percentage = parse_mutation_percentage(prob)

        _status(f"Loading population from {data}...", quiet)
        population = Population.from_file(data, size=size)

        metric = DistanceMetric(size=population.size, mutation_percentage=mutation_percentage)
        _status(
            f"Relating {population.size} vectors (expected mutations: {metric.expected})...",
            quiet,
        )
        genealogy = infer_with_metric(population, metric)

        if output:
            with open(output, "w") as f:
                _write_result(genealogy, metric, f, output_format)
            _status(f"Genealogy written to {output}", quiet)
        else:
            _write_result(genealogy, metric, sys.stdout, output_format)

    except FileNotFoundError as e:
        click.echo(f"Error: File not found: {e}", err=True)
        sys.exit(EXIT_FILE_NOT_FOUND)
    except PopulationError as e:
        click.echo(str(e), err=True)
        sys.exit(EXIT_INVALID_INPUT)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(USAGE_NOTE, err=True)
        sys.exit(EXIT_INVALID_INPUT)
    except PopulationNotRelatedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_NOT_RELATED)
    except GenealogyNotConvergedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_NOT_CONVERGED)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_UNEXPECTED)


def _status(message: str, quiet: bool) -> None:
    if not quiet:
        click.echo(message, err=True)


def _write_result(
    genealogy: Genealogy, metric: DistanceMetric, file: TextIO, format: str
) -> None:
    """Write genealogy to file."""
    if format == "json":
        result = genealogy.to_dict()
        result["mutation_percentage"] = metric.mutation_percentage
        result["expected_distance"] = metric.expected
        json.dump(result, file, indent=2)
        file.write("\n")
    elif format == "text":
        for line in genealogy.lines():
            file.write(line + "\n")


@main.command()
@click.option(
    "--size",
    "-n",
    type=click.IntRange(min=1),
    default=500,
    help="Population size and vector length [default: 500]",
)
@click.option(
    "--mutation-rate",
    "-p",
    type=click.IntRange(0, 100),
    default=20,
    help="Bitwise mutation probability as an integer percentage [default: 20]",
)
@click.option("--seed", type=int, default=None, help="Random seed [default: unseeded]")
@click.option(
    "--genes",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("bitvectors-genes.data"),
    help="Output genes file [default: bitvectors-genes.data]",
)
@click.option(
    "--parents",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("bitvectors-parents.data"),
    help="Output parents file [default: bitvectors-parents.data]",
)
def simulate(size: int, mutation_rate: int, seed: int | None, genes: Path, parents: Path) -> None:
    """
    Generate a random population with a known genealogy.

    Writes the bit vectors to --genes and their true parents to --parents.
    """
    click.echo(f"Simulating {size} members at {mutation_rate}% mutation...", err=True)
    simulated = simulate_population(size, mutation_rate, seed=seed)
    simulated.write(genes, parents)
    click.echo(f"  Genes written to {genes}", err=True)
    click.echo(f"  Parents written to {parents}", err=True)


@main.command()
@click.argument("parents", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--expected",
    "-e",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Known parents file to compare against",
)
@click.option(
    "--size",
    "-n",
    type=int,
    default=None,
    help="Required number of entries [default: any]",
)
def validate(parents: Path, expected: Path | None, size: int | None) -> None:
    """
    Check a parent file, and compare it with a known genealogy.

    Exits 0 when PARENTS is a single rooted tree (and identical to
    --expected when given), 1 otherwise.
    """
    try:
        called = load_parents(parents)
        expected_parents = load_parents(expected) if expected else None
        if size is None and expected_parents is not None:
            size = len(expected_parents)

        report = check_parents(called, expected_size=size)
        click.echo(f"Entries: {report.size}")
        click.echo(f"Roots: {len(report.roots)}")
        if report.out_of_range:
            click.echo(f"Invalid parents: {len(report.out_of_range)}")
        if report.cyclic:
            click.echo(f"Members in parent cycles: {len(report.cyclic)}")

        ok = report.ok
        if report.expected_size is not None and report.size != report.expected_size:
            click.echo(f"Expected entries: {report.expected_size}")
        elif expected_parents is not None:
            metrics = compare_parents(expected_parents, called)
            click.echo(
                f"Matching parents: {metrics.matching}/{metrics.total} "
                f"({metrics.exact_match_rate:.2%})"
            )
            click.echo(f"Progenitor match: {'yes' if metrics.progenitor_match else 'no'}")
            ok = ok and metrics.identical

        sys.exit(0 if ok else 1)

    except ValueError as e:
        click.echo(f"Error: Invalid input: {e}", err=True)
        sys.exit(EXIT_INVALID_INPUT)


if __name__ == "__main__":
    main()
