"""
Single entry point for running a placement strategy.

    >>> grid = solve("hill_climbing", products, xsize=4, ysize=3,
    ...              limit=-1, similarity=table)
"""

from typing import Dict, Iterable, Optional, Union

from ..catalog import Product, SimilarityTable
from ..grid.layout import Coordinate, Grid, validate_dimensions
from .base import Algorithm, PlacementAlgorithm, validate_limit
from .exhaustive import ExhaustiveSearch
from .hill_climbing import HillClimbingSearch


def create_algorithm(choice: Union[Algorithm, str, int]) -> PlacementAlgorithm:
    """Instantiate the strategy named by `choice`."""
    algorithm = Algorithm.parse(choice)
    if algorithm is Algorithm.EXHAUSTIVE:
        return ExhaustiveSearch()
    if algorithm is Algorithm.HILL_CLIMBING:
        return HillClimbingSearch()
    raise AssertionError(f"unhandled algorithm {algorithm}")


def validate_request(choice: Union[Algorithm, str, int], xsize: int, ysize: int, limit: int) -> Algorithm:
    """
    Check a placement request without running it.

    Raises:
        ConfigurationError: Unknown selector, bad dimensions or limit == 0
    """
    algorithm = Algorithm.parse(choice)
    validate_dimensions(xsize, ysize)
    validate_limit(limit)
    return algorithm


def solve(
    algorithm: Union[Algorithm, str, int],
    products: Iterable[Union[Product, str]],
    xsize: int,
    ysize: int,
    limit: int,
    similarity: SimilarityTable,
    prior_coordinates: Optional[Dict[str, Coordinate]] = None
) -> Grid:
    """Run the selected strategy and return the grid it produced."""
    validate_request(algorithm, xsize, ysize, limit)
    return create_algorithm(algorithm).solve(
        products, xsize, ysize, limit, similarity, prior_coordinates
    )
