"""
Placement Algorithm Interface

This module defines what every placement strategy shares:

- Algorithm: the tagged selector for the available strategies
- WorkLimit: the caller-supplied cap on search effort
- PlacementProblem: the encoded search input (names, sizes, matrices)
- SearchStats: what the last run did
- PlacementAlgorithm: validation, encoding, timing and decoding around
  a strategy-specific _search() step

Limit semantics:
    limit < 0   unbounded
    limit == 0  invalid, rejected with ConfigurationError
    limit > 0   caps candidates (exhaustive) or swap evaluations (hill climbing)

All validation happens before any search work begins.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union
import logging

import numpy as np

from ..catalog import Product, SimilarityTable
from ..exceptions import CapacityError, ConfigurationError
from ..grid.layout import (
    Coordinate, Grid, adjacency_edges, adjacency_score, assignment_to_grid,
    empty_grid, neighbour_lists, padded_similarity, validate_dimensions
)
from ..timing import Timer

logger = logging.getLogger(__name__)


class Algorithm(Enum):
    """Available placement strategies."""
    EXHAUSTIVE = "exhaustive"
    HILL_CLIMBING = "hill_climbing"

    @classmethod
    def parse(cls, choice: Union["Algorithm", str, int]) -> "Algorithm":
        """
        Resolve a user-facing selector to an Algorithm.

        Accepts the enum itself, its value, a few aliases, and the numeric
        selectors 1 (exhaustive) and 2 (hill climbing).

        Raises:
            ConfigurationError: If the selector names no known strategy
        """
        if isinstance(choice, cls):
            return choice
        if isinstance(choice, int) and not isinstance(choice, bool):
            if choice in _NUMERIC_SELECTORS:
                return _NUMERIC_SELECTORS[choice]
        elif isinstance(choice, str):
            key = choice.strip().lower().replace("-", "_").replace(" ", "_")
            if key in _ALIASES:
                return _ALIASES[key]
        raise ConfigurationError(f"Invalid algorithm: {choice!r}")


_NUMERIC_SELECTORS = {1: Algorithm.EXHAUSTIVE, 2: Algorithm.HILL_CLIMBING}

_ALIASES = {
    "exhaustive": Algorithm.EXHAUSTIVE,
    "brute_force": Algorithm.EXHAUSTIVE,
    "bruteforce": Algorithm.EXHAUSTIVE,
    "hill_climbing": Algorithm.HILL_CLIMBING,
    "hillclimbing": Algorithm.HILL_CLIMBING,
    "hill": Algorithm.HILL_CLIMBING,
}


def validate_limit(limit: int) -> None:
    if limit == 0:
        raise ConfigurationError("Search limit cannot be 0 (use a negative limit for unbounded search)")


class WorkLimit:
    """
    Counter for units of search work against a limit.

    Example:
        >>> budget = WorkLimit(2)
        >>> budget.consume(); budget.consume()
        >>> budget.exhausted
        True
    """

    def __init__(self, limit: int):
        validate_limit(limit)
        self.limit = limit
        self.used = 0

    @property
    def unbounded(self) -> bool:
        return self.limit < 0

    @property
    def exhausted(self) -> bool:
        return not self.unbounded and self.used >= self.limit

    def consume(self, amount: int = 1) -> None:
        self.used += amount


@dataclass
class PlacementProblem:
    """
    Encoded search input.

    Attributes:
        names: Product names in canonical (sorted) order; item i is names[i]
        rows: Grid rows (shelf ysize)
        cols: Grid columns (shelf xsize)
        matrix: Shape (n, n) similarity matrix over names
        padded: Shape (n+1, n+1) matrix where index n is the empty cell
        edges: Shape (E, 2) neighbour pairs as flat cell indices
        neighbours: Flat neighbour indices per cell
    """
    names: List[str]
    rows: int
    cols: int
    matrix: np.ndarray
    padded: np.ndarray
    edges: np.ndarray
    neighbours: List[List[int]]

    @property
    def num_items(self) -> int:
        return len(self.names)

    @property
    def num_cells(self) -> int:
        return self.rows * self.cols

    @property
    def empty(self) -> int:
        """Item index used for an empty cell."""
        return len(self.names)

    def score(self, assignment: Iterable[int]) -> float:
        return adjacency_score(np.asarray(list(assignment), dtype=np.int64), self.padded, self.edges)


@dataclass
class SearchStats:
    """
    Summary of the last search run.

    Attributes:
        algorithm: Strategy that ran
        score: Objective value of the returned grid
        work: Units of work consumed against the limit
        limit: The limit the run was given
        limit_reached: Whether the run stopped because of the limit
        elapsed_ms: Wall-clock time of the search step
    """
    algorithm: Algorithm
    score: float
    work: int
    limit: int
    limit_reached: bool
    elapsed_ms: float = 0.0

    def summary(self) -> str:
        limit = "unbounded" if self.limit < 0 else str(self.limit)
        return (f"{self.algorithm.value}: score={self.score:.4f} work={self.work} "
                f"limit={limit} limit_reached={self.limit_reached} "
                f"time={self.elapsed_ms:.2f} ms")


def product_names(products: Iterable[Union[Product, str]]) -> List[str]:
    """Sorted unique names from products or plain names."""
    names = {p.name if isinstance(p, Product) else str(p) for p in products}
    return sorted(names)


class PlacementAlgorithm(ABC):
    """
    Base class for placement strategies.

    Subclasses implement _search(), which receives a validated, encoded
    problem and returns a flat assignment. solve() wraps it with input
    checks, timing and decoding back to a grid of names.

    Attributes:
        name: Human-readable strategy name
        algorithm: Matching Algorithm selector
        last_stats: SearchStats of the most recent solve() call
    """

    name: str = "Abstract"
    algorithm: Algorithm

    def __init__(self):
        self.last_stats: Optional[SearchStats] = None

    def solve(
        self,
        products: Iterable[Union[Product, str]],
        xsize: int,
        ysize: int,
        limit: int,
        similarity: SimilarityTable,
        prior_coordinates: Optional[Dict[str, Coordinate]] = None
    ) -> Grid:
        """
        Place every product on an xsize x ysize grid.

        Args:
            products: Products (or names) to place
            xsize: Number of columns
            ysize: Number of rows
            limit: Work limit (< 0 unbounded, 0 invalid)
            similarity: Pairwise similarity scores
            prior_coordinates: Optional earlier layout to start from

        Returns:
            Grid with ysize rows of xsize cells; unfilled cells are None

        Raises:
            ConfigurationError: Bad dimensions or limit == 0
            CapacityError: More products than cells
        """
        validate_dimensions(xsize, ysize)
        budget = WorkLimit(limit)
        names = product_names(products)
        rows, cols = ysize, xsize
        if len(names) > rows * cols:
            raise CapacityError(len(names), rows * cols)

        if not names:
            self.last_stats = SearchStats(self.algorithm, 0.0, 0, limit, False)
            return empty_grid(rows, cols)

        matrix = similarity.to_matrix(names)
        problem = PlacementProblem(
            names=names,
            rows=rows,
            cols=cols,
            matrix=matrix,
            padded=padded_similarity(matrix),
            edges=adjacency_edges(rows, cols),
            neighbours=neighbour_lists(rows, cols)
        )

        with Timer(f"{self.name} on {rows}x{cols}") as timer:
            assignment = self._search(problem, budget, prior_coordinates)

        self.last_stats = SearchStats(
            algorithm=self.algorithm,
            score=problem.score(assignment),
            work=budget.used,
            limit=limit,
            limit_reached=budget.exhausted,
            elapsed_ms=timer.elapsed_ms
        )
        logger.debug("%s", self.last_stats.summary())
        return assignment_to_grid(assignment, names, rows, cols)

    @abstractmethod
    def _search(
        self,
        problem: PlacementProblem,
        budget: WorkLimit,
        prior_coordinates: Optional[Dict[str, Coordinate]]
    ) -> List[int]:
        """Return the best flat assignment found within the budget."""
