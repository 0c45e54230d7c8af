"""
Shelf: a fixed-size grid with a history of product arrangements

The shelf keeps its distributions in append order. The current
distribution is always the last one; promoting an older distribution
moves it to the end rather than tracking a separate pointer. Assigning
a new product list clears the history, because every distribution was
computed for the products that were on the shelf at the time.

A single re-entrant lock guards the history so that generate + append
and promote are atomic with respect to each other.
"""

from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Iterator, List, Optional, Union
import logging

from .catalog import ProductList, SimilarityTable
from .distribution import Distribution
from .exceptions import (
    CapacityError, ConfigurationError, DistributionNotFoundError,
    DuplicateDistributionError, EmptyHistoryError, ForeignProductError, GridError
)
from .grid.layout import validate_dimensions
from .search import Algorithm, SearchStats, create_algorithm, validate_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One line of a shelf's distribution log."""
    name: str
    modified_at: Optional[datetime]
    created_at: datetime


class Shelf:
    """
    A shelf of xsize columns by ysize rows.

    Attributes:
        id: Non-negative shelf identifier
        xsize: Number of columns
        ysize: Number of rows
        product_list: Products currently assigned to the shelf
        last_stats: Search statistics of the most recent generation

    Example:
        >>> shelf = Shelf(0, 2, 2, plist)
        >>> dist = shelf.generate_distribution("d1", "exhaustive", -1, table)
        >>> shelf.current_distribution() is dist
        True
    """

    def __init__(self, shelf_id: int, xsize: int, ysize: int, product_list: ProductList):
        if shelf_id < 0:
            raise ConfigurationError("The id of the shelf must be a natural number")
        validate_dimensions(xsize, ysize)
        if len(product_list) > xsize * ysize:
            raise CapacityError(len(product_list), xsize * ysize)
        self.id = shelf_id
        self.xsize = xsize
        self.ysize = ysize
        self.product_list = product_list
        self.last_stats: Optional[SearchStats] = None
        self._history: List[Distribution] = []
        self._lock = RLock()

    @property
    def max_capacity(self) -> int:
        return self.xsize * self.ysize

    @property
    def num_products(self) -> int:
        return len(self.product_list)

    # ------------------------------------------------------------------
    # Distribution generation and history
    # ------------------------------------------------------------------

    def generate_distribution(
        self,
        name: str,
        algorithm: Union[Algorithm, str, int],
        limit: int,
        similarity: SimilarityTable
    ) -> Distribution:
        """
        Run a placement search and append the result as the current distribution.

        The current distribution's layout, if any, is offered to the
        search as a starting point.

        Raises:
            DuplicateDistributionError: `name` is already in the history
            ConfigurationError: Unknown algorithm, bad limit
        """
        validate_request(algorithm, self.xsize, self.ysize, limit)
        with self._lock:
            if self._find(name) is not None:
                raise DuplicateDistributionError(name)
            prior = self._history[-1].coordinates if self._history else None

            strategy = create_algorithm(algorithm)
            grid = strategy.solve(
                self.product_list.names(), self.xsize, self.ysize,
                limit, similarity, prior
            )
            distribution = Distribution(name, grid)
            self._history.append(distribution)
            self.last_stats = strategy.last_stats

        logger.info(
            "Shelf %d: generated distribution %s with %s (score %.4f)",
            self.id, name, strategy.name, strategy.last_stats.score
        )
        return distribution

    def add_distribution(self, distribution: Distribution) -> None:
        """Append an existing (for example restored) distribution."""
        if distribution.shape != (self.ysize, self.xsize):
            raise GridError(
                f"Distribution shape {distribution.shape} does not fit shelf "
                f"{self.ysize}x{self.xsize}"
            )
        with self._lock:
            unknown = set(distribution.product_names()) - set(self.product_list.names())
            if unknown:
                raise ForeignProductError(distribution.name, unknown, f"shelf {self.id}")
            if self._find(distribution.name) is not None:
                raise DuplicateDistributionError(distribution.name)
            self._history.append(distribution)

    def promote(self, distribution: Union[Distribution, str]) -> None:
        """
        Make a distribution from the history the current one.

        Raises:
            DistributionNotFoundError: Not part of this shelf's history
        """
        with self._lock:
            if isinstance(distribution, Distribution):
                found = distribution if any(d is distribution for d in self._history) else None
                name = distribution.name
            else:
                found = self._find(distribution)
                name = distribution
            if found is None:
                raise DistributionNotFoundError(name, self.id)
            self._history = [d for d in self._history if d is not found]
            self._history.append(found)
        logger.info("Shelf %d: distribution %s is now current", self.id, name)

    def current_distribution(self) -> Distribution:
        with self._lock:
            if not self._history:
                raise EmptyHistoryError(self.id)
            return self._history[-1]

    def distribution_named(self, name: str) -> Distribution:
        with self._lock:
            found = self._find(name)
        if found is None:
            raise DistributionNotFoundError(name, self.id)
        return found

    def remove_distribution(self, name: str) -> Distribution:
        with self._lock:
            found = self._find(name)
            if found is None:
                raise DistributionNotFoundError(name, self.id)
            self._history.remove(found)
        return found

    def distribution_names(self) -> List[str]:
        with self._lock:
            return [d.name for d in self._history]

    def distribution_history_log(self) -> List[HistoryEntry]:
        """Summary of the history in append order (not by modification time)."""
        with self._lock:
            return [HistoryEntry(d.name, d.modified_at, d.created_at) for d in self._history]

    @property
    def history(self) -> List[Distribution]:
        with self._lock:
            return list(self._history)

    def __iter__(self) -> Iterator[Distribution]:
        return iter(self.history)

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def reassign_products(self, product_list: ProductList) -> None:
        """
        Put a different product list on the shelf and clear the history.

        Raises:
            CapacityError: The list has more products than the shelf has cells
        """
        if len(product_list) > self.max_capacity:
            raise CapacityError(len(product_list), self.max_capacity)
        with self._lock:
            self.product_list = product_list
            self._history = []
        logger.info("Shelf %d: product list set to %s, history cleared", self.id, product_list.name)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def describe(self) -> str:
        return (f"Shelf {self.id}: {self.xsize}x{self.ysize} "
                f"({self.num_products}/{self.max_capacity} products, "
                f"list '{self.product_list.name}', {len(self)} distributions)")

    def describe_current(self) -> str:
        """Shelf header followed by the current distribution, or '' if there is none."""
        with self._lock:
            if not self._history:
                return ""
            return self.describe() + "\n" + str(self._history[-1])

    def _find(self, name: str) -> Optional[Distribution]:
        for distribution in self._history:
            if distribution.name == name:
                return distribution
        return None
