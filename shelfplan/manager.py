"""
Shelf Manager: explicit owner of shelves, catalog and distributions

The manager is the orchestrator the rest of an application talks to. It
holds, per instance (there is no module-level state):

    - the Catalog (products and their similarity table)
    - named product lists
    - the shelf registry (id -> Shelf)
    - the global distribution registry (name -> shelf id)
    - an OperationLog of timestamped actions

It checks shelf ids and global distribution-name uniqueness before
delegating to Shelf and Distribution, and records what happened.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple, Union
import logging

from .catalog import Catalog, ProductList
from .distribution import Distribution
from .exceptions import (
    ConfigurationError, DistributionNotFoundError, DuplicateDistributionError,
    DuplicateShelfError, ForeignProductError, ShelfNotFoundError
)
from .grid.layout import Coordinate
from .persistence import load_distribution, save_distribution
from .search import Algorithm
from .shelf import HistoryEntry, Shelf

logger = logging.getLogger(__name__)


@dataclass
class OperationLog:
    """Chronological record of manager actions."""
    entries: List[Tuple[datetime, str]] = field(default_factory=list)

    def record(self, message: str) -> None:
        self.entries.append((datetime.now(), message))
        logger.debug(message)

    def messages(self) -> List[str]:
        return [message for _, message in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


class ShelfManager:
    """
    Registry of shelves and their distributions.

    Example:
        >>> manager = ShelfManager(catalog)
        >>> manager.create_shelf(1, 3, 2, plist)
        >>> dist = manager.distribute_shelf(1, "monday", Algorithm.HILL_CLIMBING, -1)
        >>> manager.swap_products("monday", "cola", "water")
    """

    def __init__(self, catalog: Catalog = None):
        self.catalog = catalog if catalog is not None else Catalog()
        self.product_lists: Dict[str, ProductList] = {}
        self.operations = OperationLog()
        self._shelves: Dict[int, Shelf] = {}
        self._distribution_owner: Dict[str, int] = {}

    # ------------------------------------------------------------------
    # Product lists
    # ------------------------------------------------------------------

    def add_product_list(self, product_list: ProductList) -> None:
        if product_list.name in self.product_lists:
            raise ConfigurationError(f"Product list '{product_list.name}' already exists")
        self.product_lists[product_list.name] = product_list
        self.operations.record(f"Added product list: {product_list.name}")

    def can_remove_list(self, product_list: ProductList) -> bool:
        """A list can be removed only while no shelf uses it."""
        return all(shelf.product_list is not product_list for shelf in self._shelves.values())

    # ------------------------------------------------------------------
    # Shelves
    # ------------------------------------------------------------------

    def create_shelf(self, shelf_id: int, xsize: int, ysize: int, product_list: ProductList) -> Shelf:
        if shelf_id in self._shelves:
            raise DuplicateShelfError(shelf_id)
        shelf = Shelf(shelf_id, xsize, ysize, product_list)
        self._shelves[shelf_id] = shelf
        self.operations.record(f"Created shelf: {shelf_id}")
        logger.info("Created shelf %d (%dx%d)", shelf_id, xsize, ysize)
        return shelf

    def get_shelf(self, shelf_id: int) -> Shelf:
        if shelf_id not in self._shelves:
            raise ShelfNotFoundError(shelf_id)
        return self._shelves[shelf_id]

    def shelves(self) -> List[Shelf]:
        return [self._shelves[k] for k in sorted(self._shelves)]

    def remove_shelf(self, shelf_id: int) -> None:
        """Delete a shelf together with every distribution it owns."""
        shelf = self.get_shelf(shelf_id)
        for name in shelf.distribution_names():
            self._distribution_owner.pop(name, None)
        del self._shelves[shelf_id]
        self.operations.record(f"Removed shelf: {shelf_id}")

    def change_product_list(self, shelf_id: int, product_list: ProductList) -> None:
        shelf = self.get_shelf(shelf_id)
        dropped = shelf.distribution_names()
        shelf.reassign_products(product_list)
        for name in dropped:
            self._distribution_owner.pop(name, None)
        self.operations.record(f"Changed product list of shelf {shelf_id} to {product_list.name}")

    # ------------------------------------------------------------------
    # Distributions
    # ------------------------------------------------------------------

    def distribute_shelf(
        self,
        shelf_id: int,
        name: str,
        algorithm: Union[Algorithm, str, int],
        limit: int
    ) -> Distribution:
        """Generate a new current distribution for a shelf."""
        shelf = self.get_shelf(shelf_id)
        if name in self._distribution_owner:
            raise DuplicateDistributionError(name)
        distribution = shelf.generate_distribution(name, algorithm, limit, self.catalog.similarity)
        self._distribution_owner[name] = shelf_id
        self.operations.record(f"Added distribution: {name}")
        return distribution

    def exists(self, name: str) -> bool:
        return name in self._distribution_owner

    def get_distribution(self, name: str) -> Distribution:
        if name not in self._distribution_owner:
            raise DistributionNotFoundError(name)
        return self._shelves[self._distribution_owner[name]].distribution_named(name)

    def shelf_of(self, name: str) -> Shelf:
        if name not in self._distribution_owner:
            raise DistributionNotFoundError(name)
        return self._shelves[self._distribution_owner[name]]

    def remove_distribution(self, name: str) -> None:
        self.shelf_of(name).remove_distribution(name)
        del self._distribution_owner[name]
        self.operations.record(f"Removed distribution: {name}")

    def swap_products(self, name: str, product_a: str, product_b: str) -> None:
        self.get_distribution(name).swap_products(product_a, product_b)
        self.operations.record(f"Modified distribution: {name}")

    def swap_cells(self, name: str, cell_a: Coordinate, cell_b: Coordinate) -> None:
        self.get_distribution(name).swap(cell_a[0], cell_a[1], cell_b[0], cell_b[1])
        self.operations.record(f"Modified distribution: {name}")

    def make_current(self, shelf_id: int, name: str) -> None:
        self.get_shelf(shelf_id).promote(name)
        self.operations.record(f"Distribution {name} made current on shelf {shelf_id}")

    def distribution_log(self, shelf_id: int) -> List[HistoryEntry]:
        return self.get_shelf(shelf_id).distribution_history_log()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def store_distribution(self, name: str, filepath: Union[str, Path]) -> Path:
        path = save_distribution(self.get_distribution(name), filepath)
        self.operations.record(f"Stored distribution: {name}")
        return path

    def load_distribution(self, shelf_id: int, filepath: Union[str, Path]) -> Distribution:
        """Restore a stored distribution onto a shelf, making it current."""
        shelf = self.get_shelf(shelf_id)
        distribution = load_distribution(filepath)
        if distribution.name in self._distribution_owner:
            raise DuplicateDistributionError(distribution.name)
        unknown = [n for n in distribution.product_names() if n not in self.catalog.products]
        if unknown:
            raise ForeignProductError(distribution.name, unknown, "the catalog")
        shelf.add_distribution(distribution)
        self._distribution_owner[distribution.name] = shelf_id
        self.operations.record(f"Loaded distribution: {distribution.name}")
        return distribution
