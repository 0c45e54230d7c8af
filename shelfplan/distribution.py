"""
Distribution: one arrangement of products on a shelf grid

A Distribution owns:
    - a name, unique within its shelf's history
    - a grid of product names (None for an empty cell)
    - an index from product name to (row, col)
    - creation and last-modification timestamps

Index invariant:
    Every non-empty cell's name maps to exactly that cell, and every
    index entry points at a cell holding that name. Empty cells are never
    indexed, so any number of them can coexist without colliding.

Grid dimensions are fixed when a grid is first assigned; swaps only
move contents around.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .catalog import SimilarityTable
from .config import CELL_SEPARATOR, CREATED_PREFIX, EMPTY_MARKER, MODIFIED_PREFIX
from .exceptions import GridError, ProductNotFoundError
from .grid.layout import (
    Coordinate, Grid, copy_grid, count_products, grid_shape, in_bounds,
    index_grid, score_grid
)


class Distribution:
    """
    A named product arrangement with a fast name -> cell lookup.

    Example:
        >>> dist = Distribution("spring")
        >>> dist.replace_grid([["cola", "water"], [None, "juice"]])
        >>> dist.coordinates_of("juice")
        (1, 1)
        >>> dist.swap(0, 0, 1, 0)
        >>> dist.render_as_names()
        [[None, 'water'], ['cola', 'juice']]
    """

    def __init__(self, name: str, grid: Optional[Sequence[Sequence[Optional[str]]]] = None):
        self.name = name
        self.created_at: datetime = datetime.now()
        self.modified_at: Optional[datetime] = None
        self._grid: Grid = []
        self._coordinates: Dict[str, Coordinate] = {}
        if grid is not None:
            self.replace_grid(grid)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def replace_grid(self, grid: Sequence[Sequence[Optional[str]]]) -> None:
        """
        Replace the whole grid and rebuild the index from it.

        Raises:
            GridError: Ragged rows, a duplicated product, or a shape
                different from the grid already held
        """
        new_grid = copy_grid(grid)
        shape = grid_shape(new_grid)
        if self._grid and shape != self.shape:
            raise GridError(f"Grid shape {shape} does not match {self.shape}")
        coordinates = index_grid(new_grid)
        self._grid = new_grid
        self._coordinates = coordinates
        self.modified_at = datetime.now()

    def swap(self, row_a: int, col_a: int, row_b: int, col_b: int) -> None:
        """
        Exchange the contents of two cells.

        Either or both cells may be empty. At most two index entries change.

        Raises:
            GridError: If a coordinate is outside the grid
        """
        rows, cols = self.shape
        for cell in ((row_a, col_a), (row_b, col_b)):
            if not in_bounds(cell, rows, cols):
                raise GridError(f"Cell {cell} is outside a {rows}x{cols} grid")

        first = self._grid[row_a][col_a]
        second = self._grid[row_b][col_b]
        self._grid[row_a][col_a] = second
        self._grid[row_b][col_b] = first
        if first is not None:
            self._coordinates[first] = (row_b, col_b)
        if second is not None:
            self._coordinates[second] = (row_a, col_a)
        self.modified_at = datetime.now()

    def swap_products(self, name_a: str, name_b: str) -> None:
        """Swap two products by name."""
        row_a, col_a = self.coordinates_of(name_a)
        row_b, col_b = self.coordinates_of(name_b)
        self.swap(row_a, col_a, row_b, col_b)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def coordinates_of(self, product_name: str) -> Coordinate:
        if product_name not in self._coordinates:
            raise ProductNotFoundError(product_name, self.name)
        return self._coordinates[product_name]

    @property
    def coordinates(self) -> Dict[str, Coordinate]:
        """Copy of the name -> cell index."""
        return dict(self._coordinates)

    def render_as_names(self) -> Grid:
        """Copy of the grid for display; None marks an empty cell."""
        return copy_grid(self._grid)

    def cell(self, row: int, col: int) -> Optional[str]:
        rows, cols = self.shape
        if not in_bounds((row, col), rows, cols):
            raise GridError(f"Cell {(row, col)} is outside a {rows}x{cols} grid")
        return self._grid[row][col]

    @property
    def shape(self) -> Tuple[int, int]:
        return grid_shape(self._grid)

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def cols(self) -> int:
        return self.shape[1]

    @property
    def product_count(self) -> int:
        return len(self._coordinates)

    def product_names(self) -> List[str]:
        return sorted(self._coordinates)

    def score(self, similarity: SimilarityTable) -> float:
        """Adjacency objective of the current grid under `similarity`."""
        names = self.product_names()
        if not names or not self._grid:
            return 0.0
        return score_grid(self._grid, similarity.to_matrix(names), names)

    def check_invariants(self) -> None:
        """Assert the grid and the index agree exactly."""
        assert count_products(self._grid) == len(self._coordinates), \
            "index size differs from the number of filled cells"
        for name, (r, c) in self._coordinates.items():
            assert self._grid[r][c] == name, f"index entry for '{name}' is stale"

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        modified = self.modified_at.isoformat() if self.modified_at else "None"
        lines = [
            self.name,
            f"{CREATED_PREFIX}{self.created_at.isoformat()}",
            f"{MODIFIED_PREFIX}{modified}",
        ]
        for row in self._grid:
            lines.append(CELL_SEPARATOR.join(
                EMPTY_MARKER if name is None else name for name in row
            ))
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Distribution(name={self.name!r}, shape={self.shape}, products={self.product_count})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization. The index is not stored."""
        return {
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat() if self.modified_at else None,
            "grid": self.render_as_names()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Distribution":
        """Create from dictionary, re-deriving the index from the grid."""
        dist = cls(str(data["name"]), data["grid"])
        dist.created_at = datetime.fromisoformat(data["created_at"])
        modified = data.get("modified_at")
        dist.modified_at = datetime.fromisoformat(modified) if modified else None
        return dist
