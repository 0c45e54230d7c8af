"""
Grid Layout Utilities for Shelf Placement

This module holds the grid-level primitives shared by the placement
algorithms and the Distribution entity:

- Grid construction, shape validation and copying
- Name -> (row, col) indexing (empty cells are never indexed)
- Serpentine fill order
- Adjacency objective on flat assignment arrays (NumPy vectorised)
- O(1) score delta for a single cell swap

Representations:
    Grid:        rows x cols list of lists, each cell a product name or None
    Assignment:  1-D int array of length rows*cols in row-major order; each
                 entry indexes a product name list, and the value
                 len(names) marks an empty cell

The objective sums, over every pair of 4-connected neighbouring cells,
the similarity of the two products in them. Empty cells contribute 0.
This is the usual facility-layout / quadratic-assignment objective.

Complexity Analysis:
    adjacency_score: O(E) with E = 2*rows*cols - rows - cols edges
    swap_delta: O(1) (at most four neighbours per cell)
"""

from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np

from ..config import NEIGHBOUR_OFFSETS
from ..exceptions import ConfigurationError, GridError

Grid = List[List[Optional[str]]]
Coordinate = Tuple[int, int]


def validate_dimensions(xsize: int, ysize: int) -> None:
    """Reject non-positive shelf dimensions."""
    if xsize <= 0 or ysize <= 0:
        raise ConfigurationError(
            f"Shelf dimensions must be positive, got xsize={xsize}, ysize={ysize}"
        )


def empty_grid(rows: int, cols: int) -> Grid:
    return [[None] * cols for _ in range(rows)]


def copy_grid(grid: Sequence[Sequence[Optional[str]]]) -> Grid:
    return [list(row) for row in grid]


def grid_shape(grid: Sequence[Sequence[Optional[str]]]) -> Tuple[int, int]:
    """
    Return (rows, cols) of a rectangular grid.

    Raises:
        GridError: If rows have different lengths
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    for r, row in enumerate(grid):
        if len(row) != cols:
            raise GridError(f"Row {r} has {len(row)} cells, expected {cols}")
    return rows, cols


def index_grid(grid: Sequence[Sequence[Optional[str]]]) -> Dict[str, Coordinate]:
    """
    Map every product name in the grid to its cell.

    Empty cells are skipped, so any number of them can coexist.

    Raises:
        GridError: If a product name occurs in more than one cell
    """
    index: Dict[str, Coordinate] = {}
    for r, row in enumerate(grid):
        for c, name in enumerate(row):
            if name is None:
                continue
            if name in index:
                raise GridError(
                    f"Product '{name}' appears at {index[name]} and {(r, c)}"
                )
            index[name] = (r, c)
    return index


def count_products(grid: Sequence[Sequence[Optional[str]]]) -> int:
    return sum(1 for row in grid for name in row if name is not None)


def in_bounds(cell: Coordinate, rows: int, cols: int) -> bool:
    r, c = cell
    return 0 <= r < rows and 0 <= c < cols


def serpentine_cells(rows: int, cols: int) -> List[Coordinate]:
    """
    Cells in boustrophedon order: even rows left-to-right, odd rows
    right-to-left. Consecutive cells in this order are always neighbours.
    """
    cells = []
    for r in range(rows):
        columns = range(cols) if r % 2 == 0 else range(cols - 1, -1, -1)
        cells.extend((r, c) for c in columns)
    return cells


def fill_serpentine(names: Sequence[str], rows: int, cols: int) -> Grid:
    """Lay a sequence of names along the serpentine path; leftover cells stay empty."""
    if len(names) > rows * cols:
        raise GridError(f"{len(names)} names do not fit in a {rows}x{cols} grid")
    grid = empty_grid(rows, cols)
    for name, (r, c) in zip(names, serpentine_cells(rows, cols)):
        grid[r][c] = name
    return grid


def grid_from_coordinates(
    coordinates: Dict[str, Coordinate],
    rows: int,
    cols: int
) -> Grid:
    """Build a grid from a name -> cell mapping."""
    grid = empty_grid(rows, cols)
    for name, (r, c) in coordinates.items():
        if not in_bounds((r, c), rows, cols):
            raise GridError(f"Cell {(r, c)} for '{name}' is outside a {rows}x{cols} grid")
        if grid[r][c] is not None:
            raise GridError(f"Cell {(r, c)} is claimed by '{grid[r][c]}' and '{name}'")
        grid[r][c] = name
    return grid


# ---------------------------------------------------------------------------
# Objective on flat assignments
# ---------------------------------------------------------------------------

def adjacency_edges(rows: int, cols: int) -> np.ndarray:
    """
    All undirected neighbour pairs as flat row-major indices.

    Edges are grouped by offset (all right-hand pairs, then all pairs
    below). The second column always holds the later cell.

    Returns:
        np.ndarray: Shape (E, 2) int array
    """
    cells = np.arange(rows * cols, dtype=np.int64).reshape(rows, cols)
    blocks = []
    for dr, dc in NEIGHBOUR_OFFSETS:
        first = cells[:rows - dr, :cols - dc].ravel()
        second = cells[dr:, dc:].ravel()
        blocks.append(np.stack([first, second], axis=1))
    return np.concatenate(blocks).reshape(-1, 2)


def neighbour_lists(rows: int, cols: int) -> List[List[int]]:
    """Flat indices of each cell's neighbours."""
    neighbours: List[List[int]] = [[] for _ in range(rows * cols)]
    for a, b in adjacency_edges(rows, cols).tolist():
        neighbours[a].append(b)
        neighbours[b].append(a)
    return neighbours


def padded_similarity(matrix: np.ndarray) -> np.ndarray:
    """
    Append a zero row and column for the empty-cell index.

    With n products, index n then means "empty" and scores 0 with anything.
    """
    n = matrix.shape[0]
    padded = np.zeros((n + 1, n + 1), dtype=np.float64)
    padded[:n, :n] = matrix
    return padded


def adjacency_score(
    assignment: np.ndarray,
    padded: np.ndarray,
    edges: np.ndarray
) -> float:
    """
    Objective value of a flat assignment.

    Args:
        assignment: Row-major item index per cell (n = empty)
        padded: Similarity matrix from padded_similarity()
        edges: Neighbour pairs from adjacency_edges()
    """
    if edges.size == 0:
        return 0.0
    return float(padded[assignment[edges[:, 0]], assignment[edges[:, 1]]].sum())


def swap_delta(
    assignment: Sequence[int],
    padded: np.ndarray,
    neighbours: List[List[int]],
    a: int,
    b: int
) -> float:
    """
    Change in objective if cells `a` and `b` exchange contents.

    The edge between a and b (when they are neighbours) keeps the same
    pair of products, so it is left out of both sums.

    Complexity:
        O(1): each cell has at most four neighbours
    """
    item_a = assignment[a]
    item_b = assignment[b]
    delta = 0.0
    for n in neighbours[a]:
        if n != b:
            other = assignment[n]
            delta += padded[item_b, other] - padded[item_a, other]
    for n in neighbours[b]:
        if n != a:
            other = assignment[n]
            delta += padded[item_a, other] - padded[item_b, other]
    return float(delta)


def grid_to_assignment(grid: Sequence[Sequence[Optional[str]]], names: List[str]) -> np.ndarray:
    """Encode a grid as a flat assignment over `names`."""
    empty = len(names)
    index = {name: i for i, name in enumerate(names)}
    flat = [index[name] if name is not None else empty for row in grid for name in row]
    return np.array(flat, dtype=np.int64)


def assignment_to_grid(assignment: Sequence[int], names: List[str], rows: int, cols: int) -> Grid:
    """Decode a flat assignment back into a grid of names."""
    empty = len(names)
    grid = empty_grid(rows, cols)
    for k, item in enumerate(assignment):
        if item != empty:
            grid[k // cols][k % cols] = names[item]
    return grid


def score_grid(grid: Sequence[Sequence[Optional[str]]], matrix: np.ndarray, names: List[str]) -> float:
    """Objective value of a grid of names given their similarity matrix."""
    rows, cols = grid_shape(grid)
    return adjacency_score(
        grid_to_assignment(grid, names),
        padded_similarity(matrix),
        adjacency_edges(rows, cols)
    )
