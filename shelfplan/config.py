"""
Configuration Settings for Shelf Layout Planning

Central place for the constants shared by the grid utilities, the
search algorithms, persistence and the command-line interface.
"""

from dataclasses import dataclass
from typing import Tuple

# ============================================================================
# GRID
# ============================================================================

# Literal written for an empty cell in the text export
EMPTY_MARKER = "null"

# 4-connected neighbourhood, listed once per undirected edge (right, down).
# Diagonal cells are not neighbours.
NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0))

# ============================================================================
# SEARCH
# ============================================================================

# Minimum gain for a candidate to count as strictly better
SCORE_EPSILON = 1e-9

# Negative limit means unbounded search
DEFAULT_LIMIT = -1

# The command line bounds work by default; exhaustive search grows factorially
CLI_DEFAULT_LIMIT = 100_000

ALGORITHM_CHOICES = ("exhaustive", "hill_climbing")

# ============================================================================
# PERSISTENCE
# ============================================================================

CREATED_PREFIX = "Created Date: "
MODIFIED_PREFIX = "Last Modified Date: "
CELL_SEPARATOR = "\t"


@dataclass
class SearchSettings:
    """
    Parameters for one placement run.

    Attributes:
        algorithm: Algorithm selector ("exhaustive" or "hill_climbing")
        limit: Work limit (< 0 unbounded, 0 invalid)
        xsize: Number of shelf columns
        ysize: Number of shelf rows
    """
    algorithm: str = "hill_climbing"
    limit: int = DEFAULT_LIMIT
    xsize: int = 4
    ysize: int = 3

    @property
    def capacity(self) -> int:
        return self.xsize * self.ysize
