"""
Exhaustive Placement Search (Branch and Bound)

Enumerates assignments of products to cells in a fixed canonical order
and returns the best one found before the limit runs out.

Enumeration:
    Cells are filled in row-major order. At each cell the choices are the
    unused products in name order, followed by a single "empty" choice
    while empty cells remain. Empty cells are interchangeable, so no
    layout is produced twice. The first complete candidate is therefore
    the products in name order, row by row, with empties at the end.

Pruning:
    Filling row-major means that when cell k is placed, its left and upper
    neighbours are already placed, so the partial score is exact for every
    edge between placed cells. An optimistic bound adds the largest
    similarity in the problem for each edge still open. A branch whose
    bound cannot strictly beat the best complete candidate is discarded.

Limit:
    Each complete candidate scored and each pruned partial placement counts
    as one candidate considered. The first complete candidate is always
    reached before any pruning, so a result always exists.

Ties keep the first candidate found.

Complexity Analysis:
    Worst case O(C! / (C-N)!) candidates for C cells and N products;
    O(C) memory.
"""

from typing import Dict, List, Optional
import logging

import numpy as np

from ..config import SCORE_EPSILON
from ..grid.layout import Coordinate
from .base import Algorithm, PlacementAlgorithm, PlacementProblem, WorkLimit

logger = logging.getLogger(__name__)

UNPLACED = -1


def open_edge_counts(problem: PlacementProblem) -> List[int]:
    """
    For each depth k, the number of edges not yet scored when cells
    0..k-1 are placed. An edge is scored once its later cell is placed,
    so counts[k] is the number of edges whose later cell is >= k.

    Complexity:
        O(E + C): histogram of later cells, then a suffix sum
    """
    later = problem.edges.max(axis=1) if problem.edges.size else np.zeros(0, dtype=np.int64)
    histogram = np.bincount(later, minlength=problem.num_cells + 1)
    return histogram[::-1].cumsum()[::-1].tolist()


class ExhaustiveSearch(PlacementAlgorithm):
    """
    Depth-first branch and bound over all placements.

    Attributes:
        leaves: Complete candidates scored in the last run
        pruned: Partial placements discarded in the last run

    Example:
        >>> search = ExhaustiveSearch()
        >>> grid = search.solve(products, 2, 2, -1, table)
        >>> search.last_stats.score
        2.0
    """

    name = "Exhaustive Search"
    algorithm = Algorithm.EXHAUSTIVE

    def __init__(self):
        super().__init__()
        self.leaves = 0
        self.pruned = 0

    def _search(
        self,
        problem: PlacementProblem,
        budget: WorkLimit,
        prior_coordinates: Optional[Dict[str, Coordinate]]
    ) -> List[int]:
        n = problem.num_items
        cells = problem.num_cells
        cols = problem.cols
        empty = problem.empty
        sim = problem.padded.tolist()
        max_sim = float(problem.matrix.max()) if n > 1 else 0.0
        open_edges = open_edge_counts(problem)

        current = [UNPLACED] * cells
        used = [False] * n
        empties_left = cells - n
        partial = [0.0] * (cells + 1)
        next_choice = [0] * (cells + 1)

        best_score = float("-inf")
        best: Optional[List[int]] = None
        self.leaves = 0
        self.pruned = 0

        k = 0
        while k >= 0 and not budget.exhausted:
            if k == cells:
                budget.consume()
                self.leaves += 1
                if partial[k] > best_score + SCORE_EPSILON:
                    best_score = partial[k]
                    best = list(current)
                    logger.debug("New best %.4f after %d candidates", best_score, budget.used)
                k -= 1
                continue

            # release whatever sits at cell k before trying the next choice
            item = current[k]
            if item == empty:
                empties_left += 1
            elif item != UNPLACED:
                used[item] = False
            current[k] = UNPLACED

            choice = next_choice[k]
            while choice < n and used[choice]:
                choice += 1
            if choice == n and empties_left == 0:
                choice += 1
            if choice > n:
                k -= 1
                continue
            next_choice[k] = choice + 1

            current[k] = choice
            if choice == empty:
                empties_left -= 1
            else:
                used[choice] = True

            gain = 0.0
            if k % cols:
                gain += sim[choice][current[k - 1]]
            if k >= cols:
                gain += sim[choice][current[k - cols]]
            partial[k + 1] = partial[k] + gain

            if best is not None and k + 1 < cells:
                bound = partial[k + 1] + max_sim * open_edges[k + 1]
                if bound <= best_score + SCORE_EPSILON:
                    budget.consume()
                    self.pruned += 1
                    continue

            k += 1
            if k < cells:
                next_choice[k] = 0

        logger.debug(
            "Exhaustive search: %d leaves, %d pruned, best %.4f",
            self.leaves, self.pruned, best_score
        )
        assert best is not None, "the first candidate is always scored"
        return best
