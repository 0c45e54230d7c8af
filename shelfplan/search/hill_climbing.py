"""
Hill-Climbing Placement Search

Local search over single swaps of two cells.

Starting point:
    - The prior layout, when it places exactly the current products on
      distinct in-bounds cells
    - Otherwise a greedy similarity chain (start at the first product by
      name, keep appending the most similar unused product, ties to the
      earlier name) laid along the serpentine path, so consecutive chain
      members end up side by side

Each iteration scores every swap that moves at least one product and
applies the best strictly improving one. Candidate swaps are generated
lazily from the occupied cells, so a run never touches pairs of empty
cells and its cost follows the number of evaluations. The run stops at a
local optimum or when the limit on swap evaluations is used up. An
iteration cut short by the limit is discarded rather than applied, so
every run follows the same sequence of moves and a larger limit can only
go further along it.

Every applied move raises the score by more than SCORE_EPSILON, so a
grid state can never be entered twice and no visited set is kept.

Complexity Analysis:
    O(N*C) swap evaluations per iteration for N products on C cells,
    each O(1)
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple
import logging

import numpy as np

from ..config import SCORE_EPSILON
from ..grid.layout import (
    Coordinate, fill_serpentine, grid_from_coordinates, grid_to_assignment,
    in_bounds, swap_delta
)
from .base import Algorithm, PlacementAlgorithm, PlacementProblem, WorkLimit

logger = logging.getLogger(__name__)


def greedy_chain(problem: PlacementProblem) -> List[int]:
    """
    Order items so each is the most similar unused item to its predecessor.

    Returns:
        Item indices, starting at item 0
    """
    n = problem.num_items
    used = np.zeros(n, dtype=bool)
    chain = [0]
    used[0] = True
    for _ in range(n - 1):
        row = problem.matrix[chain[-1]].copy()
        row[used] = -1.0
        nxt = int(np.argmax(row))
        chain.append(nxt)
        used[nxt] = True
    return chain


def prior_is_compatible(
    prior_coordinates: Optional[Dict[str, Coordinate]],
    problem: PlacementProblem
) -> bool:
    """True if the prior layout places exactly these products on distinct in-bounds cells."""
    if not prior_coordinates:
        return False
    if set(prior_coordinates) != set(problem.names):
        return False
    cells = list(prior_coordinates.values())
    if len(set(cells)) != len(cells):
        return False
    return all(in_bounds(cell, problem.rows, problem.cols) for cell in cells)


def swap_candidates(
    assignment: List[int],
    occupied: Set[int],
    empty: int
) -> Iterator[Tuple[int, int]]:
    """
    Yield every swap that moves at least one product, each exactly once.

    `a` runs over occupied cells in row-major order and `b` over every
    other cell. A pair of two occupied cells is produced only from its
    smaller cell, so the pairs skipped here number at most N^2 for N
    products, whatever the shelf size.
    """
    cells = len(assignment)
    for a in sorted(occupied):
        for b in range(cells):
            if b == a or (b < a and assignment[b] != empty):
                continue
            yield a, b


class HillClimbingSearch(PlacementAlgorithm):
    """
    Best-improvement hill climbing over cell swaps.

    Attributes:
        iterations: Improving moves applied in the last run
        used_prior: Whether the last run started from the prior layout
        trajectory: Score of the start followed by the score after each move
    """

    name = "Hill Climbing"
    algorithm = Algorithm.HILL_CLIMBING

    def __init__(self):
        super().__init__()
        self.iterations = 0
        self.used_prior = False
        self.trajectory: List[float] = []

    def initial_assignment(
        self,
        problem: PlacementProblem,
        prior_coordinates: Optional[Dict[str, Coordinate]]
    ) -> List[int]:
        if prior_is_compatible(prior_coordinates, problem):
            self.used_prior = True
            grid = grid_from_coordinates(prior_coordinates, problem.rows, problem.cols)
        else:
            self.used_prior = False
            chain = [problem.names[i] for i in greedy_chain(problem)]
            grid = fill_serpentine(chain, problem.rows, problem.cols)
        return grid_to_assignment(grid, problem.names).tolist()

    def _search(
        self,
        problem: PlacementProblem,
        budget: WorkLimit,
        prior_coordinates: Optional[Dict[str, Coordinate]]
    ) -> List[int]:
        assignment = self.initial_assignment(problem, prior_coordinates)
        empty = problem.empty
        occupied = {k for k, item in enumerate(assignment) if item != empty}
        score = problem.score(assignment)
        self.trajectory = [score]
        self.iterations = 0

        while True:
            best_delta = SCORE_EPSILON
            best_move: Optional[Tuple[int, int]] = None
            cut = False

            for a, b in swap_candidates(assignment, occupied, empty):
                if budget.exhausted:
                    cut = True
                    break
                budget.consume()
                delta = swap_delta(assignment, problem.padded, problem.neighbours, a, b)
                if delta > best_delta:
                    best_delta = delta
                    best_move = (a, b)

            if cut:
                logger.debug("Limit reached after %d evaluations", budget.used)
                break
            if best_move is None:
                logger.debug("Local optimum after %d iterations", self.iterations)
                break

            a, b = best_move
            assignment[a], assignment[b] = assignment[b], assignment[a]
            if assignment[a] == empty:
                occupied.discard(a)
                occupied.add(b)
            score += best_delta
            self.trajectory.append(score)
            self.iterations += 1

        return assignment
