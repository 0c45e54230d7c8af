"""
Tests for Grid Layout Utilities

Test Categories:
1. Grid construction and indexing
2. Serpentine ordering
3. Adjacency objective
4. Incremental swap delta vs full rescoring

Run with: pytest tests/test_grid_layout.py -v
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfplan.exceptions import ConfigurationError, GridError
from shelfplan.grid.layout import (
    validate_dimensions,
    empty_grid,
    grid_shape,
    index_grid,
    serpentine_cells,
    fill_serpentine,
    grid_from_coordinates,
    adjacency_edges,
    neighbour_lists,
    padded_similarity,
    adjacency_score,
    swap_delta,
    grid_to_assignment,
    assignment_to_grid
)


class TestGridConstruction:
    """Tests for building and indexing grids."""

    def test_empty_grid_shape(self):
        grid = empty_grid(2, 3)
        assert grid_shape(grid) == (2, 3)
        assert all(cell is None for row in grid for cell in row)

    def test_rows_are_independent(self):
        """Mutating one row must not affect another."""
        grid = empty_grid(2, 2)
        grid[0][0] = "a"
        assert grid[1][0] is None

    def test_ragged_grid_rejected(self):
        with pytest.raises(GridError):
            grid_shape([["a", "b"], ["c"]])

    @pytest.mark.parametrize("xsize,ysize", [(0, 3), (3, 0), (-1, 2)])
    def test_invalid_dimensions(self, xsize, ysize):
        with pytest.raises(ConfigurationError):
            validate_dimensions(xsize, ysize)

    def test_index_skips_empty_cells(self):
        """Several empty cells never collapse into one index entry."""
        grid = [["a", None, None], [None, "b", None]]
        index = index_grid(grid)
        assert index == {"a": (0, 0), "b": (1, 1)}

    def test_index_rejects_duplicates(self):
        with pytest.raises(GridError):
            index_grid([["a", "a"]])

    def test_grid_from_coordinates(self):
        grid = grid_from_coordinates({"a": (0, 1), "b": (1, 0)}, 2, 2)
        assert grid == [[None, "a"], ["b", None]]

    def test_grid_from_coordinates_out_of_bounds(self):
        with pytest.raises(GridError):
            grid_from_coordinates({"a": (2, 0)}, 2, 2)

    def test_grid_from_coordinates_collision(self):
        with pytest.raises(GridError):
            grid_from_coordinates({"a": (0, 0), "b": (0, 0)}, 2, 2)


class TestSerpentine:
    """Tests for the boustrophedon fill order."""

    def test_order(self):
        assert serpentine_cells(2, 3) == [(0, 0), (0, 1), (0, 2), (1, 2), (1, 1), (1, 0)]

    def test_consecutive_cells_are_neighbours(self):
        cells = serpentine_cells(4, 5)
        for (r1, c1), (r2, c2) in zip(cells, cells[1:]):
            assert abs(r1 - r2) + abs(c1 - c2) == 1

    def test_fill_leaves_remaining_cells_empty(self):
        grid = fill_serpentine(["a", "b", "c", "d"], 2, 3)
        assert grid == [["a", "b", "c"], [None, None, "d"]]

    def test_fill_overflow(self):
        with pytest.raises(GridError):
            fill_serpentine(["a", "b", "c"], 1, 2)


class TestAdjacencyObjective:
    """Tests for the 4-neighbour adjacency score."""

    def test_edge_count(self):
        """A rows x cols grid has rows*(cols-1) + cols*(rows-1) edges."""
        edges = adjacency_edges(3, 4)
        assert len(edges) == 3 * 3 + 4 * 2

    def test_single_cell_has_no_edges(self):
        assert adjacency_edges(1, 1).shape == (0, 2)

    def test_no_diagonal_edges(self):
        edges = {tuple(e) for e in adjacency_edges(2, 2).tolist()}
        assert (0, 3) not in edges and (1, 2) not in edges

    def test_neighbour_lists_corner_and_centre(self):
        neighbours = neighbour_lists(3, 3)
        assert sorted(neighbours[0]) == [1, 3]
        assert sorted(neighbours[4]) == [1, 3, 5, 7]

    def test_score_simple_line(self):
        names = ["a", "b", "c"]
        matrix = np.array([[0, 0.5, 0.2], [0.5, 0, 0.7], [0.2, 0.7, 0]])
        assignment = grid_to_assignment([["a", "b", "c"]], names)
        score = adjacency_score(assignment, padded_similarity(matrix), adjacency_edges(1, 3))
        assert score == pytest.approx(1.2)

    def test_empty_cells_contribute_zero(self):
        names = ["a", "b"]
        matrix = np.array([[0, 0.9], [0.9, 0]])
        assignment = grid_to_assignment([["a", None, "b"]], names)
        score = adjacency_score(assignment, padded_similarity(matrix), adjacency_edges(1, 3))
        assert score == 0.0

    def test_assignment_round_trip(self):
        grid = [["b", None], [None, "a"]]
        names = ["a", "b"]
        assert assignment_to_grid(grid_to_assignment(grid, names), names, 2, 2) == grid


class TestSwapDelta:
    """The O(1) delta must agree with rescoring the whole grid."""

    def test_delta_matches_full_rescore(self):
        rng = np.random.default_rng(7)
        rows, cols, n = 3, 4, 9
        matrix = rng.uniform(0, 1, size=(n, n))
        matrix = (matrix + matrix.T) / 2
        np.fill_diagonal(matrix, 0)
        padded = padded_similarity(matrix)
        edges = adjacency_edges(rows, cols)
        neighbours = neighbour_lists(rows, cols)

        assignment = list(range(n)) + [n] * (rows * cols - n)
        base = adjacency_score(np.array(assignment), padded, edges)
        for a in range(rows * cols):
            for b in range(a + 1, rows * cols):
                swapped = list(assignment)
                swapped[a], swapped[b] = swapped[b], swapped[a]
                expected = adjacency_score(np.array(swapped), padded, edges) - base
                assert swap_delta(assignment, padded, neighbours, a, b) == pytest.approx(expected)

    def test_swapping_two_empty_cells_is_zero(self):
        padded = padded_similarity(np.array([[0.0]]))
        neighbours = neighbour_lists(1, 3)
        assert swap_delta([0, 1, 1], padded, neighbours, 1, 2) == 0.0
