"""
Tests for Exhaustive Placement Search and Algorithm Selection

Test Categories:
1. Known optimum on small shelves
2. Agreement with a plain permutation scan
3. Limit handling (zero, bounded, unbounded)
4. Determinism and tie-breaking
5. Algorithm selector parsing and the solve() dispatcher

Run with: pytest tests/test_exhaustive_search.py -v
"""

import itertools

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfplan.catalog import Product, SimilarityTable
from shelfplan.exceptions import CapacityError, ConfigurationError
from shelfplan.grid.layout import (
    adjacency_edges, adjacency_score, grid_to_assignment, index_grid, padded_similarity
)
from shelfplan.search import (
    Algorithm, ExhaustiveSearch, HillClimbingSearch, PlacementProblem, create_algorithm, solve
)
from shelfplan.search.exhaustive import open_edge_counts
from shelfplan.synthetic_data import generate_catalog
from shelfplan.timing import Timer


def paired_table() -> SimilarityTable:
    """P1~P2 and P3~P4 strongly similar, every other pair weakly."""
    table = SimilarityTable()
    names = ["P1", "P2", "P3", "P4"]
    for a, b in itertools.combinations(names, 2):
        table.set(a, b, 0.1)
    table.set("P1", "P2", 0.9)
    table.set("P3", "P4", 0.9)
    return table


def grid_score(grid, table: SimilarityTable) -> float:
    names = sorted(n for row in grid for n in row if n is not None)
    rows, cols = len(grid), len(grid[0])
    return adjacency_score(
        grid_to_assignment(grid, names),
        padded_similarity(table.to_matrix(names)),
        adjacency_edges(rows, cols)
    )


def adjacent(grid, a: str, b: str) -> bool:
    index = index_grid(grid)
    (r1, c1), (r2, c2) = index[a], index[b]
    return abs(r1 - r2) + abs(c1 - c2) == 1


def permutation_optimum(names, rows, cols, table) -> float:
    """Best score over every arrangement, by plain enumeration."""
    cells = names + [None] * (rows * cols - len(names))
    best = float("-inf")
    for perm in set(itertools.permutations(cells)):
        grid = [list(perm[r * cols:(r + 1) * cols]) for r in range(rows)]
        best = max(best, grid_score(grid, table))
    return best


class TestKnownOptimum:
    """Tests against hand-computed optima."""

    def test_paired_products_on_2x2(self):
        """P1 next to P2 and P3 next to P4; strong pairs contribute 1.8."""
        table = paired_table()
        search = ExhaustiveSearch()
        grid = search.solve(["P1", "P2", "P3", "P4"], 2, 2, -1, table)

        assert adjacent(grid, "P1", "P2")
        assert adjacent(grid, "P3", "P4")
        strong = table.score("P1", "P2") + table.score("P3", "P4")
        assert strong == pytest.approx(1.8)
        # the two remaining 4-neighbour edges join the pairs at 0.1 each
        assert search.last_stats.score == pytest.approx(2.0)
        assert grid_score(grid, table) == pytest.approx(2.0)

    def test_accepts_product_objects(self):
        products = {Product(n, "x") for n in ["P1", "P2", "P3", "P4"]}
        grid = ExhaustiveSearch().solve(products, 2, 2, -1, paired_table())
        assert sorted(n for row in grid for n in row) == ["P1", "P2", "P3", "P4"]

    def test_line_puts_chain_in_order(self):
        table = SimilarityTable.from_pairs([("a", "b", 1.0), ("b", "c", 1.0)])
        grid = ExhaustiveSearch().solve(["a", "b", "c"], 3, 1, -1, table)
        assert grid[0][1] == "b"

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_matches_permutation_scan(self, seed):
        catalog, plist = generate_catalog(num_products=5, num_categories=2, density=0.7, seed=seed)
        search = ExhaustiveSearch()
        grid = search.solve(plist.names(), 3, 2, -1, catalog.similarity)
        expected = permutation_optimum(plist.names(), 2, 3, catalog.similarity)
        assert search.last_stats.score == pytest.approx(expected)
        assert grid_score(grid, catalog.similarity) == pytest.approx(expected)


class TestPlacementContract:
    """Every product exactly once, empties for the shortfall."""

    def test_shortfall_left_empty(self):
        grid = ExhaustiveSearch().solve(["a", "b", "c"], 2, 2, -1, SimilarityTable())
        flat = [n for row in grid for n in row]
        assert sorted(n for n in flat if n is not None) == ["a", "b", "c"]
        assert flat.count(None) == 1

    def test_empty_product_set(self):
        search = ExhaustiveSearch()
        grid = search.solve([], 3, 2, -1, SimilarityTable())
        assert grid == [[None] * 3, [None] * 3]
        assert search.last_stats.work == 0

    def test_grid_dimensions(self):
        """ysize rows of xsize cells."""
        grid = ExhaustiveSearch().solve(["a", "b"], 3, 2, 10, SimilarityTable())
        assert len(grid) == 2
        assert all(len(row) == 3 for row in grid)

    def test_capacity_exceeded(self):
        with pytest.raises(CapacityError):
            ExhaustiveSearch().solve(["a", "b", "c", "d", "e"], 2, 2, -1, SimilarityTable())

    @pytest.mark.parametrize("xsize,ysize", [(0, 2), (2, -1)])
    def test_invalid_dimensions(self, xsize, ysize):
        with pytest.raises(ConfigurationError):
            ExhaustiveSearch().solve(["a"], xsize, ysize, -1, SimilarityTable())


class TestLimit:
    """Tests for the candidate limit."""

    def test_zero_limit_rejected(self):
        search = ExhaustiveSearch()
        with pytest.raises(ConfigurationError):
            search.solve(["P1", "P2"], 2, 2, 0, paired_table())
        assert search.last_stats is None

    def test_limit_one_returns_first_candidate(self):
        """The first candidate is names in order, row-major, empties last."""
        search = ExhaustiveSearch()
        grid = search.solve(["c", "a", "b"], 2, 2, 1, SimilarityTable.from_pairs([("a", "c", 0.9)]))
        assert grid == [["a", "b"], ["c", None]]
        assert search.last_stats.work == 1
        assert search.last_stats.limit_reached

    def test_larger_limit_never_worse(self):
        catalog, plist = generate_catalog(num_products=6, num_categories=3, seed=11)
        scores = []
        for limit in [1, 3, 10, 50, 200, -1]:
            search = ExhaustiveSearch()
            search.solve(plist.names(), 3, 2, limit, catalog.similarity)
            scores.append(search.last_stats.score)
        assert scores == sorted(scores)

    def test_work_never_exceeds_limit(self):
        catalog, plist = generate_catalog(num_products=6, num_categories=3, seed=5)
        search = ExhaustiveSearch()
        search.solve(plist.names(), 3, 2, 25, catalog.similarity)
        assert search.last_stats.work <= 25

    def test_large_sparse_shelf_with_tiny_limit(self):
        """Work follows the limit, not the number of cells."""
        table = SimilarityTable.from_pairs([("a", "b", 0.5), ("b", "c", 0.25)])
        search = ExhaustiveSearch()
        with Timer() as t:
            grid = search.solve(["a", "b", "c"], 80, 80, 5, table)
        assert search.last_stats.work == 5
        assert t.elapsed < 1.0
        assert grid[0][:3] == ["a", "b", "c"]

    @pytest.mark.parametrize("rows,cols", [(1, 1), (1, 4), (3, 2), (4, 5)])
    def test_open_edge_counts(self, rows, cols):
        """counts[k] is the number of edges whose later cell is k or beyond."""
        problem = PlacementProblem(
            names=["a"], rows=rows, cols=cols, matrix=None, padded=None,
            edges=adjacency_edges(rows, cols), neighbours=[]
        )
        edges = adjacency_edges(rows, cols).tolist()
        expected = [sum(1 for e in edges if max(e) >= k) for k in range(rows * cols + 1)]
        assert open_edge_counts(problem) == expected

    def test_pruning_discards_hopeless_branches(self):
        table = SimilarityTable.from_pairs([("a", "b", 0.5)])
        search = ExhaustiveSearch()
        grid = search.solve(["a", "b", "c"], 3, 1, -1, table)
        assert search.pruned > 0
        assert grid == [["a", "b", "c"]]


class TestDeterminism:
    """Identical inputs give identical grids."""

    def test_repeatable(self):
        catalog, plist = generate_catalog(num_products=6, num_categories=2, seed=9)
        first = ExhaustiveSearch().solve(plist.names(), 3, 2, 500, catalog.similarity)
        second = ExhaustiveSearch().solve(plist.names(), 3, 2, 500, catalog.similarity)
        assert first == second

    def test_input_order_irrelevant(self):
        table = paired_table()
        first = ExhaustiveSearch().solve(["P4", "P3", "P2", "P1"], 2, 2, -1, table)
        second = ExhaustiveSearch().solve(["P1", "P2", "P3", "P4"], 2, 2, -1, table)
        assert first == second

    def test_all_ties_keep_first_candidate(self):
        grid = ExhaustiveSearch().solve(["b", "a"], 2, 1, -1, SimilarityTable())
        assert grid == [["a", "b"]]


class TestAlgorithmSelection:
    """Tests for Algorithm.parse, create_algorithm and solve."""

    @pytest.mark.parametrize("choice,expected", [
        (Algorithm.EXHAUSTIVE, Algorithm.EXHAUSTIVE),
        ("exhaustive", Algorithm.EXHAUSTIVE),
        ("Brute Force", Algorithm.EXHAUSTIVE),
        ("brute-force", Algorithm.EXHAUSTIVE),
        (1, Algorithm.EXHAUSTIVE),
        ("hill_climbing", Algorithm.HILL_CLIMBING),
        ("Hill Climbing", Algorithm.HILL_CLIMBING),
        (2, Algorithm.HILL_CLIMBING),
    ])
    def test_parse(self, choice, expected):
        assert Algorithm.parse(choice) is expected

    @pytest.mark.parametrize("choice", [0, 3, "simulated_annealing", None, True])
    def test_unknown_selector(self, choice):
        with pytest.raises(ConfigurationError):
            Algorithm.parse(choice)

    def test_create_algorithm(self):
        assert isinstance(create_algorithm(1), ExhaustiveSearch)
        assert isinstance(create_algorithm("hill"), HillClimbingSearch)

    def test_solve_dispatch_matches_direct_call(self):
        table = paired_table()
        names = ["P1", "P2", "P3", "P4"]
        assert solve("exhaustive", names, 2, 2, -1, table) == \
            ExhaustiveSearch().solve(names, 2, 2, -1, table)

    def test_solve_rejects_before_work(self):
        with pytest.raises(ConfigurationError):
            solve("unknown", ["a"], 2, 2, -1, SimilarityTable())
        with pytest.raises(ConfigurationError):
            solve("exhaustive", ["a"], 2, 2, 0, SimilarityTable())
