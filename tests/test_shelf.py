"""
Tests for Shelf

Test Categories:
1. Construction and capacity checks
2. Distribution generation
3. History ordering and promotion
4. Product list reassignment
5. Concurrent generation

Run with: pytest tests/test_shelf.py -v
"""

import itertools
from concurrent.futures import ThreadPoolExecutor

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfplan.catalog import Product, ProductList, SimilarityTable
from shelfplan.distribution import Distribution
from shelfplan.exceptions import (
    CapacityError, ConfigurationError, DistributionNotFoundError,
    DuplicateDistributionError, EmptyHistoryError, ForeignProductError, GridError
)
from shelfplan.shelf import Shelf


def make_list(*names: str) -> ProductList:
    return ProductList("basics", "grocery", [Product(n, "grocery", 1.0) for n in names])


@pytest.fixture
def table():
    table = SimilarityTable()
    for a, b in itertools.combinations(["P1", "P2", "P3", "P4"], 2):
        table.set(a, b, 0.1)
    table.set("P1", "P2", 0.9)
    table.set("P3", "P4", 0.9)
    return table


@pytest.fixture
def shelf():
    return Shelf(0, 2, 2, make_list("P1", "P2", "P3", "P4"))


def blank(name: str) -> Distribution:
    return Distribution(name, [[None, None], [None, None]])


class TestConstruction:
    """Tests for Shelf construction."""

    def test_capacity(self, shelf):
        assert shelf.max_capacity == 4
        assert shelf.num_products == 4

    def test_too_many_products(self):
        with pytest.raises(CapacityError):
            Shelf(1, 2, 2, make_list("a", "b", "c", "d", "e"))

    def test_negative_id(self):
        with pytest.raises(ConfigurationError):
            Shelf(-1, 2, 2, make_list("a"))

    @pytest.mark.parametrize("xsize,ysize", [(0, 2), (2, 0)])
    def test_bad_dimensions(self, xsize, ysize):
        with pytest.raises(ConfigurationError):
            Shelf(1, xsize, ysize, make_list("a"))

    def test_describe(self, shelf):
        assert shelf.describe().startswith("Shelf 0: 2x2")
        assert shelf.describe_current() == ""


class TestGeneration:
    """Tests for generate_distribution."""

    def test_generated_distribution_is_current(self, shelf, table):
        dist = shelf.generate_distribution("d1", "exhaustive", -1, table)
        assert shelf.current_distribution() is dist
        assert dist.shape == (2, 2)
        assert dist.product_names() == ["P1", "P2", "P3", "P4"]
        assert shelf.last_stats.score == pytest.approx(2.0)

    def test_wide_shelf_orientation(self, table):
        """xsize is the number of columns, ysize the number of rows."""
        shelf = Shelf(3, 4, 1, make_list("P1", "P2", "P3"))
        dist = shelf.generate_distribution("row", "hill_climbing", -1, table)
        assert dist.shape == (1, 4)

    def test_duplicate_name(self, shelf, table):
        shelf.generate_distribution("d1", "exhaustive", -1, table)
        with pytest.raises(DuplicateDistributionError):
            shelf.generate_distribution("d1", "hill_climbing", -1, table)
        assert len(shelf) == 1

    def test_zero_limit_leaves_history_unchanged(self, shelf, table):
        with pytest.raises(ConfigurationError):
            shelf.generate_distribution("d1", "exhaustive", 0, table)
        assert len(shelf) == 0

    def test_unknown_algorithm(self, shelf, table):
        with pytest.raises(ConfigurationError):
            shelf.generate_distribution("d1", 7, -1, table)

    def test_hill_climbing_starts_from_current(self, shelf, table):
        first = shelf.generate_distribution("d1", "exhaustive", -1, table)
        second = shelf.generate_distribution("d2", "hill_climbing", -1, table)
        assert second.render_as_names() == first.render_as_names()

    def test_empty_product_list(self, table):
        shelf = Shelf(2, 3, 2, ProductList("empty"))
        dist = shelf.generate_distribution("nothing", "exhaustive", -1, table)
        assert dist.product_count == 0
        assert dist.shape == (2, 3)


class TestHistory:
    """Tests for history order, promotion and lookup."""

    def test_current_on_empty_history(self, shelf):
        with pytest.raises(EmptyHistoryError):
            shelf.current_distribution()

    def test_promote_moves_to_end(self, shelf):
        a, b, c = blank("A"), blank("B"), blank("C")
        for dist in (a, b, c):
            shelf.add_distribution(dist)
        shelf.promote(a)
        assert shelf.distribution_names() == ["B", "C", "A"]
        assert shelf.current_distribution() is a

    def test_promote_by_name(self, shelf):
        for name in ("A", "B", "C"):
            shelf.add_distribution(blank(name))
        shelf.promote("B")
        assert shelf.distribution_names() == ["A", "C", "B"]

    def test_promote_current_is_noop(self, shelf):
        for name in ("A", "B"):
            shelf.add_distribution(blank(name))
        shelf.promote("B")
        assert shelf.distribution_names() == ["A", "B"]

    def test_promote_foreign_distribution(self, shelf):
        shelf.add_distribution(blank("A"))
        with pytest.raises(DistributionNotFoundError):
            shelf.promote(blank("A"))
        with pytest.raises(DistributionNotFoundError):
            shelf.promote("Z")

    def test_add_wrong_shape(self, shelf):
        with pytest.raises(GridError):
            shelf.add_distribution(Distribution("wide", [[None, None, None]]))

    def test_add_with_products_not_on_shelf(self, shelf):
        shelf.add_distribution(blank("A"))
        old = Distribution("old", [["ghost", "zombie"], [None, None]])
        with pytest.raises(ForeignProductError) as excinfo:
            shelf.add_distribution(old)
        assert excinfo.value.unknown_names == ["ghost", "zombie"]
        assert shelf.distribution_names() == ["A"]

    def test_add_with_subset_of_shelf_products(self, shelf):
        partial = Distribution("partial", [["P2", None], [None, "P4"]])
        shelf.add_distribution(partial)
        assert shelf.current_distribution() is partial

    def test_history_log_in_append_order(self, shelf):
        for name in ("A", "B", "C"):
            shelf.add_distribution(blank(name))
        shelf.distribution_named("A").swap(0, 0, 0, 1)
        log = shelf.distribution_history_log()
        assert [entry.name for entry in log] == ["A", "B", "C"]
        assert log[0].modified_at >= log[0].created_at

    def test_remove_distribution(self, shelf):
        for name in ("A", "B"):
            shelf.add_distribution(blank(name))
        removed = shelf.remove_distribution("B")
        assert removed.name == "B"
        assert shelf.current_distribution().name == "A"
        with pytest.raises(DistributionNotFoundError):
            shelf.distribution_named("B")

    def test_history_is_a_copy(self, shelf):
        shelf.add_distribution(blank("A"))
        shelf.history.clear()
        assert len(shelf) == 1


class TestReassign:
    """Tests for reassign_products."""

    def test_reassign_clears_history(self, shelf, table):
        shelf.generate_distribution("d1", "exhaustive", -1, table)
        shelf.reassign_products(make_list("x", "y"))
        assert len(shelf) == 0
        assert shelf.num_products == 2

    def test_reassign_over_capacity(self, shelf, table):
        shelf.generate_distribution("d1", "exhaustive", -1, table)
        with pytest.raises(CapacityError):
            shelf.reassign_products(make_list("a", "b", "c", "d", "e"))
        assert shelf.num_products == 4
        assert len(shelf) == 1


class TestConcurrency:
    """Generation from several threads keeps the history consistent."""

    def test_parallel_generation(self, shelf, table):
        names = [f"d{i}" for i in range(8)]
        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(
                lambda n: shelf.generate_distribution(n, "hill_climbing", -1, table), names
            ))
        assert sorted(shelf.distribution_names()) == sorted(names)
        for dist in shelf:
            dist.check_invariants()
