"""
Exception Hierarchy for Shelf Layout Planning

All errors raised by the package derive from ShelfPlanError so callers
can catch the whole family at once. The hierarchy mirrors the three kinds
of failure the system distinguishes:

    Configuration errors -- rejected before any search work starts
        ConfigurationError, CapacityError,
        DuplicateDistributionError, DuplicateShelfError,
        ForeignProductError

    Not-found errors -- a named shelf, distribution or product is absent
        NotFoundError, ShelfNotFoundError, DistributionNotFoundError,
        ProductNotFoundError, EmptyHistoryError

    Data errors -- malformed values handed to the domain objects
        ProductError, SimilarityError, GridError, PersistenceError

Configuration and data errors subclass ValueError, not-found errors
subclass KeyError, so code written against the builtin types keeps working.
"""


class ShelfPlanError(Exception):
    """Base class for every error raised by shelfplan."""


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(ShelfPlanError, ValueError):
    """Invalid request detected before search: bad dimensions, zero limit, unknown algorithm."""


class CapacityError(ConfigurationError):
    """A product set does not fit on a shelf."""

    def __init__(self, num_products: int, capacity: int):
        self.num_products = num_products
        self.capacity = capacity
        super().__init__(
            f"{num_products} products do not fit on a shelf of capacity {capacity}"
        )


class DuplicateDistributionError(ConfigurationError):
    """A distribution with the same name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Distribution '{name}' already exists")


class DuplicateShelfError(ConfigurationError):
    """A shelf with the same id is already registered."""

    def __init__(self, shelf_id: int):
        self.shelf_id = shelf_id
        super().__init__(f"Shelf {shelf_id} already exists")


class ForeignProductError(ConfigurationError):
    """A distribution places products its target does not know."""

    def __init__(self, distribution_name: str, unknown_names, target: str):
        self.distribution_name = distribution_name
        self.unknown_names = sorted(unknown_names)
        super().__init__(
            f"Distribution '{distribution_name}' places products not in {target}: "
            f"{', '.join(self.unknown_names)}"
        )


# ---------------------------------------------------------------------------
# Not-found errors
# ---------------------------------------------------------------------------

class NotFoundError(ShelfPlanError, KeyError):
    """Base class for lookups that found nothing."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable
        return str(self.args[0]) if self.args else ""


class ShelfNotFoundError(NotFoundError):
    def __init__(self, shelf_id: int):
        self.shelf_id = shelf_id
        super().__init__(f"Shelf {shelf_id} does not exist")


class DistributionNotFoundError(NotFoundError):
    def __init__(self, name: str, shelf_id=None):
        self.name = name
        self.shelf_id = shelf_id
        where = f" at shelf {shelf_id}" if shelf_id is not None else ""
        super().__init__(f"Distribution '{name}' not found{where}")


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_name: str, distribution_name=None):
        self.product_name = product_name
        self.distribution_name = distribution_name
        where = f" in distribution '{distribution_name}'" if distribution_name else ""
        super().__init__(f"Product '{product_name}' not found{where}")


class EmptyHistoryError(NotFoundError):
    """The shelf has no distributions yet."""

    def __init__(self, shelf_id: int):
        self.shelf_id = shelf_id
        super().__init__(f"Shelf {shelf_id} has no distributions")


# ---------------------------------------------------------------------------
# Data errors
# ---------------------------------------------------------------------------

class ProductError(ShelfPlanError, ValueError):
    """Invalid product attributes."""


class SimilarityError(ShelfPlanError, ValueError):
    """Similarity score outside [0, 1] or a product paired with itself."""


class GridError(ShelfPlanError, ValueError):
    """Malformed grid or out-of-range cell coordinates."""


class PersistenceError(ShelfPlanError, ValueError):
    """A stored distribution could not be written or parsed."""
