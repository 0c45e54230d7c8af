"""
Catalog Data Models for Shelf Layout Planning

This module defines the product-side data structures consumed by the
placement search. Uses Python dataclasses for clean, type-hinted data
containers.

Data Flow:
    Product -> ProductList -> Shelf
    Product pairs -> SimilarityTable -> similarity matrix (numpy) -> search

The search never touches Product objects directly: grids hold product
names, and scores come from SimilarityTable.to_matrix(), so editing a
product's price or amount never changes a stored layout.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Any
import logging

import numpy as np

from .exceptions import ProductError, SimilarityError, ProductNotFoundError

logger = logging.getLogger(__name__)


def _round_price(value: float) -> float:
    """Round half-up to two decimal places."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True, eq=False)
class Product:
    """
    A catalog item that can be placed on a shelf.

    Identity is the name: two products with the same name are equal and
    hash alike regardless of their other attributes.

    Attributes:
        name: Unique product name (primary key)
        category: Product category
        price: Current selling price (>= 0)
        original_price: Price before any discount
        amount: Units in stock (>= 0)
    """
    name: str
    category: str
    price: float = 0.0
    original_price: Optional[float] = None
    amount: int = 0

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ProductError("Name cannot be empty")
        if not self.category or not self.category.strip():
            raise ProductError("Category cannot be empty")
        if self.price < 0:
            raise ProductError("Price cannot be negative")
        if self.amount < 0:
            raise ProductError("Amount cannot be negative")
        original = self.price if self.original_price is None else self.original_price
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "price", _round_price(self.price))
        object.__setattr__(self, "original_price", _round_price(original))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def with_discount(self, percent: float) -> "Product":
        """Return a copy priced at original_price minus `percent` percent."""
        if percent < 0 or percent > 100:
            raise ProductError("Discount must be between 0 and 100")
        return replace(self, price=self.original_price * (1 - percent / 100))

    def with_amount(self, amount: int) -> "Product":
        return replace(self, amount=amount)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "original_price": self.original_price,
            "amount": self.amount
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            name=str(data["name"]),
            category=str(data["category"]),
            price=float(data.get("price", 0.0)),
            original_price=data.get("original_price"),
            amount=int(data.get("amount", 0))
        )


class ProductList:
    """
    A named set of products that can be assigned to a shelf.

    Products are keyed by name; adding a second product with an existing
    name is refused. Iteration is in name order so every consumer sees
    the same sequence.

    Example:
        >>> plist = ProductList("drinks", "beverages")
        >>> plist.add_product(Product("cola", "beverages", 1.5, amount=10))
        True
        >>> len(plist)
        1
    """

    def __init__(self, name: str, category: str = "", products: Iterable[Product] = ()):
        self.name = name
        self.category = category
        self._products: Dict[str, Product] = {}
        for product in products:
            self._products[product.name] = product
        self.last_modified = datetime.now()

    def add_product(self, product: Product) -> bool:
        if product.name in self._products:
            return False
        self._products[product.name] = product
        self.last_modified = datetime.now()
        return True

    def remove_product(self, product_name: str) -> bool:
        """Remove a product by name (case-insensitive)."""
        for name in self._products:
            if name.lower() == product_name.lower():
                del self._products[name]
                self.last_modified = datetime.now()
                return True
        return False

    def get_product(self, product_name: str) -> Product:
        for name, product in self._products.items():
            if name.lower() == product_name.lower():
                return product
        raise ProductNotFoundError(product_name)

    def names(self) -> List[str]:
        return sorted(self._products)

    @property
    def products(self) -> List[Product]:
        return [self._products[name] for name in self.names()]

    @property
    def total_quantity(self) -> int:
        return sum(p.amount for p in self._products.values())

    def is_empty(self) -> bool:
        return not self._products

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.products)

    def __contains__(self, item: object) -> bool:
        name = item.name if isinstance(item, Product) else item
        return name in self._products

    def __repr__(self) -> str:
        return f"ProductList(name={self.name!r}, products={self.names()!r})"


class SimilarityTable:
    """
    Symmetric similarity scores between product names.

    Scores lie in [0, 1]. A missing pair scores 0.0. A product compared
    with itself scores 1.0, but self pairs are never stored.

    Complexity:
        score(): O(1)
        to_matrix(): O(n^2) for n names
    """

    def __init__(self):
        self._scores: Dict[str, Dict[str, float]] = {}

    def set(self, a: str, b: str, score: float) -> None:
        """Record score(a, b) = score(b, a) = score."""
        if a == b:
            raise SimilarityError(f"Cannot set similarity of '{a}' with itself")
        if score < 0 or score > 1:
            raise SimilarityError(f"Similarity value must be between 0 and 1: {score}")
        self._scores.setdefault(a, {})[b] = float(score)
        self._scores.setdefault(b, {})[a] = float(score)

    def score(self, a: str, b: str) -> float:
        if a == b:
            return 1.0
        return self._scores.get(a, {}).get(b, 0.0)

    def remove_product(self, name: str) -> None:
        """Drop every pair involving `name`."""
        for other in self._scores.pop(name, {}):
            self._scores[other].pop(name, None)
            if not self._scores[other]:
                del self._scores[other]

    def neighbours(self, name: str) -> Dict[str, float]:
        return dict(self._scores.get(name, {}))

    def pairs(self) -> Iterator[Tuple[str, str, float]]:
        """Yield each stored pair once, (a, b, score) with a < b."""
        for a in sorted(self._scores):
            for b, value in sorted(self._scores[a].items()):
                if a < b:
                    yield a, b, value

    def to_matrix(self, names: List[str]) -> np.ndarray:
        """
        Build the dense similarity matrix for `names`.

        The diagonal is zero: a product never sits next to itself.

        Returns:
            np.ndarray: Shape (n, n) symmetric float64 matrix
        """
        n = len(names)
        matrix = np.zeros((n, n), dtype=np.float64)
        index = {name: i for i, name in enumerate(names)}
        for a, row in self._scores.items():
            i = index.get(a)
            if i is None:
                continue
            for b, value in row.items():
                j = index.get(b)
                if j is not None:
                    matrix[i, j] = value
        return matrix

    def __len__(self) -> int:
        return sum(1 for _ in self.pairs())

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str, float]]) -> "SimilarityTable":
        table = cls()
        for a, b, value in pairs:
            table.set(a, b, value)
        return table

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {a: dict(row) for a, row in self._scores.items()}


@dataclass
class Catalog:
    """
    All products known to the system plus their similarity table.

    Removing a product also removes its similarities.
    """
    products: Dict[str, Product] = field(default_factory=dict)
    similarity: SimilarityTable = field(default_factory=SimilarityTable)

    def add_product(
        self,
        product: Product,
        similarities: Iterable[Tuple[str, float]] = ()
    ) -> None:
        if product.name in self.products:
            raise ProductError(f"Product '{product.name}' already exists in the catalog")
        self.products[product.name] = product
        for other, value in similarities:
            if other not in self.products:
                raise ProductNotFoundError(other)
            self.similarity.set(product.name, other, value)
        logger.info("Added product %s to catalog", product.name)

    def update_product(self, product: Product) -> None:
        if product.name not in self.products:
            raise ProductNotFoundError(product.name)
        self.products[product.name] = product

    def remove_product(self, name: str) -> None:
        if name not in self.products:
            raise ProductNotFoundError(name)
        del self.products[name]
        self.similarity.remove_product(name)
        logger.info("Removed product %s from catalog", name)

    def get_product(self, name: str) -> Product:
        if name not in self.products:
            raise ProductNotFoundError(name)
        return self.products[name]
