"""
Synthetic Catalog Generator for Shelf Layout Planning

This module generates product catalogs and similarity tables
programmatically, for demos, benchmarks and tests. There is no external
dataset.

Key Features:
- Products grouped into categories with random prices and stock
- Similarity driven by category: high within a category, low across
- Optional sparsity (pairs left out score 0)
- Reproducible results via random seed control
- JSON export/import of the generated catalog
- Optional matplotlib rendering of a distribution on its shelf

Example Usage:
    >>> from shelfplan.synthetic_data import generate_catalog
    >>> catalog, plist = generate_catalog(num_products=8, num_categories=3, seed=42)
    >>> len(plist)
    8
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Any

import numpy as np

from .catalog import Catalog, Product, ProductList, SimilarityTable
from .distribution import Distribution

logger = logging.getLogger(__name__)

CATEGORY_NAMES = ["dairy", "bakery", "produce", "drinks", "snacks", "cleaning", "frozen", "pantry"]


def category_label(index: int) -> str:
    if index < len(CATEGORY_NAMES):
        return CATEGORY_NAMES[index]
    return f"category_{index:02d}"


def generate_products(
    num_products: int = 12,
    num_categories: int = 3,
    seed: Optional[int] = None
) -> List[Product]:
    """
    Generate products spread round-robin over categories.

    Args:
        num_products: Number of products
        num_categories: Number of distinct categories
        seed: Random seed for reproducibility

    Returns:
        Products named "<category>_<nn>"
    """
    rng = np.random.default_rng(seed)
    products = []
    for i in range(num_products):
        category = category_label(i % max(1, num_categories))
        price = float(np.round(rng.uniform(0.5, 20.0), 2))
        products.append(Product(
            name=f"{category}_{i:02d}",
            category=category,
            price=price,
            amount=int(rng.integers(0, 50))
        ))
    return products


def generate_similarity(
    products: List[Product],
    within_range: Tuple[float, float] = (0.6, 1.0),
    across_range: Tuple[float, float] = (0.0, 0.3),
    density: float = 1.0,
    seed: Optional[int] = None
) -> SimilarityTable:
    """
    Generate a category-driven similarity table.

    Args:
        products: Products to relate
        within_range: Score range for two products of the same category
        across_range: Score range across categories
        density: Probability that a pair gets a score at all
        seed: Random seed for reproducibility

    Complexity:
        Time: O(n^2) for n products
    """
    rng = np.random.default_rng(seed)
    table = SimilarityTable()
    for i, a in enumerate(products):
        for b in products[i + 1:]:
            if rng.random() >= density:
                continue
            low, high = within_range if a.category == b.category else across_range
            table.set(a.name, b.name, float(np.round(rng.uniform(low, high), 3)))
    return table


def generate_catalog(
    num_products: int = 12,
    num_categories: int = 3,
    density: float = 1.0,
    seed: Optional[int] = None,
    list_name: str = "generated"
) -> Tuple[Catalog, ProductList]:
    """
    Generate a catalog and a product list holding all of its products.

    The similarity seed is offset from the product seed so the two
    stay independent.
    """
    products = generate_products(num_products, num_categories, seed=seed)
    similarity_seed = seed + 1000 if seed is not None else None
    table = generate_similarity(products, density=density, seed=similarity_seed)
    catalog = Catalog(products={p.name: p for p in products}, similarity=table)
    return catalog, ProductList(list_name, "mixed", products)


def catalog_to_dict(catalog: Catalog) -> Dict[str, Any]:
    return {
        "products": [p.to_dict() for p in catalog.products.values()],
        "similarities": [[a, b, s] for a, b, s in catalog.similarity.pairs()]
    }


def catalog_from_dict(data: Dict[str, Any]) -> Catalog:
    products = [Product.from_dict(p) for p in data["products"]]
    table = SimilarityTable.from_pairs(tuple(t) for t in data.get("similarities", []))
    return Catalog(products={p.name: p for p in products}, similarity=table)


def save_catalog_to_json(catalog: Catalog, filepath: str) -> None:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(catalog_to_dict(catalog), f, indent=2)


def load_catalog_from_json(filepath: str) -> Catalog:
    with open(filepath, 'r') as f:
        return catalog_from_dict(json.load(f))


def visualize_distribution(
    distribution: Distribution,
    catalog: Catalog,
    save_path: Optional[str] = None
) -> None:
    """
    Draw a distribution as its shelf grid.

    - Squares: occupied cells, coloured by product category
    - Lines: neighbouring products, thicker for higher similarity
    - Empty cells are left as outlines

    Args:
        distribution: Distribution to draw
        catalog: Supplies categories and similarity scores
        save_path: If provided, save figure to this path

    Note:
        Requires matplotlib. Import error is caught gracefully.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("matplotlib not available for visualization")
        return

    grid = distribution.render_as_names()
    rows, cols = distribution.shape
    categories = sorted({p.category for p in catalog.products.values()})
    cmap = plt.get_cmap('tab10')
    colours = {c: cmap(i % 10) for i, c in enumerate(categories)}

    fig, ax = plt.subplots(figsize=(max(4, cols * 1.6), max(3, rows * 1.2)))

    # neighbour links first so the cells sit on top
    for r in range(rows):
        for c in range(cols):
            name = grid[r][c]
            if name is None:
                continue
            for nr, nc in ((r, c + 1), (r + 1, c)):
                if nr < rows and nc < cols and grid[nr][nc] is not None:
                    score = catalog.similarity.score(name, grid[nr][nc])
                    if score > 0:
                        ax.plot([c, nc], [r, nr], color='gray', alpha=0.6,
                                linewidth=0.5 + 6 * score, zorder=1)

    for r in range(rows):
        for c in range(cols):
            name = grid[r][c]
            if name is None:
                ax.add_patch(plt.Rectangle((c - 0.4, r - 0.4), 0.8, 0.8, fill=False,
                                           linestyle='--', edgecolor='lightgray', zorder=2))
                continue
            product = catalog.products.get(name)
            colour = colours.get(product.category, 'white') if product else 'white'
            ax.add_patch(plt.Rectangle((c - 0.4, r - 0.4), 0.8, 0.8, facecolor=colour,
                                       edgecolor='black', alpha=0.8, zorder=2))
            ax.text(c, r, name, ha='center', va='center', fontsize=8, zorder=3)

    ax.set_xlim(-0.6, cols - 0.4)
    ax.set_ylim(rows - 0.4, -0.6)
    ax.set_xticks(range(cols))
    ax.set_yticks(range(rows))
    ax.set_title(f'Distribution: {distribution.name} '
                 f'(score {distribution.score(catalog.similarity):.3f})')
    ax.set_aspect('equal', adjustable='box')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("Visualization saved to %s", save_path)
    else:
        plt.show()

    plt.close(fig)
