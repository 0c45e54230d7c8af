"""
Similarity-Driven Shelf Layout Planner

This package arranges catalog products on a fixed-size shelf grid so that
similar products sit next to each other, and keeps a history of the
arrangements produced for each shelf.

Main modules:
- catalog: Products, product lists and the similarity table
- grid: Grid primitives and the adjacency objective
- search: Exhaustive and hill-climbing placement strategies
- distribution: One arrangement with a name -> cell index
- shelf: A shelf and its distribution history
- manager: Orchestrator owning shelves, catalog and distributions
- persistence: Text and JSON storage of distributions
"""

from .catalog import Catalog, Product, ProductList, SimilarityTable
from .distribution import Distribution
from .manager import ShelfManager
from .search import Algorithm, ExhaustiveSearch, HillClimbingSearch, solve
from .shelf import Shelf

__version__ = "1.0.0"

__all__ = [
    'Catalog',
    'Product',
    'ProductList',
    'SimilarityTable',
    'Distribution',
    'ShelfManager',
    'Algorithm',
    'ExhaustiveSearch',
    'HillClimbingSearch',
    'solve',
    'Shelf'
]
