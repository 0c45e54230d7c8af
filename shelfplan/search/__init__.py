"""
Search Module for Shelf Placement

This module provides the placement strategies:
- ExhaustiveSearch: branch and bound over every placement
- HillClimbingSearch: best-improvement local search over cell swaps

Both are reached through solve() with an Algorithm selector.
"""

from .base import (
    Algorithm,
    PlacementAlgorithm,
    PlacementProblem,
    SearchStats,
    WorkLimit,
    validate_limit
)
from .exhaustive import ExhaustiveSearch
from .hill_climbing import HillClimbingSearch
from .solver import create_algorithm, solve, validate_request

__all__ = [
    'Algorithm',
    'PlacementAlgorithm',
    'PlacementProblem',
    'SearchStats',
    'WorkLimit',
    'validate_limit',
    'ExhaustiveSearch',
    'HillClimbingSearch',
    'create_algorithm',
    'solve',
    'validate_request'
]
