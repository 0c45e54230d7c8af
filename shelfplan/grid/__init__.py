"""
Grid Module for Shelf Placement

This module provides the grid primitives used by every placement strategy:
- Grid construction, validation and name indexing
- Serpentine fill order
- Adjacency objective and incremental swap scoring
"""

from .layout import (
    Grid,
    Coordinate,
    validate_dimensions,
    empty_grid,
    copy_grid,
    grid_shape,
    index_grid,
    count_products,
    in_bounds,
    serpentine_cells,
    fill_serpentine,
    grid_from_coordinates,
    adjacency_edges,
    neighbour_lists,
    padded_similarity,
    adjacency_score,
    swap_delta,
    grid_to_assignment,
    assignment_to_grid,
    score_grid
)

__all__ = [
    'Grid',
    'Coordinate',
    'validate_dimensions',
    'empty_grid',
    'copy_grid',
    'grid_shape',
    'index_grid',
    'count_products',
    'in_bounds',
    'serpentine_cells',
    'fill_serpentine',
    'grid_from_coordinates',
    'adjacency_edges',
    'neighbour_lists',
    'padded_similarity',
    'adjacency_score',
    'swap_delta',
    'grid_to_assignment',
    'assignment_to_grid',
    'score_grid'
]
