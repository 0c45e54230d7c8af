"""
Test Suite for the Shelf Layout Planner

This package contains unit tests and integration tests for:
- Grid primitives and the adjacency objective
- Exhaustive and hill-climbing placement search
- Distributions, shelves and the shelf manager
- Text and JSON persistence

Run tests with: pytest -v
"""
