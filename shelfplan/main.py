"""
Main Entry Point for Shelf Layout Planning

This script provides a command-line interface for the placement system.
It orchestrates:

1. Catalog generation (products + similarity) or loading from JSON
2. Shelf creation
3. Placement search (exhaustive or hill climbing)
4. Layout and search-statistics reporting

Usage:
    # Generate a catalog and place it with hill climbing
    python -m shelfplan.main --xsize 4 --ysize 3 --num-products 10

    # Exhaustive search on a small shelf, bounded to 5000 candidates
    python -m shelfplan.main --algorithm exhaustive --xsize 3 --ysize 2 --num-products 6 --limit 5000

    # Compare both strategies and store the best layout
    python -m shelfplan.main --compare --output data/layout.txt
"""

import argparse
import logging
import sys
from typing import List, Optional

from .catalog import Catalog, ProductList
from .config import ALGORITHM_CHOICES, CLI_DEFAULT_LIMIT, EMPTY_MARKER, SearchSettings
from .distribution import Distribution
from .exceptions import ShelfPlanError
from .manager import ShelfManager
from .search import Algorithm
from .synthetic_data import (
    generate_catalog, load_catalog_from_json, save_catalog_to_json, visualize_distribution
)


def print_header():
    """Print application header."""
    print("=" * 70)
    print("  SHELF LAYOUT PLANNER")
    print("  Similarity-Driven Product Placement")
    print("=" * 70)
    print()


def format_layout(grid: List[List[Optional[str]]]) -> str:
    """Render a grid as an aligned text table."""
    cells = [[EMPTY_MARKER if name is None else name for name in row] for row in grid]
    width = max((len(c) for row in cells for c in row), default=len(EMPTY_MARKER))
    return "\n".join("  " + " | ".join(c.ljust(width) for c in row) for row in cells)


def build_catalog(args) -> Catalog:
    if args.input:
        print(f"Loading catalog from {args.input}...")
        return load_catalog_from_json(args.input)

    print("Generating Synthetic Catalog...")
    print("-" * 40)
    print(f"  Products: {args.num_products}")
    print(f"  Categories: {args.num_categories}")
    print(f"  Similarity density: {args.density:.0%}")
    print(f"  Random seed: {args.seed}")
    print()
    catalog, _ = generate_catalog(
        num_products=args.num_products,
        num_categories=args.num_categories,
        density=args.density,
        seed=args.seed
    )
    if args.save_catalog:
        save_catalog_to_json(catalog, args.save_catalog)
        print(f"Catalog saved to: {args.save_catalog}\n")
    return catalog


def run_placement(
    manager: ShelfManager,
    settings: SearchSettings,
    name: str
) -> Distribution:
    distribution = manager.distribute_shelf(0, name, settings.algorithm, settings.limit)
    stats = manager.get_shelf(0).last_stats
    print(f"[{Algorithm.parse(settings.algorithm).value}]")
    print(f"  Score:         {stats.score:.4f}")
    print(f"  Work done:     {stats.work}")
    print(f"  Limit reached: {stats.limit_reached}")
    print(f"  Time:          {stats.elapsed_ms:.2f} ms")
    print()
    return distribution


def print_report(distribution: Distribution, manager: ShelfManager) -> None:
    """Print the layout of a distribution and the shelf history."""
    print("=" * 70)
    print(f"DISTRIBUTION: {distribution.name}")
    print("=" * 70)
    print(format_layout(distribution.render_as_names()))
    print("-" * 70)
    print(f"Adjacency score: {distribution.score(manager.catalog.similarity):.4f}")
    print("History (oldest first):")
    for entry in manager.distribution_log(0):
        print(f"  {entry.name:<20} created {entry.created_at:%Y-%m-%d %H:%M:%S}")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Similarity-driven shelf layout planner',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m shelfplan.main --xsize 4 --ysize 3 --num-products 10
  python -m shelfplan.main --algorithm exhaustive --xsize 3 --ysize 2 --num-products 6
  python -m shelfplan.main --compare --output data/layout.txt
        """
    )

    data_group = parser.add_argument_group('Catalog')
    data_group.add_argument('--input', '-i', type=str,
                            help='Path to a catalog JSON file (default: generate one)')
    data_group.add_argument('--num-products', type=int, default=10,
                            help='Number of generated products (default: 10)')
    data_group.add_argument('--num-categories', type=int, default=3,
                            help='Number of generated categories (default: 3)')
    data_group.add_argument('--density', type=float, default=1.0,
                            help='Fraction of product pairs with a score (default: 1.0)')
    data_group.add_argument('--seed', type=int, default=42,
                            help='Random seed (default: 42)')
    data_group.add_argument('--save-catalog', type=str,
                            help='Write the generated catalog to this JSON file')

    search_group = parser.add_argument_group('Search')
    search_group.add_argument('--xsize', type=int, default=4,
                              help='Shelf columns (default: 4)')
    search_group.add_argument('--ysize', type=int, default=3,
                              help='Shelf rows (default: 3)')
    search_group.add_argument('--algorithm', '-a', type=str, default='hill_climbing',
                              choices=list(ALGORITHM_CHOICES),
                              help='Placement strategy (default: hill_climbing)')
    search_group.add_argument('--limit', '-l', type=int, default=CLI_DEFAULT_LIMIT,
                              help='Work limit, negative for unbounded (default: 100000)')
    search_group.add_argument('--compare', action='store_true',
                              help='Run both strategies on the same shelf')

    out_group = parser.add_argument_group('Output')
    out_group.add_argument('--output', '-o', type=str,
                           help='Store the current distribution to this text file')
    out_group.add_argument('--plot', type=str,
                           help='Save a picture of the current distribution (needs matplotlib)')
    out_group.add_argument('--verbose', '-v', action='store_true',
                           help='Debug logging')
    out_group.add_argument('--quiet', '-q', action='store_true',
                           help='Minimal output')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    if not args.quiet:
        print_header()

    settings = SearchSettings(
        algorithm=args.algorithm,
        limit=args.limit,
        xsize=args.xsize,
        ysize=args.ysize
    )

    try:
        catalog = build_catalog(args)
        manager = ShelfManager(catalog)
        plist = ProductList("cli", "mixed", catalog.products.values())
        manager.add_product_list(plist)
        manager.create_shelf(0, settings.xsize, settings.ysize, plist)
        if not args.quiet:
            print(f"Shelf: {settings.xsize}x{settings.ysize} ({len(plist)}/{settings.capacity} cells filled)\n")

        if args.compare:
            results = []
            for algorithm in ALGORITHM_CHOICES:
                run = SearchSettings(algorithm, settings.limit, settings.xsize, settings.ysize)
                results.append(run_placement(manager, run, algorithm))
            best = max(results, key=lambda d: d.score(catalog.similarity))
            manager.make_current(0, best.name)
        else:
            run_placement(manager, settings, settings.algorithm)

        current = manager.get_shelf(0).current_distribution()
        if not args.quiet:
            print_report(current, manager)
        if args.output:
            path = manager.store_distribution(current.name, args.output)
            print(f"Distribution saved to: {path}")
        if args.plot:
            visualize_distribution(current, catalog, save_path=args.plot)
    except ShelfPlanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
