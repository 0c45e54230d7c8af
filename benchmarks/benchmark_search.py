#!/usr/bin/env python3
"""
Benchmark Script: Exhaustive Search vs Hill Climbing

This script measures the two placement strategies on synthetic catalogs
of growing size:

1. Exhaustive: branch and bound, capped by a candidate limit
2. Hill Climbing: best-improvement swaps from a greedy chain, unbounded

For each shelf shape it records mean time, the objective reached, and how
close hill climbing gets to the exhaustive result.

Usage:
    python benchmarks/benchmark_search.py
    python benchmarks/benchmark_search.py --shapes 2x2,3x2,3x3 --limit 200000 --trials 5

Output:
    - Console table with timing and score results
    - CSV file with detailed results
"""

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Dict, Any, Tuple

import numpy as np

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfplan.catalog import SimilarityTable
from shelfplan.search import ExhaustiveSearch, HillClimbingSearch, PlacementAlgorithm
from shelfplan.synthetic_data import generate_catalog
from shelfplan.timing import BenchmarkResult, benchmark_function, compute_speedup


def parse_shapes(text: str) -> List[Tuple[int, int]]:
    """Parse '4x3,5x4' into [(4, 3), (5, 4)] as (xsize, ysize)."""
    shapes = []
    for item in text.split(','):
        xsize, ysize = item.strip().lower().split('x')
        shapes.append((int(xsize), int(ysize)))
    return shapes


def benchmark_strategy(
    strategy: PlacementAlgorithm,
    names: List[str],
    xsize: int,
    ysize: int,
    limit: int,
    table: SimilarityTable,
    n_trials: int
) -> BenchmarkResult:
    """Time one strategy and attach the score and work of its last run."""
    result = benchmark_function(
        strategy.solve,
        args=(names, xsize, ysize, limit, table),
        n_trials=n_trials,
        name=strategy.name
    )
    result.metadata['score'] = strategy.last_stats.score
    result.metadata['work'] = strategy.last_stats.work
    result.metadata['limit_reached'] = strategy.last_stats.limit_reached
    return result


def run_benchmark_suite(
    shapes: List[Tuple[int, int]],
    limit: int,
    n_trials: int = 3,
    fill: float = 0.8,
    verbose: bool = True
) -> List[Dict[str, Any]]:
    """
    Run both strategies for each shelf shape.

    Args:
        shapes: (xsize, ysize) pairs
        limit: Candidate limit for the exhaustive search
        n_trials: Number of timing trials per strategy
        fill: Fraction of cells that receive a product
        verbose: Print progress information

    Returns:
        List of result dictionaries
    """
    results = []

    for xsize, ysize in shapes:
        num_products = max(1, int(round(xsize * ysize * fill)))
        catalog, plist = generate_catalog(
            num_products=num_products,
            num_categories=max(1, num_products // 3),
            seed=42 + xsize * ysize
        )
        names = plist.names()

        if verbose:
            print(f"\n{'='*60}")
            print(f"Shelf {xsize}x{ysize}: {num_products} products")
            print('='*60)

        exhaustive = benchmark_strategy(
            ExhaustiveSearch(), names, xsize, ysize, limit, catalog.similarity, n_trials
        )
        hill = benchmark_strategy(
            HillClimbingSearch(), names, xsize, ysize, -1, catalog.similarity, n_trials
        )

        if verbose:
            print(f"  {exhaustive.summary()}  score={exhaustive.metadata['score']:.4f}")
            print(f"  {hill.summary()}  score={hill.metadata['score']:.4f}")

        best = exhaustive.metadata['score']
        results.append({
            'xsize': xsize,
            'ysize': ysize,
            'num_products': num_products,
            'exhaustive_ms': exhaustive.mean_ms,
            'exhaustive_std': exhaustive.std_ms,
            'exhaustive_score': best,
            'exhaustive_work': exhaustive.metadata['work'],
            'exhaustive_limit_reached': exhaustive.metadata['limit_reached'],
            'hill_ms': hill.mean_ms,
            'hill_std': hill.std_ms,
            'hill_score': hill.metadata['score'],
            'hill_work': hill.metadata['work'],
            'score_ratio': hill.metadata['score'] / best if best > 0 else np.nan,
            'speedup_hill_vs_exhaustive': compute_speedup(exhaustive.mean_ms, hill.mean_ms)
        })

    return results


def save_results_csv(results: List[Dict[str, Any]], filepath: str):
    """Save benchmark results to CSV file."""
    if not results:
        return

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=list(results[0].keys()))
        writer.writeheader()
        writer.writerows(results)

    print(f"\nResults saved to: {path}")


def print_results_table(results: List[Dict[str, Any]]):
    """Print formatted results table."""
    print("\n" + "=" * 80)
    print("BENCHMARK RESULTS SUMMARY")
    print("=" * 80)

    print(f"{'Shelf':>7} {'N':>4} {'Exh(ms)':>10} {'Exh score':>10} "
          f"{'HC(ms)':>10} {'HC score':>10} {'Ratio':>7} {'Speedup':>9}")
    print("-" * 80)

    for r in results:
        shelf = f"{r['xsize']}x{r['ysize']}"
        capped = "*" if r['exhaustive_limit_reached'] else " "
        print(f"{shelf:>7} {r['num_products']:>4} {r['exhaustive_ms']:>10.2f} "
              f"{r['exhaustive_score']:>9.3f}{capped} {r['hill_ms']:>10.2f} "
              f"{r['hill_score']:>10.3f} {r['score_ratio']:>7.3f} "
              f"{r['speedup_hill_vs_exhaustive']:>8.1f}x")

    print("=" * 80)
    print("* exhaustive search stopped at the candidate limit")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Benchmark exhaustive search against hill climbing'
    )
    parser.add_argument(
        '--shapes', type=str, default='2x2,3x2,3x3,4x3',
        help='Comma-separated shelf shapes XxY (default: 2x2,3x2,3x3,4x3)'
    )
    parser.add_argument(
        '--limit', type=int, default=100_000,
        help='Candidate limit for exhaustive search (default: 100000)'
    )
    parser.add_argument(
        '--trials', type=int, default=3,
        help='Number of timing trials per strategy (default: 3)'
    )
    parser.add_argument(
        '--output', type=str, default='benchmarks/benchmark_results.csv',
        help='Output CSV file path'
    )
    parser.add_argument(
        '--quiet', '-q', action='store_true',
        help='Minimal output'
    )

    args = parser.parse_args()
    shapes = parse_shapes(args.shapes)

    if not args.quiet:
        print("=" * 60)
        print("  SHELF PLACEMENT BENCHMARK")
        print("  Exhaustive Search vs Hill Climbing")
        print("=" * 60)
        print(f"\nShelf shapes: {args.shapes}")
        print(f"Exhaustive limit: {args.limit}")
        print(f"Trials per strategy: {args.trials}")

    results = run_benchmark_suite(shapes, args.limit, args.trials, verbose=not args.quiet)
    print_results_table(results)
    save_results_csv(results, args.output)


if __name__ == "__main__":
    main()
