"""
Timing and Benchmarking Utilities

This module provides utilities for measuring how long placement searches
take and for comparing the two search strategies on the same input.

Features:
- Timer context manager for easy timing
- Benchmark result container with summary statistics
- Single-function benchmark helper

Example:
    >>> with Timer("exhaustive search") as t:
    ...     grid = solve(Algorithm.EXHAUSTIVE, products, 3, 2, -1, table)
    >>> print(f"Took {t.elapsed_ms:.2f} ms")
"""

import logging
import statistics
import time
from dataclasses import dataclass, field
from typing import Optional, Callable, List, Dict, Any

logger = logging.getLogger(__name__)


class Timer:
    """
    Context manager for timing code blocks.

    Provides high-resolution timing using time.perf_counter(). When a
    name is given the elapsed time is logged at DEBUG level on exit.

    Attributes:
        name: Optional name for the timed operation
        elapsed: Elapsed time in seconds
        elapsed_ms: Elapsed time in milliseconds
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._start: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> 'Timer':
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self.elapsed = time.perf_counter() - self._start
        if self.name:
            logger.debug("%s: %.2f ms", self.name, self.elapsed_ms)

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed * 1000


def compute_speedup(baseline_time: float, optimized_time: float) -> float:
    """
    Compute speedup ratio between baseline and optimized times.

    A speedup > 1 means the optimized version is faster.
    """
    if optimized_time <= 0:
        return float('inf')
    return baseline_time / optimized_time


@dataclass
class BenchmarkResult:
    """
    Container for benchmark results.

    Attributes:
        name: Name of the benchmarked operation
        times_ms: Timing results in milliseconds
        metadata: Additional information (scores, evaluation counts)
    """
    name: str
    times_ms: List[float] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_trial(self, time_ms: float) -> None:
        self.times_ms.append(time_ms)

    @property
    def mean_ms(self) -> float:
        if not self.times_ms:
            return 0.0
        return statistics.mean(self.times_ms)

    @property
    def std_ms(self) -> float:
        if len(self.times_ms) < 2:
            return 0.0
        return statistics.stdev(self.times_ms)

    @property
    def num_trials(self) -> int:
        return len(self.times_ms)

    def summary(self) -> str:
        """Generate summary string."""
        return (f"{self.name}: {self.mean_ms:.2f} +/- {self.std_ms:.2f} ms "
                f"(n={self.num_trials})")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'mean_ms': self.mean_ms,
            'std_ms': self.std_ms,
            'num_trials': self.num_trials,
            'metadata': self.metadata
        }


def benchmark_function(
    func: Callable,
    args: tuple = (),
    kwargs: Optional[dict] = None,
    n_trials: int = 5,
    name: Optional[str] = None
) -> BenchmarkResult:
    """
    Benchmark a single function.

    Args:
        func: Function to benchmark
        args: Positional arguments for function
        kwargs: Keyword arguments for function
        n_trials: Number of timing trials
        name: Optional name for result

    Returns:
        BenchmarkResult with timing statistics
    """
    if kwargs is None:
        kwargs = {}
    result = BenchmarkResult(name or func.__name__)
    for _ in range(n_trials):
        with Timer() as t:
            func(*args, **kwargs)
        result.add_trial(t.elapsed_ms)
    return result
