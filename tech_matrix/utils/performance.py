"""Phase timing for analysis runs."""

import functools
import os
import time
import tracemalloc
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

from rich.console import Console
from rich.table import Table

from .logging import get_logger

F = TypeVar('F', bound=Callable[..., Any])

BENCHMARK_ENV_VAR = "TECHMATRIX_VERBOSE_BENCHMARK"


@dataclass
class PhaseTiming:
    """One timed execution of an analysis phase."""

    phase: str
    seconds: float
    peak_mb: Optional[float] = None


class PerformanceMonitor:
    """Accumulates wall time per phase (discovery, history walk, aggregation)."""

    def __init__(self, enable_memory_tracking: bool = False) -> None:
        self.timings: List[PhaseTiming] = []
        self.enable_memory_tracking = enable_memory_tracking
        self.console = Console(stderr=True)

        if enable_memory_tracking and not tracemalloc.is_tracing():
            tracemalloc.start()

    @contextmanager
    def measure(self, phase: str) -> Iterator[None]:
        """Time the enclosed block and record it under ``phase``."""
        start = time.perf_counter()
        try:
            yield
        finally:
            peak_mb = None
            if self.enable_memory_tracking:
                peak_mb = tracemalloc.get_traced_memory()[1] / 1024 / 1024
            self.timings.append(PhaseTiming(phase, time.perf_counter() - start, peak_mb))

    def phase_totals(self) -> Dict[str, float]:
        """Seconds spent per phase, in first-seen order."""
        totals: Dict[str, float] = {}
        for timing in self.timings:
            totals[timing.phase] = totals.get(timing.phase, 0.0) + timing.seconds
        return totals

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary.

        Returns:
            ``phases``, ``total_time``, ``measurements`` and, with memory
            tracking, ``max_peak_memory`` in MB; empty if nothing was measured
        """
        if not self.timings:
            return {}

        summary: Dict[str, Any] = {
            "measurements": len(self.timings),
            "total_time": sum(t.seconds for t in self.timings),
            "phases": self.phase_totals(),
        }
        if self.enable_memory_tracking:
            summary["max_peak_memory"] = max(t.peak_mb or 0.0 for t in self.timings)
        return summary

    def print_summary(self) -> None:
        """Print the per-phase table to stderr."""
        summary = self.get_summary()
        if not summary:
            return

        table = Table(title="Performance Summary")
        table.add_column("Phase", style="cyan")
        table.add_column("Time", style="green", justify="right")

        for phase, seconds in summary["phases"].items():
            table.add_row(phase, f"{seconds:.4f}s")
        table.add_row("Total", f"{summary['total_time']:.4f}s", style="bold")

        if "max_peak_memory" in summary:
            table.add_row("Max Peak Memory", f"{summary['max_peak_memory']:.2f} MB")

        self.console.print(table)


def benchmark(func: F) -> F:
    """Log the wall time of each call when TECHMATRIX_VERBOSE_BENCHMARK is set."""
    logger = get_logger("Performance")

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not os.environ.get(BENCHMARK_ENV_VAR):
            return func(*args, **kwargs)

        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logger.warning(f"{func.__qualname__} took {time.perf_counter() - start:.4f}s")
    return wrapper  # type: ignore[return-value]
