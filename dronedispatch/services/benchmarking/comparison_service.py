# dronedispatch/services/benchmarking/comparison_service.py
from typing import Callable, Dict, Optional, Sequence
import logging
import random
import time

import pandas as pd
from tqdm import tqdm

from dronedispatch.core.entities.optimization import OptimizationResult
from dronedispatch.core.entities.task import Task
from dronedispatch.core.entities.unit import Unit
from dronedispatch.services.optimization.dispatch_optimizer import DispatchOptimizer
from dronedispatch.services.routing.route_planner import ALGORITHMS

logger = logging.getLogger(__name__)

COLUMNS = [
    "algorithm",
    "success",
    "total_routes",
    "total_tasks",
    "unmatched_groups",
    "total_distance",
    "average_time",
    "efficiency",
    "utilization",
    "runtime_sec",
]


class ComparisonService:
    """
    Runs the same snapshot through every routing algorithm and compares the
    resulting batches.

    Each run gets an optimizer with a freshly seeded random source, so the
    comparison is reproducible for a given seed.
    """

    def __init__(
        self,
        optimizer_factory: Callable[[random.Random], DispatchOptimizer],
        seed: int = 0,
        show_progress: bool = False,
    ):
        """
        Initialize the comparison service.

        Args:
            optimizer_factory: Builds an optimizer around a given random source.
            seed: Seed for every run.
            show_progress: Whether to display a progress bar.
        """
        self.optimizer_factory = optimizer_factory
        self.seed = seed
        self.show_progress = show_progress

    def compare(
        self,
        units: Sequence[Unit],
        tasks: Sequence[Task],
        algorithms: Optional[Sequence[str]] = None,
    ) -> pd.DataFrame:
        """
        Optimize the snapshot once per algorithm.

        Args:
            units: Fleet snapshot.
            tasks: Task snapshot.
            algorithms: Algorithms to run; all built-in algorithms by default.

        Returns:
            DataFrame with one row of statistics per algorithm.
        """
        algorithms = list(algorithms or ALGORITHMS)
        results: Dict[str, OptimizationResult] = {}
        runtimes: Dict[str, float] = {}

        for algorithm in tqdm(
            algorithms, desc="Comparing algorithms", disable=not self.show_progress
        ):
            optimizer = self.optimizer_factory(random.Random(self.seed))
            start_time = time.time()
            results[algorithm] = optimizer.optimize(units, tasks, algorithm=algorithm)
            runtimes[algorithm] = time.time() - start_time
            logger.debug("%s finished in %.3fs", algorithm, runtimes[algorithm])

        rows = []
        for algorithm in algorithms:
            result = results[algorithm]
            row = {"algorithm": algorithm, "success": result.success}
            row.update(result.stats.to_dict())
            row["unmatched_groups"] = len(result.unmatched_groups)
            row["runtime_sec"] = runtimes[algorithm]
            rows.append(row)

        return pd.DataFrame(rows, columns=COLUMNS)

    def generate_report(self, comparison: pd.DataFrame) -> str:
        """
        Generate a text report from comparison data.

        Args:
            comparison: DataFrame from the compare method.

        Returns:
            Markdown report as a string.
        """
        report = []
        report.append("# Routing Algorithm Comparison Report")
        report.append("")
        report.append("| Algorithm | Routes | Tasks | Unmatched | Distance | Avg Time (min) | Efficiency | Runtime (s) |")
        report.append("|-----------|--------|-------|-----------|----------|----------------|------------|-------------|")

        for row in comparison.itertuples(index=False):
            if not row.success:
                report.append(f"| {row.algorithm} | - | - | - | - | - | - | {row.runtime_sec:.3f} |")
                continue
            report.append(
                f"| {row.algorithm} | {row.total_routes} | {row.total_tasks} | {row.unmatched_groups} "
                f"| {row.total_distance:.2f} | {row.average_time:.2f} | {row.efficiency:.2f} "
                f"| {row.runtime_sec:.3f} |"
            )

        successful = comparison[comparison["success"] & (comparison["total_routes"] > 0)]
        if not successful.empty:
            best = successful.loc[successful["total_distance"].idxmin()]
            report.append("")
            report.append(
                f"Shortest total distance: {best['algorithm']} ({best['total_distance']:.2f})"
            )

        return "\n".join(report)
