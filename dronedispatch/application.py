# dronedispatch/application.py
from typing import Any, Dict, Mapping, Optional
import json
import logging
import os
import random
import time
from pathlib import Path

import pandas as pd

from dronedispatch.config.env import get_config
from dronedispatch.core.entities.facility import FacilityResult
from dronedispatch.core.entities.fleet import FleetRecommendation
from dronedispatch.core.entities.optimization import OptimizationResult
from dronedispatch.core.entities.task import PRIORITY_CLASSES
from dronedispatch.infrastructure.io.demand_history_reader import DemandHistoryReader
from dronedispatch.infrastructure.io.snapshot_reader import SnapshotReader
from dronedispatch.services.benchmarking.comparison_service import ComparisonService
from dronedispatch.services.facility.kmeans_placement import KMeansPlacement
from dronedispatch.services.fleet.fleet_sizer import FleetSizer
from dronedispatch.services.optimization.dispatch_optimizer import DispatchOptimizer

logger = logging.getLogger(__name__)


class DispatchApplication:
    """
    Main application class for the dronedispatch command line tools.

    Wires configuration into the services and exposes the workflows:
    1. Optimize a unit/task snapshot
    2. Compare routing algorithms on a snapshot
    3. Recommend a fleet size from demand counts
    4. Place bases over historical demand
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, seed: Optional[int] = None):
        """
        Initialize the application.

        Args:
            config: Configuration dictionary; loaded from the environment when omitted.
            seed: Seed for every randomized step, for reproducible runs.
        """
        self.config = config or get_config()
        self.seed = seed

    def _rng(self) -> random.Random:
        return random.Random(self.seed)

    def _resolve(self, path: str, section: str) -> str:
        """Resolve a bare file name against the configured directory."""
        if os.path.exists(path):
            return path
        return os.path.join(self.config["IO"][section], path)

    def create_optimizer(self, rng: Optional[random.Random] = None) -> DispatchOptimizer:
        return DispatchOptimizer.from_config(self.config, rng=rng or self._rng())

    def run_optimization(
        self, scenario: str, algorithm: Optional[str] = None
    ) -> OptimizationResult:
        """
        Optimize the snapshot stored in a scenario file.

        Args:
            scenario: Path or name of a JSON scenario.
            algorithm: Routing algorithm override.

        Returns:
            The optimization result.
        """
        scenario_path = self._resolve(scenario, "scenario_path")
        logger.info(f"Loading scenario: {scenario_path}")
        units, tasks = SnapshotReader(scenario_path).read()
        logger.info(f"Snapshot: {len(units)} units, {len(tasks)} tasks")

        start_time = time.time()
        result = self.create_optimizer().optimize(units, tasks, algorithm=algorithm)
        logger.info(f"Optimization computed in {time.time() - start_time:.2f} seconds")

        return result

    def run_comparison(self, scenario: str) -> pd.DataFrame:
        """
        Compare every routing algorithm on a scenario.

        Returns:
            Comparison DataFrame (one row per algorithm).
        """
        scenario_path = self._resolve(scenario, "scenario_path")
        units, tasks = SnapshotReader(scenario_path).read()

        service = ComparisonService(
            optimizer_factory=self.create_optimizer,
            seed=self.seed if self.seed is not None else 0,
            show_progress=True,
        )
        comparison = service.compare(units, tasks)
        print(service.generate_report(comparison))
        return comparison

    def run_fleet_sizing(self, counts_by_class: Mapping[str, int]) -> FleetRecommendation:
        """
        Recommend a fleet size for per-class task counts.
        """
        sizer = FleetSizer(**self.config["FLEET"])
        return sizer.recommend(counts_by_class)

    def run_base_placement(self, history: str, num_bases: Optional[int] = None) -> FacilityResult:
        """
        Place bases over the delivery points of a demand history CSV.

        Args:
            history: Path or name of the CSV file.
            num_bases: Number of bases; the configured default when omitted.
        """
        history_path = self._resolve(history, "scenario_path")
        points = DemandHistoryReader(history_path).points()

        facility_config = self.config["FACILITY"]
        placement = KMeansPlacement(
            max_iterations=facility_config["max_iterations"],
            tolerance=facility_config["tolerance"],
            coverage_radius=facility_config["coverage_radius"],
            rng=self._rng(),
        )
        k = num_bases if num_bases is not None else facility_config["num_bases"]
        logger.info(f"Placing {k} bases over {len(points)} delivery points")
        return placement.place(points, k)

    def save_result(self, result: OptimizationResult, name: str = "optimization") -> Path:
        """
        Write an optimization result as JSON into the configured output directory.
        """
        output_dir = Path(self.config["IO"]["output_path"])
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = time.strftime("%Y%m%d_%H%M%S")
        output_path = output_dir / f"{name}_{timestamp}.json"

        payload = {
            "success": result.success,
            "message": result.message,
            "algorithm": result.algorithm,
            "assignments": [a.to_dict() for a in result.assignments],
            "unmatched_groups": [list(g.task_ids) for g in result.unmatched_groups],
            "stats": result.stats.to_dict(),
        }
        with open(output_path, "w") as f:
            json.dump(payload, f, indent=2)

        logger.info(f"Result saved to {output_path}")
        return output_path

    def run_fleet_sizing_from_history(self, history: str) -> FleetRecommendation:
        """
        Recommend a fleet size from the priority counts of a demand history CSV.
        """
        history_path = self._resolve(history, "scenario_path")
        history_counts = DemandHistoryReader(history_path).counts_by_priority()
        if not history_counts:
            logger.warning(f"{history_path} has no priority column; no demand to size for")

        counts = {priority: 0 for priority in PRIORITY_CLASSES}
        counts.update(history_counts)
        return self.run_fleet_sizing(counts)

    @staticmethod
    def print_optimization_summary(result: OptimizationResult) -> None:
        if not result.success:
            print(f"Optimization failed ({result.algorithm}): {result.message}")
            return

        stats = result.stats
        print(f"Algorithm: {result.algorithm}")
        print(f"Assignments: {stats.total_routes}")
        print(f"Tasks assigned: {stats.total_tasks}")
        print(f"Total distance: {stats.total_distance:.2f}")
        print(f"Average route time: {stats.average_time:.2f} min")
        print(f"Efficiency: {stats.efficiency:.2f}")
        print(f"Tasks per route: {stats.utilization:.2f}")

        for assignment in result.assignments:
            print(
                f"  {assignment.unit_id}: {', '.join(assignment.task_ids)} "
                f"({assignment.estimated_time_minutes:.1f} min, "
                f"{assignment.estimated_battery_percent:.1f}% battery, "
                f"score {assignment.score:.3f})"
            )
        if result.unmatched_groups:
            print(f"Unmatched groups: {len(result.unmatched_groups)}")
            for group in result.unmatched_groups:
                print(f"  {', '.join(group.task_ids)} (weight {group.total_weight:.1f})")

    @staticmethod
    def print_fleet_summary(recommendation: FleetRecommendation) -> None:
        print(f"Recommended fleet: {recommendation.recommended_total} units")
        for priority, required in recommendation.required_per_class.items():
            count = recommendation.task_counts.get(priority, 0)
            print(f"  {priority}: {count} tasks -> {required} units")
        print(f"Units required without cap: {recommendation.total_required}")
        print(f"Utilization: {recommendation.utilization_percent:.1f}%")
        print(f"Throughput per unit per day: {recommendation.throughput_per_unit_per_day:.1f} tasks")
        if recommendation.bottleneck:
            print("Bottleneck: fleet size")

    @staticmethod
    def print_facility_summary(result: FacilityResult) -> None:
        if not result.success:
            print(f"Base placement failed: {result.message}")
            return

        print(f"Bases placed: {result.k} (after {result.iterations} iterations)")
        for i, (center, cluster) in enumerate(zip(result.centers, result.clusters)):
            print(f"  Base {i + 1}: ({center.x:.2f}, {center.y:.2f}) serving {len(cluster)} points")
        print(f"Average distance to base: {result.average_distance:.2f}")
        print(f"Coverage: {result.coverage_fraction:.1f}%")
