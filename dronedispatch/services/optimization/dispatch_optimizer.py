# dronedispatch/services/optimization/dispatch_optimizer.py
from typing import Any, Dict, List, Optional, Sequence
import logging
import random

from dronedispatch.core.entities.assignment import Assignment
from dronedispatch.core.entities.optimization import OptimizationResult
from dronedispatch.core.entities.task import Task
from dronedispatch.core.entities.unit import Unit
from dronedispatch.core.exceptions import ConfigurationError, DispatchError, InputError
from dronedispatch.core.interfaces.grouping import AssignmentStrategy, TaskGroupingStrategy
from dronedispatch.services.assignment.unit_assigner import UnitAssigner
from dronedispatch.services.grouping.task_grouper import TaskGrouper
from dronedispatch.services.routing.route_metrics import (
    BATTERY_PERCENT_PER_DISTANCE,
    LOADING_MINUTES,
    SERVICE_MINUTES_PER_STOP,
    estimate_battery_percent,
    estimate_route_time,
)
from dronedispatch.services.routing.route_planner import RoutePlanner
from dronedispatch.services.statistics.optimization_stats import (
    calculate_optimization_stats,
)

logger = logging.getLogger(__name__)

NO_UNITS_OR_TASKS = "No available units or pending tasks"


class DispatchOptimizer:
    """
    High-level service for one optimization pass.

    Orchestrates the pass over a unit/task snapshot:
    1. Keep units that are available and sufficiently charged
    2. Group tasks under capacity and proximity bounds
    3. Match groups to units
    4. Plan a route for each matched group from its unit's location
    5. Estimate time and battery per route and summarize the batch

    The optimizer only proposes assignments; it never changes the units or
    tasks it is given. Unit bookkeeping is local to each call, so callers
    must serialize passes that share a unit pool.
    """

    def __init__(
        self,
        grouper: Optional[TaskGroupingStrategy] = None,
        assigner: Optional[AssignmentStrategy] = None,
        planner: Optional[RoutePlanner] = None,
        min_battery_fraction: float = 0.2,
        battery_percent_per_distance: float = BATTERY_PERCENT_PER_DISTANCE,
        service_minutes_per_stop: float = SERVICE_MINUTES_PER_STOP,
        loading_minutes: float = LOADING_MINUTES,
    ):
        """
        Initialize the optimizer.

        Args:
            grouper: Task grouping service.
            assigner: Group-to-unit assignment service.
            planner: Route planning service.
            min_battery_fraction: Units must hold strictly more charge than this.
            battery_percent_per_distance: Battery percent consumed per distance unit.
            service_minutes_per_stop: Handling time per delivery.
            loading_minutes: Fixed loading time per route.
        """
        self.grouper = grouper or TaskGrouper()
        self.assigner = assigner or UnitAssigner()
        self.planner = planner or RoutePlanner()
        self.min_battery_fraction = min_battery_fraction
        self.battery_percent_per_distance = battery_percent_per_distance
        self.service_minutes_per_stop = service_minutes_per_stop
        self.loading_minutes = loading_minutes

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], rng: Optional[random.Random] = None
    ) -> "DispatchOptimizer":
        """Build an optimizer from a configuration dictionary (see ``get_config``)."""
        assignment_config = dict(config["ASSIGNMENT"])
        min_battery_fraction = assignment_config.pop("min_battery_fraction")
        energy_config = config["ENERGY"]

        return cls(
            grouper=TaskGrouper(**config["GROUPING"]),
            assigner=UnitAssigner(**assignment_config),
            planner=RoutePlanner.from_config(config["ROUTING"], rng=rng),
            min_battery_fraction=min_battery_fraction,
            battery_percent_per_distance=energy_config["battery_percent_per_distance"],
            service_minutes_per_stop=energy_config["service_minutes_per_stop"],
            loading_minutes=energy_config["loading_minutes"],
        )

    def optimize(
        self,
        units: Sequence[Unit],
        tasks: Sequence[Task],
        algorithm: Optional[str] = None,
    ) -> OptimizationResult:
        """
        Run one optimization pass.

        Args:
            units: Snapshot of the fleet.
            tasks: Snapshot of pending tasks.
            algorithm: Routing algorithm; the planner default when omitted.

        Returns:
            OptimizationResult. Input and configuration problems are reported
            with ``success=False`` rather than raised.
        """
        algorithm = algorithm or self.planner.default_algorithm

        try:
            # Validate the algorithm before doing any work
            self.planner.builder_for(algorithm)

            self.validate_units(units)
            eligible_units = [u for u in units if u.is_eligible(self.min_battery_fraction)]
            if not eligible_units or not tasks:
                logger.info(
                    "Skipping pass: %d eligible units, %d pending tasks",
                    len(eligible_units),
                    len(tasks),
                )
                return OptimizationResult.failure(NO_UNITS_OR_TASKS, algorithm)

            groups = self.grouper.group(tasks, eligible_units)
            matches, unmatched = self.assigner.assign(groups, eligible_units)

            routes = self.planner.plan_routes(
                [(match.group.tasks, match.unit.location) for match in matches],
                algorithm=algorithm,
            )

            assignments: List[Assignment] = []
            for match, route in zip(matches, routes):
                assignments.append(
                    Assignment(
                        unit_id=match.unit.id,
                        task_ids=list(match.group.task_ids),
                        route=route,
                        estimated_time_minutes=estimate_route_time(
                            route,
                            match.unit.speed,
                            self.service_minutes_per_stop,
                            self.loading_minutes,
                        ),
                        estimated_battery_percent=estimate_battery_percent(
                            route, self.battery_percent_per_distance
                        ),
                        score=match.score,
                    )
                )
        except DispatchError as e:
            logger.error("Optimization pass failed: %s", e)
            return OptimizationResult.failure(str(e), algorithm)

        if unmatched:
            logger.warning(
                "%d task groups could not be matched to a unit", len(unmatched)
            )

        stats = calculate_optimization_stats(
            assignments, self.battery_percent_per_distance
        )
        logger.info(
            "Pass with %s: %d assignments, %d tasks, %.2f total distance",
            algorithm,
            stats.total_routes,
            stats.total_tasks,
            stats.total_distance,
        )

        return OptimizationResult(
            success=True,
            algorithm=algorithm,
            assignments=assignments,
            unmatched_groups=unmatched,
            stats=stats,
        )

    @staticmethod
    def validate_units(units: Sequence[Unit]) -> None:
        """
        Check unit snapshots before they enter the pass.

        Raises:
            ConfigurationError: If a unit has a non-positive capacity.
            InputError: If a unit has a non-positive speed or range, or a
                battery fraction outside [0, 1].
        """
        for unit in units:
            if unit.capacity <= 0:
                raise ConfigurationError(
                    f"Unit {unit.id} has non-positive capacity {unit.capacity}"
                )
            if unit.speed <= 0 or unit.max_range <= 0:
                raise InputError(f"Unit {unit.id} needs positive speed and range")
            if not 0.0 <= unit.battery_fraction <= 1.0:
                raise InputError(f"Unit {unit.id} battery must be within [0, 1]")
