# dronedispatch/services/statistics/optimization_stats.py
from typing import Sequence

from dronedispatch.core.entities.assignment import Assignment
from dronedispatch.core.entities.optimization import OptimizationStats
from dronedispatch.services.routing.route_metrics import BATTERY_PERCENT_PER_DISTANCE


def calculate_optimization_stats(
    assignments: Sequence[Assignment],
    percent_per_distance: float = BATTERY_PERCENT_PER_DISTANCE,
) -> OptimizationStats:
    """
    Summarize a batch of assignments.

    The total distance is recovered from the battery estimates through the
    consumption-per-distance constant. Reports downstream depend on these
    exact formulas.

    Args:
        assignments: Assignments produced by one pass.
        percent_per_distance: Battery percent consumed per distance unit.

    Returns:
        Aggregate statistics.
    """
    total_routes = len(assignments)
    total_tasks = sum(len(a.task_ids) for a in assignments)
    total_distance = sum(a.estimated_battery_percent / percent_per_distance for a in assignments)
    total_time = sum(a.estimated_time_minutes for a in assignments)
    average_time = total_time / total_routes if total_routes > 0 else 0.0

    if total_tasks > 0 and total_distance > 0:
        efficiency = total_tasks / total_distance * 100
    else:
        efficiency = 0.0

    utilization = total_tasks / total_routes if total_routes > 0 else 0.0

    return OptimizationStats(
        total_routes=total_routes,
        total_tasks=total_tasks,
        total_distance=round(total_distance, 2),
        average_time=round(average_time, 2),
        efficiency=efficiency,
        utilization=utilization,
    )
