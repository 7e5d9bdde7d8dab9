# dronedispatch/services/fleet/fleet_sizer.py
"""
FleetSizer Module
-----------------
Estimates how many units are needed to serve a day's demand.

Each unit completes (operating_hours * 60) / average_service_minutes tasks a
day. Every priority class is sized on its own,
    required_class = ceil(class_count / throughput_per_unit_per_day),
and the recommendation is the sum over classes, capped at max_units.
"""

import logging
import math
from collections import Counter
from typing import Dict, Mapping, Sequence

from dronedispatch.core.entities.fleet import FleetRecommendation
from dronedispatch.core.entities.task import PRIORITY_CLASSES, Task
from dronedispatch.core.exceptions import ConfigurationError, InputError

logger = logging.getLogger(__name__)


class FleetSizer:
    """
    FleetSizer turns aggregate task counts into a fleet size recommendation.
    """

    def __init__(
        self,
        max_units: int = 10,
        operating_hours: float = 12.0,
        average_service_minutes: float = 45.0,
    ):
        """
        Initialize the FleetSizer.

        :param max_units: Largest fleet that can be deployed.
        :param operating_hours: Operating hours per day.
        :param average_service_minutes: Average time a unit spends per task.
        """
        if max_units <= 0:
            raise ConfigurationError("max_units must be positive")
        if operating_hours <= 0:
            raise ConfigurationError("operating_hours must be positive")
        if average_service_minutes <= 0:
            raise ConfigurationError("average_service_minutes must be positive")

        self.max_units = max_units
        self.operating_hours = operating_hours
        self.average_service_minutes = average_service_minutes

    @property
    def throughput_per_unit_per_day(self) -> float:
        """Tasks one unit completes per operating day."""
        return (self.operating_hours * 60) / self.average_service_minutes

    def recommend(self, counts_by_class: Mapping[str, int]) -> FleetRecommendation:
        """
        Size the fleet from task counts per priority class.

        :param counts_by_class: Mapping of priority class to task count.
        :return: FleetRecommendation with the capped total and per-class breakdown.
        """
        if any(count < 0 for count in counts_by_class.values()):
            raise InputError("Task counts must be non-negative")

        throughput = self.throughput_per_unit_per_day
        required_per_class = {
            priority: math.ceil(count / throughput)
            for priority, count in counts_by_class.items()
        }
        total_required = sum(required_per_class.values())
        bottleneck = total_required > self.max_units

        if bottleneck:
            logger.warning(
                "Demand needs %d units but the fleet is capped at %d",
                total_required,
                self.max_units,
            )

        return FleetRecommendation(
            recommended_total=min(total_required, self.max_units),
            required_per_class=required_per_class,
            total_required=total_required,
            utilization_percent=min(100.0, total_required / self.max_units * 100),
            bottleneck=bottleneck,
            throughput_per_unit_per_day=throughput,
            estimated_capacity=throughput * self.max_units,
            task_counts=dict(counts_by_class),
        )

    def recommend_for_tasks(self, tasks: Sequence[Task]) -> FleetRecommendation:
        """
        Size the fleet for a list of tasks, counted by their priority class.

        The standard classes are always reported, even when empty.
        """
        return self.recommend(self.count_by_class(tasks))

    @staticmethod
    def count_by_class(tasks: Sequence[Task]) -> Dict[str, int]:
        counts = Counter(task.priority for task in tasks)
        result = {priority: counts.get(priority, 0) for priority in PRIORITY_CLASSES}
        for priority, count in counts.items():
            result.setdefault(priority, count)
        return result
