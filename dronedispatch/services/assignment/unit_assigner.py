# dronedispatch/services/assignment/unit_assigner.py
from typing import List, Optional, Sequence, Tuple
import logging

from dronedispatch.core.entities.assignment import Match
from dronedispatch.core.entities.point import euclidean_distance
from dronedispatch.core.entities.task_group import TaskGroup
from dronedispatch.core.entities.unit import Unit
from dronedispatch.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class UnitAssigner:
    """
    Matches task groups to units by a weighted score.

    score = w_distance / (distance(unit, group centroid) + 1)
          + w_capacity * group weight / unit capacity
          + w_battery * battery fraction

    Groups are processed by descending mean priority; each picks the
    highest-scoring unit that can carry it and has not been used yet in
    this pass. The used-unit bookkeeping is local to one ``assign`` call.
    """

    def __init__(
        self,
        distance_weight: float = 0.4,
        capacity_weight: float = 0.3,
        battery_weight: float = 0.3,
    ):
        """
        Initialize the assigner.

        Args:
            distance_weight: Weight of the proximity term.
            capacity_weight: Weight of the capacity-utilization term.
            battery_weight: Weight of the battery term.
        """
        if min(distance_weight, capacity_weight, battery_weight) < 0:
            raise ConfigurationError("Assignment weights must be non-negative")

        self.distance_weight = distance_weight
        self.capacity_weight = capacity_weight
        self.battery_weight = battery_weight

    def assign(
        self, groups: Sequence[TaskGroup], units: Sequence[Unit]
    ) -> Tuple[List[Match], List[TaskGroup]]:
        """
        Assign groups to units, at most one group per unit.

        Args:
            groups: Task groups to place.
            units: Candidate units.

        Returns:
            A tuple containing:
            - Matches, in processing order.
            - Groups no remaining unit could carry.
        """
        sorted_groups = sorted(groups, key=lambda g: g.mean_priority, reverse=True)

        used_unit_ids = set()
        matches: List[Match] = []
        unmatched: List[TaskGroup] = []

        for group in sorted_groups:
            candidates = [u for u in units if u.id not in used_unit_ids]
            best = self.find_best_unit(group, candidates)

            if best is None:
                logger.debug(
                    "No unit left for group %s (weight=%.2f)",
                    list(group.task_ids),
                    group.total_weight,
                )
                unmatched.append(group)
                continue

            unit, score = best
            used_unit_ids.add(unit.id)
            matches.append(Match(unit=unit, group=group, score=score))

        return matches, unmatched

    def find_best_unit(
        self, group: TaskGroup, units: Sequence[Unit]
    ) -> Optional[Tuple[Unit, float]]:
        """
        Pick the highest-scoring unit that can carry the group.

        Ties keep the earlier unit.

        Returns:
            (unit, score), or None when no unit has enough capacity.
        """
        total_weight = group.total_weight
        center = group.centroid

        best_unit = None
        best_score = -1.0

        for unit in units:
            if unit.capacity < total_weight:
                continue

            score = self.score(unit, total_weight, euclidean_distance(unit.location, center))
            if score > best_score:
                best_score = score
                best_unit = unit

        if best_unit is None:
            return None
        return best_unit, best_score

    def score(self, unit: Unit, group_weight: float, distance: float) -> float:
        """Score a unit for a group at the given distance from its centroid."""
        return (
            self.distance_weight * (1 / (distance + 1))
            + self.capacity_weight * (group_weight / unit.capacity)
            + self.battery_weight * unit.battery_fraction
        )
