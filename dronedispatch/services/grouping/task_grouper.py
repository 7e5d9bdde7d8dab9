# dronedispatch/services/grouping/task_grouper.py
from typing import List, Optional, Sequence
import logging

from dronedispatch.core.entities.point import chain_distance
from dronedispatch.core.entities.task import Task
from dronedispatch.core.entities.task_group import TaskGroup
from dronedispatch.core.entities.unit import Unit
from dronedispatch.core.exceptions import ConfigurationError, InputError

logger = logging.getLogger(__name__)


class TaskGrouper:
    """
    Batches tasks with a greedy first-fit rule bounded by capacity and proximity.

    Tasks are taken in descending priority order. Each one joins the first
    existing group that can take its weight without exceeding the capacity
    ceiling and whose sequential chain distance, with the task appended,
    stays within the proximity threshold; otherwise it opens a new group.

    The capacity ceiling is the largest capacity among the supplied units, so
    a group may be heavier than some units can carry. Such groups surface as
    unmatched during assignment.
    """

    def __init__(self, proximity_threshold: float = 50.0):
        """
        Initialize the grouper.

        Args:
            proximity_threshold: Maximum chain distance of a group.
        """
        if proximity_threshold <= 0:
            raise ConfigurationError("proximity_threshold must be positive")
        self.proximity_threshold = proximity_threshold

    def group(
        self,
        tasks: Sequence[Task],
        units: Sequence[Unit],
        capacity_ceiling: Optional[float] = None,
    ) -> List[TaskGroup]:
        """
        Split tasks into capacity- and proximity-bounded groups.

        Args:
            tasks: Tasks to group, in any order.
            units: Available units; their largest capacity is the ceiling.
            capacity_ceiling: Explicit ceiling overriding the one derived from units.

        Returns:
            Groups covering every task exactly once.

        Raises:
            InputError: If neither units nor a ceiling are supplied.
            ConfigurationError: If the ceiling is not positive.
        """
        if capacity_ceiling is None:
            if not units:
                raise InputError("No available units to derive a capacity ceiling")
            capacity_ceiling = max(unit.capacity for unit in units)

        if capacity_ceiling <= 0:
            raise ConfigurationError("Capacity ceiling must be positive")

        # sorted() is stable: equal scores keep their input order
        sorted_tasks = sorted(tasks, key=lambda t: t.priority_score, reverse=True)

        groups: List[TaskGroup] = []
        for task in sorted_tasks:
            target = self._find_group(groups, task, capacity_ceiling)
            if target is None:
                groups.append(TaskGroup(tasks=[task]))
            else:
                target.add_task(task)

        logger.debug(
            "Grouped %d tasks into %d groups (ceiling=%.2f, threshold=%.2f)",
            len(sorted_tasks),
            len(groups),
            capacity_ceiling,
            self.proximity_threshold,
        )
        return groups

    def _find_group(
        self, groups: List[TaskGroup], task: Task, capacity_ceiling: float
    ) -> Optional[TaskGroup]:
        for group in groups:
            if group.total_weight + task.weight > capacity_ceiling:
                continue

            extended_chain = chain_distance(group.locations + [task.location])
            if extended_chain <= self.proximity_threshold:
                return group

        return None
