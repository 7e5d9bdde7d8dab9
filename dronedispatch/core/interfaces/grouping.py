# dronedispatch/core/interfaces/grouping.py
from typing import List, Protocol, Sequence, Tuple

from dronedispatch.core.entities.assignment import Match
from dronedispatch.core.entities.task import Task
from dronedispatch.core.entities.task_group import TaskGroup
from dronedispatch.core.entities.unit import Unit


class TaskGroupingStrategy(Protocol):
    """
    Protocol for batching tasks under capacity and proximity bounds.
    """

    def group(self, tasks: Sequence[Task], units: Sequence[Unit]) -> List[TaskGroup]:
        """
        Split tasks into groups.

        Args:
            tasks: Pending tasks.
            units: Available units, used to derive the capacity ceiling.

        Returns:
            Groups covering every task exactly once.
        """
        ...


class AssignmentStrategy(Protocol):
    """
    Protocol for matching task groups to units.
    """

    def assign(
        self, groups: Sequence[TaskGroup], units: Sequence[Unit]
    ) -> Tuple[List[Match], List[TaskGroup]]:
        """
        Match groups to units, at most one group per unit.

        Returns:
            A tuple containing:
            - Matches in processing order.
            - Groups for which no eligible unit was left.
        """
        ...
