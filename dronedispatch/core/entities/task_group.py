# dronedispatch/core/entities/task_group.py
from dataclasses import dataclass, field
from typing import List, Tuple

from .point import Point, centroid, chain_distance
from .task import Task


@dataclass
class TaskGroup:
    """
    Represents a capacity- and proximity-bounded batch of tasks considered
    for a single route.
    """

    tasks: List[Task] = field(default_factory=list)

    def add_task(self, task: Task) -> None:
        """Append a task to the group."""
        self.tasks.append(task)

    @property
    def task_ids(self) -> Tuple[str, ...]:
        return tuple(task.id for task in self.tasks)

    @property
    def locations(self) -> List[Point]:
        return [task.location for task in self.tasks]

    @property
    def total_weight(self) -> float:
        """Calculate the total weight of the group."""
        return sum(task.weight for task in self.tasks)

    @property
    def mean_priority(self) -> float:
        """Mean priority score of the member tasks."""
        if not self.tasks:
            return 0.0
        return sum(task.priority_score for task in self.tasks) / len(self.tasks)

    @property
    def centroid(self) -> Point:
        return centroid(self.locations)

    def chain_distance(self) -> float:
        """Distance of the group's sequential chain, in member order."""
        return chain_distance(self.locations)

    def __len__(self) -> int:
        return len(self.tasks)
