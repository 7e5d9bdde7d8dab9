# dronedispatch/core/entities/assignment.py
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .route import Route
from .task_group import TaskGroup
from .unit import Unit


@dataclass
class Assignment:
    """
    A proposed unit-to-task-group match together with its visiting route.

    ``route`` and the estimates are filled in once the route is planned.
    """

    unit_id: str
    task_ids: List[str]
    route: Optional[Route] = None
    estimated_time_minutes: float = 0.0
    estimated_battery_percent: float = 0.0
    score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for reporting."""
        points = self.route.points if self.route is not None else []
        return {
            "unit_id": self.unit_id,
            "task_ids": list(self.task_ids),
            "route": [(p.x, p.y) for p in points],
            "estimated_time_minutes": self.estimated_time_minutes,
            "estimated_battery_percent": self.estimated_battery_percent,
        }


@dataclass
class Match:
    """Intermediate pairing of a group with the unit that will carry it."""

    unit: Unit
    group: TaskGroup
    score: float
