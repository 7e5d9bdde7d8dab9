# dronedispatch/core/entities/route.py
from dataclasses import dataclass, field
from typing import List, Optional

from .point import Point, route_distance


@dataclass(frozen=True)
class Stop:
    """A point on a route, tagged with the task it serves."""

    location: Point
    task_id: Optional[str] = None


@dataclass
class Route:
    """
    Closed walk that starts and ends at the origin and visits every stop once.
    """

    origin: Point
    stops: List[Stop] = field(default_factory=list)

    @property
    def points(self) -> List[Point]:
        """Route points including the origin at both ends; [origin] when empty."""
        if not self.stops:
            return [self.origin]
        return [self.origin] + [stop.location for stop in self.stops] + [self.origin]

    @property
    def task_ids(self) -> List[Optional[str]]:
        return [stop.task_id for stop in self.stops]

    @property
    def total_distance(self) -> float:
        """Calculate the total distance of the route."""
        return route_distance([stop.location for stop in self.stops], self.origin)

    def __len__(self) -> int:
        return len(self.points)
