# dronedispatch/services/routing/nearest_neighbor.py
from typing import List, Optional, Sequence
import random

from dronedispatch.core.entities.point import Point, euclidean_distance
from dronedispatch.core.entities.route import Route, Stop


class NearestNeighborRouter:
    """
    Greedy route construction: always fly to the closest unvisited stop.

    Runs in O(n^2). Ties are broken by the first occurrence in input order.
    """

    name = "nearest_neighbor"

    def build(
        self,
        stops: Sequence[Stop],
        origin: Point,
        rng: Optional[random.Random] = None,
    ) -> Route:
        """
        Build a closed route from origin through every stop.

        Args:
            stops: Stops to visit.
            origin: Start and end point.
            rng: Unused; accepted for interface compatibility.

        Returns:
            Route visiting the stops in nearest-neighbor order.
        """
        return Route(origin=origin, stops=self.order(stops, origin))

    def order(self, stops: Sequence[Stop], origin: Point) -> List[Stop]:
        """Return the stops in nearest-neighbor visiting order."""
        unvisited = list(stops)
        ordered = []
        current = origin

        while unvisited:
            nearest_index = 0
            nearest_distance = euclidean_distance(current, unvisited[0].location)

            for i in range(1, len(unvisited)):
                distance = euclidean_distance(current, unvisited[i].location)
                if distance < nearest_distance:
                    nearest_distance = distance
                    nearest_index = i

            nearest = unvisited.pop(nearest_index)
            ordered.append(nearest)
            current = nearest.location

        return ordered
