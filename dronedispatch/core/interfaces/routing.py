# dronedispatch/core/interfaces/routing.py
from typing import Protocol, Sequence, Optional
import random

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.route import Route, Stop


class RouteBuilder(Protocol):
    """
    Protocol for single-unit route construction and refinement.

    Implementations return a closed route from ``origin`` that visits every
    given stop exactly once.
    """

    name: str

    def build(
        self,
        stops: Sequence[Stop],
        origin: Point,
        rng: Optional[random.Random] = None,
    ) -> Route:
        """
        Compute a visiting order for the stops.

        Args:
            stops: Stops to visit (possibly empty).
            origin: Start and end point of the route.
            rng: Random source for randomized methods; deterministic methods ignore it.

        Returns:
            The planned route.
        """
        ...
