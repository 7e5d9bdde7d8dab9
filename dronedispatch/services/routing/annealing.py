# dronedispatch/services/routing/annealing.py
from typing import Optional, Sequence
import logging
import math
import random

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.route import Route, Stop
from dronedispatch.core.exceptions import ConfigurationError
from dronedispatch.services.routing.route_metrics import (
    build_distance_matrix,
    permutation_distance,
)

logger = logging.getLogger(__name__)


class SimulatedAnnealingRouter:
    """
    Simulated annealing over stop permutations with swap neighbours and
    geometric cooling.

    Worse neighbours are accepted with probability exp(-delta / T); the best
    permutation seen so far is tracked separately and returned.
    """

    name = "simulated_annealing"

    def __init__(
        self,
        max_iterations: int = 1000,
        initial_temperature: float = 100.0,
        cooling_rate: float = 0.995,
    ):
        """
        Initialize the annealing router.

        Args:
            max_iterations: Number of neighbour evaluations.
            initial_temperature: Starting temperature.
            cooling_rate: Factor applied to the temperature after every iteration.
        """
        if max_iterations < 0:
            raise ConfigurationError("max_iterations must be non-negative")
        if initial_temperature <= 0:
            raise ConfigurationError("initial_temperature must be positive")
        if not 0.0 < cooling_rate <= 1.0:
            raise ConfigurationError("cooling_rate must be within (0, 1]")

        self.max_iterations = max_iterations
        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate

    def build(
        self,
        stops: Sequence[Stop],
        origin: Point,
        rng: Optional[random.Random] = None,
    ) -> Route:
        """
        Anneal a visiting order for the stops.

        Args:
            stops: Stops to visit.
            origin: Start and end point.
            rng: Random source; a fresh unseeded one is used when omitted.

        Returns:
            Route for the best permutation found.
        """
        if not stops:
            return Route(origin=origin)

        rng = rng or random.Random()
        distance_matrix = build_distance_matrix(origin, [s.location for s in stops])
        n = len(stops)

        current = list(range(1, n + 1))
        rng.shuffle(current)
        current_distance = permutation_distance(current, distance_matrix)

        best = list(current)
        best_distance = current_distance

        temperature = self.initial_temperature

        for _ in range(self.max_iterations):
            candidate = list(current)
            i = rng.randrange(n)
            j = rng.randrange(n)
            candidate[i], candidate[j] = candidate[j], candidate[i]

            candidate_distance = permutation_distance(candidate, distance_matrix)

            if candidate_distance < current_distance or rng.random() < self._acceptance(
                current_distance, candidate_distance, temperature
            ):
                current = candidate
                current_distance = candidate_distance

                if candidate_distance < best_distance:
                    best = list(candidate)
                    best_distance = candidate_distance

            temperature *= self.cooling_rate

        logger.debug(
            "SA finished: best distance %.2f after %d iterations",
            best_distance,
            self.max_iterations,
        )
        return Route(origin=origin, stops=[stops[i - 1] for i in best])

    @staticmethod
    def _acceptance(current: float, candidate: float, temperature: float) -> float:
        """Metropolis acceptance probability for a move from current to candidate."""
        exponent = (current - candidate) / temperature
        if exponent >= 0:
            return 1.0
        return math.exp(exponent)
