# dronedispatch/services/routing/route_planner.py
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import random

from joblib import Parallel, delayed

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.route import Route, Stop
from dronedispatch.core.entities.task import Task
from dronedispatch.core.exceptions import ConfigurationError
from dronedispatch.core.interfaces.routing import RouteBuilder
from dronedispatch.services.routing.annealing import SimulatedAnnealingRouter
from dronedispatch.services.routing.genetic import GeneticRouter
from dronedispatch.services.routing.nearest_neighbor import NearestNeighborRouter

logger = logging.getLogger(__name__)

NEAREST_NEIGHBOR = "nearest_neighbor"
GENETIC_ALGORITHM = "genetic_algorithm"
SIMULATED_ANNEALING = "simulated_annealing"
ALGORITHMS = (NEAREST_NEIGHBOR, GENETIC_ALGORITHM, SIMULATED_ANNEALING)


def create_route_builders(routing_config: Optional[Dict[str, Any]] = None) -> Dict[str, RouteBuilder]:
    """
    Instantiate one builder per algorithm from the ROUTING config section.
    """
    routing_config = routing_config or {}
    genetic_config = routing_config.get("genetic", {})
    annealing_config = routing_config.get("annealing", {})

    return {
        NEAREST_NEIGHBOR: NearestNeighborRouter(),
        GENETIC_ALGORITHM: GeneticRouter(**genetic_config),
        SIMULATED_ANNEALING: SimulatedAnnealingRouter(**annealing_config),
    }


def stops_for_tasks(tasks: Sequence[Task]) -> List[Stop]:
    return [Stop(location=task.location, task_id=task.id) for task in tasks]


class RoutePlanner:
    """
    Computes visiting orders for task groups with the selected algorithm.

    Groups are independent, so their searches can run on worker threads.
    Each group gets its own random source, seeded from the planner's source
    in input order, so results do not depend on thread scheduling.
    """

    def __init__(
        self,
        builders: Optional[Dict[str, RouteBuilder]] = None,
        default_algorithm: str = NEAREST_NEIGHBOR,
        n_jobs: int = 1,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the route planner.

        Args:
            builders: Mapping of algorithm name to builder. Defaults to all built-in algorithms.
            default_algorithm: Algorithm used when a call does not name one.
            n_jobs: Number of worker threads for multi-group planning.
            rng: Parent random source used to seed per-group sources.
        """
        self.builders = builders if builders is not None else create_route_builders()
        self.default_algorithm = default_algorithm
        self.n_jobs = n_jobs
        self.rng = rng or random.Random()

        # Fail fast on a bad default
        self.builder_for(default_algorithm)

    @classmethod
    def from_config(
        cls, routing_config: Dict[str, Any], rng: Optional[random.Random] = None
    ) -> "RoutePlanner":
        return cls(
            builders=create_route_builders(routing_config),
            default_algorithm=routing_config.get("algorithm", NEAREST_NEIGHBOR),
            n_jobs=routing_config.get("n_jobs", 1),
            rng=rng,
        )

    def builder_for(self, algorithm: Optional[str] = None) -> RouteBuilder:
        """
        Look up the builder for an algorithm name.

        Raises:
            ConfigurationError: If the algorithm is unknown.
        """
        name = algorithm or self.default_algorithm
        try:
            return self.builders[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown routing algorithm '{name}'. "
                f"Choose one of: {', '.join(sorted(self.builders))}"
            )

    def plan_route(
        self,
        tasks: Sequence[Task],
        origin: Point,
        algorithm: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> Route:
        """
        Plan a single route from origin through the task locations.
        """
        builder = self.builder_for(algorithm)
        return builder.build(stops_for_tasks(tasks), origin, rng or self._child_rng())

    def plan_routes(
        self,
        jobs: Sequence[Tuple[Sequence[Task], Point]],
        algorithm: Optional[str] = None,
    ) -> List[Route]:
        """
        Plan routes for several independent groups.

        Args:
            jobs: (tasks, origin) pairs, one per group.
            algorithm: Algorithm name; the default algorithm when omitted.

        Returns:
            Routes in the same order as the jobs.
        """
        builder = self.builder_for(algorithm)
        seeded_jobs = [
            (stops_for_tasks(tasks), origin, self._child_rng()) for tasks, origin in jobs
        ]

        if not seeded_jobs:
            return []

        logger.debug(
            "Planning %d routes with %s (n_jobs=%d)",
            len(seeded_jobs),
            getattr(builder, "name", type(builder).__name__),
            self.n_jobs,
        )

        return Parallel(n_jobs=self.n_jobs, prefer="threads")(
            delayed(builder.build)(stops, origin, rng) for stops, origin, rng in seeded_jobs
        )

    def _child_rng(self) -> random.Random:
        return random.Random(self.rng.getrandbits(64))
