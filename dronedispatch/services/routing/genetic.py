# dronedispatch/services/routing/genetic.py
from typing import List, Optional, Sequence
import logging
import random

import numpy as np

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.route import Route, Stop
from dronedispatch.core.exceptions import ConfigurationError
from dronedispatch.services.routing.nearest_neighbor import NearestNeighborRouter
from dronedispatch.services.routing.route_metrics import (
    build_distance_matrix,
    permutation_distance,
)

logger = logging.getLogger(__name__)


class GeneticRouter:
    """
    Genetic algorithm over stop permutations.

    Each generation breeds a full replacement population through tournament
    selection, order crossover (OX) and swap mutation. Fitness is the inverse
    of the closed-route distance from the origin.

    The result is the fittest individual of the final generation, not the
    best individual ever seen.
    """

    name = "genetic_algorithm"

    def __init__(
        self,
        generations: int = 100,
        population_cap: int = 50,
        mutation_rate: float = 0.1,
        tournament_size: int = 3,
        small_instance_size: int = 3,
    ):
        """
        Initialize the genetic router.

        Args:
            generations: Number of generations to breed.
            population_cap: Upper bound on the population size (actual size is min(cap, 4n)).
            mutation_rate: Probability of applying a swap mutation to a child.
            tournament_size: Candidates sampled per tournament.
            small_instance_size: Inputs with at most this many stops are routed
                with nearest neighbor instead.
        """
        if generations < 0:
            raise ConfigurationError("generations must be non-negative")
        if population_cap <= 0:
            raise ConfigurationError("population_cap must be positive")
        if not 0.0 <= mutation_rate <= 1.0:
            raise ConfigurationError("mutation_rate must be within [0, 1]")
        if tournament_size <= 0:
            raise ConfigurationError("tournament_size must be positive")

        self.generations = generations
        self.population_cap = population_cap
        self.mutation_rate = mutation_rate
        self.tournament_size = tournament_size
        self.small_instance_size = small_instance_size
        self._fallback = NearestNeighborRouter()

    def build(
        self,
        stops: Sequence[Stop],
        origin: Point,
        rng: Optional[random.Random] = None,
    ) -> Route:
        """
        Evolve a visiting order for the stops.

        Args:
            stops: Stops to visit.
            origin: Start and end point.
            rng: Random source; a fresh unseeded one is used when omitted.

        Returns:
            Best route of the final generation.
        """
        if len(stops) <= self.small_instance_size:
            return self._fallback.build(stops, origin)

        rng = rng or random.Random()
        distance_matrix = build_distance_matrix(origin, [s.location for s in stops])
        n = len(stops)
        population_size = min(self.population_cap, n * 4)

        population = self.initialize_population(n, population_size, rng)

        for generation in range(self.generations):
            fitness = self._evaluate(population, distance_matrix)

            new_population = []
            for _ in range(population_size):
                parent1 = self.tournament_selection(population, fitness, rng)
                parent2 = self.tournament_selection(population, fitness, rng)
                child = self.order_crossover(parent1, parent2, rng)

                if rng.random() < self.mutation_rate:
                    child = self.mutate(child, rng)

                new_population.append(child)

            population = new_population

            if generation % 25 == 0:
                logger.debug(
                    "GA generation %d: best distance %.2f",
                    generation,
                    1.0 / max(fitness),
                )

        fitness = self._evaluate(population, distance_matrix)
        best_index = int(np.argmax(fitness))
        best = population[best_index]

        return Route(origin=origin, stops=[stops[i - 1] for i in best])

    def initialize_population(
        self, n: int, population_size: int, rng: random.Random
    ) -> List[List[int]]:
        """Create shuffled permutations of stop indices 1..n."""
        population = []
        for _ in range(population_size):
            individual = list(range(1, n + 1))
            rng.shuffle(individual)
            population.append(individual)
        return population

    def tournament_selection(
        self, population: List[List[int]], fitness: List[float], rng: random.Random
    ) -> List[int]:
        """Sample candidates uniformly (with replacement) and keep the fittest."""
        best_index = rng.randrange(len(population))

        for _ in range(1, self.tournament_size):
            candidate_index = rng.randrange(len(population))
            if fitness[candidate_index] > fitness[best_index]:
                best_index = candidate_index

        return population[best_index]

    @staticmethod
    def order_crossover(
        parent1: List[int], parent2: List[int], rng: random.Random
    ) -> List[int]:
        """
        Order crossover.

        Copies the slice [start, end] of parent1 into the same child positions,
        then fills the remaining positions left to right with parent2's genes
        in parent2's order, skipping genes already placed.
        """
        length = len(parent1)
        start = rng.randrange(length)
        end = start + rng.randrange(length - start)

        child: List[Optional[int]] = [None] * length
        selected = set()
        for i in range(start, end + 1):
            child[i] = parent1[i]
            selected.add(parent1[i])

        fill_positions = [i for i in range(length) if i < start or i > end]
        remaining = [gene for gene in parent2 if gene not in selected]
        for position, gene in zip(fill_positions, remaining):
            child[position] = gene

        return child

    @staticmethod
    def mutate(route: List[int], rng: random.Random) -> List[int]:
        """Swap two random positions in a copy of the route."""
        mutated = list(route)
        i = rng.randrange(len(mutated))
        j = rng.randrange(len(mutated))
        mutated[i], mutated[j] = mutated[j], mutated[i]
        return mutated

    @staticmethod
    def _evaluate(
        population: List[List[int]], distance_matrix: np.ndarray
    ) -> List[float]:
        fitness = []
        for individual in population:
            distance = permutation_distance(individual, distance_matrix)
            # Coincident stops at the origin give a zero-length route
            fitness.append(1.0 / distance if distance > 0 else float("inf"))
        return fitness
