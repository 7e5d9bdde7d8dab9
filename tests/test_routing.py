import math
import random

import hypothesis.strategies as st
import pytest
from hypothesis import given, settings

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.route import Route, Stop
from dronedispatch.core.exceptions import ConfigurationError
from dronedispatch.services.routing.annealing import SimulatedAnnealingRouter
from dronedispatch.services.routing.genetic import GeneticRouter
from dronedispatch.services.routing.nearest_neighbor import NearestNeighborRouter
from dronedispatch.services.routing.route_metrics import (
    build_distance_matrix,
    estimate_battery_percent,
    estimate_route_time,
    permutation_distance,
)
from dronedispatch.services.routing.route_planner import (
    GENETIC_ALGORITHM,
    NEAREST_NEIGHBOR,
    SIMULATED_ANNEALING,
    RoutePlanner,
    stops_for_tasks,
)

from conftest import make_task

ORIGIN = Point(0, 0)

coordinate = st.floats(min_value=-100, max_value=100, allow_nan=False)
stop_lists = st.lists(st.tuples(coordinate, coordinate), min_size=1, max_size=9).map(
    lambda coords: [Stop(Point(x, y), task_id=f"t{i}") for i, (x, y) in enumerate(coords)]
)


def _stops(*coords):
    return [Stop(Point(x, y), task_id=f"t{i}") for i, (x, y) in enumerate(coords)]


def _assert_closed_permutation(route, stops, origin=ORIGIN):
    assert len(route) == len(stops) + 2
    assert route.points[0] == origin
    assert route.points[-1] == origin
    assert sorted(route.task_ids) == sorted(s.task_id for s in stops)


class TestNearestNeighbor:
    def test_empty_input_returns_origin_only(self):
        route = NearestNeighborRouter().build([], ORIGIN)
        assert route.points == [ORIGIN]
        assert len(route) == 1
        assert route.total_distance == 0.0

    def test_single_stop_is_out_and_back(self):
        route = NearestNeighborRouter().build(_stops((3, 4)), ORIGIN)
        assert route.points == [ORIGIN, Point(3, 4), ORIGIN]
        assert route.total_distance == pytest.approx(10.0)

    def test_diagonal_scenario(self):
        stops = _stops((30, 30), (10, 10), (20, 20))
        route = NearestNeighborRouter().build(stops, ORIGIN)
        assert route.points == [
            ORIGIN,
            Point(10, 10),
            Point(20, 20),
            Point(30, 30),
            ORIGIN,
        ]

    def test_ties_keep_input_order(self):
        router = NearestNeighborRouter()
        left, right = Stop(Point(-1, 0), "left"), Stop(Point(1, 0), "right")
        assert router.build([left, right], ORIGIN).task_ids == ["left", "right"]
        assert router.build([right, left], ORIGIN).task_ids == ["right", "left"]

    @given(stops=stop_lists)
    def test_route_is_closed_permutation(self, stops):
        route = NearestNeighborRouter().build(stops, ORIGIN)
        _assert_closed_permutation(route, stops)


class TestGeneticRouter:
    def test_small_inputs_fall_back_to_nearest_neighbor(self):
        stops = _stops((30, 30), (10, 10), (20, 20))
        expected = NearestNeighborRouter().build(stops, ORIGIN)
        route = GeneticRouter().build(stops, ORIGIN, random.Random(1))
        assert route.points == expected.points

    def test_empty_input_returns_origin_only(self):
        assert GeneticRouter().build([], ORIGIN).points == [ORIGIN]

    def test_seeded_runs_are_reproducible(self):
        stops = _stops((5, 1), (9, 7), (-3, 4), (2, -8), (6, 6), (-7, -2))
        router = GeneticRouter(generations=20)
        first = router.build(stops, ORIGIN, random.Random(7))
        second = router.build(stops, ORIGIN, random.Random(7))
        assert first.task_ids == second.task_ids

    @settings(max_examples=25, deadline=None)
    @given(stops=stop_lists, seed=st.integers(min_value=0, max_value=2**32))
    def test_route_is_closed_permutation(self, stops, seed):
        route = GeneticRouter(generations=5).build(stops, ORIGIN, random.Random(seed))
        _assert_closed_permutation(route, stops)

    @given(
        parents=st.integers(min_value=1, max_value=12).flatmap(
            lambda n: st.tuples(
                st.permutations(list(range(1, n + 1))),
                st.permutations(list(range(1, n + 1))),
            )
        ),
        seed=st.integers(min_value=0, max_value=2**32),
    )
    def test_order_crossover_yields_permutation(self, parents, seed):
        parent1, parent2 = parents
        child = GeneticRouter.order_crossover(list(parent1), list(parent2), random.Random(seed))
        assert sorted(child) == sorted(parent1)

    def test_order_crossover_keeps_parent_slice(self):
        class FixedDraws:
            def __init__(self, values):
                self.values = list(values)

            def randrange(self, stop):
                return self.values.pop(0)

        # start=1, end=1+2=3
        child = GeneticRouter.order_crossover(
            [1, 2, 3, 4, 5], [5, 4, 3, 2, 1], FixedDraws([1, 2])
        )
        assert child[1:4] == [2, 3, 4]
        assert child == [5, 2, 3, 4, 1]

    def test_mutate_swaps_without_touching_input(self):
        route = [1, 2, 3, 4]
        mutated = GeneticRouter.mutate(route, random.Random(3))
        assert route == [1, 2, 3, 4]
        assert sorted(mutated) == route

    def test_returns_best_of_final_generation(self):
        class ForgetfulRouter(GeneticRouter):
            # Seeds the optimum once, then only breeds the detour
            def initialize_population(self, n, population_size, rng):
                return [[1, 2, 3, 4]] + [[1, 3, 2, 4]] * (population_size - 1)

            def tournament_selection(self, population, fitness, rng):
                return [1, 3, 2, 4]

            @staticmethod
            def order_crossover(parent1, parent2, rng):
                return list(parent1)

        stops = _stops((10, 0), (20, 0), (30, 0), (40, 0))
        router = ForgetfulRouter(generations=1, mutation_rate=0.0)
        route = router.build(stops, ORIGIN, random.Random(0))

        # The in-order tour (80) was in generation 0 but not in the final one
        assert route.task_ids == ["t0", "t2", "t1", "t3"]
        assert route.total_distance == pytest.approx(100.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"population_cap": 0},
            {"mutation_rate": 1.5},
            {"tournament_size": 0},
            {"generations": -1},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ConfigurationError):
            GeneticRouter(**kwargs)


class TestSimulatedAnnealing:
    def test_empty_input_returns_origin_only(self):
        route = SimulatedAnnealingRouter().build([], ORIGIN, random.Random(0))
        assert route.points == [ORIGIN]

    @settings(max_examples=25, deadline=None)
    @given(stops=stop_lists, seed=st.integers(min_value=0, max_value=2**32))
    def test_route_is_closed_permutation(self, stops, seed):
        route = SimulatedAnnealingRouter(max_iterations=50).build(
            stops, ORIGIN, random.Random(seed)
        )
        _assert_closed_permutation(route, stops)

    def test_collinear_stops_reach_the_optimum(self):
        stops = _stops((10, 0), (40, 0), (20, 0), (30, 0))
        route = SimulatedAnnealingRouter(max_iterations=2000).build(
            stops, ORIGIN, random.Random(11)
        )
        # Any order is at least out and back to the furthest stop
        assert route.total_distance >= 80.0
        assert route.total_distance == pytest.approx(80.0)

    def test_acceptance_probability(self):
        assert SimulatedAnnealingRouter._acceptance(10.0, 5.0, 1.0) == 1.0
        assert SimulatedAnnealingRouter._acceptance(10.0, 20.0, 100.0) == pytest.approx(
            math.exp(-0.1)
        )

    @pytest.mark.parametrize(
        "kwargs",
        [{"initial_temperature": 0}, {"cooling_rate": 0}, {"cooling_rate": 1.5}],
    )
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ConfigurationError):
            SimulatedAnnealingRouter(**kwargs)


class TestRouteMetrics:
    def test_distance_matrix_and_permutation_distance(self):
        matrix = build_distance_matrix(ORIGIN, [Point(3, 4), Point(3, 0)])
        assert matrix.shape == (3, 3)
        assert matrix[0, 1] == pytest.approx(5.0)
        assert permutation_distance([1, 2], matrix) == pytest.approx(12.0)
        assert permutation_distance([], matrix) == 0.0

    def test_route_estimates(self):
        route = Route(origin=ORIGIN, stops=_stops((3, 4)))
        # 10 distance units at 60 per hour, one delivery, loading
        assert estimate_route_time(route, speed=60) == pytest.approx(10 + 3 + 5)
        assert estimate_battery_percent(route) == pytest.approx(20.0)

    def test_estimates_for_route_without_stops(self):
        route = Route(origin=ORIGIN)
        assert estimate_route_time(route, speed=60) == 0.0
        assert estimate_battery_percent(route) == 0.0


class TestRoutePlanner:
    def test_unknown_algorithm(self):
        planner = RoutePlanner(rng=random.Random(0))
        with pytest.raises(ConfigurationError):
            planner.builder_for("ant_colony")

    def test_unknown_default_algorithm(self):
        with pytest.raises(ConfigurationError):
            RoutePlanner(default_algorithm="ant_colony")

    def test_plan_route_keeps_task_ids(self, diagonal_tasks):
        planner = RoutePlanner(rng=random.Random(0))
        route = planner.plan_route(diagonal_tasks, ORIGIN)
        assert route.task_ids == ["t1", "t2", "t3"]

    def test_stops_for_tasks(self, diagonal_tasks):
        stops = stops_for_tasks(diagonal_tasks)
        assert [s.task_id for s in stops] == ["t1", "t2", "t3"]
        assert stops[0].location == Point(10, 10)

    @pytest.mark.parametrize("algorithm", [NEAREST_NEIGHBOR, GENETIC_ALGORITHM, SIMULATED_ANNEALING])
    def test_threaded_planning_matches_sequential(self, algorithm):
        jobs = [
            ([make_task(f"g{g}t{i}", g * 10 + i, i * 3 - g) for i in range(6)], Point(g, g))
            for g in range(4)
        ]
        sequential = RoutePlanner(n_jobs=1, rng=random.Random(5)).plan_routes(jobs, algorithm)
        threaded = RoutePlanner(n_jobs=2, rng=random.Random(5)).plan_routes(jobs, algorithm)

        assert [r.task_ids for r in sequential] == [r.task_ids for r in threaded]
        for route, (tasks, origin) in zip(sequential, jobs):
            assert route.origin == origin
            assert sorted(route.task_ids) == sorted(t.id for t in tasks)

    def test_plan_routes_without_jobs(self):
        assert RoutePlanner(rng=random.Random(0)).plan_routes([]) == []
