from dronedispatch.services.benchmarking.comparison_service import COLUMNS, ComparisonService
from dronedispatch.services.optimization.dispatch_optimizer import DispatchOptimizer
from dronedispatch.services.routing.route_planner import ALGORITHMS, RoutePlanner

from conftest import make_task, make_unit


def _factory(rng):
    return DispatchOptimizer(planner=RoutePlanner(rng=rng))


def _snapshot():
    units = [make_unit("u1", capacity=10), make_unit("u2", 40, 40, capacity=10)]
    tasks = [make_task(f"t{i}", (i * 9) % 50, (i * 4) % 30, score=i) for i in range(8)]
    return units, tasks


def test_compare_all_algorithms():
    units, tasks = _snapshot()
    comparison = ComparisonService(_factory, seed=1).compare(units, tasks)

    assert list(comparison.columns) == COLUMNS
    assert list(comparison["algorithm"]) == list(ALGORITHMS)
    assert comparison["success"].all()
    # Routing only changes visiting order, never which tasks are assigned
    assert comparison["total_tasks"].nunique() == 1


def test_compare_is_reproducible():
    units, tasks = _snapshot()
    service = ComparisonService(_factory, seed=4)
    first = service.compare(units, tasks)
    second = service.compare(units, tasks)
    assert list(first["total_distance"]) == list(second["total_distance"])


def test_report_names_shortest_distance():
    units, tasks = _snapshot()
    service = ComparisonService(_factory, seed=1)
    report = service.generate_report(service.compare(units, tasks, ["nearest_neighbor"]))

    assert report.startswith("# Routing Algorithm Comparison Report")
    assert "| nearest_neighbor |" in report
    assert "Shortest total distance: nearest_neighbor" in report


def test_report_for_failed_runs():
    service = ComparisonService(_factory)
    comparison = service.compare([], [make_task("a", 0, 0)], ["nearest_neighbor"])
    report = service.generate_report(comparison)

    assert not comparison["success"].any()
    assert "| nearest_neighbor | - |" in report
    assert "Shortest total distance" not in report
