import pytest

from dronedispatch.core.entities.assignment import Assignment
from dronedispatch.services.statistics.optimization_stats import calculate_optimization_stats


def test_batch_statistics():
    assignments = [
        Assignment(
            unit_id="u1",
            task_ids=["t1", "t2"],
            estimated_time_minutes=60,
            estimated_battery_percent=40,
        ),
        Assignment(
            unit_id="u2",
            task_ids=["t3"],
            estimated_time_minutes=30,
            estimated_battery_percent=20,
        ),
    ]

    stats = calculate_optimization_stats(assignments)

    assert stats.total_routes == 2
    assert stats.total_tasks == 3
    assert stats.total_distance == 30.0
    assert stats.average_time == 45.0
    assert stats.efficiency == pytest.approx(10.0)
    assert stats.utilization == pytest.approx(1.5)


def test_empty_batch():
    stats = calculate_optimization_stats([])
    assert stats.to_dict() == {
        "total_routes": 0,
        "total_tasks": 0,
        "total_distance": 0.0,
        "average_time": 0.0,
        "efficiency": 0.0,
        "utilization": 0.0,
    }


def test_zero_distance_has_zero_efficiency():
    assignments = [Assignment(unit_id="u1", task_ids=["t1"], estimated_battery_percent=0)]
    stats = calculate_optimization_stats(assignments)
    assert stats.efficiency == 0.0
    assert stats.utilization == 1.0


def test_distance_and_time_are_rounded():
    assignments = [
        Assignment(
            unit_id="u1",
            task_ids=["t1"],
            estimated_time_minutes=10.0 / 3,
            estimated_battery_percent=10.0 / 3,
        )
    ]
    stats = calculate_optimization_stats(assignments, percent_per_distance=1.0)
    assert stats.total_distance == 3.33
    assert stats.average_time == 3.33
