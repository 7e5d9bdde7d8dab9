import random

import pytest

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.task import Task
from dronedispatch.core.entities.unit import Unit


def make_task(task_id, x, y, weight=1.0, score=0.0, priority="media"):
    return Task(
        id=task_id,
        weight=weight,
        location=Point(x, y),
        priority_score=score,
        priority=priority,
    )


def make_unit(unit_id, x=0.0, y=0.0, capacity=10.0, battery=1.0, available=True, speed=60.0):
    return Unit(
        id=unit_id,
        capacity=capacity,
        max_range=100.0,
        speed=speed,
        location=Point(x, y),
        battery_fraction=battery,
        available=available,
    )


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def diagonal_tasks():
    """Three tasks on the diagonal, highest priority closest to the origin."""
    return [
        make_task("t1", 10, 10, score=3),
        make_task("t2", 20, 20, score=2),
        make_task("t3", 30, 30, score=1),
    ]


@pytest.fixture
def single_unit():
    return [make_unit("u1")]
