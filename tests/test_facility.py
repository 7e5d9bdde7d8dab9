import random

import hypothesis.strategies as st
import pytest
from hypothesis import given, settings

from dronedispatch.core.entities.point import Point, to_points
from dronedispatch.core.exceptions import ConfigurationError
from dronedispatch.services.facility.kmeans_placement import KMeansPlacement

point_lists = st.lists(
    st.builds(
        Point,
        st.floats(min_value=0, max_value=200, allow_nan=False),
        st.floats(min_value=0, max_value=200, allow_nan=False),
    ),
    min_size=1,
    max_size=40,
)


def test_single_base_is_the_centroid():
    result = KMeansPlacement().place(to_points([(0, 0), (10, 0), (5, 10)]), k=1)

    assert result.k == 1
    assert result.centers[0].x == pytest.approx(5.0)
    assert result.centers[0].y == pytest.approx(3.3333, rel=1e-4)
    assert result.iterations == 0
    assert len(result.clusters[0]) == 3


def test_single_base_metrics():
    points = to_points([(0, 0), (0, 10), (0, 20)])
    result = KMeansPlacement(coverage_radius=5).place(points, k=1)

    # Centre at (0, 10); distances 10, 0, 10
    assert result.average_distance == pytest.approx(20 / 3)
    assert result.coverage_fraction == pytest.approx(100 / 3)


def test_returns_k_centres_when_clusters_are_empty():
    points = to_points([(1, 1)] * 5)
    result = KMeansPlacement(rng=random.Random(0)).place(points, k=3)

    assert result.k == 3
    assert len(result.clusters) == 3
    # Identical points all go to the lowest-index centre
    assert [len(c) for c in result.clusters] == [5, 0, 0]
    assert result.cluster_average_distances == [0.0, 0.0, 0.0]


def test_empty_cluster_keeps_its_sampled_centre():
    class SameDraw:
        def randrange(self, stop):
            return 0

    points = to_points([(0, 0), (0, 1), (50, 50)])
    # Both centres start on (0, 0); every point goes to the first one
    result = KMeansPlacement(max_iterations=1, rng=SameDraw()).place(points, k=2)

    assert result.iterations == 1
    assert result.centers[0].x == pytest.approx(50 / 3)
    assert result.centers[0].y == pytest.approx(17.0)
    assert result.centers[1] == Point(0.0, 0.0)
    assert result.clusters == [[Point(50, 50)], [Point(0, 0), Point(0, 1)]]


def test_separated_clusters():
    left = to_points([(0, 0), (1, 0), (0, 1), (1, 1)])
    right = to_points([(100, 100), (101, 100), (100, 101), (101, 101)])
    result = KMeansPlacement(rng=random.Random(3)).place(left + right, k=2)

    assert result.k == 2
    assert sum(len(c) for c in result.clusters) == 8
    for center, members in zip(result.centers, result.clusters):
        for p in members:
            assert all(
                center.distance_to(p) <= other.distance_to(p) + 1e-9
                for other in result.centers
            )


@settings(max_examples=30, deadline=None)
@given(points=point_lists, k=st.integers(min_value=1, max_value=5), seed=st.integers(0, 1000))
def test_clusters_partition_points(points, k, seed):
    result = KMeansPlacement(rng=random.Random(seed)).place(points, k=k)

    assert len(result.centers) == k
    assert len(result.clusters) == k
    assert sum(len(c) for c in result.clusters) == len(points)
    assert 0.0 <= result.coverage_fraction <= 100.0
    assert result.iterations <= 100


def test_invalid_k_is_a_failure():
    result = KMeansPlacement().place([Point(0, 0)], k=0)
    assert not result.success
    assert "at least 1" in result.message
    assert result.centers == []


def test_no_points_is_a_failure():
    result = KMeansPlacement().place([], k=2)
    assert not result.success
    assert result.message == "Cannot place bases without demand points"
    assert result.k == 0


@pytest.mark.parametrize(
    "kwargs",
    [{"max_iterations": 0}, {"tolerance": -1}, {"coverage_radius": 0}],
)
def test_invalid_parameters(kwargs):
    with pytest.raises(ConfigurationError):
        KMeansPlacement(**kwargs)
