# dronedispatch/core/entities/point.py
from dataclasses import dataclass
from typing import Iterable, List, Sequence
import numpy as np

from dronedispatch.core.exceptions import InputError


@dataclass(frozen=True)
class Point:
    """
    Immutable planar coordinate used for unit positions, task destinations
    and base locations.
    """

    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        """Calculate Euclidean distance to another point."""
        return euclidean_distance(self, other)

    def as_array(self) -> np.ndarray:
        """Return coordinates as a NumPy array."""
        return np.array([self.x, self.y])


def euclidean_distance(a: Point, b: Point) -> float:
    """Straight-line distance between two points."""
    dx = b.x - a.x
    dy = b.y - a.y
    return float(np.sqrt(dx * dx + dy * dy))


def manhattan_distance(a: Point, b: Point) -> float:
    """Grid distance between two points. Not used by the default pipeline."""
    return abs(b.x - a.x) + abs(b.y - a.y)


def centroid(points: Sequence[Point]) -> Point:
    """
    Arithmetic mean of a non-empty point set.

    Raises:
        InputError: If no points are given.
    """
    if not points:
        raise InputError("Cannot compute the centroid of an empty point set")

    coords = np.array([p.as_array() for p in points])
    mean = coords.mean(axis=0)
    return Point(float(mean[0]), float(mean[1]))


def chain_distance(points: Sequence[Point]) -> float:
    """Sum of consecutive pairwise distances, in the given order."""
    total = 0.0
    for i in range(len(points) - 1):
        total += euclidean_distance(points[i], points[i + 1])
    return total


def route_distance(points: Sequence[Point], origin: Point) -> float:
    """
    Length of the closed walk origin -> points -> origin.

    Returns 0 for an empty point sequence.
    """
    if not points:
        return 0.0

    total = euclidean_distance(origin, points[0])
    total += chain_distance(points)
    total += euclidean_distance(points[-1], origin)
    return total


def average_distance(center: Point, points: Sequence[Point]) -> float:
    """Mean distance from center to each point (0 for no points)."""
    if not points:
        return 0.0
    return sum(euclidean_distance(center, p) for p in points) / len(points)


def coverage_percent(center: Point, points: Sequence[Point], radius: float) -> float:
    """Percentage of points within radius of center (100 for no points)."""
    if not points:
        return 100.0
    covered = [p for p in points if euclidean_distance(center, p) <= radius]
    return len(covered) / len(points) * 100


def to_points(coordinates: Iterable[Sequence[float]]) -> List[Point]:
    """Build points from (x, y) pairs."""
    return [Point(float(c[0]), float(c[1])) for c in coordinates]
