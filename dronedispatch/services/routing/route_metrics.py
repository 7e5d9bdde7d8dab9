# dronedispatch/services/routing/route_metrics.py
"""
Distance matrices and per-route estimates.

Route time covers travel, a fixed handling time per delivery and a fixed
loading time; battery use is linear in the distance flown.
"""

from typing import Sequence

import numpy as np

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.route import Route

SERVICE_MINUTES_PER_STOP = 3.0
LOADING_MINUTES = 5.0
BATTERY_PERCENT_PER_DISTANCE = 2.0


def build_distance_matrix(origin: Point, points: Sequence[Point]) -> np.ndarray:
    """
    Pairwise Euclidean distances between the origin (index 0) and the points
    (indices 1..n).
    """
    coords = np.array([[origin.x, origin.y]] + [[p.x, p.y] for p in points])
    return np.sqrt(
        np.sum((coords[:, np.newaxis, :] - coords[np.newaxis, :, :]) ** 2, axis=2)
    )


def permutation_distance(order: Sequence[int], distance_matrix: np.ndarray) -> float:
    """
    Length of the closed walk 0 -> order[0] -> ... -> order[-1] -> 0.

    Indices refer to rows of a matrix from ``build_distance_matrix``.
    """
    if len(order) == 0:
        return 0.0

    total = distance_matrix[0, order[0]]
    for i in range(len(order) - 1):
        total += distance_matrix[order[i], order[i + 1]]
    total += distance_matrix[order[-1], 0]
    return float(total)


def estimate_route_time(
    route: Route,
    speed: float,
    service_minutes_per_stop: float = SERVICE_MINUTES_PER_STOP,
    loading_minutes: float = LOADING_MINUTES,
) -> float:
    """
    Estimate the time to fly a route, in minutes.

    Args:
        route: Planned route.
        speed: Unit speed in distance units per hour.
        service_minutes_per_stop: Handling time per delivery.
        loading_minutes: Fixed loading time per route.

    Returns:
        travel + deliveries + loading; 0 for a route without stops.
    """
    if route is None or not route.stops:
        return 0.0

    travel_time = route.total_distance / speed * 60
    delivery_time = len(route.stops) * service_minutes_per_stop
    return travel_time + delivery_time + loading_minutes


def estimate_battery_percent(
    route: Route, percent_per_distance: float = BATTERY_PERCENT_PER_DISTANCE
) -> float:
    """Battery consumed by a route, as a percentage of a full charge."""
    if route is None or not route.stops:
        return 0.0
    return route.total_distance * percent_per_distance
