# dronedispatch/services/facility/kmeans_placement.py
from typing import List, Optional, Sequence
import logging
import random

import numpy as np

from dronedispatch.core.entities.facility import FacilityResult
from dronedispatch.core.entities.point import (
    Point,
    average_distance,
    centroid,
    coverage_percent,
)
from dronedispatch.core.exceptions import ConfigurationError, DispatchError, InputError

logger = logging.getLogger(__name__)


class KMeansPlacement:
    """
    Places K bases over historical demand points with Lloyd's algorithm.

    Initial centres are K input points drawn uniformly with replacement, so
    duplicate starting centres are possible. Points go to their nearest centre
    (ties to the lowest index); an empty cluster keeps its centre for the
    round. Iteration stops when no centre moves more than ``tolerance`` or
    after ``max_iterations`` rounds.
    """

    def __init__(
        self,
        max_iterations: int = 100,
        tolerance: float = 0.1,
        coverage_radius: float = 50.0,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the placement optimizer.

        Args:
            max_iterations: Cap on Lloyd iterations.
            tolerance: Convergence threshold on centre movement.
            coverage_radius: Radius used for the coverage metric.
            rng: Random source for the initial centres.
        """
        if max_iterations <= 0:
            raise ConfigurationError("max_iterations must be positive")
        if tolerance < 0:
            raise ConfigurationError("tolerance must be non-negative")
        if coverage_radius <= 0:
            raise ConfigurationError("coverage_radius must be positive")

        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.coverage_radius = coverage_radius
        self.rng = rng or random.Random()

    def place(self, points: Sequence[Point], k: int = 1) -> FacilityResult:
        """
        Choose K base locations for the demand points.

        Args:
            points: Historical delivery points.
            k: Number of bases.

        Returns:
            FacilityResult with exactly k centres and a partition of the points.
            An empty point set or k < 1 is reported with ``success=False``
            rather than raised.
        """
        try:
            self._check_inputs(points, k)
        except DispatchError as e:
            logger.error("Base placement failed: %s", e)
            return FacilityResult.failure(str(e))

        if k == 1:
            return self._single_base(points)
        return self._lloyd(points, k)

    @staticmethod
    def _check_inputs(points: Sequence[Point], k: int) -> None:
        if k < 1:
            raise ConfigurationError(f"Number of bases must be at least 1, got {k}")
        if not points:
            raise InputError("Cannot place bases without demand points")

    def _single_base(self, points: Sequence[Point]) -> FacilityResult:
        center = centroid(points)
        avg = average_distance(center, points)

        return FacilityResult(
            centers=[center],
            clusters=[list(points)],
            average_distance=avg,
            coverage_fraction=coverage_percent(center, points, self.coverage_radius),
            iterations=0,
            cluster_average_distances=[avg],
        )

    def _lloyd(self, points: Sequence[Point], k: int) -> FacilityResult:
        coords = np.array([p.as_array() for p in points], dtype=float)
        n = len(coords)

        centroids = np.array(
            [coords[self.rng.randrange(n)] for _ in range(k)], dtype=float
        )

        iterations = 0
        changed = True
        while changed and iterations < self.max_iterations:
            labels = self._nearest(coords, centroids)
            changed = False

            for i in range(k):
                members = coords[labels == i]
                if len(members) == 0:
                    continue

                new_centroid = members.mean(axis=0)
                if np.linalg.norm(new_centroid - centroids[i]) > self.tolerance:
                    changed = True
                centroids[i] = new_centroid

            iterations += 1

        logger.debug("k-means with k=%d stopped after %d iterations", k, iterations)

        # Partition against the final centres
        labels = self._nearest(coords, centroids)
        centers = [Point(float(c[0]), float(c[1])) for c in centroids]
        clusters: List[List[Point]] = [[] for _ in range(k)]
        for point, label in zip(points, labels):
            clusters[int(label)].append(point)

        cluster_averages = [
            average_distance(center, members) for center, members in zip(centers, clusters)
        ]
        covered = sum(
            1
            for center, members in zip(centers, clusters)
            for p in members
            if center.distance_to(p) <= self.coverage_radius
        )

        return FacilityResult(
            centers=centers,
            clusters=clusters,
            average_distance=sum(cluster_averages) / k,
            coverage_fraction=covered / n * 100,
            iterations=iterations,
            cluster_average_distances=cluster_averages,
        )

    @staticmethod
    def _nearest(coords: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Index of the nearest centroid per point; argmin keeps the lowest index on ties."""
        distances = np.linalg.norm(
            coords[:, np.newaxis, :] - centroids[np.newaxis, :, :], axis=2
        )
        return np.argmin(distances, axis=1)
