# dronedispatch/core/entities/facility.py
from dataclasses import dataclass, field
from typing import List

from .point import Point


@dataclass
class FacilityResult:
    """
    Base placement produced by facility location.

    ``clusters[i]`` holds the demand points served by ``centers[i]``; the
    clusters partition the input points and ``len(centers)`` always equals K.
    Input and configuration problems are reported through ``success`` and
    ``message`` with no centres.
    """

    centers: List[Point] = field(default_factory=list)
    clusters: List[List[Point]] = field(default_factory=list)
    average_distance: float = 0.0
    coverage_fraction: float = 0.0  # percentage of points within the coverage radius
    iterations: int = 0
    cluster_average_distances: List[float] = field(default_factory=list)
    success: bool = True
    message: str = ""

    @property
    def k(self) -> int:
        return len(self.centers)

    @classmethod
    def failure(cls, message: str) -> "FacilityResult":
        return cls(success=False, message=message)
