# dronedispatch/core/entities/task.py
from dataclasses import dataclass
from typing import Optional

from .point import Point

PRIORITY_WEIGHTS = {"alta": 100.0, "media": 50.0, "baixa": 10.0}
DEFAULT_PRIORITY_WEIGHT = 10.0
PRIORITY_CLASSES = tuple(PRIORITY_WEIGHTS)


@dataclass(frozen=True)
class Task:
    """
    Snapshot of a pending delivery request.

    The priority score is computed by the caller (see ``priority_score``) and
    is only read by the core.
    """

    id: str
    weight: float
    location: Point
    priority_score: float = 0.0
    priority: str = "media"
    timestamp: Optional[float] = None


def priority_score(priority: str, age_seconds: float, weight: float) -> float:
    """
    Rank a request by class, waiting time and weight.

    Older requests score higher; heavier packages get a slight penalty.

    Args:
        priority: Priority class ("alta", "media" or "baixa").
        age_seconds: Seconds since the request was placed.
        weight: Package weight.

    Returns:
        The priority score (higher = more urgent).
    """
    base = PRIORITY_WEIGHTS.get(priority, DEFAULT_PRIORITY_WEIGHT)
    return base + age_seconds - weight * 2
