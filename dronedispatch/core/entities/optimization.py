# dronedispatch/core/entities/optimization.py
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .assignment import Assignment
from .task_group import TaskGroup


@dataclass
class OptimizationStats:
    """Aggregate metrics over the assignments of one pass."""

    total_routes: int = 0
    total_tasks: int = 0
    total_distance: float = 0.0
    average_time: float = 0.0
    efficiency: float = 0.0
    utilization: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OptimizationResult:
    """
    Outcome of one optimization pass.

    Failures are reported through ``success`` and ``message`` instead of
    exceptions so the caller can log and retry on the next cycle.
    """

    success: bool
    message: str = ""
    algorithm: Optional[str] = None
    assignments: List[Assignment] = field(default_factory=list)
    unmatched_groups: List[TaskGroup] = field(default_factory=list)
    stats: OptimizationStats = field(default_factory=OptimizationStats)

    @classmethod
    def failure(cls, message: str, algorithm: Optional[str] = None) -> "OptimizationResult":
        return cls(success=False, message=message, algorithm=algorithm)
