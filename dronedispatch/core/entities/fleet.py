# dronedispatch/core/entities/fleet.py
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class FleetRecommendation:
    """
    Fleet size recommendation derived from aggregate demand.
    """

    recommended_total: int
    required_per_class: Dict[str, int]
    total_required: int
    utilization_percent: float
    bottleneck: bool
    throughput_per_unit_per_day: float
    estimated_capacity: float
    task_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for reporting."""
        return {
            "recommended_total": self.recommended_total,
            "required_per_class": dict(self.required_per_class),
            "total_required": self.total_required,
            "utilization_percent": self.utilization_percent,
            "bottleneck": "fleet_size" if self.bottleneck else None,
            "throughput_per_unit_per_day": self.throughput_per_unit_per_day,
            "estimated_capacity": self.estimated_capacity,
            "task_counts": dict(self.task_counts),
        }
