# dronedispatch/core/entities/unit.py
from dataclasses import dataclass

from .point import Point


@dataclass(frozen=True)
class Unit:
    """
    Snapshot of a mobile delivery unit.
    """

    id: str
    capacity: float
    max_range: float
    speed: float  # distance units per hour
    location: Point
    battery_fraction: float = 1.0
    available: bool = True

    def is_eligible(self, min_battery_fraction: float = 0.2) -> bool:
        """Check if the unit can take part in an optimization pass."""
        return self.available and self.battery_fraction > min_battery_fraction

    @property
    def battery_percent(self) -> float:
        return self.battery_fraction * 100
