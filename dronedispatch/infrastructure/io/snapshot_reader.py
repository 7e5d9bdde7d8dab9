# dronedispatch/infrastructure/io/snapshot_reader.py
from typing import Any, Dict, List, Optional, Tuple
import json
import time

from dronedispatch.core.entities.point import Point
from dronedispatch.core.entities.task import Task, priority_score
from dronedispatch.core.entities.unit import Unit
from dronedispatch.core.exceptions import InputError


class SnapshotReader:
    """
    Parser for JSON scenario files holding a fleet and task snapshot.

    Expected layout::

        {
          "units": [{"id": "u1", "capacity": 10, "max_range": 50, "speed": 60,
                     "location": {"x": 0, "y": 0}, "battery": 0.9,
                     "available": true}],
          "tasks": [{"id": "t1", "weight": 2, "location": {"x": 10, "y": 5},
                     "priority": "alta", "priority_score": 120}]
        }

    Tasks without ``priority_score`` are scored from their priority class,
    age (``timestamp`` in epoch seconds) and weight.
    """

    def __init__(self, file_path: str):
        """
        Initialize the snapshot reader.

        Args:
            file_path: Path to the JSON scenario file.
        """
        self.file_path = file_path
        self.units: List[Unit] = []
        self.tasks: List[Task] = []

    def read(self, now: Optional[float] = None) -> Tuple[List[Unit], List[Task]]:
        """
        Read and parse the scenario.

        Args:
            now: Reference epoch time for task ages; defaults to the current time.

        Returns:
            A tuple containing:
            - List of Unit snapshots.
            - List of Task snapshots.

        Raises:
            InputError: If the file is not valid JSON or an entry is malformed.
        """
        try:
            with open(self.file_path, "r") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise InputError(f"Scenario {self.file_path} is not valid JSON: {e}")

        now = time.time() if now is None else now
        self.units = [self.parse_unit(entry) for entry in data.get("units", [])]
        self.tasks = [self.parse_task(entry, now) for entry in data.get("tasks", [])]
        return self.units, self.tasks

    @staticmethod
    def parse_point(entry: Any) -> Point:
        if isinstance(entry, dict):
            return Point(float(entry["x"]), float(entry["y"]))
        return Point(float(entry[0]), float(entry[1]))

    @classmethod
    def parse_unit(cls, entry: Dict[str, Any]) -> Unit:
        try:
            unit = Unit(
                id=str(entry["id"]),
                capacity=float(entry["capacity"]),
                max_range=float(entry.get("max_range", entry.get("range", 0.0))),
                speed=float(entry["speed"]),
                location=cls.parse_point(entry.get("location", {"x": 0, "y": 0})),
                battery_fraction=float(entry.get("battery", 1.0)),
                available=bool(entry.get("available", True)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InputError(f"Malformed unit entry {entry!r}: {e}")

        if unit.capacity <= 0 or unit.speed <= 0 or unit.max_range <= 0:
            raise InputError(f"Unit {unit.id} needs positive capacity, range and speed")
        if not 0.0 <= unit.battery_fraction <= 1.0:
            raise InputError(f"Unit {unit.id} battery must be within [0, 1]")
        return unit

    @classmethod
    def parse_task(cls, entry: Dict[str, Any], now: float) -> Task:
        try:
            weight = float(entry["weight"])
            priority = str(entry.get("priority", "media"))
            timestamp = entry.get("timestamp")
            timestamp = float(timestamp) if timestamp is not None else None

            if "priority_score" in entry:
                score = float(entry["priority_score"])
            else:
                age = now - timestamp if timestamp is not None else 0.0
                score = priority_score(priority, age, weight)

            task = Task(
                id=str(entry["id"]),
                weight=weight,
                location=cls.parse_point(entry["location"]),
                priority_score=score,
                priority=priority,
                timestamp=timestamp,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InputError(f"Malformed task entry {entry!r}: {e}")

        if task.weight <= 0:
            raise InputError(f"Task {task.id} needs a positive weight")
        return task
