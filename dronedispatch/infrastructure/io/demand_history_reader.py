# dronedispatch/infrastructure/io/demand_history_reader.py
from typing import Dict, List

import pandas as pd

from dronedispatch.core.entities.point import Point
from dronedispatch.core.exceptions import InputError


class DemandHistoryReader:
    """
    Loads historical delivery points from a CSV file.

    The file needs ``x`` and ``y`` columns; an optional ``priority`` column
    feeds the per-class counts used for fleet sizing.
    """

    REQUIRED_COLUMNS = ("x", "y")

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.history: pd.DataFrame = pd.DataFrame()

    def load(self) -> pd.DataFrame:
        """
        Read the CSV into a DataFrame with lower-cased column names.

        Raises:
            InputError: If required columns are missing or coordinates are not numeric.
        """
        df = pd.read_csv(self.file_path)
        df.columns = [str(col).strip().lower() for col in df.columns]

        missing = [col for col in self.REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise InputError(
                f"Demand history {self.file_path} is missing columns: {', '.join(missing)}"
            )

        coords = df[list(self.REQUIRED_COLUMNS)].apply(pd.to_numeric, errors="coerce")
        if coords.isna().any().any():
            raise InputError(f"Demand history {self.file_path} has non-numeric coordinates")

        df[list(self.REQUIRED_COLUMNS)] = coords
        self.history = df
        return df

    def points(self) -> List[Point]:
        """Delivery points in file order."""
        if self.history.empty:
            self.load()
        return [Point(float(row.x), float(row.y)) for row in self.history.itertuples()]

    def counts_by_priority(self) -> Dict[str, int]:
        """Number of deliveries per priority class (empty when the column is absent)."""
        if self.history.empty:
            self.load()
        if "priority" not in self.history.columns:
            return {}
        return {
            str(priority): int(count)
            for priority, count in self.history["priority"].value_counts().items()
        }
