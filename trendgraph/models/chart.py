"""Chart-ready dataset handed to presentation layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """A single (x label, value) sample of one series."""

    x_label: str
    value: int


@dataclass(slots=True)
class ChartDataset:
    """Maps each level id to its ordered points, in first-seen level order."""

    series: dict[str, list[ChartPoint]] = field(default_factory=dict)

    def add(self, value: int, level_id: str, x_label: str) -> None:
        self.series.setdefault(level_id, []).append(ChartPoint(x_label=x_label, value=value))

    @property
    def level_ids(self) -> list[str]:
        return list(self.series)

    @property
    def x_labels(self) -> list[str]:
        """Domain axis labels, taken from the first series."""
        for points in self.series.values():
            return [point.x_label for point in points]
        return []

    def values(self, level_id: str) -> list[int]:
        return [point.value for point in self.series.get(level_id, [])]

    def is_empty(self) -> bool:
        return not self.series

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain_axis_labels": self.x_labels,
            "series": [
                {"id": level_id, "data": [point.value for point in points]}
                for level_id, points in self.series.items()
            ],
        }
