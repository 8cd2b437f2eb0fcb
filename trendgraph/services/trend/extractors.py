"""Series extractors: strategies that turn one build into a series vector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from trendgraph.models.build import Build

SeriesVector = tuple[int, ...]


class SeriesExtractor(Protocol):
    def __call__(self, build: Build) -> SeriesVector: ...


def _metric(build: Build, name: str) -> int:
    return int(build.metrics[name])


def severity_series(build: Build) -> SeriesVector:
    """Counts of high, normal and low severity findings."""
    return (_metric(build, "high"), _metric(build, "normal"), _metric(build, "low"))


def new_versus_fixed_series(build: Build) -> SeriesVector:
    return (_metric(build, "new"), _metric(build, "fixed"))


def total_series(build: Build) -> SeriesVector:
    return (_metric(build, "total"),)


@dataclass(frozen=True, slots=True)
class HealthSeries:
    """Splits the total number of findings into healthy, between and unhealthy bands.

    With health reporting disabled the series is the bare total.
    """

    healthy: int = 0
    unhealthy: int = 0

    @property
    def enabled(self) -> bool:
        return 0 <= self.healthy < self.unhealthy

    def __call__(self, build: Build) -> SeriesVector:
        total = _metric(build, "total")
        if not self.enabled:
            return (total,)

        band = self.unhealthy - self.healthy
        remainder = total - self.healthy
        return (
            min(total, self.healthy),
            min(max(remainder, 0), band),
            max(remainder - band, 0),
        )


SEVERITY_ROW_IDS = ("high", "normal", "low")
NEW_VERSUS_FIXED_ROW_IDS = ("new", "fixed")
HEALTH_ROW_IDS = ("healthy", "between", "unhealthy")


def row_ids_from(names: tuple[str, ...]) -> Callable[[int], str]:
    """Legend ids by position, falling back to the level index."""

    def row_id(level: int) -> str:
        return names[level] if level < len(names) else str(level)

    return row_id
