"""Per-day grouping of build series with truncating averages."""

from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Mapping
from zoneinfo import ZoneInfo

from trendgraph.config.settings import settings
from trendgraph.models.build import Build
from trendgraph.services.trend.errors import ensure_same_length
from trendgraph.services.trend.extractors import SeriesVector

logger = logging.getLogger(__name__)

DEFAULT_TIME_ZONE = "UTC"


def resolve_time_zone(name: str | tzinfo | None = None) -> tzinfo:
    """Return the zone build dates are computed in, defaulting to settings."""
    if isinstance(name, tzinfo):
        return name
    return ZoneInfo(name or getattr(settings, "TREND_TIME_ZONE", DEFAULT_TIME_ZONE))


def build_date(build: Build, tz: tzinfo) -> date:
    return build.timestamp(tz).date()


def _truncated_quotient(value: int, count: int) -> int:
    quotient = abs(value) // count
    return quotient if value >= 0 else -quotient


def average_by_date(
    series_per_build: Mapping[Build, SeriesVector],
    *,
    tz: tzinfo | None = None,
) -> dict[date, SeriesVector]:
    """Reduce the series of all builds of one day to a single averaged series.

    Each day is summed element-wise first and divided once by the number of
    contributing builds, truncating toward zero. A day with one build keeps
    that build's series unchanged.
    """

    zone = tz or resolve_time_zone()

    accumulators: dict[date, tuple[list[int], int]] = {}
    for build, series in series_per_build.items():
        day = build_date(build, zone)
        accumulator = accumulators.get(day)
        if accumulator is None:
            accumulators[day] = (list(series), 1)
            continue

        total, count = accumulator
        ensure_same_length(len(total), len(series), context=f"averaging {day.isoformat()}")
        for index, value in enumerate(series):
            total[index] += value
        accumulators[day] = (total, count + 1)

    averages: dict[date, SeriesVector] = {}
    for day, (total, count) in accumulators.items():
        averages[day] = tuple(_truncated_quotient(value, count) for value in total)

    logger.debug("Averaged build series by date", extra={"builds": len(series_per_build), "dates": len(averages)})
    return averages
