"""Merge of several per-day histories into one combined trend."""

from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Sequence

from trendgraph.services.trend.errors import ensure_same_length
from trendgraph.services.trend.extractors import SeriesVector

logger = logging.getLogger(__name__)


def _add_into(totals: dict[date, SeriesVector], day: date, series: SeriesVector) -> None:
    existing = totals.get(day)
    if existing is None:
        totals[day] = series
        return

    ensure_same_length(len(existing), len(series), context=f"merging {day.isoformat()}")
    totals[day] = tuple(left + right for left, right in zip(existing, series))


def merge_histories(per_history_averages: Sequence[Mapping[date, SeriesVector]]) -> dict[date, SeriesVector]:
    """Sum the daily series of all histories over the union of their dates.

    A history without a value for some day contributes its most recent
    earlier value instead. Before its first value it contributes nothing.
    """

    available_dates = sorted({day for averages in per_history_averages for day in averages})

    totals: dict[date, SeriesVector] = {}
    for averages in per_history_averages:
        last_known: SeriesVector | None = None
        for day in available_dates:
            current = averages.get(day)
            if current is not None:
                last_known = current
            if last_known is not None:
                _add_into(totals, day, last_known)

    logger.debug(
        "Merged histories",
        extra={"histories": len(per_history_averages), "dates": len(available_dates)},
    )
    return totals
