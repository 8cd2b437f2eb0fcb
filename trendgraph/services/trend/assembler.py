"""Conversion of collected series into chart datasets."""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, Mapping

from trendgraph.config.settings import settings
from trendgraph.models.build import Build
from trendgraph.models.chart import ChartDataset
from trendgraph.services.trend.errors import ensure_same_length
from trendgraph.services.trend.extractors import SeriesVector

DEFAULT_DATE_LABEL_FORMAT = "%m-%d"


def default_row_id(level: int) -> str:
    return str(level)


def format_date_label(day: date, label_format: str | None = None) -> str:
    return day.strftime(label_format or getattr(settings, "TREND_DATE_LABEL_FORMAT", DEFAULT_DATE_LABEL_FORMAT))


def _check_lengths(series: Iterable[SeriesVector]) -> None:
    length: int | None = None
    for values in series:
        if length is None:
            length = len(values)
        else:
            ensure_same_length(length, len(values), context="assembling dataset")


def _fill(
    dataset: ChartDataset,
    x_label: str,
    series: SeriesVector,
    row_id: Callable[[int], str],
) -> None:
    for level, value in enumerate(series):
        dataset.add(value, row_id(level), x_label)


def assemble_per_build(
    series_per_build: Mapping[Build, SeriesVector],
    *,
    row_id: Callable[[int], str] = default_row_id,
) -> ChartDataset:
    """One point per build and level, ordered by ascending build number."""

    _check_lengths(series_per_build.values())
    dataset = ChartDataset()
    for build in sorted(series_per_build):
        _fill(dataset, build.display_name, series_per_build[build], row_id)
    return dataset


def assemble_per_date(
    series_per_date: Mapping[date, SeriesVector],
    *,
    row_id: Callable[[int], str] = default_row_id,
    label_format: str | None = None,
) -> ChartDataset:
    """One point per day and level, in chronological order."""

    _check_lengths(series_per_date.values())
    dataset = ChartDataset()
    for day in sorted(series_per_date):
        _fill(dataset, format_date_label(day, label_format), series_per_date[day], row_id)
    return dataset
