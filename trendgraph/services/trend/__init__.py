"""Trend aggregation engine."""

from trendgraph.services.trend.errors import (
    ExtractorFailureError,
    InconsistentSeriesLengthError,
    InvalidConfigurationError,
    TrendAggregationError,
)
from trendgraph.services.trend.extractors import (
    HealthSeries,
    SeriesExtractor,
    new_versus_fixed_series,
    severity_series,
    total_series,
)
from trendgraph.services.trend.series_builder import SeriesBuilder
from trendgraph.services.trend.window import ResultAge, SelectionConfig, select_window

__all__ = [
    "SeriesBuilder",
    "SelectionConfig",
    "ResultAge",
    "select_window",
    "SeriesExtractor",
    "HealthSeries",
    "severity_series",
    "new_versus_fixed_series",
    "total_series",
    "TrendAggregationError",
    "InvalidConfigurationError",
    "InconsistentSeriesLengthError",
    "ExtractorFailureError",
]
