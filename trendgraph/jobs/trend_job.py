"""Trend job entrypoints for JSON-like payloads."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Mapping, Sequence

from trendgraph.models.build import Build
from trendgraph.services.trend.errors import InvalidConfigurationError, TrendAggregationError
from trendgraph.services.trend.extractors import (
    HEALTH_ROW_IDS,
    NEW_VERSUS_FIXED_ROW_IDS,
    SEVERITY_ROW_IDS,
    HealthSeries,
    SeriesExtractor,
    new_versus_fixed_series,
    row_ids_from,
    severity_series,
    total_series,
)
from trendgraph.services.trend.series_builder import SeriesBuilder
from trendgraph.services.trend.window import SelectionConfig

logger = logging.getLogger(__name__)

SERIES_SEVERITY = "severity"
SERIES_NEW_VERSUS_FIXED = "new_versus_fixed"
SERIES_HEALTH = "health"
SERIES_TOTAL = "total"

ALL_SERIES = (SERIES_SEVERITY, SERIES_NEW_VERSUS_FIXED, SERIES_HEALTH, SERIES_TOTAL)


class UnknownSeriesError(ValueError):
    """The payload names a series kind without an extractor."""


def parse_optional_int(raw: Any) -> int | None:
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_window_int(payload: Mapping[str, Any], key: str) -> int | None:
    """Parse an optional window knob; a present value that is not a number is rejected."""
    raw = payload.get(key)
    value = parse_optional_int(raw)
    if value is None and raw is not None and str(raw).strip():
        raise InvalidConfigurationError(f"{key} must be an integer, got {raw!r}")
    return value


def parse_builds(raw: Any) -> list[Build]:
    """Parse build descriptors and order them newest first."""
    if not isinstance(raw, (list, tuple)):
        return []

    builds: list[Build] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        number = parse_optional_int(item.get("number"))
        if number is None:
            logger.warning("Skipping build without number", extra={"payload": dict(item)})
            continue
        metrics = item.get("metrics") or {}
        if not isinstance(metrics, Mapping):
            logger.warning("Skipping build with malformed metrics", extra={"build": number, "metrics": repr(metrics)})
            continue
        builds.append(
            Build(
                number=number,
                display_name=str(item.get("display_name") or ""),
                timestamp_millis=parse_optional_int(item.get("timestamp")) or 0,
                metrics=dict(metrics),
            )
        )
    return sorted(builds, reverse=True)


def parse_selection_config(
    payload: Mapping[str, Any],
    *,
    defaults: SelectionConfig | None = None,
    today_provider: Callable[[], date] | None = None,
) -> SelectionConfig:
    """Build a window config from payload knobs, falling back to settings."""
    base = defaults or SelectionConfig.from_settings(today_provider=today_provider)

    use_date_domain = base.use_date_domain
    if payload.get("use_build_date") is not None:
        use_date_domain = bool(payload["use_build_date"])

    build_count = base.build_count
    if "build_count" in payload:
        build_count = parse_window_int(payload, "build_count")

    is_too_old = base.is_too_old
    if "day_count" in payload:
        is_too_old = SelectionConfig.from_counts(
            day_count=parse_window_int(payload, "day_count"),
            today_provider=today_provider,
        ).is_too_old

    return SelectionConfig(use_date_domain=use_date_domain, build_count=build_count, is_too_old=is_too_old)


def create_series_builder(payload: Mapping[str, Any]) -> SeriesBuilder:
    """Resolve the series kind named by `payload["series"]` to a builder."""
    name = str(payload.get("series") or SERIES_SEVERITY).strip().lower()

    extractor: SeriesExtractor
    if name == SERIES_SEVERITY:
        extractor, row_ids = severity_series, SEVERITY_ROW_IDS
    elif name == SERIES_NEW_VERSUS_FIXED:
        extractor, row_ids = new_versus_fixed_series, NEW_VERSUS_FIXED_ROW_IDS
    elif name == SERIES_HEALTH:
        health = HealthSeries(
            healthy=parse_optional_int(payload.get("healthy")) or 0,
            unhealthy=parse_optional_int(payload.get("unhealthy")) or 0,
        )
        extractor, row_ids = health, (HEALTH_ROW_IDS if health.enabled else ("total",))
    elif name == SERIES_TOTAL:
        extractor, row_ids = total_series, ("total",)
    else:
        raise UnknownSeriesError(f"Unknown series: {name}")

    return SeriesBuilder(extractor, row_id=row_ids_from(row_ids))


def _failure(series: Any, exc: TrendAggregationError) -> dict[str, Any]:
    logger.warning(
        "Trend aggregation failed",
        extra={"series": series, "error_type": type(exc).__name__, "error": str(exc)},
    )
    return {"success": False, "series": series, "errors": [f"{type(exc).__name__}: {exc}"]}


def run_build_trend(
    payload: Mapping[str, Any],
    *,
    today_provider: Callable[[], date] | None = None,
) -> dict[str, Any]:
    """Create the trend dataset of a single build history."""
    builder = create_series_builder(payload)
    series = payload.get("series") or SERIES_SEVERITY
    try:
        config = parse_selection_config(payload, today_provider=today_provider)
        dataset = builder.create_dataset(config, parse_builds(payload.get("builds")))
    except TrendAggregationError as exc:
        return _failure(series, exc)

    logger.info("Build trend created", extra={"series": series, "levels": len(dataset.level_ids)})
    return {"success": True, "series": series, "dataset": dataset.to_dict()}


def run_aggregated_trend(
    payload: Mapping[str, Any],
    *,
    today_provider: Callable[[], date] | None = None,
) -> dict[str, Any]:
    """Create one per-day dataset over all histories of the payload."""
    builder = create_series_builder(payload)
    series = payload.get("series") or SERIES_SEVERITY
    raw_histories: Sequence[Any] = payload.get("histories") or []
    try:
        config = parse_selection_config(payload, today_provider=today_provider)
        sources = []
        for entry in raw_histories:
            if not isinstance(entry, Mapping):
                continue
            sources.append(
                (
                    parse_builds(entry.get("builds")),
                    parse_selection_config(entry, defaults=config, today_provider=today_provider),
                )
            )
        dataset = builder.create_aggregation(config, sources)
    except TrendAggregationError as exc:
        return _failure(series, exc)

    logger.info("Aggregated trend created", extra={"series": series, "histories": len(sources)})
    return {"success": True, "series": series, "histories": len(sources), "dataset": dataset.to_dict()}
