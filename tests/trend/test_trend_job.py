from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from trendgraph.jobs.trend_job import (
    UnknownSeriesError,
    create_series_builder,
    parse_builds,
    parse_optional_int,
    parse_selection_config,
    run_aggregated_trend,
    run_build_trend,
)
from trendgraph.services.trend.errors import InvalidConfigurationError
from trendgraph.services.trend.window import SelectionConfig

START = datetime(2026, 7, 1, 10, tzinfo=UTC)


def _build(number: int, *, day_offset: int = 0, **metrics: int) -> dict:
    moment = START + timedelta(days=day_offset)
    return {"number": number, "timestamp": int(moment.timestamp() * 1000), "metrics": metrics}


def test_parse_builds_orders_newest_first_and_skips_invalid_entries() -> None:
    builds = parse_builds(
        [
            {"number": "2", "display_name": "release-2"},
            {"display_name": "no number"},
            "garbage",
            {"number": 7},
        ]
    )

    assert [build.number for build in builds] == [7, 2]
    assert builds[1].display_name == "release-2"
    assert builds[0].display_name == "#7"


def test_parse_optional_int_tolerates_blank_and_invalid_values() -> None:
    assert parse_optional_int(None) is None
    assert parse_optional_int(" ") is None
    assert parse_optional_int("x") is None
    assert parse_optional_int(" 12 ") == 12


def test_parse_selection_config_overrides_only_given_knobs() -> None:
    defaults = SelectionConfig(use_date_domain=True, build_count=20)

    config = parse_selection_config({"build_count": 3}, defaults=defaults)

    assert config.build_count == 3
    assert config.use_date_domain is True
    assert config.is_too_old is defaults.is_too_old


def test_unknown_series_is_rejected() -> None:
    with pytest.raises(UnknownSeriesError):
        create_series_builder({"series": "coverage"})


def test_run_build_trend_returns_named_levels() -> None:
    result = run_build_trend(
        {
            "series": "severity",
            "build_count": 2,
            "builds": [
                _build(1, high=1, normal=1, low=1),
                _build(2, high=2, normal=2, low=2),
                _build(3, high=3, normal=3, low=3),
            ],
        }
    )

    assert result["success"] is True
    assert result["dataset"]["domain_axis_labels"] == ["#2", "#3"]
    assert [series["id"] for series in result["dataset"]["series"]] == ["high", "normal", "low"]
    assert result["dataset"]["series"][0]["data"] == [2, 3]


def test_run_build_trend_reports_aggregation_errors() -> None:
    result = run_build_trend({"series": "total", "build_count": 0, "builds": [_build(1, total=1)]})

    assert result["success"] is False
    assert result["errors"][0].startswith("InvalidConfigurationError")


def test_run_build_trend_reports_extractor_failures() -> None:
    result = run_build_trend({"series": "new_versus_fixed", "builds": [_build(1, new=1)]})

    assert result["success"] is False
    assert result["errors"][0].startswith("ExtractorFailureError")


def test_run_aggregated_trend_merges_histories_per_day() -> None:
    result = run_aggregated_trend(
        {
            "series": "health",
            "healthy": 1,
            "unhealthy": 3,
            "build_count": 10,
            "histories": [
                {"name": "job-a", "builds": [_build(1, total=2)]},
                {"name": "job-b", "builds": [_build(4, day_offset=1, total=5)]},
                "ignored",
            ],
        },
        today_provider=lambda: date(2026, 7, 2),
    )

    assert result["success"] is True
    assert result["histories"] == 2
    assert result["dataset"]["domain_axis_labels"] == ["07-01", "07-02"]
    assert result["dataset"]["series"] == [
        {"id": "healthy", "data": [1, 2]},
        {"id": "between", "data": [1, 3]},
        {"id": "unhealthy", "data": [0, 2]},
    ]


def test_run_aggregated_trend_with_no_histories_is_empty() -> None:
    result = run_aggregated_trend({"series": "total"})

    assert result == {
        "success": True,
        "series": "total",
        "histories": 0,
        "dataset": {"domain_axis_labels": [], "series": []},
    }


@pytest.mark.parametrize("key", ["build_count", "day_count"])
def test_parse_selection_config_rejects_non_numeric_window_values(key: str) -> None:
    with pytest.raises(InvalidConfigurationError):
        parse_selection_config({key: "two"}, defaults=SelectionConfig())


def test_parse_selection_config_treats_blank_window_values_as_unset() -> None:
    config = parse_selection_config({"build_count": " "}, defaults=SelectionConfig(build_count=20))

    assert config.has_count_cutoff is False


def test_run_build_trend_fails_on_non_numeric_build_count() -> None:
    result = run_build_trend(
        {
            "series": "total",
            "build_count": "two",
            "builds": [_build(number, total=number) for number in range(1, 6)],
        }
    )

    assert result["success"] is False
    assert result["errors"][0].startswith("InvalidConfigurationError")
    assert "dataset" not in result


def test_parse_builds_skips_builds_with_malformed_metrics() -> None:
    builds = parse_builds(
        [
            {"number": 1, "metrics": "x"},
            {"number": 2, "metrics": ["total", 3]},
            {"number": 3, "metrics": {"total": 3}},
        ]
    )

    assert [build.number for build in builds] == [3]


def test_run_build_trend_survives_malformed_metrics() -> None:
    result = run_build_trend({"series": "total", "builds": [{"number": 1, "metrics": "x"}, _build(2, total=4)]})

    assert result["success"] is True
    assert result["dataset"]["series"] == [{"id": "total", "data": [4]}]
