from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from trendgraph.models.build import Build
from trendgraph.services.trend.date_aggregator import average_by_date, build_date
from trendgraph.services.trend.errors import InconsistentSeriesLengthError


def _build(number: int, moment: datetime) -> Build:
    return Build(number=number, timestamp_millis=int(moment.timestamp() * 1000))


def test_single_build_day_keeps_series_unchanged() -> None:
    build = _build(1, datetime(2026, 5, 1, 9, tzinfo=UTC))

    assert average_by_date({build: (3, 1, 4)}, tz=UTC) == {date(2026, 5, 1): (3, 1, 4)}


def test_same_day_builds_are_summed_then_divided_with_truncation() -> None:
    first = _build(1, datetime(2026, 5, 1, 9, tzinfo=UTC))
    second = _build(2, datetime(2026, 5, 1, 17, tzinfo=UTC))

    averages = average_by_date({first: (5, 7), second: (4, 2)}, tz=UTC)

    assert averages == {date(2026, 5, 1): (4, 4)}


def test_division_happens_once_after_the_full_sum() -> None:
    day = datetime(2026, 5, 1, tzinfo=UTC)
    series_per_build = {
        _build(1, day + timedelta(hours=1)): (5,),
        _build(2, day + timedelta(hours=2)): (4,),
        _build(3, day + timedelta(hours=3)): (0,),
    }

    # pairwise averaging would give ((5 + 4) // 2 + 0) // 2 == 2
    assert average_by_date(series_per_build, tz=UTC) == {date(2026, 5, 1): (3,)}


def test_builds_are_grouped_by_date_in_the_configured_zone() -> None:
    moment = datetime(2026, 5, 1, 23, 30, tzinfo=UTC)
    build = _build(1, moment)
    plus_two = timezone(timedelta(hours=2))

    assert build_date(build, UTC) == date(2026, 5, 1)
    assert build_date(build, plus_two) == date(2026, 5, 2)


def test_mismatching_lengths_on_one_day_are_rejected() -> None:
    first = _build(1, datetime(2026, 5, 1, 9, tzinfo=UTC))
    second = _build(2, datetime(2026, 5, 1, 10, tzinfo=UTC))

    with pytest.raises(InconsistentSeriesLengthError):
        average_by_date({first: (1, 2), second: (1, 2, 3)}, tz=UTC)


def test_empty_mapping_has_no_dates() -> None:
    assert average_by_date({}, tz=UTC) == {}
