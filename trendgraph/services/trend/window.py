"""Selection of the builds that take part in a trend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Callable, Iterable, Iterator

from trendgraph.config.settings import settings
from trendgraph.models.build import Build
from trendgraph.services.trend.date_aggregator import build_date, resolve_time_zone
from trendgraph.services.trend.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COUNT = 50
DEFAULT_DAY_COUNT = 0


def never_too_old(_: Build) -> bool:
    return False


@dataclass(frozen=True, slots=True)
class ResultAge:
    """Age cutoff: a build is too old once it lies `day_count` or more days from today."""

    day_count: int
    time_zone: tzinfo
    today_provider: Callable[[], date] | None = None

    def today(self) -> date:
        if self.today_provider is not None:
            return self.today_provider()
        return datetime.now(self.time_zone).date()

    def __call__(self, build: Build) -> bool:
        delta = abs((self.today() - build_date(build, self.time_zone)).days)
        return delta >= self.day_count


@dataclass(frozen=True, slots=True)
class SelectionConfig:
    """Window and domain options of one trend request."""

    use_date_domain: bool = False
    build_count: int | None = None
    is_too_old: Callable[[Build], bool] = never_too_old

    @property
    def has_count_cutoff(self) -> bool:
        return self.build_count is not None

    def validate(self) -> None:
        if self.build_count is not None and self.build_count <= 0:
            raise InvalidConfigurationError(f"Build count must be positive, got {self.build_count}")

    @classmethod
    def from_counts(
        cls,
        *,
        build_count: int | None = None,
        day_count: int | None = None,
        use_date_domain: bool = False,
        time_zone: str | tzinfo | None = None,
        today_provider: Callable[[], date] | None = None,
    ) -> "SelectionConfig":
        """Create a config from numeric knobs; a `day_count` of 0 or None disables the age cutoff."""

        is_too_old: Callable[[Build], bool] = never_too_old
        if day_count:
            if day_count < 0:
                raise InvalidConfigurationError(f"Day count must not be negative, got {day_count}")
            is_too_old = ResultAge(
                day_count=day_count,
                time_zone=resolve_time_zone(time_zone),
                today_provider=today_provider,
            )
        return cls(use_date_domain=use_date_domain, build_count=build_count, is_too_old=is_too_old)

    @classmethod
    def from_settings(cls, *, today_provider: Callable[[], date] | None = None) -> "SelectionConfig":
        build_count = int(getattr(settings, "TREND_BUILD_COUNT", DEFAULT_BUILD_COUNT))
        return cls.from_counts(
            build_count=build_count or None,
            day_count=int(getattr(settings, "TREND_DAY_COUNT", DEFAULT_DAY_COUNT)),
            use_date_domain=bool(getattr(settings, "TREND_USE_BUILD_DATE", False)),
            today_provider=today_provider,
        )


def select_window(config: SelectionConfig, history: Iterable[Build]) -> Iterator[Build]:
    """Yield the newest-first prefix of `history` admitted by `config`.

    Repeated build numbers are skipped and do not count toward the build
    count. Consumption of `history` stops as soon as a build is too old or the
    configured number of builds has been yielded.
    """

    config.validate()
    return _admitted_builds(config, history)


def _admitted_builds(config: SelectionConfig, history: Iterable[Build]) -> Iterator[Build]:
    admitted = 0
    seen: set[int] = set()
    for build in history:
        if build.number in seen:
            continue
        seen.add(build.number)
        if config.is_too_old(build):
            logger.debug("Build outside of age window", extra={"build": build.number})
            return
        yield build

        if config.has_count_cutoff:
            admitted += 1
            if admitted >= config.build_count:
                return
