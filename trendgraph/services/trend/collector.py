"""Per-build series collection over a selected window."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from trendgraph.models.build import Build
from trendgraph.services.trend.errors import ExtractorFailureError, ensure_same_length
from trendgraph.services.trend.extractors import SeriesExtractor, SeriesVector
from trendgraph.services.trend.window import SelectionConfig, select_window

logger = logging.getLogger(__name__)


def collect_series_per_build(
    history: Iterable[Build],
    extractor: SeriesExtractor,
    config: SelectionConfig,
    *,
    on_build: Callable[[Build], None] | None = None,
) -> dict[Build, SeriesVector]:
    """Run `extractor` once for every build admitted by the window of `config`."""

    series_per_build: dict[Build, SeriesVector] = {}
    length: int | None = None
    for build in select_window(config, history):
        if on_build is not None:
            on_build(build)
        logger.debug("Collecting series", extra={"build": build.number})

        try:
            series = tuple(extractor(build))
        except Exception as exc:
            raise ExtractorFailureError(build, exc) from exc

        if length is None:
            length = len(series)
        else:
            ensure_same_length(length, len(series), context=f"build {build.display_name}")
        series_per_build[build] = series

    return series_per_build
