"""Entry points that turn build histories into chart datasets."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Callable, Iterable, Sequence, Union

from trendgraph.models.build import Build
from trendgraph.models.chart import ChartDataset
from trendgraph.services.trend.assembler import assemble_per_build, assemble_per_date, default_row_id
from trendgraph.services.trend.collector import collect_series_per_build
from trendgraph.services.trend.date_aggregator import average_by_date, resolve_time_zone
from trendgraph.services.trend.extractors import SeriesExtractor
from trendgraph.services.trend.history_merger import merge_histories
from trendgraph.services.trend.window import SelectionConfig

logger = logging.getLogger(__name__)

HistorySource = Union[Iterable[Build], tuple[Iterable[Build], SelectionConfig]]


class SeriesBuilder:
    """Creates trend datasets for one kind of series.

    The extractor decides what a series means for a build; the builder only
    knows how to window, average, merge and order series.
    """

    def __init__(
        self,
        extractor: SeriesExtractor,
        *,
        row_id: Callable[[int], str] = default_row_id,
        time_zone: str | tzinfo | None = None,
        date_label_format: str | None = None,
        on_build: Callable[[Build], None] | None = None,
    ) -> None:
        self._extractor = extractor
        self._row_id = row_id
        self._time_zone = resolve_time_zone(time_zone)
        self._date_label_format = date_label_format
        self._on_build = on_build

    def create_dataset(self, config: SelectionConfig, history: Iterable[Build]) -> ChartDataset:
        """Dataset of one newest-first history, per build number or per day."""

        series_per_build = collect_series_per_build(history, self._extractor, config, on_build=self._on_build)
        if config.use_date_domain:
            return assemble_per_date(
                average_by_date(series_per_build, tz=self._time_zone),
                row_id=self._row_id,
                label_format=self._date_label_format,
            )
        return assemble_per_build(series_per_build, row_id=self._row_id)

    def create_aggregation(self, config: SelectionConfig, histories: Iterable[HistorySource]) -> ChartDataset:
        """Per-day dataset that sums several histories, carrying missing days forward.

        Each entry of `histories` is either a bare history, selected with
        `config`, or a `(history, config)` pair with its own window.
        """

        sources = self._resolve_sources(config, histories)
        for _, source_config in sources:
            source_config.validate()

        averages = [
            average_by_date(
                collect_series_per_build(history, self._extractor, source_config, on_build=self._on_build),
                tz=self._time_zone,
            )
            for history, source_config in sources
        ]
        logger.info("Aggregating trend", extra={"histories": len(sources)})
        return assemble_per_date(
            merge_histories(averages),
            row_id=self._row_id,
            label_format=self._date_label_format,
        )

    @staticmethod
    def _resolve_sources(
        config: SelectionConfig,
        histories: Iterable[HistorySource],
    ) -> Sequence[tuple[Iterable[Build], SelectionConfig]]:
        sources: list[tuple[Iterable[Build], SelectionConfig]] = []
        for entry in histories:
            if isinstance(entry, tuple) and len(entry) == 2 and isinstance(entry[1], SelectionConfig):
                sources.append((entry[0], entry[1]))
            else:
                sources.append((entry, config))
        return sources
