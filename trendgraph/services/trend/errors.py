"""Errors raised by the trend aggregation engine.

None of these is recovered inside the engine: an aggregation call either
returns a consistent dataset or raises.
"""

from __future__ import annotations

from typing import Any


class TrendAggregationError(Exception):
    """Base class for all aggregation failures."""


class InvalidConfigurationError(TrendAggregationError, ValueError):
    """The selection window is configured with impossible values."""


class InconsistentSeriesLengthError(TrendAggregationError):
    """Two series combined in one aggregation step differ in length."""

    def __init__(self, expected: int, actual: int, *, context: str = "") -> None:
        self.expected = expected
        self.actual = actual
        self.context = context
        detail = f" ({context})" if context else ""
        super().__init__(f"Series length mismatch: expected {expected} levels, got {actual}{detail}")


class ExtractorFailureError(TrendAggregationError):
    """The caller supplied extractor failed for a build."""

    def __init__(self, build: Any, cause: BaseException) -> None:
        self.build = build
        self.cause = cause
        super().__init__(f"Series extraction failed for build {build!r}: {cause}")


def ensure_same_length(expected: int, actual: int, *, context: str = "") -> None:
    if expected != actual:
        raise InconsistentSeriesLengthError(expected, actual, context=context)
