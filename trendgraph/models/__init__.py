"""Trend engine data models"""

from trendgraph.models.build import Build
from trendgraph.models.chart import ChartDataset, ChartPoint

__all__ = [
    "Build",
    "ChartDataset",
    "ChartPoint",
]
