"""Build descriptor consumed by the trend engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Mapping


@dataclass(frozen=True, slots=True, order=True)
class Build:
    """One recorded execution of a job, ordered and identified by its number."""

    number: int
    display_name: str = field(default="", compare=False)
    timestamp_millis: int = field(default=0, compare=False)
    metrics: Mapping[str, int] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        if not self.display_name:
            object.__setattr__(self, "display_name", f"#{self.number}")

    def timestamp(self, tz: tzinfo) -> datetime:
        return datetime.fromtimestamp(self.timestamp_millis / 1000, tz=tz)

    def __repr__(self) -> str:
        return f"<Build {self.display_name}>"
