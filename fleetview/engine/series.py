from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from fleetview.formatting import format_time_label
from fleetview.models.metrics import ChartPoint


class _Reading(Protocol):
    timestamp: datetime
    cpu_percent: float
    memory_percent: float
    disk_percent: float


def to_chart_series(samples: Iterable[_Reading]) -> list[ChartPoint]:
    """Reshape newest-first readings into an oldest-first chart series.

    The input is reversed and then stably sorted by instant, so the output
    is non-decreasing even when the source ordering is off, and ties keep
    their reversed order. Accepts ``MetricSample`` or ``ChartPoint`` items.
    """
    ordered = sorted(reversed(list(samples)), key=lambda s: s.timestamp)
    return [
        ChartPoint(
            timestamp=s.timestamp,
            label=format_time_label(s.timestamp),
            cpu_percent=s.cpu_percent,
            memory_percent=s.memory_percent,
            disk_percent=s.disk_percent,
        )
        for s in ordered
    ]


def label_interval(count: int, labels: int = 6) -> int:
    """Tick spacing that shows roughly ``labels`` x-axis labels."""
    if labels <= 0:
        raise ValueError("labels must be positive")
    return count // labels
