from __future__ import annotations

from enum import IntEnum


class TimeRange(IntEnum):
    """Look-back window, in hours, for history queries."""

    HOUR = 1
    SIX_HOURS = 6
    DAY = 24
    WEEK = 168

    @classmethod
    def parse(cls, hours: int | str) -> TimeRange:
        try:
            return cls(int(hours))
        except (TypeError, ValueError):
            allowed = ", ".join(str(int(r)) for r in cls)
            raise ValueError(f"Unsupported time range {hours!r} (expected one of {allowed})") from None

    @property
    def label(self) -> str:
        return TIME_RANGE_LABELS[self]


TIME_RANGE_LABELS: dict[TimeRange, str] = {
    TimeRange.HOUR: "Last Hour",
    TimeRange.SIX_HOURS: "Last 6 Hours",
    TimeRange.DAY: "Last 24 Hours",
    TimeRange.WEEK: "Last Week",
}

DEFAULT_TIME_RANGE = TimeRange.DAY
