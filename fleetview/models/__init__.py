from .host import DashboardSnapshot, Host
from .metrics import ChartPoint, HistoryResponse, LatestMetrics, MetricSample
from .selection import Selection
from .state import PollState
from .time_range import DEFAULT_TIME_RANGE, TIME_RANGE_LABELS, TimeRange

__all__ = [
    "ChartPoint",
    "DashboardSnapshot",
    "DEFAULT_TIME_RANGE",
    "HistoryResponse",
    "Host",
    "LatestMetrics",
    "MetricSample",
    "PollState",
    "Selection",
    "TIME_RANGE_LABELS",
    "TimeRange",
]
