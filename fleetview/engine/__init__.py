from .selection import SelectionStore
from .series import label_interval, to_chart_series

__all__ = [
    "SelectionStore",
    "label_interval",
    "to_chart_series",
]
