from .base import Poller
from .dashboard import DashboardSync
from .history import HistorySync
from .host_detail import HostDetailSync

__all__ = [
    "DashboardSync",
    "HistorySync",
    "HostDetailSync",
    "Poller",
]
