from __future__ import annotations

from fleetview.api.client import MonitorApiClient
from fleetview.config import settings
from fleetview.models import DashboardSnapshot
from fleetview.sync.base import Poller


class DashboardSync(Poller[DashboardSnapshot]):
    """Fleet snapshot poller; independent of selection, never restarts."""

    name = "dashboard"
    interval = 5.0

    def __init__(self, client: MonitorApiClient, interval: float | None = None) -> None:
        super().__init__(interval=interval if interval is not None else settings.dashboard_interval)
        self._client = client

    def attach(self) -> None:
        self.start(self._client.get_dashboard, key=self.name)

    def detach(self) -> None:
        self.stop()
