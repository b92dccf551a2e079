from __future__ import annotations

import logging

from fleetview import presenters
from fleetview.api.client import MonitorApiClient
from fleetview.config import settings
from fleetview.engine.selection import SelectionStore
from fleetview.models import TimeRange
from fleetview.sync import DashboardSync, HistorySync, HostDetailSync

logger = logging.getLogger(__name__)


class MonitorSession:
    """One mounted dashboard view: a selection store plus its three pollers."""

    def __init__(
        self,
        client: MonitorApiClient | None = None,
        store: SelectionStore | None = None,
        dashboard_interval: float | None = None,
        host_detail_interval: float | None = None,
        history_interval: float | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client or MonitorApiClient()
        self.store = store or SelectionStore(settings.default_time_range)
        self.dashboard = DashboardSync(self.client, interval=dashboard_interval)
        self.host_detail = HostDetailSync(self.client, self.store, interval=host_detail_interval)
        self.history = HistorySync(self.client, self.store, interval=history_interval)
        self._running = False

    # ── lifecycle ────────────────────────────────────────

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self.dashboard.attach()
        self.host_detail.attach()
        self.history.attach()
        logger.info("Monitor session started (api=%s)", self.client.base_url)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        await self.history.close()
        await self.host_detail.close()
        await self.dashboard.close()
        if self._owns_client:
            await self.client.aclose()
        logger.info("Monitor session stopped")

    async def __aenter__(self) -> MonitorSession:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    @property
    def running(self) -> bool:
        return self._running

    # ── user actions ────────────────────────────────────

    def select(self, hostname: str) -> str | None:
        return self.store.select(hostname)

    def set_time_range(self, hours: TimeRange | int) -> TimeRange:
        return self.store.set_time_range(hours)

    # ── presentation ────────────────────────────────────

    def view(self) -> dict:
        """Everything a front end needs to draw the current frame."""
        selected = self.store.hostname
        dashboard_state = self.dashboard.state
        snapshot = dashboard_state.data
        view = {
            "dashboard": presenters.dashboard_panel(dashboard_state),
            "hosts": presenters.host_rows(snapshot.hosts if snapshot else [], selected),
            "selected": selected,
            "overview": presenters.host_overview_panel(selected, self.host_detail.state),
            "history": None,
        }
        if selected is not None:
            view["history"] = presenters.history_panel(selected, self.store.time_range, self.history.state)
        return view
