from __future__ import annotations

from fleetview.api.client import MonitorApiClient
from fleetview.config import settings
from fleetview.engine.selection import SelectionStore
from fleetview.engine.series import to_chart_series
from fleetview.models import ChartPoint, PollState, Selection, TimeRange
from fleetview.sync.base import Poller


class HistorySync(Poller[list[ChartPoint]]):
    """Chart series for the selected host over the selected time range.

    Keyed on ``(hostname, hours)``: a change to either restarts the loop.
    """

    name = "history"
    interval = 30.0

    def __init__(
        self,
        client: MonitorApiClient,
        store: SelectionStore,
        interval: float | None = None,
    ) -> None:
        super().__init__(interval=interval if interval is not None else settings.history_interval)
        self._client = client
        self._store = store
        self._attached = False

    def attach(self) -> None:
        if self._attached:
            return
        self._store.subscribe(self._on_selection)
        self._attached = True
        self._on_selection(self._store.selection)

    def detach(self) -> None:
        if not self._attached:
            return
        self._store.unsubscribe(self._on_selection)
        self._attached = False
        self.stop()

    async def close(self) -> None:
        self.detach()
        await super().close()

    @property
    def hostname(self) -> str | None:
        return self.key[0] if self.running else None

    @property
    def time_range(self) -> TimeRange | None:
        return self.key[1] if self.running else None

    @property
    def state(self) -> PollState:
        if not self.running:
            return PollState(generation=self.generation)
        return super().state

    def _on_selection(self, selection: Selection) -> None:
        if selection.hostname is None:
            self.stop()
            return
        hostname, hours = selection.hostname, selection.time_range

        async def fetch() -> list[ChartPoint]:
            samples = await self._client.get_history(hostname, hours)
            return to_chart_series(samples)

        self.start(fetch, key=(hostname, hours))
