from __future__ import annotations

from functools import partial

from fleetview.api.client import MonitorApiClient
from fleetview.config import settings
from fleetview.engine.selection import SelectionStore
from fleetview.models import LatestMetrics, PollState, Selection
from fleetview.sync.base import Poller


class HostDetailSync(Poller[LatestMetrics]):
    """Latest metrics of the selected host.

    Restarts on every new hostname; stops when the selection is cleared,
    after which ``state`` renders empty even though the last payload is
    still held.
    """

    name = "host_detail"
    interval = 3.0

    def __init__(
        self,
        client: MonitorApiClient,
        store: SelectionStore,
        interval: float | None = None,
    ) -> None:
        super().__init__(interval=interval if interval is not None else settings.host_detail_interval)
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
        return self.key if self.running else None

    @property
    def state(self) -> PollState:
        if not self.running:
            return PollState(generation=self.generation)
        return super().state

    def _on_selection(self, selection: Selection) -> None:
        if selection.hostname is None:
            self.stop()
            return
        self.start(partial(self._client.get_latest, selection.hostname), key=selection.hostname)
