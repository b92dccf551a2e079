"""Tests for fleetview.sync — dashboard, host detail and history pollers."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from fleetview.api.client import MonitorApiClient
from fleetview.engine.selection import SelectionStore
from fleetview.models import ChartPoint, MetricSample, PollState, TimeRange
from fleetview.sync import DashboardSync, HistorySync, HostDetailSync
from simulator.fake_api import FakeMetricsStore, create_app


# ── fixtures ───────────────────────────────────────────


@pytest.fixture
def fake() -> FakeMetricsStore:
    store = FakeMetricsStore()
    store.generate(["h1"], count=120, seed=3)
    store.generate(["h2"], count=30, seed=4)
    return store


@pytest.fixture
async def api(fake: FakeMetricsStore):
    transport = ASGITransport(app=create_app(fake), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield MonitorApiClient(base_url="http://test/api", http_client=http)


@pytest.fixture
def selection() -> SelectionStore:
    return SelectionStore()


# ── DashboardSync ──────────────────────────────────────


class TestDashboardSync:
    @pytest.mark.asyncio
    async def test_polls_snapshot(self, api: MonitorApiClient):
        sync = DashboardSync(api, interval=0.05)
        sync.attach()
        await asyncio.sleep(0.15)
        await sync.close()

        assert sync.data.total_hosts == 2
        assert sync.error is None
        assert sync.running is False

    @pytest.mark.asyncio
    async def test_attach_twice_does_not_restart(self, api: MonitorApiClient):
        sync = DashboardSync(api, interval=10.0)
        sync.attach()
        gen = sync.generation
        sync.attach()
        assert sync.generation == gen
        await sync.close()

    @pytest.mark.asyncio
    async def test_ignores_selection(self, api: MonitorApiClient, selection: SelectionStore):
        sync = DashboardSync(api, interval=10.0)
        sync.attach()
        gen = sync.generation
        selection.select("h1")
        selection.set_time_range(1)
        assert sync.generation == gen
        await sync.close()

    @pytest.mark.asyncio
    async def test_default_interval(self, api: MonitorApiClient):
        assert DashboardSync(api).interval == 5.0


# ── HostDetailSync ─────────────────────────────────────


class TestHostDetailSync:
    @pytest.mark.asyncio
    async def test_idle_without_selection(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HostDetailSync(api, selection, interval=10.0)
        sync.attach()
        assert sync.running is False
        assert sync.hostname is None
        assert sync.state == PollState(generation=sync.generation)
        await sync.close()

    @pytest.mark.asyncio
    async def test_follows_selection(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HostDetailSync(api, selection, interval=10.0)
        sync.attach()

        selection.select("h1")
        assert sync.hostname == "h1"
        assert sync.is_loading is True
        await asyncio.sleep(0.05)
        assert sync.data.hostname == "h1"

        selection.select("h2")
        assert sync.hostname == "h2"
        assert sync.data is None  # nothing of h1 under h2's name
        await asyncio.sleep(0.05)
        assert sync.data.hostname == "h2"
        await sync.close()

    @pytest.mark.asyncio
    async def test_clearing_selection_hides_but_keeps_data(
        self, api: MonitorApiClient, selection: SelectionStore
    ):
        sync = HostDetailSync(api, selection, interval=10.0)
        sync.attach()
        selection.select("h1")
        await asyncio.sleep(0.05)

        selection.select("h1")  # toggle off
        assert sync.running is False
        assert sync.state.data is None
        assert sync.data.hostname == "h1"
        await sync.close()

    @pytest.mark.asyncio
    async def test_attach_picks_up_existing_selection(self, api: MonitorApiClient, selection: SelectionStore):
        selection.select("h2")
        sync = HostDetailSync(api, selection, interval=10.0)
        sync.attach()
        assert sync.hostname == "h2"
        await sync.close()

    @pytest.mark.asyncio
    async def test_detach_unsubscribes(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HostDetailSync(api, selection, interval=10.0)
        sync.attach()
        sync.detach()
        selection.select("h1")
        assert sync.running is False
        assert selection.subscriber_count == 0
        await sync.close()

    @pytest.mark.asyncio
    async def test_slow_previous_host_never_overwrites_new_host(self):
        """h1 answers after 500 ms with cpu=10, h2 after 50 ms with cpu=90; h2 wins."""
        store = FakeMetricsStore()
        now = datetime.now(timezone.utc)
        store.add_sample(MetricSample(hostname="h1", timestamp=now, cpu_percent=10.0))
        store.add_sample(MetricSample(hostname="h2", timestamp=now, cpu_percent=90.0))
        store.latency = {"h1": 0.5, "h2": 0.05}

        transport = ASGITransport(app=create_app(store), raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            client = MonitorApiClient(base_url="http://test/api", http_client=http)
            selection = SelectionStore()
            sync = HostDetailSync(client, selection, interval=10.0)
            applied: list[PollState] = []
            sync.subscribe(applied.append)
            sync.attach()

            selection.select("h1")
            await asyncio.sleep(0.1)
            selection.select("h2")
            await asyncio.sleep(0.6)

            assert sync.data.cpu_percent == 90.0
            assert sync.data.hostname == "h2"
            assert all(s.data is None or s.data.hostname == "h2" for s in applied)
            await sync.close()


# ── HistorySync ────────────────────────────────────────


class TestHistorySync:
    @pytest.mark.asyncio
    async def test_data_is_ascending_chart_series(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HistorySync(api, selection, interval=10.0)
        sync.attach()
        selection.select("h1")
        await asyncio.sleep(0.05)
        await sync.close()

        series = sync.data
        assert len(series) == 120
        assert all(isinstance(p, ChartPoint) for p in series)
        stamps = [p.timestamp for p in series]
        assert stamps == sorted(stamps)

    @pytest.mark.asyncio
    async def test_time_range_change_restarts(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HistorySync(api, selection, interval=10.0)
        sync.attach()
        selection.select("h1")
        await asyncio.sleep(0.05)
        gen = sync.generation

        selection.set_time_range(1)
        assert sync.generation > gen
        assert sync.time_range is TimeRange.HOUR
        await asyncio.sleep(0.05)
        assert 59 <= len(sync.data) <= 61
        await sync.close()

    @pytest.mark.asyncio
    async def test_same_range_does_not_restart(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HistorySync(api, selection, interval=10.0)
        sync.attach()
        selection.select("h1")
        gen = sync.generation
        selection.set_time_range(24)
        assert sync.generation == gen
        await sync.close()

    @pytest.mark.asyncio
    async def test_host_change_restarts(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HistorySync(api, selection, interval=10.0)
        sync.attach()
        selection.select("h1")
        selection.select("h2")
        assert sync.hostname == "h2"
        await asyncio.sleep(0.05)
        assert len(sync.data) == 30
        await sync.close()

    @pytest.mark.asyncio
    async def test_cleared_selection_stops(self, api: MonitorApiClient, selection: SelectionStore):
        sync = HistorySync(api, selection, interval=10.0)
        sync.attach()
        selection.select("h1")
        selection.clear()
        assert sync.running is False
        assert sync.hostname is None
        assert sync.time_range is None
        assert sync.state.data is None
        await sync.close()


# ── failure isolation ──────────────────────────────────


@pytest.mark.asyncio
async def test_dashboard_failure_does_not_affect_history(
    api: MonitorApiClient, fake: FakeMetricsStore, selection: SelectionStore
):
    fake.failures["dashboard"] = 500
    dashboard = DashboardSync(api, interval=0.05)
    history = HistorySync(api, selection, interval=0.05)
    dashboard.attach()
    history.attach()
    selection.select("h2")

    await asyncio.sleep(0.15)
    await dashboard.close()
    await history.close()

    assert dashboard.data is None
    assert dashboard.error.startswith("Failed to fetch dashboard data (GET /dashboard/): HTTP 500")
    assert history.error is None
    assert len(history.data) == 30


@pytest.mark.asyncio
async def test_history_failure_keeps_stale_series(
    api: MonitorApiClient, fake: FakeMetricsStore, selection: SelectionStore
):
    dashboard = DashboardSync(api, interval=0.05)
    history = HistorySync(api, selection, interval=0.05)
    dashboard.attach()
    history.attach()
    selection.select("h2")
    await asyncio.sleep(0.03)

    fake.failures["history"] = 503
    await asyncio.sleep(0.1)
    await dashboard.close()
    await history.close()

    assert "Failed to fetch metrics history for h2" in history.error
    assert len(history.data) == 30
    assert dashboard.error is None
    assert dashboard.data.total_hosts == 2
