"""In-memory stand-in for the metrics backend.

Serves the three read endpoints the dashboard polls, from synthetic
samples (plus one real reading of this machine via psutil), so the client
can be exercised end to end without an agent or database.

Usage:
    uvicorn simulator.fake_api:demo_app --factory --port 8000
    python -m fleetview --api-url http://localhost:8000/api
"""

from __future__ import annotations

import asyncio
import logging
import os
import platform
import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import psutil
from fastapi import APIRouter, FastAPI, HTTPException, Query, Request

from fleetview.models import DashboardSnapshot, Host, LatestMetrics, MetricSample, TimeRange

logger = logging.getLogger("simulator")


@dataclass
class FakeHost:
    hostname: str
    is_online: bool = True
    cpu_cores: int = 4
    boot_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc) - timedelta(days=1))
    samples: list[MetricSample] = field(default_factory=list)  # oldest first


class FakeMetricsStore:
    """Hosts and samples, plus knobs tests use to inject latency and failures."""

    def __init__(self) -> None:
        self.hosts: dict[str, FakeHost] = {}
        # endpoint name ("dashboard", "latest", "history") -> HTTP status to answer with
        self.failures: dict[str, int] = {}
        # hostname -> seconds to wait before answering latest/history
        self.latency: dict[str, float] = {}
        self.request_count = 0

    # ── population ──────────────────────────────────────

    def add_host(self, hostname: str, is_online: bool = True, cpu_cores: int = 4) -> FakeHost:
        host = self.hosts.get(hostname)
        if host is None:
            host = FakeHost(hostname=hostname, is_online=is_online, cpu_cores=cpu_cores)
            self.hosts[hostname] = host
        host.is_online = is_online
        return host

    def add_sample(self, sample: MetricSample) -> None:
        if not sample.hostname:
            raise ValueError("sample needs a hostname")
        host = self.hosts.get(sample.hostname) or self.add_host(sample.hostname)
        out_of_order = bool(host.samples) and sample.timestamp < host.samples[-1].timestamp
        host.samples.append(sample)
        if out_of_order:
            host.samples.sort(key=lambda s: s.timestamp)

    def generate(
        self,
        hostnames: list[str],
        count: int = 60,
        step: timedelta = timedelta(minutes=1),
        now: datetime | None = None,
        seed: int | None = None,
    ) -> None:
        """Random-walk ``count`` samples per host ending at ``now``."""
        rng = random.Random(seed)
        now = now or datetime.now(timezone.utc)
        for hostname in hostnames:
            cpu, mem = rng.uniform(5, 60), rng.uniform(20, 70)
            memory_total, disk_total = 16 * 1024**3, 512 * 1024**3
            sent = recv = 0
            for i in range(count):
                cpu = min(100.0, max(0.0, cpu + rng.uniform(-5, 5)))
                mem = min(100.0, max(0.0, mem + rng.uniform(-2, 2)))
                sent += rng.randint(10_000, 2_000_000)
                recv += rng.randint(10_000, 5_000_000)
                self.add_sample(
                    MetricSample(
                        hostname=hostname,
                        timestamp=now - step * (count - 1 - i),
                        cpu_percent=round(cpu, 1),
                        memory_percent=round(mem, 1),
                        disk_percent=42.0,
                        memory_used=int(memory_total * mem / 100),
                        memory_total=memory_total,
                        disk_used=int(disk_total * 0.42),
                        disk_total=disk_total,
                        network_bytes_sent=sent,
                        network_bytes_recv=recv,
                        network_packets_sent=sent // 1400,
                        network_packets_recv=recv // 1400,
                        load_average=(round(cpu / 25, 2), round(cpu / 30, 2), round(cpu / 35, 2)),
                    )
                )

    def record_local(self) -> MetricSample:
        """Append a real reading of this machine."""
        hostname = platform.node() or "localhost"
        vm = psutil.virtual_memory()
        disk = psutil.disk_usage(os.path.abspath(os.sep))
        net = psutil.net_io_counters()
        load = os.getloadavg() if hasattr(os, "getloadavg") else None
        sample = MetricSample(
            hostname=hostname,
            timestamp=datetime.now(timezone.utc),
            cpu_percent=psutil.cpu_percent(interval=0),
            memory_percent=vm.percent,
            disk_percent=disk.percent,
            memory_used=vm.used,
            memory_total=vm.total,
            disk_used=disk.used,
            disk_total=disk.total,
            network_bytes_sent=net.bytes_sent,
            network_bytes_recv=net.bytes_recv,
            network_packets_sent=net.packets_sent,
            network_packets_recv=net.packets_recv,
            load_average=load,
        )
        host = self.add_host(hostname, cpu_cores=psutil.cpu_count() or 1)
        host.boot_time = datetime.fromtimestamp(psutil.boot_time(), timezone.utc)
        self.add_sample(sample)
        return sample

    # ── read models ─────────────────────────────────────

    def snapshot(self) -> DashboardSnapshot:
        hosts: list[Host] = []
        latest: list[MetricSample] = []
        for fake in sorted(self.hosts.values(), key=lambda h: h.hostname):
            newest = fake.samples[-1] if fake.samples else None
            if newest is not None:
                latest.append(newest)
            hosts.append(
                Host(
                    hostname=fake.hostname,
                    is_online=fake.is_online,
                    latest_cpu_percent=newest.cpu_percent if newest else None,
                    latest_memory_percent=newest.memory_percent if newest else None,
                    latest_uptime=_uptime(fake, newest) if newest else None,
                )
            )
        return DashboardSnapshot(
            total_hosts=len(hosts),
            online_hosts=sum(1 for h in hosts if h.is_online),
            total_metrics=sum(len(h.samples) for h in self.hosts.values()),
            latest_metrics=latest,
            hosts=hosts,
        )

    def latest(self, hostname: str) -> LatestMetrics | None:
        fake = self.hosts.get(hostname)
        if fake is None or not fake.samples:
            return None
        newest = fake.samples[-1]
        return LatestMetrics(
            **newest.model_dump(exclude={"cpu_cores", "uptime"}),
            cpu_cores=fake.cpu_cores,
            uptime=_uptime(fake, newest),
        )

    def history(self, hostname: str, hours: int, now: datetime | None = None) -> list[MetricSample] | None:
        """Samples inside the window, newest first."""
        fake = self.hosts.get(hostname)
        if fake is None:
            return None
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(hours=hours)
        return [s for s in reversed(fake.samples) if start <= s.timestamp <= now]


def _uptime(fake: FakeHost, sample: MetricSample) -> int:
    return max(0, int((sample.timestamp - fake.boot_time).total_seconds()))


# ── HTTP surface ────────────────────────────────────────

router = APIRouter()


def _store(request: Request) -> FakeMetricsStore:
    store: FakeMetricsStore = request.app.state.store
    store.request_count += 1
    return store


def _maybe_fail(store: FakeMetricsStore, endpoint: str) -> None:
    status = store.failures.get(endpoint)
    if status is not None:
        raise HTTPException(status_code=status, detail=f"{endpoint} unavailable")


@router.get("/api/dashboard/")
async def get_dashboard(request: Request) -> dict:
    store = _store(request)
    _maybe_fail(store, "dashboard")
    return store.snapshot().model_dump(mode="json")


@router.get("/api/latest/")
async def get_latest(request: Request, hostname: str) -> dict:
    store = _store(request)
    await asyncio.sleep(store.latency.get(hostname, 0.0))
    _maybe_fail(store, "latest")
    latest = store.latest(hostname)
    if latest is None:
        raise HTTPException(status_code=404, detail="No metrics for host")
    return latest.model_dump(mode="json")


@router.get("/api/hosts/{hostname}/history/")
async def get_history(request: Request, hostname: str, hours: int = Query(default=24)) -> dict:
    store = _store(request)
    await asyncio.sleep(store.latency.get(hostname, 0.0))
    _maybe_fail(store, "history")
    if hours not in {int(r) for r in TimeRange}:
        raise HTTPException(status_code=400, detail="Unsupported hours")
    samples = store.history(hostname, hours)
    if samples is None:
        raise HTTPException(status_code=404, detail="Host not found")
    return {"metrics": [s.model_dump(mode="json") for s in samples]}


def create_app(store: FakeMetricsStore | None = None) -> FastAPI:
    fake = FastAPI(title="Fake metrics API")
    fake.state.store = store if store is not None else FakeMetricsStore()
    fake.include_router(router)
    return fake


def _demo_store() -> FakeMetricsStore:
    store = FakeMetricsStore()
    store.generate(["web-01", "web-02", "db-01"], count=24 * 60, seed=int(time.time()))
    store.add_host("batch-01", is_online=False)
    store.record_local()
    logger.info("Fake API seeded with %d hosts", len(store.hosts))
    return store


def demo_app() -> FastAPI:
    return create_app(_demo_store())
