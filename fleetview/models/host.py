from __future__ import annotations

from pydantic import BaseModel, Field

from fleetview.models.metrics import MetricSample


class Host(BaseModel):
    """A monitored machine as listed in the fleet snapshot."""

    model_config = {"frozen": True}

    hostname: str
    is_online: bool = False
    latest_cpu_percent: float | None = None
    latest_memory_percent: float | None = None
    latest_uptime: int | None = None


class DashboardSnapshot(BaseModel):
    """Fleet summary returned by ``GET /dashboard/``.

    Replaced wholesale on every successful poll; never edited in place.
    """

    model_config = {"frozen": True}

    total_hosts: int = 0
    online_hosts: int = 0
    total_metrics: int = 0
    latest_metrics: list[MetricSample] = Field(default_factory=list)
    hosts: list[Host] = Field(default_factory=list)

    def average_cpu_percent(self) -> float | None:
        if not self.latest_metrics:
            return None
        return sum(m.cpu_percent for m in self.latest_metrics) / len(self.latest_metrics)

    def average_memory_percent(self) -> float | None:
        if not self.latest_metrics:
            return None
        return sum(m.memory_percent for m in self.latest_metrics) / len(self.latest_metrics)

    def find_host(self, hostname: str) -> Host | None:
        for host in self.hosts:
            if host.hostname == hostname:
                return host
        return None
