from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


class MetricSample(BaseModel):
    """One timestamped resource reading reported by a host agent."""

    model_config = {"frozen": True}

    timestamp: datetime
    hostname: str | None = None

    cpu_percent: float = 0.0
    memory_percent: float = 0.0
    disk_percent: float = 0.0

    memory_used: int = Field(default=0, ge=0)
    memory_total: int = Field(default=0, ge=0)
    disk_used: int = Field(default=0, ge=0)
    disk_total: int = Field(default=0, ge=0)

    network_bytes_sent: int = Field(default=0, ge=0)
    network_bytes_recv: int = Field(default=0, ge=0)
    network_packets_sent: int = Field(default=0, ge=0)
    network_packets_recv: int = Field(default=0, ge=0)

    load_average: tuple[float, float, float] | None = None
    cpu_cores: int | None = Field(default=None, gt=0)
    uptime: int | None = Field(default=None, ge=0)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # naive and aware instants must stay comparable
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def inconsistencies(self) -> list[str]:
        """Names of the used/total invariants this sample violates.

        Values are trusted from the source, so nothing is rejected here;
        callers decide whether to log or flag them.
        """
        problems: list[str] = []
        if self.memory_used > self.memory_total:
            problems.append("memory_used > memory_total")
        if self.disk_used > self.disk_total:
            problems.append("disk_used > disk_total")
        return problems


class LatestMetrics(MetricSample):
    """Payload of ``GET /latest/``: the newest sample plus host facts."""

    cpu_cores: int = Field(default=1, gt=0)
    uptime: int = Field(default=0, ge=0)


class HistoryResponse(BaseModel):
    """Payload of ``GET /hosts/<name>/history/`` (newest first)."""

    metrics: list[MetricSample] = Field(default_factory=list)


class ChartPoint(BaseModel):
    """Chart-ready reading; ``timestamp`` keeps the original instant."""

    model_config = {"frozen": True}

    timestamp: datetime
    label: str
    cpu_percent: float
    memory_percent: float
    disk_percent: float
