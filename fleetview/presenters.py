"""Turn poller states into display-ready dicts.

Nothing here draws anything; a front end (the CLI, a web page) renders the
dicts as it sees fit. Every builder accepts an empty or failed state.
"""

from __future__ import annotations

from fleetview.engine.series import label_interval
from fleetview.formatting import (
    clamp_percent,
    format_bytes,
    format_count,
    format_hours,
    format_load_average,
    format_percent,
    format_timestamp,
    format_uptime,
    format_uptime_short,
    usage_level,
)
from fleetview.models import DashboardSnapshot, Host, LatestMetrics, PollState, TimeRange


def _panel(state: PollState) -> dict:
    # loading only while nothing has ever arrived
    return {
        "loading": state.is_loading and state.data is None,
        "error": state.error,
    }


def dashboard_panel(state: PollState) -> dict:
    panel = _panel(state)
    snapshot: DashboardSnapshot | None = state.data
    if snapshot is None:
        panel["summary"] = None
        return panel

    avg_cpu = snapshot.average_cpu_percent()
    avg_mem = snapshot.average_memory_percent()
    panel["summary"] = {
        "header": f"{snapshot.online_hosts}/{snapshot.total_hosts} Hosts Online",
        "total_hosts": snapshot.total_hosts,
        "online_hosts": snapshot.online_hosts,
        "total_metrics": format_count(snapshot.total_metrics),
        "avg_cpu": format_percent(avg_cpu) if avg_cpu is not None else "0%",
        "avg_memory": format_percent(avg_mem) if avg_mem is not None else "0%",
    }
    return panel


def host_rows(hosts: list[Host], selected: str | None) -> list[dict]:
    return [
        {
            "hostname": host.hostname,
            "selected": host.hostname == selected,
            "status": "Online" if host.is_online else "Offline",
            "usage": (
                f"CPU: {format_percent(host.latest_cpu_percent)} | "
                f"Mem: {format_percent(host.latest_memory_percent)}"
            ),
            "uptime": format_uptime_short(host.latest_uptime),
        }
        for host in hosts
    ]


def _resource(percent: float, used: int | None = None, total: int | None = None) -> dict:
    resource = {
        "percent": format_percent(percent),
        # progress bars only accept 0..100; the raw values stay untouched
        "bar": clamp_percent(percent),
        "level": usage_level(percent),
    }
    if used is not None and total is not None:
        resource["detail"] = f"{format_bytes(used)} / {format_bytes(total)}"
    return resource


def host_overview_panel(hostname: str | None, state: PollState) -> dict:
    panel = _panel(state)
    panel["hostname"] = hostname
    latest: LatestMetrics | None = state.data
    if hostname is None or latest is None:
        panel["metrics"] = None
        return panel

    panel["metrics"] = {
        "cores": f"{latest.cpu_cores} cores",
        "uptime": format_uptime(latest.uptime),
        "cpu": {
            **_resource(latest.cpu_percent),
            "detail": f"Load Average: {format_load_average(latest.load_average)}",
        },
        "memory": _resource(latest.memory_percent, latest.memory_used, latest.memory_total),
        "disk": _resource(latest.disk_percent, latest.disk_used, latest.disk_total),
        "network": {
            "sent": format_bytes(latest.network_bytes_sent),
            "received": format_bytes(latest.network_bytes_recv),
            "packets": (
                f"{format_count(latest.network_packets_sent)} sent, "
                f"{format_count(latest.network_packets_recv)} received"
            ),
        },
        "updated": format_timestamp(latest.timestamp),
        "warnings": latest.inconsistencies(),
    }
    return panel


def history_panel(hostname: str | None, time_range: TimeRange, state: PollState) -> dict:
    panel = _panel(state)
    panel["hostname"] = hostname
    panel["time_range"] = time_range.label
    points = state.data or []
    panel["points"] = [p.model_dump() for p in points]
    panel["tick_interval"] = label_interval(len(points))
    panel["caption"] = f"Showing {len(points)} data points over the last {format_hours(int(time_range))}"
    return panel
