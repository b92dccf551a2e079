"""Terminal runner for the fleet dashboard.

Usage:
    python -m fleetview                          # poll the default API
    python -m fleetview --host web-01 --hours 6  # focus one host
    python -m fleetview --api-url http://monitor:8000/api --duration 60
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from fleetview.api.client import MonitorApiClient
from fleetview.config import settings
from fleetview.models import PollState, TimeRange
from fleetview.session import MonitorSession

logger = logging.getLogger("fleetview")


def render_text(view: dict) -> list[str]:
    """Flatten a session view into printable lines."""
    lines: list[str] = []
    dashboard = view["dashboard"]
    summary = dashboard["summary"]
    if dashboard["loading"]:
        lines.append("Loading dashboard...")
    if summary:
        lines.append(f"== {settings.app_name} ({summary['header']}) ==")
        lines.append(
            f"Hosts: {summary['total_hosts']} ({summary['online_hosts']} online) | "
            f"Metrics: {summary['total_metrics']} | "
            f"Avg CPU: {summary['avg_cpu']} | Avg Mem: {summary['avg_memory']}"
        )
    if dashboard["error"]:
        lines.append(f"! {dashboard['error']}")

    if not view["hosts"] and summary:
        lines.append("No hosts available")
    for row in view["hosts"]:
        marker = ">" if row["selected"] else " "
        lines.append(f"{marker} {row['hostname']:<24} {row['status']:<8} {row['usage']}  up {row['uptime']}")

    overview = view["overview"]
    if view["selected"] is None:
        lines.append("Select a host to view detailed metrics")
    else:
        if overview["loading"]:
            lines.append(f"Loading metrics for {view['selected']}...")
        metrics = overview["metrics"]
        if metrics:
            lines.append(f"-- {overview['hostname']} [{metrics['cores']}, up {metrics['uptime']}] --")
            for key in ("cpu", "memory", "disk"):
                res = metrics[key]
                lines.append(f"  {key:<7}{res['percent']:>7} ({res['level']}) {res.get('detail', '')}")
            net = metrics["network"]
            lines.append(f"  network sent {net['sent']}, received {net['received']} ({net['packets']})")
            lines.append(f"  last updated {metrics['updated']}")
        if overview["error"]:
            lines.append(f"! {overview['error']}")

    history = view["history"]
    if history is not None:
        if history["error"]:
            lines.append(f"! {history['error']}")
        elif not history["loading"]:
            lines.append(f"  history ({history['time_range']}): {history['caption']}")
    return lines


async def run(args: argparse.Namespace) -> None:
    async with MonitorApiClient(base_url=args.api_url) as client:
        session = MonitorSession(client)

        def on_update(_state: PollState) -> None:
            print("\n".join(render_text(session.view())), flush=True)

        session.dashboard.subscribe(on_update)
        session.host_detail.subscribe(on_update)
        session.history.subscribe(on_update)
        async with session:
            if args.hours:
                session.set_time_range(args.hours)
            if args.host:
                session.select(args.host)
            if args.duration:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=settings.app_name)
    parser.add_argument("--api-url", help=f"Metrics API base URL (default {settings.api_base_url})")
    parser.add_argument("--host", help="Hostname to focus")
    parser.add_argument("--hours", type=int, choices=[int(r) for r in TimeRange], help="History window")
    parser.add_argument("--duration", type=float, default=0.0, help="Seconds to run (0 = until interrupted)")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    args = parser.parse_args(argv)

    level = "DEBUG" if settings.debug else args.log_level.upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
