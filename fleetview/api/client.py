from __future__ import annotations

import logging
from urllib.parse import quote
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from fleetview.config import settings
from fleetview.models import DashboardSnapshot, HistoryResponse, LatestMetrics, MetricSample, TimeRange

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class FetchFailure(Exception):
    """A poll that did not produce a usable payload.

    Covers transport errors, non-2xx responses and malformed bodies. The
    message names the endpoint and, where there is one, the host.
    """

    def __init__(self, summary: str, endpoint: str, reason: str, hostname: str | None = None) -> None:
        self.summary = summary
        self.endpoint = endpoint
        self.reason = reason
        self.hostname = hostname
        super().__init__(f"{summary} (GET {endpoint}): {reason}")


class MonitorApiClient:
    """Read-only client for the metrics backend (``/dashboard``, ``/latest``, ``/hosts``)."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.request_timeout,
        )

    async def __aenter__(self) -> MonitorApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # ── endpoints ───────────────────────────────────────

    async def get_dashboard(self) -> DashboardSnapshot:
        snapshot = await self._get(
            "/dashboard/",
            DashboardSnapshot,
            summary="Failed to fetch dashboard data",
        )
        for sample in snapshot.latest_metrics:
            _flag_inconsistent(sample)
        return snapshot

    async def get_latest(self, hostname: str) -> LatestMetrics:
        latest = await self._get(
            "/latest/",
            LatestMetrics,
            params={"hostname": hostname},
            summary=f"Failed to fetch metrics for {hostname}",
            hostname=hostname,
        )
        _flag_inconsistent(latest, hostname)
        return latest

    async def get_history(self, hostname: str, hours: TimeRange | int) -> list[MetricSample]:
        """Samples for ``hostname`` over the last ``hours``, newest first."""
        hours = TimeRange.parse(hours)
        history = await self._get(
            f"/hosts/{quote(hostname, safe='')}/history/",
            HistoryResponse,
            params={"hours": int(hours)},
            summary=f"Failed to fetch metrics history for {hostname}",
            hostname=hostname,
        )
        return history.metrics

    # ── internals ───────────────────────────────────────

    async def _get(
        self,
        path: str,
        model: type[M],
        *,
        summary: str,
        params: dict[str, Any] | None = None,
        hostname: str | None = None,
    ) -> M:
        endpoint = _describe(path, params)
        try:
            response = await self._http.get(f"{self.base_url}{path}", params=params)
        except httpx.HTTPError as exc:
            raise FetchFailure(summary, endpoint, _transport_reason(exc), hostname) from exc

        if not response.is_success:
            raise FetchFailure(
                summary, endpoint, f"HTTP {response.status_code} {response.reason_phrase}".rstrip(), hostname
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchFailure(summary, endpoint, "response is not valid JSON", hostname) from exc

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise FetchFailure(
                summary, endpoint, f"malformed payload ({exc.error_count()} validation errors)", hostname
            ) from exc


def _describe(path: str, params: dict[str, Any] | None) -> str:
    if not params:
        return path
    query = "&".join(f"{k}={v}" for k, v in params.items())
    return f"{path}?{query}"


def _transport_reason(exc: httpx.HTTPError) -> str:
    detail = str(exc)
    name = type(exc).__name__
    return f"{name}: {detail}" if detail else name


def _flag_inconsistent(sample: MetricSample, hostname: str | None = None) -> None:
    problems = sample.inconsistencies()
    if problems:
        logger.warning(
            "Inconsistent sample for %s at %s: %s",
            hostname or sample.hostname or "<unknown>",
            sample.timestamp.isoformat(),
            ", ".join(problems),
        )
