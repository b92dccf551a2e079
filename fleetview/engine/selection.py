from __future__ import annotations

import logging
from typing import Callable

from fleetview.models.selection import Selection
from fleetview.models.time_range import DEFAULT_TIME_RANGE, TimeRange

logger = logging.getLogger(__name__)

Listener = Callable[[Selection], None]


class SelectionStore:
    """Owns the focused host and the requested history window.

    Changes are published synchronously: by the time ``select()`` or
    ``set_time_range()`` returns, every subscriber has seen the new value.
    """

    def __init__(self, time_range: TimeRange | int = DEFAULT_TIME_RANGE) -> None:
        self._hostname: str | None = None
        self._time_range = TimeRange.parse(time_range)
        self._listeners: list[Listener] = []

    # ── state ───────────────────────────────────────────

    @property
    def hostname(self) -> str | None:
        return self._hostname

    @property
    def time_range(self) -> TimeRange:
        return self._time_range

    @property
    def selection(self) -> Selection:
        return Selection(hostname=self._hostname, time_range=self._time_range)

    # ── operations ─────────────────────────────────────

    def select(self, hostname: str) -> str | None:
        """Toggle-select: picking the current host clears the selection."""
        self._hostname = None if hostname == self._hostname else hostname
        logger.debug("Selection changed to %s", self._hostname)
        self._notify()
        return self._hostname

    def clear(self) -> None:
        if self._hostname is None:
            return
        self._hostname = None
        self._notify()

    def set_time_range(self, hours: TimeRange | int) -> TimeRange:
        self._time_range = TimeRange.parse(hours)
        logger.debug("Time range set to %dh", self._time_range)
        self._notify()
        return self._time_range

    # ── subscribe ──────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    # ── internals ──────────────────────────────────────

    def _notify(self) -> None:
        selection = self.selection
        for listener in list(self._listeners):
            try:
                listener(selection)
            except Exception:
                logger.exception("Selection listener %s failed", listener)
