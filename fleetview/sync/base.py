from __future__ import annotations

import asyncio
import logging
from collections.abc import Hashable
from datetime import datetime, timezone
from typing import Awaitable, Callable, Generic, TypeVar

from fleetview.api.client import FetchFailure
from fleetview.models.state import PollState

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetch = Callable[[], Awaitable[T]]
StateListener = Callable[[PollState], None]


class Poller(Generic[T]):
    """Repeatedly runs a fetch coroutine and publishes only fresh results.

    Every ``start()`` and ``stop()`` advances a generation counter. A running
    loop remembers the generation it was started with; when its fetch
    resolves after that generation has been superseded the result is dropped,
    whether or not the underlying request honoured cancellation.

    State is the ``(data, error, is_loading)`` triple exposed as
    :class:`PollState`. A failing fetch sets ``error`` and keeps the last
    good ``data``; ``is_loading`` is only raised until the first result of a
    parameter set arrives.
    """

    name: str = "poller"
    interval: float = 5.0  # seconds between fetches

    def __init__(self, interval: float | None = None, name: str | None = None) -> None:
        if interval is not None:
            self.interval = interval
        if name is not None:
            self.name = name
        self._generation = 0
        self._key: Hashable | None = None
        self._running = False
        self._task: asyncio.Task | None = None
        self._retired: set[asyncio.Task] = set()
        self._state: PollState = PollState()
        self._listeners: list[StateListener] = []

    # ── lifecycle ────────────────────────────────────────

    def start(self, fetch: Fetch[T], interval: float | None = None, *, key: Hashable | None = None) -> int:
        """Begin polling ``fetch`` now and every ``interval`` seconds.

        Restarting with an equal, non-None ``key`` while running is a no-op;
        a keyless start always supersedes. Returns the generation the loop
        runs under.
        """
        if self._running and key is not None and key == self._key:
            return self._generation
        if interval is not None:
            self.interval = interval
        self._supersede()
        self._key = key
        self._running = True
        generation = self._generation
        self._set_state(PollState(is_loading=True, generation=generation))
        self._task = asyncio.create_task(self._loop(generation, fetch, self.interval))
        logger.info(
            "Poller [%s] started (gen=%d, key=%r, interval=%.1fs)",
            self.name, generation, key, self.interval,
        )
        return generation

    def stop(self) -> None:
        """Cancel the timer; results still in flight will be discarded."""
        if not self._running:
            return
        self._supersede()
        self._key = None
        if self._state.is_loading:
            self._set_state(self._state.model_copy(update={"is_loading": False, "generation": self._generation}))
        logger.info("Poller [%s] stopped", self.name)

    async def close(self) -> None:
        """Stop and wait for cancelled loops to unwind."""
        self.stop()
        if self._retired:
            await asyncio.gather(*self._retired, return_exceptions=True)

    # ── state ───────────────────────────────────────────

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def data(self) -> T | None:
        return self._state.data

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def key(self) -> Hashable | None:
        return self._key

    @property
    def running(self) -> bool:
        return self._running

    # ── subscribe ──────────────────────────────────────

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        self._listeners.remove(listener)

    # ── internals ───────────────────────────────────────

    def _supersede(self) -> None:
        self._generation += 1
        self._running = False
        if self._task is not None:
            task = self._task
            self._task = None
            if not task.done():
                task.cancel()
                self._retired.add(task)
                task.add_done_callback(self._retired.discard)

    async def _loop(self, generation: int, fetch: Fetch[T], interval: float) -> None:
        while True:
            try:
                result = await fetch()
            except asyncio.CancelledError:
                raise
            except FetchFailure as exc:
                self._apply_failure(generation, str(exc))
            except Exception as exc:
                logger.exception("Poller [%s] error during fetch", self.name)
                self._apply_failure(generation, f"Poller [{self.name}] fetch failed: {exc!r}")
            else:
                self._apply_success(generation, result)
            # the fetch may have outlived a cancel it ignored
            if generation != self._generation:
                return
            await asyncio.sleep(interval)

    def _apply_success(self, generation: int, result: T) -> bool:
        if generation != self._generation:
            logger.debug(
                "Poller [%s] discarded stale result (gen=%d, current=%d)",
                self.name, generation, self._generation,
            )
            return False
        self._set_state(
            PollState(
                data=result,
                error=None,
                is_loading=False,
                generation=generation,
                updated_at=datetime.now(timezone.utc),
            )
        )
        return True

    def _apply_failure(self, generation: int, message: str) -> bool:
        if generation != self._generation:
            logger.debug(
                "Poller [%s] discarded stale failure (gen=%d, current=%d)",
                self.name, generation, self._generation,
            )
            return False
        logger.warning("Poller [%s] %s", self.name, message)
        self._set_state(self._state.model_copy(update={"error": message, "is_loading": False}))
        return True

    def _set_state(self, state: PollState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Poller [%s] listener %s failed", self.name, listener)
