"""Merge the catalog and banner loads into one render state.

The coordinator lives on a single asyncio loop. Each loader runs as its own
task and pushes its result into the state the moment it resolves, so the two
may finish in any order. Results that arrive after ``destroy()`` or from a
superseded banner load are dropped and their handles released.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from typing import Any, Callable, Coroutine, List, Optional, Set

from ..core.events import STATE_CHANGED, EventBus
from ..core.telemetry import LoadLog, LoadOutcome, LoadRecord
from .banner import BannerHandle, BannerLoader
from .catalog import CatalogFetcher
from .errors import BannerError, CatalogUnavailable
from .models import LoadPhase, ViewState

logger = logging.getLogger(__name__)

StateListener = Callable[[ViewState], None]


class ViewStateCoordinator:
    """Own the home screen ``ViewState`` and drive both loaders.

    Must be created while an asyncio loop is running; the catalog load is
    scheduled right away. The banner load starts on ``mount()``.
    """

    def __init__(
        self,
        catalog: CatalogFetcher,
        banners: BannerLoader,
        *,
        catalog_endpoint: str,
        banner_path: str,
        event_bus: Optional[EventBus] = None,
        load_log: Optional[LoadLog] = None,
    ) -> None:
        self._loop = asyncio.get_running_loop()
        self._catalog = catalog
        self._banners = banners
        self._catalog_endpoint = catalog_endpoint
        self._banner_path = banner_path
        self._event_bus = event_bus
        self._load_log = load_log
        self._state = ViewState()
        self._listeners: List[StateListener] = []
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._banner_generation = 0
        self._destroyed = False
        self.catalog_phase = LoadPhase.LOADING
        self.banner_phase = LoadPhase.PENDING
        self._spawn(self._load_catalog(), "catalog", self._catalog_crashed)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    def current_state(self) -> ViewState:
        return self._state

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def subscribe(self, listener: StateListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def mount(self) -> None:
        """Start a banner load, superseding any load still in flight."""
        if self._destroyed:
            logger.warning("mount() called on a destroyed coordinator; ignoring")
            return
        self._banner_generation += 1
        generation = self._banner_generation
        self.banner_phase = LoadPhase.LOADING
        self._spawn(
            self._load_banner(generation),
            "banner",
            lambda: self._banner_crashed(generation),
        )

    def destroy(self) -> None:
        """Stop applying results and release the current banner.

        In-flight requests are not cancelled; whatever they return later is
        discarded.
        """
        if self._destroyed:
            return
        self._destroyed = True
        self._listeners.clear()
        banner = self._state.banner
        self._state = dataclasses.replace(self._state, banner=None)
        if banner is not None:
            banner.release()
        logger.debug("Coordinator destroyed with %d load(s) in flight", len(self._tasks))

    async def wait_settled(self) -> None:
        """Wait until every load started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------
    async def _load_catalog(self) -> None:
        started = time.perf_counter()
        try:
            cards = await self._catalog.fetch_catalog(self._catalog_endpoint)
        except CatalogUnavailable as exc:
            if self._destroyed:
                self._record("catalog", LoadOutcome.DISCARDED, started, reason=exc.reason)
                return
            logger.warning("%s; showing no cards", exc)
            self.catalog_phase = LoadPhase.FAILED
            self._record("catalog", LoadOutcome.FAILED, started, reason=exc.reason)
            return
        if self._destroyed:
            logger.debug("Discarding catalog result after destroy")
            self._record("catalog", LoadOutcome.DISCARDED, started, count=len(cards))
            return
        self.catalog_phase = LoadPhase.LOADED
        self._record("catalog", LoadOutcome.LOADED, started, count=len(cards))
        self._apply(dataclasses.replace(self._state, cards=tuple(cards)))

    async def _load_banner(self, generation: int) -> None:
        started = time.perf_counter()
        try:
            handle = await self._banners.fetch_banner(self._banner_path)
        except BannerError as exc:
            if self._is_stale(generation):
                self._record("banner", LoadOutcome.DISCARDED, started, generation, reason=exc.reason)
                return
            logger.warning("%s; rendering without banner", exc)
            self.banner_phase = LoadPhase.FAILED
            self._record("banner", LoadOutcome.FAILED, started, generation, reason=exc.reason)
            return
        if self._is_stale(generation):
            logger.debug("Discarding stale banner %r", handle)
            handle.release()
            self._record("banner", LoadOutcome.DISCARDED, started, generation)
            return
        self.banner_phase = LoadPhase.LOADED
        self._record("banner", LoadOutcome.LOADED, started, generation, count=1)
        previous = self._state.banner
        self._apply(dataclasses.replace(self._state, banner=handle))
        if previous is not None and previous is not handle:
            previous.release()

    def _catalog_crashed(self) -> None:
        if not self._destroyed:
            self.catalog_phase = LoadPhase.FAILED
        self._record("catalog", LoadOutcome.CRASHED, None)

    def _banner_crashed(self, generation: int) -> None:
        if not self._is_stale(generation):
            self.banner_phase = LoadPhase.FAILED
        self._record("banner", LoadOutcome.CRASHED, None, generation)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _is_stale(self, generation: int) -> bool:
        return self._destroyed or generation != self._banner_generation

    def _apply(self, state: ViewState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener %r failed", listener)
        if self._event_bus is not None:
            self._event_bus.emit(STATE_CHANGED, {"state": state})

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str, on_crash: Callable[[], None]) -> None:
        task = self._loop.create_task(coro, name=f"home-{name}")
        self._tasks.add(task)

        def done(finished: "asyncio.Task[None]") -> None:
            self._tasks.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                logger.error("Load task %s crashed", finished.get_name(), exc_info=exc)
                on_crash()

        task.add_done_callback(done)

    def _record(
        self,
        loader: str,
        outcome: LoadOutcome,
        started: Optional[float],
        generation: Optional[int] = None,
        *,
        count: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        if self._load_log is None:
            return
        duration = time.perf_counter() - started if started is not None else 0.0
        self._load_log.write(
            LoadRecord(loader, outcome, duration, generation=generation, count=count, reason=reason)
        )


__all__ = ["ViewStateCoordinator", "StateListener"]
