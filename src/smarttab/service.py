"""Long-lived owner of the engine: one queue, one worker, two timers."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from smarttab.commands import CommandRouter
from smarttab.config import EngineConfig
from smarttab.engine import Engine, build_engine
from smarttab.events import (
    AlarmFired,
    AutoSortDue,
    HostEvent,
    IdleStateChanged,
    PeriodicFlush,
    TabActivated,
    TabCreated,
    TabRemoved,
    TabUpdated,
    WindowFocusChanged,
)
from smarttab.exceptions import SmartTabError
from smarttab.host import BrowserHost
from smarttab.storage import BaseStore, MemoryStore, SQLiteStore

logger = logging.getLogger(__name__)


class _Command:
    __slots__ = ("request", "future")

    def __init__(self, request: dict, future: asyncio.Future) -> None:
        self.request = request
        self.future = future


class SmartTabService:
    """Serialize every host event and UI command through a single worker task.

    Handlers never interleave: the worker awaits one item to completion before
    taking the next, so the store's read-modify-write sequences cannot lose
    updates to each other. Nothing else mutates engine state.

    Usage::

        service = SmartTabService(build_engine(store, host))
        await service.start()
        service.post_event(TabActivated(tab_id=3, window_id=1))
        stats = await service.request({"action": "getVisitStats", "period": "week"})
        await service.stop()
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._router = CommandRouter(engine)
        self._queue: asyncio.Queue = asyncio.Queue()
        self._worker: asyncio.Task | None = None
        self._ticker: asyncio.Task | None = None
        self._event_handlers: dict[type, Callable[[HostEvent], Awaitable[None]]] = {
            TabCreated: self._on_tab_created,
            TabUpdated: self._on_tab_updated,
            TabActivated: self._on_tab_activated,
            TabRemoved: self._on_tab_removed,
            WindowFocusChanged: self._on_window_focus_changed,
            IdleStateChanged: self._on_idle_state_changed,
            AlarmFired: self._on_alarm,
            PeriodicFlush: self._on_periodic_flush,
            AutoSortDue: self._on_auto_sort_due,
        }

    @classmethod
    def create(cls, host: BrowserHost, config: EngineConfig | None = None) -> SmartTabService:
        """Build a service on the store named by ``config.database_path``."""
        config = config or EngineConfig.from_env()
        store: BaseStore
        if config.database_path is not None:
            store = SQLiteStore(config.database_path)
        else:
            logger.info("No database path configured; using an in-memory store")
            store = MemoryStore()
        return cls(build_engine(store, host, config))

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        if self.running:
            return
        try:
            await self.engine.blocking.sync_rules()
            await self.engine.focus.restore()
        except SmartTabError as e:
            logger.warning("Start-up reconciliation failed: %s", e)
        self._worker = asyncio.create_task(self._run(), name="smarttab-worker")
        self._ticker = asyncio.create_task(self._tick(), name="smarttab-flush-timer")
        logger.info(
            "Service started (flush every %ss)", self.engine.config.flush_interval_seconds
        )

    async def stop(self) -> None:
        """Drain pending work, commit the open interval and stop the tasks."""
        if not self.running:
            return
        self.engine.organizer.cancel_auto_sort()
        if self._ticker is not None:
            self._ticker.cancel()
        await self._queue.join()
        slot = self.engine.tracker.slot
        if slot is not None:
            await self.engine.tracker.flush(slot.tab.id)
        if self._worker is not None:
            self._worker.cancel()
        await asyncio.gather(
            *(t for t in (self._worker, self._ticker) if t is not None),
            return_exceptions=True,
        )
        self._worker = None
        self._ticker = None
        self._fail_pending()
        logger.info("Service stopped")

    def post_event(self, event: HostEvent) -> None:
        """Queue a host event; returns immediately."""
        self._queue.put_nowait(event)

    async def request(self, request: dict) -> dict:
        """Queue a UI command and wait for its response."""
        if not self.running:
            return {"success": False, "error": "Service is not running"}
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait(_Command(request, future))
        return await future

    async def drain(self) -> None:
        """Wait until everything queued so far has been handled."""
        await self._queue.join()

    # ---- Worker ----

    def _fail_pending(self) -> None:
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if isinstance(item, _Command) and not item.future.done():
                item.future.set_result({"success": False, "error": "Service is not running"})
            self._queue.task_done()

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if isinstance(item, _Command):
                    response = await self._router.dispatch(item.request)
                    if not item.future.done():
                        item.future.set_result(response)
                else:
                    await self._handle_event(item)
            except Exception:
                logger.exception("Unhandled error while processing %r", item)
                if isinstance(item, _Command) and not item.future.done():
                    item.future.set_result({"success": False, "error": "Internal error"})
            finally:
                self._queue.task_done()

    async def _tick(self) -> None:
        interval = self.engine.config.flush_interval_seconds
        while True:
            await asyncio.sleep(interval)
            self.post_event(PeriodicFlush())

    async def _handle_event(self, event: HostEvent) -> None:
        handler = self._event_handlers.get(type(event))
        if handler is None:
            logger.warning("Ignoring unknown event %r", event)
            return
        await handler(event)

    # ---- Event handlers ----

    async def _on_tab_created(self, event: TabCreated) -> None:
        await self._maybe_schedule_auto_sort()

    async def _on_tab_updated(self, event: TabUpdated) -> None:
        await self.engine.tracker.on_tab_updated(event.tab)
        if event.tab.status == "complete":
            await self._maybe_schedule_auto_sort()

    async def _on_tab_activated(self, event: TabActivated) -> None:
        await self.engine.tracker.on_tab_activated(event.tab_id, event.window_id)

    async def _on_tab_removed(self, event: TabRemoved) -> None:
        await self.engine.tracker.on_tab_removed(event.tab_id)

    async def _on_window_focus_changed(self, event: WindowFocusChanged) -> None:
        await self.engine.tracker.on_window_focus_changed(event.window_id)

    async def _on_idle_state_changed(self, event: IdleStateChanged) -> None:
        await self.engine.tracker.on_idle_state_changed(event.state)

    async def _on_alarm(self, event: AlarmFired) -> None:
        await self.engine.focus.on_alarm(event.name)

    async def _on_periodic_flush(self, event: PeriodicFlush) -> None:
        await self.engine.tracker.periodic_flush()

    async def _on_auto_sort_due(self, event: AutoSortDue) -> None:
        if await self.engine.organizer.auto_sort_enabled():
            await self.engine.organizer.sort_tabs()

    async def _maybe_schedule_auto_sort(self) -> None:
        if await self.engine.organizer.auto_sort_enabled():
            self.engine.organizer.schedule_auto_sort(self._post_auto_sort)

    async def _post_auto_sort(self) -> None:
        self.post_event(AutoSortDue())
