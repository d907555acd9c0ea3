"""Foreground-tab tracking driven by host browser events."""

from __future__ import annotations

import logging
from typing import Callable

from smarttab.config import EngineConfig
from smarttab.exceptions import HostError, StorageError
from smarttab.host import WINDOW_ID_NONE, BrowserHost, Tab
from smarttab.timeutil import now_ms
from smarttab.tracking.ledger import TimeLedger
from smarttab.tracking.models import ActiveTabSlot
from smarttab.tracking.parser import is_trackable_url

logger = logging.getLogger(__name__)

IDLE_STATES = {"idle", "locked"}


class TabActivityTracker:
    """Keep at most one foreground interval open and hand finished ones to the ledger.

    Every path that closes an interval reads and resets ``slot.start_time``
    before its first ``await``, so two triggers racing on the same interval
    can never both account it.
    """

    def __init__(
        self,
        host: BrowserHost,
        ledger: TimeLedger,
        config: EngineConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._host = host
        self._ledger = ledger
        self._config = config or EngineConfig()
        self._clock = clock
        self.slot: ActiveTabSlot | None = None
        self._window_focused = True
        self._system_idle = False

    @property
    def paused(self) -> bool:
        return not self._window_focused or self._system_idle

    # ---- Host events ----

    async def on_tab_updated(self, tab: Tab) -> None:
        """Navigation finished in ``tab``."""
        if tab.status != "complete":
            return
        now = self._clock()
        if not is_trackable_url(tab.url):
            slot = self.slot
            if tab.active and slot is not None and slot.tab.id == tab.id:
                interval = self._take_interval(slot, now)
                self.slot = None
                await self._commit(interval, now)
            return
        if tab.active:
            interval = self._take_interval(self.slot, now)
            self.slot = ActiveTabSlot(tab=tab, start_time=None if self.paused else now)
            await self._commit(interval, now)
        try:
            await self._ledger.record_visit(tab.url, tab.title, now)
        except StorageError as e:
            logger.warning("Could not record visit to %s: %s", tab.url, e)

    async def on_tab_activated(self, tab_id: int, window_id: int) -> None:
        """Focus moved to another tab without a navigation."""
        now = self._clock()
        interval = self._take_interval(self.slot, now)
        tab = await self._safe_get_tab(tab_id)
        if tab is not None and is_trackable_url(tab.url):
            self.slot = ActiveTabSlot(tab=tab, start_time=None if self.paused else now)
        else:
            self.slot = None
        await self._commit(interval, now)

    async def on_tab_removed(self, tab_id: int) -> None:
        slot = self.slot
        if slot is None or slot.tab.id != tab_id:
            return
        now = self._clock()
        interval = self._take_interval(slot, now)
        self.slot = None
        await self._commit(interval, now)

    async def on_window_focus_changed(self, window_id: int) -> None:
        if window_id == WINDOW_ID_NONE:
            self._window_focused = False
            await self._pause()
        else:
            self._window_focused = True
            await self._resume()

    async def on_idle_state_changed(self, state: str) -> None:
        if state in IDLE_STATES:
            self._system_idle = True
            await self._pause()
        else:
            self._system_idle = False
            await self._resume()

    # ---- Flushing ----

    async def flush(self, tab_id: int) -> int:
        """Close the interval of ``tab_id`` if it owns the slot.

        Returns the milliseconds committed; 0 when nothing qualified.
        """
        slot = self.slot
        if slot is None or slot.tab.id != tab_id:
            return 0
        now = self._clock()
        interval = self._take_interval(slot, now)
        return await self._commit(interval, now)

    async def periodic_flush(self) -> int:
        """Commit the running interval and restart it at now, keeping the slot."""
        slot = self.slot
        if slot is None or slot.start_time is None:
            return 0
        now = self._clock()
        interval = self._take_interval(slot, now, restart=True)
        return await self._commit(interval, now)

    def _take_interval(
        self,
        slot: ActiveTabSlot | None,
        now: int,
        restart: bool = False,
    ) -> tuple[str, int] | None:
        # Must not await: start_time is read and reset in one step.
        if slot is None or slot.start_time is None:
            return None
        elapsed = now - slot.start_time
        if elapsed < self._config.min_flush_ms:
            if not restart:
                slot.start_time = None
            return None
        slot.start_time = now if restart else None
        return slot.tab.url, elapsed

    async def _commit(self, interval: tuple[str, int] | None, now: int) -> int:
        if interval is None:
            return 0
        url, elapsed = interval
        try:
            await self._ledger.record_interval(url, elapsed, now)
        except StorageError as e:
            logger.warning("Dropped %dms for %s: %s", elapsed, url, e)
            return 0
        return elapsed

    # ---- Pause / resume ----

    async def _pause(self) -> None:
        now = self._clock()
        interval = self._take_interval(self.slot, now)
        await self._commit(interval, now)

    async def _resume(self) -> None:
        if self.paused:
            return
        now = self._clock()
        interval = self._take_interval(self.slot, now)
        tab = await self._safe_active_tab()
        if tab is not None and is_trackable_url(tab.url):
            self.slot = ActiveTabSlot(tab=tab, start_time=now)
        else:
            self.slot = None
        await self._commit(interval, now)

    async def _safe_get_tab(self, tab_id: int) -> Tab | None:
        try:
            return await self._host.get_tab(tab_id)
        except HostError as e:
            logger.warning("Could not read tab %s: %s", tab_id, e)
            return None

    async def _safe_active_tab(self) -> Tab | None:
        try:
            return await self._host.get_active_tab()
        except HostError as e:
            logger.warning("Could not resolve the active tab: %s", e)
            return None
