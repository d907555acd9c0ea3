"""Tab sorting, grouping and debounced auto-sort."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Awaitable, Callable

from smarttab.config import EngineConfig
from smarttab.exceptions import HostError
from smarttab.host import BrowserHost, Tab
from smarttab.storage import BaseStore, keys
from smarttab.tracking.parser import extract_domain, is_trackable_url

logger = logging.getLogger(__name__)


class TabOrganizer:
    """Reorder and group the host's tabs by domain."""

    def __init__(
        self,
        store: BaseStore,
        host: BrowserHost,
        config: EngineConfig | None = None,
    ) -> None:
        self._store = store
        self._host = host
        self._config = config or EngineConfig()
        self._auto_sort_handle: asyncio.TimerHandle | None = None
        self._auto_sort_task: asyncio.Task | None = None

    async def get_tabs(self) -> list[Tab]:
        try:
            return await self._host.query_tabs()
        except HostError as e:
            logger.warning("Could not list tabs: %s", e)
            return []

    async def sort_tabs(self) -> dict:
        """Order each window's unpinned web tabs by ``(domain, url)``."""
        tabs = await self.get_tabs()
        by_window = _by_window(tabs)
        moved = 0
        try:
            for window_tabs in by_window.values():
                pinned = [t for t in window_tabs if t.pinned]
                movable = [t for t in window_tabs if not t.pinned and is_trackable_url(t.url)]
                ordered = sorted(movable, key=lambda t: (extract_domain(t.url), t.url))
                for offset, tab in enumerate(ordered):
                    await self._host.move_tab(tab.id, len(pinned) + offset)
                    moved += 1
        except HostError as e:
            logger.warning("Sorting tabs failed: %s", e)
            return {"sorted": False, "reason": f"Sorting failed: {e}"}
        if not moved:
            return {"sorted": False, "reason": "No tabs to sort"}
        logger.info("Sorted %d tabs", moved)
        return {"sorted": True, "count": moved}

    async def group_tabs(self) -> dict:
        """Create one group per domain with two or more tabs in a window."""
        tabs = await self.get_tabs()
        groups = 0
        try:
            for window_tabs in _by_window(tabs).values():
                by_domain: dict[str, list[int]] = defaultdict(list)
                for tab in window_tabs:
                    if is_trackable_url(tab.url):
                        by_domain[extract_domain(tab.url)].append(tab.id)
                for domain, tab_ids in by_domain.items():
                    if len(tab_ids) < 2:
                        continue
                    await self._host.group_tabs(tab_ids, title=domain)
                    groups += 1
        except HostError as e:
            logger.warning("Grouping tabs failed: %s", e)
            return {"grouped": False, "reason": f"Grouping failed: {e}"}
        if not groups:
            return {"grouped": False, "reason": "No domains with multiple tabs"}
        logger.info("Created %d tab groups", groups)
        return {"grouped": True, "groups": groups}

    # ---- Auto-sort ----

    async def auto_sort_enabled(self) -> bool:
        settings = await self._store.get(keys.SETTINGS) or {}
        return settings.get("autoSortEnabled") is not False

    async def set_auto_sort(self, enabled: bool) -> bool:
        enabled = bool(enabled)

        def apply(settings: dict) -> dict:
            settings["autoSortEnabled"] = enabled
            return settings

        await self._store.update(keys.SETTINGS, apply, default={})
        if not enabled:
            self.cancel_auto_sort()
        return enabled

    def schedule_auto_sort(self, trigger: Callable[[], Awaitable[None]]) -> None:
        """(Re)start the debounce timer; ``trigger`` runs when it expires."""
        self.cancel_auto_sort()
        loop = asyncio.get_running_loop()

        def fire() -> None:
            self._auto_sort_handle = None
            self._auto_sort_task = loop.create_task(trigger())

        self._auto_sort_handle = loop.call_later(self._config.auto_sort_delay_seconds, fire)

    def cancel_auto_sort(self) -> None:
        if self._auto_sort_handle is not None:
            self._auto_sort_handle.cancel()
            self._auto_sort_handle = None

    @property
    def auto_sort_pending(self) -> bool:
        return self._auto_sort_handle is not None


def _by_window(tabs: list[Tab]) -> dict[int, list[Tab]]:
    windows: dict[int, list[Tab]] = defaultdict(list)
    for tab in sorted(tabs, key=lambda t: (t.window_id, t.index)):
        windows[tab.window_id].append(tab)
    return windows
