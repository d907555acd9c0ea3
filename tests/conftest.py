"""Shared fixtures: a scriptable browser host and a hand-driven clock."""

from __future__ import annotations

from datetime import datetime

import pytest

from smarttab.config import EngineConfig
from smarttab.engine import build_engine
from smarttab.exceptions import HostError
from smarttab.host import BrowserHost, Notification, RedirectRule, Tab
from smarttab.storage import MemoryStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = int(start.timestamp() * 1000)

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 0, *, seconds: float = 0, minutes: float = 0) -> int:
        self.now += int(ms + seconds * 1000 + minutes * 60_000)
        return self.now


class FakeBrowserHost(BrowserHost):
    """In-memory host recording every call the engine makes."""

    def __init__(self) -> None:
        self.tabs: dict[int, Tab] = {}
        self.active_tab_id: int | None = None
        self.rules: list[RedirectRule] = []
        self.rule_updates: list[tuple[list[int], list[RedirectRule]]] = []
        self.notifications: list[Notification] = []
        self.alarms: dict[str, int] = {}
        self.closed: list[int] = []
        self.moves: list[tuple[int, int]] = []
        self.groups: list[tuple[list[int], str]] = []
        self.fail = False

    def add_tab(
        self,
        tab_id: int,
        url: str,
        title: str = "",
        window_id: int = 1,
        active: bool = False,
        pinned: bool = False,
    ) -> Tab:
        index = sum(1 for t in self.tabs.values() if t.window_id == window_id)
        tab = Tab(
            id=tab_id,
            window_id=window_id,
            url=url,
            title=title,
            active=active,
            pinned=pinned,
            index=index,
        )
        self.tabs[tab_id] = tab
        if active:
            self.active_tab_id = tab_id
        return tab

    def _check(self) -> None:
        if self.fail:
            raise HostError("host unavailable")

    async def get_tab(self, tab_id: int) -> Tab | None:
        self._check()
        return self.tabs.get(tab_id)

    async def get_active_tab(self) -> Tab | None:
        self._check()
        if self.active_tab_id is None:
            return None
        return self.tabs.get(self.active_tab_id)

    async def query_tabs(self, window_id: int | None = None) -> list[Tab]:
        self._check()
        tabs = sorted(self.tabs.values(), key=lambda t: (t.window_id, t.index))
        if window_id is not None:
            tabs = [t for t in tabs if t.window_id == window_id]
        return tabs

    async def close_tabs(self, tab_ids: list[int]) -> None:
        self._check()
        for tab_id in tab_ids:
            self.tabs.pop(tab_id, None)
            self.closed.append(tab_id)

    async def move_tab(self, tab_id: int, index: int) -> None:
        self._check()
        self.tabs[tab_id].index = index
        self.moves.append((tab_id, index))

    async def group_tabs(self, tab_ids: list[int], title: str) -> int:
        self._check()
        self.groups.append((list(tab_ids), title))
        return len(self.groups)

    async def get_redirect_rules(self) -> list[RedirectRule]:
        self._check()
        return list(self.rules)

    async def update_redirect_rules(
        self,
        remove_rule_ids: list[int],
        add_rules: list[RedirectRule],
    ) -> None:
        self._check()
        self.rule_updates.append((list(remove_rule_ids), list(add_rules)))
        self.rules = [r for r in self.rules if r.id not in remove_rule_ids] + list(add_rules)

    async def notify(self, notification: Notification) -> None:
        self._check()
        self.notifications.append(notification)

    async def schedule_alarm(self, name: str, when_ms: int) -> None:
        self._check()
        self.alarms[name] = when_ms

    async def clear_alarm(self, name: str) -> None:
        self._check()
        self.alarms.pop(name, None)


@pytest.fixture
def clock():
    # A Wednesday, mid-day local time.
    return FakeClock(datetime(2026, 3, 11, 12, 0, 0))


@pytest.fixture
def host():
    return FakeBrowserHost()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def engine(store, host, config, clock):
    return build_engine(store, host, config, clock=clock)
