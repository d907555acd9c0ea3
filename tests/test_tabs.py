"""Tests for tab sorting, grouping and auto-sort."""

import asyncio

from smarttab.config import EngineConfig
from smarttab.engine import build_engine


def test_sort_orders_by_domain_after_pinned(engine, host):
    host.add_tab(1, "https://pinned.com/", pinned=True)
    host.add_tab(2, "https://zeta.com/b")
    host.add_tab(3, "chrome://extensions/")
    host.add_tab(4, "https://alpha.com/")
    host.add_tab(5, "https://zeta.com/a")

    result = asyncio.run(engine.organizer.sort_tabs())

    assert result == {"sorted": True, "count": 3}
    assert host.moves == [(4, 1), (5, 2), (2, 3)]


def test_sort_is_per_window(engine, host):
    host.add_tab(1, "https://b.com/", window_id=1)
    host.add_tab(2, "https://a.com/", window_id=1)
    host.add_tab(3, "https://d.com/", window_id=2)
    host.add_tab(4, "https://c.com/", window_id=2)

    asyncio.run(engine.organizer.sort_tabs())

    assert host.moves == [(2, 0), (1, 1), (4, 0), (3, 1)]


def test_sort_with_nothing_to_move(engine, host):
    host.add_tab(1, "chrome://newtab/")

    assert asyncio.run(engine.organizer.sort_tabs()) == {
        "sorted": False,
        "reason": "No tabs to sort",
    }


def test_group_only_domains_with_several_tabs(engine, host):
    host.add_tab(1, "https://a.com/1")
    host.add_tab(2, "https://b.com/")
    host.add_tab(3, "https://www.a.com/2")

    result = asyncio.run(engine.organizer.group_tabs())

    assert result == {"grouped": True, "groups": 1}
    assert host.groups == [([1, 3], "a.com")]


def test_group_nothing(engine, host):
    host.add_tab(1, "https://a.com/")

    assert asyncio.run(engine.organizer.group_tabs()) == {
        "grouped": False,
        "reason": "No domains with multiple tabs",
    }


def test_get_tabs_on_host_failure(engine, host):
    host.add_tab(1, "https://a.com/")
    host.fail = True

    assert asyncio.run(engine.organizer.get_tabs()) == []


def test_auto_sort_defaults_on_and_toggles(engine):
    async def scenario():
        initial = await engine.organizer.auto_sort_enabled()
        await engine.organizer.set_auto_sort(False)
        return initial, await engine.organizer.auto_sort_enabled()

    assert asyncio.run(scenario()) == (True, False)


def test_auto_sort_debounces(store, host):
    engine = build_engine(store, host, EngineConfig(auto_sort_delay_seconds=0.05))
    fired = []

    async def trigger():
        fired.append(True)

    async def scenario():
        for _ in range(3):
            engine.organizer.schedule_auto_sort(trigger)
            await asyncio.sleep(0.01)
        assert engine.organizer.auto_sort_pending
        await asyncio.sleep(0.1)
        return engine.organizer.auto_sort_pending

    pending_after = asyncio.run(scenario())

    assert fired == [True]
    assert pending_after is False


def test_disabling_cancels_pending_sort(store, host):
    engine = build_engine(store, host, EngineConfig(auto_sort_delay_seconds=0.05))
    fired = []

    async def trigger():
        fired.append(True)

    async def scenario():
        engine.organizer.schedule_auto_sort(trigger)
        await engine.organizer.set_auto_sort(False)
        await asyncio.sleep(0.1)

    asyncio.run(scenario())

    assert fired == []
