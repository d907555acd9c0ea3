"""Tests for focus sessions."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from smarttab.exceptions import FocusModeError, StorageError, ValidationError
from smarttab.policy import FOCUS_ALARM
from smarttab.storage import keys


def test_start_unions_preset_and_arms_alarm(engine, host, store, clock, config):
    host.add_tab(1, "https://www.youtube.com/watch?v=1")
    host.add_tab(2, "https://docs.python.org/")

    async def scenario():
        await engine.blocking.block_domain("a.com")
        return await engine.focus.start(25)

    session = asyncio.run(scenario())

    blocked = asyncio.run(store.get(keys.BLOCKED_DOMAINS))
    assert blocked == ["a.com", *config.focus_distraction_domains]
    assert session.end_time == clock() + 25 * 60_000
    assert host.alarms[FOCUS_ALARM] == session.end_time
    assert 1 in host.closed
    assert 2 not in host.closed


def test_stop_restores_original_exactly(engine, host, store):
    async def scenario():
        await engine.blocking.block_domain("youtube.com")
        await engine.blocking.block_domain("a.com")
        await engine.focus.start(10)
        return await engine.focus.stop()

    assert asyncio.run(scenario()) is True
    assert asyncio.run(store.get(keys.BLOCKED_DOMAINS)) == ["youtube.com", "a.com"]
    assert [r.domain for r in host.rules] == ["youtube.com", "a.com"]
    assert FOCUS_ALARM not in host.alarms
    assert host.notifications == []


def test_stop_when_inactive(engine):
    assert asyncio.run(engine.focus.stop()) is False


def test_alarm_ends_session_with_notification(engine, host, clock):
    async def scenario():
        await engine.focus.start(5)
        clock.advance(minutes=5)
        ended = await engine.focus.on_alarm(FOCUS_ALARM)
        return ended, await engine.focus.status()

    ended, status = asyncio.run(scenario())

    assert ended is True
    assert status["active"] is False
    assert [n.kind for n in host.notifications] == ["focus-ended"]


def test_unrelated_alarm_ignored(engine):
    async def scenario():
        await engine.focus.start(5)
        return await engine.focus.on_alarm("somethingElse"), await engine.focus.status()

    ignored, status = asyncio.run(scenario())

    assert ignored is False
    assert status["active"] is True


def test_status_reports_remaining(engine, clock, config):
    async def scenario():
        await engine.focus.start(30)
        clock.advance(minutes=10)
        return await engine.focus.status()

    status = asyncio.run(scenario())

    assert status["active"] is True
    assert status["remaining"] == 20 * 60_000
    assert status["blockedDomains"] == list(config.focus_distraction_domains)


def test_status_expires_overdue_session(engine, store, clock):
    async def scenario():
        await engine.focus.start(30)
        clock.advance(minutes=31)
        return await engine.focus.status()

    status = asyncio.run(scenario())

    assert status == {
        "active": False,
        "startTime": None,
        "endTime": None,
        "remaining": 0,
        "blockedDomains": [],
    }
    assert asyncio.run(store.get(keys.BLOCKED_DOMAINS)) == []


def test_restart_while_active_keeps_first_snapshot(engine, store):
    async def scenario():
        await engine.blocking.block_domain("a.com")
        await engine.focus.start(10)
        await engine.focus.start(20)
        await engine.focus.stop()

    asyncio.run(scenario())

    assert asyncio.run(store.get(keys.BLOCKED_DOMAINS)) == ["a.com"]


def test_restore_rearms_surviving_session(engine, host, clock):
    async def scenario():
        session = await engine.focus.start(30)
        host.alarms.clear()
        await engine.focus.restore()
        return session

    session = asyncio.run(scenario())

    assert host.alarms[FOCUS_ALARM] == session.end_time


def test_restore_expires_stale_session(engine, host, clock):
    async def scenario():
        await engine.focus.start(30)
        clock.advance(minutes=45)
        await engine.focus.restore()
        return await engine.focus.session()

    assert asyncio.run(scenario()).active is False
    assert [n.kind for n in host.notifications] == ["focus-ended"]


@pytest.mark.parametrize("duration", [0, -5, "soon", None])
def test_invalid_duration_rejected(engine, duration):
    with pytest.raises(FocusModeError):
        asyncio.run(engine.focus.start(duration))


def test_session_domains_cannot_be_unblocked_mid_session(engine, host, store, clock):
    async def scenario():
        await engine.blocking.block_domain("a.com")
        await engine.focus.start(25)
        with pytest.raises(ValidationError):
            await engine.blocking.unblock_domain("facebook.com")
        remaining = await engine.blocking.unblock_domain("a.com")
        return remaining, await engine.focus.status()

    remaining, status = asyncio.run(scenario())

    assert "a.com" not in remaining
    assert set(status["blockedDomains"]) <= set(remaining)
    assert set(status["blockedDomains"]) <= {r.domain for r in host.rules}


def test_session_domains_unblockable_once_overdue(engine, clock):
    async def scenario():
        await engine.focus.start(5)
        clock.advance(minutes=6)
        return await engine.blocking.unblock_domain("facebook.com")

    assert "facebook.com" not in asyncio.run(scenario())


def test_failed_block_list_write_leaves_no_session(engine, monkeypatch):
    monkeypatch.setattr(
        engine.blocking,
        "replace_blocked_domains",
        AsyncMock(side_effect=StorageError("disk full")),
    )

    with pytest.raises(StorageError):
        asyncio.run(engine.focus.start(25))

    assert asyncio.run(engine.focus.status())["active"] is False
