"""Tests for stale-domain reminders."""

import asyncio

import pytest

from smarttab.exceptions import ValidationError
from smarttab.storage import keys


def _visit_at(engine, clock, url, title=""):
    asyncio.run(engine.ledger.record_visit(url, title, clock()))


def test_stale_domains_sorted_by_staleness(engine, clock):
    _visit_at(engine, clock, "https://old.com/page", "Old")
    clock.advance(minutes=30)
    _visit_at(engine, clock, "https://older.com/")
    clock.advance(minutes=30)
    _visit_at(engine, clock, "https://fresh.com/")
    clock.advance(minutes=40)

    reminders = asyncio.run(engine.reminders.get_reminders())

    assert [r["domain"] for r in reminders] == ["old.com", "older.com"]
    assert reminders[0]["url"] == "https://old.com/page"
    assert reminders[0]["title"] == "Old"
    assert reminders[0]["timeSince"] == 100 * 60_000
    assert reminders[1]["title"] == "older.com"


def test_explicit_threshold(engine, clock):
    _visit_at(engine, clock, "https://a.com/")
    clock.advance(minutes=5)

    assert asyncio.run(engine.reminders.get_reminders(10)) == []
    assert len(asyncio.run(engine.reminders.get_reminders(5))) == 1


def test_dismissed_until_next_visit(engine, clock):
    _visit_at(engine, clock, "https://a.com/")
    clock.advance(minutes=90)

    asyncio.run(engine.reminders.dismiss("a.com"))
    assert asyncio.run(engine.reminders.get_reminders()) == []

    _visit_at(engine, clock, "https://a.com/")
    clock.advance(minutes=90)
    assert [r["domain"] for r in asyncio.run(engine.reminders.get_reminders())] == ["a.com"]


def test_falls_back_to_domain_url_when_log_rolled(engine, store, clock):
    asyncio.run(store.set(keys.DOMAINS, {"gone.com": {"count": 3, "totalTime": 0, "lastVisit": clock()}}))
    clock.advance(minutes=61)

    reminders = asyncio.run(engine.reminders.get_reminders())

    assert reminders[0]["url"] == "https://gone.com"


def test_reminder_time_setting(engine, clock):
    _visit_at(engine, clock, "https://a.com/")
    clock.advance(minutes=20)

    assert asyncio.run(engine.reminders.get_reminders()) == []
    assert asyncio.run(engine.reminders.set_reminder_minutes(15)) == 15
    assert asyncio.run(engine.reminders.reminder_minutes()) == 15
    assert len(asyncio.run(engine.reminders.get_reminders())) == 1


@pytest.mark.parametrize("minutes", [0, -1, "abc", None])
def test_invalid_reminder_time(engine, minutes):
    with pytest.raises(ValidationError):
        asyncio.run(engine.reminders.set_reminder_minutes(minutes))
