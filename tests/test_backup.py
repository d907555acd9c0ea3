"""Tests for export and import."""

import asyncio

import pytest

from smarttab.exceptions import ImportValidationError
from smarttab.storage import keys


def test_export_contains_every_key(engine, store):
    asyncio.run(store.set_many({keys.BLOCKED_DOMAINS: ["a.com"], keys.SETTINGS: {"autoSortEnabled": False}}))

    exported = asyncio.run(engine.backup.export_data())

    assert exported["version"] == "1.0"
    assert exported["exportDate"].startswith("2026-03-11T12:00:00")
    assert exported["data"] == {
        keys.BLOCKED_DOMAINS: ["a.com"],
        keys.SETTINGS: {"autoSortEnabled": False},
    }


def test_import_replaces_store(engine, store):
    asyncio.run(store.set(keys.VISITS, [{"url": "https://old.com/"}]))
    payload = {
        "version": "1.0",
        "exportDate": "2026-01-02T03:04:05+00:00",
        "data": {keys.BLOCKED_DOMAINS: ["b.com"]},
    }

    restored = asyncio.run(engine.backup.import_data(payload))

    assert restored == [keys.BLOCKED_DOMAINS]
    assert asyncio.run(store.items()) == {keys.BLOCKED_DOMAINS: ["b.com"]}


def test_export_import_restores_namespace(engine, store, host, clock):
    tab = host.add_tab(1, "https://a.com/", active=True)

    async def scenario():
        await engine.tracker.on_tab_updated(tab)
        clock.advance(seconds=30)
        await engine.tracker.flush(1)
        await engine.blocking.block_domain("b.com")
        exported = await engine.backup.export_data()
        await store.clear()
        await engine.backup.import_data(exported)
        return exported

    exported = asyncio.run(scenario())

    assert asyncio.run(store.items()) == exported["data"]


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"data": {}},
        {"version": "1.0"},
        {"version": "1.0", "data": []},
        {"version": "1.0", "data": {}, "exportDate": "yesterday"},
        {"version": "1.0", "data": {"visits": {"x": 1}}},
        {"version": "1.0", "data": {"visits": ["https://a.com/"]}},
        {"version": "1.0", "data": {"domains": {"a.com": "lots"}}},
        {"version": "1.0", "data": {"domains": []}},
        {"version": "1.0", "data": {"blockedDomains": "a.com"}},
        {"version": "1.0", "data": {"blockedDomains": [{"domain": "a.com"}]}},
        {"version": "1.0", "data": {"settings": "dark"}},
        {"version": "1.0", "data": {"focusMode": True}},
        {"version": "1.0", "data": {"dailyDomainTime": {"2026-03-11": 5}}},
    ],
)
def test_invalid_payload_leaves_store_untouched(engine, store, payload):
    asyncio.run(store.set(keys.BLOCKED_DOMAINS, ["keep.com"]))

    with pytest.raises(ImportValidationError):
        asyncio.run(engine.backup.import_data(payload))

    assert asyncio.run(store.get(keys.BLOCKED_DOMAINS)) == ["keep.com"]


def test_unknown_keys_are_carried_through(engine, store):
    payload = {"version": "1.0", "data": {"extra": 5, keys.SETTINGS: {"autoSortEnabled": True}}}

    assert asyncio.run(engine.backup.import_data(payload)) == ["extra", keys.SETTINGS]
    assert asyncio.run(store.get("extra")) == 5
