"""Reminders for domains that have not been visited in a while."""

from __future__ import annotations

from typing import Callable

from smarttab.config import EngineConfig
from smarttab.exceptions import ValidationError
from smarttab.policy.blocking import require_domain
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import MS_PER_MINUTE, now_ms


class ReminderService:
    """Surface stale domains, most stale first, minus the dismissed ones.

    Dismissals are lifted by the ledger as soon as a new visit to the domain
    is recorded.
    """

    def __init__(
        self,
        store: BaseStore,
        config: EngineConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._config = config or EngineConfig()
        self._clock = clock

    async def reminder_minutes(self) -> int:
        settings = await self._store.get(keys.SETTINGS) or {}
        return int(settings.get("reminderTimeMinutes") or self._config.reminder_minutes)

    async def set_reminder_minutes(self, minutes: int) -> int:
        try:
            minutes = int(minutes)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid reminder time: {minutes!r}") from None
        if minutes <= 0:
            raise ValidationError("Reminder time must be positive")

        def apply(settings: dict) -> dict:
            settings["reminderTimeMinutes"] = minutes
            return settings

        await self._store.update(keys.SETTINGS, apply, default={})
        return minutes

    async def get_reminders(self, minutes: int | None = None) -> list[dict]:
        if minutes is None:
            minutes = await self.reminder_minutes()
        threshold = int(minutes) * MS_PER_MINUTE
        now = self._clock()

        domains = await self._store.get(keys.DOMAINS) or {}
        dismissed = set(await self._store.get(keys.DISMISSED_REMINDERS) or [])
        visits = await self._store.get(keys.VISITS) or []

        latest: dict[str, dict] = {}
        for visit in visits:
            latest.setdefault(visit.get("domain") or "", visit)

        reminders = []
        for domain, stat in domains.items():
            last_visit = int((stat or {}).get("lastVisit") or 0)
            if not last_visit or domain in dismissed:
                continue
            time_since = now - last_visit
            if time_since < threshold:
                continue
            visit = latest.get(domain) or {}
            reminders.append({
                "domain": domain,
                "url": visit.get("url") or f"https://{domain}",
                "title": visit.get("title") or domain,
                "lastVisit": last_visit,
                "timeSince": time_since,
            })

        reminders.sort(key=lambda r: r["timeSince"], reverse=True)
        return reminders

    async def dismiss(self, domain: str) -> list[str]:
        domain = require_domain(domain)

        def add(dismissed: list) -> list:
            if domain not in dismissed:
                dismissed.append(domain)
            return dismissed

        return await self._store.update(keys.DISMISSED_REMINDERS, add, default=[])
