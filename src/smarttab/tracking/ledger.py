"""Persisted time aggregates fed by foreground intervals."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from smarttab.config import EngineConfig
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import date_key
from smarttab.tracking.models import DomainStat, Visit
from smarttab.tracking.parser import extract_domain

logger = logging.getLogger(__name__)

DomainTimeHook = Callable[[str, int, int], Awaitable[None]]


class TimeLedger:
    """Distribute elapsed foreground time into the stored aggregates.

    Four aggregates are maintained: all-time per-domain stats (``domains``),
    the bounded newest-first visit log (``visits``), today's total active time
    (``dailyActiveTime``) and today's per-domain time (``dailyDomainTime``).

    Args:
        store: Backing key/value store.
        config: Engine tunables (visit log cap).
        on_domain_time: Awaited after every daily per-domain write with
            ``(domain, spent_today_ms, now_ms)``; the policy engine hangs its
            limit check here.
    """

    def __init__(
        self,
        store: BaseStore,
        config: EngineConfig | None = None,
        on_domain_time: DomainTimeHook | None = None,
    ) -> None:
        self._store = store
        self._config = config or EngineConfig()
        self._on_domain_time = on_domain_time

    def set_domain_time_hook(self, hook: DomainTimeHook | None) -> None:
        self._on_domain_time = hook

    # ---- Visits ----

    async def record_visit(self, url: str, title: str, now: int) -> Visit:
        """Prepend a new visit and bump the domain's visit count."""
        domain = extract_domain(url)
        visit = Visit(url=url, domain=domain, title=title or "", timestamp=now)
        max_visits = self._config.max_visits

        def prepend(visits: list) -> list:
            visits.insert(0, visit.to_dict())
            return visits[:max_visits]

        await self._store.update(keys.VISITS, prepend, default=[])

        def count_visit(domains: dict) -> dict:
            stat = DomainStat.from_dict(domains.get(domain))
            stat.count += 1
            stat.last_visit = now
            domains[domain] = stat.to_dict()
            return domains

        await self._store.update(keys.DOMAINS, count_visit, default={})

        def undismiss(dismissed: list) -> list:
            return [d for d in dismissed if d != domain]

        await self._store.update(keys.DISMISSED_REMINDERS, undismiss, default=[])
        logger.debug("Recorded visit to %s", domain)
        return visit

    # ---- Intervals ----

    async def record_interval(self, url: str, elapsed_ms: int, now: int) -> None:
        """Add one flushed interval to all four aggregates, in order."""
        domain = extract_domain(url)
        today = date_key(now)

        def add_domain_time(domains: dict) -> dict:
            stat = DomainStat.from_dict(domains.get(domain))
            stat.total_time += elapsed_ms
            domains[domain] = stat.to_dict()
            return domains

        await self._store.update(keys.DOMAINS, add_domain_time, default={})

        def add_visit_time(visits: list) -> list:
            for entry in visits:
                if entry.get("url") == url:
                    entry["timeSpent"] = int(entry.get("timeSpent") or 0) + elapsed_ms
                    break
            return visits

        await self._store.update(keys.VISITS, add_visit_time, default=[])

        def add_active_time(active: dict) -> dict:
            if active.get("date") != today:
                active = {"date": today, "totalTime": 0}
            active["totalTime"] = int(active.get("totalTime") or 0) + elapsed_ms
            return active

        await self._store.update(keys.DAILY_ACTIVE_TIME, add_active_time, default={})

        def add_daily_domain_time(daily: dict) -> dict:
            # only today's bucket survives a write
            daily = {today: daily.get(today) or {}}
            day = daily[today]
            day[domain] = int(day.get(domain) or 0) + elapsed_ms
            return daily

        daily = await self._store.update(
            keys.DAILY_DOMAIN_TIME, add_daily_domain_time, default={}
        )
        spent_today = daily[today][domain]
        logger.debug("Flushed %dms to %s (today %dms)", elapsed_ms, domain, spent_today)

        if self._on_domain_time is not None:
            await self._on_domain_time(domain, spent_today, now)

    # ---- Reads ----

    async def daily_active_time(self, now: int) -> dict:
        today = date_key(now)
        active = await self._store.get(keys.DAILY_ACTIVE_TIME) or {}
        if active.get("date") != today:
            return {"date": today, "totalTime": 0}
        return {"date": today, "totalTime": int(active.get("totalTime") or 0)}

    async def daily_domain_time(self, now: int) -> dict[str, int]:
        daily = await self._store.get(keys.DAILY_DOMAIN_TIME) or {}
        return dict(daily.get(date_key(now)) or {})
