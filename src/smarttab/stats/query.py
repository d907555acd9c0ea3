"""Visit statistics for a reporting period."""

from __future__ import annotations

from typing import Callable

from smarttab.config import EngineConfig
from smarttab.stats.periods import Period
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import now_ms
from smarttab.tracking.models import DomainStat


class PeriodQueryEngine:
    """Answer ``getVisitStats`` queries.

    Bounded periods replay the capped visit log, so they under-report once a
    period holds more visits than the log keeps. ``all`` reads the exact
    per-domain aggregate instead.
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

    async def get_visit_stats(self, period: Period | str = Period.TODAY) -> dict:
        if not isinstance(period, Period):
            period = Period.parse(period)
        now = self._clock()
        visits = await self._store.get(keys.VISITS) or []

        if period is Period.ALL:
            stored = await self._store.get(keys.DOMAINS) or {}
            domains = {name: DomainStat.from_dict(raw).to_dict() for name, raw in stored.items()}
            recent = visits
            total_visits = sum(d["count"] for d in domains.values())
            total_time = sum(d["totalTime"] for d in domains.values())
        else:
            start, end = period.bounds(now)
            recent = [
                v for v in visits
                if start <= int(v.get("timestamp") or 0) <= end
            ]
            domains = self._aggregate(recent)
            total_visits = len(recent)
            total_time = sum(int(v.get("timeSpent") or 0) for v in recent)

        return {
            "period": period.value,
            "totalVisits": total_visits,
            "totalTime": total_time,
            "uniqueDomains": len(domains),
            "recentVisits": recent[: self._config.recent_visits_limit],
            "topDomains": self._top_domains(domains),
            "domains": domains,
        }

    @staticmethod
    def _aggregate(visits: list[dict]) -> dict[str, dict]:
        domains: dict[str, DomainStat] = {}
        for visit in visits:
            name = visit.get("domain") or "unknown"
            stat = domains.setdefault(name, DomainStat())
            stat.count += 1
            stat.total_time += int(visit.get("timeSpent") or 0)
            stat.last_visit = max(stat.last_visit, int(visit.get("timestamp") or 0))
        return {name: stat.to_dict() for name, stat in domains.items()}

    def _top_domains(self, domains: dict[str, dict]) -> list[dict]:
        # sorted() is stable: equal counts keep iteration order
        ranked = sorted(domains.items(), key=lambda item: item[1]["count"], reverse=True)
        return [
            {"domain": name, **stat}
            for name, stat in ranked[: self._config.top_domains_limit]
        ]
