"""Data models for activity tracking."""

from __future__ import annotations

from dataclasses import dataclass

from smarttab.host.models import Tab


@dataclass
class Visit:
    """One navigation to a page; ``time_spent`` grows with later flushes."""

    url: str
    domain: str
    title: str
    timestamp: int
    time_spent: int = 0

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "domain": self.domain,
            "title": self.title,
            "timestamp": self.timestamp,
            "timeSpent": self.time_spent,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> Visit:
        return cls(
            url=str(raw.get("url") or ""),
            domain=str(raw.get("domain") or ""),
            title=str(raw.get("title") or ""),
            timestamp=int(raw.get("timestamp") or 0),
            time_spent=int(raw.get("timeSpent") or 0),
        )


@dataclass
class DomainStat:
    """All-time totals for one domain."""

    count: int = 0
    total_time: int = 0
    last_visit: int = 0

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "totalTime": self.total_time,
            "lastVisit": self.last_visit,
        }

    @classmethod
    def from_dict(cls, raw: dict | None) -> DomainStat:
        raw = raw or {}
        return cls(
            count=int(raw.get("count") or 0),
            total_time=int(raw.get("totalTime") or 0),
            last_visit=int(raw.get("lastVisit") or 0),
        )


@dataclass
class ActiveTabSlot:
    """The tab currently receiving foreground time.

    ``start_time`` is ``None`` while paused (window blurred, system idle).
    """

    tab: Tab
    start_time: int | None = None

    @property
    def paused(self) -> bool:
        return self.start_time is None
