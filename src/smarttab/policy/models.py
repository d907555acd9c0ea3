"""Data models for blocking, limits and focus sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from smarttab.timeutil import MS_PER_MINUTE


class LimitState(str, Enum):
    OK = "ok"
    WARNING = "warning"
    EXCEEDED = "exceeded"


@dataclass
class DomainLimit:
    """Daily allowance for one domain."""

    limit_minutes: int

    @property
    def limit_ms(self) -> int:
        return self.limit_minutes * MS_PER_MINUTE

    def to_dict(self) -> dict:
        return {"limitMinutes": self.limit_minutes, "limitMs": self.limit_ms}

    @classmethod
    def from_dict(cls, raw: dict) -> DomainLimit:
        minutes = raw.get("limitMinutes")
        if minutes is None and raw.get("limitMs"):
            minutes = int(raw["limitMs"]) // MS_PER_MINUTE
        return cls(limit_minutes=int(minutes or 0))


@dataclass
class FocusSession:
    """A time-boxed strengthening of the block list.

    ``original_blocked_domains`` is the block list as it was at start and is
    written back verbatim when the session ends.
    """

    active: bool = False
    start_time: int | None = None
    end_time: int | None = None
    duration_minutes: int = 0
    blocked_domains: list[str] = field(default_factory=list)
    original_blocked_domains: list[str] = field(default_factory=list)

    def remaining(self, now: int) -> int:
        if not self.active or self.end_time is None:
            return 0
        return max(0, self.end_time - now)

    def to_dict(self) -> dict:
        return {
            "active": self.active,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "blockedDomains": list(self.blocked_domains),
            "originalBlockedDomains": list(self.original_blocked_domains),
        }

    @classmethod
    def from_dict(cls, raw: dict | None) -> FocusSession:
        raw = raw or {}
        return cls(
            active=bool(raw.get("active")),
            start_time=raw.get("startTime"),
            end_time=raw.get("endTime"),
            duration_minutes=int(raw.get("durationMinutes") or 0),
            blocked_domains=list(raw.get("blockedDomains") or []),
            original_blocked_domains=list(raw.get("originalBlockedDomains") or []),
        )
