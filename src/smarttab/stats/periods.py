"""Named reporting periods."""

from __future__ import annotations

from enum import Enum

from smarttab.exceptions import ValidationError
from smarttab.timeutil import period_start


class Period(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @classmethod
    def parse(cls, value: str | None) -> Period:
        if value is None:
            return cls.TODAY
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown period: {value}") from None

    def bounds(self, now: int) -> tuple[int, int]:
        """``(start_ms, end_ms)`` of this period ending at ``now``."""
        return period_start(self.value, now), now
