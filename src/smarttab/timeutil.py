"""Millisecond clock and local-calendar helpers."""

from __future__ import annotations

import time
from datetime import datetime

from dateutil.relativedelta import SU, relativedelta

MS_PER_MINUTE = 60_000


def now_ms() -> int:
    return int(time.time() * 1000)


def to_local(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


def to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def date_key(ms: int) -> str:
    """Local ``YYYY-MM-DD`` key for a millisecond timestamp."""
    return to_local(ms).strftime("%Y-%m-%d")


def local_midnight(ms: int) -> datetime:
    return to_local(ms).replace(hour=0, minute=0, second=0, microsecond=0)


def period_start(period: str, ms: int) -> int:
    """Start of a named period, in epoch milliseconds, relative to ``ms``.

    ``week`` begins on the most recent Sunday (today, if today is Sunday).
    """
    midnight = local_midnight(ms)
    if period == "today":
        return to_ms(midnight)
    if period == "week":
        return to_ms(midnight + relativedelta(weekday=SU(-1)))
    if period == "month":
        return to_ms(midnight + relativedelta(day=1))
    if period == "year":
        return to_ms(midnight + relativedelta(month=1, day=1))
    if period == "all":
        return 0
    raise ValueError(f"Unknown period: {period}")


def format_duration(ms: int) -> str:
    minutes_total = max(0, int(ms)) // MS_PER_MINUTE
    hours, minutes = divmod(minutes_total, 60)
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
