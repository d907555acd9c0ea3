"""Daily per-domain time limits."""

from __future__ import annotations

import logging
import math
from typing import Callable

from smarttab.exceptions import HostError, ValidationError
from smarttab.host import BrowserHost, Notification
from smarttab.policy.blocking import require_domain
from smarttab.policy.models import DomainLimit, LimitState
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import MS_PER_MINUTE, date_key, format_duration, now_ms

logger = logging.getLogger(__name__)

WARNING_RATIO = 0.8


def evaluate_limit(spent_ms: int, limit: DomainLimit) -> LimitState:
    if limit.limit_ms <= 0:
        return LimitState.OK
    if spent_ms >= limit.limit_ms:
        return LimitState.EXCEEDED
    if spent_ms >= limit.limit_ms * WARNING_RATIO:
        return LimitState.WARNING
    return LimitState.OK


class DomainLimitPolicy:
    """Store limits and notify when today's time crosses 80% and 100%.

    Each level notifies at most once per domain per local day. The fired
    levels are kept in memory only, so a restart may repeat one notification.
    """

    def __init__(
        self,
        store: BaseStore,
        host: BrowserHost,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._host = host
        self._clock = clock
        self._fired_day: str | None = None
        self._fired: dict[str, set[LimitState]] = {}

    async def get_limits(self) -> dict[str, dict]:
        return dict(await self._store.get(keys.DOMAIN_LIMITS) or {})

    async def set_limit(self, domain: str, minutes: int | float | None) -> dict[str, dict]:
        """Set a limit in minutes; ``None`` or ``0`` removes it."""
        domain = require_domain(domain)
        if minutes is not None:
            try:
                minutes = int(minutes)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid limit: {minutes!r}") from None
            if minutes < 0:
                raise ValidationError("Limit must not be negative")

        def apply(limits: dict) -> dict:
            if not minutes:
                limits.pop(domain, None)
            else:
                limits[domain] = DomainLimit(limit_minutes=minutes).to_dict()
            return limits

        limits = await self._store.update(keys.DOMAIN_LIMITS, apply, default={})
        self._fired.pop(domain, None)
        if minutes:
            logger.info("Limit for %s set to %d minutes", domain, minutes)
        else:
            logger.info("Limit for %s removed", domain)
        return limits

    async def check(self, domain: str, spent_ms: int, now: int | None = None) -> LimitState:
        """Evaluate ``domain`` after its daily time moved to ``spent_ms``."""
        limits = await self.get_limits()
        raw = limits.get(domain)
        if not raw:
            return LimitState.OK
        limit = DomainLimit.from_dict(raw)
        state = evaluate_limit(spent_ms, limit)
        if state is LimitState.OK:
            return state

        today = date_key(self._clock() if now is None else now)
        if self._fired_day != today:
            self._fired_day = today
            self._fired = {}
        fired = self._fired.setdefault(domain, set())
        if state in fired:
            return state
        fired.add(state)
        await self._notify(domain, state, spent_ms, limit)
        return state

    async def _notify(
        self,
        domain: str,
        state: LimitState,
        spent_ms: int,
        limit: DomainLimit,
    ) -> None:
        if state is LimitState.WARNING:
            remaining = math.ceil((limit.limit_ms - spent_ms) / MS_PER_MINUTE)
            notification = Notification(
                notification_id=f"limit-warning-{domain}",
                title="Time limit warning",
                message=f"{remaining} minutes left on {domain} today.",
                kind="limit-warning",
            )
        else:
            notification = Notification(
                notification_id=f"limit-exceeded-{domain}",
                title="Time limit exceeded",
                message=(
                    f"You've spent {format_duration(spent_ms)} on {domain} today, "
                    f"over your {limit.limit_minutes}m limit."
                ),
                kind="limit-exceeded",
            )
        logger.info("Limit %s for %s (%dms)", state.value, domain, spent_ms)
        try:
            await self._host.notify(notification)
        except HostError as e:
            logger.warning("Could not show limit notification for %s: %s", domain, e)
