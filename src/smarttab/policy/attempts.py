"""Log of navigations that hit the blocked page."""

from __future__ import annotations

from typing import Callable

from smarttab.config import EngineConfig
from smarttab.policy.blocking import require_domain
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import now_ms


class BlockedAttemptLog:
    """Per-domain attempt counter with a bounded timestamp history."""

    def __init__(
        self,
        store: BaseStore,
        config: EngineConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._config = config or EngineConfig()
        self._clock = clock

    async def record(self, domain: str) -> dict:
        domain = require_domain(domain)
        now = self._clock()
        cap = self._config.max_blocked_attempts

        def append(attempts: dict) -> dict:
            entry = attempts.get(domain) or {"count": 0, "attempts": []}
            entry["count"] = int(entry.get("count") or 0) + 1
            entry["attempts"] = (list(entry.get("attempts") or []) + [now])[-cap:]
            attempts[domain] = entry
            return attempts

        attempts = await self._store.update(keys.BLOCKED_ATTEMPTS, append, default={})
        return attempts[domain]

    async def get(self, domain: str | None = None) -> dict:
        attempts = await self._store.get(keys.BLOCKED_ATTEMPTS) or {}
        if domain is None:
            return attempts
        return attempts.get(require_domain(domain)) or {"count": 0, "attempts": []}
