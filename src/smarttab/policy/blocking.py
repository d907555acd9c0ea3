"""Persistent domain blocking enforced through host redirect rules."""

from __future__ import annotations

import logging
from typing import Callable, Iterable
from urllib.parse import quote

from smarttab.config import EngineConfig
from smarttab.exceptions import HostError, ValidationError
from smarttab.host import BrowserHost, RedirectRule
from smarttab.policy.models import FocusSession
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import now_ms
from smarttab.tracking.parser import UNKNOWN_DOMAIN, extract_domain, normalize_domain

logger = logging.getLogger(__name__)


def require_domain(domain: str | None) -> str:
    """Normalize a user-supplied domain or URL, rejecting empty input."""
    raw = (domain or "").strip()
    if "://" in raw:
        extracted = extract_domain(raw)
        raw = "" if extracted == UNKNOWN_DOMAIN else extracted
    normalized = normalize_domain(raw)
    if not normalized:
        raise ValidationError("Domain is required")
    return normalized


class BlockingPolicy:
    """Own ``blockedDomains`` and keep the host's redirect rules in step with it."""

    def __init__(
        self,
        store: BaseStore,
        host: BrowserHost,
        config: EngineConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._host = host
        self._config = config or EngineConfig()
        self._clock = clock

    async def blocked_domains(self) -> list[str]:
        return list(await self._store.get(keys.BLOCKED_DOMAINS) or [])

    async def block_domain(self, domain: str) -> list[str]:
        """Add ``domain`` to the block list and close its open tabs."""
        domain = require_domain(domain)

        def add(blocked: list) -> list:
            if domain not in blocked:
                blocked.append(domain)
            return blocked

        blocked = await self._store.update(keys.BLOCKED_DOMAINS, add, default=[])
        logger.info("Blocked %s", domain)
        await self.sync_rules(blocked)
        await self.close_tabs_for([domain])
        return blocked

    async def unblock_domain(self, domain: str) -> list[str]:
        """Remove ``domain`` unless a running focus session is blocking it."""
        domain = require_domain(domain)
        session = FocusSession.from_dict(await self._store.get(keys.FOCUS_MODE))
        if session.remaining(self._clock()) > 0 and domain in session.blocked_domains:
            raise ValidationError(f"{domain} is blocked until the focus session ends")
        blocked = await self._store.update(
            keys.BLOCKED_DOMAINS,
            lambda current: [d for d in current if d != domain],
            default=[],
        )
        logger.info("Unblocked %s", domain)
        await self.sync_rules(blocked)
        return blocked

    async def replace_blocked_domains(self, domains: Iterable[str]) -> list[str]:
        """Overwrite the block list wholesale and regenerate the rules."""
        blocked: list[str] = []
        for domain in domains:
            if domain not in blocked:
                blocked.append(domain)
        await self._store.set(keys.BLOCKED_DOMAINS, blocked)
        await self.sync_rules(blocked)
        return blocked

    def build_rules(self, domains: Iterable[str]) -> list[RedirectRule]:
        return [
            RedirectRule(
                id=rule_id,
                domain=domain,
                redirect_path=f"{self._config.blocked_page_path}?domain={quote(domain)}",
            )
            for rule_id, domain in enumerate(domains, start=1)
        ]

    async def sync_rules(self, domains: Iterable[str] | None = None) -> bool:
        """Replace every dynamic rule with one rule per blocked domain.

        Returns False when the host refused; the next call rebuilds from
        scratch, so a failed sync does not leave lasting drift.
        """
        if domains is None:
            domains = await self.blocked_domains()
        rules = self.build_rules(domains)
        try:
            existing = await self._host.get_redirect_rules()
            await self._host.update_redirect_rules(
                remove_rule_ids=[rule.id for rule in existing],
                add_rules=rules,
            )
        except HostError as e:
            logger.warning("Redirect rule update failed: %s", e)
            return False
        logger.info("Installed %d redirect rules", len(rules))
        return True

    async def close_tabs_for(self, domains: Iterable[str]) -> int:
        """Close every open tab whose domain is in ``domains``."""
        targets = set(domains)
        try:
            tabs = await self._host.query_tabs()
            doomed = [tab.id for tab in tabs if extract_domain(tab.url) in targets]
            if doomed:
                await self._host.close_tabs(doomed)
        except HostError as e:
            logger.warning("Could not close tabs for %s: %s", sorted(targets), e)
            return 0
        return len(doomed)
