"""Abstract interface to the host browser."""

from __future__ import annotations

from abc import ABC, abstractmethod

from smarttab.host.models import Notification, RedirectRule, Tab


class BrowserHost(ABC):
    """Tab, rule, notification and alarm operations the engine needs.

    Implementations raise :class:`smarttab.exceptions.HostError` on failure.
    """

    @abstractmethod
    async def get_tab(self, tab_id: int) -> Tab | None:
        """Look up one tab; ``None`` if it no longer exists."""
        ...

    @abstractmethod
    async def get_active_tab(self) -> Tab | None:
        """The active tab of the last-focused window, if any."""
        ...

    @abstractmethod
    async def query_tabs(self, window_id: int | None = None) -> list[Tab]:
        """All tabs, or those of one window, in tab-strip order."""
        ...

    @abstractmethod
    async def close_tabs(self, tab_ids: list[int]) -> None:
        """Close the given tabs."""
        ...

    @abstractmethod
    async def move_tab(self, tab_id: int, index: int) -> None:
        """Move a tab to ``index`` within its window."""
        ...

    @abstractmethod
    async def group_tabs(self, tab_ids: list[int], title: str) -> int:
        """Put tabs into a new titled group; returns the group id."""
        ...

    @abstractmethod
    async def get_redirect_rules(self) -> list[RedirectRule]:
        """Currently installed dynamic redirect rules."""
        ...

    @abstractmethod
    async def update_redirect_rules(
        self,
        remove_rule_ids: list[int],
        add_rules: list[RedirectRule],
    ) -> None:
        """Remove then add dynamic rules in one host call."""
        ...

    @abstractmethod
    async def notify(self, notification: Notification) -> None:
        """Show a notification to the user."""
        ...

    @abstractmethod
    async def schedule_alarm(self, name: str, when_ms: int) -> None:
        """Arm a one-shot, restart-surviving alarm firing at ``when_ms``."""
        ...

    @abstractmethod
    async def clear_alarm(self, name: str) -> None:
        """Cancel a pending alarm; unknown names are ignored."""
        ...
