"""Host browser events delivered to the service."""

from __future__ import annotations

from dataclasses import dataclass

from smarttab.host import Tab


@dataclass(frozen=True)
class TabCreated:
    tab: Tab


@dataclass(frozen=True)
class TabUpdated:
    """A tab changed; only ``status == "complete"`` counts as a navigation."""

    tab: Tab


@dataclass(frozen=True)
class TabActivated:
    tab_id: int
    window_id: int


@dataclass(frozen=True)
class TabRemoved:
    tab_id: int


@dataclass(frozen=True)
class WindowFocusChanged:
    window_id: int


@dataclass(frozen=True)
class IdleStateChanged:
    state: str  # "active" | "idle" | "locked"


@dataclass(frozen=True)
class AlarmFired:
    name: str


@dataclass(frozen=True)
class PeriodicFlush:
    pass


@dataclass(frozen=True)
class AutoSortDue:
    pass


HostEvent = (
    TabCreated
    | TabUpdated
    | TabActivated
    | TabRemoved
    | WindowFocusChanged
    | IdleStateChanged
    | AlarmFired
    | PeriodicFlush
    | AutoSortDue
)
