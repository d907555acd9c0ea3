"""Data models exchanged with the browser host."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

WINDOW_ID_NONE = -1


@dataclass
class Tab:
    """A browser tab as reported by the host."""

    id: int
    window_id: int
    url: str
    title: str = ""
    active: bool = False
    pinned: bool = False
    index: int = 0
    status: str = "complete"  # "loading" | "complete"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "windowId": self.window_id,
            "url": self.url,
            "title": self.title,
            "active": self.active,
            "pinned": self.pinned,
            "index": self.index,
        }


@dataclass
class RedirectRule:
    """A dynamic rule sending matching top-level requests to the blocked page."""

    id: int
    domain: str
    redirect_path: str
    priority: int = 1
    resource_types: list[str] = field(default_factory=lambda: ["main_frame"])

    @property
    def url_filter(self) -> str:
        return f"||{self.domain}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "priority": self.priority,
            "action": {
                "type": "redirect",
                "redirect": {"extensionPath": self.redirect_path},
            },
            "condition": {
                "urlFilter": self.url_filter,
                "resourceTypes": list(self.resource_types),
            },
        }


@dataclass
class Notification:
    """A user-facing notification raised by the policy engine."""

    notification_id: str
    title: str
    message: str
    kind: str  # "limit-warning" | "limit-exceeded" | "focus-ended"

    def to_dict(self) -> dict:
        return asdict(self)
