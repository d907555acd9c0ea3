"""Browser host interface and the data it exchanges."""

from smarttab.host.base import BrowserHost
from smarttab.host.models import WINDOW_ID_NONE, Notification, RedirectRule, Tab

__all__ = [
    "BrowserHost",
    "Notification",
    "RedirectRule",
    "Tab",
    "WINDOW_ID_NONE",
]
