"""Foreground-tab tracking and time accounting."""

from smarttab.tracking.ledger import TimeLedger
from smarttab.tracking.models import ActiveTabSlot, DomainStat, Visit
from smarttab.tracking.parser import (
    UNKNOWN_DOMAIN,
    extract_domain,
    is_trackable_url,
    normalize_domain,
)
from smarttab.tracking.tracker import TabActivityTracker

__all__ = [
    "ActiveTabSlot",
    "DomainStat",
    "TabActivityTracker",
    "TimeLedger",
    "UNKNOWN_DOMAIN",
    "Visit",
    "extract_domain",
    "is_trackable_url",
    "normalize_domain",
]
