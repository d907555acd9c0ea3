"""Engine configuration with environment-driven defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_FOCUS_DOMAINS = (
    "facebook.com",
    "twitter.com",
    "x.com",
    "instagram.com",
    "youtube.com",
    "reddit.com",
    "tiktok.com",
    "netflix.com",
)


@dataclass
class EngineConfig:
    """Tunables shared by the tracker, ledger, query and policy components."""

    flush_interval_seconds: float = 60.0
    min_flush_ms: int = 1000
    max_visits: int = 1000
    reminder_minutes: int = 60
    auto_sort_delay_seconds: float = 1.0
    max_blocked_attempts: int = 50
    recent_visits_limit: int = 20
    top_domains_limit: int = 10
    blocked_page_path: str = "/blocked.html"
    focus_distraction_domains: tuple[str, ...] = field(default=DEFAULT_FOCUS_DOMAINS)
    database_path: Path | None = None

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config from ``SMARTTAB_*`` environment variables."""
        config = cls()
        config.flush_interval_seconds = _env_float(
            "SMARTTAB_FLUSH_INTERVAL", config.flush_interval_seconds
        )
        config.reminder_minutes = int(
            _env_float("SMARTTAB_REMINDER_MINUTES", config.reminder_minutes)
        )
        config.auto_sort_delay_seconds = _env_float(
            "SMARTTAB_AUTO_SORT_DELAY", config.auto_sort_delay_seconds
        )
        config.blocked_page_path = (
            os.environ.get("SMARTTAB_BLOCKED_PAGE") or config.blocked_page_path
        )

        focus_domains = os.environ.get("SMARTTAB_FOCUS_DOMAINS", "")
        parsed = tuple(d.strip().lower() for d in focus_domains.split(",") if d.strip())
        if parsed:
            config.focus_distraction_domains = parsed

        db_path = os.environ.get("SMARTTAB_DB_PATH")
        if db_path:
            config.database_path = Path(db_path).expanduser()
        return config


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, value)
        return default
    if parsed <= 0:
        return default
    return parsed
