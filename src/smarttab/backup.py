"""Export and import of the whole store namespace."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from dateutil.parser import isoparse

from smarttab.exceptions import ImportValidationError
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import now_ms

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"

KEY_TYPES: dict[str, type] = {
    keys.VISITS: list,
    keys.DOMAINS: dict,
    keys.SETTINGS: dict,
    keys.BLOCKED_DOMAINS: list,
    keys.DISMISSED_REMINDERS: list,
    keys.DAILY_ACTIVE_TIME: dict,
    keys.DAILY_DOMAIN_TIME: dict,
    keys.DOMAIN_LIMITS: dict,
    keys.BLOCKED_ATTEMPTS: dict,
    keys.FOCUS_MODE: dict,
}

# per-domain (or per-day) maps whose values are objects
OBJECT_MAPS = (
    keys.DOMAINS,
    keys.DAILY_DOMAIN_TIME,
    keys.DOMAIN_LIMITS,
    keys.BLOCKED_ATTEMPTS,
)


class DataBackup:
    """Bundle every stored key with a version tag, and restore such a bundle."""

    def __init__(self, store: BaseStore, clock: Callable[[], int] = now_ms) -> None:
        self._store = store
        self._clock = clock

    async def export_data(self) -> dict:
        data = await self._store.items()
        export_date = datetime.fromtimestamp(self._clock() / 1000).astimezone()
        return {
            "version": EXPORT_VERSION,
            "exportDate": export_date.isoformat(),
            "data": data,
        }

    async def import_data(self, payload: Any) -> list[str]:
        """Replace the store contents with ``payload["data"]``.

        Validation happens before anything is touched; a rejected payload
        leaves the store unchanged. Returns the restored keys.
        """
        data = validate_backup(payload)
        await self._store.clear()
        await self._store.set_many(data)
        logger.info("Imported %d keys from backup version %s", len(data), payload["version"])
        return sorted(data)


def validate_backup(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ImportValidationError("Invalid backup file format")
    if not payload.get("version") or "data" not in payload:
        raise ImportValidationError("Invalid backup file format: version and data are required")
    data = payload["data"]
    if not isinstance(data, dict):
        raise ImportValidationError("Invalid backup file format: data must be an object")
    export_date = payload.get("exportDate")
    if export_date is not None:
        try:
            isoparse(str(export_date))
        except ValueError:
            raise ImportValidationError(f"Invalid exportDate: {export_date!r}") from None
    for key, value in data.items():
        expected = KEY_TYPES.get(key)
        if expected is not None and not isinstance(value, expected):
            raise ImportValidationError(
                f"Invalid backup file format: {key} must be a {expected.__name__}"
            )
    if not all(isinstance(visit, dict) for visit in data.get(keys.VISITS) or []):
        raise ImportValidationError("Invalid backup file format: visits must hold objects")
    for key in OBJECT_MAPS:
        if not all(isinstance(v, dict) for v in (data.get(key) or {}).values()):
            raise ImportValidationError(
                f"Invalid backup file format: {key} values must be objects"
            )
    if not all(isinstance(d, str) for d in data.get(keys.BLOCKED_DOMAINS) or []):
        raise ImportValidationError(
            "Invalid backup file format: blockedDomains must hold strings"
        )
    return data
