"""Command surface consumed by UI collaborators."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable

from smarttab.engine import Engine
from smarttab.exceptions import SmartTabError, ValidationError

logger = logging.getLogger(__name__)

Handler = Callable[[dict], Awaitable[dict]]


class Action(str, Enum):
    GET_VISIT_STATS = "getVisitStats"
    SORT_TABS = "sortTabs"
    GET_TABS = "getTabs"
    TOGGLE_AUTO_SORT = "toggleAutoSort"
    BLOCK_DOMAIN = "blockDomain"
    UNBLOCK_DOMAIN = "unblockDomain"
    RECORD_BLOCKED_ATTEMPT = "recordBlockedAttempt"
    GET_BLOCKED_ATTEMPTS = "getBlockedAttempts"
    GROUP_TABS = "groupTabs"
    GET_REMINDERS = "getReminders"
    DISMISS_REMINDER = "dismissReminder"
    SET_REMINDER_TIME = "setReminderTime"
    EXPORT_DATA = "exportData"
    IMPORT_DATA = "importData"
    SET_DOMAIN_LIMIT = "setDomainLimit"
    GET_DOMAIN_LIMITS = "getDomainLimits"
    START_FOCUS_MODE = "startFocusMode"
    STOP_FOCUS_MODE = "stopFocusMode"
    GET_FOCUS_MODE_STATUS = "getFocusModeStatus"
    GET_DAILY_ACTIVE_TIME = "getDailyActiveTime"


class CommandRouter:
    """Dispatch ``{"action": ..., **payload}`` requests to the engine.

    Responses always carry ``success``; failures add ``error`` and never
    raise to the caller.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._handlers: dict[Action, Handler] = {
            Action.GET_VISIT_STATS: self._get_visit_stats,
            Action.SORT_TABS: self._sort_tabs,
            Action.GET_TABS: self._get_tabs,
            Action.TOGGLE_AUTO_SORT: self._toggle_auto_sort,
            Action.BLOCK_DOMAIN: self._block_domain,
            Action.UNBLOCK_DOMAIN: self._unblock_domain,
            Action.RECORD_BLOCKED_ATTEMPT: self._record_blocked_attempt,
            Action.GET_BLOCKED_ATTEMPTS: self._get_blocked_attempts,
            Action.GROUP_TABS: self._group_tabs,
            Action.GET_REMINDERS: self._get_reminders,
            Action.DISMISS_REMINDER: self._dismiss_reminder,
            Action.SET_REMINDER_TIME: self._set_reminder_time,
            Action.EXPORT_DATA: self._export_data,
            Action.IMPORT_DATA: self._import_data,
            Action.SET_DOMAIN_LIMIT: self._set_domain_limit,
            Action.GET_DOMAIN_LIMITS: self._get_domain_limits,
            Action.START_FOCUS_MODE: self._start_focus_mode,
            Action.STOP_FOCUS_MODE: self._stop_focus_mode,
            Action.GET_FOCUS_MODE_STATUS: self._get_focus_mode_status,
            Action.GET_DAILY_ACTIVE_TIME: self._get_daily_active_time,
        }
        missing = set(Action) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for actions: {sorted(a.value for a in missing)}")

    async def dispatch(self, request: dict) -> dict:
        if not isinstance(request, dict):
            return {"success": False, "error": "Request must be an object"}
        raw_action = request.get("action")
        try:
            action = Action(raw_action)
        except ValueError:
            return {"success": False, "error": f"Unknown action: {raw_action}"}

        try:
            result = await self._handlers[action](request)
        except SmartTabError as e:
            logger.warning("%s failed: %s", action.value, e)
            return {"success": False, "error": str(e)}
        except Exception as e:
            logger.exception("%s raised unexpectedly", action.value)
            return {"success": False, "error": str(e)}
        return {"success": True, **result}

    # ---- Stats ----

    async def _get_visit_stats(self, request: dict) -> dict:
        return {"data": await self._engine.query.get_visit_stats(request.get("period"))}

    async def _get_daily_active_time(self, request: dict) -> dict:
        return await self._engine.ledger.daily_active_time(self._engine.clock())

    # ---- Tabs ----

    async def _sort_tabs(self, request: dict) -> dict:
        return {"result": await self._engine.organizer.sort_tabs()}

    async def _group_tabs(self, request: dict) -> dict:
        return {"result": await self._engine.organizer.group_tabs()}

    async def _get_tabs(self, request: dict) -> dict:
        tabs = await self._engine.organizer.get_tabs()
        return {"tabs": [tab.to_dict() for tab in tabs]}

    async def _toggle_auto_sort(self, request: dict) -> dict:
        if "enabled" not in request:
            raise ValidationError("enabled is required")
        enabled = await self._engine.organizer.set_auto_sort(request["enabled"])
        return {"enabled": enabled}

    # ---- Blocking ----

    async def _block_domain(self, request: dict) -> dict:
        blocked = await self._engine.blocking.block_domain(request.get("domain"))
        return {"blockedDomains": blocked}

    async def _unblock_domain(self, request: dict) -> dict:
        blocked = await self._engine.blocking.unblock_domain(request.get("domain"))
        return {"blockedDomains": blocked}

    async def _record_blocked_attempt(self, request: dict) -> dict:
        return {"attempts": await self._engine.attempts.record(request.get("domain"))}

    async def _get_blocked_attempts(self, request: dict) -> dict:
        return {"attempts": await self._engine.attempts.get(request.get("domain"))}

    # ---- Reminders ----

    async def _get_reminders(self, request: dict) -> dict:
        minutes = _first_present(request, "minutes", "reminderTimeMinutes")
        if minutes is not None:
            try:
                minutes = int(minutes)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid reminder time: {minutes!r}") from None
        return {"reminders": await self._engine.reminders.get_reminders(minutes)}

    async def _dismiss_reminder(self, request: dict) -> dict:
        await self._engine.reminders.dismiss(request.get("domain"))
        return {}

    async def _set_reminder_time(self, request: dict) -> dict:
        minutes = _first_present(request, "minutes", "reminderTimeMinutes")
        saved = await self._engine.reminders.set_reminder_minutes(minutes)
        return {"reminderTimeMinutes": saved}

    # ---- Backup ----

    async def _export_data(self, request: dict) -> dict:
        return {"data": await self._engine.backup.export_data()}

    async def _import_data(self, request: dict) -> dict:
        restored = await self._engine.backup.import_data(request.get("data"))
        await self._engine.blocking.sync_rules()
        await self._engine.focus.restore()
        return {"keys": restored}

    # ---- Limits ----

    async def _set_domain_limit(self, request: dict) -> dict:
        minutes = _first_present(request, "limitMinutes", "minutes")
        limits = await self._engine.limits.set_limit(request.get("domain"), minutes)
        return {"limits": limits}

    async def _get_domain_limits(self, request: dict) -> dict:
        return {"limits": await self._engine.limits.get_limits()}

    # ---- Focus mode ----

    async def _start_focus_mode(self, request: dict) -> dict:
        duration = _first_present(request, "duration", "minutes")
        session = await self._engine.focus.start(duration)
        return {"endTime": session.end_time}

    async def _stop_focus_mode(self, request: dict) -> dict:
        return {"stopped": await self._engine.focus.stop()}

    async def _get_focus_mode_status(self, request: dict) -> dict:
        return await self._engine.focus.status()


def _first_present(request: dict, *names: str) -> Any:
    for name in names:
        if request.get(name) is not None:
            return request[name]
    return None
