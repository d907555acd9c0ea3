"""Focus Mode: a time-boxed union of a distraction list into the block list."""

from __future__ import annotations

import logging
from typing import Callable

from smarttab.config import EngineConfig
from smarttab.exceptions import FocusModeError, HostError, StorageError
from smarttab.host import BrowserHost, Notification
from smarttab.policy.blocking import BlockingPolicy
from smarttab.policy.models import FocusSession
from smarttab.storage import BaseStore, keys
from smarttab.timeutil import MS_PER_MINUTE, now_ms

logger = logging.getLogger(__name__)

FOCUS_ALARM = "focusModeEnd"


class FocusModeController:
    """Start, stop and lazily expire focus sessions.

    Only one session exists at a time: starting while active first stops
    the running session, restoring its snapshot, before the new one begins.
    """

    def __init__(
        self,
        store: BaseStore,
        host: BrowserHost,
        blocking: BlockingPolicy,
        config: EngineConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._host = host
        self._blocking = blocking
        self._config = config or EngineConfig()
        self._clock = clock

    async def session(self) -> FocusSession:
        return FocusSession.from_dict(await self._store.get(keys.FOCUS_MODE))

    async def start(self, duration_minutes: int | float) -> FocusSession:
        try:
            minutes = int(duration_minutes)
        except (TypeError, ValueError):
            raise FocusModeError(f"Invalid focus duration: {duration_minutes!r}") from None
        if minutes <= 0:
            raise FocusModeError("Focus duration must be positive")

        if (await self.session()).active:
            await self.stop()

        now = self._clock()
        original = await self._blocking.blocked_domains()
        preset = list(self._config.focus_distraction_domains)
        session = FocusSession(
            active=True,
            start_time=now,
            end_time=now + minutes * MS_PER_MINUTE,
            duration_minutes=minutes,
            blocked_domains=preset,
            original_blocked_domains=original,
        )
        await self._store.set(keys.FOCUS_MODE, session.to_dict())
        try:
            await self._blocking.replace_blocked_domains(original + preset)
        except StorageError:
            await self._store.set(keys.FOCUS_MODE, FocusSession().to_dict())
            raise
        await self._arm(session.end_time)
        closed = await self._blocking.close_tabs_for(preset)
        logger.info("Focus mode started for %d minutes (%d tabs closed)", minutes, closed)
        return session

    async def stop(self, reason: str = "user") -> bool:
        """End the running session; False if none was active."""
        session = await self.session()
        try:
            await self._host.clear_alarm(FOCUS_ALARM)
        except HostError as e:
            logger.warning("Could not cancel focus alarm: %s", e)
        if not session.active:
            return False

        await self._blocking.replace_blocked_domains(session.original_blocked_domains)
        session.active = False
        await self._store.set(keys.FOCUS_MODE, session.to_dict())
        logger.info("Focus mode stopped (%s)", reason)

        if reason != "user":
            try:
                await self._host.notify(
                    Notification(
                        notification_id="focus-ended",
                        title="Focus session complete",
                        message=f"Your {session.duration_minutes}-minute focus session has ended.",
                        kind="focus-ended",
                    )
                )
            except HostError as e:
                logger.warning("Could not show focus notification: %s", e)
        return True

    async def status(self) -> dict:
        session = await self.session()
        now = self._clock()
        if session.active and session.end_time is not None and session.end_time <= now:
            # the wake-up never fired (e.g. the process was not running)
            await self.stop(reason="expired")
            session = await self.session()
        return {
            "active": session.active,
            "startTime": session.start_time if session.active else None,
            "endTime": session.end_time if session.active else None,
            "remaining": session.remaining(now),
            "blockedDomains": list(session.blocked_domains) if session.active else [],
        }

    async def on_alarm(self, name: str) -> bool:
        if name != FOCUS_ALARM:
            return False
        return await self.stop(reason="alarm")

    async def restore(self) -> None:
        """Re-arm the wake-up of a surviving session, or expire it."""
        session = await self.session()
        if not session.active or session.end_time is None:
            return
        if session.end_time <= self._clock():
            await self.stop(reason="expired")
        else:
            await self._arm(session.end_time)

    async def _arm(self, when_ms: int) -> None:
        try:
            await self._host.schedule_alarm(FOCUS_ALARM, when_ms)
        except HostError as e:
            logger.warning("Could not schedule focus alarm: %s", e)
