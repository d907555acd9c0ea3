"""Construction of the engine components around one store and host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from smarttab.backup import DataBackup
from smarttab.config import EngineConfig
from smarttab.host import BrowserHost
from smarttab.policy import (
    BlockedAttemptLog,
    BlockingPolicy,
    DomainLimitPolicy,
    FocusModeController,
)
from smarttab.reminders import ReminderService
from smarttab.stats import PeriodQueryEngine
from smarttab.storage import BaseStore
from smarttab.tabs import TabOrganizer
from smarttab.timeutil import now_ms
from smarttab.tracking import TabActivityTracker, TimeLedger


@dataclass
class Engine:
    """Every component, sharing one store, host, config and clock.

    The tracker and the policy components never reference each other; the
    only link is the ledger's daily domain-time hook into the limit check.
    """

    store: BaseStore
    host: BrowserHost
    config: EngineConfig
    clock: Callable[[], int]
    ledger: TimeLedger
    tracker: TabActivityTracker
    query: PeriodQueryEngine
    blocking: BlockingPolicy
    attempts: BlockedAttemptLog
    limits: DomainLimitPolicy
    focus: FocusModeController
    reminders: ReminderService
    organizer: TabOrganizer
    backup: DataBackup


def build_engine(
    store: BaseStore,
    host: BrowserHost,
    config: EngineConfig | None = None,
    clock: Callable[[], int] = now_ms,
) -> Engine:
    config = config or EngineConfig()
    limits = DomainLimitPolicy(store, host, clock=clock)
    ledger = TimeLedger(store, config, on_domain_time=limits.check)
    blocking = BlockingPolicy(store, host, config, clock=clock)
    return Engine(
        store=store,
        host=host,
        config=config,
        clock=clock,
        ledger=ledger,
        tracker=TabActivityTracker(host, ledger, config, clock=clock),
        query=PeriodQueryEngine(store, config, clock=clock),
        blocking=blocking,
        attempts=BlockedAttemptLog(store, config, clock=clock),
        limits=limits,
        focus=FocusModeController(store, host, blocking, config, clock=clock),
        reminders=ReminderService(store, config, clock=clock),
        organizer=TabOrganizer(store, host, config),
        backup=DataBackup(store, clock=clock),
    )
