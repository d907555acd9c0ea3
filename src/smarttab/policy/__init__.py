"""Blocking, daily limits and focus sessions over one shared block list."""

from smarttab.policy.attempts import BlockedAttemptLog
from smarttab.policy.blocking import BlockingPolicy, require_domain
from smarttab.policy.focus import FOCUS_ALARM, FocusModeController
from smarttab.policy.limits import DomainLimitPolicy, evaluate_limit
from smarttab.policy.models import DomainLimit, FocusSession, LimitState

__all__ = [
    "BlockedAttemptLog",
    "BlockingPolicy",
    "DomainLimit",
    "DomainLimitPolicy",
    "FOCUS_ALARM",
    "FocusModeController",
    "FocusSession",
    "LimitState",
    "evaluate_limit",
    "require_domain",
]
