"""Period statistics over the visit log and domain aggregates."""

from smarttab.stats.periods import Period
from smarttab.stats.query import PeriodQueryEngine

__all__ = ["Period", "PeriodQueryEngine"]
