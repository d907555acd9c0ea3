"""Per-tab, per-domain activity tracking and usage policy engine."""

from smarttab.commands import Action, CommandRouter
from smarttab.config import EngineConfig
from smarttab.engine import Engine, build_engine
from smarttab.service import SmartTabService

__version__ = "0.1.0"

__all__ = [
    "Action",
    "CommandRouter",
    "Engine",
    "EngineConfig",
    "SmartTabService",
    "build_engine",
    "__version__",
]
