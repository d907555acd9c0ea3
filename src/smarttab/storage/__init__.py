"""Key/value store backends with abstract base."""

from smarttab.storage import keys
from smarttab.storage.base import BaseStore
from smarttab.storage.memory import MemoryStore
from smarttab.storage.sqlite import SQLiteStore

__all__ = [
    "keys",
    "BaseStore",
    "MemoryStore",
    "SQLiteStore",
]
