"""Abstract base class for key/value store backends."""

from __future__ import annotations

import asyncio
import copy
from abc import ABC, abstractmethod
from typing import Any, Callable


class BaseStore(ABC):
    """Asynchronous key/value store over JSON-compatible values.

    Backends expose plain get/set/remove/clear with no atomicity. Callers that
    need read-modify-write go through :meth:`update`, which serializes every
    update on this store instance.
    """

    def __init__(self) -> None:
        self._update_lock = asyncio.Lock()

    @abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Delete every key."""
        ...

    @abstractmethod
    async def items(self) -> dict[str, Any]:
        """Snapshot of the whole namespace."""
        ...

    async def set_many(self, values: dict[str, Any]) -> None:
        for key, value in values.items():
            await self.set(key, value)

    async def update(
        self,
        key: str,
        mutate: Callable[[Any], Any],
        default: Any = None,
    ) -> Any:
        """Apply ``mutate`` to the current value and write the result back.

        ``mutate`` receives a private copy (or ``default`` when the key is
        absent) and returns the new value, which is also returned here.
        """
        async with self._update_lock:
            current = await self.get(key)
            if current is None:
                current = copy.deepcopy(default)
            updated = mutate(current)
            await self.set(key, updated)
            return updated
