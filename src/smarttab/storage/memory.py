"""In-process store backend."""

from __future__ import annotations

import copy
from typing import Any

from smarttab.storage.base import BaseStore


class MemoryStore(BaseStore):
    """Dict-backed store; values are deep-copied on the way in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    async def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()

    async def items(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)
