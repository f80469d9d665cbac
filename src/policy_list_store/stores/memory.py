"""InMemoryListStore — zero-config, dict-backed list storage for development and testing."""

from __future__ import annotations

from collections.abc import Sequence

from policy_list_store.exceptions import NotFoundError
from policy_list_store.stores.base import ListStore


class InMemoryListStore(ListStore):
    """In-memory store using a dict of lists.  Data is lost on process exit.

    Like Redis, an emptied list is dropped, so its key no longer exists.
    """

    def __init__(self) -> None:
        self._data: dict[str, list[str | bytes]] = {}

    async def ping(self) -> None:
        return None

    async def length(self, key: str) -> int:
        if key not in self._data:
            raise NotFoundError(key)
        return len(self._data[key])

    async def range(self, key: str, start: int, stop: int) -> list[str | bytes]:
        items = self._data.get(key, [])
        n = len(items)
        if start < 0:
            start = max(n + start, 0)
        if stop < 0:
            stop = n + stop
        if stop < start:
            return []
        return list(items[start : stop + 1])

    async def push(self, key: str, values: Sequence[str | bytes]) -> None:
        if values:
            self._data.setdefault(key, []).extend(values)

    async def remove(self, key: str, value: str, count: int = 1) -> int:
        items = self._data.get(key, [])
        matches = [i for i, item in enumerate(items) if item == value]
        if count < 0:
            matches.reverse()
        doomed = set(matches[: abs(count)] if count else matches)
        if doomed:
            items[:] = [item for i, item in enumerate(items) if i not in doomed]
        if key in self._data and not items:
            del self._data[key]
        return len(doomed)

    async def replace(self, key: str, values: Sequence[str]) -> None:
        self._data.pop(key, None)
        await self.push(key, values)

    async def close(self) -> None:
        return None
