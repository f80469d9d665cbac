"""ListStore protocol — the ordered-list primitives the adapter is built on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class ListStore(ABC):
    """Abstract base for all list backends.

    A store holds ordered lists of strings addressed by key.  It knows
    nothing about rules; the adapter hands it already-encoded records.
    Every method is a single backend round trip.
    """

    @abstractmethod
    async def ping(self) -> None:
        """Verify the session is alive.  Raise on failure."""
        ...

    @abstractmethod
    async def length(self, key: str) -> int:
        """Return the list length.  Raise ``NotFoundError`` if *key* does not exist."""
        ...

    @abstractmethod
    async def range(self, key: str, start: int, stop: int) -> list[str | bytes]:
        """Return elements ``start`` through ``stop`` inclusive.

        Negative indexes count from the tail, so ``(0, -1)`` is the whole
        list.  Elements come back as stored; Redis returns raw bytes.
        """
        ...

    @abstractmethod
    async def push(self, key: str, values: Sequence[str]) -> None:
        """Append *values* to the tail.  No-op for an empty sequence."""
        ...

    @abstractmethod
    async def remove(self, key: str, value: str, count: int = 1) -> int:
        """Remove elements equal to *value* and return how many went.

        ``count > 0`` removes the first *count* matches from the head,
        ``count < 0`` the first ``-count`` matches from the tail, and
        ``count == 0`` every match.
        """
        ...

    @abstractmethod
    async def replace(self, key: str, values: Sequence[str]) -> None:
        """Clear the list and append *values* in one step."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying session."""
        ...
