"""PolicyAdapter — load, save, add and remove rules in one backing list.

Each rule is stored as one JSON-encoded :class:`RuleRecord` in the list at
``config.key``.  The adapter owns that key exclusively.

The adapter is not safe for unsynchronized concurrent use.  Calls have no
timeout and are never retried; wrap them in ``asyncio.timeout`` if you need
a deadline.  Two operations span more than one backend call and are not
atomic against other writers:

* :meth:`PolicyAdapter.load_policy` reads the length, then the range, so a
  concurrent write in between can give a stale or short view.
* :meth:`PolicyAdapter.remove_policies` removes rules one at a time.  If a
  removal fails, earlier removals stay applied and the error propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType
from typing import Any

from policy_list_store.config import AdapterConfig
from policy_list_store.connection import ConnectionManager
from policy_list_store.exceptions import NotFoundError, UnsupportedOperationError
from policy_list_store.model import SECTIONS, PolicyModel
from policy_list_store.record import decode_record, dumps_rule, loads_record
from policy_list_store.stores.base import ListStore

logger = logging.getLogger(__name__)


class PolicyAdapter:
    """Persists a :class:`PolicyModel` to a list-structured backend.

    Parameters:
        config: Connection settings.  Defaults to :class:`AdapterConfig`
                defaults (local Redis, key ``"casbin_rules"``).
        store:  Optional pre-built list store, bypassing store creation.

    The adapter starts closed.  Open it with ``async with adapter:`` (which
    guarantees the session is released on every exit path) or build an
    already-open one with :meth:`create`.

    Example:
        async with PolicyAdapter.from_options(address="redis:6379") as adapter:
            model = PolicyModel()
            await adapter.load_policy(model)
    """

    def __init__(self, config: AdapterConfig | None = None, *, store: ListStore | None = None) -> None:
        self._config = config or AdapterConfig()
        self._connection = ConnectionManager(self._config, store=store)

    # ── construction ─────────────────────────────────────────

    @classmethod
    async def create(
        cls, config: AdapterConfig | None = None, *, store: ListStore | None = None
    ) -> PolicyAdapter:
        """Build and open an adapter.  Raises ``BackendConnectionError``."""
        adapter = cls(config, store=store)
        await adapter.open()
        return adapter

    @classmethod
    async def connect(
        cls,
        network: str,
        address: str,
        *,
        key: str | None = None,
        password: str = "",
    ) -> PolicyAdapter:
        """Open an adapter from positional transport and address."""
        options: dict[str, Any] = {"network": network, "address": address, "password": password}
        if key is not None:
            options["key"] = key
        return await cls.create(AdapterConfig.from_options(**options))

    @classmethod
    def from_options(cls, **options: Any) -> PolicyAdapter:
        """Build a closed adapter from named option overrides.

        Recognized options: ``address``, ``password``, ``network``, ``key``.
        """
        return cls(AdapterConfig.from_options(**options))

    # ── lifecycle ────────────────────────────────────────────

    @property
    def config(self) -> AdapterConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._connection.is_open

    async def open(self) -> None:
        await self._connection.open()

    async def close(self) -> None:
        await self._connection.close()

    async def __aenter__(self) -> PolicyAdapter:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ── persistence ──────────────────────────────────────────

    async def load_policy(self, model: PolicyModel) -> None:
        """Append every stored rule to *model*.

        A missing key loads nothing.  A malformed element raises
        ``SerializationError``.
        """
        store, key = self._connection.store, self._config.key
        try:
            n = await store.length(key)
        except NotFoundError:
            logger.debug("Key %s does not exist, nothing to load", key)
            return

        values = await store.range(key, 0, n - 1)
        # Decode everything first so a bad element leaves the model untouched.
        lines = [decode_record(loads_record(value)) for value in values]
        for line in lines:
            model.load_policy_line(line)
        logger.debug("Loaded %d rules from %s", len(lines), key)

    async def save_policy(self, model: PolicyModel) -> None:
        """Replace the stored list with every rule in *model*.

        Rules are written ``p`` section first, then ``g``, each in model
        iteration order.  An empty model clears the list.
        """
        store = self._connection.store
        records = [
            dumps_rule(ptype, rule) for sec in SECTIONS for ptype, rule in model.iter_rules(sec)
        ]
        await store.replace(self._config.key, records)
        logger.debug("Saved %d rules to %s", len(records), self._config.key)

    async def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        """Append one rule to the end of the list."""
        store = self._connection.store
        await store.push(self._config.key, [dumps_rule(ptype, rule)])

    async def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        """Remove the first stored copy of the rule.  No-op if absent."""
        store = self._connection.store
        removed = await store.remove(self._config.key, dumps_rule(ptype, rule), 1)
        if not removed:
            logger.debug("Rule %s %r not stored, nothing removed", ptype, list(rule))

    async def add_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> None:
        """Append all *rules* in one batched call."""
        store = self._connection.store
        records = [dumps_rule(ptype, rule) for rule in rules]
        await store.push(self._config.key, records)
        logger.debug("Added %d %s rules to %s", len(records), ptype, self._config.key)

    async def remove_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> None:
        """Remove each rule in turn.

        Not atomic: on failure the removals already done are kept and the
        first error propagates.
        """
        store = self._connection.store
        records = [dumps_rule(ptype, rule) for rule in rules]
        for done, record in enumerate(records):
            try:
                await store.remove(self._config.key, record, 1)
            except Exception:
                logger.warning(
                    "remove_policies failed after %d of %d removals; earlier removals are kept",
                    done,
                    len(records),
                )
                raise

    async def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> None:
        """Not supported.  Always raises ``UnsupportedOperationError``."""
        raise UnsupportedOperationError("remove_filtered_policy")
