"""ConnectionManager — owns the one backend session an adapter uses."""

from __future__ import annotations

import logging
from types import TracebackType

from policy_list_store.config import AdapterConfig
from policy_list_store.exceptions import AdapterClosedError, BackendConnectionError
from policy_list_store.stores import InMemoryListStore, ListStore, RedisListStore

logger = logging.getLogger(__name__)


def create_store(config: AdapterConfig) -> ListStore:
    """Build an unopened store for ``config.network``."""
    if config.network == "memory":
        return InMemoryListStore()
    return RedisListStore.from_config(config)


class ConnectionManager:
    """Opens one session eagerly, probes it, and releases it exactly once.

    Lifecycle: ``closed`` -> ``open`` -> ``closed``.  The final closed
    state is terminal; a manager cannot be reopened.  There is no retry,
    pooling, or reconnect.

    Parameters:
        config: Connection settings.
        store:  Optional pre-built store to use instead of creating one
                from *config*.  Useful for testing.
    """

    def __init__(self, config: AdapterConfig, store: ListStore | None = None) -> None:
        self._config = config
        self._injected_store = store
        self._store: ListStore | None = None
        self._closed = False

    @property
    def config(self) -> AdapterConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._store is not None

    @property
    def store(self) -> ListStore:
        if self._store is None:
            raise AdapterClosedError("store")
        return self._store

    async def open(self) -> ListStore:
        """Create the session and verify it with a ping.

        On probe failure the half-opened session is closed before
        :class:`BackendConnectionError` is raised.  Cancellation during the
        probe also closes the session and then propagates unchanged.
        """
        if self._closed:
            raise AdapterClosedError("open")
        if self._store is not None:
            return self._store

        cfg = self._config
        store = self._injected_store or create_store(cfg)
        try:
            try:
                await store.ping()
            except Exception as exc:
                logger.error("Backend probe failed for %s://%s: %s", cfg.network, cfg.address, exc)
                raise BackendConnectionError(cfg.network, cfg.address, str(exc)) from exc
        except BaseException:
            await self._release(store)
            raise

        self._store = store
        logger.info("Opened %s session to %s (key=%s)", cfg.network, cfg.address, cfg.key)
        return store

    async def close(self) -> None:
        """Release the session.  Safe to call more than once."""
        self._closed = True
        store, self._store = self._store, None
        if store is None:
            return
        await store.close()
        logger.info("Closed %s session to %s", self._config.network, self._config.address)

    async def _release(self, store: ListStore) -> None:
        self._closed = True
        try:
            await store.close()
        except Exception:
            logger.warning("Error closing store after failed probe", exc_info=True)

    async def __aenter__(self) -> ConnectionManager:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
