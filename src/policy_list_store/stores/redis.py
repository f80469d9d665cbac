"""RedisListStore — list storage on a single Redis session using redis.asyncio."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import RedisError

from policy_list_store.exceptions import NotFoundError, StoreError
from policy_list_store.stores.base import ListStore

if TYPE_CHECKING:
    from policy_list_store.config import AdapterConfig


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except RedisError as exc:
        raise StoreError(operation, str(exc)) from exc


class RedisListStore(ListStore):
    """Persistent list store backed by one Redis connection.

    Parameters:
        client: A ``redis.asyncio.Redis`` client.  Use :meth:`from_config`
                to build one with a single connection and no retries.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: AdapterConfig) -> RedisListStore:
        kwargs: dict[str, object] = {
            "password": config.password.get_secret_value() or None,
            "decode_responses": False,
            "single_connection_client": True,
            "retry": Retry(NoBackoff(), 0),
        }
        if config.network == "unix":
            kwargs["unix_socket_path"] = config.address
        else:
            host, port = config.host_port()
            kwargs["host"] = host
            kwargs["port"] = port
        return cls(redis.Redis(**kwargs))

    async def ping(self) -> None:
        with _translate_errors("ping"):
            await self._client.ping()

    async def length(self, key: str) -> int:
        with _translate_errors("length"):
            n = int(await self._client.llen(key))
        # Redis drops empty lists, so zero length means the key is absent.
        if n == 0:
            raise NotFoundError(key)
        return n

    async def range(self, key: str, start: int, stop: int) -> list[str | bytes]:
        with _translate_errors("range"):
            return list(await self._client.lrange(key, start, stop))

    async def push(self, key: str, values: Sequence[str]) -> None:
        if not values:
            return
        with _translate_errors("push"):
            await self._client.rpush(key, *values)

    async def remove(self, key: str, value: str, count: int = 1) -> int:
        with _translate_errors("remove"):
            return int(await self._client.lrem(key, count, value.encode("utf-8")))

    async def replace(self, key: str, values: Sequence[str]) -> None:
        with _translate_errors("replace"):
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                if values:
                    pipe.rpush(key, *values)
                await pipe.execute()

    async def close(self) -> None:
        with _translate_errors("close"):
            await self._client.aclose()
