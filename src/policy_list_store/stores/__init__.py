"""Storage backends for the backing rule list."""

from policy_list_store.stores.base import ListStore
from policy_list_store.stores.memory import InMemoryListStore
from policy_list_store.stores.redis import RedisListStore

__all__ = ["InMemoryListStore", "ListStore", "RedisListStore"]
