"""Shared test fixtures."""

import pytest

from policy_list_store import AdapterConfig, PolicyAdapter, PolicyModel
from policy_list_store.stores import InMemoryListStore


@pytest.fixture
def store():
    return InMemoryListStore()


@pytest.fixture
def config():
    return AdapterConfig(network="memory", key="test_rules")


@pytest.fixture
async def adapter(config, store):
    async with PolicyAdapter(config, store=store) as adapter:
        yield adapter


@pytest.fixture
def model():
    return PolicyModel()


@pytest.fixture
def rbac_model():
    model = PolicyModel()
    model.add_rule("p", "p", ["alice", "data1", "read"])
    model.add_rule("p", "p", ["bob", "data2", "write"])
    model.add_rule("p", "p", ["data2_admin", "data2", "read"])
    model.add_rule("g", "g", ["alice", "data2_admin"])
    return model
