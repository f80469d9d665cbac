"""Tests for PolicyAdapter — persistence operations end to end on the memory store."""

from unittest.mock import AsyncMock

import pytest

from policy_list_store import (
    AdapterClosedError,
    AdapterConfig,
    BackendConnectionError,
    PolicyAdapter,
    PolicyModel,
    SerializationError,
    StoreError,
    UnsupportedOperationError,
)
from policy_list_store.record import dumps_rule


async def stored(store, key="test_rules"):
    return await store.range(key, 0, 1000)


async def reload(adapter):
    model = PolicyModel()
    await adapter.load_policy(model)
    return model


# ── load ─────────────────────────────────────────────────────


async def test_load_missing_key_is_empty(adapter, model):
    await adapter.load_policy(model)
    assert len(model) == 0


async def test_load_decodes_and_routes(adapter, store):
    await store.push(
        "test_rules",
        [
            dumps_rule("p", ["alice", "data1", "read"]),
            dumps_rule("g", ["alice", "admin"]),
            dumps_rule("g2", ["data1", "group1"]),
        ],
    )
    model = await reload(adapter)
    assert model.to_dict() == {
        "p": {"p": [["alice", "data1", "read"]]},
        "g": {"g": [["alice", "admin"]], "g2": [["data1", "group1"]]},
    }


async def test_load_appends_to_existing_model(adapter, model):
    model.add_rule("p", "p", ["bob", "data2", "write"])
    await adapter.add_policy("p", "p", ["alice", "data1", "read"])
    await adapter.load_policy(model)
    assert model.get_rules("p", "p") == [["bob", "data2", "write"], ["alice", "data1", "read"]]


async def test_load_malformed_record_raises(adapter, store, model):
    await store.push("test_rules", [dumps_rule("p", ["alice", "data1", "read"]), "{broken"])
    with pytest.raises(SerializationError):
        await adapter.load_policy(model)
    assert len(model) == 0


# ── add / remove ─────────────────────────────────────────────


async def test_add_then_load(adapter):
    await adapter.add_policy("p", "p", ["alice", "data1", "read"])
    model = await reload(adapter)
    assert model.to_dict() == {"p": {"p": [["alice", "data1", "read"]]}, "g": {}}


async def test_add_appends_to_tail(adapter, store):
    await adapter.add_policy("p", "p", ["alice", "data1", "read"])
    await adapter.add_policy("g", "g", ["alice", "admin"])
    assert await stored(store) == [
        dumps_rule("p", ["alice", "data1", "read"]),
        dumps_rule("g", ["alice", "admin"]),
    ]


async def test_remove_drops_one_duplicate(adapter):
    rule = ["alice", "data1", "read"]
    await adapter.add_policy("p", "p", rule)
    await adapter.add_policy("p", "p", rule)
    await adapter.remove_policy("p", "p", rule)
    assert (await reload(adapter)).get_rules("p", "p") == [rule]


async def test_remove_absent_is_noop(adapter, store):
    await adapter.add_policy("p", "p", ["alice", "data1", "read"])
    await adapter.remove_policy("p", "p", ["bob", "data2", "write"])
    assert len(await stored(store)) == 1


async def test_remove_matches_tag(adapter):
    await adapter.add_policy("g", "g", ["alice", "admin"])
    await adapter.remove_policy("g", "g2", ["alice", "admin"])
    assert (await reload(adapter)).get_rules("g", "g") == [["alice", "admin"]]


async def test_add_policies_single_batch(config):
    store = AsyncMock()
    async with PolicyAdapter(config, store=store) as adapter:
        await adapter.add_policies("p", "p", [["alice", "data1", "read"], ["bob", "data2", "write"]])
    store.push.assert_awaited_once_with(
        "test_rules",
        [dumps_rule("p", ["alice", "data1", "read"]), dumps_rule("p", ["bob", "data2", "write"])],
    )


async def test_add_and_remove_policies(adapter):
    rules = [["alice", "data1", "read"], ["bob", "data2", "write"], ["carol", "data3", "read"]]
    await adapter.add_policies("p", "p", rules)
    await adapter.remove_policies("p", "p", [rules[0], rules[2]])
    assert (await reload(adapter)).get_rules("p", "p") == [rules[1]]


async def test_remove_policies_partial_failure_keeps_earlier_removals(adapter, store, caplog):
    rules = [["alice", "data1", "read"], ["bob", "data2", "write"], ["carol", "data3", "read"]]
    await adapter.add_policies("p", "p", rules)

    real_remove = store.remove
    calls = 0

    async def flaky_remove(key, value, count=1):
        nonlocal calls
        calls += 1
        if calls == 2:
            raise StoreError("remove", "connection reset")
        return await real_remove(key, value, count)

    store.remove = flaky_remove
    with pytest.raises(StoreError, match="connection reset"):
        await adapter.remove_policies("p", "p", rules)

    assert calls == 2
    assert (await reload(adapter)).get_rules("p", "p") == rules[1:]
    assert "after 1 of 3 removals" in caplog.text


# ── save ─────────────────────────────────────────────────────


async def test_save_then_load_round_trip(adapter, rbac_model):
    await adapter.save_policy(rbac_model)
    assert (await reload(adapter)).to_dict() == rbac_model.to_dict()


async def test_save_replaces_previous_contents(adapter, store, rbac_model):
    await adapter.add_policy("p", "p", ["stale", "data9", "read"])
    await adapter.save_policy(rbac_model)
    await adapter.save_policy(rbac_model)
    assert len(await stored(store)) == len(rbac_model)
    assert not (await reload(adapter)).has_rule("p", "p", ["stale", "data9", "read"])


async def test_save_writes_p_before_g(adapter, store):
    model = PolicyModel()
    model.add_rule("g", "g", ["alice", "admin"])
    model.add_rule("p", "p", ["admin", "data1", "read"])
    model.add_rule("p", "p2", ["bob", "data2"])
    await adapter.save_policy(model)
    assert await stored(store) == [
        dumps_rule("p", ["admin", "data1", "read"]),
        dumps_rule("p2", ["bob", "data2"]),
        dumps_rule("g", ["alice", "admin"]),
    ]


async def test_save_empty_model_clears(adapter, model):
    await adapter.add_policy("p", "p", ["alice", "data1", "read"])
    await adapter.save_policy(model)
    assert len(await reload(adapter)) == 0


async def test_save_truncates_long_rules(adapter, model):
    model.add_rule("p", "p", ["a", "b", "c", "d", "e", "f", "g"])
    await adapter.save_policy(model)
    assert (await reload(adapter)).get_rules("p", "p") == [["a", "b", "c", "d", "e", "f"]]


# ── unsupported ──────────────────────────────────────────────


async def test_remove_filtered_policy_unsupported(adapter, store):
    await adapter.add_policy("p", "p", ["alice", "data1", "read"])
    with pytest.raises(UnsupportedOperationError):
        await adapter.remove_filtered_policy("p", "p", 0, "alice")
    with pytest.raises(UnsupportedOperationError):
        await adapter.remove_filtered_policy("g", "g", 1)
    assert len(await stored(store)) == 1


# ── lifecycle ────────────────────────────────────────────────


async def test_operations_require_open(config, model):
    adapter = PolicyAdapter(config)
    with pytest.raises(AdapterClosedError):
        await adapter.load_policy(model)
    with pytest.raises(AdapterClosedError):
        await adapter.add_policy("p", "p", ["alice"])


async def test_operations_fail_after_close(config, model):
    adapter = await PolicyAdapter.create(config)
    assert adapter.is_open
    await adapter.close()
    with pytest.raises(AdapterClosedError):
        await adapter.save_policy(model)


async def test_create_raises_on_probe_failure(config):
    store = AsyncMock()
    store.ping.side_effect = StoreError("ping", "Connection refused")
    with pytest.raises(BackendConnectionError):
        await PolicyAdapter.create(config, store=store)
    store.close.assert_awaited_once()


async def test_from_options_builds_closed_adapter():
    adapter = PolicyAdapter.from_options(network="memory", key="rules")
    assert adapter.config == AdapterConfig(network="memory", key="rules")
    assert not adapter.is_open


async def test_connect_opens_memory_adapter():
    adapter = await PolicyAdapter.connect("memory", "", key="rules")
    try:
        await adapter.add_policy("p", "p", ["alice", "data1", "read"])
        assert len(await reload(adapter)) == 1
    finally:
        await adapter.close()


def test_default_key():
    assert PolicyAdapter().config.key == "casbin_rules"


async def test_load_invalid_utf8_record_raises(adapter, store, model):
    await store.push("test_rules", [b'{"ptype":"p","v0":"\xff"}'])
    with pytest.raises(SerializationError):
        await adapter.load_policy(model)
    assert len(model) == 0
