"""
policy_list_store — Hello World

Rules live in one backing list, one JSON record per rule.
Load at startup, record changes as they happen, save to rewrite.

Runs against an in-process store by default.  Point it at Redis with:
    POLICY_STORE_NETWORK=tcp POLICY_STORE_ADDRESS=localhost:6379 python hello_world.py
"""

import asyncio
import logging
import os

from policy_list_store import AdapterConfig, PolicyAdapter, PolicyModel, UnsupportedOperationError


def show(title: str, model: PolicyModel) -> None:
    print(f"\n=== {title} ({len(model)} rules) ===")
    for sec, by_type in model.to_dict().items():
        for ptype, rules in by_type.items():
            for rule in rules:
                print(f"  [{sec}] {ptype}, {', '.join(rule)}")


async def main():
    logging.basicConfig(level=logging.INFO)

    # ──────────────────────────────────────
    #  1. Configure (defaults, then overrides)
    # ──────────────────────────────────────
    config = AdapterConfig.from_env()
    if "POLICY_STORE_NETWORK" not in os.environ:
        config = config.with_options(network="memory", key="hello_rules")

    async with PolicyAdapter(config) as adapter:
        # ──────────────────────────────────────
        #  2. Build a model and save it (full replace)
        # ──────────────────────────────────────
        model = PolicyModel()
        model.add_rule("p", "p", ["alice", "data1", "read"])
        model.add_rule("p", "p", ["bob", "data2", "write"])
        model.add_rule("p", "p", ["data2_admin", "data2", "read"])
        model.add_rule("g", "g", ["alice", "data2_admin"])
        await adapter.save_policy(model)

        # ──────────────────────────────────────
        #  3. Incremental changes
        # ──────────────────────────────────────
        await adapter.add_policy("p", "p", ["carol", "data3", "read"])
        await adapter.add_policies("g", "g", [["bob", "data2_admin"], ["carol", "auditors"]])
        await adapter.remove_policy("p", "p", ["bob", "data2", "write"])

        try:
            await adapter.remove_filtered_policy("p", "p", 0, "alice")
        except UnsupportedOperationError as e:
            print(f"  {e}")

        # ──────────────────────────────────────
        #  4. Load into a fresh model
        # ──────────────────────────────────────
        loaded = PolicyModel()
        await adapter.load_policy(loaded)
        show("Loaded", loaded)


if __name__ == "__main__":
    asyncio.run(main())
