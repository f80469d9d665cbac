"""policy_list_store — persist authorization rules in a remote list.

Rules are grouped by section (``p`` permissions, ``g`` groupings) and by
rule-type tag.  Each rule is stored as one fixed-field JSON record in a
single backing list, so an engine can load its rule set at startup and
record incremental adds and removes.
"""

from policy_list_store.adapter import PolicyAdapter
from policy_list_store.config import AdapterConfig
from policy_list_store.connection import ConnectionManager
from policy_list_store.exceptions import (
    AdapterClosedError,
    AdapterError,
    BackendConnectionError,
    ConfigError,
    NotFoundError,
    SerializationError,
    StoreError,
    UnsupportedOperationError,
)
from policy_list_store.model import PolicyModel
from policy_list_store.record import RuleRecord, decode_record, encode_rule

__all__ = [
    "AdapterClosedError",
    "AdapterConfig",
    "AdapterError",
    "BackendConnectionError",
    "ConfigError",
    "ConnectionManager",
    "NotFoundError",
    "PolicyAdapter",
    "PolicyModel",
    "RuleRecord",
    "SerializationError",
    "StoreError",
    "UnsupportedOperationError",
    "decode_record",
    "encode_rule",
]
