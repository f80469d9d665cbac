"""Custom exceptions for the policy_list_store package."""

from __future__ import annotations


class AdapterError(Exception):
    """Base exception for all adapter errors."""


class ConfigError(AdapterError):
    """Raised when the adapter configuration is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid adapter configuration: {message}")


class BackendConnectionError(AdapterError):
    """Raised when the backend session cannot be opened or fails its probe."""

    def __init__(self, network: str, address: str, detail: str = "") -> None:
        self.network = network
        self.address = address
        msg = f"Cannot connect to backend at {network}://{address}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class AdapterClosedError(AdapterError):
    """Raised when an operation is attempted outside the open state."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot run '{operation}': adapter is not open")


class NotFoundError(AdapterError):
    """Raised when the backing list key does not exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key '{key}' not found")


class SerializationError(AdapterError):
    """Raised when a stored record cannot be decoded."""

    def __init__(self, value: str, detail: str = "") -> None:
        self.value = value
        msg = f"Malformed rule record {value!r}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class UnsupportedOperationError(AdapterError):
    """Raised for operations this adapter deliberately does not implement."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Operation '{operation}' is not supported")


class StoreError(AdapterError):
    """Raised when a store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
