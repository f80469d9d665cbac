"""Adapter configuration with documented defaults and named overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator

from policy_list_store.exceptions import ConfigError

DEFAULT_KEY = "casbin_rules"
ENV_PREFIX = "POLICY_STORE_"


class AdapterConfig(BaseModel):
    """Connection settings for one adapter instance.

    Attributes:
        network:  Transport kind: ``"tcp"``, ``"unix"``, or ``"memory"``
                  (an in-process list store for development and testing).
        address:  ``host:port`` for tcp, a socket path for unix.  Ignored
                  for memory.
        key:      Name of the backing list.
        password: Backend credential.  Empty means no authentication.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    network: Literal["tcp", "unix", "memory"] = "tcp"
    address: str = "127.0.0.1:6379"
    key: str = DEFAULT_KEY
    password: SecretStr = SecretStr("")

    @field_validator("key")
    @classmethod
    def _key_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("key must not be empty")
        return value

    # ── construction ─────────────────────────────────────────

    @classmethod
    def from_options(cls, **options: Any) -> AdapterConfig:
        """Build a config from the defaults plus named overrides."""
        return cls().with_options(**options)

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> AdapterConfig:
        """Read ``<prefix>NETWORK``, ``ADDRESS``, ``KEY`` and ``PASSWORD``.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        options = {
            name: env[prefix + name.upper()]
            for name in cls.model_fields
            if prefix + name.upper() in env
        }
        return cls.from_options(**options)

    def with_options(self, **options: Any) -> AdapterConfig:
        """Return a copy with *options* applied as field overrides.

        Recognized options: ``address``, ``password``, ``network``, ``key``.
        """
        unknown = sorted(set(options) - set(type(self).model_fields))
        if unknown:
            raise ConfigError(f"unknown option(s): {', '.join(unknown)}")
        try:
            return type(self).model_validate({**self.model_dump(), **options})
        except ValidationError as exc:
            # Field messages only; raw input values may include the password.
            detail = "; ".join(
                f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()
            )
            raise ConfigError(detail) from exc

    # ── helpers ──────────────────────────────────────────────

    def host_port(self) -> tuple[str, int]:
        """Split a tcp ``address`` into host and port."""
        host, sep, port = self.address.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ConfigError(f"address must be 'host:port', got {self.address!r}")
        return host.strip("[]"), int(port)
