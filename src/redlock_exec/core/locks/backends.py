"""Storage backend implementations.

Design principles:
- Each storage instance is independent; nothing is replicated between them.
- Every operation is a single atomic command or server-side script, so there
  is never a check-then-act window on the client.
- Backends raise StorageUnavailableError for transport/protocol failures and
  leave the quorum decision to the lock manager.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

import redis

from redlock_exec.core.config import StorageConfig
from redlock_exec.core.constants import ENV_BACKEND, UNLOCK_SCRIPT
from redlock_exec.core.exceptions import StorageUnavailableError
from redlock_exec.core.logging import redact_url

_TRANSPORT_ERRORS = (redis.RedisError, OSError)


class StorageBackend(Protocol):
    """Per-instance lock storage protocol."""

    name: str

    def set_if_absent(self, server: str, key: str, token: str, ttl_ms: int) -> bool:
        """Set key to token with a ttl_ms expiry only if key is absent. True if set."""

    def delete_if_owner(self, server: str, key: str, token: str) -> bool:
        """Delete key only if it currently holds token. True if deleted."""


class RedisStorageBackend:
    """Redis backend using ``SET NX PX`` and an owner-checked delete script.

    No connection outlives an operation: every call opens a client for the
    given URL, issues one command, and closes the client again.
    """

    name = "redis"

    def __init__(self, config: StorageConfig | None = None):
        self.config = config or StorageConfig()

    def _connect(self, server: str) -> redis.Redis:
        return redis.Redis.from_url(
            server,
            socket_connect_timeout=self.config.connect_timeout,
            socket_timeout=self.config.socket_timeout,
        )

    def set_if_absent(self, server: str, key: str, token: str, ttl_ms: int) -> bool:
        try:
            with self._connect(server) as client:
                result = client.set(key, token, nx=True, px=ttl_ms)
        except _TRANSPORT_ERRORS as e:
            raise StorageUnavailableError(redact_url(server), "SET NX", e) from e
        return bool(result)

    def delete_if_owner(self, server: str, key: str, token: str) -> bool:
        try:
            with self._connect(server) as client:
                unlock = client.register_script(UNLOCK_SCRIPT)
                result = unlock(keys=[key], args=[token])
        except _TRANSPORT_ERRORS as e:
            raise StorageUnavailableError(redact_url(server), "unlock script", e) from e
        return result == 1


def create_storage_backend(
    backend_name: str | None = None,
    *,
    config: StorageConfig | None = None,
    logger: logging.Logger | None = None,
) -> StorageBackend:
    """Create storage backend from explicit value or environment override."""
    log = logger or logging.getLogger(__name__)
    requested = (backend_name or os.environ.get(ENV_BACKEND, "redis")).strip().lower()

    if requested != "redis":
        log.warning("Unknown storage backend '%s'; falling back to redis", requested)
    return RedisStorageBackend(config)
