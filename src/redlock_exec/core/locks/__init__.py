"""Redlock subsystem for cross-process, cross-host mutual exclusion.

This package centralizes quorum acquisition and owner-checked release
behind a storage backend abstraction so the CLI and runner can use a
stable API.
"""

from redlock_exec.core.locks.acquire import AcquisitionState, acquire_lock
from redlock_exec.core.locks.backends import (
    RedisStorageBackend,
    StorageBackend,
    create_storage_backend,
)
from redlock_exec.core.locks.manager import HeldLock, LockHandle, LockManager, quorum

__all__ = [
    "AcquisitionState",
    "HeldLock",
    "LockHandle",
    "LockManager",
    "RedisStorageBackend",
    "StorageBackend",
    "acquire_lock",
    "create_storage_backend",
    "quorum",
]
