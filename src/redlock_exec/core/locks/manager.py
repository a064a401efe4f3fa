"""Lock manager implementing quorum acquisition and owner-checked release."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from redlock_exec.core.config import StorageConfig
from redlock_exec.core.exceptions import StorageUnavailableError
from redlock_exec.core.locks.backends import StorageBackend, create_storage_backend
from redlock_exec.core.logging import redact_url, with_log_context


def quorum(instance_count: int) -> int:
    """Number of instances that must agree for a lock to be granted."""
    return instance_count // 2 + 1


@dataclass(frozen=True)
class LockHandle:
    """Proof of a successful quorum acquisition.

    Copies are equivalent: any copy may be passed to ``LockManager.release``
    and releasing more than once is harmless.

    ``acquired_at`` and ``valid_until`` are readings of the manager's
    monotonic clock. The lock can only be relied on before ``valid_until``.
    """

    servers: tuple[str, ...]
    name: str
    token: str
    acquired_at: float = field(default=0.0, compare=False)
    valid_until: float = field(default=0.0, compare=False)

    def remaining(self, now: float) -> float:
        """Seconds of validity left at monotonic time ``now`` (never negative)."""
        return max(0.0, self.valid_until - now)


class LockManager:
    """Redlock acquisition and release across independent storage instances."""

    def __init__(
        self,
        backend: StorageBackend | None = None,
        *,
        storage_config: StorageConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.backend = backend or create_storage_backend(config=storage_config)
        self.clock = clock

    def try_lock(self, servers: Sequence[str], lock_name: str, ttl_seconds: float) -> LockHandle | None:
        """Make one acquisition attempt against every instance.

        Args:
            servers: Storage instance references, tried in order
            lock_name: Key to lock
            ttl_seconds: Lease duration requested on each instance

        Returns:
            A LockHandle if a majority of instances granted the lock and the
            lease had not been used up by the time they did; otherwise None,
            after a best-effort release on every instance.
        """
        if not servers:
            raise ValueError("at least one storage instance is required")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        servers = tuple(servers)
        ttl_ms = max(1, round(ttl_seconds * 1000))
        # Judge validity by the lease the instances were actually given.
        lease_seconds = ttl_ms / 1000.0
        token = str(uuid.uuid4())
        log = with_log_context(self.logger, lock_name=lock_name, token=token)

        start = self.clock()
        locked = 0
        try:
            for server in servers:
                if self._lock_instance(server, lock_name, token, ttl_ms, log):
                    locked += 1
        except BaseException:
            # Interrupted mid-attempt: remove the keys already set before propagating.
            self._unlock_all(servers, lock_name, token, log)
            raise
        finished = self.clock()
        elapsed = finished - start

        needed = quorum(len(servers))
        if locked < needed or elapsed >= lease_seconds:
            if locked < needed:
                log.debug("Quorum not reached for %s (%d/%d, need %d)", lock_name, locked, len(servers), needed)
            else:
                log.debug("Lease for %s used up during acquisition (%.3fs >= %gs)", lock_name, elapsed, lease_seconds)
            self._unlock_all(servers, lock_name, token, log)
            return None

        log.debug("Acquired %s on %d/%d instances in %.3fs", lock_name, locked, len(servers), elapsed)
        return LockHandle(
            servers=servers,
            name=lock_name,
            token=token,
            acquired_at=finished,
            valid_until=start + lease_seconds,
        )

    def release(self, handle: LockHandle) -> int:
        """Release the lock on every instance that still holds this handle's token.

        Never raises for storage failures. Returns the number of instances
        where a key was actually deleted.
        """
        log = with_log_context(self.logger, lock_name=handle.name, token=handle.token)
        released = self._unlock_all(handle.servers, handle.name, handle.token, log)
        log.debug("Released %s on %d/%d instances", handle.name, released, len(handle.servers))
        return released

    def _lock_instance(
        self, server: str, lock_name: str, token: str, ttl_ms: int, log: logging.Logger | logging.LoggerAdapter
    ) -> bool:
        try:
            acquired = self.backend.set_if_absent(server, lock_name, token, ttl_ms)
        except StorageUnavailableError as e:
            log.debug("Cannot lock %s on %s: %s", lock_name, redact_url(server), e)
            return False
        if not acquired:
            log.debug("%s already held on %s", lock_name, redact_url(server))
        return acquired

    def _unlock_all(
        self, servers: Sequence[str], lock_name: str, token: str, log: logging.Logger | logging.LoggerAdapter
    ) -> int:
        released = 0
        for server in servers:
            try:
                if self.backend.delete_if_owner(server, lock_name, token):
                    released += 1
            except StorageUnavailableError as e:
                log.debug("Cannot unlock %s on %s: %s", lock_name, redact_url(server), e)
        return released


class HeldLock:
    """Scope guard that releases a held lock on every exit path.

    Usage:
        with HeldLock(manager, handle) as held:
            signal_handler = lambda *_: held.release()
            ...  # run the guarded work

    ``release`` may be called early (for example from a signal handler, or
    by the runner once the command exits); later calls, including the one on
    scope exit, do nothing.
    """

    def __init__(self, manager: LockManager, handle: LockHandle):
        self.manager = manager
        self.handle = handle
        self.released = False

    def __enter__(self) -> HeldLock:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def release(self) -> None:
        if self.released:
            return
        # Set first so a signal handler running mid-release does not repeat it.
        self.released = True
        self.manager.release(self.handle)

    def remaining(self) -> float:
        """Seconds of validity left on the lease."""
        return self.handle.remaining(self.manager.clock())

    def expired(self) -> bool:
        """True once the lease's validity window has passed."""
        return self.manager.clock() >= self.handle.valid_until
