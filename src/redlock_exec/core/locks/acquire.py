"""Bounded retry loop around single acquisition attempts."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from enum import Enum

from redlock_exec.core.constants import DEFAULT_RETRY_INTERVAL_SECONDS
from redlock_exec.core.exceptions import LockAcquisitionTimeout
from redlock_exec.core.locks.manager import LockHandle, LockManager

logger = logging.getLogger(__name__)


class AcquisitionState(Enum):
    """States of the acquisition loop."""

    WAITING = "waiting"  # About to make an attempt
    RETRY = "retry"  # Attempt failed, sleeping before the next one
    ACQUIRED = "acquired"  # Terminal: quorum reached within the lease
    FAILED = "failed"  # Terminal: timeout elapsed


def acquire_lock(
    manager: LockManager,
    servers: Sequence[str],
    lock_name: str,
    ttl_seconds: float,
    timeout_seconds: float,
    *,
    retry_interval_seconds: float = DEFAULT_RETRY_INTERVAL_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> LockHandle:
    """Retry ``manager.try_lock`` at a fixed interval until it succeeds or time runs out.

    The timeout bounds how long we wait to become the holder; ``ttl_seconds``
    is passed through unchanged and bounds how long the holder may keep the
    lock. A running attempt is never cut short: the deadline is checked only
    between attempts.

    Args:
        manager: Lock manager performing the individual attempts
        servers: Storage instance references
        lock_name: Key to lock
        ttl_seconds: Lease duration for each attempt
        timeout_seconds: Overall acquisition deadline
        retry_interval_seconds: Constant pause between failed attempts
        sleep: Sleep function (injectable for tests)

    Returns:
        The LockHandle of the first successful attempt.

    Raises:
        LockAcquisitionTimeout: If no attempt succeeded before the deadline.
    """
    start = manager.clock()
    attempt = 0
    state = AcquisitionState.WAITING

    while manager.clock() - start < timeout_seconds:
        attempt += 1
        logger.debug("trying to lock %s (attempt %d, state=%s)", lock_name, attempt, state.value)
        handle = manager.try_lock(servers, lock_name, ttl_seconds)
        if handle is not None:
            state = AcquisitionState.ACQUIRED
            logger.debug("lock %s %s after %d attempt(s)", lock_name, state.value, attempt)
            return handle

        state = AcquisitionState.RETRY
        sleep(retry_interval_seconds)

    state = AcquisitionState.FAILED
    logger.debug("lock %s %s after %d attempt(s)", lock_name, state.value, attempt)
    raise LockAcquisitionTimeout(lock_name, timeout_seconds)
