"""Run an external command while holding a lock.

The command inherits stdin/stdout/stderr. The lock is released when the
command finishes, when it cannot be started, and as soon as SIGINT or
SIGTERM reaches this process.
"""

from __future__ import annotations

import logging
import signal
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass

from redlock_exec.core.constants import EXIT_SIGNAL_BASE, EXIT_SUCCESS
from redlock_exec.core.exceptions import CommandError
from redlock_exec.core.locks.manager import HeldLock

logger = logging.getLogger(__name__)

HANDLED_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


@dataclass
class CommandResult:
    """Outcome of a guarded command.

    Attributes:
        returncode: Child exit status as reported by subprocess (negative for signals)
        interrupted_by: Signal number that interrupted this process, if any
        lease_expired: Whether the lock's validity window ended before the command did
    """

    returncode: int
    interrupted_by: int | None = None
    lease_expired: bool = False

    def exit_status(self, propagate: bool = False) -> int:
        """Process exit code for this result."""
        if self.interrupted_by is not None:
            return EXIT_SIGNAL_BASE + self.interrupted_by
        if not propagate:
            return EXIT_SUCCESS
        if self.returncode < 0:
            return EXIT_SIGNAL_BASE - self.returncode
        return self.returncode


def _install_handlers(handler) -> dict[int, object] | None:
    if threading.current_thread() is not threading.main_thread():
        # signal.signal only works in the main thread; rely on scope exit.
        return None
    return {signum: signal.signal(signum, handler) for signum in HANDLED_SIGNALS}


def _restore_handlers(previous: dict[int, object] | None) -> None:
    if not previous:
        return
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def run_guarded_command(command: Sequence[str], held: HeldLock) -> CommandResult:
    """Execute ``command`` while ``held`` is in force and release the lock afterwards.

    The command is not started if a signal arrives before it is spawned. A
    signal that arrives while it is being spawned is passed on to it once
    it exists.

    Args:
        command: Executable followed by its arguments
        held: Scope guard of the lock acquired for this run

    Returns:
        CommandResult with the child's status.

    Raises:
        CommandError: If the command cannot be started. The lock is released first.
    """
    argv = list(command)
    handle = held.handle
    process: subprocess.Popen | None = None
    interrupted: list[int] = []
    pending: list[int] = []

    def _on_signal(signum, frame) -> None:
        interrupted.append(signum)
        held.release()
        logger.debug("unlocked %s on signal %d", handle.name, signum)
        if process is None:
            pending.append(signum)
        # A terminal SIGINT already reaches the child's process group.
        elif signum == signal.SIGTERM and process.poll() is None:
            process.send_signal(signum)

    previous = _install_handlers(_on_signal)
    try:
        if interrupted:
            logger.debug("interrupted before starting %s; not running it", argv[0])
            returncode = -interrupted[0]
        else:
            try:
                process = subprocess.Popen(argv)
            except OSError as e:
                raise CommandError(
                    f"cannot run command '{argv[0]}'", command=argv, details=e.strerror or str(e), original_error=e
                ) from e
            if pending and process.poll() is None:
                process.send_signal(pending[0])
            logger.debug("started %s with %.3fs left on lock %s", argv[0], held.remaining(), handle.name)
            returncode = process.wait()
        lease_expired = held.expired()
    finally:
        _restore_handlers(previous)
        held.release()

    logger.debug("command finished with status %d", returncode)
    if lease_expired and not interrupted:
        logger.warning(
            "lease on lock %s expired before the command finished; another process may have taken the lock",
            handle.name,
        )
    return CommandResult(
        returncode=returncode,
        interrupted_by=interrupted[0] if interrupted else None,
        lease_expired=lease_expired,
    )
