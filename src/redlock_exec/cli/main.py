"""CLI entrypoint."""

from __future__ import annotations

import logging
import signal
import sys
from typing import NoReturn

from redlock_exec.cli.parser import parse_arguments
from redlock_exec.core.colors import ConsoleColors
from redlock_exec.core.config import RunConfig
from redlock_exec.core.constants import (
    EXIT_COMMAND_NOT_STARTED,
    EXIT_FAILURE,
    EXIT_SIGNAL_BASE,
    EXIT_SUCCESS,
    EXIT_USAGE,
)
from redlock_exec.core.exceptions import CommandError, ConfigurationError, RedlockExecError
from redlock_exec.core.locks import HeldLock, LockManager, acquire_lock
from redlock_exec.core.logging import flush_logging_handlers, redact_url, setup_logging
from redlock_exec.runner import run_guarded_command

# Attempt to load python-dotenv if available (optional dependency)
_DOTENV_AVAILABLE = False
try:
    from dotenv import load_dotenv

    _DOTENV_AVAILABLE = True
except ImportError:
    pass  # python-dotenv not installed

logger = logging.getLogger(__name__)


def _print_error(error: Exception | str) -> None:
    """Print an error to stderr with a red "error:" prefix."""
    print(f"{ConsoleColors.error('error:')} {error}", file=sys.stderr)


def _main_impl(argv: list[str] | None = None) -> int:
    if _DOTENV_AVAILABLE:
        load_dotenv()  # .env in the working directory supplies REDLOCK_* defaults

    args = parse_arguments(argv)
    config = RunConfig.from_args(args)
    ConsoleColors.configure(no_color=config.no_color)

    try:
        config.validate()
    except ConfigurationError as e:
        _print_error(e)
        return EXIT_USAGE

    setup_logging(config.log)

    if not config.command:
        logger.debug("no command given; nothing to run")
        return EXIT_SUCCESS

    logger.debug(
        "lock %s on %s (ttl=%gs, timeout=%gs)",
        config.lock_name,
        ", ".join(redact_url(s) for s in config.servers),
        config.ttl_seconds,
        config.timeout_seconds,
    )

    manager = LockManager(storage_config=config.storage)
    try:
        handle = acquire_lock(
            manager,
            config.servers,
            config.lock_name,
            config.ttl_seconds,
            config.timeout_seconds,
            retry_interval_seconds=config.retry_interval_seconds,
        )
        with HeldLock(manager, handle) as held:
            result = run_guarded_command(config.command, held)
    except CommandError as e:
        _print_error(e)
        return EXIT_COMMAND_NOT_STARTED
    except RedlockExecError as e:
        _print_error(e)
        return EXIT_FAILURE

    return result.exit_status(config.propagate_exit_code)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the script"""
    try:
        exit_code = _main_impl(argv)
    except KeyboardInterrupt:
        # Interrupted while acquiring; the attempt removed its own keys.
        exit_code = EXIT_SIGNAL_BASE + signal.SIGINT
    finally:
        flush_logging_handlers()
    sys.exit(exit_code)
