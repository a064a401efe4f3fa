"""CLI argument parsing."""

from __future__ import annotations

import argparse
import os

from redlock_exec.core.constants import (
    DEFAULT_RETRY_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TTL_SECONDS,
    ENV_LOCK_NAME,
    ENV_LOG_LEVEL,
    ENV_SERVERS,
    ENV_TIMEOUT,
    ENV_TTL,
    VALID_LOG_LEVELS,
)
from redlock_exec.core.version import __version__

# Attempt to load argcomplete for shell tab-completion (optional dependency)
_ARGCOMPLETE_AVAILABLE = False
try:
    import argcomplete

    _ARGCOMPLETE_AVAILABLE = True
except ImportError:
    pass  # argcomplete not installed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got '{value}'") from None
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return parsed


def _non_negative_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got '{value}'") from None
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"cannot be negative, got {value}")
    return parsed


def _env_servers() -> list[str] | None:
    raw = os.environ.get(ENV_SERVERS, "")
    servers = [part.strip() for part in raw.split(",") if part.strip()]
    return servers or None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (environment variables supply defaults)."""
    parser = argparse.ArgumentParser(
        prog="redlock-exec",
        description="Execute a command when holding a distributed lock",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Run a nightly job on exactly one host
  redlock-exec -s redis-a:6379 -s redis-b:6379 -s redis-c:6379 -l nightly-report ./report.sh

  # Give up after 10 seconds, keep the lock for at most 5 minutes
  redlock-exec -s redis-a:6379 -l deploy --timeout 10 --ttl 300 -- make deploy

  # Servers from the environment, exit with the command's own status
  {ENV_SERVERS}=redis-a:6379,redis-b:6379,redis-c:6379 \\
    redlock-exec -l migrate --propagate-exit-code -- alembic upgrade head

Exit codes:
  0    command executed while holding the lock
  1    lock not acquired within --timeout
  2    invalid arguments
  127  command could not be started
  128+N  interrupted by signal N
""",
    )

    lock_group = parser.add_argument_group("Lock")
    lock_group.add_argument(
        "-s",
        "--server",
        action="append",
        metavar="URL",
        help=f"Redis server used for the distributed lock (repeatable; host:port or redis:// URL). "
        f"Default: ${ENV_SERVERS}",
    )
    lock_group.add_argument(
        "-l",
        "--lock-name",
        default=os.environ.get(ENV_LOCK_NAME),
        help=f"Name of the lock to acquire. Default: ${ENV_LOCK_NAME}",
    )
    lock_group.add_argument(
        "-t",
        "--ttl",
        type=_positive_float,
        default=os.environ.get(ENV_TTL, str(DEFAULT_TTL_SECONDS)),
        metavar="SECONDS",
        help=f"Time in seconds after which the lock will expire (default: {DEFAULT_TTL_SECONDS})",
    )
    lock_group.add_argument(
        "--timeout",
        type=_non_negative_float,
        default=os.environ.get(ENV_TIMEOUT, str(DEFAULT_TIMEOUT_SECONDS)),
        metavar="SECONDS",
        help=f"Time in seconds to try to acquire the lock (default: {DEFAULT_TIMEOUT_SECONDS})",
    )
    lock_group.add_argument(
        "--retry-interval",
        type=_non_negative_float,
        default=DEFAULT_RETRY_INTERVAL_SECONDS,
        metavar="SECONDS",
        help=f"Pause between acquisition attempts (default: {DEFAULT_RETRY_INTERVAL_SECONDS})",
    )

    storage_group = parser.add_argument_group("Storage connections")
    storage_group.add_argument(
        "--connect-timeout",
        type=_positive_float,
        default=1.0,
        metavar="SECONDS",
        help="Per-server connection timeout (default: 1.0)",
    )
    storage_group.add_argument(
        "--socket-timeout",
        type=_positive_float,
        default=1.0,
        metavar="SECONDS",
        help="Per-server command timeout (default: 1.0)",
    )

    run_group = parser.add_argument_group("Command")
    run_group.add_argument(
        "--propagate-exit-code",
        action="store_true",
        help="Exit with the command's exit status instead of 0",
    )
    run_group.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command with arguments to execute",
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    output_group.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        default=os.environ.get(ENV_LOG_LEVEL, "WARNING").upper(),
        help="Console log level (default: WARNING, or $LOG_LEVEL)",
    )
    output_group.add_argument(
        "--log-format",
        choices=("text", "json"),
        default="text",
        help="Log output format (default: text)",
    )
    output_group.add_argument("--log-file", metavar="PATH", help="Also write logs to a rotating file")
    output_group.add_argument("--no-color", action="store_true", help="Disable colored output")
    output_group.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments"""
    parser = build_parser()

    # Enable shell tab-completion if argcomplete is installed
    if _ARGCOMPLETE_AVAILABLE:
        argcomplete.autocomplete(parser)

    args = parser.parse_args(argv)
    if not args.server:
        args.server = _env_servers()
    if not args.server:
        parser.error(f"the following arguments are required: -s/--server (or set ${ENV_SERVERS})")
    if not args.lock_name:
        parser.error(f"the following arguments are required: -l/--lock-name (or set ${ENV_LOCK_NAME})")
    return args
