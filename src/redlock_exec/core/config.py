"""Configuration dataclasses for redlock-exec.

These dataclasses centralize all configuration options for type safety
and easy testing. They can be created from command-line arguments or
used directly in code.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from redlock_exec.core.constants import (
    DEFAULT_RETRY_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TTL_SECONDS,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
)
from redlock_exec.core.exceptions import ConfigurationError

_KNOWN_SCHEMES = ("redis://", "rediss://", "unix://")


def normalize_server_url(server: str) -> str:
    """Turn a bare ``host:port`` endpoint into a Redis URL.

    Values that already carry a scheme are returned unchanged.

    Args:
        server: Endpoint as given on the command line or in the environment

    Returns:
        Redis connection URL (e.g., "redis://127.0.0.1:6379")
    """
    value = server.strip()
    if value.lower().startswith(_KNOWN_SCHEMES):
        return value
    return f"redis://{value}"


def _check_server_url(server: str) -> None:
    """Raise ConfigurationError if the URL's port cannot be used."""
    try:
        urlsplit(server).port
    except ValueError as e:
        # The URL stays out of the message; it may carry a password.
        raise ConfigurationError("invalid server address", field="servers", details=str(e)) from e


@dataclass
class StorageConfig:
    """Configuration for per-instance Redis connections.

    Attributes:
        connect_timeout: Seconds to wait for a TCP connection (default: 1.0)
        socket_timeout: Seconds to wait for a command reply (default: 1.0)
    """

    connect_timeout: float = 1.0
    socket_timeout: float = 1.0


@dataclass
class LogConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Console logging level string (default: "WARNING")
        format: "text" or "json" (default: "text")
        file: Optional path of a rotating log file
        file_max_bytes: Maximum size per log file (default: 10MB)
        file_backup_count: Number of backup log files (default: 5)
        verbose: Enable DEBUG output for the redlock_exec loggers
    """

    level: str = "WARNING"
    format: str = "text"
    file: str | None = None
    file_max_bytes: int = LOG_FILE_MAX_BYTES
    file_backup_count: int = LOG_FILE_BACKUP_COUNT
    verbose: bool = False


@dataclass
class RunConfig:
    """Master configuration for one guarded command run.

    Attributes:
        servers: Redis URLs of the independent storage instances
        lock_name: Name of the lock key
        ttl_seconds: Lease duration of the lock once acquired
        timeout_seconds: How long to keep trying to acquire the lock
        retry_interval_seconds: Fixed pause between acquisition attempts
        command: Command and arguments to execute while holding the lock
        storage: Per-instance connection settings
        log: Logging configuration
        propagate_exit_code: Exit with the command's status instead of 0
        no_color: Disable ANSI colors in error output
    """

    servers: list[str] = field(default_factory=list)
    lock_name: str = ""
    ttl_seconds: float = DEFAULT_TTL_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retry_interval_seconds: float = DEFAULT_RETRY_INTERVAL_SECONDS
    command: list[str] = field(default_factory=list)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log: LogConfig = field(default_factory=LogConfig)
    propagate_exit_code: bool = False
    no_color: bool = False

    @property
    def ttl_ms(self) -> int:
        return round(self.ttl_seconds * 1000)

    def validate(self) -> None:
        """Raise ConfigurationError if any value is out of range."""
        if not self.servers:
            raise ConfigurationError("at least one server is required", field="servers")
        for server in self.servers:
            _check_server_url(server)
        if not self.lock_name:
            raise ConfigurationError("lock name must not be empty", field="lock_name")
        if self.ttl_seconds <= 0:
            raise ConfigurationError("--ttl must be positive", field="ttl_seconds", details=str(self.ttl_seconds))
        if self.ttl_ms < 1:
            raise ConfigurationError("--ttl must be at least one millisecond", field="ttl_seconds")
        if self.timeout_seconds < 0:
            raise ConfigurationError(
                "--timeout cannot be negative", field="timeout_seconds", details=str(self.timeout_seconds)
            )
        if self.retry_interval_seconds < 0:
            raise ConfigurationError("--retry-interval cannot be negative", field="retry_interval_seconds")
        if self.storage.connect_timeout <= 0 or self.storage.socket_timeout <= 0:
            raise ConfigurationError("connection timeouts must be positive", field="storage")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> RunConfig:
        """Create configuration from parsed command-line arguments."""
        command = list(getattr(args, "command", None) or [])
        if command and command[0] == "--":
            command = command[1:]
        return cls(
            servers=[normalize_server_url(s) for s in getattr(args, "server", None) or [] if s.strip()],
            lock_name=getattr(args, "lock_name", "") or "",
            ttl_seconds=getattr(args, "ttl", DEFAULT_TTL_SECONDS),
            timeout_seconds=getattr(args, "timeout", DEFAULT_TIMEOUT_SECONDS),
            retry_interval_seconds=getattr(args, "retry_interval", DEFAULT_RETRY_INTERVAL_SECONDS),
            command=command,
            storage=StorageConfig(
                connect_timeout=getattr(args, "connect_timeout", 1.0),
                socket_timeout=getattr(args, "socket_timeout", 1.0),
            ),
            log=LogConfig(
                level=getattr(args, "log_level", "WARNING"),
                format=getattr(args, "log_format", "text"),
                file=getattr(args, "log_file", None),
                verbose=getattr(args, "verbose", False),
            ),
            propagate_exit_code=getattr(args, "propagate_exit_code", False),
            no_color=getattr(args, "no_color", False),
        )
