"""Core module - Foundation components.

This module provides the basic building blocks used throughout the application:
- Version information
- Custom exceptions
- Configuration dataclasses
- Constants and defaults
- Console colors
"""

from redlock_exec.core.version import __version__

from redlock_exec.core.exceptions import (
    RedlockExecError,
    ConfigurationError,
    StorageUnavailableError,
    LockAcquisitionTimeout,
    CommandError,
)

from redlock_exec.core.config import (
    StorageConfig,
    LogConfig,
    RunConfig,
    normalize_server_url,
)

from redlock_exec.core.constants import (
    DEFAULT_TTL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_RETRY_INTERVAL_SECONDS,
    UNLOCK_SCRIPT,
    LOG_FILE_MAX_BYTES,
    LOG_FILE_BACKUP_COUNT,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    EXIT_USAGE,
    EXIT_COMMAND_NOT_STARTED,
    EXIT_SIGNAL_BASE,
)

from redlock_exec.core.colors import ConsoleColors

__all__ = [
    # Version
    '__version__',
    # Exceptions
    'RedlockExecError',
    'ConfigurationError',
    'StorageUnavailableError',
    'LockAcquisitionTimeout',
    'CommandError',
    # Config dataclasses
    'StorageConfig',
    'LogConfig',
    'RunConfig',
    'normalize_server_url',
    # Constants
    'DEFAULT_TTL_SECONDS',
    'DEFAULT_TIMEOUT_SECONDS',
    'DEFAULT_RETRY_INTERVAL_SECONDS',
    'UNLOCK_SCRIPT',
    'LOG_FILE_MAX_BYTES',
    'LOG_FILE_BACKUP_COUNT',
    'EXIT_SUCCESS',
    'EXIT_FAILURE',
    'EXIT_USAGE',
    'EXIT_COMMAND_NOT_STARTED',
    'EXIT_SIGNAL_BASE',
    # Colors
    'ConsoleColors',
]
