"""Constants and default values for redlock-exec.

This module centralizes all magic numbers, default configurations,
environment variable names and the storage-side scripts used throughout
the application.
"""

# ==================== LOCK DEFAULTS ====================

DEFAULT_TTL_SECONDS: int = 60  # Lease duration once acquired
DEFAULT_TIMEOUT_SECONDS: int = 60  # How long to keep trying to acquire
DEFAULT_RETRY_INTERVAL_SECONDS: float = 0.1  # Fixed pause between attempts

# ==================== STORAGE PROTOCOL ====================

# Deletes the key only while it still holds our token. Runs atomically on
# the server so a newer owner's key is never removed.
UNLOCK_SCRIPT: str = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

# ==================== ENVIRONMENT ====================

ENV_SERVERS = "REDLOCK_SERVERS"  # Comma-separated list of endpoints
ENV_LOCK_NAME = "REDLOCK_LOCK_NAME"
ENV_TTL = "REDLOCK_TTL"
ENV_TIMEOUT = "REDLOCK_TIMEOUT"
ENV_BACKEND = "REDLOCK_BACKEND"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_NO_COLOR = "NO_COLOR"

# ==================== LOGGING DEFAULTS ====================

LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB max per log file
LOG_FILE_BACKUP_COUNT: int = 5  # Number of backup log files to keep
VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
PACKAGE_LOGGER_NAME = "redlock_exec"

# ==================== EXIT CODES ====================

EXIT_SUCCESS: int = 0
EXIT_FAILURE: int = 1  # Lock not acquired, or any other runtime error
EXIT_USAGE: int = 2  # Invalid arguments
EXIT_COMMAND_NOT_STARTED: int = 127
EXIT_SIGNAL_BASE: int = 128  # Exit code for signal N is 128 + N

