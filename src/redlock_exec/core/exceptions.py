"""Custom exceptions for redlock-exec.

All exception classes are designed to provide clear, actionable error messages
with context about what went wrong.
"""


class RedlockExecError(Exception):
    """Base exception for all redlock-exec errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(RedlockExecError):
    """Exception raised for configuration-related errors.

    Examples:
        - Empty server list
        - Non-positive TTL or timeout
        - Unparseable value in an environment variable
    """

    def __init__(self, message: str, field: str | None = None, details: str | None = None):
        self.field = field
        super().__init__(message, details)


class StorageUnavailableError(OSError):
    """Raised when a single storage instance cannot be reached or answers with an error.

    Never escapes the lock manager: an unavailable instance simply does not
    count toward the quorum.
    """

    def __init__(self, server: str, operation: str, original_error: Exception | None = None):
        self.server = server
        self.operation = operation
        self.original_error = original_error
        message = f"{operation} failed on {server}"
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message)


class LockAcquisitionTimeout(RedlockExecError):
    """Exception raised when the lock could not be acquired before the timeout.

    Attributes:
        lock_name: Name of the lock that was requested
        timeout_seconds: Configured acquisition timeout
    """

    def __init__(self, lock_name: str, timeout_seconds: float):
        self.lock_name = lock_name
        self.timeout_seconds = timeout_seconds
        super().__init__(f"failed to acquire lock {lock_name} in {timeout_seconds:g} sec")


class CommandError(RedlockExecError):
    """Exception raised when the guarded command cannot be started.

    Examples:
        - Executable not found
        - Permission denied
    """

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.command = command
        self.original_error = original_error
        super().__init__(message, details)
