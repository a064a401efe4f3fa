"""Console colors for redlock-exec.

Provides ANSI color codes for terminal output with auto-detection
of TTY support. All tool output goes to stderr so the guarded command
keeps stdout to itself; detection therefore looks at stderr.
"""

import os
import sys

from redlock_exec.core.constants import ENV_NO_COLOR


def _stderr_supports_color() -> bool:
    return sys.stderr.isatty() and (os.name != 'nt' or bool(os.environ.get('TERM')))


class ConsoleColors:
    """ANSI color codes for terminal output.

    Auto-detects TTY support and honours the NO_COLOR convention.
    """
    RED = '\033[91m'
    RESET = '\033[0m'

    _enabled = _stderr_supports_color()

    @classmethod
    def configure(cls, no_color: bool = False) -> None:
        """Apply the global color policy (flag, NO_COLOR env var, TTY detection)."""
        if no_color or os.environ.get(ENV_NO_COLOR):
            cls._enabled = False
            return
        cls._enabled = _stderr_supports_color()

    @classmethod
    def is_enabled(cls) -> bool:
        """Check if colors are enabled."""
        return cls._enabled

    @classmethod
    def error(cls, text: str) -> str:
        """Format text as error (red)"""
        if cls._enabled:
            return f"{cls.RED}{text}{cls.RESET}"
        return text

