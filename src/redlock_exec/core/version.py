"""Version information for redlock-exec."""

__version__ = "0.3.0"
