"""
redlock-exec - run a command while holding a Redlock distributed lock

A tool for guarding the execution of arbitrary commands with a lease-based
lock replicated across several independent Redis instances.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__all__ = ["__version__", "main"]

if TYPE_CHECKING:
    from redlock_exec.cli.main import main
    from redlock_exec.core.version import __version__


def __getattr__(name: str) -> Any:
    if name == "__version__":
        from redlock_exec.core.version import __version__

        return __version__
    if name == "main":
        from redlock_exec.cli.main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
