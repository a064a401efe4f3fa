"""CLI module - Command-line interface components."""

from redlock_exec.cli.main import main
from redlock_exec.cli.parser import build_parser, parse_arguments

__all__ = [
    "build_parser",
    "main",
    "parse_arguments",
]
