"""CLI commands for roadkit.

This package contains all subcommand implementations.
"""

from roadkit.cli.commands import config, node

__all__ = ["config", "node"]
