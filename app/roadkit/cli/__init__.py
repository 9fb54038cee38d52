"""CLI package for roadkit.

This package contains the Typer application and all subcommands.
"""

from roadkit.cli.main import app

__all__ = ["app"]
