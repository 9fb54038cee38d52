"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.table import Table

from roadkit.core.theme import get_theme
from roadkit.nodes.kinds import NodeKind


def _detect_color_system() -> str | None:
    """Return "truecolor" for interactive terminals, None to let Rich decide."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())

KIND_STYLES: dict[NodeKind, str] = {
    NodeKind.FILE: "kind.file",
    NodeKind.DIRECTORY: "kind.directory",
    NodeKind.SYMLINK: "kind.symlink",
    NodeKind.BLOCK_DEVICE: "kind.special",
    NodeKind.CHARACTER_DEVICE: "kind.special",
    NodeKind.FIFO: "kind.special",
    NodeKind.SOCKET: "kind.special",
}


def format_kind(kind: NodeKind) -> str:
    """Return the kind name wrapped in its theme style."""
    style = KIND_STYLES[kind]
    return f"[{style}]{kind.value}[/]"


def format_size(size_bytes: int) -> str:
    """Format a byte count as a human-readable string.

    Args:
        size_bytes: Size in bytes.

    Returns:
        e.g. "512 B", "4.0 KB", "1.2 MB".
    """
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def create_node_table(title: str) -> Table:
    """Create a pre-configured table for listing nodes.

    Args:
        title: Table title.

    Returns:
        Rich Table with Name, Kind, Size and Modified columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Kind", width=16)
    table.add_column("Size", style="info", justify="right")
    table.add_column("Modified", style="muted")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
