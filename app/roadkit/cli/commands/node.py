"""Node inspection commands.

Provides commands to classify paths, list folders, show ancestors and
watch entries for changes.
"""

import json
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from roadkit.nodes.base import Road
from roadkit.nodes.errors import RoadError
from roadkit.nodes.file import File
from roadkit.nodes.folder import Folder
from roadkit.nodes.kinds import NodeKind, classify
from roadkit.nodes.link import SymbolicLink
from roadkit.utils.formatting import (
    console,
    create_node_table,
    format_kind,
    format_size,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Inspect filesystem entries as typed nodes.",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    """Output format options for listings."""

    TABLE = "table"
    JSON = "json"


PathArgument = Annotated[Path, typer.Argument(help="Path to inspect.")]


@app.command()
def kind(path: PathArgument) -> None:
    """Print the kind of the entry at PATH (symbolic links are not followed)."""
    try:
        console.print(format_kind(classify(path)))
    except (OSError, RoadError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.command()
def info(path: PathArgument) -> None:
    """Show metadata for the entry at PATH."""
    node = _load(path)

    table = Table(show_header=False, border_style="border")
    table.add_column("Field", style="bold_header")
    table.add_column("Value")

    table.add_row("Location", node.location)
    table.add_row("Kind", format_kind(node.kind()))
    table.add_row("Size", format_size(node.size_in_bytes()))
    table.add_row("Modified", node.modified_at().isoformat(timespec="seconds"))
    table.add_row("Depth", str(node.depth()))
    table.add_row("Mutable", "yes" if node.mutable else "no")
    table.add_row("Access", _access_flags(node))
    if isinstance(node, File):
        table.add_row("Extension", node.extension() or "-")
    if isinstance(node, SymbolicLink):
        table.add_row("Target", node.raw_target())

    console.print(table)


@app.command("ls")
def list_folder(
    path: Annotated[Path, typer.Argument(help="Folder to list.")] = Path("."),
    kind_filter: Annotated[
        NodeKind | None,
        typer.Option("--kind", "-k", help="Only show entries of this kind.", case_sensitive=False),
    ] = None,
    pattern: Annotated[
        str | None,
        typer.Option("--glob", "-g", help="Recursive glob relative to the folder."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TABLE,
) -> None:
    """List the entries of a folder, optionally filtered by kind."""
    folder = _load(path)
    if not isinstance(folder, Folder):
        print_error(f"Not a folder: {folder.location} ({folder.kind().value})")
        raise typer.Exit(code=1)

    try:
        entries = folder.walk(pattern) if pattern else folder.list()
    except (OSError, RoadError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    if kind_filter is not None:
        entries = [entry for entry in entries if entry.kind() is kind_filter]

    if output_format == OutputFormat.JSON:
        _print_json(folder, entries)
        return

    if not entries:
        print_info(f"No entries in {folder.location}")
        return

    table = create_node_table(folder.location)
    for entry in entries:
        st = entry.metadata()
        name = os.path.relpath(entry.location, folder.location)
        table.add_row(
            name,
            format_kind(entry.kind()),
            format_size(st.st_size),
            entry.modified_at().isoformat(timespec="seconds"),
        )
    console.print(table)
    console.print(f"\n[dim]{len(entries)} entries[/dim]")


@app.command()
def ancestors(path: PathArgument) -> None:
    """List the folders containing PATH, nearest first."""
    node = _load(path)
    for folder in node.ancestors():
        console.print(folder.location, soft_wrap=True, highlight=False)


@app.command()
def watch(
    path: PathArgument,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Stop after this many seconds."),
    ] = None,
    count: Annotated[
        int | None,
        typer.Option("--count", "-n", help="Stop after this many changes."),
    ] = None,
) -> None:
    """Print a line for every change to PATH until interrupted."""
    node = _load(path)
    stop = threading.Event()
    seen = 0

    def on_change() -> None:
        nonlocal seen
        seen += 1
        console.print(f"[info]changed[/] {node.location} [dim]#{seen}[/dim]")
        if count is not None and seen >= count:
            stop.set()

    timer = threading.Timer(timeout, stop.set) if timeout is not None else None
    if timer is not None:
        timer.daemon = True
        timer.start()
    try:
        node.watch(stop, on_change)
    except KeyboardInterrupt:
        stop.set()
    finally:
        if timer is not None:
            timer.cancel()

    print_success(f"Observed {seen} change(s).")


# === Private helper functions ===


def _load(path: Path) -> Road:
    """Build the node for PATH or exit with an error."""
    try:
        return Road.factory(path)
    except (OSError, RoadError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _access_flags(node: Road) -> str:
    flags = [
        ("r", os.R_OK),
        ("w", os.W_OK),
        ("x", os.X_OK),
    ]
    return "".join(flag if node.is_accessible(mode) else "-" for flag, mode in flags)


def _print_json(folder: Folder, entries: list[Road]) -> None:
    """Print entries as JSON."""
    data = {
        "folder": folder.location,
        "entries": [
            {
                "name": entry.name(),
                "path": entry.location,
                "kind": entry.kind().value,
                "size_bytes": entry.size_in_bytes(),
            }
            for entry in entries
        ],
    }
    console.print_json(json.dumps(data))
