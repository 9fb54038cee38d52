"""Settings commands.

Provides commands to show the active settings and write a settings file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from roadkit.core.paths import ensure_config_dir, get_settings_path
from roadkit.core.settings import (
    RoadkitSettings,
    SettingsError,
    SettingsNotFoundError,
    load_settings,
    save_settings,
)
from roadkit.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize roadkit settings.",
    no_args_is_help=True,
)

SettingsPathOption = Annotated[
    Path | None,
    typer.Option("--path", "-p", help="Settings file (default: ~/.config/roadkit/config.toml)."),
]


@app.command()
def show(path: SettingsPathOption = None) -> None:
    """Show the effective settings."""
    settings_path = path or get_settings_path()
    try:
        settings = load_settings(settings_path)
        source = str(settings_path)
    except SettingsNotFoundError:
        settings = RoadkitSettings()
        source = "defaults"
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(title=f"Settings ({source})", border_style="border", header_style="bold_header")
    table.add_column("Key")
    table.add_column("Value")
    for key, value in settings.model_dump(mode="json").items():
        table.add_row(key, str(value))
    console.print(table)


@app.command()
def init(
    path: SettingsPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with default values."""
    if path is None:
        try:
            ensure_config_dir()
        except RuntimeError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
    settings_path = path or get_settings_path()
    if settings_path.exists() and not force:
        print_info(f"Settings already exist at {settings_path} (use --force to overwrite).")
        raise typer.Exit(code=0)

    try:
        written = save_settings(RoadkitSettings(), settings_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {written}")
