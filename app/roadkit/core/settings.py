"""Library settings.

Settings are stored in ~/.config/roadkit/config.toml. Every field has a
default, so a missing file simply means default behaviour.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from roadkit.core.paths import get_default_temp_dir, get_settings_path

logger = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class RoadkitSettings(BaseModel):
    """Tunable settings for the node layer.

    Attributes:
        temp_dir: Parent directory for TempFile/TempFolder entries.
        temp_name_length: Length of the random suffix of temporary names.
        chunk_size: Default chunk size in bytes for chunked file reads.
        watch_poll_interval: Seconds between cancellation checks while a
            blocking watch waits for events.
        log_level: Log level used by the CLI.
    """

    model_config = ConfigDict(extra="forbid")

    temp_dir: Path = Field(
        default_factory=get_default_temp_dir,
        description="Directory holding temporary files and folders",
    )
    temp_name_length: Annotated[
        int,
        Field(ge=8, le=64, description="Random suffix length (8-64)"),
    ] = 16
    chunk_size: Annotated[
        int,
        Field(gt=0, description="Default chunk size in bytes"),
    ] = 1024
    watch_poll_interval: Annotated[
        float,
        Field(ge=0.01, le=5.0, description="Cancellation check interval in seconds"),
    ] = 0.1
    log_level: Annotated[
        LogLevel,
        Field(description="CLI log level"),
    ] = "WARNING"


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when the settings file is not found."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> RoadkitSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated RoadkitSettings object.

    Raises:
        SettingsNotFoundError: If the file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise SettingsNotFoundError(f"Settings not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return RoadkitSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: RoadkitSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written to a temporary sibling first and moved into place
    with os.replace().

    Args:
        settings: Settings to save.
        path: Destination. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(mode="json")

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


# Module-level cached settings instance
_cached_settings: RoadkitSettings | None = None


def get_settings() -> RoadkitSettings:
    """Get the active settings, loading and caching them on first use.

    A missing file yields defaults. A broken file is reported as a
    warning and also yields defaults, so library calls never fail on
    configuration.

    Returns:
        Cached RoadkitSettings instance.
    """
    global _cached_settings
    if _cached_settings is None:
        _cached_settings = _load_or_default()
    return _cached_settings


def reload_settings() -> RoadkitSettings:
    """Force reload the settings from disk.

    Returns:
        Newly loaded RoadkitSettings instance.
    """
    global _cached_settings
    _cached_settings = _load_or_default()
    return _cached_settings


def set_settings(settings: RoadkitSettings | None) -> None:
    """Replace the cached settings (None clears the cache)."""
    global _cached_settings
    _cached_settings = settings


def _load_or_default() -> RoadkitSettings:
    try:
        return load_settings()
    except SettingsNotFoundError:
        return RoadkitSettings()
    except SettingsError as e:
        logger.warning("Ignoring invalid settings, using defaults: %s", e)
        return RoadkitSettings()
