"""Colour theme for the roadkit CLI.

The bundled ``data/theme.toml`` provides every colour; a user file at
~/.config/roadkit/theme.toml may override any subset of them. Node kinds
get their own styles (``kind.file``, ``kind.directory``, ``kind.symlink``
and ``kind.special`` for devices, pipes and sockets).
"""

import logging
import string
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError, ValidationInfo
from rich.theme import Theme

from roadkit.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)


def _check_hex(value: Any, info: ValidationInfo) -> str:
    """Accept ``#RGB`` or ``#RRGGBB`` strings, surrounding blanks stripped."""
    field = info.field_name
    if not isinstance(value, str):
        msg = f"{field}: color must be a string"
        raise ValueError(msg)
    color = value.strip()
    if not color.startswith("#"):
        msg = f"{field}: color must start with '#'"
        raise ValueError(msg)
    digits = color[1:]
    if len(digits) not in (3, 6):
        msg = f"{field}: color must be #RGB or #RRGGBB format"
        raise ValueError(msg)
    if not set(digits) <= set(string.hexdigits):
        msg = f"{field}: invalid hex color '{color}'"
        raise ValueError(msg)
    return color


HexColor = Annotated[str, BeforeValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Colours used by the CLI, one field per theme key."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    kind_file: HexColor = "#ffffff"
    kind_directory: HexColor = "#0e8ac8"
    kind_symlink: HexColor = "#69B9A1"
    kind_special: HexColor = "#d44ebc"


# Rich style name -> (prefix, ThemeColors field)
_STYLES: dict[str, tuple[str, str]] = {
    "text": ("", "text"),
    "muted": ("", "muted"),
    "dim": ("", "muted"),
    "header": ("", "header"),
    "bold_header": ("bold ", "header"),
    "border": ("", "border"),
    "success": ("", "success"),
    "warning": ("", "warning"),
    "error": ("bold ", "error"),
    "info": ("", "info"),
    "kind.file": ("", "kind_file"),
    "kind.directory": ("bold ", "kind_directory"),
    "kind.symlink": ("italic ", "kind_symlink"),
    "kind.special": ("", "kind_special"),
}


def get_bundled_theme_path() -> Path:
    """Path of the theme file shipped inside the package."""
    return Path(str(resources.files("roadkit.data").joinpath("theme.toml")))


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are skipped.

    Returns:
        Colour mapping, or None if the file is missing, unreadable or has
        no usable ``[colors]`` table.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse theme file %s: %s", path, e)
        return None
    except OSError as e:
        logger.warning("Failed to read theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return None
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Merge the user's overrides onto the bundled colours.

    An override file that fails validation is ignored as a whole and the
    defaults are used.
    """
    merged = _load_toml_colors(get_bundled_theme_path())
    if merged is None:
        logger.error("Bundled theme missing or unreadable: %s", get_bundled_theme_path())
        merged = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Applying theme overrides from %s", user_path)
        merged.update(overrides)

    try:
        return ThemeColors.model_validate(merged)
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for ``colors`` (loaded from disk if None)."""
    if colors is None:
        colors = load_theme()
    return Theme(
        {name: prefix + getattr(colors, field) for name, (prefix, field) in _STYLES.items()}
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the cached Rich theme, building it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme


def reload_theme() -> Theme:
    """Rebuild the cached Rich theme from disk."""
    global _cached_theme
    _cached_theme = get_rich_theme()
    return _cached_theme
