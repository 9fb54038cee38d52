"""Filesystem locations used by roadkit itself.

Configuration follows the XDG base directory layout
(``$XDG_CONFIG_HOME/roadkit``, falling back to ``~/.config/roadkit``).
Temporary nodes default to the platform temporary directory.
"""

import os
import tempfile
from pathlib import Path

APP_NAME = "roadkit"


def _xdg_home(env_var: str, fallback: str) -> Path:
    """Return ``$env_var/roadkit``, or ``~/<fallback>/roadkit`` if unset or empty."""
    base = os.environ.get(env_var)
    root = Path(base) if base else Path.home() / fallback
    return root / APP_NAME


def get_config_dir() -> Path:
    return _xdg_home("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Location of ``config.toml`` (see :mod:`roadkit.core.settings`)."""
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Location of the optional ``theme.toml`` colour overrides."""
    return get_config_dir() / "theme.toml"


def get_default_temp_dir() -> Path:
    """Absolute path of the platform temporary directory."""
    return Path(tempfile.gettempdir()).absolute()


def ensure_config_dir() -> Path:
    """Create the configuration directory (and parents) if needed.

    Returns:
        The configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_config_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create config directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create config directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
