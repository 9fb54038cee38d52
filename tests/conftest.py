"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from roadkit.core.settings import RoadkitSettings, set_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory: pytest.TempPathFactory) -> Iterator[RoadkitSettings]:
    """Keep config lookups and temporary entries out of the user's directories.

    Both live outside ``tmp_path`` so tests can list ``tmp_path`` freely.
    """
    scratch = tmp_path_factory.mktemp("scratch")
    xdg = tmp_path_factory.mktemp("xdg")
    settings = RoadkitSettings(temp_dir=scratch, watch_poll_interval=0.02)
    with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(xdg)}):
        set_settings(settings)
        yield settings
    set_settings(None)


@pytest.fixture
def scratch_dir(isolated_settings: RoadkitSettings) -> Path:
    """Directory that TempFile/TempFolder entries are created in."""
    return isolated_settings.temp_dir


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Small tree with two files, one subfolder and a link.

    Layout::

        tree/
            a.txt        "alpha"
            b.bin        b"\\x00\\x01\\x02"
            sub/
                c.txt    "gamma"
            link -> a.txt
    """
    root = tmp_path / "tree"
    root.mkdir()
    (root / "a.txt").write_text("alpha")
    (root / "b.bin").write_bytes(b"\x00\x01\x02")
    (root / "sub").mkdir()
    (root / "sub" / "c.txt").write_text("gamma")
    (root / "link").symlink_to("a.txt")
    return root
