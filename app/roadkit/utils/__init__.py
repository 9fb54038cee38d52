"""Utility modules for roadkit.

``roadkit.utils.formatting`` holds the Rich consoles and is imported
directly by the CLI, not re-exported here.
"""

from roadkit.utils.ids import ALPHANUMERIC, random_alnum

__all__ = ["ALPHANUMERIC", "random_alnum"]
