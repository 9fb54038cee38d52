"""Device, pipe and socket nodes.

These entries can be listed and inspected but never modified through
this library: every positional operation raises
UnsupportedOperationError, and the instances are frozen once built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn

from roadkit.nodes.base import PathArg, Road
from roadkit.nodes.errors import UnsupportedOperationError
from roadkit.nodes.kinds import NodeKind

if TYPE_CHECKING:
    from roadkit.nodes.folder import Folder


class UnusableRoad(Road):
    """Base class for entries that must not be manipulated."""

    mutable = False

    def __init__(self, path: PathArg) -> None:
        super().__init__(path)
        object.__setattr__(self, "_frozen", True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            msg = f"{type(self).__name__} at '{self.location}' is frozen"
            raise AttributeError(msg)
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} at '{self.location}' is frozen"
        raise AttributeError(msg)

    def _reject(self, operation: str) -> NoReturn:
        raise UnsupportedOperationError(operation, type(self).__name__, self.location)

    def delete(self) -> NoReturn:
        self._reject("delete")

    def move_into(self, folder: Folder) -> NoReturn:
        self._reject("move")

    def copy_into(self, folder: Folder) -> NoReturn:
        self._reject("copy")

    def rename_to(self, new_name: str) -> NoReturn:
        self._reject("rename")


class BlockDevice(UnusableRoad, kind=NodeKind.BLOCK_DEVICE):
    """A block device (e.g. ``/dev/sda``)."""


class CharacterDevice(UnusableRoad, kind=NodeKind.CHARACTER_DEVICE):
    """A character device (e.g. ``/dev/null``)."""


class Fifo(UnusableRoad, kind=NodeKind.FIFO):
    """A named pipe."""


class Socket(UnusableRoad, kind=NodeKind.SOCKET):
    """A Unix domain socket."""
