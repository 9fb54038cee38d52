"""Typed filesystem nodes.

This package wraps filesystem entries in classes matching their on-disk
kind, with a factory that picks the right class for any path, plus
temporary and auto-reloading variants.
"""

from roadkit.nodes.base import Road
from roadkit.nodes.errors import (
    ImmutableError,
    RoadError,
    TypeMismatchError,
    UnknownKindError,
    UnsupportedOperationError,
)
from roadkit.nodes.file import File
from roadkit.nodes.folder import Folder
from roadkit.nodes.kinds import NodeKind, classify, classify_async
from roadkit.nodes.link import SymbolicLink
from roadkit.nodes.live import LiveFile
from roadkit.nodes.special import BlockDevice, CharacterDevice, Fifo, Socket, UnusableRoad
from roadkit.nodes.temp import TempFile, TempFolder
from roadkit.nodes.watch import (
    AsyncChangeSubscription,
    ChangeSubscription,
    aiter_changes,
    iter_changes,
)

__all__ = [
    "AsyncChangeSubscription",
    "BlockDevice",
    "ChangeSubscription",
    "CharacterDevice",
    "Fifo",
    "File",
    "Folder",
    "ImmutableError",
    "LiveFile",
    "NodeKind",
    "Road",
    "RoadError",
    "Socket",
    "SymbolicLink",
    "TempFile",
    "TempFolder",
    "TypeMismatchError",
    "UnknownKindError",
    "UnsupportedOperationError",
    "UnusableRoad",
    "aiter_changes",
    "classify",
    "classify_async",
    "iter_changes",
]
