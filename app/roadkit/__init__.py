"""roadkit - typed filesystem nodes.

Wraps files, folders, symbolic links and special entries in classes that
know their own kind, with blocking and asyncio forms of every operation.
"""

from roadkit.nodes import (
    BlockDevice,
    CharacterDevice,
    Fifo,
    File,
    Folder,
    ImmutableError,
    LiveFile,
    NodeKind,
    Road,
    RoadError,
    Socket,
    SymbolicLink,
    TempFile,
    TempFolder,
    TypeMismatchError,
    UnknownKindError,
    UnsupportedOperationError,
    classify,
)

__version__ = "0.1.0"

__all__ = [
    "BlockDevice",
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
    "__version__",
    "classify",
]
