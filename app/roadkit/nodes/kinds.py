"""Classification of filesystem entries by their mode bits.

The kind of an entry is never cached: every call looks at the current
on-disk metadata (without following symbolic links).
"""

import asyncio
import os
import stat
from enum import Enum

from roadkit.nodes.errors import UnknownKindError


class NodeKind(str, Enum):
    """Kind of filesystem entry.

    Attributes:
        FILE: Regular file.
        DIRECTORY: Directory.
        BLOCK_DEVICE: Block special device (e.g. ``/dev/sda``).
        CHARACTER_DEVICE: Character special device (e.g. ``/dev/null``).
        SYMLINK: Symbolic link, whether or not its target exists.
        FIFO: Named pipe.
        SOCKET: Unix domain socket.
    """

    FILE = "file"
    DIRECTORY = "directory"
    BLOCK_DEVICE = "block_device"
    CHARACTER_DEVICE = "character_device"
    SYMLINK = "symlink"
    FIFO = "fifo"
    SOCKET = "socket"


# S_IFMT values mapped to kinds
_MODE_KINDS: dict[int, NodeKind] = {
    stat.S_IFREG: NodeKind.FILE,
    stat.S_IFDIR: NodeKind.DIRECTORY,
    stat.S_IFBLK: NodeKind.BLOCK_DEVICE,
    stat.S_IFCHR: NodeKind.CHARACTER_DEVICE,
    stat.S_IFLNK: NodeKind.SYMLINK,
    stat.S_IFIFO: NodeKind.FIFO,
    stat.S_IFSOCK: NodeKind.SOCKET,
}


def kind_from_mode(mode: int, source: object = None) -> NodeKind:
    """Map raw ``st_mode`` bits to a NodeKind.

    Args:
        mode: Raw mode value as found in ``os.stat_result.st_mode``.
        source: Original input, used in the error message only.

    Returns:
        The matching NodeKind.

    Raises:
        UnknownKindError: If the type bits match no known kind.
    """
    try:
        return _MODE_KINDS[stat.S_IFMT(mode)]
    except KeyError:
        raise UnknownKindError(mode, mode if source is None else source) from None


def classify(path_or_mode: str | os.PathLike[str] | int) -> NodeKind:
    """Determine the kind of a path or of raw mode bits.

    Paths are inspected with ``os.lstat`` so a symbolic link is reported
    as SYMLINK rather than as the kind of its target.

    Args:
        path_or_mode: Filesystem path, or an integer ``st_mode`` value.

    Returns:
        The NodeKind of the entry.

    Raises:
        UnknownKindError: If the mode matches no known kind.
        FileNotFoundError: If a path is given and nothing exists there.
    """
    if isinstance(path_or_mode, int):
        return kind_from_mode(path_or_mode)
    return kind_from_mode(os.lstat(path_or_mode).st_mode, path_or_mode)


async def classify_async(path_or_mode: str | os.PathLike[str] | int) -> NodeKind:
    """Suspending form of :func:`classify`."""
    if isinstance(path_or_mode, int):
        return kind_from_mode(path_or_mode)
    st = await asyncio.to_thread(os.lstat, path_or_mode)
    return kind_from_mode(st.st_mode, path_or_mode)
