"""Directory nodes.

Children are never cached: listing and lookup read the directory again
on every call and classify each entry through :meth:`Road.factory`.
"""

from __future__ import annotations

import asyncio
import builtins
import errno
import fnmatch
import logging
import os
import shutil
from collections.abc import Iterator
from typing import TypeVar, overload

from roadkit.nodes.base import PathArg, Road
from roadkit.nodes.kinds import NodeKind

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Road)

KindFilter = type[Road] | NodeKind | None


def _matches(entry: Road, kind: KindFilter) -> bool:
    if kind is None:
        return True
    if isinstance(kind, NodeKind):
        return entry.kind() is kind
    return isinstance(entry, kind)


def _glob_match(parts: builtins.list[str], pattern: builtins.list[str]) -> bool:
    """Match path segments against glob segments; ``**`` spans any number of them."""
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_glob_match(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatchcase(parts[0], head) and _glob_match(parts[1:], rest)


class Folder(Road, kind=NodeKind.DIRECTORY):
    """A directory.

    Example:
        >>> folder = Folder.create("/tmp/project")
        >>> [child.name() for child in folder.list(File)]
        ['README.md']
    """

    @staticmethod
    def create(path: PathArg) -> Folder:
        """Return a Folder at ``path``, creating it (and parents) if missing.

        Raises:
            TypeMismatchError: If something other than a directory exists there.
        """
        if not os.path.lexists(path):
            os.makedirs(path, exist_ok=True)
            logger.debug("Created folder %s", os.path.abspath(path))
        return Folder(path)

    @staticmethod
    async def create_async(path: PathArg) -> Folder:
        """Suspending form of :meth:`create`."""
        return await asyncio.to_thread(Folder.create, path)

    # =========================================================================
    # Listing
    # =========================================================================

    @overload
    def list(self) -> builtins.list[Road]: ...
    @overload
    def list(self, kind: type[R]) -> builtins.list[R]: ...
    @overload
    def list(self, kind: NodeKind) -> builtins.list[Road]: ...

    def list(self, kind: KindFilter = None) -> builtins.list[Road]:
        """List the directory's immediate entries as typed nodes.

        Args:
            kind: Optional filter, either a node class (File, Folder, ...)
                or a NodeKind.

        Returns:
            Matching entries sorted by name.
        """
        return builtins.list(self.iterate(kind))

    async def list_async(self, kind: KindFilter = None) -> builtins.list[Road]:
        """Suspending form of :meth:`list`."""
        return await asyncio.to_thread(self.list, kind)

    def iterate(self, kind: KindFilter = None) -> Iterator[Road]:
        """Yield the directory's entries lazily, sorted by name.

        Entries are classified one at a time as iteration proceeds.
        """
        for name in sorted(os.listdir(self._location)):
            entry = Road.factory(self.join(name))
            if _matches(entry, kind):
                yield entry

    @overload
    def find(self, name: str) -> Road | None: ...
    @overload
    def find(self, name: str, kind: type[R]) -> R | None: ...
    @overload
    def find(self, name: str, kind: NodeKind) -> Road | None: ...

    def find(self, name: str, kind: KindFilter = None) -> Road | None:
        """Look up an immediate child by name.

        Returns:
            The child node, or None if absent or not of the requested kind.
        """
        try:
            found = Road.factory(self.join(name))
        except FileNotFoundError:
            return None
        return found if _matches(found, kind) else None

    async def find_async(self, name: str, kind: KindFilter = None) -> Road | None:
        """Suspending form of :meth:`find`."""
        return await asyncio.to_thread(self.find, name, kind)

    def walk(self, pattern: str = "**") -> builtins.list[Road]:
        """Glob below this folder and return typed nodes.

        ``**`` matches any number of directories and hidden entries are
        included. Symbolic links are listed but never descended into, so
        a link cycle is reported once.

        Args:
            pattern: Glob pattern relative to this folder.

        Returns:
            Matching entries sorted by path.
        """
        segments = [part for part in pattern.split("/") if part]
        matches: builtins.list[str] = []
        for dirpath, dirnames, filenames in os.walk(self._location):
            prefix = os.path.relpath(dirpath, self._location)
            for name in dirnames + filenames:
                relative = name if prefix == os.curdir else os.path.join(prefix, name)
                if _glob_match(relative.split(os.sep), segments):
                    matches.append(relative)
        return [Road.factory(self.join(match)) for match in sorted(matches)]

    async def walk_async(self, pattern: str = "**") -> builtins.list[Road]:
        """Suspending form of :meth:`walk`."""
        return await asyncio.to_thread(self.walk, pattern)

    # =========================================================================
    # Positional operations
    # =========================================================================

    def delete(self) -> None:
        """Recursively remove the directory and everything below it.

        A failure part way through leaves the tree partially deleted.
        """
        self.assert_mutable()
        shutil.rmtree(self._location)
        logger.debug("Deleted folder %s", self._location)

    def move_into(self, folder: Folder) -> None:
        self._relocate(folder.join(self.name()))

    def copy_into(self, folder: Folder) -> Folder:
        """Deep-copy the directory into ``folder``.

        Symbolic links inside the tree are copied as links.

        Raises:
            FileExistsError: If ``folder`` already has an entry of this name.
            OSError: With ``errno.EINVAL`` if ``folder`` is this directory
                or lies below it.
        """
        destination = self._claim_destination(folder.join(self.name()))
        if os.path.commonpath([self._location, destination]) == self._location:
            raise OSError(errno.EINVAL, "Cannot copy a folder into itself", destination)
        shutil.copytree(self._location, destination, symlinks=True)
        logger.debug("Copied folder %s -> %s", self._location, destination)
        return Folder(destination)

    def rename_to(self, new_name: str) -> None:
        self._relocate(os.path.join(os.path.dirname(self._location), new_name))
