"""Symbolic link nodes."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import TYPE_CHECKING

from roadkit.nodes.base import PathArg, Road
from roadkit.nodes.kinds import NodeKind
from roadkit.utils.ids import random_alnum

if TYPE_CHECKING:
    from roadkit.nodes.folder import Folder

logger = logging.getLogger(__name__)


class SymbolicLink(Road, kind=NodeKind.SYMLINK):
    """A symbolic link.

    The link's target is a reference, not owned by the link: it is read
    from disk again on every :meth:`target` call. Links whose target
    does not exist can still be constructed; only resolving them fails.
    """

    @staticmethod
    def create(path: PathArg, target: PathArg) -> SymbolicLink:
        """Return a SymbolicLink at ``path``, creating it if missing.

        Args:
            path: Location of the link.
            target: Node or path the new link should point to. Ignored if
                the link already exists. A relative string is stored as
                given and resolves against the link's directory, not the
                current working directory.

        Raises:
            TypeMismatchError: If something other than a link exists there.
        """
        if not os.path.lexists(path):
            os.symlink(os.fspath(target), path)
            logger.debug("Created link %s -> %s", os.path.abspath(path), os.fspath(target))
        return SymbolicLink(path)

    @staticmethod
    async def create_async(path: PathArg, target: PathArg) -> SymbolicLink:
        """Suspending form of :meth:`create`."""
        return await asyncio.to_thread(SymbolicLink.create, path, target)

    # =========================================================================
    # Target
    # =========================================================================

    def raw_target(self) -> str:
        """The target text stored in the link, unresolved."""
        return os.readlink(self._location)

    def target_path(self) -> str:
        """Absolute target path, resolved against the link's directory."""
        return os.path.normpath(os.path.join(os.path.dirname(self._location), self.raw_target()))

    def target(self) -> Road:
        """Resolve the link and build the node it points to.

        Raises:
            FileNotFoundError: If the target does not exist.
        """
        return Road.factory(self.target_path())

    async def target_async(self) -> Road:
        """Suspending form of :meth:`target`."""
        return await asyncio.to_thread(self.target)

    def retarget(self, new_target: PathArg) -> None:
        """Point the link at ``new_target``.

        The replacement link is created under a temporary sibling name and
        renamed over the old one, so the link never disappears midway.
        As with :meth:`create`, a relative ``new_target`` is stored as given
        and resolves against the link's directory.
        """
        self.assert_mutable()
        staging = os.path.join(
            os.path.dirname(self._location),
            f".{self.name()}.{random_alnum(8)}.tmp",
        )
        os.symlink(os.fspath(new_target), staging)
        try:
            os.replace(staging, self._location)
        except OSError:
            os.unlink(staging)
            raise
        logger.debug("Retargeted %s -> %s", self._location, os.fspath(new_target))

    async def retarget_async(self, new_target: PathArg) -> None:
        """Suspending form of :meth:`retarget`."""
        await asyncio.to_thread(self.retarget, new_target)

    # =========================================================================
    # Positional operations
    # =========================================================================

    def delete(self) -> None:
        """Remove the link itself; the target is untouched."""
        self.assert_mutable()
        os.unlink(self._location)
        logger.debug("Deleted link %s", self._location)

    def move_into(self, folder: Folder) -> None:
        self._relocate(folder.join(self.name()))

    def copy_into(self, folder: Folder) -> SymbolicLink:
        """Create a new link in ``folder`` pointing at the same target.

        The target's content is not copied.
        """
        destination = self._claim_destination(folder.join(self.name()))
        os.symlink(self.target_path(), destination)
        logger.debug("Copied link %s -> %s", self._location, destination)
        return SymbolicLink(destination)

    def rename_to(self, new_name: str) -> None:
        self._relocate(os.path.join(os.path.dirname(self._location), new_name))
