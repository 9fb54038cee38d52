"""Abstract base for typed filesystem nodes.

A node wraps one absolute path and checks at construction time that the
entry on disk is of the kind the class represents. Concrete classes
register their kind through the class statement::

    class File(Road, kind=NodeKind.FILE): ...

so that :meth:`Road.factory` can build the right class for any path.

Every I/O method has a blocking form and a suspending ``*_async`` form.
The suspending forms hand the blocking call to a worker thread and
therefore raise exactly the same errors.
"""

from __future__ import annotations

import asyncio
import errno
import inspect
import logging
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from contextlib import aclosing, closing
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Self

from roadkit.nodes.errors import ImmutableError, TypeMismatchError
from roadkit.nodes.kinds import NodeKind, classify
from roadkit.nodes.watch import (
    AsyncChangeSubscription,
    ChangeSubscription,
    aiter_changes,
    iter_changes,
)

if TYPE_CHECKING:
    from roadkit.nodes.folder import Folder

logger = logging.getLogger(__name__)

PathArg = str | os.PathLike[str]
Callback = Callable[[], Any]
AsyncCallback = Callable[[], Any | Awaitable[Any]]


async def _call(callback: AsyncCallback | None) -> None:
    if callback is None:
        return
    result = callback()
    if inspect.isawaitable(result):
        await result


class Road(ABC):
    """Abstract base class for all filesystem nodes.

    Attributes:
        mutable: Library-level write guard, independent of OS permissions.
            Every mutating method calls :meth:`assert_mutable` first.
    """

    _registry: ClassVar[dict[NodeKind, type[Road]]] = {}
    _kind: ClassVar[NodeKind]

    mutable: bool = True

    def __init_subclass__(cls, kind: NodeKind | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if kind is not None:
            cls._kind = kind
            Road._registry[kind] = cls

    def __init__(self, path: PathArg) -> None:
        """Bind the node to an existing entry of the matching kind.

        Args:
            path: Path to the entry. Relative paths are resolved against
                the current working directory; symbolic links are not
                followed.

        Raises:
            FileNotFoundError: If nothing exists at the path.
            TypeMismatchError: If the entry is of a different kind.
        """
        location = os.path.abspath(path)
        actual = classify(location)
        if actual is not self.kind():
            raise TypeMismatchError(location, self.kind(), actual)
        self._location = location

    # =========================================================================
    # Construction
    # =========================================================================

    @staticmethod
    def class_for(kind: NodeKind) -> type[Road]:
        """Return the concrete class registered for a kind."""
        return Road._registry[kind]

    @staticmethod
    def factory(path: PathArg) -> Road:
        """Build the node class matching whatever is on disk at ``path``.

        Args:
            path: Path of an existing entry.

        Returns:
            File, Folder, SymbolicLink, BlockDevice, CharacterDevice,
            Fifo or Socket instance.

        Raises:
            FileNotFoundError: If nothing exists at the path.
            UnknownKindError: If the entry kind is not supported.
        """
        return Road.class_for(classify(path))(path)

    @staticmethod
    async def factory_async(path: PathArg) -> Road:
        """Suspending form of :meth:`factory`."""
        return await asyncio.to_thread(Road.factory, path)

    # =========================================================================
    # Identity
    # =========================================================================

    @classmethod
    def kind(cls) -> NodeKind:
        """Kind of entry this class represents."""
        return cls._kind

    @property
    def location(self) -> str:
        """Absolute, normalized path of the node."""
        return self._location

    def __fspath__(self) -> str:
        return self._location

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._location!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Road):
            return NotImplemented
        return self.kind() is other.kind() and self._location == other._location

    def __hash__(self) -> int:
        return hash((self.kind(), self._location))

    # =========================================================================
    # Queries
    # =========================================================================

    def assert_mutable(self) -> None:
        """Raise ImmutableError if the node is flagged immutable."""
        if not self.mutable:
            raise ImmutableError(self._location)

    def exists(self) -> bool:
        """Check that the path exists and still holds this node's kind."""
        try:
            return classify(self._location) is self.kind()
        except (FileNotFoundError, PermissionError):
            return False

    async def exists_async(self) -> bool:
        """Suspending form of :meth:`exists`."""
        return await asyncio.to_thread(self.exists)

    def metadata(self) -> os.stat_result:
        """Return raw OS metadata without following symbolic links."""
        return os.lstat(self._location)

    async def metadata_async(self) -> os.stat_result:
        """Suspending form of :meth:`metadata`."""
        return await asyncio.to_thread(os.lstat, self._location)

    def size_in_bytes(self) -> int:
        return self.metadata().st_size

    def created_at(self) -> datetime:
        """Creation time where the platform records one, else the ctime."""
        st = self.metadata()
        return datetime.fromtimestamp(getattr(st, "st_birthtime", st.st_ctime))

    def modified_at(self) -> datetime:
        return datetime.fromtimestamp(self.metadata().st_mtime)

    # =========================================================================
    # Path helpers
    # =========================================================================

    def depth(self) -> int:
        """Number of path separators between the root and this node."""
        return self._location.count(os.sep)

    def parent(self) -> Folder:
        """Return the directory containing this node."""
        from roadkit.nodes.folder import Folder

        return Folder(os.path.dirname(self._location))

    def ancestors(self) -> list[Folder]:
        """Return containing folders, nearest first, excluding the root."""
        result: list[Folder] = []
        current = self.parent()
        while True:
            above = current.parent()
            if above.location == current.location:
                break
            result.append(current)
            current = above
        return result

    def name(self) -> str:
        """Final component of the path."""
        return os.path.basename(self._location)

    def join(self, *segments: str) -> str:
        """Join path segments onto this node's location (no I/O)."""
        return os.path.join(self._location, *segments)

    # =========================================================================
    # Access
    # =========================================================================

    def is_accessible(self, mode: int = os.F_OK) -> bool:
        """Check OS access rights for ``mode`` (os.F_OK, R_OK, W_OK, X_OK).

        Returns:
            True if accessible, False if missing or permission denied.

        Raises:
            OSError: For any other failure while probing the path.
        """
        try:
            os.stat(self._location)
        except (FileNotFoundError, PermissionError):
            return False
        return os.access(self._location, mode)

    async def is_accessible_async(self, mode: int = os.F_OK) -> bool:
        """Suspending form of :meth:`is_accessible`."""
        return await asyncio.to_thread(self.is_accessible, mode)

    def wait_until_accessible(
        self,
        mode: int = os.F_OK,
        stop: threading.Event | None = None,
        on_each_attempt: Callback | None = None,
    ) -> bool:
        """Block until :meth:`is_accessible` holds or ``stop`` is set.

        The path is re-checked after every change notification, so the
        calling thread sleeps between events instead of spinning.

        Args:
            mode: Access mode to wait for.
            stop: Cancellation token.
            on_each_attempt: Called after every failed re-check.

        Returns:
            True once accessible, False if cancelled first.
        """
        with ChangeSubscription(self._location) as changes:
            if self.is_accessible(mode):
                return True
            while changes.wait(stop):
                if self.is_accessible(mode):
                    return True
                if on_each_attempt is not None:
                    on_each_attempt()
        return False

    async def wait_until_accessible_async(
        self,
        mode: int = os.F_OK,
        stop: asyncio.Event | None = None,
        on_each_attempt: AsyncCallback | None = None,
    ) -> bool:
        """Suspending form of :meth:`wait_until_accessible`.

        ``on_each_attempt`` may be a plain function or a coroutine function.
        """
        async with AsyncChangeSubscription(self._location) as changes:
            if await self.is_accessible_async(mode):
                return True
            while await changes.wait(stop):
                if await self.is_accessible_async(mode):
                    return True
                await _call(on_each_attempt)
        return False

    def watch(self, stop: threading.Event | None = None, on_change: Callback | None = None) -> None:
        """Invoke ``on_change`` for every change event until ``stop`` is set."""
        with closing(iter_changes(self._location, stop)) as changes:
            for _ in changes:
                if on_change is not None:
                    on_change()

    async def watch_async(
        self,
        stop: asyncio.Event | None = None,
        on_change: AsyncCallback | None = None,
    ) -> None:
        """Suspending form of :meth:`watch`."""
        async with aclosing(aiter_changes(self._location, stop)) as changes:
            async for _ in changes:
                await _call(on_change)

    # =========================================================================
    # Positional operations
    # =========================================================================

    @abstractmethod
    def delete(self) -> None:
        """Remove the entry from disk."""

    @abstractmethod
    def move_into(self, folder: Folder) -> None:
        """Move the entry into ``folder``, keeping its name."""

    @abstractmethod
    def copy_into(self, folder: Folder) -> Self:
        """Copy the entry into ``folder`` and return the copy."""

    @abstractmethod
    def rename_to(self, new_name: str) -> None:
        """Rename the entry within its current directory."""

    async def delete_async(self) -> None:
        await asyncio.to_thread(self.delete)

    async def move_into_async(self, folder: Folder) -> None:
        await asyncio.to_thread(self.move_into, folder)

    async def copy_into_async(self, folder: Folder) -> Self:
        return await asyncio.to_thread(self.copy_into, folder)

    async def rename_to_async(self, new_name: str) -> None:
        await asyncio.to_thread(self.rename_to, new_name)

    # =========================================================================
    # Helpers for subclasses
    # =========================================================================

    @staticmethod
    def _claim_destination(path: str) -> str:
        """Refuse to overwrite an existing entry at ``path``."""
        if os.path.lexists(path):
            raise FileExistsError(errno.EEXIST, "Destination already exists", path)
        return path

    def _relocate(self, new_path: str) -> None:
        """Guarded rename of this entry to ``new_path``."""
        self.assert_mutable()
        self._claim_destination(new_path)
        os.rename(self._location, new_path)
        logger.debug("Moved %s -> %s", self._location, new_path)
        self._location = os.path.abspath(new_path)
