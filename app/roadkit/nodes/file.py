"""Regular file nodes."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from collections.abc import AsyncIterator, Iterator
from typing import IO, TYPE_CHECKING

from roadkit.core.settings import get_settings
from roadkit.nodes.base import PathArg, Road
from roadkit.nodes.kinds import NodeKind

if TYPE_CHECKING:
    from roadkit.nodes.folder import Folder

logger = logging.getLogger(__name__)


class File(Road, kind=NodeKind.FILE):
    """A regular file.

    Content lives on disk only; every read goes back to the file.
    Mutating methods (write, append, delete, move, rename, write stream)
    call :meth:`assert_mutable` before touching the disk.

    Example:
        >>> f = File.create("/tmp/notes.txt")
        >>> f.write_text("hello")
        >>> f.read_text()
        'hello'
    """

    @staticmethod
    def create(path: PathArg) -> File:
        """Return a File at ``path``, creating an empty one if missing.

        Raises:
            TypeMismatchError: If something other than a file exists there.
        """
        if not os.path.lexists(path):
            with open(path, "xb"):
                pass
            logger.debug("Created file %s", os.path.abspath(path))
        return File(path)

    @staticmethod
    async def create_async(path: PathArg) -> File:
        """Suspending form of :meth:`create`."""
        return await asyncio.to_thread(File.create, path)

    # =========================================================================
    # Reading
    # =========================================================================

    def read_text(self, encoding: str = "utf-8") -> str:
        with open(self._location, encoding=encoding, newline="") as f:
            return f.read()

    async def read_text_async(self, encoding: str = "utf-8") -> str:
        return await asyncio.to_thread(self.read_text, encoding)

    def read_bytes(self) -> bytes:
        with open(self._location, "rb") as f:
            return f.read()

    async def read_bytes_async(self) -> bytes:
        return await asyncio.to_thread(self.read_bytes)

    def iterate_lines(self, encoding: str = "utf-8") -> Iterator[str]:
        """Yield the file's lines one at a time, without line terminators.

        The file is opened when iteration starts and closed when it ends;
        call again to restart.
        """
        with open(self._location, encoding=encoding) as f:
            for line in f:
                yield line.removesuffix("\n")

    async def iterate_lines_async(self, encoding: str = "utf-8") -> AsyncIterator[str]:
        """Suspending form of :meth:`iterate_lines`."""
        f = await asyncio.to_thread(open, self._location, encoding=encoding)
        try:
            while line := await asyncio.to_thread(f.readline):
                yield line.removesuffix("\n")
        finally:
            await asyncio.to_thread(f.close)

    def iterate_chunks(self, chunk_size: int | None = None) -> Iterator[bytes]:
        """Yield the file content in ``chunk_size`` byte pieces.

        Only the final chunk may be shorter. An empty file yields nothing.

        Args:
            chunk_size: Bytes per chunk. Defaults to the configured chunk size.

        Raises:
            ValueError: If chunk_size is not positive.
        """
        size = self._chunk_size(chunk_size)
        with open(self._location, "rb") as f:
            while chunk := f.read(size):
                yield chunk

    async def iterate_chunks_async(self, chunk_size: int | None = None) -> AsyncIterator[bytes]:
        """Suspending form of :meth:`iterate_chunks`."""
        size = self._chunk_size(chunk_size)
        f = await asyncio.to_thread(open, self._location, "rb")
        try:
            while chunk := await asyncio.to_thread(f.read, size):
                yield chunk
        finally:
            await asyncio.to_thread(f.close)

    @staticmethod
    def _chunk_size(chunk_size: int | None) -> int:
        size = get_settings().chunk_size if chunk_size is None else chunk_size
        if size <= 0:
            msg = f"Chunk size must be positive, got {size}"
            raise ValueError(msg)
        return size

    # =========================================================================
    # Writing
    # =========================================================================

    def write_text(self, content: str, encoding: str = "utf-8") -> None:
        """Replace the file content with ``content``."""
        self.assert_mutable()
        with open(self._location, "w", encoding=encoding, newline="") as f:
            f.write(content)

    async def write_text_async(self, content: str, encoding: str = "utf-8") -> None:
        await asyncio.to_thread(self.write_text, content, encoding)

    def write_bytes(self, content: bytes) -> None:
        """Replace the file content with ``content``."""
        self.assert_mutable()
        with open(self._location, "wb") as f:
            f.write(content)

    async def write_bytes_async(self, content: bytes) -> None:
        await asyncio.to_thread(self.write_bytes, content)

    def append_text(self, content: str, encoding: str = "utf-8") -> None:
        self.assert_mutable()
        with open(self._location, "a", encoding=encoding, newline="") as f:
            f.write(content)

    async def append_text_async(self, content: str, encoding: str = "utf-8") -> None:
        await asyncio.to_thread(self.append_text, content, encoding)

    def append_bytes(self, content: bytes) -> None:
        self.assert_mutable()
        with open(self._location, "ab") as f:
            f.write(content)

    async def append_bytes_async(self, content: bytes) -> None:
        await asyncio.to_thread(self.append_bytes, content)

    # =========================================================================
    # Streaming
    # =========================================================================

    def open_read_stream(self) -> IO[bytes]:
        """Open the file for binary reading. The caller closes the stream."""
        return open(self._location, "rb")

    def open_write_stream(self) -> IO[bytes]:
        """Open the file for binary writing, truncating it.

        Raises:
            ImmutableError: If the node is immutable.
        """
        self.assert_mutable()
        return open(self._location, "wb")

    # =========================================================================
    # Properties
    # =========================================================================

    def extension(self) -> str:
        """Suffix including the leading dot (".txt"), or "" if none."""
        return os.path.splitext(self._location)[1]

    def content_equals(self, other: File) -> bool:
        """Compare content with another File at the same location.

        Files at different locations are never considered equal, even
        when their bytes match.
        """
        if self._location != other.location:
            return False
        return self.read_bytes() == other.read_bytes()

    async def content_equals_async(self, other: File) -> bool:
        return await asyncio.to_thread(self.content_equals, other)

    # =========================================================================
    # Positional operations
    # =========================================================================

    def delete(self) -> None:
        self.assert_mutable()
        os.unlink(self._location)
        logger.debug("Deleted file %s", self._location)

    def move_into(self, folder: Folder) -> None:
        self._relocate(folder.join(self.name()))

    def copy_into(self, folder: Folder) -> File:
        destination = self._claim_destination(folder.join(self.name()))
        shutil.copyfile(self._location, destination)
        logger.debug("Copied file %s -> %s", self._location, destination)
        return File(destination)

    def rename_to(self, new_name: str) -> None:
        self._relocate(os.path.join(os.path.dirname(self._location), new_name))
