"""Temporary files and folders that delete themselves on disposal.

Names follow ``<ClassName>_<epoch-ms>_<random>`` inside the configured
temporary directory (``.tmp`` is appended for files). The random part
comes from :func:`roadkit.utils.ids.random_alnum`, so concurrently
created entries get distinct paths with overwhelming probability.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from types import TracebackType

from roadkit.core.settings import get_settings
from roadkit.nodes.file import File
from roadkit.nodes.folder import Folder
from roadkit.utils.ids import random_alnum

logger = logging.getLogger(__name__)


def unique_temp_path(tag: str, suffix: str = "") -> str:
    """Build a fresh path in the temporary directory.

    Args:
        tag: Leading name component, usually the class name.
        suffix: Appended verbatim (e.g. ".tmp").

    Returns:
        Absolute path that is not expected to exist yet.
    """
    settings = get_settings()
    stamp = int(time.time() * 1000)
    name = f"{tag}_{stamp}_{random_alnum(settings.temp_name_length)}{suffix}"
    return os.path.join(os.path.abspath(settings.temp_dir), name)


class _Disposable:
    """Idempotent delete-on-close behaviour shared by the temp classes."""

    _disposed: bool = False

    @property
    def mutable(self) -> bool:
        """Always True; a temporary entry must stay deletable."""
        return True

    @property
    def disposed(self) -> bool:
        return self._disposed

    def close(self) -> None:
        """Delete the entry once. Later calls, or a missing entry, are no-ops."""
        if self._disposed:
            return
        try:
            self.delete()  # type: ignore[attr-defined]
        except FileNotFoundError:
            logger.debug("Temporary entry already removed: %s", self)
        self._disposed = True

    async def aclose(self) -> None:
        await asyncio.to_thread(self.close)

    dispose = close
    dispose_async = aclose

    def __enter__(self) -> _Disposable:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> _Disposable:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class TempFile(_Disposable, File):
    """An empty file in the temporary directory, deleted on close.

    Example:
        >>> with TempFile() as tmp:
        ...     tmp.write_text("scratch")
    """

    def __init__(self) -> None:
        path = unique_temp_path(type(self).__name__, ".tmp")
        with open(path, "xb"):
            pass
        super().__init__(path)
        logger.debug("Created temporary file %s", self.location)

    def __enter__(self) -> TempFile:
        return self

    async def __aenter__(self) -> TempFile:
        return self


class TempFolder(_Disposable, Folder):
    """An empty folder in the temporary directory, deleted with its content on close."""

    def __init__(self) -> None:
        path = unique_temp_path(type(self).__name__)
        os.mkdir(path)
        super().__init__(path)
        logger.debug("Created temporary folder %s", self.location)

    def __enter__(self) -> TempFolder:
        return self

    async def __aenter__(self) -> TempFolder:
        return self
