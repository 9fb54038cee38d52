"""Auto-reloading file nodes."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from types import TracebackType

from roadkit.nodes.base import PathArg
from roadkit.nodes.file import File
from roadkit.nodes.watch import ChangeSubscription

logger = logging.getLogger(__name__)


class LiveFile(File):
    """A file whose content is mirrored in memory and reloaded on change.

    A background thread loads the content once, then reloads it after
    every change notification until :meth:`close` is called. Use it as a
    context manager so the thread and its watch are always released::

        with LiveFile("settings.json") as live:
            live.wait_ready()
            data = live.last_read_content

    Can be expensive for large or very frequently changing files.

    Attributes:
        last_read_content: Content from the most recent successful load.
    """

    def __init__(
        self,
        path: PathArg,
        on_reload: Callable[[bytes], object] | None = None,
    ) -> None:
        super().__init__(path)
        self.last_read_content = b""
        self._on_reload = on_reload
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._ready = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"LiveFile[{self.name()}]",
            daemon=True,
        )
        self._thread.start()

    def __enter__(self) -> LiveFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> LiveFile:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def running(self) -> bool:
        """True while the background reload loop is alive."""
        return self._thread.is_alive()

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Block until the initial load has completed.

        Returns:
            True if the initial load finished within ``timeout``.
        """
        return self._ready.wait(timeout)

    def refresh(self) -> bytes:
        """Reload the content right now.

        Returns:
            The freshly read content.

        Raises:
            OSError: If the file cannot be read.
        """
        content = self.read_bytes()
        with self._lock:
            self.last_read_content = content
        if self._on_reload is not None:
            self._on_reload(content)
        return content

    async def refresh_async(self) -> bytes:
        """Suspending form of :meth:`refresh`."""
        return await asyncio.to_thread(self.refresh)

    def close(self) -> None:
        """Stop the reload loop and release the watch. Idempotent."""
        self._stop.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join()

    async def aclose(self) -> None:
        await asyncio.to_thread(self.close)

    def _run(self) -> None:
        try:
            with ChangeSubscription(self._location) as changes:
                self._reload()
                self._ready.set()
                while changes.wait(self._stop):
                    self._reload()
        except OSError:
            logger.exception("Live reload of %s stopped", self._location)
        finally:
            self._ready.set()
        logger.debug("Live reload loop for %s finished", self._location)

    def _reload(self) -> None:
        try:
            self.refresh()
        except OSError as e:
            # e.g. the file is briefly missing during an atomic save
            logger.warning("Could not reload %s: %s", self._location, e)
