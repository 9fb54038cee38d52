"""Filesystem change notifications built on watchdog.

A directory is watched directly. Any other path is watched through its
parent directory with events filtered down to that exact path, which
also allows waiting for a path that does not exist yet.

Both subscription types keep their observer running only inside their
context; leaving the ``with``/``async with`` block stops and joins it.
"""

from __future__ import annotations

import asyncio
import logging
import os
import queue
import threading
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable, Iterator
from types import TracebackType

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from roadkit.core.settings import get_settings

logger = logging.getLogger(__name__)

# Access-only events; reading a watched file must not count as a change.
_IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


def _decode(path: str | bytes) -> str:
    return os.fsdecode(path) if isinstance(path, bytes) else path


class _ChangeHandler(FileSystemEventHandler):
    """Forward relevant watchdog events to a callback."""

    def __init__(self, target: str | None, notify: Callable[[str], None]) -> None:
        super().__init__()
        self._target = target
        self._notify = notify

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in _IGNORED_EVENT_TYPES:
            return
        if self._target is not None:
            paths = {os.path.abspath(_decode(event.src_path))}
            dest = getattr(event, "dest_path", "")
            if dest:
                paths.add(os.path.abspath(_decode(dest)))
            if self._target not in paths:
                return
        self._notify(event.event_type)


class _Subscription(ABC):
    """Observer lifecycle shared by the blocking and suspending forms."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.location = os.path.abspath(path)
        if os.path.isdir(self.location) and not os.path.islink(self.location):
            self._watch_dir, self._target = self.location, None
        else:
            self._watch_dir, self._target = os.path.dirname(self.location), self.location
        self._observer: BaseObserver | None = None

    @property
    def active(self) -> bool:
        """True while the underlying observer is running."""
        return self._observer is not None

    def open(self) -> None:
        """Start watching.

        Raises:
            FileNotFoundError: If the watched directory does not exist.
        """
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(
            _ChangeHandler(self._target, self._notify),
            self._watch_dir,
            recursive=False,
        )
        observer.start()
        self._observer = observer
        logger.debug("Watching %s (via %s)", self.location, self._watch_dir)

    def close(self) -> None:
        """Stop watching. Safe to call more than once."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        if observer.is_alive():
            observer.join()
        logger.debug("Stopped watching %s", self.location)

    @abstractmethod
    def _notify(self, event_type: str) -> None:
        """Deliver one event; called from the observer thread."""


class ChangeSubscription(_Subscription):
    """Blocking change subscription.

    Example:
        >>> with ChangeSubscription("/tmp/data.txt") as changes:
        ...     while changes.wait(stop):
        ...         print("changed")
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        poll_interval: float | None = None,
    ) -> None:
        super().__init__(path)
        self._poll_interval = poll_interval
        self._events: queue.SimpleQueue[str] = queue.SimpleQueue()

    def __enter__(self) -> ChangeSubscription:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _notify(self, event_type: str) -> None:
        self._events.put(event_type)

    def next_event(self, stop: threading.Event | None = None) -> str | None:
        """Block until the next change event or until ``stop`` is set.

        ``stop`` is checked every ``watch_poll_interval`` seconds while no
        event arrives.

        Args:
            stop: Cancellation token. None waits indefinitely.

        Returns:
            The watchdog event type ("modified", "created", ...), or None
            when cancelled.
        """
        interval = self._poll_interval or get_settings().watch_poll_interval
        while stop is None or not stop.is_set():
            try:
                event_type = self._events.get(timeout=interval)
            except queue.Empty:
                continue
            return event_type if stop is None or not stop.is_set() else None
        return None

    def wait(self, stop: threading.Event | None = None) -> bool:
        """Like :meth:`next_event`, returning True for an event and False when cancelled."""
        return self.next_event(stop) is not None


class AsyncChangeSubscription(_Subscription):
    """Suspending change subscription for use inside an event loop.

    Observer callbacks run on watchdog's thread and are handed to the
    loop with ``call_soon_threadsafe``.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(path)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._events: asyncio.Queue[str] = asyncio.Queue()

    async def __aenter__(self) -> AsyncChangeSubscription:
        self._loop = asyncio.get_running_loop()
        await asyncio.to_thread(self.open)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await asyncio.to_thread(self.close)

    def _notify(self, event_type: str) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._events.put_nowait, event_type)

    async def next_event(self, stop: asyncio.Event | None = None) -> str | None:
        """Suspend until the next change event or until ``stop`` is set.

        Args:
            stop: Cancellation token. None waits indefinitely.

        Returns:
            The watchdog event type, or None when cancelled.
        """
        if stop is None:
            return await self._events.get()
        if stop.is_set():
            return None

        received = asyncio.ensure_future(self._events.get())
        stopped = asyncio.ensure_future(stop.wait())
        try:
            await asyncio.wait({received, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            received.cancel()
            stopped.cancel()
        if stop.is_set() or not received.done() or received.cancelled():
            return None
        return received.result()

    async def wait(self, stop: asyncio.Event | None = None) -> bool:
        """Like :meth:`next_event`, returning True for an event and False when cancelled."""
        return await self.next_event(stop) is not None


def iter_changes(
    path: str | os.PathLike[str],
    stop: threading.Event | None = None,
    poll_interval: float | None = None,
) -> Iterator[str]:
    """Yield the event type of every change to ``path`` until ``stop`` is set.

    The observer runs while the generator is being consumed and is stopped
    when it finishes or is closed.
    """
    with ChangeSubscription(path, poll_interval) as changes:
        while (event_type := changes.next_event(stop)) is not None:
            yield event_type


async def aiter_changes(
    path: str | os.PathLike[str],
    stop: asyncio.Event | None = None,
) -> AsyncIterator[str]:
    """Async form of :func:`iter_changes`."""
    async with AsyncChangeSubscription(path) as changes:
        while (event_type := await changes.next_event(stop)) is not None:
            yield event_type
