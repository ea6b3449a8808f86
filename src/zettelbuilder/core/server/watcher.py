from __future__ import annotations

"""
Filesystem Watcher.

Runs a watchdog observer over the source and asset paths and bridges its
events onto the asyncio loop. The observer thread only schedules
queue puts on the loop; everything else happens on the loop thread.
"""

import asyncio
import logging
import os
from typing import Iterable, List, Optional, Tuple

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from zettelbuilder.infra.fs import is_within

logger = logging.getLogger(__name__)


class _QueueingHandler(FileSystemEventHandler):
    def __init__(
            self,
            loop: asyncio.AbstractEventLoop,
            queue: asyncio.Queue,
            ignore: Tuple[str, ...],
            ignore_prefixes: Tuple[str, ...],
    ) -> None:
        self._loop = loop
        self._queue = queue
        self._ignore = ignore
        self._ignore_prefixes = ignore_prefixes

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in ("opened", "closed_no_write"):
            return
        if self.is_ignored(os.fsdecode(event.src_path)):
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    def is_ignored(self, path: str) -> bool:
        if any(is_within(root, path) for root in self._ignore):
            return True
        parts = os.path.normpath(path).split(os.sep)
        return any(p.startswith(self._ignore_prefixes) for p in parts if p)


class SourceWatcher:
    """
    Async iterator over filesystem events below a set of paths.

    Missing paths are skipped with a warning. File paths are watched through
    their parent directory.

    Args:
        paths: Directories or files to watch.
        ignore: Paths whose events are dropped (e.g. the build directory).
        ignore_prefixes: Path segment prefixes whose events are dropped.
    """

    def __init__(
            self,
            paths: Iterable[str],
            *,
            ignore: Iterable[str] = (),
            ignore_prefixes: Iterable[str] = (),
    ) -> None:
        self.paths: List[str] = list(paths)
        self.ignore = tuple(ignore)
        self.ignore_prefixes = tuple(ignore_prefixes)
        self._queue: Optional[asyncio.Queue] = None
        self._observer: Optional[Observer] = None

    def start(self) -> None:
        """Start the observer thread. Must be called from the event loop."""
        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        handler = _QueueingHandler(loop, self._queue, self.ignore, self.ignore_prefixes)

        observer = Observer()
        for path in self.paths:
            if os.path.isdir(path):
                observer.schedule(handler, path, recursive=True)
            elif os.path.exists(path):
                observer.schedule(handler, os.path.dirname(os.path.abspath(path)), recursive=False)
            else:
                logger.warning(f"Not watching missing path: {path}")
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.debug(f"Watching {', '.join(self.paths)}")

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=2)
            self._observer = None

    def __aiter__(self) -> SourceWatcher:
        return self

    async def __anext__(self) -> FileSystemEvent:
        if self._queue is None:
            raise RuntimeError("SourceWatcher.start() was not called")
        return await self._queue.get()
