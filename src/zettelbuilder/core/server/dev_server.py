from __future__ import annotations

"""
Incremental Dev Server.

Builds the project, serves the output with uvicorn and rebuilds whenever a
watched path changes. The HTTP server, the watch consumer and rebuilds all
share one event loop.
"""

import asyncio
import contextlib
import logging
from typing import Optional

import uvicorn

from zettelbuilder.core.build.orchestrator import STAGING_PREFIX, BuildOrchestrator
from zettelbuilder.core.server.app import create_app
from zettelbuilder.core.server.coalescer import RebuildCoalescer
from zettelbuilder.core.server.livereload import ReloadBroadcaster
from zettelbuilder.core.server.ports import resolve_port
from zettelbuilder.core.server.watcher import SourceWatcher
from zettelbuilder.domain.config import DEFAULT_COOLDOWN_MS, DEFAULT_WARMUP_MS
from zettelbuilder.domain.errors import PathNotFound, ZettelbuilderError
from zettelbuilder.domain.project_models import Project

logger = logging.getLogger(__name__)


class DevServer:
    """
    Watch, rebuild and serve a single project.

    Args:
        project: Project to serve.
        port: Explicit port, or None to probe 3000-3999.
        host: Interface to bind.
        warmup_ms: Debounce delay after the latest change.
        cooldown_ms: Pause after each rebuild.
    """

    def __init__(
            self,
            project: Project,
            *,
            port: Optional[int] = None,
            host: str = "0.0.0.0",
            warmup_ms: int = DEFAULT_WARMUP_MS,
            cooldown_ms: int = DEFAULT_COOLDOWN_MS,
    ) -> None:
        self.project = project
        self.host = host
        self.port = port
        self.orchestrator = BuildOrchestrator(project, staged=True)
        self.broadcaster = ReloadBroadcaster()
        self.coalescer = RebuildCoalescer(
            self.rebuild,
            warmup=warmup_ms / 1000,
            cooldown=cooldown_ms / 1000,
        )

    async def run(self) -> None:
        """
        Serve until the HTTP server shuts down (e.g. on Ctrl+C).

        Raises:
            PathNotFound: The source directory is missing.
            PortExhausted: No explicit port and none free in range.
        """
        port = resolve_port(self.port, self.host)
        self.port = port

        try:
            await self.orchestrator.build()
        except PathNotFound:
            raise
        except Exception as e:
            logger.error(f"Initial build failed: {e}", exc_info=not isinstance(e, ZettelbuilderError))

        app = create_app(self.project.build_dir, self.project.root_url, self.broadcaster)
        config = uvicorn.Config(app, host=self.host, port=port, log_level="warning", lifespan="off")
        server = uvicorn.Server(config)

        build_dir = self.project.build_dir
        watcher = SourceWatcher(
            self.project.watch_paths,
            ignore=(build_dir, f"{build_dir}.old"),
            ignore_prefixes=(STAGING_PREFIX,),
        )
        watcher.start()
        consumer = asyncio.ensure_future(self._consume(watcher))

        self.log_status()
        try:
            await server.serve()
        finally:
            consumer.cancel()
            self.coalescer.cancel()
            watcher.stop()
            with contextlib.suppress(asyncio.CancelledError):
                await consumer

    async def rebuild(self, buffered: int) -> None:
        """Rebuild after a burst of changes and tell clients to reload."""
        logger.info(f"Rebuilding after {buffered} change{'' if buffered == 1 else 's'}")
        try:
            await self.orchestrator.build()
            reached = await self.broadcaster.broadcast()
            logger.debug(f"Reload sent to {reached} clients")
        finally:
            self.log_status()

    def log_status(self) -> None:
        logger.info(f"Serving at http://localhost:{self.port}{self.project.root_url}")
        logger.info(f"Watching for changes in {', '.join(self.project.watch_paths)}")

    async def _consume(self, watcher: SourceWatcher) -> None:
        async for event in watcher:
            logger.debug(f"Change detected: {event.event_type} {event.src_path}")
            self.coalescer.trigger()
