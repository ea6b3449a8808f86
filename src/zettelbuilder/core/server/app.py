from __future__ import annotations

"""
Dev Server HTTP Application.

FastAPI application serving the build directory with pretty URLs and the
live-reload WebSocket endpoint.
"""

import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from zettelbuilder.core.server.files import resolve_request_path
from zettelbuilder.core.server.livereload import RELOAD_PATH, ReloadBroadcaster, inject_reload

logger = logging.getLogger(__name__)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def create_app(build_dir: str, url_root: str, broadcaster: ReloadBroadcaster) -> FastAPI:
    """
    Build the dev server application.

    Args:
        build_dir: Directory to serve.
        url_root: URL prefix pages are served under.
        broadcaster: Receives every live-reload connection.

    Returns:
        FastAPI: The application.
    """
    app = FastAPI(title="zettelbuilder", docs_url=None, redoc_url=None, openapi_url=None)

    @app.websocket(RELOAD_PATH)
    async def livereload(websocket: WebSocket):
        broadcaster.add(websocket)
        try:
            await websocket.accept()
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.debug("Live-reload client disconnected")
        finally:
            broadcaster.discard(websocket)

    @app.get("/{path:path}", include_in_schema=False)
    async def serve_file(path: str):
        lookup = resolve_request_path(build_dir, url_root, "/" + path)
        if not lookup.found:
            logger.debug(f"Not found: {lookup.debug_info()}")
            return PlainTextResponse(f"Not Found: {lookup.debug_info()}", status_code=404)

        if lookup.file_path.endswith(".html"):
            body = await run_in_threadpool(_read_bytes, lookup.file_path)
            return Response(inject_reload(body), media_type="text/html")
        return FileResponse(lookup.file_path)

    return app
