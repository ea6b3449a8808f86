from __future__ import annotations

"""
Live-Reload Channel.

Keeps the set of connected browser sockets and tells them to reload after
each rebuild. Served HTML pages get a small client script appended that
opens the socket and shows a badge while reconnecting.
"""

import logging
from typing import Any, Set

logger = logging.getLogger(__name__)

RELOAD_PATH = "/__livereload"
RELOAD_MESSAGE = "reload"

CLIENT_RELOAD_SCRIPT = """
<script>
function openWebSocket(onopen) {
  const scheme = location.protocol === "https:" ? "wss://" : "ws://"
  const ws = new WebSocket(scheme + location.host + "%(path)s")
  ws.onopen = onopen
  ws.onmessage = (msg) => {
    if (msg.data === "%(message)s") location.reload()
  }
  ws.onclose = () => {
    document.getElementById("connection-status").style.opacity = "1"
    setTimeout(() => openWebSocket(() => location.reload()), 500)
  }
}
openWebSocket()
</script>
<div id="connection-status" style="position: fixed; top: 0; right: 0; background: red; color: white; padding: 10px; opacity: 0; z-index: 100000; font-family: sans-serif; transition: opacity 0.5s ease-in-out 0.5s">Reconnecting...</div>
""" % {"path": RELOAD_PATH, "message": RELOAD_MESSAGE}


def inject_reload(body: bytes) -> bytes:
    """Append the live-reload client to an HTML document."""
    return body + CLIENT_RELOAD_SCRIPT.encode("utf-8")


class ReloadBroadcaster:
    """
    Set of open live-reload connections.

    Connections are any objects with an async send_text(str). The set is
    only touched from the event loop thread.
    """

    def __init__(self) -> None:
        self._connections: Set[Any] = set()

    def __len__(self) -> int:
        return len(self._connections)

    def add(self, connection: Any) -> None:
        self._connections.add(connection)
        logger.debug(f"Live-reload client connected ({len(self._connections)} open)")

    def discard(self, connection: Any) -> None:
        self._connections.discard(connection)

    async def broadcast(self, message: str = RELOAD_MESSAGE) -> int:
        """
        Send a message to every open connection.

        Connections that fail to receive it are dropped.

        Returns:
            int: Number of connections the message was delivered to.
        """
        delivered = 0
        for connection in list(self._connections):
            try:
                await connection.send_text(message)
                delivered += 1
            except Exception as e:
                logger.debug(f"Dropping live-reload client: {e}")
                self.discard(connection)
        return delivered
