from __future__ import annotations

"""
Logging Lifecycle.

The root logger gets a single QueueHandler; a QueueListener thread drains
it into the sinks, so writing to stderr or the log file never blocks the
event loop that serves pages and runs rebuilds.

Lifecycle:
1. configure_logging() installs the queue handler and starts the listener.
2. Further calls are no-ops until force=True or shutdown_logging().
3. shutdown_logging() flushes the listener and detaches our handlers.
"""

import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from zettelbuilder.infra.logging.config import LoggingConfig
from zettelbuilder.infra.logging.handlers import build_sinks, is_managed, mark_managed

_CONFIGURED_FLAG_ATTR: str = "_zettelbuilder_configured"
_QUEUE_LISTENER_ATTR: str = "_zettelbuilder_queue_listener"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Route the root logger through a queue into the configured sinks.

    Args:
        cfg: Logging settings.
        force: Tear down a previous configuration and apply this one.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    shutdown_logging()

    level = resolve_level(cfg.level)
    root.setLevel(level)
    for name in cfg.quiet_libraries:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    sinks = build_sinks(cfg, level)
    if not sinks:
        return root

    records: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    listener = QueueListener(records, *sinks, respect_handler_level=True)
    listener.start()
    root.addHandler(mark_managed(QueueHandler(records)))

    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    atexit.register(_safe_stop_listener, listener)
    return root


def shutdown_logging() -> None:
    """Flush pending records and remove every handler configure_logging added."""
    root = logging.getLogger()

    _safe_stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)

    for handler in list(root.handlers):
        if is_managed(handler):
            root.removeHandler(handler)
            handler.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def resolve_level(level: Optional[str]) -> int:
    """Map a level name (case-insensitive) to its constant; unknown names mean INFO."""
    return _LEVELS.get(str(level or "").strip().upper(), logging.INFO)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    # stop() fails on a listener whose thread was already joined, which
    # happens when shutdown_logging() runs before the atexit hook.
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
