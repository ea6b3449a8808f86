from __future__ import annotations

"""
Logging Sinks.

Builds the handlers fed by the queue listener and marks them, so that
reconfiguration only ever removes handlers this package installed and
leaves uvicorn's or pytest's alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from zettelbuilder.infra.logging.config import LoggingConfig

_HANDLER_TAG_ATTR: str = "_zettelbuilder_handler"


def mark_managed(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def is_managed(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def build_sinks(cfg: LoggingConfig, level: int) -> List[logging.Handler]:
    """
    Create the terminal and file sinks requested by the configuration.

    Args:
        cfg: Logging settings.
        level: Numeric level applied to every sink.

    Returns:
        List[logging.Handler]: Managed sinks, possibly empty.
    """
    sinks: List[logging.Handler] = []

    if cfg.console:
        terminal = logging.StreamHandler(sys.stderr)
        terminal.setFormatter(logging.Formatter(cfg.console_fmt, datefmt=cfg.datefmt))
        sinks.append(terminal)

    if cfg.log_file:
        log_file = _open_log_file(cfg)
        if log_file is not None:
            log_file.setFormatter(logging.Formatter(cfg.file_fmt))
            sinks.append(log_file)

    for sink in sinks:
        sink.setLevel(level)
        mark_managed(sink)
    return sinks


def _open_log_file(cfg: LoggingConfig) -> Optional[RotatingFileHandler]:
    # An unwritable log file is reported and skipped; the build still runs.
    path = str(cfg.log_file)
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=int(cfg.max_bytes),
            backupCount=int(cfg.backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{path}': {e}\n")
        return None
