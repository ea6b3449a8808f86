from __future__ import annotations

"""Logging settings for the build and serve commands."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem.

    Attributes:
        level: Level name; unknown names fall back to INFO.
        console: Write records to stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the log file.
        console_fmt: Terminal format; short, since the dev server logs a
            status line after every rebuild.
        file_fmt: Log file format, including the logger name.
        datefmt: Timestamp format for the terminal.
        quiet_libraries: Loggers capped at WARNING so that watchdog events
            and uvicorn access lines do not drown the rebuild messages.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = "%(asctime)s %(levelname)-7s %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%H:%M:%S"
    quiet_libraries: Tuple[str, ...] = ("watchdog", "uvicorn.access")

    @classmethod
    def from_project(cls, cfg: Mapping[str, Any]) -> LoggingConfig:
        """Take level and log file from a validated project configuration."""
        return cls(level=str(cfg.get("log_level") or "INFO"), log_file=cfg.get("log_file"))
