from __future__ import annotations

"""Free port probing for the dev server."""

import logging
import socket
from typing import Optional

from zettelbuilder.domain.errors import PortExhausted

logger = logging.getLogger(__name__)

PORT_RANGE_START = 3000
PORT_RANGE_STOP = 4000


def check_port(port: int, host: str = "0.0.0.0") -> bool:
    """Whether a TCP socket can be bound to (host, port) right now."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind((host, port))
    except OSError:
        return False
    return True


def find_available_port(
        start: int = PORT_RANGE_START,
        stop: int = PORT_RANGE_STOP,
        host: str = "0.0.0.0",
) -> int:
    """
    Probe ports in [start, stop) and return the first free one.

    Raises:
        PortExhausted: If every port in the range is taken.
    """
    for port in range(start, stop):
        if check_port(port, host):
            return port
    raise PortExhausted(start, stop)


def resolve_port(explicit: Optional[int], host: str = "0.0.0.0") -> int:
    """Use an explicit port verbatim, otherwise probe for one."""
    if explicit is not None:
        return explicit
    port = find_available_port(host=host)
    logger.debug(f"Selected free port {port}")
    return port
