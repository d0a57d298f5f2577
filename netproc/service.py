"""Service names for port numbers."""

from __future__ import annotations

import socket
from typing import Optional


def port_to_service(port: int, proto: Optional[str] = None) -> Optional[str]:
    """Return the service name for ``port`` over ``proto``, or None if unknown."""
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    try:
        if proto is None:
            return socket.getservbyport(port)
        return socket.getservbyport(port, proto)
    except OSError:
        return None