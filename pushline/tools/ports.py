"""
Free port allocation.

The allocated port is released before it is returned, so another
process can still take it before the caller binds it.
"""

from __future__ import annotations

import asyncio
import socket

from pushline.errors import PortUnavailable
from pushline.utils.logger import get_logger

logger = get_logger("pushline.ports")


def is_port_free(port: int, host: str = "127.0.0.1") -> bool:
    """Check whether a port can be bound right now."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


class PortAllocator:
    """
    Finds the first bindable port in a range.

    Example:
        >>> allocator = PortAllocator()
        >>> port = await allocator.allocate(8000, 8100)
    """

    def __init__(self, host: str = "127.0.0.1"):
        self.host = host

    async def allocate(self, low: int, high: int) -> int:
        """
        Scan ports from low to high (inclusive).

        Args:
            low: First candidate port
            high: Last candidate port

        Returns:
            First port that could be bound

        Raises:
            ValueError: If the range is invalid
            PortUnavailable: If no port in the range is free
        """
        if not (0 < low <= high <= 65535):
            raise ValueError(f"Invalid port range: {low}-{high}")

        port = await asyncio.to_thread(self._scan, low, high)
        if port is None:
            raise PortUnavailable(low, high)

        logger.debug(f"Allocated port {port} from {low}-{high}")
        return port

    def _scan(self, low: int, high: int) -> int | None:
        for port in range(low, high + 1):
            if is_port_free(port, self.host):
                return port
        return None
