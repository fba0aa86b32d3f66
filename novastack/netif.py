"""A UDP link that sends datagrams to a fixed destination."""

from __future__ import annotations

import logging
import socket
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 12345


class UdpLink:
    """UDP socket bound to one destination address."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.destination = (host, port)
        self._sock: Optional[socket.socket] = socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP
        )
        logger.info("[NetIF] Initialized (UDP on %s:%d)", host, port)

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise OSError("link is closed")
        return self._sock

    @property
    def local_address(self) -> tuple[str, int]:
        return self._socket().getsockname()

    def send(self, data: Union[bytes, bytearray, memoryview]) -> int:
        """Send one datagram and return the number of bytes sent."""
        sent = self._socket().sendto(data, self.destination)
        logger.info("[NetIF] Sent %d bytes", sent)
        return sent

    def recv(self, maxlen: int) -> bytes:
        """Receive one datagram of at most maxlen bytes."""
        if maxlen < 1:
            raise ValueError("maxlen must be positive")
        data, _ = self._socket().recvfrom(maxlen)
        logger.info("[NetIF] Received %d bytes", len(data))
        return data

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "UdpLink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()