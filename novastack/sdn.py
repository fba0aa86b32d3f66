"""Tracking of the SDN controller endpoint."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

MAX_ADDR_LEN = 63


class SdnError(Exception):
    """Raised when the controller is used before connecting."""


class SdnController:
    """Holds the controller address and whether a connection was made."""

    def __init__(self) -> None:
        self.address = ""
        self.port = 0
        self.connected = False
        logger.info("[NetSDN] Initialized.")

    def connect(self, addr: str, port: int) -> None:
        self.address = addr[:MAX_ADDR_LEN]
        self.port = port
        self.connected = True
        logger.info("[NetSDN] Connected to controller %s:%d", self.address, self.port)

    def control(self) -> tuple[str, int]:
        """Exchange control messages; returns the controller endpoint used."""
        if not self.connected:
            raise SdnError("not connected to controller")
        logger.info("[NetSDN] Exchanging control messages with %s:%d", self.address, self.port)
        return self.address, self.port