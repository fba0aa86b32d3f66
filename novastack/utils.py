"""Small helpers for network logging and the utility command texts."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

PROTOCOLS = ("TCP/IP", "HTTP/3", "QUIC")


def log(msg: str) -> str:
    """Log a network message and return the logged line."""
    line = f"[NetUtils] {msg}"
    logger.info(line)
    return line


def network_status() -> str:
    """Report the state of the protocol stack."""
    for proto in PROTOCOLS:
        logger.debug("[NetworkStack] %s stack ready.", proto)
    line = "[NetworkStack] All protocols operational."
    logger.info(line)
    return line


def help_text() -> str:
    return "[Utils] Available commands: help, version, echo <msg>"


def version_text() -> str:
    return "[Utils] NeoNova OS Utilities v1.0"


def echo(msg: str) -> str:
    return f"[Utils] {msg}"