"""Starting a VPN tunnel with OpenVPN, falling back to WireGuard."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class VpnError(Exception):
    """Raised when no VPN tool could start the tunnel."""


def _run(command: list[str]) -> bool:
    try:
        return subprocess.run(command, check=False).returncode == 0
    except OSError:
        return False


def connect_vpn(config_path: PathLike) -> str:
    """Start a tunnel from the given config; returns the tool that started it."""
    path = os.fspath(config_path)
    logger.info("[NetVPN] Attempting to start VPN using config: %s", path)
    commands = (
        ("openvpn", ["openvpn", "--config", path, "--daemon"]),
        ("wireguard", ["wireguard", "/installtunnelservice", path]),
    )
    for tool, command in commands:
        if _run(command):
            logger.info("[NetVPN] %s tunnel started.", tool)
            return tool
    raise VpnError("Failed to start VPN. Ensure OpenVPN or WireGuard is installed.")