"""Command-line tool for listing and configuring network interfaces."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from novastack.stack import NetStack, NetStackError, NetworkInterface

PING_COUNT = 4

_USAGE_LINES = (
    "Usage: netmgr <command> [args]",
    "  list",
    "  up <iface>",
    "  down <iface>",
    "  config <iface> <ip> <netmask> <gw>",
    "  ping <ip>",
    "  dns <hostname>",
)


def usage() -> str:
    """Return the usage text."""
    return "\n".join(_USAGE_LINES)


def format_interface(iface: NetworkInterface) -> str:
    """Render one interface as a single status line."""
    mac = ":".join(f"{b:02X}" for b in iface.mac)
    state = "UP" if iface.up else "DOWN"
    return f"{iface.name}  MAC={mac}  IP={iface.ip_addr}  {state}"


def _run(stack: NetStack, command: str, args: list[str]) -> bool:
    """Carry out one command; returns False when the arguments do not fit."""
    if command == "list":
        for iface in stack.list_interfaces():
            print(format_interface(iface))
    elif command in ("up", "down") and len(args) == 1:
        stack.set_up(args[0], command == "up")
    elif command == "config" and len(args) == 4:
        name, ip, netmask, gateway = args
        stack.configure(name, ip, netmask, gateway)
    elif command == "ping" and len(args) == 1:
        stats = stack.ping(args[0], PING_COUNT)
        print(
            f"[netmgr] Ping stats: success={stats.success} "
            f"loss={stats.loss} avg={stats.avg_ms}ms"
        )
    elif command == "dns" and len(args) == 1:
        hostname = args[0]
        try:
            address = stack.dns_resolve(hostname)
        except NetStackError:
            print(f"[netmgr] DNS resolution failed for {hostname}")
        else:
            print(f"[netmgr] {hostname} resolved to {address}")
    else:
        return False
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(usage())
        return 1
    command, rest = args[0], args[1:]
    with NetStack() as stack:
        try:
            if not _run(stack, command, rest):
                print(usage())
                return 1
        except (NetStackError, ValueError) as exc:
            print(f"[netmgr] {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())