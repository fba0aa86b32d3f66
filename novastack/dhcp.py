"""Building and parsing DHCP messages and running a DISCOVER/REQUEST exchange."""

from __future__ import annotations

import logging
import socket
import struct
import time
from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Iterator, Union

logger = logging.getLogger(__name__)

PACKET_SIZE = 548
OPTIONS_OFFSET = 240
MAGIC_COOKIE = bytes((99, 130, 83, 99))
BOOTREQUEST = 1
HTYPE_ETHERNET = 1
HLEN_ETHERNET = 6
DHCP_SERVER_PORT = 67
BROADCAST_ADDRESS = "255.255.255.255"
DEFAULT_LEASE_TIME = 3600

OPT_SUBNET_MASK = 1
OPT_ROUTER = 3
OPT_REQUESTED_IP = 50
OPT_MESSAGE_TYPE = 53
OPT_SERVER_ID = 54
OPT_PARAMETER_REQUEST = 55
OPT_END = 255

DHCPDISCOVER = 1
DHCPREQUEST = 3

Address = Union[IPv4Address, str, int, bytes]


class DhcpError(Exception):
    """Raised when a DHCP exchange fails or a reply cannot be read."""


@dataclass(frozen=True)
class DhcpLease:
    ip: IPv4Address
    netmask: IPv4Address
    gateway: IPv4Address
    lease_time: int = DEFAULT_LEASE_TIME


def _base_packet(mac: bytes, xid: int) -> bytearray:
    mac = bytes(mac)
    if len(mac) != 6:
        raise ValueError(f"MAC address must be 6 bytes, got {len(mac)}")
    buf = bytearray(PACKET_SIZE)
    struct.pack_into(
        "!BBBBI", buf, 0,
        BOOTREQUEST, HTYPE_ETHERNET, HLEN_ETHERNET, 0, xid & 0xFFFFFFFF,
    )
    buf[28:34] = mac
    buf[236:OPTIONS_OFFSET] = MAGIC_COOKIE
    return buf


def _with_options(buf: bytearray, options: bytes) -> bytes:
    buf[OPTIONS_OFFSET:OPTIONS_OFFSET + len(options)] = options
    return bytes(buf)


def build_discover(mac: bytes, xid: int) -> bytes:
    """Build a DHCPDISCOVER asking for subnet mask and router."""
    options = bytes((
        OPT_MESSAGE_TYPE, 1, DHCPDISCOVER,
        OPT_PARAMETER_REQUEST, 2, OPT_SUBNET_MASK, OPT_ROUTER,
        OPT_END,
    ))
    return _with_options(_base_packet(mac, xid), options)


def build_request(mac: bytes, xid: int, requested_ip: Address, server_id: Address) -> bytes:
    """Build a DHCPREQUEST for the offered address."""
    options = (
        bytes((OPT_MESSAGE_TYPE, 1, DHCPREQUEST))
        + bytes((OPT_REQUESTED_IP, 4)) + IPv4Address(requested_ip).packed
        + bytes((OPT_SERVER_ID, 4)) + IPv4Address(server_id).packed
        + bytes((OPT_END,))
    )
    return _with_options(_base_packet(mac, xid), options)


def _iter_options(data: bytes) -> Iterator[tuple[int, bytes]]:
    pos = OPTIONS_OFFSET
    while pos < len(data) and data[pos] != OPT_END:
        if pos + 1 >= len(data):
            break
        code, length = data[pos], data[pos + 1]
        yield code, data[pos + 2:pos + 2 + length]
        pos += 2 + length


def parse_reply(data: Union[bytes, bytearray, memoryview]) -> DhcpLease:
    """Read the offered address, subnet mask and router from an OFFER or ACK."""
    data = bytes(data)
    if len(data) < 20:
        raise DhcpError(f"DHCP reply too short: {len(data)} bytes")
    netmask = gateway = IPv4Address(0)
    for code, value in _iter_options(data):
        if len(value) != 4:
            continue
        if code == OPT_SUBNET_MASK:
            netmask = IPv4Address(value)
        elif code == OPT_ROUTER:
            gateway = IPv4Address(value)
    return DhcpLease(IPv4Address(data[16:20]), netmask, gateway)


def _send(sock: socket.socket, packet: bytes, what: str) -> None:
    sent = sock.sendto(packet, (BROADCAST_ADDRESS, DHCP_SERVER_PORT))
    if sent != len(packet):
        raise DhcpError(f"sendto ({what}) failed")


def _receive(sock: socket.socket) -> bytes:
    data, _ = sock.recvfrom(PACKET_SIZE)
    return data


def dhcp_exchange(mac: bytes, timeout: float = 5.0) -> DhcpLease:
    """Broadcast DISCOVER, then REQUEST the offered address; returns the acknowledged lease."""
    xid = int(time.time()) & 0xFFFFFFFF
    discover = build_discover(mac, xid)
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.settimeout(timeout)
            _send(sock, discover, "DISCOVER")
            offer = parse_reply(_receive(sock))
            _send(sock, build_request(mac, xid, offer.ip, offer.gateway), "REQUEST")
            lease = parse_reply(_receive(sock))
    except OSError as exc:
        raise DhcpError(f"DHCP exchange failed: {exc}") from exc
    logger.info("[DHCP] Assigned IP: %s", lease.ip)
    logger.info("[DHCP] Subnet: %s", lease.netmask)
    logger.info("[DHCP] Gateway: %s", lease.gateway)
    return lease