"""A minimal DNS client for A records."""

from __future__ import annotations

import logging
import socket
import struct
import time
from ipaddress import IPv4Address
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "8.8.8.8"
DNS_PORT = 53
MAX_MESSAGE = 512
MAX_LABEL = 63
HEADER_LEN = 12
QTYPE_A = 1
QCLASS_IN = 1
FLAGS_RECURSION_DESIRED = 0x0100


class DnsError(Exception):
    """Raised when a name cannot be resolved or a response cannot be read."""


def encode_name(hostname: str) -> bytes:
    """Encode a dotted host name as DNS labels ending in a zero byte."""
    name = hostname[:-1] if hostname.endswith(".") else hostname
    encoded = bytearray()
    if name:
        for label in name.split("."):
            raw = label.encode("ascii")
            if not raw:
                raise ValueError(f"empty label in {hostname!r}")
            if len(raw) > MAX_LABEL:
                raise ValueError(f"label longer than {MAX_LABEL} bytes in {hostname!r}")
            encoded.append(len(raw))
            encoded += raw
    encoded.append(0)
    return bytes(encoded)


def build_query(hostname: str, query_id: int) -> bytes:
    """Build a recursive query for the A record of hostname."""
    header = struct.pack("!HHHHHH", query_id & 0xFFFF, FLAGS_RECURSION_DESIRED, 1, 0, 0, 0)
    return header + encode_name(hostname) + struct.pack("!HH", QTYPE_A, QCLASS_IN)


def _skip_name(data: bytes, pos: int) -> int:
    while True:
        length = data[pos]
        if length == 0:
            return pos + 1
        if length & 0xC0 == 0xC0:
            return pos + 2
        pos += length + 1


def parse_a_record(data: Union[bytes, bytearray, memoryview]) -> IPv4Address:
    """Return the first A record among the answers of a response."""
    data = bytes(data)
    if len(data) < HEADER_LEN:
        raise DnsError(f"DNS response too short: {len(data)} bytes")
    (ancount,) = struct.unpack_from("!H", data, 6)
    try:
        pos = _skip_name(data, HEADER_LEN) + 4
        for _ in range(ancount):
            pos = _skip_name(data, pos)
            rtype, _rclass, _ttl, rdlen = struct.unpack_from("!HHIH", data, pos)
            pos += 10
            if rtype == QTYPE_A and rdlen == 4:
                rdata = data[pos:pos + 4]
                if len(rdata) != 4:
                    raise DnsError("truncated A record")
                return IPv4Address(rdata)
            pos += rdlen
    except (IndexError, struct.error) as exc:
        raise DnsError("truncated DNS response") from exc
    raise DnsError("no A record found")


def resolve(hostname: str, server: str = DEFAULT_SERVER, timeout: float = 5.0) -> IPv4Address:
    """Ask server for the A record of hostname."""
    logger.info("[NetStack] DNS resolve %s", hostname)
    query = build_query(hostname, int(time.time()))
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP) as sock:
            sock.settimeout(timeout)
            if sock.sendto(query, (server, DNS_PORT)) != len(query):
                raise DnsError("sendto failed")
            response, _ = sock.recvfrom(MAX_MESSAGE)
    except OSError as exc:
        raise DnsError(f"DNS query failed: {exc}") from exc
    address = parse_a_record(response)
    logger.info("[NetStack] DNS: %s -> %s", hostname, address)
    return address