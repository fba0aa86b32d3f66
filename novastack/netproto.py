"""Decoding of Ethernet, ARP, IPv4, UDP and TCP headers with simple state tracking."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

ETHERTYPE_IPV4 = 0x0800
ETHERTYPE_ARP = 0x0806
IPPROTO_TCP = 6
IPPROTO_UDP = 17
MAX_ARP_ENTRIES = 32
MAX_TCP_CONNECTIONS = 32

ETHERNET_HEADER_LEN = 14
ARP_PACKET_LEN = 28
IPV4_MIN_HEADER_LEN = 20
UDP_HEADER_LEN = 8
TCP_MIN_HEADER_LEN = 20

Buffer = Union[bytes, bytearray, memoryview]
Handler = Callable[[bytes], None]


def _format_mac(mac: bytes) -> str:
    return ":".join(f"{b:02X}" for b in mac)


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs at least {size} bytes, got {len(data)}")


@dataclass(frozen=True)
class EthernetHeader:
    dst: bytes
    src: bytes
    ethertype: int
    payload: bytes


@dataclass(frozen=True)
class ArpPacket:
    op: int
    sender_mac: bytes
    sender_ip: IPv4Address
    target_ip: IPv4Address


@dataclass(frozen=True)
class Ipv4Header:
    ihl: int
    protocol: int
    src: IPv4Address
    dst: IPv4Address
    payload: bytes

    @property
    def header_length(self) -> int:
        return self.ihl * 4


@dataclass(frozen=True)
class UdpHeader:
    src_port: int
    dst_port: int
    length: int
    payload: bytes


@dataclass(frozen=True)
class TcpHeader:
    src_port: int
    dst_port: int
    seq: int
    ack: int
    flags: int


@dataclass
class TcpConnection:
    src_port: int
    dst_port: int
    seq: int
    ack: int
    state: int = 0


def parse_ethernet(data: Buffer) -> EthernetHeader:
    """Decode an Ethernet II frame header."""
    data = bytes(data)
    _require(data, ETHERNET_HEADER_LEN, "Ethernet frame")
    dst, src, ethertype = struct.unpack_from("!6s6sH", data)
    return EthernetHeader(dst, src, ethertype, data[ETHERNET_HEADER_LEN:])


def parse_arp(data: Buffer) -> ArpPacket:
    """Decode an ARP packet for IPv4 over Ethernet."""
    data = bytes(data)
    _require(data, ARP_PACKET_LEN, "ARP packet")
    (op,) = struct.unpack_from("!H", data, 6)
    return ArpPacket(
        op=op,
        sender_mac=data[8:14],
        sender_ip=IPv4Address(data[14:18]),
        target_ip=IPv4Address(data[24:28]),
    )


def parse_ipv4(data: Buffer) -> Ipv4Header:
    """Decode an IPv4 header; the payload starts after IHL * 4 bytes."""
    data = bytes(data)
    _require(data, IPV4_MIN_HEADER_LEN, "IPv4 packet")
    ihl = data[0] & 0x0F
    return Ipv4Header(
        ihl=ihl,
        protocol=data[9],
        src=IPv4Address(data[12:16]),
        dst=IPv4Address(data[16:20]),
        payload=data[ihl * 4:],
    )


def parse_udp(data: Buffer) -> UdpHeader:
    """Decode a UDP header."""
    data = bytes(data)
    _require(data, UDP_HEADER_LEN, "UDP datagram")
    src_port, dst_port, length = struct.unpack_from("!HHH", data)
    return UdpHeader(src_port, dst_port, length, data[UDP_HEADER_LEN:])


def parse_tcp(data: Buffer) -> TcpHeader:
    """Decode the fixed part of a TCP header."""
    data = bytes(data)
    _require(data, TCP_MIN_HEADER_LEN, "TCP segment")
    src_port, dst_port, seq, ack = struct.unpack_from("!HHII", data)
    return TcpHeader(src_port, dst_port, seq, ack, data[13])


class ProtocolStack:
    """Walks frames up the protocol layers, learning ARP entries and TCP connections.

    Packets too short for their layer are ignored and yield None.
    """

    def __init__(self) -> None:
        self.handler: Optional[Handler] = None
        self.arp_table: dict[IPv4Address, bytes] = {}
        self.tcp_connections: list[TcpConnection] = []
        logger.info("[NetProto] Initialized.")

    def register(self, handler: Handler) -> None:
        self.handler = handler
        logger.info("[NetProto] Protocol registered.")

    def process(self, data: Buffer) -> Optional[EthernetHeader]:
        return self.process_ethernet(data)

    def process_ethernet(self, data: Buffer) -> Optional[EthernetHeader]:
        try:
            frame = parse_ethernet(data)
        except ValueError:
            return None
        logger.info(
            "[Ethernet] dst=%s src=%s type=0x%04X",
            _format_mac(frame.dst), _format_mac(frame.src), frame.ethertype,
        )
        if frame.ethertype == ETHERTYPE_IPV4:
            self.process_ipv4(frame.payload)
        elif frame.ethertype == ETHERTYPE_ARP:
            self.process_arp(frame.payload)
        return frame

    def process_arp(self, data: Buffer) -> Optional[ArpPacket]:
        try:
            packet = parse_arp(data)
        except ValueError:
            return None
        logger.info(
            "[ARP] op=%d sender_ip=%s target_ip=%s",
            packet.op, packet.sender_ip, packet.target_ip,
        )
        if packet.sender_ip in self.arp_table or len(self.arp_table) < MAX_ARP_ENTRIES:
            self.arp_table[packet.sender_ip] = packet.sender_mac
        return packet

    def process_ipv4(self, data: Buffer) -> Optional[Ipv4Header]:
        try:
            header = parse_ipv4(data)
        except ValueError:
            return None
        logger.info("[IPv4] src=%s dst=%s proto=%d", header.src, header.dst, header.protocol)
        if header.protocol == IPPROTO_TCP:
            self.process_tcp(header.payload)
        elif header.protocol == IPPROTO_UDP:
            self.process_udp(header.payload)
        return header

    def process_udp(self, data: Buffer) -> Optional[UdpHeader]:
        try:
            header = parse_udp(data)
        except ValueError:
            return None
        logger.info(
            "[UDP] src_port=%d dst_port=%d len=%d",
            header.src_port, header.dst_port, header.length,
        )
        return header

    def process_tcp(self, data: Buffer) -> Optional[TcpHeader]:
        try:
            header = parse_tcp(data)
        except ValueError:
            return None
        logger.info(
            "[TCP] src_port=%d dst_port=%d seq=%d ack=%d flags=0x%02X",
            header.src_port, header.dst_port, header.seq, header.ack, header.flags,
        )
        for conn in self.tcp_connections:
            if conn.src_port == header.src_port and conn.dst_port == header.dst_port:
                conn.seq = header.seq
                conn.ack = header.ack
                break
        else:
            if len(self.tcp_connections) < MAX_TCP_CONNECTIONS:
                self.tcp_connections.append(
                    TcpConnection(header.src_port, header.dst_port, header.seq, header.ack)
                )
        return header