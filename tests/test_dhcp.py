import socket
from ipaddress import IPv4Address
from unittest import mock

import pytest

from novastack.dhcp import (
    DhcpError,
    DhcpLease,
    build_discover,
    build_request,
    dhcp_exchange,
    parse_reply,
)

MAC = bytes((0x02, 0x00, 0x00, 0x00, 0x00, 0x01))


def make_reply(ip, options=b""):
    buf = bytearray(548)
    buf[0] = 2
    buf[16:20] = IPv4Address(ip).packed
    buf[236:240] = bytes((99, 130, 83, 99))
    buf[240:240 + len(options)] = options
    return bytes(buf)


def opt(code, addr):
    return bytes((code, 4)) + IPv4Address(addr).packed


class FakeSocket:
    def __init__(self, replies, short_send=False):
        self.replies = list(replies)
        self.sent = []
        self.options = {}
        self.timeout = None
        self.short_send = short_send

    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def setsockopt(self, level, name, value):
        self.options[(level, name)] = value

    def settimeout(self, value):
        self.timeout = value

    def sendto(self, data, addr):
        self.sent.append((bytes(data), addr))
        return len(data) - 1 if self.short_send else len(data)

    def recvfrom(self, size):
        if not self.replies:
            raise socket.timeout("timed out")
        return self.replies.pop(0), ("192.0.2.1", 67)

    def close(self):
        pass


def test_discover_layout():
    packet = build_discover(MAC, 0x01020304)
    assert len(packet) == 548
    assert packet[0:4] == bytes((1, 1, 6, 0))
    assert packet[4:8] == bytes((1, 2, 3, 4))
    assert packet[28:34] == MAC
    assert packet[236:240] == bytes((99, 130, 83, 99))
    assert packet[240:248] == bytes((53, 1, 1, 55, 2, 1, 3, 255))


def test_request_carries_requested_ip_and_server():
    packet = build_request(MAC, 7, "192.0.2.50", "192.0.2.1")
    assert len(packet) == 548
    assert packet[28:34] == MAC
    assert packet[240:243] == bytes((53, 1, 3))
    assert packet[243:249] == bytes((50, 4)) + IPv4Address("192.0.2.50").packed
    assert packet[249:255] == bytes((54, 4)) + IPv4Address("192.0.2.1").packed
    assert packet[255] == 255


def test_xid_truncated_to_32_bits():
    assert build_discover(MAC, 0x1_0000_0005)[4:8] == build_discover(MAC, 5)[4:8]


def test_bad_mac_length():
    with pytest.raises(ValueError):
        build_discover(b"\x01\x02", 1)


def test_parse_reply_reads_options():
    data = make_reply(
        "192.0.2.50",
        opt(1, "255.255.255.0") + opt(3, "192.0.2.1") + b"\xff",
    )
    lease = parse_reply(data)
    assert lease == DhcpLease(
        IPv4Address("192.0.2.50"),
        IPv4Address("255.255.255.0"),
        IPv4Address("192.0.2.1"),
    )
    assert lease.lease_time == 3600


def test_parse_reply_ignores_options_after_end():
    data = make_reply("192.0.2.50", b"\xff" + opt(3, "192.0.2.1"))
    lease = parse_reply(data)
    assert lease.gateway == IPv4Address(0)
    assert lease.netmask == IPv4Address(0)


def test_parse_reply_skips_other_options_and_wrong_lengths():
    data = make_reply(
        "192.0.2.60",
        bytes((51, 4, 0, 0, 14, 16)) + bytes((1, 2, 255, 255)) + opt(3, "192.0.2.254") + b"\xff",
    )
    lease = parse_reply(data)
    assert lease.netmask == IPv4Address(0)
    assert lease.gateway == IPv4Address("192.0.2.254")


def test_parse_reply_too_short():
    with pytest.raises(DhcpError):
        parse_reply(b"\x02" * 10)


def test_exchange_offer_then_ack():
    offer = make_reply("192.0.2.50", opt(1, "255.255.255.0") + opt(3, "192.0.2.1") + b"\xff")
    ack = make_reply("192.0.2.51", opt(1, "255.255.0.0") + opt(3, "192.0.2.2") + b"\xff")
    fake = FakeSocket([offer, ack])
    with mock.patch("socket.socket", fake):
        lease = dhcp_exchange(MAC, 2.0)
    assert lease.ip == IPv4Address("192.0.2.51")
    assert lease.netmask == IPv4Address("255.255.0.0")
    assert lease.gateway == IPv4Address("192.0.2.2")
    assert fake.timeout == 2.0
    assert fake.options[(socket.SOL_SOCKET, socket.SO_BROADCAST)] == 1
    assert [addr for _, addr in fake.sent] == [("255.255.255.255", 67)] * 2
    discover, request = (data for data, _ in fake.sent)
    assert discover[242] == 1
    assert request[242] == 3
    assert request[245:249] == IPv4Address("192.0.2.50").packed
    assert request[251:255] == IPv4Address("192.0.2.1").packed
    assert discover[4:8] == request[4:8]


def test_exchange_timeout_raises():
    fake = FakeSocket([])
    with mock.patch("socket.socket", fake):
        with pytest.raises(DhcpError):
            dhcp_exchange(MAC, 0.1)


def test_exchange_short_send_raises():
    fake = FakeSocket([make_reply("192.0.2.50", b"\xff")], short_send=True)
    with mock.patch("socket.socket", fake):
        with pytest.raises(DhcpError):
            dhcp_exchange(MAC, 0.1)
    assert len(fake.sent) == 1