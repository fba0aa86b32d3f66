import socket
import struct
from ipaddress import IPv4Address
from unittest import mock

import pytest

from novastack.dns import DnsError, build_query, encode_name, parse_a_record, resolve


def answer(rtype, rdata, name=b"\xc0\x0c"):
    return name + struct.pack("!HHIH", rtype, 1, 300, len(rdata)) + rdata


def make_response(hostname, answers, query_id=0x1234):
    header = struct.pack("!HHHHHH", query_id, 0x8180, 1, len(answers), 0, 0)
    question = encode_name(hostname) + b"\x00\x01\x00\x01"
    return header + question + b"".join(answers)


class FakeSocket:
    def __init__(self, replies):
        self.replies = list(replies)
        self.sent = []
        self.timeout = None

    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def settimeout(self, value):
        self.timeout = value

    def sendto(self, data, addr):
        self.sent.append((bytes(data), addr))
        return len(data)

    def recvfrom(self, size):
        if not self.replies:
            raise socket.timeout("timed out")
        return self.replies.pop(0), ("8.8.8.8", 53)

    def close(self):
        pass


def test_encode_name_labels():
    assert encode_name("www.example.com") == b"\x03www\x07example\x03com\x00"


def test_encode_name_trailing_dot_same():
    assert encode_name("example.com.") == encode_name("example.com")


def test_encode_name_rejects_bad_labels():
    with pytest.raises(ValueError):
        encode_name("a..b")
    with pytest.raises(ValueError):
        encode_name("x" * 64 + ".com")


def test_build_query_layout():
    query = build_query("example.com", 0xBEEF)
    assert query[:2] == b"\xbe\xef"
    assert query[2:12] == b"\x01\x00\x00\x01\x00\x00\x00\x00\x00\x00"
    assert query[12:-4] == encode_name("example.com")
    assert query[-4:] == b"\x00\x01\x00\x01"


def test_build_query_id_truncated():
    assert build_query("a.example.com", 0x1_0007)[:2] == build_query("a.example.com", 7)[:2]


def test_parse_compressed_a_record():
    addr = IPv4Address("192.0.2.7")
    data = make_response("example.com", [answer(1, addr.packed)])
    assert parse_a_record(data) == addr


def test_parse_skips_cname_before_a():
    addr = IPv4Address("192.0.2.8")
    cname = encode_name("alias.example.com")
    data = make_response(
        "www.example.com",
        [answer(5, cname), answer(1, addr.packed, name=encode_name("alias.example.com"))],
    )
    assert parse_a_record(data) == addr


def test_parse_no_answer():
    with pytest.raises(DnsError):
        parse_a_record(make_response("example.com", []))


def test_parse_only_non_a_answers():
    data = make_response("example.com", [answer(28, bytes(16))])
    with pytest.raises(DnsError):
        parse_a_record(data)


def test_parse_truncated():
    data = make_response("example.com", [answer(1, IPv4Address("192.0.2.7").packed)])
    with pytest.raises(DnsError):
        parse_a_record(data[:-6])
    with pytest.raises(DnsError):
        parse_a_record(data[:5])


def test_resolve_through_fake_socket():
    addr = IPv4Address("192.0.2.99")
    fake = FakeSocket([make_response("example.com", [answer(1, addr.packed)])])
    with mock.patch("socket.socket", fake):
        result = resolve("example.com", timeout=1.5)
    assert result == addr
    assert fake.timeout == 1.5
    sent, dest = fake.sent[0]
    assert dest == ("8.8.8.8", 53)
    assert sent[12:-4] == encode_name("example.com")


def test_resolve_custom_server():
    addr = IPv4Address("192.0.2.100")
    fake = FakeSocket([make_response("example.com", [answer(1, addr.packed)])])
    with mock.patch("socket.socket", fake):
        assert resolve("example.com", "192.0.2.53") == addr
    assert fake.sent[0][1] == ("192.0.2.53", 53)


def test_resolve_timeout_raises():
    fake = FakeSocket([])
    with mock.patch("socket.socket", fake):
        with pytest.raises(DnsError):
            resolve("example.com", timeout=0.1)