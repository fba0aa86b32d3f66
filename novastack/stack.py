"""Interfaces, neighbour tables, sockets and services of the network stack."""

from __future__ import annotations

import enum
import logging
import random
import socket
from dataclasses import dataclass, field, replace
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Union

from novastack import dhcp, dns
from novastack.netproto import EthernetHeader, ProtocolStack

logger = logging.getLogger(__name__)

MAX_SOCKETS = 16
MAX_INTERFACES = 4
MAX_NAME_LEN = 15
ARP_TABLE_SIZE = 16
NDP_TABLE_SIZE = 16
FW_MAX_RULES = 16
WIFI_MAX_NETWORKS = 8
MAX_SSID_LEN = 31
MAX_CONTROLLER_LEN = 64
LEASE_RENEW_AT = 10
TICK_PAYLOAD = b"Hello, network!"
DEFAULT_MAC = bytes((0xDE, 0xAD, 0xBE, 0xEF, 0x00, 0x01))

IPv4Like = Union[IPv4Address, str, int, bytes]
IPv6Like = Union[IPv6Address, str, int, bytes]


class NetStackError(Exception):
    """Raised when a stack operation cannot be carried out."""


class SockType(enum.Enum):
    TCP = "tcp"
    UDP = "udp"


def _mac(value: Union[bytes, bytearray]) -> bytes:
    mac = bytes(value)
    if len(mac) != 6:
        raise ValueError(f"MAC address must be 6 bytes, got {len(mac)}")
    return mac


def _format_mac(mac: bytes) -> str:
    return ":".join(f"{b:02X}" for b in mac)


@dataclass
class NetworkInterface:
    name: str
    mac: bytes
    ip_addr: IPv4Address = IPv4Address(0)
    netmask: IPv4Address = IPv4Address(0)
    gateway: IPv4Address = IPv4Address(0)
    ipv6_addr: IPv6Address = IPv6Address(0)
    ipv6_prefix_len: int = 0
    ipv6_gateway: IPv6Address = IPv6Address(0)
    up: bool = False
    dhcp_lease_time: int = 0
    dhcp_lease_timer: int = 0


@dataclass(frozen=True)
class WifiNetwork:
    ssid: str
    signal_strength: int
    security: int  # 0=open, 1=WEP, 2=WPA, 3=WPA2


@dataclass(frozen=True)
class FirewallRule:
    action: str
    proto: str
    src_ip: IPv4Address = IPv4Address(0)
    dst_ip: IPv4Address = IPv4Address(0)
    src_port: int = 0
    dst_port: int = 0

    def __post_init__(self) -> None:
        if self.action not in ("allow", "deny"):
            raise ValueError(f"firewall action must be 'allow' or 'deny', got {self.action!r}")


@dataclass(frozen=True)
class PingStats:
    success: int
    loss: int
    avg_ms: int


@dataclass
class _Socket:
    id: int
    type: SockType
    remote_addr: IPv4Address
    remote_port: int
    handle: socket.socket


_DEFAULT_WIFI = (
    WifiNetwork("NeoNova-Home", -40, 3),
    WifiNetwork("CoffeeShop", -65, 0),
    WifiNetwork("OfficeNet", -55, 2),
    WifiNetwork("Guest", -80, 0),
)


@dataclass
class _SdnEndpoint:
    address: str = ""
    port: int = 0


class NetStack:
    """The network stack: interfaces, ARP/NDP tables, sockets, DHCP, DNS, Wi-Fi and firewall."""

    def __init__(self) -> None:
        self._sockets: dict[int, _Socket] = {}
        self._next_sock_id = 1
        self._interfaces: list[NetworkInterface] = [NetworkInterface("eth0", DEFAULT_MAC)]
        self._arp: dict[IPv4Address, bytes] = {}
        self._ndp: dict[IPv6Address, bytes] = {}
        self._wifi: list[WifiNetwork] = list(_DEFAULT_WIFI)
        self.wifi_connected_ssid = ""
        self._fw_rules: list[FirewallRule] = []
        self.sdn = _SdnEndpoint()
        self.protocols = ProtocolStack()
        self.dhcp_timeout = 5.0
        self.dns_server = dns.DEFAULT_SERVER
        self.dns_timeout = 5.0
        self._rng = random.Random()
        logger.info("[NetStack] Initialized.")

    def shutdown(self) -> None:
        """Close every open socket."""
        for entry in self._sockets.values():
            entry.handle.close()
        self._sockets.clear()
        logger.info("[NetStack] Shutdown.")

    def __enter__(self) -> "NetStack":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def tick(self) -> Optional[EthernetHeader]:
        """Age DHCP leases, then push a test packet through the protocol layers."""
        logger.info("[NetStack] Tick.")
        for iface in self._interfaces:
            if not (iface.up and iface.dhcp_lease_time > 0):
                continue
            iface.dhcp_lease_timer -= 1
            if iface.dhcp_lease_timer == LEASE_RENEW_AT:
                logger.info("[NetStack] DHCP lease for %s expiring soon, renewing...", iface.name)
                try:
                    self.dhcp_request(iface.name)
                except NetStackError as exc:
                    logger.warning("[NetStack] DHCP renewal for %s failed: %s", iface.name, exc)
            elif iface.dhcp_lease_timer <= 0:
                logger.info("[NetStack] DHCP lease for %s expired, interface down", iface.name)
                iface.up = False
        logger.info("[NetStack] Sending packet: %s", TICK_PAYLOAD.decode())
        return self.protocols.process(TICK_PAYLOAD)

    # Sockets

    def open_socket(self, sock_type: SockType, remote_addr: IPv4Like, remote_port: int) -> int:
        """Open a socket to the remote endpoint and return its id."""
        if len(self._sockets) >= MAX_SOCKETS:
            raise NetStackError("no free socket slots")
        kind = SockType(sock_type)
        addr = IPv4Address(remote_addr)
        if kind is SockType.TCP:
            handle = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        else:
            handle = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            handle.connect((str(addr), remote_port))
        except OSError as exc:
            handle.close()
            raise NetStackError(f"{kind.name} connect failed: {exc}") from exc
        sock_id = self._next_sock_id
        self._next_sock_id += 1
        self._sockets[sock_id] = _Socket(sock_id, kind, addr, remote_port, handle)
        logger.info("[NetStack] Opened %s socket %d to %s:%d", kind.name, sock_id, addr, remote_port)
        return sock_id

    def _socket(self, sock_id: int) -> _Socket:
        try:
            return self._sockets[sock_id]
        except KeyError:
            raise NetStackError(f"no socket with id {sock_id}") from None

    def close_socket(self, sock_id: int) -> None:
        entry = self._socket(sock_id)
        entry.handle.close()
        del self._sockets[sock_id]
        logger.info("[NetStack] Closed socket %d", sock_id)

    def send(self, sock_id: int, data: Union[bytes, bytearray, memoryview]) -> int:
        entry = self._socket(sock_id)
        try:
            sent = entry.handle.send(data)
        except OSError as exc:
            raise NetStackError(f"send error: {exc}") from exc
        logger.info("[NetStack] Sent %d bytes on socket %d", sent, sock_id)
        return sent

    def recv(self, sock_id: int, maxlen: int) -> bytes:
        if maxlen < 1:
            raise ValueError("maxlen must be positive")
        entry = self._socket(sock_id)
        try:
            data = entry.handle.recv(maxlen)
        except OSError as exc:
            raise NetStackError(f"recv error: {exc}") from exc
        logger.info("[NetStack] Received %d bytes on socket %d", len(data), sock_id)
        return data

    # Interfaces

    def _interface(self, name: str) -> NetworkInterface:
        for iface in self._interfaces:
            if iface.name == name:
                return iface
        raise NetStackError(f"no interface named {name!r}")

    def list_interfaces(self) -> list[NetworkInterface]:
        """Return copies of the interfaces in order."""
        return [replace(iface) for iface in self._interfaces]

    def set_up(self, name: str, up: bool) -> None:
        iface = self._interface(name)
        iface.up = bool(up)
        logger.info("[NetStack] Interface %s set %s", name, "UP" if up else "DOWN")

    def configure(self, name: str, ip: IPv4Like, netmask: IPv4Like, gateway: IPv4Like) -> None:
        iface = self._interface(name)
        iface.ip_addr = IPv4Address(ip)
        iface.netmask = IPv4Address(netmask)
        iface.gateway = IPv4Address(gateway)
        logger.info("[NetStack] Interface %s configured", name)

    def configure_v6(self, name: str, addr: IPv6Like, prefix_len: int, gateway: IPv6Like) -> None:
        if not 0 <= prefix_len <= 128:
            raise ValueError(f"prefix length must be 0..128, got {prefix_len}")
        iface = self._interface(name)
        iface.ipv6_addr = IPv6Address(addr)
        iface.ipv6_prefix_len = prefix_len
        iface.ipv6_gateway = IPv6Address(gateway)
        logger.info("[NetStack] Interface %s configured (IPv6)", name)

    def hotplug_add(self, name: str, mac: bytes) -> None:
        if len(name) > MAX_NAME_LEN:
            raise ValueError(f"interface name longer than {MAX_NAME_LEN} characters")
        mac = _mac(mac)
        if len(self._interfaces) >= MAX_INTERFACES:
            raise NetStackError("interface table full")
        self._interfaces.append(NetworkInterface(name, mac))
        logger.info("[NetStack] Hotplug: added interface %s", name)
        logger.info("[Notification] Network device %s added", name)

    def hotplug_remove(self, name: str) -> None:
        self._interfaces.remove(self._interface(name))
        logger.info("[NetStack] Hotplug: removed interface %s", name)
        logger.info("[Notification] Network device %s removed", name)

    # Neighbour tables

    def arp_resolve(self, ip: IPv4Like) -> bytes:
        addr = IPv4Address(ip)
        try:
            mac = self._arp[addr]
        except KeyError:
            logger.info("[NetStack] ARP resolve miss for %s", addr)
            raise NetStackError(f"ARP resolve miss for {addr}") from None
        logger.info("[NetStack] ARP resolve %s -> %s", addr, _format_mac(mac))
        return mac

    def arp_update(self, ip: IPv4Like, mac: bytes) -> None:
        addr = IPv4Address(ip)
        mac = _mac(mac)
        if addr in self._arp:
            logger.info("[NetStack] ARP update %s", addr)
        elif len(self._arp) < ARP_TABLE_SIZE:
            logger.info("[NetStack] ARP add %s", addr)
        else:
            raise NetStackError("ARP table full")
        self._arp[addr] = mac

    def ndp_resolve(self, addr: IPv6Like) -> bytes:
        key = IPv6Address(addr)
        try:
            mac = self._ndp[key]
        except KeyError:
            logger.info("[NetStack] NDP resolve miss")
            raise NetStackError(f"NDP resolve miss for {key}") from None
        logger.info("[NetStack] NDP resolve -> %s", _format_mac(mac))
        return mac

    def ndp_update(self, addr: IPv6Like, mac: bytes) -> None:
        key = IPv6Address(addr)
        mac = _mac(mac)
        if key in self._ndp:
            logger.info("[NetStack] NDP update")
        elif len(self._ndp) < NDP_TABLE_SIZE:
            logger.info("[NetStack] NDP add")
        else:
            raise NetStackError("NDP table full")
        self._ndp[key] = mac

    # Services

    def ping(self, host: str, count: int = 4) -> PingStats:
        """Simulated ICMP echo: about 80% of probes answer in 42-51 ms."""
        logger.info("[NetStack] ICMP ping %s x%d", host, count)
        success = loss = total_ms = 0
        for seq in range(1, count + 1):
            ms = 42 + self._rng.randrange(10)
            if self._rng.randrange(10) < 8:
                logger.info("[NetStack] Pinging %s: seq=%d ... reply in %d ms", host, seq, ms)
                success += 1
                total_ms += ms
            else:
                logger.info("[NetStack] Pinging %s: seq=%d ... timeout", host, seq)
                loss += 1
        return PingStats(success, loss, total_ms // success if success else 0)

    def dhcp_request(self, name: str) -> dhcp.DhcpLease:
        """Obtain a lease for the interface and apply it."""
        iface = self._interface(name)
        logger.info("[NetStack] DHCP request on %s", name)
        try:
            lease = dhcp.dhcp_exchange(iface.mac, self.dhcp_timeout)
        except dhcp.DhcpError as exc:
            raise NetStackError(str(exc)) from exc
        iface.ip_addr = lease.ip
        iface.netmask = lease.netmask
        iface.gateway = lease.gateway
        iface.up = True
        iface.dhcp_lease_time = lease.lease_time
        iface.dhcp_lease_timer = lease.lease_time
        return lease

    def dns_resolve(self, hostname: str) -> IPv4Address:
        try:
            return dns.resolve(hostname, self.dns_server, self.dns_timeout)
        except dns.DnsError as exc:
            raise NetStackError(str(exc)) from exc

    # Wi-Fi

    def wifi_scan(self) -> int:
        """No wireless API is available here; the known list is left as it is."""
        logger.info("[NetStack] Wi-Fi scan not supported on this platform.")
        return 0

    def wifi_list(self) -> list[WifiNetwork]:
        return list(self._wifi[:WIFI_MAX_NETWORKS])

    def wifi_join(self, ssid: str, password: str) -> None:
        logger.info("[NetStack] Wi-Fi join not supported on this platform.")
        raise NetStackError(f"Wi-Fi join not supported on this platform: {ssid[:MAX_SSID_LEN]}")

    # Firewall and SDN

    def fw_add_rule(self, rule: FirewallRule) -> None:
        if len(self._fw_rules) >= FW_MAX_RULES:
            raise NetStackError("firewall rule table full")
        self._fw_rules.append(rule)
        logger.info("[NetStack] Firewall rule added")

    def fw_remove_rule(self, index: int) -> FirewallRule:
        if not 0 <= index < len(self._fw_rules):
            raise NetStackError(f"no firewall rule at index {index}")
        rule = self._fw_rules.pop(index)
        logger.info("[NetStack] Firewall rule removed")
        return rule

    def fw_list_rules(self) -> list[FirewallRule]:
        return list(self._fw_rules)

    def set_sdn_controller(self, addr: str, port: int) -> None:
        self.sdn = _SdnEndpoint(addr[:MAX_CONTROLLER_LEN], port)
        logger.info("[NetStack] SDN controller set to %s:%d", addr, port)