"""Networking and security toolkit: packet decoding, an in-memory network stack, DHCP/DNS clients, encryption and access control."""

__version__ = "0.1.0"