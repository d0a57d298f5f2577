"""Comparison and text form of IPv4 and IPv6 addresses."""

from __future__ import annotations

import ipaddress
import socket
from typing import Union

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address, str, bytes, int]


def _as_ip(addr: Address) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
    if isinstance(addr, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return addr
    return ipaddress.ip_address(addr)


def addresses_equal(addr1: Address, addr2: Address) -> bool:
    """Return True when both addresses are of the same family and equal."""
    ip1 = _as_ip(addr1)
    ip2 = _as_ip(addr2)
    return ip1.version == ip2.version and ip1.packed == ip2.packed


def address_to_text(addr: Address) -> str:
    """Return the presentation form of an IPv4 or IPv6 address."""
    ip = _as_ip(addr)
    family = socket.AF_INET if ip.version == 4 else socket.AF_INET6
    return socket.inet_ntop(family, ip.packed)