"""Cache of reverse DNS names resolved in the background."""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Union

from netproc.sock_util import address_to_text

# Number of hosts the cache keeps before it starts reusing old slots.
DEFAULT_CACHE_SIZE = 2048

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
AddressLike = Union[IPAddress, str, bytes, int]


class TaskRunner(Protocol):
    """Anything that can run a function later, such as a thread pool."""

    def add_task(self, func: Callable[..., Any], *args: Any) -> None: ...


class HostStatus(Enum):
    """State of a cached host name."""

    RESOLVED = 1
    RESOLVING = 2


@dataclass
class Host:
    """An address and the name found for it."""

    address: IPAddress
    fqdn: str
    status: HostStatus = HostStatus.RESOLVING


def _reverse_lookup(address: IPAddress) -> str:
    host, _ = socket.getnameinfo((str(address), 0), socket.NI_DGRAM)
    return host


def _as_ip(address: AddressLike) -> IPAddress:
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return address
    return ipaddress.ip_address(address)


class DomainCache:
    """Answers at once with the address text and resolves the name in the background.

    A later lookup of the same address returns the resolved name while it
    stays in the cache.  The cache is a ring of ``size`` slots; the oldest
    entry is replaced once the ring is full, unless it is still resolving.
    """

    def __init__(
        self,
        pool: TaskRunner,
        size: int = 0,
        resolve: Optional[Callable[[IPAddress], str]] = None,
    ) -> None:
        if size < 0:
            raise ValueError("cache size must not be negative")
        self.size = size or DEFAULT_CACHE_SIZE
        self._pool = pool
        self._resolve = resolve or _reverse_lookup
        self._hosts: dict[IPAddress, Host] = {}
        self._ring: list[Optional[Host]] = [None] * self.size
        self._index = 0

    def _run(self, host: Host) -> None:
        text = address_to_text(host.address)
        try:
            name = self._resolve(host.address)
        except Exception:
            name = text
        host.fqdn = name or text
        host.status = HostStatus.RESOLVED

    def lookup(self, address: AddressLike) -> tuple[str, bool]:
        """Return ``(name, resolved)`` for ``address``.

        While the name is not known yet the address text is returned with
        ``resolved`` False, and a resolution is started if none is running.
        """
        ip = _as_ip(address)
        host = self._hosts.get(ip)
        if host is not None:
            if host.status is HostStatus.RESOLVED:
                return host.fqdn, True
            return address_to_text(ip), False

        text = address_to_text(ip)
        old = self._ring[self._index]
        if old is not None and old.status is HostStatus.RESOLVING:
            return text, False

        host = Host(ip, text)
        self._pool.add_task(self._run, host)

        if old is not None:
            self._hosts.pop(old.address, None)
        self._ring[self._index] = host
        self._hosts[ip] = host
        self._index = (self._index + 1) % self.size
        return text, False

    def clear(self) -> None:
        """Forget every cached host."""
        self._hosts.clear()
        self._ring = [None] * self.size
        self._index = 0