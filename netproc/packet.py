"""Decoding of captured IPv4 packets into traffic records, with fragment tracking."""

from __future__ import annotations

import ipaddress
import struct
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional

# flags and offset mask of the IPv4 fragment field
_IP_DF = 0x4000
_IP_MF = 0x2000
_IP_OFFMASK = 0x1FFF

# Most IP packets that may be in reassembly at the same time.
MAX_REASSEMBLIES = 32

# Seconds a fragmented packet is remembered while its fragments arrive.
LIFETIME_FRAG = 3

_IPV4_MIN_HEADER = 20
_IPV4_HEADER = struct.Struct("!BBHHHBBH4s4s")
_PORTS = struct.Struct("!HH")


class Direction(IntEnum):
    """Whether a packet was received or sent."""

    DOWN = 1
    UPLOAD = 2


class PacketType(IntEnum):
    """Link-layer packet type as reported by a packet socket."""

    HOST = 0
    BROADCAST = 1
    MULTICAST = 2
    OTHERHOST = 3
    OUTGOING = 4
    LOOPBACK = 5
    USER = 6
    KERNEL = 7


@dataclass(frozen=True)
class Packet:
    """Addresses, ports and size of one packet, seen from the local host."""

    local_address: ipaddress.IPv4Address
    remote_address: ipaddress.IPv4Address
    protocol: int
    local_port: int
    remote_port: int
    length: int
    if_index: int
    direction: Direction


@dataclass
class _Fragment:
    created: float
    saddr: bytes
    daddr: bytes
    ident: int
    source_port: int
    dest_port: int


@dataclass(frozen=True)
class _IPHeader:
    header_length: int
    ident: int
    frag_off: int
    protocol: int
    saddr: bytes
    daddr: bytes


class _FragmentUnavailable(Exception):
    """A fragment that cannot be stored or whose first fragment is unknown."""


def _parse_header(data: bytes) -> _IPHeader:
    if len(data) < _IPV4_MIN_HEADER:
        raise ValueError("data too short for an IPv4 header")
    ver_ihl, _, _, ident, frag_off, _, protocol, _, saddr, daddr = _IPV4_HEADER.unpack_from(data)
    header_length = (ver_ihl & 0x0F) * 4
    if header_length < _IPV4_MIN_HEADER or len(data) < header_length:
        raise ValueError("invalid IPv4 header length")
    return _IPHeader(header_length, ident, frag_off, protocol, saddr, daddr)


def _ports(data: bytes, header: _IPHeader) -> tuple[int, int]:
    if len(data) < header.header_length + _PORTS.size:
        raise ValueError("data too short for transport ports")
    return _PORTS.unpack_from(data, header.header_length)


class PacketParser:
    """Turns IPv4 packets into :class:`Packet` records.

    Fragments after the first carry no transport header, so the ports of a
    fragmented packet are remembered from its first fragment until the last
    one arrives or the entry grows older than ``LIFETIME_FRAG`` seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._fragments: list[Optional[_Fragment]] = [None] * MAX_REASSEMBLIES

    def pending_fragments(self) -> int:
        """Return how many fragmented packets are being tracked."""
        return sum(fragment is not None for fragment in self._fragments)

    def _store(self, header: _IPHeader, data: bytes) -> _Fragment:
        for slot, current in enumerate(self._fragments):
            if current is None:
                source_port, dest_port = _ports(data, header)
                fragment = _Fragment(
                    self._clock(),
                    header.saddr,
                    header.daddr,
                    header.ident,
                    source_port,
                    dest_port,
                )
                self._fragments[slot] = fragment
                return fragment
        raise _FragmentUnavailable

    def _search(self, header: _IPHeader) -> _Fragment:
        for slot, fragment in enumerate(self._fragments):
            if (
                fragment is None
                or fragment.ident != header.ident
                or fragment.saddr != header.saddr
                or fragment.daddr != header.daddr
            ):
                continue
            if not header.frag_off & _IP_MF:
                # last fragment: release the slot
                self._fragments[slot] = None
            return fragment
        raise _FragmentUnavailable

    def _fragment_of(self, header: _IPHeader, data: bytes) -> Optional[_Fragment]:
        frag_off = header.frag_off
        if frag_off & _IP_DF:
            return None
        if frag_off & _IP_MF and not frag_off & _IP_OFFMASK:
            return self._store(header, data)
        if frag_off & _IP_OFFMASK:
            return self._search(header)
        return None

    def _expire(self) -> None:
        now = self._clock()
        self._fragments = [
            fragment
            if fragment is not None and now - fragment.created < LIFETIME_FRAG
            else None
            for fragment in self._fragments
        ]

    def parse(
        self,
        network_data: bytes,
        pkttype: int,
        if_index: int,
        length: Optional[int] = None,
    ) -> Optional[Packet]:
        """Decode a packet that starts at its IPv4 header.

        Returns None for packets that are neither sent nor received by this
        host and for fragments that cannot be matched to a first fragment.
        ``length`` is the captured size and defaults to the size of the data.
        Raises ValueError when the IPv4 header is malformed.
        """
        header = _parse_header(network_data)
        if length is None:
            length = len(network_data)
        try:
            try:
                fragment = self._fragment_of(header, network_data)
            except _FragmentUnavailable:
                return None

            if pkttype == PacketType.OUTGOING:
                direction = Direction.UPLOAD
            elif pkttype == PacketType.HOST:
                direction = Direction.DOWN
            else:
                return None

            if fragment is None:
                source_port, dest_port = _ports(network_data, header)
            else:
                source_port, dest_port = fragment.source_port, fragment.dest_port

            saddr = ipaddress.IPv4Address(header.saddr)
            daddr = ipaddress.IPv4Address(header.daddr)
            if direction is Direction.UPLOAD:
                return Packet(saddr, daddr, header.protocol, source_port, dest_port,
                              length, if_index, direction)
            return Packet(daddr, saddr, header.protocol, dest_port, source_port,
                          length, if_index, direction)
        finally:
            self._expire()