"""Traffic counters and averages over the last few seconds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

# Number of one-second samples averaged.
SAMPLE_SPACE_SIZE = 5


def _samples() -> list[int]:
    return [0] * SAMPLE_SPACE_SIZE


def _average(samples: Sequence[int], factor: int = 1) -> int:
    total = sum(samples) * factor
    # total / SAMPLE_SPACE_SIZE rounded half up, in integer arithmetic
    return (2 * total + SAMPLE_SPACE_SIZE) // (2 * SAMPLE_SPACE_SIZE)


@dataclass
class NetStat:
    """Per-second samples, averages and totals of received and sent traffic."""

    packets_rx: list[int] = field(default_factory=_samples)
    packets_tx: list[int] = field(default_factory=_samples)
    bytes_rx: list[int] = field(default_factory=_samples)
    bytes_tx: list[int] = field(default_factory=_samples)

    # averages; the byte averages are in bits unless bytes were asked for
    avg_bytes_rx: int = 0
    avg_bytes_tx: int = 0
    avg_packets_rx: int = 0
    avg_packets_tx: int = 0

    total_bytes_rx: int = 0
    total_bytes_tx: int = 0

    bytes_last_sec_rx: int = 0
    bytes_last_sec_tx: int = 0

    def _compute_averages(self, view_bytes: bool) -> None:
        factor = 1 if view_bytes else 8
        self.avg_bytes_rx = _average(self.bytes_rx, factor)
        self.avg_bytes_tx = _average(self.bytes_tx, factor)
        self.avg_packets_rx = _average(self.packets_rx)
        self.avg_packets_tx = _average(self.packets_tx)

    def _clear_sample(self, index: int) -> None:
        self.bytes_rx[index] = 0
        self.bytes_tx[index] = 0
        self.packets_rx[index] = 0
        self.packets_tx[index] = 0


class _HasStat(Protocol):
    net_stat: NetStat


class _Process(Protocol):
    net_stat: NetStat
    connections: Sequence[_HasStat]


class RateCounter:
    """Writes samples into the current second's slot and rotates the slots."""

    def __init__(self) -> None:
        self.index = 0

    @staticmethod
    def _check(length: int) -> None:
        if length < 0:
            raise ValueError("length must not be negative")

    def add_rx(self, stat: NetStat, length: int) -> None:
        """Count one received packet of ``length`` bytes."""
        self._check(length)
        stat.packets_rx[self.index] += 1
        stat.bytes_rx[self.index] += length
        stat.bytes_last_sec_rx += length
        stat.total_bytes_rx += length

    def add_tx(self, stat: NetStat, length: int) -> None:
        """Count one sent packet of ``length`` bytes."""
        self._check(length)
        stat.packets_tx[self.index] += 1
        stat.bytes_tx[self.index] += length
        stat.bytes_last_sec_tx += length
        stat.total_bytes_tx += length

    def calc(
        self,
        processes: Iterable[_Process],
        view_bytes: bool,
        view_connections: bool,
    ) -> None:
        """Compute the averages of every process and, if asked, its connections."""
        for process in processes:
            process.net_stat._compute_averages(view_bytes)
            if view_connections:
                for connection in process.connections:
                    connection.net_stat._compute_averages(view_bytes)

    def update(self, processes: Iterable[_Process], view_connections: bool) -> None:
        """Move to the next second and clear its slot."""
        self.index = (self.index + 1) % SAMPLE_SPACE_SIZE
        for process in processes:
            stat = process.net_stat
            stat._clear_sample(self.index)
            stat.bytes_last_sec_rx = 0
            stat.bytes_last_sec_tx = 0
            if view_connections:
                for connection in process.connections:
                    connection.net_stat._clear_sample(self.index)