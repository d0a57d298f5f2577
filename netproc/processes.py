"""Processes that own network connections, found through a /proc tree."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, Union

from netproc.rate import NetStat

_SOCKET_LINK = re.compile(r"socket:\[(\d+)")


def parse_cmdline(data: bytes) -> str:
    """Turn the raw contents of a ``cmdline`` file into one line of text.

    The last byte is dropped and every NUL or newline before it becomes a
    space.  Raises ValueError when ``data`` is empty.
    """
    if not data:
        raise ValueError("empty command line")
    text = data[:-1].replace(b"\0", b" ").replace(b"\n", b" ")
    return text.decode("utf-8", errors="replace")


def read_process_name(pid: int, proc_root: Union[str, os.PathLike] = "/proc") -> str:
    """Return the command line of process ``pid`` as read from ``proc_root``.

    Raises OSError when the file cannot be read and ValueError when it is empty.
    """
    data = (Path(proc_root) / str(pid) / "cmdline").read_bytes()
    return parse_cmdline(data)


def _numeric_entries(directory: Path) -> list[int]:
    return sorted(int(entry.name) for entry in os.scandir(directory) if entry.name.isdigit())


@dataclass(eq=False)
class Process:
    """A process, its connections and its traffic statistics."""

    pid: int
    name: str
    connections: list[Any] = field(default_factory=list)
    net_stat: NetStat = field(default_factory=NetStat)
    active: bool = True

    @property
    def total_connections(self) -> int:
        return len(self.connections)


class ProcessTable:
    """Processes with open sockets, refreshed from the /proc tree.

    A process that stops being seen is kept for one more update before it
    is forgotten, so its statistics survive a short gap.
    """

    def __init__(self, proc_root: Union[str, os.PathLike] = "/proc") -> None:
        self.proc_root = Path(proc_root)
        self._known: dict[int, Process] = {}
        self._current: list[Process] = []

    def _forget_dead(self) -> None:
        for pid, process in list(self._known.items()):
            if not process.active:
                del self._known[pid]
            else:
                process.active = False

    def update(self, connections: Mapping[int, Any]) -> None:
        """Match open socket descriptors against ``connections``.

        ``connections`` maps socket inodes to connection objects; each one
        found gets its ``process`` attribute set to the owning process.
        Raises OSError when the process directory cannot be listed.
        """
        pids = _numeric_entries(self.proc_root)

        self._forget_dead()
        self._current = []

        for pid in pids:
            fd_dir = self.proc_root / str(pid) / "fd"
            try:
                fds = _numeric_entries(fd_dir)
            except OSError:
                continue

            process = self._known.get(pid)
            if process is not None:
                process.active = True
                process.connections.clear()

            for fd in fds:
                try:
                    link = os.readlink(fd_dir / str(fd))
                except OSError:
                    continue
                match = _SOCKET_LINK.match(link)
                if not match:
                    continue
                connection = connections.get(int(match.group(1)))
                if connection is None:
                    continue

                if process is None:
                    try:
                        name = read_process_name(pid, self.proc_root)
                    except (OSError, ValueError):
                        break
                    process = Process(pid, name)
                    self._known[pid] = process

                connection.process = process
                process.connections.append(connection)

            if process is not None:
                self._current.append(process)

    def __iter__(self) -> Iterator[Process]:
        return iter(self._current)

    def __len__(self) -> int:
        return len(self._current)