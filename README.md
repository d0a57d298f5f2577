# netproc

A library of building blocks for tracking network traffic per process on Linux.

## What it offers

- `netproc.packet`: `PacketParser.parse(network_data, pkttype, if_index, length=None)`
  decodes data that starts at an IPv4 header and returns a `Packet`. The
  `Packet` holds the local and remote address and port, the protocol, the
  length, the interface index and a `Direction` (`DOWN` or `UPLOAD`). Only
  `PacketType.HOST` (received) and `PacketType.OUTGOING` (sent) packets give a
  record. For any other packet type, and for a fragment that cannot be matched,
  the method returns `None`. A malformed header raises `ValueError`. The parser
  remembers the ports of a fragmented packet from its first fragment, so that
  later fragments are credited to them. It tracks at most 32 such packets at a
  time and forgets an entry after three seconds. `pending_fragments()` reports
  how many are tracked. The parser takes a `clock` argument for the time source.
- `netproc.rate`: `NetStat` holds per-second samples of bytes and packets
  received and sent, their averages, the totals and the bytes of the last
  second. `RateCounter` records traffic with `add_rx` and `add_tx`.
  `calc(processes, view_bytes, view_connections)` computes the averages over a
  five-second window; bytes are reported as bits unless `view_bytes` is true.
  `update(processes, view_connections)` moves on to the next second.
- `netproc.processes`: `ProcessTable(proc_root="/proc")` scans a `/proc` tree.
  `update(connections)` takes a mapping of socket inodes to connection objects,
  finds the processes that hold those sockets and sets each connection's
  `process` attribute. The table keeps a process for one more update after it
  is last seen. Iterating the table yields `Process` objects, each with `pid`,
  `name`, `connections` and `net_stat`. `parse_cmdline` and
  `read_process_name` turn a `cmdline` file into one line of text.
- `netproc.resolver`: `Resolver(cache_size=0, num_workers=0)` resolves host
  names on worker threads. `ip_to_domain(address)` returns `(name, resolved)`.
  It answers at once with the textual address and `False` while a lookup is
  pending, and gives the cached name once the lookup has finished.
  `port_to_service(port, proto=None)` returns a service name or `None`.
- Smaller pieces:
  - `netproc.domain.DomainCache`, the ring-buffer cache behind the resolver.
  - `netproc.thread_pool.ThreadPool`, whose `add_task` raises `RuntimeError`
    after `close`.
  - `netproc.task_queue.TaskQueue`.
  - `netproc.sock_util.addresses_equal` and `address_to_text`.
  - `netproc.service.port_to_service`.
  - `netproc.cpu.count_cpu`, which returns 0 when the count is unknown.
  - `netproc.pid.max_pid_digits`.

## Installing

```
pip install .
```

Python 3.10 or later is needed. The package has no third-party dependencies.

## Example

```python
from netproc.resolver import Resolver

with Resolver(cache_size=0, num_workers=0) as resolver:
    print(resolver.ip_to_domain("127.0.0.1"))   # ("127.0.0.1", False) at first
    print(resolver.port_to_service(22, "tcp"))  # "ssh", or None if unknown
```

## What it does not do

This is a library only. It provides no command and no terminal screen. It
does not open a capture socket or read packets from the network. You supply
the packet data, together with its packet type and interface index.

It also does not build the table of connections from the kernel's socket
lists. `ProcessTable.update` needs a mapping of socket inodes to connection
objects that you provide. Nothing is written to log files.

## Running the tests

```
pip install ".[test]"
pytest
```