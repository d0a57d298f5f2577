"""Per-process network traffic accounting: IPv4 packet decoding, rates, process mapping and host name resolution."""

__version__ = "0.1.0"