"""Name resolution for addresses and ports."""

from __future__ import annotations

from typing import Any, Optional

from netproc.domain import AddressLike, DomainCache
from netproc.service import port_to_service
from netproc.thread_pool import ThreadPool


class Resolver:
    """Resolves host names on worker threads and looks up service names."""

    def __init__(self, cache_size: int = 0, num_workers: int = 0) -> None:
        self._pool = ThreadPool(num_workers)
        try:
            self._cache = DomainCache(self._pool, cache_size)
        except Exception:
            self._pool.close()
            raise

    def ip_to_domain(self, address: AddressLike) -> tuple[str, bool]:
        """Return ``(name, resolved)``; see :meth:`DomainCache.lookup`."""
        return self._cache.lookup(address)

    def port_to_service(self, port: int, proto: Optional[str] = None) -> Optional[str]:
        """Return the service name for ``port``, or None if unknown."""
        return port_to_service(port, proto)

    def close(self) -> None:
        """Stop the workers and empty the cache."""
        self._pool.close()
        self._cache.clear()

    def __enter__(self) -> "Resolver":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()