"""Cache of swap outputs keyed by pool and input amount."""

from __future__ import annotations

import threading

__all__ = ["Cache"]

# Expected number of distinct input amounts seen per pool.
_AMOUNTS_PER_POOL = 100


class Cache:
    """Thread-safe memo of ``(pool, amount_in) -> amount_out``."""

    def __init__(self, num_pools: int) -> None:
        self.capacity_hint = num_pools * _AMOUNTS_PER_POOL
        self._entries: dict[tuple[str, int], int] = {}
        self._lock = threading.Lock()

    def get(self, amount_in: int, pool_address: str) -> int | None:
        """Return the cached output, or ``None`` when nothing is stored."""
        with self._lock:
            return self._entries.get((pool_address, amount_in))

    def set(self, amount_in: int, pool_address: str, output_amount: int) -> None:
        """Store the output of swapping *amount_in* through *pool_address*."""
        with self._lock:
            self._entries[(pool_address, amount_in)] = output_amount

    def invalidate(self, pool_address: str) -> None:
        """Drop every entry that belongs to *pool_address*."""
        with self._lock:
            self._entries = {
                key: value
                for key, value in self._entries.items()
                if key[0] != pool_address
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)