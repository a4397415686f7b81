"""Swap output calculation over a snapshot of pool state."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from basebuster.aerodrome import aerodrome_out
from basebuster.cache import Cache
from basebuster.pools import Pool, PoolType, SwapPath
from basebuster.uniswap import uniswap_v2_out

__all__ = [
    "PoolState",
    "MarketSnapshot",
    "Calculator",
    "UnsupportedPoolError",
]

_CACHED_POOLS = 500

_V2_FEES = {
    PoolType.UNISWAP_V2: 9970,
    PoolType.SUSHISWAP_V2: 9970,
    PoolType.SWAPBASED_V2: 9970,
    PoolType.PANCAKESWAP_V2: 9975,
    PoolType.BASESWAP_V2: 9975,
    PoolType.DACKIESWAP_V2: 9975,
    PoolType.ALIENBASE_V2: 9984,
}


class UnsupportedPoolError(ValueError):
    """Raised when no output formula exists for a pool type."""


@dataclass(frozen=True)
class PoolState:
    """Reserves and parameters of a pool at one point in time.

    *fee* is in hundredths of a percent and is used by Aerodrome pools.
    """

    reserve0: int = 0
    reserve1: int = 0
    decimals0: int = 18
    decimals1: int = 18
    fee: int = 0
    stable: bool = False


class MarketSnapshot:
    """Thread-safe store of pools and their current state."""

    def __init__(self) -> None:
        self._pools: dict[str, tuple[Pool, PoolState]] = {}
        self._lock = threading.Lock()

    def add_pool(self, pool: Pool, state: PoolState) -> None:
        """Register *pool* with its initial *state*, replacing any previous one."""
        with self._lock:
            self._pools[pool.address] = (pool, state)

    def update_reserves(self, pool_address: str, reserve0: int, reserve1: int) -> None:
        """Replace the reserves of a registered pool."""
        with self._lock:
            pool, state = self._lookup(pool_address)
            self._pools[pool_address] = (
                pool,
                dataclasses.replace(state, reserve0=reserve0, reserve1=reserve1),
            )

    def get(self, pool_address: str) -> tuple[Pool, PoolState]:
        """Return the pool and its state; ``KeyError`` if unknown."""
        with self._lock:
            return self._lookup(pool_address)

    def _lookup(self, pool_address: str) -> tuple[Pool, PoolState]:
        try:
            return self._pools[pool_address]
        except KeyError:
            raise KeyError(f"unknown pool {pool_address}") from None


def _zero_to_one(pool: Pool, token_in: str) -> bool:
    if token_in == pool.token0:
        return True
    if token_in == pool.token1:
        return False
    raise ValueError(f"token {token_in} is not in pool {pool.address}")


class Calculator:
    """Computes swap path outputs, memoising per-pool results."""

    def __init__(self, market: MarketSnapshot, amount: int) -> None:
        self.market = market
        self.amount = amount
        self.cache = Cache(_CACHED_POOLS)

    def calculate_output(self, path: SwapPath) -> int:
        """Output of swapping the configured amount along *path*; 0 if any hop yields 0."""
        amount = self.amount
        for step in path.steps:
            cached = self.cache.get(amount, step.pool_address)
            if cached is None:
                output = self.compute_amount_out(
                    amount, step.pool_address, step.token_in, step.protocol, step.fee
                )
                self.cache.set(amount, step.pool_address, output)
                amount = output
            else:
                amount = cached
            if amount == 0:
                return 0
        return amount

    def debug_calculation(self, path: SwapPath) -> list[int]:
        """The amount held before the first hop and after each hop, uncached."""
        amounts = [self.amount]
        for step in path.steps:
            amounts.append(
                self.compute_amount_out(
                    amounts[-1], step.pool_address, step.token_in, step.protocol, step.fee
                )
            )
        return amounts

    def compute_amount_out(
        self,
        input_amount: int,
        pool_address: str,
        token_in: str,
        pool_type: PoolType,
        fee: int,
    ) -> int:
        """Output of one swap through *pool_address*."""
        v2_fee = _V2_FEES.get(pool_type)
        if v2_fee is not None:
            pool, state = self.market.get(pool_address)
            if _zero_to_one(pool, token_in):
                reserve_in, reserve_out = state.reserve0, state.reserve1
            else:
                reserve_in, reserve_out = state.reserve1, state.reserve0
            return uniswap_v2_out(input_amount, reserve_in, reserve_out, v2_fee)
        if pool_type is PoolType.AERODROME:
            pool, state = self.market.get(pool_address)
            return aerodrome_out(
                input_amount,
                token_in == pool.token0,
                state.reserve0,
                state.reserve1,
                state.fee,
                state.decimals0,
                state.decimals1,
                state.stable,
            )
        raise UnsupportedPoolError(f"no output calculation for {pool_type.value} pools")

    def invalidate_cache(self, updated_pools: Iterable[str]) -> None:
        """Forget cached outputs of every pool in *updated_pools*."""
        for pool_address in updated_pools:
            self.cache.invalidate(pool_address)