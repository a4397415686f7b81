"""Pool, swap step and swap path records shared by the pricing code."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

__all__ = ["PoolType", "Pool", "SwapStep", "SwapPath"]


class PoolType(Enum):
    """Protocol a pool belongs to."""

    UNISWAP_V2 = "UniswapV2"
    SUSHISWAP_V2 = "SushiSwapV2"
    PANCAKESWAP_V2 = "PancakeSwapV2"
    BASESWAP_V2 = "BaseSwapV2"
    SWAPBASED_V2 = "SwapBasedV2"
    DACKIESWAP_V2 = "DackieSwapV2"
    ALIENBASE_V2 = "AlienBaseV2"
    UNISWAP_V3 = "UniswapV3"
    SUSHISWAP_V3 = "SushiSwapV3"
    BASESWAP_V3 = "BaseSwapV3"
    SLIPSTREAM = "Slipstream"
    PANCAKESWAP_V3 = "PancakeSwapV3"
    ALIENBASE_V3 = "AlienBaseV3"
    SWAPBASED_V3 = "SwapBasedV3"
    DACKIESWAP_V3 = "DackieSwapV3"
    AERODROME = "Aerodrome"
    MAVERICK_V1 = "MaverickV1"
    MAVERICK_V2 = "MaverickV2"
    BALANCER_V2 = "BalancerV2"
    CURVE_TWO_CRYPTO = "CurveTwoCrypto"
    CURVE_TRI_CRYPTO = "CurveTriCrypto"


@dataclass(frozen=True)
class Pool:
    """A liquidity pool.

    Multi-token pools (Balancer, Curve) list their tokens beyond the first
    two in *extra_tokens*; *balances* follows the order of :meth:`tokens`.
    """

    address: str
    pool_type: PoolType
    token0: str
    token1: str
    fee: int = 0
    extra_tokens: tuple[str, ...] = ()
    balances: tuple[int, ...] = ()

    def tokens(self) -> tuple[str, ...]:
        """Every token the pool holds, in pool order."""
        return (self.token0, self.token1, *self.extra_tokens)


@dataclass(frozen=True)
class SwapStep:
    """One hop of a swap path."""

    pool_address: str
    token_in: str
    token_out: str
    protocol: PoolType
    fee: int = 0


@dataclass(frozen=True)
class SwapPath:
    """An ordered sequence of swaps with a stable identifying hash."""

    steps: tuple[SwapStep, ...]
    hash: int

    @staticmethod
    def from_steps(steps: Iterable[SwapStep]) -> SwapPath:
        """Build a path whose hash depends only on its steps."""
        steps = tuple(steps)
        digest = hashlib.blake2b(digest_size=8)
        for step in steps:
            digest.update(
                f"{step.pool_address}:{step.token_in}:{step.token_out}:"
                f"{step.protocol.value}:{step.fee};".encode()
            )
        return SwapPath(steps=steps, hash=int.from_bytes(digest.digest(), "big"))