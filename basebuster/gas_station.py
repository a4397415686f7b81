"""Gas fee state: next-block base fee and priority fee from profit."""

from __future__ import annotations

import threading
from dataclasses import dataclass

__all__ = ["BaseFeeParams", "calc_next_block_base_fee", "GasStation"]

_U128_MAX = (1 << 128) - 1
# Gas assumed for one arbitrage transaction when spreading the fee budget.
_GAS_PER_ARB = 350_000


@dataclass(frozen=True)
class BaseFeeParams:
    """EIP-1559 base fee adjustment parameters."""

    max_change_denominator: int
    elasticity_multiplier: int

    @classmethod
    def optimism_canyon(cls) -> BaseFeeParams:
        """Parameters used on OP-stack chains since the Canyon upgrade."""
        return cls(max_change_denominator=250, elasticity_multiplier=6)


def calc_next_block_base_fee(
    gas_used: int, gas_limit: int, base_fee: int, params: BaseFeeParams
) -> int:
    """Base fee of the next block under EIP-1559."""
    gas_target = gas_limit // params.elasticity_multiplier
    if gas_used == gas_target:
        return base_fee
    if gas_used > gas_target:
        if gas_target == 0:
            raise ZeroDivisionError("gas target is zero")
        delta = base_fee * (gas_used - gas_target) // (
            gas_target * params.max_change_denominator
        )
        return base_fee + max(1, delta)
    delta = base_fee * (gas_target - gas_used) // (
        gas_target * params.max_change_denominator
    )
    return max(0, base_fee - delta)


class GasStation:
    """Tracks the expected base fee and prices transactions against profit."""

    def __init__(self) -> None:
        self._base_fee = 0
        self._lock = threading.Lock()
        self.params = BaseFeeParams.optimism_canyon()

    @property
    def base_fee(self) -> int:
        with self._lock:
            return self._base_fee

    def get_gas_fees(self, profit: int) -> tuple[int, int]:
        """Return ``(max_fee, priority_fee)`` spending half of *profit* on gas."""
        max_total_gas_spend = profit // 2
        if max_total_gas_spend > _U128_MAX:
            raise OverflowError("gas budget does not fit in 128 bits")
        priority_fee = max_total_gas_spend // _GAS_PER_ARB
        return self.base_fee + priority_fee, priority_fee

    def on_new_block(self, base_fee: int, gas_used: int, gas_limit: int) -> int:
        """Update from a new block header and return the next base fee."""
        next_base_fee = calc_next_block_base_fee(gas_used, gas_limit, base_fee, self.params)
        with self._lock:
            self._base_fee = next_base_fee
        return next_base_fee