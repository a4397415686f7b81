"""Fast exchange-rate estimates used to screen swap paths before exact pricing."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from basebuster.calculator import Calculator
from basebuster.pools import Pool, SwapPath

__all__ = [
    "RATE_SCALE",
    "RATE_SCALE_VALUE",
    "scale_to_rate",
    "calculate_rate",
    "Estimator",
]

logger = logging.getLogger(__name__)

_U256_MAX = (1 << 256) - 1
_U64_MAX = (1 << 64) - 1
_DEFAULT_DECIMALS = 18

RATE_SCALE = 18
RATE_SCALE_VALUE = 10**RATE_SCALE


def _checked_mul_div(a: int, b: int, divisor: int) -> int:
    """``a * b // divisor``, or 0 when the product overflows or *divisor* is 0."""
    product = a * b
    if product > _U256_MAX or divisor == 0:
        return 0
    return product // divisor


def _power_of_ten(exponent: int) -> int:
    factor = 10**exponent
    if factor > _U64_MAX:
        raise OverflowError("scaling factor does not fit in 64 bits")
    return factor


def scale_to_rate(amount: int, token_decimals: int) -> int:
    """Rescale *amount* from *token_decimals* to the 18-decimal rate precision."""
    if token_decimals <= RATE_SCALE:
        scaled = amount * _power_of_ten(RATE_SCALE - token_decimals)
        if scaled > _U256_MAX:
            raise OverflowError("U256 overflow")
        return scaled
    return amount // _power_of_ten(token_decimals - RATE_SCALE)


def calculate_rate(
    input_amount: int, output_amount: int, input_decimals: int, output_decimals: int
) -> int:
    """Exchange rate ``output / input`` in 18-decimal fixed point; 0 if undefined."""
    scaled_input = scale_to_rate(input_amount, input_decimals)
    scaled_output = scale_to_rate(output_amount, output_decimals)
    return _checked_mul_div(scaled_output, RATE_SCALE_VALUE, scaled_input)


class Estimator:
    """Keeps per-pool exchange rates and estimates path profitability from them.

    Rates of pools paired with *weth* are measured directly by swapping
    *amount*; other pools are measured with an input derived from the averaged
    WETH rate of their first token.
    """

    def __init__(self, calculator: Calculator, weth: str, amount: int) -> None:
        self.calculator = calculator
        self.weth = weth
        self.amount = amount
        # pool address -> token in -> rate
        self.rates: dict[str, dict[str, int]] = {}
        self.weth_based: dict[str, bool] = {}
        # quote token -> aggregated WETH rate
        self.aggregated_weth_rate: dict[str, int] = {}
        self.token_decimals: dict[str, int] = {}

    def update_rates(self, pools: Iterable[str]) -> None:
        """Recompute rates for the pools at the given addresses."""
        self.process_pools([self.calculator.market.get(address)[0] for address in pools])

    def estimate_output_amount(self, swap_path: SwapPath) -> int:
        """Estimated output of swapping the configured amount along *swap_path*."""
        current = self.amount
        for step in swap_path.steps:
            rate = self.rates.get(step.pool_address, {}).get(step.token_in)
            if rate is None:
                return 0
            current = _checked_mul_div(current, rate, RATE_SCALE_VALUE)
        return current

    def is_profitable(self, swap_path: SwapPath, min_profit_ratio: int) -> bool:
        """Whether the cumulative rate along the path exceeds ``1 + min_profit_ratio``."""
        cumulative = RATE_SCALE_VALUE
        for step in swap_path.steps:
            rate = self.rates.get(step.pool_address, {}).get(step.token_in)
            if rate is None:
                return False
            cumulative = _checked_mul_div(cumulative, rate, RATE_SCALE_VALUE)
        return cumulative > RATE_SCALE_VALUE + min_profit_ratio

    def process_pools(self, pools: Iterable[Pool]) -> None:
        """Estimate the exchange rates of *pools*, WETH pairs first."""
        pools = list(pools)
        alt_tokens: set[str] = set()
        weth_alt_count: dict[str, int] = {}

        for pool in pools:
            if self.weth in (pool.token0, pool.token1):
                logger.debug("Processing pool %s", pool.address)
                self.weth_based[pool.address] = True
                self._process_weth_pool(pool, self.amount, alt_tokens, weth_alt_count)

        for token in alt_tokens:
            count = weth_alt_count.get(token)
            if count is not None and token in self.aggregated_weth_rate:
                self.aggregated_weth_rate[token] = (
                    self.aggregated_weth_rate[token] // count if count else 0
                )

        for pool in pools:
            if self.weth not in (pool.token0, pool.token1):
                logger.debug("Processing pool %s", pool.address)
                self._process_other_pool(pool)

    def _pool_output(self, pool: Pool, token_in: str, amount: int) -> int:
        return self.calculator.compute_amount_out(
            amount, pool.address, token_in, pool.pool_type, pool.fee
        )

    def _store_rates(self, pool: Pool, zero_one_rate: int, one_zero_rate: int) -> None:
        pool_rates = self.rates.setdefault(pool.address, {})
        pool_rates[pool.token0] = zero_one_rate
        pool_rates[pool.token1] = one_zero_rate

    def _process_weth_pool(
        self,
        pool: Pool,
        amount: int,
        alt_tokens: set[str],
        weth_alt_count: dict[str, int],
    ) -> None:
        token0, token1 = pool.token0, pool.token1
        _, state = self.calculator.market.get(pool.address)
        self.token_decimals[token0] = state.decimals0
        self.token_decimals[token1] = state.decimals1

        weth, alt = (token0, token1) if token0 == self.weth else (token1, token0)
        alt_tokens.add(alt)

        alt_output = self._pool_output(pool, weth, amount)
        weth_decimals = self.token_decimals.get(weth, _DEFAULT_DECIMALS)
        alt_decimals = self.token_decimals.get(alt, _DEFAULT_DECIMALS)
        other_output = self._pool_output(pool, alt, alt_output)

        zero_one_rate = calculate_rate(amount, alt_output, weth_decimals, alt_decimals)
        one_zero_rate = calculate_rate(alt_output, other_output, alt_decimals, weth_decimals)
        self._store_rates(pool, zero_one_rate, one_zero_rate)

        added = zero_one_rate if weth == token0 else one_zero_rate
        self.aggregated_weth_rate[alt] = self.aggregated_weth_rate.get(alt, 0) + added
        weth_alt_count[alt] = weth_alt_count.get(alt, 0) + 1

    def _process_other_pool(self, pool: Pool) -> None:
        token0, token1 = pool.token0, pool.token1
        input_rate = self.aggregated_weth_rate.get(token0)
        if input_rate is None:
            return

        token0_decimals = self.token_decimals.get(token0, _DEFAULT_DECIMALS)
        output = self._pool_output(pool, token0, input_rate)
        token1_decimals = self.token_decimals.get(token1, _DEFAULT_DECIMALS)
        other_output = self._pool_output(pool, token1, output)

        zero_one_rate = calculate_rate(input_rate, output, token0_decimals, token1_decimals)
        one_zero_rate = calculate_rate(output, other_output, token1_decimals, token0_decimals)
        self._store_rates(pool, zero_one_rate, one_zero_rate)