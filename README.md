# basebuster

Integer-exact swap math and arbitrage cycle search for automated market maker
pools. Every calculation works on plain Python integers in the fixed-point
scales the pool contracts use (amounts in the token's smallest unit, rates and
weights in 18 decimals). Results that would leave the unsigned 256-bit range
raise `OverflowError`.

## Modules

- `basebuster.uniswap` — `uniswap_v2_out(amount_in, reserve_in, reserve_out, fee)`
  for constant-product pools, where `fee` is the share kept out of 10,000
  (for example 9970 for a 0.3% pool), and `position(tick)`, the word and bit
  index of a tick in a tick bitmap.
- `basebuster.aerodrome` — `aerodrome_out(...)` for volatile (`x*y`) and stable
  (`x³y + y³x`) pools, with the invariant `k`, the helpers `f` and `d`, and the
  Newton solver `get_y` (which returns 0 when it does not converge).
- `basebuster.balancer` — `balancer_v2_out(...)` for weighted pools, the fixed
  point helpers `scale`, `mul_up`, `mul_down`, `div_up`, `div_down`,
  `pow_up` and `complement`, and `LogExpMath` with `pow`, `exp`, `ln` and
  `ln_36`. Out-of-range inputs raise `ValueError` (`X_OUT_OF_BOUNDS`,
  `Y_OUT_OF_BOUNDS`, `PRODUCT_OUT_OF_BOUNDS`, `INVALID_EXPONENT`).
- `basebuster.gas_station` — `calc_next_block_base_fee` (EIP-1559),
  `BaseFeeParams.optimism_canyon()`, and `GasStation`. Feed it block data with
  `on_new_block(base_fee, gas_used, gas_limit)`; `get_gas_fees(profit)` then
  returns `(max_fee, priority_fee)`, spending half the profit spread over
  350,000 gas as the priority fee on top of the expected base fee.
- `basebuster.cache` — `Cache`, a thread-safe memo of
  `(pool, amount_in) -> amount_out` with `get`, `set` and `invalidate`.
- `basebuster.pools` — `PoolType`, `Pool`, `SwapStep` and `SwapPath`
  (`SwapPath.from_steps` gives a path a hash that depends only on its steps).
- `basebuster.calculator` — `PoolState`, `MarketSnapshot` (pools and their
  reserves) and `Calculator`, which prices a `SwapPath` hop by hop
  (`calculate_output`, cached; `debug_calculation`, every intermediate amount).
- `basebuster.graph` — `ArbGraph` and `generate_cycles(pools, start_token)`,
  which enumerate cycles that leave a token and return to it. Two-hop cycles
  are kept only when the two pools are of different protocol types.
- `basebuster.estimator` — `scale_to_rate`, `calculate_rate` and `Estimator`,
  which derives per-pool exchange rates (WETH pairs first, then other pairs
  through the averaged WETH rate) and screens paths with
  `estimate_output_amount` and `is_profitable`.

## Install

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Example

```python
from basebuster.calculator import Calculator, MarketSnapshot, PoolState
from basebuster.estimator import Estimator
from basebuster.graph import generate_cycles
from basebuster.pools import Pool, PoolType

WETH = "0x4200000000000000000000000000000000000006"
USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"

uni = Pool("0xaaaa", PoolType.UNISWAP_V2, WETH, USDC)
sushi = Pool("0xbbbb", PoolType.SUSHISWAP_V2, WETH, USDC)

market = MarketSnapshot()
market.add_pool(uni, PoolState(325 * 10**18, 1_014_189 * 10**6, 18, 6))
market.add_pool(sushi, PoolState(324 * 10**18, 1_016_689 * 10**6, 18, 6))

paths = generate_cycles([uni, sushi], start_token=WETH)
calc = Calculator(market, amount=10**16)
best = max(paths, key=calc.calculate_output)

estimator = Estimator(calc, weth=WETH, amount=10**16)
estimator.process_pools([uni, sushi])
print(estimator.is_profitable(best, 0))
```

When reserves change, call `market.update_reserves(address, reserve0, reserve1)`
and `calc.invalidate_cache({address})` so cached outputs are dropped, then
`estimator.update_rates({address})` to refresh its rates.

## What it does not do

- It does not connect to a node or any network service: pool lists, reserves
  and block data must be supplied by the caller.
- `Calculator` prices constant-product (V2-style) and Aerodrome pools only.
  Other pool types, including concentrated-liquidity (V3-style), Balancer,
  Curve and Maverick pools, raise `UnsupportedPoolError`; the weighted-pool
  formula in `basebuster.balancer` is available as a standalone function.
- It does not simulate, sign or send transactions, and it has no command-line
  program.

## Tests

```
pytest
```