"""Integer-exact AMM swap math, arbitrage cycle search and rate estimation."""

__version__ = "0.1.0"

__all__ = [
    "aerodrome",
    "balancer",
    "cache",
    "calculator",
    "estimator",
    "gas_station",
    "graph",
    "pools",
    "uniswap",
]