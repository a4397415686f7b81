"""Swap output maths for volatile and stable Aerodrome pools.

Amounts are unsigned 256-bit integers; a result outside that range raises
``OverflowError`` and a zero divisor raises ``ZeroDivisionError``.
"""

from __future__ import annotations

__all__ = ["k", "get_y", "f", "d", "aerodrome_out"]

_U256_MAX = (1 << 256) - 1
_ONE = 10**18
_FEE_DENOMINATOR = 10_000
_MAX_ITERATIONS = 255


def _u256(value: int) -> int:
    if value < 0:
        raise OverflowError("U256 underflow")
    if value > _U256_MAX:
        raise OverflowError("U256 overflow")
    return value


def _div(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError("division by zero")
    return a // b


def k(x: int, y: int, stable: bool, decimals0: int, decimals1: int) -> int:
    """Pool invariant: ``x^3*y + y^3*x`` for stable pools, ``x*y`` otherwise."""
    if not stable:
        return _u256(x * y)
    x_norm = _div(_u256(x * _ONE), decimals0)
    y_norm = _div(_u256(y * _ONE), decimals1)
    a = _u256(x_norm * y_norm) // _ONE
    b = _u256(_u256(x_norm * x_norm) // _ONE + _u256(y_norm * y_norm) // _ONE)
    return _u256(a * b) // _ONE


def f(x0: int, y: int) -> int:
    """Stable invariant for normalised reserves."""
    a = _u256(x0 * y) // _ONE
    b = _u256(_u256(x0 * x0) // _ONE + _u256(y * y) // _ONE)
    return _u256(a * b) // _ONE


def d(x0: int, y: int) -> int:
    """Derivative of the stable invariant with respect to ``y``."""
    left = _u256(_u256(3 * x0) * (_u256(y * y) // _ONE)) // _ONE
    right = _u256((_u256(x0 * x0) // _ONE) * x0) // _ONE
    return _u256(left + right)


def get_y(x0: int, xy: int, y: int, stable: bool, decimals0: int, decimals1: int) -> int:
    """Solve the stable invariant for ``y`` by Newton iteration; 0 if it fails."""
    for _ in range(_MAX_ITERATIONS):
        k_value = f(x0, y)
        derivative = d(x0, y)
        if derivative == 0:
            return 0
        if k_value < xy:
            dy = _u256((xy - k_value) * _ONE) // derivative
            if dy == 0:
                if k_value == xy:
                    return y
                if k(x0, y + 1, stable, decimals0, decimals1) > xy:
                    return y + 1
                dy = 1
            y = _u256(y + dy)
        else:
            dy = _u256((k_value - xy) * _ONE) // derivative
            if dy == 0:
                if k_value == xy or f(x0, _u256(y - 1)) < xy:
                    return y
                dy = 1
            y = _u256(y - dy)
    return 0


def aerodrome_out(
    amount_in: int,
    token_in_is_token0: bool,
    reserve0: int,
    reserve1: int,
    fee: int,
    decimals0: int,
    decimals1: int,
    stable: bool,
) -> int:
    """Output of swapping *amount_in* through an Aerodrome pool.

    *fee* is in hundredths of a percent; *decimals0* and *decimals1* are the
    tokens' decimal counts.
    """
    amount_in = _u256(amount_in - _u256(amount_in * fee) // _FEE_DENOMINATOR)
    scale0 = 10**decimals0
    scale1 = 10**decimals1

    if not stable:
        reserve_a, reserve_b = (
            (reserve0, reserve1) if token_in_is_token0 else (reserve1, reserve0)
        )
        return _div(_u256(amount_in * reserve_b), _u256(reserve_a + amount_in))

    xy = k(reserve0, reserve1, stable, scale0, scale1)
    norm0 = _div(_u256(reserve0 * _ONE), scale0)
    norm1 = _div(_u256(reserve1 * _ONE), scale1)
    if token_in_is_token0:
        reserve_a, reserve_b = norm0, norm1
        amount_in = _div(_u256(amount_in * _ONE), scale0)
    else:
        reserve_a, reserve_b = norm1, norm0
        amount_in = _div(_u256(amount_in * _ONE), scale1)

    y = _u256(
        reserve_b
        - get_y(_u256(amount_in + reserve_a), xy, reserve_b, stable, scale0, scale1)
    )
    out_scale = scale1 if token_in_is_token0 else scale0
    return _u256(y * out_scale) // _ONE