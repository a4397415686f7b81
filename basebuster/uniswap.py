"""Uniswap swap helpers: constant-product output and tick bitmap position."""

from __future__ import annotations

__all__ = ["position", "uniswap_v2_out", "FEE_SCALE"]

_U256_MAX = (1 << 256) - 1
FEE_SCALE = 10_000


def _u256(value: int) -> int:
    if value > _U256_MAX:
        raise OverflowError("U256 overflow")
    return value


def _as_i16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def position(tick: int) -> tuple[int, int]:
    """Word index and bit index of *tick* in the tick bitmap."""
    return _as_i16(tick >> 8), tick % 256


def uniswap_v2_out(amount_in: int, reserve_in: int, reserve_out: int, fee: int) -> int:
    """Constant-product output; *fee* is the kept share out of 10,000 (e.g. 9970)."""
    amount_in_with_fee = _u256(amount_in * fee)
    numerator = _u256(amount_in_with_fee * reserve_out)
    denominator = _u256(_u256(reserve_in * FEE_SCALE) + amount_in_with_fee)
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    return numerator // denominator