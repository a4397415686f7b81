"""Weighted-pool (Balancer V2) swap maths in 18-decimal fixed point.

All amounts are unsigned 256-bit integers. Any result outside that range
raises ``OverflowError``. The logarithm and exponent helpers work on signed
fixed-point values and divide with truncation toward zero.
"""

from __future__ import annotations

__all__ = [
    "LogExpMath",
    "ONE",
    "scale",
    "div_up",
    "div_down",
    "mul_up",
    "mul_down",
    "pow_up",
    "complement",
    "balancer_v2_out",
]

U256_MAX = (1 << 256) - 1
ONE = 10**18
MAX_POW_RELATIVE_ERROR = 10_000


def _u256(value: int) -> int:
    """Return *value* unchanged if it fits in an unsigned 256-bit word."""
    if value < 0:
        raise OverflowError("U256 underflow")
    if value > U256_MAX:
        raise OverflowError("U256 overflow")
    return value


def _tdiv(a: int, b: int) -> int:
    """Signed integer division that truncates toward zero."""
    if b == 0:
        raise ZeroDivisionError("division by zero")
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _tmod(a: int, b: int) -> int:
    """Remainder matching truncating division (takes the dividend's sign)."""
    return a - b * _tdiv(a, b)


def _add(a: int, b: int) -> int:
    return _u256(a + b)


def _sub(a: int, b: int) -> int:
    return _u256(a - b)


def scale(value: int, decimals: int) -> int:
    """Multiply *value* by ``10 ** decimals``."""
    if decimals < 0:
        raise ValueError("scaling exponent must not be negative")
    return _u256(value * 10**decimals)


def div_up(a: int, b: int) -> int:
    """Fixed-point division rounding up."""
    if a == 0:
        return 0
    inflated = _u256(a * ONE)
    if b == 0:
        raise ZeroDivisionError("division by zero")
    return (inflated - 1) // b + 1


def div_down(a: int, b: int) -> int:
    """Fixed-point division rounding down."""
    if a == 0:
        return 0
    inflated = _u256(a * ONE)
    if b == 0:
        raise ZeroDivisionError("division by zero")
    return inflated // b


def mul_up(a: int, b: int) -> int:
    """Fixed-point multiplication rounding up."""
    product = _u256(a * b)
    if product == 0:
        return 0
    return (product - 1) // ONE + 1


def mul_down(a: int, b: int) -> int:
    """Fixed-point multiplication rounding down."""
    return _u256(a * b) // ONE


def pow_up(x: int, y: int) -> int:
    """``x ** y`` in fixed point, rounded so the result is never too small."""
    if y == ONE:
        return x
    if y == 2 * ONE:
        return mul_up(x, x)
    if y == 4 * ONE:
        square = mul_up(x, x)
        return mul_up(square, square)
    raw = LogExpMath.pow(x, y)
    max_error = _add(mul_up(raw, MAX_POW_RELATIVE_ERROR), 1)
    return _add(raw, max_error)


def complement(x: int) -> int:
    """``1 - x`` in fixed point, floored at zero."""
    return ONE - x if x < ONE else 0


def balancer_v2_out(
    amount_in: int,
    balance_in: int,
    balance_out: int,
    weight_in: int,
    weight_out: int,
    swap_fee: int,
    token_decimals: int,
) -> int:
    """Output amount of a weighted-pool swap for an exact input."""
    scaling_factor = 18 - token_decimals
    scaled_amount_in = scale(amount_in, scaling_factor)
    without_fees = _sub(scaled_amount_in, mul_up(scaled_amount_in, swap_fee))
    amount_in = scale(without_fees, scaling_factor)

    denominator = _add(balance_in, amount_in)
    base = div_up(balance_in, denominator)
    exponent = div_down(weight_in, weight_out)
    power = pow_up(base, exponent)
    return mul_down(balance_out, complement(power))


class LogExpMath:
    """Fixed-point natural exponent, logarithm and power."""

    ONE_18 = 10**18
    ONE_20 = 10**20
    ONE_36 = 10**36

    MAX_NATURAL_EXPONENT = 130 * 10**18
    MIN_NATURAL_EXPONENT = -41 * 10**18

    LN_36_LOWER_BOUND = 10**18 - 10**17
    LN_36_UPPER_BOUND = 10**18 + 10**17

    MILD_EXPONENT_BOUND = 2**254 // 10**20

    X0 = 128000000000000000000
    A0 = 38877084059945950922200000000000000000000000000000000000
    X1 = 64000000000000000000
    A1 = 6235149080811616882910000000

    X2 = 3200000000000000000000
    A2 = 7896296018268069516100000000000000
    X3 = 1600000000000000000000
    A3 = 888611052050787263676000000
    X4 = 800000000000000000000
    A4 = 298095798704172827474000
    X5 = 400000000000000000000
    A5 = 5459815003314423907810
    X6 = 200000000000000000000
    A6 = 738905609893065022723
    X7 = 100000000000000000000
    A7 = 271828182845904523536
    X8 = 50000000000000000000
    A8 = 164872127070012814685
    X9 = 25000000000000000000
    A9 = 128402541668774148407
    X10 = 12500000000000000000
    A10 = 113314845306682631683
    X11 = 6250000000000000000
    A11 = 106449445891785942956

    _SMALL_TERMS = (
        (X2, A2),
        (X3, A3),
        (X4, A4),
        (X5, A5),
        (X6, A6),
        (X7, A7),
        (X8, A8),
        (X9, A9),
    )
    _LN_TERMS = _SMALL_TERMS + ((X10, A10), (X11, A11))

    @classmethod
    def pow(cls, x: int, y: int) -> int:
        """``x ** y`` for unsigned 18-decimal fixed-point operands."""
        if y == 0:
            return cls.ONE_18
        if x == 0:
            return 0
        if x >= 2**255:
            raise ValueError("X_OUT_OF_BOUNDS")
        if y >= cls.MILD_EXPONENT_BOUND:
            raise ValueError("Y_OUT_OF_BOUNDS")

        if cls.LN_36_LOWER_BOUND < x < cls.LN_36_UPPER_BOUND:
            ln_36_x = cls.ln_36(x)
            logx_times_y = _tdiv(ln_36_x, cls.ONE_18) * y + _tdiv(
                _tmod(ln_36_x, cls.ONE_18) * y, cls.ONE_18
            )
        else:
            logx_times_y = cls.ln(x) * y
        logx_times_y = _tdiv(logx_times_y, cls.ONE_18)

        if not cls.MIN_NATURAL_EXPONENT <= logx_times_y <= cls.MAX_NATURAL_EXPONENT:
            raise ValueError("PRODUCT_OUT_OF_BOUNDS")
        return _u256(abs(cls.exp(logx_times_y)))

    @classmethod
    def exp(cls, x: int) -> int:
        """Natural exponent of a signed 18-decimal fixed-point value."""
        if not cls.MIN_NATURAL_EXPONENT <= x <= cls.MAX_NATURAL_EXPONENT:
            raise ValueError("INVALID_EXPONENT")
        if x < 0:
            return _tdiv(cls.ONE_18 * cls.ONE_18, cls.exp(-x))

        if x >= cls.X0:
            x -= cls.X0
            first_an = cls.A0
        elif x >= cls.X1:
            x -= cls.X1
            first_an = cls.A1
        else:
            first_an = 1

        x *= 100
        product = cls.ONE_20
        for x_n, a_n in cls._SMALL_TERMS:
            if x >= x_n:
                x -= x_n
                product = _tdiv(product * a_n, cls.ONE_20)

        series_sum = cls.ONE_20
        term = x
        series_sum += term
        for n in range(2, 13):
            term = _tdiv(_tdiv(term * x, cls.ONE_20), n)
            series_sum += term

        return _tdiv(_tdiv(product * series_sum, cls.ONE_20) * first_an, 100)

    @classmethod
    def ln(cls, a: int) -> int:
        """Natural logarithm of a positive 18-decimal fixed-point value."""
        if a < cls.ONE_18:
            return -cls.ln(_tdiv(cls.ONE_18 * cls.ONE_18, a))

        total = 0
        if a >= cls.A0 * cls.ONE_18:
            a = _tdiv(a, cls.A0)
            total += cls.X0
        if a >= cls.A1 * cls.ONE_18:
            a = _tdiv(a, cls.A1)
            total += cls.X1

        total *= 100
        a *= 100
        for x_n, a_n in cls._LN_TERMS:
            if a >= a_n:
                a = _tdiv(a * cls.ONE_20, a_n)
                total += x_n

        z = _tdiv((a - cls.ONE_20) * cls.ONE_20, a + cls.ONE_20)
        z_squared = _tdiv(z * z, cls.ONE_20)
        num = z
        series_sum = num
        for divisor in (3, 5, 7, 9, 11):
            num = _tdiv(num * z_squared, cls.ONE_20)
            series_sum += _tdiv(num, divisor)
        series_sum *= 2

        return _tdiv(total + series_sum, 100)

    @classmethod
    def ln_36(cls, x: int) -> int:
        """High-precision logarithm of a value near one, in 36 decimals."""
        x *= cls.ONE_18
        z = _tdiv((x - cls.ONE_36) * cls.ONE_36, x + cls.ONE_36)
        z_squared = _tdiv(z * z, cls.ONE_36)
        num = z
        series_sum = num
        for n in range(1, 8):
            num = _tdiv(num * z_squared, cls.ONE_36)
            series_sum += _tdiv(num, 2 * n + 1)
        return series_sum * 2