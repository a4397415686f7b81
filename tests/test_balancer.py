import pytest

from basebuster.balancer import (
    LogExpMath,
    ONE,
    balancer_v2_out,
    complement,
    div_down,
    div_up,
    mul_down,
    mul_up,
    pow_up,
    scale,
)


def test_scale_multiplies_by_power_of_ten():
    assert scale(5, 2) == 500
    assert scale(7, 0) == 7


def test_scale_rejects_negative_exponent():
    with pytest.raises(ValueError):
        scale(5, -1)


def test_scale_overflow():
    with pytest.raises(OverflowError):
        scale(2**255, 1)


def test_zero_numerators():
    assert div_up(0, 5) == 0
    assert div_down(0, 5) == 0
    assert mul_up(0, 12345) == 0
    assert mul_down(0, 12345) == 0


def test_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        div_down(5, 0)
    with pytest.raises(ZeroDivisionError):
        div_up(5, 0)


@pytest.mark.parametrize("a,b", [(1, 3), (7 * ONE, 3 * ONE), (123456789, 987654321), (ONE, ONE)])
def test_rounding_directions(a, b):
    assert 0 <= div_up(a, b) - div_down(a, b) <= 1
    assert 0 <= mul_up(a, b) - mul_down(a, b) <= 1


def test_multiplying_by_one_is_identity():
    assert mul_down(ONE, ONE) == ONE
    assert mul_up(42 * ONE, ONE) == 42 * ONE
    assert div_down(42 * ONE, ONE) == 42 * ONE


def test_complement():
    assert complement(ONE + 5) == 0
    assert complement(ONE) == 0
    x = 3 * 10**17
    assert complement(x) + x == ONE


def test_pow_up_special_exponents():
    x = 9 * 10**17
    assert pow_up(x, ONE) == x
    assert pow_up(x, 2 * ONE) == mul_up(x, x)
    assert pow_up(x, 4 * ONE) == mul_up(mul_up(x, x), mul_up(x, x))


def test_pow_up_not_below_raw_power():
    x, y = 8 * 10**17, 3 * 10**17
    assert pow_up(x, y) > LogExpMath.pow(x, y)


def test_pow_fixed_edges():
    assert LogExpMath.pow(5 * ONE, 0) == 10**18
    assert LogExpMath.pow(0, ONE) == 0


def test_exp_of_zero_is_one():
    assert LogExpMath.exp(0) == 10**18


def test_exp_of_one_matches_e_constant():
    assert abs(LogExpMath.exp(ONE) * 100 - 271828182845904523536) < 10**4


def test_ln_of_one_is_zero():
    assert LogExpMath.ln(ONE) == 0
    assert LogExpMath.ln_36(ONE) == 0


@pytest.mark.parametrize("x", [2 * ONE, 5 * 10**17, 1000 * ONE, 3 * 10**15])
def test_exp_ln_round_trip(x):
    back = LogExpMath.exp(LogExpMath.ln(x))
    assert abs(back - x) <= x // 10**12 + 10


def test_ln_symmetry():
    x = 4 * ONE
    assert abs(LogExpMath.ln(x) + LogExpMath.ln(ONE * ONE // x)) <= 10


def test_ln_36_agrees_with_ln():
    x = 105 * 10**16
    assert abs(LogExpMath.ln_36(x) // ONE - LogExpMath.ln(x)) <= 10


@pytest.mark.parametrize("x", [2 * ONE, 95 * 10**16, 3 * 10**17])
def test_pow_with_unit_exponent(x):
    assert abs(LogExpMath.pow(x, ONE) - x) <= x // 10**14 + 10


def test_exp_negative_is_reciprocal():
    pos = LogExpMath.exp(2 * ONE)
    neg = LogExpMath.exp(-2 * ONE)
    assert abs(mul_down(pos, neg) - ONE) <= 10


def test_exp_bounds():
    with pytest.raises(ValueError, match="INVALID_EXPONENT"):
        LogExpMath.exp(131 * ONE)
    with pytest.raises(ValueError, match="INVALID_EXPONENT"):
        LogExpMath.exp(-42 * ONE)


def test_pow_bounds():
    with pytest.raises(ValueError, match="X_OUT_OF_BOUNDS"):
        LogExpMath.pow(2**255, ONE)
    with pytest.raises(ValueError, match="Y_OUT_OF_BOUNDS"):
        LogExpMath.pow(2 * ONE, 2**254)
    with pytest.raises(ValueError, match="PRODUCT_OUT_OF_BOUNDS"):
        LogExpMath.pow(10**30, 10 * ONE)


POOL = dict(balance_in=1000 * ONE, balance_out=2000 * ONE, weight_in=5 * 10**17, weight_out=5 * 10**17)


def test_swap_zero_input_gives_zero():
    assert balancer_v2_out(0, swap_fee=0, token_decimals=18, **POOL) == 0


def test_swap_equal_weights_tracks_constant_product():
    amount = 10 * ONE
    out = balancer_v2_out(amount, swap_fee=0, token_decimals=18, **POOL)
    ideal = POOL["balance_out"] * amount // (POOL["balance_in"] + amount)
    assert out <= ideal
    assert ideal - out <= POOL["balance_out"] // ONE + 1


def test_swap_monotonic_in_amount_and_fee():
    small = balancer_v2_out(ONE, swap_fee=3 * 10**15, token_decimals=18, **POOL)
    large = balancer_v2_out(5 * ONE, swap_fee=3 * 10**15, token_decimals=18, **POOL)
    no_fee = balancer_v2_out(ONE, swap_fee=0, token_decimals=18, **POOL)
    assert small < large < POOL["balance_out"]
    assert small < no_fee


def test_swap_unequal_weights_stays_below_balance():
    out = balancer_v2_out(
        50 * ONE,
        balance_in=1000 * ONE,
        balance_out=500 * ONE,
        weight_in=8 * 10**17,
        weight_out=2 * 10**17,
        swap_fee=10**16,
        token_decimals=18,
    )
    assert 0 < out < 500 * ONE


def test_swap_fee_above_one_underflows():
    with pytest.raises(OverflowError):
        balancer_v2_out(ONE, swap_fee=2 * ONE, token_decimals=18, **POOL)