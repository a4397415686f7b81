import pytest

from basebuster.aerodrome import aerodrome_out, d, f, get_y, k

ONE = 10**18


def test_f_at_unit_reserves():
    assert f(ONE, ONE) == 2 * ONE


def test_d_at_unit_reserves():
    assert d(ONE, ONE) == 4 * ONE


def test_k_volatile_is_product():
    assert k(3 * ONE, 7 * ONE, False, ONE, ONE) == (3 * ONE) * (7 * ONE)


def test_k_stable_matches_f_for_18_decimals():
    x, y = 5 * ONE, 9 * ONE
    assert k(x, y, True, ONE, ONE) == f(x, y)


def test_get_y_returns_y_on_exact_invariant():
    x0, y = 12 * ONE, 8 * ONE
    assert get_y(x0, f(x0, y), y, True, ONE, ONE) == y


def test_get_y_returns_zero_when_derivative_vanishes():
    assert get_y(0, 5, 0, True, ONE, ONE) == 0


def test_volatile_output_bounded_by_reserve():
    out = aerodrome_out(10 * ONE, True, 100 * ONE, 200 * ONE, 30, 18, 18, False)
    assert 0 < out < 200 * ONE
    # the invariant never decreases after a swap
    assert (100 * ONE + 10 * ONE) * (200 * ONE - out) >= 100 * ONE * 200 * ONE


def test_volatile_direction_symmetry():
    forward = aerodrome_out(ONE, True, 50 * ONE, 80 * ONE, 30, 18, 18, False)
    backward = aerodrome_out(ONE, False, 80 * ONE, 50 * ONE, 30, 18, 18, False)
    assert forward == backward


def test_fee_reduces_output():
    no_fee = aerodrome_out(ONE, True, 50 * ONE, 80 * ONE, 0, 18, 18, False)
    with_fee = aerodrome_out(ONE, True, 50 * ONE, 80 * ONE, 30, 18, 18, False)
    assert with_fee < no_fee


def test_volatile_output_monotonic_in_input():
    outs = [
        aerodrome_out(amount, True, 1000 * ONE, 1000 * ONE, 30, 18, 18, False)
        for amount in (ONE, 2 * ONE, 5 * ONE, 10 * ONE)
    ]
    assert outs == sorted(outs)
    assert len(set(outs)) == len(outs)


def test_stable_balanced_pool_trades_near_par():
    amount = 1_000 * 10**6
    out = aerodrome_out(amount, True, 10**6 * 10**6, 10**6 * 10**18, 5, 6, 18, True)
    # token1 has 18 decimals, token0 has 6
    expected_par = amount * 10**12
    assert expected_par * 99 // 100 < out < expected_par


def test_stable_beats_volatile_on_balanced_pool():
    reserve = 10**6 * ONE
    stable_out = aerodrome_out(1000 * ONE, True, reserve, reserve, 5, 18, 18, True)
    volatile_out = aerodrome_out(1000 * ONE, True, reserve, reserve, 5, 18, 18, False)
    assert stable_out > volatile_out


def test_fee_above_whole_amount_underflows():
    with pytest.raises(OverflowError):
        aerodrome_out(ONE, True, ONE, ONE, 20_000, 18, 18, False)


def test_empty_volatile_pool_with_no_input_divides_by_zero():
    with pytest.raises(ZeroDivisionError):
        aerodrome_out(0, True, 0, 0, 30, 18, 18, False)