import pytest

from basebuster.uniswap import position, uniswap_v2_out

WETH_RESERVE = 325032740126871996707
USDC_RESERVE = 1014189875851


@pytest.mark.parametrize("tick", [-887272, -257, -256, -255, -1, 0, 1, 255, 256, 887272])
def test_position_recombines_to_tick(tick):
    word, bit = position(tick)
    assert 0 <= bit < 256
    assert word * 256 + bit == tick


def test_position_of_zero():
    assert position(0) == (0, 0)


def test_zero_input_gives_zero():
    assert uniswap_v2_out(0, WETH_RESERVE, USDC_RESERVE, 9970) == 0


def test_output_preserves_constant_product():
    amount = 10**18
    out = uniswap_v2_out(amount, WETH_RESERVE, USDC_RESERVE, 9970)
    assert 0 < out < USDC_RESERVE
    assert (WETH_RESERVE + amount) * (USDC_RESERVE - out) >= WETH_RESERVE * USDC_RESERVE


def test_higher_kept_share_gives_more_output():
    amount = 10**18
    outs = [uniswap_v2_out(amount, WETH_RESERVE, USDC_RESERVE, fee) for fee in (9970, 9975, 9984)]
    assert outs[0] < outs[1] < outs[2]


def test_round_trip_loses_value():
    amount = 10**18
    usdc = uniswap_v2_out(amount, WETH_RESERVE, USDC_RESERVE, 9970)
    back = uniswap_v2_out(usdc, USDC_RESERVE - usdc, WETH_RESERVE + amount, 9970)
    assert back < amount


def test_empty_pool_divides_by_zero():
    with pytest.raises(ZeroDivisionError):
        uniswap_v2_out(0, 0, USDC_RESERVE, 9970)


def test_overflow_raises():
    with pytest.raises(OverflowError):
        uniswap_v2_out(2**200, 1, 2**100, 9970)