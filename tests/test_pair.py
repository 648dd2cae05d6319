import pytest

from clients.evm.dex.uniswap import sort_tokens
from clients.evm.dto import TokenMeta
from conftest import USDC, USDT, WETH


def make_token(address: str) -> TokenMeta:
    return TokenMeta(address, "Token", "TKN", 18)


@pytest.mark.parametrize("address", [USDC, USDT, "0x0000000000000000000000000000000000000001"])
def test_order_is_symmetric(address):
    token = make_token(address)
    weth = make_token(WETH)

    assert sort_tokens(token, weth) == sort_tokens(weth, token)


def test_lower_address_is_token0():
    usdc, weth, usdt = make_token(USDC), make_token(WETH), make_token(USDT)

    assert sort_tokens(weth, usdc).token0 is usdc
    assert sort_tokens(usdt, weth).token0 is weth


def test_comparison_is_numeric_not_case_sensitive():
    # lexically "0xB..." sorts before "0xa..."
    low = make_token("0xa000000000000000000000000000000000000000")
    high = make_token("0xB000000000000000000000000000000000000000")

    assert sort_tokens(high, low).token0 is low
